"""
Short code generation strategies for the shortlink service.
Uses Strategy Pattern to allow different generation alphabets.

Generation is pure: no store access. Uniqueness is enforced by the mapping
store and collisions are retried by URLService.
"""

import secrets
import string
from abc import ABC, abstractmethod
from typing import Optional

# Path segments a short code must never shadow
RESERVED_CODES = frozenset({"admin", "api", "docs", "redoc", "health", "openapi.json", "favicon.ico"})


class ShortCodeStrategy(ABC):
    """Abstract base class for short code generation strategies"""

    alphabet: str = ""

    def __init__(self, length: int = 6):
        if length < 1:
            raise ValueError(f"Short code length must be positive, got {length}")
        self.length = length

    def generate(self, length: Optional[int] = None) -> str:
        """
        Generate a short code.

        Args:
            length: Override the configured length for this call

        Returns:
            A random code drawn from the strategy's alphabet
        """
        size = length or self.length
        while True:
            code = self._generate(size)
            if code.lower() not in RESERVED_CODES:
                return code

    @abstractmethod
    def _generate(self, length: int) -> str:
        pass


class RandomShortCodeStrategy(ShortCodeStrategy):
    """
    Alphanumeric codes ([A-Za-z0-9], 62 symbols).

    6 characters give 62**6 (~5.7e10) codes; with secrets as the source,
    collisions stay rare until tens of millions of mappings.
    """

    alphabet = string.ascii_letters + string.digits

    def _generate(self, length: int) -> str:
        return ''.join(secrets.choice(self.alphabet) for _ in range(length))


class NanoidShortCodeStrategy(ShortCodeStrategy):
    """
    URL-safe codes ([A-Za-z0-9_-], 64 symbols), the nanoid alphabet.

    Slightly denser than alphanumeric; codes may contain '-' and '_'.
    """

    alphabet = "_-0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"

    def _generate(self, length: int) -> str:
        return ''.join(secrets.choice(self.alphabet) for _ in range(length))
