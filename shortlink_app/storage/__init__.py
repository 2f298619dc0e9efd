"""
Mapping store module.

Implements the Strategy Pattern for pluggable persistence of
short code -> URL mappings and their visit counters.
"""

from .strategies import MappingStore, SQLAlchemyMappingStore, InMemoryMappingStore
from .factory import MappingStoreFactory, StoreBackend

__all__ = [
    "MappingStore",
    "SQLAlchemyMappingStore",
    "InMemoryMappingStore",
    "MappingStoreFactory",
    "StoreBackend",
]
