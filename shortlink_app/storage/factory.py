"""
Factory for creating mapping store instances.
Simple, clean factory with singleton caching.
"""

import logging
from enum import Enum
from .strategies import MappingStore, SQLAlchemyMappingStore, InMemoryMappingStore
from shortlink_app.config import settings

logger = logging.getLogger(__name__)


class StoreBackend(Enum):
    """Available mapping store backends"""
    SQLALCHEMY = "sqlalchemy"
    MEMORY = "memory"


class MappingStoreFactory:
    """
    Simple factory for creating mapping store instances.

    Gets configuration from settings (not passed as parameters).
    """

    _instance: MappingStore = None  # Single cached instance

    @classmethod
    def create(cls, backend: StoreBackend) -> MappingStore:
        """
        Create or return cached mapping store instance.

        Args:
            backend: Type of store backend (from enum)

        Returns:
            Singleton mapping store instance
        """
        if cls._instance is not None:
            return cls._instance

        if backend == StoreBackend.SQLALCHEMY:
            from shortlink_app.database.connection import SessionLocal

            cls._instance = SQLAlchemyMappingStore(SessionLocal, timeout=settings.store_timeout)
            logger.info("SQLAlchemy mapping store initialized (timeout=%ss)", settings.store_timeout)

        elif backend == StoreBackend.MEMORY:
            cls._instance = InMemoryMappingStore()
            logger.info("In-memory mapping store initialized")

        else:
            raise ValueError(f"Unknown store backend: {backend}")

        return cls._instance

    @classmethod
    def clear_instance(cls):
        """Clear cached instance (for testing)"""
        cls._instance = None
