"""
Factory for creating record store instances.
Configuration comes from settings, the instance lifecycle belongs to the app lifespan.
"""

import logging
from enum import Enum

from .strategies import RecordStore, RedisRecordStore, InMemoryRecordStore
from bang_app.config import settings


logger = logging.getLogger(__name__)


class StoreBackend(Enum):
    """Available record store backends"""
    REDIS = "redis"
    MEMORY = "memory"


class StoreFactory:
    """
    Simple factory for creating record store instances.

    Unlike a cache, the store holds the only copy of every record, so there
    is no silent fallback to memory: a broken Redis must fail startup.
    """

    @classmethod
    def create(cls, backend: StoreBackend) -> RecordStore:
        """
        Create a record store.

        Args:
            backend: Type of store backend (from enum)

        Returns:
            New, not yet pinged, store instance
        """
        if backend == StoreBackend.REDIS:
            store = RedisRecordStore.from_url(
                settings.redis_url,
                socket_timeout=settings.redis_socket_timeout,
            )
            logger.info("Redis record store configured")

        elif backend == StoreBackend.MEMORY:
            store = InMemoryRecordStore()
            logger.info("In-memory record store configured")

        else:
            raise ValueError(f"Unknown store backend: {backend}")

        return store
