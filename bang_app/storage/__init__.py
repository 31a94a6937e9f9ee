"""
Record store module for the redirect registry.
Implements Strategy Pattern for flexible list-structured key-value backends.
"""

from .strategies import RecordStore, RedisRecordStore, InMemoryRecordStore
from .factory import StoreFactory, StoreBackend

__all__ = [
    "RecordStore",
    "RedisRecordStore",
    "InMemoryRecordStore",
    "StoreFactory",
    "StoreBackend",
]
