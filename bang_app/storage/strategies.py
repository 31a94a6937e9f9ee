"""
Record store strategies using Strategy Pattern.
Allows switching between different list-structured key-value backends (Redis, In-Memory).
"""

import functools
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

import redis
import redis.asyncio

from bang_app.exceptions import StoreError


class RecordStore(ABC):
    """
    Abstract base class for record stores.

    This is the Strategy Pattern interface - the registry only talks to this,
    so the Redis backend can be swapped for an in-memory fake in tests.

    Semantics follow Redis lists: every method is a single command, atomic on
    its own, with no ordering guarantee across calls.

    All methods are async because store operations involve I/O (network for Redis).
    Implementations raise StoreError when a command fails.
    """

    @abstractmethod
    async def rpush(self, key: str, *values: str) -> int:
        """
        Append values to the list at key, creating it if needed.

        Returns:
            Length of the list after the push
        """
        pass

    @abstractmethod
    async def rpushx(self, key: str, *values: str) -> int:
        """
        Append values only if the list at key already exists.

        Returns:
            Length of the list after the push (0 if the key is absent)
        """
        pass

    @abstractmethod
    async def lindex(self, key: str, index: int) -> Optional[str]:
        """
        Get one element of the list at key.

        Returns:
            The element, or None if the key or index does not exist
        """
        pass

    @abstractmethod
    async def lrange(self, key: str, start: int = 0, end: int = -1) -> List[str]:
        """
        Get a slice of the list at key (inclusive end, negative indexes allowed).

        Returns:
            List of elements, empty if the key does not exist
        """
        pass

    @abstractmethod
    async def lset(self, key: str, index: int, value: str) -> bool:
        """
        Overwrite one element of an existing list.

        Raises:
            StoreError: if the key or index does not exist
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """
        Delete key.

        Returns:
            True if deleted, False if key didn't exist
        """
        pass

    @abstractmethod
    async def exists(self, key: str) -> bool:
        """Check if key exists"""
        pass

    @abstractmethod
    async def ping(self) -> bool:
        """Check that the backend is reachable"""
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release connections. Called exactly once, on shutdown."""
        pass


def handle_redis_error(method):
    """Wrap Redis-interacting store methods so callers only ever see StoreError"""

    @functools.wraps(method)
    async def wrapper(self, *args, **kwargs):
        try:
            return await method(self, *args, **kwargs)
        except redis.exceptions.RedisError as e:
            raise StoreError(f"Redis {method.__name__} failed: {e}") from e

    return wrapper


class RedisRecordStore(RecordStore):
    """
    Redis implementation backed by a redis.asyncio connection pool.

    One instance is created at startup and shared by all requests.
    Used in production environments.
    """

    def __init__(self, redis_client: redis.asyncio.Redis):
        """
        Initialize Redis record store.

        Args:
            redis_client: redis.asyncio client, created with decode_responses=True
        """
        self.redis = redis_client

    @classmethod
    def from_url(cls, url: str, socket_timeout: float = 2.0) -> "RedisRecordStore":
        """Build a store from a redis:// URL (no connection is made until first use)"""
        client = redis.asyncio.from_url(
            url,
            decode_responses=True,
            socket_connect_timeout=socket_timeout,
            socket_timeout=socket_timeout,
        )
        return cls(client)

    @handle_redis_error
    async def rpush(self, key: str, *values: str) -> int:
        return await self.redis.rpush(key, *values)

    @handle_redis_error
    async def rpushx(self, key: str, *values: str) -> int:
        return await self.redis.rpushx(key, *values)

    @handle_redis_error
    async def lindex(self, key: str, index: int) -> Optional[str]:
        return await self.redis.lindex(key, index)

    @handle_redis_error
    async def lrange(self, key: str, start: int = 0, end: int = -1) -> List[str]:
        return await self.redis.lrange(key, start, end)

    @handle_redis_error
    async def lset(self, key: str, index: int, value: str) -> bool:
        return bool(await self.redis.lset(key, index, value))

    @handle_redis_error
    async def delete(self, key: str) -> bool:
        return bool(await self.redis.delete(key))

    @handle_redis_error
    async def exists(self, key: str) -> bool:
        return bool(await self.redis.exists(key))

    @handle_redis_error
    async def ping(self) -> bool:
        return bool(await self.redis.ping())

    async def close(self) -> None:
        await self.redis.aclose()


class InMemoryRecordStore(RecordStore):
    """
    In-memory record store using a dict of lists.

    Pros:
    - Very fast (no network overhead)
    - Simple (no external dependencies)
    - Good for development and testing

    Cons:
    - Not shared between processes
    - Lost on restart

    Note: Async for interface consistency, but operations are instant.
    Mirrors Redis list semantics, including removing a key whose list is empty.
    """

    def __init__(self):
        """Initialize in-memory store"""
        self._lists: Dict[str, List[str]] = {}
        self.closed = False

    async def rpush(self, key: str, *values: str) -> int:
        items = self._lists.setdefault(key, [])
        items.extend(values)
        return len(items)

    async def rpushx(self, key: str, *values: str) -> int:
        if key not in self._lists:
            return 0
        return await self.rpush(key, *values)

    async def lindex(self, key: str, index: int) -> Optional[str]:
        items = self._lists.get(key, [])
        if -len(items) <= index < len(items):
            return items[index]
        return None

    async def lrange(self, key: str, start: int = 0, end: int = -1) -> List[str]:
        items = self._lists.get(key, [])
        # Redis treats end as inclusive
        stop = None if end == -1 else end + 1
        return list(items[start:stop])

    async def lset(self, key: str, index: int, value: str) -> bool:
        if key not in self._lists:
            raise StoreError("ERR no such key")
        items = self._lists[key]
        if not -len(items) <= index < len(items):
            raise StoreError("ERR index out of range")
        items[index] = value
        return True

    async def delete(self, key: str) -> bool:
        return self._lists.pop(key, None) is not None

    async def exists(self, key: str) -> bool:
        return key in self._lists

    async def ping(self) -> bool:
        return True

    async def close(self) -> None:
        self.closed = True
