"""
Cache strategies using Strategy Pattern.
Allows switching between cache backends for geolocation responses
(flat files, Redis, in-memory, null).
"""

import json
import logging
import re
import time
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple

from starlette.concurrency import run_in_threadpool


logger = logging.getLogger(__name__)


class CacheStrategy(ABC):
    """
    Abstract base class for cache strategies.

    All methods are async because cache operations involve I/O.
    """

    @abstractmethod
    async def get(self, key: str) -> Optional[str]:
        """
        Get value from cache.

        Args:
            key: Cache key

        Returns:
            Cached value or None if missing or expired
        """
        pass

    @abstractmethod
    async def set(self, key: str, value: str, ttl: int = 86400) -> bool:
        """
        Set value in cache with TTL (Time To Live).

        Args:
            key: Cache key
            value: Value to cache
            ttl: Time to live in seconds (default: 24 hours)

        Returns:
            True if successful, False otherwise
        """
        pass

    @abstractmethod
    async def delete(self, key: str) -> bool:
        """Delete key from cache. True if it existed."""
        pass

    @abstractmethod
    async def clear(self) -> bool:
        """Clear all cache entries"""
        pass


class FileCache(CacheStrategy):
    """
    One JSON file per key in a directory (data/geo_cache by default).

    Each file stores its expiry next to the value. Write failures are
    logged and reported as False, a broken cache never breaks a redirect.
    """

    _UNSAFE = re.compile(r"[^A-Za-z0-9_.-]")

    def __init__(self, directory: Path, clock: Callable[[], float] = time.time):
        self.directory = Path(directory)
        self.clock = clock

    def _path(self, key: str) -> Path:
        return self.directory / f"{self._UNSAFE.sub('_', key)}.json"

    async def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        try:
            entry = json.loads(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return None
        except (OSError, json.JSONDecodeError) as e:
            logger.debug("Unreadable cache entry %s: %s", path.name, e)
            return None

        if not isinstance(entry, dict) or entry.get("expires_at", 0) <= self.clock():
            return None
        return entry.get("value")

    async def set(self, key: str, value: str, ttl: int = 86400) -> bool:
        entry = {"expires_at": self.clock() + ttl, "value": value}
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            self._path(key).write_text(json.dumps(entry), encoding="utf-8")
            return True
        except OSError as e:
            logger.warning("File cache set error: %s", e)
            return False

    async def delete(self, key: str) -> bool:
        try:
            self._path(key).unlink()
            return True
        except FileNotFoundError:
            return False

    async def clear(self) -> bool:
        if not self.directory.is_dir():
            return True
        for path in self.directory.glob("*.json"):
            path.unlink(missing_ok=True)
        return True


class RedisCache(CacheStrategy):
    """
    Redis cache implementation.

    Lets several rotator hosts share geolocation lookups. TTL is enforced
    by Redis itself. The client is synchronous, so every call runs in the
    thread pool and a stalled server never blocks the event loop.
    """

    def __init__(self, redis_client):
        """
        Args:
            redis_client: Redis client instance (redis.Redis)
        """
        self.redis = redis_client

    async def get(self, key: str) -> Optional[str]:
        try:
            value = await run_in_threadpool(self.redis.get, key)
            return value.decode("utf-8") if value else None
        except Exception as e:
            logger.warning("Redis get error: %s", e)
            return None

    async def set(self, key: str, value: str, ttl: int = 86400) -> bool:
        try:
            return bool(await run_in_threadpool(self.redis.setex, key, ttl, value))
        except Exception as e:
            logger.warning("Redis set error: %s", e)
            return False

    async def delete(self, key: str) -> bool:
        try:
            return bool(await run_in_threadpool(self.redis.delete, key))
        except Exception as e:
            logger.warning("Redis delete error: %s", e)
            return False

    async def clear(self) -> bool:
        try:
            await run_in_threadpool(self.redis.flushdb)
            return True
        except Exception as e:
            logger.warning("Redis clear error: %s", e)
            return False


class InMemoryCache(CacheStrategy):
    """
    In-memory cache using a dict of (expiry, value).

    Per-process and lost on restart. Used in tests and single-process dev runs.
    """

    def __init__(self, clock: Callable[[], float] = time.time):
        self._cache: Dict[str, Tuple[float, str]] = {}
        self.clock = clock

    async def get(self, key: str) -> Optional[str]:
        entry = self._cache.get(key)
        if entry is None:
            return None
        expires_at, value = entry
        if expires_at <= self.clock():
            del self._cache[key]
            return None
        return value

    async def set(self, key: str, value: str, ttl: int = 86400) -> bool:
        self._cache[key] = (self.clock() + ttl, value)
        return True

    async def delete(self, key: str) -> bool:
        return self._cache.pop(key, None) is not None

    async def clear(self) -> bool:
        self._cache.clear()
        return True


class NullCache(CacheStrategy):
    """
    Null Object Pattern - cache that does nothing.

    Every lookup goes to the geolocation service.
    """

    async def get(self, key: str) -> Optional[str]:
        return None

    async def set(self, key: str, value: str, ttl: int = 86400) -> bool:
        return True

    async def delete(self, key: str) -> bool:
        return True

    async def clear(self) -> bool:
        return True
