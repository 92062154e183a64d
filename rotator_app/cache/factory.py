"""
Factory for creating cache instances.
Simple factory with singleton caching.
"""

import logging
from enum import Enum

from .strategies import CacheStrategy, FileCache, RedisCache, InMemoryCache, NullCache
from rotator_app.config import settings


logger = logging.getLogger(__name__)


class CacheBackend(Enum):
    """Available cache backends"""
    FILE = "file"
    REDIS = "redis"
    MEMORY = "memory"
    NULL = "null"


class CacheFactory:
    """
    Creates the geolocation cache once and reuses it.

    Gets configuration from settings (not passed as parameters).
    """

    _instance: CacheStrategy = None  # Single cached instance

    @classmethod
    def create(cls, backend: CacheBackend) -> CacheStrategy:
        """
        Create or return cached cache instance.

        Args:
            backend: Type of cache backend (from enum)

        Returns:
            Singleton cache instance
        """
        if cls._instance is not None:
            return cls._instance

        if backend == CacheBackend.FILE:
            cls._instance = FileCache(settings.geo_cache_dir)
            logger.info("File geolocation cache initialized at %s", settings.geo_cache_dir)

        elif backend == CacheBackend.REDIS:
            import redis

            try:
                redis_client = redis.from_url(
                    settings.redis_url,
                    decode_responses=False,
                    socket_connect_timeout=2,
                    socket_timeout=2,
                )

                # Test connection immediately
                redis_client.ping()

                cls._instance = RedisCache(redis_client)
                logger.info("Redis geolocation cache initialized")

            except Exception as e:
                logger.warning("Redis connection failed (%s), falling back to file cache", e)
                cls._instance = FileCache(settings.geo_cache_dir)

        elif backend == CacheBackend.MEMORY:
            cls._instance = InMemoryCache()
            logger.info("In-memory geolocation cache initialized")

        elif backend == CacheBackend.NULL:
            cls._instance = NullCache()
            logger.info("Null geolocation cache initialized")

        else:
            raise ValueError(f"Unknown cache backend: {backend}")

        return cls._instance

    @classmethod
    def clear_instance(cls):
        """Clear cached instance (for testing)"""
        cls._instance = None
