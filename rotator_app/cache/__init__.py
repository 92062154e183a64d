"""
Cache module for geolocation responses.
Implements Strategy Pattern for flexible cache backends.
"""

from .strategies import CacheStrategy, FileCache, RedisCache, InMemoryCache, NullCache
from .factory import CacheFactory, CacheBackend

__all__ = [
    "CacheStrategy",
    "FileCache",
    "RedisCache",
    "InMemoryCache",
    "NullCache",
    "CacheFactory",
    "CacheBackend",
]
