"""
FastAPI dependencies for dependency injection.

Stores are cheap path holders built per request from the injected settings;
the geolocation cache is a process-wide singleton. Tests swap any of them
through app.dependency_overrides.
"""

from functools import lru_cache
from typing import Optional

from fastapi import Depends, Header, Request

from rotator_app.cache.factory import CacheBackend, CacheFactory
from rotator_app.cache.strategies import CacheStrategy
from rotator_app.config import Settings, settings
from rotator_app.exceptions import AuthError, RateLimitError
from rotator_app.services.auth import verify_bearer_token
from rotator_app.services.geolocation import GeoLocator
from rotator_app.services.health_service import HealthService
from rotator_app.services.redirect_logger import RedirectRecorder
from rotator_app.services.rotation_service import RotatorService
from rotator_app.services.stats_service import StatsService
from rotator_app.services.url_set_service import URLSetService
from rotator_app.storage.event_store import EventStore
from rotator_app.storage.log_reader import LogReader
from rotator_app.storage.rate_limit_store import SlidingWindowRateLimiter
from rotator_app.storage.url_store import ActiveURLStore


def get_settings() -> Settings:
    return settings


@lru_cache()
def get_cache() -> CacheStrategy:
    """
    Get geolocation cache instance (singleton).

    @lru_cache ensures this is called only once.
    """
    backend = CacheBackend(settings.geo_cache_backend)
    return CacheFactory.create(backend)


def get_event_store(settings: Settings = Depends(get_settings)) -> EventStore:
    return EventStore(settings.log_file, max_bytes=settings.log_max_size)


def get_log_reader(settings: Settings = Depends(get_settings)) -> LogReader:
    return LogReader(settings.log_file)


def get_url_store(settings: Settings = Depends(get_settings)) -> ActiveURLStore:
    return ActiveURLStore(settings.urls_file)


def get_rate_limiter(settings: Settings = Depends(get_settings)) -> SlidingWindowRateLimiter:
    return SlidingWindowRateLimiter(
        settings.rate_limit_file,
        max_requests=settings.rate_limit_max,
        window_seconds=settings.rate_limit_window,
    )


def get_geolocator(
    settings: Settings = Depends(get_settings),
    cache: CacheStrategy = Depends(get_cache),
) -> GeoLocator:
    return GeoLocator(
        cache=cache,
        api_url=settings.geo_api_url,
        timeout=settings.geo_timeout,
        cache_ttl=settings.geo_cache_ttl,
        enabled=settings.geo_lookup_enabled,
    )


def get_rotator_service(
    settings: Settings = Depends(get_settings),
    url_store: ActiveURLStore = Depends(get_url_store),
) -> RotatorService:
    return RotatorService(url_store, settings.fallback_url_list)


def get_redirect_recorder(
    settings: Settings = Depends(get_settings),
    store: EventStore = Depends(get_event_store),
    geolocator: GeoLocator = Depends(get_geolocator),
) -> RedirectRecorder:
    return RedirectRecorder(
        store=store,
        geolocator=geolocator,
        timezone=settings.timezone,
        enabled=settings.log_enabled,
    )


def get_stats_service(
    reader: LogReader = Depends(get_log_reader),
    url_store: ActiveURLStore = Depends(get_url_store),
) -> StatsService:
    return StatsService(reader, url_store=url_store)


def get_url_set_service(url_store: ActiveURLStore = Depends(get_url_store)) -> URLSetService:
    return URLSetService(url_store)


def get_health_service(
    settings: Settings = Depends(get_settings),
    url_store: ActiveURLStore = Depends(get_url_store),
) -> HealthService:
    return HealthService(settings, url_store)


def require_dashboard_token(
    authorization: Optional[str] = Header(None),
    settings: Settings = Depends(get_settings),
) -> None:
    """Bearer token of the central dashboard, or 401"""
    if not verify_bearer_token(authorization, settings.rotator_token):
        raise AuthError()


def enforce_rate_limit(limiter: SlidingWindowRateLimiter = Depends(get_rate_limiter)) -> None:
    if not limiter.allow():
        raise RateLimitError()


def get_remote_addr(request: Request) -> Optional[str]:
    return request.client.host if request.client else None
