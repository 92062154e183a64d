"""
Coarse geolocation of visitors.

Country comes from proxy headers when present (Cloudflare and friends) and is
refined by the free ip-api.com service. Responses are cached 24h per IP
fingerprint. A slow or failing lookup degrades to the header value or "XX";
it is never retried within the same request.
"""

import json
import logging
from typing import Mapping, NamedTuple, Optional

import requests
from starlette.concurrency import run_in_threadpool

from rotator_app.cache.strategies import CacheStrategy
from rotator_app.exceptions import ExternalServiceError
from rotator_app.models.event import UNKNOWN_COUNTRY, hash_ip


logger = logging.getLogger(__name__)

COUNTRY_HEADERS = ("cf-ipcountry", "x-country", "x-geoip-country")
SKIPPED_IPS = ("", "0.0.0.0", "127.0.0.1")


class GeoInfo(NamedTuple):
    country: str = UNKNOWN_COUNTRY
    city: str = ""


def country_from_headers(headers: Mapping[str, str]) -> str:
    for header in COUNTRY_HEADERS:
        value = headers.get(header)
        if value:
            return value.strip().upper()
    return UNKNOWN_COUNTRY


class GeoLocator:
    """
    Resolves GeoInfo for an IP.

    Example:
        locator = GeoLocator(cache=FileCache(Path("data/geo_cache")))
        info = await locator.locate("203.0.113.7", request_headers)
    """

    def __init__(
        self,
        cache: CacheStrategy,
        api_url: str = "http://ip-api.com/json/{ip}?fields=status,country,countryCode,city,region",
        timeout: float = 2.0,
        cache_ttl: int = 86400,
        enabled: bool = True,
        session: Optional[requests.Session] = None,
    ):
        """
        Args:
            cache: Cache for raw API responses
            api_url: URL template with an {ip} placeholder
            timeout: Seconds before the lookup is abandoned
            cache_ttl: Freshness of cached responses in seconds
            enabled: When False only proxy headers are used
            session: requests session (defaults to the requests module)
        """
        self.cache = cache
        self.api_url = api_url
        self.timeout = timeout
        self.cache_ttl = cache_ttl
        self.enabled = enabled
        self.http = session or requests

    async def locate(self, ip: str, headers: Mapping[str, str]) -> GeoInfo:
        country = country_from_headers(headers)
        city = ""

        if self.enabled and ip not in SKIPPED_IPS:
            data = await self.lookup(ip)
            if data:
                if data.get("countryCode"):
                    country = str(data["countryCode"]).upper()
                if data.get("city"):
                    city = str(data["city"])

        return GeoInfo(country=country, city=city)

    async def lookup(self, ip: str) -> Optional[dict]:
        """Cached API response for ip, or None when unavailable"""
        cache_key = f"geo:{hash_ip(ip)}"

        cached = await self.cache.get(cache_key)
        if cached:
            try:
                data = json.loads(cached)
            except json.JSONDecodeError:
                data = None
            if isinstance(data, dict):
                return data
            logger.debug("Discarding corrupt geolocation cache entry %s", cache_key)

        try:
            data = await run_in_threadpool(self._fetch, ip)
        except ExternalServiceError as e:
            logger.debug("Geolocation degraded to unknown for this request: %s", e)
            return None

        await self.cache.set(cache_key, json.dumps(data), ttl=self.cache_ttl)
        return data

    def _fetch(self, ip: str) -> dict:
        """
        Raises:
            ExternalServiceError: on timeout, connection error or unusable payload
        """
        try:
            response = self.http.get(self.api_url.format(ip=ip), timeout=self.timeout)
            data = response.json()
        except requests.RequestException as e:
            raise ExternalServiceError(f"Geolocation request failed: {e}") from e
        except ValueError as e:
            raise ExternalServiceError("Geolocation response is not JSON") from e

        if not isinstance(data, dict) or data.get("status") != "success":
            raise ExternalServiceError("Geolocation lookup unsuccessful")
        return data
