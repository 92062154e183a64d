from pathlib import Path
from typing import List

from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_TOKEN = "change_me_in_production"


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Loading priority (highest to lowest):
    1. Environment variables
    2. .env file
    3. Default values below
    """

    # Environment
    environment: str = "development"
    debug: bool = False

    # Application
    app_name: str = "Link Rotator"
    app_version: str = "1.0.0"

    # Token expected from the central dashboard (ROTATOR_TOKEN)
    rotator_token: str = DEFAULT_TOKEN

    # Comma separated URLs used when urls.json is missing or empty (ROTATOR_FALLBACK_URLS)
    fallback_urls: str = "https://example.com,https://example.com/blog"

    # Storage
    data_dir: Path = Path("data")
    logs_dir: Path = Path("logs")

    # Event log
    log_enabled: bool = True
    log_max_size: int = 1024 * 1024 * 1024  # 1 GiB before rotation
    timezone: str = "Europe/Paris"

    # Rate limiting of the URL update API
    rate_limit_max: int = 10
    rate_limit_window: int = 60  # seconds

    # Geolocation
    geo_lookup_enabled: bool = True
    geo_api_url: str = "http://ip-api.com/json/{ip}?fields=status,country,countryCode,city,region"
    geo_timeout: float = 2.0
    geo_cache_backend: str = "file"  # Options: "file", "redis", "memory", "null"
    geo_cache_ttl: int = 86400  # 24 hours
    redis_url: str = "redis://localhost:6379/0"

    # Logging
    log_level: str = "INFO"

    # Pydantic v2 configuration
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def fallback_url_list(self) -> List[str]:
        return [url.strip() for url in self.fallback_urls.split(",") if url.strip()]

    @property
    def urls_file(self) -> Path:
        return self.data_dir / "urls.json"

    @property
    def rate_limit_file(self) -> Path:
        return self.data_dir / "rate_limit.json"

    @property
    def geo_cache_dir(self) -> Path:
        return self.data_dir / "geo_cache"

    @property
    def log_file(self) -> Path:
        return self.logs_dir / "redirections.log"

    @property
    def token_configured(self) -> bool:
        return bool(self.rotator_token) and self.rotator_token != DEFAULT_TOKEN


# Create settings instance
settings = Settings()
