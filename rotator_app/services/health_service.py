import logging
import os
import platform
from datetime import datetime
from pathlib import Path
from typing import Dict

from rotator_app.config import Settings
from rotator_app.exceptions import ConfigurationError
from rotator_app.schemas.health import HealthResponse, HealthStats
from rotator_app.storage.url_store import ActiveURLStore


logger = logging.getLogger(__name__)


def writable_directory(path: Path) -> bool:
    return path.is_dir() and os.access(path, os.W_OK)


def ensure_directories(settings: Settings) -> None:
    """
    Create the data and logs directories if possible.

    Raises:
        ConfigurationError: if a directory cannot be created or written
    """
    for directory in (settings.data_dir, settings.logs_dir):
        try:
            directory.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigurationError(f"Cannot create {directory}: {e}") from e
        if not writable_directory(directory):
            raise ConfigurationError(f"{directory} is not writable")


class HealthService:
    """
    Reports whether the rotator can serve and log redirects.

    Directory problems never stop redirects, they only show up here.
    """

    def __init__(self, settings: Settings, url_store: ActiveURLStore):
        self.settings = settings
        self.url_store = url_store

    def check(self) -> HealthResponse:
        data_ok = writable_directory(self.settings.data_dir)
        logs_ok = writable_directory(self.settings.logs_dir)
        urls_file_ok = self.url_store.exists()

        checks: Dict[str, str] = {
            "config": "ok",
            "data_directory": "ok" if data_ok else "not_writable",
            "logs_directory": "ok" if logs_ok else "not_writable",
            "urls_file": "ok" if urls_file_ok else "not_found",
            "token_configured": "ok" if self.settings.token_configured else "using_default",
        }

        url_set = self.url_store.load() if urls_file_ok else None
        healthy = data_ok and logs_ok
        if not healthy:
            logger.warning("Health check degraded: %s", checks)

        now = datetime.now().astimezone()
        return HealthResponse(
            status="healthy" if healthy else "degraded",
            timestamp=now.isoformat(timespec="seconds"),
            version=self.settings.app_version,
            checks=checks,
            stats=HealthStats(
                active_urls=len(url_set.urls) if url_set else 0,
                last_urls_update=url_set.updated_at if url_set else None,
            ),
            python_version=platform.python_version(),
            server_time=now.strftime("%Y-%m-%d %H:%M:%S"),
        )
