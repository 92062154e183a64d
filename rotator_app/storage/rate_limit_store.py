import json
import logging
import time
from pathlib import Path
from typing import Callable, List

from rotator_app.exceptions import StorageError
from rotator_app.storage.file_lock import exclusive_lock, lock_path_for


logger = logging.getLogger(__name__)


class SlidingWindowRateLimiter:
    """
    Sliding-window limiter backed by a JSON list of request timestamps.

    Only accepted requests are recorded.
    """

    def __init__(
        self,
        path: Path,
        max_requests: int = 10,
        window_seconds: int = 60,
        clock: Callable[[], float] = time.time,
    ):
        self.path = Path(path)
        self.max_requests = max_requests
        self.window_seconds = window_seconds
        self.clock = clock
        self.lock_path = lock_path_for(self.path)

    def allow(self) -> bool:
        """Record this request and return True, or return False if over the limit"""
        try:
            with exclusive_lock(self.lock_path):
                now = self.clock()
                recent = [stamp for stamp in self._load() if now - stamp < self.window_seconds]

                if len(recent) >= self.max_requests:
                    return False

                recent.append(now)
                self.path.write_text(json.dumps(recent), encoding="utf-8")
                return True
        except OSError as e:
            logger.error("Rate limit state unavailable at %s: %s", self.path, e)
            raise StorageError() from e

    def _load(self) -> List[float]:
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return []
        except json.JSONDecodeError:
            logger.warning("Resetting malformed rate limit file %s", self.path)
            return []
        if not isinstance(data, list):
            return []
        return [float(stamp) for stamp in data if isinstance(stamp, (int, float))]
