"""
Append-only event log with size-triggered rotation.

Layout:
- logs/redirections.log                                  live segment
- logs/redirections.log.2026-10-19_14-03-00-123456.bak    rotated segments
- logs/redirections.log.lock                             lock file

The size check, the rename and the write of one line all happen under one
exclusive lock, so no event is lost or duplicated across a rotation.
"""

import logging
import os
from datetime import datetime, timedelta
from pathlib import Path
from typing import Callable, Optional

from rotator_app.exceptions import EventLogError
from rotator_app.models.event import Event
from rotator_app.storage.file_lock import exclusive_lock, lock_path_for


logger = logging.getLogger(__name__)

DEFAULT_MAX_BYTES = 1024 * 1024 * 1024
ROTATION_STAMP_FORMAT = "%Y-%m-%d_%H-%M-%S-%f"


class EventStore:
    """
    Writer side of the event log.

    Rotated segments are never modified or deleted here.
    """

    def __init__(
        self,
        path: Path,
        max_bytes: int = DEFAULT_MAX_BYTES,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Args:
            path: Path of the live segment
            max_bytes: Live segment size above which it gets rotated
            clock: Source of the rotation instant (injectable for tests)
        """
        self.path = Path(path)
        self.max_bytes = max_bytes
        self.clock = clock
        self.lock_path = lock_path_for(self.path)

    def append(self, event: Event) -> None:
        """
        Append one event as a single JSON line, rotating first if oversized.

        Raises:
            EventLogError: if the directory, rotation or write fails
        """
        line = event.to_json_line()
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with exclusive_lock(self.lock_path):
                self._rotate_if_oversized()
                with open(self.path, "a", encoding="utf-8") as handle:
                    handle.write(line)
        except OSError as e:
            raise EventLogError(f"Could not append to {self.path}: {e}") from e

    def rotate_if_oversized(self) -> Optional[Path]:
        """
        Rotate the live segment if it exceeds max_bytes.

        Returns:
            Path of the new rotated segment, or None if nothing was rotated
        """
        try:
            with exclusive_lock(self.lock_path):
                return self._rotate_if_oversized()
        except OSError as e:
            raise EventLogError(f"Could not rotate {self.path}: {e}") from e

    def rotated_segment_path(self, instant: datetime) -> Path:
        return self.path.with_name(f"{self.path.name}.{instant.strftime(ROTATION_STAMP_FORMAT)}.bak")

    def _rotate_if_oversized(self) -> Optional[Path]:
        # Caller holds the lock
        try:
            size = self.path.stat().st_size
        except FileNotFoundError:
            return None

        if size <= self.max_bytes:
            return None

        instant = self.clock()
        target = self.rotated_segment_path(instant)
        while target.exists():
            # Names stay unique and sort in rotation order
            instant += timedelta(microseconds=1)
            target = self.rotated_segment_path(instant)

        os.rename(self.path, target)
        logger.info("Rotated event log (%d bytes) to %s", size, target.name)
        return target
