"""
Reader side of the event log.

Merges rotated segments and the live segment into one list of events.
Reads take no lock: a line half-written by a concurrent append simply fails
to parse and is skipped.
"""

import json
import logging
import os
from pathlib import Path
from typing import Iterator, List, Optional, Set, Tuple

from pydantic import ValidationError

from rotator_app.models.event import Event


logger = logging.getLogger(__name__)

TAIL_BLOCK_SIZE = 8192


def parse_event_line(line: str) -> Optional[Event]:
    """
    Parse one stored line.

    Returns None for blank lines, invalid JSON, non-object JSON, records
    without a timestamp and records whose fields fail validation.
    """
    line = line.strip()
    if not line:
        return None
    try:
        data = json.loads(line)
    except json.JSONDecodeError:
        return None
    if not isinstance(data, dict) or "timestamp" not in data:
        return None
    try:
        return Event.model_validate(data)
    except ValidationError:
        return None


class LogReader:
    """
    Reads events from the live segment and its rotated .bak segments.

    Segment order is: rotated segments by descending name (most recent
    rotation first), then the live segment. Events are not globally sorted
    unless chronological=True is requested.
    """

    def __init__(self, path: Path):
        """
        Args:
            path: Path of the live segment
        """
        self.path = Path(path)
        self.parsed_lines = 0
        self.skipped_lines = 0

    def segments(self) -> List[Path]:
        """Rotated segments, most recent first, followed by the live segment"""
        if not self.path.parent.is_dir():
            return []
        rotated = sorted(self.path.parent.glob(f"{self.path.name}.*.bak"), reverse=True)
        if self.path.exists():
            rotated.append(self.path)
        return rotated

    def read(self, since: float = 0, chronological: bool = False) -> List[Event]:
        """
        Read every valid event, optionally filtered by time.

        A rotation that happens while reading leaves a new .bak behind; it is
        picked up by listing the segments again. Files are identified by
        inode, so a live segment that was read before being renamed is not
        read twice.

        Args:
            since: Epoch seconds. When > 0, only events at or after it are kept.
            chronological: Stable sort of the result by timestamp

        Returns:
            Fully materialized list of events
        """
        events: List[Event] = []
        listed: Set[Path] = set()
        read_files: Set[Tuple[int, int]] = set()

        pending = self.segments()
        while pending:
            for segment in pending:
                listed.add(segment)
                for event in self._iter_segment(segment, read_files):
                    if since > 0 and event.moment.timestamp() < since:
                        continue
                    events.append(event)
            pending = [segment for segment in self.segments() if segment not in listed]

        if chronological:
            events.sort(key=lambda event: event.moment)
        return events

    def tail(self, limit: int) -> List[Event]:
        """
        Most recent valid events of the live segment, newest first.

        The file is read backwards block by block, so the cost depends on
        limit rather than on the size of the history.
        """
        if limit <= 0 or not self.path.exists():
            return []

        events: List[Event] = []
        for line in self._reverse_lines(self.path):
            event = parse_event_line(line)
            if event is None:
                continue
            events.append(event)
            if len(events) >= limit:
                break
        return events

    def _iter_segment(self, segment: Path, read_files: Set[Tuple[int, int]]) -> Iterator[Event]:
        try:
            handle = open(segment, "r", encoding="utf-8", errors="replace")
        except FileNotFoundError:
            # Rotated away between listing and opening
            logger.debug("Segment disappeared before reading: %s", segment)
            return

        with handle:
            stat = os.fstat(handle.fileno())
            identity = (stat.st_dev, stat.st_ino)
            if identity in read_files:
                logger.debug("Already read %s under its previous name", segment.name)
                return
            read_files.add(identity)

            for line in handle:
                if not line.strip():
                    continue
                event = parse_event_line(line)
                if event is None:
                    self.skipped_lines += 1
                    logger.debug("Skipped malformed line in %s", segment.name)
                    continue
                self.parsed_lines += 1
                yield event

    @staticmethod
    def _reverse_lines(path: Path, block_size: int = TAIL_BLOCK_SIZE) -> Iterator[str]:
        with open(path, "rb") as handle:
            handle.seek(0, os.SEEK_END)
            position = handle.tell()
            remainder = b""
            while position > 0:
                read_size = min(block_size, position)
                position -= read_size
                handle.seek(position)
                chunk = handle.read(read_size) + remainder
                lines = chunk.split(b"\n")
                # First piece may be the end of a line that starts in an earlier block
                remainder = lines.pop(0)
                for raw in reversed(lines):
                    yield raw.decode("utf-8", errors="replace")
            if remainder:
                yield remainder.decode("utf-8", errors="replace")
