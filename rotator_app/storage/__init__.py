"""
Flat-file storage for the rotator.

Each file has a single writer discipline: an exclusive flock on a sidecar
.lock file held for one operation.
"""

from .event_store import EventStore
from .log_reader import LogReader, parse_event_line
from .rate_limit_store import SlidingWindowRateLimiter
from .url_store import ActiveURLStore

__all__ = [
    "EventStore",
    "LogReader",
    "parse_event_line",
    "SlidingWindowRateLimiter",
    "ActiveURLStore",
]
