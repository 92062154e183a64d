"""
Data models for the rotator.

Events live in the append-only log, the active URL set in a JSON file.
There is no database.
"""

from .event import Event, hash_ip, parse_timestamp, UNKNOWN_COUNTRY
from .url_set import ActiveURLSet

__all__ = ["Event", "ActiveURLSet", "hash_ip", "parse_timestamp", "UNKNOWN_COUNTRY"]
