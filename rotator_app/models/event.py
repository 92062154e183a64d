"""
Redirection event model.

One Event is written per redirect decision and never mutated afterwards.
"""

import hashlib
from datetime import datetime, timezone
from typing import Optional
from zoneinfo import ZoneInfo

from pydantic import BaseModel, ConfigDict, Field, field_validator


UNKNOWN_COUNTRY = "XX"


def parse_timestamp(value: str) -> datetime:
    """
    Parse an RFC3339 timestamp into an aware datetime.

    Naive timestamps are read as UTC.

    Raises:
        ValueError: if the value is not an ISO 8601 timestamp
    """
    text = value.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    moment = datetime.fromisoformat(text)
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    return moment


def hash_ip(ip: str) -> str:
    """Fingerprint of an IP, so unique counts and cache keys never hold the raw address"""
    return hashlib.sha256(ip.encode("utf-8")).hexdigest()


class Event(BaseModel):
    """
    One redirection, as stored in the event log.

    Field order is the on-disk key order.
    """

    timestamp: str = Field(..., description="RFC3339 time of the redirect")
    url: str = Field("", description="Destination the visitor was sent to")
    ip: str = Field("", description="Client IP address")
    user_agent: str = Field("", description="User agent string")
    referer: str = Field("", description="HTTP referer")
    country: str = Field(UNKNOWN_COUNTRY, description="Country code (e.g., FR, US) or XX")
    city: str = Field("", description="City name, empty when unknown")

    model_config = ConfigDict(
        frozen=True,
        json_schema_extra={
            "example": {
                "timestamp": "2026-10-19T14:03:00+02:00",
                "url": "https://example.com/blog",
                "ip": "203.0.113.7",
                "user_agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64) Chrome/120.0",
                "referer": "https://twitter.com",
                "country": "FR",
                "city": "Paris",
            }
        },
    )

    @field_validator("timestamp")
    @classmethod
    def _timestamp_must_parse(cls, value: str) -> str:
        parse_timestamp(value)
        return value

    @field_validator("url", "ip", "user_agent", "referer", "city", mode="before")
    @classmethod
    def _none_as_empty(cls, value):
        return "" if value is None else value

    @field_validator("country", mode="before")
    @classmethod
    def _none_as_unknown(cls, value):
        return value or UNKNOWN_COUNTRY

    @property
    def moment(self) -> datetime:
        return parse_timestamp(self.timestamp)

    def to_json_line(self) -> str:
        return self.model_dump_json() + "\n"

    @classmethod
    def create(
        cls,
        url: str,
        ip: str = "",
        user_agent: str = "",
        referer: str = "",
        country: str = UNKNOWN_COUNTRY,
        city: str = "",
        tz: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> "Event":
        """Build an event stamped with the current time in the given timezone"""
        if now is None:
            now = datetime.now(ZoneInfo(tz) if tz else timezone.utc)
        return cls(
            timestamp=now.isoformat(timespec="seconds"),
            url=url,
            ip=ip,
            user_agent=user_agent,
            referer=referer,
            country=country,
            city=city,
        )
