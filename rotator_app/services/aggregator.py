"""
Single-pass aggregation of redirection events.

Powers both the public stats API and the dashboard data view.
"""

from collections import Counter, deque
from dataclasses import dataclass, field
from typing import Deque, Dict, Iterable, List, Set

from rotator_app.models.event import Event, UNKNOWN_COUNTRY, hash_ip
from rotator_app.services.ua_classifier import classify


DEFAULT_RECENT_LIMIT = 20
MAX_RECENT_LIMIT = 50
HOUR_BUCKET_FORMAT = "%Y-%m-%d %H:00"


def ranked(counter: Counter) -> Dict[str, int]:
    """Descending by count. Sorting is stable, so ties keep first-seen order."""
    return dict(counter.most_common())


@dataclass
class AggregateResult:
    """Grouped counts for one query window. Computed per request, never stored."""

    total_clicks: int = 0
    urls: Dict[str, int] = field(default_factory=dict)
    countries: Dict[str, int] = field(default_factory=dict)
    cities: Dict[str, int] = field(default_factory=dict)
    hourly: Dict[str, int] = field(default_factory=dict)
    browsers: Dict[str, int] = field(default_factory=dict)
    devices: Dict[str, int] = field(default_factory=dict)
    os: Dict[str, int] = field(default_factory=dict)
    unique_ip_hashes: Set[str] = field(default_factory=set)
    recent: List[Event] = field(default_factory=list)

    @property
    def unique_ips(self) -> int:
        return len(self.unique_ip_hashes)

    @property
    def unique_countries(self) -> int:
        return len(self.countries)

    @property
    def top_url(self):
        return next(iter(self.urls), None)

    @property
    def top_country(self):
        return next(iter(self.countries), None)


class Aggregator:
    """
    Folds a sequence of events into an AggregateResult.

    Example:
        result = Aggregator(recent_limit=10).aggregate(reader.read(since))
        result.urls  # {"https://a.example": 3, "https://b.example": 2}
    """

    def __init__(self, recent_limit: int = DEFAULT_RECENT_LIMIT):
        self.recent_limit = max(1, min(MAX_RECENT_LIMIT, recent_limit))

    def aggregate(self, events: Iterable[Event]) -> AggregateResult:
        urls: Counter = Counter()
        countries: Counter = Counter()
        cities: Counter = Counter()
        hourly: Counter = Counter()
        browsers: Counter = Counter()
        devices: Counter = Counter()
        systems: Counter = Counter()
        ip_hashes: Set[str] = set()
        recent: Deque[Event] = deque(maxlen=self.recent_limit)
        total = 0

        for event in events:
            total += 1
            urls[event.url or "unknown"] += 1
            countries[event.country or UNKNOWN_COUNTRY] += 1
            if event.city:
                cities[event.city] += 1

            hourly[event.moment.strftime(HOUR_BUCKET_FORMAT)] += 1

            agent = classify(event.user_agent)
            browsers[agent.browser.value] += 1
            devices[agent.device.value] += 1
            if agent.os.value:
                systems[agent.os.value] += 1

            if event.ip:
                ip_hashes.add(hash_ip(event.ip))

            recent.append(event)

        return AggregateResult(
            total_clicks=total,
            urls=ranked(urls),
            countries=ranked(countries),
            cities=ranked(cities),
            hourly=dict(sorted(hourly.items())),
            browsers=ranked(browsers),
            devices=ranked(devices),
            os=ranked(systems),
            unique_ip_hashes=ip_hashes,
            recent=list(reversed(recent)),
        )
