import time
from datetime import datetime
from typing import Callable, Dict, List, Optional

from rotator_app.models.event import Event
from rotator_app.schemas.stats import (
    DashboardData,
    RecentLog,
    RecentLogsResponse,
    StatsBody,
    StatsResponse,
    StatsSummary,
)
from rotator_app.services.aggregator import AggregateResult, Aggregator
from rotator_app.services.ua_classifier import classify
from rotator_app.storage.log_reader import LogReader
from rotator_app.storage.url_store import ActiveURLStore


HOUR = 60 * 60
DAY = 24 * HOUR

# Window length in seconds. "all" (or None) means no lower bound.
PERIODS: Dict[str, Optional[int]] = {
    "1h": HOUR,
    "6h": 6 * HOUR,
    "24h": DAY,
    "48h": 2 * DAY,
    "7d": 7 * DAY,
    "30d": 30 * DAY,
    "90d": 90 * DAY,
    "1y": 365 * DAY,
    "all": None,
}
DASHBOARD_DEFAULT_PERIOD = "24h"
DASHBOARD_RECENT = 10

MIN_LOGS_LIMIT = 5
MAX_LOGS_LIMIT = 50


def clamp_limit(limit: int) -> int:
    return min(MAX_LOGS_LIMIT, max(MIN_LOGS_LIMIT, limit))


def to_recent_log(event: Event) -> RecentLog:
    agent = classify(event.user_agent)
    return RecentLog(
        timestamp=event.timestamp,
        url=event.url,
        ip=event.ip,
        country=event.country,
        city=event.city,
        referer=event.referer,
        device=agent.device.value,
        browser=agent.browser.value,
        os=agent.os.value,
    )


class StatsService:
    """
    Time-windowed statistics computed by re-scanning the event log.

    Nothing is precomputed: every call reads the relevant segments and
    aggregates them from scratch.
    """

    def __init__(
        self,
        reader: LogReader,
        url_store: Optional[ActiveURLStore] = None,
        clock: Callable[[], float] = time.time,
    ):
        self.reader = reader
        self.url_store = url_store
        self.clock = clock

    def since_for(self, period: str) -> float:
        """Epoch lower bound of a period, 0 for "all" and unknown periods"""
        window = PERIODS.get(period)
        if window is None:
            return 0
        return self.clock() - window

    def aggregate(self, period: str, recent_limit: int = DASHBOARD_RECENT) -> AggregateResult:
        events = self.reader.read(since=self.since_for(period), chronological=True)
        return Aggregator(recent_limit=recent_limit).aggregate(events)

    def stats(self, period: str) -> StatsResponse:
        result = self.aggregate(period)
        return StatsResponse(
            period=period,
            generated_at=self._now(),
            stats=StatsBody(
                total_clicks=result.total_clicks,
                unique_ips=result.unique_ips,
                unique_countries=result.unique_countries,
                top_urls=result.urls,
                top_countries=result.countries,
                top_cities=result.cities,
                browsers=result.browsers,
                devices=result.devices,
                os=result.os,
                hourly_distribution=result.hourly,
            ),
        )

    def summary(self, period: str) -> StatsSummary:
        result = self.aggregate(period)
        return StatsSummary(
            period=period,
            total_clicks=result.total_clicks,
            top_url=result.top_url,
            top_country=result.top_country,
        )

    def recent_logs(self, limit: int) -> RecentLogsResponse:
        """Newest events of the live segment, without a full aggregation pass"""
        logs: List[RecentLog] = [to_recent_log(event) for event in self.reader.tail(clamp_limit(limit))]
        return RecentLogsResponse(generated_at=self._now(), count=len(logs), logs=logs)

    def dashboard(self, period: str) -> DashboardData:
        if period not in PERIODS:
            period = DASHBOARD_DEFAULT_PERIOD
        result = self.aggregate(period, recent_limit=DASHBOARD_RECENT)
        url_set = self.url_store.load() if self.url_store else None
        return DashboardData(
            period=period,
            total=result.total_clicks,
            urls=result.urls,
            countries=result.countries,
            recent=[to_recent_log(event) for event in result.recent],
            active_urls=url_set.urls if url_set else [],
        )

    def _now(self) -> str:
        return datetime.fromtimestamp(self.clock()).astimezone().isoformat(timespec="seconds")
