from typing import Union

from fastapi import APIRouter, Depends, Query, Response

from rotator_app.dependencies import get_stats_service
from rotator_app.schemas.stats import (
    DashboardData,
    RecentLogsResponse,
    StatsFormat,
    StatsPeriod,
    StatsResponse,
    StatsSummary,
)
from rotator_app.services.stats_service import StatsService

router = APIRouter(tags=["stats"])


@router.get("/logs", response_model=Union[StatsResponse, StatsSummary, RecentLogsResponse])
def get_stats(
    response: Response,
    period: StatsPeriod = Query(StatsPeriod.DAY),
    fmt: StatsFormat = Query(StatsFormat.JSON, alias="format"),
    limit: int = Query(20, description="Number of events for format=logs, clamped to 5..50"),
    stats_service: StatsService = Depends(get_stats_service),
):
    """
    Statistics for the central dashboard.

    - format=json: full aggregation of the period
    - format=summary: totals and top entries only
    - format=logs: newest events, read from the tail of the live log
    """
    response.headers["Cache-Control"] = "no-cache, no-store, must-revalidate"

    if fmt == StatsFormat.LOGS:
        return stats_service.recent_logs(limit)
    if fmt == StatsFormat.SUMMARY:
        return stats_service.summary(period.value)
    return stats_service.stats(period.value)


@router.get("/dashboard", response_model=DashboardData)
def get_dashboard(
    period: str = Query("24h", description="1h, 6h, 24h, 48h, 7d, 30d, 90d, 1y or all"),
    stats_service: StatsService = Depends(get_stats_service),
):
    """Data behind the local stats dashboard"""
    return stats_service.dashboard(period)
