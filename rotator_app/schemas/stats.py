from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field


class StatsPeriod(str, Enum):
    DAY = "24h"
    WEEK = "7d"
    MONTH = "30d"
    ALL = "all"


class StatsFormat(str, Enum):
    JSON = "json"
    SUMMARY = "summary"
    LOGS = "logs"


class StatsBody(BaseModel):
    total_clicks: int
    unique_ips: int
    unique_countries: int
    top_urls: Dict[str, int]
    top_countries: Dict[str, int]
    top_cities: Dict[str, int]
    browsers: Dict[str, int]
    devices: Dict[str, int]
    os: Dict[str, int]
    hourly_distribution: Dict[str, int]


class StatsResponse(BaseModel):
    success: bool = True
    period: str
    generated_at: str
    stats: StatsBody


class StatsSummary(BaseModel):
    success: bool = True
    period: str
    total_clicks: int
    top_url: Optional[str] = None
    top_country: Optional[str] = None


class RecentLog(BaseModel):
    """One event enriched with its user-agent classification"""
    timestamp: str
    url: str
    ip: str
    country: str
    city: str
    referer: str
    device: str
    browser: str
    os: str


class RecentLogsResponse(BaseModel):
    success: bool = True
    generated_at: str
    count: int
    logs: List[RecentLog]


class DashboardData(BaseModel):
    period: str
    total: int
    urls: Dict[str, int]
    countries: Dict[str, int]
    recent: List[RecentLog] = Field(default_factory=list)
    active_urls: List[str] = Field(default_factory=list)
