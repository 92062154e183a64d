from typing import Dict, Optional

from pydantic import BaseModel


class HealthStats(BaseModel):
    active_urls: int
    last_urls_update: Optional[str] = None


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    version: str
    checks: Dict[str, str]
    stats: HealthStats
    python_version: str
    server_time: str

    @property
    def healthy(self) -> bool:
        return self.status == "healthy"
