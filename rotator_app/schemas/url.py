from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class URLUpdateRequest(BaseModel):
    """Body pushed by the central dashboard. Items are checked one by one."""
    urls: List[Any] = Field(..., description="Destination URLs to rotate")


class InvalidURL(BaseModel):
    url: Any
    reason: str


class URLUpdateResponse(BaseModel):
    success: bool = True
    message: str = "URLs updated successfully."
    urls_count: int
    updated_at: str
    warnings: Optional[Dict[str, List[InvalidURL]]] = None
