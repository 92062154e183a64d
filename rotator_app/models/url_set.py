from typing import List

from pydantic import BaseModel, ConfigDict, Field


class ActiveURLSet(BaseModel):
    """
    URLs currently rotated, as pushed by the central dashboard.

    Stored as data/urls.json. The rotator only reads it.
    """

    urls: List[str] = Field(default_factory=list)
    updated_at: str = ""
    updated_from: str = Field("unknown", alias="updated_from_ip")

    model_config = ConfigDict(populate_by_name=True)
