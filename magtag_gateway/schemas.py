from datetime import datetime
from typing import Optional

from pydantic import BaseModel
from pydantic.alias_generators import to_camel


class DisplayPayloadOut(BaseModel):
    top: str
    middle: str
    bottom: str
    current_time: str
    sleep_seconds: int
    event_instant: Optional[datetime] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ResolutionEntryOut(BaseModel):
    resolved_at: datetime
    team_id: int
    top: str
    middle: str
    bottom: str
    sleep_seconds: int
    event_instant: Optional[datetime] = None

    class Config:
        alias_generator = to_camel
        populate_by_name = True


class ResolutionsResponse(BaseModel):
    entries: list[ResolutionEntryOut]
