from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, field_validator

class User(BaseModel):
    uid: str
    email: str = ""
    display_name: Optional[str] = None
    role: str = "user"

class Pilot(BaseModel):
    id: str
    name: str
    team: Optional[str] = None
    number: Optional[int] = None
    country: Optional[str] = None
    active: bool = True

class Event(BaseModel):
    id: str
    name: str = ""
    location: Optional[str] = None
    status: str = "upcoming"      # upcoming | active | completed
    date: Optional[datetime] = None
    voting_deadline: datetime

class _Picks(BaseModel):
    """Pole, ordered top-10 and crash picks shared by forecasts and results.

    Pilot ids are opaque strings; an unset pick is stored as "".
    """
    pole: str = ""
    positions: List[Optional[str]] = []
    crash_pilot: str = ""

    @field_validator("pole", "crash_pilot", mode="before")
    @classmethod
    def _blank_pick(cls, v):
        return "" if v is None else v

    @field_validator("positions", mode="before")
    @classmethod
    def _blank_positions(cls, v):
        return [] if v is None else v

class Forecast(_Picks):
    user_id: str
    race_id: str

class OfficialResult(_Picks):
    race_id: str
