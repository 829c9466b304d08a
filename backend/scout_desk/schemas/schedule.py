import datetime as dt
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field


class ScoutingGame(BaseModel):
    id: str = Field(default_factory=lambda: f"game_{uuid4().hex}")
    analyst_id: str
    analyst_name: str = ""
    game_title: str
    date_time: dt.datetime
    competition: str = ""
    observer: Optional[str] = None
    created_at: Optional[dt.datetime] = None


class ExternalProject(BaseModel):
    id: str = Field(default_factory=lambda: uuid4().hex)
    name: str
    city: str
    phone: str = ""
    responsible: str
    created_at: Optional[dt.datetime] = None


class ObservationPeriod(str, Enum):
    MORNING = "Manhã"
    AFTERNOON = "Tarde"


class ObservationSchedule(BaseModel):
    id: str = Field(default_factory=lambda: uuid4().hex)
    project_id: str
    project_name: str = ""
    city: str = ""
    date: dt.date
    period: ObservationPeriod = ObservationPeriod.MORNING
    observer_name: str
    created_at: Optional[dt.datetime] = None
