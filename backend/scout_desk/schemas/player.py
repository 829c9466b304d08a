from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field


class Position(str, Enum):
    GOL = "GOL"
    ZAG = "ZAG"
    LTD = "LTD"
    LTE = "LTE"
    VOL = "VOL"
    MEI = "MEI"
    EXT = "EXT"
    ATA = "ATA"


class Recommendation(str, Enum):
    ELITE = "G1 Elite"
    STARTER = "G2 Titular"
    MONITORING = "G3 Monitoramento"
    DEVELOPMENT = "Base"


class Foot(str, Enum):
    LEFT = "Left"
    RIGHT = "Right"
    BOTH = "Both"


class PlayerStats(BaseModel):
    # 1..5 scouting scale
    pace: int = Field(3, ge=1, le=5)
    shooting: int = Field(3, ge=1, le=5)
    passing: int = Field(3, ge=1, le=5)
    dribbling: int = Field(3, ge=1, le=5)
    defending: int = Field(3, ge=1, le=5)
    physical: int = Field(3, ge=1, le=5)

    def average(self) -> int:
        values = [self.pace, self.shooting, self.passing, self.dribbling, self.defending, self.physical]
        return round(sum(values) / len(values))


class Player(BaseModel):
    id: str = Field(default_factory=lambda: uuid4().hex)
    name: str
    club: str
    nationality: str = "Brasil"
    competition: str = ""
    position1: Position
    position2: Optional[Position] = None
    foot: Foot = Foot.RIGHT
    height: int = Field(180, ge=100, le=230)  # cm

    birth_date: str  # ISO date, source of truth for age
    age: Optional[int] = None  # derived on read, never trusted from storage

    stats: PlayerStats = Field(default_factory=PlayerStats)
    recommendation: Recommendation = Recommendation.MONITORING
    scout_year: int = Field(default_factory=lambda: datetime.now().year)
    games_watched: int = Field(1, ge=0)
    value: float = 0.0
    contract_until: Optional[int] = None

    photo_url: Optional[str] = None
    ai_context_data: Optional[str] = None
    video_url: Optional[str] = None
    ogol_url: Optional[str] = None
    agent: Optional[str] = None
    contact: Optional[str] = None

    created_at: Optional[datetime] = None


class ComparisonCandidate(BaseModel):
    """Named spreadsheet rows uploaded for a side-by-side AI comparison."""

    id: str = Field(default_factory=lambda: uuid4().hex)
    name: str
    data: list = Field(default_factory=list)
