from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import uuid4

from pydantic import BaseModel, Field

from scout_desk.schemas.player import Position


class WatchlistStatus(str, Enum):
    PENDING = "pending"
    VIEWED = "viewed"
    COMPLETED = "completed"


class WatchlistItem(BaseModel):
    """Observation request assigned to an analyst."""

    id: str = Field(default_factory=lambda: uuid4().hex)
    player_name: str
    club: str = ""
    position: Optional[Position] = None
    assigned_analyst_id: str
    requested_by: Optional[str] = None
    notes: Optional[str] = None
    status: WatchlistStatus = WatchlistStatus.PENDING
    created_at: Optional[datetime] = None


class ObservedPlayer(BaseModel):
    """Ad-hoc radar entry kept in viewer-local storage."""

    id: str = Field(default_factory=lambda: uuid4().hex)
    name: str
    club: str
    position: Position = Position.ATA
    created_at: Optional[datetime] = None
