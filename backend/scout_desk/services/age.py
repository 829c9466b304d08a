from __future__ import annotations

from datetime import date, datetime
from typing import Iterable, List, Optional, Union

from scout_desk.schemas.player import Player

DateLike = Union[date, datetime, str, None]


def parse_birth_date(value: DateLike) -> Optional[date]:
    """Calendar date from a date, datetime or ISO string; None if unparseable."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        # fromisoformat only learned the Z suffix in 3.11
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def age_on(birth: date, today: date) -> int:
    """Completed years between birth and today."""
    age = today.year - birth.year
    if (today.month, today.day) < (birth.month, birth.day):
        age -= 1
    return age


def with_derived_age(player: Player, today: Optional[date] = None) -> Player:
    """Copy of player with age recomputed; unchanged when the birth date is invalid."""
    birth = parse_birth_date(player.birth_date)
    if birth is None:
        return player
    today = today or date.today()
    return player.model_copy(update={"age": age_on(birth, today)})


def process_players(players: Iterable[Player], today: Optional[date] = None) -> List[Player]:
    today = today or date.today()
    return [with_derived_age(p, today) for p in players]
