from __future__ import annotations

from datetime import date, datetime, time, timedelta
from enum import Enum
from typing import Any, Iterable, List, Optional, Tuple, TypeVar, Union

ALL_OWNERS = "all"
DEFAULT_WINDOW_DAYS = 7
GAME_DURATION = timedelta(hours=2)
END_OF_DAY = time(23, 59, 59)

R = TypeVar("R")


class GameStatus(str, Enum):
    FINISHED = "Finalizado"
    LIVE = "Em Andamento"
    UPCOMING = "Próximo"


def as_local_datetime(value: Union[date, datetime]) -> datetime:
    """Naive local datetime; plain dates map to their midnight."""
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            return value.astimezone().replace(tzinfo=None)
        return value
    return datetime.combine(value, time.min)


def date_window(
    start: Optional[date] = None,
    end: Optional[date] = None,
    now: Optional[datetime] = None,
) -> Tuple[datetime, datetime]:
    """Inclusive bounds; with no explicit bound, the last 7 days from local midnight."""
    now = now or datetime.now()
    if start is None and end is None:
        today = now.date()
        lower = datetime.combine(today - timedelta(days=DEFAULT_WINDOW_DAYS), time.min)
        return lower, datetime.combine(today, END_OF_DAY)
    lower = datetime.combine(start, time.min) if start is not None else datetime.min
    upper = datetime.combine(end, END_OF_DAY) if end is not None else datetime.max
    return lower, upper


def filter_by_owner(records: Iterable[R], owner_id: str = ALL_OWNERS, owner_field: str = "analyst_id") -> List[R]:
    if owner_id == ALL_OWNERS:
        return list(records)
    return [r for r in records if getattr(r, owner_field, None) == owner_id]


def filter_by_date_range(
    records: Iterable[R],
    start: Optional[date] = None,
    end: Optional[date] = None,
    field: str = "date_time",
    now: Optional[datetime] = None,
) -> List[R]:
    lower, upper = date_window(start, end, now)
    kept = []
    for r in records:
        value: Any = getattr(r, field, None)
        if value is None:
            continue
        if lower <= as_local_datetime(value) <= upper:
            kept.append(r)
    return kept


def sort_by_time(records: Iterable[R], field: str = "date_time") -> List[R]:
    return sorted(records, key=lambda r: as_local_datetime(getattr(r, field)))


def schedule_view(
    records: Iterable[R],
    owner_id: str = ALL_OWNERS,
    start: Optional[date] = None,
    end: Optional[date] = None,
    field: str = "date_time",
    owner_field: str = "analyst_id",
    now: Optional[datetime] = None,
) -> List[R]:
    """Owner filter, then date window, then ascending by time."""
    owned = filter_by_owner(records, owner_id, owner_field)
    in_range = filter_by_date_range(owned, start, end, field=field, now=now)
    return sort_by_time(in_range, field)


def game_status(kickoff: Union[date, datetime], now: Optional[datetime] = None) -> GameStatus:
    now = now or datetime.now()
    kickoff = as_local_datetime(kickoff)
    if kickoff + GAME_DURATION < now:
        return GameStatus.FINISHED
    if kickoff <= now:
        return GameStatus.LIVE
    return GameStatus.UPCOMING
