from __future__ import annotations

import threading
from dataclasses import dataclass, field, replace
from datetime import datetime
from enum import Enum
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from pydantic import BaseModel, Field

from scout_desk.schemas.filters import FilterState
from scout_desk.schemas.player import Player
from scout_desk.schemas.user import UserPublic
from scout_desk.services.roster_filter import distinct_competitions, distinct_scout_years, filter_players


class View(str, Enum):
    DASHBOARD = "dashboard"
    WATCHLIST = "watchlist"
    SCHEDULE = "schedule"
    EXTERNAL = "external"


class Panel(str, Enum):
    EDITOR = "editor"
    ADMIN = "admin"
    SHADOW_TEAM = "shadow_team"
    COMPARISON = "comparison"


@dataclass(frozen=True)
class AppState:
    view: View = View.DASHBOARD
    open_panels: FrozenSet[Panel] = frozenset()
    selected_player_id: Optional[str] = None
    filters: FilterState = field(default_factory=FilterState)
    players: Tuple[Player, ...] = ()
    users: Tuple[UserPublic, ...] = ()
    loading: bool = False
    last_refreshed: Optional[datetime] = None


class Action(BaseModel):
    type: str
    payload: Dict[str, Any] = Field(default_factory=dict)


def refresh_allowed(state: AppState) -> bool:
    """Background refresh must not run under an open editor or off the dashboard."""
    return state.view == View.DASHBOARD and not state.open_panels and state.selected_player_id is None


def reduce(state: AppState, action: Action) -> AppState:
    kind, payload = action.type, action.payload

    if kind == "open_panel":
        return replace(state, open_panels=state.open_panels | {Panel(payload["panel"])})
    if kind == "close_panel":
        return replace(state, open_panels=state.open_panels - {Panel(payload["panel"])})
    if kind == "select_player":
        return replace(state, selected_player_id=payload.get("player_id"))
    if kind == "clear_selection":
        return replace(state, selected_player_id=None)
    if kind == "set_view":
        return replace(state, view=View(payload["view"]))
    if kind == "set_filters":
        return replace(state, filters=FilterState.model_validate({**state.filters.model_dump(), **payload}))
    if kind == "toggle_filter":
        return replace(state, filters=state.filters.toggled(payload["field"], payload["value"]))
    if kind == "clear_filters":
        return replace(state, filters=FilterState.cleared())
    if kind == "set_loading":
        return replace(state, loading=bool(payload.get("loading", True)))
    if kind == "data_loaded":
        return replace(
            state,
            players=tuple(payload.get("players", state.players)),
            users=tuple(payload.get("users", state.users)),
            loading=False,
            last_refreshed=payload.get("at") or datetime.now(),
        )
    raise ValueError(f"Unknown action '{kind}'")


class DashboardStore:
    """Holds the app state; every change goes through dispatch()."""

    def __init__(self, state: Optional[AppState] = None) -> None:
        self._state = state or AppState()
        self._lock = threading.Lock()

    @property
    def state(self) -> AppState:
        return self._state

    def dispatch(self, action: Action) -> AppState:
        with self._lock:
            self._state = reduce(self._state, action)
            return self._state


def visible_players(state: AppState) -> List[Player]:
    return filter_players(state.players, state.filters)


def filter_options(state: AppState) -> Dict[str, List[Any]]:
    return {
        "competitions": distinct_competitions(state.players),
        "scout_years": distinct_scout_years(state.players),
    }
