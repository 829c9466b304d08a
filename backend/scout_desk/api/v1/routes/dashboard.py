from typing import Any, Dict

from fastapi import APIRouter, Depends, HTTPException
from pydantic import ValidationError

from scout_desk.api.deps import Container, current_viewer, get_container
from scout_desk.services.dashboard import Action, AppState, filter_options, refresh_allowed, visible_players

router = APIRouter(dependencies=[Depends(current_viewer)])


def _snapshot(state: AppState) -> Dict[str, Any]:
    players = visible_players(state)
    return {
        "view": state.view.value,
        "open_panels": sorted(p.value for p in state.open_panels),
        "selected_player_id": state.selected_player_id,
        "filters": state.filters.model_dump(mode="json"),
        "options": filter_options(state),
        "players": [p.model_dump(mode="json") for p in players],
        "visible": len(players),
        "total": len(state.players),
        "loading": state.loading,
        "last_refreshed": state.last_refreshed.isoformat() if state.last_refreshed else None,
        "refresh_allowed": refresh_allowed(state),
    }


@router.get("")
def dashboard(container: Container = Depends(get_container)) -> Dict[str, Any]:
    return _snapshot(container.dashboard.state)


@router.post("/actions")
def dispatch_action(action: Action, container: Container = Depends(get_container)) -> Dict[str, Any]:
    """Apply one UI action (panel open/close, view change, filter change)."""
    try:
        state = container.dashboard.dispatch(action)
    except (KeyError, ValueError, ValidationError) as exc:
        raise HTTPException(status_code=400, detail=f"Invalid action: {exc}")
    return _snapshot(state)


@router.post("/refresh")
def refresh(container: Container = Depends(get_container)) -> Dict[str, Any]:
    return _snapshot(container.scheduler.load_now())
