from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from scout_desk.api.deps import Container, current_viewer, get_container
from scout_desk.schemas.player import Player, Position
from scout_desk.schemas.user import UserPublic
from scout_desk.services.shadow_team import (
    FORMATION_SLOTS,
    ShadowSquad,
    SlotCapacityError,
    UnknownSlotError,
    players_in_slot,
    search_candidates,
)

router = APIRouter()


class AddCandidate(BaseModel):
    player_id: str


class MoveCandidate(BaseModel):
    from_index: int
    to_index: int


class PromoteCandidate(BaseModel):
    index: int


def _check_slot(slot: str) -> None:
    if slot not in FORMATION_SLOTS:
        raise HTTPException(status_code=404, detail=f"Unknown formation slot '{slot}'")


def _squad_payload(squad: ShadowSquad, players: List[Player]) -> Dict[str, Any]:
    slots = []
    for slot, label in FORMATION_SLOTS.items():
        resolved = players_in_slot(squad, slot, players)
        slots.append(
            {
                "slot": slot,
                "label": label.value,
                "player_ids": squad.candidates(slot),
                "players": [p.model_dump(mode="json") for p in resolved],
                "starter": resolved[0].model_dump(mode="json") if resolved else None,
            }
        )
    return {"slots": slots}


def _load(container: Container, viewer: UserPublic) -> ShadowSquad:
    try:
        return container.shadow_team(viewer.id).load()
    except RuntimeError as exc:
        raise HTTPException(status_code=502, detail=str(exc))


def _apply(container: Container, viewer: UserPublic, change) -> Dict[str, Any]:
    service = container.shadow_team(viewer.id)
    try:
        squad = change(service)
    except SlotCapacityError as exc:
        raise HTTPException(status_code=409, detail=str(exc))
    except UnknownSlotError as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except RuntimeError as exc:
        raise HTTPException(status_code=502, detail=str(exc))
    return _squad_payload(squad, container.players.list())


@router.get("")
def get_shadow_team(
    viewer: UserPublic = Depends(current_viewer),
    container: Container = Depends(get_container),
) -> Dict[str, Any]:
    """The viewer's own squad, candidates resolved in rank order."""
    squad = _load(container, viewer)
    return _squad_payload(squad, container.players.list())


@router.get("/{slot}/candidates", response_model=List[Player])
def slot_candidates(
    slot: str,
    q: str = Query("", description="Match on name, position or club"),
    position: Optional[Position] = Query(None),
    viewer: UserPublic = Depends(current_viewer),
    container: Container = Depends(get_container),
) -> List[Player]:
    _check_slot(slot)
    squad = _load(container, viewer)
    return search_candidates(squad, slot, container.players.list(), q, position)


@router.post("/{slot}/players")
def add_to_slot(
    slot: str,
    payload: AddCandidate,
    viewer: UserPublic = Depends(current_viewer),
    container: Container = Depends(get_container),
) -> Dict[str, Any]:
    return _apply(container, viewer, lambda s: s.add(slot, payload.player_id))


@router.delete("/{slot}/players/{player_id}")
def remove_from_slot(
    slot: str,
    player_id: str,
    viewer: UserPublic = Depends(current_viewer),
    container: Container = Depends(get_container),
) -> Dict[str, Any]:
    return _apply(container, viewer, lambda s: s.remove(slot, player_id))


@router.post("/{slot}/move")
def move_in_slot(
    slot: str,
    payload: MoveCandidate,
    viewer: UserPublic = Depends(current_viewer),
    container: Container = Depends(get_container),
) -> Dict[str, Any]:
    return _apply(container, viewer, lambda s: s.move(slot, payload.from_index, payload.to_index))


@router.post("/{slot}/promote")
def promote_in_slot(
    slot: str,
    payload: PromoteCandidate,
    viewer: UserPublic = Depends(current_viewer),
    container: Container = Depends(get_container),
) -> Dict[str, Any]:
    return _apply(container, viewer, lambda s: s.promote(slot, payload.index))
