from datetime import datetime, timezone
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from scout_desk.api.deps import Container, current_viewer, get_container, store_http_error
from scout_desk.schemas.player import Position
from scout_desk.schemas.user import UserPublic
from scout_desk.schemas.watchlist import ObservedPlayer, WatchlistItem, WatchlistStatus
from scout_desk.services.repository import StoreWriteError
from scout_desk.services.store_client import StoreNotConfigured

router = APIRouter()


class WatchlistCreate(BaseModel):
    player_name: str
    club: str = ""
    position: Optional[Position] = None
    assigned_analyst_id: str
    notes: Optional[str] = None


class StatusUpdate(BaseModel):
    status: WatchlistStatus


class RadarCreate(BaseModel):
    name: str
    club: str
    position: Position = Position.ATA


@router.get("/items", response_model=List[WatchlistItem])
def list_items(
    mine: bool = Query(False, description="Only items assigned to the current viewer"),
    viewer: UserPublic = Depends(current_viewer),
    container: Container = Depends(get_container),
) -> List[WatchlistItem]:
    items = container.repos.watchlist.list()
    if mine:
        items = [i for i in items if i.assigned_analyst_id == viewer.id]
    return items


@router.post("/items", response_model=WatchlistItem)
def create_item(
    payload: WatchlistCreate,
    viewer: UserPublic = Depends(current_viewer),
    container: Container = Depends(get_container),
) -> WatchlistItem:
    if not payload.player_name.strip():
        raise HTTPException(status_code=400, detail="Player name is required")
    item = WatchlistItem(
        **payload.model_dump(),
        requested_by=viewer.id,
        created_at=datetime.now(timezone.utc),
    )
    try:
        return container.repos.watchlist.upsert(item)
    except (StoreNotConfigured, StoreWriteError) as exc:
        raise store_http_error(exc)


@router.patch("/items/{item_id}")
def update_item_status(
    item_id: str,
    payload: StatusUpdate,
    viewer: UserPublic = Depends(current_viewer),
    container: Container = Depends(get_container),
) -> dict:
    try:
        container.repos.watchlist.update_status(item_id, payload.status)
    except (StoreNotConfigured, StoreWriteError) as exc:
        raise store_http_error(exc)
    return {"id": item_id, "status": payload.status.value, "pending": container.counter.latest(viewer.id)}


@router.get("/notifications")
def notifications(
    viewer: UserPublic = Depends(current_viewer),
    container: Container = Depends(get_container),
) -> dict:
    """Pending watchlist items assigned to the viewer."""
    return {"pending": container.counter.count_for(viewer.id)}


@router.get("/radar", response_model=List[ObservedPlayer])
def radar(
    viewer: UserPublic = Depends(current_viewer),
    container: Container = Depends(get_container),
) -> List[ObservedPlayer]:
    return container.radar.items()


@router.post("/radar", response_model=ObservedPlayer)
def add_to_radar(
    payload: RadarCreate,
    viewer: UserPublic = Depends(current_viewer),
    container: Container = Depends(get_container),
) -> ObservedPlayer:
    try:
        return container.radar.add(payload.name, payload.club, payload.position)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))


@router.delete("/radar/{item_id}")
def remove_from_radar(
    item_id: str,
    viewer: UserPublic = Depends(current_viewer),
    container: Container = Depends(get_container),
) -> dict:
    container.radar.remove(item_id)
    return {"deleted": item_id}
