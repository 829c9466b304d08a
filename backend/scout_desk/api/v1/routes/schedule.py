from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel

from scout_desk.api.deps import Container, current_viewer, get_container, store_http_error
from scout_desk.schemas.schedule import ExternalProject, ObservationPeriod, ObservationSchedule, ScoutingGame
from scout_desk.schemas.user import UserPublic
from scout_desk.services.repository import StoreWriteError
from scout_desk.services.schedule_views import ALL_OWNERS, game_status, schedule_view
from scout_desk.services.store_client import StoreNotConfigured

router = APIRouter(dependencies=[Depends(current_viewer)])


class GameCreate(BaseModel):
    game_title: str
    date_time: datetime
    competition: str = ""
    observer: Optional[str] = None


class ProjectCreate(BaseModel):
    name: str
    city: str
    phone: str = ""
    responsible: str


class ObservationCreate(BaseModel):
    project_id: str
    date: date
    period: ObservationPeriod = ObservationPeriod.MORNING
    observer_name: str


def _save(repo, record):
    try:
        return repo.upsert(record)
    except (StoreNotConfigured, StoreWriteError) as exc:
        raise store_http_error(exc)


def _delete(repo, record_id: str) -> None:
    try:
        repo.delete(record_id)
    except (StoreNotConfigured, StoreWriteError) as exc:
        raise store_http_error(exc)


@router.get("/games")
def list_games(
    analyst: str = Query(ALL_OWNERS, description="Analyst id or 'all'"),
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    container: Container = Depends(get_container),
) -> Dict[str, Any]:
    """Games in the date window (default: last 7 days), oldest first."""
    now = datetime.now()
    games = schedule_view(container.repos.games.list(), owner_id=analyst, start=start, end=end, now=now)
    return {
        "games": [
            {**g.model_dump(mode="json"), "status": game_status(g.date_time, now).value}
            for g in games
        ]
    }


@router.get("/analysts")
def list_analysts(container: Container = Depends(get_container)) -> Dict[str, List[Dict[str, str]]]:
    seen: Dict[str, str] = {}
    for game in container.repos.games.list():
        seen.setdefault(game.analyst_id, game.analyst_name)
    return {"analysts": [{"id": k, "name": v} for k, v in sorted(seen.items(), key=lambda kv: kv[1])]}


@router.post("/games", response_model=ScoutingGame)
def create_game(
    payload: GameCreate,
    viewer: UserPublic = Depends(current_viewer),
    container: Container = Depends(get_container),
) -> ScoutingGame:
    if not payload.game_title.strip():
        raise HTTPException(status_code=400, detail="Game title is required")
    game = ScoutingGame(
        analyst_id=viewer.id,
        analyst_name=viewer.name,
        game_title=payload.game_title.strip(),
        date_time=payload.date_time,
        competition=payload.competition,
        observer=payload.observer,
        created_at=datetime.now(timezone.utc),
    )
    return _save(container.repos.games, game)


@router.delete("/games/{game_id}")
def delete_game(game_id: str, container: Container = Depends(get_container)) -> dict:
    _delete(container.repos.games, game_id)
    return {"deleted": game_id}


@router.get("/projects", response_model=List[ExternalProject])
def list_projects(container: Container = Depends(get_container)) -> List[ExternalProject]:
    return container.repos.projects.list()


@router.post("/projects", response_model=ExternalProject)
def create_project(payload: ProjectCreate, container: Container = Depends(get_container)) -> ExternalProject:
    if not (payload.name.strip() and payload.city.strip() and payload.responsible.strip()):
        raise HTTPException(status_code=400, detail="Name, city and responsible are required")
    project = ExternalProject(**payload.model_dump(), created_at=datetime.now(timezone.utc))
    return _save(container.repos.projects, project)


@router.get("/observations")
def list_observations(
    project: str = Query(ALL_OWNERS, description="Project id or 'all'"),
    start: Optional[date] = Query(None),
    end: Optional[date] = Query(None),
    container: Container = Depends(get_container),
) -> Dict[str, Any]:
    schedules = schedule_view(
        container.repos.schedules.list(),
        owner_id=project,
        start=start,
        end=end,
        field="date",
        owner_field="project_id",
    )
    return {"observations": [s.model_dump(mode="json") for s in schedules]}


@router.post("/observations", response_model=ObservationSchedule)
def create_observation(payload: ObservationCreate, container: Container = Depends(get_container)) -> ObservationSchedule:
    if not payload.observer_name.strip():
        raise HTTPException(status_code=400, detail="Observer name is required")
    project = next((p for p in container.repos.projects.list() if p.id == payload.project_id), None)
    if project is None:
        raise HTTPException(status_code=404, detail=f"Project {payload.project_id} not found")
    schedule = ObservationSchedule(
        project_id=project.id,
        project_name=project.name,
        city=project.city,
        date=payload.date,
        period=payload.period,
        observer_name=payload.observer_name.strip(),
        created_at=datetime.now(timezone.utc),
    )
    return _save(container.repos.schedules, schedule)


@router.delete("/observations/{schedule_id}")
def delete_observation(schedule_id: str, container: Container = Depends(get_container)) -> dict:
    _delete(container.repos.schedules, schedule_id)
    return {"deleted": schedule_id}
