from datetime import date
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Body, Depends, File, Form, HTTPException, Query, UploadFile
from fastapi.responses import Response

from scout_desk.api.deps import Container, current_viewer, get_container, store_http_error
from scout_desk.schemas.filters import DEFAULT_MAX_AGE, DEFAULT_MIN_AGE, FilterState
from scout_desk.schemas.player import ComparisonCandidate, Foot, Player, Position, Recommendation
from scout_desk.services import ai_report, roster_io
from scout_desk.services.ai_report import ReportCredentialsMissing, ReportGenerationError
from scout_desk.services.players import PlayerNotFound
from scout_desk.services.repository import StoreWriteError
from scout_desk.services.roster_filter import distinct_competitions, distinct_scout_years, filter_players
from scout_desk.services.store_client import StoreNotConfigured

router = APIRouter(dependencies=[Depends(current_viewer)])


def filter_query(
    search: str = Query("", description="Case-insensitive match on name or club"),
    positions: Optional[List[Position]] = Query(None),
    min_age: int = Query(DEFAULT_MIN_AGE),
    max_age: int = Query(DEFAULT_MAX_AGE),
    recommendations: Optional[List[Recommendation]] = Query(None),
    competitions: Optional[List[str]] = Query(None),
    scout_years: Optional[List[int]] = Query(None),
    feet: Optional[List[Foot]] = Query(None),
) -> FilterState:
    return FilterState(
        search=search,
        positions=positions or [],
        min_age=min_age,
        max_age=max_age,
        recommendations=recommendations or [],
        competitions=competitions or [],
        scout_years=scout_years or [],
        feet=feet or [],
    )


@router.get("", response_model=List[Player])
def list_players(
    filters: FilterState = Depends(filter_query),
    container: Container = Depends(get_container),
) -> List[Player]:
    """Roster with derived ages, narrowed by the filter query."""
    return filter_players(container.players.list(), filters)


@router.get("/options")
def filter_options(container: Container = Depends(get_container)) -> Dict[str, Any]:
    players = container.players.list()
    return {
        "competitions": distinct_competitions(players),
        "scout_years": distinct_scout_years(players),
        "positions": [p.value for p in Position],
        "recommendations": [r.value for r in Recommendation],
        "feet": [f.value for f in Foot],
    }


@router.get("/export.csv")
def export_players(
    filters: FilterState = Depends(filter_query),
    container: Container = Depends(get_container),
) -> Response:
    players = filter_players(container.players.list(), filters)
    try:
        content = roster_io.players_to_csv(players)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    filename = roster_io.export_filename(container.settings.club_name, date.today())
    return Response(
        content=content,
        media_type="text/csv; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.post("", response_model=Player)
def save_player(player: Player, container: Container = Depends(get_container)) -> Player:
    """Create or fully replace a player record."""
    try:
        return container.players.save(player)
    except (StoreNotConfigured, StoreWriteError) as exc:
        raise store_http_error(exc)


@router.post("/context/import")
async def import_context(file: UploadFile = File(..., description="CSV or Excel stats export")) -> Dict[str, Any]:
    content = await file.read()
    try:
        text = roster_io.context_from_upload(content, file.filename or "")
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return {"file": file.filename, "ai_context_data": text}


@router.post("/compare/candidates", response_model=ComparisonCandidate)
async def upload_comparison_candidate(
    name: str = Form(...),
    file: UploadFile = File(...),
) -> ComparisonCandidate:
    if not name.strip():
        raise HTTPException(status_code=400, detail="Candidate name is required")
    content = await file.read()
    try:
        rows = roster_io.records_from_upload(content, file.filename or "")
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return ComparisonCandidate(name=name.strip(), data=rows)


@router.post("/compare")
def compare_players(
    candidates: List[ComparisonCandidate] = Body(...),
    container: Container = Depends(get_container),
) -> Dict[str, Any]:
    try:
        report = ai_report.compare_players(candidates, settings=container.settings)
    except ReportCredentialsMissing as exc:
        raise HTTPException(status_code=503, detail={"code": "credentials_missing", "action": "reconfigure", "message": str(exc)})
    except ReportGenerationError as exc:
        raise HTTPException(status_code=502, detail={"code": "report_failed", "action": "retry", "message": str(exc)})
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))
    return {"report": report}


@router.get("/{player_id}", response_model=Player)
def get_player(player_id: str, container: Container = Depends(get_container)) -> Player:
    try:
        return container.players.get(player_id)
    except PlayerNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc))


@router.delete("/{player_id}")
def delete_player(player_id: str, container: Container = Depends(get_container)) -> dict:
    try:
        container.players.delete(player_id)
    except (StoreNotConfigured, StoreWriteError) as exc:
        raise store_http_error(exc)
    return {"deleted": player_id}


@router.post("/{player_id}/report")
def player_report(player_id: str, container: Container = Depends(get_container)) -> Dict[str, Any]:
    """AI scouting report for one player."""
    try:
        player = container.players.get(player_id)
        report = ai_report.generate_report(player, settings=container.settings)
    except PlayerNotFound as exc:
        raise HTTPException(status_code=404, detail=str(exc))
    except ReportCredentialsMissing as exc:
        raise HTTPException(status_code=503, detail={"code": "credentials_missing", "action": "reconfigure", "message": str(exc)})
    except ReportGenerationError as exc:
        raise HTTPException(status_code=502, detail={"code": "report_failed", "action": "retry", "message": str(exc)})
    return {"player_id": player_id, "report": report}
