from fastapi import APIRouter, Depends

from scout_desk.api.deps import Container, get_container

router = APIRouter()


@router.get("/live")
def live() -> dict:
    """Liveness probe."""
    return {"status": "ok"}


@router.get("/ready")
def ready(container: Container = Depends(get_container)) -> dict:
    """Readiness probe; reports whether the remote store is configured."""
    return {"status": "ready", "remote_store": bool(container.settings.store_url)}
