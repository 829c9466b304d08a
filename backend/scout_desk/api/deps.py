from __future__ import annotations

from functools import lru_cache
from typing import Any, List, Optional

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from scout_desk.core.config import Settings, get_settings
from scout_desk.schemas.user import UserPublic, UserRole
from scout_desk.services import store_client
from scout_desk.services.dashboard import DashboardStore
from scout_desk.services.kv_store import KeyValueStore, local_store, squad_store
from scout_desk.services.notifications import NotificationCounter
from scout_desk.services.players import PlayerService
from scout_desk.services.refresh import RefreshScheduler
from scout_desk.services.repository import Repositories, StoreWriteError, build_repositories
from scout_desk.services.session import SessionStore
from scout_desk.services.shadow_team import ShadowTeamService
from scout_desk.services.store_client import StoreNotConfigured, StoreReadError
from scout_desk.services.users import UserService
from scout_desk.services.watchlist import RadarList


class Container:
    """Wires repositories, viewer-local stores and services for one process."""

    def __init__(
        self,
        settings: Settings,
        repos: Repositories,
        local: KeyValueStore,
        squads: KeyValueStore,
    ) -> None:
        self.settings = settings
        self.repos = repos
        self.local = local
        self.squads = squads

        self.players = PlayerService(repos.players)
        self.users = UserService(repos.users)
        self.session = SessionStore(
            local,
            settings.auth_secret,
            key=settings.session_key,
            expire_days=settings.access_token_expire_days,
        )
        self.radar = RadarList(local, settings.watchlist_key)

        self.dashboard = DashboardStore()
        self.counter = NotificationCounter(repos.watchlist.list)
        repos.watchlist.subscribe(self.counter.on_change)
        self.scheduler = RefreshScheduler(
            self.dashboard,
            load_players=self.players.list,
            load_users=self.public_users,
            interval=settings.refresh_interval_seconds,
            counter=self.counter,
        )

    def public_users(self) -> List[UserPublic]:
        return [u.public() for u in self.repos.users.list()]

    def shadow_team(self, viewer_id: str) -> ShadowTeamService:
        return ShadowTeamService(self.squads, viewer_id, prefix=self.settings.shadow_team_prefix)


def build_container(settings: Optional[Settings] = None, client: Any = store_client) -> Container:
    settings = settings or get_settings()
    return Container(
        settings=settings,
        repos=build_repositories(client),
        local=local_store(settings),
        squads=squad_store(settings, client),
    )


@lru_cache(maxsize=1)
def get_container() -> Container:
    return build_container()


bearer_scheme = HTTPBearer(auto_error=False)


def viewer_token(credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme)) -> str:
    if credentials is None:
        raise HTTPException(status_code=401, detail="Not logged in", headers={"WWW-Authenticate": "Bearer"})
    return credentials.credentials


def current_viewer(
    token: str = Depends(viewer_token),
    container: Container = Depends(get_container),
) -> UserPublic:
    viewer = container.session.restore(token)
    if viewer is None:
        raise HTTPException(status_code=401, detail="Invalid or expired session", headers={"WWW-Authenticate": "Bearer"})
    return viewer


def require_admin(viewer: UserPublic = Depends(current_viewer)) -> UserPublic:
    if viewer.role != UserRole.ADMIN:
        raise HTTPException(status_code=403, detail="Administrator access required")
    return viewer


def store_http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, StoreNotConfigured):
        return HTTPException(status_code=503, detail=str(exc))
    if isinstance(exc, (StoreReadError, StoreWriteError)):
        return HTTPException(status_code=502, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))
