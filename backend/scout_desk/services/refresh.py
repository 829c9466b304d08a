from __future__ import annotations

import asyncio
from typing import Callable, List, Optional, Tuple

from scout_desk.core.logger import get_logger
from scout_desk.schemas.player import Player
from scout_desk.schemas.user import UserPublic
from scout_desk.services.dashboard import Action, AppState, DashboardStore, refresh_allowed
from scout_desk.services.notifications import NotificationCounter

logger = get_logger(__name__)


class RefreshScheduler:
    """Periodic re-fetch of players and users, guarded by refresh_allowed()."""

    def __init__(
        self,
        store: DashboardStore,
        load_players: Callable[[], List[Player]],
        load_users: Callable[[], List[UserPublic]],
        interval: float = 45.0,
        counter: Optional[NotificationCounter] = None,
    ) -> None:
        self.store = store
        self._load_players = load_players
        self._load_users = load_users
        self.interval = interval
        self.counter = counter
        self._task: Optional[asyncio.Task] = None

    def _fetch(self) -> Tuple[List[Player], List[UserPublic]]:
        return self._load_players(), self._load_users()

    def load_now(self) -> AppState:
        """Explicit, user-initiated load; not subject to the guard."""
        self.store.dispatch(Action(type="set_loading", payload={"loading": True}))
        players, users = self._fetch()
        return self.store.dispatch(Action(type="data_loaded", payload={"players": players, "users": users}))

    def _recount(self) -> None:
        if self.counter is not None:
            self.counter.recount()

    async def tick(self) -> bool:
        """One scheduled refresh; returns True when new data was applied."""
        await asyncio.to_thread(self._recount)
        if not refresh_allowed(self.store.state):
            logger.debug("Refresh skipped: editor open or off the dashboard")
            return False
        players, users = await asyncio.to_thread(self._fetch)
        # A panel may have opened while the fetch was in flight
        if not refresh_allowed(self.store.state):
            logger.debug("Discarding refresh result fetched before a panel opened")
            return False
        self.store.dispatch(Action(type="data_loaded", payload={"players": players, "users": users}))
        return True

    async def run(self) -> None:
        while True:
            await asyncio.sleep(self.interval)
            try:
                await self.tick()
            except Exception:  # keep the loop alive; next tick retries
                logger.exception("Background refresh failed")

    def start(self) -> asyncio.Task:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self.run())
        return self._task

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
