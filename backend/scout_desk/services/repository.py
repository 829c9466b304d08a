from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel, ValidationError

from scout_desk.core.logger import get_logger
from scout_desk.schemas.player import Player
from scout_desk.schemas.schedule import ExternalProject, ObservationSchedule, ScoutingGame
from scout_desk.schemas.user import User
from scout_desk.schemas.watchlist import WatchlistItem, WatchlistStatus
from scout_desk.services import store_client
from scout_desk.services.store_client import StoreNotConfigured, StoreReadError

logger = get_logger(__name__)

M = TypeVar("M", bound=BaseModel)
ChangeListener = Callable[[str], None]


class StoreWriteError(RuntimeError):
    """Remote store rejected or failed a write."""


def _records(raw: Any) -> List[Any]:
    # Firebase returns keyed objects for maps and arrays (with holes) for integer keys
    if isinstance(raw, dict):
        return [val for _, val in sorted(raw.items(), key=lambda kv: kv[0])]
    if isinstance(raw, list):
        return [val for val in raw if val is not None]
    return []


class EntityRepository(Generic[M]):
    def __init__(
        self,
        collection: str,
        model: Type[M],
        order_by: str = "created_at",
        descending: bool = False,
        client: Any = store_client,
    ) -> None:
        self.collection = collection
        self.model = model
        self.order_by = order_by
        self.descending = descending
        self._client = client
        self._listeners: List[ChangeListener] = []

    def subscribe(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self.collection)

    def _parse(self, row: Any) -> Optional[M]:
        try:
            return self.model.model_validate(row)
        except ValidationError as exc:
            logger.warning("Skipping malformed %s record: %s", self.collection, exc.errors()[:1])
            return None

    def _sorted(self, items: List[M]) -> List[M]:
        present = [m for m in items if getattr(m, self.order_by, None) is not None]
        missing = [m for m in items if getattr(m, self.order_by, None) is None]
        present.sort(key=lambda m: getattr(m, self.order_by), reverse=self.descending)
        return present + missing

    def _build(self, raw: Any) -> List[M]:
        parsed = [self._parse(row) for row in _records(raw)]
        return self._sorted([m for m in parsed if m is not None])

    def list(self) -> List[M]:
        """All records in default order; empty when the store is unavailable."""
        ok, raw = self._client.fetch(self.collection)
        if not ok:
            if self._client.is_configured():
                logger.warning("Could not read '%s' from remote store; returning empty list", self.collection)
            return []
        return self._build(raw)

    def list_strict(self) -> List[M]:
        """Like list(), but a failed read raises instead of looking empty."""
        self._ensure_configured()
        ok, raw = self._client.fetch(self.collection)
        if not ok:
            raise StoreReadError(f"Could not read '{self.collection}' from remote store")
        return self._build(raw)

    def get(self, record_id: str) -> Optional[M]:
        raw = self._client.get(f"{self.collection}/{record_id}")
        if raw is None:
            return None
        return self._parse(raw)

    def _ensure_configured(self) -> None:
        if not self._client.is_configured():
            raise StoreNotConfigured("Remote store is not configured; changes cannot be saved")

    def upsert(self, record: M) -> M:
        """Full replace keyed by id; creates the record when absent."""
        self._ensure_configured()
        record_id = getattr(record, "id")
        ok, status, detail = self._client.put(f"{self.collection}/{record_id}", record.model_dump(mode="json"))
        if not ok:
            raise StoreWriteError(f"Failed to save {self.collection}/{record_id} (status {status}): {detail}")
        logger.info("Saved %s/%s", self.collection, record_id)
        self._notify()
        return record

    def delete(self, record_id: str) -> None:
        self._ensure_configured()
        ok, status, detail = self._client.delete(f"{self.collection}/{record_id}")
        if not ok and status != 404:
            raise StoreWriteError(f"Failed to delete {self.collection}/{record_id} (status {status}): {detail}")
        logger.info("Deleted %s/%s", self.collection, record_id)
        self._notify()


class WatchlistRepository(EntityRepository[WatchlistItem]):
    def __init__(self, client: Any = store_client) -> None:
        super().__init__("watchlist", WatchlistItem, order_by="created_at", descending=True, client=client)

    def update_status(self, item_id: str, status: WatchlistStatus) -> None:
        self._ensure_configured()
        status = WatchlistStatus(status)
        ok, code, detail = self._client.put(f"{self.collection}/{item_id}/status", status.value)
        if not ok:
            raise StoreWriteError(f"Failed to update watchlist/{item_id} (status {code}): {detail}")
        logger.info("Watchlist item %s marked %s", item_id, status.value)
        self._notify()


@dataclass
class Repositories:
    players: EntityRepository[Player]
    users: EntityRepository[User]
    games: EntityRepository[ScoutingGame]
    watchlist: WatchlistRepository
    projects: EntityRepository[ExternalProject]
    schedules: EntityRepository[ObservationSchedule]


def build_repositories(client: Any = store_client) -> Repositories:
    return Repositories(
        players=EntityRepository("players", Player, order_by="created_at", descending=True, client=client),
        users=EntityRepository("users", User, order_by="created_at", client=client),
        games=EntityRepository("scouting_games", ScoutingGame, order_by="date_time", client=client),
        watchlist=WatchlistRepository(client=client),
        projects=EntityRepository("external_projects", ExternalProject, order_by="created_at", descending=True, client=client),
        schedules=EntityRepository("observation_schedules", ObservationSchedule, order_by="date", client=client),
    )
