from __future__ import annotations

from datetime import datetime, timezone
from typing import List

from scout_desk.schemas.player import Position
from scout_desk.schemas.watchlist import ObservedPlayer
from scout_desk.services.kv_store import KeyValueStore


class RadarList:
    """Ad-hoc observed players kept in viewer-local storage, newest first."""

    def __init__(self, store: KeyValueStore, key: str = "pvfc_watchlist_data") -> None:
        self.store = store
        self.key = key

    def items(self) -> List[ObservedPlayer]:
        raw = self.store.get(self.key) or []
        return [ObservedPlayer.model_validate(row) for row in raw if isinstance(row, dict)]

    def _save(self, items: List[ObservedPlayer]) -> None:
        self.store.set(self.key, [item.model_dump(mode="json") for item in items])

    def add(self, name: str, club: str, position: Position = Position.ATA) -> ObservedPlayer:
        name, club = name.strip(), club.strip()
        if not name or not club:
            raise ValueError("Name and club are required")
        entry = ObservedPlayer(name=name, club=club, position=position, created_at=datetime.now(timezone.utc))
        self._save([entry] + self.items())
        return entry

    def remove(self, item_id: str) -> None:
        self._save([item for item in self.items() if item.id != item_id])
