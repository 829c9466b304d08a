from __future__ import annotations

import threading
from typing import Callable, Dict, Iterable

from scout_desk.core.logger import get_logger
from scout_desk.schemas.watchlist import WatchlistItem, WatchlistStatus

logger = get_logger(__name__)


def pending_count(items: Iterable[WatchlistItem], viewer_id: str) -> int:
    return sum(
        1
        for item in items
        if item.assigned_analyst_id == viewer_id and item.status == WatchlistStatus.PENDING
    )


class NotificationCounter:
    """Pending watchlist items per viewer, recomputed on demand and on change."""

    def __init__(self, load_items: Callable[[], Iterable[WatchlistItem]]) -> None:
        self._load_items = load_items
        self._latest: Dict[str, int] = {}
        self._lock = threading.Lock()

    def count_for(self, viewer_id: str) -> int:
        count = pending_count(self._load_items(), viewer_id)
        with self._lock:
            self._latest[viewer_id] = count
        return count

    def recount(self) -> Dict[str, int]:
        """Refresh the count of every viewer seen so far."""
        items = list(self._load_items())
        with self._lock:
            self._latest = {vid: pending_count(items, vid) for vid in self._latest}
            snapshot = dict(self._latest)
        logger.debug("Recounted watchlist notifications for %d viewers", len(snapshot))
        return snapshot

    def on_change(self, collection: str) -> None:
        if collection == "watchlist":
            self.recount()

    def latest(self, viewer_id: str) -> int:
        with self._lock:
            return self._latest.get(viewer_id, 0)
