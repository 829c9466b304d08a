from __future__ import annotations

import threading
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence

from scout_desk.core.logger import get_logger
from scout_desk.schemas.player import Player, Position
from scout_desk.services.kv_store import KeyValueStore

logger = get_logger(__name__)

MAX_CANDIDATES_PER_SLOT = 4

# 4-3-3 pitch layout: slot id -> position label
FORMATION_SLOTS: Dict[str, Position] = {
    "ata": Position.ATA,
    "ext_esq": Position.EXT,
    "ext_dir": Position.EXT,
    "mei": Position.MEI,
    "vol1": Position.VOL,
    "vol2": Position.VOL,
    "lte": Position.LTE,
    "ltd": Position.LTD,
    "zag1": Position.ZAG,
    "zag2": Position.ZAG,
    "gol": Position.GOL,
}


class SlotCapacityError(ValueError):
    pass


class UnknownSlotError(ValueError):
    pass


def _check_slot(slot: str) -> None:
    if slot not in FORMATION_SLOTS:
        raise UnknownSlotError(f"Unknown formation slot '{slot}'")


class ShadowSquad:
    """Per-slot candidate lists; index 0 is the first choice."""

    def __init__(self, slots: Optional[Mapping[str, Sequence[str]]] = None) -> None:
        self._slots: Dict[str, List[str]] = {}
        for slot, ids in (slots or {}).items():
            if slot not in FORMATION_SLOTS or not isinstance(ids, (list, tuple)):
                continue
            unique: List[str] = []
            for player_id in ids:
                if isinstance(player_id, str) and player_id not in unique:
                    unique.append(player_id)
            if unique:
                self._slots[slot] = unique

    def candidates(self, slot: str) -> List[str]:
        _check_slot(slot)
        return list(self._slots.get(slot, []))

    def add(self, slot: str, player_id: str) -> bool:
        current = self.candidates(slot)
        if player_id in current:
            return False
        if len(current) >= MAX_CANDIDATES_PER_SLOT:
            raise SlotCapacityError(f"Maximum of {MAX_CANDIDATES_PER_SLOT} options per position")
        self._slots[slot] = current + [player_id]
        return True

    def remove(self, slot: str, player_id: str) -> bool:
        current = self.candidates(slot)
        if player_id not in current:
            return False
        self._slots[slot] = [pid for pid in current if pid != player_id]
        return True

    def move(self, slot: str, from_index: int, to_index: int) -> bool:
        current = self.candidates(slot)
        size = len(current)
        if not (0 <= to_index < size) or not (0 <= from_index < size):
            return False
        if from_index == to_index:
            return False
        item = current.pop(from_index)
        current.insert(to_index, item)
        self._slots[slot] = current
        return True

    def promote(self, slot: str, index: int) -> bool:
        return self.move(slot, index, 0)

    def to_dict(self) -> Dict[str, List[str]]:
        return {slot: list(ids) for slot, ids in self._slots.items()}

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Sequence[str]]]) -> "ShadowSquad":
        return cls(data if isinstance(data, Mapping) else None)


def players_in_slot(squad: ShadowSquad, slot: str, players: Iterable[Player]) -> List[Player]:
    """Resolve ids in rank order, dropping ids with no matching player."""
    by_id = {p.id: p for p in players}
    return [by_id[pid] for pid in squad.candidates(slot) if pid in by_id]


def search_candidates(
    squad: ShadowSquad,
    slot: str,
    players: Iterable[Player],
    text: str = "",
    position: Optional[Position] = None,
) -> List[Player]:
    taken = set(squad.candidates(slot))
    needle = text.lower()
    results = []
    for p in players:
        if p.id in taken:
            continue
        if position is not None and p.position1 != position:
            continue
        if needle in p.name.lower() or needle in p.position1.value.lower() or needle in p.club.lower():
            results.append(p)
    return results


_locks: Dict[str, threading.Lock] = {}
_locks_guard = threading.Lock()


def _lock_for(key: str) -> threading.Lock:
    with _locks_guard:
        return _locks.setdefault(key, threading.Lock())


class ShadowTeamService:
    """Loads, mutates and durably saves one viewer's squad."""

    def __init__(self, store: KeyValueStore, viewer_id: str, prefix: str = "pvfc_shadow_team") -> None:
        self.store = store
        self.viewer_id = viewer_id
        self.key = f"{prefix}_{viewer_id}"

    def load(self) -> ShadowSquad:
        return ShadowSquad.from_dict(self.store.get(self.key))

    def _mutate(self, action: str, change: Callable[[ShadowSquad], bool]) -> ShadowSquad:
        with _lock_for(self.key):
            # load() raises on a failed read, so an unseen squad is never overwritten
            squad = self.load()
            if change(squad):
                self.store.set(self.key, squad.to_dict())
                logger.info("Shadow team %s updated (%s)", self.viewer_id, action)
            return squad

    def add(self, slot: str, player_id: str) -> ShadowSquad:
        return self._mutate("add", lambda s: s.add(slot, player_id))

    def remove(self, slot: str, player_id: str) -> ShadowSquad:
        return self._mutate("remove", lambda s: s.remove(slot, player_id))

    def move(self, slot: str, from_index: int, to_index: int) -> ShadowSquad:
        return self._mutate("move", lambda s: s.move(slot, from_index, to_index))

    def promote(self, slot: str, index: int) -> ShadowSquad:
        return self._mutate("promote", lambda s: s.promote(slot, index))
