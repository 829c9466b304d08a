from __future__ import annotations

from datetime import date, datetime, timezone
from typing import List, Optional

from scout_desk.core.logger import get_logger
from scout_desk.schemas.player import Player
from scout_desk.services.age import process_players, with_derived_age
from scout_desk.services.repository import EntityRepository

logger = get_logger(__name__)

UNKNOWN_COMPETITION = "Não informada"


class PlayerNotFound(LookupError):
    pass


def prepare_for_save(player: Player, existing: Optional[Player] = None, now: Optional[datetime] = None) -> Player:
    """Normalise a submitted record before it replaces whatever is stored."""
    changes = {
        "competition": player.competition.strip() or UNKNOWN_COMPETITION,
        "age": None,
    }
    if player.created_at is None:
        changes["created_at"] = existing.created_at if existing and existing.created_at else (now or datetime.now(timezone.utc))
    return player.model_copy(update=changes)


class PlayerService:
    def __init__(self, repo: EntityRepository[Player]) -> None:
        self.repo = repo

    def list(self, today: Optional[date] = None) -> List[Player]:
        return process_players(self.repo.list(), today)

    def get(self, player_id: str, today: Optional[date] = None) -> Player:
        player = self.repo.get(player_id)
        if player is None:
            raise PlayerNotFound(f"Player {player_id} not found")
        return with_derived_age(player, today)

    def save(self, player: Player) -> Player:
        existing = self.repo.get(player.id)
        saved = self.repo.upsert(prepare_for_save(player, existing))
        logger.info("%s player %s (%s)", "Updated" if existing else "Created", saved.id, saved.name)
        return with_derived_age(saved)

    def delete(self, player_id: str) -> None:
        self.repo.delete(player_id)
