from __future__ import annotations

from typing import Iterable, List

from scout_desk.schemas.filters import FilterState
from scout_desk.schemas.player import Player


def _matches_search(player: Player, search: str) -> bool:
    needle = search.lower()
    return needle in player.name.lower() or needle in player.club.lower()


def _matches_age(player: Player, state: FilterState) -> bool:
    if player.age is None:
        return False
    # Inverted ranges are tolerated and simply match nobody
    return state.min_age <= player.age <= state.max_age


def matches(player: Player, state: FilterState) -> bool:
    """True when player satisfies every constrained field of the filter."""
    return (
        _matches_search(player, state.search)
        and (not state.positions or player.position1 in state.positions)
        and _matches_age(player, state)
        and (not state.recommendations or player.recommendation in state.recommendations)
        and (not state.competitions or player.competition in state.competitions)
        and (not state.scout_years or player.scout_year in state.scout_years)
        and (not state.feet or player.foot in state.feet)
    )


def filter_players(players: Iterable[Player], state: FilterState) -> List[Player]:
    """Visible subset of players, in input order."""
    return [p for p in players if matches(p, state)]


def distinct_competitions(players: Iterable[Player]) -> List[str]:
    return sorted({p.competition for p in players if p.competition})


def distinct_scout_years(players: Iterable[Player]) -> List[int]:
    return sorted({p.scout_year for p in players}, reverse=True)
