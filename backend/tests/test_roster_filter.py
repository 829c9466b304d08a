import random

import pytest

from scout_desk.schemas.filters import SET_FIELDS, FilterState
from scout_desk.schemas.player import Foot, Position, Recommendation
from scout_desk.services.roster_filter import (
    distinct_competitions,
    distinct_scout_years,
    filter_players,
    matches,
)

COMPETITIONS = ["Capixaba", "Série D", "Copa SP", ""]


@pytest.fixture
def roster(make_player):
    return [
        make_player(name="Ana Souza", club="Vitória", position1=Position.ATA, age=19),
        make_player(name="Bruno Lima", club="Desportiva", position1=Position.ZAG, age=24),
        make_player(name="Carla Dias", club="Rio Branco", position1=Position.ATA, age=31),
    ]


def test_position_and_age_narrow_to_one(roster):
    state = FilterState(positions=[Position.ATA], min_age=18, max_age=25)
    assert [p.name for p in filter_players(roster, state)] == ["Ana Souza"]


def test_cleared_filter_shows_everyone(roster):
    assert filter_players(roster, FilterState.cleared()) == roster


def test_search_is_case_insensitive_on_name_or_club(roster):
    assert [p.name for p in filter_players(roster, FilterState(search="bruno"))] == ["Bruno Lima"]
    assert [p.name for p in filter_players(roster, FilterState(search="RIO"))] == ["Carla Dias"]


def test_inverted_age_range_matches_nobody(roster):
    assert filter_players(roster, FilterState(min_age=30, max_age=20)) == []


def test_player_without_age_fails_age_predicate(make_player):
    player = make_player(age=None)
    assert not matches(player, FilterState())


def test_toggle_adds_then_removes():
    state = FilterState().toggled("positions", "ATA")
    assert state.positions == [Position.ATA]
    assert state.toggled("positions", Position.ATA).positions == []


def test_toggle_rejects_scalar_fields():
    with pytest.raises(ValueError):
        FilterState().toggled("search", "x")


def test_distinct_competitions_sorted_without_blanks(make_player):
    players = [make_player(competition=c) for c in ["Série D", "Capixaba", "", "Capixaba"]]
    assert distinct_competitions(players) == ["Capixaba", "Série D"]


def test_distinct_scout_years_newest_first(make_player):
    players = [make_player(scout_year=y) for y in [2024, 2026, 2025, 2026]]
    assert distinct_scout_years(players) == [2026, 2025, 2024]


def _random_roster(rng, make_player, size):
    return [
        make_player(
            name=rng.choice(["Ana", "Beto", "Caio", "Duda"]) + f" {i}",
            club=rng.choice(["Vitória", "Serra", "Real Noroeste"]),
            position1=rng.choice(list(Position)),
            foot=rng.choice(list(Foot)),
            recommendation=rng.choice(list(Recommendation)),
            competition=rng.choice(COMPETITIONS),
            scout_year=rng.choice([2024, 2025, 2026]),
            age=rng.choice([None, 15, 17, 19, 22, 28, 35]),
        )
        for i in range(size)
    ]


def _random_filter(rng):
    def subset(options):
        return [o for o in options if rng.random() < 0.3]

    low, high = rng.randint(0, 40), rng.randint(0, 50)
    return FilterState(
        search=rng.choice(["", "a", "serra", "DUDA", "zz"]),
        positions=subset(list(Position)),
        min_age=low,
        max_age=high,
        recommendations=subset(list(Recommendation)),
        competitions=subset(COMPETITIONS),
        scout_years=subset([2024, 2025, 2026]),
        feet=subset(list(Foot)),
    )


def _reference(player, f):
    text = f.search.lower()
    if text not in player.name.lower() and text not in player.club.lower():
        return False
    if player.age is None or player.age < f.min_age or player.age > f.max_age:
        return False
    checks = [
        (f.positions, player.position1),
        (f.recommendations, player.recommendation),
        (f.competitions, player.competition),
        (f.scout_years, player.scout_year),
        (f.feet, player.foot),
    ]
    return all(not allowed or value in allowed for allowed, value in checks)


@pytest.mark.parametrize("seed", range(20))
def test_filter_agrees_with_per_field_predicates(seed, make_player):
    rng = random.Random(seed)
    players = _random_roster(rng, make_player, 30)
    state = _random_filter(rng)

    visible = filter_players(players, state)

    assert visible == [p for p in players if _reference(p, state)]
    assert filter_players(visible, state) == visible


@pytest.mark.parametrize("field", SET_FIELDS)
def test_each_set_field_is_toggleable(field):
    value = {
        "positions": "GOL",
        "recommendations": "Base",
        "competitions": "Capixaba",
        "scout_years": 2026,
        "feet": "Left",
    }[field]
    assert len(getattr(FilterState().toggled(field, value), field)) == 1
