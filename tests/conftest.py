"""Shared pytest fixtures for Sandlot tests."""

import itertools

import pytest

from sandlot.config import EngineConfig, reset_config
from sandlot.core.attributes import UNSCALED_ATTRIBUTES, PlayerAttributes
from sandlot.core.enums import Side, Weather
from sandlot.core.models import Player, PlayerStats, Team, TeamFormations
from sandlot.core.rng import SimRandom
from sandlot.league.game import Breakthrough, GameResult
from sandlot.playbook.plays import PlaybookTables


RATED_ATTRIBUTES = tuple(n for n in PlayerAttributes().names() if n not in UNSCALED_ATTRIBUTES)


@pytest.fixture(autouse=True)
def _fresh_engine_config():
    """Every test starts and ends with the default global config."""
    reset_config()
    yield
    reset_config()


# =============================================================================
# Random / config / tables
# =============================================================================


@pytest.fixture
def rng() -> SimRandom:
    """Seeded random source."""
    return SimRandom(1234)


@pytest.fixture
def config() -> EngineConfig:
    """Default engine config (no environment overrides applied by tests)."""
    return EngineConfig()


@pytest.fixture
def tables() -> PlaybookTables:
    return PlaybookTables.default()


# =============================================================================
# Player / team factories
# =============================================================================


@pytest.fixture
def make_player():
    """
    Factory for players with predictable ids.

    make_player(rating=60, strength=90) sets every 1-99 rating to 60 and
    then applies the named overrides.
    """
    counter = itertools.count(1)

    def _make(name=None, rating=50, age=12, **overrides) -> Player:
        n = next(counter)
        values = {attr: rating for attr in RATED_ATTRIBUTES}
        values.update(overrides)
        return Player(
            id=f"p{n:03d}",
            name=name or f"Kid {n}",
            age=age,
            number=n,
            attributes=PlayerAttributes.from_flat(**values),
        )

    return _make


@pytest.fixture
def make_team(make_player, tables):
    """
    Factory for teams whose depth chart is filled in roster order.

    The same seven kids start on both sides of the ball, which is all a
    single play or a small game needs.
    """
    counter = itertools.count(1)

    def _make(
        name=None,
        rating=50,
        size=7,
        offense="Balanced",
        defense="3-1-3",
        **overrides,
    ) -> Team:
        n = next(counter)
        team = Team(
            id=f"t{n:02d}",
            name=name or f"Team {n}",
            formations=TeamFormations(offense, defense),
        )
        for _ in range(size):
            team.add_player(make_player(rating=rating, **overrides))
        for side, formation in (
            (Side.OFFENSE, tables.offense_formation(offense)),
            (Side.DEFENSE, tables.defense_formation(defense)),
        ):
            for slot, player in zip(formation.slots, team.roster):
                team.depth_chart.set(side, slot, player.id)
        return team

    return _make


# =============================================================================
# Finished games
# =============================================================================


@pytest.fixture
def finished_game(make_team):
    """A small hand-built game: one Comets touchdown drive."""
    home = make_team("Comets")
    away = make_team("Sharks")
    star = home.roster[0]
    line = PlayerStats(rush_attempts=3, rush_yards=25, touchdowns=1)
    return GameResult(
        home=home,
        away=away,
        home_score=7,
        away_score=0,
        weather=Weather.RAIN,
        log=[
            "Weather: Rain",
            "-- Drive 1 (H1): Comets ball on own 20 --",
            "--- 1st & 10 from the own 20 ---",
            f"TOUCHDOWN! {star.name} scores!",
            "1-point conversion GOOD!",
            "==== FINAL SCORE ==== Sharks 0 - Comets 7",
        ],
        breakthroughs=[Breakthrough(star.id, star.name, "Comets", "catching_hands")],
        box_score={
            "Comets": [{"id": star.id, "name": star.name, "number": star.number, **line.to_dict()}],
            "Sharks": [],
        },
        drives=1,
        play_count=1,
    )
