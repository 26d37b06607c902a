"""Tests for player, team, league and schedule generation."""

import itertools

import pytest

from sandlot.core.attributes import UNSCALED_ATTRIBUTES, PlayerAttributes
from sandlot.core.rng import SimRandom
from sandlot.league.generator import (
    COACH_PROFILES,
    MAX_AGE,
    MIN_AGE,
    generate_league,
    generate_player,
    generate_schedule,
    generate_team,
)

RATED = [n for n in PlayerAttributes().names() if n not in UNSCALED_ATTRIBUTES]


class TestGeneratePlayer:
    """Tests for generate_player()."""

    @pytest.mark.parametrize("seed", range(25))
    def test_ratings_and_age_in_range(self, seed):
        player = generate_player(SimRandom(seed))
        assert MIN_AGE <= player.age <= MAX_AGE
        for name in RATED:
            assert 1 <= player.attr(name) <= 99, name
        assert player.potential in {"A", "B", "C", "D", "F"}
        assert len(player.name.split()) >= 2

    def test_same_seed_same_player(self):
        a = generate_player(SimRandom(8))
        b = generate_player(SimRandom(8))
        assert a.to_dict() == b.to_dict()

    def test_age_bounds_are_honored(self):
        rng = SimRandom(3)
        assert all(generate_player(rng, min_age=13, max_age=13).age == 13 for _ in range(5))


class TestGenerateTeam:
    """Tests for generate_team()."""

    def test_roster_and_numbers(self):
        team = generate_team("Comets", SimRandom(1), size=12)
        assert len(team.roster) == 12
        numbers = [p.number for p in team.roster]
        assert len(set(numbers)) == 12
        assert all(1 <= n <= 99 for n in numbers)
        assert all(p.team_id == team.id for p in team.roster)

    def test_lines_up_in_coach_formations(self):
        team = generate_team("Comets", SimRandom(2))
        assert team.coach.type in {c.type for c in COACH_PROFILES}
        assert team.formations.offense == team.coach.preferred_offense
        assert team.formations.defense == team.coach.preferred_defense
        assert team.depth_chart.offense

    def test_explicit_coach(self):
        coach = COACH_PROFILES[1].to_coach()
        team = generate_team("Comets", SimRandom(2), coach=coach)
        assert team.coach is coach
        assert team.formations.offense == "Power"

    @pytest.mark.parametrize("size", [0, -3])
    def test_size_must_be_positive(self, size):
        with pytest.raises(ValueError):
            generate_team("Comets", SimRandom(1), size=size)

    def test_deterministic(self):
        assert generate_team("A", SimRandom(4)).to_dict() == generate_team("A", SimRandom(4)).to_dict()


class TestGenerateLeague:
    """Tests for generate_league()."""

    def test_distinct_names(self):
        teams = generate_league(SimRandom(6), num_teams=6, roster_size=8)
        assert len(teams) == 6
        assert len({t.name for t in teams}) == 6
        assert len({t.id for t in teams}) == 6

    def test_needs_two_teams(self):
        with pytest.raises(ValueError):
            generate_league(SimRandom(6), num_teams=1)


class TestGenerateSchedule:
    """Tests for generate_schedule()."""

    def test_even_round_robin(self):
        teams = generate_league(SimRandom(7), num_teams=4, roster_size=7)
        schedule = generate_schedule(teams)

        assert len(schedule) == 3
        pairs = set()
        for week in schedule:
            assert len(week) == 2
            playing = [t.id for game in week for t in game]
            assert len(set(playing)) == 4
            pairs.update(frozenset((h.id, a.id)) for h, a in week)
        assert pairs == {frozenset((a.id, b.id)) for a, b in itertools.combinations(teams, 2)}

    def test_odd_count_gives_a_bye(self):
        teams = generate_league(SimRandom(7), num_teams=5, roster_size=7)
        schedule = generate_schedule(teams)
        assert len(schedule) == 5
        for week in schedule:
            assert len(week) == 2
        games_per_team = {t.id: 0 for t in teams}
        for week in schedule:
            for home, away in week:
                games_per_team[home.id] += 1
                games_per_team[away.id] += 1
        assert set(games_per_team.values()) == {4}

    def test_week_count_override(self):
        teams = generate_league(SimRandom(7), num_teams=4, roster_size=7)
        assert len(generate_schedule(teams, weeks=1)) == 1
