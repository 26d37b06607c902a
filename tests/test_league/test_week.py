"""Tests for week simulation and end-of-week upkeep."""

from sandlot.core.enums import StatusType
from sandlot.core.models import PlayerStatus
from sandlot.core.rng import SequenceRandom, SimRandom
from sandlot.league.game import end_week, simulate_week
from sandlot.league.generator import generate_league, generate_schedule


class TestSimulateWeek:
    """Tests for simulate_week()."""

    def test_plays_every_game(self, tables, config):
        teams = generate_league(SimRandom(21), num_teams=4, tables=tables)
        schedule = generate_schedule(teams)
        week = simulate_week(schedule[0], SimRandom(5), tables, config, week=1)

        assert len(week.games) == 2
        assert str(week) == "Week 1: 2 games"
        for team in teams:
            game = week.get_team_result(team.id)
            assert game is not None
            assert team in (game.home, game.away)
            assert all(p.fatigue == 0.0 for p in team.roster)
        assert week.get_team_result("nobody") is None

    def test_records_match_results(self, tables, config):
        teams = generate_league(SimRandom(22), num_teams=4, tables=tables)
        week = simulate_week(generate_schedule(teams)[0], SimRandom(6), tables, config)
        decided = sum(1 for g in week.games if not g.is_tie)
        assert sum(t.wins for t in teams) == decided
        assert sum(t.losses for t in teams) == decided

    def test_breakthroughs_collected_from_games(self, tables, config):
        teams = generate_league(SimRandom(23), num_teams=4, tables=tables)
        week = simulate_week(generate_schedule(teams)[0], SimRandom(7), tables, config)
        assert week.breakthroughs == [b for g in week.games for b in g.breakthroughs]


class TestEndWeek:
    """Tests for end_week()."""

    def test_temporary_players_leave(self, make_team, make_player):
        team = make_team("Comets")
        filler = make_player("Fill In")
        filler.status = PlayerStatus(StatusType.TEMPORARY, 0, "Emergency fill-in")
        team.add_player(filler)

        end_week([team], SequenceRandom([0.99]))
        assert filler not in team.roster
        assert len(team.roster) == 7

    def test_statuses_count_down(self, make_team):
        team = make_team("Comets")
        hurt, busy = team.roster[0], team.roster[1]
        hurt.status = PlayerStatus(StatusType.INJURED, 2, "Sprained Ankle")
        busy.status = PlayerStatus(StatusType.BUSY, 1, "School Project")
        team.roster[2].fatigue = 80.0

        end_week([team], SequenceRandom([0.99]))
        assert hurt.status.duration == 1
        assert hurt.status.type == StatusType.INJURED
        assert busy.status.type == StatusType.HEALTHY
        assert busy.is_available
        assert team.roster[2].fatigue == 0.0

    def test_weekly_events_sideline_healthy_kids(self, make_team):
        """A roll of 0.0 hits the first event for every healthy player."""
        team = make_team("Comets")
        hurt = team.roster[0]
        hurt.status = PlayerStatus(StatusType.INJURED, 3, "Jammed Finger")

        end_week([team], SequenceRandom([0.0]))
        assert hurt.status.description == "Jammed Finger"
        assert hurt.status.duration == 2
        for player in team.roster[1:]:
            assert player.status.type == StatusType.INJURED
            assert player.status.description == "Sprained Ankle"
            assert player.status.duration == 1
