"""Properties every resolved play must hold, checked across seeds and calls."""

import copy
import dataclasses

import pytest

from sandlot.core.enums import PlayOutcome
from sandlot.core.field import FIELD_LENGTH, FIELD_WIDTH
from sandlot.core.rng import SimRandom
from sandlot.engine.play import resolve_play
from sandlot.engine.recorder import EventType
from sandlot.engine.setup import FieldContext

PLAYS = [
    ("Balanced_InsideZone", "Balanced"),
    ("Balanced_StretchRight", "Balanced"),
    ("Balanced_Slants", "Balanced"),
    ("Balanced_Sluggo_Shot", "Balanced"),
    ("Spread_FourVerts", "Spread"),
    ("Spread_BubbleScreen", "Spread"),
    ("Power_Counter", "Power"),
    ("Power_PA_Leak", "Power"),
    ("Empty_AllGo", "Empty"),
]
DEFENSES = ["3-1-3", "4-1-2", "3-0-4", "4-2-1"]
SEEDS = range(6)


def _teams(make_team, formation, defense, rating=60):
    return make_team("Comets", rating=rating, offense=formation), make_team("Sharks", rating=rating, defense=defense)


class TestDeterminism:
    """Same inputs, same play."""

    @pytest.mark.parametrize("play_key,formation", PLAYS)
    def test_same_seed_same_result(self, make_team, tables, config, play_key, formation):
        offense, defense = _teams(make_team, formation, "3-1-3")
        first = resolve_play(copy.deepcopy(offense), copy.deepcopy(defense), play_key,
                             FieldContext(), SimRandom(42), tables, config)
        second = resolve_play(copy.deepcopy(offense), copy.deepcopy(defense), play_key,
                              FieldContext(), SimRandom(42), tables, config)
        assert first.to_dict() == second.to_dict()


class TestResultShape:
    """Frames, log and yards stay consistent."""

    @pytest.mark.parametrize("play_key,formation", PLAYS)
    @pytest.mark.parametrize("defense_formation", DEFENSES)
    def test_frames_follow_the_log(self, make_team, tables, config, play_key, formation, defense_formation):
        for seed in SEEDS:
            offense, defense = _teams(make_team, formation, defense_formation)
            result = resolve_play(offense, defense, play_key, FieldContext(), SimRandom(seed), tables, config)

            assert result.frames
            indexes = [f.log_index for f in result.frames]
            assert indexes == sorted(indexes)
            assert all(-1 <= i < len(result.log) for i in indexes)
            ticks = [f.tick for f in result.frames]
            assert ticks == sorted(ticks)
            assert result.frames[-1].tick == result.ticks
            assert result.ticks <= config.max_ticks

    @pytest.mark.parametrize("ball_on", [1, 50, 97])
    @pytest.mark.parametrize("play_key,formation", PLAYS)
    def test_everything_stays_on_the_field(self, make_team, tables, config, play_key, formation, ball_on):
        for seed in SEEDS:
            offense, defense = _teams(make_team, formation, "3-1-3")
            result = resolve_play(offense, defense, play_key, FieldContext(ball_on=ball_on),
                                  SimRandom(seed), tables, config)
            for frame in result.frames:
                assert 0.0 <= frame.ball.x <= FIELD_WIDTH
                assert 0.0 <= frame.ball.y <= FIELD_LENGTH
                assert frame.ball.z >= 0.0
                for p in frame.players:
                    assert 0.0 <= p.x <= FIELD_WIDTH
                    assert 0.0 <= p.y <= FIELD_LENGTH

    @pytest.mark.parametrize("ball_on", [2, 50, 96])
    @pytest.mark.parametrize("play_key,formation", PLAYS)
    def test_yards_respect_the_goal_lines(self, make_team, tables, config, play_key, formation, ball_on):
        for seed in SEEDS:
            offense, defense = _teams(make_team, formation, "3-1-3")
            result = resolve_play(offense, defense, play_key, FieldContext(ball_on=ball_on),
                                  SimRandom(seed), tables, config)
            assert -ball_on <= result.yards <= 100 - ball_on
            if result.touchdown:
                assert result.yards == 100 - ball_on
                assert not result.turnover
            if result.incomplete or result.outcome == PlayOutcome.INTERCEPTION:
                assert result.yards == 0

    @pytest.mark.parametrize("play_key,formation", PLAYS)
    def test_one_time_events_happen_once(self, make_team, tables, config, play_key, formation):
        for seed in SEEDS:
            offense, defense = _teams(make_team, formation, "4-1-2")
            result = resolve_play(offense, defense, play_key, FieldContext(), SimRandom(seed), tables, config)
            catches = result.events_of(EventType.CATCH) + result.events_of(EventType.INTERCEPTION)
            assert len(catches) <= 1
            assert len(result.events_of(EventType.SACK)) <= 1
            assert len(result.events_of(EventType.TOUCHDOWN)) <= 1
            assert len(result.events_of(EventType.THROW)) <= 1

    @pytest.mark.parametrize("play_key,formation", PLAYS)
    @pytest.mark.parametrize("defense_formation", DEFENSES)
    def test_loose_ball_events_show_a_loose_ball(self, make_team, tables, config, play_key, formation,
                                                 defense_formation):
        """After a swat, drop or fumble some frame shows the ball on the loose."""
        for seed in range(12):
            offense, defense = _teams(make_team, formation, defense_formation)
            result = resolve_play(offense, defense, play_key, FieldContext(), SimRandom(seed), tables, config)
            loose = (result.events_of(EventType.SWAT) + result.events_of(EventType.DROP)
                     + result.events_of(EventType.FUMBLE))
            for event in loose:
                assert any(f.log_index >= event.index and f.ball.is_loose for f in result.frames)

    @pytest.mark.parametrize("play_key,formation", PLAYS)
    @pytest.mark.parametrize("defense_formation", DEFENSES)
    def test_catches_and_interceptions_show_a_held_ball(self, make_team, tables, config, play_key, formation,
                                                        defense_formation):
        """After a catch or interception some frame shows the ball in someone's hands."""
        for seed in range(12):
            offense, defense = _teams(make_team, formation, defense_formation)
            result = resolve_play(offense, defense, play_key, FieldContext(), SimRandom(seed), tables, config)
            for event in result.events_of(EventType.CATCH) + result.events_of(EventType.INTERCEPTION):
                assert any(f.log_index >= event.index and f.ball_secured for f in result.frames)

    @pytest.mark.parametrize("play_key,formation", PLAYS)
    def test_interceptions_report_the_return(self, make_team, tables, config, play_key, formation):
        for seed in range(12):
            offense, defense = _teams(make_team, formation, "3-1-3", rating=40)
            result = resolve_play(offense, defense, play_key, FieldContext(ball_on=30), SimRandom(seed),
                                  tables, config)
            if result.outcome != PlayOutcome.INTERCEPTION:
                assert result.return_yards == 0
                assert not result.defensive_touchdown
                continue
            assert result.turnover
            assert result.return_yards >= 0
            if result.defensive_touchdown:
                assert result.takeover_at is None
            else:
                assert 1 <= result.takeover_at <= 99


class TestSideEffects:
    """What a play may and may not change."""

    def test_caller_log_is_not_mutated(self, make_team, tables, config):
        offense, defense = _teams(make_team, "Balanced", "3-1-3")
        game_log = ["Weather: Sunny", "--- 1st & 10 from the own 20 ---"]
        result = resolve_play(offense, defense, "Balanced_Slants", FieldContext(game_log=game_log),
                              SimRandom(3), tables, config)

        assert game_log == ["Weather: Sunny", "--- 1st & 10 from the own 20 ---"]
        assert list(result.log[:2]) == game_log
        assert result.play_log == result.log[2:]
        assert result.play_log

    def test_result_is_immutable(self, make_team, tables, config):
        offense, defense = _teams(make_team, "Balanced", "3-1-3")
        result = resolve_play(offense, defense, "Balanced_InsideZone", FieldContext(), SimRandom(3), tables, config)
        with pytest.raises(dataclasses.FrozenInstanceError):
            result.yards = 99

    def test_participants_get_tired(self, make_team, tables, config):
        offense, defense = _teams(make_team, "Balanced", "3-1-3")
        resolve_play(offense, defense, "Balanced_Slants", FieldContext(), SimRandom(3), tables, config)
        assert all(p.fatigue > 0 for p in offense.roster)
        assert all(p.fatigue > 0 for p in defense.roster)

    def test_to_dict_is_plain(self, make_team, tables, config):
        offense, defense = _teams(make_team, "Balanced", "3-1-3")
        result = resolve_play(offense, defense, "Balanced_Slants", FieldContext(), SimRandom(3), tables, config)
        data = result.to_dict()
        assert data["play_key"] == "Balanced_Slants"
        assert isinstance(data["outcome"], str)
        assert isinstance(data["visualization_frames"], list)
        assert data["visualization_frames"][0]["players"][0]["id"]
        assert "frames" not in data
        assert data["return_yards"] == result.return_yards
        assert data["defensive_touchdown"] == result.defensive_touchdown
        assert data["takeover_at"] == result.takeover_at
