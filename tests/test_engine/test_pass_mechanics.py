"""Tests for pass-play building blocks."""

import pytest

from sandlot.config import EngineConfig
from sandlot.core.enums import PlayOutcome, Side, Weather
from sandlot.core.field import END_ZONE_DEPTH
from sandlot.core.rng import SequenceRandom
from sandlot.core.vec2 import Vec2
from sandlot.engine.contact import check_fumble
from sandlot.engine.passing import (
    attempt_sack,
    handle_ball_arrival,
    init_pass_battles,
    pass_tick,
    select_target,
    should_throw,
    throw_ball,
    time_to_decide,
)
from sandlot.engine.recorder import EventType, PlayRecorder
from sandlot.engine.setup import FieldContext, setup_play


@pytest.fixture
def pass_setup(make_team, tables, config):
    """A Balanced_Slants snap between an elite offense and a weak defense."""
    offense = make_team("Comets", rating=95)
    defense = make_team("Sharks", rating=20)
    recorder = PlayRecorder()
    state = setup_play(offense, defense, "Balanced_Slants", FieldContext(), recorder, tables)
    init_pass_battles(state, config)
    return state, recorder



def _contested_throw(state, recorder, config, hands, defense):
    """Throw to WR1 with his defender draped on him; returns the coverage battle."""
    battle = next(b for b in state.coverage if state.get(b.receiver_id).slot == "WR1")
    throw_ball(state, state.quarterback(), battle, False, recorder, SequenceRandom([0.5]), config)
    state.ball.on_target = True
    state.weather = Weather.SUNNY
    battle.separation = 0.0
    state.get(battle.receiver_id).player.attributes.set("catching_hands", hands)
    defender = state.get(battle.primary_id)
    defender.player.attributes.set("catching_hands", defense)
    defender.player.attributes.set("agility", defense)
    return battle


def _play_out(state, recorder, rng, config):
    qb = state.quarterback()
    for _ in range(config.max_ticks):
        if not state.is_live:
            break
        state.tick += 1
        pass_tick(state, qb, recorder, rng, config)


class TestBattleSetup:
    """Tests for init_pass_battles()."""

    def test_every_rusher_and_receiver_is_paired(self, pass_setup):
        state, _ = pass_setup
        # Cover 1 Man: three rushers against three linemen, three route runners
        assert len(state.pass_rush) == 3
        assert all(not b.unblocked for b in state.pass_rush)
        assert len(state.coverage) == 3

    def test_man_coverage_follows_the_call(self, pass_setup):
        """Cover 1 puts DB1 on WR1."""
        state, _ = pass_setup
        wr1 = state.by_slot(Side.OFFENSE, "WR1")
        battle = next(b for b in state.coverage if b.receiver_id == wr1.id)
        primary = state.get(battle.primary_id)
        assert primary.slot == "DB1"


class TestDecision:
    """Tests for QB timing."""

    def test_smarter_qb_decides_sooner(self, pass_setup, config):
        state, _ = pass_setup
        qb = state.quarterback()
        qb.player.attributes.set("playbook_iq", 99)
        fast = time_to_decide(qb, config)
        qb.player.attributes.set("playbook_iq", 1)
        slow = time_to_decide(qb, config)
        assert fast == 6
        assert slow == 18

    def test_minimum_dropback_is_respected(self, pass_setup):
        state, _ = pass_setup
        qb = state.quarterback()
        assert time_to_decide(qb, EngineConfig(min_dropback_ticks=10)) == 10

    def test_pressure_forces_the_throw(self, pass_setup, config):
        state, _ = pass_setup
        assert should_throw(state, state.quarterback(), True, SequenceRandom([0.5]), config) == "pressure"

    def test_holds_during_dropback(self, pass_setup, config):
        state, _ = pass_setup
        state.tick = 1
        assert should_throw(state, state.quarterback(), False, SequenceRandom([0.0]), config) is None

    def test_target_prefers_read_order_on_ties(self, pass_setup):
        state, _ = pass_setup
        for b in state.coverage:
            b.separation = 3.0
        target = select_target(state)
        assert state.get(target.receiver_id).slot == "WR1"


class TestArrival:
    """Tests for handle_ball_arrival()."""

    def test_arrival_resolves_once(self, pass_setup, config):
        """A second arrival call for the same throw changes nothing."""
        state, recorder = pass_setup
        rng = SequenceRandom([0.5])
        qb = state.quarterback()
        throw_ball(state, qb, state.coverage[0], False, recorder, rng, config)
        assert recorder.count(EventType.THROW) == 1

        assert handle_ball_arrival(state, recorder, rng, config) is True
        entries = list(recorder.entries)
        assert handle_ball_arrival(state, recorder, rng, config) is False
        assert recorder.entries == entries

    def test_errant_throw_falls_incomplete(self, pass_setup, config):
        state, recorder = pass_setup
        rng = SequenceRandom([0.5])
        qb = state.quarterback()
        throw_ball(state, qb, state.coverage[0], False, recorder, rng, config)
        state.ball.on_target = False
        state.weather = Weather.SUNNY
        handle_ball_arrival(state, recorder, rng, config)
        assert state.incomplete
        assert not state.is_live

    def test_swat_resolves_once(self, pass_setup, config):
        """A second arrival call leaves the deflected ball and the log alone."""
        state, recorder = pass_setup
        _contested_throw(state, recorder, config, hands=10, defense=90)
        rng = SequenceRandom([0.5, 0.5, 0.99, 0.5])

        assert handle_ball_arrival(state, recorder, rng, config) is True
        ball = state.ball
        velocity = (ball.vx, ball.vy, ball.vz)
        entries = list(recorder.entries)
        assert recorder.count(EventType.SWAT) == 1
        assert velocity[2] == 3.0

        assert handle_ball_arrival(state, recorder, rng, config) is False
        assert (ball.vx, ball.vy, ball.vz) == velocity
        assert recorder.entries == entries
        assert ball.is_loose
        assert state.incomplete

    def test_close_contested_catch_is_dropped(self, pass_setup, config):
        """Losing the catch contest by a hair is a drop, not a swat."""
        state, recorder = pass_setup
        _contested_throw(state, recorder, config, hands=50, defense=52)
        rng = SequenceRandom([0.5, 0.5, 0.99, 0.5])

        handle_ball_arrival(state, recorder, rng, config)
        assert recorder.count(EventType.DROP) == 1
        assert recorder.count(EventType.SWAT) == 0
        assert state.ball.last_interaction == "drop"

    def test_drop_resolves_once(self, pass_setup, config):
        state, recorder = pass_setup
        _contested_throw(state, recorder, config, hands=50, defense=52)
        rng = SequenceRandom([0.5, 0.5, 0.99, 0.5])

        handle_ball_arrival(state, recorder, rng, config)
        ball = state.ball
        velocity = (ball.vx, ball.vy, ball.vz)
        entries = list(recorder.entries)
        assert velocity[2] == 1.5

        assert handle_ball_arrival(state, recorder, rng, config) is False
        assert (ball.vx, ball.vy, ball.vz) == velocity
        assert recorder.entries == entries
        assert recorder.count(EventType.DROP) == 1


class TestInterceptionReturn:
    """The defender who picks the ball off runs it back."""

    def test_return_ends_at_the_tackle(self, pass_setup, config):
        state, recorder = pass_setup
        battle = _contested_throw(state, recorder, config, hands=10, defense=90)
        defender = state.get(battle.primary_id)
        wr2 = state.by_slot(Side.OFFENSE, "WR2")
        for o in state.offense:
            o.pos = Vec2(5.0, 110.0)
        defender.pos = Vec2(40.0, 60.0)
        wr2.pos = Vec2(40.0, 57.0)
        rng = SequenceRandom([0.5, 0.5, 0.01, 0.5])

        handle_ball_arrival(state, recorder, rng, config)
        assert state.turnover
        assert state.is_live
        assert state.ball_carrier() is defender
        assert recorder.count(EventType.INTERCEPTION) == 1

        _play_out(state, recorder, rng, config)
        assert not state.is_live
        assert state.outcome == PlayOutcome.INTERCEPTION
        assert state.return_yards == 2
        assert not state.defensive_touchdown
        assert state.tackler_ids == [wr2.id]
        assert recorder.count(EventType.TACKLE) == 1

    def test_pick_six(self, pass_setup, config):
        """Nobody near the interception: the return goes the distance."""
        state, recorder = pass_setup
        battle = _contested_throw(state, recorder, config, hands=10, defense=90)
        defender = state.get(battle.primary_id)
        for o in state.offense:
            o.pos = Vec2(5.0, 110.0)
        defender.pos = Vec2(45.0, END_ZONE_DEPTH + 5)
        rng = SequenceRandom([0.5, 0.5, 0.01, 0.5])

        handle_ball_arrival(state, recorder, rng, config)
        _play_out(state, recorder, rng, config)

        assert state.defensive_touchdown
        assert state.return_yards == 5
        assert state.outcome == PlayOutcome.INTERCEPTION
        assert recorder.count(EventType.TOUCHDOWN) == 1
        assert state.ball.y < END_ZONE_DEPTH


class TestSack:
    """Tests for attempt_sack()."""

    def test_sack_happens_once(self, pass_setup, config):
        """Calling again after the sack adds no log line and no extra loss."""
        state, recorder = pass_setup
        qb = state.quarterback()
        for name in ("agility", "speed", "strength"):
            qb.player.attributes.set(name, 10)
        rusher = state.by_slot(Side.DEFENSE, "DL1")
        for name in ("agility", "speed", "strength", "tackling"):
            rusher.player.attributes.set(name, 90)
        rng = SequenceRandom([0.5])

        assert attempt_sack(state, qb, rusher, recorder, rng, config) is True
        yards = state.yards
        entries = list(recorder.entries)
        assert yards < 0

        assert attempt_sack(state, qb, rusher, recorder, rng, config) is True
        assert recorder.count(EventType.SACK) == 1
        assert state.yards == yards
        assert recorder.entries == entries
        assert state.outcome == PlayOutcome.SACK


class TestFumble:
    """Tests for check_fumble()."""

    def test_recovered_fumble_still_shows_the_loose_ball(self, pass_setup, config):
        """The offense falls on it, but a frame at the fumble shows it on the ground."""
        state, recorder = pass_setup
        carrier = state.by_slot(Side.OFFENSE, "WR1")
        tackler = state.by_slot(Side.DEFENSE, "DB1")
        state.hand_off(carrier)
        state.ball.secure(carrier)
        fumble_index = recorder.log_index + 1

        assert check_fumble(state, carrier, tackler, recorder, SequenceRandom([0.001, 0.99]), config)
        assert not state.turnover
        assert not state.ball.is_loose
        assert state.ball_carrier() is carrier
        assert any(f.log_index >= fumble_index and f.ball.is_loose for f in recorder.frames)

    def test_lost_fumble_is_a_turnover(self, pass_setup, config):
        state, recorder = pass_setup
        carrier = state.by_slot(Side.OFFENSE, "WR1")
        tackler = state.by_slot(Side.DEFENSE, "DB1")
        state.hand_off(carrier)
        state.ball.secure(carrier)

        assert check_fumble(state, carrier, tackler, recorder, SequenceRandom([0.001]), config)
        assert state.turnover
        assert state.outcome == PlayOutcome.FUMBLE
        assert recorder.count(EventType.TURNOVER) == 1
        assert recorder.frames[-1].ball.is_loose
