"""Tests for movement and ball flight."""

import pytest

from sandlot.core.enums import Side
from sandlot.core.field import FIELD_WIDTH
from sandlot.core.vec2 import Vec2
from sandlot.engine.physics import (
    CATCH_HEIGHT,
    advance_ball,
    advance_loose_ball,
    fatigue_modifier,
    launch_ball,
    speed_to_yps,
    throw_speed,
    update_position,
)
from sandlot.engine.state import BallState, Participant


def _participant(player, pos: Vec2, target: Vec2) -> Participant:
    return Participant(
        player=player, slot="WR1", side=Side.OFFENSE, assignment="Fly",
        pos=pos, start=pos, target=target,
    )


class TestSpeed:
    """Tests for rating to speed conversion."""

    @pytest.mark.parametrize("rating,expected", [(1, 4.5), (50, 6.25), (99, 8.0), (150, 8.0)])
    def test_speed_to_yps(self, rating, expected, config):
        assert speed_to_yps(rating, config) == pytest.approx(expected)

    def test_fatigue_modifier(self):
        assert fatigue_modifier(0, 50) == 1.0
        assert fatigue_modifier(30, 50) == pytest.approx(0.8)
        assert fatigue_modifier(150, 50) == pytest.approx(0.3)

    def test_stamina_slows_falloff(self):
        assert fatigue_modifier(40, 90) > fatigue_modifier(40, 30)


class TestUpdatePosition:
    """Tests for update_position()."""

    def test_moves_one_step(self, make_player, config):
        """A fresh sprinter covers speed * tick_seconds yards."""
        p = _participant(make_player(speed=99), Vec2(20, 30), Vec2(20, 40))
        assert update_position(p, config) == pytest.approx(8.0)
        assert p.pos.y == pytest.approx(30 + 8.0 * config.tick_seconds)

    def test_stunned_player_stays_put(self, make_player, config):
        p = _participant(make_player(), Vec2(20, 30), Vec2(20, 40))
        p.stunned_ticks = 2
        assert update_position(p, config) == 0.0
        assert p.pos == Vec2(20, 30)

    def test_engaged_player_stays_put(self, make_player, config):
        p = _participant(make_player(), Vec2(20, 30), Vec2(20, 40))
        p.is_engaged = True
        update_position(p, config)
        assert p.pos == Vec2(20, 30)

    def test_snaps_inside_arrival_radius(self, make_player, config):
        p = _participant(make_player(), Vec2(20, 30), Vec2(20, 30.1))
        assert update_position(p, config) == 0.0
        assert p.pos == Vec2(20, 30.1)


class TestBallFlight:
    """Tests for the ballistic ball."""

    def test_throw_speed(self):
        assert throw_speed(0) == pytest.approx(16.0)
        assert throw_speed(99) == pytest.approx(25.9)

    def test_flight_lands_on_the_spot(self):
        """The ball reaches its landing point at catch height and never dips below ground."""
        ball = BallState(x=26, y=30)
        duration = launch_ball(ball, Vec2(26, 30), Vec2(26, 50), 20.0)
        assert duration == pytest.approx(1.0)
        assert ball.in_air

        arrived = False
        for _ in range(20):
            arrived = advance_ball(ball, 0.15)
            assert ball.z >= 0.0
            if arrived:
                break
        assert arrived
        assert ball.pos == Vec2(26, 50)
        assert ball.z == pytest.approx(CATCH_HEIGHT)

    def test_landing_is_kept_on_the_field(self):
        ball = BallState(x=26, y=30)
        launch_ball(ball, Vec2(26, 30), Vec2(80, 40), 20.0)
        assert ball.landing.x < FIELD_WIDTH

    def test_loose_ball_comes_to_rest(self):
        ball = BallState(x=26, y=30, z=1.5, vx=1.0, vy=2.0, vz=2.0, is_loose=True)
        for _ in range(50):
            if advance_loose_ball(ball, 0.15):
                break
        assert ball.z == 0.0
        assert (ball.vx, ball.vy, ball.vz) == (0.0, 0.0, 0.0)
