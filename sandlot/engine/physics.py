"""Movement and ball flight.

Players move in straight lines toward their current target at a speed
derived from the speed rating and worn down by fatigue. The ball flies on
a simple ballistic arc and is kept inside the field rectangle at every
step.
"""

from __future__ import annotations

from typing import Optional

from sandlot.config import EngineConfig, get_config
from sandlot.core.field import clamp_to_field
from sandlot.core.vec2 import Vec2
from sandlot.engine.state import BallState, Participant

GRAVITY = 10.7  # yd/s^2
RELEASE_HEIGHT = 2.0
CATCH_HEIGHT = 1.5
MIN_FATIGUE_MODIFIER = 0.3


# =============================================================================
# Players
# =============================================================================


def speed_to_yps(speed: float, config: Optional[EngineConfig] = None) -> float:
    """Map a 1-99 speed rating linearly onto [min_speed_yps, max_speed_yps]."""
    config = config or get_config()
    rating = min(99.0, max(1.0, speed))
    return config.min_speed_yps + (rating - 1.0) / 98.0 * (config.max_speed_yps - config.min_speed_yps)


def fatigue_modifier(fatigue: float, stamina: float) -> float:
    """Multiplier in [0.3, 1.0]; high stamina slows the falloff."""
    stamina = max(1.0, stamina)
    return max(MIN_FATIGUE_MODIFIER, 1.0 - fatigue / (stamina * 3.0))


def update_position(participant: Participant, config: Optional[EngineConfig] = None) -> float:
    """
    Advance a participant one tick toward their target.

    Returns the speed used (yd/s), which is also stored on the participant.
    """
    config = config or get_config()
    if not participant.can_move:
        participant.current_speed = 0.0
        return 0.0

    remaining = participant.pos.distance_to(participant.target)
    if remaining <= config.arrival_radius:
        participant.pos = participant.target
        participant.current_speed = 0.0
        return 0.0

    yps = speed_to_yps(participant.player.attr("speed", 50), config) * participant.fatigue_modifier
    step = yps * config.tick_seconds
    participant.pos = clamp_to_field(participant.pos.move_toward(participant.target, step))
    participant.current_speed = yps
    return yps


# =============================================================================
# Ball
# =============================================================================


def throw_speed(strength: float) -> float:
    """Ball speed (yd/s) for a passer; youth arms top out around 26 yd/s."""
    return 16.0 + max(0.0, min(99.0, strength)) / 10.0


def launch_ball(ball: BallState, origin: Vec2, landing: Vec2, speed: float) -> float:
    """
    Put the ball in the air from `origin` toward `landing`.

    Velocities are set so the arc comes down to catch height exactly when
    it reaches the landing point. Returns the flight time in seconds.
    """
    landing = clamp_to_field(landing)
    distance = origin.distance_to(landing)
    duration = max(0.3, distance / max(speed, 1.0))
    ball.place(origin, RELEASE_HEIGHT)
    ball.vx = (landing.x - origin.x) / duration
    ball.vy = (landing.y - origin.y) / duration
    ball.vz = (CATCH_HEIGHT - RELEASE_HEIGHT + 0.5 * GRAVITY * duration * duration) / duration
    ball.in_air = True
    ball.is_loose = False
    ball.carrier_id = None
    ball.landing = landing
    ball.flight_elapsed = 0.0
    ball.flight_duration = duration
    return duration


def advance_ball(ball: BallState, dt: float) -> bool:
    """
    Integrate an in-flight ball by one tick.

    Returns True when the ball has reached its landing point; it is then
    parked exactly on the landing point at catch height.
    """
    ball.flight_elapsed += dt
    if ball.landing is not None and ball.flight_elapsed >= ball.flight_duration - 1e-9:
        ball.place(ball.landing, CATCH_HEIGHT)
        return True
    ball.place(Vec2(ball.x + ball.vx * dt, ball.y + ball.vy * dt))
    ball.z = max(0.0, ball.z + ball.vz * dt)
    ball.vz -= GRAVITY * dt
    return False


def advance_loose_ball(ball: BallState, dt: float) -> bool:
    """
    Integrate a loose (deflected, dropped, fumbled) ball by one tick.

    Returns True once it is on the ground; it then stops dead.
    """
    ball.place(Vec2(ball.x + ball.vx * dt, ball.y + ball.vy * dt))
    ball.z = ball.z + ball.vz * dt
    ball.vz -= GRAVITY * dt
    if ball.z <= 0.0:
        ball.z = 0.0
        ball.vx = ball.vy = ball.vz = 0.0
        return True
    return False
