"""Shared per-tick movement, ball carrying and tackling.

Used by both the pass and the run resolvers: moving everybody one step,
wearing players down, running a ball carrier to the spot where contact
ends the play, and the fumble check on every tackle.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, Optional

from sandlot.config import EngineConfig
from sandlot.core.enums import PlayOutcome
from sandlot.core.field import GOAL_LINE_Y, clamp_to_field
from sandlot.core.rng import SimRandom
from sandlot.core.vec2 import Vec2
from sandlot.engine.physics import fatigue_modifier, speed_to_yps, update_position
from sandlot.engine.recorder import EventType, PlayRecorder
from sandlot.engine.state import Action, Participant, PlayState

logger = logging.getLogger(__name__)

FUMBLE_RECOVERY_CHANCE = 0.5


# =============================================================================
# Movement
# =============================================================================


def apply_fatigue(state: PlayState, config: EngineConfig) -> None:
    """Wear every participant down by one tick of effort."""
    for p in state:
        amount = config.fatigue_base
        if p.current_speed > 0:
            amount += config.fatigue_running
        if p.is_engaged or p.action in (Action.PASS_BLOCK, Action.RUN_BLOCK):
            amount += config.fatigue_blocking
        p.player.add_fatigue(amount)
        p.fatigue_modifier = fatigue_modifier(p.player.fatigue, p.player.attr("stamina", 50))


def step(state: PlayState, config: EngineConfig) -> None:
    """Move everyone one tick, keep the ball with its carrier, count stuns down."""
    for p in state:
        if p.action == Action.ROUTE:
            p.follow_path(config.arrival_radius)
        update_position(p, config)
    carrier = state.ball_carrier()
    if carrier is not None and not state.ball.in_air and not state.ball.is_loose:
        state.ball.carry_with(carrier)
    apply_fatigue(state, config)
    for p in state:
        if p.stunned_ticks > 0:
            p.stunned_ticks -= 1


def pursue(pursuers: Iterable[Participant], target: Vec2) -> None:
    for p in pursuers:
        if p.stunned_ticks <= 0:
            p.is_engaged = False
            p.action = Action.PURSUIT
            p.set_target(target)


def spot_for(state: PlayState, carrier: Participant, x: Optional[float] = None) -> Vec2:
    """Where the carrier ends up given the yards gained so far."""
    y = min(state.line_of_scrimmage + state.yards, GOAL_LINE_Y + 1.0)
    return clamp_to_field(Vec2(carrier.pos.x if x is None else x, y))


def steps_needed(carrier: Participant, spot: Vec2, config: EngineConfig) -> int:
    yps = speed_to_yps(carrier.player.attr("speed", 50), config) * carrier.fatigue_modifier
    per_step = max(0.1, yps * config.tick_seconds)
    return int(math.ceil(carrier.pos.distance_to(spot) / per_step)) + 1


def run_to_spot(
    state: PlayState,
    carrier: Participant,
    spot: Vec2,
    pursuers: list[Participant],
    recorder: PlayRecorder,
    config: EngineConfig,
    max_steps: int,
) -> None:
    """
    Sub-step the carrier to `spot` with pursuers closing in, one frame per
    step. The play tick is left alone; run phases share a tick number.
    """
    carrier.action = Action.CARRY
    carrier.set_target(spot)
    for _ in range(max(1, max_steps)):
        pursue(pursuers, carrier.pos)
        step(state, config)
        recorder.record_frame(state)
        if carrier.pos.distance_to(spot) <= config.arrival_radius:
            break
    carrier.pos = carrier.target
    state.ball.carry_with(carrier)


# =============================================================================
# Tackles
# =============================================================================


def credit_tackle(state: PlayState, tackler: Optional[Participant]) -> None:
    if tackler is not None and tackler.id not in state.tackler_ids:
        state.tackler_ids.append(tackler.id)


def check_fumble(
    state: PlayState,
    carrier: Participant,
    tackler: Optional[Participant],
    recorder: PlayRecorder,
    rng: SimRandom,
    config: EngineConfig,
) -> bool:
    """
    Roll for a fumble on contact. Returns True if the ball came out.

    A hard hitter against a weak carrier fumbles more often.
    """
    if tackler is None:
        return False
    chance = config.fumble_chance * (tackler.rating("strength") + 50) / (carrier.rating("strength") + 50)
    if not rng.chance(chance):
        return False
    if not state.once(f"fumble:{carrier.id}"):
        return False

    state.fumbler_id = carrier.id
    carrier.release_ball()
    ball = state.ball
    ball.is_loose = True
    ball.carrier_id = None
    ball.target_player_id = None
    ball.last_interaction = "fumble"
    ball.place(carrier.pos, 0.0)
    recorder.log(f"FUMBLE! {carrier.name} loses the ball on the hit by {tackler.name}!",
                 EventType.FUMBLE, carrier.id)
    recorder.record_frame(state)

    if rng.chance(FUMBLE_RECOVERY_CHANCE):
        state.turnover = True
        state.outcome = PlayOutcome.FUMBLE
        recorder.log(f"{tackler.name} recovers for the defense!", EventType.TURNOVER, tackler.id)
    else:
        recorder.log(f"{carrier.name} falls on the loose ball.", EventType.INFO, carrier.id)
        ball.is_loose = False
        carrier.take_ball()
        ball.secure(carrier, z=0.3)
    logger.debug(f"Fumble by {carrier.name}, turnover={state.turnover}")
    return True


def finish_carry(
    state: PlayState,
    carrier: Participant,
    tackler: Optional[Participant],
    recorder: PlayRecorder,
    rng: SimRandom,
    config: EngineConfig,
    outcome: PlayOutcome,
) -> None:
    """End a carry at the current spot: a score, or a tackle with a fumble check."""
    if state.ball_on + state.yards >= 100:
        state.end(outcome)
        return
    gain = int(round(state.yards))
    if tackler is not None:
        credit_tackle(state, tackler)
        recorder.log(f"{carrier.name} is brought down by {tackler.name} after a gain of {gain}.",
                     EventType.TACKLE, tackler.id)
        carrier.action = Action.DOWN
        check_fumble(state, carrier, tackler, recorder, rng, config)
    else:
        recorder.log(f"{carrier.name} is pushed out of bounds after a gain of {gain}.", EventType.TACKLE)
        carrier.action = Action.DOWN
    state.end(outcome if not state.turnover else PlayOutcome.FUMBLE)


def nearest(candidates: Iterable[Participant], point: Vec2) -> Optional[Participant]:
    """Closest participant to a point (first one wins ties)."""
    best = None
    best_distance = float("inf")
    for p in candidates:
        d = p.pos.distance_to(point)
        if d < best_distance:
            best, best_distance = p, d
    return best
