"""
Run play resolution.

Runs are settled in three phases, one play tick each:

    1. the line      every run blocker battles a front defender; the share
                     of won blocks decides big hole / crease / stuffed
    2. second level  a linebacker (or a box safety) tries to grapple, then
                     the carrier tries to break free
    3. the secondary a deep defender chases the carrier down or gets outrun

Each phase is animated in sub-steps that share the phase's tick number.
The QB sneak is a single strength contest against the best interior
defender.
"""

from __future__ import annotations

import logging
from typing import Optional

from sandlot.config import EngineConfig
from sandlot.core.enums import PlayOutcome, Position, Side
from sandlot.core.field import CENTER_X, zone_family
from sandlot.core.rng import SimRandom
from sandlot.core.vec2 import Vec2
from sandlot.engine.battle import contest, resolve_battle
from sandlot.engine.contact import finish_carry, nearest, run_to_spot, spot_for, steps_needed
from sandlot.engine.recorder import EventType, PlayRecorder
from sandlot.engine.setup import RUN_ASSIGNMENTS
from sandlot.engine.state import Action, Participant, PlayState, RunBlockBattle

logger = logging.getLogger(__name__)

BIG_HOLE_RATIO = 0.67
CREASE_RATIO = 0.34
RUN_STOP_BONUS = 5.0
SNEAK_PUSH_MARGIN = 15.0
MAX_SUBSTEPS = 60

FRONT_POSITIONS = (Position.DL, Position.LB)
BLOCKER_ORDER = {Position.OL: 0, Position.RB: 1, Position.WR: 2, Position.QB: 3}


def run_block_power(p: Participant) -> float:
    return p.rating("blocking") * 0.6 + p.rating("strength") * 0.4


def shed_power(p: Participant) -> float:
    return p.rating("block_shedding") * 0.6 + p.rating("strength") * 0.4


def find_carrier(state: PlayState) -> Optional[Participant]:
    """The back (or QB) given the run assignment, None if nobody has it."""
    for p in state.offense:
        if p.assignment in RUN_ASSIGNMENTS:
            return p
    return None


def _lane(carrier: Participant) -> float:
    return carrier.route_path[-1].x if carrier.route_path else carrier.pos.x


def _deep_defender(p: Participant) -> bool:
    return p.position == Position.DB and (
        p.zone is None or zone_family(p.zone) == "deep" or p.zone == "run_support"
    )


def init_run_blocks(state: PlayState, lane: Vec2) -> None:
    """Pair run blockers with the front: DL, then LB, edges first on outside runs."""
    blockers = [p for p in state.offense if p.action == Action.RUN_BLOCK]
    blockers.sort(key=lambda p: (BLOCKER_ORDER.get(p.position, 9), -run_block_power(p)))
    front = [d for d in state.defense if d.position in FRONT_POSITIONS]
    front += [d for d in state.defense if d.position == Position.DB and d.action == Action.RUN_FIT
              and d.zone != "run_support"]
    outside = state.play.zone == "outside"

    def order(d: Participant) -> tuple[int, float]:
        group = FRONT_POSITIONS.index(d.position) if d.position in FRONT_POSITIONS else len(FRONT_POSITIONS)
        # Edge defenders first on outside runs, otherwise whoever is nearest the hole
        reach = -abs(d.pos.x - CENTER_X) if outside else d.pos.distance_to(lane)
        return (group, reach)

    front.sort(key=order)

    for i, defender in enumerate(front):
        blocker = blockers[i] if i < len(blockers) else None
        state.run_block.append(RunBlockBattle(defender.id, blocker.id if blocker else None))


def _set_phase(state: PlayState, phase: int, recorder: PlayRecorder) -> None:
    state.tick = phase
    recorder.tick = phase


def _substeps(carrier: Participant, spot: Vec2, config: EngineConfig) -> int:
    return min(MAX_SUBSTEPS, max(config.run_phase_subticks, steps_needed(carrier, spot, config)))


def _advance(
    state: PlayState,
    carrier: Participant,
    pursuers: list[Participant],
    recorder: PlayRecorder,
    config: EngineConfig,
    lane_x: Optional[float] = None,
) -> None:
    spot = spot_for(state, carrier, lane_x)
    run_to_spot(state, carrier, spot, pursuers, recorder, config, _substeps(carrier, spot, config))


# =============================================================================
# Phases
# =============================================================================


def _phase_line(
    state: PlayState,
    carrier: Participant,
    recorder: PlayRecorder,
    rng: SimRandom,
    config: EngineConfig,
) -> None:
    run_stop = state.defensive_play is not None and state.defensive_play.run_stop
    for b in state.run_block:
        defender = state.get(b.defender_id)
        blocker = state.get(b.blocker_id)
        if blocker is None:
            b.won = False
            continue
        shed = shed_power(defender) + (RUN_STOP_BONUS if run_stop else 0.0)
        result = resolve_battle(run_block_power(blocker), shed, b.state, rng,
                                f"{blocker.name} vs {defender.name}", config)
        if result.favors_a:
            b.won = True
            blocker.is_engaged = True
            defender.is_engaged = True
        elif result.favors_b:
            b.won = False
            blocker.stunned_ticks = config.run_phase_subticks
        else:
            b.won = None
            blocker.is_engaged = True
            defender.is_engaged = True

    wins = sum(1.0 for b in state.run_block if b.won is True)
    wins += sum(0.5 for b in state.run_block if b.won is None)
    ratio = wins / len(state.run_block) if state.run_block else 1.0
    logger.debug(f"run blocking ratio {ratio:.2f}")

    if ratio >= BIG_HOLE_RATIO:
        state.yards += rng.randint(4, 8)
        recorder.log(f"{carrier.name} bursts through a big hole!", EventType.INFO, carrier.id)
        _advance(state, carrier, [], recorder, config, _lane(carrier))
    elif ratio >= CREASE_RATIO:
        state.yards += rng.randint(1, 4)
        recorder.log(f"{carrier.name} finds a small crease.", EventType.INFO, carrier.id)
        _advance(state, carrier, [], recorder, config, _lane(carrier))
    else:
        state.yards += rng.randint(-2, 0)
        losers = [state.get(b.defender_id) for b in state.run_block if b.won is False]
        tackler = max(losers, key=shed_power) if losers else nearest(state.defense, carrier.pos)
        recorder.log(f"{carrier.name} is stuffed at the line!", EventType.INFO, carrier.id)
        _advance(state, carrier, [tackler] if tackler else [], recorder, config, _lane(carrier))
        finish_carry(state, carrier, tackler, recorder, rng, config, PlayOutcome.RUN)


def _second_level(state: PlayState, carrier: Participant) -> Optional[Participant]:
    blocked = {b.defender_id for b in state.run_block if b.won is True}
    candidates = [
        d for d in state.defense
        if d.id not in blocked and d.stunned_ticks <= 0 and not _deep_defender(d)
        and d.position in (Position.LB, Position.DB)
    ]
    linebackers = [d for d in candidates if d.position == Position.LB]
    return nearest(linebackers or candidates, carrier.pos)


def _phase_second_level(
    state: PlayState,
    carrier: Participant,
    recorder: PlayRecorder,
    rng: SimRandom,
    config: EngineConfig,
) -> None:
    tackler = _second_level(state, carrier)
    if tackler is None:
        state.yards += rng.randint(2, 5)
        recorder.log(f"{carrier.name} gets to the second level untouched.", EventType.INFO, carrier.id)
        _advance(state, carrier, [], recorder, config)
        return

    grapple = contest(
        (tackler.rating("tackling") + tackler.rating("speed")) / 2,
        (carrier.rating("agility") + carrier.rating("speed")) / 2,
        rng, config.contest_noise,
    )
    if grapple <= 0:
        state.yards += rng.randint(5, 12)
        tackler.stunned_ticks = MAX_SUBSTEPS
        recorder.log(f"{carrier.name} slips past {tackler.name}!", EventType.BROKEN_TACKLE, carrier.id)
        _advance(state, carrier, [], recorder, config)
        return

    escape = contest(
        carrier.rating("strength"),
        (tackler.rating("strength") + tackler.rating("tackling")) / 2,
        rng, config.contest_noise,
    )
    if escape > 0:
        state.yards += rng.randint(1, 3)
        recorder.log(f"{carrier.name} drags {tackler.name} for extra yards.", EventType.INFO, carrier.id)
    _advance(state, carrier, [tackler], recorder, config)
    finish_carry(state, carrier, tackler, recorder, rng, config, PlayOutcome.RUN)


def _phase_secondary(
    state: PlayState,
    carrier: Participant,
    recorder: PlayRecorder,
    rng: SimRandom,
    config: EngineConfig,
) -> None:
    safeties = [d for d in state.defense if _deep_defender(d) and d.stunned_ticks <= 0]
    safety = nearest(safeties, carrier.pos)
    if safety is None:
        state.yards += rng.randint(15, 40)
        recorder.log(f"{carrier.name} is gone! Nobody is home deep.", EventType.INFO, carrier.id)
        _advance(state, carrier, [], recorder, config)
        finish_carry(state, carrier, None, recorder, rng, config, PlayOutcome.RUN)
        return

    chase = contest(safety.rating("speed"), carrier.rating("speed"), rng, config.contest_noise)
    if chase > 0:
        state.yards += rng.randint(1, 4)
        recorder.log(f"{safety.name} takes a good angle on {carrier.name}.", EventType.INFO, safety.id)
    else:
        state.yards += rng.randint(10, 30)
        recorder.log(f"{carrier.name} outruns {safety.name}!", EventType.BROKEN_TACKLE, carrier.id)
    _advance(state, carrier, [safety], recorder, config)
    finish_carry(state, carrier, safety, recorder, rng, config, PlayOutcome.RUN)


def run_run_play(
    state: PlayState,
    carrier: Participant,
    recorder: PlayRecorder,
    rng: SimRandom,
    config: EngineConfig,
) -> None:
    """Hand off and settle the run phase by phase."""
    qb = state.quarterback()
    state.rusher_id = carrier.id
    if qb is not None and qb is not carrier:
        recorder.log(f"{qb.name} hands off to {carrier.name}.", EventType.HANDOFF, carrier.id)
        qb.action = Action.IDLE
    state.hand_off(carrier)
    recorder.record_frame(state)

    init_run_blocks(state, Vec2(_lane(carrier), state.line_of_scrimmage))

    for phase, resolve in enumerate((_phase_line, _phase_second_level, _phase_secondary), start=1):
        if not state.is_live:
            break
        _set_phase(state, phase, recorder)
        resolve(state, carrier, recorder, rng, config)
    if state.is_live:
        state.end(PlayOutcome.RUN)


def resolve_qb_sneak(state: PlayState, recorder: PlayRecorder, rng: SimRandom, config: EngineConfig) -> None:
    """QB keeps it and pushes into the best interior defender."""
    qb = state.quarterback()
    state.rusher_id = qb.id
    state.hand_off(qb)
    recorder.log(f"{qb.name} keeps it on the sneak.", EventType.SNAP, qb.id)
    recorder.record_frame(state)
    _set_phase(state, 1, recorder)

    front = (
        state.with_position(Side.DEFENSE, Position.DL)
        or state.with_position(Side.DEFENSE, Position.LB)
        or state.defense
    )
    defender = max(front, key=lambda d: (d.rating("strength") + d.rating("block_shedding")) / 2, default=None)

    if defender is None:
        state.yards = 2
        recorder.log(f"{qb.name} walks in behind the center.", EventType.INFO, qb.id)
    else:
        margin = contest(
            qb.rating("strength"),
            (defender.rating("strength") + defender.rating("block_shedding")) / 2,
            rng, config.contest_noise,
        )
        if margin > 0:
            state.yards = rng.randint(1, 3) + (1 if margin > SNEAK_PUSH_MARGIN else 0)
            recorder.log(f"{qb.name} pushes the pile forward!", EventType.INFO, qb.id)
        else:
            state.yards = rng.randint(-1, 0)
            recorder.log(f"{defender.name} stands {qb.name} up at the line.", EventType.INFO, defender.id)

    _advance(state, qb, [defender] if defender else [], recorder, config)
    finish_carry(state, qb, defender, recorder, rng, config, PlayOutcome.SNEAK)
    logger.debug(f"QB sneak by {qb.name}: {state.yards:+.0f}")
