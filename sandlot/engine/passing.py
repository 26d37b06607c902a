"""
Pass play resolution.

A pass play runs tick by tick until the ball is dead:

    pocket   rush battles, coverage battles, pressure/sack, QB decision
    flight   ball in the air, receiver and defenders work to the spot
    arrival  catch / drop / swat / interception (exactly once per throw)
    loose    a deflected or dropped ball falls to the ground
    carry    after a catch the receiver runs to the spot where contact ends it;
             after an interception the defender returns it the other way

Pass rush: each rusher is matched with a blocker (the best spare blocker
doubles the best rusher). Blockers are side A. A decisive blocker win
stuns the rusher for a few ticks; a rusher win frees him. Free rushers
pressure the QB after a short grace period.

Coverage: each receiver battles his primary defender (man assignment or
the zone defender whose zone the route attacks). Separation grows while
the receiver wins and shrinks while the defender does.
"""

from __future__ import annotations

import logging
from typing import Optional

from sandlot.config import EngineConfig
from sandlot.core.enums import PlayOutcome, Position, RouteDepth, Weather
from sandlot.core.field import END_ZONE_DEPTH, clamp_to_field, get_zone, zone_family
from sandlot.core.rng import SimRandom
from sandlot.core.vec2 import Vec2
from sandlot.engine.battle import BattleResult, BattleStatus, contest, resolve_battle
from sandlot.engine.contact import (
    check_fumble,
    credit_tackle,
    finish_carry,
    nearest,
    pursue,
    spot_for,
    step,
)
from sandlot.engine.physics import advance_ball, advance_loose_ball, launch_ball, speed_to_yps, throw_speed
from sandlot.engine.recorder import EventType, PlayRecorder
from sandlot.engine.state import (
    Action,
    CoverageBattle,
    Participant,
    PassRushBattle,
    PlayState,
)

logger = logging.getLogger(__name__)

MAX_SEPARATION = 10.0
UNCOVERED_GAIN = 1.5
WIN_BURST = 2.0
LOSS_PENALTY = 1.5
STREAK_STEP = 0.5
MAN_CUSHION = 0.5
ZONE_CUSHION = 1.5
UNCOVERED_CUSHION = 5.0
HELP_BONUS = 5.0
ZONE_MATCH_RANGE = 15.0

CONTEST_SEPARATION = 4.0
HELP_RANGE = 6.0
ERRANT_PICK_RANGE = 3.0
ERRANT_PICK_FACTOR = 0.3
DROP_DIFFICULTY = 30.0
DROP_MARGIN = 4.0
BREAK_MARGIN = 8.0
OPEN_FIELD_TACKLE_RANGE = 8.0

# (open field, broken tackle, won contact, lost contact) as randint ranges
YAC_GAINS = ((4, 12), (6, 15), (2, 6), (0, 2))
RETURN_GAINS = ((10, 30), (8, 20), (3, 8), (0, 3))

ACCURACY_BASE = 40.0
PRESSURE_PENALTY = 10.0
DEPTH_PENALTY = {RouteDepth.DEEP: 8.0, RouteDepth.MEDIUM: 3.0}
WIND_DEEP_PENALTY = 10.0
RAIN_DEEP_PENALTY = 6.0
RAIN_PENALTY = 3.0
RAIN_HANDS_PENALTY = 5.0

SPY_RELEASE_DELAY = 2


# =============================================================================
# Power formulas
# =============================================================================


def block_power(p: Participant) -> float:
    return p.rating("blocking") * 0.6 + p.rating("strength") * 0.4


def rush_power(p: Participant) -> float:
    return p.rating("block_shedding") * 0.6 + p.rating("strength") * 0.4


def route_power(p: Participant, progress: float) -> float:
    return (p.rating("speed") + p.rating("agility")) / 2 + progress * 10


def cover_power(p: Participant) -> float:
    return (p.rating("speed") + p.rating("agility")) / 2


def time_to_decide(qb: Participant, config: EngineConfig) -> int:
    """Ticks before the QB pulls the trigger regardless (smarter QBs are quicker)."""
    iq = qb.player.attr("playbook_iq", 50)
    ticks = config.decision_base_ticks + (100 - iq) / config.decision_iq_divisor
    return max(config.min_dropback_ticks, int(round(ticks)))


# =============================================================================
# Battle setup
# =============================================================================


def _route_runners(state: PlayState) -> list[Participant]:
    return [p for p in state.offense if p.action == Action.ROUTE and p.route is not None]


def init_pass_battles(state: PlayState, config: EngineConfig) -> None:
    """Pair rushers with blockers and receivers with defenders."""
    los = state.line_of_scrimmage
    runners = _route_runners(state)
    runner_slots = {p.slot for p in runners}

    for d in state.defense:
        # Run fits rush the passer; run support and orphaned man defenders drop underneath
        if d.action == Action.RUN_FIT and d.zone != "run_support":
            d.action = Action.PASS_RUSH
        elif d.action == Action.RUN_FIT or (d.action == Action.COVER_MAN and d.man_target not in runner_slots):
            d.action = Action.COVER_ZONE
            d.zone = "zone_short_middle"
            d.set_target(get_zone(d.zone).center(los))

    protectors = [
        p for p in state.offense
        if p.action in (Action.PASS_BLOCK, Action.RUN_BLOCK) and p.position in (Position.OL, Position.RB)
    ]
    rushers = [d for d in state.defense if d.action == Action.PASS_RUSH]
    protectors.sort(key=block_power, reverse=True)
    rushers.sort(key=rush_power, reverse=True)

    for i, rusher in enumerate(rushers):
        blocker_ids = [protectors[i].id] if i < len(protectors) else []
        state.pass_rush.append(PassRushBattle(rusher.id, blocker_ids))
        if blocker_ids:
            rusher.is_engaged = True
            protectors[i].is_engaged = True
    spare = protectors[len(rushers):]
    if spare and state.pass_rush:
        state.pass_rush[0].blocker_ids.append(spare[0].id)
        spare[0].is_engaged = True

    _init_coverage(state, runners)


def _init_coverage(state: PlayState, runners: list[Participant]) -> None:
    los = state.line_of_scrimmage
    zone_defenders = [d for d in state.defense if d.action == Action.COVER_ZONE]
    taken: set[str] = set()

    for rec in runners:
        landmark = rec.route_path[-1] if rec.route_path else rec.pos
        primary = next(
            (d for d in state.defense if d.action == Action.COVER_MAN and d.man_target == rec.slot),
            None,
        )
        cushion = MAN_CUSHION
        if primary is None:
            cushion = ZONE_CUSHION
            open_zones = [d for d in zone_defenders if d.id not in taken and d.zone]
            matching = [d for d in open_zones if zone_family(d.zone) in rec.route.zones]
            primary = min(
                matching,
                key=lambda d: get_zone(d.zone).center(los).distance_to(landmark),
                default=None,
            )
            if primary is None:
                fallback = nearest(open_zones, landmark)
                if fallback is not None and fallback.pos.distance_to(landmark) <= ZONE_MATCH_RANGE:
                    primary = fallback
            if primary is not None:
                taken.add(primary.id)

        battle = CoverageBattle(rec.id, [primary.id] if primary else [])
        battle.separation = cushion if primary else UNCOVERED_CUSHION
        if rec.route.is_deep:
            deep = [
                d for d in zone_defenders
                if d.zone and zone_family(d.zone) == "deep" and (primary is None or d.id != primary.id)
            ]
            helper = nearest(deep, landmark)
            if helper is not None:
                battle.help_ids.append(helper.id)
        state.coverage.append(battle)


# =============================================================================
# Pocket
# =============================================================================


def update_pass_rush(state: PlayState, recorder: PlayRecorder, rng: SimRandom, config: EngineConfig) -> None:
    """One round of every rush battle."""
    for b in state.pass_rush:
        rusher = state.get(b.rusher_id)
        if rusher is None or rusher.stunned_ticks > 0:
            continue
        if b.unblocked or b.beaten:
            b.free_ticks += 1
            rusher.is_engaged = False
            rusher.action = Action.PASS_RUSH
            continue

        blockers = [state.get(i) for i in b.blocker_ids if state.get(i) is not None]
        if not blockers:
            b.beaten = True
            continue
        block = max(block_power(bl) for bl in blockers)
        if b.double_team:
            block += config.double_team_bonus
        rush = rush_power(rusher)
        if state.play.play_action and state.tick <= config.play_action_ticks:
            rush -= config.play_action_bonus

        resolve_battle(block, rush, b.state, rng, f"{blockers[0].name} vs {rusher.name}", config)
        if b.state.status == BattleStatus.WIN_B:
            b.beaten = True
            rusher.is_engaged = False
            for bl in blockers:
                bl.is_engaged = False
                bl.stunned_ticks = 1
            if state.once(f"beat:{rusher.id}"):
                recorder.log(f"{rusher.name} beats {blockers[0].name} off the edge!",
                             EventType.PRESSURE, rusher.id)
        elif b.state.status == BattleStatus.WIN_A:
            rusher.stunned_ticks = config.stonewall_stun_ticks
            b.state.rearm()
            logger.debug(f"{blockers[0].name} stonewalls {rusher.name}")


def _release_spy(state: PlayState, qb: Participant, config: EngineConfig) -> None:
    if state.tick < config.min_dropback_ticks + SPY_RELEASE_DELAY:
        return
    for d in state.defense:
        if d.action == Action.SPY and state.once(f"spy:{d.id}"):
            d.action = Action.PASS_RUSH
            state.pass_rush.append(PassRushBattle(d.id, []))
            logger.debug(f"{d.name} leaves the spy and rushes {qb.name}")


def pressure_sources(state: PlayState, config: EngineConfig) -> list[Participant]:
    """Free rushers past the grace period, best rusher first."""
    sources = []
    for b in state.pass_rush:
        rusher = state.get(b.rusher_id)
        if rusher is None or rusher.stunned_ticks > 0:
            continue
        if (b.unblocked or b.beaten) and b.free_ticks > config.pressure_grace_ticks:
            sources.append(rusher)
    sources.sort(key=rush_power, reverse=True)
    return sources


def update_coverage(state: PlayState, recorder: PlayRecorder, rng: SimRandom, config: EngineConfig) -> None:
    """One round of every receiver/defender battle."""
    for b in state.coverage:
        rec = state.get(b.receiver_id)
        if rec is None:
            continue
        primary = state.get(b.primary_id)
        if primary is None:
            b.separation = min(MAX_SEPARATION, b.separation + UNCOVERED_GAIN)
            continue

        progress = rec.route.progress(state.tick)
        defense = cover_power(primary)
        if primary.stunned_ticks > 0:
            defense *= 0.5
        if b.help_ids and rec.route.is_deep:
            defense += HELP_BONUS
        result = resolve_battle(
            route_power(rec, progress), defense, b.state, rng,
            f"{rec.name} vs {primary.name}", config,
        )
        if b.state.status == BattleStatus.WIN_A:
            b.separation += WIN_BURST
            b.state.rearm()
        elif b.state.status == BattleStatus.WIN_B:
            b.separation -= LOSS_PENALTY
            b.state.rearm()
        elif result == BattleResult.SLIGHT_A:
            b.separation += STREAK_STEP * b.state.streak_a
        elif result == BattleResult.SLIGHT_B:
            b.separation -= STREAK_STEP * b.state.streak_b
        b.separation = max(0.0, min(MAX_SEPARATION, b.separation))


def open_receivers(state: PlayState, config: EngineConfig) -> list[CoverageBattle]:
    open_battles = []
    for b in state.coverage:
        rec = state.get(b.receiver_id)
        if rec is None:
            continue
        if b.separation >= config.open_separation and rec.route.progress(state.tick) >= 0.5:
            open_battles.append(b)
    return open_battles


def attempt_sack(
    state: PlayState,
    qb: Participant,
    rusher: Participant,
    recorder: PlayRecorder,
    rng: SimRandom,
    config: EngineConfig,
) -> bool:
    """
    Free rusher gets to the QB: evade, then wrap-up. Returns True on a sack.

    Losing both contests is a sack; the sack itself can only happen once.
    """
    if state.has_flag(f"sack:{qb.id}"):
        return True

    evade = contest(
        (qb.rating("agility") + qb.rating("speed")) / 2,
        (rusher.rating("speed") + rusher.rating("agility")) / 2,
        rng, config.contest_noise,
    )
    if evade > 0:
        rusher.stunned_ticks = max(rusher.stunned_ticks, 2)
        if state.once(f"evade:{rusher.id}"):
            recorder.log(f"{qb.name} sidesteps {rusher.name}!", EventType.PRESSURE, qb.id)
        return False

    wrap = contest(
        qb.rating("strength"),
        (rusher.rating("strength") + rusher.rating("tackling")) / 2,
        rng, config.contest_noise,
    )
    if wrap > 0:
        rusher.stunned_ticks = max(rusher.stunned_ticks, config.stonewall_stun_ticks)
        if state.once(f"escape:{rusher.id}"):
            recorder.log(f"{qb.name} breaks free from {rusher.name}'s grasp!", EventType.PRESSURE, qb.id)
        return False

    if not state.once(f"sack:{qb.id}"):
        return True
    loss = max(1, int(round(state.line_of_scrimmage - qb.pos.y))) + rng.randint(0, 3)
    state.yards = -loss
    state.sack = True
    state.sacker_id = rusher.id
    credit_tackle(state, rusher)
    rusher.pos = qb.pos
    qb.action = Action.DOWN
    recorder.log(f"SACK! {rusher.name} brings down {qb.name} for a loss of {loss}.", EventType.SACK, rusher.id)
    check_fumble(state, qb, rusher, recorder, rng, config)
    state.end(PlayOutcome.FUMBLE if state.turnover else PlayOutcome.SACK)
    return True


def should_throw(
    state: PlayState,
    qb: Participant,
    pressured: bool,
    rng: SimRandom,
    config: EngineConfig,
) -> Optional[str]:
    """Reason to release the ball this tick, or None to keep holding it."""
    if pressured:
        return "pressure"
    if state.tick < config.min_dropback_ticks:
        return None
    if state.tick >= config.throw_deadline_ticks or state.tick >= config.max_ticks - 1:
        return "deadline"
    if state.tick >= time_to_decide(qb, config):
        return "decision"
    if open_receivers(state, config) and rng.random() < config.open_throw_chance + state.tick * config.open_throw_ramp:
        return "open"
    return None


def select_target(state: PlayState) -> Optional[CoverageBattle]:
    """Most open receiver; read order breaks ties."""
    reads = list(state.play.read_progression)
    candidates = [b for b in state.coverage if state.get(b.receiver_id) is not None]
    if not candidates:
        return None

    def score(b: CoverageBattle) -> tuple[float, int]:
        rec = state.get(b.receiver_id)
        penalty = 0.75 * len(b.help_ids) if rec.route.is_deep else 0.0
        read_rank = reads.index(rec.slot) if rec.slot in reads else len(reads)
        return (b.separation - penalty, -read_rank)

    return max(candidates, key=score)


def throw_ball(
    state: PlayState,
    qb: Participant,
    battle: CoverageBattle,
    pressured: bool,
    recorder: PlayRecorder,
    rng: SimRandom,
    config: EngineConfig,
) -> None:
    """Accuracy roll, then put the ball in the air leading the receiver."""
    rec = state.get(battle.receiver_id)
    route = rec.route
    difficulty = ACCURACY_BASE + DEPTH_PENALTY.get(route.depth, 0.0)
    if pressured:
        difficulty += PRESSURE_PENALTY
    if state.weather == Weather.RAIN:
        difficulty += RAIN_PENALTY
    if route.is_deep and state.weather == Weather.WINDY:
        difficulty += WIND_DEEP_PENALTY
    elif route.is_deep and state.weather == Weather.RAIN:
        difficulty += RAIN_DEEP_PENALTY
    on_target = contest(qb.rating("throwing_accuracy"), difficulty, rng, config.contest_noise) > 0

    speed = throw_speed(qb.rating("strength"))
    flight = qb.pos.distance_to(rec.pos) / speed
    heading = (rec.target - rec.pos).normalized()
    run_speed = speed_to_yps(rec.player.attr("speed", 50), config) * rec.fatigue_modifier
    landing = rec.pos + heading * (run_speed * flight)
    if not on_target:
        sideways = rng.uniform(2.5, 4.5) * (1 if rng.chance(0.5) else -1)
        long_short = rng.uniform(2.0, 5.0) * (1 if rng.chance(0.5) else -1)
        landing = landing + Vec2(sideways, long_short)

    ball = state.ball
    launch_ball(ball, qb.pos, landing, speed)
    ball.throw_id += 1
    ball.thrower_id = qb.id
    ball.target_player_id = rec.id
    ball.on_target = on_target
    ball.last_interaction = None
    qb.release_ball()
    qb.action = Action.IDLE

    state.thrown = True
    state.passer_id = qb.id
    state.receiver_id = rec.id
    rec.set_target(ball.landing)
    suffix = " under pressure" if pressured else ""
    recorder.log(f"{qb.name} throws to {rec.name} on the {route.name}{suffix}.", EventType.THROW, qb.id)
    logger.debug(f"Throw #{ball.throw_id} to {rec.name}: on_target={on_target}, flight={ball.flight_duration:.2f}s")


def throw_away(state: PlayState, qb: Participant, recorder: PlayRecorder) -> None:
    """Nobody to throw to: the pass is thrown away and falls incomplete."""
    ball = state.ball
    qb.release_ball()
    qb.action = Action.IDLE
    ball.throw_id += 1
    ball.thrower_id = qb.id
    ball.target_player_id = None
    ball.carrier_id = None
    ball.in_air = False
    ball.is_loose = True
    ball.vx = ball.vy = ball.vz = 0.0
    ball.place(qb.pos, 0.0)
    state.thrown = True
    state.passer_id = qb.id
    state.incomplete = True
    recorder.log(f"{qb.name} throws it away.", EventType.INCOMPLETE, qb.id)
    state.end(PlayOutcome.INCOMPLETE)


def _pocket_tick(
    state: PlayState,
    qb: Participant,
    recorder: PlayRecorder,
    rng: SimRandom,
    config: EngineConfig,
) -> None:
    _release_spy(state, qb, config)
    update_pass_rush(state, recorder, rng, config)
    update_coverage(state, recorder, rng, config)

    pressure = pressure_sources(state, config)
    if pressure:
        rusher = pressure[0]
        if state.once(f"pressure:{rusher.id}"):
            recorder.log(f"PRESSURE! {rusher.name} is in the backfield.", EventType.PRESSURE, rusher.id)
        if attempt_sack(state, qb, rusher, recorder, rng, config):
            step(state, config)
            return

    reason = should_throw(state, qb, bool(pressure), rng, config)
    if reason is not None:
        target = select_target(state)
        logger.debug(f"{qb.name} releases at tick {state.tick} ({reason})")
        if target is None:
            throw_away(state, qb, recorder)
        else:
            throw_ball(state, qb, target, bool(pressure), recorder, rng, config)

    _set_pocket_targets(state, qb)
    step(state, config)


def _set_pocket_targets(state: PlayState, qb: Participant) -> None:
    for b in state.pass_rush:
        rusher = state.get(b.rusher_id)
        if rusher is not None and (b.unblocked or b.beaten):
            rusher.set_target(qb.pos)
    for b in state.coverage:
        rec = state.get(b.receiver_id)
        primary = state.get(b.primary_id)
        if rec is not None and primary is not None:
            primary.set_target(rec.pos + Vec2(0.0, -b.separation))
        for helper_id in b.help_ids:
            helper = state.get(helper_id)
            if helper is not None and helper.zone and rec is not None:
                helper.set_target(get_zone(helper.zone).center(state.line_of_scrimmage).lerp(rec.pos, 0.5))
    for d in state.defense:
        if d.action == Action.SPY:
            d.set_target(Vec2(qb.pos.x, state.line_of_scrimmage + 5))


# =============================================================================
# Arrival
# =============================================================================


def _coverage_for(state: PlayState, receiver_id: Optional[str]) -> Optional[CoverageBattle]:
    for b in state.coverage:
        if b.receiver_id == receiver_id:
            return b
    return None


def _contesting(state: PlayState, battle: Optional[CoverageBattle], receiver: Participant) -> list[Participant]:
    if battle is None:
        return []
    defenders = []
    primary = state.get(battle.primary_id)
    if primary is not None and battle.separation < CONTEST_SEPARATION:
        defenders.append(primary)
    if receiver.route is not None and receiver.route.is_deep:
        for helper_id in battle.help_ids:
            helper = state.get(helper_id)
            if helper is not None and helper.pos.distance_to(state.ball.pos) <= HELP_RANGE:
                defenders.append(helper)
    return defenders


def _set_loose(state: PlayState, vx_scale: float, vz: float, rng: SimRandom) -> None:
    ball = state.ball
    ball.in_air = False
    ball.is_loose = True
    ball.carrier_id = None
    ball.vx = -ball.vx * vx_scale + rng.uniform(-1.0, 1.0)
    ball.vy = -ball.vy * vx_scale
    ball.vz = vz


def _incomplete(state: PlayState, recorder: PlayRecorder, message: str) -> None:
    ball = state.ball
    ball.in_air = False
    ball.is_loose = True
    ball.carrier_id = None
    ball.vx = ball.vy = ball.vz = 0.0
    ball.z = 0.0
    state.incomplete = True
    recorder.log(message, EventType.INCOMPLETE)
    state.end(PlayOutcome.INCOMPLETE)


def _drop(state: PlayState, receiver: Participant, recorder: PlayRecorder, rng: SimRandom) -> None:
    state.ball.last_interaction = "drop"
    _set_loose(state, 0.2, 1.5, rng)
    state.incomplete = True
    recorder.log(f"{receiver.name} drops the pass!", EventType.DROP, receiver.id)


def _intercept(
    state: PlayState,
    defender: Participant,
    recorder: PlayRecorder,
    rng: SimRandom,
    config: EngineConfig,
) -> None:
    """Pick the ball off and send the defender back toward the offense's goal line."""
    state.hand_off(defender)
    state.ball.secure(defender, z=0.5)
    state.ball.last_interaction = "interception"
    state.turnover = True
    state.interceptor_id = defender.id
    state.outcome = PlayOutcome.INTERCEPTION
    state.yards = 0.0
    recorder.log(f"INTERCEPTION! {defender.name} picks it off!", EventType.INTERCEPTION, defender.id)

    nearby = [o for o in state.offense if o.pos.distance_to(defender.pos) <= OPEN_FIELD_TACKLE_RANGE]
    gain, finisher = _after_contact(
        defender, nearest(nearby, defender.pos), state.offense, 0.0, RETURN_GAINS, recorder, rng, config,
    )
    state.return_start = defender.pos.y
    end_y = min(defender.pos.y, max(defender.pos.y - gain, END_ZONE_DEPTH - 1.0))
    state.spot = clamp_to_field(Vec2(defender.pos.x, end_y))
    defender.action = Action.CARRY
    defender.set_target(state.spot)
    state.catch_tick = state.tick
    state.pursuer_id = finisher.id if finisher is not None else None


def _finish_return(
    state: PlayState,
    returner: Participant,
    tackler: Optional[Participant],
    recorder: PlayRecorder,
) -> None:
    """Settle an interception return where the returner stands."""
    start = state.return_start if state.return_start is not None else returner.pos.y
    if returner.pos.y < END_ZONE_DEPTH:
        state.defensive_touchdown = True
        state.return_yards = max(0, int(round(start - END_ZONE_DEPTH)))
        recorder.log(f"PICK SIX! {returner.name} takes it all the way back!", EventType.TOUCHDOWN, returner.id)
    else:
        state.return_yards = max(0, int(round(start - returner.pos.y)))
        if tackler is not None:
            credit_tackle(state, tackler)
            recorder.log(f"{returner.name} is brought down by {tackler.name} after a return of "
                         f"{state.return_yards}.", EventType.TACKLE, tackler.id)
        else:
            recorder.log(f"{returner.name} returns it {state.return_yards} yards.", EventType.INFO, returner.id)
    returner.action = Action.DOWN
    state.end(PlayOutcome.INTERCEPTION)


def handle_ball_arrival(
    state: PlayState,
    recorder: PlayRecorder,
    rng: SimRandom,
    config: EngineConfig,
) -> bool:
    """
    Decide what happens when a thrown ball gets to its spot.

    Safe to call more than once for the same throw: only the first call
    does anything. Returns True if this call resolved the arrival.
    """
    ball = state.ball
    if not state.once(f"arrival:{ball.throw_id}"):
        return False

    receiver = state.get(ball.target_player_id)
    if receiver is None:
        _incomplete(state, recorder, "The pass falls incomplete.")
        return True

    battle = _coverage_for(state, receiver.id)
    separation = battle.separation if battle is not None else MAX_SEPARATION

    if not ball.on_target:
        ball.last_interaction = "errant"
        near = [d for d in state.defense if d.pos.distance_to(ball.pos) <= ERRANT_PICK_RANGE]
        if near:
            best = max(near, key=lambda d: d.rating("catching_hands"))
            odds = config.interception_chance * best.rating("catching_hands") / 100 * ERRANT_PICK_FACTOR
            if rng.chance(odds):
                _intercept(state, best, recorder, rng, config)
                return True
        _incomplete(state, recorder, f"The pass sails past {receiver.name}, incomplete.")
        return True

    receiver.pos = ball.pos
    hands = receiver.rating("catching_hands") + separation * 3
    if state.weather == Weather.RAIN:
        hands -= RAIN_HANDS_PENALTY
    defenders = _contesting(state, battle, receiver)

    if not defenders:
        if contest(hands, DROP_DIFFICULTY, rng, config.contest_noise) > 0:
            _complete(state, receiver, battle, recorder, rng, config)
        else:
            _drop(state, receiver, recorder, rng)
        return True

    if len(defenders) > 1:
        hands -= config.double_coverage_penalty
    defender = max(defenders, key=lambda d: (d.rating("catching_hands") + d.rating("agility")) / 2)
    defense = (defender.rating("catching_hands") + defender.rating("agility")) / 2
    margin = contest(hands, defense, rng, config.contest_noise)
    if margin > 0:
        _complete(state, receiver, battle, recorder, rng, config)
    elif rng.chance(config.interception_chance * defender.rating("catching_hands") / 100):
        _intercept(state, defender, recorder, rng, config)
    elif margin > -DROP_MARGIN:
        # got both hands on it
        _drop(state, receiver, recorder, rng)
    else:
        ball.last_interaction = "swat"
        _set_loose(state, 0.3, 3.0, rng)
        state.incomplete = True
        recorder.log(f"{defender.name} swats the pass away!", EventType.SWAT, defender.id)
    return True


def _complete(
    state: PlayState,
    receiver: Participant,
    battle: Optional[CoverageBattle],
    recorder: PlayRecorder,
    rng: SimRandom,
    config: EngineConfig,
) -> None:
    """Secure the catch and work out the yards after it."""
    state.hand_off(receiver)
    state.ball.secure(receiver, z=0.5)
    state.ball.last_interaction = "catch"
    state.outcome = PlayOutcome.COMPLETE
    state.air_yards = receiver.pos.y - state.line_of_scrimmage
    recorder.log(f"CATCH! {receiver.name} hauls it in.", EventType.CATCH, receiver.id)

    separation = battle.separation if battle is not None else MAX_SEPARATION
    tackler = state.get(battle.primary_id) if battle is not None else None
    if tackler is None:
        nearby = [d for d in state.defense if d.pos.distance_to(receiver.pos) <= OPEN_FIELD_TACKLE_RANGE]
        tackler = nearest(nearby, receiver.pos)

    yac, finisher = _after_contact(
        receiver, tackler, state.defense, separation * 2, YAC_GAINS, recorder, rng, config,
    )
    state.yards = state.air_yards + yac
    state.spot = spot_for(state, receiver)
    receiver.set_target(state.spot)
    state.catch_tick = state.tick
    state.pursuer_id = finisher.id if finisher is not None else None


def _after_contact(
    carrier: Participant,
    tackler: Optional[Participant],
    chasers: list[Participant],
    bonus: float,
    gains: tuple[tuple[int, int], ...],
    recorder: PlayRecorder,
    rng: SimRandom,
    config: EngineConfig,
) -> tuple[int, Optional[Participant]]:
    """
    Juke-vs-tackle once the ball is secured.

    Returns the yards the carrier will add and who makes the tackle at the
    end of them. `gains` holds the randint ranges in YAC_GAINS order.
    """
    open_field, broken, won, lost = gains
    if tackler is None:
        yards = rng.randint(*open_field)
        recorder.log(f"{carrier.name} has room to run!", EventType.INFO, carrier.id)
        return yards, nearest(chasers, carrier.pos)

    margin = contest(
        (carrier.rating("agility") + carrier.rating("speed")) / 2 + bonus,
        (tackler.rating("tackling") + tackler.rating("strength")) / 2,
        rng, config.contest_noise,
    )
    if margin > BREAK_MARGIN:
        yards = rng.randint(*broken)
        tackler.stunned_ticks = config.yac_max_ticks
        recorder.log(f"{carrier.name} makes {tackler.name} miss!", EventType.BROKEN_TACKLE, carrier.id)
        return yards, nearest([c for c in chasers if c is not tackler], carrier.pos)
    if margin > 0:
        return rng.randint(*won), tackler
    return rng.randint(*lost), tackler


# =============================================================================
# Tick driver
# =============================================================================


def _flight_tick(state: PlayState, recorder: PlayRecorder, rng: SimRandom, config: EngineConfig) -> None:
    ball = state.ball
    receiver = state.get(ball.target_player_id)
    if receiver is not None and ball.landing is not None:
        receiver.set_target(ball.landing)
        battle = _coverage_for(state, receiver.id)
        if battle is not None:
            for d_id in battle.all_defender_ids:
                d = state.get(d_id)
                if d is not None:
                    d.set_target(ball.landing)
    step(state, config)
    if advance_ball(ball, config.tick_seconds):
        handle_ball_arrival(state, recorder, rng, config)


def _loose_tick(state: PlayState, recorder: PlayRecorder, config: EngineConfig) -> None:
    ball = state.ball
    step(state, config)
    if advance_loose_ball(ball, config.tick_seconds) and state.once(f"dead:{ball.throw_id}"):
        _incomplete(state, recorder, "Incomplete pass.")


def _carry_tick(state: PlayState, recorder: PlayRecorder, rng: SimRandom, config: EngineConfig) -> None:
    carrier = state.ball_carrier()
    if carrier is None:
        state.end()
        return
    finisher = state.get(state.pursuer_id)
    returning = state.interceptor_id is not None
    if returning:
        pursue(state.offense, carrier.pos)
    else:
        pursue([finisher] if finisher is not None else [], carrier.pos)
    carrier.set_target(state.spot)
    step(state, config)

    catch_tick = state.catch_tick if state.catch_tick is not None else state.tick
    arrived = carrier.pos.distance_to(state.spot) <= config.arrival_radius
    if arrived or state.tick - catch_tick >= config.yac_max_ticks:
        carrier.pos = state.spot
        state.ball.carry_with(carrier)
        if returning:
            _finish_return(state, carrier, finisher, recorder)
        else:
            finish_carry(state, carrier, finisher, recorder, rng, config, PlayOutcome.COMPLETE)


def pass_tick(
    state: PlayState,
    qb: Participant,
    recorder: PlayRecorder,
    rng: SimRandom,
    config: EngineConfig,
) -> None:
    """Advance a live pass play by one tick."""
    ball = state.ball
    if ball.in_air:
        _flight_tick(state, recorder, rng, config)
    elif ball.is_loose:
        _loose_tick(state, recorder, config)
    elif state.spot is not None:
        _carry_tick(state, recorder, rng, config)
    else:
        _pocket_tick(state, qb, recorder, rng, config)


def whistle_pass(state: PlayState, qb: Participant, recorder: PlayRecorder) -> None:
    """Out of time: kill the play wherever the ball is."""
    ball = state.ball
    if ball.in_air or ball.is_loose:
        state.incomplete = True
        state.yards = 0.0
        recorder.log("The ball hits the turf. Incomplete.", EventType.INCOMPLETE)
        state.end(PlayOutcome.INCOMPLETE)
    elif state.spot is not None:
        recorder.log("The whistle blows the play dead.", EventType.INFO)
        returner = state.get(state.interceptor_id)
        if returner is not None:
            _finish_return(state, returner, None, recorder)
        else:
            state.end(PlayOutcome.COMPLETE)
    else:
        recorder.log(f"{qb.name} is forced to get rid of it.", EventType.INFO, qb.id)
        throw_away(state, qb, recorder)


def run_pass_play(state: PlayState, recorder: PlayRecorder, rng: SimRandom, config: EngineConfig) -> None:
    """Drive a pass play from the snap until the ball is dead."""
    qb = state.quarterback()
    init_pass_battles(state, config)
    recorder.log(f"{qb.name} takes the snap and drops back to pass.", EventType.SNAP, qb.id)
    recorder.record_frame(state)

    while state.is_live and state.tick < config.max_ticks:
        state.tick += 1
        recorder.tick = state.tick
        pass_tick(state, qb, recorder, rng, config)
        recorder.record_frame(state)

    if state.is_live:
        whistle_pass(state, qb, recorder)
        recorder.record_frame(state)
