"""
Play resolution entry point.

resolve_play() sets the play up, hands it to the pass or run resolver,
then settles the result: whole yards, touchdown, stats, injuries. Every
participant's fatigue and game stats are updated in place; everything
else is returned in an immutable PlayResult.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

from sandlot.config import EngineConfig, get_config
from sandlot.core.enums import PlayOutcome, StatusType
from sandlot.core.field import END_ZONE_DEPTH
from sandlot.core.models import PlayerStatus, Team
from sandlot.core.rng import SimRandom
from sandlot.engine.passing import run_pass_play
from sandlot.engine.recorder import EventType, PlayRecorder, PlayResult
from sandlot.engine.running import find_carrier, resolve_qb_sneak, run_run_play
from sandlot.engine.setup import FieldContext, setup_play
from sandlot.engine.state import PlayState
from sandlot.playbook.plays import PlaybookTables

logger = logging.getLogger(__name__)

INJURIES = ("sprained ankle", "bruised ribs", "jammed finger", "tweaked knee", "sore shoulder")


def resolve_play(
    offense: Team,
    defense: Team,
    play_key: str,
    context: Optional[FieldContext] = None,
    rng: Optional[SimRandom] = None,
    tables: Optional[PlaybookTables] = None,
    config: Optional[EngineConfig] = None,
) -> PlayResult:
    """
    Simulate one play.

    Args:
        offense: Team with the ball
        defense: Team on defense
        play_key: Offensive play to run (unknown keys run the default play)
        context: Field position, down, weather and the game log so far
        rng: Random source; a fresh one seeded from config when omitted
        tables: Playbook tables to read from
        config: Engine tuning

    Returns:
        PlayResult with yards, flags, the log (context.game_log plus this
        play's entries) and one frame per tick.
    """
    config = config or get_config()
    tables = tables or PlaybookTables.default()
    context = context or FieldContext()
    rng = rng or SimRandom(config.seed)

    recorder = PlayRecorder(context.game_log)
    state = setup_play(offense, defense, play_key, context, recorder, tables)
    play = state.play

    qb = state.quarterback()
    if qb is None and (play.is_pass or play.is_sneak):
        return _no_play(state, offense, "quarterback", recorder)
    carrier = qb if play.is_pass or play.is_sneak else find_carrier(state)
    if carrier is None:
        return _no_play(state, offense, "ball carrier", recorder)

    if play.is_sneak:
        resolve_qb_sneak(state, recorder, rng, config)
    elif play.is_pass:
        run_pass_play(state, recorder, rng, config)
    else:
        run_run_play(state, carrier, recorder, rng, config)

    return _finalize(state, recorder, rng, config)


def _no_play(state: PlayState, offense: Team, role: str, recorder: PlayRecorder) -> PlayResult:
    """Nobody can fill a mandatory role: the offense gives the ball up."""
    logger.warning(f"{offense.name}: no eligible {role} for {state.play.key}")
    recorder.log(f"{offense.name} has no eligible {role}. Turnover!", EventType.TURNOVER)
    state.turnover = True
    state.end(PlayOutcome.NO_PLAY)
    recorder.record_frame(state)
    return recorder.build(
        yards=0,
        touchdown=False,
        turnover=True,
        incomplete=False,
        outcome=PlayOutcome.NO_PLAY,
        play_key=state.play.key,
        defensive_play_key=state.defensive_play.key if state.defensive_play else None,
        ticks=state.tick,
        takeover_at=_own_yard_line(100 - state.ball_on),
    )


def _own_yard_line(yard_line: float) -> int:
    return max(1, min(99, int(round(yard_line))))


def _takeover_at(state: PlayState) -> Optional[int]:
    """Where the defense gets the ball, on its own yard lines (None unless it does)."""
    if not state.turnover or state.defensive_touchdown:
        return None
    offense_yard_line = state.ball.y - END_ZONE_DEPTH
    return _own_yard_line(100 - offense_yard_line)


def _final_yards(state: PlayState) -> tuple[int, bool]:
    if state.incomplete or state.outcome == PlayOutcome.INTERCEPTION:
        return 0, False
    yards = int(round(state.yards))
    yards = max(yards, -int(math.floor(state.ball_on)))
    to_goal = int(math.ceil(100 - state.ball_on))
    if not state.turnover and state.ball_on + yards >= 100:
        return to_goal, True
    return min(yards, to_goal), False


def _finalize(state: PlayState, recorder: PlayRecorder, rng: SimRandom, config: EngineConfig) -> PlayResult:
    yards, touchdown = _final_yards(state)
    state.touchdown = touchdown
    if touchdown:
        scorer = state.ball_carrier()
        name = scorer.name if scorer is not None else "The offense"
        recorder.log(f"TOUCHDOWN! {name} takes it in!", EventType.TOUCHDOWN,
                     scorer.id if scorer is not None else None)

    _credit_stats(state, yards, touchdown)
    _roll_injuries(state, recorder, rng, config)
    recorder.record_frame(state)

    logger.debug(
        f"{state.play.key}: {state.outcome.value} for {yards} yds "
        f"(td={touchdown}, turnover={state.turnover}, return={state.return_yards}, ticks={state.tick})"
    )
    return recorder.build(
        yards=yards,
        touchdown=touchdown,
        turnover=state.turnover,
        incomplete=state.incomplete,
        outcome=state.outcome,
        sack=state.sack,
        play_key=state.play.key,
        defensive_play_key=state.defensive_play.key if state.defensive_play else None,
        ticks=state.tick,
        return_yards=state.return_yards,
        defensive_touchdown=state.defensive_touchdown,
        takeover_at=_takeover_at(state),
    )


# =============================================================================
# Stats and injuries
# =============================================================================


def _credit_stats(state: PlayState, yards: int, touchdown: bool) -> None:
    passer = state.get(state.passer_id)
    receiver = state.get(state.receiver_id)
    rusher = state.get(state.rusher_id)

    if state.thrown and passer is not None:
        passer.player.game_stats.pass_attempts += 1
        if state.outcome == PlayOutcome.INTERCEPTION:
            passer.player.game_stats.interceptions_thrown += 1
        elif not state.incomplete and receiver is not None:
            passer.player.game_stats.pass_completions += 1
            passer.player.game_stats.pass_yards += yards
            receiver.player.game_stats.receptions += 1
            receiver.player.game_stats.rec_yards += yards
            if touchdown:
                receiver.player.game_stats.touchdowns += 1
    elif rusher is not None and not state.sack:
        rusher.player.game_stats.rush_attempts += 1
        rusher.player.game_stats.rush_yards += yards
        if touchdown:
            rusher.player.game_stats.touchdowns += 1

    sacker = state.get(state.sacker_id)
    if sacker is not None:
        sacker.player.game_stats.sacks += 1
    interceptor = state.get(state.interceptor_id)
    if interceptor is not None:
        interceptor.player.game_stats.interceptions += 1
        if state.defensive_touchdown:
            interceptor.player.game_stats.touchdowns += 1
    for tackler_id in state.tackler_ids:
        tackler = state.get(tackler_id)
        if tackler is not None:
            tackler.player.game_stats.tackles += 1
    fumbler = state.get(state.fumbler_id)
    if fumbler is not None:
        fumbler.player.game_stats.fumbles += 1
        if state.turnover:
            fumbler.player.game_stats.fumbles_lost += 1


def _roll_injuries(state: PlayState, recorder: PlayRecorder, rng: SimRandom, config: EngineConfig) -> None:
    """Small per-play injury chance; tougher kids get hurt less."""
    for p in state:
        toughness = p.player.attr("toughness", 50)
        if not rng.chance(config.injury_chance * (100 - toughness) / 100):
            continue
        weeks = rng.randint(1, 3)
        injury = rng.choice(INJURIES)
        p.player.status = PlayerStatus(StatusType.INJURED, weeks, injury)
        recorder.log(
            f"{p.name} is hurt on the play ({injury}) and will miss {weeks} week{'s' if weeks > 1 else ''}.",
            EventType.INJURY, p.id,
        )
        logger.info(f"Injury: {p.name} ({injury}, {weeks} wk)")
