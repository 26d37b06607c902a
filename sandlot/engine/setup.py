"""Play setup: resolve the call, pick personnel, line everyone up."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from sandlot.core.enums import Position, Side, Weather
from sandlot.core.field import CENTER_X, clamp_to_field, get_zone, line_of_scrimmage
from sandlot.core.models import Team
from sandlot.core.vec2 import Vec2
from sandlot.engine.physics import fatigue_modifier
from sandlot.engine.ratings import base_position
from sandlot.engine.recorder import EventType, PlayRecorder
from sandlot.engine.roster import get_players_for_slots
from sandlot.engine.state import Action, BallState, Participant, PlayState
from sandlot.playbook.formations import Formation
from sandlot.playbook.plays import OffensivePlay, PlaybookTables
from sandlot.playbook.routes import ASSIGNMENT_PATHS, absolute_path

logger = logging.getLogger(__name__)

RUN_ASSIGNMENTS = ("run_inside", "run_outside", "run_counter")
RUSH_ASSIGNMENTS = ("pass_rush", "blitz_gap", "blitz_edge")
QB_DROP_DEPTH = 2.0


@dataclass
class FieldContext:
    """Where and how a play is run."""
    ball_on: float = 20.0  # 0-100, own goal line to opponent goal line
    down: int = 1
    yards_to_go: int = 10
    weather: Weather = Weather.SUNNY
    game_log: Sequence[str] = ()
    defensive_play_key: Optional[str] = None


def resolve_offensive_play(
    play_key: str,
    tables: PlaybookTables,
    recorder: PlayRecorder,
) -> OffensivePlay:
    """Look up a play; an unknown key runs the default play and logs an error."""
    play = tables.offensive_play(play_key)
    if play is not None:
        return play
    fallback = tables.default_play()
    logger.error(f"Unknown play key '{play_key}', running '{fallback.key}'")
    recorder.log(
        f"CRITICAL ERROR: play '{play_key}' not found, running {fallback.key} instead.",
        EventType.ERROR,
    )
    return fallback


def _default_offense_assignment(position: Optional[Position], play: OffensivePlay) -> str:
    if position == Position.QB:
        return "qb_pass" if play.is_pass else "qb_handoff"
    if play.is_pass:
        return "pass_block"
    return "run_block"


def _default_defense_assignment(position: Optional[Position]) -> str:
    if position == Position.DL:
        return "pass_rush"
    if position == Position.LB:
        return "zone_short_middle"
    return "zone_deep_middle"


def _configure_offense(p: Participant, play: OffensivePlay, tables: PlaybookTables) -> None:
    assignment = p.assignment
    route = tables.routes.get(assignment)
    if route is not None:
        p.action = Action.ROUTE
        p.route = route
        p.route_path = absolute_path(route.path, p.pos)
        p.set_target(p.route_path[0])
    elif assignment == "pass_block":
        p.action = Action.PASS_BLOCK
        p.set_target(absolute_path(ASSIGNMENT_PATHS["pass_block"], p.pos)[0])
    elif assignment == "run_block":
        p.action = Action.RUN_BLOCK
        p.set_target(absolute_path(ASSIGNMENT_PATHS["run_block"], p.pos)[0])
    elif assignment in RUN_ASSIGNMENTS or assignment == "qb_sneak":
        p.action = Action.SNEAK if assignment == "qb_sneak" else Action.IDLE
        p.route_path = absolute_path(ASSIGNMENT_PATHS[assignment], p.pos)
        p.set_target(p.route_path[0])
    elif assignment == "qb_pass":
        p.action = Action.DROPBACK
        p.set_target(p.pos + Vec2(0, -QB_DROP_DEPTH))
    else:
        p.action = Action.IDLE


def _configure_defense(p: Participant, los: float) -> None:
    assignment = p.assignment
    if assignment in RUSH_ASSIGNMENTS:
        p.action = Action.PASS_RUSH
        p.set_target(Vec2(CENTER_X, los - 5))
    elif assignment.startswith("man_cover_"):
        p.action = Action.COVER_MAN
        p.man_target = assignment[len("man_cover_"):]
    elif assignment.startswith("zone_"):
        p.action = Action.COVER_ZONE
        p.zone = assignment
        zone = get_zone(assignment)
        if zone is not None:
            p.set_target(zone.center(los))
    elif assignment.startswith("run_"):
        p.action = Action.RUN_FIT
        p.zone = assignment
        zone = get_zone(assignment)
        if zone is not None:
            p.set_target(zone.center(los))
    elif assignment == "spy_QB":
        p.action = Action.SPY
        p.set_target(Vec2(CENTER_X, los + 5))
    else:
        p.action = Action.IDLE


def _place(
    state: PlayState,
    team: Team,
    side: Side,
    formation: Formation,
    assignments: dict[str, str],
    snap: Vec2,
    used_ids: set[str],
    recorder: PlayRecorder,
) -> None:
    fills = []
    for group in dict.fromkeys(slot.rstrip("0123456789") for slot in formation.slots):
        fills.extend(get_players_for_slots(team, side, group, used_ids, recorder, formation.slots))
    for fill in fills:
        slot, player = fill.slot, fill.player
        dx, dy = formation.coordinate(slot)
        pos = clamp_to_field(snap + Vec2(dx, dy))
        position = base_position(slot)
        if side == Side.OFFENSE:
            assignment = assignments.get(slot) or _default_offense_assignment(position, state.play)
        else:
            assignment = assignments.get(slot) or _default_defense_assignment(position)
        participant = Participant(
            player=player,
            slot=slot,
            side=side,
            assignment=assignment,
            pos=pos,
            start=pos,
            target=pos,
            fatigue_modifier=fatigue_modifier(player.fatigue, player.attr("stamina", 50)),
        )
        state.add(participant)


def setup_play(
    offense: Team,
    defense: Team,
    play_key: str,
    context: FieldContext,
    recorder: PlayRecorder,
    tables: PlaybookTables,
) -> PlayState:
    """Build the PlayState: resolved calls, personnel, alignments and assignments."""
    play = resolve_offensive_play(play_key, tables, recorder)
    offense_formation = tables.offense_formation(play.formation)
    defense_formation = tables.defense_formation(defense.formations.defense)
    defensive_play = tables.defensive_play(context.defensive_play_key, defense_formation.key)
    defense_assignments = (
        defensive_play.assignments if defensive_play is not None else defense_formation.zone_assignments
    )

    los = line_of_scrimmage(context.ball_on)
    snap = Vec2(CENTER_X, los)
    state = PlayState(
        play=play,
        defensive_play=defensive_play,
        ball_on=context.ball_on,
        line_of_scrimmage=los,
        weather=context.weather,
        ball=BallState(x=snap.x, y=snap.y, z=0.3),
    )

    _place(state, offense, Side.OFFENSE, offense_formation, play.assignments, snap, set(), recorder)
    _place(state, defense, Side.DEFENSE, defense_formation, defense_assignments, snap, set(), recorder)

    for p in state.offense:
        _configure_offense(p, play, tables)
    for p in state.defense:
        _configure_defense(p, los)

    qb = state.quarterback()
    if qb is not None:
        state.hand_off(qb)
        if play.is_pass:
            qb.action = Action.DROPBACK
        elif play.is_sneak:
            qb.action = Action.SNEAK
    logger.debug(
        f"Setup {play.key} ({offense_formation.key}) vs "
        f"{defensive_play.key if defensive_play else defense_formation.key} at LOS {los:.0f}"
    )
    return state
