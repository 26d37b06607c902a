"""Play-scoped state.

Everything here is created at the start of resolve_play and thrown away
when it returns. One-time event guards live in PlayState.flags (keyed by
event kind and entity id) rather than on the long-lived Player objects,
so nothing has to be cleaned up between plays.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional

from sandlot.core.enums import PlayOutcome, Position, Side, Weather
from sandlot.core.field import clamp_to_field
from sandlot.core.models import Player
from sandlot.core.vec2 import Vec2
from sandlot.engine.battle import BattleState
from sandlot.engine.ratings import base_position
from sandlot.playbook.plays import DefensivePlay, OffensivePlay
from sandlot.playbook.routes import Route


class Action(str, Enum):
    """What a participant is doing this tick (shown in frames)."""
    IDLE = "idle"
    DROPBACK = "dropback"
    SCRAMBLE = "scramble"
    PASS_BLOCK = "pass_block"
    RUN_BLOCK = "run_block"
    ROUTE = "route"
    CARRY = "carry"
    SNEAK = "sneak"
    PASS_RUSH = "pass_rush"
    COVER_MAN = "cover_man"
    COVER_ZONE = "cover_zone"
    RUN_FIT = "run_fit"
    SPY = "spy"
    PURSUIT = "pursuit"
    DOWN = "down"


# =============================================================================
# Participants
# =============================================================================


@dataclass
class Participant:
    """A player on the field for this play."""
    player: Player
    slot: str
    side: Side
    assignment: str
    pos: Vec2
    start: Vec2
    target: Vec2
    action: Action = Action.IDLE
    current_speed: float = 0.0
    fatigue_modifier: float = 1.0

    is_blocked: bool = False
    is_engaged: bool = False
    stunned_ticks: int = 0
    has_ball: bool = False
    is_ball_carrier: bool = False

    route: Optional[Route] = None
    route_path: list[Vec2] = field(default_factory=list)
    path_index: int = 0
    zone: Optional[str] = None
    man_target: Optional[str] = None  # slot being covered

    @property
    def id(self) -> str:
        return self.player.id

    @property
    def name(self) -> str:
        return self.player.name

    @property
    def position(self) -> Optional[Position]:
        return base_position(self.slot)

    @property
    def can_move(self) -> bool:
        return self.stunned_ticks <= 0 and not self.is_blocked and not self.is_engaged

    def rating(self, name: str) -> float:
        """Attribute scaled by the fatigue modifier."""
        return self.player.attr(name, 0) * self.fatigue_modifier

    def set_target(self, point: Vec2) -> None:
        self.target = clamp_to_field(point)

    def follow_path(self, arrival_radius: float) -> None:
        """Advance to the next waypoint once the current one is reached."""
        if not self.route_path:
            return
        while (self.path_index < len(self.route_path) - 1
               and self.pos.distance_to(self.route_path[self.path_index]) <= arrival_radius):
            self.path_index += 1
        self.set_target(self.route_path[self.path_index])

    def take_ball(self) -> None:
        self.has_ball = True
        self.is_ball_carrier = True
        self.is_engaged = False
        self.is_blocked = False
        self.action = Action.CARRY

    def release_ball(self) -> None:
        self.has_ball = False
        self.is_ball_carrier = False


# =============================================================================
# Ball
# =============================================================================


@dataclass
class BallState:
    """The football. Position in field yards, z is height in yards."""
    x: float
    y: float
    z: float = 1.0
    vx: float = 0.0
    vy: float = 0.0
    vz: float = 0.0
    in_air: bool = False
    is_loose: bool = False
    target_player_id: Optional[str] = None
    thrower_id: Optional[str] = None
    carrier_id: Optional[str] = None
    last_interaction: Optional[str] = None

    # Flight bookkeeping
    throw_id: int = 0
    landing: Optional[Vec2] = None
    flight_elapsed: float = 0.0
    flight_duration: float = 0.0
    on_target: bool = True

    @property
    def pos(self) -> Vec2:
        return Vec2(self.x, self.y)

    def place(self, point: Vec2, z: Optional[float] = None) -> None:
        point = clamp_to_field(point)
        self.x, self.y = point.x, point.y
        if z is not None:
            self.z = z

    def secure(self, holder: Participant, z: float = 0.5) -> None:
        """Snap the ball into a player's hands and stop it."""
        self.place(holder.pos, z)
        self.vx = self.vy = self.vz = 0.0
        self.in_air = False
        self.is_loose = False
        self.carrier_id = holder.id
        self.target_player_id = holder.id

    def carry_with(self, holder: Participant) -> None:
        self.place(holder.pos)


# =============================================================================
# Battle descriptors
# =============================================================================


@dataclass
class PassRushBattle:
    """A rusher against zero (unblocked), one or two blockers. A = blockers."""
    rusher_id: str
    blocker_ids: list[str]
    state: BattleState = field(default_factory=BattleState)
    free_ticks: int = 0  # ticks spent free (unblocked or beaten)
    beaten: bool = False

    @property
    def unblocked(self) -> bool:
        return not self.blocker_ids

    @property
    def double_team(self) -> bool:
        return len(self.blocker_ids) > 1


@dataclass
class CoverageBattle:
    """A receiver against their primary defender (plus help). A = receiver."""
    receiver_id: str
    defender_ids: list[str]
    help_ids: list[str] = field(default_factory=list)
    state: BattleState = field(default_factory=BattleState)
    separation: float = 0.0

    @property
    def primary_id(self) -> Optional[str]:
        return self.defender_ids[0] if self.defender_ids else None

    @property
    def all_defender_ids(self) -> list[str]:
        return self.defender_ids + [d for d in self.help_ids if d not in self.defender_ids]


@dataclass
class RunBlockBattle:
    """A run blocker against a front defender. A = blocker."""
    defender_id: str
    blocker_id: Optional[str]
    state: BattleState = field(default_factory=BattleState)
    won: Optional[bool] = None  # True = blocker won, None = draw/not resolved


# =============================================================================
# Play state
# =============================================================================


@dataclass
class PlayState:
    """Mutable state of one play in progress."""
    play: OffensivePlay
    defensive_play: Optional[DefensivePlay]
    ball_on: float
    line_of_scrimmage: float
    weather: Weather
    ball: BallState
    participants: dict[str, Participant] = field(default_factory=dict)

    tick: int = 0
    is_live: bool = True

    pass_rush: list[PassRushBattle] = field(default_factory=list)
    coverage: list[CoverageBattle] = field(default_factory=list)
    run_block: list[RunBlockBattle] = field(default_factory=list)

    # One-time event guards, e.g. "swat:3", "sack:<qb id>"
    flags: set[str] = field(default_factory=set)

    # Outcome
    yards: float = 0.0
    touchdown: bool = False
    turnover: bool = False
    incomplete: bool = False
    sack: bool = False
    outcome: PlayOutcome = PlayOutcome.RUN
    thrown: bool = False
    passer_id: Optional[str] = None
    receiver_id: Optional[str] = None
    rusher_id: Optional[str] = None
    tackler_ids: list[str] = field(default_factory=list)
    interceptor_id: Optional[str] = None
    sacker_id: Optional[str] = None
    fumbler_id: Optional[str] = None
    air_yards: float = 0.0
    spot: Optional[Vec2] = None  # where the carrier is running to after contact
    catch_tick: Optional[int] = None
    pursuer_id: Optional[str] = None  # player who will make the tackle at the spot
    return_start: Optional[float] = None  # field y where an interception return began
    return_yards: int = 0
    defensive_touchdown: bool = False

    # --- guards ---

    def once(self, key: str) -> bool:
        """True the first time a key is seen this play, False after that."""
        if key in self.flags:
            return False
        self.flags.add(key)
        return True

    def has_flag(self, key: str) -> bool:
        return key in self.flags

    # --- lookup ---

    def add(self, participant: Participant) -> None:
        self.participants[participant.id] = participant

    def get(self, player_id: Optional[str]) -> Optional[Participant]:
        if player_id is None:
            return None
        return self.participants.get(player_id)

    def side(self, side: Side) -> list[Participant]:
        return [p for p in self.participants.values() if p.side == side]

    @property
    def offense(self) -> list[Participant]:
        return self.side(Side.OFFENSE)

    @property
    def defense(self) -> list[Participant]:
        return self.side(Side.DEFENSE)

    def by_slot(self, side: Side, slot: str) -> Optional[Participant]:
        for p in self.participants.values():
            if p.side == side and p.slot == slot:
                return p
        return None

    def with_position(self, side: Side, *positions: Position) -> list[Participant]:
        return [p for p in self.side(side) if p.position in positions]

    def ball_carrier(self) -> Optional[Participant]:
        for p in self.participants.values():
            if p.is_ball_carrier:
                return p
        return None

    def quarterback(self) -> Optional[Participant]:
        return self.by_slot(Side.OFFENSE, "QB1")

    def __iter__(self) -> Iterator[Participant]:
        return iter(self.participants.values())

    # --- lifecycle ---

    def end(self, outcome: Optional[PlayOutcome] = None) -> None:
        if outcome is not None:
            self.outcome = outcome
        self.is_live = False

    def hand_off(self, carrier: Participant) -> None:
        """Give the ball to a participant (no one else holds it afterwards)."""
        for p in self.participants.values():
            if p is not carrier:
                p.release_ball()
        carrier.take_ball()
        self.ball.secure(carrier, z=1.0)
