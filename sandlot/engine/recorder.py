"""Play log and visualization frames.

PlayRecorder is the single accumulator for everything a play emits: the
human-readable log, typed events, and one frame per tick. Each frame
stores `log_index`, the index of the latest log entry when the frame was
taken, which is how a renderer lines the animation up with the text.
When the play ends the recorder is frozen into an immutable PlayResult.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from enum import Enum
from typing import Iterable, Optional, TYPE_CHECKING

from sandlot.core.enums import PlayOutcome

if TYPE_CHECKING:
    from sandlot.engine.state import PlayState


class EventType(str, Enum):
    """Kinds of play-log entries."""
    INFO = "info"
    ERROR = "error"
    SNAP = "snap"
    HANDOFF = "handoff"
    PRESSURE = "pressure"
    THROW = "throw"
    CATCH = "catch"
    INTERCEPTION = "interception"
    SWAT = "swat"
    DROP = "drop"
    INCOMPLETE = "incomplete"
    SACK = "sack"
    BROKEN_TACKLE = "broken_tackle"
    TACKLE = "tackle"
    FUMBLE = "fumble"
    TOUCHDOWN = "touchdown"
    TURNOVER = "turnover"
    INJURY = "injury"
    EMERGENCY_FILL = "emergency_fill"


@dataclass(frozen=True)
class PlayEvent:
    index: int  # index into the full log
    tick: int
    type: EventType
    message: str
    player_id: Optional[str] = None


@dataclass(frozen=True)
class BallFrame:
    x: float
    y: float
    z: float
    in_air: bool
    is_loose: bool
    target_player_id: Optional[str]


@dataclass(frozen=True)
class PlayerFrame:
    id: str
    name: str
    slot: str
    side: str
    x: float
    y: float
    action: str
    is_ball_carrier: bool
    has_ball: bool


@dataclass(frozen=True)
class Frame:
    tick: int
    log_index: int
    ball: BallFrame
    players: tuple[PlayerFrame, ...]

    def player(self, player_id: str) -> Optional[PlayerFrame]:
        for p in self.players:
            if p.id == player_id:
                return p
        return None

    @property
    def ball_secured(self) -> bool:
        """Ball is held: not flying, not loose, and tied to a player."""
        if self.ball.in_air or self.ball.is_loose:
            return False
        return self.ball.target_player_id is not None or any(p.is_ball_carrier for p in self.players)


@dataclass(frozen=True)
class PlayResult:
    """Immutable outcome of one play."""
    yards: int
    touchdown: bool
    turnover: bool
    incomplete: bool
    log: tuple[str, ...]
    frames: tuple[Frame, ...]
    outcome: PlayOutcome = PlayOutcome.RUN
    sack: bool = False
    play_key: str = ""
    defensive_play_key: Optional[str] = None
    ticks: int = 0
    log_offset: int = 0
    events: tuple[PlayEvent, ...] = ()
    return_yards: int = 0
    defensive_touchdown: bool = False
    takeover_at: Optional[int] = None  # where the defense takes over, on its own yard lines

    @property
    def play_log(self) -> tuple[str, ...]:
        """Only the entries this play added (without any pre-seeded log)."""
        return self.log[self.log_offset:]

    def events_of(self, event_type: EventType) -> list[PlayEvent]:
        return [e for e in self.events if e.type == event_type]

    def to_dict(self) -> dict:
        return {
            "yards": self.yards,
            "touchdown": self.touchdown,
            "turnover": self.turnover,
            "incomplete": self.incomplete,
            "sack": self.sack,
            "outcome": self.outcome.value,
            "play_key": self.play_key,
            "defensive_play_key": self.defensive_play_key,
            "ticks": self.ticks,
            "return_yards": self.return_yards,
            "defensive_touchdown": self.defensive_touchdown,
            "takeover_at": self.takeover_at,
            "log": list(self.log),
            "visualization_frames": [asdict(f) for f in self.frames],
        }


class PlayRecorder:
    """Accumulates log entries, events and frames for one play."""

    def __init__(self, seed_log: Iterable[str] = ()):
        self._log: list[str] = list(seed_log)
        self.offset = len(self._log)
        self._events: list[PlayEvent] = []
        self._frames: list[Frame] = []
        self.tick = 0

    # --- log ---

    def log(
        self,
        message: str,
        event_type: EventType = EventType.INFO,
        player_id: Optional[str] = None,
    ) -> int:
        """Append a log entry; returns its index in the full log."""
        self._log.append(message)
        index = len(self._log) - 1
        self._events.append(PlayEvent(index, self.tick, event_type, message, player_id))
        return index

    @property
    def log_index(self) -> int:
        return len(self._log) - 1

    @property
    def entries(self) -> list[str]:
        return self._log[self.offset:]

    def count(self, event_type: EventType) -> int:
        return sum(1 for e in self._events if e.type == event_type)

    # --- frames ---

    @property
    def frames(self) -> list[Frame]:
        return self._frames

    def record_frame(self, state: "PlayState") -> Frame:
        """Snapshot the ball and every participant at the current tick."""
        ball = state.ball
        frame = Frame(
            tick=state.tick,
            log_index=self.log_index,
            ball=BallFrame(
                x=round(ball.x, 2),
                y=round(ball.y, 2),
                z=round(ball.z, 2),
                in_air=ball.in_air,
                is_loose=ball.is_loose,
                target_player_id=ball.target_player_id,
            ),
            players=tuple(
                PlayerFrame(
                    id=p.id,
                    name=p.name,
                    slot=p.slot,
                    side=p.side.value,
                    x=round(p.pos.x, 2),
                    y=round(p.pos.y, 2),
                    action=p.action.value,
                    is_ball_carrier=p.is_ball_carrier,
                    has_ball=p.has_ball,
                )
                for p in state
            ),
        )
        self._frames.append(frame)
        return frame

    # --- result ---

    def build(
        self,
        yards: int,
        touchdown: bool,
        turnover: bool,
        incomplete: bool,
        outcome: PlayOutcome,
        sack: bool = False,
        play_key: str = "",
        defensive_play_key: Optional[str] = None,
        ticks: int = 0,
        return_yards: int = 0,
        defensive_touchdown: bool = False,
        takeover_at: Optional[int] = None,
    ) -> PlayResult:
        return PlayResult(
            yards=yards,
            touchdown=touchdown,
            turnover=turnover,
            incomplete=incomplete,
            log=tuple(self._log),
            frames=tuple(self._frames),
            outcome=outcome,
            sack=sack,
            play_key=play_key,
            defensive_play_key=defensive_play_key,
            ticks=ticks,
            log_offset=self.offset,
            events=tuple(self._events),
            return_yards=return_yards,
            defensive_touchdown=defensive_touchdown,
            takeover_at=takeover_at,
        )
