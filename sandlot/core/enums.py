"""Shared enumerations."""

from enum import Enum


class Side(str, Enum):
    """Side of the ball."""
    OFFENSE = "offense"
    DEFENSE = "defense"

    @property
    def other(self) -> "Side":
        return Side.DEFENSE if self == Side.OFFENSE else Side.OFFENSE


class Position(str, Enum):
    """Base positions (slot names strip digits down to one of these)."""
    QB = "QB"
    RB = "RB"
    WR = "WR"
    OL = "OL"
    DL = "DL"
    LB = "LB"
    DB = "DB"

    @property
    def side(self) -> Side:
        if self in (Position.DL, Position.LB, Position.DB):
            return Side.DEFENSE
        return Side.OFFENSE


OFFENSIVE_POSITIONS = (Position.QB, Position.RB, Position.WR, Position.OL)
DEFENSIVE_POSITIONS = (Position.DL, Position.LB, Position.DB)


class StatusType(str, Enum):
    """Availability status of a player."""
    HEALTHY = "healthy"
    INJURED = "injured"
    BUSY = "busy"
    TEMPORARY = "temporary"


class Weather(str, Enum):
    SUNNY = "Sunny"
    WINDY = "Windy"
    RAIN = "Rain"


class PlayType(str, Enum):
    RUN = "run"
    PASS = "pass"


class RouteDepth(str, Enum):
    """Route families, used for accuracy penalties and safety help."""
    SHORT = "short"
    MEDIUM = "medium"
    DEEP = "deep"
    BACKFIELD = "backfield"


class PlayOutcome(str, Enum):
    """How a play ended."""
    RUN = "run"
    SNEAK = "sneak"
    COMPLETE = "complete"
    INCOMPLETE = "incomplete"
    INTERCEPTION = "interception"
    SACK = "sack"
    FUMBLE = "fumble"
    NO_PLAY = "no_play"  # Aborted for lack of personnel
