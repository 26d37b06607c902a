"""Core types: vectors, random sources, attributes, enums, field geometry, models."""

from sandlot.core.attributes import PlayerAttributes
from sandlot.core.enums import PlayOutcome, PlayType, Position, Side, StatusType, Weather
from sandlot.core.rng import SequenceRandom, SimRandom
from sandlot.core.vec2 import Vec2

__all__ = [
    "PlayOutcome",
    "PlayType",
    "PlayerAttributes",
    "Position",
    "SequenceRandom",
    "Side",
    "SimRandom",
    "StatusType",
    "Vec2",
    "Weather",
]
