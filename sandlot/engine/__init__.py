"""Play resolution engine."""

from sandlot.engine.battle import BattleResult, BattleState, contest, resolve_battle
from sandlot.engine.play import resolve_play
from sandlot.engine.recorder import EventType, Frame, PlayRecorder, PlayResult
from sandlot.engine.setup import FieldContext

__all__ = [
    "BattleResult",
    "BattleState",
    "EventType",
    "FieldContext",
    "Frame",
    "PlayRecorder",
    "PlayResult",
    "contest",
    "resolve_battle",
    "resolve_play",
]
