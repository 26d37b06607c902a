"""
Battle resolution primitive.

One weighted contest between two sides (blocker vs rusher, receiver vs
defender, carrier vs tackler). Each call is one round: both powers get
independent symmetric noise and the difference is bucketed:

    diff >  DOMINANT_WIN                -> A wins outright
    SLIGHT_WIN < diff <= DOMINANT_WIN   -> A streak +1, B streak reset;
                                           two in a row and A wins
    |diff| <= SLIGHT_WIN                -> draw, both streaks reset
    (mirror for B)

A single narrow round never flips a contest; a sustained edge does.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from sandlot.config import EngineConfig, get_config
from sandlot.core.rng import SimRandom

logger = logging.getLogger(__name__)

STREAK_TO_WIN = 2


class BattleStatus(str, Enum):
    ONGOING = "ongoing"
    WIN_A = "win_a"
    WIN_B = "win_b"


class BattleResult(str, Enum):
    """Outcome of a single round."""
    DOMINANT_A = "dominant_a"
    SLIGHT_A = "slight_a"
    DRAW = "draw"
    SLIGHT_B = "slight_b"
    DOMINANT_B = "dominant_b"

    @property
    def favors_a(self) -> bool:
        return self in (BattleResult.DOMINANT_A, BattleResult.SLIGHT_A)

    @property
    def favors_b(self) -> bool:
        return self in (BattleResult.DOMINANT_B, BattleResult.SLIGHT_B)


@dataclass
class BattleState:
    """Running state of one contest across ticks."""
    streak_a: int = 0
    streak_b: int = 0
    status: BattleStatus = BattleStatus.ONGOING
    last_diff: float = 0.0
    rounds: int = 0

    @property
    def is_decided(self) -> bool:
        return self.status != BattleStatus.ONGOING

    def rearm(self) -> None:
        """Reopen a decided contest (streaks cleared) so it can continue."""
        self.status = BattleStatus.ONGOING
        self.streak_a = 0
        self.streak_b = 0


def resolve_battle(
    power_a: float,
    power_b: float,
    state: BattleState,
    rng: SimRandom,
    label: str = "",
    config: Optional[EngineConfig] = None,
) -> BattleResult:
    """
    Resolve one round of a contest, updating `state` in place.

    A decided state is left untouched and reports a draw; call
    `state.rearm()` first to keep battling.
    """
    if state.is_decided:
        return BattleResult.DRAW

    config = config or get_config()
    roll_a = power_a + rng.noise(config.battle_noise)
    roll_b = power_b + rng.noise(config.battle_noise)
    diff = roll_a - roll_b
    state.last_diff = diff
    state.rounds += 1

    if diff > config.dominant_win:
        result = BattleResult.DOMINANT_A
        state.status = BattleStatus.WIN_A
        state.streak_a += 1
        state.streak_b = 0
    elif diff > config.slight_win:
        result = BattleResult.SLIGHT_A
        state.streak_a += 1
        state.streak_b = 0
        if state.streak_a >= STREAK_TO_WIN:
            state.status = BattleStatus.WIN_A
    elif diff < -config.dominant_win:
        result = BattleResult.DOMINANT_B
        state.status = BattleStatus.WIN_B
        state.streak_b += 1
        state.streak_a = 0
    elif diff < -config.slight_win:
        result = BattleResult.SLIGHT_B
        state.streak_b += 1
        state.streak_a = 0
        if state.streak_b >= STREAK_TO_WIN:
            state.status = BattleStatus.WIN_B
    else:
        result = BattleResult.DRAW
        state.streak_a = 0
        state.streak_b = 0

    if state.is_decided and label:
        winner = "A" if state.status == BattleStatus.WIN_A else "B"
        logger.debug(f"{label}: decided for {winner} (diff {diff:+.1f}, round {state.rounds})")
    return result


def contest(power_a: float, power_b: float, rng: SimRandom, noise: float) -> float:
    """
    Single-shot noisy comparison. Returns the margin for A (positive = A wins).

    Each side draws its own noise, so equal powers are a coin flip and no
    contest is fully determined by attributes alone.
    """
    return (power_a + rng.noise(noise)) - (power_b + rng.noise(noise))
