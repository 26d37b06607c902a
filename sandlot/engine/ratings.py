"""
Ratings: position overall and slot suitability.

Overall is a weighted sum over a fixed per-position attribute table.
Suitability blends a slot's own attribute priorities (from the formation)
with the generic positional overall, so a one-trick specialist does not
outrank a complete player for a slot that also needs the basics.
"""

from __future__ import annotations

import re
from typing import Optional, Union

from sandlot.core.attributes import clamp_rating
from sandlot.core.enums import Position, Side
from sandlot.core.models import Player, Team
from sandlot.playbook.plays import PlaybookTables

# Each row sums to 1.0
POSITION_WEIGHTS: dict[Position, dict[str, float]] = {
    Position.QB: {"throwing_accuracy": 0.4, "playbook_iq": 0.3, "consistency": 0.1,
                  "clutch": 0.1, "speed": 0.05, "agility": 0.05},
    Position.RB: {"speed": 0.3, "strength": 0.2, "agility": 0.2, "catching_hands": 0.1,
                  "blocking": 0.1, "stamina": 0.1},
    Position.WR: {"speed": 0.3, "catching_hands": 0.3, "agility": 0.2, "height": 0.1,
                  "clutch": 0.1},
    Position.OL: {"strength": 0.4, "blocking": 0.4, "weight": 0.1, "playbook_iq": 0.1},
    Position.DL: {"strength": 0.4, "tackling": 0.25, "block_shedding": 0.2, "weight": 0.1,
                  "agility": 0.05},
    Position.LB: {"tackling": 0.3, "speed": 0.2, "strength": 0.2, "block_shedding": 0.1,
                  "playbook_iq": 0.2},
    Position.DB: {"speed": 0.35, "agility": 0.25, "catching_hands": 0.15, "tackling": 0.1,
                  "playbook_iq": 0.15},
}

WEIGHT_DIVISOR = 2.5
HEIGHT_OFFSET = 60
SLOT_PRIORITY_SHARE = 0.7

_DIGITS = re.compile(r"\d+")


def base_position(slot: str) -> Optional[Position]:
    """Strip depth digits from a slot name: 'WR2' -> Position.WR."""
    name = _DIGITS.sub("", slot)
    try:
        return Position(name)
    except ValueError:
        return None


def _as_position(position: Union[Position, str, None]) -> Optional[Position]:
    if position is None or isinstance(position, Position):
        return position
    try:
        return Position(position)
    except ValueError:
        return None


def normalized_attribute(player: Player, name: str) -> float:
    """Attribute value on the rating scale (weight and height are rescaled)."""
    if name == "weight":
        return player.attr("weight", 100) / WEIGHT_DIVISOR
    if name == "height":
        return player.attr("height", 60) - HEIGHT_OFFSET
    return float(player.attr(name, 0))


def calculate_overall(player: Player, position: Union[Position, str, None]) -> int:
    """Position-weighted overall in [1, 99]; 0 for an unknown position."""
    pos = _as_position(position)
    weights = POSITION_WEIGHTS.get(pos) if pos is not None else None
    if not weights:
        return 0
    score = sum(normalized_attribute(player, name) * w for name, w in weights.items())
    return clamp_rating(score)


def calculate_slot_suitability(
    player: Player,
    slot: str,
    side: Side,
    team: Team,
    tables: Optional[PlaybookTables] = None,
) -> int:
    """
    How well a player fits a specific formation slot, in [1, 99].

    Uses 70% slot-priority average + 30% positional overall when the
    team's formation defines priorities for the slot, else the overall.
    """
    tables = tables or PlaybookTables.default()
    overall = calculate_overall(player, base_position(slot))
    if side == Side.OFFENSE:
        formation = tables.offense_formations.get(team.formations.offense)
    else:
        formation = tables.defense_formations.get(team.formations.defense)
    priorities = formation.slot_priorities.get(slot) if formation else None
    if not priorities:
        return overall

    total_weight = sum(priorities.values())
    if total_weight <= 0:
        return overall
    slot_score = sum(normalized_attribute(player, name) * w for name, w in priorities.items()) / total_weight
    blended = slot_score * SLOT_PRIORITY_SHARE + overall * (1 - SLOT_PRIORITY_SHARE)
    return clamp_rating(blended)


def best_position(player: Player, positions: Optional[tuple[Position, ...]] = None) -> Position:
    """Position with the highest overall (first listed wins ties)."""
    candidates = positions or tuple(POSITION_WEIGHTS)
    return max(candidates, key=lambda pos: calculate_overall(player, pos))
