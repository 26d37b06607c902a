"""
Roster/slot resolver.

Picks who actually takes the field for a play. The depth-chart starter
plays unless hurt, busy, or already on the field this play; then the best
healthy bench player at the slot's position steps in; as a last resort an
emergency fill puts in whoever is left, out of position or hurt, and
says so in the play log.

All choices are deterministic: ties go to roster order.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence

from sandlot.core.enums import Position, Side
from sandlot.core.models import Player, Team
from sandlot.engine.ratings import base_position, calculate_overall
from sandlot.engine.recorder import EventType, PlayRecorder

logger = logging.getLogger(__name__)

EMERGENCY_SLOT = "EMERGENCY"


@dataclass(frozen=True)
class SlotAssignment:
    slot: str
    player: Player


def _overall_all(player: Player) -> int:
    return max(calculate_overall(player, pos) for pos in Position)


def get_best_sub(
    team: Team,
    position: Optional[Position],
    used_ids: set[str],
) -> Optional[Player]:
    """Best healthy, unused player by overall at `position` (None if nobody is left)."""
    candidates = [p for p in team.roster if p.is_available and p.id not in used_ids]
    if not candidates:
        return None
    if position is None:
        return max(candidates, key=_overall_all)
    return max(candidates, key=lambda p: calculate_overall(p, position))


def find_emergency_player(
    team: Team,
    position: Optional[Position],
    used_ids: set[str],
) -> Optional[SlotAssignment]:
    """
    Anyone still unused, healthy or not, ranked by overall at `position`.

    Healthy players always rank ahead of unavailable ones.
    """
    candidates = [p for p in team.roster if p.id not in used_ids]
    if not candidates:
        return None

    def rank(p: Player) -> tuple[bool, int]:
        score = calculate_overall(p, position) if position is not None else _overall_all(p)
        return (p.is_available, score)

    return SlotAssignment(EMERGENCY_SLOT, max(candidates, key=rank))


def get_player_by_slot(
    team: Team,
    side: Side,
    slot: str,
    used_ids: set[str],
    recorder: Optional[PlayRecorder] = None,
) -> Optional[Player]:
    """
    Resolve one slot to a player and mark them used.

    Order: depth-chart starter -> best healthy sub -> emergency fill.
    """
    position = base_position(slot)
    starter = team.starter(side, slot)
    if starter is not None and starter.is_available and starter.id not in used_ids:
        used_ids.add(starter.id)
        return starter

    sub = get_best_sub(team, position, used_ids)
    if sub is not None:
        used_ids.add(sub.id)
        return sub

    emergency = find_emergency_player(team, position, used_ids)
    if emergency is None:
        logger.warning(f"{team.name}: nobody left to fill {slot}")
        return None

    player = emergency.player
    used_ids.add(player.id)
    logger.warning(f"{team.name}: emergency fill at {slot} with {player.name}")
    if recorder is not None:
        recorder.log(
            f"Emergency fill: {player.name} lines up at {slot} for {team.name}.",
            EventType.EMERGENCY_FILL,
            player.id,
        )
    return player


def get_players_for_slots(
    team: Team,
    side: Side,
    slot_prefix: str,
    used_ids: set[str],
    recorder: Optional[PlayRecorder] = None,
    slots: Optional[Sequence[str]] = None,
) -> list[SlotAssignment]:
    """
    Resolve every slot starting with `slot_prefix`.

    Slots come from `slots` in the order given (a formation's slot list),
    or from the depth chart sorted by slot name.
    """
    if slots is None:
        names = team.depth_chart.slots_with_prefix(side, slot_prefix)
    else:
        names = [s for s in slots if s.startswith(slot_prefix)]
    assignments = []
    for slot in names:
        player = get_player_by_slot(team, side, slot, used_ids, recorder)
        if player is not None:
            assignments.append(SlotAssignment(slot, player))
    return assignments
