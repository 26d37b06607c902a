"""AI depth-chart assignment."""

from __future__ import annotations

import logging
from typing import Optional

from sandlot.core.enums import Side
from sandlot.core.models import Player, Team
from sandlot.engine.ratings import calculate_slot_suitability
from sandlot.playbook.plays import PlaybookTables

logger = logging.getLogger(__name__)

# Offensive slots filled before everything else, in this order
KEY_OFFENSE_SLOTS = ("QB", "RB1", "WR1")
# Starters on one side that the other side should not also lean on
CRITICAL_SLOTS = ("QB1", "RB1")


def _slot_order(slots: tuple[str, ...], side: Side) -> list[str]:
    if side != Side.OFFENSE:
        return list(slots)

    def rank(slot: str) -> int:
        for i, prefix in enumerate(KEY_OFFENSE_SLOTS):
            if slot.startswith(prefix):
                return i
        return len(KEY_OFFENSE_SLOTS)

    return sorted(slots, key=rank)


def _pick(
    candidates: list[Player],
    slot: str,
    side: Side,
    team: Team,
    tables: PlaybookTables,
    critical_ids: set[str],
) -> Optional[Player]:
    """Best fit for a slot; players starting at QB1/RB1 on the other side lose ties to anyone else."""
    best = None
    best_key = None
    for player in candidates:
        key = (player.id not in critical_ids, calculate_slot_suitability(player, slot, side, team, tables))
        if best_key is None or key > best_key:
            best, best_key = player, key
    return best


def assign_depth_chart(team: Team, tables: Optional[PlaybookTables] = None) -> None:
    """
    Rebuild both sides of a team's depth chart for its current formations.

    Each slot gets the unassigned player with the best slot suitability.
    QB1, RB1 and WR1 are chosen first. Running this twice on the same
    roster produces the same chart.
    """
    tables = tables or PlaybookTables.default()
    chart = team.depth_chart
    chart.offense.clear()
    chart.defense.clear()
    if not team.roster:
        logger.warning(f"{team.name}: empty roster, depth chart left empty")
        return

    formations = {
        Side.OFFENSE: tables.offense_formation(team.formations.offense),
        Side.DEFENSE: tables.defense_formation(team.formations.defense),
    }
    for side, formation in formations.items():
        other = chart.side(side.other)
        critical_ids = {other[s] for s in CRITICAL_SLOTS if s in other}
        available = list(team.roster)
        for slot in _slot_order(formation.slots, side):
            if not available:
                break
            player = _pick(available, slot, side, team, tables, critical_ids)
            chart.set(side, slot, player.id)
            available.remove(player)

    logger.debug(f"{team.name} depth chart: {chart.to_dict()}")
