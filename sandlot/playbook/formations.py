"""Offensive and defensive formations.

Coordinates are (dx, dy) from the ball at the snap: dx across the field,
dy toward the defense's end (defenders have positive dy, offense negative).
"""

from __future__ import annotations

from dataclasses import dataclass, field

from sandlot.core.enums import Side


@dataclass(frozen=True)
class Formation:
    """A named set of slots with alignments and per-slot attribute priorities."""
    key: str
    name: str
    side: Side
    slots: tuple[str, ...]
    personnel: dict[str, int]
    coordinates: dict[str, tuple[float, float]]
    slot_priorities: dict[str, dict[str, float]] = field(default_factory=dict)
    # Default coverage/run fits when no defensive play is called
    zone_assignments: dict[str, str] = field(default_factory=dict)

    def coordinate(self, slot: str) -> tuple[float, float]:
        return self.coordinates.get(slot, (0.0, 0.0))


OL_PRIORITIES = {"strength": 3, "blocking": 3}


OFFENSE_FORMATIONS: dict[str, Formation] = {f.key: f for f in (
    Formation(
        key="Balanced",
        name="Balanced",
        side=Side.OFFENSE,
        slots=("QB1", "RB1", "WR1", "WR2", "OL1", "OL2", "OL3"),
        personnel={"QB": 1, "RB": 1, "WR": 2, "OL": 3},
        coordinates={
            "QB1": (0, -5), "RB1": (-3, -5.5), "WR1": (-18, -0.5), "WR2": (18, -0.5),
            "OL1": (-3, -0.5), "OL2": (0, -0.75), "OL3": (3, -0.5),
        },
        slot_priorities={
            "QB1": {"throwing_accuracy": 3, "playbook_iq": 2},
            "RB1": {"speed": 2, "agility": 2, "catching_hands": 1},
            "WR1": {"speed": 3, "catching_hands": 3},
            "WR2": {"speed": 3, "catching_hands": 3},
            "OL1": OL_PRIORITIES,
            "OL2": {"strength": 3, "blocking": 3, "playbook_iq": 1},
            "OL3": OL_PRIORITIES,
        },
    ),
    Formation(
        key="Spread",
        name="Spread",
        side=Side.OFFENSE,
        slots=("QB1", "WR1", "WR2", "WR3", "OL1", "OL2", "OL3"),
        personnel={"QB": 1, "RB": 0, "WR": 3, "OL": 3},
        coordinates={
            "QB1": (0, -5), "WR1": (-22, -0.5), "WR2": (22, -0.5), "WR3": (-8, -0.5),
            "OL1": (-3, -0.5), "OL2": (0, -0.75), "OL3": (3, -0.5),
        },
        slot_priorities={
            "QB1": {"throwing_accuracy": 3, "playbook_iq": 2},
            "WR1": {"speed": 3, "catching_hands": 3},
            "WR2": {"speed": 3, "catching_hands": 3},
            "WR3": {"agility": 3, "catching_hands": 3, "speed": 2},
            "OL1": OL_PRIORITIES, "OL2": OL_PRIORITIES, "OL3": OL_PRIORITIES,
        },
    ),
    Formation(
        key="Power",
        name="Power I",
        side=Side.OFFENSE,
        slots=("QB1", "RB1", "RB2", "WR1", "OL1", "OL2", "OL3"),
        personnel={"QB": 1, "RB": 2, "WR": 1, "OL": 3},
        coordinates={
            "QB1": (0, -2), "RB1": (0, -7), "RB2": (0, -4.5), "WR1": (18, -0.5),
            "OL1": (-3, -0.5), "OL2": (0, -0.75), "OL3": (3, -0.5),
        },
        slot_priorities={
            "QB1": {"strength": 2, "playbook_iq": 2},
            "RB1": {"strength": 3, "speed": 2},
            "RB2": {"blocking": 3, "strength": 3},
            "WR1": {"blocking": 2, "catching_hands": 2},
            "OL1": OL_PRIORITIES, "OL2": OL_PRIORITIES, "OL3": OL_PRIORITIES,
        },
    ),
    Formation(
        key="Trips",
        name="Trips Right",
        side=Side.OFFENSE,
        slots=("QB1", "RB1", "WR1", "WR2", "WR3", "OL1", "OL2"),
        personnel={"QB": 1, "RB": 1, "WR": 3, "OL": 2},
        coordinates={
            "QB1": (0, -5), "RB1": (-4, -5), "WR1": (22, -0.5), "WR2": (16, -0.5),
            "WR3": (10, -0.5), "OL1": (-2, -0.5), "OL2": (2, -0.5),
        },
        slot_priorities={
            "QB1": {"throwing_accuracy": 3, "playbook_iq": 2},
            "RB1": {"blocking": 2, "catching_hands": 2},
            "WR1": {"speed": 3, "catching_hands": 2},
            "WR2": {"agility": 3, "catching_hands": 2},
            "WR3": {"agility": 3, "catching_hands": 2},
            "OL1": {"blocking": 3, "strength": 3},
            "OL2": {"blocking": 3, "strength": 3},
        },
    ),
    Formation(
        key="Empty",
        name="Empty Five",
        side=Side.OFFENSE,
        slots=("QB1", "WR1", "WR2", "WR3", "WR4", "OL1", "OL2"),
        personnel={"QB": 1, "RB": 0, "WR": 4, "OL": 2},
        coordinates={
            "QB1": (0, -5), "WR1": (-22, -0.5), "WR2": (-10, -0.5), "WR3": (10, -0.5),
            "WR4": (22, -0.5), "OL1": (-2, -0.5), "OL2": (2, -0.5),
        },
        slot_priorities={
            "QB1": {"throwing_accuracy": 3, "playbook_iq": 3},
            "WR1": {"speed": 3},
            "WR2": {"agility": 3, "catching_hands": 3},
            "WR3": {"agility": 3, "catching_hands": 3},
            "WR4": {"speed": 3},
            "OL1": {"blocking": 3, "agility": 2},
            "OL2": {"blocking": 3, "agility": 2},
        },
    ),
)}


DEFENSE_FORMATIONS: dict[str, Formation] = {f.key: f for f in (
    Formation(
        key="3-1-3",
        name="3-1-3 (Base)",
        side=Side.DEFENSE,
        slots=("DL1", "DL2", "DL3", "LB1", "DB1", "DB2", "DB3"),
        personnel={"DL": 3, "LB": 1, "DB": 3},
        coordinates={
            "DL1": (-5, 1), "DL2": (0, 1), "DL3": (5, 1), "LB1": (0, 5),
            "DB1": (-18, 2), "DB2": (18, 2), "DB3": (0, 12),
        },
        zone_assignments={
            "DL1": "pass_rush", "DL2": "pass_rush", "DL3": "pass_rush",
            "LB1": "zone_short_middle", "DB1": "zone_deep_third_left",
            "DB2": "zone_deep_third_right", "DB3": "zone_deep_middle",
        },
    ),
    Formation(
        key="2-3-2",
        name="2-3-2 (Nickel)",
        side=Side.DEFENSE,
        slots=("DL1", "DL2", "LB1", "LB2", "LB3", "DB1", "DB2"),
        personnel={"DL": 2, "LB": 3, "DB": 2},
        coordinates={
            "DL1": (-3, 1), "DL2": (3, 1), "LB1": (-8, 5), "LB2": (0, 5),
            "LB3": (8, 5), "DB1": (-20, 6), "DB2": (20, 6),
        },
        zone_assignments={
            "DL1": "pass_rush", "DL2": "pass_rush", "LB1": "zone_flat_left",
            "LB2": "zone_short_middle", "LB3": "zone_flat_right",
            "DB1": "zone_deep_half_left", "DB2": "zone_deep_half_right",
        },
    ),
    Formation(
        key="4-2-1",
        name="4-2-1 (Run Stop)",
        side=Side.DEFENSE,
        slots=("DL1", "DL2", "DL3", "DL4", "LB1", "LB2", "DB1"),
        personnel={"DL": 4, "LB": 2, "DB": 1},
        coordinates={
            "DL1": (-5.0, 1), "DL2": (-1.5, 1), "DL3": (1.5, 1), "DL4": (5.0, 1),
            "LB1": (-4, 5), "LB2": (4, 5), "DB1": (0, 12),
        },
        zone_assignments={
            "DL1": "pass_rush", "DL2": "pass_rush", "DL3": "pass_rush", "DL4": "pass_rush",
            "LB1": "zone_hook_left", "LB2": "zone_hook_right", "DB1": "zone_deep_middle",
        },
    ),
    Formation(
        key="4-0-3",
        name="4-0-3 (Dime/Prevent)",
        side=Side.DEFENSE,
        slots=("DL1", "DL2", "DL3", "DL4", "DB1", "DB2", "DB3"),
        personnel={"DL": 4, "LB": 0, "DB": 3},
        coordinates={
            "DL1": (-5.5, 1), "DL2": (-2.0, 1), "DL3": (2.0, 1), "DL4": (5.5, 1),
            "DB1": (-20, 10), "DB2": (20, 10), "DB3": (0, 18),
        },
        zone_assignments={
            "DL1": "pass_rush", "DL2": "pass_rush", "DL3": "pass_rush", "DL4": "pass_rush",
            "DB1": "zone_deep_third_left", "DB2": "zone_deep_third_right",
            "DB3": "zone_deep_middle",
        },
    ),
    Formation(
        key="4-1-2",
        name="4-1-2 (Nickel Hybrid)",
        side=Side.DEFENSE,
        slots=("DL1", "DL2", "DL3", "DL4", "LB1", "DB1", "DB2"),
        personnel={"DL": 4, "LB": 1, "DB": 2},
        coordinates={
            "DL1": (-5.5, 1.0), "DL2": (-2.0, 1.0), "DL3": (2.0, 1.0), "DL4": (5.5, 1.0),
            "LB1": (0, 5.0), "DB1": (-10, 8.0), "DB2": (10, 8.0),
        },
        slot_priorities={
            "DL1": {"speed": 3, "block_shedding": 2},
            "DL2": {"strength": 3, "weight": 2},
            "DL3": {"strength": 3, "weight": 2},
            "DL4": {"speed": 3, "block_shedding": 2},
            "LB1": {"tackling": 3, "playbook_iq": 2, "speed": 2},
            "DB1": {"speed": 2, "tackling": 2, "agility": 2},
            "DB2": {"speed": 3, "catching_hands": 2, "playbook_iq": 2},
        },
        zone_assignments={
            "DL1": "pass_rush", "DL2": "pass_rush", "DL3": "pass_rush", "DL4": "pass_rush",
            "LB1": "zone_hook_curl_middle", "DB1": "zone_deep_half_left",
            "DB2": "zone_deep_half_right",
        },
    ),
    Formation(
        key="3-0-4",
        name="3-0-4 (Dime)",
        side=Side.DEFENSE,
        slots=("DL1", "DL2", "DL3", "DB1", "DB2", "DB3", "DB4"),
        personnel={"DL": 3, "LB": 0, "DB": 4},
        coordinates={
            "DL1": (-5, 1.0), "DL2": (0, 1.0), "DL3": (5, 1.0),
            "DB1": (-18, 5.0), "DB2": (18, 5.0), "DB3": (-6, 9.0), "DB4": (6, 9.0),
        },
        slot_priorities={
            "DL1": {"speed": 2, "strength": 2},
            "DL2": {"strength": 3, "weight": 2},
            "DL3": {"speed": 2, "strength": 2},
            "DB1": {"speed": 3, "catching_hands": 2},
            "DB2": {"speed": 3, "catching_hands": 2},
            "DB3": {"agility": 3, "speed": 2, "tackling": 1},
            "DB4": {"agility": 3, "speed": 2, "tackling": 1},
        },
        zone_assignments={
            "DL1": "pass_rush", "DL2": "pass_rush", "DL3": "pass_rush",
            "DB1": "zone_deep_half_left", "DB2": "zone_deep_half_right",
            "DB3": "zone_short_middle", "DB4": "zone_short_middle",
        },
    ),
)}

DEFAULT_OFFENSE_FORMATION = "Balanced"
DEFAULT_DEFENSE_FORMATION = "3-1-3"
