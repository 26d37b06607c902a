"""Offensive and defensive playbooks, and the PlaybookTables registry.

Offensive play keys are prefixed with their formation name
("Balanced_InsideZone" is run from "Balanced"). Defensive plays list the
formations they can be called from.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional

from sandlot.core.enums import PlayType
from sandlot.playbook.formations import (
    DEFAULT_DEFENSE_FORMATION,
    DEFAULT_OFFENSE_FORMATION,
    DEFENSE_FORMATIONS,
    OFFENSE_FORMATIONS,
    Formation,
)
from sandlot.playbook.routes import ROUTE_TREE, Route

logger = logging.getLogger(__name__)

SNEAK_ZONE = "sneak"
DEFAULT_RUN_PLAY = "Balanced_InsideZone"


@dataclass(frozen=True)
class OffensivePlay:
    """An offensive play call: slot -> route name or block/run instruction."""
    key: str
    type: PlayType
    assignments: dict[str, str]
    tags: tuple[str, ...] = ()
    read_progression: tuple[str, ...] = ()
    zone: Optional[str] = None

    @property
    def formation(self) -> str:
        return self.key.split("_", 1)[0]

    @property
    def play_action(self) -> bool:
        return "pa" in self.tags

    @property
    def is_sneak(self) -> bool:
        return self.zone == SNEAK_ZONE

    @property
    def is_pass(self) -> bool:
        return self.type == PlayType.PASS

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags


@dataclass(frozen=True)
class DefensivePlay:
    """A defensive call: slot -> rush/coverage/run-fit assignment."""
    key: str
    name: str
    formations: tuple[str, ...]
    assignments: dict[str, str]
    tags: tuple[str, ...] = ()

    @property
    def concept(self) -> str:
        return "Man" if "man" in self.tags else "Zone"

    @property
    def blitz(self) -> bool:
        return "blitz" in self.tags

    @property
    def run_stop(self) -> bool:
        return "runStop" in self.tags


def _run(key, assignments, tags, zone=None) -> OffensivePlay:
    return OffensivePlay(key, PlayType.RUN, assignments, tuple(tags), (), zone)


def _pass(key, assignments, tags, reads) -> OffensivePlay:
    return OffensivePlay(key, PlayType.PASS, assignments, tuple(tags), tuple(reads))


_PB3 = {"OL1": "pass_block", "OL2": "pass_block", "OL3": "pass_block"}
_PB2 = {"OL1": "pass_block", "OL2": "pass_block"}
_RB3 = {"OL1": "run_block", "OL2": "run_block", "OL3": "run_block"}
_RB2 = {"OL1": "run_block", "OL2": "run_block"}


OFFENSIVE_PLAYBOOK: dict[str, OffensivePlay] = {p.key: p for p in (
    # --- Balanced (1 RB, 2 WR) ---
    _run("Balanced_InsideZone",
         {"RB1": "run_inside", "WR1": "run_block", "WR2": "run_block", **_RB3},
         ["run", "inside"], zone="inside"),
    _run("Balanced_StretchRight",
         {"RB1": "run_outside", "WR1": "run_block", "WR2": "run_block", **_RB3},
         ["run", "outside"], zone="outside"),
    _run("Balanced_QB_Sneak",
         {"QB1": "qb_sneak", "RB1": "run_block", "WR1": "run_block", "WR2": "run_block", **_RB3},
         ["run", "inside", "power", "sneak"], zone=SNEAK_ZONE),
    _pass("Balanced_Slants",
          {"WR1": "Slant", "WR2": "Slant", "RB1": "Flat", **_PB3},
          ["pass", "short", "quick"], ["WR1", "WR2", "RB1"]),
    _pass("Balanced_Smash",
          {"WR1": "Hitch", "WR2": "Corner", "RB1": "pass_block", **_PB3},
          ["pass", "medium", "corner"], ["WR2", "WR1"]),
    _pass("Balanced_Sluggo_Shot",
          {"WR1": "Sluggo", "WR2": "In", "RB1": "CheckRelease", **_PB3},
          ["pass", "deep", "doublemove"], ["WR1", "WR2"]),
    _pass("Balanced_Zig_Zag",
          {"WR1": "Fly", "WR2": "Whip", "RB1": "Angle", **_PB3},
          ["pass", "short", "redzone"], ["WR2", "RB1"]),
    # --- Spread (0 RB, 3 WR) ---
    _pass("Spread_BubbleScreen",
          {"WR3": "Bubble", "WR1": "run_block", "WR2": "Fly", **_RB3},
          ["pass", "screen", "short"], ["WR3"]),
    _pass("Spread_FourVerts",
          {"WR1": "Fly", "WR2": "Fly", "WR3": "Seam", **_PB3},
          ["pass", "deep"], ["WR3", "WR1", "WR2"]),
    _pass("Spread_Mesh",
          {"WR1": "Drag", "WR2": "Drag", "WR3": "In", **_PB3},
          ["pass", "short"], ["WR1", "WR2", "WR3"]),
    _pass("Spread_DoubleMove",
          {"WR1": "PostCorner", "WR2": "Comeback", "WR3": "Seam", **_PB3},
          ["pass", "deep", "doublemove"], ["WR1", "WR3"]),
    # --- Power (2 RB, 1 WR) ---
    _run("Power_Iso",
         {"RB1": "run_inside", "RB2": "run_block", "WR1": "run_block", **_RB3},
         ["run", "inside", "power"], zone="inside"),
    _run("Power_Counter",
         {"RB1": "run_counter", "RB2": "run_block", "WR1": "run_block", **_RB3},
         ["run", "inside", "counter"], zone="inside"),
    _run("Power_QB_Sneak",
         {"QB1": "qb_sneak", "RB1": "run_block", "RB2": "run_block", "WR1": "run_block", **_RB3},
         ["run", "inside", "power", "sneak"], zone=SNEAK_ZONE),
    _pass("Power_PA_Leak",
          {"RB2": "Flat", "WR1": "Post", "RB1": "Wheel",
           "OL1": "run_block", "OL2": "run_block", "OL3": "pass_block"},
          ["pass", "pa", "deep"], ["WR1", "RB1"]),
    _pass("Power_Texas",
          {"RB1": "Angle", "RB2": "Flat", "WR1": "Post", **_PB3},
          ["pass", "medium", "middle"], ["RB1", "WR1"]),
    # --- Trips (3 WR bunch) ---
    _run("Trips_Draw",
         {"RB1": "run_inside", "WR1": "run_block", "WR2": "run_block", "WR3": "run_block", **_RB2},
         ["run", "inside"], zone="inside"),
    _pass("Trips_Flood",
          {"WR1": "Fly", "WR2": "Out", "WR3": "Flat", "RB1": "pass_block", **_PB2},
          ["pass", "medium", "flood"], ["WR2", "WR3"]),
    _pass("Trips_Stick",
          {"WR1": "Fade", "WR2": "QuickOut", "WR3": "Hitch", "RB1": "CheckRelease", **_PB2},
          ["pass", "short", "quick"], ["WR3", "WR2"]),
    _pass("Trips_Bubble_Go",
          {"WR1": "run_block", "WR2": "run_block", "WR3": "Sluggo", "RB1": "pass_block", **_PB2},
          ["pass", "deep", "trick"], ["WR3"]),
    # --- Empty (4 WR) ---
    _pass("Empty_AllGo",
          {"WR1": "Fly", "WR2": "Seam", "WR3": "Seam", "WR4": "Fly", **_PB2},
          ["pass", "deep", "hailmary"], ["WR1", "WR4"]),
    _pass("Empty_QuickGame",
          {"WR1": "Hitch", "WR2": "Slant", "WR3": "Whip", "WR4": "Hitch", **_PB2},
          ["pass", "short"], ["WR2", "WR3"]),
    _pass("Empty_DoublePost",
          {"WR1": "Drag", "WR2": "Post", "WR3": "Post", "WR4": "Drag", **_PB2},
          ["pass", "deep", "middle"], ["WR2", "WR3"]),
)}


def _def(key, name, formations, tags, assignments) -> DefensivePlay:
    return DefensivePlay(key, name, tuple(formations), assignments, tuple(tags))


_RUSH3 = {"DL1": "pass_rush", "DL2": "pass_rush", "DL3": "pass_rush"}
_RUSH4 = {**_RUSH3, "DL4": "pass_rush"}


DEFENSIVE_PLAYBOOK: dict[str, DefensivePlay] = {p.key: p for p in (
    # --- 3-1-3 ---
    _def("Cover_1_Man_3-1-3", "Cover 1 Man", ["3-1-3"], ["man", "cover1"],
         {**_RUSH3, "LB1": "man_cover_RB1", "DB1": "man_cover_WR1",
          "DB2": "man_cover_WR2", "DB3": "zone_deep_middle"}),
    _def("Cover_3_Zone_3-1-3", "Cover 3 Zone", ["3-1-3"], ["zone", "cover3", "safeZone"],
         {**_RUSH3, "LB1": "zone_hook_curl_middle", "DB1": "zone_deep_third_left",
          "DB2": "zone_deep_third_right", "DB3": "zone_deep_middle"}),
    _def("Zone_Blitz_3-1-3", "Zone Blitz", ["3-1-3"], ["zone", "blitz"],
         {**_RUSH3, "LB1": "blitz_gap", "DB1": "zone_flat_left",
          "DB2": "zone_flat_right", "DB3": "zone_deep_middle"}),
    _def("Run_Stop_3-1-3", "Run Stop", ["3-1-3"], ["runStop"],
         {"DL1": "run_edge_left", "DL2": "run_gap_A_left", "DL3": "run_edge_right",
          "LB1": "run_gap_A_right", "DB1": "zone_flat_left", "DB2": "zone_flat_right",
          "DB3": "run_support"}),
    # --- 4-2-1 ---
    _def("GoalLine_RunStuff", "Goal Line Stuff", ["4-2-1"], ["runStop", "blitz"],
         {"DL1": "run_edge_left", "DL2": "run_gap_A_left", "DL3": "run_gap_A_right",
          "DL4": "run_edge_right", "LB1": "blitz_gap", "LB2": "blitz_gap",
          "DB1": "run_support"}),
    _def("Cover_0_Blitz_4-2-1", "Cover 0 All Out", ["4-2-1"], ["man", "blitz", "cover0"],
         {**_RUSH4, "LB1": "blitz_gap", "LB2": "blitz_edge", "DB1": "man_cover_WR1"}),
    _def("Cover_1_Robber_4-2-1", "Cover 1 Robber", ["4-2-1"], ["zone", "cover1"],
         {**_RUSH4, "LB1": "zone_hook_left", "LB2": "zone_hook_right",
          "DB1": "zone_deep_middle"}),
    # --- 2-3-2 ---
    _def("Cover_2_Zone_2-3-2", "Tampa 2", ["2-3-2"], ["zone", "cover2"],
         {"DL1": "pass_rush", "DL2": "pass_rush", "LB1": "zone_flat_left",
          "LB2": "zone_deep_middle", "LB3": "zone_flat_right",
          "DB1": "zone_deep_half_left", "DB2": "zone_deep_half_right"}),
    _def("Double_A_Gap_Blitz", "Double A Gap Blitz", ["2-3-2"], ["blitz", "man"],
         {"DL1": "pass_rush", "DL2": "pass_rush", "LB1": "man_cover_RB1",
          "LB2": "blitz_gap", "LB3": "blitz_gap", "DB1": "man_cover_WR1",
          "DB2": "man_cover_WR2"}),
    # --- 4-0-3 ---
    _def("Cover_4_Quarters", "Cover 4 Quarters", ["4-0-3"], ["zone", "cover4", "safeZone"],
         {**_RUSH4, "DB1": "zone_deep_third_left", "DB2": "zone_deep_third_right",
          "DB3": "zone_deep_middle"}),
    _def("Victory_Prevent", "Victory Prevent", ["4-0-3"], ["prevent", "zone"],
         {"DL1": "spy_QB", "DL2": "pass_rush", "DL3": "pass_rush", "DL4": "spy_QB",
          "DB1": "zone_deep_half_left", "DB2": "zone_deep_half_right",
          "DB3": "zone_deep_middle"}),
    # --- 4-1-2 ---
    _def("Cover_2_Zone_4-1-2", "Cover 2 Invert", ["4-1-2"], ["zone", "cover2", "safeZone"],
         {**_RUSH4, "LB1": "zone_hook_curl_middle", "DB1": "zone_deep_half_left",
          "DB2": "zone_deep_half_right"}),
    _def("Cover_3_Buzz_4-1-2", "Cover 3 Buzz", ["4-1-2"], ["zone", "cover3"],
         {**_RUSH4, "LB1": "zone_hook_curl_left", "DB1": "zone_hook_curl_right",
          "DB2": "zone_deep_middle"}),
    _def("Man_Free_4-1-2", "Cover 1 Man Free", ["4-1-2"], ["man", "cover1"],
         {**_RUSH4, "LB1": "man_cover_RB1", "DB1": "man_cover_WR2",
          "DB2": "zone_deep_middle"}),
    _def("Double_A_Gap_Blitz_4-1-2", "Double A-Gap Blitz", ["4-1-2"], ["blitz", "man", "aggressive"],
         {"DL1": "pass_rush", "DL4": "pass_rush", "DL2": "run_gap_B_left",
          "DL3": "run_gap_B_right", "LB1": "blitz_gap", "DB1": "blitz_gap",
          "DB2": "man_cover_WR1"}),
    _def("LB_Spy_4-1-2", "LB Spy", ["4-1-2"], ["zone", "safeZone", "spy"],
         {**_RUSH4, "LB1": "spy_QB", "DB1": "zone_deep_half_left",
          "DB2": "zone_deep_half_right"}),
    _def("Cover_2_Hard_Flat_4-1-2", "Cover 2 Hard Flat", ["4-1-2"], ["zone", "cover2", "hardFlat"],
         {**_RUSH4, "LB1": "zone_hook_curl_middle", "DB1": "zone_flat_left_hard",
          "DB2": "zone_flat_right_hard"}),
    _def("2_Man_Press_4-1-2", "2 Man Under", ["4-1-2"], ["man", "cover2", "press"],
         {**_RUSH4, "LB1": "man_cover_RB1", "DB1": "man_cover_WR1",
          "DB2": "man_cover_WR2"}),
    # --- 3-0-4 ---
    _def("Cover_4_Palms_3-0-4", "Cover 4 Palms", ["3-0-4"], ["zone", "cover4", "safeZone"],
         {**_RUSH3, "DB1": "zone_deep_half_left", "DB2": "zone_deep_half_right",
          "DB3": "zone_short_middle", "DB4": "zone_short_middle"}),
    _def("Man_Lock_3-0-4", "Man Lock", ["3-0-4"], ["man", "cover1"],
         {**_RUSH3, "DB1": "man_cover_WR1", "DB2": "man_cover_WR2",
          "DB3": "man_cover_WR3", "DB4": "man_cover_WR4"}),
    _def("Slot_Blitz_3-0-4", "Slot Corner Blitz", ["3-0-4"], ["blitz", "man"],
         {**_RUSH3, "DB1": "man_cover_WR1", "DB2": "man_cover_WR2",
          "DB3": "blitz_edge", "DB4": "man_cover_WR3"}),
)}


# =============================================================================
# Registry
# =============================================================================


@dataclass(frozen=True)
class PlaybookTables:
    """
    Read-only lookup tables consumed by the engine.

    Lookups that miss fall back to a default and log an error; a bad name
    coming out of a saved depth chart or a typo in a play call should not
    stop a simulated season.
    """

    offense_formations: dict[str, Formation] = field(default_factory=lambda: dict(OFFENSE_FORMATIONS))
    defense_formations: dict[str, Formation] = field(default_factory=lambda: dict(DEFENSE_FORMATIONS))
    offensive_plays: dict[str, OffensivePlay] = field(default_factory=lambda: dict(OFFENSIVE_PLAYBOOK))
    defensive_plays: dict[str, DefensivePlay] = field(default_factory=lambda: dict(DEFENSIVE_PLAYBOOK))
    routes: dict[str, Route] = field(default_factory=lambda: dict(ROUTE_TREE))
    default_play_key: str = DEFAULT_RUN_PLAY

    @classmethod
    def default(cls) -> PlaybookTables:
        return _default_tables()

    # --- formations ---

    def offense_formation(self, name: str) -> Formation:
        formation = self.offense_formations.get(name)
        if formation is None:
            fallback = (DEFAULT_OFFENSE_FORMATION if DEFAULT_OFFENSE_FORMATION in self.offense_formations
                        else next(iter(self.offense_formations)))
            logger.error(f"Unknown offensive formation '{name}', using '{fallback}'")
            formation = self.offense_formations[fallback]
        return formation

    def defense_formation(self, name: str) -> Formation:
        formation = self.defense_formations.get(name)
        if formation is None:
            fallback = (DEFAULT_DEFENSE_FORMATION if DEFAULT_DEFENSE_FORMATION in self.defense_formations
                        else next(iter(self.defense_formations)))
            logger.error(f"Unknown defensive formation '{name}', using '{fallback}'")
            formation = self.defense_formations[fallback]
        return formation

    # --- plays ---

    def offensive_play(self, key: str) -> Optional[OffensivePlay]:
        return self.offensive_plays.get(key)

    def default_play(self) -> OffensivePlay:
        return self.offensive_plays[self.default_play_key]

    def plays_for_formation(self, formation: str) -> list[OffensivePlay]:
        return [p for p in self.offensive_plays.values() if p.formation == formation]

    def defensive_plays_for(self, formation: str) -> list[DefensivePlay]:
        return [p for p in self.defensive_plays.values() if formation in p.formations]

    def defensive_play(self, key: Optional[str], formation: str) -> Optional[DefensivePlay]:
        """
        Resolve a defensive call for a formation.

        A missing or incompatible key falls back to the formation's first
        listed play; None means the formation's own zone assignments apply.
        """
        if key is not None:
            play = self.defensive_plays.get(key)
            if play is not None and formation in play.formations:
                return play
            logger.error(f"Defensive play '{key}' unavailable for formation '{formation}'")
        candidates = self.defensive_plays_for(formation)
        return candidates[0] if candidates else None


@lru_cache(maxsize=1)
def _default_tables() -> PlaybookTables:
    return PlaybookTables()
