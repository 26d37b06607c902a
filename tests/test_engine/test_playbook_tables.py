"""Integrity tests for the static playbook tables."""

import pytest

from sandlot.core.enums import PlayType
from sandlot.core.field import get_zone
from sandlot.engine.setup import RUN_ASSIGNMENTS, RUSH_ASSIGNMENTS
from sandlot.playbook.plays import DEFAULT_RUN_PLAY, PlaybookTables

OFFENSE_INSTRUCTIONS = {"pass_block", "run_block", "qb_sneak", *RUN_ASSIGNMENTS}


class TestFormations:
    """Formation table checks."""

    def test_every_slot_has_a_coordinate(self, tables):
        for formation in list(tables.offense_formations.values()) + list(tables.defense_formations.values()):
            assert set(formation.coordinates) == set(formation.slots), formation.key
            assert sum(formation.personnel.values()) == len(formation.slots), formation.key

    def test_seven_on_the_field(self, tables):
        for formation in list(tables.offense_formations.values()) + list(tables.defense_formations.values()):
            assert len(formation.slots) == 7, formation.key

    def test_unknown_formation_falls_back(self, tables):
        assert tables.offense_formation("Wishbone").key == "Balanced"
        assert tables.defense_formation("5-2").key == "3-1-3"


class TestOffensivePlays:
    """Offensive playbook checks."""

    def test_formation_prefix_exists(self, tables):
        for play in tables.offensive_plays.values():
            assert play.formation in tables.offense_formations, play.key

    def test_assignments_reference_real_slots_and_routes(self, tables):
        for play in tables.offensive_plays.values():
            slots = tables.offense_formation(play.formation).slots
            for slot, assignment in play.assignments.items():
                assert slot in slots, f"{play.key}: {slot}"
                assert assignment in tables.routes or assignment in OFFENSE_INSTRUCTIONS, \
                    f"{play.key}: {assignment}"

    def test_reads_are_route_runners(self, tables):
        for play in tables.offensive_plays.values():
            if play.type != PlayType.PASS:
                continue
            assert play.read_progression, play.key
            for slot in play.read_progression:
                assert play.assignments.get(slot) in tables.routes, f"{play.key}: {slot}"

    def test_runs_have_a_carrier(self, tables):
        for play in tables.offensive_plays.values():
            if play.type != PlayType.RUN:
                continue
            carriers = [a for a in play.assignments.values() if a in RUN_ASSIGNMENTS or a == "qb_sneak"]
            assert len(carriers) == 1, play.key

    def test_default_play(self, tables):
        play = tables.default_play()
        assert play.key == DEFAULT_RUN_PLAY
        assert play.type == PlayType.RUN
        assert play.formation == "Balanced"

    def test_sneaks(self, tables):
        assert tables.offensive_play("Balanced_QB_Sneak").is_sneak
        assert tables.offensive_play("Power_QB_Sneak").is_sneak
        assert not tables.offensive_play("Power_Iso").is_sneak

    def test_unknown_play(self, tables):
        assert tables.offensive_play("Nope") is None


class TestDefensivePlays:
    """Defensive playbook checks."""

    def test_assignments_are_known(self, tables):
        for play in tables.defensive_plays.values():
            for formation_key in play.formations:
                formation = tables.defense_formations[formation_key]
                for slot, assignment in play.assignments.items():
                    assert slot in formation.slots, f"{play.key}: {slot}"
                    known = (
                        assignment in RUSH_ASSIGNMENTS
                        or assignment == "spy_QB"
                        or assignment.startswith("man_cover_")
                        or get_zone(assignment) is not None
                    )
                    assert known, f"{play.key}: {assignment}"

    def test_every_formation_has_a_call(self, tables):
        for key in tables.defense_formations:
            assert tables.defensive_plays_for(key), key

    def test_concept_flags(self, tables):
        assert tables.defensive_plays["Cover_1_Man_3-1-3"].concept == "Man"
        assert tables.defensive_plays["Cover_3_Zone_3-1-3"].concept == "Zone"
        assert tables.defensive_plays["Zone_Blitz_3-1-3"].blitz
        assert tables.defensive_plays["Run_Stop_3-1-3"].run_stop

    def test_missing_key_uses_first_compatible(self, tables):
        assert tables.defensive_play(None, "3-1-3").key == "Cover_1_Man_3-1-3"

    def test_incompatible_key_falls_back(self, tables):
        """A call from another formation is replaced, not forced onto the field."""
        assert tables.defensive_play("Man_Lock_3-0-4", "3-1-3").key == "Cover_1_Man_3-1-3"
        assert tables.defensive_play("Man_Lock_3-0-4", "3-0-4").key == "Man_Lock_3-0-4"

    def test_formation_without_plays(self):
        tables = PlaybookTables(defensive_plays={})
        assert tables.defensive_play("Cover_1_Man_3-1-3", "3-1-3") is None


class TestDefaultTables:
    def test_default_is_shared(self):
        assert PlaybookTables.default() is PlaybookTables.default()

    @pytest.mark.parametrize("route", ["Slant", "Fly", "Flat", "Sluggo"])
    def test_routes_progress(self, tables, route):
        r = tables.routes[route]
        assert r.progress(0) == 0.0
        assert r.progress(r.development_ticks * 2) == 1.0
