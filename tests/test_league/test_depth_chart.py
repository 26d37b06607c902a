"""Tests for AI depth-chart assignment."""

import logging

from sandlot.core.enums import Side
from sandlot.core.models import Team
from sandlot.core.rng import SimRandom
from sandlot.league.depth_chart import assign_depth_chart
from sandlot.league.generator import generate_team


class TestAssignDepthChart:
    """Tests for assign_depth_chart()."""

    def test_full_roster_fills_every_slot(self, tables):
        team = generate_team("Comets", SimRandom(11), size=10, tables=tables)
        offense = tables.offense_formation(team.formations.offense)
        defense = tables.defense_formation(team.formations.defense)

        assert set(team.depth_chart.offense) == set(offense.slots)
        assert set(team.depth_chart.defense) == set(defense.slots)
        roster_ids = {p.id for p in team.roster}
        for side in (team.depth_chart.offense, team.depth_chart.defense):
            assert set(side.values()) <= roster_ids
            assert len(set(side.values())) == len(side)

    def test_reassigning_is_stable(self, tables):
        team = generate_team("Comets", SimRandom(12), tables=tables)
        before = team.depth_chart.to_dict()
        assign_depth_chart(team, tables)
        assert team.depth_chart.to_dict() == before

    def test_empty_roster_leaves_chart_empty(self, tables, caplog):
        team = Team(id="t99", name="Ghosts")
        team.depth_chart.offense["QB1"] = "gone"
        with caplog.at_level(logging.WARNING):
            assign_depth_chart(team, tables)
        assert team.depth_chart.offense == {}
        assert team.depth_chart.defense == {}
        assert "empty roster" in caplog.text

    def test_short_roster_fills_key_slots_first(self, make_team, tables):
        """Three kids play QB, RB and the top receiver."""
        team = make_team("Trio", size=3)
        assign_depth_chart(team, tables)
        assert set(team.depth_chart.offense) == {"QB1", "RB1", "WR1"}
        assert len(team.depth_chart.defense) == 3

    def test_best_passer_plays_quarterback(self, make_team, tables):
        team = make_team("Comets", rating=40)
        passer = team.roster[4]
        passer.attributes.set("throwing_accuracy", 95)
        passer.attributes.set("playbook_iq", 95)
        assign_depth_chart(team, tables)
        assert team.starter(Side.OFFENSE, "QB1") is passer

    def test_lineman_specialist_plays_the_line(self, make_team, make_player, tables):
        """A strong blocker who is weak at everything else never starts at QB."""
        team = make_team("Comets", rating=40, size=6)
        specialist = make_player("Big Kid", rating=20, strength=95, blocking=90)
        team.add_player(specialist)
        assign_depth_chart(team, tables)

        slot = next(s for s, pid in team.depth_chart.offense.items() if pid == specialist.id)
        assert slot.startswith("OL")

    def test_defense_spares_key_offensive_starters(self, tables):
        """With enough kids the QB1 and RB1 do not also start on defense."""
        team = generate_team("Comets", SimRandom(5), size=14, tables=tables)
        critical = {team.depth_chart.offense[s] for s in ("QB1", "RB1") if s in team.depth_chart.offense}
        assert critical
        assert not critical & set(team.depth_chart.defense.values())
