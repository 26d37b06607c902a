"""Tests for the slot resolver."""

from sandlot.core.enums import Position, Side, StatusType
from sandlot.core.models import PlayerStatus, Team
from sandlot.engine.recorder import EventType, PlayRecorder
from sandlot.engine.roster import (
    EMERGENCY_SLOT,
    find_emergency_player,
    get_best_sub,
    get_player_by_slot,
    get_players_for_slots,
)


def _hurt(player, weeks=2):
    player.status = PlayerStatus(StatusType.INJURED, weeks, "tweaked knee")


class TestGetPlayerBySlot:
    """Tests for get_player_by_slot()."""

    def test_starter_plays(self, make_team):
        team = make_team()
        used: set[str] = set()
        player = get_player_by_slot(team, Side.OFFENSE, "QB1", used)
        assert player is team.roster[0]
        assert player.id in used

    def test_injured_starter_replaced_by_best_sub(self, make_team, make_player):
        """The healthiest, best-fitting bench kid steps in."""
        team = make_team(size=1)
        _hurt(team.roster[0])
        weak = make_player(throwing_accuracy=20)
        strong = make_player(throwing_accuracy=90, playbook_iq=90)
        team.add_player(weak)
        team.add_player(strong)
        assert get_player_by_slot(team, Side.OFFENSE, "QB1", set()) is strong

    def test_used_starter_is_not_reused(self, make_team, make_player):
        team = make_team(size=1)
        bench = make_player()
        team.add_player(bench)
        used = {team.roster[0].id}
        assert get_player_by_slot(team, Side.OFFENSE, "QB1", used) is bench

    def test_emergency_fill_is_logged(self, make_team):
        """With nobody healthy left, a hurt kid plays and the log says so."""
        team = make_team(size=1)
        _hurt(team.roster[0])
        recorder = PlayRecorder()
        player = get_player_by_slot(team, Side.OFFENSE, "QB1", set(), recorder)
        assert player is team.roster[0]
        assert recorder.count(EventType.EMERGENCY_FILL) == 1
        assert recorder.entries[0].startswith("Emergency fill:")

    def test_nobody_left(self, make_team):
        team = make_team(size=1)
        assert get_player_by_slot(team, Side.OFFENSE, "RB1", {team.roster[0].id}) is None

    def test_empty_roster(self):
        assert get_player_by_slot(Team(name="Ghosts"), Side.OFFENSE, "QB1", set()) is None


class TestSubsAndEmergencies:
    """Tests for the fallback helpers."""

    def test_best_sub_skips_unavailable(self, make_team):
        team = make_team(size=2)
        _hurt(team.roster[0])
        assert get_best_sub(team, Position.QB, set()) is team.roster[1]

    def test_emergency_prefers_healthy(self, make_team, make_player):
        """Healthy players rank ahead of hurt ones regardless of overall."""
        team = make_team(size=0)
        star = make_player(rating=95)
        scrub = make_player(rating=10)
        _hurt(star)
        team.add_player(star)
        team.add_player(scrub)
        fill = find_emergency_player(team, Position.QB, set())
        assert fill.slot == EMERGENCY_SLOT
        assert fill.player is scrub

    def test_players_for_slots_in_slot_order(self, make_team):
        team = make_team()
        fills = get_players_for_slots(team, Side.OFFENSE, "OL", set())
        assert [f.slot for f in fills] == ["OL1", "OL2", "OL3"]
        assert len({f.player.id for f in fills}) == 3

    def test_players_for_slots_follow_a_formation(self, make_team):
        """Given a formation's slot list, its order wins over the depth chart's."""
        team = make_team()
        used = set()
        fills = get_players_for_slots(team, Side.OFFENSE, "WR", used, slots=("QB1", "WR2", "WR1", "OL1"))
        assert [f.slot for f in fills] == ["WR2", "WR1"]
        assert used == {f.player.id for f in fills}
