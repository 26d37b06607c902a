"""Tests for position overall and slot suitability."""

import pytest

from sandlot.core.enums import Position, Side
from sandlot.engine.ratings import (
    POSITION_WEIGHTS,
    base_position,
    best_position,
    calculate_overall,
    calculate_slot_suitability,
)


class TestBasePosition:
    """Tests for slot name parsing."""

    @pytest.mark.parametrize("slot,position", [
        ("QB1", Position.QB), ("WR2", Position.WR), ("DL4", Position.DL), ("DB3", Position.DB),
    ])
    def test_strips_digits(self, slot, position):
        assert base_position(slot) == position

    def test_unknown_slot(self):
        assert base_position("EMERGENCY") is None


class TestOverall:
    """Tests for calculate_overall()."""

    def test_weights_sum_to_one(self):
        for weights in POSITION_WEIGHTS.values():
            assert sum(weights.values()) == pytest.approx(1.0)

    def test_flat_player_rates_flat_at_qb(self, make_player):
        """QB weights only read 1-99 ratings, so an all-50 kid is a 50."""
        assert calculate_overall(make_player(rating=50), Position.QB) == 50

    def test_accepts_position_names(self, make_player):
        player = make_player(rating=70)
        assert calculate_overall(player, "QB") == calculate_overall(player, Position.QB)

    def test_unknown_position_is_zero(self, make_player):
        assert calculate_overall(make_player(), None) == 0
        assert calculate_overall(make_player(), "K") == 0

    def test_blocking_drives_lineman_overall(self, make_player):
        weak = make_player(blocking=20, strength=20)
        strong = make_player(blocking=90, strength=90)
        assert calculate_overall(strong, Position.OL) > calculate_overall(weak, Position.OL)

    def test_best_position(self, make_player):
        """An accurate, smart kid is a quarterback."""
        passer = make_player(rating=30, throwing_accuracy=99, playbook_iq=99)
        assert best_position(passer) == Position.QB


class TestSlotSuitability:
    """Tests for calculate_slot_suitability()."""

    def test_within_rating_range(self, make_team, tables):
        team = make_team(rating=99)
        for slot in tables.offense_formation("Balanced").slots:
            score = calculate_slot_suitability(team.roster[0], slot, Side.OFFENSE, team, tables)
            assert 1 <= score <= 99

    def test_slot_priorities_matter(self, make_team, make_player, tables):
        """A fast, sure-handed kid suits WR1 better than a slow one."""
        team = make_team()
        burner = make_player(speed=90, catching_hands=90)
        plodder = make_player(speed=20, catching_hands=20)
        assert (calculate_slot_suitability(burner, "WR1", Side.OFFENSE, team, tables)
                > calculate_slot_suitability(plodder, "WR1", Side.OFFENSE, team, tables))

    def test_falls_back_to_overall_without_priorities(self, make_team, make_player, tables):
        """3-1-3 defines no slot priorities, so suitability is the overall."""
        team = make_team(defense="3-1-3")
        player = make_player(tackling=80)
        assert (calculate_slot_suitability(player, "LB1", Side.DEFENSE, team, tables)
                == calculate_overall(player, Position.LB))
