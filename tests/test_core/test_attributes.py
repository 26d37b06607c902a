"""Tests for player attribute records."""

import pytest

from sandlot.core.attributes import PlayerAttributes, clamp_rating


class TestPlayerAttributes:
    """Tests for PlayerAttributes."""

    def test_defaults(self):
        """Ratings default to 50; height and weight to kid-sized values."""
        attrs = PlayerAttributes()
        assert attrs.get("speed") == 50
        assert attrs.get("height") == 60
        assert attrs.get("weight") == 100

    def test_unknown_name_returns_default(self):
        """Unknown attribute names should not raise on read."""
        attrs = PlayerAttributes()
        assert attrs.get("kick_power") == 0
        assert attrs.get("kick_power", 42) == 42

    def test_unknown_name_raises_on_write(self):
        """Writing an unknown attribute is a bug."""
        with pytest.raises(KeyError):
            PlayerAttributes().set("kick_power", 70)

    def test_set_clamps_ratings(self):
        """Ratings are clamped into [1, 99]."""
        attrs = PlayerAttributes()
        attrs.set("speed", 150)
        attrs.set("strength", -20)
        assert attrs.get("speed") == 99
        assert attrs.get("strength") == 1

    def test_set_leaves_size_unscaled(self):
        """Height and weight are not ratings."""
        attrs = PlayerAttributes()
        attrs.set("weight", 180)
        attrs.set("height", 70)
        assert attrs.get("weight") == 180
        assert attrs.get("height") == 70

    def test_from_flat(self):
        """from_flat sets each named attribute in its category."""
        attrs = PlayerAttributes.from_flat(strength=95, blocking=90, clutch=10)
        assert attrs.physical.strength == 95
        assert attrs.technical.blocking == 90
        assert attrs.mental.clutch == 10

    def test_dict_round_trip(self):
        """to_dict/from_dict preserve every value."""
        attrs = PlayerAttributes.from_flat(speed=77, toughness=33, weight=140)
        assert PlayerAttributes.from_dict(attrs.to_dict()) == attrs

    def test_names_cover_all_categories(self):
        """names() lists attributes from all three categories."""
        names = PlayerAttributes().names()
        assert {"speed", "playbook_iq", "block_shedding"} <= set(names)
        assert len(names) == len(set(names))


class TestClampRating:
    """Tests for clamp_rating."""

    @pytest.mark.parametrize("value,expected", [(0, 1), (1, 1), (49.6, 50), (99, 99), (120, 99)])
    def test_clamp(self, value, expected):
        """Values round and clamp into [1, 99]."""
        assert clamp_rating(value) == expected
