"""Tests for the seedable random sources."""

import pytest

from sandlot.core.rng import SequenceRandom, SimRandom


class TestSimRandom:
    """Tests for SimRandom."""

    def test_same_seed_same_sequence(self):
        """Two sources with the same seed should agree roll for roll."""
        a, b = SimRandom(7), SimRandom(7)
        assert [a.random() for _ in range(20)] == [b.random() for _ in range(20)]

    def test_randint_is_inclusive(self):
        """randint should reach both ends of the range and nothing outside it."""
        rng = SimRandom(3)
        seen = {rng.randint(1, 3) for _ in range(500)}
        assert seen == {1, 2, 3}

    def test_randint_swapped_bounds(self):
        """Reversed bounds should be treated as the same range."""
        rng = SimRandom(3)
        for _ in range(100):
            assert -2 <= rng.randint(0, -2) <= 0

    def test_noise_is_bounded(self):
        """noise(spread) should stay within [-spread, spread]."""
        rng = SimRandom(11)
        assert all(abs(rng.noise(5.0)) <= 5.0 for _ in range(500))

    def test_choice_empty_raises(self):
        """Choosing from nothing is an error."""
        with pytest.raises(IndexError):
            SimRandom(1).choice([])

    def test_shuffle_is_permutation(self):
        """shuffle should reorder in place without losing items."""
        items = list(range(20))
        SimRandom(5).shuffle(items)
        assert sorted(items) == list(range(20))

    def test_spawn_is_deterministic(self):
        """Children spawned from equal parents should produce equal rolls."""
        a, b = SimRandom(9).spawn(), SimRandom(9).spawn()
        assert a.random() == b.random()


class TestSequenceRandom:
    """Tests for the scripted random source."""

    def test_replays_then_repeats_last(self):
        """Values are replayed in order, the last one forever."""
        rng = SequenceRandom([0.1, 0.2])
        assert [rng.random() for _ in range(4)] == [0.1, 0.2, 0.2, 0.2]
        assert rng.calls == 4

    def test_half_gives_zero_noise(self):
        """0.5 is the neutral value for noise."""
        assert SequenceRandom([0.5]).noise(10.0) == 0.0

    def test_helpers_follow_the_script(self):
        """chance and randint are driven by random()."""
        assert SequenceRandom([0.0]).chance(0.01)
        assert not SequenceRandom([0.99]).chance(0.5)
        assert SequenceRandom([0.5]).randint(-2, 0) == -1

    def test_rejects_empty(self):
        """An empty script is a usage error."""
        with pytest.raises(ValueError):
            SequenceRandom([])

    def test_rejects_out_of_range(self):
        """Values must be valid random() outputs."""
        with pytest.raises(ValueError):
            SequenceRandom([1.0])
