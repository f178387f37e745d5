"""
Tests for the deterministic random source and weighted tables.

Tests:
- LCG step and seed wrapping
- Reproducibility
- Weighted pick ordering, boundaries and fallback
- Long-run frequencies
"""

import pytest

from ..config import ReelOption
from ..engine_core.rng import DeterministicRandom, to_uint32, UINT32_MASK
from ..engine_core.types import Action
from ..engine_core.weighted import weighted_pick
from .helpers import ScriptedRandom


class TestDeterministicRandom:
    """Tests for the seeded LCG."""

    def test_first_step_from_zero(self):
        """Seed 0 steps to the increment."""
        rng = DeterministicRandom(0)
        value = rng.next()
        assert rng.seed == 1013904223
        assert value == 1013904223 / 2 ** 32

    def test_first_step_from_one(self):
        """One multiply-add step."""
        rng = DeterministicRandom(1)
        rng.next()
        assert rng.seed == 1664525 + 1013904223

    def test_same_seed_same_sequence(self):
        """Two generators with one seed agree draw for draw."""
        a = DeterministicRandom(42)
        b = DeterministicRandom(42)
        assert [a.next() for _ in range(50)] == [b.next() for _ in range(50)]

    def test_values_in_unit_interval(self):
        """Every draw is in [0, 1)."""
        rng = DeterministicRandom(12345)
        for _ in range(2000):
            value = rng.next()
            assert 0 <= value < 1

    def test_state_stays_32_bit(self):
        """The state wraps modulo 2**32."""
        rng = DeterministicRandom(UINT32_MASK)
        for _ in range(10):
            rng.next()
            assert 0 <= rng.seed <= UINT32_MASK

    def test_negative_seed_wraps(self):
        """-1 becomes 0xFFFFFFFF."""
        assert DeterministicRandom(-1).seed == 0xFFFFFFFF

    def test_float_seed_truncates(self):
        """Fractional seeds truncate toward zero."""
        assert DeterministicRandom(42.9).seed == 42
        assert to_uint32(-0.5) == 0

    def test_set_seed_restarts_sequence(self):
        """set_seed puts the generator back on a known sequence."""
        rng = DeterministicRandom(7)
        first = [rng.next() for _ in range(5)]
        rng.set_seed(7)
        assert [rng.next() for _ in range(5)] == first

    def test_next_int_range(self):
        """next_int stays within [0, max)."""
        rng = DeterministicRandom(3)
        values = {rng.next_int(11) for _ in range(500)}
        assert values <= set(range(11))
        assert len(values) == 11

    def test_next_int_rejects_empty_range(self):
        """next_int(0) is an error."""
        with pytest.raises(ValueError):
            DeterministicRandom(1).next_int(0)


def _table(*weights):
    labels = list(Action)
    return [ReelOption[Action](label=labels[i], weight=w) for i, w in enumerate(weights)]


class TestWeightedPick:
    """Tests for weighted_pick."""

    def test_single_option(self):
        """A one-entry table always returns it."""
        table = _table(5)
        rng = DeterministicRandom(9)
        assert all(weighted_pick(table, rng) is Action.STRIKE for _ in range(20))

    def test_table_order(self):
        """Low rolls land on earlier entries."""
        table = _table(1, 1)
        assert weighted_pick(table, ScriptedRandom([0.0])) is Action.STRIKE
        assert weighted_pick(table, ScriptedRandom([0.75])) is Action.GUARD

    def test_boundary_belongs_to_earlier_entry(self):
        """A roll exactly at a cumulative weight picks the entry ending there."""
        table = _table(1, 1)
        assert weighted_pick(table, ScriptedRandom([0.5])) is Action.STRIKE

    def test_zero_weight_entry_skipped(self):
        """A zero-weight entry is not picked by an interior roll."""
        table = _table(0, 1)
        assert weighted_pick(table, ScriptedRandom([0.5])) is Action.GUARD

    def test_overshoot_falls_back_to_last(self):
        """A roll past the total falls back to the last entry."""
        table = _table(1, 1, 1)
        assert weighted_pick(table, ScriptedRandom([1.5])) is Action.HEX

    def test_exactly_one_draw(self):
        """Each pick consumes one draw."""
        rng = ScriptedRandom([0.3, 0.6])
        weighted_pick(_table(1, 2, 3), rng)
        assert rng.calls == 1

    def test_empty_table_rejected(self):
        """An empty table is an error."""
        with pytest.raises(ValueError):
            weighted_pick([], DeterministicRandom(1))

    def test_frequencies_converge(self):
        """Observed frequencies approach weight/total."""
        table = _table(1, 2, 7)
        rng = DeterministicRandom(7)
        draws = 100_000
        counts = {Action.STRIKE: 0, Action.GUARD: 0, Action.HEX: 0}
        for _ in range(draws):
            counts[weighted_pick(table, rng)] += 1

        assert counts[Action.STRIKE] / draws == pytest.approx(0.1, abs=0.01)
        assert counts[Action.GUARD] / draws == pytest.approx(0.2, abs=0.01)
        assert counts[Action.HEX] / draws == pytest.approx(0.7, abs=0.01)
