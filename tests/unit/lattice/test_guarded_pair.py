"""Tests for GuardedPair lattice."""

import pytest

from semithreads.errors import DecodeError
from semithreads.lattice.gset import GSet
from semithreads.lattice.guarded_pair import GuardedPair
from semithreads.lattice.max import Max
from semithreads.lattice.protocol import Ordering

Titles = GuardedPair.of(Max, GSet)


class TestGuardedPairCreation:
    """Tests for construction."""

    def test_default_is_bottom(self):
        p = Titles()
        assert p.is_bottom()
        assert p.guard == Max(0)
        assert p.value == GSet()

    def test_of_is_cached(self):
        assert GuardedPair.of(Max, GSet) is Titles

    def test_bare_pair_cannot_be_built(self):
        with pytest.raises(TypeError):
            GuardedPair()

    def test_guard_zero_with_value_is_not_bottom(self):
        assert not Titles(Max(0), GSet({"t"})).is_bottom()


class TestGuardedPairMerge:
    """Tests for guard-first merge."""

    def test_greater_guard_supersedes(self):
        a = Titles(Max(0), GSet({"Draft"}))
        a.merge(Titles(Max(1), GSet({"Final"})))
        assert a.guard.value == 1
        assert a.value.elements == frozenset({"Final"})

    def test_lesser_guard_is_discarded(self):
        a = Titles(Max(2), GSet({"Current"}))
        a.merge(Titles(Max(1), GSet({"Stale"})))
        assert a.value.elements == frozenset({"Current"})

    def test_equal_guards_join_values(self):
        a = Titles(Max(1), GSet({"A"}))
        a.merge(Titles(Max(1), GSet({"B"})))
        assert a.value.elements == frozenset({"A", "B"})

    def test_merge_does_not_alias(self):
        a = Titles()
        b = Titles(Max(1), GSet({"x"}))
        a.merge(b)
        b.value.add("y")
        assert "y" not in a.value

    def test_partial_cmp_follows_guard(self):
        low = Titles(Max(0), GSet({"a", "b"}))
        high = Titles(Max(1), GSet())
        assert low.partial_cmp(high) is Ordering.LESS
        assert high.partial_cmp(low) is Ordering.GREATER

    def test_partial_cmp_equal_guard_uses_value(self):
        a = Titles(Max(1), GSet({"a"}))
        b = Titles(Max(1), GSet({"b"}))
        assert a.partial_cmp(b) is None

    def test_order_agrees_with_join(self):
        low = Titles(Max(0), GSet({"a"}))
        high = Titles(Max(3), GSet({"z"}))
        assert low <= high
        assert low.join(high) == high


class TestGuardedPairWire:
    """Tests for wire conversion."""

    def test_wire_omits_bottom_parts(self):
        assert Titles().to_wire() == {}
        assert Titles(Max(0), GSet({"t"})).to_wire() == {1: ["t"]}

    def test_from_wire(self):
        wire = {0: 2, 1: ("t",)}
        assert Titles.from_wire(wire) == Titles(Max(2), GSet({"t"}))

    def test_from_wire_rejects_unknown_field(self):
        with pytest.raises(DecodeError):
            Titles.from_wire({5: 1})
