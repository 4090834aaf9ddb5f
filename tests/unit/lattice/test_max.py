"""Tests for Max lattice."""

import pytest

from semithreads.errors import DecodeError
from semithreads.lattice.max import MAX_U64, Max
from semithreads.lattice.protocol import Ordering, Semilattice


class TestMaxCreation:
    """Tests for Max construction."""

    def test_default_is_bottom(self):
        m = Max()
        assert m.value == 0
        assert m.is_bottom()
        assert m == Max.bottom()

    def test_is_semilattice(self):
        assert isinstance(Max(), Semilattice)

    def test_negative_raises(self):
        with pytest.raises(ValueError, match="Max value"):
            Max(-1)

    def test_too_large_raises(self):
        with pytest.raises(ValueError):
            Max(2**64)

    def test_repr(self):
        assert repr(Max(7)) == "Max(7)"


class TestMaxIncrement:
    """Tests for increment."""

    def test_increment_default(self):
        m = Max(2)
        m.increment()
        assert m.value == 3

    def test_increment_by_n(self):
        m = Max()
        m.increment(3)
        assert m.value == 3

    def test_increment_non_positive_raises(self):
        m = Max()
        with pytest.raises(ValueError, match="positive"):
            m.increment(0)

    def test_increment_to_the_top(self):
        m = Max(MAX_U64 - 1)
        m.increment()
        assert m.value == MAX_U64

    def test_increment_past_64_bits_raises(self):
        m = Max(MAX_U64 - 1)
        with pytest.raises(ValueError, match="overflows"):
            m.increment(2)
        assert m.value == MAX_U64 - 1


class TestMaxMerge:
    """Tests for merge, join and ordering."""

    def test_merge_keeps_larger(self):
        a = Max(3)
        a.merge(Max(5))
        assert a.value == 5

    def test_merge_smaller_is_noop(self):
        a = Max(5)
        a.merge(Max(3))
        assert a.value == 5

    def test_join_does_not_mutate(self):
        a = Max(1)
        b = Max(4)
        c = a.join(b)
        assert c.value == 4
        assert a.value == 1
        assert b.value == 4

    def test_partial_cmp(self):
        assert Max(1).partial_cmp(Max(2)) is Ordering.LESS
        assert Max(2).partial_cmp(Max(2)) is Ordering.EQUAL
        assert Max(3).partial_cmp(Max(2)) is Ordering.GREATER

    def test_rich_comparisons(self):
        assert Max(1) <= Max(2)
        assert Max(1) < Max(2)
        assert Max(2) >= Max(2)
        assert not Max(2) > Max(2)


class TestMaxWire:
    """Tests for wire conversion."""

    def test_to_wire(self):
        assert Max(9).to_wire() == 9

    def test_from_wire(self):
        assert Max.from_wire(9) == Max(9)

    @pytest.mark.parametrize("wire", ["9", 1.5, True, None, -1, 2**64])
    def test_from_wire_rejects(self, wire):
        with pytest.raises(DecodeError):
            Max.from_wire(wire)
