"""Tests for GSet lattice."""

import pytest

from semithreads.errors import DecodeError, EncodeError
from semithreads.lattice.gset import GSet
from semithreads.lattice.protocol import Ordering


class TestGSetBasics:
    """Tests for construction and membership."""

    def test_initial_set_is_empty(self):
        s = GSet()
        assert len(s) == 0
        assert s.is_bottom()
        assert s.elements == frozenset()

    def test_singleton(self):
        s = GSet.singleton("a")
        assert "a" in s
        assert s.value == frozenset({"a"})

    def test_add(self):
        s = GSet()
        s.add(("alice", 0))
        assert ("alice", 0) in s
        assert not s.is_bottom()

    def test_iterates_sorted(self):
        s = GSet({"c", "a", "b"})
        assert list(s) == ["a", "b", "c"]


class TestGSetMerge:
    """Tests for union merge and subset ordering."""

    def test_merge_is_union(self):
        a = GSet({"apple"})
        a.merge(GSet({"banana"}))
        assert a.elements == frozenset({"apple", "banana"})

    def test_merge_is_idempotent(self):
        a = GSet({"x"})
        a.merge(GSet({"x"}))
        assert a == GSet({"x"})

    def test_merge_does_not_alias(self):
        a = GSet()
        b = GSet({"x"})
        a.merge(b)
        b.add("y")
        assert "y" not in a

    def test_subset_is_less(self):
        assert GSet({"a"}).partial_cmp(GSet({"a", "b"})) is Ordering.LESS
        assert GSet({"a", "b"}).partial_cmp(GSet({"a"})) is Ordering.GREATER

    def test_disjoint_is_incomparable(self):
        assert GSet({"a"}).partial_cmp(GSet({"b"})) is None
        assert not GSet({"a"}) <= GSet({"b"})
        assert not GSet({"b"}) <= GSet({"a"})


class TestGSetWire:
    """Tests for wire conversion."""

    def test_to_wire_sorted(self):
        assert GSet({"b", "a"}).to_wire() == ["a", "b"]

    def test_from_wire_tuples(self):
        s = GSet.from_wire((("bob", 1), ("alice", 0)))
        assert s.elements == frozenset({("alice", 0), ("bob", 1)})

    def test_from_wire_rejects_non_array(self):
        with pytest.raises(DecodeError):
            GSet.from_wire({"a": 1})

    def test_from_wire_rejects_unhashable(self):
        with pytest.raises(DecodeError):
            GSet.from_wire(({"a": 1},))

    def test_to_wire_unorderable_raises(self):
        with pytest.raises(EncodeError):
            GSet({"a", 1}).to_wire()


class TestGSetElementType:
    """Tests for GSet.of."""

    def test_of_is_cached(self):
        assert GSet.of(str) is GSet.of(str)
        assert GSet.of(str).__name__ == "GSet[str]"
        assert GSet.element_type is None

    def test_typed_set_is_a_gset(self):
        titles = GSet.of(str).singleton("Hello")
        assert isinstance(titles, GSet)
        assert titles == GSet({"Hello"})

    def test_matching_elements_decode(self):
        edges = GSet.of(tuple[str, int]).from_wire((("bob", 1), ("alice", 0)))
        assert edges.elements == frozenset({("alice", 0), ("bob", 1)})

    @pytest.mark.parametrize("wire", [(7,), (("bob", "1"),), (("bob",),), ((1, "bob"),), (("bob", -1),)])
    def test_ill_typed_elements_rejected(self, wire):
        with pytest.raises(DecodeError, match="ill-typed element"):
            GSet.of(tuple[str, int]).from_wire(wire)

    def test_str_elements(self):
        with pytest.raises(DecodeError, match="ill-typed element"):
            GSet.of(str).from_wire(("Hello", 1))

    def test_of_rejects_unsupported_type(self):
        with pytest.raises(TypeError, match="key type"):
            GSet.of(float)
