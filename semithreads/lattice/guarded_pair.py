"""Guarded pair: a value superseded wholesale by a greater guard.

A guarded pair holds an ordered ``guard`` and a joinable ``value``.
When two pairs meet, the one with the strictly greater guard wins
outright and the other side's value is discarded. When the guards are
equal, the values are joined. This gives "replace" semantics on top of
a grow-only value: bumping the guard starts a fresh value that stale
replicas cannot add to.

Example::

    Titles = GuardedPair.of(Max, GSet)

    a = Titles(Max(0), GSet({"Draft"}))
    b = Titles(Max(1), GSet({"Final"}))
    a.merge(b)
    assert a.value.elements == frozenset({"Final"})
"""

from __future__ import annotations

from typing import Any, ClassVar, Self

from semithreads.errors import DecodeError
from semithreads.lattice.protocol import Ordering, Semilattice

_SPECIALIZATIONS: dict[tuple[type[Semilattice], type[Semilattice]], type[GuardedPair]] = {}


class GuardedPair(Semilattice):
    """A (guard, value) pair joined guard-first.

    The guard type should be totally ordered (e.g. ``Max``). If two
    guards are ever incomparable, both guards and both values are
    joined so that the operation stays total.

    Args:
        guard: Initial guard (default bottom).
        value: Initial value (default bottom).
    """

    __slots__ = ("_guard", "_value")

    guard_type: ClassVar[type[Semilattice] | None] = None
    value_type: ClassVar[type[Semilattice] | None] = None

    def __init__(self, guard: Semilattice | None = None, value: Semilattice | None = None):
        if self.guard_type is None or self.value_type is None:
            raise TypeError("GuardedPair needs types; use GuardedPair.of(guard_type, value_type)")
        self._guard = self.guard_type()
        self._value = self.value_type()
        if guard is not None:
            self._guard.merge(guard)
        if value is not None:
            self._value.merge(value)

    @classmethod
    def of(cls, guard_type: type[Semilattice], value_type: type[Semilattice]) -> type[GuardedPair]:
        """Return the pair class for the given guard and value types."""
        for t in (guard_type, value_type):
            if not isinstance(t, type) or not issubclass(t, Semilattice):
                raise TypeError(f"GuardedPair components must be semilattices, got {t!r}")
        key = (guard_type, value_type)
        specialized = _SPECIALIZATIONS.get(key)
        if specialized is None:
            specialized = type(
                f"GuardedPair[{guard_type.__name__}, {value_type.__name__}]",
                (GuardedPair,),
                {
                    "__slots__": (),
                    "guard_type": guard_type,
                    "value_type": value_type,
                    "__module__": __name__,
                },
            )
            _SPECIALIZATIONS[key] = specialized
        return specialized

    @property
    def guard(self) -> Semilattice:
        return self._guard

    @property
    def value(self) -> Semilattice:
        return self._value

    def merge(self, other: GuardedPair) -> None:
        ordering = self._guard.partial_cmp(other._guard)
        if ordering is Ordering.GREATER:
            return
        if ordering is Ordering.LESS:
            self._guard = self.guard_type()
            self._guard.merge(other._guard)
            self._value = self.value_type()
            self._value.merge(other._value)
            return
        self._guard.merge(other._guard)
        self._value.merge(other._value)

    def partial_cmp(self, other: GuardedPair) -> Ordering | None:
        ordering = self._guard.partial_cmp(other._guard)
        if ordering is Ordering.EQUAL:
            return self._value.partial_cmp(other._value)
        return ordering

    def is_bottom(self) -> bool:
        return self._guard.is_bottom() and self._value.is_bottom()

    def to_wire(self) -> dict:
        wire = {}
        if not self._guard.is_bottom():
            wire[0] = self._guard.to_wire()
        if not self._value.is_bottom():
            wire[1] = self._value.to_wire()
        return wire

    @classmethod
    def from_wire(cls, wire: Any) -> Self:
        if not isinstance(wire, dict):
            raise DecodeError(f"{cls.__name__} expects a map, got {type(wire).__name__}")
        unknown = set(wire) - {0, 1}
        if unknown:
            raise DecodeError(f"{cls.__name__} has unexpected fields {sorted(unknown, key=repr)}")
        result = cls()
        if 0 in wire:
            result._guard = cls.guard_type.from_wire(wire[0])
        if 1 in wire:
            result._value = cls.value_type.from_wire(wire[1])
        return result

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GuardedPair):
            return NotImplemented
        return self._guard == other._guard and self._value == other._value

    def __repr__(self) -> str:
        return f"{type(self).__name__}(guard={self._guard!r}, value={self._value!r})"
