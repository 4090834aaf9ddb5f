"""Monotonic maximum register.

The simplest join-semilattice: the join of two values is the larger.
Used for private vote counters, where an actor only ever increments
its own counter and replicas keep the largest value they have seen.

Example::

    a = Max(3)
    b = Max(5)
    a.merge(b)
    assert a.value == 5
"""

from __future__ import annotations

from typing import Any, Self

from semithreads.errors import DecodeError
from semithreads.lattice.protocol import Ordering, Semilattice, compare_values

MAX_U64 = 2**64 - 1


class Max(Semilattice):
    """Non-negative integer joined by ``max``. Bottom is 0.

    Args:
        value: Initial value (default 0).

    Raises:
        ValueError: If value is negative or does not fit in 64 bits.
    """

    __slots__ = ("_value",)

    def __init__(self, value: int = 0):
        if value < 0 or value > MAX_U64:
            raise ValueError(f"Max value must be in [0, 2**64), got {value}")
        self._value = value

    @property
    def value(self) -> int:
        """Current value."""
        return self._value

    def increment(self, n: int = 1) -> None:
        """Advance the value by ``n``.

        Raises:
            ValueError: If n is not positive or the result would not fit
                in 64 bits. The value is left unchanged.
        """
        if n < 1:
            raise ValueError(f"Increment must be positive, got {n}")
        if self._value + n > MAX_U64:
            raise ValueError(f"Increment by {n} overflows 2**64 from {self._value}")
        self._value += n

    def merge(self, other: Max) -> None:
        self._value = max(self._value, other._value)

    def partial_cmp(self, other: Max) -> Ordering | None:
        return compare_values(self._value, other._value)

    def is_bottom(self) -> bool:
        return self._value == 0

    def to_wire(self) -> int:
        return self._value

    @classmethod
    def from_wire(cls, wire: Any) -> Self:
        if isinstance(wire, bool) or not isinstance(wire, int):
            raise DecodeError(f"Max expects an integer, got {type(wire).__name__}")
        if wire < 0 or wire > MAX_U64:
            raise DecodeError(f"Max value out of range: {wire}")
        return cls(wire)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Max):
            return NotImplemented
        return self._value == other._value

    def __repr__(self) -> str:
        return f"Max({self._value})"
