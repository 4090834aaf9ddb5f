"""Base class for join-semilattices.

A join-semilattice is a set of values with a ``join`` operation that is:

- **Idempotent**: ``a.join(a) == a``
- **Commutative**: ``a.join(b) == b.join(a)``
- **Associative**: ``a.join(b.join(c)) == a.join(b).join(c)``

and a ``bottom`` element that is the identity of ``join``. These
properties are what let replicas merge in any order, any number of
times, and still converge.

Every join induces a partial order: ``a <= b`` exactly when
``a.join(b) == b``. Subclasses report that order through
``partial_cmp`` and get the rich comparison operators for free.
"""

from __future__ import annotations

import copy
import enum
from abc import ABC, abstractmethod
from typing import Any, Iterable, Self, get_args, get_origin


class Ordering(enum.IntEnum):
    """Result of comparing two comparable lattice values."""

    LESS = -1
    EQUAL = 0
    GREATER = 1

    def reverse(self) -> Ordering:
        return Ordering(-self.value)


def combine_orderings(orderings: Iterable[Ordering | None]) -> Ordering | None:
    """Fold per-component orderings into the ordering of the whole.

    All EQUAL gives EQUAL. EQUAL-or-LESS with at least one LESS gives
    LESS, and symmetrically for GREATER. Any incomparable component, or
    components pointing in opposite directions, gives None.
    """
    result = Ordering.EQUAL
    for ordering in orderings:
        if ordering is None:
            return None
        if ordering is Ordering.EQUAL:
            continue
        if result is Ordering.EQUAL:
            result = ordering
        elif result is not ordering:
            return None
    return result


def conforms(value: Any, key_type: Any) -> bool:
    """True if ``value`` has the shape ``key_type`` describes.

    ``key_type`` is ``None`` (anything hashable), ``str``, ``int``
    (non-negative, not bool) or a ``tuple[...]`` alias of those.
    """
    if key_type is None:
        return True
    if key_type is int:
        return isinstance(value, int) and not isinstance(value, bool) and value >= 0
    if key_type is str:
        return isinstance(value, str)
    if get_origin(key_type) is tuple:
        parts = get_args(key_type)
        return (
            isinstance(value, tuple)
            and len(value) == len(parts)
            and all(conforms(v, t) for v, t in zip(value, parts))
        )
    raise TypeError(f"unsupported key type {key_type!r}")


def validate_key_type(key_type: Any) -> None:
    """Raise TypeError unless ``conforms`` understands ``key_type``."""
    if key_type is None or key_type is int or key_type is str:
        return
    if get_origin(key_type) is tuple and get_args(key_type):
        for part in get_args(key_type):
            validate_key_type(part)
        return
    raise TypeError(f"unsupported key type {key_type!r}; use str, int or tuple[...] of them")


def key_type_name(key_type: Any) -> str:
    if key_type is None:
        return "Any"
    if isinstance(key_type, type):
        return key_type.__name__
    return "[" + ", ".join(key_type_name(t) for t in get_args(key_type)) + "]"


def compare_values(a: Any, b: Any) -> Ordering:
    """Total-order comparison of two plain (non-lattice) values."""
    if a < b:
        return Ordering.LESS
    if a > b:
        return Ordering.GREATER
    return Ordering.EQUAL


class Semilattice(ABC):
    """Abstract join-semilattice.

    Subclasses implement ``merge`` (in-place join), ``partial_cmp``,
    ``to_wire`` and ``from_wire``. The zero-argument constructor must
    build the bottom element.
    """

    __slots__ = ()

    @classmethod
    def bottom(cls) -> Self:
        """The identity element of ``join``."""
        return cls()

    def is_bottom(self) -> bool:
        """True if this value equals the bottom element."""
        return self == self.bottom()

    @abstractmethod
    def merge(self, other: Self) -> None:
        """Join ``other`` into this value (in-place).

        Must not keep references to mutable state owned by ``other``.
        """
        ...

    def join(self, other: Self) -> Self:
        """Return the join of this value and ``other`` as a new value."""
        result = copy.deepcopy(self)
        result.merge(other)
        return result

    @abstractmethod
    def partial_cmp(self, other: Self) -> Ordering | None:
        """Compare under the induced partial order; None if incomparable."""
        ...

    @abstractmethod
    def to_wire(self) -> Any:
        """Convert to msgpack-serializable primitives."""
        ...

    @classmethod
    @abstractmethod
    def from_wire(cls, wire: Any) -> Self:
        """Rebuild a value from ``to_wire()`` output.

        Raises:
            DecodeError: If ``wire`` does not have the expected shape.
        """
        ...

    def __le__(self, other: object) -> bool:
        if not isinstance(other, Semilattice):
            return NotImplemented
        return self.partial_cmp(other) in (Ordering.LESS, Ordering.EQUAL)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Semilattice):
            return NotImplemented
        return self.partial_cmp(other) is Ordering.LESS

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, Semilattice):
            return NotImplemented
        return self.partial_cmp(other) in (Ordering.GREATER, Ordering.EQUAL)

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, Semilattice):
            return NotImplemented
        return self.partial_cmp(other) is Ordering.GREATER
