"""Grow-only set (G-Set).

Elements can be added but never removed, so the join is plain set
union. Used for title sets, reply edges and derived back-references.

``GSet.of(element_type)`` gives a set whose decoded elements are
checked against ``element_type``; the bare ``GSet`` accepts any
hashable element.

Example::

    a = GSet({"apple"})
    b = GSet({"banana"})
    a.merge(b)
    assert a.elements == frozenset({"apple", "banana"})

    ReplyTo = GSet.of(tuple[str, int])
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Self

from semithreads.errors import DecodeError, EncodeError
from semithreads.lattice.protocol import (
    Ordering,
    Semilattice,
    conforms,
    key_type_name,
    validate_key_type,
)

if TYPE_CHECKING:
    from collections.abc import Hashable, Iterable, Iterator

_SPECIALIZATIONS: dict[Any, type[GSet]] = {}


class GSet(Semilattice):
    """Grow-only set of hashable, mutually orderable elements.

    Args:
        elements: Initial elements (default empty).
    """

    __slots__ = ("_elements",)

    element_type: ClassVar[Any] = None

    def __init__(self, elements: Iterable[Hashable] = ()):
        self._elements: set[Hashable] = set(elements)

    @classmethod
    def of(cls, element_type: Any) -> type[GSet]:
        """Return the set class whose elements are ``element_type``.

        Raises:
            TypeError: If element_type is not str, int or a tuple of them.
        """
        validate_key_type(element_type)
        specialized = _SPECIALIZATIONS.get(element_type)
        if specialized is None:
            specialized = type(
                f"GSet[{key_type_name(element_type)}]",
                (GSet,),
                {"__slots__": (), "element_type": element_type, "__module__": __name__},
            )
            _SPECIALIZATIONS[element_type] = specialized
        return specialized

    @classmethod
    def singleton(cls, element: Hashable) -> Self:
        """A set holding exactly one element."""
        return cls((element,))

    @property
    def value(self) -> frozenset:
        """Current elements (alias for ``elements``)."""
        return self.elements

    @property
    def elements(self) -> frozenset:
        """Frozenset of the current elements."""
        return frozenset(self._elements)

    def add(self, element: Hashable) -> None:
        """Add an element."""
        self._elements.add(element)

    def merge(self, other: GSet) -> None:
        self._elements |= other._elements

    def partial_cmp(self, other: GSet) -> Ordering | None:
        if self._elements == other._elements:
            return Ordering.EQUAL
        if self._elements < other._elements:
            return Ordering.LESS
        if self._elements > other._elements:
            return Ordering.GREATER
        return None

    def is_bottom(self) -> bool:
        return not self._elements

    def to_wire(self) -> list:
        try:
            return sorted(self._elements)
        except TypeError as exc:
            raise EncodeError(f"{type(self).__name__} elements are not mutually orderable: {exc}") from exc

    @classmethod
    def from_wire(cls, wire: Any) -> Self:
        if not isinstance(wire, (list, tuple)):
            raise DecodeError(f"{cls.__name__} expects an array, got {type(wire).__name__}")
        for element in wire:
            if not conforms(element, cls.element_type):
                raise DecodeError(f"{cls.__name__} has ill-typed element {element!r}")
        try:
            return cls(wire)
        except TypeError as exc:
            raise DecodeError(f"{cls.__name__} element is not hashable: {exc}") from exc

    def __contains__(self, element: object) -> bool:
        return element in self._elements

    def __len__(self) -> int:
        return len(self._elements)

    def __iter__(self) -> Iterator[Hashable]:
        return iter(sorted(self._elements))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GSet):
            return NotImplemented
        return self._elements == other._elements

    def __repr__(self) -> str:
        return f"{type(self).__name__}({sorted(self._elements)!r})"
