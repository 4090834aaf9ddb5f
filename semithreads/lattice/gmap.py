"""Grow-only map (G-Map).

A map whose keys can only be added and whose values are themselves
semilattices. The join takes the union of keys and joins values on
shared keys. An absent key is indistinguishable from a key mapped to
the value type's bottom element, so bottom entries are ignored by
equality and omitted from the wire form.

A map is specialized by value type, and optionally key type, with
``GMap.of``. Decoding rejects keys that do not match the key type::

    Counters = GMap.of(Max, key=str)

    a = Counters({"like": Max(1)})
    b = Counters({"like": Max(3), "laugh": Max(1)})
    a.merge(b)
    assert a["like"].value == 3
    assert a["missing"].is_bottom()
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Self

from semithreads.errors import DecodeError, EncodeError
from semithreads.lattice.protocol import (
    Ordering,
    Semilattice,
    combine_orderings,
    conforms,
    key_type_name,
    validate_key_type,
)

if TYPE_CHECKING:
    from collections.abc import Hashable, Iterator, Mapping

_SPECIALIZATIONS: dict[tuple[type[Semilattice], Any], type[GMap]] = {}


class GMap(Semilattice):
    """Grow-only map from hashable keys to semilattice values.

    Use ``GMap.of(value_type)`` to obtain the concrete class; the bare
    ``GMap`` cannot be instantiated because it does not know how to
    build a missing value.

    Args:
        entries: Initial key/value pairs. Values are merged in, never
            aliased.
    """

    __slots__ = ("_entries",)

    value_type: ClassVar[type[Semilattice] | None] = None
    key_type: ClassVar[Any] = None

    def __init__(self, entries: Mapping[Hashable, Semilattice] | None = None):
        if self.value_type is None:
            raise TypeError("GMap needs a value type; use GMap.of(value_type)")
        self._entries: dict[Hashable, Semilattice] = {}
        if entries:
            for key, value in entries.items():
                self.entry(key).merge(value)

    @classmethod
    def of(cls, value_type: type[Semilattice], key: Any = None) -> type[GMap]:
        """Return the map class whose values are ``value_type``.

        Repeated calls with the same value and key types return the same
        class.

        Args:
            value_type: Semilattice class of the values.
            key: ``str``, ``int``, a ``tuple[...]`` of those, or None to
                accept any hashable key.

        Raises:
            TypeError: If value_type is not a semilattice or key is not a
                supported key type.
        """
        if not isinstance(value_type, type) or not issubclass(value_type, Semilattice):
            raise TypeError(f"GMap values must be semilattices, got {value_type!r}")
        validate_key_type(key)
        specialized = _SPECIALIZATIONS.get((value_type, key))
        if specialized is None:
            if key is None:
                name = f"GMap[{value_type.__name__}]"
            else:
                name = f"GMap[{key_type_name(key)}, {value_type.__name__}]"
            specialized = type(
                name,
                (GMap,),
                {"__slots__": (), "value_type": value_type, "key_type": key, "__module__": __name__},
            )
            _SPECIALIZATIONS[(value_type, key)] = specialized
        return specialized

    @classmethod
    def singleton(cls, key: Hashable, value: Semilattice) -> Self:
        """A map with exactly one entry."""
        return cls({key: value})

    def entry(self, key: Hashable) -> Semilattice:
        """Return the stored value for ``key``, inserting bottom if absent.

        The returned value is live: mutating it mutates the map.
        """
        value = self._entries.get(key)
        if value is None:
            value = self.value_type()
            self._entries[key] = value
        return value

    def get(self, key: Hashable) -> Semilattice | None:
        """Return the stored value for ``key`` or None."""
        return self._entries.get(key)

    def keys(self) -> list[Hashable]:
        """Stored keys in sorted order."""
        return sorted(self._entries)

    def items(self) -> list[tuple[Hashable, Semilattice]]:
        """Stored entries in sorted key order."""
        return [(key, self._entries[key]) for key in sorted(self._entries)]

    def values(self) -> list[Semilattice]:
        """Stored values in sorted key order."""
        return [self._entries[key] for key in sorted(self._entries)]

    def merge(self, other: GMap) -> None:
        for key, value in other._entries.items():
            self.entry(key).merge(value)

    def partial_cmp(self, other: GMap) -> Ordering | None:
        bottom = self.value_type()
        keys = self._entries.keys() | other._entries.keys()
        return combine_orderings(
            self._entries.get(key, bottom).partial_cmp(other._entries.get(key, bottom))
            for key in keys
        )

    def is_bottom(self) -> bool:
        return all(value.is_bottom() for value in self._entries.values())

    def to_wire(self) -> dict:
        try:
            keys = sorted(self._entries)
        except TypeError as exc:
            raise EncodeError(f"{type(self).__name__} keys are not mutually orderable: {exc}") from exc
        return {
            key: self._entries[key].to_wire()
            for key in keys
            if not self._entries[key].is_bottom()
        }

    @classmethod
    def from_wire(cls, wire: Any) -> Self:
        if not isinstance(wire, dict):
            raise DecodeError(f"{cls.__name__} expects a map, got {type(wire).__name__}")
        result = cls()
        for key, value in wire.items():
            if not conforms(key, cls.key_type):
                raise DecodeError(f"{cls.__name__} has ill-typed key {key!r}")
            result._entries[key] = cls.value_type.from_wire(value)
        return result

    def _live(self) -> dict[Hashable, Semilattice]:
        return {key: value for key, value in self._entries.items() if not value.is_bottom()}

    def __getitem__(self, key: Hashable) -> Semilattice:
        """Return the stored value, or a detached bottom if absent."""
        value = self._entries.get(key)
        return value if value is not None else self.value_type()

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Hashable]:
        return iter(self.keys())

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GMap):
            return NotImplemented
        return self._live() == other._live()

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self.items())!r})"
