"""Structural join derivation for product types.

``@semilattice`` turns a class whose fields are all semilattices into a
semilattice itself. The derived operations work field by field, in
field declaration order:

- ``merge``/``join`` join each field with the matching field of the
  other value.
- ``partial_cmp`` compares each field and combines the results: all
  EQUAL gives EQUAL; EQUAL-or-LESS with at least one LESS gives LESS
  (symmetrically GREATER); anything else is incomparable. A class with
  no fields compares EQUAL.
- ``to_wire``/``from_wire`` encode the value as a map keyed by each
  field's integer tag, so fields can be added later without breaking
  older data.

The derivation runs once, when the class statement executes. Classes
that are not products are rejected immediately with
``DerivationError``: an ``Enum`` (or any other sum type) has no
canonical join between differently-tagged alternatives.

Example::

    @semilattice
    class Shared:
        tags: GMap = lattice_field(GMap.of(Max, key=str), tag=0)
        reactions: GMap = lattice_field(GMap.of(Max, key=str), tag=1)
"""

from __future__ import annotations

import copy
import dataclasses
import enum
import logging
from typing import Any, Callable, NamedTuple, TypeVar

from semithreads.errors import DecodeError, DerivationError
from semithreads.lattice.protocol import Semilattice, combine_orderings

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=type)


class _Component(NamedTuple):
    name: str
    tag: int
    lattice: type[Semilattice]


def lattice_field(factory: Callable[[], Semilattice], *, tag: int | None = None) -> Any:
    """Declare a product field whose bottom is ``factory()``.

    Args:
        factory: Zero-argument callable building the field's bottom.
        tag: Stable wire tag. Defaults to the field's position.
    """
    metadata = {} if tag is None else {"tag": tag}
    return dataclasses.field(default_factory=factory, metadata=metadata)


def _components(cls: type) -> tuple[_Component, ...]:
    components = []
    seen_tags: dict[int, str] = {}
    for position, f in enumerate(dataclasses.fields(cls)):
        if f.default_factory is dataclasses.MISSING:
            raise DerivationError(
                f"{cls.__name__}.{f.name} has no default factory; declare it with lattice_field()"
            )
        sample = f.default_factory()
        if not isinstance(sample, Semilattice):
            raise DerivationError(
                f"{cls.__name__}.{f.name} is not joinable: {type(sample).__name__} is not a semilattice"
            )
        tag = f.metadata.get("tag", position)
        if isinstance(tag, bool) or not isinstance(tag, int) or tag < 0:
            raise DerivationError(f"{cls.__name__}.{f.name} has invalid tag {tag!r}")
        if tag in seen_tags:
            raise DerivationError(
                f"{cls.__name__}.{f.name} reuses tag {tag} of field {seen_tags[tag]}"
            )
        seen_tags[tag] = f.name
        components.append(_Component(f.name, tag, type(sample)))
    return tuple(components)


def semilattice(cls: T) -> T:
    """Derive the semilattice operations for a product class.

    The class is made a dataclass if it is not one already. Every field
    must be declared with ``lattice_field``.

    Raises:
        DerivationError: If ``cls`` is not a product of joinable fields.
    """
    if not isinstance(cls, type):
        raise DerivationError(f"semilattice can only derive classes, got {cls!r}")
    if issubclass(cls, enum.Enum):
        raise DerivationError(
            f"{cls.__name__} is a tagged variant type; no canonical join exists across alternatives"
        )
    if issubclass(cls, tuple):
        raise DerivationError(f"{cls.__name__} is immutable; declare products as dataclasses")
    if not dataclasses.is_dataclass(cls):
        cls = dataclasses.dataclass(cls)
    if cls.__dataclass_params__.order:
        raise DerivationError(
            f"{cls.__name__} declares order=True; products are only partially ordered"
        )

    components = _components(cls)
    names = tuple(c.name for c in components)

    def merge(self, other):
        for name in names:
            getattr(self, name).merge(getattr(other, name))

    def join(self, other):
        result = copy.deepcopy(self)
        result.merge(other)
        return result

    def partial_cmp(self, other):
        return combine_orderings(
            getattr(self, name).partial_cmp(getattr(other, name)) for name in names
        )

    def is_bottom(self):
        return all(getattr(self, name).is_bottom() for name in names)

    def to_wire(self):
        wire = {}
        for c in components:
            value = getattr(self, c.name)
            if not value.is_bottom():
                wire[c.tag] = value.to_wire()
        return wire

    def from_wire(klass, wire):
        if not isinstance(wire, dict):
            raise DecodeError(f"{klass.__name__} expects a map, got {type(wire).__name__}")
        for tag in wire:
            if isinstance(tag, bool) or not isinstance(tag, int):
                raise DecodeError(f"{klass.__name__} has non-integer field tag {tag!r}")
        unknown = wire.keys() - {c.tag for c in components}
        if unknown:
            logger.debug("Skipping unknown %s fields %s", klass.__name__, sorted(unknown))
        return klass(
            **{c.name: c.lattice.from_wire(wire[c.tag]) for c in components if c.tag in wire}
        )

    def bottom(klass):
        return klass()

    cls.merge = merge
    cls.join = join
    cls.partial_cmp = partial_cmp
    cls.is_bottom = is_bottom
    cls.to_wire = to_wire
    cls.from_wire = classmethod(from_wire)
    cls.bottom = classmethod(bottom)
    for op in ("__le__", "__lt__", "__ge__", "__gt__"):
        setattr(cls, op, getattr(Semilattice, op))
    cls.__lattice_fields__ = components

    Semilattice.register(cls)
    return cls
