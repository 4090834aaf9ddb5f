"""Attributed categorical vote.

A vote is a grow-only map from actor to that actor's private counter.
Each counter only ever increases, so the map joins like any other
``GMap`` of ``Max``. The *opinion* an actor currently holds is the
counter's residue modulo the number of categories: an actor changes
its mind by bumping the counter until the residue lands on the desired
category.

``aggregate()`` folds the current residues into a histogram. The
histogram is for display only and plays no part in merging.

Example::

    Likes = Vote.of(2)

    v = Likes({"alice": Max(1), "bob": Max(2)})
    assert v.aggregate() == [1, 1]   # bob liked then unliked
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, ClassVar, Self

from semithreads.lattice.gmap import GMap
from semithreads.lattice.max import Max
from semithreads.lattice.protocol import Ordering, Semilattice

if TYPE_CHECKING:
    from collections.abc import Mapping

_SPECIALIZATIONS: dict[int, type[Vote]] = {}

_Counters = GMap.of(Max, key=str)


class Vote(Semilattice):
    """Per-actor monotonic counters read as categorical opinions.

    Use ``Vote.of(categories)`` to obtain the concrete class.

    Args:
        counters: Initial actor -> counter mapping.
    """

    __slots__ = ("_counters",)

    categories: ClassVar[int | None] = None

    def __init__(self, counters: Mapping[str, Max] | None = None):
        if self.categories is None:
            raise TypeError("Vote needs a category count; use Vote.of(categories)")
        self._counters = _Counters(counters)

    @classmethod
    def of(cls, categories: int) -> type[Vote]:
        """Return the vote class with ``categories`` opinions.

        Raises:
            ValueError: If categories is less than 1.
        """
        if categories < 1:
            raise ValueError(f"categories must be >= 1, got {categories}")
        specialized = _SPECIALIZATIONS.get(categories)
        if specialized is None:
            specialized = type(
                f"Vote[{categories}]",
                (Vote,),
                {"__slots__": (), "categories": categories, "__module__": __name__},
            )
            _SPECIALIZATIONS[categories] = specialized
        return specialized

    @classmethod
    def singleton(cls, actor: str, counter: Max) -> Self:
        """A vote recording one actor's counter."""
        return cls({actor: counter})

    @property
    def counters(self) -> GMap:
        """The underlying actor -> counter map."""
        return self._counters

    def opinion(self, actor: str) -> int | None:
        """The category ``actor`` currently holds, or None if they never voted."""
        counter = self._counters.get(actor)
        if counter is None or counter.is_bottom():
            return None
        return counter.value % self.categories

    def aggregate(self) -> list[int]:
        """Histogram of current opinions, indexed by category."""
        histogram = [0] * self.categories
        for counter in self._counters.values():
            if not counter.is_bottom():
                histogram[counter.value % self.categories] += 1
        return histogram

    def merge(self, other: Vote) -> None:
        self._counters.merge(other._counters)

    def partial_cmp(self, other: Vote) -> Ordering | None:
        return self._counters.partial_cmp(other._counters)

    def is_bottom(self) -> bool:
        return self._counters.is_bottom()

    def to_wire(self) -> dict:
        return self._counters.to_wire()

    @classmethod
    def from_wire(cls, wire: Any) -> Self:
        result = cls()
        result._counters = _Counters.from_wire(wire)
        return result

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Vote):
            return NotImplemented
        return self.categories == other.categories and self._counters == other._counters

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self._counters.items())!r})"
