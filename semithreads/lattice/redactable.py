"""Redactable cell.

A cell that is empty, holds live text, or has been tombstoned. The
states form a chain ``EMPTY < LIVE < REDACTED``:

- EMPTY is bottom: joining it changes nothing.
- REDACTED is top: once a cell is tombstoned, no later live value can
  resurrect it.
- Two different live values resolve to the one whose UTF-8 encoding
  compares greater byte-wise. Any fixed total order would do; byte
  order is independent of locale and of merge order.

Example::

    cell = Redactable.live("first draft")
    cell.merge(Redactable.redacted())
    cell.merge(Redactable.live("sneaky edit"))
    assert cell.is_redacted
"""

from __future__ import annotations

import enum
from typing import Any, Self

from semithreads.errors import DecodeError
from semithreads.lattice.protocol import Ordering, Semilattice, compare_values


class CellState(enum.IntEnum):
    EMPTY = 0
    LIVE = 1
    REDACTED = 2


class Redactable(Semilattice):
    """Tombstone-dominant text cell.

    Args:
        state: Initial state (default EMPTY).
        text: Live text; required for LIVE, forbidden otherwise.
    """

    __slots__ = ("_state", "_text")

    def __init__(self, state: CellState = CellState.EMPTY, text: str | None = None):
        if (state is CellState.LIVE) != (text is not None):
            raise ValueError("text must be given exactly when the cell is LIVE")
        self._state = state
        self._text = text

    @classmethod
    def live(cls, text: str) -> Self:
        """A cell holding ``text``."""
        return cls(CellState.LIVE, text)

    @classmethod
    def redacted(cls) -> Self:
        """A tombstoned cell."""
        return cls(CellState.REDACTED)

    @property
    def state(self) -> CellState:
        return self._state

    @property
    def text(self) -> str | None:
        """The live text, or None if empty or redacted."""
        return self._text

    @property
    def is_live(self) -> bool:
        return self._state is CellState.LIVE

    @property
    def is_redacted(self) -> bool:
        return self._state is CellState.REDACTED

    def _rank(self) -> tuple[int, bytes]:
        return (self._state, self._text.encode("utf-8") if self._text is not None else b"")

    def merge(self, other: Redactable) -> None:
        if other._rank() > self._rank():
            self._state = other._state
            self._text = other._text

    def partial_cmp(self, other: Redactable) -> Ordering | None:
        return compare_values(self._rank(), other._rank())

    def is_bottom(self) -> bool:
        return self._state is CellState.EMPTY

    def to_wire(self) -> list:
        if self._state is CellState.LIVE:
            return [int(self._state), self._text]
        return [int(self._state)]

    @classmethod
    def from_wire(cls, wire: Any) -> Self:
        if not isinstance(wire, (list, tuple)) or not wire:
            raise DecodeError(f"Redactable expects a non-empty array, got {wire!r}")
        try:
            state = CellState(wire[0])
        except ValueError as exc:
            raise DecodeError(f"Redactable has unknown state {wire[0]!r}") from exc
        if state is CellState.LIVE:
            if len(wire) != 2 or not isinstance(wire[1], str):
                raise DecodeError(f"Live Redactable expects [1, text], got {wire!r}")
            return cls.live(wire[1])
        if len(wire) != 1:
            raise DecodeError(f"Redactable state {state.name} takes no payload, got {wire!r}")
        return cls(state)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Redactable):
            return NotImplemented
        return self._state is other._state and self._text == other._text

    def __repr__(self) -> str:
        if self._state is CellState.LIVE:
            return f"Redactable.live({self._text!r})"
        return f"Redactable({self._state.name})"
