"""Protocol for replication substrates.

A substrate stores one published snapshot per actor plus an optional
cache of the materialized view. It moves opaque
bytes and knows nothing about lattices.

- ``write`` is last-write-wins per actor. That is safe only because a
  slice never shrinks, so a session must always publish its full
  accumulated slice, never a diff.
- ``read``/``read_all`` may return stale data; any snapshot is a valid
  lower bound of the truth.
- The cache is never authoritative. Callers fall back to reading every
  slice whenever it is missing or unusable.

Implementations must allow at most one concurrent writer per actor
reference and must let readers observe a consistent snapshot at any
time.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol, runtime_checkable

if TYPE_CHECKING:
    from collections.abc import Iterable


@runtime_checkable
class ReplicationSubstrate(Protocol):
    """Storage collaborator exchanging per-actor slice snapshots."""

    def write(self, actor_id: str, data: bytes) -> None:
        """Publish ``data`` as ``actor_id``'s current snapshot."""
        ...

    def read(self, actor_id: str) -> bytes | None:
        """Return ``actor_id``'s snapshot, or None if never published."""
        ...

    def read_all(self) -> Iterable[tuple[str, bytes]]:
        """Yield ``(actor_id, data)`` for every published actor."""
        ...

    def write_cache(self, data: bytes) -> None:
        """Store an encoded materialized view."""
        ...

    def read_cache(self) -> bytes | None:
        """Return the cached view, or None if there is none."""
        ...
