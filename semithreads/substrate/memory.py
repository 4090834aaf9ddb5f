"""In-process substrate backed by a dict."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)


class MemorySubstrate:
    """Substrate keeping every snapshot in memory.

    Useful for tests and for embedding several actors in one process.
    """

    __slots__ = ("_slices", "_cache", "_writes")

    def __init__(self):
        self._slices: dict[str, bytes] = {}
        self._cache: bytes | None = None
        self._writes = 0

    @property
    def writes(self) -> int:
        """Number of slice writes performed."""
        return self._writes

    def write(self, actor_id: str, data: bytes) -> None:
        self._slices[actor_id] = bytes(data)
        self._writes += 1
        logger.debug("Stored %d bytes for actor %r", len(data), actor_id)

    def read(self, actor_id: str) -> bytes | None:
        return self._slices.get(actor_id)

    def read_all(self) -> Iterator[tuple[str, bytes]]:
        for actor_id in sorted(self._slices):
            yield actor_id, self._slices[actor_id]

    def write_cache(self, data: bytes) -> None:
        self._cache = bytes(data)

    def read_cache(self) -> bytes | None:
        return self._cache

    def __repr__(self) -> str:
        return f"MemorySubstrate(actors={sorted(self._slices)!r})"
