"""Content-addressed substrate on a local directory.

Layout::

    <root>/objects/ab/cdef...       blobs, named by SHA-256 of their bytes
    <root>/refs/slices/a-<hex>      hex digest of the actor's current slice
    <root>/refs/materialized        hex digest of the cached view

Blobs are immutable and shared; publishing only rewrites the actor's
own ref file, replaced atomically, so writers for different actors
never touch the same file. A ref file is named ``a-`` followed by the
hex of the actor ID's UTF-8 bytes, so any ID, including ``""``, ``.``
and names that look like temporary files, maps to a distinct plain
file name. Every blob is checked against its digest when read.

Because the directory is plain files, it can be synced between
devices by any file-level replication tool.
"""

from __future__ import annotations

import hashlib
import logging
import os
import tempfile
from pathlib import Path
from typing import TYPE_CHECKING

from semithreads.errors import SubstrateError

if TYPE_CHECKING:
    from collections.abc import Iterator

logger = logging.getLogger(__name__)

CACHE_REF = "materialized"
REF_PREFIX = "a-"
TEMP_PREFIX = ".tmp-"


def digest(data: bytes) -> str:
    """SHA-256 hex digest naming a blob."""
    return hashlib.sha256(data).hexdigest()


def ref_name(actor_id: str) -> str:
    """File name of the ref for ``actor_id``."""
    return REF_PREFIX + actor_id.encode("utf-8").hex()


def actor_from_ref_name(name: str) -> str | None:
    """Invert ``ref_name``; None if ``name`` is not a ref file name."""
    if not name.startswith(REF_PREFIX):
        return None
    try:
        actor_id = bytes.fromhex(name[len(REF_PREFIX):]).decode("utf-8")
    except ValueError:
        return None
    # only the canonical lowercase spelling names a ref
    return actor_id if ref_name(actor_id) == name else None


def _atomic_write(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=TEMP_PREFIX)
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        os.replace(tmp, path)
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise


class DirectorySubstrate:
    """Substrate storing snapshots as content-addressed files.

    Args:
        path: Root directory; created if missing.
    """

    def __init__(self, path: str | Path):
        self._root = Path(path)
        self._objects = self._root / "objects"
        self._slice_refs = self._root / "refs" / "slices"
        self._cache_ref = self._root / "refs" / CACHE_REF
        try:
            self._objects.mkdir(parents=True, exist_ok=True)
            self._slice_refs.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise SubstrateError(f"cannot initialize store: {exc}", str(self._root)) from exc

    @property
    def root(self) -> Path:
        return self._root

    def _blob_path(self, hex_digest: str) -> Path:
        return self._objects / hex_digest[:2] / hex_digest[2:]

    def _ref_path(self, actor_id: str) -> Path:
        return self._slice_refs / ref_name(actor_id)

    def put_blob(self, data: bytes) -> str:
        """Store ``data`` (if new) and return its digest."""
        hex_digest = digest(data)
        path = self._blob_path(hex_digest)
        if not path.exists():
            _atomic_write(path, data)
        return hex_digest

    def get_blob(self, hex_digest: str, context: str) -> bytes:
        """Read and verify the blob named ``hex_digest``.

        Raises:
            SubstrateError: If the blob is missing, unreadable or does
                not match its digest.
        """
        try:
            data = self._blob_path(hex_digest).read_bytes()
        except OSError as exc:
            raise SubstrateError(f"cannot read blob {hex_digest}: {exc}", context) from exc
        if digest(data) != hex_digest:
            raise SubstrateError(f"blob {hex_digest} is corrupt", context)
        return data

    def _read_ref(self, path: Path, context: str) -> str | None:
        try:
            text = path.read_text(encoding="ascii").strip()
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as exc:
            raise SubstrateError(f"cannot read ref: {exc}", context) from exc
        if len(text) != 64 or any(c not in "0123456789abcdef" for c in text):
            raise SubstrateError(f"ref does not hold a digest: {text!r}", context)
        return text

    def write(self, actor_id: str, data: bytes) -> None:
        context = f"actor {actor_id!r}"
        try:
            hex_digest = self.put_blob(data)
            _atomic_write(self._ref_path(actor_id), hex_digest.encode("ascii"))
        except OSError as exc:
            raise SubstrateError(f"cannot publish: {exc}", context) from exc
        logger.info("Published %d bytes for actor %r as %s", len(data), actor_id, hex_digest[:12])

    def read(self, actor_id: str) -> bytes | None:
        context = f"actor {actor_id!r}"
        hex_digest = self._read_ref(self._ref_path(actor_id), context)
        if hex_digest is None:
            return None
        return self.get_blob(hex_digest, context)

    def actors(self) -> list[str]:
        """Every actor with a published ref, sorted."""
        try:
            names = [p.name for p in self._slice_refs.iterdir()]
        except OSError as exc:
            raise SubstrateError(f"cannot list refs: {exc}", str(self._slice_refs)) from exc
        actors = []
        for name in names:
            if name.startswith(TEMP_PREFIX):
                continue
            actor_id = actor_from_ref_name(name)
            if actor_id is None:
                logger.warning("Ignoring foreign file %r in %s", name, self._slice_refs)
                continue
            actors.append(actor_id)
        return sorted(actors)

    def read_all(self) -> Iterator[tuple[str, bytes]]:
        for actor_id in self.actors():
            data = self.read(actor_id)
            if data is not None:
                yield actor_id, data

    def write_cache(self, data: bytes) -> None:
        try:
            hex_digest = self.put_blob(data)
            _atomic_write(self._cache_ref, hex_digest.encode("ascii"))
        except OSError as exc:
            raise SubstrateError(f"cannot write cache: {exc}", f"ref {CACHE_REF}") from exc

    def read_cache(self) -> bytes | None:
        context = f"ref {CACHE_REF}"
        hex_digest = self._read_ref(self._cache_ref, context)
        if hex_digest is None:
            return None
        return self.get_blob(hex_digest, context)

    def __repr__(self) -> str:
        return f"DirectorySubstrate({str(self._root)!r})"
