"""Moving slices between sessions, substrates and views.

These helpers sit between the pure lattice code and a
``ReplicationSubstrate``:

- ``publish`` encodes an actor's full slice and writes it.
- ``load_slice`` reads one actor's slice back (bottom if unpublished).
- ``collect_root`` decodes every published slice and joins them.
- ``load_view`` returns the materialized view, from the cache when the
  cache matches the published slices, otherwise by folding.

Any substrate or decode failure aborts the operation and names the
actor or reference involved. The one exception is the view cache: it
is only a shortcut, so an unusable cache is logged and rebuilt.
"""

from __future__ import annotations

import hashlib
import logging
from typing import TYPE_CHECKING

from semithreads.codec import decode, encode
from semithreads.detailed import Detailed, materialize
from semithreads.errors import DecodeError, SubstrateError
from semithreads.schema import Root, Slice

if TYPE_CHECKING:
    from collections.abc import Iterable

    from semithreads.schema import ActorID
    from semithreads.substrate import ReplicationSubstrate

logger = logging.getLogger(__name__)

FINGERPRINT_SIZE = hashlib.sha256().digest_size


def publish(substrate: ReplicationSubstrate, actor_id: ActorID, slice_: Slice) -> bytes:
    """Encode ``slice_`` in full and publish it as ``actor_id``'s snapshot.

    Republishing unchanged content is harmless.

    Returns:
        The encoded bytes that were written.
    """
    data = encode(slice_, context=f"actor {actor_id!r}")
    substrate.write(actor_id, data)
    logger.info("Published slice for %r (%d owned, %d shared)", actor_id, len(slice_.owned), len(slice_.shared))
    return data


def load_slice(substrate: ReplicationSubstrate, actor_id: ActorID) -> Slice:
    """Read ``actor_id``'s published slice; bottom if none was published."""
    data = substrate.read(actor_id)
    if data is None:
        logger.debug("No published slice for %r; starting from bottom", actor_id)
        return Slice()
    return decode(Slice, data, context=f"actor {actor_id!r}")


def root_from_snapshots(snapshots: Iterable[tuple[ActorID, bytes]]) -> Root:
    """Decode ``(actor, bytes)`` pairs and join them into a Root."""
    root = Root()
    for actor_id, data in snapshots:
        root.add_slice(actor_id, decode(Slice, data, context=f"actor {actor_id!r}"))
    return root


def collect_root(substrate: ReplicationSubstrate) -> Root:
    """Join every slice currently published on ``substrate``."""
    return root_from_snapshots(substrate.read_all())


def fingerprint(snapshots: Iterable[tuple[ActorID, bytes]]) -> bytes:
    """Digest identifying a set of published snapshots."""
    h = hashlib.sha256()
    for actor_id, data in sorted(snapshots):
        actor = actor_id.encode("utf-8")
        h.update(len(actor).to_bytes(8, "big"))
        h.update(actor)
        h.update(hashlib.sha256(data).digest())
    return h.digest()


def _read_cached_view(substrate: ReplicationSubstrate, expected: bytes) -> Detailed | None:
    try:
        data = substrate.read_cache()
    except SubstrateError as exc:
        logger.warning("Ignoring unreadable view cache: %s", exc)
        return None
    if data is None:
        return None
    if len(data) < FINGERPRINT_SIZE:
        logger.warning("Ignoring truncated view cache (%d bytes)", len(data))
        return None
    if data[:FINGERPRINT_SIZE] != expected:
        logger.debug("View cache is stale")
        return None
    try:
        return decode(Detailed, data[FINGERPRINT_SIZE:], context="view cache")
    except DecodeError as exc:
        logger.warning("Ignoring corrupt view cache: %s", exc)
        return None


def save_view_cache(substrate: ReplicationSubstrate, snapshots_fingerprint: bytes, view: Detailed) -> None:
    """Store ``view`` as the cache for the given snapshot set."""
    substrate.write_cache(snapshots_fingerprint + encode(view, context="view cache"))


def load_view(substrate: ReplicationSubstrate, *, use_cache: bool = True) -> Detailed:
    """Materialize the view of everything published on ``substrate``.

    Args:
        substrate: Where to read slices (and the cache) from.
        use_cache: If False, always fold and do not touch the cache.
    """
    snapshots = list(substrate.read_all())
    current = fingerprint(snapshots)
    if use_cache:
        cached = _read_cached_view(substrate, current)
        if cached is not None:
            logger.debug("Using cached view for %d actors", len(snapshots))
            return cached

    view = materialize(root_from_snapshots(snapshots))
    logger.info("Rebuilt view from %d published slices", len(snapshots))
    if use_cache:
        save_view_cache(substrate, current, view)
    return view
