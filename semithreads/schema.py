"""Per-actor append-only schema.

Each actor owns exactly one ``Slice``: everything it has ever authored.
A slice only grows, so publishing it is always safe and the join of
every actor's slice, the ``Root``, is the unit of replication.

- ``Owned``: fields only the author may write for one of their own
  messages (titles, reply edges, versioned content).
- ``Shared``: one actor's private opinion counters about any message,
  including other actors' messages.

Identifiers:

- ``ActorID``: opaque stable identity, e.g. a public key.
- ``LocalID``: per-actor integer, ``(sequence << 16) | device_id``.
- ``MessageID``: ``(ActorID, LocalID)``, globally unique.
"""

from __future__ import annotations

from semithreads.lattice import GMap, GSet, GuardedPair, Max, Redactable, lattice_field, semilattice

ActorID = str
LocalID = int
MessageID = tuple[ActorID, LocalID]
Tag = str
Reaction = str

DEVICE_BITS = 16
DEVICE_MASK = (1 << DEVICE_BITS) - 1

TitleSet = GSet.of(str)
Titles = GuardedPair.of(Max, TitleSet)
ReplyTo = GSet.of(MessageID)
Content = GMap.of(Redactable, key=LocalID)
Counters = GMap.of(Max, key=str)


@semilattice
class Owned:
    """Author-only fields of one message."""

    titles: GuardedPair = lattice_field(Titles, tag=0)
    reply_to: GSet = lattice_field(ReplyTo, tag=1)
    content: GMap = lattice_field(Content, tag=2)


@semilattice
class Shared:
    """One actor's private counters about one message."""

    tags: GMap = lattice_field(Counters, tag=0)
    reactions: GMap = lattice_field(Counters, tag=1)


@semilattice
class Slice:
    """One actor's entire private state."""

    owned: GMap = lattice_field(GMap.of(Owned, key=LocalID), tag=0)
    shared: GMap = lattice_field(GMap.of(Shared, key=MessageID), tag=1)


@semilattice
class Root:
    """Join of every known actor's slice."""

    inner: GMap = lattice_field(GMap.of(Slice, key=ActorID), tag=0)

    def add_slice(self, actor: ActorID, slice_: Slice) -> None:
        """Join ``slice_`` into the entry for ``actor``."""
        self.inner.entry(actor).merge(slice_)

    def slice_of(self, actor: ActorID) -> Slice:
        """The slice recorded for ``actor``; bottom if unknown."""
        return self.inner[actor]


def split_local_id(local_id: LocalID) -> tuple[int, int]:
    """Split a LocalID or content version into ``(sequence, device_id)``."""
    return local_id >> DEVICE_BITS, local_id & DEVICE_MASK
