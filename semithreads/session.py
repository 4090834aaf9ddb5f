"""Mutation interface for one actor's slice.

An ``ActorSession`` is the only way content gets written. It holds an
actor's identity, a device identifier and the actor's ``Slice``, and
every operation produces a delta that is legal under the slice's join:
counters only go up, sets and maps only grow.

Identifiers are allocated without coordination. A new message's
LocalID is ``(number of owned items << 16) | device_id``; because the
low 16 bits are the device, two devices of one actor never collide,
and because the owned map only grows, one device never repeats itself.

At most one session may be live per (actor, device) at a time; two
sessions on the same device racing on allocation is undefined.

Example::

    slice_ = Slice()
    alice = ActorSession("alice", 0, slice_)
    thread = alice.new_thread("Hello", "Hi all", ["intro"])
    alice.react(thread, "like", True)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from semithreads.lattice import Max, Redactable
from semithreads.schema import (
    DEVICE_BITS,
    DEVICE_MASK,
    ActorID,
    Content,
    LocalID,
    MessageID,
    Owned,
    Reaction,
    ReplyTo,
    Slice,
    Tag,
    Titles,
    TitleSet,
)

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)

# Tag opinions are counters read modulo 4.
TAG_NEUTRAL = 0
TAG_POSITIVE = 1
TAG_NEGATIVE = 2
TAG_RESERVED = 3

# Increment applied to a tag counter, keyed by current residue.
_TAG_ADD_STEP = {TAG_NEUTRAL: 1, TAG_POSITIVE: 0, TAG_NEGATIVE: 3, TAG_RESERVED: 2}
_TAG_REMOVE_STEP = {TAG_NEUTRAL: 2, TAG_POSITIVE: 1, TAG_NEGATIVE: 0, TAG_RESERVED: 3}


class ActorSession:
    """Exclusive writer for one actor's slice on one device.

    Args:
        actor_id: The actor whose slice this is.
        device_id: This device's identifier, in ``[0, 2**16)``.
        slice_: The actor's slice; mutated in place.

    Raises:
        ValueError: If device_id is out of range.
    """

    __slots__ = ("_actor_id", "_device_id", "_slice")

    def __init__(self, actor_id: ActorID, device_id: int, slice_: Slice):
        if not 0 <= device_id <= DEVICE_MASK:
            raise ValueError(f"device_id must be in [0, 2**{DEVICE_BITS}), got {device_id}")
        self._actor_id = actor_id
        self._device_id = device_id
        self._slice = slice_

    @property
    def actor_id(self) -> ActorID:
        return self._actor_id

    @property
    def device_id(self) -> int:
        return self._device_id

    @property
    def slice(self) -> Slice:
        """The slice being written."""
        return self._slice

    def _allocate(self) -> LocalID:
        owned = self._slice.owned
        sequence = len(owned)
        local_id = (sequence << DEVICE_BITS) | self._device_id
        # Only reachable when edit/redact created an entry at an unallocated id.
        while local_id in owned:
            sequence += 1
            local_id = (sequence << DEVICE_BITS) | self._device_id
        logger.debug("[%s/%d] allocated local id %d", self._actor_id, self._device_id, local_id)
        return local_id

    def new_thread(self, title: str, body: str, tags: Iterable[Tag] = ()) -> MessageID:
        """Start a thread and vote for its tags.

        Args:
            title: Thread title.
            body: Opening message text (content version 0).
            tags: Tags the author attaches, recorded as positive votes.

        Returns:
            The new thread's MessageID.
        """
        local_id = self._allocate()
        self._slice.owned.entry(local_id).merge(
            Owned(
                titles=Titles(Max(0), TitleSet.singleton(title)),
                content=Content.singleton(0, Redactable.live(body)),
            )
        )
        message_id = (self._actor_id, local_id)
        votes = self._slice.shared.entry(message_id).tags
        for tag in tags:
            votes.entry(tag).merge(Max(TAG_POSITIVE))
        return message_id

    def reply(self, parent: MessageID, body: str) -> MessageID:
        """Reply to ``parent`` (any actor's message).

        Returns:
            The reply's MessageID.
        """
        local_id = self._allocate()
        self._slice.owned.entry(local_id).merge(
            Owned(
                reply_to=ReplyTo.singleton(tuple(parent)),
                content=Content.singleton(0, Redactable.live(body)),
            )
        )
        return (self._actor_id, local_id)

    def edit(self, local_id: LocalID, body: str) -> int:
        """Add a new content version to one of this actor's messages.

        Earlier versions are kept. Concurrent edits from different
        devices land on different versions and both survive a merge;
        picking the version to show is up to the reader.

        Returns:
            The version number written.
        """
        content = self._slice.owned.entry(local_id).content
        versions = content.keys()
        sequence = (versions[-1] >> DEVICE_BITS) + 1 if versions else 0
        version = (sequence << DEVICE_BITS) | self._device_id
        content.entry(version).merge(Redactable.live(body))
        return version

    def redact(self, local_id: LocalID, version: int) -> None:
        """Tombstone one content version of this actor's message.

        Succeeds even if the version was never written, leaving a
        tombstone at that key.
        """
        self._slice.owned.entry(local_id).content.entry(version).merge(Redactable.redacted())

    def react(self, target: MessageID, reaction: Reaction, want: bool) -> None:
        """Set this actor's reaction on ``target`` to ``want``.

        The private counter's parity is the opinion; it is bumped only
        when the parity disagrees with ``want``.
        """
        counter = self._slice.shared.entry(tuple(target)).reactions.entry(reaction)
        if counter.value % 2 != int(want):
            counter.increment()

    def adjust_tags(
        self,
        target: MessageID,
        add: Iterable[Tag] = (),
        remove: Iterable[Tag] = (),
    ) -> None:
        """Vote tags up or down on ``target``.

        Each tag's counter is read modulo 4 (0 neutral, 1 positive,
        2 negative, 3 reserved) and only ever incremented.
        """
        tags = self._slice.shared.entry(tuple(target)).tags
        for tag in add:
            counter = tags.entry(tag)
            step = _TAG_ADD_STEP[counter.value % 4]
            if step:
                counter.increment(step)
        for tag in remove:
            counter = tags.entry(tag)
            step = _TAG_REMOVE_STEP[counter.value % 4]
            if step:
                counter.increment(step)

    def __repr__(self) -> str:
        return f"ActorSession(actor_id={self._actor_id!r}, device_id={self._device_id})"
