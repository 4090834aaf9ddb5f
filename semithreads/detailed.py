"""Materialized thread view.

``Detailed`` is the read-side projection of a ``Root``: every thread
with its titles and tag votes, and every message with its content,
reactions and back-references. It is derived entirely by folding the
root and is never a source of truth; throw it away and re-fold to get
it back.

The fold runs per actor:

1. For each owned message: non-empty titles go to ``threads``; each
   reply edge ``(A, id) -> P`` is inverted into ``messages[P].backrefs``;
   reply edges and content go to ``messages[A][id]``.
2. For each shared annotation: the actor's private counters are
   re-keyed into attributed votes (see ``attribute``) and joined into
   the target's reactions and, if any, tags.

Every step is a join into the running view, so the result does not
depend on the order actors, messages or annotations are visited, nor
on whether the root is folded in one pass or one actor at a time.

Example::

    view = materialize(root)
    comment = view.message(("alice", 0))
    print(comment.reactions["like"].aggregate())
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from semithreads.lattice import GMap, GSet, Vote, lattice_field, semilattice
from semithreads.schema import Content, Owned, ReplyTo, Titles

if TYPE_CHECKING:
    from semithreads.schema import ActorID, MessageID, Root, Slice

logger = logging.getLogger(__name__)

REACTION_CATEGORIES = 2
TAG_CATEGORIES = 4

ReactionVotes = GMap.of(Vote.of(REACTION_CATEGORIES), key=str)
TagVotes = GMap.of(Vote.of(TAG_CATEGORIES), key=str)


@semilattice
class Thread:
    """Thread-level data: titles and tag votes."""

    titles: Titles = lattice_field(Titles, tag=0)
    tags: GMap = lattice_field(TagVotes, tag=1)


@semilattice
class Comment:
    """Message-level data. ``backrefs`` is only ever written by the fold."""

    reply_to: GSet = lattice_field(ReplyTo, tag=0)
    content: GMap = lattice_field(Content, tag=1)
    reactions: GMap = lattice_field(ReactionVotes, tag=2)
    backrefs: GSet = lattice_field(ReplyTo, tag=3)


def attribute(actor: ActorID, counters: GMap, categories: int) -> GMap:
    """Promote one actor's private counters into attributed votes.

    ``{key: Max(n)}`` becomes ``{key: Vote({actor: Max(n)})}``, which
    joins safely with every other actor's votes on the same key.

    Args:
        actor: The actor the counters belong to.
        counters: A ``GMap`` of ``Max`` from that actor's slice.
        categories: Number of vote categories (2 for reactions, 4 for tags).
    """
    vote_type = Vote.of(categories)
    votes = GMap.of(vote_type, key=str)()
    for key, counter in counters.items():
        votes.entry(key).merge(vote_type.singleton(actor, counter))
    return votes


@semilattice
class Detailed:
    """Materialized view of every thread and message."""

    threads: GMap = lattice_field(GMap.of(GMap.of(Thread, key=int), key=str), tag=0)
    messages: GMap = lattice_field(GMap.of(GMap.of(Comment, key=int), key=str), tag=1)

    def absorb(self, actor: ActorID, slice_: Slice) -> None:
        """Fold one actor's slice into this view (in-place)."""
        threads = self.threads.entry(actor)
        for local_id, owned in slice_.owned.items():
            self._absorb_owned(actor, local_id, owned, threads)

        for (target_actor, target_id), shared in slice_.shared.items():
            self.messages.entry(target_actor).entry(target_id).reactions.merge(
                attribute(actor, shared.reactions, REACTION_CATEGORIES)
            )
            if not shared.tags.is_bottom():
                self.threads.entry(target_actor).entry(target_id).tags.merge(
                    attribute(actor, shared.tags, TAG_CATEGORIES)
                )

    def _absorb_owned(self, actor: ActorID, local_id: int, owned: Owned, threads: GMap) -> None:
        if len(owned.titles.value):
            threads.entry(local_id).titles.merge(owned.titles)
        for parent_actor, parent_id in owned.reply_to:
            self.messages.entry(parent_actor).entry(parent_id).backrefs.add((actor, local_id))
        self.messages.entry(actor).entry(local_id).merge(
            Comment(reply_to=owned.reply_to, content=owned.content)
        )

    def thread(self, message_id: MessageID) -> Thread:
        """The thread data for ``message_id``; bottom if it is not a thread."""
        actor, local_id = message_id
        return self.threads[actor][local_id]

    def message(self, message_id: MessageID) -> Comment:
        """The message data for ``message_id``; bottom if unknown."""
        actor, local_id = message_id
        return self.messages[actor][local_id]

    def thread_ids(self) -> list[MessageID]:
        """Every thread with at least one title, sorted."""
        return [
            (actor, local_id)
            for actor, threads in self.threads.items()
            for local_id, thread in threads.items()
            if len(thread.titles.value)
        ]


def contribution(actor: ActorID, slice_: Slice) -> Detailed:
    """The view produced by ``actor``'s slice alone.

    Contributions of different actors can be computed independently
    and joined in any order to obtain the full view.
    """
    view = Detailed()
    view.absorb(actor, slice_)
    return view


def materialize(root: Root) -> Detailed:
    """Fold every actor's slice in ``root`` into a fresh view."""
    view = Detailed()
    for actor, slice_ in root.inner.items():
        view.absorb(actor, slice_)
    logger.debug(
        "Materialized %d actors into %d thread authors / %d message authors",
        len(root.inner),
        len(view.threads),
        len(view.messages),
    )
    return view

