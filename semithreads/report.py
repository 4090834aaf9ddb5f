"""Plain-text dump of a materialized view, for debugging.

For each thread: its author and id, titles, and tags with a positive
net score (positive votes minus negative votes), followed by the reply
tree walked depth-first through back-references. Every non-redacted
content version of each message is shown.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, TextIO

from semithreads.session import TAG_NEGATIVE, TAG_POSITIVE

if TYPE_CHECKING:
    from semithreads.detailed import Detailed, Thread
    from semithreads.schema import MessageID


def tag_scores(thread: Thread) -> dict[str, int]:
    """Net score per tag, keeping only scores above zero."""
    scores = {}
    for tag, votes in thread.tags.items():
        histogram = votes.aggregate()
        score = histogram[TAG_POSITIVE] - histogram[TAG_NEGATIVE]
        if score > 0:
            scores[tag] = score
    return scores


def walk_replies(view: Detailed, root_id: MessageID) -> list[tuple[int, MessageID]]:
    """Depth-first ``(depth, message_id)`` traversal starting at ``root_id``.

    Children are visited in sorted order. A message reached twice (a
    reply to several parents in the same tree) is listed once.
    """
    order = []
    seen = set()
    stack = [(0, tuple(root_id))]
    while stack:
        depth, message_id = stack.pop()
        if message_id in seen:
            continue
        seen.add(message_id)
        order.append((depth, message_id))
        children = view.message(message_id).backrefs
        stack.extend((depth + 1, child) for child in reversed(list(children)))
    return order


def render_report(view: Detailed) -> str:
    """Render ``view`` as text."""
    lines = []
    for thread_id in view.thread_ids():
        actor, local_id = thread_id
        thread = view.thread(thread_id)
        lines.append(f"Author: {actor!r} [{local_id}]")
        for title in thread.titles.value:
            lines.append(f"Title: {title}")
        scores = tag_scores(thread)
        lines.append("Tags: " + ", ".join(f"{tag} ({score})" for tag, score in scores.items()))
        lines.append("")

        for depth, (author, message_local_id) in walk_replies(view, thread_id):
            lines.append(f"Depth: {depth}")
            lines.append(f"Author: {author!r} [{message_local_id}]")
            for version, cell in view.message((author, message_local_id)).content.items():
                if cell.is_live:
                    lines.append(f"Body [{version}]: {cell.text}")
            lines.append("")
    return "\n".join(lines)


def print_report(view: Detailed, file: TextIO | None = None) -> None:
    """Write ``render_report(view)`` to ``file`` (default stdout)."""
    print(render_report(view), file=file or sys.stdout)
