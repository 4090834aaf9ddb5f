"""semithreads: leaderless, eventually-consistent threaded discussions.

Every actor writes only to its own append-only ``Slice``. Slices are
join-semilattices, so they can be exchanged through any store in any
order and merged without coordination. Reading folds every known slice
(the ``Root``) into a ``Detailed`` view with threads, replies, votes
and back-references.

Quick start::

    from semithreads import ActorSession, MemorySubstrate, Slice, load_view, publish

    store = MemorySubstrate()
    alice = ActorSession("alice", 0, Slice())
    thread = alice.new_thread("Hello", "Hi all", ["intro"])
    publish(store, "alice", alice.slice)

    view = load_view(store)
    print(view.thread(thread).titles.value)
"""

import logging

from semithreads.codec import decode, encode
from semithreads.detailed import Comment, Detailed, Thread, attribute, contribution, materialize
from semithreads.errors import DecodeError, DerivationError, EncodeError, SubstrateError, ThreadsError
from semithreads.lattice import (
    GMap,
    GSet,
    GuardedPair,
    Max,
    Ordering,
    Redactable,
    Semilattice,
    Vote,
    lattice_field,
    semilattice,
)
from semithreads.logging_config import (
    configure_from_env,
    disable_logging,
    enable_console_logging,
    enable_file_logging,
    enable_json_logging,
    set_level,
    set_module_level,
)
from semithreads.replica import collect_root, load_slice, load_view, publish
from semithreads.report import print_report, render_report
from semithreads.schema import ActorID, LocalID, MessageID, Owned, Root, Shared, Slice
from semithreads.session import ActorSession
from semithreads.substrate import DirectorySubstrate, MemorySubstrate, ReplicationSubstrate

logging.getLogger(__name__).addHandler(logging.NullHandler())

__version__ = "0.1.0"

__all__ = [
    # Lattices
    "GMap",
    "GSet",
    "GuardedPair",
    "Max",
    "Ordering",
    "Redactable",
    "Semilattice",
    "Vote",
    "lattice_field",
    "semilattice",
    # Schema
    "ActorID",
    "LocalID",
    "MessageID",
    "Owned",
    "Shared",
    "Slice",
    "Root",
    # Writing
    "ActorSession",
    # Materialized view
    "Comment",
    "Detailed",
    "Thread",
    "attribute",
    "contribution",
    "materialize",
    # Encoding and storage
    "decode",
    "encode",
    "ReplicationSubstrate",
    "MemorySubstrate",
    "DirectorySubstrate",
    "collect_root",
    "load_slice",
    "load_view",
    "publish",
    # Debug output
    "print_report",
    "render_report",
    # Errors
    "ThreadsError",
    "DerivationError",
    "EncodeError",
    "DecodeError",
    "SubstrateError",
    # Logging
    "configure_from_env",
    "disable_logging",
    "enable_console_logging",
    "enable_file_logging",
    "enable_json_logging",
    "set_level",
    "set_module_level",
]
