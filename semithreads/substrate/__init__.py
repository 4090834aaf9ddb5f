"""Replication substrates: where published slices live.

- **ReplicationSubstrate**: the protocol every store implements
- **MemorySubstrate**: dict-backed, in-process
- **DirectorySubstrate**: content-addressed files on disk
"""

from semithreads.substrate.protocol import ReplicationSubstrate
from semithreads.substrate.memory import MemorySubstrate
from semithreads.substrate.directory import DirectorySubstrate

__all__ = [
    "ReplicationSubstrate",
    "MemorySubstrate",
    "DirectorySubstrate",
]
