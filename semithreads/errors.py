"""Exception hierarchy for semithreads.

Failures fall into three groups:

- **DerivationError**: a class cannot be turned into a product semilattice.
  Raised while the class is being defined, never at merge time.
- **EncodeError** / **DecodeError**: a value could not be written to, or read
  back from, its wire form. Decoding is strict; malformed bytes are fatal to
  the operation that triggered them.
- **SubstrateError**: the replication store failed (I/O error, integrity
  mismatch).

Codec and substrate errors carry an optional ``context`` naming the actor or
reference involved, so callers higher up can report which snapshot broke.
"""

from __future__ import annotations


class ThreadsError(Exception):
    """Base class for every error raised by semithreads."""


class DerivationError(ThreadsError, TypeError):
    """A class is not a valid product of joinable fields."""


class _ContextError(ThreadsError):
    def __init__(self, message: str, context: str | None = None):
        self.context = context
        if context:
            message = f"{context}: {message}"
        super().__init__(message)


class EncodeError(_ContextError, ValueError):
    """A lattice value could not be encoded."""


class DecodeError(_ContextError, ValueError):
    """Bytes or wire data did not describe a well-formed value."""


class SubstrateError(_ContextError, OSError):
    """The replication substrate failed to read or write."""
