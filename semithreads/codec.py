"""Binary encoding of lattice values.

Values are encoded with msgpack. Products become maps keyed by their
integer field tags, maps and sets are written in sorted order, and
bottom entries are left out, so equal values always produce identical
bytes.

Decoding is strict. Truncated input, trailing bytes or a structure
that does not match the expected type raise ``DecodeError``; there is
no partial or best-effort result.

Example::

    data = encode(slice_)
    assert decode(Slice, data) == slice_
"""

from __future__ import annotations

from typing import TypeVar

import msgpack

from semithreads.errors import DecodeError, EncodeError
from semithreads.lattice import Semilattice

L = TypeVar("L", bound=Semilattice)


def encode(value: Semilattice, *, context: str | None = None) -> bytes:
    """Encode a lattice value to bytes.

    Args:
        value: The value to encode.
        context: Optional actor/reference name for error messages.

    Raises:
        EncodeError: If the value contains something msgpack cannot
            represent or that cannot be ordered deterministically.
    """
    try:
        wire = value.to_wire()
    except EncodeError as exc:
        if context and not exc.context:
            raise EncodeError(str(exc), context) from exc
        raise
    try:
        return msgpack.packb(wire, use_bin_type=True)
    except (TypeError, ValueError, OverflowError) as exc:
        raise EncodeError(f"cannot pack {type(value).__name__}: {exc}", context) from exc


def decode(cls: type[L], data: bytes, *, context: str | None = None) -> L:
    """Decode bytes produced by ``encode`` into an instance of ``cls``.

    Args:
        cls: The lattice type to decode.
        data: Encoded bytes.
        context: Optional actor/reference name for error messages.

    Raises:
        DecodeError: If the bytes are malformed or do not describe a
            ``cls`` value.
    """
    try:
        wire = msgpack.unpackb(
            data,
            raw=False,
            use_list=False,
            strict_map_key=False,
        )
    except (ValueError, TypeError) as exc:
        raise DecodeError(f"malformed {cls.__name__} data: {exc}", context) from exc
    try:
        return cls.from_wire(wire)
    except DecodeError as exc:
        if context and not exc.context:
            raise DecodeError(str(exc), context) from exc
        raise
    except (TypeError, ValueError) as exc:
        raise DecodeError(f"invalid {cls.__name__} data: {exc}", context) from exc
