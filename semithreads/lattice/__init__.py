"""Join-semilattice building blocks.

Every type here merges by a join that is commutative, associative and
idempotent, so replicas converge no matter how often or in which order
they exchange state.

Primitives:

- **Max**: monotonic maximum of a non-negative integer
- **GSet**: grow-only set (``GSet.of(E)`` checks decoded elements)
- **GMap**: grow-only map with value-wise join (``GMap.of(V, key=K)``)
- **GuardedPair**: value superseded by a strictly greater guard
- **Redactable**: text cell where a tombstone absorbs everything
- **Vote**: per-actor counters read modulo N as opinions (``Vote.of(N)``)

Products of these are derived with the ``@semilattice`` decorator.
"""

from semithreads.lattice.protocol import Ordering, Semilattice, combine_orderings
from semithreads.lattice.max import Max
from semithreads.lattice.gset import GSet
from semithreads.lattice.gmap import GMap
from semithreads.lattice.guarded_pair import GuardedPair
from semithreads.lattice.redactable import CellState, Redactable
from semithreads.lattice.vote import Vote
from semithreads.lattice.product import lattice_field, semilattice

__all__ = [
    "Ordering",
    "Semilattice",
    "combine_orderings",
    "Max",
    "GSet",
    "GMap",
    "GuardedPair",
    "CellState",
    "Redactable",
    "Vote",
    "lattice_field",
    "semilattice",
]
