"""
Property tests for convergence.

Every lattice, primitive or derived product, must satisfy the join
laws and its partial order must agree with its join. Folding
published slices must not depend on the order or grouping in which
they arrive.
"""

from functools import reduce

import pytest
from hypothesis import HealthCheck, given, settings
from hypothesis import strategies as st
from hypothesis.strategies import composite

from semithreads.codec import decode, encode
from semithreads.detailed import Detailed, contribution, materialize
from semithreads.lattice import GSet, Max, Ordering, Redactable, Vote, lattice_field, semilattice
from semithreads.schema import Content, Counters, Owned, ReplyTo, Root, Slice, Titles, TitleSet
from semithreads.session import ActorSession

ACTORS = ["alice", "bob", "carol"]
WORDS = st.sampled_from(["intro", "rust", "math", "like", "laugh", "x"])

# =============================================================================
# STRATEGIES
# =============================================================================

maxes = st.integers(min_value=0, max_value=20).map(Max)
gsets = st.frozensets(WORDS, max_size=4).map(GSet)
counters = st.dictionaries(WORDS, maxes, max_size=4).map(Counters)
cells = st.one_of(
    st.just(Redactable()),
    st.just(Redactable.redacted()),
    st.text(max_size=4).map(Redactable.live),
)
titles = st.builds(Titles, maxes, st.frozensets(WORDS, max_size=3).map(TitleSet))
votes = st.dictionaries(st.sampled_from(ACTORS), maxes, max_size=3).map(Vote.of(4))
message_ids = st.tuples(st.sampled_from(ACTORS), st.integers(min_value=0, max_value=3))
owned = st.builds(
    Owned,
    titles=titles,
    reply_to=st.frozensets(message_ids, max_size=3).map(ReplyTo),
    content=st.dictionaries(st.integers(min_value=0, max_value=3), cells, max_size=3).map(Content),
)


@semilattice
class Tally:
    seen: GSet = lattice_field(GSet, tag=0)
    count: Max = lattice_field(Max, tag=1)


tallies = st.builds(Tally, gsets, maxes)


@composite
def slices(draw, actor):
    """A slice produced by a random sequence of session operations."""
    session = ActorSession(actor, draw(st.integers(min_value=0, max_value=3)), Slice())
    targets = [(a, i << 16) for a in ACTORS for i in range(2)]
    mine = []
    for _ in range(draw(st.integers(min_value=0, max_value=8))):
        op = draw(st.sampled_from(["thread", "reply", "edit", "redact", "react", "tag"]))
        if op == "thread":
            mine.append(session.new_thread(draw(WORDS), draw(WORDS), draw(st.lists(WORDS, max_size=2)))[1])
        elif op == "reply":
            mine.append(session.reply(draw(st.sampled_from(targets)), draw(WORDS))[1])
        elif op == "edit" and mine:
            session.edit(draw(st.sampled_from(mine)), draw(WORDS))
        elif op == "redact" and mine:
            local_id = draw(st.sampled_from(mine))
            versions = session.slice.owned[local_id].content.keys()
            session.redact(local_id, draw(st.sampled_from(versions)))
        elif op == "react":
            session.react(draw(st.sampled_from(targets)), draw(WORDS), draw(st.booleans()))
        elif op == "tag":
            session.adjust_tags(
                draw(st.sampled_from(targets)),
                add=draw(st.lists(WORDS, max_size=2)),
                remove=draw(st.lists(WORDS, max_size=2)),
            )
    return session.slice


@composite
def published(draw):
    """One slice per actor."""
    return {actor: draw(slices(actor)) for actor in ACTORS}


def _root_of(by_actor):
    root = Root()
    for actor, slice_ in by_actor.items():
        root.add_slice(actor, slice_)
    return root


LATTICES = {
    "max": maxes,
    "gset": gsets,
    "gmap": counters,
    "redactable": cells,
    "guarded_pair": titles,
    "vote": votes,
    "product": tallies,
    "owned": owned,
    "slice": slices("alice"),
    "detailed": published().map(lambda by_actor: materialize(_root_of(by_actor))),
}


# Session-built values are expensive to draw.
SLOW = [HealthCheck.too_slow, HealthCheck.data_too_large]


def _triples(name):
    s = LATTICES[name]
    return st.tuples(s, s, s)


# =============================================================================
# JOIN LAWS
# =============================================================================


@pytest.mark.parametrize("name", sorted(LATTICES))
def test_join_laws(name):
    @settings(max_examples=60, deadline=None, suppress_health_check=SLOW)
    @given(_triples(name))
    def check(triple):
        a, b, c = triple
        assert a.join(a) == a
        assert a.join(b) == b.join(a)
        assert a.join(b.join(c)) == a.join(b).join(c)
        assert a.join(type(a).bottom()) == a

    check()


@pytest.mark.parametrize("name", sorted(LATTICES))
def test_order_agrees_with_join(name):
    @settings(max_examples=60, deadline=None, suppress_health_check=SLOW)
    @given(_triples(name))
    def check(triple):
        a, b, _ = triple
        ordering = a.partial_cmp(b)
        assert (ordering in (Ordering.LESS, Ordering.EQUAL)) == (a.join(b) == b)
        assert (ordering in (Ordering.GREATER, Ordering.EQUAL)) == (a.join(b) == a)
        assert a <= a.join(b)
        assert b <= a.join(b)

    check()


@pytest.mark.parametrize("name", sorted(LATTICES))
def test_wire_round_trip(name):
    @settings(max_examples=40, deadline=None, suppress_health_check=SLOW)
    @given(LATTICES[name])
    def check(value):
        assert decode(type(value), encode(value)) == value

    check()


# =============================================================================
# FOLD CONVERGENCE
# =============================================================================


@settings(max_examples=40, deadline=None)
@given(published(), st.permutations(ACTORS))
def test_fold_is_order_independent(by_actor, order):
    root = Root()
    for actor in ACTORS:
        root.add_slice(actor, by_actor[actor])

    view = Detailed()
    for actor in order:
        view.absorb(actor, by_actor[actor])
    assert view == materialize(root)


@settings(max_examples=40, deadline=None)
@given(published(), st.permutations(ACTORS))
def test_contributions_join_to_full_view(by_actor, order):
    root = Root()
    for actor in ACTORS:
        root.add_slice(actor, by_actor[actor])

    parts = [contribution(actor, by_actor[actor]) for actor in order]
    assert reduce(lambda a, b: a.join(b), parts, Detailed()) == materialize(root)


@settings(max_examples=40, deadline=None)
@given(published())
def test_slices_survive_encoding(by_actor):
    for slice_ in by_actor.values():
        data = encode(slice_)
        assert decode(Slice, data) == slice_
        assert encode(decode(Slice, data)) == data
