"""
Shared pytest fixtures for semithreads tests.
"""

import logging

import pytest

from semithreads.schema import Root, Slice
from semithreads.session import ActorSession


@pytest.fixture
def slices():
    """Fresh empty slices for three actors."""
    return {"alice": Slice(), "bob": Slice(), "carol": Slice()}


@pytest.fixture
def sessions(slices):
    """One device-0 session per actor in ``slices``."""
    return {actor: ActorSession(actor, 0, s) for actor, s in slices.items()}


@pytest.fixture
def make_root():
    """Build a Root from ``{actor: slice}``."""

    def _make_root(by_actor):
        root = Root()
        for actor, s in by_actor.items():
            root.add_slice(actor, s)
        return root

    return _make_root


@pytest.fixture(autouse=True)
def reset_semithreads_logging():
    """Reset logging state before each test.

    Ensures tests start with a clean logging configuration:
    - Removes all handlers except NullHandler
    - Resets level to NOTSET (inherit from parent)
    """
    logger = logging.getLogger("semithreads")

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        if not isinstance(handler, logging.NullHandler):
            handler.close()
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.NOTSET)

    yield

    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        if not isinstance(handler, logging.NullHandler):
            handler.close()
    logger.addHandler(logging.NullHandler())
    logger.setLevel(logging.NOTSET)
