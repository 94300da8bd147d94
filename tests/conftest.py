"""
Shared pytest fixtures and configuration for PathStore tests.
"""

import pytest

from pathstore import PathStore
from pathstore.global_store import _reset_global_store


@pytest.fixture(autouse=True)
def reset_global_store():
    """Reset the global store before each test to prevent state leakage."""
    _reset_global_store()
    yield
    _reset_global_store()


@pytest.fixture
def store():
    """Provide a fresh PathStore instance for tests that need it."""
    return PathStore()


@pytest.fixture
def user_store(store):
    """PathStore with a USER container holding a location."""
    store.init_container("USER", {"location": {"latitude": 1, "longitude": 2}})
    return store


@pytest.fixture
def recorder():
    """Factory for listeners that record every (old, new) call they receive."""

    class Recorder:
        def __init__(self, name=None, log=None):
            self.name = name
            self.calls = []
            self._log = log

        def __call__(self, old, new):
            self.calls.append((old, new))
            if self._log is not None:
                self._log.append(self.name)

    return Recorder
