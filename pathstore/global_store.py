"""
Global Store - opt-in process-wide PathStore.

PathStore is a plain class and most code should construct and pass one
around explicitly. Callers that really want a single shared instance use
get_global_store().

Implementation:
    - get_global_store(): lazy singleton pattern
    - _reset_global_store(): drops the singleton (tests)
"""

import logging

from .store import PathStore

_global_store = None


def get_global_store() -> PathStore:
    """
    Get or create the global store instance.

    Lazy singleton pattern: creates on first access, reuses thereafter.
    Testing can reset via _reset_global_store().
    """
    global _global_store
    if _global_store is None:
        _global_store = PathStore()
        logging.debug("Created global PathStore")
    return _global_store


def _reset_global_store() -> None:
    """
    Reset the global store for testing purposes.

    Releases every container of the current instance, then forgets it. Not
    for production use.
    """
    global _global_store
    if _global_store is not None:
        _global_store.clear()
    _global_store = None
