"""
PathStore - reactive containers of nested data addressed by dotted path.

A small in-process store: named containers hold nested dicts/lists, values are
read and written as ``"CONTAINER.key.subkey"``, and listeners registered on a
path are told about changes with ``(old_value, new_value)``.
"""

from .global_store import _reset_global_store, get_global_store
from .store import (
    Container,
    ContainerNotFoundError,
    InvalidArgumentError,
    NoSignalError,
    PathStore,
    PathStoreError,
    create_store,
)
from .util.paths import ParsedPath, parse_path
from .util.render import render_container, render_store
from .util.signal import Signal
from .util.tree import deep_equal

__version__ = "0.1.0"

__all__ = [
    # Store
    "PathStore",
    "Container",
    "create_store",
    "get_global_store",
    # Building blocks
    "Signal",
    "ParsedPath",
    "parse_path",
    "deep_equal",
    # Debug rendering
    "render_store",
    "render_container",
    # Exceptions
    "PathStoreError",
    "InvalidArgumentError",
    "ContainerNotFoundError",
    "NoSignalError",
    # Testing utilities (internal use)
    "_reset_global_store",
]
