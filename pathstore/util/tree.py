"""
Tree Operations
===============

Generic helpers over the container tree. A tree node is one of:

- a mapping (string keys -> nodes)
- a sequence (list/tuple of nodes; strings and bytes are scalars)
- a scalar (anything else, including numpy arrays)

Traversal, copying, merging and equality are all written against that sum
type through collections.abc, so callers may store dict subclasses,
OrderedDicts, tuples and so on.
"""

import copy
from collections.abc import Mapping, MutableMapping, MutableSequence, Sequence
from typing import Any, Optional, Tuple

import numpy as np

# Sentinel for "no value at this location"
MISSING = object()


class TreeWriteError(TypeError):
    """Raised when a write would have to go through a sequence it cannot address."""

    pass


def is_mapping(value: Any) -> bool:
    return isinstance(value, Mapping)


def is_sequence(value: Any) -> bool:
    """Sequences other than str/bytes, which count as scalars."""
    return isinstance(value, Sequence) and not isinstance(
        value, (str, bytes, bytearray)
    )


def is_absent(value: Any) -> bool:
    """Absent covers both a missing slot and an explicit None."""
    return value is MISSING or value is None


def sequence_index(node: Any, segment: str) -> Optional[int]:
    """
    Interpret ``segment`` as an index into ``node``.

    Returns the index when ``node`` is a sequence and ``segment`` is a
    non-negative decimal integer in range, otherwise None.
    """
    if not is_sequence(node) or not segment.isdigit():
        return None
    index = int(segment)
    return index if index < len(node) else None


def child(node: Any, segment: str) -> Any:
    """Return the child of ``node`` at ``segment`` or MISSING."""
    if is_mapping(node):
        return node.get(segment, MISSING)
    index = sequence_index(node, segment)
    if index is not None:
        return node[index]
    return MISSING


def resolve(tree: Any, segments: Tuple[str, ...]) -> Any:
    """
    Walk ``segments`` down from ``tree``.

    Stops early and returns MISSING as soon as an intermediate node is
    absent or None. Never raises for missing paths.
    """
    node = tree
    for segment in segments:
        if is_absent(node):
            return MISSING
        node = child(node, segment)
    return node


def deep_copy(value: Any) -> Any:
    """copy.deepcopy that leaves the MISSING sentinel alone."""
    if value is MISSING:
        return value
    return copy.deepcopy(value)


def present(value: Any) -> Any:
    """Map MISSING to None, the form values are handed to callers in."""
    return None if value is MISSING else value


def deep_equal(a: Any, b: Any) -> bool:
    """
    Structural equality over the tree sum type.

    Mappings compare by key set and per-key deep equality, sequences by
    length and per-item deep equality (list and tuple are interchangeable).
    numpy arrays compare element-wise via np.array_equal. Other scalars
    fall back to ``==``.
    """
    if a is b:
        return True

    if isinstance(a, np.ndarray) or isinstance(b, np.ndarray):
        try:
            return bool(np.array_equal(a, b))
        except (TypeError, ValueError):
            return False

    if is_mapping(a) or is_mapping(b):
        if not (is_mapping(a) and is_mapping(b)):
            return False
        if a.keys() != b.keys():
            return False
        return all(deep_equal(a[key], b[key]) for key in a)

    if is_sequence(a) or is_sequence(b):
        if not (is_sequence(a) and is_sequence(b)):
            return False
        if len(a) != len(b):
            return False
        return all(deep_equal(x, y) for x, y in zip(a, b))

    # True == 1 in Python, but a flag flipping from 1 to True is a change
    if isinstance(a, bool) or isinstance(b, bool):
        return type(a) is type(b) and a == b

    try:
        return bool(a == b)
    except (TypeError, ValueError):
        return False


def merge(prior: Any, value: Any, overwrite: bool = False) -> Any:
    """
    Compute what a slot holding ``prior`` becomes when ``value`` is set on it.

    Shallow merge: when both sides are mappings and ``overwrite`` is false the
    result is ``{**prior, **value}``. Keys nested below the first level are
    replaced wholesale, never merged. In every other case ``value`` wins.
    """
    if overwrite or is_absent(prior) or not is_mapping(value) or not is_mapping(prior):
        return value
    merged = dict(prior)
    merged.update(value)
    return merged


def _write_index(node: Any, segment: str) -> Optional[int]:
    """Index ``segment`` names in a mutable sequence: in range or one past the end."""
    if not isinstance(node, MutableSequence) or not segment.isdigit():
        return None
    index = int(segment)
    return index if index <= len(node) else None


def check_writable(tree: Any, segments: Tuple[str, ...]) -> None:
    """
    Make sure a write along ``segments`` never has to discard a sequence.

    Sequences are structured nodes: they are written by index, or extended
    by one when the index equals their length. Anything else (a name, an
    index past the end, an immutable tuple) raises TreeWriteError before
    the tree is touched. Scalars and missing nodes are fine, they get
    replaced by fresh dicts.
    """
    node = tree
    for segment in segments:
        if is_sequence(node):
            index = _write_index(node, segment)
            if index is None:
                raise TreeWriteError(
                    f"cannot write {segment!r} into {type(node).__name__} "
                    f"of length {len(node)}"
                )
            if index == len(node):
                return
        elif not isinstance(node, MutableMapping):
            return
        node = child(node, segment)


def ensure_child(node: Any, segment: str) -> Any:
    """
    Return the structured child of ``node`` at ``segment``, creating it if needed.

    Mutable mappings and sequences are kept. Anything else in that slot
    (missing, None, a scalar) is replaced in place by a fresh empty dict.
    Call check_writable first so sequences on the way accept the next segment.
    """
    existing = child(node, segment)
    if isinstance(existing, MutableMapping) or is_sequence(existing):
        return existing
    fresh: dict = {}
    assign(node, segment, fresh)
    return fresh


def assign(node: Any, segment: str, value: Any) -> None:
    """Store ``value`` at ``segment`` of ``node`` in place, appending one past a list's end."""
    if is_sequence(node):
        index = _write_index(node, segment)
        if index is None:
            raise TreeWriteError(
                f"cannot write {segment!r} into {type(node).__name__} of length {len(node)}"
            )
        if index == len(node):
            node.append(value)
        else:
            node[index] = value
        return
    if not isinstance(node, MutableMapping):
        raise TreeWriteError(f"cannot assign key {segment!r} into {type(node).__name__}")
    node[segment] = value
