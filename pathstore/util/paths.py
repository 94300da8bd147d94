"""
Path Parsing
============

Turns dotted path strings such as ``"USER.location.latitude"`` into a
container id and a tuple of tree segments. Parsed paths are memoized in an
LRU cache since the same handful of paths is usually hit over and over by
get/set/on_change.
"""

import threading
from dataclasses import dataclass
from typing import Optional, Tuple

from cachetools import LRUCache

SEPARATOR = "."

# Path key of a container's root
ROOT_KEY: Tuple[str, ...] = ()


class PathSyntaxError(TypeError):
    """Raised when a path is not a non-empty string."""

    pass


@dataclass(frozen=True)
class ParsedPath:
    """
    A path split into its container id and the segments below it.

    Attributes:
        raw: The original path string
        container_id: First segment, selects the container
        segments: Remaining segments, used as the signal key
    """

    raw: str
    container_id: str
    segments: Tuple[str, ...]

    @property
    def is_root(self) -> bool:
        """True when the path addresses a whole container."""
        return not self.segments

    def prefixes(self):
        """Yield every segment prefix, from the container root down to the full path."""
        for depth in range(len(self.segments) + 1):
            yield self.segments[:depth]

    def __str__(self):
        return self.raw


def parse_path(path: str) -> ParsedPath:
    """Split ``path`` on dots. Raises PathSyntaxError for non-strings and ``""``."""
    if not isinstance(path, str):
        raise PathSyntaxError(
            f"path must be a string, got {type(path).__name__}: {path!r}"
        )
    if not path:
        raise PathSyntaxError("path must not be empty")

    container_id, *segments = path.split(SEPARATOR)
    return ParsedPath(raw=path, container_id=container_id, segments=tuple(segments))


def format_path(container_id: str, segments: Tuple[str, ...]) -> str:
    """Inverse of parse_path."""
    return SEPARATOR.join((container_id,) + tuple(segments))


class PathParser:
    """
    parse_path with an LRU cache in front of it.

    Usage:
        parser = PathParser(cache_size=256)
        parsed = parser.parse("USER.location.latitude")
        parsed.container_id   # "USER"
        parsed.segments       # ("location", "latitude")
    """

    def __init__(self, cache_size: int = 1024):
        self._cache: Optional[LRUCache] = (
            LRUCache(maxsize=cache_size) if cache_size > 0 else None
        )
        self._stats = {"parses": 0, "cache_hits": 0}

        # LRUCache is not thread-safe; lookups reorder it
        self._lock = threading.RLock()

    def parse(self, path: str) -> ParsedPath:
        with self._lock:
            self._stats["parses"] += 1
            if self._cache is None or not isinstance(path, str):
                return parse_path(path)

            cached = self._cache.get(path)
            if cached is not None:
                self._stats["cache_hits"] += 1
                return cached

            parsed = parse_path(path)
            self._cache[path] = parsed
            return parsed

    def clear(self) -> None:
        with self._lock:
            if self._cache is not None:
                self._cache.clear()

    @property
    def cache_size(self) -> int:
        with self._lock:
            return len(self._cache) if self._cache is not None else 0

    def get_stats(self):
        with self._lock:
            stats = self._stats.copy()
            stats["cached_paths"] = self.cache_size
            return stats
