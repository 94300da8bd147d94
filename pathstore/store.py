"""
Path Store
==========

In-process reactive store of named containers of nested data.

Each container holds a data tree and a set of per-path signals. Values are
read and written by dotted path, where the first segment names the container:

    store = PathStore()
    store.init_container("USER", {"location": {"latitude": 1, "longitude": 2}})

    store.on_change("USER.location.latitude", lambda old, new: print(old, new))
    store.set("USER.location.latitude", 10)        # prints "1 10"
    store.get("USER.location.latitude")            # 10

Dispatch contract for set():
    - The tree is fully updated before any listener runs.
    - Signals fire from the shallowest prefix (the container root) to the
      deepest (the path that was set). Listeners within one signal run in
      registration order.
    - For each prefix, ``old`` is a deep copy of that prefix's subtree taken
      before the write and ``new`` is the live subtree after it. Missing
      values are passed as None.
    - A signal only fires when old and new differ by deep equality.
"""

import logging
import threading
from dataclasses import dataclass, field
from typing import Any, Dict, List, Tuple

from pathstore.util import tree as tree_ops
from pathstore.util.paths import ParsedPath, PathParser, PathSyntaxError, format_path
from pathstore.util.signal import ChangeCallback, Signal

# ============================================================================
# EXCEPTIONS
# ============================================================================


class PathStoreError(Exception):
    """Base class for every error raised by PathStore."""

    pass


class InvalidArgumentError(PathStoreError, TypeError):
    """Raised for a non-string path, a non-callable callback or a non-mapping tree."""

    pass


class ContainerNotFoundError(PathStoreError, LookupError):
    """Raised when an operation addresses a container id that does not exist."""

    def __init__(self, container_id: str):
        super().__init__(f"Container '{container_id}' does not exist")
        self.container_id = container_id


class NoSignalError(PathStoreError, LookupError):
    """Raised when removing a callback from a path that never had a signal."""

    def __init__(self, path: str):
        super().__init__(f"No signal registered for path '{path}'")
        self.path = path


# ============================================================================
# CONTAINER
# ============================================================================

SignalKey = Tuple[str, ...]


@dataclass
class Container:
    """
    One named root: a data tree plus the signals watching it.

    Signals are keyed by the segments below the container id, so the root
    itself is ``()`` and ``"USER.location.latitude"`` is
    ``("location", "latitude")``.
    """

    id: str
    tree: Dict[str, Any]
    signals: Dict[SignalKey, Signal] = field(default_factory=dict)

    def release(self) -> None:
        """Detach every listener of every signal."""
        for signal in self.signals.values():
            signal.clear()
        self.signals.clear()


# ============================================================================
# STORE
# ============================================================================


class PathStore:
    """
    Registry of containers with path-addressed reads, writes and change signals.

    Thread safety: every operation runs under one reentrant lock, so a
    listener may call back into the store from inside a dispatch.
    """

    def __init__(self, path_cache_size: int = 1024):
        """
        Initialize the store.

        Args:
            path_cache_size: Number of parsed paths kept in the LRU cache (0 disables it)
        """
        self._containers: Dict[str, Container] = {}
        self._paths = PathParser(cache_size=path_cache_size)
        self._lock = threading.RLock()

        self._stats = {
            "gets": 0,
            "sets": 0,
            "notifications": 0,
        }

    # ------------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------------

    def _parse(self, path: str) -> ParsedPath:
        try:
            return self._paths.parse(path)
        except PathSyntaxError as e:
            raise InvalidArgumentError(str(e)) from e

    def _container(self, container_id: str) -> Container:
        container = self._containers.get(container_id)
        if container is None:
            raise ContainerNotFoundError(container_id)
        return container

    @staticmethod
    def _check_callback(callback: Any) -> None:
        if not callable(callback):
            raise InvalidArgumentError(
                f"callback must be callable, got {type(callback).__name__}"
            )

    # ------------------------------------------------------------------------
    # Container registry
    # ------------------------------------------------------------------------

    def init_container(self, container_id: str, initial_value: Any) -> None:
        """
        Create (or silently replace) a container.

        The initial value is deep-copied so the store never aliases data owned
        by the caller. Replacing an existing container releases its signals.

        Raises:
            InvalidArgumentError: container_id is not a plain id or
                initial_value is not a mapping
        """
        if not isinstance(container_id, str) or not container_id:
            raise InvalidArgumentError(
                f"container id must be a non-empty string, got {container_id!r}"
            )
        if "." in container_id:
            raise InvalidArgumentError(
                f"container id must not contain '.', got {container_id!r}"
            )
        if not tree_ops.is_mapping(initial_value):
            raise InvalidArgumentError(
                f"initial value must be a mapping, got {type(initial_value).__name__}"
            )

        with self._lock:
            previous = self._containers.pop(container_id, None)
            if previous is not None:
                logging.debug(f"Replacing container '{container_id}'")
                previous.release()

            self._containers[container_id] = Container(
                id=container_id, tree=dict(tree_ops.deep_copy(initial_value))
            )
            logging.debug(f"Initialized container '{container_id}'")

    def destroy_container(self, container_id: str) -> None:
        """
        Remove a container and release all of its signals.

        Raises:
            ContainerNotFoundError: no container with that id
        """
        with self._lock:
            container = self._container(container_id)
            del self._containers[container_id]
            logging.debug(
                f"Destroying container '{container_id}' "
                f"({len(container.signals)} signal(s))"
            )
            container.release()

    def clear(self) -> None:
        """Destroy every container. Safe on an empty store."""
        with self._lock:
            for container_id in list(self._containers):
                self.destroy_container(container_id)
            self._paths.clear()
            logging.debug("Cleared all containers")

    def has(self, path: str) -> bool:
        """
        True if ``path`` resolves to a value that is neither missing nor None.

        Never raises: a malformed path or an unknown container gives False.
        """
        with self._lock:
            try:
                parsed = self._parse(path)
            except InvalidArgumentError:
                return False

            container = self._containers.get(parsed.container_id)
            if container is None:
                return False
            value = tree_ops.resolve(container.tree, parsed.segments)
            return not tree_ops.is_absent(value)

    def ids(self) -> List[str]:
        """Return container ids in creation order."""
        with self._lock:
            return list(self._containers)

    # ------------------------------------------------------------------------
    # Path resolver & mutator
    # ------------------------------------------------------------------------

    def get(self, path: str) -> Any:
        """
        Read the value at ``path``.

        A bare container id returns the container's live tree; treat it as
        read-only. Missing intermediate nodes are not an error: the result is
        simply None.

        Raises:
            InvalidArgumentError: path is not a non-empty string
            ContainerNotFoundError: the container does not exist
        """
        with self._lock:
            parsed = self._parse(path)
            self._stats["gets"] += 1
            container = self._container(parsed.container_id)
            return tree_ops.present(tree_ops.resolve(container.tree, parsed.segments))

    def set(self, path: str, value: Any, overwrite: bool = False) -> None:
        """
        Write ``value`` at ``path`` and notify changed signals along the way.

        Missing or scalar intermediate nodes are replaced by empty dicts. Lists
        are written by index, and an index equal to their length appends. At
        the final segment a mapping value is shallow-merged into an
        existing mapping unless ``overwrite`` is true; in every other case the
        slot is replaced. The value is deep-copied before it is stored.

        Raises:
            InvalidArgumentError: bad path, a non-mapping value on a bare id, or
                a path that addresses a list by name or past its end
            ContainerNotFoundError: the container does not exist
        """
        with self._lock:
            parsed = self._parse(path)
            container = self._container(parsed.container_id)
            if parsed.is_root and not tree_ops.is_mapping(value):
                raise InvalidArgumentError(
                    f"container '{parsed.container_id}' can only be set to a mapping, "
                    f"got {type(value).__name__}"
                )
            try:
                tree_ops.check_writable(container.tree, parsed.segments)
            except tree_ops.TreeWriteError as e:
                raise InvalidArgumentError(f"cannot set '{path}': {e}") from e
            self._stats["sets"] += 1

            # Snapshot every watched prefix before touching the tree
            watched = [
                (prefix, container.signals[prefix])
                for prefix in parsed.prefixes()
                if prefix in container.signals
            ]
            before = [
                tree_ops.present(
                    tree_ops.deep_copy(tree_ops.resolve(container.tree, prefix))
                )
                for prefix, _ in watched
            ]

            self._write(container, parsed.segments, tree_ops.deep_copy(value), overwrite)

            for (prefix, signal), old_value in zip(watched, before):
                new_value = tree_ops.present(tree_ops.resolve(container.tree, prefix))
                if tree_ops.deep_equal(old_value, new_value):
                    continue
                self._stats["notifications"] += 1
                signal.dispatch(old_value, new_value)

    @staticmethod
    def _write(
        container: Container,
        segments: Tuple[str, ...],
        value: Any,
        overwrite: bool,
    ) -> None:
        if not segments:
            merged = tree_ops.merge(container.tree, value, overwrite)
            container.tree = dict(merged)
            return

        node: Any = container.tree
        for segment in segments[:-1]:
            node = tree_ops.ensure_child(node, segment)

        last = segments[-1]
        prior = tree_ops.child(node, last)
        tree_ops.assign(node, last, tree_ops.merge(prior, value, overwrite))

    # ------------------------------------------------------------------------
    # Change notification index
    # ------------------------------------------------------------------------

    def on_change(self, path: str, callback: ChangeCallback) -> None:
        """
        Call ``callback(old_value, new_value)`` whenever the value at ``path`` changes.

        Registering the same callback twice makes it fire twice; each
        registration has to be removed separately.

        Raises:
            InvalidArgumentError: callback is not callable or path is malformed
            ContainerNotFoundError: the container does not exist
        """
        self._check_callback(callback)
        with self._lock:
            parsed = self._parse(path)
            container = self._container(parsed.container_id)
            signal = container.signals.get(parsed.segments)
            if signal is None:
                signal = Signal(format_path(parsed.container_id, parsed.segments))
                container.signals[parsed.segments] = signal
                logging.debug(f"Created signal for '{signal.path}'")
            signal.add(callback)

    def remove_change_callback(self, path: str, callback: ChangeCallback) -> bool:
        """
        Remove one registration of ``callback`` from ``path``.

        Returns:
            True if a registration was removed, False if callback wasn't registered

        Raises:
            InvalidArgumentError: callback is not callable or path is malformed
            ContainerNotFoundError: the container does not exist
            NoSignalError: on_change was never called for this exact path
        """
        self._check_callback(callback)
        with self._lock:
            parsed = self._parse(path)
            container = self._container(parsed.container_id)
            signal = container.signals.get(parsed.segments)
            if signal is None:
                raise NoSignalError(path)
            return signal.remove(callback)

    # ------------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------------

    def signals(self, container_id: str) -> Dict[str, Signal]:
        """Map path string -> Signal for one container."""
        with self._lock:
            container = self._container(container_id)
            return {signal.path: signal for signal in container.signals.values()}

    def get_stats(self) -> Dict[str, Any]:
        """Get statistics about store operations."""
        with self._lock:
            stats = self._stats.copy()
            stats["containers"] = len(self._containers)
            stats["signals"] = sum(
                len(container.signals) for container in self._containers.values()
            )
            stats["path_cache"] = self._paths.get_stats()
            return stats

    def __len__(self) -> int:
        with self._lock:
            return len(self._containers)

    def __contains__(self, container_id: Any) -> bool:
        with self._lock:
            return container_id in self._containers

    def __getitem__(self, path: str) -> Any:
        return self.get(path)

    def __setitem__(self, path: str, value: Any) -> None:
        self.set(path, value)

    def __repr__(self):
        return f"PathStore(containers={self.ids()!r})"


def create_store(path_cache_size: int = 1024) -> PathStore:
    """
    Create a path store with specified settings.

    Args:
        path_cache_size: Size of the LRU cache for parsed paths

    Returns:
        Configured PathStore instance
    """
    return PathStore(path_cache_size=path_cache_size)
