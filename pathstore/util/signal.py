"""
Signal
======

Ordered multicast listener list used as the change notifier for one path.

Unlike a set, a Signal keeps duplicates: registering the same callback twice
means it is called twice per dispatch and has to be removed twice.
"""

import logging
from typing import Any, Callable, List

ChangeCallback = Callable[[Any, Any], None]


class Signal:
    """
    Listener list for a single path.

    Usage:
        signal = Signal("USER.location")
        signal.add(lambda old, new: print(old, "->", new))
        signal.dispatch({"lat": 1}, {"lat": 2})
        signal.clear()
    """

    __slots__ = ("path", "_listeners", "_released")

    def __init__(self, path: str):
        self.path = path
        self._listeners: List[ChangeCallback] = []
        self._released = False

    def add(self, callback: ChangeCallback) -> None:
        """Append a listener. Duplicates are kept as separate registrations."""
        self._listeners.append(callback)

    def remove(self, callback: ChangeCallback) -> bool:
        """
        Remove the first registration of ``callback``.

        Returns:
            True if a registration was removed, False if callback wasn't registered
        """
        for index, listener in enumerate(self._listeners):
            if listener is callback or listener == callback:
                del self._listeners[index]
                return True
        return False

    def dispatch(self, old_value: Any, new_value: Any) -> None:
        """
        Call every listener with (old_value, new_value), in registration order.

        Iterates over a snapshot so listeners may add or remove listeners while
        being notified; such changes take effect from the next dispatch.
        Exceptions raised by a listener propagate to the caller and stop the
        remaining listeners.
        """
        if self._released:
            return
        listeners = tuple(self._listeners)
        logging.debug(f"Dispatching '{self.path}' to {len(listeners)} listener(s)")
        for listener in listeners:
            if self._released:
                break
            listener(old_value, new_value)

    def clear(self) -> None:
        """Detach every listener. A cleared signal never calls anything again."""
        self._listeners.clear()
        self._released = True

    @property
    def released(self) -> bool:
        return self._released

    @property
    def listeners(self) -> List[ChangeCallback]:
        return list(self._listeners)

    def __len__(self) -> int:
        return len(self._listeners)

    def __contains__(self, callback: ChangeCallback) -> bool:
        return any(
            listener is callback or listener == callback for listener in self._listeners
        )

    def __repr__(self):
        return f"Signal({self.path!r}, listeners={len(self._listeners)})"
