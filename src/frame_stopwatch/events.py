"""Named callback registries for stopwatch notifications."""

from __future__ import annotations

import logging
from typing import Any, Callable

logger = logging.getLogger(__name__)

UPDATE = "update"
ALARM = "alarm"
EVENT_NAMES = (UPDATE, ALARM)

Listener = Callable[..., Any]


class EventBus:
    """Ordered listener lists for the ``update`` and ``alarm`` channels.

    Listeners run synchronously in registration order. By default an
    exception raised by a listener propagates and the remaining listeners
    of that dispatch are skipped; with ``isolate_errors`` each failure is
    logged and dispatch continues.
    """

    def __init__(self, isolate_errors: bool = False):
        self.isolate_errors = isolate_errors
        self._listeners: dict[str, list[Listener]] = {name: [] for name in EVENT_NAMES}

    def on(self, event_name: str, callback: Listener) -> bool:
        """Append *callback* to a channel. Returns False for unknown channels."""
        listeners = self._listeners.get(event_name)
        if listeners is None or not callable(callback):
            return False
        listeners.append(callback)
        return True

    def off(self, event_name: str | None = None, callback: Listener | None = None) -> bool:
        """Remove listeners.

        No arguments clears every channel, a name alone clears that channel
        and a name with a callback removes the first identical entry.
        Returns False only for an unknown channel name.
        """
        if event_name is None:
            for listeners in self._listeners.values():
                listeners.clear()
            return True

        listeners = self._listeners.get(event_name)
        if listeners is None:
            return False

        if callback is None:
            listeners.clear()
            return True

        for i, registered in enumerate(listeners):
            if registered is callback:
                del listeners[i]
                break
        return True

    def listeners(self, event_name: str) -> list[Listener]:
        return list(self._listeners.get(event_name, ()))

    def dispatch(self, event_name: str, *args: Any) -> None:
        """Call every listener on *event_name* with *args*."""
        for callback in list(self._listeners.get(event_name, ())):
            if not self.isolate_errors:
                callback(*args)
                continue
            try:
                callback(*args)
            except Exception:
                logger.exception("Listener %r failed on %r", callback, event_name)
