"""Cancellable deferred callbacks on top of an event-loop style clock.

A clock is anything with ``time()`` (seconds) and
``call_later(delay, callback, *args)`` returning a handle with ``cancel()``;
an asyncio event loop qualifies as-is.
"""

from typing import Callable, Optional


class TriggerSlot:
    """Holds at most one armed deferred callback for a single purpose."""

    def __init__(self, name: str):
        self.name = name
        self.handle = None

    @property
    def armed(self) -> bool:
        return self.handle is not None

    def arm(self, clock, delay_ms: float, callback: Callable, *args):
        # Cancel first so a re-entered scheduler never leaves two live triggers
        self.cancel()
        self.handle = clock.call_later(delay_ms / 1000, self._fire, callback, args)

    def cancel(self):
        if self.handle is not None:
            self.handle.cancel()
            self.handle = None

    def _fire(self, callback: Callable, args: tuple):
        self.handle = None
        callback(*args)


class TaskPool:
    """Deferred callbacks keyed by player id, cancellable all at once."""

    def __init__(self):
        self.handles: dict[str, object] = {}

    def schedule(self, clock, key: str, delay_ms: float, callback: Callable, *args):
        self.cancel(key)
        self.handles[key] = clock.call_later(delay_ms / 1000, self._fire, key, callback, args)

    def cancel(self, key: str):
        handle: Optional[object] = self.handles.pop(key, None)
        if handle is not None:
            handle.cancel()

    def cancel_all(self):
        for key in list(self.handles):
            self.cancel(key)

    def __len__(self) -> int:
        return len(self.handles)

    def __contains__(self, key: str) -> bool:
        return key in self.handles

    def _fire(self, key: str, callback: Callable, args: tuple):
        self.handles.pop(key, None)
        callback(*args)
