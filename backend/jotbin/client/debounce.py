from __future__ import annotations

import threading
from typing import Callable, Optional, Protocol


class Cancellable(Protocol):
    def cancel(self) -> None: ...


Scheduler = Callable[[float, Callable[[], None]], Cancellable]


def thread_timer(delay: float, fn: Callable[[], None]) -> Cancellable:
    t = threading.Timer(delay, fn)
    t.daemon = True
    t.start()
    return t


class Debouncer:
    """Runs `fn` once `delay` seconds pass without another `trigger()`."""

    def __init__(self, fn: Callable[[], None], delay: float = 1.0, scheduler: Scheduler = thread_timer):
        self.fn = fn
        self.delay = delay
        self.scheduler = scheduler
        self._pending: Optional[Cancellable] = None

    @property
    def pending(self) -> bool:
        return self._pending is not None

    def trigger(self) -> None:
        self.cancel()
        self._pending = self.scheduler(self.delay, self._fire)

    def cancel(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None

    def flush(self) -> None:
        """Run now if something is pending."""
        if self._pending is not None:
            self.cancel()
            self.fn()

    def _fire(self) -> None:
        self._pending = None
        self.fn()
