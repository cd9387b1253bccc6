"""
Schedulers for delayed callbacks.

The controller only needs "call this later" and "never mind". The asyncio
scheduler is used when running under the server; tests drive a manual one.
"""

from __future__ import annotations

import asyncio
from collections.abc import Callable
from typing import Any, Protocol


class TimerHandle(Protocol):
    """A pending callback that can be cancelled."""

    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """Anything that can run a callback after a delay."""

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle: ...


class AsyncioScheduler:
    """
    Scheduler backed by the running asyncio event loop.

    The loop is looked up on each call, so one scheduler can be created
    before the loop starts.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self._loop = loop

    def call_later(
        self, delay: float, callback: Callable[..., Any], *args: Any
    ) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback, *args)


class ManualTimer:
    """A callback held by ManualScheduler until time is advanced past it."""

    def __init__(self, due: float, callback: Callable[..., Any], args: tuple[Any, ...]):
        self.due = due
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """
    Deterministic scheduler driven by explicit clock advances.

    Example:
        scheduler = ManualScheduler()
        scheduler.call_later(0.5, fire)
        scheduler.advance(0.5)  # fire() runs here
    """

    def __init__(self) -> None:
        self.now = 0.0
        self.timers: list[ManualTimer] = []

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> ManualTimer:
        timer = ManualTimer(self.now + delay, callback, args)
        self.timers.append(timer)
        return timer

    @property
    def pending(self) -> list[ManualTimer]:
        """Timers that have neither fired nor been cancelled."""
        return [t for t in self.timers if not t.cancelled]

    def advance(self, seconds: float) -> int:
        """
        Move the clock forward and fire every due timer in order.

        Returns:
            Number of callbacks run
        """
        self.now += seconds
        fired = 0
        while True:
            due = [t for t in self.pending if t.due <= self.now]
            if not due:
                return fired
            timer = min(due, key=lambda t: t.due)
            self.timers.remove(timer)
            timer.callback(*timer.args)
            fired += 1

    def fire_all(self) -> int:
        """Fire every pending timer regardless of its due time, cancelled ones included."""
        fired = 0
        for timer in list(self.timers):
            self.timers.remove(timer)
            timer.callback(*timer.args)
            fired += 1
        return fired
