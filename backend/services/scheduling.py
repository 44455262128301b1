"""
Frame and timer scheduling.

The flight engine and the suggestion controller never sleep; they ask a
scheduler for the next frame or for a delayed callback and keep the returned
handle so they can cancel it. AsyncioScheduler drives real time on the running
event loop; ManualScheduler drives a virtual clock for tests and offline
simulation.
"""
from __future__ import annotations

import asyncio
import heapq
import itertools
from typing import Callable, List, Optional, Protocol, Tuple

Callback = Callable[[], None]

DEFAULT_FRAME_INTERVAL_MS = 1000.0 / 60.0


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def now_ms(self) -> float: ...

    def request_frame(self, callback: Callback) -> Cancellable: ...

    def call_later(self, delay_ms: float, callback: Callback) -> Cancellable: ...


class AsyncioScheduler:
    """Schedules frames and timers on the running asyncio loop."""

    def __init__(
        self,
        frame_interval_ms: float = DEFAULT_FRAME_INTERVAL_MS,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ):
        self.frame_interval_ms = frame_interval_ms
        self._loop = loop

    @property
    def loop(self) -> asyncio.AbstractEventLoop:
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        return self._loop

    def now_ms(self) -> float:
        return self.loop.time() * 1000.0

    def request_frame(self, callback: Callback) -> asyncio.TimerHandle:
        return self.loop.call_later(self.frame_interval_ms / 1000.0, callback)

    def call_later(self, delay_ms: float, callback: Callback) -> asyncio.TimerHandle:
        return self.loop.call_later(max(delay_ms, 0.0) / 1000.0, callback)


class ManualHandle:
    __slots__ = ("callback", "cancelled")

    def __init__(self, callback: Callback):
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Virtual clock: nothing runs until advance() is called."""

    def __init__(self, frame_interval_ms: float = 16.0, start_ms: float = 0.0):
        self.frame_interval_ms = frame_interval_ms
        self._now = start_ms
        self._frames: List[ManualHandle] = []
        self._timers: List[Tuple[float, int, ManualHandle]] = []
        self._seq = itertools.count()

    def now_ms(self) -> float:
        return self._now

    def request_frame(self, callback: Callback) -> ManualHandle:
        handle = ManualHandle(callback)
        self._frames.append(handle)
        return handle

    def call_later(self, delay_ms: float, callback: Callback) -> ManualHandle:
        handle = ManualHandle(callback)
        heapq.heappush(self._timers, (self._now + max(delay_ms, 0.0), next(self._seq), handle))
        return handle

    @property
    def pending_frames(self) -> int:
        return sum(1 for h in self._frames if not h.cancelled)

    @property
    def pending_timers(self) -> int:
        return sum(1 for _, _, h in self._timers if not h.cancelled)

    def advance(self, ms: float) -> None:
        """Move the clock forward, running due timers and then frames at each tick."""
        target = self._now + ms
        while self._now < target:
            self._now = min(self._now + self.frame_interval_ms, target)
            self._run_due_timers()
            self._run_frames()

    def advance_to(self, time_ms: float) -> None:
        if time_ms > self._now:
            self.advance(time_ms - self._now)

    def _run_due_timers(self) -> None:
        while self._timers and self._timers[0][0] <= self._now:
            _, _, handle = heapq.heappop(self._timers)
            if not handle.cancelled:
                handle.cancelled = True
                handle.callback()

    def _run_frames(self) -> None:
        frames, self._frames = self._frames, []
        for handle in frames:
            if not handle.cancelled:
                handle.cancelled = True
                handle.callback()
