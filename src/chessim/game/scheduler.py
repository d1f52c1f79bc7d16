"""Deterministic scheduler driven by a virtual clock."""

from __future__ import annotations

import heapq
from collections.abc import Callable
from dataclasses import dataclass, field

from chessim.game.interfaces import IScheduler, ScheduledCall


@dataclass(order=True)
class _ManualCall(ScheduledCall):
    due_ms: int
    seq: int
    callback: Callable[[], None] = field(compare=False)
    cancelled: bool = field(default=False, compare=False)
    fired: bool = field(default=False, compare=False)

    def cancel(self) -> None:
        self.cancelled = True

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.fired)


class ManualScheduler(IScheduler):
    """Scheduler whose time only moves when :meth:`advance` is called.

    Used by tests and by the headless runner's fast mode.
    """

    __slots__ = ("_now_ms", "_seq", "_queue")

    def __init__(self) -> None:
        self._now_ms = 0
        self._seq = 0
        self._queue: list[_ManualCall] = []

    @property
    def now_ms(self) -> int:
        return self._now_ms

    @property
    def pending(self) -> int:
        """Number of callbacks still waiting to run."""
        return sum(1 for call in self._queue if call.active)

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> ScheduledCall:
        if delay_ms < 0:
            raise ValueError(f"delay_ms must be non-negative, got {delay_ms}")
        self._seq += 1
        call = _ManualCall(self._now_ms + delay_ms, self._seq, callback)
        heapq.heappush(self._queue, call)
        return call

    def advance(self, delta_ms: int) -> int:
        """Move the clock forward, running every callback that falls due.

        Returns the number of callbacks run.
        """
        if delta_ms < 0:
            raise ValueError(f"Cannot move time backwards: {delta_ms}")
        target = self._now_ms + delta_ms
        ran = 0
        while self._run_next(target):
            ran += 1
        self._now_ms = target
        return ran

    def run_until_idle(self, max_calls: int = 100_000) -> int:
        """Keep jumping to the next due callback until none are left.

        Stops after *max_calls* callbacks even if more are due at that instant.
        """
        ran = 0
        while ran < max_calls and self._run_next(None):
            ran += 1
        return ran

    def _run_next(self, until_ms: int | None) -> bool:
        # Pops and runs the earliest active call due by *until_ms* (any time if None).
        while self._queue:
            call = self._queue[0]
            if call.active and until_ms is not None and call.due_ms > until_ms:
                return False
            heapq.heappop(self._queue)
            if not call.active:
                continue
            self._now_ms = call.due_ms
            call.fired = True
            call.callback()
            return True
        return False
