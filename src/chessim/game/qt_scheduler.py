"""Qt-backed scheduler: one single-shot ``QTimer`` per scheduled call."""

from __future__ import annotations

from collections.abc import Callable

from PyQt6.QtCore import QTimer

from chessim.game.interfaces import IScheduler, ScheduledCall


class _QtCall(ScheduledCall):
    __slots__ = ("_timer", "_owner")

    def __init__(self, timer: QTimer, owner: QtScheduler) -> None:
        self._timer = timer
        self._owner = owner

    def cancel(self) -> None:
        self._timer.stop()
        self._owner._release(self._timer)

    @property
    def active(self) -> bool:
        return self._timer.isActive()


class QtScheduler(IScheduler):
    """Runs callbacks on the thread that owns the Qt event loop.

    Needs a running ``QCoreApplication`` (or ``QApplication``) event loop.
    """

    __slots__ = ("_timers",)

    def __init__(self) -> None:
        # Pending timers are unparented, so they must be kept alive here.
        self._timers: set[QTimer] = set()

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> ScheduledCall:
        timer = QTimer()
        timer.setSingleShot(True)

        def _fire() -> None:
            self._release(timer)
            callback()

        timer.timeout.connect(_fire)
        self._timers.add(timer)
        timer.start(delay_ms)
        return _QtCall(timer, self)

    @property
    def pending(self) -> int:
        return sum(1 for timer in self._timers if timer.isActive())

    def _release(self, timer: QTimer) -> None:
        if timer not in self._timers:
            return
        self._timers.discard(timer)
        # Drop the slot so the timer/closure cycle can be collected.
        timer.timeout.disconnect()
