"""Abstract interfaces for the game layer.

The controller depends on these ABCs, not on a concrete timer, so the same
move loop runs under a Qt event loop, in tests, or stepped by hand.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from enum import IntEnum, auto
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chessim.game.session import GameSnapshot


# ── Session FSM states ───────────────────────────────────────────────────────


class SessionStatus(IntEnum):
    """Finite-state-machine states of a self-play session."""

    IDLE = auto()
    ACTIVE = auto()
    PAUSED = auto()
    FINISHED = auto()

    def __str__(self) -> str:
        return self.name.lower()


# ── Scheduling ───────────────────────────────────────────────────────────────


class ScheduledCall(ABC):
    """Handle to a callback registered with :meth:`IScheduler.call_later`."""

    @abstractmethod
    def cancel(self) -> None:
        """Prevent the callback from running. Safe to call more than once."""

    @property
    @abstractmethod
    def active(self) -> bool:
        """Whether the callback is still waiting to run."""


class IScheduler(ABC):
    """Single-threaded timer service."""

    @abstractmethod
    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> ScheduledCall:
        """Run *callback* once, no earlier than *delay_ms* from now."""


# ── Controller ───────────────────────────────────────────────────────────────


class ISimulationController(ABC):
    """Commands and state accepted from / exposed to a display layer."""

    @abstractmethod
    def start(self) -> None:
        """Begin or resume automatic play."""

    @abstractmethod
    def pause(self) -> None:
        """Freeze automatic play, keeping the game."""

    @abstractmethod
    def reset(self) -> None:
        """Discard the game and return to a fresh idle session."""

    @abstractmethod
    def set_delay(self, delay_ms: int) -> None:
        """Change the pause between moves."""

    @abstractmethod
    def snapshot(self) -> GameSnapshot:
        """Read-only view of the current game."""
