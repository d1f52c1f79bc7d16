"""Simulation settings."""

from __future__ import annotations

from dataclasses import dataclass

from chessim.core.notation import STARTING_FEN, position_from_fen
from chessim.engine.policy import DEFAULT_CENTER_PROBABILITY

MIN_DELAY_MS = 500
MAX_DELAY_MS = 5000
DELAY_STEP_MS = 250
DEFAULT_DELAY_MS = 2000


def validate_delay(delay_ms: int) -> int:
    """Return *delay_ms* if it is a valid inter-move delay, else raise ``ValueError``.

    Valid delays run from 500 to 5000 ms in steps of 250 ms.
    """
    if isinstance(delay_ms, bool) or not isinstance(delay_ms, int):
        raise ValueError(f"Delay must be an integer number of ms, got {delay_ms!r}")
    if not MIN_DELAY_MS <= delay_ms <= MAX_DELAY_MS:
        raise ValueError(
            f"Delay {delay_ms} ms outside [{MIN_DELAY_MS}, {MAX_DELAY_MS}]"
        )
    if (delay_ms - MIN_DELAY_MS) % DELAY_STEP_MS:
        raise ValueError(f"Delay {delay_ms} ms is not a multiple of {DELAY_STEP_MS} ms")
    return delay_ms


@dataclass
class SimulationSettings:
    """All user-configurable settings of a self-play game."""

    # Timing
    delay_ms: int = DEFAULT_DELAY_MS

    # Policy
    center_probability: float = DEFAULT_CENTER_PROBABILITY
    seed: int | None = None

    # Board
    start_fen: str = STARTING_FEN

    def __post_init__(self) -> None:
        validate_delay(self.delay_ms)
        if not 0.0 <= self.center_probability <= 1.0:
            raise ValueError(
                f"center_probability must be within [0, 1], got {self.center_probability!r}"
            )
        position_from_fen(self.start_fen)
