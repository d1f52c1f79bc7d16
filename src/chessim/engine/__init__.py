"""Move policies that drive both sides of a self-play game."""

from chessim.engine.policy import (
    DEFAULT_CENTER_PROBABILITY,
    GreedyPolicy,
    MovePolicy,
    RandomPolicy,
)

__all__ = [
    "DEFAULT_CENTER_PROBABILITY",
    "GreedyPolicy",
    "MovePolicy",
    "RandomPolicy",
]
