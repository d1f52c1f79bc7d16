"""Move selection policies.

A policy sees the legal moves of a position and returns one of them. It does
not search or evaluate.
"""

from __future__ import annotations

import random
from collections.abc import Collection
from typing import TYPE_CHECKING, Protocol

from chessim.core.types import CENTER_SQUARES

if TYPE_CHECKING:
    from chessim.core.move import Move
    from chessim.core.position import Position

DEFAULT_CENTER_PROBABILITY = 0.3


class MovePolicy(Protocol):
    """Protocol for move choosers used by the game controller."""

    def choose(self, moves: Collection[Move], position: Position) -> Move: ...


def _require_moves(moves: Collection[Move]) -> list[Move]:
    candidates = list(moves)
    if not candidates:
        raise ValueError("Cannot choose from an empty move set")
    return candidates


class RandomPolicy:
    """Picks any legal move with equal probability."""

    __slots__ = ("_rng",)

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng if rng is not None else random.Random()

    def choose(self, moves: Collection[Move], position: Position) -> Move:
        return self._rng.choice(_require_moves(moves))


class GreedyPolicy:
    """Capture first, sometimes aim for the centre, otherwise play anything.

    Tiers, each tie broken uniformly at random:

    1. any capturing move (en passant included);
    2. with probability *center_probability*, a move landing on d4/e4/d5/e5
       (the coin is only tossed when such a move exists);
    3. any legal move.

    Args:
        rng: Randomness source; pass a seeded ``random.Random`` for
            reproducible games.
        center_probability: Chance of preferring a centre move in tier 2.
    """

    __slots__ = ("_rng", "_center_probability")

    def __init__(
        self,
        rng: random.Random | None = None,
        center_probability: float = DEFAULT_CENTER_PROBABILITY,
    ) -> None:
        if not 0.0 <= center_probability <= 1.0:
            raise ValueError(
                f"center_probability must be within [0, 1], got {center_probability!r}"
            )
        self._rng = rng if rng is not None else random.Random()
        self._center_probability = center_probability

    @property
    def center_probability(self) -> float:
        return self._center_probability

    def choose(self, moves: Collection[Move], position: Position) -> Move:
        candidates = _require_moves(moves)

        captures = [m for m in candidates if position.captured_piece(m) is not None]
        if captures:
            return self._rng.choice(captures)

        central = [m for m in candidates if m.to_sq in CENTER_SQUARES]
        if central and self._rng.random() < self._center_probability:
            return self._rng.choice(central)

        return self._rng.choice(candidates)
