"""Move value object; str() gives long algebraic text such as e7e8q."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from chessim.core.enums import MoveFlag, PieceType
from chessim.core.types import Square, square_name

CastleSide = Literal["kingside", "queenside"]

_PROMO_CHARS: dict[PieceType, str] = {
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
}


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable value object representing a single chess move.

    A move only has meaning relative to the position it was generated from.
    """

    from_sq: Square
    to_sq: Square
    flag: MoveFlag = MoveFlag.NORMAL
    promotion: PieceType | None = None

    # ── Classification ───────────────────────────────────────────────────

    @property
    def is_castle(self) -> bool:
        return self.flag in (MoveFlag.CASTLE_KINGSIDE, MoveFlag.CASTLE_QUEENSIDE)

    @property
    def castle_side(self) -> CastleSide | None:
        if self.flag == MoveFlag.CASTLE_KINGSIDE:
            return "kingside"
        if self.flag == MoveFlag.CASTLE_QUEENSIDE:
            return "queenside"
        return None

    @property
    def is_en_passant(self) -> bool:
        return self.flag == MoveFlag.EN_PASSANT

    # ── Display ──────────────────────────────────────────────────────────

    def __str__(self) -> str:
        base = f"{square_name(self.from_sq)}{square_name(self.to_sq)}"
        if self.promotion is not None:
            base += _PROMO_CHARS.get(self.promotion, "")
        return base
