"""Piece value object and its one-character spellings."""

from __future__ import annotations

from dataclasses import dataclass

from chessim.core.enums import Color, PieceType

# Indexed by PieceType - 1; white is the upper-case letter.
_LETTERS = "pnbrqk"

# White glyphs then black glyphs, same order as _LETTERS.
_GLYPHS = ("♙♘♗♖♕♔", "♟♞♝♜♛♚")


@dataclass(frozen=True, slots=True)
class Piece:
    color: Color
    piece_type: PieceType

    def __str__(self) -> str:
        letter = _LETTERS[self.piece_type - 1]
        return letter.upper() if self.color == Color.WHITE else letter

    @classmethod
    def from_char(cls, char: str) -> Piece:
        """'N' is a white knight, 'n' a black one."""
        index = _LETTERS.find(char.lower()) if len(char) == 1 else -1
        if index < 0:
            raise ValueError(f"Invalid piece character: {char!r}")
        color = Color.WHITE if char.isupper() else Color.BLACK
        return cls(color, PieceType(index + 1))

    @property
    def symbol(self) -> str:
        return _GLYPHS[self.color][self.piece_type - 1]
