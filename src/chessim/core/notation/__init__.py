"""Notation package: FEN / SAN parsing and serialization."""

from chessim.core.notation.fen import STARTING_FEN, position_from_fen, position_to_fen
from chessim.core.notation.san import move_to_san, parse_san, play_line

__all__ = [
    "STARTING_FEN",
    "position_from_fen",
    "position_to_fen",
    "move_to_san",
    "parse_san",
    "play_line",
]
