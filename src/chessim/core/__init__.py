"""Core domain layer — pure chess rules with zero external dependencies.

Quick start::

    from chessim.core import Position, apply_move, legal_moves

    pos = Position.initial()
    move = legal_moves(pos)[0]
    pos, record = apply_move(pos, move)
    print(record.san, record.fen_after)
"""

from chessim.core.applier import IllegalMoveError, MoveRecord, apply_move
from chessim.core.board import Board
from chessim.core.enums import (
    CastlingRights,
    Color,
    GameEndReason,
    GameResult,
    MoveFlag,
    MoveStatus,
    PieceType,
)
from chessim.core.move import Move
from chessim.core.move_generator import MoveGenerator, is_square_attacked, legal_moves
from chessim.core.notation import (
    STARTING_FEN,
    move_to_san,
    parse_san,
    play_line,
    position_from_fen,
    position_to_fen,
)
from chessim.core.piece import Piece
from chessim.core.position import Position
from chessim.core.rules import Rules
from chessim.core.types import (
    CENTER_SQUARES,
    Square,
    file_of,
    make_square,
    parse_square,
    rank_of,
    square_name,
)

__all__ = [
    # Enums / flags
    "CastlingRights",
    "Color",
    "GameEndReason",
    "GameResult",
    "MoveFlag",
    "MoveStatus",
    "PieceType",
    # Types / helpers
    "CENTER_SQUARES",
    "Square",
    "file_of",
    "make_square",
    "parse_square",
    "rank_of",
    "square_name",
    # Domain objects
    "Board",
    "IllegalMoveError",
    "Move",
    "MoveGenerator",
    "MoveRecord",
    "Piece",
    "Position",
    "Rules",
    "apply_move",
    "is_square_attacked",
    "legal_moves",
    # Notation
    "STARTING_FEN",
    "move_to_san",
    "parse_san",
    "play_line",
    "position_from_fen",
    "position_to_fen",
]
