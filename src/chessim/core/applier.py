"""Move application producing the successor position and a history record."""

from __future__ import annotations

from dataclasses import dataclass

from chessim.core.enums import Color, MoveStatus
from chessim.core.move import Move
from chessim.core.move_generator import MoveGenerator
from chessim.core.notation.fen import position_to_fen
from chessim.core.notation.san import move_to_san
from chessim.core.piece import Piece
from chessim.core.position import Position
from chessim.core.rules import Rules


class IllegalMoveError(ValueError):
    """Raised when a move is not in the legal set of the position it targets."""

    def __init__(self, move: Move, fen: str) -> None:
        super().__init__(f"Illegal move {move} in position {fen!r}")
        self.move = move
        self.fen = fen


@dataclass(frozen=True, slots=True)
class MoveRecord:
    """A single entry in the move history."""

    move: Move
    piece: Piece
    captured: Piece | None
    side_to_move: Color
    status: MoveStatus
    san: str
    fen_after: str

    @property
    def mover(self) -> Color:
        return self.piece.color

    @property
    def is_capture(self) -> bool:
        return self.captured is not None


def apply_move(position: Position, move: Move) -> tuple[Position, MoveRecord]:
    """Play a legal *move* and describe it.

    Raises:
        IllegalMoveError: *move* is not legal in *position*.

    The record's ``status`` knows nothing about repetition; the owner of the
    game history upgrades it when a threefold repetition occurs.
    """
    legal = MoveGenerator(position).generate_legal_moves()
    if move not in legal:
        raise IllegalMoveError(move, position_to_fen(position))

    piece = position.board[move.from_sq]
    assert piece is not None
    captured = position.captured_piece(move)
    san = move_to_san(position, move, legal)

    after = position.play(move)
    status, _ = Rules.terminal_status(after)

    record = MoveRecord(
        move=move,
        piece=piece,
        captured=captured,
        side_to_move=after.side_to_move,
        status=status,
        san=san,
        fen_after=position_to_fen(after),
    )
    return after, record
