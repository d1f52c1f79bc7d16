"""High-level chess rules: checkmate, stalemate, draw detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chessim.core.enums import Color, GameEndReason, GameResult, MoveStatus, PieceType
from chessim.core.move_generator import MoveGenerator
from chessim.core.types import is_light

if TYPE_CHECKING:
    from chessim.core.move import Move
    from chessim.core.position import Position

FIFTY_MOVE_HALFMOVES = 100
REPETITION_LIMIT = 3


class Rules:
    """Static rule-checker that operates on a :class:`Position`.

    Every draw condition ends the game immediately; nothing is left for a
    player to claim. Repetition needs the game's history, so callers pass in
    how many times the current position has occurred.
    """

    @staticmethod
    def is_in_check(position: Position) -> bool:
        return position.is_in_check()

    @staticmethod
    def is_checkmate(position: Position) -> bool:
        if not position.is_in_check():
            return False
        return not MoveGenerator(position).generate_legal_moves()

    @staticmethod
    def is_stalemate(position: Position) -> bool:
        if position.is_in_check():
            return False
        return not MoveGenerator(position).generate_legal_moves()

    @staticmethod
    def is_insufficient_material(position: Position) -> bool:
        """K vs K, K+B vs K, K+N vs K, K+B vs K+B (same-color bishops)."""
        board = position.board
        total = board.occupied_count()

        if total == 2:
            return True

        if total == 3:
            return any(
                board.has_piece(color, kind)
                for color in Color
                for kind in (PieceType.KNIGHT, PieceType.BISHOP)
            )

        if total == 4:
            white_bishops = board.pieces(Color.WHITE, PieceType.BISHOP)
            black_bishops = board.pieces(Color.BLACK, PieceType.BISHOP)
            if len(white_bishops) == 1 and len(black_bishops) == 1:
                return is_light(white_bishops[0]) == is_light(black_bishops[0])

        return False

    @staticmethod
    def is_fifty_move_rule(position: Position) -> bool:
        return position.halfmove_clock >= FIFTY_MOVE_HALFMOVES

    @staticmethod
    def is_threefold_repetition(repetitions: int) -> bool:
        return repetitions >= REPETITION_LIMIT

    @staticmethod
    def draw_reason(position: Position, repetitions: int = 1) -> GameEndReason | None:
        """The draw rule that applies to *position*, if any."""
        if Rules.is_insufficient_material(position):
            return GameEndReason.INSUFFICIENT_MATERIAL
        if Rules.is_threefold_repetition(repetitions):
            return GameEndReason.THREEFOLD_REPETITION
        if Rules.is_fifty_move_rule(position):
            return GameEndReason.FIFTY_MOVE_RULE
        return None

    @staticmethod
    def terminal_status(
        position: Position,
        repetitions: int = 1,
        legal_moves: list[Move] | None = None,
    ) -> tuple[MoveStatus, GameEndReason | None]:
        """Classify *position* for the side to move.

        Mate and stalemate take precedence over the draw rules.
        """
        if legal_moves is None:
            legal_moves = MoveGenerator(position).generate_legal_moves()
        in_check = position.is_in_check()

        if not legal_moves:
            if in_check:
                return MoveStatus.CHECKMATE, GameEndReason.CHECKMATE
            return MoveStatus.STALEMATE, GameEndReason.STALEMATE

        reason = Rules.draw_reason(position, repetitions)
        if reason is not None:
            return MoveStatus.DRAW, reason
        return (MoveStatus.CHECK if in_check else MoveStatus.NONE), None

    @staticmethod
    def game_result(position: Position, repetitions: int = 1) -> GameResult:
        """Determine the current game result."""
        status, _ = Rules.terminal_status(position, repetitions)
        if status == MoveStatus.CHECKMATE:
            return (
                GameResult.BLACK_WINS
                if position.side_to_move == Color.WHITE
                else GameResult.WHITE_WINS
            )
        if status in (MoveStatus.STALEMATE, MoveStatus.DRAW):
            return GameResult.DRAW
        return GameResult.IN_PROGRESS
