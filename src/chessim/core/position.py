"""Position — immutable game state (placement + metadata) and move application."""

from __future__ import annotations

from collections.abc import Hashable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from chessim.core.board import Board
from chessim.core.enums import CastlingRights, Color, MoveFlag, PieceType
from chessim.core.move_generator import MoveGenerator, is_square_attacked
from chessim.core.piece import Piece
from chessim.core.types import Square, file_of, make_square, rank_of, square_name

if TYPE_CHECKING:
    from chessim.core.move import CastleSide, Move

# Corner square -> castling right lost when anything moves from or to it.
_ROOK_CORNERS: dict[Square, CastlingRights] = {
    make_square(0, 0): CastlingRights.WHITE_QUEENSIDE,
    make_square(7, 0): CastlingRights.WHITE_KINGSIDE,
    make_square(0, 7): CastlingRights.BLACK_QUEENSIDE,
    make_square(7, 7): CastlingRights.BLACK_KINGSIDE,
}

# Rook's (from, to) files when castling on that side.
_ROOK_FILES: dict[CastleSide, tuple[int, int]] = {"kingside": (7, 5), "queenside": (0, 3)}

_KING_RIGHTS: dict[Color, CastlingRights] = {
    Color.WHITE: CastlingRights.WHITE_BOTH,
    Color.BLACK: CastlingRights.BLACK_BOTH,
}


@dataclass(frozen=True, slots=True)
class Position:
    """Full chess position: board + side to move + castling + en passant + clocks.

    Positions are values. :meth:`play` returns the successor and leaves the
    receiver untouched, so every position kept in a game history stays valid.
    """

    board: Board = field(default_factory=Board.initial)
    side_to_move: Color = Color.WHITE
    castling: CastlingRights = CastlingRights.ALL
    en_passant: Square | None = None
    halfmove_clock: int = 0
    fullmove_number: int = 1

    @classmethod
    def initial(cls) -> Position:
        """Standard starting position."""
        return cls()

    # ── Queries ──────────────────────────────────────────────────────────

    def piece_at(self, sq: Square) -> Piece | None:
        return self.board[sq]

    def king_square(self, color: Color) -> Square:
        return self.board.king_square(color)

    def is_square_attacked(self, sq: Square, by_color: Color) -> bool:
        """Is *sq* attacked by any piece of *by_color*?"""
        return is_square_attacked(self.board, sq, by_color)

    def is_in_check(self, color: Color | None = None) -> bool:
        """Is *color*'s king attacked (defaults to the side to move)?"""
        color = self.side_to_move if color is None else color
        return self.is_square_attacked(self.king_square(color), color.opposite)

    def legal_moves(self) -> list[Move]:
        return MoveGenerator(self).generate_legal_moves()

    def captured_piece(self, move: Move) -> Piece | None:
        """The piece *move* would remove from the board, if any."""
        if move.flag == MoveFlag.EN_PASSANT:
            return self.board[make_square(file_of(move.to_sq), rank_of(move.from_sq))]
        return self.board[move.to_sq]

    def repetition_key(self) -> Hashable:
        """Identity used for repetition: placement, side, castling, ep target."""
        return (
            self.board.placement(),
            self.side_to_move,
            int(self.castling),
            self.en_passant,
        )

    # ── Move application ─────────────────────────────────────────────────

    def play(self, move: Move) -> Position:
        """Return the position after *move*. Legality is not checked here."""
        piece = self.board[move.from_sq]
        if piece is None:
            raise ValueError(f"No piece on {square_name(move.from_sq)}")

        capture_sq = move.to_sq
        if move.flag == MoveFlag.EN_PASSANT:
            # The captured pawn sits beside the mover, not on the target.
            capture_sq = make_square(file_of(move.to_sq), rank_of(move.from_sq))
        captured = self.board[capture_sq]

        placed = piece
        if move.flag == MoveFlag.PROMOTION and move.promotion is not None:
            placed = Piece(piece.color, move.promotion)

        changes: dict[Square, Piece | None] = {move.from_sq: None, capture_sq: None}
        changes[move.to_sq] = placed

        side = move.castle_side
        if side is not None:
            rank = rank_of(move.from_sq)
            from_file, to_file = _ROOK_FILES[side]
            rook_from, rook_to = make_square(from_file, rank), make_square(to_file, rank)
            changes[rook_from] = None
            changes[rook_to] = self.board[rook_from]

        board = self.board.with_changes(changes)

        en_passant: Square | None = None
        if move.flag == MoveFlag.DOUBLE_PAWN:
            en_passant = make_square(
                file_of(move.from_sq),
                (rank_of(move.from_sq) + rank_of(move.to_sq)) // 2,
            )

        castling = self.castling
        if piece.piece_type == PieceType.KING:
            castling &= ~_KING_RIGHTS[piece.color]
        for sq in (move.from_sq, move.to_sq):
            if sq in _ROOK_CORNERS:
                castling &= ~_ROOK_CORNERS[sq]

        if piece.piece_type == PieceType.PAWN or captured is not None:
            halfmove_clock = 0
        else:
            halfmove_clock = self.halfmove_clock + 1

        fullmove_number = self.fullmove_number
        if self.side_to_move == Color.BLACK:
            fullmove_number += 1

        return Position(
            board=board,
            side_to_move=self.side_to_move.opposite,
            castling=castling,
            en_passant=en_passant,
            halfmove_clock=halfmove_clock,
            fullmove_number=fullmove_number,
        )

    def __repr__(self) -> str:
        ep = square_name(self.en_passant) if self.en_passant is not None else "-"
        return (
            f"Position(side={self.side_to_move}, castling={int(self.castling)}, "
            f"ep={ep}, halfmove={self.halfmove_clock}, "
            f"fullmove={self.fullmove_number})\n{self.board!r}"
        )
