"""Board — immutable piece placement on an 8x8 board."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

from chessim.core.enums import Color, PieceType
from chessim.core.piece import Piece
from chessim.core.types import Square, make_square

_EMPTY: tuple[Piece | None, ...] = (None,) * 64

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


def _slot(color: Color, piece_type: PieceType) -> int:
    # Bitboard index: six piece kinds per colour.
    return int(color) * 6 + int(piece_type) - 1


class Board:
    """A fixed 64-square placement.

    The squares and the bitboard indexes derived from them are computed once,
    in the constructor. Successor boards come from :meth:`with_changes`; there
    is no way to edit a board in place.
    """

    __slots__ = ("_squares", "_bitboards", "_kings")

    def __init__(self, squares: Iterable[Piece | None] = _EMPTY) -> None:
        cells = tuple(squares)
        if len(cells) != 64:
            raise ValueError(f"A board needs 64 squares, got {len(cells)}")

        bitboards = [0] * 12
        kings: list[Square | None] = [None, None]
        for sq, piece in enumerate(cells):
            if piece is None:
                continue
            bitboards[_slot(piece.color, piece.piece_type)] |= 1 << sq
            if piece.piece_type == PieceType.KING:
                kings[piece.color] = sq

        self._squares = cells
        self._bitboards = tuple(bitboards)
        self._kings = tuple(kings)

    @classmethod
    def initial(cls) -> Board:
        """Standard starting placement."""
        cells: list[Piece | None] = list(_EMPTY)
        for file, kind in enumerate(_BACK_RANK):
            cells[make_square(file, 0)] = Piece(Color.WHITE, kind)
            cells[make_square(file, 1)] = Piece(Color.WHITE, PieceType.PAWN)
            cells[make_square(file, 6)] = Piece(Color.BLACK, PieceType.PAWN)
            cells[make_square(file, 7)] = Piece(Color.BLACK, kind)
        return cls(cells)

    def with_changes(self, changes: Mapping[Square, Piece | None]) -> Board:
        """A new board equal to this one except on the squares in *changes*."""
        cells = list(self._squares)
        for sq, piece in changes.items():
            cells[sq] = piece
        return Board(cells)

    # ── Queries ──────────────────────────────────────────────────────────

    def __getitem__(self, sq: Square) -> Piece | None:
        return self._squares[sq]

    def __iter__(self) -> Iterator[Piece | None]:
        return iter(self._squares)

    def occupied(self) -> Iterator[tuple[Square, Piece]]:
        """(square, piece) pairs of every occupied square, a1 first."""
        for sq, piece in enumerate(self._squares):
            if piece is not None:
                yield sq, piece

    def is_empty(self, sq: Square) -> bool:
        return self._squares[sq] is None

    def pieces_bitboard(self, color: Color, piece_type: PieceType) -> int:
        return self._bitboards[_slot(color, piece_type)]

    def pieces(self, color: Color, piece_type: PieceType) -> list[Square]:
        """Squares holding *color*'s *piece_type*, ascending."""
        bitboard = self.pieces_bitboard(color, piece_type)
        found: list[Square] = []
        while bitboard:
            low = bitboard & -bitboard
            found.append(low.bit_length() - 1)
            bitboard ^= low
        return found

    def has_piece(self, color: Color, piece_type: PieceType) -> bool:
        return bool(self.pieces_bitboard(color, piece_type))

    def occupied_count(self) -> int:
        return sum(bb.bit_count() for bb in self._bitboards)

    def king_square(self, color: Color) -> Square:
        sq = self._kings[color]
        if sq is None:
            raise ValueError(f"No {color.name} king on board")
        return sq

    def placement(self) -> tuple[Piece | None, ...]:
        """The 64 squares as a hashable tuple."""
        return self._squares

    # ── Value semantics ──────────────────────────────────────────────────

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self._squares == other._squares

    def __hash__(self) -> int:
        return hash(self._squares)

    def __repr__(self) -> str:
        lines = []
        for rank in range(7, -1, -1):
            row = self._squares[rank * 8 : rank * 8 + 8]
            cells = " ".join(str(p) if p is not None else "." for p in row)
            lines.append(f"{rank + 1} {cells}")
        lines.append("  a b c d e f g h")
        return "\n".join(lines)
