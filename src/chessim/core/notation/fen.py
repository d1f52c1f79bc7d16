"""FEN parsing and serialization."""

from __future__ import annotations

from chessim.core.board import Board
from chessim.core.enums import CastlingRights, Color, PieceType
from chessim.core.piece import Piece
from chessim.core.position import Position
from chessim.core.types import Square, make_square, parse_square, rank_of, square_name

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_CASTLING_CHARS: tuple[tuple[str, CastlingRights], ...] = (
    ("K", CastlingRights.WHITE_KINGSIDE),
    ("Q", CastlingRights.WHITE_QUEENSIDE),
    ("k", CastlingRights.BLACK_KINGSIDE),
    ("q", CastlingRights.BLACK_QUEENSIDE),
)


def _parse_placement(placement: str, fen: str) -> Board:
    ranks = placement.split("/")
    if len(ranks) != 8:
        raise ValueError(f"Invalid FEN board (must contain 8 ranks): {fen!r}")
    cells: list[Piece | None] = [None] * 64
    for rank_idx, rank_text in enumerate(ranks):
        rank = 7 - rank_idx
        file = 0
        for ch in rank_text:
            if ch.isdigit():
                step = int(ch)
                if not (1 <= step <= 8):
                    raise ValueError(f"Invalid FEN digit {ch!r}: {fen!r}")
                file += step
            else:
                if file >= 8:
                    raise ValueError(f"Invalid FEN rank width: {fen!r}")
                piece = Piece.from_char(ch)
                if piece.piece_type == PieceType.PAWN and rank in (0, 7):
                    raise ValueError(f"Pawn on rank {rank + 1}: {fen!r}")
                cells[make_square(file, rank)] = piece
                file += 1
            if file > 8:
                raise ValueError(f"Invalid FEN rank width: {fen!r}")
        if file != 8:
            raise ValueError(f"Invalid FEN rank width: {fen!r}")

    board = Board(cells)
    for color in Color:
        if len(board.pieces(color, PieceType.KING)) != 1:
            raise ValueError(f"FEN must have exactly one {color} king: {fen!r}")
    return board


def _check_en_passant(board: Board, side: Color, ep: Square, text: str) -> None:
    """The target must be the empty square a pawn of the other side just skipped."""
    # White to move: Black pushed from rank 7 over rank 6 to rank 5.
    step = -8 if side == Color.WHITE else 8
    if rank_of(ep) != (5 if side == Color.WHITE else 2):
        raise ValueError(f"Invalid FEN en-passant square for side-to-move: {text!r}")
    pushed = board[ep + step]
    if (
        not board.is_empty(ep)
        or not board.is_empty(ep - step)
        or pushed != Piece(side.opposite, PieceType.PAWN)
    ):
        raise ValueError(f"Invalid FEN en-passant square, no pawn just passed it: {text!r}")


def position_from_fen(fen: str) -> Position:
    """Parse a FEN string into a :class:`Position`."""
    parts = fen.split()
    if not (4 <= len(parts) <= 6):
        raise ValueError(f"Invalid FEN (need 4-6 fields): {fen!r}")

    placement, side_part, castling_part, ep_part = parts[:4]
    board = _parse_placement(placement, fen)

    if side_part == "w":
        side = Color.WHITE
    elif side_part == "b":
        side = Color.BLACK
    else:
        raise ValueError(f"Invalid FEN side-to-move field: {side_part!r}")

    castling = CastlingRights.NONE
    if castling_part != "-":
        rights = dict(_CASTLING_CHARS)
        seen: set[str] = set()
        for ch in castling_part:
            right = rights.get(ch)
            if right is None or ch in seen:
                raise ValueError(f"Invalid FEN castling field: {castling_part!r}")
            seen.add(ch)
            castling |= right

    ep: Square | None = None
    if ep_part != "-":
        ep = parse_square(ep_part)
        _check_en_passant(board, side, ep, ep_part)

    halfmove = int(parts[4]) if len(parts) > 4 else 0
    if halfmove < 0:
        raise ValueError(f"Invalid FEN halfmove clock: {parts[4]!r}")
    fullmove = int(parts[5]) if len(parts) > 5 else 1
    if fullmove < 1:
        raise ValueError(f"Invalid FEN fullmove number: {parts[5]!r}")

    position = Position(board, side, castling, ep, halfmove, fullmove)
    if position.is_in_check(side.opposite):
        raise ValueError(f"Side not to move is in check: {fen!r}")
    return position


def placement_to_fen(board: Board) -> str:
    """Serialise only the piece-placement field."""
    rows: list[str] = []
    for rank in range(7, -1, -1):
        empty = 0
        row = ""
        for file in range(8):
            piece = board[make_square(file, rank)]
            if piece is None:
                empty += 1
                continue
            if empty:
                row += str(empty)
                empty = 0
            row += str(piece)
        if empty:
            row += str(empty)
        rows.append(row)
    return "/".join(rows)


def position_to_fen(pos: Position) -> str:
    """Serialise a :class:`Position` to FEN."""
    side_str = "w" if pos.side_to_move == Color.WHITE else "b"
    castling_str = "".join(ch for ch, right in _CASTLING_CHARS if pos.castling & right)
    ep_str = square_name(pos.en_passant) if pos.en_passant is not None else "-"
    return (
        f"{placement_to_fen(pos.board)} {side_str} {castling_str or '-'} {ep_str} "
        f"{pos.halfmove_clock} {pos.fullmove_number}"
    )
