"""SAN (Standard Algebraic Notation) conversion and parsing."""

from __future__ import annotations

from chessim.core.enums import MoveFlag, PieceType
from chessim.core.move import Move
from chessim.core.move_generator import MoveGenerator
from chessim.core.position import Position
from chessim.core.types import file_of, parse_square, rank_of, square_name

_SAN_PIECE: dict[PieceType, str] = {
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}
_SAN_PIECE_REV: dict[str, PieceType] = {v: k for k, v in _SAN_PIECE.items()}


def _disambiguation(position: Position, move: Move, legal: list[Move]) -> str:
    board = position.board
    piece = board[move.from_sq]
    assert piece is not None
    rivals = [
        m.from_sq
        for m in legal
        if m.to_sq == move.to_sq
        and m.from_sq != move.from_sq
        and board[m.from_sq] == piece
    ]
    if not rivals:
        return ""
    if all(file_of(sq) != file_of(move.from_sq) for sq in rivals):
        return chr(ord("a") + file_of(move.from_sq))
    if all(rank_of(sq) != rank_of(move.from_sq) for sq in rivals):
        return str(rank_of(move.from_sq) + 1)
    return square_name(move.from_sq)


def move_to_san(
    position: Position,
    move: Move,
    legal: list[Move] | None = None,
) -> str:
    """Convert a legal *move* to SAN given the *position* before the move."""
    piece = position.board[move.from_sq]
    assert piece is not None

    if move.flag == MoveFlag.CASTLE_KINGSIDE:
        san = "O-O"
    elif move.flag == MoveFlag.CASTLE_QUEENSIDE:
        san = "O-O-O"
    else:
        is_capture = position.captured_piece(move) is not None
        if piece.piece_type == PieceType.PAWN:
            san = chr(ord("a") + file_of(move.from_sq)) if is_capture else ""
        else:
            if legal is None:
                legal = MoveGenerator(position).generate_legal_moves()
            san = _SAN_PIECE[piece.piece_type] + _disambiguation(position, move, legal)
        if is_capture:
            san += "x"
        san += square_name(move.to_sq)
        if move.promotion is not None:
            san += "=" + _SAN_PIECE[move.promotion]

    after = position.play(move)
    if after.is_in_check():
        san += "+" if MoveGenerator(after).generate_legal_moves() else "#"
    return san


def parse_san(position: Position, san: str) -> Move:
    """Parse a SAN string into a :class:`Move` given the current *position*."""
    legal = MoveGenerator(position).generate_legal_moves()
    clean = san.rstrip("+#!?")

    if clean in ("O-O", "0-0", "O-O-O", "0-0-0"):
        flag = MoveFlag.CASTLE_KINGSIDE if len(clean) == 3 else MoveFlag.CASTLE_QUEENSIDE
        for m in legal:
            if m.flag == flag:
                return m
        raise ValueError(f"Illegal move: {san}")

    promotion: PieceType | None = None
    if "=" in clean:
        promotion = _SAN_PIECE_REV.get(clean[-1])
        if promotion is None:
            raise ValueError(f"Invalid promotion in SAN: {san!r}")
        clean = clean[:-2]

    try:
        to_sq = parse_square(clean[-2:])
    except ValueError:
        raise ValueError(f"Invalid SAN: {san!r}") from None
    clean = clean[:-2].removesuffix("x")

    piece_type = PieceType.PAWN
    if clean and clean[0] in _SAN_PIECE_REV:
        piece_type = _SAN_PIECE_REV[clean[0]]
        clean = clean[1:]

    from_file: int | None = None
    from_rank: int | None = None
    for ch in clean:
        if ch.isalpha():
            from_file = ord(ch) - ord("a")
        else:
            from_rank = int(ch) - 1

    candidates: list[Move] = []
    for m in legal:
        p = position.board[m.from_sq]
        if p is None or p.piece_type != piece_type or m.to_sq != to_sq:
            continue
        if m.promotion != promotion:
            continue
        if from_file is not None and file_of(m.from_sq) != from_file:
            continue
        if from_rank is not None and rank_of(m.from_sq) != from_rank:
            continue
        candidates.append(m)

    if len(candidates) == 1:
        return candidates[0]
    if not candidates:
        raise ValueError(f"Illegal move: {san}")
    raise ValueError(f"Ambiguous move: {san} -> {candidates}")


def play_line(position: Position, sans: str) -> Position:
    """Play a space-separated SAN line such as ``"e4 e5 Qh5"``.

    Move numbers like ``1.`` are skipped.
    """
    for token in sans.split():
        token = token.split(".")[-1]
        if not token:
            continue
        position = position.play(parse_san(position, token))
    return position
