"""Legal and pseudo-legal move generation + attack detection."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chessim.core.enums import CastlingRights, Color, MoveFlag, PieceType
from chessim.core.move import Move
from chessim.core.types import Square, make_square

if TYPE_CHECKING:
    from chessim.core.board import Board
    from chessim.core.position import Position


KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS

PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)


# -- Precomputed lookup tables ---------------------------------------------


def _build_targets(
    offsets: tuple[tuple[int, int], ...],
) -> tuple[tuple[Square, ...], ...]:
    targets: list[tuple[Square, ...]] = []
    for sq in range(64):
        file_idx = sq & 7
        rank_idx = sq >> 3
        moves: list[Square] = []
        for df, dr in offsets:
            af = file_idx + df
            ar = rank_idx + dr
            if 0 <= af < 8 and 0 <= ar < 8:
                moves.append(make_square(af, ar))
        targets.append(tuple(moves))
    return tuple(targets)


def _build_attack_masks(targets: tuple[tuple[Square, ...], ...]) -> tuple[int, ...]:
    masks: list[int] = [0] * 64
    for sq in range(64):
        for to_sq in targets[sq]:
            masks[sq] |= 1 << to_sq
    return tuple(masks)


def _build_pawn_attacker_masks(color: Color) -> tuple[int, ...]:
    """[sq] -> squares from which a *color* pawn would attack *sq*."""
    # A white pawn attacks upwards, so its attackers sit one rank below.
    back = -1 if color == Color.WHITE else 1
    masks: list[int] = [0] * 64
    for sq in range(64):
        file_idx = sq & 7
        rank_idx = (sq >> 3) + back
        if not 0 <= rank_idx < 8:
            continue
        for af in (file_idx - 1, file_idx + 1):
            if 0 <= af < 8:
                masks[sq] |= 1 << make_square(af, rank_idx)
    return tuple(masks)


def _build_rays(
    directions: tuple[tuple[int, int], ...],
) -> tuple[tuple[tuple[Square, ...], ...], ...]:
    rays_per_square: list[tuple[tuple[Square, ...], ...]] = []
    for sq in range(64):
        file_idx = sq & 7
        rank_idx = sq >> 3
        square_rays: list[tuple[Square, ...]] = []
        for df, dr in directions:
            af = file_idx + df
            ar = rank_idx + dr
            ray: list[Square] = []
            while 0 <= af < 8 and 0 <= ar < 8:
                ray.append(make_square(af, ar))
                af += df
                ar += dr
            square_rays.append(tuple(ray))
        rays_per_square.append(tuple(square_rays))
    return tuple(rays_per_square)


_KNIGHT_TARGETS = _build_targets(KNIGHT_OFFSETS)
_KING_TARGETS = _build_targets(KING_OFFSETS)
_KNIGHT_ATTACK_MASKS = _build_attack_masks(_KNIGHT_TARGETS)
_KING_ATTACK_MASKS = _build_attack_masks(_KING_TARGETS)
_PAWN_ATTACKER_MASKS = (
    _build_pawn_attacker_masks(Color.WHITE),
    _build_pawn_attacker_masks(Color.BLACK),
)

_BISHOP_RAYS = _build_rays(BISHOP_DIRS)
_ROOK_RAYS = _build_rays(ROOK_DIRS)
_QUEEN_RAYS = _build_rays(QUEEN_DIRS)

_DIAGONAL_SLIDERS = (PieceType.BISHOP, PieceType.QUEEN)
_STRAIGHT_SLIDERS = (PieceType.ROOK, PieceType.QUEEN)


# Per color: (push direction, start rank, promotion-from rank)
_PAWN_GEOMETRY: dict[Color, tuple[int, int, int]] = {
    Color.WHITE: (8, 1, 6),
    Color.BLACK: (-8, 6, 1),
}

# (right, flag, king target, squares that must be empty,
#  squares the king crosses or lands on, rook corner)
_CastlingPath = tuple[
    CastlingRights, MoveFlag, Square, tuple[Square, ...], tuple[Square, ...], Square
]


def _build_castling_paths(color: Color) -> tuple[_CastlingPath, ...]:
    if color == Color.WHITE:
        base, ks, qs = 0, CastlingRights.WHITE_KINGSIDE, CastlingRights.WHITE_QUEENSIDE
    else:
        base, ks, qs = 56, CastlingRights.BLACK_KINGSIDE, CastlingRights.BLACK_QUEENSIDE
    return (
        (
            ks,
            MoveFlag.CASTLE_KINGSIDE,
            base + 6,
            (base + 5, base + 6),
            (base + 5, base + 6),
            base + 7,
        ),
        (
            qs,
            MoveFlag.CASTLE_QUEENSIDE,
            base + 2,
            (base + 1, base + 2, base + 3),
            (base + 3, base + 2),
            base,
        ),
    )


_CASTLING_PATHS: dict[Color, tuple[_CastlingPath, ...]] = {
    color: _build_castling_paths(color) for color in Color
}
_KING_HOME: dict[Color, Square] = {Color.WHITE: 4, Color.BLACK: 60}


def _ray_hits(
    board: Board,
    rays: tuple[tuple[Square, ...], ...],
    by_color: Color,
    kinds: tuple[PieceType, ...],
) -> bool:
    for ray in rays:
        for to_sq in ray:
            piece = board[to_sq]
            if piece is None:
                continue
            if piece.color == by_color and piece.piece_type in kinds:
                return True
            break
    return False


def is_square_attacked(board: Board, sq: Square, by_color: Color) -> bool:
    """Is *sq* attacked by any piece of *by_color* on *board*?"""
    if (
        board.pieces_bitboard(by_color, PieceType.PAWN)
        & _PAWN_ATTACKER_MASKS[int(by_color)][sq]
    ):
        return True

    if board.pieces_bitboard(by_color, PieceType.KNIGHT) & _KNIGHT_ATTACK_MASKS[sq]:
        return True

    if board.pieces_bitboard(by_color, PieceType.KING) & _KING_ATTACK_MASKS[sq]:
        return True

    has_queen = board.has_piece(by_color, PieceType.QUEEN)
    if (has_queen or board.has_piece(by_color, PieceType.BISHOP)) and _ray_hits(
        board, _BISHOP_RAYS[sq], by_color, _DIAGONAL_SLIDERS
    ):
        return True

    return (has_queen or board.has_piece(by_color, PieceType.ROOK)) and _ray_hits(
        board, _ROOK_RAYS[sq], by_color, _STRAIGHT_SLIDERS
    )


class MoveGenerator:
    """Generates legal moves for a given :class:`Position`.

    Legality is checked by playing each pseudo-legal move into a scratch
    successor; the source position is never modified.
    """

    __slots__ = ("_pos", "_board")

    def __init__(self, position: Position) -> None:
        self._pos = position
        self._board = position.board

    # -- Public API ---------------------------------------------------------

    def generate_legal_moves(self) -> list[Move]:
        """All strictly legal moves for the side to move."""
        moving_color = self._pos.side_to_move
        opponent = moving_color.opposite
        legal: list[Move] = []
        for move in self.generate_pseudo_legal_moves():
            after = self._pos.play(move).board
            if not is_square_attacked(after, after.king_square(moving_color), opponent):
                legal.append(move)
        return legal

    def generate_pseudo_legal_moves(self) -> list[Move]:
        """All pseudo-legal moves (may leave own king in check)."""
        moves: list[Move] = []
        color = self._pos.side_to_move
        board = self._board

        for sq in board.pieces(color, PieceType.PAWN):
            self._gen_pawn(sq, color, moves)
        for sq in board.pieces(color, PieceType.KNIGHT):
            self._gen_steps(sq, color, _KNIGHT_TARGETS[sq], moves)
        for sq in board.pieces(color, PieceType.BISHOP):
            self._gen_sliding(sq, color, _BISHOP_RAYS[sq], moves)
        for sq in board.pieces(color, PieceType.ROOK):
            self._gen_sliding(sq, color, _ROOK_RAYS[sq], moves)
        for sq in board.pieces(color, PieceType.QUEEN):
            self._gen_sliding(sq, color, _QUEEN_RAYS[sq], moves)
        for sq in board.pieces(color, PieceType.KING):
            self._gen_steps(sq, color, _KING_TARGETS[sq], moves)
            self._gen_castling(sq, color, moves)

        return moves

    # -- Attack detection ---------------------------------------------------

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked by the opponent?"""
        return self.is_square_attacked(self._board.king_square(color), color.opposite)

    def is_square_attacked(self, sq: Square, by_color: Color) -> bool:
        return is_square_attacked(self._board, sq, by_color)

    # -- Piece-specific generators (private) -------------------------------

    def _gen_pawn(self, sq: Square, color: Color, moves: list[Move]) -> None:
        board = self._board
        push, start_rank, promo_rank = _PAWN_GEOMETRY[color]
        file_idx = sq & 7
        rank_idx = sq >> 3
        promotes = rank_idx == promo_rank

        one_step = sq + push
        if board.is_empty(one_step):
            if promotes:
                self._add_promotions(sq, one_step, moves)
            else:
                moves.append(Move(sq, one_step))
                two_step = one_step + push
                if rank_idx == start_rank and board.is_empty(two_step):
                    moves.append(Move(sq, two_step, MoveFlag.DOUBLE_PAWN))

        for df in (-1, 1):
            if not 0 <= file_idx + df < 8:
                continue
            cap_sq = one_step + df
            target = board[cap_sq]
            if target is not None and target.color != color:
                if promotes:
                    self._add_promotions(sq, cap_sq, moves)
                else:
                    moves.append(Move(sq, cap_sq))
            elif target is None and cap_sq == self._pos.en_passant:
                moves.append(Move(sq, cap_sq, MoveFlag.EN_PASSANT))

    @staticmethod
    def _add_promotions(from_sq: Square, to_sq: Square, moves: list[Move]) -> None:
        for pt in PROMOTION_TYPES:
            moves.append(Move(from_sq, to_sq, MoveFlag.PROMOTION, pt))

    def _gen_steps(
        self,
        sq: Square,
        color: Color,
        targets: tuple[Square, ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for to_sq in targets:
            target = board[to_sq]
            if target is None or target.color != color:
                moves.append(Move(sq, to_sq))

    def _gen_sliding(
        self,
        sq: Square,
        color: Color,
        rays: tuple[tuple[Square, ...], ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for ray in rays:
            for to_sq in ray:
                target = board[to_sq]
                if target is None:
                    moves.append(Move(sq, to_sq))
                    continue
                if target.color != color:
                    moves.append(Move(sq, to_sq))
                break

    def _gen_castling(self, king_sq: Square, color: Color, moves: list[Move]) -> None:
        if not self._pos.castling & (
            CastlingRights.WHITE_BOTH if color == Color.WHITE else CastlingRights.BLACK_BOTH
        ):
            return
        opponent = color.opposite
        if king_sq != _KING_HOME[color] or self.is_square_attacked(king_sq, opponent):
            return

        board = self._board
        for right, flag, target, empty, crossed, rook_sq in _CASTLING_PATHS[color]:
            if not self._pos.castling & right:
                continue
            rook = board[rook_sq]
            if rook is None or rook.color != color or rook.piece_type != PieceType.ROOK:
                continue
            if not all(board.is_empty(s) for s in empty):
                continue
            if any(self.is_square_attacked(s, opponent) for s in crossed):
                continue
            moves.append(Move(king_sq, target, flag))


def legal_moves(position: Position) -> list[Move]:
    """Shorthand for ``MoveGenerator(position).generate_legal_moves()``."""
    return MoveGenerator(position).generate_legal_moves()
