"""Squares as plain ints, a1 = 0 through h8 = 63, rank by rank."""

from __future__ import annotations

from typing import TypeAlias

Square: TypeAlias = int

SQUARE_NAMES: tuple[str, ...] = tuple(
    file + rank for rank in "12345678" for file in "abcdefgh"
)
_SQUARE_BY_NAME: dict[str, Square] = {name: sq for sq, name in enumerate(SQUARE_NAMES)}


def file_of(sq: Square) -> int:
    return sq % 8


def rank_of(sq: Square) -> int:
    return sq // 8


def make_square(file: int, rank: int) -> Square:
    if file not in range(8) or rank not in range(8):
        raise ValueError(f"Square out of bounds: file={file}, rank={rank}")
    return 8 * rank + file


def square_name(sq: Square) -> str:
    return SQUARE_NAMES[sq]


def parse_square(name: str) -> Square:
    """'e4' -> 28. Only lower-case algebraic names are accepted."""
    sq = _SQUARE_BY_NAME.get(name)
    if sq is None:
        raise ValueError(f"Invalid square name: {name!r}")
    return sq


def is_light(sq: Square) -> bool:
    """a1 is dark, h1 is light."""
    return sum(divmod(sq, 8)) % 2 == 1


A1, B1, C1, D1, E1, F1, G1, H1 = range(0, 8)
A2, B2, C2, D2, E2, F2, G2, H2 = range(8, 16)
A3, B3, C3, D3, E3, F3, G3, H3 = range(16, 24)
A4, B4, C4, D4, E4, F4, G4, H4 = range(24, 32)
A5, B5, C5, D5, E5, F5, G5, H5 = range(32, 40)
A6, B6, C6, D6, E6, F6, G6, H6 = range(40, 48)
A7, B7, C7, D7, E7, F7, G7, H7 = range(48, 56)
A8, B8, C8, D8, E8, F8, G8, H8 = range(56, 64)

# Centre moves are those landing on one of these.
CENTER_SQUARES: frozenset[Square] = frozenset((D4, E4, D5, E5))
