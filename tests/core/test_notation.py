"""Tests for FEN and SAN notation."""

import pytest

from chessim.core.enums import CastlingRights, Color, MoveFlag, PieceType
from chessim.core.move import Move
from chessim.core.move_generator import legal_moves
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
from chessim.core.types import E1, E2, E3, E4, E8, parse_square

KINGS_ONLY = "4k3/8/8/8/8/8/8/4K3"


class TestFenParsing:
    def test_starting_fields(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert pos.side_to_move == Color.WHITE
        assert pos.castling == CastlingRights.ALL
        assert pos.en_passant is None
        assert pos.halfmove_clock == 0
        assert pos.fullmove_number == 1

    def test_starting_kings(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert pos.board[E1] == Piece(Color.WHITE, PieceType.KING)
        assert pos.board[E8] == Piece(Color.BLACK, PieceType.KING)

    def test_matches_initial_position(self) -> None:
        assert position_from_fen(STARTING_FEN) == Position.initial()

    def test_en_passant_square(self) -> None:
        fen = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"
        assert position_from_fen(fen).en_passant == E3

    def test_partial_castling(self) -> None:
        fen = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w Kq - 0 1"
        pos = position_from_fen(fen)
        assert pos.castling == (
            CastlingRights.WHITE_KINGSIDE | CastlingRights.BLACK_QUEENSIDE
        )

    def test_clock_fields_are_optional(self) -> None:
        pos = position_from_fen(f"{KINGS_ONLY} b - -")
        assert pos.halfmove_clock == 0
        assert pos.fullmove_number == 1

    @pytest.mark.parametrize(
        ("fen", "match"),
        [
            ("invalid", "4-6 fields"),
            (f"{KINGS_ONLY} x - - 0 1", "side-to-move"),
            ("8/8/8/8/8/8/4K3 w - - 0 1", "8 ranks"),
            ("9/8/8/8/8/8/8/4K2k w - - 0 1", "Invalid FEN"),
            ("4k4/8/8/8/8/8/8/4K3 w - - 0 1", "rank width"),
            ("8/8/8/8/8/8/8/4K3 w - - 0 1", "one black king"),
            ("4k3/8/8/8/8/8/8/3KK3 w - - 0 1", "one white king"),
            (f"{KINGS_ONLY} w Kx - 0 1", "castling"),
            (f"{KINGS_ONLY} w KK - 0 1", "castling"),
            (f"{KINGS_ONLY} w - e3 0 1", "en-passant"),
            ("4k3/8/8/8/8/8/8/p3K3 b - - 0 1", "Pawn on rank 1"),
            ("P3k3/8/8/8/8/8/8/4K3 w - - 0 1", "Pawn on rank 8"),
            ("4k3/8/8/3PN3/8/8/8/4K3 w - e6 0 1", "no pawn just passed"),
            ("4k3/8/4p3/3Pp3/8/8/8/4K3 w - e6 0 1", "no pawn just passed"),
            ("4k3/4p3/8/3Pp3/8/8/8/4K3 w - e6 0 1", "no pawn just passed"),
            ("4k3/8/8/8/3pp3/8/8/4K3 b - e3 0 1", "no pawn just passed"),
            ("4k3/8/8/8/8/8/8/4R1K1 w - - 0 1", "Side not to move is in check"),
            (f"{KINGS_ONLY} w - - -1 1", "halfmove"),
            (f"{KINGS_ONLY} w - - 0 0", "fullmove"),
        ],
    )
    def test_invalid_fen_raises(self, fen: str, match: str) -> None:
        with pytest.raises(ValueError, match=match):
            position_from_fen(fen)


class TestFenSerialisation:
    @pytest.mark.parametrize(
        "fen",
        [
            STARTING_FEN,
            "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1",
            "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1",
            "8/8/4k3/8/8/4K3/8/8 w - - 0 1",
        ],
    )
    def test_roundtrip(self, fen: str) -> None:
        assert position_to_fen(position_from_fen(fen)) == fen

    def test_after_moves(self, start_position: Position) -> None:
        pos = play_line(start_position, "1. e4 c5 2. Nf3")
        assert position_to_fen(pos) == (
            "rnbqkbnr/pp1ppppp/8/2p5/4P3/5N2/PPPP1PPP/RNBQKB1R b KQkq - 1 2"
        )


class TestSAN:
    def test_pawn_push(self, start_position: Position) -> None:
        move = Move(E2, E4, MoveFlag.DOUBLE_PAWN)
        assert move_to_san(start_position, move) == "e4"

    def test_knight_move(self, start_position: Position) -> None:
        nf3 = Move(parse_square("g1"), parse_square("f3"))
        assert move_to_san(start_position, nf3) == "Nf3"

    def test_parse_san_e4(self, start_position: Position) -> None:
        move = parse_san(start_position, "e4")
        assert move.to_sq == E4
        assert move.flag == MoveFlag.DOUBLE_PAWN

    def test_parse_san_illegal_raises(self, start_position: Position) -> None:
        with pytest.raises(ValueError, match="Illegal"):
            parse_san(start_position, "Ke5")

    def test_parse_san_garbage_raises(self, start_position: Position) -> None:
        with pytest.raises(ValueError, match="Invalid SAN"):
            parse_san(start_position, "Nz9")

    def test_san_roundtrip(self) -> None:
        pos = position_from_fen(
            "r3k2r/p1ppqpb1/bn2pnp1/3PN3/1p2P3/2N2Q1p/PPPBBPPP/R3K2R w KQkq - 0 1"
        )
        for move in legal_moves(pos):
            san = move_to_san(pos, move)
            assert parse_san(pos, san) == move, san

    def test_parse_san_zero_castling_notation(self) -> None:
        pos = position_from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
        assert parse_san(pos, "0-0").flag == MoveFlag.CASTLE_KINGSIDE
        assert parse_san(pos, "O-O-O").flag == MoveFlag.CASTLE_QUEENSIDE

    def test_castling_without_rights_raises(self) -> None:
        pos = position_from_fen("r3k2r/8/8/8/8/8/8/R3K2R w - - 0 1")
        with pytest.raises(ValueError, match="Illegal"):
            parse_san(pos, "O-O")

    def test_knight_disambiguation_by_file(self) -> None:
        pos = position_from_fen("7k/8/8/8/8/8/8/K1N3N1 w - - 0 1")
        move = Move(parse_square("c1"), parse_square("e2"))
        assert move_to_san(pos, move) == "Nce2"
        assert parse_san(pos, "Nce2") == move

    def test_ambiguous_knight_raises(self) -> None:
        pos = position_from_fen("7k/8/8/8/8/8/8/K1N3N1 w - - 0 1")
        with pytest.raises(ValueError, match="Ambiguous"):
            parse_san(pos, "Ne2")

    def test_rank_disambiguation(self) -> None:
        pos = position_from_fen("7k/8/8/8/8/8/R7/4R2K w - - 0 1")
        move = parse_san(pos, "R1e2")
        assert move.from_sq == E1
        assert move.to_sq == E2

    def test_castling_both_sides(self) -> None:
        pos = position_from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
        king_side = Move(E1, parse_square("g1"), MoveFlag.CASTLE_KINGSIDE)
        queen_side = Move(E1, parse_square("c1"), MoveFlag.CASTLE_QUEENSIDE)
        assert move_to_san(pos, king_side) == "O-O"
        assert move_to_san(pos, queen_side) == "O-O-O"

    def test_pawn_capture_and_promotion(self) -> None:
        pos_capture = position_from_fen("7k/8/8/4p3/3P4/8/8/4K3 w - - 0 1")
        capture = Move(parse_square("d4"), parse_square("e5"))
        assert move_to_san(pos_capture, capture) == "dxe5"

        pos_promo = position_from_fen("k7/6P1/8/8/8/8/8/4K3 w - - 0 1")
        promo = Move(parse_square("g7"), parse_square("g8"), MoveFlag.PROMOTION, PieceType.QUEEN)
        assert move_to_san(pos_promo, promo) == "g8=Q+"
        assert parse_san(pos_promo, "g8=Q+") == promo

    def test_en_passant_written_as_capture(self, start_position: Position) -> None:
        pos = play_line(start_position, "1. e4 Nf6 2. e5 d5")
        ep = Move(parse_square("e5"), parse_square("d6"), MoveFlag.EN_PASSANT)
        assert move_to_san(pos, ep) == "exd6"

    def test_mate_suffix(self, start_position: Position) -> None:
        pos = play_line(start_position, "1. f3 e5 2. g4")
        mate = parse_san(pos, "Qh4")
        assert move_to_san(pos, mate) == "Qh4#"


class TestPlayLine:
    def test_skips_move_numbers(self, start_position: Position) -> None:
        numbered = play_line(start_position, "1. e4 e5 2. Nf3")
        plain = play_line(start_position, "e4 e5 Nf3")
        assert numbered == plain
        assert numbered.side_to_move == Color.BLACK

    def test_attached_move_numbers(self, start_position: Position) -> None:
        pos = play_line(start_position, "1.d4 d5 2.c4")
        assert pos.board[parse_square("c4")] == Piece(Color.WHITE, PieceType.PAWN)

    def test_illegal_token_raises(self, start_position: Position) -> None:
        with pytest.raises(ValueError):
            play_line(start_position, "1. e4 e4")
