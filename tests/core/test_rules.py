"""Tests for Rules: checkmate, stalemate, draw detection."""

import pytest

from chessim.core.enums import GameEndReason, GameResult, MoveStatus
from chessim.core.notation import STARTING_FEN, position_from_fen
from chessim.core.rules import FIFTY_MOVE_HALFMOVES, Rules

FOOLS_MATE = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"


class TestCheck:
    def test_starting_not_in_check(self) -> None:
        assert not Rules.is_in_check(position_from_fen(STARTING_FEN))

    def test_fools_mate_in_check(self) -> None:
        assert Rules.is_in_check(position_from_fen(FOOLS_MATE))


class TestCheckmate:
    def test_fools_mate(self) -> None:
        pos = position_from_fen(FOOLS_MATE)
        assert Rules.is_checkmate(pos)
        assert not Rules.is_stalemate(pos)
        assert Rules.game_result(pos) == GameResult.BLACK_WINS

    def test_back_rank_mate(self) -> None:
        # R on a8 checks black king d8; white king d6 covers all escapes
        pos = position_from_fen("R2k4/8/3K4/8/8/8/8/8 b - - 0 1")
        assert Rules.is_checkmate(pos)
        assert Rules.game_result(pos) == GameResult.WHITE_WINS

    def test_not_checkmate_when_can_escape(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/8/r3K3 w - - 0 1")
        assert Rules.is_in_check(pos)
        assert not Rules.is_checkmate(pos)


class TestStalemate:
    def test_king_trapped(self) -> None:
        # Black king on h8, white K on f6, white Q on g6
        pos = position_from_fen("7k/8/5KQ1/8/8/8/8/8 b - - 0 1")
        assert Rules.is_stalemate(pos)
        assert not Rules.is_checkmate(pos)
        assert Rules.game_result(pos) == GameResult.DRAW

    def test_not_stalemate_when_has_moves(self) -> None:
        pos = position_from_fen("7k/8/5K2/8/8/8/8/8 b - - 0 1")
        assert not Rules.is_stalemate(pos)


class TestInsufficientMaterial:
    @pytest.mark.parametrize(
        "fen",
        [
            "8/8/4k3/8/8/4K3/8/8 w - - 0 1",
            "8/8/4k3/8/8/4K3/3B4/8 w - - 0 1",
            "8/8/4k3/8/8/4K3/3N4/8 w - - 0 1",
            "8/8/4k3/2n5/8/4K3/8/8 w - - 0 1",
            # Bishops on c1 and f8 both stand on dark squares.
            "5b2/8/4k3/8/8/4K3/8/2B5 w - - 0 1",
        ],
    )
    def test_dead_positions(self, fen: str) -> None:
        assert Rules.is_insufficient_material(position_from_fen(fen))

    @pytest.mark.parametrize(
        "fen",
        [
            "8/8/4k3/8/8/4K3/3R4/8 w - - 0 1",
            "8/8/4k3/8/4P3/4K3/8/8 w - - 0 1",
            "8/8/4k3/8/8/4K3/3Q4/8 w - - 0 1",
            # c1 is dark, c8 is light.
            "2b5/8/4k3/8/8/4K3/8/2B5 w - - 0 1",
            "8/8/4k3/8/8/4K3/8/1NN5 w - - 0 1",
            "8/8/4k3/3n4/8/4K3/8/2B5 w - - 0 1",
        ],
    )
    def test_mating_material_remains(self, fen: str) -> None:
        assert not Rules.is_insufficient_material(position_from_fen(fen))


class TestFiftyMoveRule:
    def test_not_triggered_at_start(self) -> None:
        pos = position_from_fen("8/8/4k3/8/8/4K3/8/R7 w - - 0 1")
        assert not Rules.is_fifty_move_rule(pos)

    def test_not_triggered_one_short(self) -> None:
        pos = position_from_fen(f"8/8/4k3/8/8/4K3/8/R7 w - - {FIFTY_MOVE_HALFMOVES - 1} 50")
        assert not Rules.is_fifty_move_rule(pos)
        assert Rules.draw_reason(pos) is None

    def test_triggered_at_100_halfmoves(self) -> None:
        pos = position_from_fen("8/8/4k3/8/8/4K3/8/R7 w - - 100 51")
        assert Rules.is_fifty_move_rule(pos)
        assert Rules.draw_reason(pos) == GameEndReason.FIFTY_MOVE_RULE
        assert Rules.game_result(pos) == GameResult.DRAW


class TestRepetition:
    def test_limit_is_three(self) -> None:
        assert not Rules.is_threefold_repetition(2)
        assert Rules.is_threefold_repetition(3)

    def test_draw_reason_uses_count(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/8/R3K3 w - - 0 1")
        assert Rules.draw_reason(pos, repetitions=2) is None
        assert Rules.draw_reason(pos, repetitions=3) == GameEndReason.THREEFOLD_REPETITION
        assert Rules.game_result(pos, repetitions=3) == GameResult.DRAW


class TestTerminalStatus:
    def test_start_is_ongoing(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert Rules.terminal_status(pos) == (MoveStatus.NONE, None)
        assert Rules.game_result(pos) == GameResult.IN_PROGRESS

    def test_check(self) -> None:
        pos = position_from_fen("4k3/8/8/8/8/8/8/r3K3 w - - 0 1")
        assert Rules.terminal_status(pos) == (MoveStatus.CHECK, None)

    def test_checkmate(self) -> None:
        status, reason = Rules.terminal_status(position_from_fen(FOOLS_MATE))
        assert status == MoveStatus.CHECKMATE
        assert reason == GameEndReason.CHECKMATE
        assert status.is_terminal

    def test_stalemate(self) -> None:
        pos = position_from_fen("7k/8/5KQ1/8/8/8/8/8 b - - 0 1")
        assert Rules.terminal_status(pos) == (MoveStatus.STALEMATE, GameEndReason.STALEMATE)

    def test_mate_beats_fifty_move_rule(self) -> None:
        pos = position_from_fen("R2k4/8/3K4/8/8/8/8/8 b - - 100 80")
        assert Rules.terminal_status(pos)[0] == MoveStatus.CHECKMATE

    def test_insufficient_material_beats_repetition(self) -> None:
        pos = position_from_fen("8/8/4k3/8/8/4K3/8/8 w - - 100 80")
        status, reason = Rules.terminal_status(pos, repetitions=3)
        assert status == MoveStatus.DRAW
        assert reason == GameEndReason.INSUFFICIENT_MATERIAL
        assert reason.is_draw

    def test_precomputed_moves_are_trusted(self) -> None:
        pos = position_from_fen(STARTING_FEN)
        assert Rules.terminal_status(pos, legal_moves=[])[0] == MoveStatus.STALEMATE
