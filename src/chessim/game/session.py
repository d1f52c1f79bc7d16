"""Game session — the single mutable game owned by the controller."""

from __future__ import annotations

from collections import Counter
from collections.abc import Hashable
from dataclasses import dataclass, field, replace

from chessim.config import DEFAULT_DELAY_MS
from chessim.core.applier import MoveRecord
from chessim.core.enums import Color, GameEndReason, GameResult, MoveStatus, PieceType
from chessim.core.move import Move
from chessim.core.move_generator import MoveGenerator
from chessim.core.notation import STARTING_FEN, position_from_fen, position_to_fen
from chessim.core.position import Position
from chessim.core.rules import Rules
from chessim.game.interfaces import SessionStatus


@dataclass(frozen=True, slots=True)
class GameSnapshot:
    """Read-only view of a session handed to display code."""

    fen: str
    status: SessionStatus
    end_reason: GameEndReason | None
    result: GameResult
    side_to_move: Color
    in_check: bool
    history: tuple[str, ...]
    white_captures: tuple[PieceType, ...]
    black_captures: tuple[PieceType, ...]
    delay_ms: int
    generation: int

    @property
    def ply_count(self) -> int:
        return len(self.history)

    def captures(self, color: Color) -> tuple[PieceType, ...]:
        """Piece kinds taken *by* *color*, oldest first."""
        return self.white_captures if color == Color.WHITE else self.black_captures

    @property
    def material_balance(self) -> int:
        """White's captured material minus Black's, in pawn units."""
        white = sum(kind.material_value for kind in self.white_captures)
        black = sum(kind.material_value for kind in self.black_captures)
        return white - black

    @property
    def status_text(self) -> str:
        """One-line description of the game for a status bar."""
        side = str(self.side_to_move).capitalize()
        if self.end_reason == GameEndReason.CHECKMATE:
            winner = str(self.side_to_move.opposite).capitalize()
            return f"Checkmate! {winner} wins!"
        if self.end_reason is not None:
            return "Game ended in a draw!"
        if self.in_check:
            return f"{side} is in check!"
        return f"{side} to move"


@dataclass
class GameSession:
    """Owns the current position, history, captures and status of one game.

    The position is replaced, never mutated, on every move. History and the
    capture lists only ever grow. :meth:`commit` applies everything that
    belongs to one move in a single step.
    """

    position: Position = field(default_factory=Position.initial)
    delay_ms: int = DEFAULT_DELAY_MS
    generation: int = 0
    status: SessionStatus = field(default=SessionStatus.IDLE, init=False)
    end_reason: GameEndReason | None = field(default=None, init=False)
    result: GameResult = field(default=GameResult.IN_PROGRESS, init=False)
    history: list[MoveRecord] = field(default_factory=list, init=False)
    captures: dict[Color, list[PieceType]] = field(init=False)
    start_fen: str = field(init=False)
    _repetitions: Counter[Hashable] = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.start_fen = position_to_fen(self.position)
        self.captures = {Color.WHITE: [], Color.BLACK: []}
        self._repetitions = Counter([self.position.repetition_key()])

    @classmethod
    def from_fen(
        cls,
        fen: str = STARTING_FEN,
        delay_ms: int = DEFAULT_DELAY_MS,
        generation: int = 0,
    ) -> GameSession:
        return cls(position_from_fen(fen), delay_ms=delay_ms, generation=generation)

    # ── Queries ──────────────────────────────────────────────────────────

    @property
    def side_to_move(self) -> Color:
        return self.position.side_to_move

    @property
    def is_finished(self) -> bool:
        return self.status == SessionStatus.FINISHED

    @property
    def ply_count(self) -> int:
        return len(self.history)

    def legal_moves(self) -> list[Move]:
        return MoveGenerator(self.position).generate_legal_moves()

    def repetition_count(self, position: Position | None = None) -> int:
        """How many times *position* (default: current) occurred in this game."""
        position = self.position if position is None else position
        return self._repetitions[position.repetition_key()]

    # ── Mutation ─────────────────────────────────────────────────────────

    def commit(self, position: Position, record: MoveRecord) -> MoveRecord:
        """Adopt the successor *position* produced by *record*'s move.

        Returns the record as stored, its status upgraded to ``DRAW`` when
        the move completed a threefold repetition.
        """
        key = position.repetition_key()
        repetitions = self._repetitions[key] + 1

        reason: GameEndReason | None = None
        if record.status == MoveStatus.CHECKMATE:
            reason = GameEndReason.CHECKMATE
        elif record.status == MoveStatus.STALEMATE:
            reason = GameEndReason.STALEMATE
        else:
            reason = Rules.draw_reason(position, repetitions)
            if reason is not None and record.status != MoveStatus.DRAW:
                record = replace(record, status=MoveStatus.DRAW)

        self._repetitions[key] = repetitions
        self.position = position
        self.history.append(record)
        if record.captured is not None:
            self.captures[record.mover].append(record.captured.piece_type)
        if reason is not None:
            self.finish(reason)
        return record

    def finish(self, reason: GameEndReason) -> None:
        """Stop the game for good; only a reset starts a new one."""
        self.end_reason = reason
        if reason == GameEndReason.CHECKMATE:
            self.result = (
                GameResult.BLACK_WINS
                if self.position.side_to_move == Color.WHITE
                else GameResult.WHITE_WINS
            )
        else:
            self.result = GameResult.DRAW
        self.status = SessionStatus.FINISHED

    # ── Snapshot ─────────────────────────────────────────────────────────

    def snapshot(self) -> GameSnapshot:
        return GameSnapshot(
            fen=position_to_fen(self.position),
            status=self.status,
            end_reason=self.end_reason,
            result=self.result,
            side_to_move=self.position.side_to_move,
            in_check=self.position.is_in_check(),
            history=tuple(record.san for record in self.history),
            white_captures=tuple(self.captures[Color.WHITE]),
            black_captures=tuple(self.captures[Color.BLACK]),
            delay_ms=self.delay_ms,
            generation=self.generation,
        )
