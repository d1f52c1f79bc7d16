"""SimulationController — drives a self-play game one timed move at a time.

Coordinates: GameSession, MovePolicy, IScheduler, move application.
Emits events via simple callbacks so a display layer / tests can subscribe.
"""

from __future__ import annotations

import logging
import random
from collections.abc import Callable
from dataclasses import dataclass, field

from chessim.config import SimulationSettings, validate_delay
from chessim.core.applier import MoveRecord, apply_move
from chessim.core.enums import Color, GameEndReason, GameResult
from chessim.engine.policy import GreedyPolicy, MovePolicy
from chessim.game.interfaces import (
    IScheduler,
    ISimulationController,
    ScheduledCall,
    SessionStatus,
)
from chessim.game.scheduler import ManualScheduler
from chessim.game.session import GameSession, GameSnapshot

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

MoveCallback = Callable[[MoveRecord, GameSnapshot], None]
StatusCallback = Callable[[SessionStatus], None]
GameOverCallback = Callable[[GameEndReason, GameResult], None]


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_status_changed: list[StatusCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)


# ── Controller ───────────────────────────────────────────────────────────────


class SimulationController(ISimulationController):
    """Plays both sides of a game with a move policy on a timer.

    Every pending tick carries the session generation it was scheduled for.
    Pausing, resetting and changing the delay bump the generation, so a tick
    that slips past cancellation finds a mismatch and does nothing.

    Thread-safety: all methods, and the scheduler's callbacks, must run on a
    single thread.

    Args:
        policy: Chooses White's moves, and Black's unless *black_policy* is
            given. Defaults to a :class:`GreedyPolicy` seeded from *settings*.
        scheduler: Timer service; defaults to a :class:`ManualScheduler`.
        settings: Initial delay, policy seed and start position.
        black_policy: Optional separate policy for Black.
    """

    __slots__ = (
        "_settings",
        "_policies",
        "_scheduler",
        "_session",
        "_pending",
        "events",
    )

    def __init__(
        self,
        policy: MovePolicy | None = None,
        scheduler: IScheduler | None = None,
        settings: SimulationSettings | None = None,
        black_policy: MovePolicy | None = None,
    ) -> None:
        self._settings = settings if settings is not None else SimulationSettings()
        if policy is None:
            policy = GreedyPolicy(
                random.Random(self._settings.seed),
                self._settings.center_probability,
            )
        self._policies: dict[Color, MovePolicy] = {
            Color.WHITE: policy,
            Color.BLACK: black_policy if black_policy is not None else policy,
        }
        self._scheduler = scheduler if scheduler is not None else ManualScheduler()
        self._session = self._new_session(generation=0)
        self._pending: ScheduledCall | None = None
        self.events = GameEvents()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def session(self) -> GameSession:
        return self._session

    @property
    def status(self) -> SessionStatus:
        return self._session.status

    @property
    def scheduler(self) -> IScheduler:
        return self._scheduler

    @property
    def settings(self) -> SimulationSettings:
        return self._settings

    @property
    def delay_ms(self) -> int:
        return self._session.delay_ms

    @property
    def has_pending_tick(self) -> bool:
        return self._pending is not None and self._pending.active

    def policy(self, color: Color) -> MovePolicy:
        return self._policies[color]

    def snapshot(self) -> GameSnapshot:
        return self._session.snapshot()

    # ── Commands ─────────────────────────────────────────────────────────

    def start(self) -> None:
        session = self._session
        if session.status in (SessionStatus.ACTIVE, SessionStatus.FINISHED):
            return
        self._set_status(SessionStatus.ACTIVE)
        self._schedule_tick()

    def pause(self) -> None:
        if self._session.status != SessionStatus.ACTIVE:
            return
        self._invalidate_pending()
        self._set_status(SessionStatus.PAUSED)

    def reset(self) -> None:
        self._invalidate_pending()
        self._session = self._new_session(generation=self._session.generation + 1)
        _LOGGER.info("Game reset (generation %d)", self._session.generation)
        self._emit_status(SessionStatus.IDLE)

    def set_delay(self, delay_ms: int) -> None:
        validate_delay(delay_ms)
        session = self._session
        if delay_ms == session.delay_ms:
            return
        session.delay_ms = delay_ms
        _LOGGER.debug("Delay set to %d ms", delay_ms)
        if session.status == SessionStatus.ACTIVE:
            self._invalidate_pending()
            self._schedule_tick()

    # ── Internal helpers ─────────────────────────────────────────────────

    def _new_session(self, generation: int) -> GameSession:
        return GameSession.from_fen(
            self._settings.start_fen,
            delay_ms=self._settings.delay_ms,
            generation=generation,
        )

    def _schedule_tick(self) -> None:
        session = self._session
        generation = session.generation
        self._pending = self._scheduler.call_later(
            session.delay_ms, lambda: self._on_tick(generation)
        )

    def _invalidate_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
        self._session.generation += 1

    def _on_tick(self, generation: int) -> None:
        session = self._session
        if generation != session.generation or session.status != SessionStatus.ACTIVE:
            _LOGGER.debug(
                "Ignoring stale tick (generation %d, current %d)",
                generation,
                session.generation,
            )
            return
        self._pending = None
        self._step(session)
        if self._session is session and session.status == SessionStatus.ACTIVE:
            self._schedule_tick()

    def _step(self, session: GameSession) -> None:
        """Play one ply of an ACTIVE session, or finish it if there is none."""
        legal = session.legal_moves()
        if not legal:
            in_check = session.position.is_in_check()
            self._finish(GameEndReason.CHECKMATE if in_check else GameEndReason.STALEMATE)
            return

        generation = session.generation
        position = session.position
        move = self._policies[position.side_to_move].choose(legal, position)
        after, record = apply_move(position, move)

        # A reset or pause while the policy ran makes this result stale.
        if self._session is not session or session.generation != generation:
            _LOGGER.debug("Discarding move %s computed for a stale session", move)
            return

        record = session.commit(after, record)
        _LOGGER.debug("Ply %d: %s", session.ply_count, record.san)

        snapshot = session.snapshot()
        for cb in self.events.on_move:
            cb(record, snapshot)

        if session.is_finished:
            self._invalidate_pending()
            self._announce_game_over()

    def _finish(self, reason: GameEndReason) -> None:
        self._invalidate_pending()
        self._session.finish(reason)
        self._announce_game_over()

    def _announce_game_over(self) -> None:
        session = self._session
        assert session.end_reason is not None
        _LOGGER.info(
            "Game over after %d plies: %s (%s)",
            session.ply_count,
            session.end_reason.name.lower(),
            session.result.name.lower(),
        )
        self._emit_status(SessionStatus.FINISHED)
        for cb in self.events.on_game_over:
            cb(session.end_reason, session.result)

    def _set_status(self, status: SessionStatus) -> None:
        self._session.status = status
        _LOGGER.info("Game %s", status)
        self._emit_status(status)

    def _emit_status(self, status: SessionStatus) -> None:
        for cb in self.events.on_status_changed:
            cb(status)
