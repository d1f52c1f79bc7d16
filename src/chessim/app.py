"""Headless Qt host: runs a self-play game on a real event loop."""

from __future__ import annotations

import logging
import sys
from collections.abc import Callable
from typing import TYPE_CHECKING

from chessim.config import SimulationSettings
from chessim.core.applier import MoveRecord
from chessim.core.enums import GameEndReason, GameResult
from chessim.game.controller import SimulationController
from chessim.game.session import GameSnapshot

if TYPE_CHECKING:
    from PyQt6.QtCore import QCoreApplication

_LOGGER = logging.getLogger(__name__)

MoveSink = Callable[[MoveRecord, GameSnapshot], None]


def _connect_quit(app: QCoreApplication, controller: SimulationController) -> None:
    def _on_game_over(reason: GameEndReason, result: GameResult) -> None:
        _LOGGER.info("Stopping event loop: %s, %s", reason.name, result.name)
        app.quit()

    controller.events.on_game_over.append(_on_game_over)


def run_application(
    settings: SimulationSettings,
    on_move: MoveSink | None = None,
    argv: list[str] | None = None,
) -> GameSnapshot:
    """Play one full game with real delays and return the final snapshot."""
    from PyQt6.QtCore import QCoreApplication

    from chessim.game.qt_scheduler import QtScheduler

    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication(sys.argv if argv is None else argv)
    app.setApplicationName("chessim")

    controller = SimulationController(scheduler=QtScheduler(), settings=settings)
    if on_move is not None:
        controller.events.on_move.append(on_move)
    _connect_quit(app, controller)

    controller.start()
    if not controller.session.is_finished:
        app.exec()
    return controller.snapshot()


def run_fast(
    settings: SimulationSettings,
    on_move: MoveSink | None = None,
    max_plies: int | None = None,
) -> GameSnapshot:
    """Play a game on a virtual clock, as fast as the rules engine allows."""
    from chessim.game.scheduler import ManualScheduler

    scheduler = ManualScheduler()
    controller = SimulationController(scheduler=scheduler, settings=settings)
    if on_move is not None:
        controller.events.on_move.append(on_move)

    controller.start()
    while controller.has_pending_tick:
        if max_plies is not None and controller.session.ply_count >= max_plies:
            controller.pause()
            break
        scheduler.advance(controller.delay_ms)
    return controller.snapshot()
