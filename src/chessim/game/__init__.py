"""Game management layer — session, controller, schedulers.

Quick start::

    from chessim.game import ManualScheduler, SimulationController

    scheduler = ManualScheduler()
    ctrl = SimulationController(scheduler=scheduler)
    ctrl.start()
    scheduler.advance(ctrl.delay_ms)  # one move
    print(ctrl.snapshot().history)
"""

from chessim.game.controller import GameEvents, SimulationController
from chessim.game.interfaces import (
    IScheduler,
    ISimulationController,
    ScheduledCall,
    SessionStatus,
)
from chessim.game.scheduler import ManualScheduler
from chessim.game.session import GameSession, GameSnapshot

__all__ = [
    # Interfaces
    "IScheduler",
    "ISimulationController",
    "ScheduledCall",
    "SessionStatus",
    # Concrete
    "GameEvents",
    "GameSession",
    "GameSnapshot",
    "ManualScheduler",
    "SimulationController",
]
