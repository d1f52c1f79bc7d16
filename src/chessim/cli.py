"""Command-line interface for chessim."""

from __future__ import annotations

import logging

import typer
from rich.console import Console

from chessim import __version__
from chessim.config import DEFAULT_DELAY_MS, SimulationSettings
from chessim.core.applier import MoveRecord
from chessim.core.enums import Color
from chessim.core.notation import STARTING_FEN
from chessim.game.session import GameSnapshot

app = typer.Typer(
    name="chessim",
    help="Watch a chess game play itself.",
    add_completion=False,
)
console = Console()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )


def _print_move(record: MoveRecord, snapshot: GameSnapshot) -> None:
    ply = snapshot.ply_count
    number = f"{(ply + 1) // 2}." if record.mover == Color.WHITE else "   ..."
    taken = f" [red]x{record.captured.symbol}[/red]" if record.captured else ""
    console.print(f"{number:>6} {record.san}{taken}")


def _print_summary(snapshot: GameSnapshot) -> None:
    console.print(f"[bold]{snapshot.status_text}[/bold]")
    if snapshot.end_reason is not None:
        console.print(f"Reason: {snapshot.end_reason.name.replace('_', ' ').lower()}")
    console.print(f"Plies: {snapshot.ply_count}  Material: {snapshot.material_balance:+d}")
    console.print(f"FEN: {snapshot.fen}")


@app.command()
def version() -> None:
    """Print version information."""
    console.print(f"[bold blue]chessim[/bold blue] v{__version__}")


@app.command()
def play(
    delay: int = typer.Option(
        DEFAULT_DELAY_MS, "--delay", "-d", help="Milliseconds between moves (500-5000, step 250)"
    ),
    seed: int | None = typer.Option(None, "--seed", "-s", help="Seed for reproducible games"),
    fen: str = typer.Option(STARTING_FEN, "--fen", help="Start position"),
    fast: bool = typer.Option(False, "--fast", help="Skip real waiting between moves"),
    max_plies: int | None = typer.Option(
        None, "--max-plies", help="Stop after this many plies (fast mode only)"
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Debug logging"),
) -> None:
    """Play one self-play game and print the moves as they happen."""
    _configure_logging(verbose)
    try:
        settings = SimulationSettings(delay_ms=delay, seed=seed, start_fen=fen)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc

    from chessim.app import run_application, run_fast

    if fast:
        snapshot = run_fast(settings, on_move=_print_move, max_plies=max_plies)
    else:
        snapshot = run_application(settings, on_move=_print_move)
    _print_summary(snapshot)


if __name__ == "__main__":
    app()
