"""chessim: a chess game where both sides play themselves on a timer."""

__version__ = "0.1.0"
