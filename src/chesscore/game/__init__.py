"""Game layer: move history, resignation and repetition on top of the core."""

from chesscore.game.state import (
    GameOver,
    GamePhase,
    GameResult,
    GameState,
    MoveRecord,
)

__all__ = [
    "GameOver",
    "GamePhase",
    "GameResult",
    "GameState",
    "MoveRecord",
]
