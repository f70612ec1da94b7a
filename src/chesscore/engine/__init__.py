"""Chess engine package: evaluation, negamax search and a background worker."""

from chesscore.engine.evaluation import MATE_SCORE, evaluate, is_mate_score
from chesscore.engine.negamax import NegamaxEngine, best_move
from chesscore.engine.search import (
    CancelCheck,
    IEngine,
    SearchLimits,
    SearchResult,
    deadline,
)
from chesscore.engine.worker import EngineWorker

__all__ = [
    "CancelCheck",
    "EngineWorker",
    "IEngine",
    "MATE_SCORE",
    "NegamaxEngine",
    "SearchLimits",
    "SearchResult",
    "best_move",
    "deadline",
    "evaluate",
    "is_mate_score",
]
