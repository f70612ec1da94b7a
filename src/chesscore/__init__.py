"""chesscore: chess rules engine with a negamax alpha-beta player.

Quick start::

    from chesscore import Board, best_move, classify

    board = Board.initial()
    board = board.apply(best_move(board, depth=3))
    print(classify(board))
"""

from chesscore.core import (
    STARTING_FEN,
    Board,
    CastlingRights,
    ChessError,
    Color,
    DrawReason,
    IllegalMove,
    InvalidEncoding,
    InvalidMoveText,
    InvalidPosition,
    InvalidSquare,
    Move,
    MoveFlag,
    MoveGenerator,
    NoLegalMoves,
    Outcome,
    OutcomeKind,
    Piece,
    PieceType,
    Placement,
    Rules,
    classify,
    decode_board,
    encode_board,
    legal_moves,
    parse_move,
    position_from_fen,
    position_to_fen,
)
from chesscore.engine import (
    EngineWorker,
    NegamaxEngine,
    SearchLimits,
    SearchResult,
    best_move,
    evaluate,
)
from chesscore.game import GameOver, GameState

__version__ = "0.1.0"

__all__ = [
    "Board",
    "CastlingRights",
    "ChessError",
    "Color",
    "DrawReason",
    "EngineWorker",
    "GameOver",
    "GameState",
    "IllegalMove",
    "InvalidEncoding",
    "InvalidMoveText",
    "InvalidPosition",
    "InvalidSquare",
    "Move",
    "MoveFlag",
    "MoveGenerator",
    "NegamaxEngine",
    "NoLegalMoves",
    "Outcome",
    "OutcomeKind",
    "Piece",
    "PieceType",
    "Placement",
    "Rules",
    "STARTING_FEN",
    "SearchLimits",
    "SearchResult",
    "__version__",
    "best_move",
    "classify",
    "decode_board",
    "encode_board",
    "evaluate",
    "legal_moves",
    "parse_move",
    "position_from_fen",
    "position_to_fen",
]
