"""Core domain layer: pure chess logic with zero external dependencies.

Quick start::

    from chesscore.core import Board, classify, legal_moves, parse_move

    board = Board.initial()
    for move in legal_moves(board):
        print(move)
    board = board.apply(parse_move("e2e4"))
    print(classify(board))
"""

from chesscore.core.board import Board
from chesscore.core.codec import decode_board, encode_board
from chesscore.core.enums import (
    CastlingRights,
    Color,
    DrawReason,
    MoveFlag,
    OutcomeKind,
    PieceType,
)
from chesscore.core.errors import (
    ChessError,
    IllegalMove,
    InvalidEncoding,
    InvalidMoveText,
    InvalidPosition,
    InvalidSquare,
    NoLegalMoves,
)
from chesscore.core.move import Move, parse_move
from chesscore.core.move_generator import MoveGenerator, legal_moves
from chesscore.core.notation import STARTING_FEN, position_from_fen, position_to_fen
from chesscore.core.piece import PIECE_VALUES, Piece
from chesscore.core.placement import Placement
from chesscore.core.rules import Outcome, Rules, classify
from chesscore.core.types import (
    Square,
    file_of,
    make_square,
    parse_square,
    rank_of,
    square_name,
)

__all__ = [
    # Enums / flags
    "CastlingRights",
    "Color",
    "DrawReason",
    "MoveFlag",
    "OutcomeKind",
    "PieceType",
    # Errors
    "ChessError",
    "IllegalMove",
    "InvalidEncoding",
    "InvalidMoveText",
    "InvalidPosition",
    "InvalidSquare",
    "NoLegalMoves",
    # Types / helpers
    "Square",
    "file_of",
    "make_square",
    "parse_square",
    "rank_of",
    "square_name",
    # Domain objects
    "Board",
    "Move",
    "MoveGenerator",
    "Outcome",
    "PIECE_VALUES",
    "Piece",
    "Placement",
    "Rules",
    "classify",
    "legal_moves",
    "parse_move",
    # Serialisation
    "STARTING_FEN",
    "decode_board",
    "encode_board",
    "position_from_fen",
    "position_to_fen",
]
