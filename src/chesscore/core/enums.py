"""Enumerations shared by the rules, the engine and the game layer."""

from __future__ import annotations

from enum import IntEnum, IntFlag, auto


class Color(IntEnum):
    """Side. Values double as list indexes."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Color:
        return Color(self ^ 1)

    def __str__(self) -> str:
        return self.name.lower()


class PieceType(IntEnum):
    """Piece kinds. Values 1..6 are part of the binary encoding."""

    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6


class MoveFlag(IntEnum):
    """What a move does on a given board; see :meth:`Board.move_flag`."""

    NORMAL = auto()
    DOUBLE_PAWN = auto()
    EN_PASSANT = auto()
    CASTLE_KINGSIDE = auto()
    CASTLE_QUEENSIDE = auto()
    PROMOTION = auto()


class CastlingRights(IntFlag):
    """Remaining castling rights; bit values are part of the binary encoding."""

    NONE = 0
    WHITE_KINGSIDE = 1
    WHITE_QUEENSIDE = 2
    BLACK_KINGSIDE = 4
    BLACK_QUEENSIDE = 8

    WHITE_BOTH = WHITE_KINGSIDE | WHITE_QUEENSIDE
    BLACK_BOTH = BLACK_KINGSIDE | BLACK_QUEENSIDE
    ALL = WHITE_BOTH | BLACK_BOTH


class OutcomeKind(IntEnum):
    """Classification of a position (see :class:`~chesscore.core.rules.Outcome`)."""

    IN_PROGRESS = auto()
    CHECK = auto()
    CHECKMATE = auto()
    STALEMATE = auto()
    DRAW = auto()


class DrawReason(IntEnum):
    FIFTY_MOVE_RULE = auto()
    INSUFFICIENT_MATERIAL = auto()
    REPETITION = auto()
