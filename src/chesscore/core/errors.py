"""Domain exceptions.

Every error a caller can trigger with bad input is a :class:`ChessError`;
those about malformed input also derive from :class:`ValueError`.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chesscore.core.move import Move


class ChessError(Exception):
    """Base class for all chesscore errors."""


class InvalidSquare(ChessError, ValueError):
    """Square coordinates or name outside the 8x8 board."""


class IllegalMove(ChessError, ValueError):
    """A move that is not in the legal-move set of the board it was played on."""

    def __init__(self, move: Move, reason: str = "not a legal move") -> None:
        super().__init__(f"Illegal move {move}: {reason}")
        self.move = move
        self.reason = reason


class NoLegalMoves(ChessError):
    """Search was asked for a move in a position without legal moves."""


class InvalidPosition(ChessError, ValueError):
    """A position that breaks a board invariant (e.g. missing king)."""


class InvalidEncoding(ChessError, ValueError):
    """Bytes that do not decode to a valid board."""


class InvalidMoveText(ChessError, ValueError):
    """Move text that cannot be parsed."""
