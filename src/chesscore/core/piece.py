"""Piece value object and material values."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from chesscore.core.enums import Color, PieceType

# Centipawns. The king is never traded, so it carries no material.
PIECE_VALUES: Final[dict[PieceType, int]] = {
    PieceType.PAWN: 100,
    PieceType.KNIGHT: 320,
    PieceType.BISHOP: 330,
    PieceType.ROOK: 500,
    PieceType.QUEEN: 900,
    PieceType.KING: 0,
}

# Indexed by PieceType - 1; white letters are upper case.
_LETTERS: Final = "pnbrqk"
_WHITE_SYMBOLS: Final = "♙♘♗♖♕♔"
_BLACK_SYMBOLS: Final = "♟♞♝♜♛♚"


@dataclass(frozen=True, slots=True)
class Piece:
    """A coloured piece kind. Compared and hashed by value."""

    color: Color
    piece_type: PieceType

    @property
    def value(self) -> int:
        """Material value in centipawns."""
        return PIECE_VALUES[self.piece_type]

    def __str__(self) -> str:
        """FEN letter: upper case for white, lower case for black."""
        letter = _LETTERS[self.piece_type - 1]
        return letter.upper() if self.color == Color.WHITE else letter

    @property
    def symbol(self) -> str:
        """Unicode figurine, e.g. ♞."""
        symbols = _WHITE_SYMBOLS if self.color == Color.WHITE else _BLACK_SYMBOLS
        return symbols[self.piece_type - 1]

    @classmethod
    def from_char(cls, char: str) -> Piece:
        """Inverse of :meth:`__str__`, e.g. ``'n'`` → black knight."""
        index = _LETTERS.find(char.lower()) if len(char) == 1 else -1
        if index < 0:
            raise ValueError(f"Invalid piece character: {char!r}")
        color = Color.WHITE if char.isupper() else Color.BLACK
        return cls(color, PieceType(index + 1))
