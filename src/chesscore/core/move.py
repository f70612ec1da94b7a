"""Move value object (UCI-style representation) and move-text parsing."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from chesscore.core.enums import Color, PieceType
from chesscore.core.errors import InvalidMoveText, InvalidSquare
from chesscore.core.types import Square, check_square, make_square, parse_square, square_name

if TYPE_CHECKING:
    from chesscore.core.board import Board

_PROMO_CHARS: dict[PieceType, str] = {
    PieceType.KNIGHT: "n",
    PieceType.BISHOP: "b",
    PieceType.ROOK: "r",
    PieceType.QUEEN: "q",
}

_PROMO_WORDS: dict[str, PieceType] = {
    "q": PieceType.QUEEN,
    "queen": PieceType.QUEEN,
    "r": PieceType.ROOK,
    "rook": PieceType.ROOK,
    "b": PieceType.BISHOP,
    "bishop": PieceType.BISHOP,
    "n": PieceType.KNIGHT,
    "knight": PieceType.KNIGHT,
}

_KINGSIDE_WORDS = frozenset({"o-o", "0-0", "kingside castle", "castle kingside"})
_QUEENSIDE_WORDS = frozenset({"o-o-o", "0-0-0", "queenside castle", "castle queenside"})


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable value object representing a single chess move.

    Special moves are not tagged here: castling is the king moving two files
    and en passant is a pawn capturing onto the en-passant target. Use
    :meth:`Board.move_flag` to classify a move against a concrete board.
    """

    from_sq: Square
    to_sq: Square
    promotion: PieceType | None = None

    def __post_init__(self) -> None:
        check_square(self.from_sq)
        check_square(self.to_sq)

    # ── Display ──────────────────────────────────────────────────────────

    def __str__(self) -> str:
        base = f"{square_name(self.from_sq)}{square_name(self.to_sq)}"
        if self.promotion is not None:
            base += _PROMO_CHARS.get(self.promotion, "")
        return base

    @property
    def uci(self) -> str:
        """UCI long-algebraic notation."""
        return str(self)

    @classmethod
    def from_uci(cls, text: str) -> Move:
        """Parse ``e2e4`` / ``e7e8q``."""
        return parse_move(text)


def parse_move(text: str, board: Board | None = None) -> Move:
    """Parse human move text into a :class:`Move`.

    Accepted forms::

        e2e4    e2 e4    e2 to e4    e7e8q    e7 to e8 queen
        O-O     0-0      o-o         castle kingside
        O-O-O   0-0-0    o-o-o       castle queenside

    Castling text needs *board* to know which king is moving.
    """
    normalized = " ".join(text.strip().split())
    lowered = normalized.lower()
    if lowered in _KINGSIDE_WORDS or lowered in _QUEENSIDE_WORDS:
        if board is None:
            raise InvalidMoveText(f"Castling text needs a board: {text!r}")
        rank = 0 if board.side_to_move == Color.WHITE else 7
        to_file = 6 if lowered in _KINGSIDE_WORDS else 2
        return Move(make_square(4, rank), make_square(to_file, rank))

    words = lowered.split(" ")
    try:
        if len(words) == 1 and len(words[0]) in (4, 5):
            word = words[0]
            promotion = _parse_promotion(word[4:]) if len(word) == 5 else None
            return Move(parse_square(word[:2]), parse_square(word[2:4]), promotion)
        if len(words) == 2:
            return Move(parse_square(words[0]), parse_square(words[1]))
        if len(words) == 3 and words[1] == "to":
            return Move(parse_square(words[0]), parse_square(words[2]))
        if len(words) == 4 and words[1] == "to":
            return Move(
                parse_square(words[0]),
                parse_square(words[2]),
                _parse_promotion(words[3]),
            )
    except InvalidSquare as exc:
        raise InvalidMoveText(f"Invalid move text {text!r}: {exc}") from exc
    raise InvalidMoveText(f"Invalid move format: {text!r}")


def _parse_promotion(word: str) -> PieceType:
    try:
        return _PROMO_WORDS[word]
    except KeyError:
        raise InvalidMoveText(f"Invalid promotion piece: {word!r}") from None
