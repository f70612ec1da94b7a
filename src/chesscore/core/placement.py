"""Placement - which piece stands on which of the 64 squares."""

from __future__ import annotations

from collections.abc import Iterator, Mapping

from chesscore.core.enums import Color, PieceType
from chesscore.core.errors import InvalidPosition
from chesscore.core.piece import Piece
from chesscore.core.types import Square, check_square, make_square

_BACK_RANK: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


def iter_bits(bitboard: int) -> Iterator[Square]:
    """Squares of the set bits in *bitboard*, lowest first."""
    while bitboard:
        low = bitboard & -bitboard
        yield low.bit_length() - 1
        bitboard ^= low


class Placement:
    """Square-indexed piece map.

    Alongside the 64 slots it keeps one bitboard per piece kind and one
    occupancy mask per color; both are updated on every assignment so the
    move generator can test attacks without scanning the board.
    """

    __slots__ = ("_slots", "_by_piece", "_by_color")

    def __init__(self) -> None:
        self._slots: list[Piece | None] = [None] * 64
        self._by_piece: dict[Piece, int] = {}
        self._by_color: list[int] = [0, 0]

    # -- Element access -----------------------------------------------------

    def __getitem__(self, sq: Square) -> Piece | None:
        return self._slots[sq]

    def __setitem__(self, sq: Square, piece: Piece | None) -> None:
        previous = self._slots[sq]
        if previous == piece:
            return

        bit = 1 << sq
        if previous is not None:
            self._by_piece[previous] ^= bit
            self._by_color[previous.color] ^= bit
        if piece is not None:
            self._by_piece[piece] = self._by_piece.get(piece, 0) | bit
            self._by_color[piece.color] |= bit
        self._slots[sq] = piece

    def is_empty(self, sq: Square) -> bool:
        return self._slots[sq] is None

    def items(self) -> Iterator[tuple[Square, Piece]]:
        """Occupied squares with their pieces, a1 first."""
        for sq in iter_bits(self._by_color[0] | self._by_color[1]):
            yield sq, self._slots[sq]  # type: ignore[misc]

    # -- Query helpers ------------------------------------------------------

    def pieces_bitboard(self, color: Color, piece_type: PieceType) -> int:
        """Bitboard of squares occupied by *color*'s *piece_type*."""
        return self._by_piece.get(Piece(color, piece_type), 0)

    def pieces(self, color: Color, piece_type: PieceType) -> list[Square]:
        return list(iter_bits(self.pieces_bitboard(color, piece_type)))

    def has_piece(self, color: Color, piece_type: PieceType) -> bool:
        return self.pieces_bitboard(color, piece_type) != 0

    def all_pieces_bitboard(self, color: Color) -> int:
        """Occupancy mask of *color*."""
        return self._by_color[color]

    def all_pieces(self, color: Color) -> list[Square]:
        return list(iter_bits(self._by_color[color]))

    def king_count(self, color: Color) -> int:
        return self.pieces_bitboard(color, PieceType.KING).bit_count()

    def king_square(self, color: Color) -> Square:
        """Square of *color*'s king; the lowest one if there are several."""
        kings = self.pieces_bitboard(color, PieceType.KING)
        if not kings:
            raise InvalidPosition(f"No {color.name} king on board")
        return (kings & -kings).bit_length() - 1

    # -- Mutation / copying -------------------------------------------------

    def copy(self) -> Placement:
        clone = Placement.__new__(Placement)
        clone._slots = self._slots.copy()
        clone._by_piece = self._by_piece.copy()
        clone._by_color = self._by_color.copy()
        return clone

    def clear(self) -> None:
        self._slots = [None] * 64
        self._by_piece = {}
        self._by_color = [0, 0]

    # -- Factories ----------------------------------------------------------

    @classmethod
    def initial(cls) -> Placement:
        """Standard starting layout."""
        placement = cls()
        for file, piece_type in enumerate(_BACK_RANK):
            placement[make_square(file, 0)] = Piece(Color.WHITE, piece_type)
            placement[make_square(file, 1)] = Piece(Color.WHITE, PieceType.PAWN)
            placement[make_square(file, 6)] = Piece(Color.BLACK, PieceType.PAWN)
            placement[make_square(file, 7)] = Piece(Color.BLACK, piece_type)
        return placement

    @classmethod
    def from_mapping(cls, pieces: Mapping[Square, Piece]) -> Placement:
        """Build a placement from an explicit ``{square: piece}`` mapping."""
        placement = cls()
        for sq, piece in pieces.items():
            placement[check_square(sq)] = piece
        return placement

    # -- Dunder helpers -----------------------------------------------------

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Placement):
            return NotImplemented
        return self._slots == other._slots

    def __repr__(self) -> str:
        lines = []
        for rank in range(7, -1, -1):
            cells = (self._slots[make_square(file, rank)] for file in range(8))
            lines.append(f"{rank + 1} " + " ".join(str(p) if p else "." for p in cells))
        lines.append("  a b c d e f g h")
        return "\n".join(lines)
