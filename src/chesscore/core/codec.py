"""Fixed-size binary encoding of a full board state.

Layout (big-endian, 42 bytes)::

    magic     2s   b"CC"
    version   B    1
    squares   32s  two squares per byte, a1 first; low nibble = even square.
                   0 = empty, 1..6 = white P..K, 9..14 = black P..K
    side      B    0 = white, 1 = black
    castling  B    CastlingRights bits
    ep        B    en-passant square, 0xFF when unset
    halfmove  H
    fullmove  H
"""

from __future__ import annotations

import struct
from typing import Final

from chesscore.core.board import Board
from chesscore.core.enums import CastlingRights, Color, PieceType
from chesscore.core.errors import InvalidEncoding, InvalidPosition
from chesscore.core.piece import Piece
from chesscore.core.placement import Placement
from chesscore.core.types import is_valid_square, rank_of

MAGIC: Final = b"CC"
VERSION: Final = 1

_LAYOUT: Final = struct.Struct(">2sB32sBBBHH")
_NO_SQUARE: Final = 0xFF
_BLACK_BIT: Final = 0x8
_MAX_COUNTER: Final = 0xFFFF

ENCODED_SIZE: Final = _LAYOUT.size


def _piece_nibble(piece: Piece | None) -> int:
    if piece is None:
        return 0
    return int(piece.piece_type) | (_BLACK_BIT if piece.color == Color.BLACK else 0)


def _nibble_piece(nibble: int) -> Piece | None:
    if nibble == 0:
        return None
    kind = nibble & 0x7
    if not 1 <= kind <= 6:
        raise InvalidEncoding(f"Invalid piece code: {nibble:#x}")
    color = Color.BLACK if nibble & _BLACK_BIT else Color.WHITE
    return Piece(color, PieceType(kind))


def encode_board(board: Board) -> bytes:
    """Encode *board* into :data:`ENCODED_SIZE` bytes."""
    if board.halfmove_clock > _MAX_COUNTER or board.fullmove_number > _MAX_COUNTER:
        raise InvalidEncoding("Move counters do not fit the encoding")

    placement = board.placement
    squares = bytes(
        _piece_nibble(placement[sq]) | (_piece_nibble(placement[sq + 1]) << 4)
        for sq in range(0, 64, 2)
    )
    return _LAYOUT.pack(
        MAGIC,
        VERSION,
        squares,
        int(board.side_to_move),
        int(board.castling),
        _NO_SQUARE if board.en_passant is None else board.en_passant,
        board.halfmove_clock,
        board.fullmove_number,
    )


def decode_board(data: bytes) -> Board:
    """Decode bytes produced by :func:`encode_board`.

    Raises :class:`InvalidEncoding` for anything that is not a valid board.
    """
    if len(data) != _LAYOUT.size:
        raise InvalidEncoding(
            f"Expected {_LAYOUT.size} bytes, got {len(data)}"
        )
    magic, version, squares, side, castling, ep, halfmove, fullmove = _LAYOUT.unpack(
        data
    )
    if magic != MAGIC:
        raise InvalidEncoding(f"Bad magic: {magic!r}")
    if version != VERSION:
        raise InvalidEncoding(f"Unsupported encoding version: {version}")

    placement = Placement()
    for idx, byte in enumerate(squares):
        placement[idx * 2] = _nibble_piece(byte & 0xF)
        placement[idx * 2 + 1] = _nibble_piece(byte >> 4)

    if side not in (0, 1):
        raise InvalidEncoding(f"Invalid side to move: {side}")
    side_to_move = Color(side)

    if castling & ~int(CastlingRights.ALL):
        raise InvalidEncoding(f"Invalid castling bits: {castling:#x}")

    en_passant = None
    if ep != _NO_SQUARE:
        expected_rank = 5 if side_to_move == Color.WHITE else 2
        if not is_valid_square(ep) or rank_of(ep) != expected_rank:
            raise InvalidEncoding(f"Invalid en-passant square: {ep}")
        en_passant = ep

    board = Board(
        placement,
        side_to_move,
        CastlingRights(castling),
        en_passant,
        halfmove,
        fullmove,
    )
    try:
        board.validate()
    except InvalidPosition as exc:
        raise InvalidEncoding(str(exc)) from exc
    return board
