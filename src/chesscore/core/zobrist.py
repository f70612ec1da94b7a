"""Zobrist keys identifying positions for repetition tracking."""

from __future__ import annotations

import random
from typing import TYPE_CHECKING, Final

from chesscore.core.enums import CastlingRights, Color, PieceType
from chesscore.core.move_generator import pawn_attackers
from chesscore.core.piece import Piece
from chesscore.core.types import Square, file_of

if TYPE_CHECKING:
    from chesscore.core.board import Board

# Fixed seed: keys must be identical across runs and processes.
_KEYGEN = random.Random(0x5EED_C4E55)

_PIECE_KEYS: Final[dict[Piece, tuple[int, ...]]] = {
    Piece(color, piece_type): tuple(_KEYGEN.getrandbits(64) for _ in range(64))
    for color in Color
    for piece_type in PieceType
}
_BLACK_TO_MOVE: Final = _KEYGEN.getrandbits(64)
_CASTLING_KEYS: Final[dict[CastlingRights, int]] = {
    right: _KEYGEN.getrandbits(64)
    for right in (
        CastlingRights.WHITE_KINGSIDE,
        CastlingRights.WHITE_QUEENSIDE,
        CastlingRights.BLACK_KINGSIDE,
        CastlingRights.BLACK_QUEENSIDE,
    )
}
_EN_PASSANT_FILE_KEYS: Final = tuple(_KEYGEN.getrandbits(64) for _ in range(8))

del _KEYGEN


def piece_key(piece: Piece, sq: Square) -> int:
    return _PIECE_KEYS[piece][sq]


def castling_key(castling: CastlingRights) -> int:
    """XOR of the keys of every right in *castling*."""
    key = 0
    for right, right_key in _CASTLING_KEYS.items():
        if castling & right:
            key ^= right_key
    return key


def en_passant_key(ep_square: Square) -> int:
    """Only the file matters: the rank follows from the side to move."""
    return _EN_PASSANT_FILE_KEYS[file_of(ep_square)]


def board_key(board: Board) -> int:
    """Key of placement, side to move, castling and en passant.

    The en-passant file counts only while a pawn of the side to move could
    capture onto the target. Clocks are not part of the key.
    """
    key = castling_key(board.castling)
    if board.side_to_move == Color.BLACK:
        key ^= _BLACK_TO_MOVE
    if board.en_passant is not None and _en_passant_capturable(board, board.en_passant):
        key ^= en_passant_key(board.en_passant)
    for sq, piece in board.placement.items():
        key ^= piece_key(piece, sq)
    return key


def _en_passant_capturable(board: Board, ep_square: Square) -> bool:
    color = board.side_to_move
    pawns = board.placement.pieces_bitboard(color, PieceType.PAWN)
    return bool(pawns & pawn_attackers(color, ep_square))
