"""Static evaluation: material plus piece-square bonuses, mate-aware."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final

from chesscore.core.enums import Color, OutcomeKind, PieceType
from chesscore.core.rules import Outcome, classify
from chesscore.core.types import Square, file_of, rank_of

if TYPE_CHECKING:
    from chesscore.core.board import Board

MATE_SCORE: Final = 100_000
MAX_PLY: Final = 1_000
DRAW_SCORE: Final = 0


def evaluate(
    board: Board,
    perspective: Color,
    ply: int = 0,
    outcome: Outcome | None = None,
) -> int:
    """Score *board* in centipawns from *perspective*'s point of view.

    Checkmates score ``±(MATE_SCORE - ply)`` so that a mate found at a lower
    ply is preferred by the winner and postponed by the loser. Stalemate and
    draws score :data:`DRAW_SCORE`.
    """
    if outcome is None:
        outcome = classify(board)

    if outcome.kind == OutcomeKind.CHECKMATE:
        if outcome.color == perspective:
            return -MATE_SCORE + ply
        return MATE_SCORE - ply
    if outcome.kind in (OutcomeKind.STALEMATE, OutcomeKind.DRAW):
        return DRAW_SCORE

    score = static_score(board)
    return score if perspective == Color.WHITE else -score


def static_score(board: Board) -> int:
    """White-minus-black material and placement score, ignoring game state."""
    white_score = 0
    black_score = 0
    for sq, piece in board.placement.items():
        val = piece.value + piece_square_bonus(piece.piece_type, piece.color, sq)
        if piece.color == Color.WHITE:
            white_score += val
        else:
            black_score += val
    return white_score - black_score


def material(board: Board, color: Color) -> int:
    """Sum of *color*'s piece values."""
    return sum(
        piece.value for _, piece in board.placement.items() if piece.color == color
    )


def is_mate_score(score: int) -> bool:
    return abs(score) >= MATE_SCORE - MAX_PLY


def piece_square_bonus(piece_type: PieceType, color: Color, sq: Square) -> int:
    """Positional bonus of *piece_type* on *sq*, mirrored for black."""
    file_idx = file_of(sq)
    rank_idx = rank_of(sq)
    if color == Color.BLACK:
        rank_idx = 7 - rank_idx

    center_dist = abs(file_idx - 3) + abs(rank_idx - 3)

    if piece_type == PieceType.PAWN:
        return rank_idx * 12 - abs(file_idx - 3) * 2
    if piece_type == PieceType.KNIGHT:
        return 28 - center_dist * 8
    if piece_type == PieceType.BISHOP:
        return 22 - center_dist * 5 + rank_idx * 2
    if piece_type == PieceType.ROOK:
        return 10 + rank_idx * 3 - abs(file_idx - 3)
    if piece_type == PieceType.QUEEN:
        return 6 - center_dist * 2

    # King: stay home behind the pawns.
    if rank_idx <= 1:
        return 18 - abs(file_idx - 4) * 2
    return -rank_idx * 8
