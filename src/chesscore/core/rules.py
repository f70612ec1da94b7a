"""High-level chess rules: check, checkmate, stalemate and draw detection."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING, Final

from chesscore.core.enums import Color, DrawReason, OutcomeKind, PieceType
from chesscore.core.move_generator import MoveGenerator
from chesscore.core.types import file_of, rank_of

if TYPE_CHECKING:
    from chesscore.core.board import Board
    from chesscore.core.move import Move

FIFTY_MOVE_HALFMOVES: Final = 100  # 100 half-moves = 50 full moves


@dataclass(frozen=True, slots=True)
class Outcome:
    """Classification of a board.

    ``color`` is the side in check for CHECK and the defeated side for
    CHECKMATE; ``reason`` is set only for DRAW.
    """

    kind: OutcomeKind
    color: Color | None = None
    reason: DrawReason | None = None

    @classmethod
    def in_progress(cls) -> Outcome:
        return cls(OutcomeKind.IN_PROGRESS)

    @classmethod
    def check(cls, color: Color) -> Outcome:
        return cls(OutcomeKind.CHECK, color)

    @classmethod
    def checkmate(cls, color: Color) -> Outcome:
        return cls(OutcomeKind.CHECKMATE, color)

    @classmethod
    def stalemate(cls) -> Outcome:
        return cls(OutcomeKind.STALEMATE)

    @classmethod
    def draw(cls, reason: DrawReason) -> Outcome:
        return cls(OutcomeKind.DRAW, reason=reason)

    @property
    def is_terminal(self) -> bool:
        return self.kind in (
            OutcomeKind.CHECKMATE,
            OutcomeKind.STALEMATE,
            OutcomeKind.DRAW,
        )

    @property
    def winner(self) -> Color | None:
        if self.kind == OutcomeKind.CHECKMATE and self.color is not None:
            return self.color.opposite
        return None

    def __str__(self) -> str:
        if self.kind == OutcomeKind.DRAW and self.reason is not None:
            return f"draw ({self.reason.name.lower().replace('_', ' ')})"
        if self.color is not None:
            return f"{self.kind.name.lower()} ({self.color})"
        return self.kind.name.lower().replace("_", " ")


class Rules:
    """Static rule-checker that operates on a :class:`Board`."""

    # Automatic draws: fifty-move rule (half-move clock), insufficient material.
    # Repetition needs game history and lives in the game layer.

    @staticmethod
    def is_in_check(board: Board) -> bool:
        return MoveGenerator(board).is_in_check(board.side_to_move)

    @staticmethod
    def is_checkmate(board: Board) -> bool:
        gen = MoveGenerator(board)
        return gen.is_in_check(board.side_to_move) and not gen.has_legal_move()

    @staticmethod
    def is_stalemate(board: Board) -> bool:
        gen = MoveGenerator(board)
        return not gen.is_in_check(board.side_to_move) and not gen.has_legal_move()

    @staticmethod
    def is_insufficient_material(board: Board) -> bool:
        """K vs K, K+B vs K, K+N vs K, K+B vs K+B (same-color bishops)."""
        placement = board.placement
        white_occ = placement.all_pieces_bitboard(Color.WHITE)
        black_occ = placement.all_pieces_bitboard(Color.BLACK)
        total = (white_occ | black_occ).bit_count()

        # K vs K
        if total == 2:
            return True

        # K+minor vs K
        if total == 3:
            return any(
                placement.has_piece(color, pt)
                for color in Color
                for pt in (PieceType.KNIGHT, PieceType.BISHOP)
            )

        # K+B vs K+B with same-colour bishops
        if total == 4:
            wb = placement.pieces_bitboard(Color.WHITE, PieceType.BISHOP)
            bb = placement.pieces_bitboard(Color.BLACK, PieceType.BISHOP)
            if wb.bit_count() == 1 and bb.bit_count() == 1:
                w_sq = wb.bit_length() - 1
                b_sq = bb.bit_length() - 1
                w_color = (file_of(w_sq) + rank_of(w_sq)) % 2
                b_color = (file_of(b_sq) + rank_of(b_sq)) % 2
                return w_color == b_color

        return False

    @staticmethod
    def is_fifty_move_rule(board: Board) -> bool:
        return board.halfmove_clock >= FIFTY_MOVE_HALFMOVES

    @staticmethod
    def draw_reason(board: Board) -> DrawReason | None:
        """Automatic draw reason for *board*, if any."""
        if Rules.is_fifty_move_rule(board):
            return DrawReason.FIFTY_MOVE_RULE
        if Rules.is_insufficient_material(board):
            return DrawReason.INSUFFICIENT_MATERIAL
        return None

    @staticmethod
    def outcome(board: Board, legal_moves: Sequence[Move] | None = None) -> Outcome:
        """Classify *board*.

        Checkmate and stalemate win over the draw rules. Pass *legal_moves*
        when the caller already generated them.
        """
        gen = MoveGenerator(board)
        side = board.side_to_move
        in_check = gen.is_in_check(side)
        if legal_moves is not None:
            has_moves = bool(legal_moves)
        else:
            has_moves = gen.has_legal_move()

        if not has_moves:
            return Outcome.checkmate(side) if in_check else Outcome.stalemate()

        reason = Rules.draw_reason(board)
        if reason is not None:
            return Outcome.draw(reason)

        return Outcome.check(side) if in_check else Outcome.in_progress()


def classify(board: Board, legal_moves: Sequence[Move] | None = None) -> Outcome:
    """Derive the :class:`Outcome` of *board*."""
    return Rules.outcome(board, legal_moves)
