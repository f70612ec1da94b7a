"""Board: complete game state (placement, side to move, castling, clocks)."""

from __future__ import annotations

from collections.abc import Mapping
from typing import TYPE_CHECKING

from chesscore.core.enums import CastlingRights, Color, MoveFlag, PieceType
from chesscore.core.errors import IllegalMove, InvalidPosition
from chesscore.core.move import Move
from chesscore.core.piece import Piece
from chesscore.core.placement import Placement
from chesscore.core.types import (
    Square,
    check_square,
    file_of,
    make_square,
    rank_of,
    square_name,
)

if TYPE_CHECKING:
    from chesscore.core.rules import Outcome

_ROOK_CORNERS: dict[Square, CastlingRights] = {
    make_square(0, 0): CastlingRights.WHITE_QUEENSIDE,
    make_square(7, 0): CastlingRights.WHITE_KINGSIDE,
    make_square(0, 7): CastlingRights.BLACK_QUEENSIDE,
    make_square(7, 7): CastlingRights.BLACK_KINGSIDE,
}
_PROMOTABLE: frozenset[PieceType] = frozenset(
    {PieceType.QUEEN, PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT}
)


class Board:
    """Full chess position: placement + side to move + castling + en passant + clocks.

    A board changes only through move application. :meth:`apply` validates the
    move and returns a new board; :meth:`apply_unchecked` skips validation and
    is meant for callers that generated the move themselves (the move
    generator and the search). Neither touches the original instance.
    """

    __slots__ = (
        "placement",
        "side_to_move",
        "castling",
        "en_passant",
        "halfmove_clock",
        "fullmove_number",
    )

    def __init__(
        self,
        placement: Placement | None = None,
        side_to_move: Color = Color.WHITE,
        castling: CastlingRights = CastlingRights.ALL,
        en_passant: Square | None = None,
        halfmove_clock: int = 0,
        fullmove_number: int = 1,
    ) -> None:
        self.placement = placement if placement is not None else Placement.initial()
        self.side_to_move = side_to_move
        self.castling = castling
        self.en_passant = en_passant
        self.halfmove_clock = halfmove_clock
        self.fullmove_number = fullmove_number

    # ── Construction ─────────────────────────────────────────────────────

    @classmethod
    def initial(cls) -> Board:
        """Standard starting position."""
        return cls()

    @classmethod
    def from_pieces(
        cls,
        pieces: Mapping[Square, Piece],
        side_to_move: Color = Color.WHITE,
        castling: CastlingRights = CastlingRights.NONE,
        en_passant: Square | None = None,
        halfmove_clock: int = 0,
        fullmove_number: int = 1,
    ) -> Board:
        """Explicit placement. The result is checked with :meth:`validate`."""
        board = cls(
            Placement.from_mapping(pieces),
            side_to_move,
            castling,
            en_passant,
            halfmove_clock,
            fullmove_number,
        )
        board.validate()
        return board

    def validate(self) -> None:
        """Raise :class:`InvalidPosition` for an impossible position.

        Each side needs exactly one king, the counters must be in range, and
        an en-passant target must sit on the square a double push just
        skipped: empty, on the third rank from the pusher's side, with the
        pushed pawn right behind it.
        """
        for color in Color:
            count = self.placement.king_count(color)
            if count != 1:
                raise InvalidPosition(
                    f"Expected exactly one {color.name} king, found {count}"
                )
        if self.halfmove_clock < 0 or self.fullmove_number < 1:
            raise InvalidPosition("Move counters out of range")
        if self.en_passant is not None:
            self._validate_en_passant(self.en_passant)

    def _validate_en_passant(self, ep: Square) -> None:
        check_square(ep)
        pusher = self.side_to_move.opposite
        if pusher == Color.WHITE:
            target_rank, pawn_sq = 2, ep + 8
        else:
            target_rank, pawn_sq = 5, ep - 8
        if rank_of(ep) != target_rank:
            raise InvalidPosition(
                f"En-passant square {square_name(ep)} is not on rank {target_rank + 1}"
            )
        if not self.placement.is_empty(ep):
            raise InvalidPosition(f"En-passant square {square_name(ep)} is occupied")
        if self.placement[pawn_sq] != Piece(pusher, PieceType.PAWN):
            raise InvalidPosition(
                f"No {pusher.name} pawn behind en-passant square {square_name(ep)}"
            )

    # ── Queries ──────────────────────────────────────────────────────────

    def piece_at(self, sq: Square) -> Piece | None:
        return self.placement[check_square(sq)]

    def king_square(self, color: Color) -> Square:
        return self.placement.king_square(color)

    def move_flag(self, move: Move) -> MoveFlag:
        """Classify *move* against this board (castle, en passant, ...)."""
        piece = self.placement[move.from_sq]
        if piece is None:
            return MoveFlag.NORMAL

        if piece.piece_type == PieceType.PAWN:
            to_rank = rank_of(move.to_sq)
            if to_rank in (0, 7):
                return MoveFlag.PROMOTION
            if abs(to_rank - rank_of(move.from_sq)) == 2:
                return MoveFlag.DOUBLE_PAWN
            if (
                file_of(move.to_sq) != file_of(move.from_sq)
                and move.to_sq == self.en_passant
                and self.placement.is_empty(move.to_sq)
            ):
                return MoveFlag.EN_PASSANT
            return MoveFlag.NORMAL

        if piece.piece_type == PieceType.KING:
            df = file_of(move.to_sq) - file_of(move.from_sq)
            if rank_of(move.to_sq) == rank_of(move.from_sq) and abs(df) == 2:
                return MoveFlag.CASTLE_KINGSIDE if df > 0 else MoveFlag.CASTLE_QUEENSIDE

        return MoveFlag.NORMAL

    def is_capture(self, move: Move) -> bool:
        if self.move_flag(move) == MoveFlag.EN_PASSANT:
            return True
        return self.placement[move.to_sq] is not None

    def is_in_check(self, color: Color | None = None) -> bool:
        """Is *color*'s king (default: side to move) attacked?"""
        from chesscore.core.move_generator import MoveGenerator

        return MoveGenerator(self).is_in_check(
            self.side_to_move if color is None else color
        )

    def legal_moves(self) -> list[Move]:
        from chesscore.core.move_generator import MoveGenerator

        return MoveGenerator(self).generate_legal_moves()

    def is_legal(
        self,
        move: Move,
        default_promotion: PieceType | None = PieceType.QUEEN,
    ) -> bool:
        """Would :meth:`apply` accept *move*? Promotions complete the same way."""
        return self._complete_promotion(move, default_promotion) in self.legal_moves()

    def outcome(self) -> Outcome:
        from chesscore.core.rules import classify

        return classify(self)

    @property
    def zobrist_hash(self) -> int:
        from chesscore.core.zobrist import board_key

        return board_key(self)

    # ── Move application ─────────────────────────────────────────────────

    def apply(
        self,
        move: Move,
        default_promotion: PieceType | None = PieceType.QUEEN,
    ) -> Board:
        """Validate *move* and return the resulting board.

        A pawn move onto the last rank without a promotion kind is completed
        with *default_promotion*; pass ``None`` to require an explicit kind.
        Raises :class:`IllegalMove` for anything outside :meth:`legal_moves`.
        """
        move = self._complete_promotion(move, default_promotion)
        legal = self.legal_moves()
        if move not in legal:
            raise IllegalMove(move, self._illegal_reason(move))
        return self.apply_unchecked(move)

    def apply_unchecked(self, move: Move) -> Board:
        """Return the board after *move* without any legality check."""
        board = self.copy()
        board._make_move(move)
        return board

    def _make_move(self, move: Move) -> None:
        flag = self.move_flag(move)
        placement = self.placement

        piece = placement[move.from_sq]
        if piece is None:
            raise IllegalMove(move, "no piece on the source square")

        captured = placement[move.to_sq]

        # En passant: the captured pawn sits behind the target square
        if flag == MoveFlag.EN_PASSANT:
            ep_capture_sq = make_square(file_of(move.to_sq), rank_of(move.from_sq))
            captured = placement[ep_capture_sq]
            placement[ep_capture_sq] = None

        placement[move.from_sq] = None

        placed_piece = piece
        if flag == MoveFlag.PROMOTION and move.promotion is not None:
            placed_piece = Piece(piece.color, move.promotion)
        placement[move.to_sq] = placed_piece

        # Slide the rook for castling
        if flag == MoveFlag.CASTLE_KINGSIDE:
            r = rank_of(move.from_sq)
            placement[make_square(5, r)] = placement[make_square(7, r)]
            placement[make_square(7, r)] = None
        elif flag == MoveFlag.CASTLE_QUEENSIDE:
            r = rank_of(move.from_sq)
            placement[make_square(3, r)] = placement[make_square(0, r)]
            placement[make_square(0, r)] = None

        # En passant target for the opponent
        self.en_passant = None
        if flag == MoveFlag.DOUBLE_PAWN:
            self.en_passant = make_square(
                file_of(move.from_sq),
                (rank_of(move.from_sq) + rank_of(move.to_sq)) // 2,
            )

        self._update_castling(move, piece)

        if piece.piece_type == PieceType.PAWN or captured is not None:
            self.halfmove_clock = 0
        else:
            self.halfmove_clock += 1

        if self.side_to_move == Color.BLACK:
            self.fullmove_number += 1
        self.side_to_move = self.side_to_move.opposite

    def _update_castling(self, move: Move, piece: Piece) -> None:
        castling = self.castling
        if not castling:
            return
        if piece.piece_type == PieceType.KING:
            if piece.color == Color.WHITE:
                castling &= ~CastlingRights.WHITE_BOTH
            else:
                castling &= ~CastlingRights.BLACK_BOTH

        # A rook leaving its corner, or being captured there
        for sq in (move.from_sq, move.to_sq):
            corner = _ROOK_CORNERS.get(sq)
            if corner is not None:
                castling &= ~corner

        self.castling = castling

    def _complete_promotion(
        self, move: Move, default_promotion: PieceType | None
    ) -> Move:
        if move.promotion is not None or default_promotion is None:
            return move
        piece = self.placement[move.from_sq]
        if (
            piece is not None
            and piece.piece_type == PieceType.PAWN
            and piece.color == self.side_to_move
            and rank_of(move.to_sq) == (7 if piece.color == Color.WHITE else 0)
        ):
            return Move(move.from_sq, move.to_sq, default_promotion)
        return move

    def _illegal_reason(self, move: Move) -> str:
        from chesscore.core.move_generator import MoveGenerator

        piece = self.placement[move.from_sq]
        if piece is None:
            return "no piece on the source square"
        if piece.color != self.side_to_move:
            return f"it is {self.side_to_move}'s turn"

        flag = self.move_flag(move)
        if move.promotion is not None:
            if flag != MoveFlag.PROMOTION:
                return "promotion is only allowed for a pawn reaching the last rank"
            if move.promotion not in _PROMOTABLE:
                return f"cannot promote to {move.promotion.name.lower()}"
        elif flag == MoveFlag.PROMOTION:
            return "promotion piece required"

        gen = MoveGenerator(self)
        if move in gen.generate_pseudo_legal_moves():
            return "leaves the king in check"
        if flag in (MoveFlag.CASTLE_KINGSIDE, MoveFlag.CASTLE_QUEENSIDE):
            return "castling is not available"
        return f"{piece.piece_type.name.lower()} cannot move that way"

    # ── Utilities ────────────────────────────────────────────────────────

    def copy(self) -> Board:
        return Board(
            placement=self.placement.copy(),
            side_to_move=self.side_to_move,
            castling=self.castling,
            en_passant=self.en_passant,
            halfmove_clock=self.halfmove_clock,
            fullmove_number=self.fullmove_number,
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return (
            self.placement == other.placement
            and self.side_to_move == other.side_to_move
            and self.castling == other.castling
            and self.en_passant == other.en_passant
            and self.halfmove_clock == other.halfmove_clock
            and self.fullmove_number == other.fullmove_number
        )

    def __str__(self) -> str:
        return repr(self.placement)

    def __repr__(self) -> str:
        from chesscore.core.notation import position_to_fen

        return f"Board({position_to_fen(self)!r})"
