"""Legal and pseudo-legal move generation + attack detection.

Movement is table driven. For every square each piece kind owns a tuple of
rays; a leaper's ray holds one square, a slider's runs to the edge. Legality
is decided by make-then-test: each pseudo-legal move is applied to a scratch
copy of the board and dropped if the mover's king is attacked afterwards.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, NamedTuple

from chesscore.core.enums import CastlingRights, Color, PieceType
from chesscore.core.move import Move
from chesscore.core.piece import Piece
from chesscore.core.placement import iter_bits
from chesscore.core.types import Square, file_of, rank_of

if TYPE_CHECKING:
    from chesscore.core.board import Board

Rays = tuple[tuple[Square, ...], ...]

_STEPS = (-1, 0, 1)
KING_OFFSETS: tuple[tuple[int, int], ...] = tuple(
    (df, dr) for df in _STEPS for dr in _STEPS if df or dr
)
KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = tuple(
    (df, dr) for df in (-2, -1, 1, 2) for dr in (-2, -1, 1, 2) if abs(df) != abs(dr)
)
BISHOP_DIRS: tuple[tuple[int, int], ...] = tuple(
    (df, dr) for df, dr in KING_OFFSETS if df and dr
)
ROOK_DIRS: tuple[tuple[int, int], ...] = tuple(
    (df, dr) for df, dr in KING_OFFSETS if not (df and dr)
)

PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)


def _rays(directions: tuple[tuple[int, int], ...], reach: int) -> tuple[Rays, ...]:
    """[sq] -> one ray per direction, at most *reach* squares long."""
    table: list[Rays] = []
    for sq in range(64):
        square_rays: list[tuple[Square, ...]] = []
        for df, dr in directions:
            file_idx, rank_idx = file_of(sq) + df, rank_of(sq) + dr
            ray: list[Square] = []
            while 0 <= file_idx < 8 and 0 <= rank_idx < 8 and len(ray) < reach:
                ray.append(rank_idx * 8 + file_idx)
                file_idx += df
                rank_idx += dr
            if ray:
                square_rays.append(tuple(ray))
        table.append(tuple(square_rays))
    return tuple(table)


def _reach_mask(rays: Rays) -> int:
    mask = 0
    for ray in rays:
        for sq in ray:
            mask |= 1 << sq
    return mask


_PIECE_RAYS: dict[PieceType, tuple[Rays, ...]] = {
    PieceType.KNIGHT: _rays(KNIGHT_OFFSETS, 1),
    PieceType.BISHOP: _rays(BISHOP_DIRS, 7),
    PieceType.ROOK: _rays(ROOK_DIRS, 7),
    PieceType.QUEEN: _rays(KING_OFFSETS, 7),
    PieceType.KING: _rays(KING_OFFSETS, 1),
}
_KNIGHT_REACH = tuple(_reach_mask(r) for r in _PIECE_RAYS[PieceType.KNIGHT])
_KING_REACH = tuple(_reach_mask(r) for r in _PIECE_RAYS[PieceType.KING])


class _PawnGeometry(NamedTuple):
    step: int
    start_rank: int
    last_rank: int
    # Squares a pawn of this color would have to stand on to hit [sq].
    attacker_masks: tuple[int, ...]


def _pawn_geometry(color: Color) -> _PawnGeometry:
    forward = 1 if color == Color.WHITE else -1
    masks: list[int] = []
    for sq in range(64):
        rank_idx = rank_of(sq) - forward
        mask = 0
        for file_idx in (file_of(sq) - 1, file_of(sq) + 1):
            if 0 <= file_idx < 8 and 0 <= rank_idx < 8:
                mask |= 1 << (rank_idx * 8 + file_idx)
        masks.append(mask)
    return _PawnGeometry(
        step=8 * forward,
        start_rank=1 if forward > 0 else 6,
        last_rank=7 if forward > 0 else 0,
        attacker_masks=tuple(masks),
    )


_PAWNS = {color: _pawn_geometry(color) for color in Color}


class _CastlePath(NamedTuple):
    right: CastlingRights
    king_from: Square
    king_to: Square
    rook_from: Square
    must_be_empty: tuple[Square, ...]
    must_be_safe: tuple[Square, ...]


def _castle_paths(color: Color) -> tuple[_CastlePath, _CastlePath]:
    base = 0 if color == Color.WHITE else 56
    kingside, queenside = (
        (CastlingRights.WHITE_KINGSIDE, CastlingRights.WHITE_QUEENSIDE)
        if color == Color.WHITE
        else (CastlingRights.BLACK_KINGSIDE, CastlingRights.BLACK_QUEENSIDE)
    )
    return (
        _CastlePath(
            right=kingside,
            king_from=base + 4,
            king_to=base + 6,
            rook_from=base + 7,
            must_be_empty=(base + 5, base + 6),
            must_be_safe=(base + 5, base + 6),
        ),
        _CastlePath(
            right=queenside,
            king_from=base + 4,
            king_to=base + 2,
            rook_from=base,
            must_be_empty=(base + 1, base + 2, base + 3),
            must_be_safe=(base + 3, base + 2),
        ),
    )


_CASTLE_PATHS = {color: _castle_paths(color) for color in Color}

# Generation order; keeps move lists reproducible.
_SCAN_ORDER: tuple[PieceType, ...] = tuple(PieceType)


class MoveGenerator:
    """Generates moves for a given :class:`~chesscore.core.board.Board`.

    The board is never mutated: legality is tested on scratch copies.
    """

    __slots__ = ("_board", "_placement")

    def __init__(self, board: Board) -> None:
        self._board = board
        self._placement = board.placement

    # -- Public API ---------------------------------------------------------

    def generate_legal_moves(self) -> list[Move]:
        """All strictly legal moves for the side to move, in scan order."""
        return [m for m in self.generate_pseudo_legal_moves() if self._keeps_king_safe(m)]

    def has_legal_move(self) -> bool:
        return any(map(self._keeps_king_safe, self.generate_pseudo_legal_moves()))

    def generate_pseudo_legal_moves(self) -> list[Move]:
        """All pseudo-legal moves (may leave own king in check)."""
        color = self._board.side_to_move
        moves: list[Move] = []
        for piece_type in _SCAN_ORDER:
            for sq in iter_bits(self._placement.pieces_bitboard(color, piece_type)):
                if piece_type == PieceType.PAWN:
                    self._gen_pawn(sq, color, moves)
                    continue
                self._gen_rays(sq, color, _PIECE_RAYS[piece_type][sq], moves)
                if piece_type == PieceType.KING:
                    self._gen_castling(sq, color, moves)
        return moves

    # -- Attack detection ---------------------------------------------------

    def is_in_check(self, color: Color) -> bool:
        """Is *color*'s king attacked by the opponent?"""
        return self.is_square_attacked(self._placement.king_square(color), color.opposite)

    def is_square_attacked(self, sq: Square, by_color: Color) -> bool:
        """Is *sq* attacked by any piece of *by_color*?"""
        bitboard = self._placement.pieces_bitboard
        if bitboard(by_color, PieceType.PAWN) & pawn_attackers(by_color, sq):
            return True
        if bitboard(by_color, PieceType.KNIGHT) & _KNIGHT_REACH[sq]:
            return True
        if bitboard(by_color, PieceType.KING) & _KING_REACH[sq]:
            return True

        queens = bitboard(by_color, PieceType.QUEEN)
        return self._slider_hits(
            _PIECE_RAYS[PieceType.BISHOP][sq],
            bitboard(by_color, PieceType.BISHOP) | queens,
        ) or self._slider_hits(
            _PIECE_RAYS[PieceType.ROOK][sq],
            bitboard(by_color, PieceType.ROOK) | queens,
        )

    def _slider_hits(self, rays: Rays, attackers: int) -> bool:
        """Does the first piece met along any of *rays* belong to *attackers*?"""
        if not attackers:
            return False
        placement = self._placement
        for ray in rays:
            for sq in ray:
                if not placement.is_empty(sq):
                    if attackers >> sq & 1:
                        return True
                    break
        return False

    # -- Legality filter ----------------------------------------------------

    def _keeps_king_safe(self, move: Move) -> bool:
        mover = self._board.side_to_move
        return not MoveGenerator(self._board.apply_unchecked(move)).is_in_check(mover)

    # -- Piece-specific generators -----------------------------------------

    def _gen_pawn(self, sq: Square, color: Color, moves: list[Move]) -> None:
        placement = self._placement
        geometry = _PAWNS[color]
        ahead = sq + geometry.step
        if not 0 <= ahead < 64:
            return
        promotes = rank_of(ahead) == geometry.last_rank

        if placement.is_empty(ahead):
            _add_pawn_move(sq, ahead, promotes, moves)
            jump = ahead + geometry.step
            if rank_of(sq) == geometry.start_rank and placement.is_empty(jump):
                moves.append(Move(sq, jump))

        for file_idx in (file_of(sq) - 1, file_of(sq) + 1):
            if not 0 <= file_idx < 8:
                continue
            target_sq = rank_of(ahead) * 8 + file_idx
            target = placement[target_sq]
            if target is None:
                if target_sq == self._board.en_passant:
                    moves.append(Move(sq, target_sq))
            elif target.color != color:
                _add_pawn_move(sq, target_sq, promotes, moves)

    def _gen_rays(self, sq: Square, color: Color, rays: Rays, moves: list[Move]) -> None:
        placement = self._placement
        for ray in rays:
            for to_sq in ray:
                target = placement[to_sq]
                if target is None or target.color != color:
                    moves.append(Move(sq, to_sq))
                if target is not None:
                    break

    def _gen_castling(self, king_sq: Square, color: Color, moves: list[Move]) -> None:
        rights = self._board.castling
        paths = _CASTLE_PATHS[color]
        if king_sq != paths[0].king_from or not any(rights & p.right for p in paths):
            return
        if self.is_in_check(color):
            return

        placement = self._placement
        rook = Piece(color, PieceType.ROOK)
        for path in paths:
            if (
                rights & path.right
                and placement[path.rook_from] == rook
                and all(placement.is_empty(s) for s in path.must_be_empty)
                and not any(
                    self.is_square_attacked(s, color.opposite) for s in path.must_be_safe
                )
            ):
                moves.append(Move(king_sq, path.king_to))


def _add_pawn_move(
    from_sq: Square, to_sq: Square, promotes: bool, moves: list[Move]
) -> None:
    if promotes:
        moves.extend(Move(from_sq, to_sq, pt) for pt in PROMOTION_TYPES)
    else:
        moves.append(Move(from_sq, to_sq))


def legal_moves(board: Board) -> list[Move]:
    """Shorthand for ``MoveGenerator(board).generate_legal_moves()``."""
    return MoveGenerator(board).generate_legal_moves()


def pawn_attackers(color: Color, sq: Square) -> int:
    """Mask of squares from which a *color* pawn attacks *sq*."""
    return _PAWNS[color].attacker_masks[sq]
