"""Tests for Board: construction, move application and its bookkeeping."""

import pytest

from chesscore.core.board import Board
from chesscore.core.codec import decode_board, encode_board
from chesscore.core.enums import CastlingRights, Color, MoveFlag, PieceType
from chesscore.core.errors import IllegalMove, InvalidPosition, InvalidSquare
from chesscore.core.move import Move
from chesscore.core.notation import STARTING_FEN, position_from_fen, position_to_fen
from chesscore.core.piece import Piece
from chesscore.core.types import (
    A1, A8, C1, C2, D1, D2, D3, D5, D6, D7, E1, E2, E3, E4, E5, E7, E8,
    F1, F3, F6, G1, G8, H1,
)

CASTLING_FEN = "r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1"
PROMOTION_FEN = "8/4P3/8/8/8/8/k7/4K3 w - - 0 1"


class TestBoardConstruction:
    def test_initial_matches_starting_fen(self) -> None:
        assert Board.initial() == position_from_fen(STARTING_FEN)

    def test_initial_state(self, start_board: Board) -> None:
        assert start_board.side_to_move == Color.WHITE
        assert start_board.castling == CastlingRights.ALL
        assert start_board.en_passant is None
        assert start_board.halfmove_clock == 0
        assert start_board.fullmove_number == 1

    def test_from_pieces(self) -> None:
        board = Board.from_pieces(
            {
                E1: Piece(Color.WHITE, PieceType.KING),
                E8: Piece(Color.BLACK, PieceType.KING),
                D1: Piece(Color.WHITE, PieceType.QUEEN),
            },
            side_to_move=Color.BLACK,
        )
        assert board.piece_at(D1) == Piece(Color.WHITE, PieceType.QUEEN)
        assert board.side_to_move == Color.BLACK
        assert board.castling == CastlingRights.NONE

    def test_from_pieces_requires_both_kings(self) -> None:
        with pytest.raises(InvalidPosition):
            Board.from_pieces({E1: Piece(Color.WHITE, PieceType.KING)})

    def test_from_pieces_rejects_two_kings(self) -> None:
        with pytest.raises(InvalidPosition):
            Board.from_pieces(
                {
                    E1: Piece(Color.WHITE, PieceType.KING),
                    H1: Piece(Color.WHITE, PieceType.KING),
                    E8: Piece(Color.BLACK, PieceType.KING),
                }
            )

    def test_from_pieces_rejects_en_passant_on_wrong_rank(self) -> None:
        with pytest.raises(InvalidPosition, match="not on rank 6"):
            Board.from_pieces(
                {
                    E1: Piece(Color.WHITE, PieceType.KING),
                    E8: Piece(Color.BLACK, PieceType.KING),
                    D2: Piece(Color.WHITE, PieceType.PAWN),
                    E2: Piece(Color.WHITE, PieceType.KNIGHT),
                },
                en_passant=E3,
            )

    def test_from_pieces_rejects_en_passant_without_pushed_pawn(self) -> None:
        with pytest.raises(InvalidPosition, match="No BLACK pawn"):
            Board.from_pieces(
                {
                    E1: Piece(Color.WHITE, PieceType.KING),
                    E8: Piece(Color.BLACK, PieceType.KING),
                    E5: Piece(Color.WHITE, PieceType.PAWN),
                },
                en_passant=D6,
            )

    def test_from_pieces_rejects_occupied_en_passant_square(self) -> None:
        with pytest.raises(InvalidPosition, match="occupied"):
            Board.from_pieces(
                {
                    E1: Piece(Color.WHITE, PieceType.KING),
                    E8: Piece(Color.BLACK, PieceType.KING),
                    D5: Piece(Color.BLACK, PieceType.PAWN),
                    D6: Piece(Color.BLACK, PieceType.KNIGHT),
                },
                en_passant=D6,
            )

    def test_from_pieces_en_passant_round_trips(self) -> None:
        board = Board.from_pieces(
            {
                E1: Piece(Color.WHITE, PieceType.KING),
                E8: Piece(Color.BLACK, PieceType.KING),
                E5: Piece(Color.WHITE, PieceType.PAWN),
                D5: Piece(Color.BLACK, PieceType.PAWN),
            },
            en_passant=D6,
        )
        assert Move(E5, D6) in board.legal_moves()
        assert decode_board(encode_board(board)) == board

    def test_piece_at_rejects_bad_square(self, start_board: Board) -> None:
        with pytest.raises(InvalidSquare):
            start_board.piece_at(64)

    def test_repr_contains_fen(self, start_board: Board) -> None:
        assert repr(start_board) == f"Board({STARTING_FEN!r})"

    def test_copy_is_equal_and_independent(self, start_board: Board) -> None:
        clone = start_board.copy()
        assert clone == start_board
        clone.placement[E2] = None
        assert clone != start_board
        assert start_board.piece_at(E2) is not None


class TestApply:
    def test_apply_returns_new_board(self, start_board: Board) -> None:
        after = start_board.apply(Move(E2, E4))
        assert after is not start_board
        assert start_board == Board.initial()
        assert after.piece_at(E4) == Piece(Color.WHITE, PieceType.PAWN)
        assert after.piece_at(E2) is None

    def test_double_push_sets_en_passant(self, start_board: Board) -> None:
        after = start_board.apply(Move(E2, E4))
        assert after.en_passant == E3
        assert after.side_to_move == Color.BLACK
        assert after.fullmove_number == 1

    def test_fullmove_increments_after_black(self, start_board: Board) -> None:
        after = start_board.apply(Move(E2, E4)).apply(Move(E7, E5))
        assert after.fullmove_number == 2
        assert after.en_passant is not None

    def test_en_passant_expires(self, start_board: Board) -> None:
        after = start_board.apply(Move(E2, E4)).apply(Move(G8, F6))
        assert after.en_passant is None

    def test_halfmove_clock(self, start_board: Board) -> None:
        after = start_board.apply(Move(G1, F3))
        assert after.halfmove_clock == 1
        after = after.apply(Move(D7, D5))
        assert after.halfmove_clock == 0

    def test_capture_resets_halfmove_clock(self) -> None:
        board = position_from_fen("4k3/8/8/3p4/8/4N3/8/4K3 w - - 7 20")
        assert board.apply(Move(E3, D5)).halfmove_clock == 0
        assert board.apply(Move(E3, C2)).halfmove_clock == 8

    def test_round_trip_fen_after_move(self, start_board: Board) -> None:
        after = start_board.apply(Move(E2, E4))
        assert position_to_fen(after) == (
            "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq e3 0 1"
        )

    def test_apply_unchecked_leaves_original(self, start_board: Board) -> None:
        after = start_board.apply_unchecked(Move(E2, E4))
        assert start_board.piece_at(E2) is not None
        assert after.piece_at(E4) is not None


class TestIllegalMoves:
    def test_empty_source(self, start_board: Board) -> None:
        with pytest.raises(IllegalMove, match="no piece on the source square"):
            start_board.apply(Move(E4, E5))

    def test_wrong_side(self, start_board: Board) -> None:
        with pytest.raises(IllegalMove, match="white's turn"):
            start_board.apply(Move(E7, E5))

    def test_bad_geometry(self, start_board: Board) -> None:
        with pytest.raises(IllegalMove, match="pawn cannot move that way"):
            start_board.apply(Move(E2, E5))

    def test_pinned_piece(self) -> None:
        board = position_from_fen("4k3/4r3/8/8/8/8/4B3/4K3 w - - 0 1")
        with pytest.raises(IllegalMove, match="leaves the king in check"):
            board.apply(Move(E2, D3))

    def test_error_carries_move(self, start_board: Board) -> None:
        move = Move(E2, E5)
        with pytest.raises(IllegalMove) as exc_info:
            start_board.apply(move)
        assert exc_info.value.move == move
        assert isinstance(exc_info.value, ValueError)

    def test_board_unchanged_after_rejection(self, start_board: Board) -> None:
        with pytest.raises(IllegalMove):
            start_board.apply(Move(E2, E5))
        assert start_board == Board.initial()


class TestCastling:
    def test_kingside(self) -> None:
        board = position_from_fen(CASTLING_FEN)
        assert board.move_flag(Move(E1, G1)) == MoveFlag.CASTLE_KINGSIDE
        after = board.apply(Move(E1, G1))
        assert after.piece_at(G1) == Piece(Color.WHITE, PieceType.KING)
        assert after.piece_at(F1) == Piece(Color.WHITE, PieceType.ROOK)
        assert after.piece_at(H1) is None
        assert after.castling == CastlingRights.BLACK_BOTH

    def test_queenside(self) -> None:
        board = position_from_fen(CASTLING_FEN)
        after = board.apply(Move(E1, C1))
        assert after.piece_at(C1) == Piece(Color.WHITE, PieceType.KING)
        assert after.piece_at(D1) == Piece(Color.WHITE, PieceType.ROOK)
        assert after.piece_at(A1) is None

    def test_through_attacked_square(self) -> None:
        board = position_from_fen("r3k2r/8/8/8/8/8/5r2/R3K2R w KQkq - 0 1")
        with pytest.raises(IllegalMove, match="castling is not available"):
            board.apply(Move(E1, G1))
        assert board.is_legal(Move(E1, C1))

    def test_out_of_check(self) -> None:
        board = position_from_fen("r3k2r/8/8/8/8/8/4r3/R3K2R w KQkq - 0 1")
        assert not board.is_legal(Move(E1, G1))
        assert not board.is_legal(Move(E1, C1))

    def test_without_rights(self) -> None:
        board = position_from_fen("r3k2r/8/8/8/8/8/8/R3K2R w kq - 0 1")
        assert not board.is_legal(Move(E1, G1))

    def test_king_move_drops_rights(self) -> None:
        board = position_from_fen(CASTLING_FEN).apply(Move(E1, D1))
        assert board.castling == CastlingRights.BLACK_BOTH

    def test_rook_move_drops_one_right(self) -> None:
        board = position_from_fen(CASTLING_FEN).apply(Move(H1, H1 + 8))
        assert board.castling == CastlingRights.ALL & ~CastlingRights.WHITE_KINGSIDE

    def test_capturing_rook_drops_rights(self) -> None:
        board = position_from_fen(CASTLING_FEN).apply(Move(A1, A8))
        assert board.castling == (
            CastlingRights.WHITE_KINGSIDE | CastlingRights.BLACK_KINGSIDE
        )


class TestEnPassant:
    def test_capture_removes_pawn(self) -> None:
        board = position_from_fen("4k3/8/8/3pP3/8/8/8/4K3 w - d6 0 1")
        move = Move(E5, D6)
        assert board.move_flag(move) == MoveFlag.EN_PASSANT
        assert board.is_capture(move)
        after = board.apply(move)
        assert after.piece_at(D6) == Piece(Color.WHITE, PieceType.PAWN)
        assert after.piece_at(D5) is None
        assert after.halfmove_clock == 0

    def test_only_right_after_double_push(self) -> None:
        board = position_from_fen("4k3/8/8/3pP3/8/8/8/4K3 w - - 0 1")
        assert not board.is_legal(Move(E5, D6))


class TestPromotion:
    def test_default_queen(self) -> None:
        after = position_from_fen(PROMOTION_FEN).apply(Move(E7, E8))
        assert after.piece_at(E8) == Piece(Color.WHITE, PieceType.QUEEN)

    def test_explicit_underpromotion(self) -> None:
        after = position_from_fen(PROMOTION_FEN).apply(Move(E7, E8, PieceType.KNIGHT))
        assert after.piece_at(E8) == Piece(Color.WHITE, PieceType.KNIGHT)

    def test_is_legal_agrees_with_apply(self) -> None:
        board = position_from_fen(PROMOTION_FEN)
        assert board.is_legal(Move(E7, E8))
        assert not board.is_legal(Move(E7, E8), default_promotion=None)
        assert board.is_legal(Move(E7, E8, PieceType.ROOK), default_promotion=None)

    def test_required_without_default(self) -> None:
        board = position_from_fen(PROMOTION_FEN)
        with pytest.raises(IllegalMove, match="promotion piece required"):
            board.apply(Move(E7, E8), default_promotion=None)

    def test_cannot_promote_to_king(self) -> None:
        board = position_from_fen(PROMOTION_FEN)
        with pytest.raises(IllegalMove, match="cannot promote to king"):
            board.apply(Move(E7, E8, PieceType.KING))

    def test_promotion_kind_on_normal_move(self, start_board: Board) -> None:
        with pytest.raises(IllegalMove, match="only allowed for a pawn"):
            start_board.apply(Move(E2, E4, PieceType.QUEEN))

    def test_all_four_kinds_generated(self) -> None:
        board = position_from_fen(PROMOTION_FEN)
        promotions = {m.promotion for m in board.legal_moves() if m.from_sq == E7}
        assert promotions == {
            PieceType.QUEEN, PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT,
        }

