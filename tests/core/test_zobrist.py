"""Tests for Zobrist position keys."""

from chesscore.core.board import Board
from chesscore.core.move import parse_move
from chesscore.core.notation import position_from_fen


def _play(board: Board, *moves: str) -> Board:
    for text in moves:
        board = board.apply(parse_move(text))
    return board


class TestBoardKey:
    def test_deterministic(self, start_board: Board) -> None:
        assert start_board.zobrist_hash == Board.initial().zobrist_hash

    def test_transposition_same_key(self, start_board: Board) -> None:
        a = _play(start_board, "g1f3", "g8f6", "b1c3")
        b = _play(start_board, "b1c3", "g8f6", "g1f3")
        assert a.zobrist_hash == b.zobrist_hash

    def test_side_to_move_matters(self) -> None:
        white = position_from_fen("4k3/8/8/8/8/8/8/4K3 w - - 0 1")
        black = position_from_fen("4k3/8/8/8/8/8/8/4K3 b - - 0 1")
        assert white.zobrist_hash != black.zobrist_hash

    def test_castling_matters(self) -> None:
        full = position_from_fen("r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1")
        partial = position_from_fen("r3k2r/8/8/8/8/8/8/R3K2R w Kkq - 0 1")
        assert full.zobrist_hash != partial.zobrist_hash

    def test_en_passant_matters(self) -> None:
        with_ep = position_from_fen("4k3/8/8/3pP3/8/8/8/4K3 w - d6 0 1")
        without = position_from_fen("4k3/8/8/3pP3/8/8/8/4K3 w - - 0 1")
        assert with_ep.zobrist_hash != without.zobrist_hash

    def test_clocks_ignored(self) -> None:
        a = position_from_fen("4k3/8/8/8/8/8/8/4K3 w - - 0 1")
        b = position_from_fen("4k3/8/8/8/8/8/8/4K3 w - - 40 70")
        assert a.zobrist_hash == b.zobrist_hash

    def test_unusable_en_passant_ignored(self, start_board: Board) -> None:
        after_push = _play(start_board, "e2e4")
        assert after_push.en_passant is not None
        plain = position_from_fen(
            "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - 0 1"
        )
        assert after_push.zobrist_hash == plain.zobrist_hash
