"""Tests for Rules and classify: check, checkmate, stalemate, draws."""

from chesscore.core.board import Board
from chesscore.core.enums import Color, DrawReason, OutcomeKind
from chesscore.core.move import parse_move
from chesscore.core.notation import position_from_fen
from chesscore.core.rules import Outcome, Rules, classify


class TestCheck:
    def test_starting_not_in_check(self, start_board: Board) -> None:
        assert not Rules.is_in_check(start_board)
        assert classify(start_board) == Outcome.in_progress()

    def test_check_outcome(self) -> None:
        board = position_from_fen("4k3/8/8/8/8/8/4r3/4K3 w - - 0 1")
        assert classify(board) == Outcome.check(Color.WHITE)
        assert not classify(board).is_terminal


class TestCheckmate:
    def test_fools_mate_by_moves(self, start_board: Board) -> None:
        board = start_board
        for text in ("f2f3", "e7e5", "g2g4", "d8h4"):
            board = board.apply(parse_move(text))
        outcome = classify(board)
        assert outcome == Outcome.checkmate(Color.WHITE)
        assert outcome.winner == Color.BLACK
        assert outcome.is_terminal

    def test_fools_mate_fen(self, fools_mate_board: Board) -> None:
        assert Rules.is_checkmate(fools_mate_board)
        assert fools_mate_board.outcome().kind == OutcomeKind.CHECKMATE

    def test_back_rank_mate(self) -> None:
        board = position_from_fen("R2k4/8/3K4/8/8/8/8/8 b - - 0 1")
        assert classify(board) == Outcome.checkmate(Color.BLACK)

    def test_not_checkmate_when_can_escape(self) -> None:
        board = position_from_fen("4k3/8/8/8/8/8/8/r3K3 w - - 0 1")
        assert not Rules.is_checkmate(board)

    def test_checkmate_beats_fifty_move_rule(self) -> None:
        board = position_from_fen("R2k4/8/3K4/8/8/8/8/8 b - - 120 90")
        assert classify(board).kind == OutcomeKind.CHECKMATE


class TestStalemate:
    def test_king_trapped(self) -> None:
        board = position_from_fen("7k/8/5KQ1/8/8/8/8/8 b - - 0 1")
        assert Rules.is_stalemate(board)
        assert classify(board) == Outcome.stalemate()
        assert classify(board).winner is None

    def test_not_stalemate_when_has_moves(self) -> None:
        board = position_from_fen("7k/8/5K2/8/8/8/8/8 b - - 0 1")
        assert not Rules.is_stalemate(board)

    def test_stalemate_beats_insufficient_material(self) -> None:
        # Lone kings cannot be stalemated; bishop blocks the escape squares.
        board = position_from_fen("k7/2K5/1B6/8/8/8/8/8 b - - 0 1")
        assert classify(board).kind == OutcomeKind.STALEMATE


class TestInsufficientMaterial:
    def test_k_vs_k(self) -> None:
        board = position_from_fen("8/8/4k3/8/8/4K3/8/8 w - - 0 1")
        assert Rules.is_insufficient_material(board)
        assert classify(board) == Outcome.draw(DrawReason.INSUFFICIENT_MATERIAL)

    def test_k_bishop_vs_k(self) -> None:
        board = position_from_fen("8/8/4k3/8/8/4K3/3B4/8 w - - 0 1")
        assert Rules.is_insufficient_material(board)

    def test_k_knight_vs_k(self) -> None:
        board = position_from_fen("8/8/4k3/8/8/4K3/3N4/8 w - - 0 1")
        assert Rules.is_insufficient_material(board)

    def test_same_colour_bishops(self) -> None:
        board = position_from_fen("8/8/4k3/4b3/8/4K3/3B4/8 w - - 0 1")
        assert Rules.is_insufficient_material(board)

    def test_opposite_colour_bishops_sufficient(self) -> None:
        board = position_from_fen("8/8/4k3/3b4/8/4K3/3B4/8 w - - 0 1")
        assert not Rules.is_insufficient_material(board)

    def test_k_rook_vs_k_sufficient(self) -> None:
        board = position_from_fen("8/8/4k3/8/8/4K3/3R4/8 w - - 0 1")
        assert not Rules.is_insufficient_material(board)

    def test_kp_vs_k_sufficient(self) -> None:
        board = position_from_fen("8/8/4k3/8/4P3/4K3/8/8 w - - 0 1")
        assert not Rules.is_insufficient_material(board)


class TestFiftyMoveRule:
    def test_not_triggered_at_99(self) -> None:
        board = position_from_fen("4k3/8/8/8/8/8/4K2R/8 w - - 99 60")
        assert not Rules.is_fifty_move_rule(board)
        assert classify(board) == Outcome.in_progress()

    def test_triggered_at_100_halfmoves(self) -> None:
        board = position_from_fen("4k3/8/8/8/8/8/4K2R/8 w - - 100 60")
        assert Rules.is_fifty_move_rule(board)
        assert classify(board) == Outcome.draw(DrawReason.FIFTY_MOVE_RULE)

    def test_reached_by_quiet_move(self) -> None:
        board = position_from_fen("4k3/8/8/8/8/8/4K2R/8 w - - 99 60")
        after = board.apply(parse_move("h2h3"))
        assert classify(after).reason == DrawReason.FIFTY_MOVE_RULE


class TestOutcomeDisplay:
    def test_str(self) -> None:
        assert str(Outcome.checkmate(Color.WHITE)) == "checkmate (white)"
        assert str(Outcome.draw(DrawReason.FIFTY_MOVE_RULE)) == "draw (fifty move rule)"
        assert str(Outcome.in_progress()) == "in progress"

    def test_precomputed_legal_moves(self, fools_mate_board: Board) -> None:
        assert classify(fools_mate_board, []) == Outcome.checkmate(Color.WHITE)
