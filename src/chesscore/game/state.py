"""Game state: validated moves, history, resignation and repetition."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import IntEnum, auto
from typing import TYPE_CHECKING

from chesscore.core.board import Board
from chesscore.core.enums import Color, DrawReason, MoveFlag, OutcomeKind, PieceType
from chesscore.core.errors import ChessError, IllegalMove, InvalidMoveText
from chesscore.core.move import Move, parse_move
from chesscore.core.notation import STARTING_FEN, position_from_fen, position_to_fen
from chesscore.core.rules import Outcome, classify

if TYPE_CHECKING:
    from chesscore.engine.search import IEngine, SearchLimits

_LOGGER = logging.getLogger(__name__)

THREEFOLD: int = 3
FIVEFOLD: int = 5


class GamePhase(IntEnum):
    """Lifecycle states of a game."""

    NOT_STARTED = auto()
    AWAITING_MOVE = auto()
    GAME_OVER = auto()


class GameResult(IntEnum):
    """Final result of a game."""

    IN_PROGRESS = 0
    WHITE_WINS = 1
    BLACK_WINS = 2
    DRAW = 3


class GameOver(ChessError):
    """A move was submitted to a finished game."""


@dataclass
class MoveRecord:
    """A single entry in the move history."""

    move: Move
    flag: MoveFlag
    board_before: Board
    was_check: bool = False
    was_capture: bool = False


@dataclass
class GameState:
    """A game in progress: current board plus everything the board alone
    cannot know (history, repetitions, resignation, claimed draws).

    Pure data and logic; no threading and no I/O.
    """

    board: Board = field(default_factory=Board.initial, init=False)
    phase: GamePhase = field(default=GamePhase.NOT_STARTED, init=False)
    result: GameResult = field(default=GameResult.IN_PROGRESS, init=False)
    end_outcome: Outcome | None = field(default=None, init=False)
    move_history: list[MoveRecord] = field(default_factory=list, init=False)
    start_fen: str = field(default=STARTING_FEN, init=False)
    default_promotion: PieceType | None = PieceType.QUEEN
    _key_counts: dict[int, int] = field(default_factory=dict, init=False, repr=False)

    # ── Initialisation ───────────────────────────────────────────────────

    def setup(self, fen: str | None = None, board: Board | None = None) -> None:
        """Initialise (or reset) the game from *fen*, *board* or the start."""
        if board is not None:
            board.validate()
            self.board = board.copy()
            self.start_fen = position_to_fen(board)
        else:
            self.start_fen = fen or STARTING_FEN
            self.board = position_from_fen(self.start_fen)
        self.phase = GamePhase.AWAITING_MOVE
        self.result = GameResult.IN_PROGRESS
        self.end_outcome = None
        self.move_history.clear()
        self._key_counts = {self.board.zobrist_hash: 1}
        self._check_game_over()

    # ── Move application ─────────────────────────────────────────────────

    def play(self, move: Move | str) -> MoveRecord:
        """Validate and apply *move* (a :class:`Move` or move text).

        Raises :class:`GameOver`, :class:`InvalidMoveText` or
        :class:`IllegalMove`; the game is unchanged on error.
        """
        if self.phase == GamePhase.NOT_STARTED:
            self.setup()
        if self.is_game_over:
            raise GameOver(f"Game is over: {self.outcome}")

        before = self.board
        if isinstance(move, str):
            try:
                move = parse_move(move, before)
            except InvalidMoveText:
                _LOGGER.warning("rejected move text %r", move)
                raise
        try:
            after = before.apply(move, default_promotion=self.default_promotion)
        except IllegalMove as exc:
            _LOGGER.warning("rejected %s: %s", exc.move, exc.reason)
            raise

        if move.promotion is None and before.move_flag(move) == MoveFlag.PROMOTION:
            move = Move(move.from_sq, move.to_sq, self.default_promotion)

        record = MoveRecord(
            move=move,
            flag=before.move_flag(move),
            board_before=before,
            was_check=after.is_in_check(),
            was_capture=before.is_capture(move),
        )
        self.board = after
        self.move_history.append(record)
        key = after.zobrist_hash
        self._key_counts[key] = self._key_counts.get(key, 0) + 1

        self._check_game_over()
        return record

    def play_engine_move(
        self,
        engine: IEngine,
        limits: SearchLimits,
    ) -> MoveRecord:
        """Ask *engine* for a move in the current position and play it."""
        if self.is_game_over:
            raise GameOver(f"Game is over: {self.outcome}")
        result = engine.search(self.board, limits)
        return self.play(result.best_move)

    def undo(self) -> Move | None:
        """Take back the last move. Returns it, or None if there is none."""
        if not self.move_history:
            return None

        record = self.move_history.pop()
        key = self.board.zobrist_hash
        remaining = self._key_counts[key] - 1
        if remaining:
            self._key_counts[key] = remaining
        else:
            del self._key_counts[key]
        self.board = record.board_before

        self.result = GameResult.IN_PROGRESS
        self.end_outcome = None
        self.phase = GamePhase.AWAITING_MOVE
        self._check_game_over()
        return record.move

    # ── Resignation / draw ───────────────────────────────────────────────

    def resign(self, color: Color) -> None:
        if self.is_game_over:
            raise GameOver(f"Game is over: {self.outcome}")
        self._finish(
            GameResult.BLACK_WINS if color == Color.WHITE else GameResult.WHITE_WINS,
            None,
        )
        _LOGGER.info("%s resigned", color)

    def claim_draw(self) -> bool:
        """Claim a draw by threefold repetition. Returns whether it was granted."""
        if self.is_game_over or self.repetition_count() < THREEFOLD:
            return False
        self._finish(GameResult.DRAW, Outcome.draw(DrawReason.REPETITION))
        return True

    # ── Query helpers ────────────────────────────────────────────────────

    @property
    def side_to_move(self) -> Color:
        return self.board.side_to_move

    @property
    def is_game_over(self) -> bool:
        return self.phase == GamePhase.GAME_OVER

    @property
    def ply_count(self) -> int:
        """Number of half-moves played."""
        return len(self.move_history)

    @property
    def outcome(self) -> Outcome:
        """Outcome of the current position, including history-based draws."""
        if self.end_outcome is not None:
            return self.end_outcome
        if self.repetition_count() >= FIVEFOLD:
            return Outcome.draw(DrawReason.REPETITION)
        return classify(self.board)

    def repetition_count(self) -> int:
        """How many times the current position occurred in this game."""
        return self._key_counts.get(self.board.zobrist_hash, 0)

    def legal_moves(self) -> list[Move]:
        """Legal moves in the current position."""
        if self.is_game_over:
            return []
        return self.board.legal_moves()

    # ── Internal ─────────────────────────────────────────────────────────

    def _check_game_over(self) -> None:
        outcome = self.outcome
        if not outcome.is_terminal:
            return
        if outcome.kind == OutcomeKind.CHECKMATE:
            result = (
                GameResult.WHITE_WINS
                if outcome.winner == Color.WHITE
                else GameResult.BLACK_WINS
            )
        else:
            result = GameResult.DRAW
        self._finish(result, outcome)

    def _finish(self, result: GameResult, outcome: Outcome | None) -> None:
        self.result = result
        self.end_outcome = outcome
        self.phase = GamePhase.GAME_OVER
        _LOGGER.info("game over: %s (%s)", result.name, outcome)
