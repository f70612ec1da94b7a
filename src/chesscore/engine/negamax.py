"""Negamax search with alpha-beta pruning over per-node board copies."""

from __future__ import annotations

import logging
import random

from chesscore.core.board import Board
from chesscore.core.errors import NoLegalMoves
from chesscore.core.move import Move
from chesscore.core.move_generator import MoveGenerator
from chesscore.core.rules import classify
from chesscore.engine.evaluation import evaluate
from chesscore.engine.search import (
    CancelCheck,
    IEngine,
    SearchLimits,
    SearchResult,
    never_cancelled,
)

_LOGGER = logging.getLogger(__name__)

_INF_SCORE = 1_000_000


class NegamaxEngine(IEngine):
    """Fixed-depth negamax searcher.

    Moves are searched in generator order. Every node owns its own board
    copy, so the caller's board is never modified. Among root moves that share
    the best score one is picked with *rng*; pass a seeded
    :class:`random.Random` for reproducible play.

    The optional cancel check is polled between sibling moves at every node.
    Once it fires the search unwinds and the best root move completed so far is
    returned.
    """

    __slots__ = ("_rng", "_nodes", "_cancel_check", "_cancelled")

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng if rng is not None else random.Random()
        self._nodes = 0
        self._cancel_check: CancelCheck = never_cancelled
        self._cancelled = False

    @property
    def nodes(self) -> int:
        """Nodes visited by the last search."""
        return self._nodes

    def best_move(
        self,
        board: Board,
        depth: int,
        is_cancelled: CancelCheck | None = None,
    ) -> Move:
        """Best move for the side to move, searching *depth* plies."""
        return self.search(board, SearchLimits(max_depth=depth), is_cancelled).best_move

    def search(
        self,
        board: Board,
        limits: SearchLimits,
        is_cancelled: CancelCheck | None = None,
    ) -> SearchResult:
        if limits.max_depth <= 0:
            raise ValueError("Search depth must be >= 1")

        self._nodes = 0
        self._cancel_check = is_cancelled or never_cancelled
        self._cancelled = False

        root_moves = MoveGenerator(board).generate_legal_moves()
        if not root_moves:
            raise NoLegalMoves(
                f"No legal moves for {board.side_to_move}: {classify(board, root_moves)}"
            )

        score, candidates = self._search_root(board, root_moves, limits.max_depth)
        if not candidates:
            # Cancelled before the first root move finished.
            candidates = [root_moves[0]]
            score = evaluate(board, board.side_to_move)

        best = candidates[0] if len(candidates) == 1 else self._rng.choice(candidates)
        _LOGGER.debug(
            "search depth=%d nodes=%d score=%d best=%s ties=%d cancelled=%s",
            limits.max_depth,
            self._nodes,
            score,
            best,
            len(candidates),
            self._cancelled,
        )
        return SearchResult(best, score, limits.max_depth, self._nodes, self._cancelled)

    def _search_root(
        self,
        board: Board,
        root_moves: list[Move],
        depth: int,
    ) -> tuple[int, list[Move]]:
        best_score = -_INF_SCORE
        candidates: list[Move] = []

        for move in root_moves:
            if candidates and self._should_stop():
                break

            # A lower bound one below the best keeps equal scores exact.
            alpha = best_score - 1 if candidates else -_INF_SCORE
            score = -self._negamax(
                board.apply_unchecked(move),
                depth - 1,
                -_INF_SCORE,
                -alpha,
                ply=1,
            )
            if self._cancelled:
                break

            if score > best_score:
                best_score = score
                candidates = [move]
            elif score == best_score:
                candidates.append(move)

        return best_score, candidates

    def _negamax(
        self,
        board: Board,
        depth: int,
        alpha: int,
        beta: int,
        ply: int,
    ) -> int:
        self._nodes += 1
        side = board.side_to_move

        if depth <= 0:
            return evaluate(board, side, ply)

        legal = MoveGenerator(board).generate_legal_moves()
        outcome = classify(board, legal)
        if outcome.is_terminal:
            return evaluate(board, side, ply, outcome)

        best_score = -_INF_SCORE
        for index, move in enumerate(legal):
            if index and self._should_stop():
                break

            score = -self._negamax(
                board.apply_unchecked(move),
                depth - 1,
                -beta,
                -alpha,
                ply + 1,
            )
            if score > best_score:
                best_score = score
            if score > alpha:
                alpha = score
            if alpha >= beta:
                break

        return best_score

    def _should_stop(self) -> bool:
        if self._cancelled:
            return True
        if self._cancel_check():
            self._cancelled = True
            _LOGGER.info("search cancelled after %d nodes", self._nodes)
            return True
        return False


def best_move(
    board: Board,
    depth: int,
    rng: random.Random | None = None,
    is_cancelled: CancelCheck | None = None,
) -> Move:
    """Convenience wrapper around :meth:`NegamaxEngine.best_move`."""
    return NegamaxEngine(rng).best_move(board, depth, is_cancelled)
