"""Background worker that runs engine searches off the caller's thread."""

from __future__ import annotations

import logging
import threading
from collections import deque
from concurrent.futures import Future, ThreadPoolExecutor

from chesscore.core.board import Board
from chesscore.engine.negamax import NegamaxEngine
from chesscore.engine.search import IEngine, SearchLimits, SearchResult, any_of, deadline

_LOGGER = logging.getLogger(__name__)


class EngineWorker:
    """Single-threaded worker that computes engine moves on demand.

    Each request searches a private copy of the board, so the caller may keep
    using its own instance. Requests run one at a time in submission order and
    each owns its cancel event. :meth:`cancel` stops the oldest unfinished
    request (the one running, or the next to run) between sibling moves; its
    future then resolves with the best move found so far (``result.cancelled``
    is set). With *time_limit_ms* the same happens once the budget is spent.
    """

    __slots__ = ("_engine", "_executor", "_limits", "_lock", "_pending", "_time_limit_ms")

    def __init__(
        self,
        engine: IEngine | None = None,
        *,
        max_depth: int = 3,
        time_limit_ms: int | None = None,
    ) -> None:
        self._engine: IEngine = engine if engine is not None else NegamaxEngine()
        self._limits = SearchLimits(max_depth=max_depth)
        self._time_limit_ms = time_limit_ms
        self._lock = threading.Lock()
        self._pending: deque[threading.Event] = deque()
        self._executor = ThreadPoolExecutor(
            max_workers=1, thread_name_prefix="chesscore-engine"
        )

    @property
    def limits(self) -> SearchLimits:
        return self._limits

    def request_move(self, board: Board) -> Future[SearchResult]:
        """Queue a search of *board*; errors surface through the future."""
        snapshot = board.copy()
        cancel_event = threading.Event()
        with self._lock:
            self._pending.append(cancel_event)
        try:
            return self._executor.submit(
                self._run, snapshot, self._limits, self._time_limit_ms, cancel_event
            )
        except RuntimeError:
            self._forget(cancel_event)
            raise

    def _run(
        self,
        board: Board,
        limits: SearchLimits,
        time_limit_ms: int | None,
        cancel_event: threading.Event,
    ) -> SearchResult:
        _LOGGER.debug("worker searching depth=%d", limits.max_depth)
        try:
            return self._engine.search(
                board,
                limits,
                is_cancelled=any_of(
                    cancel_event.is_set,
                    deadline(time_limit_ms) if time_limit_ms else None,
                ),
            )
        finally:
            self._forget(cancel_event)

    def _forget(self, cancel_event: threading.Event) -> None:
        with self._lock:
            self._pending.remove(cancel_event)

    def cancel(self) -> None:
        """Request cancellation of the oldest unfinished search."""
        with self._lock:
            if self._pending:
                self._pending[0].set()

    def set_limits(self, max_depth: int, time_limit_ms: int | None = None) -> None:
        """Update search limits (takes effect on the next request)."""
        self._limits = SearchLimits(max_depth=max_depth)
        self._time_limit_ms = time_limit_ms

    def shutdown(self, wait: bool = True) -> None:
        with self._lock:
            for cancel_event in self._pending:
                cancel_event.set()
        self._executor.shutdown(wait=wait)

    def __enter__(self) -> EngineWorker:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.shutdown()
