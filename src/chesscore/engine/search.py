"""Shared engine search models and protocol."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from time import perf_counter
from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from chesscore.core.board import Board
    from chesscore.core.move import Move

CancelCheck = Callable[[], bool]


@dataclass(slots=True, frozen=True)
class SearchLimits:
    """Search constraints for a single move computation."""

    max_depth: int = 3


@dataclass(slots=True, frozen=True)
class SearchResult:
    """Result produced by the engine search."""

    best_move: Move
    score: int
    depth: int
    nodes: int
    cancelled: bool = False


class IEngine(Protocol):
    """Protocol for engines used by the game layer and workers."""

    def search(
        self,
        board: Board,
        limits: SearchLimits,
        is_cancelled: CancelCheck | None = None,
    ) -> SearchResult: ...


def never_cancelled() -> bool:
    return False


def deadline(time_limit_ms: int) -> CancelCheck:
    """Cancel check that fires once *time_limit_ms* has elapsed.

    The clock starts when this function is called.
    """
    end = perf_counter() + max(time_limit_ms, 1) / 1000.0

    def expired() -> bool:
        return perf_counter() >= end

    return expired


def any_of(*checks: CancelCheck | None) -> CancelCheck:
    """Combine cancel checks; fires when any of them does."""
    active = [check for check in checks if check is not None]
    if not active:
        return never_cancelled

    def combined() -> bool:
        return any(check() for check in active)

    return combined
