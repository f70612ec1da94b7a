"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import pytest

from chesscore.core.board import Board
from chesscore.core.notation import position_from_fen

FOOLS_MATE_FEN = "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 1 3"


@pytest.fixture
def start_board() -> Board:
    return Board.initial()


@pytest.fixture
def fools_mate_board() -> Board:
    return position_from_fen(FOOLS_MATE_FEN)

