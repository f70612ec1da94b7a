"""FEN parsing and serialization."""

from __future__ import annotations

from chesscore.core.board import Board
from chesscore.core.enums import CastlingRights, Color
from chesscore.core.errors import InvalidPosition, InvalidSquare
from chesscore.core.piece import Piece
from chesscore.core.placement import Placement
from chesscore.core.types import Square, make_square, parse_square, rank_of, square_name

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"

_CASTLING_CHARS: tuple[tuple[str, CastlingRights], ...] = (
    ("K", CastlingRights.WHITE_KINGSIDE),
    ("Q", CastlingRights.WHITE_QUEENSIDE),
    ("k", CastlingRights.BLACK_KINGSIDE),
    ("q", CastlingRights.BLACK_QUEENSIDE),
)


def position_from_fen(fen: str) -> Board:
    """Parse a FEN string into a :class:`Board`.

    Structural problems raise :class:`InvalidPosition`; a board without
    exactly one king per side is rejected the same way.
    """
    parts = fen.split()
    if not (4 <= len(parts) <= 6):
        raise InvalidPosition(f"Invalid FEN (need 4-6 fields): {fen!r}")

    placement_part, side_part, castling_part, ep_part = parts[:4]

    placement = _parse_placement(placement_part, fen)

    if side_part == "w":
        side = Color.WHITE
    elif side_part == "b":
        side = Color.BLACK
    else:
        raise InvalidPosition(f"Invalid FEN side-to-move field: {side_part!r}")

    castling = CastlingRights.NONE
    if castling_part != "-":
        rights = dict(_CASTLING_CHARS)
        for ch in castling_part:
            right = rights.pop(ch, None)
            if right is None:
                raise InvalidPosition(f"Invalid FEN castling field: {castling_part!r}")
            castling |= right

    ep: Square | None = None
    if ep_part != "-":
        try:
            ep = parse_square(ep_part)
        except InvalidSquare as exc:
            raise InvalidPosition(f"Invalid FEN en-passant field: {ep_part!r}") from exc
        expected_ep_rank = 5 if side == Color.WHITE else 2
        if rank_of(ep) != expected_ep_rank:
            raise InvalidPosition(
                f"Invalid FEN en-passant square for side-to-move: {ep_part!r}"
            )

    halfmove = _parse_counter(parts, 4, default=0, minimum=0)
    fullmove = _parse_counter(parts, 5, default=1, minimum=1)

    board = Board(placement, side, castling, ep, halfmove, fullmove)
    board.validate()
    return board


def _parse_placement(text: str, fen: str) -> Placement:
    ranks = text.split("/")
    if len(ranks) != 8:
        raise InvalidPosition(f"Invalid FEN board (must contain 8 ranks): {fen!r}")
    placement = Placement()
    for rank_idx, rank_text in enumerate(ranks):
        rank = 7 - rank_idx
        file = 0
        for ch in rank_text:
            if ch.isdigit():
                step = int(ch)
                if not (1 <= step <= 8):
                    raise InvalidPosition(f"Invalid FEN digit {ch!r}: {fen!r}")
                file += step
            else:
                if file >= 8:
                    raise InvalidPosition(f"Invalid FEN rank width: {fen!r}")
                try:
                    placement[make_square(file, rank)] = Piece.from_char(ch)
                except ValueError as exc:
                    raise InvalidPosition(f"{exc}: {fen!r}") from exc
                file += 1
            if file > 8:
                raise InvalidPosition(f"Invalid FEN rank width: {fen!r}")
        if file != 8:
            raise InvalidPosition(f"Invalid FEN rank width: {fen!r}")
    return placement


def _parse_counter(parts: list[str], index: int, default: int, minimum: int) -> int:
    if len(parts) <= index:
        return default
    try:
        value = int(parts[index])
    except ValueError:
        raise InvalidPosition(f"Invalid FEN counter: {parts[index]!r}") from None
    if value < minimum:
        raise InvalidPosition(f"Invalid FEN counter: {parts[index]!r}")
    return value


def position_to_fen(board: Board) -> str:
    """Serialise a :class:`Board` to FEN."""
    rows: list[str] = []
    for rank in range(7, -1, -1):
        empty = 0
        row = ""
        for file in range(8):
            piece = board.placement[make_square(file, rank)]
            if piece is None:
                empty += 1
                continue
            if empty:
                row += str(empty)
                empty = 0
            row += str(piece)
        if empty:
            row += str(empty)
        rows.append(row)

    side_str = "w" if board.side_to_move == Color.WHITE else "b"
    castling_str = "".join(ch for ch, right in _CASTLING_CHARS if board.castling & right)
    ep_str = square_name(board.en_passant) if board.en_passant is not None else "-"

    return (
        f"{'/'.join(rows)} {side_str} {castling_str or '-'} {ep_str} "
        f"{board.halfmove_clock} {board.fullmove_number}"
    )
