"""Conversions between 0x88 indices, algebraic text and python-chess squares."""

from typing import Tuple

import chess

from atomchess.core.board import is_valid_square

FILES = "abcdefgh"
RANKS = "12345678"


def to_algebraic(index: int) -> str:
    """Return the two-character coordinate of ``index`` (0x64 -> 'e2')."""
    if not is_valid_square(index):
        raise ValueError(f"Not a board square: {index!r}")
    col = index & 0x07
    rank = 8 - (index >> 4)
    return FILES[col] + str(rank)


def from_algebraic(text: str) -> int:
    """Return the 0x88 index of a coordinate such as 'e2' or 'E2'."""
    if not isinstance(text, str) or len(text) != 2:
        raise ValueError(f"Invalid coordinate: {text!r}")
    file_char, rank_char = text[0].lower(), text[1]
    if file_char not in FILES or rank_char not in RANKS:
        raise ValueError(f"Invalid coordinate: {text!r}")
    row = 8 - int(rank_char)
    return row * 16 + FILES.index(file_char)


def parse_move(text: str) -> Tuple[int, int]:
    """Split 'e2e4' into (origin, target). A trailing promotion letter is ignored."""
    text = text.strip()
    if len(text) == 5 and text[4].lower() in "qrbn":
        text = text[:4]
    if len(text) != 4:
        raise ValueError(f"Invalid move: {text!r}")
    return from_algebraic(text[:2]), from_algebraic(text[2:])


def format_move(origin: int, target: int) -> str:
    return to_algebraic(origin) + to_algebraic(target)


def to_chess_square(index: int) -> chess.Square:
    if not is_valid_square(index):
        raise ValueError(f"Not a board square: {index!r}")
    return chess.square(index & 0x07, 7 - (index >> 4))


def from_chess_square(square: chess.Square) -> int:
    return (7 - chess.square_rank(square)) * 16 + chess.square_file(square)
