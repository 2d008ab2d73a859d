"""
Pseudo-legal move generation on the 0x88 board.

Moves are produced by stepping along per-piece direction tables. A step that
fails the 0x88 test ends the direction, so no file/rank arithmetic is needed.
The generator never checks whether the mover's king is left capturable; the
search deals with that by finding the king capture one ply deeper.
"""

from typing import Iterator, NamedTuple

from atomchess.core.board import (
    BISHOP,
    COLOR_MASK,
    EMPTY,
    FRONTIER,
    HOME_ROW,
    KING,
    KNIGHT,
    PAWN,
    PAWN_ROW,
    QUEEN,
    ROOK,
    TYPE_MASK,
    UNMOVED,
    WHITE,
    BLACK,
    Board,
    is_valid_square,
)
from atomchess.core.coords import format_move

KNIGHT_DIRECTIONS = (-33, -31, -18, -14, 14, 18, 31, 33)
ROOK_DIRECTIONS = (-16, 16, -1, 1)
BISHOP_DIRECTIONS = (15, 17, -15, -17)
QUEEN_DIRECTIONS = ROOK_DIRECTIONS + BISHOP_DIRECTIONS

DIRECTIONS = {
    ROOK: ROOK_DIRECTIONS,
    BISHOP: BISHOP_DIRECTIONS,
    QUEEN: QUEEN_DIRECTIONS,
    KNIGHT: KNIGHT_DIRECTIONS,
    KING: QUEEN_DIRECTIONS,
}
SLIDERS = frozenset((ROOK, BISHOP, QUEEN))

# White moves toward row 0, black toward row 7.
PAWN_CAPTURES = {WHITE: (-17, -15), BLACK: (15, 17)}
PAWN_PUSH = {WHITE: -16, BLACK: 16}


class Move(NamedTuple):
    origin: int
    target: int
    captured: int = EMPTY

    @property
    def is_king_capture(self) -> bool:
        return self.captured & TYPE_MASK == KING

    def uci(self) -> str:
        return format_move(self.origin, self.target)


def generate_moves(board: Board, color: int, strict_castling: bool = False) -> Iterator[Move]:
    """Yield every pseudo-legal move of ``color``, squares in ascending order."""
    cells = board.cells
    for origin in range(len(cells)):
        if origin & 0x88:
            continue
        cell = cells[origin]
        ptype = cell & TYPE_MASK
        if ptype == EMPTY or ptype == FRONTIER or cell & COLOR_MASK != color:
            continue
        if ptype == PAWN:
            yield from _pawn_moves(board, origin, color)
            continue

        sliding = ptype in SLIDERS
        for delta in DIRECTIONS[ptype]:
            target = origin
            while True:
                target += delta
                if not is_valid_square(target):
                    break
                occupant = cells[target]
                if occupant & TYPE_MASK == EMPTY:
                    yield Move(origin, target, occupant)
                    if sliding:
                        continue
                    break
                if occupant & TYPE_MASK != FRONTIER and occupant & COLOR_MASK != color:
                    yield Move(origin, target, occupant)
                break

        if ptype == KING:
            yield from _castling_moves(board, origin, color, strict_castling)


def _pawn_moves(board: Board, origin: int, color: int) -> Iterator[Move]:
    cells = board.cells
    # Diagonals only capture, or land on the en-passant target.
    for delta in PAWN_CAPTURES[color]:
        target = origin + delta
        if not is_valid_square(target):
            continue
        occupant = cells[target]
        if occupant & TYPE_MASK == EMPTY:
            if target == board.ep_square:
                yield Move(origin, target, occupant)
            continue
        if occupant & TYPE_MASK != FRONTIER and occupant & COLOR_MASK != color:
            yield Move(origin, target, occupant)

    push = PAWN_PUSH[color]
    target = origin + push
    if not is_valid_square(target) or cells[target] & TYPE_MASK != EMPTY:
        return
    yield Move(origin, target, cells[target])
    if origin >> 4 == PAWN_ROW[color]:
        target += push
        if cells[target] & TYPE_MASK == EMPTY:
            yield Move(origin, target, cells[target])


def _castling_moves(board: Board, origin: int, color: int, strict: bool) -> Iterator[Move]:
    """
    Two-column king moves from the home square toward a same-colored corner rook.

    Only the pattern is checked: a rook in the corner and nothing in between.
    With ``strict`` the unmoved flag of king and rook must also be set.
    Attacks on the king's path are never checked.
    """
    cells = board.cells
    home = HOME_ROW[color] * 16 + 4
    if origin != home:
        return
    if strict and not cells[origin] & UNMOVED:
        return
    for rook_square, between, target in (
        (home + 3, (home + 1, home + 2), home + 2),
        (home - 4, (home - 1, home - 2, home - 3), home - 2),
    ):
        rook = cells[rook_square]
        if rook & TYPE_MASK != ROOK or rook & COLOR_MASK != color:
            continue
        if strict and not rook & UNMOVED:
            continue
        if all(cells[sq] & TYPE_MASK == EMPTY for sq in between):
            yield Move(origin, target, cells[target])
