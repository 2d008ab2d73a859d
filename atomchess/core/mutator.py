"""Make/unmake of moves on the 0x88 board, including the special-move side effects."""

from dataclasses import dataclass
from typing import Optional

from atomchess.core.board import (
    COLOR_MASK,
    EMPTY,
    KING,
    LAST_ROW,
    PAWN,
    PIECE_MASK,
    QUEEN,
    ROOK,
    TYPE_MASK,
    Board,
)
from atomchess.core.movegen import PAWN_PUSH


@dataclass
class Undo:
    """Everything ``apply`` touched, enough for ``unapply`` to restore it exactly."""

    origin: int
    target: int
    moved: int
    captured: int
    ep_square: Optional[int]
    ep_victim: Optional[int] = None
    ep_victim_cell: int = EMPTY
    rook_from: Optional[int] = None
    rook_to: Optional[int] = None
    rook_cell: int = EMPTY
    rook_to_cell: int = EMPTY

    @property
    def captured_piece(self) -> int:
        """The cell removed from play: the target occupant or the en-passant victim."""
        if self.ep_victim is not None:
            return self.ep_victim_cell
        return self.captured


def victim(board: Board, origin: int, target: int) -> int:
    """Return the cell ``apply(board, origin, target)`` would remove from play."""
    captured = board.get(target)
    if captured & TYPE_MASK == EMPTY and target == board.ep_square \
            and board.get(origin) & TYPE_MASK == PAWN and (origin & 0x07) != (target & 0x07):
        return board.get(target - PAWN_PUSH[board.get(origin) & COLOR_MASK])
    return captured


def apply(board: Board, origin: int, target: int) -> Undo:
    """
    Move the piece on ``origin`` to ``target`` and perform its side effects.

    - a pawn reaching its last row becomes a queen of its color;
    - a pawn moving diagonally onto the empty en-passant target removes the
      enemy pawn one row behind the destination;
    - a pawn double advance records the square it passed over as the new
      en-passant target, any other move clears it;
    - a king moving exactly two columns brings the corner rook of that side
      to the square the king passed through. Nothing checks whether king or
      rook moved before.
    """
    piece = board.get(origin)
    captured = board.get(target)
    undo = Undo(origin, target, piece, captured, board.ep_square)

    board.set(target, piece & PIECE_MASK)
    board.set(origin, EMPTY)

    ptype = piece & TYPE_MASK
    color = piece & COLOR_MASK
    diff = target - origin
    new_ep = None

    if ptype == PAWN:
        if target >> 4 == LAST_ROW[color]:
            board.set(target, QUEEN | color)
        if (origin & 0x07) != (target & 0x07) and captured & TYPE_MASK == EMPTY \
                and target == undo.ep_square:
            victim = target - PAWN_PUSH[color]
            undo.ep_victim = victim
            undo.ep_victim_cell = board.get(victim)
            board.set(victim, EMPTY)
        if diff in (32, -32):
            new_ep = origin + diff // 2
    elif ptype == KING and diff in (2, -2):
        if diff == 2:
            rook_from, rook_to = target + 1, target - 1
        else:
            rook_from, rook_to = target - 2, target + 1
        rook = board.get(rook_from)
        if rook & TYPE_MASK == ROOK:
            undo.rook_from, undo.rook_to = rook_from, rook_to
            undo.rook_cell, undo.rook_to_cell = rook, board.get(rook_to)
            board.set(rook_to, rook & PIECE_MASK)
            board.set(rook_from, EMPTY)

    board.ep_square = new_ep
    return undo


def unapply(board: Board, undo: Undo):
    """Restore the cells and en-passant target ``apply`` changed."""
    if undo.rook_from is not None:
        board.set(undo.rook_to, undo.rook_to_cell)
        board.set(undo.rook_from, undo.rook_cell)
    if undo.ep_victim is not None:
        board.set(undo.ep_victim, undo.ep_victim_cell)
    board.set(undo.target, undo.captured)
    board.set(undo.origin, undo.moved)
    board.ep_square = undo.ep_square
