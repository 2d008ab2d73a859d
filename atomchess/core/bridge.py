"""Conversion between the 0x88 Board and python-chess boards (FEN in and out)."""

from typing import Tuple

import chess

from atomchess.core.board import (
    BISHOP,
    BLACK,
    COLOR_MASK,
    EMPTY,
    HOME_ROW,
    KING,
    KNIGHT,
    PAWN,
    QUEEN,
    ROOK,
    TYPE_MASK,
    UNMOVED,
    WHITE,
    Board,
    make_piece,
    valid_squares,
)
from atomchess.core.coords import from_chess_square, to_chess_square

TO_CHESS_TYPE = {
    PAWN: chess.PAWN,
    ROOK: chess.ROOK,
    BISHOP: chess.BISHOP,
    QUEEN: chess.QUEEN,
    KNIGHT: chess.KNIGHT,
    KING: chess.KING,
}
FROM_CHESS_TYPE = {v: k for k, v in TO_CHESS_TYPE.items()}

# Corner rook index for (color, side), side 0 = king side, 1 = queen side.
CORNERS = {
    (WHITE, 0): HOME_ROW[WHITE] * 16 + 7,
    (WHITE, 1): HOME_ROW[WHITE] * 16,
    (BLACK, 0): HOME_ROW[BLACK] * 16 + 7,
    (BLACK, 1): HOME_ROW[BLACK] * 16,
}


def _unmoved(board: Board, index: int, ptype: int, color: int) -> bool:
    cell = board.get(index)
    return cell & (TYPE_MASK | COLOR_MASK) == ptype | color and bool(cell & UNMOVED)


def to_chess_board(board: Board, turn: int) -> chess.Board:
    """
    Build a python-chess board from ``board``.

    Castling rights are derived from the unmoved flags of the king and the
    corner rooks.
    """
    cb = chess.Board(None)
    for index in valid_squares():
        cell = board.cells[index]
        ptype = cell & TYPE_MASK
        if ptype == EMPTY:
            continue
        color = chess.WHITE if cell & COLOR_MASK == WHITE else chess.BLACK
        cb.set_piece_at(to_chess_square(index), chess.Piece(TO_CHESS_TYPE[ptype], color))

    rights = 0
    for color in (WHITE, BLACK):
        if not _unmoved(board, HOME_ROW[color] * 16 + 4, KING, color):
            continue
        for side in (0, 1):
            corner = CORNERS[(color, side)]
            if _unmoved(board, corner, ROOK, color):
                rights |= chess.BB_SQUARES[to_chess_square(corner)]
    cb.castling_rights = rights
    cb.turn = turn == WHITE
    if board.ep_square is not None:
        cb.ep_square = to_chess_square(board.ep_square)
    return cb


def from_chess_board(cb: chess.Board) -> Tuple[Board, int]:
    """Return the 0x88 board and side to move of a python-chess board."""
    board = Board()
    for square, piece in cb.piece_map().items():
        color = WHITE if piece.color == chess.WHITE else BLACK
        board.set(from_chess_square(square), make_piece(FROM_CHESS_TYPE[piece.piece_type], color))

    rights = cb.clean_castling_rights()
    for color in (WHITE, BLACK):
        king = HOME_ROW[color] * 16 + 4
        for side in (0, 1):
            corner = CORNERS[(color, side)]
            if not rights & chess.BB_SQUARES[to_chess_square(corner)]:
                continue
            if board.get(corner) != make_piece(ROOK, color) or board.get(king) & TYPE_MASK != KING:
                continue
            board.set(corner, board.get(corner) | UNMOVED)
            board.set(king, board.get(king) | UNMOVED)

    if cb.ep_square is not None:
        board.ep_square = from_chess_square(cb.ep_square)
    return board, WHITE if cb.turn == chess.WHITE else BLACK


def board_from_fen(fen: str) -> Tuple[Board, int]:
    """Parse ``fen`` with python-chess. Raises ValueError on malformed input."""
    return from_chess_board(chess.Board(fen))
