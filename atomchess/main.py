"""Game facade: one board, the side to move and a move history over the core engine."""

import logging
from typing import List, Optional, Tuple

import chess

from atomchess.core.board import BLACK, PAWN, PIECE_MASK, TYPE_MASK, WHITE, Board, opponent
from atomchess.core.bridge import from_chess_board, to_chess_board
from atomchess.core.coords import format_move, parse_move
from atomchess.core.movegen import generate_moves
from atomchess.core.mutator import Undo, apply, unapply
from atomchess.core.search import ILLEGAL_THRESHOLD, SearchEngine

log = logging.getLogger(__name__)

DISPLAY_CHARS = {
    1: "BP", 2: "BR", 3: "BB", 4: "BQ", 5: "BN", 6: "BK",
    9: "WP", 10: "WR", 11: "WB", 12: "WQ", 13: "WN", 14: "WK",
}


def color_name(color: int) -> str:
    return "white" if color == WHITE else "black"


def parse_color(name: str) -> int:
    name = name.strip().lower()
    if name in ("white", "w"):
        return WHITE
    if name in ("black", "b"):
        return BLACK
    raise ValueError(f"Unknown color: {name!r}")


def render_board(board: Board) -> str:
    """Text diagram with rank 8 on top, two characters per square."""
    lines = ["    A   B   C   D   E   F   G   H", ""]
    for row in range(8):
        cells = []
        for col in range(8):
            cell = board.get(row * 16 + col) & PIECE_MASK
            cells.append(".." if cell & TYPE_MASK == 0 else DISPLAY_CHARS[cell])
        lines.append(f"{8 - row}  " + "  ".join(cells))
    return "\n".join(lines)


class Engine:
    def __init__(self, depth: Optional[int] = None, fen: Optional[str] = None):
        self.search = SearchEngine(depth=depth)
        self.board = Board()
        self.turn = WHITE
        self.halfmove_clock = 0
        self.fullmove_number = 1
        # (move text, undo record, halfmove clock before the move)
        self.move_history: List[Tuple[str, Undo, int]] = []
        if fen:
            self.set_fen(fen)
        else:
            self.initialize()

    # -- entry points ---------------------------------------------------------

    def initialize(self):
        """Reset to the standard starting position, white to move."""
        self.board.setup()
        self.turn = WHITE
        self.halfmove_clock = 0
        self.fullmove_number = 1
        self.move_history.clear()

    def validate_move(self, origin: int, target: int, color: int) -> int:
        """Score the move for ``color``; it is legal iff the score >= ILLEGAL_THRESHOLD."""
        return self.search.validate_move(self.board, origin, target, color)

    def apply_move(self, origin: int, target: int) -> Undo:
        """Commit a move already known to be legal and pass the turn."""
        undo = apply(self.board, origin, target)
        self.move_history.append((format_move(origin, target), undo, self.halfmove_clock))
        if undo.moved & TYPE_MASK == PAWN or undo.captured_piece & TYPE_MASK:
            self.halfmove_clock = 0
        else:
            self.halfmove_clock += 1
        if self.turn == BLACK:
            self.fullmove_number += 1
        self.turn = opponent(self.turn)
        return undo

    def computer_move(self, color: int) -> Optional[Tuple[int, int]]:
        """Search for ``color``, commit the best move and return it."""
        best, score = self.search.search_best_move(self.board, color)
        if best is None:
            log.info("No move found for %s", color_name(color))
            return None
        log.info("Computer plays %s (score %d, %d nodes)", best.uci(), score, self.search.nodes)
        self.apply_move(best.origin, best.target)
        return best.origin, best.target

    # -- convenience ----------------------------------------------------------

    def is_legal(self, origin: int, target: int, color: Optional[int] = None) -> bool:
        """
        True if ``color`` may play origin -> target.

        Validation scores any pair as a king capture once one is available, so
        the pair must also be a generated move before it is handed to ``apply``.
        """
        color = self.turn if color is None else color
        generated = generate_moves(self.board, color, self.search.strict_castling)
        if not any(m.origin == origin and m.target == target for m in generated):
            return False
        return self.validate_move(origin, target, color) >= ILLEGAL_THRESHOLD

    def make_move(self, move_str: str) -> bool:
        """Play a move such as 'e2e4' for the side to move. Returns True if accepted."""
        try:
            origin, target = parse_move(move_str)
        except ValueError:
            return False
        if not self.is_legal(origin, target):
            return False
        self.apply_move(origin, target)
        return True

    def undo_move(self):
        """Take back the last move."""
        if not self.move_history:
            return
        _, undo, self.halfmove_clock = self.move_history.pop()
        unapply(self.board, undo)
        self.turn = opponent(self.turn)
        if self.turn == BLACK:
            self.fullmove_number -= 1

    def get_best_move(self) -> Tuple[Optional[str], int]:
        """Search for the side to move without committing the result."""
        best, score = self.search.search_best_move(self.board, self.turn)
        return (best.uci() if best else None), score

    def legal_moves(self) -> List[str]:
        """Moves of the side to move that validation accepts."""
        moves = list(generate_moves(self.board, self.turn, self.search.strict_castling))
        return [m.uci() for m in moves if self.is_legal(m.origin, m.target)]

    def outcome(self) -> Optional[int]:
        """Return the color whose king has been captured, if any."""
        for color in (WHITE, BLACK):
            if self.board.king_square(color) is None:
                return color
        return None

    def is_game_over(self) -> bool:
        return self.outcome() is not None

    def get_fen(self) -> str:
        cb = to_chess_board(self.board, self.turn)
        cb.halfmove_clock = self.halfmove_clock
        cb.fullmove_number = self.fullmove_number
        return cb.fen()

    def set_fen(self, fen: str):
        """Load a position. Raises ValueError if python-chess rejects the FEN."""
        cb = chess.Board(fen)
        self.board, self.turn = from_chess_board(cb)
        self.halfmove_clock = cb.halfmove_clock
        self.fullmove_number = cb.fullmove_number
        self.move_history.clear()

    def print_board(self):
        print(render_board(self.board))
