import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple

from atomchess.config import CONFIG
from atomchess.core.board import PIECE_NAMES, TYPE_MASK, Board, opponent
from atomchess.core.movegen import Move, generate_moves
from atomchess.core.mutator import apply, unapply, victim
from atomchess.core.utils import format_info

log = logging.getLogger(__name__)

MIN_SCORE = -32768
KING_CAPTURE_SCORE = 78
ILLEGAL_THRESHOLD = -127
ILLEGAL_SCORE = ILLEGAL_THRESHOLD - 1


class SearchMode(Enum):
    VALIDATE = "validate"
    BEST_MOVE = "best_move"


@dataclass(frozen=True)
class SearchPlan:
    """What one search call is asked to do: check a move, or find the best one."""

    mode: SearchMode
    depth: int
    origin: Optional[int] = None
    target: Optional[int] = None

    @classmethod
    def validate(cls, origin: int, target: int, depth: int) -> "SearchPlan":
        return cls(SearchMode.VALIDATE, depth, origin, target)

    @classmethod
    def best_move(cls, depth: int) -> "SearchPlan":
        return cls(SearchMode.BEST_MOVE, depth)


@dataclass
class SearchResult:
    score: int
    best_move: Optional[Move]
    nodes: int
    elapsed: float = 0.0

    @property
    def is_legal(self) -> bool:
        return self.score >= ILLEGAL_THRESHOLD


class SearchEngine:
    """
    Material-only negamax over pseudo-legal moves.

    The same recursion answers "is this move legal?" (validation plan: the
    root only looks for the requested move among the generated ones) and
    "what is the best move?" (best-move plan: full fixed-depth tree). There
    is no check detection: a move that leaves the king capturable loses to
    the king capture found one ply deeper.
    """

    def __init__(self, depth: Optional[int] = None, validation_depth: Optional[int] = None,
                 piece_values: Optional[Dict[str, int]] = None,
                 strict_castling: Optional[bool] = None):
        cfg = CONFIG.search
        self.max_depth = depth if depth is not None else cfg.depth
        self.validation_depth = validation_depth if validation_depth is not None else cfg.validation_depth
        self.strict_castling = strict_castling if strict_castling is not None else cfg.strict_castling
        values = piece_values or CONFIG.eval.piece_values
        # Indexed by piece type; empty and frontier are worth nothing.
        self.values = [0] * 8
        for ptype, name in PIECE_NAMES.items():
            self.values[ptype] = values.get(name, 0)
        self.nodes = 0

    def validate_move(self, board: Board, origin: int, target: int, color: int) -> int:
        """Return a score that is >= ILLEGAL_THRESHOLD iff the move is acceptable."""
        plan = SearchPlan.validate(origin, target, self.validation_depth)
        return self.search(board, color, plan).score

    def search_best_move(self, board: Board, color: int) -> Tuple[Optional[Move], int]:
        result = self.search(board, color, SearchPlan.best_move(self.max_depth))
        return result.best_move, result.score

    def search(self, board: Board, color: int, plan: SearchPlan) -> SearchResult:
        self.nodes = 0
        start_time = time.time()
        score, best = self._search(board, color, 0, plan)
        elapsed = time.time() - start_time
        log.debug("%s: %s", plan.mode.value, format_info(plan.depth, score, self.nodes, elapsed, best))
        return SearchResult(score, best, self.nodes, elapsed)

    def _search(self, board: Board, color: int, ply: int, plan: SearchPlan) -> Tuple[int, Optional[Move]]:
        self.nodes += 1
        saved_ep = board.ep_square
        validating_root = ply == 0 and plan.mode is SearchMode.VALIDATE
        best_score = MIN_SCORE
        best_move = None
        try:
            for move in generate_moves(board, color, self.strict_castling):
                if move.is_king_capture:
                    if ply > self.validation_depth:
                        return KING_CAPTURE_SCORE * 2, move
                    return KING_CAPTURE_SCORE, move

                if validating_root:
                    if move.origin == plan.origin and move.target == plan.target:
                        return 0, move
                    continue

                if ply < plan.depth:
                    undo = apply(board, move.origin, move.target)
                    try:
                        reply, _ = self._search(board, opponent(color), ply + 1, plan)
                    finally:
                        unapply(board, undo)
                    score = self.values[undo.captured_piece & TYPE_MASK] - reply
                else:
                    # Leaf: only the material taken counts, the board need not change.
                    score = self.values[victim(board, move.origin, move.target) & TYPE_MASK]

                if score > best_score:
                    best_score = score
                    best_move = move

            if validating_root:
                return ILLEGAL_SCORE, None
            return best_score, best_move
        finally:
            board.ep_square = saved_ep
