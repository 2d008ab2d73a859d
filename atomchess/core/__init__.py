"""Core engine components: 0x88 board, move generator, mutator, search and coordinates."""

from .board import Board
from .movegen import Move, generate_moves
from .mutator import Undo, apply, unapply
from .search import SearchEngine, SearchPlan, SearchResult
