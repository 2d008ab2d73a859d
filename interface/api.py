"""FastAPI REST interface for the engine."""

import logging
import threading
from typing import Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from atomchess.config import CONFIG
from atomchess.core.board import opponent
from atomchess.core.coords import format_move
from atomchess.core.search import SearchEngine
from atomchess.main import Engine, color_name

log = logging.getLogger(__name__)

app = FastAPI(title=CONFIG.ui.engine_name, version="1.0.0")

# Shared game, serialized by the lock.
game = Engine()
_game_lock = threading.Lock()


class FenRequest(BaseModel):
    fen: str


class MoveRequest(BaseModel):
    move: str  # coordinate format e.g. "e2e4"


class SearchRequest(BaseModel):
    depth: Optional[int] = None


def _state():
    loser = game.outcome()
    return {
        "fen": game.get_fen(),
        "turn": color_name(game.turn),
        "legal_moves": game.legal_moves() if loser is None else [],
        "is_game_over": loser is not None,
        "winner": color_name(opponent(loser)) if loser is not None else None,
        "history": [text for text, _, _ in game.move_history],
    }


@app.get("/board")
def get_board():
    with _game_lock:
        return _state()


@app.post("/position")
def set_position(req: FenRequest):
    with _game_lock:
        try:
            game.set_fen(req.fen)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=f"Invalid FEN: {e}")
        return {"fen": game.get_fen()}


@app.post("/move")
def make_move(req: MoveRequest):
    with _game_lock:
        if game.is_game_over():
            raise HTTPException(status_code=400, detail="Game is already over")
        if not game.make_move(req.move):
            raise HTTPException(status_code=400, detail=f"Illegal move: {req.move}")
        return {"fen": game.get_fen(), "move": req.move}


@app.post("/search")
def search_move(req: SearchRequest = SearchRequest()):
    with _game_lock:
        if game.is_game_over():
            raise HTTPException(status_code=400, detail="Game is already over")
        search_board = game.board.copy()
        turn = game.turn
        fen = game.get_fen()

    depth = req.depth if req.depth is not None else game.search.max_depth
    search = SearchEngine(depth=depth)
    best, score = search.search_best_move(search_board, turn)
    return {
        "best_move": best.uci() if best else None,
        "score": score,
        "fen": fen,
    }


@app.post("/play")
def play_computer_move():
    with _game_lock:
        if game.is_game_over():
            raise HTTPException(status_code=400, detail="Game is already over")
        reply = game.computer_move(game.turn)
        if reply is None:
            raise HTTPException(status_code=400, detail="No move available")
        log.info("Computer played %s", format_move(*reply))
        return {"move": format_move(*reply), "fen": game.get_fen()}


@app.post("/undo")
def undo_move():
    with _game_lock:
        game.undo_move()
        return {"fen": game.get_fen()}


@app.post("/reset")
def reset_board():
    with _game_lock:
        game.initialize()
        return {"fen": game.get_fen()}
