"""
Integration test suite for AtomChess.

Tests components working together end-to-end:
- Full game simulations (engine vs engine)
- Console game loop
- UCI protocol integration
- FastAPI REST API integration
"""

import io

import chess

from atomchess.core.board import BLACK, WHITE
from atomchess.core.coords import parse_move
from atomchess.main import Engine


def scripted(*lines):
    """Input function returning ``lines`` in order, then EOF."""
    queue = list(lines)

    def read(prompt=""):
        if not queue:
            raise EOFError
        return queue.pop(0)

    return read


# ════════════════════════════════════════════════════════════════════════════
#  ENGINE VS ENGINE GAMES
# ════════════════════════════════════════════════════════════════════════════


class TestFullGame:
    """The engine can play against itself without corrupting the board."""

    def test_engine_vs_engine_runs(self):
        engine = Engine(depth=1)
        plies = 0
        while not engine.is_game_over() and plies < 40:
            color = engine.turn
            reply = engine.computer_move(color)
            if reply is None:
                break
            plies += 1
            assert engine.turn != color
        assert plies >= 2
        for color in (WHITE, BLACK):
            assert len(engine.board.pieces(color)) <= 16

    def test_computer_moves_pass_validation(self):
        engine = Engine(depth=1)
        for _ in range(10):
            best, _ = engine.get_best_move()
            origin, target = parse_move(best)
            assert engine.is_legal(origin, target)
            engine.apply_move(origin, target)

    def test_undo_whole_game_restores_start(self):
        engine = Engine(depth=1)
        start = engine.board.snapshot()
        for _ in range(12):
            if engine.computer_move(engine.turn) is None:
                break
        while engine.move_history:
            engine.undo_move()
        assert engine.board.snapshot() == start
        assert engine.get_fen() == chess.STARTING_FEN

    def test_opening_moves_match_python_chess(self):
        """Played moves mirrored on python-chess keep both positions identical."""
        engine = Engine(depth=1)
        board = chess.Board()
        for move in ["e2e4", "e7e5", "g1f3", "b8c6", "f1c4", "g8f6", "e1g1"]:
            assert engine.make_move(move)
            board.push_uci(move)
            assert engine.get_fen() == board.fen()


# ════════════════════════════════════════════════════════════════════════════
#  CONSOLE GAME LOOP
# ════════════════════════════════════════════════════════════════════════════


class TestCLI:
    def test_quit(self, capsys):
        from interface.cli import run_game

        engine = Engine(depth=1)
        run_game(engine, WHITE, read=scripted("quit"))
        out = capsys.readouterr().out
        assert "8  BR  BN  BB  BQ  BK" in out
        assert "Thanks for playing!" in out

    def test_illegal_move_reprompts(self, capsys):
        from interface.cli import run_game

        engine = Engine(depth=1)
        run_game(engine, WHITE, read=scripted("e2e5", "zz", "quit"))
        out = capsys.readouterr().out
        assert out.count("Illegal move! Try again.") == 2
        assert engine.move_history == []

    def test_move_and_computer_reply(self, capsys):
        from interface.cli import run_game

        engine = Engine(depth=1)
        run_game(engine, WHITE, read=scripted("e2e4", "quit"))
        out = capsys.readouterr().out
        assert "Computer thinking..." in out
        assert len(engine.move_history) == 2
        assert engine.move_history[1][0] in out
        assert engine.turn == WHITE

    def test_undo_command(self):
        from interface.cli import run_game

        engine = Engine(depth=1)
        run_game(engine, WHITE, read=scripted("e2e4", "undo", "quit"))
        assert engine.move_history == []
        assert engine.get_fen() == chess.STARTING_FEN

    def test_undo_before_first_reply_keeps_opening_move(self, capsys):
        from interface.cli import run_game

        engine = Engine(depth=1)
        run_game(engine, BLACK, read=scripted("undo", "quit"))
        assert "Nothing to undo." in capsys.readouterr().out
        assert len(engine.move_history) == 1
        assert engine.turn == BLACK

    def test_computer_opens_as_white(self, capsys):
        from interface.cli import run_game

        engine = Engine(depth=1)
        run_game(engine, BLACK, read=scripted())
        assert len(engine.move_history) == 1
        assert engine.turn == BLACK

    def test_king_capture_ends_game(self, capsys):
        from interface.cli import run_game

        engine = Engine(depth=1, fen="2k5/3P4/8/8/8/8/8/4K3 w - - 0 1")
        run_game(engine, WHITE, read=scripted("d7c8", "e1e2"))
        out = capsys.readouterr().out
        assert "White captured the king. Game over." in out
        assert len(engine.move_history) == 1

    def test_parse_args(self):
        from interface.cli import parse_args

        args = parse_args(["--depth", "2", "--color", "black"])
        assert args.depth == 2
        assert args.color == "black"
        assert args.fen is None


# ════════════════════════════════════════════════════════════════════════════
#  UCI PROTOCOL
# ════════════════════════════════════════════════════════════════════════════


class TestUCIIntegration:
    """Tests UCI protocol parsing and state management."""

    def _make_uci(self):
        from interface.uci import UCI

        self.out = io.StringIO()
        return UCI(Engine(depth=1), out=self.out)

    def test_handshake(self):
        uci = self._make_uci()
        uci.handle("uci")
        uci.handle("isready")
        lines = self.out.getvalue().splitlines()
        assert lines[0].startswith("id name ")
        assert "uciok" in lines
        assert lines[-1] == "readyok"

    def test_position_startpos_moves(self):
        uci = self._make_uci()
        uci._parse_position(["startpos", "moves", "e2e4", "e7e5"])
        expected = chess.Board()
        expected.push_uci("e2e4")
        expected.push_uci("e7e5")
        assert uci.engine.get_fen() == expected.fen()

    def test_position_fen_with_moves(self):
        fen = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - 0 1"
        uci = self._make_uci()
        uci._parse_position(["fen"] + fen.split() + ["moves", "e7e5"])
        expected = chess.Board(fen)
        expected.push_uci("e7e5")
        assert uci.engine.get_fen() == expected.fen()

    def test_position_invalid_fen_no_crash(self):
        uci = self._make_uci()
        old_fen = uci.engine.get_fen()
        uci._parse_position(["fen", "invalid", "fen", "string"])
        assert uci.engine.get_fen() == old_fen

    def test_position_illegal_moves_stop(self):
        uci = self._make_uci()
        uci._parse_position(["startpos", "moves", "e2e4", "e2e5", "e7e5"])
        expected = chess.Board()
        expected.push_uci("e2e4")
        assert uci.engine.get_fen() == expected.fen()

    def test_position_empty_tokens(self):
        uci = self._make_uci()
        old_fen = uci.engine.get_fen()
        uci._parse_position([])
        assert uci.engine.get_fen() == old_fen

    def test_go_depth(self):
        uci = self._make_uci()
        uci.handle("position startpos")
        uci.handle("go depth 1")
        lines = self.out.getvalue().splitlines()
        assert lines[0].startswith("info depth 1 ")
        assert lines[-1].startswith("bestmove ")
        move = chess.Move.from_uci(lines[-1].split()[1])
        assert move in chess.Board().legal_moves

    def test_go_bad_depth_uses_default(self):
        uci = self._make_uci()
        uci.handle("go depth x")
        assert self.out.getvalue().splitlines()[-1].startswith("bestmove ")

    def test_run_until_quit(self):
        uci = self._make_uci()
        uci.run(io.StringIO("uci\nquit\nisready\n"))
        assert "readyok" not in self.out.getvalue()

    def test_position_without_startpos_or_fen_is_ignored(self):
        uci = self._make_uci()
        uci.run(io.StringIO("position moves e2e4\nisready\n"))
        assert self.out.getvalue().splitlines() == ["readyok"]
        assert uci.engine.get_fen() == chess.STARTING_FEN

    def test_ucinewgame_resets(self):
        uci = self._make_uci()
        uci.handle("position startpos moves e2e4")
        uci.handle("ucinewgame")
        assert uci.engine.get_fen() == chess.STARTING_FEN


# ════════════════════════════════════════════════════════════════════════════
#  REST API
# ════════════════════════════════════════════════════════════════════════════


class TestAPIIntegration:
    def setup_method(self):
        from fastapi.testclient import TestClient
        from interface.api import app

        self.client = TestClient(app)
        self.client.post("/reset")

    def test_get_board(self):
        data = self.client.get("/board").json()
        assert data["fen"] == chess.STARTING_FEN
        assert data["turn"] == "white"
        assert len(data["legal_moves"]) == 20
        assert data["is_game_over"] is False

    def test_post_move(self):
        response = self.client.post("/move", json={"move": "e2e4"})
        assert response.status_code == 200
        assert self.client.get("/board").json()["turn"] == "black"

    def test_post_move_illegal(self):
        response = self.client.post("/move", json={"move": "e2e5"})
        assert response.status_code == 400

    def test_post_move_invalid_format(self):
        response = self.client.post("/move", json={"move": "zzzz"})
        assert response.status_code == 400

    def test_set_position_valid(self):
        fen = "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR b KQkq - 0 1"
        response = self.client.post("/position", json={"fen": fen})
        assert response.status_code == 200
        assert response.json()["fen"] == fen

    def test_set_position_invalid(self):
        response = self.client.post("/position", json={"fen": "invalid"})
        assert response.status_code == 400

    def test_search_does_not_commit(self):
        response = self.client.post("/search", json={"depth": 1})
        assert response.status_code == 200
        best = response.json()["best_move"]
        assert chess.Move.from_uci(best) in chess.Board().legal_moves
        assert self.client.get("/board").json()["fen"] == chess.STARTING_FEN

    def test_search_depth_zero_is_honoured(self):
        self.client.post("/position", json={"fen": "3r4/2k5/8/8/8/8/8/K2Q4 w - - 0 1"})
        data = self.client.post("/search", json={"depth": 0}).json()
        assert data["best_move"] == "d1d8"
        assert data["score"] == 5

    def test_play_commits_computer_move(self):
        self.client.post("/position", json={"fen": "4k3/8/8/3q4/8/8/3R4/4K3 w - - 0 1"})
        response = self.client.post("/play")
        assert response.status_code == 200
        assert response.json()["move"] == "d2d5"
        assert self.client.get("/board").json()["history"] == ["d2d5"]

    def test_undo(self):
        self.client.post("/move", json={"move": "e2e4"})
        response = self.client.post("/undo")
        assert response.json()["fen"] == chess.STARTING_FEN

    def test_game_over_after_king_capture(self):
        self.client.post("/position", json={"fen": "2k5/3P4/8/8/8/8/8/4K3 w - - 0 1"})
        assert self.client.post("/move", json={"move": "d7c8"}).status_code == 200
        data = self.client.get("/board").json()
        assert data["is_game_over"] is True
        assert data["winner"] == "white"
        assert self.client.post("/search").status_code == 400
        assert self.client.post("/move", json={"move": "e1e2"}).status_code == 400

    def test_reset_board(self):
        self.client.post("/move", json={"move": "e2e4"})
        response = self.client.post("/reset")
        assert response.status_code == 200
        assert response.json()["fen"] == chess.STARTING_FEN
