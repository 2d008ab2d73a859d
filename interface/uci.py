import logging
import sys
from typing import List

from atomchess.config import CONFIG
from atomchess.core.search import SearchPlan
from atomchess.core.utils import format_info
from atomchess.main import Engine

log = logging.getLogger(__name__)


class UCI:
    def __init__(self, engine: Engine = None, out=None):
        self.engine = engine or Engine()
        self.out = out or sys.stdout

    def send(self, line: str):
        print(line, file=self.out, flush=True)

    def run(self, stream=None):
        for line in stream or sys.stdin:
            if not self.handle(line):
                break

    def handle(self, command: str) -> bool:
        """Process one command line. Returns False when the session should end."""
        tokens = command.split()
        if not tokens:
            return True
        name, args = tokens[0], tokens[1:]
        if name == "uci":
            self.send(f"id name {CONFIG.ui.engine_name}")
            self.send(f"id author {CONFIG.ui.engine_author}")
            self.send("uciok")
        elif name == "isready":
            self.send("readyok")
        elif name == "ucinewgame":
            self.engine.initialize()
        elif name == "position":
            self._parse_position(args)
        elif name == "go":
            self._go(args)
        elif name == "quit":
            return False
        else:
            log.debug("Ignoring unknown command: %s", command.strip())
        return True

    def _parse_position(self, tokens: List[str]):
        if not tokens or tokens[0] not in ("startpos", "fen"):
            log.warning("Ignoring malformed position command: %s", " ".join(tokens))
            return
        if "moves" in tokens:
            split = tokens.index("moves")
            head, moves = tokens[:split], tokens[split + 1:]
        else:
            head, moves = tokens, []

        if head[0] == "startpos":
            self.engine.initialize()
        else:
            try:
                self.engine.set_fen(" ".join(head[1:]))
            except ValueError:
                log.warning("Invalid FEN in position command: %s", " ".join(head[1:]))
                return

        for move in moves:
            if not self.engine.make_move(move):
                log.warning("Illegal move in position command: %s", move)
                break

    def _go(self, tokens: List[str]):
        depth = self.engine.search.max_depth
        if "depth" in tokens:
            try:
                depth = int(tokens[tokens.index("depth") + 1])
            except (IndexError, ValueError):
                log.warning("Bad depth in go command, using %d", depth)
        search = self.engine.search
        result = search.search(self.engine.board, self.engine.turn, SearchPlan.best_move(depth))
        self.send(format_info(depth, result.score, result.nodes, result.elapsed, result.best_move))
        self.send(f"bestmove {result.best_move.uci() if result.best_move else '0000'}")


def main():
    logging.basicConfig(level=CONFIG.log_level, stream=sys.stderr)
    UCI().run()


if __name__ == "__main__":
    main()
