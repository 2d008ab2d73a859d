import argparse
import logging

from atomchess.config import CONFIG
from atomchess.core.board import opponent
from atomchess.core.coords import format_move, parse_move
from atomchess.main import Engine, color_name, parse_color

PROMPT = "\nYour move (e.g., e2e4, 'undo' or 'quit' to exit): "


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Play chess against AtomChess.")
    parser.add_argument("--depth", type=int, help="Computer search depth in plies")
    parser.add_argument("--color", default=CONFIG.ui.human_color, help="Your color: white or black")
    parser.add_argument("--fen", help="Start from this FEN instead of the initial position")
    parser.add_argument("--log-level", default=CONFIG.log_level, help="Logging level")
    return parser.parse_args(argv)


def _report_outcome(engine: Engine) -> bool:
    loser = engine.outcome()
    if loser is None:
        return False
    print(f"\n{color_name(opponent(loser)).capitalize()} captured the king. Game over.")
    return True


def _computer_turn(engine: Engine, computer: int) -> bool:
    print("\nComputer thinking...")
    reply = engine.computer_move(computer)
    if reply is None:
        print("Computer has no move. Game over.")
        return False
    print(format_move(*reply))
    return True


def run_game(engine: Engine, human: int, read=input):
    """Read-move/print-move loop. Returns when the game ends or the player quits."""
    computer = opponent(human)
    if engine.turn == computer and not _computer_turn(engine, computer):
        return

    while True:
        engine.print_board()
        if _report_outcome(engine):
            return
        try:
            text = read(PROMPT).strip()
        except EOFError:
            return
        command = text.lower()
        if command in ("q", "quit"):
            print("\nThanks for playing!")
            return
        if command == "undo":
            # Take back the computer's reply and the human move before it.
            if len(engine.move_history) >= 2 and engine.turn == human:
                engine.undo_move()
                engine.undo_move()
            else:
                print("Nothing to undo.")
            continue

        try:
            origin, target = parse_move(text)
        except ValueError:
            print("Illegal move! Try again.")
            continue
        if not engine.is_legal(origin, target, human):
            print("Illegal move! Try again.")
            continue

        engine.apply_move(origin, target)
        if engine.is_game_over():
            engine.print_board()
            _report_outcome(engine)
            return
        engine.print_board()
        if not _computer_turn(engine, computer):
            return


def main(argv=None):
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level.upper())
    engine = Engine(depth=args.depth, fen=args.fen)
    run_game(engine, parse_color(args.color))


if __name__ == "__main__":
    main()
