"""
Interactive terminal front-end.

Acts as the render, score, game-over and input collaborators of the engine:
it subscribes to the engine's events for everything it prints and turns the
typed keys into move commands.
"""

import argparse

from merge2048.game.best_score import BestScoreStore
from merge2048.game.board_engine import BoardEngine
from merge2048.game.controls import direction_for_key
from merge2048.game.display import format_board
from merge2048.game.events import (
    EVENT_BEST_SCORE_CHANGED,
    EVENT_BOARD_CHANGED,
    EVENT_GAME_OVER_CHANGED,
    EVENT_SCORE_CHANGED,
    EventBus,
)


def build_parser():
    parser = argparse.ArgumentParser(description="Plays 2048 in the terminal.")
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for tile spawns (reproducible games)."
    )
    parser.add_argument(
        "--best-score-file",
        type=str,
        default=None,
        help="Where the best score is kept (defaults to ~/.merge2048/best_score.json)."
    )
    return parser


class TerminalView:
    """Keeps the latest values it was sent and prints them as one frame."""

    def __init__(self, event_bus):
        self.event_bus = event_bus
        self.board = None
        self.score = 0
        self.best_score = 0
        self.game_over = False

        self._handlers = {
            EVENT_BOARD_CHANGED: self._on_board_changed,
            EVENT_SCORE_CHANGED: self._on_score_changed,
            EVENT_BEST_SCORE_CHANGED: self._on_best_score_changed,
            EVENT_GAME_OVER_CHANGED: self._on_game_over_changed,
        }
        for name, handler in self._handlers.items():
            event_bus.subscribe(name, handler)

    def close(self):
        """Stops listening; the view keeps the last frame it saw."""
        for name, handler in self._handlers.items():
            self.event_bus.unsubscribe(name, handler)

    def _on_board_changed(self, sender, board, cells, reason):
        self.board = board

    def _on_score_changed(self, sender, score):
        self.score = score

    def _on_best_score_changed(self, sender, best_score):
        self.best_score = best_score

    def _on_game_over_changed(self, sender, game_over):
        self.game_over = game_over

    def draw(self):
        print(f"Score: {self.score}    Best: {max(self.best_score, self.score)}")
        if self.board is not None:
            print(format_board(self.board))
        if self.game_over:
            print("Game Over! Press 'n' for a new game or 'q' to quit.")


def main(argv=None):
    args = build_parser().parse_args(argv)

    event_bus = EventBus()
    view = TerminalView(event_bus)
    store = BestScoreStore(args.best_score_file)
    engine = BoardEngine(seed=args.seed, best_score_store=store, event_bus=event_bus)
    view.best_score = engine.best_score

    print("Welcome to 2048!")
    print("Use W (up), A (left), S (down), D (right) to play. 'n' restarts, 'q' quits.")

    while True:
        view.draw()

        try:
            move_input = input("Enter your move (w/a/s/d): ").strip().lower()
        except EOFError:
            break

        if move_input == 'q':
            break
        if move_input == 'n':
            engine.new_game()
            continue

        direction = direction_for_key(move_input)
        if direction is None:
            print("Invalid input. Please use w, a, s, or d.")
        elif not engine.move(direction) and not engine.game_over:
            print("Invalid move. Try another direction.")

    engine.end_session()
    view.close()
    print(f"Best score: {engine.best_score}")


if __name__ == "__main__":
    main()
