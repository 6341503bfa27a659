"""
Core Game Logic for merge2048.

This module owns the board state machine: sliding and merging tiles, spawning
new tiles, tracking the score and detecting the terminal state.

Key points:
1.  Numba JIT Compilation: the slide/merge of a single line is compiled with
    `@njit`; every direction is reduced to that one kernel by handing it
    reversed and/or transposed views of the board.
2.  Two Phases: `preview` computes the outcome of a move *without* mutating
    the session. `move` commits that outcome, spawns and re-checks the
    terminal state, and only then publishes events to the render, score,
    persistence and game-over collaborators.
3.  No Globals: all state lives on a `BoardEngine` instance, so independent
    sessions can coexist (tests build as many as they like).
"""

import random

import numpy as np
from numba import njit

from merge2048.game.config import (
    COLS, DIRECTIONS, DOWN, LEFT, RIGHT, ROWS, SPAWN_VALUE, START_TILES, UP,
)
from merge2048.game.events import (
    EVENT_BEST_SCORE_CHANGED,
    EVENT_BOARD_CHANGED,
    EVENT_GAME_OVER_CHANGED,
    EVENT_SCORE_CHANGED,
    EVENT_TILE_SPAWNED,
    EventBus,
)


@njit
def _collapse_kernel(line):
    """
    Core Logic: compacts and merges a 1D array of tiles towards index 0.

    - [2, 2, 2, 0] -> [4, 2, 0, 0] (a doubled tile does not merge again)
    - [2, 2, 2, 2] -> [4, 4, 0, 0] (two independent merges)

    Args:
        line (np.array): A 1D int64 row or column, already oriented.

    Returns:
        (np.array, int): The new line and the score gained.
    """
    length = line.shape[0]
    packed = np.zeros(length, dtype=np.int64)

    # 1. Compact: drop the gaps
    count = 0
    for i in range(length):
        if line[i] != 0:
            packed[count] = line[i]
            count += 1

    # 2. Merge: the right partner is zeroed so the doubled value is never
    # compared again within this pass
    score = 0
    for i in range(count - 1):
        if packed[i] != 0 and packed[i] == packed[i + 1]:
            packed[i] *= 2
            packed[i + 1] = 0
            score += packed[i]

    # 3. Compact again, 4. pad (result is zero-initialised)
    result = np.zeros(length, dtype=np.int64)
    write_idx = 0
    for i in range(count):
        if packed[i] != 0:
            result[write_idx] = packed[i]
            write_idx += 1

    return result, score


def collapse_line(line):
    """
    Slides and merges one line towards its start.

    The input is never modified. Returns the new line (same length) and the
    score gained by the merges.
    """
    arr = np.ascontiguousarray(line, dtype=np.int64)
    new_line, score = _collapse_kernel(arr)
    return new_line, int(score)


def _check_direction(direction):
    if direction not in DIRECTIONS:
        raise ValueError(f"Unknown direction: {direction!r}. Must be one of {DIRECTIONS}.")


def _oriented_lines(board, direction):
    """
    Returns a view of `board` whose rows are the lines to collapse for
    `direction`, each ordered so the tiles travel towards index 0.
    Writing into the view writes into `board`.
    """
    if direction == LEFT:
        return board
    if direction == RIGHT:
        return board[:, ::-1]
    if direction == UP:
        return board.T
    _check_direction(direction)
    return board.T[:, ::-1]


def _is_tile_value(value):
    return value == 0 or (value >= 2 and (value & (value - 1)) == 0)


class BoardEngine:
    def __init__(self, rows=ROWS, cols=COLS, seed=None, best_score_store=None, event_bus=None):
        """
        The Game Engine. Manages one session: board, score and the game-over flag.

        Args:
            rows, cols: Board dimensions, fixed for the lifetime of the engine.
            seed: Seed for the spawn RNG (None for system entropy).
            best_score_store: Object with `read()` / `write(int)`; when None the
                best score is only kept in memory.
            event_bus: EventBus the collaborators subscribe to.
        """
        self.rows = rows
        self.cols = cols
        self.rng = random.Random(seed)
        self.best_score_store = best_score_store
        self.event_bus = event_bus if event_bus is not None else EventBus()

        self.board = np.zeros((self.rows, self.cols), dtype=np.int64)
        self.score = 0
        self.game_over = False
        self.best_score = best_score_store.read() if best_score_store is not None else 0

        self.new_game()

    # --- Session lifecycle ---

    def new_game(self):
        """
        Ends the current session and starts a fresh one in-place.

        The finishing session's score is offered to the best-score store
        first, then the board is cleared and the starting tiles are placed.
        """
        self.end_session()

        self.board.fill(0)
        self.score = 0
        self.game_over = False
        for _ in range(START_TILES):
            self._add_new_tile()

        self._emit_board("new_game", self._all_cells())
        self.event_bus.emit(EVENT_SCORE_CHANGED, score=self.score)
        self.event_bus.emit(EVENT_GAME_OVER_CHANGED, game_over=False)

    # --- Spawning ---

    def empty_cells(self):
        """Finds all empty cells (where value is 0)."""
        rows, cols = np.where(self.board == 0)
        return [(int(r), int(c)) for r, c in zip(rows, cols)]

    def _add_new_tile(self):
        """
        Places SPAWN_VALUE on an empty cell picked uniformly at random.
        Returns the (row, col) used, or None when the board is full.
        """
        empty_cells = self.empty_cells()
        if not empty_cells:
            return None
        row, col = self.rng.choice(empty_cells)
        self.board[row, col] = SPAWN_VALUE
        return row, col

    def spawn_tile(self):
        """Spawns one tile and notifies the render collaborator. No-op on a full board."""
        cell = self._add_new_tile()
        if cell is not None:
            self._emit_spawn(cell)
        return cell

    # --- Moves ---

    def preview(self, direction):
        """
        Calculates the result of a move *without* touching the session.

        Args:
            direction (str): One of 'up', 'down', 'left', 'right'.

        Returns:
            (np.ndarray, int, bool): The new board, score gained, and whether
            any cell changed.
        """
        new_board = self.board.copy()
        lines = _oriented_lines(new_board, direction)

        move_score = 0
        for i in range(lines.shape[0]):
            new_line, line_score = collapse_line(lines[i])
            lines[i] = new_line
            move_score += line_score

        board_changed = not np.array_equal(self.board, new_board)
        return new_board, move_score, board_changed

    def move(self, direction):
        """
        Executes a move on the live session.

        A move that changes nothing is rejected, and so is any move once the
        game is over. Returns True when the move was accepted.

        Side Effects (accepted moves only):
            1. Updates self.board and self.score
            2. Spawns a new tile
            3. Re-evaluates the game-over flag
            4. Publishes board, spawn, score and game-over events
        """
        _check_direction(direction)
        if self.game_over:
            return False
        new_board, move_score, board_changed = self.preview(direction)
        if not board_changed:
            return False

        # Phase 1: state transition
        changed_cells = self._diff_cells(new_board)
        self.board = new_board
        self.score += move_score
        spawned = self._add_new_tile()
        became_over = self._update_game_over()

        # Phase 2: effects
        self._emit_board("move", changed_cells)
        if spawned is not None:
            self._emit_spawn(spawned)
        self.event_bus.emit(EVENT_SCORE_CHANGED, score=self.score)
        if became_over:
            self._finish_session()
        return True

    def is_move_possible(self, direction):
        """Checks if a specific move would change the board."""
        return self.preview(direction)[2]

    def get_valid_moves(self):
        """Returns the directions that would currently change the board."""
        return [direction for direction in DIRECTIONS if self.is_move_possible(direction)]

    # --- Termination ---

    def _no_moves_left(self):
        if (self.board == 0).any():
            # Can still add tiles
            return False

        # Checks for possible horizontal merges
        if np.any(self.board[:, :-1] == self.board[:, 1:]):
            return False

        # Checks for possible vertical merges
        if np.any(self.board[:-1, :] == self.board[1:, :]):
            return False

        return True

    def _update_game_over(self):
        """Sets the flag; returns True only on the transition into game over."""
        if self.game_over:
            return False
        self.game_over = self._no_moves_left()
        return self.game_over

    def check_game_over(self):
        """
        True if no empty cell and no adjacent equal pair remain.
        Entering game over persists the best score and raises the indicator.
        """
        if self._update_game_over():
            self._finish_session()
        return self.game_over

    def _finish_session(self):
        self.end_session()
        self.event_bus.emit(EVENT_GAME_OVER_CHANGED, game_over=True)

    def end_session(self):
        """Persists the current score if it beats the best score. Safe to call repeatedly."""
        if self.score <= self.best_score:
            return
        self.best_score = self.score
        if self.best_score_store is not None:
            self.best_score_store.write(self.best_score)
        self.event_bus.emit(EVENT_BEST_SCORE_CHANGED, best_score=self.best_score)

    # --- Snapshots ---

    def snapshot(self):
        """A copy of the board that collaborators may keep or modify."""
        return self.board.copy()

    def get_max_tile(self):
        return int(np.max(self.board))

    def set_board(self, cells):
        """
        Replaces the board with `cells` (e.g. to set up a position).

        Raises:
            ValueError: wrong shape, non-integer cells, or a value that is
            neither 0 nor a power of two.
        """
        try:
            raw = np.asarray(cells)
        except OverflowError as exc:
            raise ValueError("Board cells must fit in 64-bit integers.") from exc
        if raw.shape != (self.rows, self.cols):
            raise ValueError(f"Board must have shape {(self.rows, self.cols)}, got {raw.shape}.")
        # Floats, bools and ints too large for int64 (object dtype) are refused
        if raw.dtype.kind not in "iu":
            raise ValueError(f"Board cells must be integers, got dtype {raw.dtype}.")
        board = raw.astype(np.int64)
        if not np.array_equal(board, raw):
            raise ValueError("Board cells must fit in 64-bit integers.")
        for value in board.flat:
            if not _is_tile_value(int(value)):
                raise ValueError(f"Invalid tile value: {int(value)}.")
        self.board = board
        self.game_over = False
        self._emit_board("set_board", self._all_cells())
        self.check_game_over()

    def _diff_cells(self, new_board):
        rows, cols = np.nonzero(self.board != new_board)
        return [(int(r), int(c), int(new_board[r, c])) for r, c in zip(rows, cols)]

    def _all_cells(self):
        return [(r, c, int(self.board[r, c])) for r in range(self.rows) for c in range(self.cols)]

    def _emit_board(self, reason, cells):
        self.event_bus.emit(EVENT_BOARD_CHANGED, board=self.snapshot(), cells=cells, reason=reason)

    def _emit_spawn(self, cell):
        row, col = cell
        self.event_bus.emit(EVENT_TILE_SPAWNED, row=row, col=col, value=int(self.board[row, col]))

    def __str__(self):
        """String representation for printing the board."""
        score_str = "Score: {}\n".format(self.score)
        board_str = str(self.board)
        return score_str + board_str


if __name__ == "__main__":
    # --- Interactive Terminal Mode ---
    from merge2048.play import main
    main()
