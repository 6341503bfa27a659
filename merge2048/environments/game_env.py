import gymnasium
from gymnasium import spaces
import numpy as np

from merge2048.game.board_engine import BoardEngine
from merge2048.game.config import COLS, DOWN, LEFT, RIGHT, ROWS, UP
from merge2048.game.display import format_board

# Largest tile a 4x4 board can ever hold is 2^17.
MAX_TILE_VALUE = 2 ** 17


class Merge2048Env(gymnasium.Env):
    """
    Gymnasium front-end for the board engine.

    Maps the discrete actions onto the engine's move commands and exposes
    board snapshots as observations. The reward of a step is the score the
    move gained; a move that changes nothing is simply rejected (reward 0).
    """

    metadata = {"render_modes": ["human", "ansi"]}

    def __init__(self, render_mode=None, best_score_store=None):
        super().__init__()
        self.engine = BoardEngine(best_score_store=best_score_store)
        self.action_space = spaces.Discrete(4)
        self.observation_space = spaces.Box(low=0,
                                            high=MAX_TILE_VALUE,
                                            shape=(ROWS, COLS),
                                            dtype=np.int64)

        self._action_to_direction = {
            0: UP,
            1: RIGHT,
            2: DOWN,
            3: LEFT
        }
        self.render_mode = render_mode

    def _get_info(self, moved=False):
        return {
            "score": self.engine.score,
            "best_score": self.engine.best_score,
            "max_tile": self.engine.get_max_tile(),
            "moved": moved,
            "num_empty_cells": len(self.engine.empty_cells()),
        }

    def reset(self, seed=None, options=None):
        super().reset(seed=seed)
        if seed is not None:
            self.engine.rng.seed(seed)
        self.engine.new_game()

        if self.render_mode == "human":
            self.render()
        return self.engine.snapshot(), self._get_info()

    def step(self, action):
        direction = self._action_to_direction[int(action)]
        score_before_move = self.engine.score

        moved = self.engine.move(direction)
        reward = self.engine.score - score_before_move
        terminated = self.engine.game_over
        truncated = False

        if self.render_mode == "human":
            self.render()

        return self.engine.snapshot(), reward, terminated, truncated, self._get_info(moved)

    def render(self):
        text = "Score: {}\n{}".format(self.engine.score, format_board(self.engine.board))
        if self.render_mode == "human":
            print(text)
        elif self.render_mode == "ansi":
            return text

    def close(self):
        self.engine.end_session()
