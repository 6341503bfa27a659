"""
Game Configuration for merge2048.

Central place for the constants shared by the engine and its front-ends.
The board dimensions are fixed for the lifetime of a session; the engine
accepts overrides at construction time mostly so tests can build small
boards without touching these values.
"""

from pathlib import Path

# --- Board ---
ROWS = 4
COLS = 4

# Number of tiles placed by new_game() before the first move.
START_TILES = 2

# Every spawned tile carries this value.
SPAWN_VALUE = 2

# --- Directions ---
UP = 'up'
DOWN = 'down'
LEFT = 'left'
RIGHT = 'right'
DIRECTIONS = (UP, DOWN, LEFT, RIGHT)

# --- Presentation ---
# Tiles above this value share the visual category of the cap.
MAX_STYLED_TILE = 4096
CAPPED_TILE_CATEGORY = 8192

# --- Persistence ---
BEST_SCORE_PATH = Path.home() / ".merge2048" / "best_score.json"
