"""
Helpers for presenting a board.

Everything here is derived from tile values alone; views never keep their
own copy of tile state between events.
"""

from merge2048.game.config import CAPPED_TILE_CATEGORY, MAX_STYLED_TILE


def tile_category(value):
    """
    Visual category for a tile value: '' for an empty cell, 'x<value>' for a
    tile, and a shared 'x8192' category for anything above 4096.
    """
    value = int(value)
    if value <= 0:
        return ""
    if value <= MAX_STYLED_TILE:
        return "x{}".format(value)
    return "x{}".format(CAPPED_TILE_CATEGORY)


def format_board(board, cell_width=6):
    """Renders the board as a boxed text grid; empty cells are blank."""
    cols = len(board[0])
    border = "+" + "+".join(["-" * cell_width] * cols) + "+"
    lines = [border]
    for row in board:
        cells = [str(int(v)).center(cell_width) if v else " " * cell_width for v in row]
        lines.append("|" + "|".join(cells) + "|")
        lines.append(border)
    return "\n".join(lines)
