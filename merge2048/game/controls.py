from merge2048.game.config import DOWN, LEFT, RIGHT, UP

# Browser-style key codes and plain letters both map onto the four moves.
KEY_BINDINGS = {
    'arrowup': UP,
    'arrowdown': DOWN,
    'arrowleft': LEFT,
    'arrowright': RIGHT,
    'keyw': UP,
    'keys': DOWN,
    'keya': LEFT,
    'keyd': RIGHT,
    'w': UP,
    's': DOWN,
    'a': LEFT,
    'd': RIGHT,
    'up': UP,
    'down': DOWN,
    'left': LEFT,
    'right': RIGHT,
}


def direction_for_key(key):
    """Returns the move bound to `key`, or None if the key means nothing to the game."""
    if not isinstance(key, str):
        return None
    return KEY_BINDINGS.get(key.strip().lower())
