from blinker import Signal
from typing import Dict


class EventBus:
    """Simple event bus leveraging blinker Signal objects."""
    def __init__(self):
        self._signals: Dict[str, Signal] = {}

    def subscribe(self, name: str, fn):
        sig = self._signals.setdefault(name, Signal(name))
        # weak=False keeps lambdas and bound methods of short-lived views alive.
        sig.connect(fn, weak=False)

    def unsubscribe(self, name: str, fn):
        sig = self._signals.get(name)
        if sig:
            sig.disconnect(fn)

    def emit(self, name: str, **payload):
        sig = self._signals.get(name)
        if sig:
            sig.send(self, **payload)


# ============================================================================
# BOARD
# ============================================================================
EVENT_BOARD_CHANGED = "board_changed"        # payload: board=ndarray, cells=[(r,c,value),...], reason=str
EVENT_TILE_SPAWNED = "tile_spawned"          # payload: row=int, col=int, value=int


# ============================================================================
# SCORE & SESSION
# ============================================================================
EVENT_SCORE_CHANGED = "score_changed"            # payload: score=int
EVENT_BEST_SCORE_CHANGED = "best_score_changed"  # payload: best_score=int
EVENT_GAME_OVER_CHANGED = "game_over_changed"    # payload: game_over=bool
