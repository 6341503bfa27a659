import unittest
from collections import defaultdict

from merge2048.game.board_engine import BoardEngine
from merge2048.game.config import LEFT
from merge2048.game.events import (
    EVENT_BEST_SCORE_CHANGED,
    EVENT_BOARD_CHANGED,
    EVENT_GAME_OVER_CHANGED,
    EVENT_SCORE_CHANGED,
    EVENT_TILE_SPAWNED,
    EventBus,
)

ALL_EVENTS = (
    EVENT_BOARD_CHANGED,
    EVENT_TILE_SPAWNED,
    EVENT_SCORE_CHANGED,
    EVENT_BEST_SCORE_CHANGED,
    EVENT_GAME_OVER_CHANGED,
)


class Recorder:
    def __init__(self, bus):
        self.events = defaultdict(list)
        for name in ALL_EVENTS:
            bus.subscribe(name, self._make_handler(name))

    def _make_handler(self, name):
        def handler(sender, **payload):
            self.events[name].append(payload)
        return handler

    def clear(self):
        self.events.clear()


class TestEventBus(unittest.TestCase):

    def test_emit_without_subscribers_is_noop(self):
        EventBus().emit("nothing", value=1)

    def test_subscribe_and_unsubscribe(self):
        bus = EventBus()
        received = []

        def handler(sender, value):
            received.append(value)

        bus.subscribe("ping", handler)
        bus.emit("ping", value=1)
        bus.unsubscribe("ping", handler)
        bus.emit("ping", value=2)
        self.assertEqual(received, [1])


class TestEngineEvents(unittest.TestCase):

    def setUp(self):
        self.bus = EventBus()
        self.recorder = Recorder(self.bus)
        self.game = BoardEngine(seed=1, event_bus=self.bus)

    def test_new_game_publishes_full_board(self):
        board_events = self.recorder.events[EVENT_BOARD_CHANGED]
        self.assertEqual(len(board_events), 1)
        self.assertEqual(board_events[0]["reason"], "new_game")
        self.assertEqual(len(board_events[0]["cells"]), 16)
        self.assertEqual(self.recorder.events[EVENT_SCORE_CHANGED], [{"score": 0}])
        self.assertEqual(self.recorder.events[EVENT_GAME_OVER_CHANGED], [{"game_over": False}])

    def test_accepted_move_publishes_changes(self):
        self.game.set_board([[2, 2, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]])
        self.recorder.clear()

        self.game.move(LEFT)

        board_events = self.recorder.events[EVENT_BOARD_CHANGED]
        self.assertEqual(len(board_events), 1)
        self.assertEqual(board_events[0]["reason"], "move")
        self.assertEqual(sorted(board_events[0]["cells"]), [(0, 0, 4), (0, 1, 0)])

        spawned = self.recorder.events[EVENT_TILE_SPAWNED]
        self.assertEqual(len(spawned), 1)
        self.assertEqual(spawned[0]["value"], 2)
        self.assertEqual(self.game.board[spawned[0]["row"], spawned[0]["col"]], 2)

        self.assertEqual(self.recorder.events[EVENT_SCORE_CHANGED], [{"score": 4}])
        self.assertEqual(self.recorder.events[EVENT_GAME_OVER_CHANGED], [])

    def test_snapshot_in_event_is_a_copy(self):
        self.game.set_board([[2, 2, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]])
        self.recorder.clear()
        self.game.move(LEFT)
        snapshot = self.recorder.events[EVENT_BOARD_CHANGED][0]["board"]
        snapshot[0, 0] = 1024
        self.assertEqual(self.game.board[0, 0], 4)

    def test_rejected_move_publishes_nothing(self):
        self.game.set_board([[2, 4, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]])
        self.recorder.clear()
        self.assertFalse(self.game.move(LEFT))
        self.assertEqual(dict(self.recorder.events), {})

    def test_game_over_publishes_indicator_and_best_score(self):
        self.game.set_board([
            [2, 4, 2, 4],
            [4, 2, 4, 2],
            [2, 4, 2, 4],
            [0, 8, 16, 32]
        ])
        self.game.score = 12
        self.recorder.clear()

        self.game.move(LEFT)

        self.assertEqual(self.recorder.events[EVENT_GAME_OVER_CHANGED], [{"game_over": True}])
        self.assertEqual(self.recorder.events[EVENT_BEST_SCORE_CHANGED], [{"best_score": 12}])

    def test_spawn_tile_publishes_cell(self):
        self.recorder.clear()
        cell = self.game.spawn_tile()
        self.assertEqual(self.recorder.events[EVENT_TILE_SPAWNED],
                         [{"row": cell[0], "col": cell[1], "value": 2}])


if __name__ == "__main__":
    unittest.main()
