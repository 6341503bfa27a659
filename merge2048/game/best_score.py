from __future__ import annotations

import json
from pathlib import Path

from merge2048.game.config import BEST_SCORE_PATH


class BestScoreStore:
    """Reads and writes the best score as a small JSON document."""

    def __init__(self, save_path: Path | str | None = None) -> None:
        self._save_path = Path(save_path) if save_path is not None else BEST_SCORE_PATH

    @property
    def path(self) -> Path:
        return self._save_path

    def read(self) -> int:
        try:
            with self._save_path.open("r", encoding="utf-8") as handle:
                payload = json.load(handle)
        except FileNotFoundError:
            return 0
        except ValueError:
            # JSONDecodeError and UnicodeDecodeError
            return 0
        if not isinstance(payload, dict):
            return 0
        value = payload.get("best_score", 0)
        # Only whole numbers count; bool is an int subclass and floats may be inf/nan
        if isinstance(value, str):
            try:
                value = int(value)
            except ValueError:
                return 0
        if isinstance(value, bool) or not isinstance(value, int):
            return 0
        return value if value > 0 else 0

    def write(self, best_score: int) -> None:
        self._save_path.parent.mkdir(parents=True, exist_ok=True)
        with self._save_path.open("w", encoding="utf-8") as handle:
            json.dump({"best_score": int(best_score)}, handle, indent=2)
