"""High score persistence.

The engine only needs two integers: the highest round reached and the
highest target score beaten. Both are written on a round win, and only when
the new value beats the stored one.
"""

import json
import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)

MAX_ROUND_KEY = "HighScore_MaxRound"
MAX_TARGET_KEY = "HighScore_MaxTargetScore"


class HighScoreStore(Protocol):
    """Integer key/value store. Missing keys read as 0."""

    def get(self, key: str) -> int:
        ...

    def set(self, key: str, value: int) -> None:
        ...


class InMemoryHighScoreStore:
    """Store kept in a dict; the default for simulations and tests."""

    def __init__(self, values: dict[str, int] | None = None):
        self.values: dict[str, int] = dict(values or {})

    def get(self, key: str) -> int:
        return self.values.get(key, 0)

    def set(self, key: str, value: int) -> None:
        self.values[key] = value


class JsonHighScoreStore:
    """Store backed by a small JSON file.

    A missing or unreadable file counts as empty; the game never fails
    because of its high score file.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def _load(self) -> dict[str, int]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text())
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable high score file {self.path}: {e}")
            return {}
        if not isinstance(data, dict):
            logger.warning(f"Ignoring malformed high score file {self.path}")
            return {}
        return {k: int(v) for k, v in data.items() if isinstance(v, int)}

    def get(self, key: str) -> int:
        return self._load().get(key, 0)

    def set(self, key: str, value: int) -> None:
        data = self._load()
        data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(data, indent=2, sort_keys=True))
        except OSError as e:
            logger.warning(f"Could not save high scores to {self.path}: {e}")


def record_high_scores(store: HighScoreStore, round_reached: int, target_beaten: int) -> bool:
    """Write each value only if it strictly beats the stored one.

    Returns:
        True if anything was written
    """
    updated = False
    if round_reached > store.get(MAX_ROUND_KEY):
        store.set(MAX_ROUND_KEY, round_reached)
        updated = True
    if target_beaten > store.get(MAX_TARGET_KEY):
        store.set(MAX_TARGET_KEY, target_beaten)
        updated = True
    return updated
