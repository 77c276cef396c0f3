"""Key-value persistence for theme, difficulty, round history and leaderboard."""

import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod
from dataclasses import dataclass, asdict
from pathlib import Path
from typing import Any

from .engine import Mode, RoundRecord

logger = logging.getLogger(__name__)

THEME_KEY = "theme"
DIFFICULTY_KEY = "difficulty"
HISTORY_KEY = "history"
LEADERBOARD_KEY = "leaderboard"


class KeyValueStore(ABC):
    """Durable JSON values by key, last write wins."""

    @abstractmethod
    def load(self, key: str, default: Any = None) -> Any:
        ...

    @abstractmethod
    def save(self, key: str, value: Any) -> None:
        ...


class MemoryStore(KeyValueStore):
    """In-process store. Values are kept as JSON text, so nothing is shared by reference."""

    def __init__(self, initial: dict = None):
        self._data: dict[str, str] = {}
        for key, value in (initial or {}).items():
            self.save(key, value)

    def load(self, key, default=None):
        raw = self._data.get(key)
        if raw is None:
            return default
        try:
            return json.loads(raw)
        except ValueError:
            logger.warning("Malformed JSON under key %r, using default", key)
            return default

    def save(self, key, value):
        self._data[key] = json.dumps(value)

    def save_raw(self, key: str, text: str):
        """Store text verbatim, bypassing encoding."""
        self._data[key] = text


class JsonFileStore(KeyValueStore):
    """One ``<key>.json`` file per key under ``directory``."""

    def __init__(self, directory):
        self.directory = Path(directory)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def load(self, key, default=None):
        path = self._path(key)
        if not path.exists():
            return default
        try:
            with open(path, "r", encoding="utf-8") as f:
                return json.load(f)
        except (OSError, ValueError) as exc:
            logger.warning("Could not read %s (%s), using default", path, exc)
            return default

    def save(self, key, value):
        """Atomically write JSON using a temp file + replace."""
        path = self._path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix=path.name, dir=str(path.parent))
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(value, f, ensure_ascii=False, indent=2)
            os.replace(tmp_name, path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise


# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------

def encode_history(history) -> list[dict]:
    return [r.to_dict() for r in history]


def decode_history(data) -> list[RoundRecord]:
    """Parse a persisted history; anything malformed yields an empty history."""
    if not isinstance(data, list):
        return []
    try:
        return [RoundRecord.from_dict(item) for item in data]
    except (KeyError, TypeError, ValueError) as exc:
        logger.warning("Discarding malformed history (%s)", exc)
        return []


def load_history(store: KeyValueStore) -> list[RoundRecord]:
    return decode_history(store.load(HISTORY_KEY, []))


def save_history(store: KeyValueStore, history):
    store.save(HISTORY_KEY, encode_history(history))


# ---------------------------------------------------------------------------
# Leaderboard
# ---------------------------------------------------------------------------

def _count(value) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        return 0
    return value


@dataclass
class Leaderboard:
    """Completed matches: player 1 wins, computer wins, player 2 wins, draws.

    Computer and player 2 are tracked separately; draws are shared.
    """
    player: int = 0
    computer: int = 0
    player2: int = 0
    draws: int = 0

    @classmethod
    def from_dict(cls, data) -> "Leaderboard":
        if not isinstance(data, dict):
            return cls()
        return cls(**{key: _count(data.get(key)) for key in ("player", "computer", "player2", "draws")})

    def to_dict(self) -> dict:
        return asdict(self)

    @property
    def total(self) -> int:
        return self.player + self.computer + self.player2 + self.draws

    def record_match(self, mode: Mode, player1_score: int, player2_score: int) -> str:
        """Count one finished match and return the key that was incremented."""
        if player1_score > player2_score:
            key = "player"
        elif player2_score > player1_score:
            key = "computer" if mode is Mode.SINGLE else "player2"
        else:
            key = "draws"
        setattr(self, key, getattr(self, key) + 1)
        return key


def load_leaderboard(store: KeyValueStore) -> Leaderboard:
    return Leaderboard.from_dict(store.load(LEADERBOARD_KEY, {}))


def save_leaderboard(store: KeyValueStore, leaderboard: Leaderboard):
    store.save(LEADERBOARD_KEY, leaderboard.to_dict())
