"""Application shell: persisted settings around a RoundEngine."""

import logging
import random
from typing import Optional

from .config import GameConfig
from .engine import Mode
from .oracle import Difficulty
from .rounds import FeedbackSink, RoundEngine
from .scheduler import Scheduler
from .store import (
    KeyValueStore, JsonFileStore, Leaderboard,
    THEME_KEY, DIFFICULTY_KEY, load_leaderboard,
)

logger = logging.getLogger(__name__)

THEMES = {
    "light": {
        "background": "#fefefe",
        "text_color": "#222",
        "button_bg": "#764ba2",
        "button_color": "#fff",
        "result_win": "#4ade80",
        "result_lose": "#f87171",
        "result_draw": "#fbbf24",
    },
    "dark": {
        "background": "#1a1a2e",
        "text_color": "#eee",
        "button_bg": "#764ba2",
        "button_color": "#fff",
        "result_win": "#4ade80",
        "result_lose": "#f87171",
        "result_draw": "#fbbf24",
    },
}
DEFAULT_THEME = "dark"


class GameShell:
    """Owns theme, mode and difficulty and the engine they configure."""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        scheduler: Optional[Scheduler] = None,
        store: Optional[KeyValueStore] = None,
        feedback: Optional[FeedbackSink] = None,
        rng: Optional[random.Random] = None,
    ):
        self.config = config or GameConfig()
        self.store = store if store is not None else JsonFileStore(self.config.data_dir)

        self.theme = self.store.load(THEME_KEY, DEFAULT_THEME)
        if not isinstance(self.theme, str) or self.theme not in THEMES:
            logger.warning("Unknown stored theme %r, using %s", self.theme, DEFAULT_THEME)
            self.theme = DEFAULT_THEME

        try:
            difficulty = Difficulty(self.store.load(DIFFICULTY_KEY, Difficulty.MEDIUM.value))
        except ValueError:
            difficulty = Difficulty.MEDIUM

        self.engine = RoundEngine(
            config=self.config,
            scheduler=scheduler,
            store=self.store,
            feedback=feedback,
            mode=Mode.SINGLE,
            difficulty=difficulty,
            rng=rng,
        )

    @property
    def mode(self) -> Mode:
        return self.engine.mode

    @property
    def difficulty(self) -> Difficulty:
        return self.engine.difficulty

    def toggle_theme(self) -> str:
        self.theme = "light" if self.theme == "dark" else "dark"
        self.store.save(THEME_KEY, self.theme)
        return self.theme

    def theme_palette(self) -> dict:
        return dict(THEMES[self.theme])

    def toggle_mode(self) -> Mode:
        new_mode = Mode.MULTI if self.mode is Mode.SINGLE else Mode.SINGLE
        self.set_mode(new_mode)
        return new_mode

    def set_mode(self, mode):
        self.engine.set_mode(mode)

    def set_difficulty(self, difficulty):
        self.engine.set_difficulty(difficulty)
        self.store.save(DIFFICULTY_KEY, self.engine.difficulty.value)

    def leaderboard(self) -> Leaderboard:
        return load_leaderboard(self.store)

    def snapshot(self) -> dict:
        data = self.engine.snapshot()
        data["theme"] = self.theme
        data["palette"] = self.theme_palette()
        data["leaderboard"] = self.leaderboard().to_dict()
        return data
