"""Game settings, with environment overrides for deployment."""

import os
from dataclasses import dataclass, field, replace
from pathlib import Path

MAX_ROUNDS = 5
MOVE_TIME_LIMIT = 7        # seconds per move
THINKING_DELAY = 1.5       # seconds the computer "thinks"
RESULT_DELAY = 2.5         # seconds a round result stays on screen
DEFAULT_DATA_DIR = "~/.rps_game"


@dataclass(frozen=True)
class GameConfig:
    max_rounds: int = MAX_ROUNDS
    move_time_limit: int = MOVE_TIME_LIMIT
    thinking_delay: float = THINKING_DELAY
    result_delay: float = RESULT_DELAY
    data_dir: Path = field(default_factory=lambda: Path(DEFAULT_DATA_DIR).expanduser())

    def __post_init__(self):
        if self.max_rounds < 1:
            raise ValueError(f"max_rounds must be at least 1, got {self.max_rounds}")
        if self.move_time_limit < 1:
            raise ValueError(f"move_time_limit must be at least 1, got {self.move_time_limit}")
        if self.thinking_delay < 0 or self.result_delay < 0:
            raise ValueError("delays must not be negative")

    @classmethod
    def from_env(cls, environ=None) -> "GameConfig":
        """Build a config from RPS_* environment variables, falling back to defaults."""
        env = os.environ if environ is None else environ
        return cls(
            max_rounds=int(env.get("RPS_MAX_ROUNDS", MAX_ROUNDS)),
            move_time_limit=int(env.get("RPS_MOVE_TIME_LIMIT", MOVE_TIME_LIMIT)),
            thinking_delay=float(env.get("RPS_THINKING_DELAY", THINKING_DELAY)),
            result_delay=float(env.get("RPS_RESULT_DELAY", RESULT_DELAY)),
            data_dir=Path(env.get("RPS_DATA_DIR", DEFAULT_DATA_DIR)).expanduser(),
        )

    def with_overrides(self, **overrides) -> "GameConfig":
        """Return a copy with every non-None override applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})
