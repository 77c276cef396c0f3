import random

import pytest

from rps_game.config import GameConfig
from rps_game.engine import Mode
from rps_game.oracle import Difficulty, Strategy
from rps_game.rounds import FeedbackSink, RoundEngine
from rps_game.scheduler import ManualScheduler
from rps_game.store import MemoryStore


class ScriptedStrategy(Strategy):
    """Plays a fixed list of moves and records what it was shown."""
    name = "Scripted"

    def __init__(self, moves):
        super().__init__()
        self.moves = list(moves)
        self.calls = []

    def choose(self, round_num, my_history, opp_history):
        self.calls.append((round_num, list(my_history), list(opp_history)))
        return self.moves.pop(0)


class RecordingFeedback(FeedbackSink):
    def __init__(self):
        self.moves = []
        self.results = []

    def move_submitted(self, player, move):
        self.moves.append((player, move))

    def round_resolved(self, record):
        self.results.append(record)


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def config(tmp_path):
    return GameConfig(max_rounds=5, data_dir=tmp_path)


@pytest.fixture
def make_engine(config, scheduler, store):
    def factory(mode=Mode.SINGLE, difficulty=Difficulty.EASY, max_rounds=None, **kwargs):
        cfg = config.with_overrides(max_rounds=max_rounds)
        kwargs.setdefault("rng", random.Random(7))
        return RoundEngine(
            config=cfg, scheduler=scheduler, store=store,
            mode=mode, difficulty=difficulty, **kwargs,
        )
    return factory
