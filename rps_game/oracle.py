"""Computer move selection for single-player matches, one strategy per difficulty."""

from abc import ABC, abstractmethod
from collections import Counter
from enum import Enum
import random
from typing import Optional, Union

from .engine import Move, MOVES, BEATEN_BY


class Difficulty(Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Strategy(ABC):
    """Base class for computer strategies."""

    def __init__(self):
        self.rng: random.Random = random.Random()

    @property
    @abstractmethod
    def name(self) -> str:
        ...

    @abstractmethod
    def choose(self, round_num: int, my_history: list[Move], opp_history: list[Move]) -> Move:
        ...

    def __repr__(self):
        return f"<{self.name}>"


def _counter_move(move: Move) -> Move:
    """Return the move that beats `move`."""
    return BEATEN_BY[move]


class PureRandom(Strategy):
    """Chooses a move completely at random.

    Each move has an equal probability and the history is ignored.
    """
    name = "Pure Random"

    def choose(self, round_num, my_history, opp_history):
        return self.rng.choice(MOVES)


class LastMoveCounter(Strategy):
    """Plays the counter to the opponent's most recent move.

    Random on the first round of a match.
    """
    name = "Last-Move Counter"

    def choose(self, round_num, my_history, opp_history):
        if not opp_history:
            return self.rng.choice(MOVES)
        return _counter_move(opp_history[-1])


class FrequencyAnalyzer(Strategy):
    """Counters the opponent's most frequent move over the whole match.

    Ties go to the move the opponent played first: ``Counter`` keeps
    insertion order and ``most_common`` is stable, so ``[paper, rock]``
    is read as paper.
    """
    name = "Frequency Analyzer"

    def choose(self, round_num, my_history, opp_history):
        if not opp_history:
            return self.rng.choice(MOVES)
        counts = Counter(opp_history)
        most_common = counts.most_common(1)[0][0]
        return _counter_move(most_common)


STRATEGY_CLASSES = {
    Difficulty.EASY: PureRandom,
    Difficulty.MEDIUM: LastMoveCounter,
    Difficulty.HARD: FrequencyAnalyzer,
}


def get_strategy(
    difficulty: Union[Difficulty, str],
    rng: Optional[random.Random] = None,
) -> Strategy:
    """Get a fresh strategy for a difficulty (enum or case-insensitive name)."""
    if not isinstance(difficulty, Difficulty):
        try:
            difficulty = Difficulty(str(difficulty).lower())
        except ValueError:
            available = ", ".join(d.value for d in Difficulty)
            raise ValueError(f"Unknown difficulty: '{difficulty}'. Available: {available}") from None
    strategy = STRATEGY_CLASSES[difficulty]()
    if rng is not None:
        strategy.rng = rng
    return strategy
