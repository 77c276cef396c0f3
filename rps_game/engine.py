"""Core data model for Rock-Paper-Scissors matches."""

from enum import Enum
from dataclasses import dataclass, field
from typing import Optional


class Move(Enum):
    ROCK = "rock"
    PAPER = "paper"
    SCISSORS = "scissors"


class Outcome(Enum):
    """Result of a round, always from player 1's point of view."""
    WIN = "win"
    LOSE = "lose"
    DRAW = "draw"


class Mode(Enum):
    SINGLE = "single"
    MULTI = "multi"


MOVES = [Move.ROCK, Move.PAPER, Move.SCISSORS]

# What each move beats
BEATS = {
    Move.ROCK: Move.SCISSORS,
    Move.SCISSORS: Move.PAPER,
    Move.PAPER: Move.ROCK,
}

# What beats each move
BEATEN_BY = {v: k for k, v in BEATS.items()}

EMOJI = {
    Move.ROCK: "✊",
    Move.PAPER: "📄",
    Move.SCISSORS: "✂️",
}


def determine_outcome(player1: Move, player2: Move) -> Outcome:
    """Return the outcome of ``player1`` against ``player2``."""
    if player1 is player2:
        return Outcome.DRAW
    if BEATS[player1] is player2:
        return Outcome.WIN
    return Outcome.LOSE


@dataclass(frozen=True)
class RoundRecord:
    """One resolved round. Never mutated once appended to a history."""
    round: int
    player1: Move
    player2: Move
    result: Outcome

    def to_dict(self) -> dict:
        return {
            "round": self.round,
            "player1": self.player1.value,
            "player2": self.player2.value,
            "result": self.result.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "RoundRecord":
        """Build a record from its JSON shape.

        Raises KeyError, TypeError or ValueError on malformed input; the
        result is recomputed from the moves if it disagrees with them.
        """
        round_num = data["round"]
        if isinstance(round_num, bool) or not isinstance(round_num, int) or round_num < 1:
            raise ValueError(f"Invalid round number: {round_num!r}")
        player1 = Move(data["player1"])
        player2 = Move(data["player2"])
        return cls(round_num, player1, player2, determine_outcome(player1, player2))


def replay_scores(history) -> tuple[int, int]:
    """Recompute (player1, player2) scores from a sequence of records."""
    p1 = p2 = 0
    for record in history:
        if record.result is Outcome.WIN:
            p1 += 1
        elif record.result is Outcome.LOSE:
            p2 += 1
    return p1, p2


@dataclass
class MatchState:
    """Mutable state of the match in progress.

    ``outcome`` is set between a round resolving and the next round
    starting. ``match_winner`` is set once ``round`` passes the last round.
    """
    max_rounds: int
    round: int = 1
    player1_move: Optional[Move] = None
    player2_move: Optional[Move] = None
    outcome: Optional[Outcome] = None
    player1_score: int = 0
    player2_score: int = 0
    paused: bool = False
    thinking: bool = False
    time_left: int = 0
    history: list = field(default_factory=list)
    match_winner: Optional[str] = None

    @property
    def finished(self) -> bool:
        return self.round > self.max_rounds

    def slot(self, player: int) -> Optional[Move]:
        return self.player1_move if player == 1 else self.player2_move

    def clear_moves(self):
        self.player1_move = None
        self.player2_move = None
        self.outcome = None

    @property
    def player1_history(self) -> list[Move]:
        return [r.player1 for r in self.history]

    @property
    def player2_history(self) -> list[Move]:
        return [r.player2 for r in self.history]

    def to_dict(self) -> dict:
        return {
            "round": self.round,
            "max_rounds": self.max_rounds,
            "player1_move": self.player1_move.value if self.player1_move else None,
            "player2_move": self.player2_move.value if self.player2_move else None,
            "outcome": self.outcome.value if self.outcome else None,
            "player1_score": self.player1_score,
            "player2_score": self.player2_score,
            "paused": self.paused,
            "thinking": self.thinking,
            "time_left": self.time_left,
            "finished": self.finished,
            "match_winner": self.match_winner,
            "history": [r.to_dict() for r in self.history],
        }
