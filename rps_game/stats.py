"""Stats computation and pretty-printing for round history and the leaderboard."""

from dataclasses import dataclass, field
from collections import Counter

from .engine import Outcome, RoundRecord
from .store import Leaderboard


@dataclass
class HistorySummary:
    """Aggregated view of a sequence of rounds, from player 1's side."""
    rounds: int = 0
    wins: int = 0
    losses: int = 0
    draws: int = 0
    player1_moves: list = field(default_factory=list)
    player2_moves: list = field(default_factory=list)

    @property
    def win_pct(self) -> float:
        return (self.wins / self.rounds * 100) if self.rounds else 0.0

    @property
    def loss_pct(self) -> float:
        return (self.losses / self.rounds * 100) if self.rounds else 0.0

    @property
    def draw_pct(self) -> float:
        return (self.draws / self.rounds * 100) if self.rounds else 0.0

    @property
    def player1_move_distribution(self) -> dict[str, int]:
        return dict(Counter(m.value for m in self.player1_moves))

    @property
    def player2_move_distribution(self) -> dict[str, int]:
        return dict(Counter(m.value for m in self.player2_moves))

    @property
    def player1_most_common_move(self) -> str:
        if not self.player1_moves:
            return "N/A"
        return Counter(m.value for m in self.player1_moves).most_common(1)[0][0]

    @property
    def player2_most_common_move(self) -> str:
        if not self.player2_moves:
            return "N/A"
        return Counter(m.value for m in self.player2_moves).most_common(1)[0][0]

    def to_dict(self) -> dict:
        return {
            "rounds": self.rounds,
            "wins": self.wins,
            "losses": self.losses,
            "draws": self.draws,
            "win_pct": round(self.win_pct, 2),
            "loss_pct": round(self.loss_pct, 2),
            "draw_pct": round(self.draw_pct, 2),
            "player1_move_distribution": self.player1_move_distribution,
            "player2_move_distribution": self.player2_move_distribution,
        }


def summarize_history(history: list[RoundRecord]) -> HistorySummary:
    summary = HistorySummary()
    for record in history:
        summary.rounds += 1
        if record.result is Outcome.WIN:
            summary.wins += 1
        elif record.result is Outcome.LOSE:
            summary.losses += 1
        else:
            summary.draws += 1
        summary.player1_moves.append(record.player1)
        summary.player2_moves.append(record.player2)
    return summary


# ---------------------------------------------------------------------------
# Pretty-printing
# ---------------------------------------------------------------------------

def print_history(history: list[RoundRecord]):
    """Print every round followed by a move summary."""
    print("=" * 60)
    print(f"  {'Round':>5s}  {'Player 1':<10s} {'Player 2':<10s} {'Result':<6s}")
    print("-" * 60)
    for r in history:
        print(f"  {r.round:>5d}  {r.player1.value:<10s} {r.player2.value:<10s} {r.result.value.upper():<6s}")
    if not history:
        print("  (no rounds played)")

    summary = summarize_history(history)
    print("-" * 60)
    print(f"  W:{summary.wins}  L:{summary.losses}  D:{summary.draws}  "
          f"Win %: {summary.win_pct:.1f}%")
    print(f"  Most common move: {summary.player1_most_common_move} / {summary.player2_most_common_move}")
    print(f"  Player 1 move distribution: {summary.player1_move_distribution}")
    print("=" * 60)


def print_leaderboard(leaderboard: Leaderboard):
    """Print the persisted match tally."""
    print()
    print("=" * 40)
    print(f"  {'Player 1 wins':<20s} {leaderboard.player:>6d}")
    print(f"  {'Computer wins':<20s} {leaderboard.computer:>6d}")
    print(f"  {'Player 2 wins':<20s} {leaderboard.player2:>6d}")
    print(f"  {'Draws':<20s} {leaderboard.draws:>6d}")
    print("-" * 40)
    print(f"  {'Matches':<20s} {leaderboard.total:>6d}")
    print("=" * 40)
    print()
