"""Export round history and the leaderboard to JSON or CSV."""

import json
import csv
from pathlib import Path

from .engine import RoundRecord
from .stats import summarize_history
from .store import Leaderboard


def export_json(history: list[RoundRecord], leaderboard: Leaderboard, path: str):
    """Export history, leaderboard and a summary to a JSON file."""
    data = {
        "history": [r.to_dict() for r in history],
        "leaderboard": leaderboard.to_dict(),
        "summary": summarize_history(history).to_dict(),
    }

    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with open(out, "w") as f:
        json.dump(data, f, indent=2)
    print(f"  ✓ Results exported to {out}")


def export_csv(history: list[RoundRecord], path: str):
    """Export the round history to a CSV file."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)

    fieldnames = ["round", "player1", "player2", "result"]

    with open(out, "w", newline="") as f:
        writer = csv.DictWriter(f, fieldnames=fieldnames)
        writer.writeheader()
        for record in history:
            writer.writerow(record.to_dict())
    print(f"  ✓ History exported to {out}")
