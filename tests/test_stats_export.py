import csv
import json

from rps_game.engine import Move, Outcome, RoundRecord
from rps_game.export import export_csv, export_json
from rps_game.stats import print_history, print_leaderboard, summarize_history
from rps_game.store import Leaderboard

R, P, S = Move.ROCK, Move.PAPER, Move.SCISSORS

HISTORY = [
    RoundRecord(1, R, S, Outcome.WIN),
    RoundRecord(2, R, P, Outcome.LOSE),
    RoundRecord(3, P, P, Outcome.DRAW),
    RoundRecord(4, R, S, Outcome.WIN),
]


def test_summarize_history():
    summary = summarize_history(HISTORY)
    assert (summary.rounds, summary.wins, summary.losses, summary.draws) == (4, 2, 1, 1)
    assert summary.win_pct == 50.0
    assert summary.player1_move_distribution == {"rock": 3, "paper": 1}
    assert summary.player1_most_common_move == "rock"
    assert summary.player2_most_common_move == "scissors"


def test_summarize_empty():
    summary = summarize_history([])
    assert summary.win_pct == 0.0
    assert summary.player1_most_common_move == "N/A"


def test_print_functions(capsys):
    print_history(HISTORY)
    print_leaderboard(Leaderboard(player=2, computer=1))
    out = capsys.readouterr().out
    assert "Player 2" in out
    assert "W:2  L:1  D:1" in out
    assert "Matches" in out


def test_export_json(tmp_path):
    path = tmp_path / "out" / "results.json"
    export_json(HISTORY, Leaderboard(player=1), str(path))
    data = json.loads(path.read_text())
    assert data["history"][0] == {"round": 1, "player1": "rock", "player2": "scissors", "result": "win"}
    assert data["leaderboard"]["player"] == 1
    assert data["summary"]["draws"] == 1


def test_export_csv(tmp_path):
    path = tmp_path / "history.csv"
    export_csv(HISTORY, str(path))
    with open(path, newline="") as f:
        rows = list(csv.DictReader(f))
    assert len(rows) == 4
    assert rows[1] == {"round": "2", "player1": "rock", "player2": "paper", "result": "lose"}
