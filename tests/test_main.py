import json

import pytest

from rps_game import main as cli
from rps_game.config import GameConfig


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("RPS_MAX_ROUNDS", "RPS_MOVE_TIME_LIMIT", "RPS_THINKING_DELAY",
                 "RPS_RESULT_DELAY", "RPS_DATA_DIR"):
        monkeypatch.delenv(name, raising=False)


def feed(monkeypatch, answers):
    answers = iter(answers)
    monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))
    monkeypatch.setattr(cli.getpass, "getpass", lambda prompt="": next(answers))


def test_play_single_player_match(tmp_path, monkeypatch, capsys):
    feed(monkeypatch, ["rock", "x", "p"])
    cli.main(["--data-dir", str(tmp_path), "play", "--rounds", "2",
              "--difficulty", "medium", "--seed", "1"])
    out = capsys.readouterr().out
    assert "Round 1:" in out and "Round 2:" in out
    assert "Unknown move" in out
    # medium counters the previous rock with paper
    assert "📄  vs  📄" in out
    board = json.loads((tmp_path / "leaderboard.json").read_text())
    assert sum(board.values()) == 1


def test_play_multi_with_undo_and_quit(tmp_path, monkeypatch, capsys):
    feed(monkeypatch, ["r", "s", "u", "q"])
    cli.main(["--data-dir", str(tmp_path), "play", "--mode", "multi"])
    out = capsys.readouterr().out
    assert "WIN" in out
    assert "Back to round 1" in out
    assert "resumes next time" in out
    assert json.loads((tmp_path / "history.json").read_text()) == []


def test_leaderboard_and_history_commands(tmp_path, capsys):
    (tmp_path / "leaderboard.json").write_text(json.dumps({"player": 4, "draws": 1}))
    (tmp_path / "history.json").write_text(json.dumps([
        {"round": 1, "player1": "rock", "player2": "paper", "result": "lose"},
    ]))
    cli.main(["--data-dir", str(tmp_path), "leaderboard"])
    cli.main(["--data-dir", str(tmp_path), "history"])
    out = capsys.readouterr().out
    assert "Player 1 wins" in out and "4" in out
    assert "LOSE" in out


def test_export_command(tmp_path):
    out_path = tmp_path / "export.json"
    cli.main(["--data-dir", str(tmp_path), "export", "--format", "json", "--output", str(out_path)])
    data = json.loads(out_path.read_text())
    assert data["history"] == []


def test_theme_command(tmp_path, capsys):
    cli.main(["--data-dir", str(tmp_path), "theme"])
    assert "Theme: light" in capsys.readouterr().out
    assert json.loads((tmp_path / "theme.json").read_text()) == "light"


def test_config_from_env(tmp_path):
    config = GameConfig.from_env({"RPS_MAX_ROUNDS": "3", "RPS_DATA_DIR": str(tmp_path)})
    assert config.max_rounds == 3
    assert config.data_dir == tmp_path
    assert config.with_overrides(max_rounds=None, move_time_limit=9).move_time_limit == 9


def test_config_rejects_bad_values():
    with pytest.raises(ValueError):
        GameConfig(max_rounds=0)
