import pytest

from rps_game.engine import (
    Move, MOVES, Outcome, MatchState, RoundRecord, determine_outcome, replay_scores,
)


@pytest.mark.parametrize("p1, p2, expected", [
    (Move.ROCK, Move.SCISSORS, Outcome.WIN),
    (Move.SCISSORS, Move.PAPER, Outcome.WIN),
    (Move.PAPER, Move.ROCK, Outcome.WIN),
    (Move.SCISSORS, Move.ROCK, Outcome.LOSE),
    (Move.PAPER, Move.SCISSORS, Outcome.LOSE),
    (Move.ROCK, Move.PAPER, Outcome.LOSE),
])
def test_outcome_rule(p1, p2, expected):
    assert determine_outcome(p1, p2) is expected


def test_outcome_is_antisymmetric():
    flipped = {Outcome.WIN: Outcome.LOSE, Outcome.LOSE: Outcome.WIN, Outcome.DRAW: Outcome.DRAW}
    for a in MOVES:
        assert determine_outcome(a, a) is Outcome.DRAW
        for b in MOVES:
            assert determine_outcome(b, a) is flipped[determine_outcome(a, b)]


def test_record_json_shape():
    record = RoundRecord(2, Move.PAPER, Move.ROCK, Outcome.WIN)
    assert record.to_dict() == {"round": 2, "player1": "paper", "player2": "rock", "result": "win"}
    assert RoundRecord.from_dict(record.to_dict()) == record


def test_record_result_recomputed_from_moves():
    record = RoundRecord.from_dict({"round": 1, "player1": "rock", "player2": "paper", "result": "win"})
    assert record.result is Outcome.LOSE


@pytest.mark.parametrize("data", [
    {"round": 0, "player1": "rock", "player2": "rock"},
    {"round": True, "player1": "rock", "player2": "rock"},
    {"round": "1", "player1": "rock", "player2": "rock"},
    {"round": 1, "player1": "lizard", "player2": "rock"},
])
def test_record_rejects_malformed(data):
    with pytest.raises(ValueError):
        RoundRecord.from_dict(data)


def test_replay_scores():
    history = [
        RoundRecord(1, Move.ROCK, Move.SCISSORS, Outcome.WIN),
        RoundRecord(2, Move.ROCK, Move.ROCK, Outcome.DRAW),
        RoundRecord(3, Move.ROCK, Move.PAPER, Outcome.LOSE),
        RoundRecord(4, Move.PAPER, Move.ROCK, Outcome.WIN),
    ]
    assert replay_scores(history) == (2, 1)
    assert replay_scores([]) == (0, 0)


def test_match_state_finished_and_dict():
    state = MatchState(max_rounds=3)
    assert not state.finished
    state.round = 4
    assert state.finished
    data = state.to_dict()
    assert data["finished"] is True
    assert data["player1_move"] is None
    assert data["history"] == []
