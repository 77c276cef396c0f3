"""Round engine: drives one match from round 1 to the last round.

Each round goes ``awaiting moves -> resolved -> awaiting moves`` (next
round) or ``-> finished`` after the last one. Invalid actions (moving while
paused, undoing an empty history, ...) are ignored and reported by a
``False`` return value, never by an exception.

All waiting is done through the scheduler:

* the move countdown ticks once per second while moves are awaited and
  assigns random moves when it reaches zero;
* in single-player mode the computer "thinks" for ``thinking_delay``
  seconds after player 1 moves;
* a resolved round stays on display for ``result_delay`` seconds before
  the next round starts.

Pausing suspends all three. Listeners registered with ``subscribe`` are
called with ``(event, engine)`` after every state change.
"""

import logging
import random
from typing import Callable, Optional

from .config import GameConfig
from .engine import (
    Mode, Move, MOVES, MatchState, RoundRecord, Outcome,
    determine_outcome, replay_scores,
)
from .oracle import Difficulty, Strategy, get_strategy
from .scheduler import ManualScheduler, Scheduler, TaskHandle
from .store import (
    KeyValueStore, MemoryStore,
    load_history, save_history, load_leaderboard, save_leaderboard,
)

logger = logging.getLogger(__name__)

Listener = Callable[[str, "RoundEngine"], None]


class FeedbackSink:
    """Receives cues for sounds or visual effects. The default does nothing."""

    def move_submitted(self, player: int, move: Move):
        pass

    def round_resolved(self, record: RoundRecord):
        pass


class RoundEngine:
    """Owns the match state and every timer that acts on it."""

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        scheduler: Optional[Scheduler] = None,
        store: Optional[KeyValueStore] = None,
        feedback: Optional[FeedbackSink] = None,
        mode: Mode = Mode.SINGLE,
        difficulty: Difficulty = Difficulty.MEDIUM,
        strategy: Optional[Strategy] = None,
        rng: Optional[random.Random] = None,
    ):
        self.config = config or GameConfig()
        self.scheduler = scheduler or ManualScheduler()
        self.store = store if store is not None else MemoryStore()
        self.feedback = feedback or FeedbackSink()
        self.mode = Mode(mode)
        self.difficulty = Difficulty(difficulty)
        self.rng = rng or random.Random()
        self._fixed_strategy = strategy is not None
        self.strategy = strategy or get_strategy(self.difficulty, rng=self.rng)

        self.state = MatchState(
            max_rounds=self.config.max_rounds,
            time_left=self.config.move_time_limit,
        )
        self._listeners: list[Listener] = []
        self._tick_handle: Optional[TaskHandle] = None
        self._think_handle: Optional[TaskHandle] = None
        self._advance_handle: Optional[TaskHandle] = None

        self._restore_history()
        self._restart_countdown()

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that unregisters it."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def _notify(self, event: str):
        for listener in list(self._listeners):
            listener(event, self)

    def _cue(self, name: str, *args):
        try:
            getattr(self.feedback, name)(*args)
        except Exception:
            logger.exception("Feedback sink failed on %s", name)

    def snapshot(self) -> dict:
        data = self.state.to_dict()
        data["mode"] = self.mode.value
        data["difficulty"] = self.difficulty.value
        return data

    # ------------------------------------------------------------------
    # Timers
    # ------------------------------------------------------------------

    def _countdown_wanted(self) -> bool:
        s = self.state
        if s.paused or s.finished or s.outcome is not None:
            return False
        if self.mode is Mode.SINGLE:
            return s.player1_move is None
        return s.player1_move is None or s.player2_move is None

    def schedule_tick(self):
        self.cancel_tick()
        self._tick_handle = self.scheduler.call_later(1.0, self.tick)

    def cancel_tick(self):
        if self._tick_handle is not None:
            self._tick_handle.cancel()
            self._tick_handle = None

    def _restart_countdown(self):
        self.cancel_tick()
        self.state.time_left = self.config.move_time_limit
        if self._countdown_wanted():
            self.schedule_tick()

    def _cancel_thinking(self):
        if self._think_handle is not None:
            self._think_handle.cancel()
            self._think_handle = None
        self.state.thinking = False

    def _cancel_advance(self):
        if self._advance_handle is not None:
            self._advance_handle.cancel()
            self._advance_handle = None

    def _cancel_all(self):
        self.cancel_tick()
        self._cancel_thinking()
        self._cancel_advance()

    def tick(self) -> bool:
        """One second of the move countdown. Ignored unless moves are awaited."""
        if not self._countdown_wanted():
            return False
        s = self.state
        s.time_left -= 1
        if s.time_left > 0:
            self.schedule_tick()
            self._notify("tick")
            return True
        s.time_left = 0
        self.cancel_tick()
        self._notify("tick")
        self.on_move_timeout()
        return True

    # ------------------------------------------------------------------
    # Moves
    # ------------------------------------------------------------------

    def _fill_slot(self, player: int, move: Move):
        if player == 1:
            self.state.player1_move = move
        else:
            self.state.player2_move = move
        logger.debug("Round %d: player %d plays %s", self.state.round, player, move.value)
        self._cue("move_submitted", player, move)

    def _after_fill(self):
        if not self.resolve_round_if_ready():
            self._restart_countdown()

    def submit_move(self, player: int, move) -> bool:
        """Fill a player's slot for the current round.

        Ignored while paused, while the computer is thinking, once the match
        is over, when the slot is already filled, and for player 2 in
        single-player mode.
        """
        if player not in (1, 2):
            raise ValueError(f"player must be 1 or 2, got {player!r}")
        move = Move(move)
        s = self.state
        if s.paused or s.thinking or s.finished or s.slot(player) is not None:
            logger.debug("Ignoring move from player %d in round %d", player, s.round)
            return False
        if player == 2 and self.mode is Mode.SINGLE:
            logger.debug("Ignoring player 2 move in single-player mode")
            return False
        self._fill_slot(player, move)
        if player == 1 and self.mode is Mode.SINGLE:
            self._start_thinking()
        self._notify("move")
        self._after_fill()
        return True

    def on_move_timeout(self, player: Optional[int] = None) -> bool:
        """Give random moves to the humans who ran out of time.

        ``player`` restricts the timeout to one seat. In single-player mode
        the computer never gets a random move; once player 1 has moved it
        always goes through the strategy.
        """
        s = self.state
        if s.paused or s.finished or s.outcome is not None:
            return False
        seats = (1, 2) if player is None else (player,)
        acted = False
        if self.mode is Mode.MULTI:
            for seat in seats:
                if s.slot(seat) is None:
                    self._fill_slot(seat, self.rng.choice(MOVES))
                    acted = True
        elif s.player1_move is None:
            if 1 in seats:
                self._fill_slot(1, self.rng.choice(MOVES))
                self._start_thinking()
                acted = True
        elif s.player2_move is None and not s.thinking:
            self._start_thinking()
            acted = True
        if not acted:
            return False
        logger.debug("Round %d: move timer expired", s.round)
        self._notify("timeout")
        self._after_fill()
        return True

    def _start_thinking(self):
        self._cancel_thinking()
        self.state.thinking = True
        self._think_handle = self.scheduler.call_later(
            self.config.thinking_delay, self._computer_move,
        )

    def _computer_move(self):
        self._think_handle = None
        s = self.state
        s.thinking = False
        if s.player1_move is None or s.player2_move is not None:
            return
        move = self.strategy.choose(s.round - 1, s.player2_history, s.player1_history)
        self._fill_slot(2, move)
        self._notify("move")
        self._after_fill()

    # ------------------------------------------------------------------
    # Resolution and advancement
    # ------------------------------------------------------------------

    def resolve_round_if_ready(self) -> bool:
        """Resolve the current round once both slots are filled."""
        s = self.state
        if s.outcome is not None or s.player1_move is None or s.player2_move is None:
            return False
        self._resolve_round()
        return True

    def _resolve_round(self):
        s = self.state
        assert s.player1_move is not None and s.player2_move is not None, \
            "resolving a round with an empty slot"
        outcome = determine_outcome(s.player1_move, s.player2_move)
        record = RoundRecord(s.round, s.player1_move, s.player2_move, outcome)
        s.outcome = outcome
        s.history.append(record)
        if outcome is Outcome.WIN:
            s.player1_score += 1
        elif outcome is Outcome.LOSE:
            s.player2_score += 1
        self.cancel_tick()
        save_history(self.store, s.history)
        logger.debug("Round %d resolved: %s vs %s -> %s", record.round,
                     record.player1.value, record.player2.value, outcome.value)
        self._cue("round_resolved", record)
        self._schedule_advance()
        self._notify("resolved")

    def _schedule_advance(self):
        self._cancel_advance()
        self._advance_handle = self.scheduler.call_later(
            self.config.result_delay, self.advance_or_finish,
        )

    def advance_or_finish(self) -> bool:
        """Start the next round, or finish the match after the last one."""
        s = self.state
        if s.outcome is None or s.paused:
            return False
        self._cancel_advance()
        if s.round < s.max_rounds:
            s.round += 1
            s.clear_moves()
            self._restart_countdown()
            self._notify("advanced")
        else:
            self._finish_match()
        return True

    def _finish_match(self):
        s = self.state
        leaderboard = load_leaderboard(self.store)
        key = leaderboard.record_match(self.mode, s.player1_score, s.player2_score)
        save_leaderboard(self.store, leaderboard)
        s.match_winner = "draw" if key == "draws" else key
        s.round = s.max_rounds + 1
        s.clear_moves()
        self.cancel_tick()
        logger.info("Match finished %d-%d (%s mode), winner: %s",
                    s.player1_score, s.player2_score, self.mode.value, s.match_winner)
        self._notify("finished")

    # ------------------------------------------------------------------
    # Undo, reset, pause
    # ------------------------------------------------------------------

    def undo_last_round(self) -> bool:
        """Drop the latest resolved round and replay the remaining history for scores."""
        s = self.state
        if not s.history or s.paused or s.thinking:
            return False
        self._cancel_all()
        last = s.history.pop()
        s.round = last.round
        s.clear_moves()
        s.match_winner = None
        s.player1_score, s.player2_score = replay_scores(s.history)
        save_history(self.store, s.history)
        self._restart_countdown()
        logger.debug("Undid round %d", last.round)
        self._notify("undo")
        return True

    def reset_game(self):
        self._cancel_all()
        s = self.state
        s.round = 1
        s.clear_moves()
        s.player1_score = 0
        s.player2_score = 0
        s.history = []
        s.paused = False
        s.match_winner = None
        save_history(self.store, s.history)
        self._restart_countdown()
        self._notify("reset")

    def toggle_pause(self) -> bool:
        """Flip the pause flag and return it.

        Pausing stops the countdown and suspends a pending computer move or
        round advance. Resuming picks them up again with the countdown back
        at the full limit.
        """
        s = self.state
        s.paused = not s.paused
        if s.paused:
            self.cancel_tick()
            if s.thinking:
                self._cancel_thinking()
            self._cancel_advance()
        else:
            if s.outcome is not None:
                self._schedule_advance()
            elif (self.mode is Mode.SINGLE and s.player1_move is not None
                    and s.player2_move is None):
                self._start_thinking()
            self._restart_countdown()
        self._notify("pause")
        return s.paused

    def set_mode(self, mode):
        self.mode = Mode(mode)
        self.reset_game()

    def set_difficulty(self, difficulty):
        self.difficulty = Difficulty(difficulty)
        if not self._fixed_strategy:
            self.strategy = get_strategy(self.difficulty, rng=self.rng)
        self.reset_game()

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _restore_history(self):
        """Resume a partly played match from the store, if there is one."""
        history = load_history(self.store)
        s = self.state
        in_order = [r.round for r in history] == list(range(1, len(history) + 1))
        if history and in_order and len(history) < s.max_rounds:
            s.history = history
            s.round = len(history) + 1
            s.player1_score, s.player2_score = replay_scores(history)
            logger.info("Resuming match at round %d", s.round)
            return
        if history:
            logger.info("Stored history is not a resumable match, starting fresh")
        save_history(self.store, [])
