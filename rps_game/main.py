"""CLI entry point for the Rock-Paper-Scissors game."""

import argparse
import getpass
import logging
import random
from pathlib import Path

from .config import GameConfig
from .engine import EMOJI, Mode, Move
from .oracle import Difficulty
from .scheduler import ManualScheduler
from .shell import GameShell
from .stats import print_history, print_leaderboard
from .export import export_json, export_csv
from .store import JsonFileStore, load_history, load_leaderboard

SHORTCUTS = {"r": Move.ROCK, "p": Move.PAPER, "s": Move.SCISSORS}


def _config(args) -> GameConfig:
    return GameConfig.from_env().with_overrides(
        max_rounds=getattr(args, "rounds", None),
        data_dir=Path(args.data_dir).expanduser() if args.data_dir else None,
    )


def _parse_move(text: str):
    text = text.strip().lower()
    if text in SHORTCUTS:
        return SHORTCUTS[text]
    try:
        return Move(text)
    except ValueError:
        return None


def _prompt(player: int, mode: Mode) -> str:
    """Return a Move, or the strings 'undo' / 'quit'."""
    label = f"Player {player}"
    ask = getpass.getpass if mode is Mode.MULTI else input
    while True:
        text = ask(f"  {label} [r]ock / [p]aper / [s]cissors, [u]ndo, [q]uit: ")
        if text.strip().lower() in ("u", "undo"):
            return "undo"
        if text.strip().lower() in ("q", "quit"):
            return "quit"
        move = _parse_move(text)
        if move is not None:
            return move
        print("  ✗ Unknown move.")


def _print_event(event, engine):
    s = engine.state
    opponent = "Computer" if engine.mode is Mode.SINGLE else "Player 2"
    if event == "resolved":
        last = s.history[-1]
        print(f"\n  Round {last.round}: {EMOJI[last.player1]}  vs  {EMOJI[last.player2]}"
              f"   →  {last.result.value.upper()}")
        print(f"  Score: Player 1 {s.player1_score} - {s.player2_score} {opponent}")
    elif event == "finished":
        winner = {
            "player": "★ Player 1 wins the match!",
            "computer": "★ The computer wins the match!",
            "player2": "★ Player 2 wins the match!",
            "draw": "★ The match is a draw.",
        }[s.match_winner]
        print(f"\n  {winner}")
    elif event == "undo":
        print(f"  ↶ Back to round {s.round}. Score: {s.player1_score} - {s.player2_score}")


def cmd_play(args):
    """Play a match in the terminal.

    Time is simulated: after each input the clock jumps over the computer's
    thinking delay and the result display, so the move countdown never
    expires here.
    """
    config = _config(args)
    scheduler = ManualScheduler()
    shell = GameShell(config=config, scheduler=scheduler, rng=random.Random(args.seed))
    if args.mode and Mode(args.mode) is not shell.mode:
        shell.set_mode(args.mode)
    if args.difficulty and Difficulty(args.difficulty) is not shell.difficulty:
        shell.set_difficulty(args.difficulty)
    engine = shell.engine
    engine.subscribe(_print_event)

    print(f"\n🎮 Rock-Paper-Scissors  |  {engine.mode.value}-player"
          + (f"  |  AI {engine.difficulty.value}" if engine.mode is Mode.SINGLE else "")
          + f"  |  {config.max_rounds} rounds")

    while not engine.state.finished:
        s = engine.state
        print(f"\n  Round {s.round} / {config.max_rounds}")
        seats = [1] if engine.mode is Mode.SINGLE else [1, 2]
        for player in seats:
            choice = _prompt(player, engine.mode)
            if choice == "quit":
                print("  Match left unfinished; it resumes next time.")
                return
            if choice == "undo":
                if not engine.undo_last_round():
                    print("  ✗ Nothing to undo.")
                break
            engine.submit_move(player, choice)
        if engine.state.thinking:
            print("  🤔 Computer is thinking...")
            scheduler.advance(config.thinking_delay)
        if engine.state.outcome is not None:
            scheduler.advance(config.result_delay)

    print_leaderboard(shell.leaderboard())


def cmd_serve(args):
    from .web import main as serve
    serve(host=args.host, port=args.port, debug=args.debug, config=_config(args))


def cmd_leaderboard(args):
    store = JsonFileStore(_config(args).data_dir)
    print_leaderboard(load_leaderboard(store))


def cmd_history(args):
    store = JsonFileStore(_config(args).data_dir)
    print_history(load_history(store))


def cmd_export(args):
    store = JsonFileStore(_config(args).data_dir)
    history = load_history(store)
    fmt = args.format.lower()
    if fmt == "json":
        export_json(history, load_leaderboard(store), args.output)
    elif fmt == "csv":
        export_csv(history, args.output)
    else:
        print(f"  ✗ Unknown export format: {fmt}. Use 'json' or 'csv'.")


def cmd_theme(args):
    shell = GameShell(config=_config(args), scheduler=ManualScheduler())
    theme = shell.toggle_theme()
    print(f"  Theme: {theme}")
    for name, color in shell.theme_palette().items():
        print(f"    {name:<14s} {color}")


def main(argv=None):
    parser = argparse.ArgumentParser(
        prog="rps_game",
        description="🎮 Rock-Paper-Scissors: single player vs. AI or local multiplayer",
    )
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
                        help="Logging level (default: WARNING)")
    parser.add_argument("--data-dir", default=None,
                        help="Directory for saved settings, history and leaderboard")

    subparsers = parser.add_subparsers(dest="command")

    play = subparsers.add_parser("play", help="Play a match in the terminal")
    play.add_argument("--mode", choices=[m.value for m in Mode], help="single or multi")
    play.add_argument("--difficulty", choices=[d.value for d in Difficulty], help="AI difficulty")
    play.add_argument("--rounds", type=int, default=None, help="Rounds per match (default: 5)")
    play.add_argument("--seed", type=int, default=None, help="RNG seed for reproducibility")

    serve = subparsers.add_parser("serve", help="Run the web API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=5000)
    serve.add_argument("--debug", action="store_true")

    subparsers.add_parser("leaderboard", help="Show match results")
    subparsers.add_parser("history", help="Show rounds of the current match")

    exp = subparsers.add_parser("export", help="Export history and leaderboard")
    exp.add_argument("--format", required=True, choices=["json", "csv"], help="Export format")
    exp.add_argument("--output", required=True, help="Export file path")

    subparsers.add_parser("theme", help="Toggle light/dark theme")

    args = parser.parse_args(argv)
    logging.basicConfig(level=args.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

    commands = {
        "play": cmd_play,
        "serve": cmd_serve,
        "leaderboard": cmd_leaderboard,
        "history": cmd_history,
        "export": cmd_export,
        "theme": cmd_theme,
    }
    if args.command in commands:
        commands[args.command](args)
    else:
        parser.print_help()


if __name__ == "__main__":
    main()
