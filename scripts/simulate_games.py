#!/usr/bin/env python3
"""Simulate AI-vs-AI games and report outcome rates per batting side."""
from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import pandas as pd

BASE_DIR = Path(__file__).resolve().parents[1]
sys.path.append(str(BASE_DIR))

from fastball_sim.config import GameRules, load_tuning
from fastball_sim.engine import simulate_game
from fastball_sim.models import Difficulty
from fastball_sim.outputs import summarize_pitch_log
from fastball_sim.probability import make_rng
from fastball_sim.session import GameSession
from utils.session_store import MemoryStore


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--games", type=int, default=20, help="Number of games to play")
    parser.add_argument("--seed", type=int, default=None, help="Random seed")
    parser.add_argument(
        "--difficulty",
        choices=[d.value for d in Difficulty],
        default=Difficulty.PRO.value,
    )
    parser.add_argument(
        "--tournament",
        action="store_true",
        help="Play nine-inning tournament games instead of three innings",
    )
    parser.add_argument("--tuning", type=Path, default=None, help="JSON tuning overrides")
    parser.add_argument("--csv", type=Path, default=None, help="Write the pitch log here")
    parser.add_argument("--log-level", default="WARNING")
    return parser.parse_args(argv)


def run(args: argparse.Namespace) -> pd.DataFrame:
    rng = make_rng(args.seed)
    tuning = load_tuning(overrides_path=args.tuning)
    rules = GameRules.tournament() if args.tournament else GameRules.regular()
    difficulty = Difficulty(args.difficulty)

    frames = []
    results = []
    for game in range(1, args.games + 1):
        session = GameSession(MemoryStore(), difficulty=difficulty, rules=rules, rng=rng)
        session.start_game()
        result = simulate_game(session, rng, tuning=tuning)
        frame = pd.DataFrame(result.pitch_log)
        frame["game"] = game
        frames.append(frame)
        if result.summary is not None:
            results.append(result.summary.to_dict())
    log = pd.concat(frames, ignore_index=True) if frames else pd.DataFrame()

    if results:
        finals = pd.DataFrame(results)
        print(f"Games: {len(finals)}")
        print(f"Player wins: {(finals['playerScore'] > finals['computerScore']).sum()}")
        print(f"Runs per game: player {finals['playerScore'].mean():.2f}, "
              f"computer {finals['computerScore'].mean():.2f}")

    if not log.empty:
        counts = pd.DataFrame(summarize_pitch_log(log.to_dict("records"))).T
        rates = counts.div(counts.sum(axis=1), axis=0)
        print("\nOutcome rate per pitch:")
        print(rates.round(3))
    return log


def main(argv: list[str] | None = None) -> None:
    args = _parse_args(argv)
    logging.basicConfig(level=getattr(logging, str(args.log_level).upper(), logging.WARNING))
    log = run(args)
    if args.csv is not None:
        log.to_csv(args.csv, index=False)
        print(f"\nSaved pitch log to: {args.csv}")


if __name__ == "__main__":
    main()
