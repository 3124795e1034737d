#!/usr/bin/env python3
"""
Minesweeper Duel - Main entry point.

Usage:
    python main.py simulate [--games N] [--difficulty {1,2,3}] [--seed S]
    python main.py history [--difficulty {1,2,3}] [--seed S]
"""
import argparse
import logging
from typing import Dict, Optional

from src.agents import RandomAgent
from src.duelsweeper import SAMPLE_QUESTIONS, DuelEnv, MatchPhase, get_config


def play_match(
    env: DuelEnv, agent: RandomAgent, seed: Optional[int] = None
) -> Dict[str, object]:
    """Play one match with the same agent in both seats."""
    obs, info = env.reset(seed=seed)
    agent.reset()
    done = False

    while not done:
        action = agent.select_action(obs, env.get_action_mask())
        obs, _, terminated, truncated, info = env.step(action)
        done = terminated or truncated

    return info


def simulate(args: argparse.Namespace) -> None:
    """Run random-vs-random matches and summarize outcomes."""
    config = get_config(args.difficulty)
    env = DuelEnv(args.difficulty, question_pool=SAMPLE_QUESTIONS)
    agent = RandomAgent(config.rows, config.cols, seed=args.seed)

    outcomes = {phase.name: 0 for phase in MatchPhase}
    total_score = 0

    for game in range(args.games):
        seed = None if args.seed is None else args.seed + game
        info = play_match(env, agent, seed)
        outcomes[info["phase"]] += 1
        total_score += info["score"]

        if (game + 1) % args.log_frequency == 0:
            logging.info("Played %d/%d matches", game + 1, args.games)

    print(f"\nDifficulty: {env.difficulty.label} "
          f"({config.rows}x{config.cols}, {config.num_mines} mines)")
    print(f"Matches: {args.games}")
    print(f"Won:       {outcomes['WON'] / args.games:.1%}")
    print(f"Lost:      {outcomes['LOST'] / args.games:.1%}")
    print(f"Truncated: {outcomes['ACTIVE'] / args.games:.1%}")
    print(f"Mean score: {total_score / args.games:.1f}")


def history(args: argparse.Namespace) -> None:
    """Play one match and print its audit log."""
    config = get_config(args.difficulty)
    env = DuelEnv(args.difficulty, question_pool=SAMPLE_QUESTIONS)
    agent = RandomAgent(config.rows, config.cols, seed=args.seed)

    play_match(env, agent, args.seed)
    for line in env.session.history:
        print(line)

    record = env.controller.finish()
    if record is not None:
        print(f"\n{record.formatted_date}  {record.formatted_duration}  "
              f"score={record.combined_score}  lives={record.remaining_lives}  "
              f"winner={record.winner_name or '-'}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Two-board minesweeper duel")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    sim_parser = subparsers.add_parser("simulate", help="Run random matches")
    sim_parser.add_argument("--games", type=int, default=100)
    sim_parser.add_argument("--difficulty", type=int, choices=(1, 2, 3), default=1)
    sim_parser.add_argument("--seed", type=int, default=None)
    sim_parser.add_argument("--log-frequency", type=int, default=25)
    sim_parser.set_defaults(func=simulate)

    hist_parser = subparsers.add_parser("history", help="Print one match's audit log")
    hist_parser.add_argument("--difficulty", type=int, choices=(1, 2, 3), default=1)
    hist_parser.add_argument("--seed", type=int, default=None)
    hist_parser.set_defaults(func=history)

    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='[%(asctime)s] %(message)s',
        datefmt='%H:%M:%S',
    )
    args.func(args)


if __name__ == "__main__":
    main()
