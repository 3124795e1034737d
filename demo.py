#!/usr/bin/env python3
"""Watch two random agents play a duel."""
import time
import os

from src.agents import RandomAgent
from src.duelsweeper import SAMPLE_QUESTIONS, DuelEnv, get_config


def clear_screen():
    os.system('cls' if os.name == 'nt' else 'clear')


def demo(delay: float = 0.3, games: int = 3, difficulty: int = 1):
    """Run demo matches with visualization."""
    config = get_config(difficulty)
    env = DuelEnv(difficulty, question_pool=SAMPLE_QUESTIONS,
                  player_names=("Alice", "Bob"), render_mode="ansi")
    agent = RandomAgent(config.rows, config.cols)

    print(f"Boards: {config.rows}x{config.cols} with {config.num_mines} mines, "
          f"{config.lives} shared lives")
    print("Starting in 2 seconds...")
    time.sleep(2)

    for game in range(games):
        obs, _ = env.reset()
        agent.reset()

        clear_screen()
        print(f"=== Match {game + 1}/{games} ===\n")
        print(env.render())
        time.sleep(delay)

        done = False
        step = 0

        while not done:
            action = agent.select_action(obs, env.get_action_mask())
            flag, row, col = agent.action_to_move(action)
            mover = env.match.current_player_name

            obs, reward, terminated, truncated, info = env.step(action)
            done = terminated or truncated
            step += 1

            clear_screen()
            print(f"=== Match {game + 1}/{games} | Step {step} ===")
            print(f"Last move: {mover} {'flagged' if flag else 'revealed'} "
                  f"({row}, {col})  reward {reward:+.1f}\n")
            print(env.render())

            if done:
                print(f"\n*** {info['phase']} (score {info['score']}) ***")

            time.sleep(delay)

        time.sleep(1.0)  # Pause between matches


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser()
    parser.add_argument("--delay", type=float, default=0.3, help="Delay between moves")
    parser.add_argument("--games", type=int, default=3, help="Number of matches")
    parser.add_argument("--difficulty", type=int, choices=(1, 2, 3), default=1)
    args = parser.parse_args()

    demo(delay=args.delay, games=args.games, difficulty=args.difficulty)
