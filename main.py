# main.py
import argparse
import logging

from dotenv import load_dotenv

from config import AppConfig
from core.interfaces import GameMode

def parse_args():
    p = argparse.ArgumentParser(description="Neon Snake with a rule-based autopilot")
    p.add_argument("mode", choices=["play", "autopilot"])
    p.add_argument("--game-mode", choices=[m.value for m in GameMode], default=GameMode.NORMAL.value)
    p.add_argument("--grid", type=int, default=20, help="board side, 10-30")
    p.add_argument("--foods", type=int, default=1)
    p.add_argument("--target", type=int, default=None, help="winning score (default: fill the board)")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--episodes", type=int, default=100)
    p.add_argument("--live", action="store_true", help="watch autopilot episodes in a window")
    p.add_argument("--no-commentary", action="store_true")
    p.add_argument("-v", "--verbose", action="store_true")
    return p.parse_args()

def build_config(args) -> AppConfig:
    return AppConfig().with_(
        mode=GameMode(args.game_mode),
        grid_size=args.grid,
        food_count=args.foods,
        target_score=args.target,
        seed=args.seed,
        episodes=args.episodes,
        commentary_enabled=not args.no_commentary,
    ).sanitized()

def main():
    load_dotenv()
    args = parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    cfg = build_config(args)
    if args.mode == "play":
        from runners.run_snake import main as play
        play(cfg)
    elif args.mode == "autopilot":
        from runners.run_autopilot import main as autopilot
        autopilot(cfg, live=args.live)

if __name__ == "__main__":
    main()
