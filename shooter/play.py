"""
Play the shooter in an arcade window.

Usage:
    python -m shooter.play --rules shield
    python -m shooter.play --random-agent
"""

import argparse
import logging

from .rules import RULESETS, get_rules


def main():
    parser = argparse.ArgumentParser(description="Play the arcade shooter")
    parser.add_argument(
        "--rules",
        type=str,
        default="health",
        choices=sorted(RULESETS),
        help="Rule set to play with (default: health)",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Random seed for enemy spawns",
    )
    parser.add_argument("--width", type=int, default=800, help="Window width (default: 800)")
    parser.add_argument("--height", type=int, default=600, help="Window height (default: 600)")
    parser.add_argument(
        "--random-agent",
        action="store_true",
        help="Watch a random agent play one episode instead",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="INFO",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: INFO)",
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(name)s %(levelname)s: %(message)s",
    )

    if args.random_agent:
        from .shooter_env import run_random_episode
        run_random_episode(render=True, rules=args.rules,
                           seed=args.seed if args.seed is not None else 42)
        return

    # imported late so --help works without a display
    import arcade
    from .driver import FrameDriver
    from .window import ShooterWindow

    driver = FrameDriver(
        rules=get_rules(args.rules),
        width=args.width,
        height=args.height,
        seed=args.seed,
    )
    ShooterWindow(args.width, args.height, driver=driver,
                  title=f"Shooter ({args.rules} rules)")
    arcade.run()


if __name__ == "__main__":
    main()
