#!/usr/bin/env python
"""
Main entry point for 2048 n-tuple TD training.
"""

import logging
import sys

from .agents import Player, RandomEnvironment, TDPlayer, WeightFileError
from .training import train
from .utils.cli import setup_logging, parse_args


def main(argv=None):
    """Main function to run a training session."""
    # Parse command-line arguments
    args = parse_args(argv)

    # Setup logging
    setup_logging(args.log_file or None)

    # --seed applies to any agent whose own arguments do not set one
    play_args = f"seed={args.seed} {args.play}"
    evil_args = f"seed={args.seed} {args.evil}"

    try:
        play = TDPlayer(play_args) if args.player == "td" else Player(play_args)
    except WeightFileError as e:
        logging.error(f"Cannot build player: {e}")
        return 1
    evil = RandomEnvironment(evil_args)

    logging.info(f"Player: {play.name()} ({args.play or 'defaults'})")
    logging.info(f"Environment: {evil.name()} ({args.evil or 'defaults'})")
    logging.info(f"Episodes: {args.total}, block: {args.block}")

    try:
        with play, evil:
            stats = train(play, evil, total=args.total, block=args.block)
    except WeightFileError as e:
        logging.error(f"Cannot save weights: {e}")
        return 1

    if args.stats:
        stats.save(args.stats)
        logging.info(f"Statistics saved to {args.stats}")
    if args.plot:
        stats.plot(args.plot)
        logging.info(f"Training curve saved to {args.plot}")

    logging.info("Training complete!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
