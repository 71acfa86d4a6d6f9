import argparse
import logging
import sys

from ...config import HYPERPARAMS


def setup_logging(log_file="training.log"):
    """
    Set up logging configuration.

    Args:
        log_file: Path to the log file, or None to log to stdout only
    """
    handlers = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.insert(0, logging.FileHandler(log_file, encoding='utf-8'))
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True,
    )

def parse_args(args=None):
    """
    Parse command-line arguments.

    Args:
        args: Command-line arguments (defaults to sys.argv)

    Returns:
        Parsed arguments
    """
    parser = argparse.ArgumentParser(
        description="2048 n-tuple TD learning"
    )

    # General options
    parser.add_argument("--seed", type=int, default=HYPERPARAMS["seed"],
                        help=f"Seed for agents whose arguments give none (default: {HYPERPARAMS['seed']})")
    parser.add_argument("--log-file", type=str, default="training.log",
                        help="Log file (default: training.log, empty to disable)")

    # Episode options
    parser.add_argument("--total", type=int, default=HYPERPARAMS["total_episodes"],
                        help=f"Number of episodes to play (default: {HYPERPARAMS['total_episodes']})")
    parser.add_argument("--block", type=int, default=HYPERPARAMS["block"],
                        help=f"Episodes per statistics summary (default: {HYPERPARAMS['block']})")

    # Agent options
    parser.add_argument("--player", choices=["td", "dummy"], default="td",
                        help="Player agent: TD learner or non-learning baseline (default: td)")
    parser.add_argument("--play", type=str, default="",
                        help="key=value arguments for the player, e.g. \"alpha=0.1 n=2 save=weights.bin\"")
    parser.add_argument("--evil", type=str, default="",
                        help="key=value arguments for the environment, e.g. \"seed=7\"")

    # Output options
    parser.add_argument("--stats", type=str, default=None,
                        help="Write per-episode statistics as JSON to this path")
    parser.add_argument("--plot", type=str, default=None,
                        help="Save a training curve image to this path")

    return parser.parse_args(args)
