"""
Command-line helpers for training runs.
"""

from .cli import setup_logging, parse_args
