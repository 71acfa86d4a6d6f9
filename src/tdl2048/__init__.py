"""N-tuple network TD learning for the 2048 game."""

__version__ = "0.1.0"

# Import key components for convenient access
from .environment import Board, Direction, Action, spawn_outcomes
from .agents import TDPlayer, Player, RandomEnvironment, NTupleNetwork, WeightFileError
from .training import run_episode, train, TrainingStats
from .config import parse_agent_args, AgentConfig
