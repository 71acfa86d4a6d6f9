from .base_agent import Agent, RandomAgent
from .ntuple_network import NTupleNetwork, WeightTable, WeightFileError
from .td_agent import TDPlayer, WeightAgent, Step
from .baseline import Player
from .random_env import RandomEnvironment
