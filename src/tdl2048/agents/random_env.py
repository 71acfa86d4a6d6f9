from ..environment.action import Action
from ..environment.board import Board
from ..environment.spawner import sample_spawn
from .base_agent import RandomAgent


class RandomEnvironment(RandomAgent):
    """
    Environment role: add a new tile to a random empty cell.
    2-tile: 90%
    4-tile: 10%
    """

    def __init__(self, args: str = ""):
        super().__init__("name=random role=environment " + args)

    def take_action(self, after: Board) -> Action:
        spawn = sample_spawn(after, self.rng)
        if spawn is None:
            return Action()
        return Action.place(*spawn)
