from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np

from ..environment.action import Action
from ..environment.board import Board, DIRECTIONS, Direction, ILLEGAL
from ..environment.spawner import spawn_outcomes
from .base_agent import Agent
from .ntuple_network import NTupleNetwork

# Value of a spawned board with no legal move; finite so it never masks a legal choice
WORST_VALUE = -float(np.finfo(np.float32).max)


@dataclass
class Step:
    reward: int
    after: Board


class WeightAgent(Agent):
    """
    Agent that owns an n-tuple network and a learning rate.
    Weights are loaded at construction when `load` is given and written back by close() when `save` is.
    """

    def __init__(self, args: str = "", network: Optional[NTupleNetwork] = None):
        super().__init__(args)
        if network is None:
            network = NTupleNetwork.from_pattern(self.config.init, self.config.tile_values)
            if self.config.load:
                network.load(self.config.load)
        self.network = network

    @property
    def alpha(self) -> float:
        return self.config.alpha

    def close(self) -> None:
        if self.config.save:
            self.network.save(self.config.save)


class TDPlayer(WeightAgent):
    """
    Player trained by n-step TD learning on afterstates.

    Actions are chosen by expectimax over the next tile spawn (ply=2) or by
    reward plus afterstate value (ply=1). Each decision is recorded and the
    whole episode is replayed backward in close_episode.
    """

    def __init__(self, args: str = "", network: Optional[NTupleNetwork] = None):
        super().__init__("name=TD role=player " + args, network)
        self.history: List[Step] = []
        self.logger.info(f"{self.name()}: n_step={self.config.n}, ply={self.config.ply}, alpha={self.alpha}")

    def open_episode(self, flag: str = "") -> None:
        self.history.clear()

    def best_slide(self, before: Board) -> Optional[Tuple[Direction, int, Board, float]]:
        """Greedy choice of reward + estimate over the four slides; None when no slide is legal."""
        best = None
        best_score = -np.inf
        for direction in DIRECTIONS:
            after = before.copy()
            reward = after.slide(direction)
            if reward == ILLEGAL:
                continue
            value = self.network.estimate(after)
            if reward + value > best_score:
                best_score = reward + value
                best = (direction, reward, after, value)
        return best

    def expected_value(self, after: Board) -> float:
        """
        Expected value of an afterstate over every tile the environment may add,
        assuming the player answers each spawn with its greedy one-step choice.
        """
        value = 0.0
        for pos, tile, probability in spawn_outcomes(after):
            state = after.copy()
            state[pos] = tile
            best = self.best_slide(state)
            value += probability * (best[3] if best is not None else WORST_VALUE)
        return value

    def lookahead(self, after: Board) -> float:
        if self.config.ply == 1:
            return self.network.estimate(after)
        return self.expected_value(after)

    def take_action(self, before: Board) -> Action:
        best_direction = None
        best_reward = 0
        best_after = None
        best_score = -np.inf
        for direction in DIRECTIONS:
            after = before.copy()
            reward = after.slide(direction)
            if reward == ILLEGAL:
                continue
            score = reward + self.lookahead(after)
            if score > best_score:
                best_direction, best_reward, best_after, best_score = direction, reward, after, score

        if best_direction is None:
            return Action()
        self.history.append(Step(best_reward, best_after))
        return Action.slide(best_direction)

    def close_episode(self, flag: str = "") -> None:
        if not self.history or self.alpha == 0:
            return

        n = self.config.n
        self.network.adjust(self.history[-1].after, 0, self.alpha)
        # Bootstrap terms read weights already adjusted earlier in this backward pass
        for i in range(len(self.history) - 2, -1, -1):
            window = self.history[i + 1:i + 1 + n]
            target = float(sum(step.reward for step in window))
            if i + n < len(self.history):
                target += self.network.estimate(self.history[i + n].after)
            self.network.adjust(self.history[i].after, target, self.alpha)
