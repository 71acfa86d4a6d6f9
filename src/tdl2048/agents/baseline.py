from ..environment.action import Action
from ..environment.board import Board, DIRECTIONS, ILLEGAL
from .base_agent import RandomAgent


class Player(RandomAgent):
    """
    Non-learning player.

    style=random  -- a legal slide picked at random (default)
    style=greedy1 -- the slide with the largest immediate reward
    style=greedy2 -- the slide that starts the best two-slide sequence
    """

    def __init__(self, args: str = ""):
        super().__init__("name=dummy role=player " + args)

    def take_action(self, before: Board) -> Action:
        style = self.config.style
        if style == "greedy1":
            return self._greedy1(before)
        if style == "greedy2":
            return self._greedy2(before)
        return self._random(before)

    def _random(self, before: Board) -> Action:
        for op in self.rng.permutation(len(DIRECTIONS)):
            if before.copy().slide(int(op)) != ILLEGAL:
                return Action.slide(int(op))
        return Action()

    def _greedy1(self, before: Board) -> Action:
        best_op = None
        best_reward = ILLEGAL
        for op in DIRECTIONS:
            reward = before.copy().slide(op)
            if reward > best_reward:
                best_op, best_reward = op, reward
        return Action.slide(best_op) if best_op is not None else Action()

    def _greedy2(self, before: Board) -> Action:
        best_op = None
        best_reward = ILLEGAL
        for op1 in DIRECTIONS:
            first = before.copy()
            reward1 = first.slide(op1)
            if reward1 == ILLEGAL:
                continue
            for op2 in DIRECTIONS:
                reward2 = first.copy().slide(op2)
                if reward2 == ILLEGAL:
                    continue
                if reward1 + reward2 > best_reward:
                    best_op, best_reward = op1, reward1 + reward2
        return Action.slide(best_op) if best_op is not None else Action()
