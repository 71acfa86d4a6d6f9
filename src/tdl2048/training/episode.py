import time
from dataclasses import dataclass, field
from typing import List, Optional

from ..agents.base_agent import Agent
from ..environment.action import Action
from ..environment.board import Board, ILLEGAL


def millisec() -> int:
    return int(time.perf_counter() * 1000)


@dataclass
class Move:
    action: Action
    reward: int
    time: int


@dataclass
class Episode:
    """
    One game on a shared board. The environment places the first two tiles,
    then the player and the environment alternate until one of them cannot act.
    """
    board: Board = field(default_factory=Board)
    moves: List[Move] = field(default_factory=list)
    score: int = 0
    winner: Optional[str] = None
    opened: int = 0
    closed: int = 0
    last_move: int = field(default=0, repr=False)

    def state(self) -> Board:
        return self.board

    def open_episode(self, tag: str = "") -> None:
        self.opened = millisec()
        self.last_move = self.opened

    def close_episode(self, tag: str = "") -> None:
        self.closed = millisec()
        self.winner = tag

    def take_turns(self, play: Agent, evil: Agent) -> Agent:
        return play if max(self.step() + 1, 2) % 2 else evil

    def last_turns(self, play: Agent, evil: Agent) -> Agent:
        return self.take_turns(evil, play)

    def apply_action(self, move: Action) -> bool:
        reward = move.apply(self.board)
        if reward == ILLEGAL:
            return False
        now = millisec()
        self.moves.append(Move(move, reward, now - self.last_move))
        self.last_move = now
        self.score += reward
        return True

    def step(self, who: Optional[str] = None) -> int:
        """Number of moves made, optionally only those of the "player" or "environment" role."""
        if who is None:
            return len(self.moves)
        kind = Action.SLIDE if who == "player" else Action.PLACE
        return sum(1 for m in self.moves if m.action.kind == kind)

    def time(self, who: Optional[str] = None) -> int:
        """Milliseconds spent, optionally only on the moves of one role."""
        if who is None:
            return self.closed - self.opened
        kind = Action.SLIDE if who == "player" else Action.PLACE
        return sum(m.time for m in self.moves if m.action.kind == kind)


def run_episode(play: Agent, evil: Agent) -> Episode:
    """Play one full episode between a player-role and an environment-role agent."""
    game = Episode()
    play.open_episode("~:" + evil.name())
    evil.open_episode(play.name() + ":~")
    game.open_episode(play.name() + ":" + evil.name())

    while True:
        who = game.take_turns(play, evil)
        move = who.take_action(game.state())
        if not game.apply_action(move):
            break

    win = game.last_turns(play, evil)
    game.close_episode(win.name())
    play.close_episode(win.name())
    evil.close_episode(win.name())
    return game
