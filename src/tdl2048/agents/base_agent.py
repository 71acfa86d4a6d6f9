import logging
from typing import Dict

import numpy as np

from ..config import AgentConfig, parse_meta
from ..environment.action import Action
from ..environment.board import Board


class Agent:
    """
    Common capability of every participant in an episode, player or environment.

    Agents are built from a string of whitespace-separated key=value tokens.
    The raw tokens are kept in `meta`; `config` is the typed view derived from them.
    """

    def __init__(self, args: str = ""):
        self.meta: Dict[str, str] = parse_meta("name=unknown role=unknown " + args)
        self.config: AgentConfig = AgentConfig.from_meta(self.meta)
        self.logger = logging.getLogger(__name__)

    def open_episode(self, flag: str = "") -> None:
        pass

    def close_episode(self, flag: str = "") -> None:
        pass

    def take_action(self, board: Board) -> Action:
        return Action()

    def property(self, key: str) -> str:
        return self.meta[key]

    def notify(self, msg: str) -> None:
        """Overwrite a single key from a "key=value" message."""
        key, _, value = msg.partition("=")
        self.meta[key] = value
        self.config = AgentConfig.from_meta(self.meta)

    def name(self) -> str:
        return self.property("name")

    def role(self) -> str:
        return self.property("role")

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        self.close()
        return False

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name()!r}, role={self.role()!r})"


class RandomAgent(Agent):
    """Agent owning a private random engine, seeded from the `seed` key when present."""

    def __init__(self, args: str = ""):
        super().__init__(args)
        self.rng = np.random.default_rng(self.config.seed)
