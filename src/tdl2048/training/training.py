import json
import logging
from collections import Counter
from typing import Dict, List, Optional

import matplotlib.pyplot as plt
import numpy as np

from ..agents.base_agent import Agent
from .episode import Episode, run_episode


class TrainingStats:
    def __init__(self, block: int = 1000):
        self.block = block
        self.scores: List[int] = []
        self.max_tiles: List[int] = []
        self.moves: List[int] = []
        self.durations: List[int] = []

    def __len__(self) -> int:
        return len(self.scores)

    def update(self, game: Episode) -> None:
        self.scores.append(game.score)
        self.max_tiles.append(game.board.max_tile())
        self.moves.append(game.step("player"))
        self.durations.append(game.time())
        if self.block and len(self) % self.block == 0:
            self.log_summary()

    def summary(self, last: Optional[int] = None) -> Dict:
        """
        Aggregate the last `last` episodes (default: one block).
        `tiles` maps each max tile to (share of episodes ending on it, share reaching at least it).
        """
        last = last or self.block or len(self)
        scores = self.scores[-last:]
        tiles = self.max_tiles[-last:]
        moves = sum(self.moves[-last:])
        duration = sum(self.durations[-last:])
        if not scores:
            return {"episodes": 0, "avg": 0.0, "max": 0, "ops": 0.0, "tiles": {}}

        counts = Counter(tiles)
        reach = 0
        distribution = {}
        for tile in sorted(counts, reverse=True):
            reach += counts[tile]
            distribution[tile] = (counts[tile] / len(tiles), reach / len(tiles))
        return {
            "episodes": len(scores),
            "avg": float(np.mean(scores)),
            "max": int(np.max(scores)),
            "ops": moves * 1000.0 / max(duration, 1),
            "tiles": dict(sorted(distribution.items())),
        }

    def log_summary(self, last: Optional[int] = None) -> None:
        result = self.summary(last)
        logging.info(f"{len(self)}\tavg = {result['avg']:.0f}, max = {result['max']}, ops = {result['ops']:.0f}")
        for tile, (share, reach) in result["tiles"].items():
            logging.info(f"\t{tile}\t{reach * 100:.1f}%\t({share * 100:.1f}%)")

    def save(self, path: str) -> None:
        with open(path, "w") as f:
            json.dump({
                "scores": self.scores,
                "max_tiles": self.max_tiles,
                "moves": self.moves,
                "durations": self.durations,
            }, f)

    def plot(self, filename: str = "training_stats.png") -> None:
        if not self.scores:
            return  # No data to plot

        fig, axes = plt.subplots(1, 2, figsize=(15, 5))

        window = max(1, min(self.block or len(self), len(self)))
        running = np.convolve(self.scores, np.ones(window) / window, mode="valid")
        axes[0].plot(self.scores, alpha=0.4, label="Episode Score")
        axes[0].plot(np.arange(window - 1, len(self)), running, label=f"Running Mean ({window})")
        axes[0].set_title("Scores")
        axes[0].set_xlabel("Episode")
        axes[0].set_ylabel("Score")
        axes[0].legend()

        axes[1].plot(self.max_tiles)
        axes[1].set_yscale("log", base=2)
        axes[1].set_title("Max Tile Achieved")
        axes[1].set_xlabel("Episode")
        axes[1].set_ylabel("Max Tile")

        plt.tight_layout()
        plt.savefig(filename)
        plt.close(fig)


def train(play: Agent, evil: Agent, total: int, block: int = 1000,
          stats: Optional[TrainingStats] = None) -> TrainingStats:
    """Run `total` self-play episodes; learning happens inside the player's close_episode."""
    stats = stats if stats is not None else TrainingStats(block)
    for _ in range(total):
        game = run_episode(play, evil)
        stats.update(game)
    return stats
