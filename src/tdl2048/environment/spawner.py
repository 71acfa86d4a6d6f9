from typing import List, Optional, Tuple

import numpy as np

from .board import Board

# (exponent, probability): a 2-tile 90% of the time, a 4-tile otherwise
TILE_DISTRIBUTION = ((1, 0.9), (2, 0.1))


def spawn_outcomes(board: Board) -> List[Tuple[int, int, float]]:
    """
    Enumerate every (position, tile, probability) the environment can produce on this board.
    Positions are uniform over the empty cells; an empty list means the board is full.
    """
    empty = board.empty_cells()
    if not empty:
        return []
    share = 1.0 / len(empty)
    return [(pos, tile, p * share) for pos in empty for tile, p in TILE_DISTRIBUTION]


def sample_spawn(board: Board, rng: np.random.Generator) -> Optional[Tuple[int, int]]:
    """Draw one (position, tile) from the spawn distribution, or None on a full board."""
    empty = board.empty_cells()
    if not empty:
        return None
    pos = empty[rng.integers(len(empty))]
    tile = 1 if rng.integers(10) else 2
    return pos, tile
