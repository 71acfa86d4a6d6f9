import numpy as np
from enum import IntEnum
from functools import lru_cache
from typing import Iterable, List, Optional, Tuple

SIZE = 4
NUM_CELLS = SIZE * SIZE

# Sentinel returned by slide/place when nothing changes
ILLEGAL = -1


class Direction(IntEnum):
    UP = 0
    RIGHT = 1
    DOWN = 2
    LEFT = 3


DIRECTIONS = tuple(Direction)

# Number of counter-clockwise quarter turns that bring a direction onto LEFT
_ROTATIONS = {
    Direction.LEFT: 0,
    Direction.UP: 1,
    Direction.RIGHT: 2,
    Direction.DOWN: 3,
}


@lru_cache(maxsize=None)
def slide_line(line: Tuple[int, ...]) -> Tuple[Tuple[int, ...], int]:
    """
    Slide a single line of exponents toward index 0.
    Equal neighbours merge once into exponent + 1, scoring 2 ** (exponent + 1).
    Returns the new line and the reward it produced.
    """
    filtered = [tile for tile in line if tile != 0]
    merged = []
    reward = 0
    i = 0
    while i < len(filtered):
        if i + 1 < len(filtered) and filtered[i] == filtered[i + 1]:
            tile = filtered[i] + 1
            merged.append(tile)
            reward += 1 << tile
            i += 2
        else:
            merged.append(filtered[i])
            i += 1
    merged.extend([0] * (len(line) - len(merged)))
    return tuple(merged), reward


class Board:
    """
    4x4 grid of tile exponents: 0 is an empty cell, k is a tile showing 2 ** k.
    Cells are addressed either by flat position (0..15, row-major) or by (row, col).
    """

    def __init__(self, tiles: Optional[Iterable] = None):
        if tiles is None:
            self.tile = np.zeros((SIZE, SIZE), dtype=np.uint8)
        else:
            self.tile = np.array(tiles, dtype=np.uint8).reshape(SIZE, SIZE)

    def copy(self) -> "Board":
        return Board(self.tile.copy())

    def __getitem__(self, key) -> int:
        if isinstance(key, tuple):
            return int(self.tile[key])
        return int(self.tile.flat[key])

    def __setitem__(self, key, value: int):
        if isinstance(key, tuple):
            self.tile[key] = value
        else:
            self.tile.flat[key] = value

    def __eq__(self, other) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return bool(np.array_equal(self.tile, other.tile))

    __hash__ = None

    def cells(self) -> np.ndarray:
        """Flat row-major view of the cell exponents."""
        return self.tile.reshape(-1)

    def slide(self, direction: int) -> int:
        """
        Slide every line toward the given direction in place.
        Returns the merge reward, or ILLEGAL (-1) when no cell would change,
        in which case the board is left untouched.
        """
        rotated = np.rot90(self.tile, k=_ROTATIONS[Direction(direction)])
        reward = 0
        moved = False
        for i in range(SIZE):
            line = tuple(rotated[i].tolist())
            new_line, score = slide_line(line)
            if new_line != line:
                rotated[i] = new_line
                moved = True
            reward += score
        return reward if moved else ILLEGAL

    def place(self, pos: int, tile: int) -> int:
        """Put a 2-tile (1) or 4-tile (2) on an empty cell; -1 if that is not possible."""
        if not 0 <= pos < NUM_CELLS:
            return ILLEGAL
        if tile not in (1, 2) or self[pos] != 0:
            return ILLEGAL
        self[pos] = tile
        return 0

    def empty_cells(self) -> List[int]:
        return [int(pos) for pos in np.flatnonzero(self.tile == 0)]

    def max_tile(self) -> int:
        """Largest displayed tile value on the board (0 for an empty board)."""
        exponent = int(self.tile.max())
        return 1 << exponent if exponent else 0

    def legal_directions(self) -> List[Direction]:
        return [d for d in DIRECTIONS if self.copy().slide(d) != ILLEGAL]

    def is_terminal(self) -> bool:
        return not self.legal_directions()

    def __repr__(self) -> str:
        return f"Board({self.cells().tolist()})"

    def __str__(self) -> str:
        lines = ["+" + "-" * 24 + "+"]
        for row in self.tile:
            cells = [str(1 << int(t)).rjust(6) if t else "".rjust(6) for t in row]
            lines.append("|" + "".join(cells) + "|")
        lines.append("+" + "-" * 24 + "+")
        return "\n".join(lines)
