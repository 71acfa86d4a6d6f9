import logging
from typing import BinaryIO, List, Sequence, Tuple

import numpy as np

from ..environment.board import Board, NUM_CELLS

logger = logging.getLogger(__name__)

# 24 five-cell tuples followed by the 4 rows and 4 columns
STANDARD_TUPLES = [
    [0, 1, 2, 3, 4], [5, 6, 7, 10, 11], [8, 9, 12, 13, 14],
    [0, 1, 2, 3, 7], [4, 5, 6, 8, 9], [10, 11, 13, 14, 15],
    [1, 2, 3, 6, 7], [4, 5, 8, 9, 10], [11, 12, 13, 14, 15],
    [0, 1, 2, 4, 5], [6, 7, 9, 10, 11], [8, 12, 13, 14, 15],
    [0, 4, 8, 12, 13], [1, 2, 5, 6, 9], [7, 10, 11, 14, 15],
    [0, 1, 4, 8, 12], [5, 9, 10, 13, 14], [2, 3, 6, 7, 11],
    [2, 3, 7, 11, 15], [6, 9, 10, 13, 14], [0, 1, 4, 5, 8],
    [3, 7, 11, 14, 15], [1, 2, 5, 6, 10], [4, 8, 9, 12, 13],
    [0, 1, 2, 3], [4, 5, 6, 7], [8, 9, 10, 11], [12, 13, 14, 15],
    [0, 4, 8, 12], [1, 5, 9, 13], [2, 6, 10, 14], [3, 7, 11, 15],
]

ROW_TUPLES = STANDARD_TUPLES[24:]

PATTERNS = {
    "standard": STANDARD_TUPLES,
    "rows": ROW_TUPLES,
}

_COUNT_DTYPE = np.dtype("<u4")
_LENGTH_DTYPE = np.dtype("<u8")
_WEIGHT_DTYPE = np.dtype("<f4")


class WeightFileError(RuntimeError):
    """A weight file is missing, unreadable or does not match the network layout."""


def feature_index(cells: Sequence[int], positions: Sequence[int], num_values: int) -> int:
    """Read the exponents at `positions` as digits of a base-`num_values` number, first digit most significant."""
    index = 0
    for pos in positions:
        index = index * num_values + int(cells[pos])
    return index


def feature_digits(index: int, length: int, num_values: int) -> Tuple[int, ...]:
    """Inverse of feature_index: split an index back into `length` base-`num_values` digits."""
    digits = []
    for _ in range(length):
        index, digit = divmod(index, num_values)
        digits.append(digit)
    return tuple(reversed(digits))


class WeightTable:
    """Dense float32 weights for one tuple, indexed by feature index."""

    def __init__(self, length: int):
        self.weights = np.zeros(length, dtype=np.float32)

    def __len__(self) -> int:
        return len(self.weights)

    def __getitem__(self, index: int) -> float:
        return float(self.weights[index])

    def __setitem__(self, index: int, value: float) -> None:
        self.weights[index] = value

    def accumulate(self, index: int, delta: float) -> None:
        self.weights[index] += delta

    def write(self, stream: BinaryIO) -> None:
        stream.write(np.array([len(self.weights)], dtype=_LENGTH_DTYPE).tobytes())
        stream.write(self.weights.astype(_WEIGHT_DTYPE).tobytes())

    @classmethod
    def read(cls, stream: BinaryIO, expected_length: int) -> "WeightTable":
        header = stream.read(_LENGTH_DTYPE.itemsize)
        if len(header) != _LENGTH_DTYPE.itemsize:
            raise WeightFileError("truncated weight table header")
        length = int(np.frombuffer(header, dtype=_LENGTH_DTYPE)[0])
        if length != expected_length:
            raise WeightFileError(f"weight table has {length} entries, expected {expected_length}")
        data = stream.read(length * _WEIGHT_DTYPE.itemsize)
        if len(data) != length * _WEIGHT_DTYPE.itemsize:
            raise WeightFileError("truncated weight table data")
        table = cls(0)
        table.weights = np.frombuffer(data, dtype=_WEIGHT_DTYPE).astype(np.float32)
        return table


class NTupleNetwork:
    """
    Value function made of one weight table per tuple of board positions.
    The value of a board is the sum, over tuples, of the weight selected by the
    tuple's feature index. Tuple definitions are fixed at construction.
    """

    def __init__(self, tuples: Sequence[Sequence[int]], num_values: int = 16):
        if not tuples:
            raise ValueError("an n-tuple network needs at least one tuple")
        for positions in tuples:
            if not positions or any(not 0 <= p < NUM_CELLS for p in positions):
                raise ValueError(f"invalid tuple {list(positions)}")
        self.tuples = tuple(tuple(int(p) for p in positions) for positions in tuples)
        self.num_values = num_values
        self._positions = [np.array(t, dtype=np.intp) for t in self.tuples]
        self._powers = [num_values ** np.arange(len(t) - 1, -1, -1, dtype=np.int64) for t in self.tuples]
        self.tables: List[WeightTable] = [WeightTable(num_values ** len(t)) for t in self.tuples]

    @classmethod
    def from_pattern(cls, name: str = "standard", num_values: int = 16) -> "NTupleNetwork":
        if name not in PATTERNS:
            raise ValueError(f"unknown tuple pattern {name!r}, expected one of {sorted(PATTERNS)}")
        return cls(PATTERNS[name], num_values)

    def __len__(self) -> int:
        return len(self.tuples)

    def features(self, board: Board) -> List[int]:
        """Feature index of every tuple. Exponents beyond the table range share its top value."""
        cells = np.minimum(board.cells().astype(np.int64), self.num_values - 1)
        return [int(cells[p] @ w) for p, w in zip(self._positions, self._powers)]

    def estimate(self, board: Board) -> float:
        return self._estimate(self.features(board))

    def _estimate(self, features: List[int]) -> float:
        return sum(float(table.weights[i]) for table, i in zip(self.tables, features))

    def adjust(self, board: Board, target: float, alpha: float) -> float:
        """
        Move the estimate of `board` toward `target`.
        Every selected weight receives the same alpha * error step; returns the error.
        """
        features = self.features(board)
        error = target - self._estimate(features)
        delta = alpha * error
        for table, i in zip(self.tables, features):
            table.accumulate(i, delta)
        return error

    def save(self, path: str) -> None:
        try:
            with open(path, "wb") as f:
                f.write(np.array([len(self.tables)], dtype=_COUNT_DTYPE).tobytes())
                for table in self.tables:
                    table.write(f)
        except OSError as e:
            raise WeightFileError(f"cannot write weights to {path}: {e}") from e
        logger.info(f"Saved {len(self.tables)} weight tables to {path}")

    def load(self, path: str) -> None:
        """Replace every table with the contents of `path`; nothing is replaced if the file is invalid."""
        try:
            with open(path, "rb") as f:
                header = f.read(_COUNT_DTYPE.itemsize)
                if len(header) != _COUNT_DTYPE.itemsize:
                    raise WeightFileError(f"{path}: truncated table count")
                count = int(np.frombuffer(header, dtype=_COUNT_DTYPE)[0])
                if count != len(self.tuples):
                    raise WeightFileError(f"{path}: holds {count} tables, network has {len(self.tuples)}")
                tables = [WeightTable.read(f, len(table)) for table in self.tables]
        except OSError as e:
            raise WeightFileError(f"cannot read weights from {path}: {e}") from e
        self.tables = tables
        logger.info(f"Loaded {count} weight tables from {path}")
