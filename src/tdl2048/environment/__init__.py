from .board import Board, Direction, DIRECTIONS, ILLEGAL
from .action import Action
from .spawner import spawn_outcomes, sample_spawn, TILE_DISTRIBUTION
