from typing import Optional

from .board import Board, Direction, ILLEGAL

_SLIDE_NAMES = {
    Direction.UP: "#U",
    Direction.RIGHT: "#R",
    Direction.DOWN: "#D",
    Direction.LEFT: "#L",
}


class Action:
    """
    Immutable move produced by an agent and consumed by the episode driver.

    Action()                  -- null action, "no legal action"
    Action.slide(direction)   -- player move
    Action.place(pos, tile)   -- environment spawn
    """

    NULL = "null"
    SLIDE = "slide"
    PLACE = "place"

    __slots__ = ("kind", "direction", "position", "tile")

    def __init__(self, kind: str = NULL, direction: Optional[Direction] = None,
                 position: Optional[int] = None, tile: Optional[int] = None):
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "direction", direction)
        object.__setattr__(self, "position", position)
        object.__setattr__(self, "tile", tile)

    def __setattr__(self, key, value):
        raise AttributeError("Action is immutable")

    @classmethod
    def slide(cls, direction: int) -> "Action":
        return cls(cls.SLIDE, direction=Direction(direction))

    @classmethod
    def place(cls, position: int, tile: int) -> "Action":
        return cls(cls.PLACE, position=int(position), tile=int(tile))

    def is_null(self) -> bool:
        return self.kind == self.NULL

    def apply(self, board: Board) -> int:
        """Apply to the board in place; returns the reward or -1 if the action is illegal."""
        if self.kind == self.SLIDE:
            return board.slide(self.direction)
        if self.kind == self.PLACE:
            return board.place(self.position, self.tile)
        return ILLEGAL

    def __eq__(self, other) -> bool:
        if not isinstance(other, Action):
            return NotImplemented
        return (self.kind, self.direction, self.position, self.tile) == \
            (other.kind, other.direction, other.position, other.tile)

    def __hash__(self) -> int:
        return hash((self.kind, self.direction, self.position, self.tile))

    def __repr__(self) -> str:
        return f"Action({self})"

    def __str__(self) -> str:
        if self.kind == self.SLIDE:
            return _SLIDE_NAMES[self.direction]
        if self.kind == self.PLACE:
            return f"@{self.position}-{1 << self.tile}"
        return "N/A"
