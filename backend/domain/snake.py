"""
Snake entity for the game engine.
"""

from collections import deque
from typing import Iterable, Optional, Tuple

from .constants import DIRECTION_DELTAS, OPPOSITE_DIRECTIONS, VALID_MOVES


class Snake:
    """
    Represents the snake on the board.

    Attributes:
        positions: deque of (x, y) from head at index 0 to tail at the end
        direction: the committed heading applied on the next tick
        next_direction: the buffered heading, committed at the start of a tick
        alive: whether this snake is still alive
        death_reason: 'wall', 'self' or 'board_full' once the snake is dead
    """

    def __init__(self, positions: Iterable[Tuple[int, int]], direction: str):
        positions = [tuple(p) for p in positions]
        if not positions:
            raise ValueError("Snake needs at least one position")
        if direction not in VALID_MOVES:
            raise ValueError(f"Unknown direction: {direction!r}")

        self.positions = deque(positions)
        self.direction = direction
        self.next_direction = direction
        self.alive = True
        self.death_reason: Optional[str] = None

    @property
    def head(self) -> Tuple[int, int]:
        """Return the head position (first element)."""
        return self.positions[0]

    def __len__(self) -> int:
        return len(self.positions)

    def buffer_direction(self, requested: str) -> bool:
        """
        Store `requested` as the next heading unless it reverses the
        committed heading. Returns whether the request was kept.
        """
        if requested not in VALID_MOVES:
            raise ValueError(f"Unknown direction: {requested!r}")
        if OPPOSITE_DIRECTIONS[self.direction] == requested:
            return False
        self.next_direction = requested
        return True

    def commit_direction(self) -> str:
        self.direction = self.next_direction
        return self.direction

    def next_head(self) -> Tuple[int, int]:
        """Head position one cell along the committed heading."""
        dx, dy = DIRECTION_DELTAS[self.direction]
        hx, hy = self.head
        return (hx + dx, hy + dy)

    def advance(self, new_head: Tuple[int, int], grow: bool) -> None:
        self.positions.appendleft(new_head)
        if not grow:
            self.positions.pop()

    def kill(self, reason: str) -> None:
        self.alive = False
        self.death_reason = reason

    def __repr__(self):
        return f"<Snake head={self.head} len={len(self)} dir={self.direction}>"
