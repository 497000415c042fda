"""
GameState and Snapshot entities - immutable views of the game at a point in time.
"""

from dataclasses import dataclass
from typing import Tuple

from .constants import VALID_STATUSES

Coordinate = Tuple[int, int]


@dataclass(frozen=True)
class GameState:
    """
    The scalar part of a snapshot.

    Attributes:
        score: points earned in the current game
        high_score: best final score seen, including the persisted value
        status: one of IDLE, PLAYING, PAUSED, GAME_OVER
        speed: current tick interval in milliseconds
    """

    score: int
    high_score: int
    status: str
    speed: int

    def __post_init__(self):
        if self.status not in VALID_STATUSES:
            raise ValueError(f"Unknown status: {self.status!r}")


@dataclass(frozen=True)
class Snapshot:
    """
    Everything a renderer needs after a tick.

    Attributes:
        snake: tuple of (x, y) from head at index 0 to tail at the end
        food: (x, y) of the single food cell
        state: the GameState at the time of the snapshot
        direction: the committed heading
        grid_count: board side length
        tick: number of ticks run in the current game
    """

    snake: Tuple[Coordinate, ...]
    food: Coordinate
    state: GameState
    direction: str
    grid_count: int
    tick: int = 0

    @property
    def head(self) -> Coordinate:
        return self.snake[0]

    def print_board(self) -> str:
        """
        Returns a string representation of the board with:
        . = empty space
        F = food
        H = snake head
        o = snake body
        (0,0) is the top-left cell, matching the engine's coordinates.
        """
        board = [['.' for _ in range(self.grid_count)] for _ in range(self.grid_count)]

        fx, fy = self.food
        board[fy][fx] = 'F'

        for pos_idx, (x, y) in enumerate(self.snake):
            board[y][x] = 'H' if pos_idx == 0 else 'o'

        result = []
        for y in range(self.grid_count):
            result.append(f"{y:2d} {' '.join(board[y])}")

        # x-axis labels at the bottom, last digit only to keep columns aligned
        result.append("   " + " ".join(str(i % 10) for i in range(self.grid_count)))

        return "\n".join(result)

    def __repr__(self):
        return (
            f"<Snapshot tick={self.tick}, status={self.state.status}, "
            f"score={self.state.score}, food={self.food}, length={len(self.snake)}>"
        )
