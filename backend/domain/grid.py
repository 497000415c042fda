"""
Grid model - the fixed square coordinate space the snake lives on.
"""

import random
from typing import Iterable, Optional, Tuple

from .constants import GRID_COUNT

Coordinate = Tuple[int, int]


class GridFullError(RuntimeError):
    """Raised when every cell is occupied and no free cell can be sampled."""


class Grid:
    """
    A square board of grid_count x grid_count cells.

    The size is fixed at construction. Cells are (x, y) tuples with
    (0, 0) at the top-left corner.
    """

    def __init__(self, grid_count: int = GRID_COUNT):
        if grid_count < 1:
            raise ValueError(f"grid_count must be positive, got {grid_count}")
        self._grid_count = grid_count

    @property
    def grid_count(self) -> int:
        return self._grid_count

    @property
    def total_cells(self) -> int:
        return self._grid_count * self._grid_count

    def in_bounds(self, cell: Coordinate) -> bool:
        x, y = cell
        return 0 <= x < self._grid_count and 0 <= y < self._grid_count

    def sample_free_cell(
        self,
        occupied: Iterable[Coordinate],
        rng: Optional[random.Random] = None,
    ) -> Coordinate:
        """
        Return a uniformly random cell that is not in `occupied`.

        Uses rejection sampling. Food placement assumes the snake never
        fills the board (a self-collision ends the game long before that),
        but a completely full board raises GridFullError instead of
        retrying forever.

        Args:
            occupied: Cells that must not be returned
            rng: Optional random source, for deterministic tests

        Returns:
            A free (x, y) cell

        Raises:
            GridFullError: If no cell is free
        """
        rng = rng or random
        taken = set(occupied)
        free_cells = self.total_cells - sum(1 for c in taken if self.in_bounds(c))
        if free_cells <= 0:
            raise GridFullError(
                f"No free cell on a {self._grid_count}x{self._grid_count} grid"
            )

        while True:
            cell = (
                rng.randrange(self._grid_count),
                rng.randrange(self._grid_count),
            )
            if cell not in taken:
                return cell

    def __repr__(self):
        return f"<Grid {self._grid_count}x{self._grid_count}>"
