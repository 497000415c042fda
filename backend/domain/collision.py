"""
Collision checks. Pure functions, no side effects.
"""

from typing import Sequence, Tuple

Coordinate = Tuple[int, int]


def is_out_of_bounds(cell: Coordinate, grid_count: int) -> bool:
    """True if either coordinate falls outside [0, grid_count)."""
    x, y = cell
    return x < 0 or x >= grid_count or y < 0 or y >= grid_count


def is_self_collision(body: Sequence[Coordinate], cell: Coordinate) -> bool:
    """True if `cell` equals any segment of `body`."""
    return cell in body


def collision_body(body: Sequence[Coordinate], will_eat: bool) -> Sequence[Coordinate]:
    """
    Cells still occupied once the head advances this step.

    The tail moves away in the same step as the head unless food is eaten,
    so a normal move may enter the cell the tail is leaving. When the snake
    grows the tail stays put and remains a collision cell.
    """
    body = list(body)
    if will_eat:
        return body
    return body[:-1]
