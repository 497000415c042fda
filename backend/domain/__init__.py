"""
Domain entities for the Neon Snake game engine.

This module contains the core game entities that are independent of
infrastructure concerns (database, scheduling, rendering, etc.).
"""

from .constants import (
    UP, DOWN, LEFT, RIGHT, VALID_MOVES, OPPOSITE_DIRECTIONS,
    IDLE, PLAYING, PAUSED, GAME_OVER,
)
from .grid import Grid, GridFullError
from .snake import Snake
from .collision import is_out_of_bounds, is_self_collision, collision_body
from .game_state import GameState, Snapshot

__all__ = [
    'UP', 'DOWN', 'LEFT', 'RIGHT', 'VALID_MOVES', 'OPPOSITE_DIRECTIONS',
    'IDLE', 'PLAYING', 'PAUSED', 'GAME_OVER',
    'Grid', 'GridFullError',
    'Snake',
    'is_out_of_bounds', 'is_self_collision', 'collision_body',
    'GameState', 'Snapshot',
]
