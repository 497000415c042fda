"""
Game configuration.

Defaults live in domain.constants; any of them can be overridden through
environment variables (or a .env file picked up by python-dotenv).
"""

import logging
import os
from dataclasses import dataclass, field
from typing import Optional, Tuple

from dotenv import load_dotenv

from domain.constants import (
    GRID_COUNT,
    INITIAL_SPEED,
    MIN_SPEED,
    SPEED_DECREMENT,
    SCORE_PER_FOOD,
    INITIAL_SNAKE,
    INITIAL_DIRECTION,
    HIGH_SCORE_KEY,
    VALID_MOVES,
)

logger = logging.getLogger(__name__)


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        logger.warning(f"Ignoring {name}={raw!r}: not an integer, using {default}")
        return default


@dataclass
class GameConfig:
    """Tunables for a single engine instance."""

    grid_count: int = GRID_COUNT
    initial_speed: int = INITIAL_SPEED
    min_speed: int = MIN_SPEED
    speed_decrement: int = SPEED_DECREMENT
    score_per_food: int = SCORE_PER_FOOD
    initial_snake: Tuple[Tuple[int, int], ...] = field(default=INITIAL_SNAKE)
    initial_direction: str = INITIAL_DIRECTION
    high_score_key: str = HIGH_SCORE_KEY

    @classmethod
    def from_env(cls, env_file: Optional[str] = None) -> "GameConfig":
        """
        Build a config from SNAKE_* environment variables.

        Unparseable integers fall back to their defaults with a warning.
        """
        load_dotenv(env_file)

        grid_count = _env_int("SNAKE_GRID_COUNT", GRID_COUNT)
        config = cls(
            grid_count=grid_count,
            initial_speed=_env_int("SNAKE_INITIAL_SPEED", INITIAL_SPEED),
            min_speed=_env_int("SNAKE_MIN_SPEED", MIN_SPEED),
            speed_decrement=_env_int("SNAKE_SPEED_DECREMENT", SPEED_DECREMENT),
            initial_snake=default_snake_for(grid_count),
            high_score_key=os.getenv("SNAKE_HIGH_SCORE_KEY") or HIGH_SCORE_KEY,
        )
        config.validate()
        return config

    def validate(self) -> None:
        """Raise ValueError if the tunables cannot produce a playable game."""
        for name in ("grid_count", "initial_speed", "min_speed", "speed_decrement", "score_per_food"):
            value = getattr(self, name)
            if value <= 0:
                raise ValueError(f"{name} must be positive, got {value}")

        if self.min_speed > self.initial_speed:
            raise ValueError(
                f"min_speed ({self.min_speed}) cannot exceed initial_speed ({self.initial_speed})"
            )

        if self.initial_direction not in VALID_MOVES:
            raise ValueError(f"Unknown initial_direction: {self.initial_direction!r}")

        if not self.initial_snake:
            raise ValueError("initial_snake must not be empty")

        for x, y in self.initial_snake:
            if not (0 <= x < self.grid_count and 0 <= y < self.grid_count):
                raise ValueError(
                    f"Initial snake cell {(x, y)} is outside a {self.grid_count}x{self.grid_count} grid"
                )

        if len(set(self.initial_snake)) != len(self.initial_snake):
            raise ValueError("initial_snake contains duplicate cells")

        # one free cell is needed for the food
        if len(self.initial_snake) >= self.grid_count * self.grid_count:
            raise ValueError("Grid is too small for the initial snake and food")


def default_snake_for(grid_count: int) -> Tuple[Tuple[int, int], ...]:
    """
    Starting body for a given grid size.

    The stock 20x20 board uses the classic (10,10),(10,11),(10,12) snake
    heading UP; other sizes centre the same vertical three-cell body.
    """
    if grid_count == GRID_COUNT:
        return INITIAL_SNAKE
    cx = grid_count // 2
    cy = grid_count // 2
    body = tuple((cx, cy + i) for i in range(3) if cy + i < grid_count)
    return body or ((cx, cy),)
