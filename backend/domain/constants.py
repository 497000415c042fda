"""
Game constants for Neon Snake.
"""

# Movement directions
UP = "UP"
DOWN = "DOWN"
LEFT = "LEFT"
RIGHT = "RIGHT"
VALID_MOVES = {UP, DOWN, LEFT, RIGHT}

# (dx, dy) per direction; origin is the top-left cell
DIRECTION_DELTAS = {
    UP: (0, -1),
    DOWN: (0, 1),
    LEFT: (-1, 0),
    RIGHT: (1, 0),
}

OPPOSITE_DIRECTIONS = {
    UP: DOWN,
    DOWN: UP,
    LEFT: RIGHT,
    RIGHT: LEFT,
}

# Lifecycle statuses
IDLE = "IDLE"
PLAYING = "PLAYING"
PAUSED = "PAUSED"
GAME_OVER = "GAME_OVER"
VALID_STATUSES = {IDLE, PLAYING, PAUSED, GAME_OVER}

# Game settings
GRID_COUNT = 20
INITIAL_SPEED = 150     # ms per tick
MIN_SPEED = 50          # fastest tick interval
SPEED_DECREMENT = 2     # ms shaved off per food
SCORE_PER_FOOD = 10

INITIAL_SNAKE = ((10, 10), (10, 11), (10, 12))
INITIAL_DIRECTION = UP

HIGH_SCORE_KEY = "snake_neom_highscore"
