"""
Key bindings for the terminal front end.

Maps curses key codes to logical directions and commands. Arrow keys and
WASD (either case) steer; everything else is a lifecycle or UI command.
"""

import curses
from typing import Optional

from domain.constants import UP, DOWN, LEFT, RIGHT

# Commands
START = "start"
TOGGLE_PAUSE = "toggle_pause"
RESET = "reset"
TOGGLE_SOUND = "toggle_sound"
QUIT = "quit"

ESCAPE = 27

DIRECTION_KEYS = {
    curses.KEY_UP: UP, ord('w'): UP, ord('W'): UP,
    curses.KEY_DOWN: DOWN, ord('s'): DOWN, ord('S'): DOWN,
    curses.KEY_LEFT: LEFT, ord('a'): LEFT, ord('A'): LEFT,
    curses.KEY_RIGHT: RIGHT, ord('d'): RIGHT, ord('D'): RIGHT,
}

COMMAND_KEYS = {
    ord('p'): TOGGLE_PAUSE, ord('P'): TOGGLE_PAUSE, ord(' '): TOGGLE_PAUSE,
    ord('r'): RESET, ord('R'): RESET,
    ord('\n'): START, curses.KEY_ENTER: START,
    ord('m'): TOGGLE_SOUND, ord('M'): TOGGLE_SOUND,
    ord('q'): QUIT, ord('Q'): QUIT, ESCAPE: QUIT,
}


def direction_for_key(key: int) -> Optional[str]:
    """Direction bound to `key`, or None."""
    return DIRECTION_KEYS.get(key)


def command_for_key(key: int) -> Optional[str]:
    """Command bound to `key`, or None."""
    return COMMAND_KEYS.get(key)
