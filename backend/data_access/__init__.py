"""
Data access layer for Neon Snake.

This module provides functions for reading and writing the persisted
high score, plus store objects the engine can be handed directly.
"""

from .high_score import (
    parse_high_score,
    load_high_score,
    save_high_score,
    clear_high_score,
    HighScoreStore,
    SqliteHighScoreStore,
    MemoryHighScoreStore,
)

__all__ = [
    'parse_high_score',
    'load_high_score',
    'save_high_score',
    'clear_high_score',
    'HighScoreStore',
    'SqliteHighScoreStore',
    'MemoryHighScoreStore',
]
