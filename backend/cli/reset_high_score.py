#!/usr/bin/env python3
"""
Reset the persisted high score.

Usage:
    python backend/cli/reset_high_score.py [--confirm] [--key KEY]
"""

import os
import sys
import argparse
import logging
from typing import Optional

# Add parent directory to path to import database modules
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from dotenv import load_dotenv

from database import get_database_path
from data_access.high_score import load_high_score, clear_high_score
from domain.constants import HIGH_SCORE_KEY

load_dotenv()

logger = logging.getLogger(__name__)


def reset_high_score(key: Optional[str] = None, confirm: bool = False) -> bool:
    """
    Delete the stored high score under `key`.

    Args:
        key: Namespace key; defaults to SNAKE_HIGH_SCORE_KEY or the built-in key
        confirm: If True, skip confirmation prompt

    Returns:
        True if reset was carried out, False if cancelled
    """
    key = key or os.getenv('SNAKE_HIGH_SCORE_KEY') or HIGH_SCORE_KEY
    current = load_high_score(key)

    if not confirm:
        print("=" * 70)
        print("HIGH SCORE RESET")
        print("=" * 70)
        print(f"Database path: {get_database_path()}")
        print(f"Key:           {key}")
        print(f"Stored value:  {current}")
        print("=" * 70)

        response = input("\nType 'RESET' to confirm: ")

        if response != 'RESET':
            print("Reset cancelled")
            return False

    removed = clear_high_score(key)
    if removed:
        logger.info(f"Cleared high score {current} stored under {key!r}")
        print(f"High score cleared (was {current})")
    else:
        print("No high score was stored")
    return True


def main() -> int:
    parser = argparse.ArgumentParser(description="Reset the persisted Neon Snake high score")
    parser.add_argument("--confirm", action="store_true", help="Skip the confirmation prompt")
    parser.add_argument("--key", default=None, help="Storage key to clear")
    args = parser.parse_args()

    logging.basicConfig(level=logging.INFO, format="%(message)s")

    reset_high_score(key=args.key, confirm=args.confirm)
    return 0


if __name__ == "__main__":
    sys.exit(main())
