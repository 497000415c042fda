#!/usr/bin/env python3
"""
Play Neon Snake in the terminal.

Usage:
    python backend/cli/play.py [--grid N] [--no-persist] [--no-sound] [--log-file PATH]

Controls:
    Arrow keys / WASD   steer
    Enter               start / restart after game over
    P or Space          pause / resume
    R                   reset to the menu
    M                   toggle sound (terminal bell)
    Q or Esc            quit

Environment (or .env):
    SNAKE_GRID_COUNT, SNAKE_INITIAL_SPEED, SNAKE_MIN_SPEED,
    SNAKE_SPEED_DECREMENT, SNAKE_HIGH_SCORE_KEY, SNAKE_DB_PATH,
    SNAKE_WEBHOOK_URL
"""

import os
import sys
import argparse
import curses
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

# Add parent directory to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from dotenv import load_dotenv

from config import GameConfig, default_snake_for
from data_access.high_score import MemoryHighScoreStore, SqliteHighScoreStore
from domain.constants import IDLE, PLAYING, PAUSED, GAME_OVER
from domain.game_state import Snapshot
from engine import GameEngine
from services.frame_scheduler import FrameScheduler
from services.snapshot_events import SnapshotEventDetector, FOOD_EATEN, GAME_OVER_EVENT
from services.webhook_service import send_game_over_webhook
from cli.keymap import (
    direction_for_key, command_for_key,
    START, TOGGLE_PAUSE, RESET, TOGGLE_SOUND, QUIT,
)

# Load environment variables
load_dotenv()

logger = logging.getLogger(__name__)

SNAKE_PAIR = 1
FOOD_PAIR = 2
TEXT_PAIR = 3
ALERT_PAIR = 4


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Play Neon Snake in the terminal")
    parser.add_argument("--grid", type=int, default=None,
                        help="Board side length (overrides SNAKE_GRID_COUNT)")
    parser.add_argument("--no-persist", action="store_true",
                        help="Keep the high score in memory only")
    parser.add_argument("--no-sound", action="store_true",
                        help="Start with the terminal bell muted")
    parser.add_argument("--fps", type=int, default=60,
                        help="Frame rate of the render loop (default: 60)")
    parser.add_argument("--log-file", default="neon_snake.log",
                        help="Where to write logs (default: neon_snake.log)")
    return parser.parse_args(argv)


def build_config(args: argparse.Namespace) -> GameConfig:
    config = GameConfig.from_env()
    if args.grid is not None:
        config.grid_count = args.grid
        config.initial_snake = default_snake_for(args.grid)
        config.validate()
    return config


def build_engine(args: argparse.Namespace, scheduler: FrameScheduler) -> GameEngine:
    config = build_config(args)
    if args.no_persist:
        store = MemoryHighScoreStore()
    else:
        store = SqliteHighScoreStore(config.high_score_key)
    return GameEngine(config=config, high_score_store=store, scheduler=scheduler)


class TerminalView:
    """Draws snapshots with curses. Each grid cell is two columns wide."""

    def __init__(self, stdscr):
        self.stdscr = stdscr

    def setup(self) -> None:
        curses.curs_set(0)
        self.stdscr.nodelay(True)
        self.stdscr.keypad(True)
        if curses.has_colors():
            curses.start_color()
            curses.use_default_colors()
            curses.init_pair(SNAKE_PAIR, curses.COLOR_CYAN, -1)
            curses.init_pair(FOOD_PAIR, curses.COLOR_MAGENTA, -1)
            curses.init_pair(TEXT_PAIR, curses.COLOR_WHITE, -1)
            curses.init_pair(ALERT_PAIR, curses.COLOR_RED, -1)

    def _put(self, y: int, x: int, text: str, attr: int = 0) -> None:
        try:
            self.stdscr.addstr(y, x, text, attr)
        except curses.error:
            # writing the bottom-right cell raises even when it succeeds
            pass

    def draw(self, snapshot: Snapshot, sound_on: bool) -> None:
        n = snapshot.grid_count
        need_h, need_w = n + 4, n * 2 + 2
        height, width = self.stdscr.getmaxyx()

        self.stdscr.erase()
        if height < need_h or width < need_w:
            self._put(0, 0, f"Terminal too small: need {need_w}x{need_h}, got {width}x{height}")
            self.stdscr.refresh()
            return

        state = snapshot.state
        header = f"SNAKE NEOM  score {state.score:04d}  best {state.high_score:04d}"
        self._put(0, 0, header[:width - 1], curses.color_pair(TEXT_PAIR) | curses.A_BOLD)

        top = 1
        border = "+" + "-" * (n * 2) + "+"
        self._put(top, 0, border)
        for y in range(n):
            self._put(top + 1 + y, 0, "|")
            self._put(top + 1 + y, n * 2 + 1, "|")
        self._put(top + n + 1, 0, border)

        fx, fy = snapshot.food
        self._put(top + 1 + fy, 1 + fx * 2, "<>", curses.color_pair(FOOD_PAIR) | curses.A_BOLD)

        for i, (x, y) in enumerate(snapshot.snake):
            glyph = "@@" if i == 0 else "[]"
            self._put(top + 1 + y, 1 + x * 2, glyph, curses.color_pair(SNAKE_PAIR))

        footer = f"{state.status:<9} speed {state.speed}ms  sound {'on' if sound_on else 'off'}"
        self._put(top + n + 2, 0, footer[:width - 1], curses.color_pair(TEXT_PAIR))

        self._draw_overlay(snapshot, top + n // 2, n)
        self.stdscr.refresh()

    def _draw_overlay(self, snapshot: Snapshot, mid: int, n: int) -> None:
        status = snapshot.state.status
        if status == IDLE:
            lines = ["READY?", "Enter to start"]
            attr = curses.color_pair(TEXT_PAIR) | curses.A_BOLD
        elif status == PAUSED:
            lines = ["PAUSED", "P to resume"]
            attr = curses.color_pair(TEXT_PAIR) | curses.A_BOLD
        elif status == GAME_OVER:
            lines = ["SYSTEM FAILURE", f"Final Score: {snapshot.state.score}", "Enter reboot / R menu"]
            attr = curses.color_pair(ALERT_PAIR) | curses.A_BOLD
        else:
            return

        for i, line in enumerate(lines):
            x = max(1, (n * 2 + 2 - len(line)) // 2)
            self._put(mid + i, x, line, attr)


class TerminalGame:
    """
    Wires input, engine, event hooks and rendering onto one frame scheduler.
    """

    def __init__(self, stdscr, engine: GameEngine, scheduler: FrameScheduler,
                 sound_on: bool = True, fps: int = 60):
        self.view = TerminalView(stdscr)
        self.stdscr = stdscr
        self.engine = engine
        self.scheduler = scheduler
        self.sound_on = sound_on
        self.fps = fps
        self.running = True
        self.latest = engine.snapshot()
        self._webhooks = ThreadPoolExecutor(max_workers=1)

        self.detector = SnapshotEventDetector(initial=self.latest)
        self.detector.on(FOOD_EATEN, self._on_food_eaten)
        self.detector.on(GAME_OVER_EVENT, self._on_game_over)

        engine.subscribe(self._on_snapshot)
        engine.subscribe(self.detector)

    def _on_snapshot(self, snapshot: Snapshot) -> None:
        self.latest = snapshot

    def _on_food_eaten(self, payload) -> None:
        if self.sound_on:
            curses.beep()

    def _on_game_over(self, payload) -> None:
        if self.sound_on:
            curses.beep()
        # never block the frame loop on the network
        self._webhooks.submit(
            send_game_over_webhook,
            payload["score"],
            payload["high_score"],
            payload["length"],
            payload["new_high_score"],
        )

    def handle_key(self, key: int) -> None:
        direction = direction_for_key(key)
        if direction is not None:
            self.engine.change_direction(direction)
            return

        command = command_for_key(key)
        if command == QUIT:
            self.running = False
        elif command == START:
            self.engine.start()
        elif command == TOGGLE_PAUSE:
            if self.engine.status == PLAYING:
                self.engine.pause()
            elif self.engine.status in (IDLE, PAUSED):
                self.engine.start()
        elif command == RESET:
            self.engine.reset()
        elif command == TOGGLE_SOUND:
            self.sound_on = not self.sound_on

    def ui_frame(self, now_ms: float) -> None:
        """Drain pending keys, redraw, and re-arm for the next frame."""
        while True:
            key = self.stdscr.getch()
            if key == -1:
                break
            self.handle_key(key)

        self.view.draw(self.latest, self.sound_on)

        if self.running:
            self.scheduler.request_frame(self.ui_frame)

    def run(self) -> None:
        self.view.setup()
        self.scheduler.request_frame(self.ui_frame)
        try:
            self.scheduler.run(lambda: self.running, fps=self.fps)
        finally:
            self._webhooks.shutdown(wait=False)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)

    # curses owns the terminal, so logs go to a file
    logging.basicConfig(
        filename=args.log_file,
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    scheduler = FrameScheduler()
    try:
        engine = build_engine(args, scheduler)
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    def _play(stdscr):
        TerminalGame(
            stdscr,
            engine,
            scheduler,
            sound_on=not args.no_sound,
            fps=args.fps,
        ).run()

    curses.wrapper(_play)
    print(f"Best score: {engine.high_score}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
