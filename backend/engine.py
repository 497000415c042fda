"""
Neon Snake game engine.

GameEngine owns the authoritative mutable game store (snake, food,
headings, score, speed) and publishes an immutable Snapshot after every
tick and lifecycle transition. Renderers and other collaborators only ever
see snapshots.
"""

import logging
import random
from typing import Callable, Iterable, List, Optional, Tuple

from config import GameConfig
from data_access.high_score import HighScoreStore, SqliteHighScoreStore
from domain.collision import collision_body, is_out_of_bounds, is_self_collision
from domain.constants import (
    IDLE, PLAYING, PAUSED, GAME_OVER, VALID_MOVES,
)
from domain.game_state import GameState, Snapshot
from domain.grid import Grid, GridFullError
from domain.snake import Snake
from services.frame_scheduler import FrameScheduler

logger = logging.getLogger(__name__)

Coordinate = Tuple[int, int]
SnapshotListener = Callable[[Snapshot], None]


class GameEngine:
    """
    Manages:
      - Grid
      - Snake and its buffered heading
      - Food
      - Score, speed and high score
      - Lifecycle status (IDLE -> PLAYING <-> PAUSED, PLAYING -> GAME_OVER)
      - The frame callback that drives ticks
    """

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        high_score_store: Optional[HighScoreStore] = None,
        scheduler: Optional[FrameScheduler] = None,
        rng: Optional[random.Random] = None,
    ):
        self.config = config or GameConfig()
        self.config.validate()

        self.grid = Grid(self.config.grid_count)
        self.scheduler = scheduler or FrameScheduler()
        self.rng = rng or random.Random()
        self.high_score_store = high_score_store or SqliteHighScoreStore(self.config.high_score_key)

        self._listeners: List[SnapshotListener] = []
        self._frame_handle: Optional[int] = None
        self._last_tick_time = 0.0

        self.high_score = self.high_score_store.load()
        self.status = IDLE
        self._reset_state()

        logger.info(
            f"Engine ready: {self.grid.grid_count}x{self.grid.grid_count} grid, "
            f"high score {self.high_score}"
        )

    # -------------------------------------------------------------------------
    # Read-only views
    # -------------------------------------------------------------------------

    @property
    def snake(self) -> Tuple[Coordinate, ...]:
        return tuple(self._snake.positions)

    @property
    def food(self) -> Coordinate:
        return self._food

    @property
    def direction(self) -> str:
        return self._snake.direction

    @property
    def death_reason(self) -> Optional[str]:
        return self._snake.death_reason

    @property
    def state(self) -> GameState:
        return GameState(
            score=self.score,
            high_score=self.high_score,
            status=self.status,
            speed=self.speed,
        )

    def snapshot(self) -> Snapshot:
        """Return an immutable view of the current game."""
        return Snapshot(
            snake=self.snake,
            food=self._food,
            state=self.state,
            direction=self._snake.direction,
            grid_count=self.grid.grid_count,
            tick=self.tick_count,
        )

    def subscribe(self, listener: SnapshotListener) -> Callable[[], None]:
        """
        Register `listener` to receive every published snapshot.

        Returns:
            A callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------

    def start(self) -> None:
        """
        Start from IDLE, resume from PAUSED, or restart from GAME_OVER.

        The tick timer reference is set to "now" so time spent idle or
        paused is never charged as a catch-up tick.
        """
        if self.status == PLAYING:
            logger.debug("start() ignored: already playing")
            return

        if self.status == GAME_OVER:
            logger.info("Restarting after game over")
            self._reset_state()

        previous = self.status
        self.status = PLAYING
        self._last_tick_time = self.scheduler.now()
        self._arm_frame()
        logger.info(f"{previous} -> {PLAYING}")
        self._publish()

    def pause(self) -> None:
        if self.status != PLAYING:
            logger.debug(f"pause() ignored in {self.status}")
            return

        self.status = PAUSED
        self._cancel_frame()
        logger.info(f"{PLAYING} -> {PAUSED} at score {self.score}")
        self._publish()

    def reset(self) -> None:
        """Reinitialize the game and return to IDLE from any state."""
        previous = self.status
        self._cancel_frame()
        self._reset_state()
        self.status = IDLE
        logger.info(f"{previous} -> {IDLE} (reset)")
        self._publish()

    def change_direction(self, requested: str) -> bool:
        """
        Buffer `requested` as the heading for the next tick.

        A request that reverses the committed heading is dropped silently;
        only the last accepted request before a tick is applied.

        Returns:
            True if the request was buffered

        Raises:
            ValueError: If `requested` is not a known direction
        """
        if requested not in VALID_MOVES:
            raise ValueError(f"Unknown direction: {requested!r}")

        accepted = self._snake.buffer_direction(requested)
        if not accepted:
            logger.debug(f"Rejected reversal {requested} while heading {self._snake.direction}")
        return accepted

    # -------------------------------------------------------------------------
    # Simulation
    # -------------------------------------------------------------------------

    def on_frame(self, now_ms: float) -> None:
        """
        Frame callback: run at most one tick once `speed` ms have elapsed.

        A slow frame yields a single tick, never a catch-up burst.
        """
        self._frame_handle = None

        if self.status != PLAYING:
            return

        if now_ms - self._last_tick_time < self.speed:
            self._arm_frame()
            return

        self._last_tick_time = now_ms
        self.tick()

        if self.status == PLAYING:
            self._arm_frame()

    def tick(self) -> Snapshot:
        """
        Execute one move-and-resolve step:
          1) Commit the buffered heading
          2) Compute the new head
          3) Wall check
          4) Self check against the body that stays put this step
          5) Prepend the new head
          6) On food: score, speed up, relocate food, keep the tail
          7) Otherwise drop the tail
          8) Publish the snapshot
        """
        if self.status != PLAYING:
            logger.debug(f"tick() ignored in {self.status}")
            return self.snapshot()

        self._snake.commit_direction()
        new_head = self._snake.next_head()

        if is_out_of_bounds(new_head, self.grid.grid_count):
            self._game_over("wall", new_head)
            return self.snapshot()

        will_eat = new_head == self._food
        if is_self_collision(collision_body(self._snake.positions, will_eat), new_head):
            self._game_over("self", new_head)
            return self.snapshot()

        self._snake.advance(new_head, grow=will_eat)
        self.tick_count += 1

        if will_eat:
            self.score += self.config.score_per_food
            self.speed = max(self.config.min_speed, self.speed - self.config.speed_decrement)
            try:
                self._food = self.grid.sample_free_cell(self._snake.positions, self.rng)
            except GridFullError:
                self._game_over("board_full", new_head)
                return self.snapshot()
            logger.debug(
                f"Ate food at {new_head}: score={self.score}, speed={self.speed}, "
                f"next food {self._food}"
            )

        self._publish()
        return self.snapshot()

    # -------------------------------------------------------------------------
    # Deterministic setup (tests, replays)
    # -------------------------------------------------------------------------

    def place_food(self, cell: Coordinate) -> None:
        """Force the food onto `cell`, which must be in bounds and off the snake."""
        cell = tuple(cell)
        if not self.grid.in_bounds(cell):
            raise ValueError(f"Food out of bounds at {cell}.")
        if cell in self._snake.positions:
            raise ValueError(f"Food cannot be placed on the snake at {cell}.")
        self._food = cell
        self._publish()

    def load_snake(self, body: Iterable[Coordinate], direction: str) -> None:
        """
        Replace the snake with `body` (head first) heading `direction`.

        The food is moved if the new body covers it.
        """
        body = [tuple(c) for c in body]
        if not body:
            raise ValueError("Snake body must not be empty.")
        for cell in body:
            if not self.grid.in_bounds(cell):
                raise ValueError(f"Snake cell out of bounds at {cell}.")
        if len(set(body)) != len(body):
            raise ValueError("Snake body contains duplicate cells.")

        self._snake = Snake(body, direction)
        if self._food in self._snake.positions:
            self._food = self.grid.sample_free_cell(self._snake.positions, self.rng)
        self._publish()

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _reset_state(self) -> None:
        self._snake = Snake(self.config.initial_snake, self.config.initial_direction)
        self._food = self.grid.sample_free_cell(self._snake.positions, self.rng)
        self.score = 0
        self.speed = self.config.initial_speed
        self.tick_count = 0

    def _game_over(self, reason: str, new_head: Coordinate) -> None:
        self._snake.kill(reason)
        self.status = GAME_OVER
        self._cancel_frame()

        if self.score > self.high_score:
            self.high_score = self.score
            try:
                self.high_score_store.save(self.score)
            except Exception as e:
                # Don't raise - the game must still end even if persistence fails
                logger.error(f"Failed to save high score {self.score}: {e}")

        logger.info(
            f"Game over ({reason}) moving to {new_head}: score {self.score}, "
            f"length {len(self._snake)}, high score {self.high_score}"
        )
        logger.debug(f"Final board:\n{self.snapshot().print_board()}")
        self._publish()

    def _arm_frame(self) -> None:
        self._cancel_frame()
        self._frame_handle = self.scheduler.request_frame(self.on_frame)

    def _cancel_frame(self) -> None:
        if self._frame_handle is not None:
            self.scheduler.cancel_frame(self._frame_handle)
            self._frame_handle = None

    def _publish(self) -> None:
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception as e:
                logger.error(f"Snapshot listener {listener!r} failed: {e}")

    def __repr__(self):
        return (
            f"<GameEngine status={self.status}, score={self.score}, "
            f"speed={self.speed}, length={len(self._snake)}>"
        )
