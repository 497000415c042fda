"""
Tests for engine.py - lifecycle, tick resolution, scoring and frame gating.
"""

import random
import sys
import os
from unittest.mock import Mock

import pytest

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import GameConfig
from data_access.high_score import MemoryHighScoreStore
from domain.constants import (
    UP, DOWN, LEFT, RIGHT, VALID_MOVES, OPPOSITE_DIRECTIONS,
    IDLE, PLAYING, PAUSED, GAME_OVER,
    INITIAL_SNAKE, INITIAL_SPEED, MIN_SPEED, SPEED_DECREMENT,
)
from engine import GameEngine
from services.frame_scheduler import FrameScheduler


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def make_engine(high_score: int = 0, seed: int = 1, **config_overrides):
    clock = FakeClock()
    scheduler = FrameScheduler(clock=clock)
    store = MemoryHighScoreStore(initial=high_score)
    engine = GameEngine(
        config=GameConfig(**config_overrides),
        high_score_store=store,
        scheduler=scheduler,
        rng=random.Random(seed),
    )
    return engine, store, scheduler, clock


def play_until_over(engine, limit: int = 100):
    for _ in range(limit):
        if engine.status != PLAYING:
            return
        engine.tick()
    raise AssertionError("game did not end")


class TestInitialState:
    """Tests for a freshly constructed engine."""

    def test_starts_idle_with_defaults(self):
        engine, _, _, _ = make_engine()
        state = engine.state
        assert state.status == IDLE
        assert state.score == 0
        assert state.speed == INITIAL_SPEED
        assert engine.snake == INITIAL_SNAKE
        assert engine.direction == UP

    def test_food_never_on_snake(self):
        for seed in range(25):
            engine, _, _, _ = make_engine(seed=seed)
            assert engine.food not in engine.snake

    def test_reads_persisted_high_score(self):
        engine, _, _, _ = make_engine(high_score=120)
        assert engine.state.high_score == 120

    def test_tick_ignored_while_idle(self):
        engine, _, _, _ = make_engine()
        before = engine.snapshot()
        after = engine.tick()
        assert after.snake == before.snake
        assert engine.status == IDLE

    def test_invalid_config_rejected(self):
        with pytest.raises(ValueError):
            make_engine(min_speed=200)


class TestTickScenarios:
    """Scenario tests for a single tick."""

    def test_eating_food_grows_scores_and_speeds_up(self):
        engine, _, _, _ = make_engine()
        engine.load_snake([(10, 10), (10, 11), (10, 12)], UP)
        engine.place_food((10, 9))
        engine.start()

        snapshot = engine.tick()

        assert snapshot.head == (10, 9)
        assert snapshot.state.score == 10
        assert len(snapshot.snake) == 4
        assert snapshot.state.speed == INITIAL_SPEED - SPEED_DECREMENT
        assert snapshot.food not in snapshot.snake
        assert snapshot.state.status == PLAYING

    def test_right_wall_is_fatal(self):
        engine, store, _, _ = make_engine()
        engine.load_snake([(19, 5), (18, 5), (17, 5)], RIGHT)
        engine.place_food((0, 0))
        engine.start()

        snapshot = engine.tick()

        assert snapshot.state.status == GAME_OVER
        assert engine.death_reason == "wall"
        # score 0 does not beat the stored 0
        assert store.saves == []
        assert snapshot.state.high_score == 0
        # snake is frozen where it was
        assert snapshot.snake == ((19, 5), (18, 5), (17, 5))

    def test_plain_move_keeps_length(self):
        engine, _, _, _ = make_engine()
        engine.load_snake([(5, 5), (5, 6), (5, 7), (5, 8)], UP)
        engine.place_food((0, 0))
        engine.start()

        snapshot = engine.tick()

        assert snapshot.snake == ((5, 4), (5, 5), (5, 6), (5, 7))
        assert snapshot.state.score == 0
        assert snapshot.state.speed == INITIAL_SPEED

    def test_moving_into_vacating_tail_is_allowed(self):
        engine, _, _, _ = make_engine()
        # head (5,5) came from (6,5) so it is heading LEFT; tail is (5,6)
        engine.load_snake([(5, 5), (6, 5), (6, 6), (5, 6)], LEFT)
        engine.place_food((0, 0))
        engine.start()
        engine.change_direction(DOWN)

        snapshot = engine.tick()

        assert snapshot.state.status == PLAYING
        assert snapshot.snake == ((5, 6), (5, 5), (6, 5), (6, 6))

    def test_running_into_body_is_fatal(self):
        engine, _, _, _ = make_engine()
        engine.load_snake([(5, 5), (5, 6), (6, 6), (6, 5), (6, 4)], UP)
        engine.place_food((0, 0))
        engine.start()
        engine.change_direction(RIGHT)

        engine.tick()

        assert engine.status == GAME_OVER
        assert engine.death_reason == "self"
        assert len(engine.snake) == 5

    def test_filling_the_board_ends_the_game(self):
        engine, store, _, _ = make_engine(
            grid_count=2,
            initial_snake=((0, 0), (0, 1), (1, 1)),
            initial_direction=UP,
        )
        assert engine.food == (1, 0)
        engine.start()
        engine.change_direction(RIGHT)

        engine.tick()

        assert engine.status == GAME_OVER
        assert engine.death_reason == "board_full"
        assert engine.score == 10
        assert store.value == 10
        assert len(engine.snake) == 4


class TestDirectionBuffering:
    """Tests for change_direction."""

    def test_reversal_is_silently_dropped(self):
        engine, _, _, _ = make_engine()
        assert engine.change_direction(DOWN) is False
        engine.place_food((0, 0))
        engine.start()
        engine.tick()
        assert engine.direction == UP

    def test_double_press_cannot_reverse_into_body(self):
        engine, _, _, _ = make_engine()
        engine.place_food((0, 0))
        engine.start()
        assert engine.change_direction(LEFT) is True
        # DOWN is the opposite of the committed UP even though LEFT is buffered
        assert engine.change_direction(DOWN) is False

        engine.tick()

        assert engine.direction == LEFT
        assert engine.status == PLAYING

    def test_last_valid_request_wins(self):
        engine, _, _, _ = make_engine()
        engine.place_food((0, 0))
        engine.start()
        engine.change_direction(LEFT)
        engine.change_direction(RIGHT)

        engine.tick()

        assert engine.direction == RIGHT
        assert engine.snake[0] == (11, 10)

    def test_unknown_direction_raises(self):
        engine, _, _, _ = make_engine()
        with pytest.raises(ValueError):
            engine.change_direction("SIDEWAYS")


class TestLifecycle:
    """Tests for the state machine."""

    def test_start_pause_resume(self):
        engine, _, _, _ = make_engine()
        engine.start()
        assert engine.status == PLAYING
        engine.pause()
        assert engine.status == PAUSED
        engine.start()
        assert engine.status == PLAYING

    def test_pause_ignored_unless_playing(self):
        engine, _, _, _ = make_engine()
        engine.pause()
        assert engine.status == IDLE

    def test_tick_ignored_while_paused(self):
        engine, _, _, _ = make_engine()
        engine.start()
        engine.pause()
        before = engine.snake
        engine.tick()
        assert engine.snake == before

    def test_reset_from_game_over(self):
        engine, _, _, _ = make_engine()
        engine.load_snake([(10, 10), (10, 11), (10, 12)], UP)
        engine.place_food((10, 9))
        engine.start()
        engine.tick()
        engine.place_food((0, 19))
        play_until_over(engine)
        assert engine.status == GAME_OVER

        engine.reset()

        state = engine.state
        assert state.status == IDLE
        assert state.score == 0
        assert state.speed == INITIAL_SPEED
        assert state.high_score == 10
        assert engine.snake == INITIAL_SNAKE
        assert engine.direction == UP
        assert engine.death_reason is None

    def test_start_from_game_over_restarts(self):
        engine, _, _, _ = make_engine()
        engine.start()
        play_until_over(engine)

        engine.start()

        assert engine.status == PLAYING
        assert engine.score == 0
        assert engine.snake == INITIAL_SNAKE

    def test_reset_from_any_state(self):
        for prepare in (lambda e: None, lambda e: e.start(), lambda e: (e.start(), e.pause())):
            engine, _, scheduler, _ = make_engine()
            prepare(engine)
            engine.reset()
            assert engine.status == IDLE
            assert scheduler.pending == 0


class TestHighScore:
    """Tests for high score persistence through the engine."""

    def eat_then_die(self, engine, foods: int):
        engine.start()
        engine.load_snake([(10, 10), (10, 11), (10, 12)], UP)
        for i in range(foods):
            engine.place_food((10, 9 - i))
            engine.tick()
        engine.place_food((0, 19))
        play_until_over(engine)

    def test_high_score_tracks_maximum_across_games(self):
        engine, store, _, _ = make_engine(high_score=15)

        self.eat_then_die(engine, foods=2)
        assert engine.state.high_score == 20
        assert store.value == 20

        self.eat_then_die(engine, foods=1)
        assert engine.state.high_score == 20
        assert store.saves == [20]

    def test_lower_score_never_persisted(self):
        engine, store, _, _ = make_engine(high_score=100)
        self.eat_then_die(engine, foods=3)
        assert engine.state.high_score == 100
        assert store.saves == []

    def test_store_loaded_once_at_construction(self):
        store = Mock()
        store.load.return_value = 7
        engine = GameEngine(
            high_score_store=store,
            scheduler=FrameScheduler(clock=FakeClock()),
            rng=random.Random(0),
        )
        engine.reset()
        engine.start()
        store.load.assert_called_once_with()
        assert engine.high_score == 7

    def test_failed_save_still_ends_game(self, caplog):
        store = Mock()
        store.load.return_value = 0
        store.save.side_effect = OSError("disk gone")
        engine = GameEngine(
            high_score_store=store,
            scheduler=FrameScheduler(clock=FakeClock()),
            rng=random.Random(0),
        )
        published = []
        engine.subscribe(published.append)
        engine.start()
        engine.load_snake([(18, 5), (17, 5)], RIGHT)
        engine.place_food((19, 5))
        engine.tick()
        assert engine.score == 10

        engine.tick()

        assert engine.status == GAME_OVER
        assert published[-1].state.status == GAME_OVER
        assert published[-1].state.high_score == 10
        assert engine.high_score == 10
        store.save.assert_called_once_with(10)
        assert "Failed to save high score" in caplog.text
        assert engine.scheduler.pending == 0

    def test_final_board_logged_at_debug(self, caplog):
        engine, _, _, _ = make_engine()
        engine.start()
        engine.load_snake([(19, 5), (18, 5)], RIGHT)
        with caplog.at_level("DEBUG", logger="engine"):
            engine.tick()
        assert "Final board:" in caplog.text


class TestSpeedCurve:
    """Tests for the speed floor and monotonicity."""

    def test_speed_floors_at_minimum(self):
        engine, _, _, _ = make_engine(initial_speed=MIN_SPEED + 4)
        engine.load_snake([(10, 10), (10, 11), (10, 12)], UP)
        engine.start()

        speeds = []
        for i in range(4):
            engine.place_food((10, 9 - i))
            engine.tick()
            speeds.append(engine.speed)

        assert speeds == [MIN_SPEED + 2, MIN_SPEED, MIN_SPEED, MIN_SPEED]

    def test_speed_resets_on_new_game(self):
        engine, _, _, _ = make_engine()
        engine.load_snake([(10, 10), (10, 11), (10, 12)], UP)
        engine.place_food((10, 9))
        engine.start()
        engine.tick()
        assert engine.speed < INITIAL_SPEED

        engine.reset()
        assert engine.speed == INITIAL_SPEED


class TestFrameGating:
    """Tests for the elapsed-time gate driven by the frame scheduler."""

    def test_tick_fires_only_after_speed_elapsed(self):
        engine, _, scheduler, clock = make_engine()
        engine.place_food((0, 0))
        clock.now = 1000
        engine.start()

        scheduler.run_pending(1100)
        assert engine.tick_count == 0

        scheduler.run_pending(1000 + INITIAL_SPEED)
        assert engine.tick_count == 1

    def test_stall_causes_single_tick(self):
        engine, _, scheduler, clock = make_engine()
        engine.place_food((0, 0))
        engine.start()

        scheduler.run_pending(INITIAL_SPEED * 5)

        assert engine.tick_count == 1
        assert scheduler.pending == 1

    def test_pause_stops_frames_and_resume_skips_catch_up(self):
        engine, _, scheduler, clock = make_engine()
        engine.place_food((0, 0))
        engine.start()
        engine.pause()

        assert scheduler.pending == 0
        scheduler.run_pending(10_000)
        assert engine.tick_count == 0

        clock.now = 10_000
        engine.start()
        scheduler.run_pending(10_010)
        assert engine.tick_count == 0

        scheduler.run_pending(10_000 + INITIAL_SPEED)
        assert engine.tick_count == 1

    def test_game_over_cancels_frames(self):
        engine, _, scheduler, clock = make_engine()
        engine.load_snake([(19, 5), (18, 5), (17, 5)], RIGHT)
        engine.place_food((0, 0))
        engine.start()

        scheduler.run_pending(INITIAL_SPEED)

        assert engine.status == GAME_OVER
        assert scheduler.pending == 0

    def test_stale_frame_after_pause_does_nothing(self):
        engine, _, _, _ = make_engine()
        engine.start()
        engine.pause()
        engine.on_frame(INITIAL_SPEED * 10)
        assert engine.tick_count == 0


class TestSnapshots:
    """Tests for snapshot publishing."""

    def test_listener_receives_transitions_and_ticks(self):
        engine, _, _, _ = make_engine()
        seen = []
        engine.subscribe(seen.append)
        engine.place_food((0, 0))
        engine.start()
        engine.tick()
        engine.pause()

        statuses = [s.state.status for s in seen]
        assert statuses == [IDLE, PLAYING, PLAYING, PAUSED]
        assert seen[2].tick == 1

    def test_unsubscribe(self):
        engine, _, _, _ = make_engine()
        seen = []
        unsubscribe = engine.subscribe(seen.append)
        unsubscribe()
        engine.start()
        assert seen == []

    def test_failing_listener_does_not_break_tick(self):
        engine, _, _, _ = make_engine()
        engine.subscribe(Mock(side_effect=RuntimeError("boom")))
        seen = []
        engine.subscribe(seen.append)
        engine.place_food((0, 0))
        engine.start()
        engine.tick()
        assert engine.tick_count == 1
        assert len(seen) == 3

    def test_snapshot_is_detached_from_live_state(self):
        engine, _, _, _ = make_engine()
        engine.place_food((0, 0))
        before = engine.snapshot()
        engine.start()
        engine.tick()
        assert before.snake == INITIAL_SNAKE
        assert before.state.status == IDLE

    def test_place_food_validation(self):
        engine, _, _, _ = make_engine()
        with pytest.raises(ValueError):
            engine.place_food((20, 0))
        with pytest.raises(ValueError):
            engine.place_food(INITIAL_SNAKE[1])

    def test_load_snake_validation(self):
        engine, _, _, _ = make_engine()
        with pytest.raises(ValueError):
            engine.load_snake([], UP)
        with pytest.raises(ValueError):
            engine.load_snake([(1, 1), (1, 1)], UP)
        with pytest.raises(ValueError):
            engine.load_snake([(-1, 0)], UP)

    def test_load_snake_moves_covered_food(self):
        engine, _, _, _ = make_engine()
        engine.place_food((3, 3))
        engine.load_snake([(3, 3), (3, 4)], UP)
        assert engine.food not in engine.snake


class TestInvariants:
    """Randomised play checking the per-tick invariants."""

    @pytest.mark.parametrize("seed", [3, 11, 42])
    def test_random_play_invariants(self, seed):
        rng = random.Random(seed)
        engine, _, _, _ = make_engine(seed=seed, grid_count=8,
                                      initial_snake=((4, 4), (4, 5), (4, 6)))
        engine.start()
        best = 0
        prev_speed = engine.speed

        for _ in range(2000):
            if engine.status == GAME_OVER:
                best = max(best, engine.score)
                assert engine.high_score == best
                engine.start()
                prev_speed = engine.speed

            requested = rng.choice(sorted(VALID_MOVES))
            committed = engine.direction
            engine.change_direction(requested)

            before_len = len(engine.snake)
            before_food = engine.food
            snapshot = engine.tick()

            # a committed heading never reverses the previous one
            assert snapshot.direction != OPPOSITE_DIRECTIONS[committed]

            if snapshot.state.status == GAME_OVER:
                continue

            ate = snapshot.head == before_food
            assert len(snapshot.snake) == before_len + (1 if ate else 0)
            assert len(set(snapshot.snake)) == len(snapshot.snake)
            assert snapshot.food not in snapshot.snake
            assert snapshot.state.speed <= prev_speed
            assert snapshot.state.speed >= MIN_SPEED
            prev_speed = snapshot.state.speed
