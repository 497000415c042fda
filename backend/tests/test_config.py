"""
Tests for config.py - defaults, environment overrides and validation.
"""

import sys
import os

import pytest

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from config import GameConfig, default_snake_for
from domain.constants import GRID_COUNT, INITIAL_SNAKE, INITIAL_SPEED, HIGH_SCORE_KEY

ENV_VARS = [
    "SNAKE_GRID_COUNT",
    "SNAKE_INITIAL_SPEED",
    "SNAKE_MIN_SPEED",
    "SNAKE_SPEED_DECREMENT",
    "SNAKE_HIGH_SCORE_KEY",
]


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    # an empty .env so a developer's file never leaks into the tests
    env_file = tmp_path / ".env"
    env_file.write_text("")
    return str(env_file)


def test_defaults(clean_env):
    config = GameConfig.from_env(clean_env)
    assert config.grid_count == GRID_COUNT
    assert config.initial_speed == INITIAL_SPEED
    assert config.initial_snake == INITIAL_SNAKE
    assert config.high_score_key == HIGH_SCORE_KEY


def test_env_overrides(clean_env, monkeypatch):
    monkeypatch.setenv("SNAKE_GRID_COUNT", "30")
    monkeypatch.setenv("SNAKE_INITIAL_SPEED", "200")
    monkeypatch.setenv("SNAKE_HIGH_SCORE_KEY", "custom_key")

    config = GameConfig.from_env(clean_env)

    assert config.grid_count == 30
    assert config.initial_speed == 200
    assert config.initial_snake == ((15, 15), (15, 16), (15, 17))
    assert config.high_score_key == "custom_key"


def test_env_file_is_read(clean_env, tmp_path):
    env_file = tmp_path / "game.env"
    env_file.write_text("SNAKE_MIN_SPEED=60\n")

    try:
        config = GameConfig.from_env(str(env_file))
        assert config.min_speed == 60
    finally:
        # load_dotenv writes straight into os.environ
        os.environ.pop("SNAKE_MIN_SPEED", None)


def test_unparseable_value_falls_back(clean_env, monkeypatch, caplog):
    monkeypatch.setenv("SNAKE_INITIAL_SPEED", "fast")
    config = GameConfig.from_env(clean_env)
    assert config.initial_speed == INITIAL_SPEED
    assert "SNAKE_INITIAL_SPEED" in caplog.text


@pytest.mark.parametrize("overrides", [
    {"grid_count": 0},
    {"initial_speed": 40, "min_speed": 50},
    {"speed_decrement": 0},
    {"initial_direction": "NORTH"},
    {"initial_snake": ()},
    {"initial_snake": ((0, 0), (0, 0))},
    {"grid_count": 5},  # default snake sits outside a 5x5 board
    {"grid_count": 2, "initial_snake": ((0, 0), (0, 1), (1, 1), (1, 0))},
])
def test_validate_rejects_unplayable_configs(overrides):
    with pytest.raises(ValueError):
        GameConfig(**overrides).validate()


def test_default_snake_for_small_grids():
    assert default_snake_for(GRID_COUNT) == INITIAL_SNAKE
    assert default_snake_for(10) == ((5, 5), (5, 6), (5, 7))
    assert default_snake_for(2) == ((1, 1),)
