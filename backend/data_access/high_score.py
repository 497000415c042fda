"""
High score persistence.

These functions delegate to the KeyValueRepository for actual database
operations. Stored values are parsed permissively: anything missing or
unparseable reads back as 0.
"""

import logging
from typing import Optional, Protocol, runtime_checkable

from domain.constants import HIGH_SCORE_KEY
from .repositories import KeyValueRepository

logger = logging.getLogger(__name__)


def _get_repo(repo: Optional[KeyValueRepository]) -> KeyValueRepository:
    # A fresh repository re-resolves SNAKE_DB_PATH and ensures the schema there
    return repo if repo is not None else KeyValueRepository()


def parse_high_score(raw: Optional[str]) -> int:
    """
    Convert a stored value to a high score.

    Returns:
        The integer value, or 0 if the value is missing, unparseable or negative
    """
    if raw is None:
        return 0
    try:
        value = int(str(raw).strip())
    except ValueError:
        logger.warning(f"Ignoring unparseable high score {raw!r}")
        return 0
    if value < 0:
        logger.warning(f"Ignoring negative high score {value}")
        return 0
    return value


def load_high_score(key: str = HIGH_SCORE_KEY, repo: Optional[KeyValueRepository] = None) -> int:
    """
    Read the persisted high score.

    Args:
        key: Namespace key the score is stored under
        repo: Optional repository override

    Returns:
        The stored high score, or 0 if absent or malformed
    """
    return parse_high_score(_get_repo(repo).get(key))


def save_high_score(
    score: int,
    key: str = HIGH_SCORE_KEY,
    repo: Optional[KeyValueRepository] = None
) -> bool:
    """
    Persist `score` if it beats the stored high score.

    Args:
        score: Final score of a completed game
        key: Namespace key the score is stored under
        repo: Optional repository override

    Returns:
        True if the stored value was replaced
    """
    kv = _get_repo(repo)
    current = parse_high_score(kv.get(key))
    if score <= current:
        return False
    kv.set(key, str(int(score)))
    logger.info(f"New high score {score} stored under {key!r} (was {current})")
    return True


def clear_high_score(key: str = HIGH_SCORE_KEY, repo: Optional[KeyValueRepository] = None) -> bool:
    """
    Delete the stored high score.

    Returns:
        True if a value was removed
    """
    return _get_repo(repo).delete(key)


@runtime_checkable
class HighScoreStore(Protocol):
    """Anything the engine can load a high score from and save one to."""

    def load(self) -> int:
        ...

    def save(self, score: int) -> None:
        ...


class SqliteHighScoreStore:
    """High score store backed by the kv_store table."""

    def __init__(self, key: str = HIGH_SCORE_KEY, repo: Optional[KeyValueRepository] = None):
        self.key = key
        self._repo = repo

    def load(self) -> int:
        return load_high_score(self.key, repo=self._repo)

    def save(self, score: int) -> None:
        save_high_score(score, self.key, repo=self._repo)


class MemoryHighScoreStore:
    """In-process store, for tests and --no-persist play."""

    def __init__(self, initial: int = 0):
        self.value = initial
        self.saves = []

    def load(self) -> int:
        return self.value

    def save(self, score: int) -> None:
        self.saves.append(score)
        if score > self.value:
            self.value = score
