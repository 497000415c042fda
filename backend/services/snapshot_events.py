"""
Snapshot event detection.

The engine publishes snapshots, not events. Collaborators that react to
things happening (sounds, haptics, particle bursts, webhooks) feed each
snapshot to a SnapshotEventDetector, which diffs it against the previous
one and dispatches named events to registered handlers.
"""

import logging
from collections import defaultdict
from typing import Any, Callable, Dict, List, Optional, Tuple

from domain.constants import GAME_OVER
from domain.game_state import Snapshot

logger = logging.getLogger(__name__)

FOOD_EATEN = "food_eaten"
GAME_OVER_EVENT = "game_over"
NEW_HIGH_SCORE = "new_high_score"
STATUS_CHANGED = "status_changed"
EVENT_NAMES = {FOOD_EATEN, GAME_OVER_EVENT, NEW_HIGH_SCORE, STATUS_CHANGED}

EventHandler = Callable[[Dict[str, Any]], None]


def diff_snapshots(previous: Optional[Snapshot], current: Snapshot) -> List[Tuple[str, Dict[str, Any]]]:
    """
    Work out which events happened between two consecutive snapshots.

    Returns:
        List of (event_name, payload) in dispatch order
    """
    if previous is None:
        return []

    events = []
    prev_state, state = previous.state, current.state

    if state.status != prev_state.status:
        events.append((STATUS_CHANGED, {"from": prev_state.status, "to": state.status}))

    # a reset drops the score back to 0, which is not an event
    if state.score > prev_state.score:
        events.append((FOOD_EATEN, {
            "cell": previous.food,
            "score": state.score,
            "length": len(current.snake),
        }))

    if state.high_score > prev_state.high_score:
        events.append((NEW_HIGH_SCORE, {
            "previous": prev_state.high_score,
            "high_score": state.high_score,
        }))

    if state.status == GAME_OVER and prev_state.status != GAME_OVER:
        events.append((GAME_OVER_EVENT, {
            "score": state.score,
            "high_score": state.high_score,
            "length": len(current.snake),
            "new_high_score": state.high_score > prev_state.high_score,
        }))

    return events


class SnapshotEventDetector:
    """
    Stateful diffing listener; subscribe it to an engine with
    engine.subscribe(detector).
    """

    def __init__(self, initial: Optional[Snapshot] = None):
        self._previous = initial
        self._handlers: Dict[str, List[EventHandler]] = defaultdict(list)

    def on(self, event_name: str, handler: EventHandler) -> None:
        """Register `handler` for `event_name`."""
        if event_name not in EVENT_NAMES:
            raise ValueError(f"Unknown event '{event_name}'. Known events: {sorted(EVENT_NAMES)}")
        self._handlers[event_name].append(handler)

    def __call__(self, snapshot: Snapshot) -> List[str]:
        return self.feed(snapshot)

    def feed(self, snapshot: Snapshot) -> List[str]:
        """
        Diff `snapshot` against the last one seen and dispatch events.

        Returns:
            Names of the events dispatched
        """
        events = diff_snapshots(self._previous, snapshot)
        self._previous = snapshot

        for name, payload in events:
            for handler in self._handlers.get(name, []):
                try:
                    handler(payload)
                except Exception as e:
                    logger.error(f"Handler for '{name}' failed: {e}")

        return [name for name, _ in events]
