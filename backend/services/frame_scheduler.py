"""
Cooperative frame scheduler.

A single-threaded stand-in for a display-refresh callback: callers arm a
callback with request_frame(), and the next run_pending() fires it with the
current time in milliseconds. Callbacks that want another frame must re-arm
themselves, so cancelling a handle stops the chain.
"""

import itertools
import logging
import time
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)

FrameCallback = Callable[[float], None]


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class FrameScheduler:
    """
    Holds armed frame callbacks and fires them once per frame.

    Args:
        clock: Zero-argument callable returning the current time in ms
    """

    def __init__(self, clock: Callable[[], float] = monotonic_ms):
        self.clock = clock
        self._callbacks: Dict[int, FrameCallback] = {}
        self._ids = itertools.count(1)

    def now(self) -> float:
        return self.clock()

    @property
    def pending(self) -> int:
        return len(self._callbacks)

    def request_frame(self, callback: FrameCallback) -> int:
        """Arm `callback` for the next frame and return its handle."""
        handle = next(self._ids)
        self._callbacks[handle] = callback
        return handle

    def cancel_frame(self, handle: Optional[int]) -> None:
        """Disarm a callback. Unknown or None handles are ignored."""
        if handle is None:
            return
        self._callbacks.pop(handle, None)

    def run_pending(self, now_ms: Optional[float] = None) -> int:
        """
        Fire every callback armed before this call.

        Callbacks armed while firing wait for the next frame.

        Args:
            now_ms: Frame timestamp; defaults to the scheduler clock

        Returns:
            Number of callbacks fired
        """
        if now_ms is None:
            now_ms = self.clock()

        fired = 0
        for handle in list(self._callbacks):
            callback = self._callbacks.pop(handle, None)
            if callback is None:
                # cancelled by an earlier callback in this frame
                continue
            callback(now_ms)
            fired += 1

        return fired

    def run(self, should_continue: Callable[[], bool], fps: int = 60) -> None:
        """
        Block, firing frames at roughly `fps` until should_continue() is False.
        """
        frame_ms = 1000.0 / fps
        logger.debug(f"Frame loop starting at {fps} fps")

        while should_continue():
            started = self.clock()
            self.run_pending(started)
            elapsed = self.clock() - started
            if elapsed < frame_ms:
                time.sleep((frame_ms - elapsed) / 1000.0)

        logger.debug("Frame loop stopped")
