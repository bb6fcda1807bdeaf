"""Per-canvas layout scheduling: reentrancy guard plus a minimum-interval throttle."""

import time
import logging
from dataclasses import dataclass
from typing import Callable, Dict, Optional, Any

from canvas_mindmap.config import THROTTLE_INTERVAL_MS

logger = logging.getLogger(__name__)

EXECUTED = 'executed'
DROPPED_BUSY = 'dropped_busy'
DROPPED_THROTTLED = 'dropped_throttled'


@dataclass
class CanvasSession:
    """Layout bookkeeping for one open canvas."""
    canvas_id: str
    in_progress: bool = False
    last_run_ms: Optional[float] = None  # Start time of the last executed run
    executed: int = 0
    dropped: int = 0


class LayoutScheduler:
    """Single-slot scheduler: a layout request either runs now or is dropped.

    Requests are dropped, never queued, while a run on the same canvas is in
    progress or when the previous run started less than ``interval_ms`` ago.
    """

    def __init__(self, interval_ms: float = THROTTLE_INTERVAL_MS, clock: Callable[[], float] = time.monotonic):
        self.interval_ms = interval_ms
        self._clock = clock

    def _now_ms(self) -> float:
        return self._clock() * 1000.0

    def submit(self, session: CanvasSession, run: Callable[[], Any]) -> str:
        """Run ``run`` for ``session`` unless the slot is busy or throttled.

        Returns:
            EXECUTED, DROPPED_BUSY or DROPPED_THROTTLED
        """
        if session.in_progress:
            session.dropped += 1
            logger.debug(f"Layout dropped for canvas {session.canvas_id}: previous run still in progress")
            return DROPPED_BUSY

        now = self._now_ms()
        if session.last_run_ms is not None and now - session.last_run_ms < self.interval_ms:
            session.dropped += 1
            logger.debug(f"Layout dropped for canvas {session.canvas_id}: "
                         f"{now - session.last_run_ms:.0f}ms since last run")
            return DROPPED_THROTTLED

        session.in_progress = True
        session.last_run_ms = now
        try:
            run()
        finally:
            session.in_progress = False
        session.executed += 1
        return EXECUTED


class SessionRegistry:
    """Owns the CanvasSession of every open canvas."""

    def __init__(self):
        self._sessions: Dict[str, CanvasSession] = {}

    def get(self, canvas_id: str) -> CanvasSession:
        if canvas_id not in self._sessions:
            self._sessions[canvas_id] = CanvasSession(canvas_id=canvas_id)
        return self._sessions[canvas_id]

    def close(self, canvas_id: str) -> None:
        self._sessions.pop(canvas_id, None)

    def __contains__(self, canvas_id: str) -> bool:
        return canvas_id in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
