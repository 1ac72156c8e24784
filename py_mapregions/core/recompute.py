"""
Recomputation scheduling for an editing session.

Edits mark the partition dirty and take a new request token. A recompute
only runs once edits have been quiet for the debounce interval and no drag
is in progress. Runs are synchronous and never cancelled; a result is kept
only if its token is still the latest when it finishes.
"""

import time
from typing import Callable, Generic, Optional, TypeVar

import structlog

from ..config import settings

logger = structlog.get_logger()

T = TypeVar("T")


class RequestTokens:
    """Monotonic request counter."""

    def __init__(self):
        self._latest = 0

    @property
    def latest(self) -> int:
        return self._latest

    def issue(self) -> int:
        self._latest += 1
        return self._latest

    def is_latest(self, token: int) -> bool:
        return token == self._latest


class RecomputeScheduler(Generic[T]):
    """Debounced, drag-aware driver for a recompute function."""

    def __init__(self, compute: Callable[[], T], debounce_seconds: Optional[float] = None,
                 clock: Callable[[], float] = time.monotonic):
        self._compute = compute
        self._debounce = settings.recompute_debounce_seconds if debounce_seconds is None else debounce_seconds
        self._clock = clock
        self.tokens = RequestTokens()
        self._dirty = False
        self._dragging = False
        self._last_edit = 0.0
        self.result: Optional[T] = None

    @property
    def dirty(self) -> bool:
        return self._dirty

    @property
    def dragging(self) -> bool:
        return self._dragging

    def mark_dirty(self) -> int:
        """Record an edit; returns the token the next run will carry."""
        self._dirty = True
        self._last_edit = self._clock()
        return self.tokens.issue()

    def begin_drag(self) -> None:
        self._dragging = True

    def end_drag(self) -> int:
        """Finish a drag; the drop itself counts as an edit."""
        self._dragging = False
        return self.mark_dirty()

    def ready(self) -> bool:
        return (self._dirty and not self._dragging
                and self._clock() - self._last_edit >= self._debounce)

    def poll(self) -> Optional[T]:
        """
        Run the recompute if it is due.

        Returns:
            The new result if one was computed and is still current, else None
        """
        if not self.ready():
            return None
        return self._run()

    def flush(self) -> Optional[T]:
        """Run immediately if dirty, ignoring the debounce interval (not drags)."""
        if not self._dirty or self._dragging:
            return None
        return self._run()

    def _run(self) -> Optional[T]:
        token = self.tokens.latest
        self._dirty = False
        value = self._compute()

        if not self.tokens.is_latest(token):
            # An edit arrived while computing; that edit re-marked us dirty
            logger.debug("Discarding stale recompute", token=token, latest=self.tokens.latest)
            return None

        self.result = value
        return value
