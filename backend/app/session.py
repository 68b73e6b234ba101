"""Caller-side slicing session.

The UI moves between an upload step and a preview step. A session tracks
that as an explicit state machine and keeps only the newest submission's
outcome: a slow invocation that finishes after a newer one started is
discarded instead of overwriting the newer state.
"""

from __future__ import annotations

import logging
import threading

from .enums import SessionState
from .exceptions import TapThePostError
from .models import SliceResult
from .slicer import SliceEngine

logger = logging.getLogger("tapthepost.session")

FAILURE_MESSAGE = "Unable to process that image. Try a different file."


class SliceSession:
    """Idle -> Processing -> Ready | Failed, last submission wins."""

    def __init__(self, engine: SliceEngine | None = None) -> None:
        self.engine = engine or SliceEngine()
        self._lock = threading.Lock()
        self._generation = 0
        self.state = SessionState.IDLE
        self.result: SliceResult | None = None
        self.error: str | None = None

    @property
    def is_processing(self) -> bool:
        return self.state is SessionState.PROCESSING

    def begin(self) -> int:
        """Start a submission and return its token.

        Any submission still in flight becomes stale. The last good result
        stays available until a newer one replaces it or :meth:`reset`.
        """
        with self._lock:
            self._generation += 1
            self.state = SessionState.PROCESSING
            self.error = None
            return self._generation

    def complete(self, token: int, result: SliceResult) -> bool:
        """Publish a result; returns False if ``token`` is stale."""
        with self._lock:
            if token != self._generation:
                logger.debug("Discarding stale result for submission %d", token)
                return False
            self.state = SessionState.READY
            self.result = result
            self.error = None
            return True

    def fail(self, token: int, message: str = FAILURE_MESSAGE) -> bool:
        """Record a failure; returns False if ``token`` is stale."""
        with self._lock:
            if token != self._generation:
                logger.debug("Discarding stale failure for submission %d", token)
                return False
            self.state = SessionState.FAILED
            self.error = message
            return True

    def reset(self) -> None:
        """Return to the upload step and invalidate in-flight work."""
        with self._lock:
            self._generation += 1
            self.state = SessionState.IDLE
            self.result = None
            self.error = None

    def process(self, data: bytes) -> SliceResult | None:
        """Slice ``data`` synchronously.

        Returns:
            The result if this submission is still current and succeeded,
            otherwise None (see :attr:`state` and :attr:`error`).
        """
        token = self.begin()
        try:
            result = self.engine.slice_bytes(data)
        except TapThePostError as e:
            logger.warning("Failed to process image: %s", e)
            self.fail(token)
            return None
        except Exception as e:
            logger.error("Unexpected error processing image: %s", e, exc_info=True)
            self.fail(token)
            return None

        return result if self.complete(token, result) else None
