"""States of a slicing session."""

from __future__ import annotations

from enum import Enum


class SessionState(Enum):
    """Lifecycle of one caller-side slicing session."""
    IDLE = "idle"
    PROCESSING = "processing"
    READY = "ready"
    FAILED = "failed"
