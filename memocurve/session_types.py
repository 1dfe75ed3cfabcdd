"""
Session types used by the session controller.
"""

from __future__ import annotations

from enum import Enum


class SessionMode(str, Enum):
    """Kind of session."""
    REVIEW = "review"      # Scheduled reviews, committed to memory state
    PRACTICE = "practice"  # Free practice, never touches scheduling


class SessionStatus(str, Enum):
    """Lifecycle of a session."""
    IDLE = "idle"
    ACTIVE = "active"
    COMPLETED = "completed"


class SessionStateError(RuntimeError):
    """Raised when a session operation is not valid in the current status."""
