"""
Exception hierarchy for CaseCoach.

The engine never catches these itself; they propagate to the caller,
which translates them (see api/routes.py).
"""

from __future__ import annotations


class CaseCoachError(Exception):
    """Base class for all CaseCoach errors."""


class EngineContractError(CaseCoachError, ValueError):
    """Raised when the engine receives malformed input (null template, non-finite counts...)."""


class SessionClosedError(CaseCoachError):
    """Raised when a message is submitted to a completed or abandoned session."""

    def __init__(self, session_id: str, status: str):
        self.session_id = session_id
        self.status = status
        super().__init__(f"Session {session_id} is {status}")


class NotFoundError(CaseCoachError):
    """Raised when a case template or session does not exist."""

    def __init__(self, kind: str, object_id: str):
        self.kind = kind
        self.object_id = object_id
        super().__init__(f"{kind} {object_id} not found")


class InvalidTransitionError(CaseCoachError):
    """Raised on an illegal session status transition."""

    def __init__(self, current: str, requested: str):
        self.current = current
        self.requested = requested
        super().__init__(f"Cannot move session from {current} to {requested}")
