"""
Session lifecycle: active → completed | abandoned, plus per-session summaries.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, Optional, Sequence

from .errors import EngineContractError, InvalidTransitionError
from .model import (
    MESSAGE_ROLES,
    SESSION_ACTIVE,
    SESSION_COMPLETED,
    SESSION_STATUSES,
    Message,
    Session,
    utcnow,
)
from .scoring import round_half_up, score_rating

logger = logging.getLogger(__name__)


def transition_session(
    session: Session, status: str, now: Optional[datetime] = None
) -> Session:
    """
    Move a session to a new status in place.

    Completing stamps completed_at. Terminal sessions cannot move again;
    re-applying the current status is a no-op.
    """
    if status not in SESSION_STATUSES:
        raise EngineContractError(f"Unknown session status: {status!r}")
    if status == session.status:
        return session
    if session.status != SESSION_ACTIVE:
        raise InvalidTransitionError(session.status, status)

    session.status = status
    if status == SESSION_COMPLETED:
        session.completed_at = now or utcnow()
    logger.info("Session %s -> %s", session.id, status)
    return session


def session_duration_minutes(session: Session) -> Optional[int]:
    if session.completed_at is None:
        return None
    seconds = (session.completed_at - session.started_at).total_seconds()
    return round_half_up(seconds / 60)


def session_summary(session: Session, messages: Sequence[Message]) -> Dict[str, Any]:
    """Duration, message counts by role and rating for one session."""
    counts = {role: 0 for role in MESSAGE_ROLES}
    for m in messages:
        counts[m.role] = counts.get(m.role, 0) + 1
    return {
        "session_id": session.id,
        "status": session.status,
        "duration_minutes": session_duration_minutes(session),
        "message_counts": counts,
        "score": session.score,
        "rating": score_rating(session.score),
        "has_feedback": bool(session.feedback),
    }
