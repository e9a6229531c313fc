"""
Progress statistics for a user across all of their sessions.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from .model import SESSION_COMPLETED, Session, utcnow
from .scoring import round_half_up

RECENT_WINDOW = timedelta(days=7)


def completed_sessions(sessions: Sequence[Session]) -> List[Session]:
    """Completed sessions, oldest first."""
    done = [s for s in sessions if s.status == SESSION_COMPLETED]
    return sorted(done, key=lambda s: s.completed_at or s.started_at)


def user_progress(
    sessions: Sequence[Session], now: Optional[datetime] = None
) -> Dict[str, Any]:
    """
    Summarize a user's practice history.

    Scores of completed sessions without a score count as 0 toward the
    average, matching how the dashboard has always reported them.
    """
    now = now or utcnow()
    done = completed_sessions(sessions)
    scores = np.array([s.score or 0 for s in done], dtype=np.float64)
    recent = [s for s in sessions if now - s.started_at <= RECENT_WINDOW]

    return {
        "total_sessions": len(sessions),
        "completed_sessions": len(done),
        "completion_rate": round_half_up(len(done) / max(len(sessions), 1) * 100),
        "average_score": round_half_up(float(scores.mean())) if scores.size else 0,
        "best_score": int(scores.max()) if scores.size else None,
        "sessions_this_week": len(recent),
        "completed_this_week": sum(1 for s in recent if s.status == SESSION_COMPLETED),
    }
