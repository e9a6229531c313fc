"""Tests for session lifecycle, progress statistics and charts."""

import json
from datetime import datetime, timedelta, timezone

import pytest

from casecoach.core.errors import EngineContractError, InvalidTransitionError
from casecoach.core.lifecycle import session_summary, transition_session
from casecoach.core.model import Message, ProgressMetrics, Session
from casecoach.core.reporting import user_progress
from casecoach.viz.charts import create_progress_radar, create_score_trend_chart

NOW = datetime(2025, 6, 15, 12, 0, tzinfo=timezone.utc)


def _session(status="active", score=None, days_ago=0, minutes=30):
    started = NOW - timedelta(days=days_ago, minutes=minutes)
    s = Session(user_id="u1", case_template_id="c1", started_at=started, score=score)
    if status == "completed":
        s.status = status
        s.completed_at = started + timedelta(minutes=minutes)
    elif status == "abandoned":
        s.status = status
    return s


class TestTransitions:
    def test_complete_sets_timestamp(self):
        session = _session()
        transition_session(session, "completed", now=NOW)
        assert session.status == "completed"
        assert session.completed_at == NOW

    def test_abandon_leaves_completed_at_unset(self):
        session = _session()
        transition_session(session, "abandoned")
        assert session.status == "abandoned"
        assert session.completed_at is None

    @pytest.mark.parametrize("terminal", ["completed", "abandoned"])
    @pytest.mark.parametrize("target", ["active", "completed", "abandoned"])
    def test_terminal_is_final(self, terminal, target):
        session = _session(status=terminal)
        if target == terminal:
            transition_session(session, target)
            assert session.status == terminal
        else:
            with pytest.raises(InvalidTransitionError):
                transition_session(session, target)

    def test_unknown_status(self):
        with pytest.raises(EngineContractError):
            transition_session(_session(), "paused")


class TestSessionSummary:
    def test_summary(self):
        session = _session(status="completed", score=72, minutes=42)
        messages = [
            Message(session_id=session.id, role="system", content="p"),
            Message(session_id=session.id, role="assistant", content="a"),
            Message(session_id=session.id, role="user", content="u"),
            Message(session_id=session.id, role="assistant", content="a"),
        ]
        summary = session_summary(session, messages)
        assert summary["duration_minutes"] == 42
        assert summary["message_counts"] == {"user": 1, "assistant": 2, "system": 1}
        assert summary["rating"] == "Strong"
        assert summary["has_feedback"] is False

    def test_active_session_has_no_duration(self):
        summary = session_summary(_session(), [])
        assert summary["duration_minutes"] is None
        assert summary["rating"] == "Developing"


class TestUserProgress:
    def test_empty(self):
        stats = user_progress([], now=NOW)
        assert stats["total_sessions"] == 0
        assert stats["completion_rate"] == 0
        assert stats["average_score"] == 0
        assert stats["best_score"] is None

    def test_statistics(self):
        sessions = [
            _session("completed", score=80, days_ago=1),
            _session("completed", score=65, days_ago=10),
            _session("abandoned", days_ago=2),
            _session("active"),
        ]
        stats = user_progress(sessions, now=NOW)
        assert stats["total_sessions"] == 4
        assert stats["completed_sessions"] == 2
        assert stats["completion_rate"] == 50
        # (80 + 65) / 2 = 72.5 rounds up
        assert stats["average_score"] == 73
        assert stats["best_score"] == 80
        assert stats["sessions_this_week"] == 3
        assert stats["completed_this_week"] == 1


class TestCharts:
    def test_score_trend_skips_unfinished(self):
        sessions = [
            _session("completed", score=55, days_ago=3),
            _session("completed", score=70, days_ago=1),
            _session("active"),
        ]
        fig = json.loads(create_score_trend_chart(sessions))
        assert list(fig["data"][0]["y"]) == [55, 70]

    def test_progress_radar(self):
        progress = ProgressMetrics(engagement=40, structure=60, message_count=5)
        fig = json.loads(create_progress_radar(progress))
        trace = fig["data"][0]
        assert list(trace["r"]) == [40, 60, 50, 40]
        assert trace["theta"][0] == trace["theta"][-1] == "Engagement"
