"""Tests for core/feedback.py — session feedback report."""

import pytest

from casecoach.core.feedback import generate_session_feedback, overall_rating
from casecoach.core.model import Message, ProgressMetrics


def _users(n, content="ok"):
    return [Message(session_id="s", role="user", content=content) for _ in range(n)]


class TestOverallRating:
    @pytest.mark.parametrize("structure, engagement, expected", [
        (75, 65, "Strong"),
        (55, 40, "Good"),
        (30, 20, "Developing"),
        (40, 55, "Good"),
        (80, 50, "Good"),
        (70, 60, "Good"),
        (50, 50, "Developing"),
    ])
    def test_rating(self, structure, engagement, expected):
        progress = ProgressMetrics(engagement=engagement, structure=structure)
        assert overall_rating(progress) == expected


class TestFeedbackReport:
    def test_all_strengths(self):
        progress = ProgressMetrics(engagement=90, structure=80, message_count=10)
        report = generate_session_feedback(_users(10), progress=progress)

        strengths, improvements = report.split("**Areas for Improvement:**")
        assert "• Strong structured thinking and framework usage" in strengths
        assert "• Good engagement and detailed responses" in strengths
        assert "• Thorough exploration of the case" in strengths
        assert "•" not in improvements.split("**Overall Performance:**")[0]
        assert "**Overall Performance:** Strong" in report

    def test_all_improvements(self):
        progress = ProgressMetrics(engagement=10, structure=10, message_count=2)
        report = generate_session_feedback(_users(2), progress=progress)

        improvements = report.split("**Areas for Improvement:**")[1]
        assert "• Work on developing more structured frameworks" in improvements
        assert "• Try to provide more detailed analysis" in improvements
        assert "• Consider asking more clarifying questions" in improvements
        assert "**Overall Performance:** Developing" in report

    def test_exploration_counts_user_messages_only(self):
        progress = ProgressMetrics(engagement=10, structure=10)
        messages = _users(7) + [Message(session_id="s", role="assistant", content="x")] * 5
        report = generate_session_feedback(messages, progress=progress)
        assert "Consider asking more clarifying questions" in report

        report = generate_session_feedback(_users(8), progress=progress)
        assert "Thorough exploration of the case" in report

    def test_section_layout(self):
        report = generate_session_feedback(_users(3), progress=ProgressMetrics())
        assert report.startswith("**Session Feedback**")
        assert report.endswith(
            "**Next Steps:** Continue practicing with similar cases and focus on "
            "developing structured problem-solving approaches."
        )
        headings = ["**Strengths:**", "**Areas for Improvement:**", "**Overall Performance:**"]
        positions = [report.index(h) for h in headings]
        assert positions == sorted(positions)

    def test_assesses_progress_when_omitted(self):
        messages = _users(1, "first the revenue then cost then profit then market " * 10)
        report = generate_session_feedback(messages)
        # 90 words: engagement 36, structure 50; neither clears the Good bar
        assert "**Overall Performance:** Developing" in report

    def test_deterministic(self):
        progress = ProgressMetrics(engagement=55, structure=72, message_count=9)
        reports = {generate_session_feedback(_users(9), progress=progress) for _ in range(3)}
        assert len(reports) == 1
