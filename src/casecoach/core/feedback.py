"""
Feedback synthesizer: a deterministic written report for a finished session.
"""

from __future__ import annotations

from typing import List, Optional, Sequence, Tuple

from ..content.templates import (
    BULLET,
    FEEDBACK_REPORT,
    IMPROVE_ENGAGEMENT,
    IMPROVE_EXPLORATION,
    IMPROVE_STRUCTURE,
    NEXT_STEPS,
    STRENGTH_ENGAGEMENT,
    STRENGTH_EXPLORATION,
    STRENGTH_STRUCTURE,
)
from .model import CaseTemplate, Message, ProgressMetrics
from .progress import assess_progress, user_messages
from .scoring import RATING_DEVELOPING, RATING_GOOD, RATING_STRONG

STRUCTURE_STRENGTH_THRESHOLD = 70
ENGAGEMENT_STRENGTH_THRESHOLD = 60
EXPLORATION_MESSAGE_COUNT = 8
GOOD_THRESHOLD = 50


def overall_rating(progress: ProgressMetrics) -> str:
    if (progress.structure > STRUCTURE_STRENGTH_THRESHOLD
            and progress.engagement > ENGAGEMENT_STRENGTH_THRESHOLD):
        return RATING_STRONG
    if progress.structure > GOOD_THRESHOLD or progress.engagement > GOOD_THRESHOLD:
        return RATING_GOOD
    return RATING_DEVELOPING


def strengths_and_improvements(
    progress: ProgressMetrics, user_message_count: int
) -> Tuple[List[str], List[str]]:
    strengths: List[str] = []
    improvements: List[str] = []

    if progress.structure > STRUCTURE_STRENGTH_THRESHOLD:
        strengths.append(STRENGTH_STRUCTURE)
    else:
        improvements.append(IMPROVE_STRUCTURE)

    if progress.engagement > ENGAGEMENT_STRENGTH_THRESHOLD:
        strengths.append(STRENGTH_ENGAGEMENT)
    else:
        improvements.append(IMPROVE_ENGAGEMENT)

    if user_message_count >= EXPLORATION_MESSAGE_COUNT:
        strengths.append(STRENGTH_EXPLORATION)
    else:
        improvements.append(IMPROVE_EXPLORATION)

    return strengths, improvements


def _bullets(items: Sequence[str]) -> str:
    return "\n".join(f"{BULLET} {item}" for item in items)


def generate_session_feedback(
    messages: Sequence[Message],
    case_template: Optional[CaseTemplate] = None,
    progress: Optional[ProgressMetrics] = None,
) -> str:
    """
    Build the Strengths / Areas for Improvement / Overall Performance report.

    Args:
        messages: Full session history; only user messages are counted
        case_template: Passed through, not used by the rules
        progress: Precomputed metrics; assessed from messages when omitted

    Returns:
        Markdown-formatted feedback text
    """
    if progress is None:
        progress = assess_progress(messages, case_template)
    user_count = len(user_messages(messages))

    strengths, improvements = strengths_and_improvements(progress, user_count)
    report = FEEDBACK_REPORT.format(
        strengths=_bullets(strengths),
        improvements=_bullets(improvements),
        rating=overall_rating(progress),
        next_steps=NEXT_STEPS,
    )
    return report.strip()
