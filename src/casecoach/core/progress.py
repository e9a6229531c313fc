"""
Progress assessor: engagement and structure scores from a user's messages.

    engagement = min(100, total_words / 50 * 20)
    structure  = 10 per structuring keyword present anywhere, capped at 100

Structure is a bag-of-keywords heuristic: a keyword counts once no matter
how often it appears, and matching is by substring ("costs" hits "cost").
"""

from __future__ import annotations

from typing import Iterable, List, Optional, Sequence

from ..content.templates import STRUCTURE_KEYWORDS
from .model import ROLE_USER, CaseTemplate, Message, ProgressMetrics

WORDS_PER_ENGAGEMENT_STEP = 50
ENGAGEMENT_STEP = 20.0
KEYWORD_POINTS = 10.0
MAX_SCORE = 100.0


def count_words(text: str) -> int:
    return len(text.split())


def user_messages(messages: Iterable[Message]) -> List[Message]:
    return [m for m in messages if m.role == ROLE_USER]


def assess_structure(
    messages: Sequence[Message],
    keywords: Sequence[str] = STRUCTURE_KEYWORDS,
) -> float:
    """Score 10 points per keyword found in the combined user text, capped at 100."""
    content = " ".join(m.content.lower() for m in messages)
    hits = sum(1 for keyword in keywords if keyword in content)
    return min(MAX_SCORE, hits * KEYWORD_POINTS)


def assess_progress(
    messages: Iterable[Message],
    case_template: Optional[CaseTemplate] = None,
) -> ProgressMetrics:
    """
    Compute progress metrics over the user-authored messages of a history.

    Assistant and system messages are ignored. The case template is accepted
    for parity with the other engine stages but does not affect the result.
    """
    authored = user_messages(messages)
    total_words = sum(count_words(m.content) for m in authored)

    engagement = min(MAX_SCORE, (total_words / WORDS_PER_ENGAGEMENT_STEP) * ENGAGEMENT_STEP)
    structure = assess_structure(authored)

    return ProgressMetrics(
        engagement=engagement,
        structure=structure,
        message_count=len(authored),
        average_message_length=total_words / max(len(authored), 1),
    )
