"""
Conversation stage classifier.

A stage is a pure function of how many non-system messages the session
holds, so it can never regress as the conversation grows.
"""

from __future__ import annotations

import numbers
from typing import Iterable, Tuple

from .errors import EngineContractError
from .model import ROLE_SYSTEM, Message

STAGE_OPENING = "opening"
STAGE_CLARIFICATION = "problem_clarification"
STAGE_FRAMEWORK = "framework_development"
STAGE_ANALYSIS = "analysis"
STAGE_CONCLUSION = "conclusion"

STAGES: Tuple[str, ...] = (
    STAGE_OPENING,
    STAGE_CLARIFICATION,
    STAGE_FRAMEWORK,
    STAGE_ANALYSIS,
    STAGE_CONCLUSION,
)

# Inclusive upper bound on the message count for every stage but the last
STAGE_LIMITS = (
    (2, STAGE_OPENING),
    (6, STAGE_CLARIFICATION),
    (12, STAGE_FRAMEWORK),
    (20, STAGE_ANALYSIS),
)


def classify_stage(message_count: int) -> str:
    """Map a non-system message count to its coaching stage."""
    if isinstance(message_count, bool) or not isinstance(message_count, numbers.Integral):
        raise EngineContractError(f"message_count must be an integer, got {message_count!r}")
    if message_count < 0:
        raise EngineContractError(f"message_count must be >= 0, got {message_count}")
    for limit, stage in STAGE_LIMITS:
        if message_count <= limit:
            return stage
    return STAGE_CONCLUSION


def stage_for_messages(messages: Iterable[Message]) -> str:
    """Classify a history, ignoring the system message."""
    return classify_stage(sum(1 for m in messages if m.role != ROLE_SYSTEM))


def stage_index(stage: str) -> int:
    """Position of a stage in STAGES; unknown stages raise."""
    try:
        return STAGES.index(stage)
    except ValueError:
        raise EngineContractError(f"Unknown stage: {stage!r}") from None
