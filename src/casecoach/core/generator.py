"""
ResponseGenerator: heuristic coach replies for each conversation stage.

Each reply is drawn at random from a small per-stage pool so consecutive
turns do not repeat verbatim. The draw goes through an injectable selector
(or a numpy Generator) so tests can make it deterministic.

The latest user message is accepted but not yet read by the heuristics;
it is the hook for a language-model-backed generator.
"""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence

import numpy as np

from ..content.templates import (
    DEFAULT_NEXT_MOVE,
    DEFAULT_RESPONSE_STAGE,
    NEXT_MOVES,
    RESPONSE_TEMPLATES,
    STAGE_SUGGESTIONS,
    THINKING_ENGAGEMENT,
    THINKING_NEXT_MOVE,
    THINKING_STRUCTURE,
)
from .model import CaseTemplate, EngineOutput, ProgressMetrics
from .scoring import calculate_final_score, round_half_up
from .stages import STAGE_CONCLUSION

logger = logging.getLogger(__name__)

Selector = Callable[[Sequence[str]], str]

STRONG_STRUCTURE_THRESHOLD = 70
HIGH_ENGAGEMENT_THRESHOLD = 60


def get_response_templates(industry: str, stage: str) -> List[str]:
    """
    Reply pool for a stage.

    Every industry currently shares one set of pools; unknown stages use
    the analysis pool.
    """
    pool = RESPONSE_TEMPLATES.get(stage, RESPONSE_TEMPLATES[DEFAULT_RESPONSE_STAGE])
    return list(pool)


def get_suggestions(stage: str, industry: str = "") -> List[str]:
    """Suggestion list for a stage; empty for unknown stages."""
    return list(STAGE_SUGGESTIONS.get(stage, []))


def build_thinking(stage: str, progress: ProgressMetrics) -> str:
    """Three-sentence reasoning trace attached to the assistant message."""
    structure_level = "strong" if progress.structure > STRONG_STRUCTURE_THRESHOLD else "developing"
    engagement_level = "high" if progress.engagement > HIGH_ENGAGEMENT_THRESHOLD else "moderate"
    sentences = [
        THINKING_STRUCTURE.format(level=structure_level, stage=stage),
        THINKING_ENGAGEMENT.format(
            level=engagement_level,
            words=round_half_up(progress.average_message_length),
        ),
        THINKING_NEXT_MOVE.format(move=NEXT_MOVES.get(stage, DEFAULT_NEXT_MOVE)),
    ]
    return " ".join(sentences)


class ResponseGenerator:
    """
    Picks a templated reply, a thinking trace and suggestions for one turn.

    Usage:
        generator = ResponseGenerator(rng=np.random.default_rng(7))
        output = generator.generate(template, "analysis", progress, "Costs rose 10%")
    """

    def __init__(
        self,
        rng: Optional[np.random.Generator] = None,
        selector: Optional[Selector] = None,
    ):
        self.rng = rng if rng is not None else np.random.default_rng()
        self._selector = selector

    def select(self, pool: Sequence[str]) -> str:
        if self._selector is not None:
            return self._selector(pool)
        return pool[int(self.rng.integers(len(pool)))]

    def generate(
        self,
        case_template: CaseTemplate,
        stage: str,
        progress: ProgressMetrics,
        user_message: str = "",
    ) -> EngineOutput:
        pool = get_response_templates(case_template.industry, stage)
        content = self.select(pool)

        score = None
        if stage == STAGE_CONCLUSION:
            score = calculate_final_score(progress)
            logger.info(
                "Conclusion reached: score=%d (engagement=%.1f, structure=%.1f, messages=%d)",
                score, progress.engagement, progress.structure, progress.message_count,
            )

        return EngineOutput(
            content=content,
            thinking=build_thinking(stage, progress),
            suggestions=get_suggestions(stage, case_template.industry),
            score=score,
        )
