"""
Session scorer: folds progress metrics into a final 0-100 score.

    length_score = min(100, message_count / 10 * 100)
    score        = round(0.3 * engagement + 0.4 * structure + 0.3 * length_score)
"""

from __future__ import annotations

import numpy as np

from .errors import EngineContractError
from .model import ProgressMetrics

ENGAGEMENT_WEIGHT = 0.3
STRUCTURE_WEIGHT = 0.4
LENGTH_WEIGHT = 0.3

# Number of user messages that earns full length credit
FULL_LENGTH_MESSAGES = 10

RATING_STRONG = "Strong"
RATING_GOOD = "Good"
RATING_DEVELOPING = "Developing"


def round_half_up(x: float) -> int:
    """Round .5 upward (np.round rounds half to even)."""
    return int(np.floor(x + 0.5))


def _check_finite(progress: ProgressMetrics) -> None:
    values = np.array(
        [progress.engagement, progress.structure, progress.message_count],
        dtype=np.float64,
    )
    if not np.all(np.isfinite(values)):
        raise EngineContractError(f"Progress metrics must be finite: {progress!r}")
    if progress.message_count < 0:
        raise EngineContractError(f"message_count must be >= 0, got {progress.message_count}")


def length_score(message_count: int) -> float:
    return min(100.0, (message_count / FULL_LENGTH_MESSAGES) * 100.0)


def calculate_final_score(progress: ProgressMetrics) -> int:
    """Weighted final score in [0, 100]."""
    _check_finite(progress)
    raw = (
        progress.engagement * ENGAGEMENT_WEIGHT
        + progress.structure * STRUCTURE_WEIGHT
        + length_score(progress.message_count) * LENGTH_WEIGHT
    )
    return int(np.clip(round_half_up(raw), 0, 100))


def score_rating(score: int | None) -> str:
    """Label shown on session summaries."""
    if score is not None and score >= 70:
        return RATING_STRONG
    if score is not None and score >= 50:
        return RATING_GOOD
    return RATING_DEVELOPING
