"""
Complexity scoring.

Ten subjective 0-5 ratings are weighted per project type into a score on a
0-40 scale, then mapped to a price multiplier through COMPLEXITY_BANDS.
"""

import logging
from typing import Sequence

from .constants import (
    COMPLEXITY_BANDS,
    COMPLEXITY_QUESTION_COUNT,
    MAX_ANSWER,
    MAX_SCORE,
    MIN_ANSWER,
)
from .errors import InvalidComplexityInput, TemplateConfigError
from .line_items import to_number
from .types import ComplexityResult

logger = logging.getLogger(__name__)


def validate_weights(weights: Sequence[float], project_type: str = "") -> tuple:
    """Weights must be exactly 10 non-negative numbers. Raises TemplateConfigError."""
    if len(weights) != COMPLEXITY_QUESTION_COUNT:
        raise TemplateConfigError(
            f"Complexity weights for {project_type or 'template'} must have "
            f"{COMPLEXITY_QUESTION_COUNT} entries, got {len(weights)}.",
            field="complexity_weights",
        )
    if any(w < 0 for w in weights):
        raise TemplateConfigError(
            f"Complexity weights for {project_type or 'template'} must be non-negative.",
            field="complexity_weights",
        )
    return tuple(float(w) for w in weights)


def clamp_answer(answer) -> float:
    return max(MIN_ANSWER, min(MAX_ANSWER, to_number(answer)))


def calculate_complexity_score(weights: Sequence[float], answers: Sequence) -> tuple:
    """
    Returns (weighted_average, weighted_score).

    Raises InvalidComplexityInput when answers is not exactly 10 long;
    a short or long answer set is never padded or truncated.
    """
    if answers is None or len(answers) != COMPLEXITY_QUESTION_COUNT:
        count = 0 if answers is None else len(answers)
        raise InvalidComplexityInput(
            f"Complexity answers must contain exactly {COMPLEXITY_QUESTION_COUNT} "
            f"values, got {count}.",
            field="complexity.answers",
        )
    weighted_average = sum(
        clamp_answer(answer) * weight for answer, weight in zip(answers, weights)
    )
    return weighted_average, weighted_average * 10


def _interpolate(score, min_score, max_score, min_multiplier, max_multiplier) -> float:
    if max_score == min_score:
        return max_multiplier
    ratio = (score - min_score) / (max_score - min_score)
    return min_multiplier + ratio * (max_multiplier - min_multiplier)


def map_score_to_multiplier(score: float) -> float:
    """Piecewise band lookup. Ties go to the earlier band; scores above 40 clamp to 1.40."""
    clamped = max(0.0, min(float(MAX_SCORE), to_number(score)))
    for band in COMPLEXITY_BANDS:
        if clamped <= band["max"]:
            if "multiplier" in band:
                return band["multiplier"]
            return _interpolate(
                clamped, band["min"], band["max"],
                band["min_multiplier"], band["max_multiplier"],
            )
    last = COMPLEXITY_BANDS[-1]
    return last.get("max_multiplier", last.get("multiplier"))


def calculate_complexity_multiplier(weights: Sequence[float], answers: Sequence) -> ComplexityResult:
    """Score the answers and map the score to a multiplier. Values are unrounded."""
    _, weighted_score = calculate_complexity_score(weights, answers)
    multiplier = map_score_to_multiplier(weighted_score)
    logger.debug("Complexity score %.4f -> multiplier %.4f", weighted_score, multiplier)
    return ComplexityResult(weighted_score=weighted_score, multiplier=multiplier)
