"""Score aggregation and grading.

Category scores are clamped individually before summation. Grade and pass
thresholds are expressed on the reference scale (130 points) and scaled
proportionally when a result's maximum differs, e.g. when the genre category
is omitted. Comparisons are done in integers so the outcome is exact.
"""

import math
from typing import Iterable, Sequence

from .models import Category, Grade, ScoreCard
from .rules.constants import GRADE_THRESHOLDS, REFERENCE_TOTAL


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def ratio_points(found: int, total: int, weight: int) -> int:
    """Points for `found` of `total` satisfied rules, rounded half up."""
    if total <= 0:
        return weight
    return round_half_up(found / total * weight)


def clamp_score(raw: float, max_score: int) -> int:
    return max(0, min(round_half_up(raw), max_score))


def to_category(card: ScoreCard) -> Category:
    return Category(name=card.name, score=clamp_score(card.points, card.max_score), max_score=card.max_score)


def aggregate(categories: Iterable[Category]) -> tuple[int, int]:
    """Sum clamped category scores.

    Returns:
        (score, max_score)
    """
    score = 0
    max_score = 0
    for category in categories:
        score += max(0, min(category.score, category.max_score))
        max_score += category.max_score
    return score, max_score


def meets_threshold(score: int, max_score: int, threshold: int, reference_total: int = REFERENCE_TOTAL) -> bool:
    """Check `score >= threshold * max_score / reference_total` exactly."""
    return score * reference_total >= threshold * max_score


def grade_for(
    score: int,
    max_score: int,
    thresholds: Sequence[tuple[str, int]] = GRADE_THRESHOLDS,
    reference_total: int = REFERENCE_TOTAL,
) -> Grade:
    """Letter grade for a score; thresholds must be sorted descending."""
    if max_score <= 0:
        return Grade.F
    for grade, threshold in thresholds:
        if meets_threshold(score, max_score, threshold, reference_total):
            return Grade(grade)
    return Grade.F


def is_passing(
    score: int,
    max_score: int,
    errors: Sequence[str],
    pass_threshold: int,
    reference_total: int = REFERENCE_TOTAL,
) -> bool:
    return not errors and max_score > 0 and meets_threshold(score, max_score, pass_threshold, reference_total)
