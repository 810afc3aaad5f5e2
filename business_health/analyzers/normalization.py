"""Benchmark-relative normalization and shared numeric helpers.

``normalize_to_score`` is the only place raw ratios are mapped onto the
0-100 scale; every scorer goes through it.
"""

import math
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, Iterable, List, Mapping, Optional

import numpy as np

from business_health.analyzers.benchmarks import BenchmarkThresholds
from business_health.models.data_models import MaturityStage, ScoreBreakdown

# Upper age bound (years, inclusive) of each maturity stage
MATURITY_THRESHOLDS = (
    (MaturityStage.NEW, 2),
    (MaturityStage.GROWING, 5),
    (MaturityStage.MATURE, 10),
)

DAYS_PER_YEAR = 365.25


def clamp(value: float, lower: float = 0.0, upper: float = 100.0) -> float:
    """Clamp a value into [lower, upper]; NaN maps to ``lower``."""
    if value is None or math.isnan(value):
        return lower
    return float(min(max(value, lower), upper))


def safe_divide(numerator: Optional[float], denominator: Optional[float]) -> Optional[float]:
    """Divide, returning None when the ratio cannot be computed.

    Missing operands, a zero denominator and non-finite results all count as
    "metric unavailable".
    """
    if numerator is None or denominator is None or denominator == 0:
        return None
    result = numerator / denominator
    if not math.isfinite(result):
        return None
    return result


def positive(value: Optional[float]) -> bool:
    """True when a value is present and strictly positive."""
    return value is not None and value > 0


def weighted_average(scores: Mapping[str, Optional[float]], weights: Mapping[str, float]) -> Optional[float]:
    """Weighted mean over the scores that are present.

    Weights are renormalized over the non-None scores, so the active weights
    always sum to 1.

    Args:
        scores: Mapping of component name to score (None when unavailable)
        weights: Mapping of component name to weight

    Returns:
        Weighted average, or None if no weighted score is present
    """
    total_weight = 0.0
    weighted_sum = 0.0

    for name, score in scores.items():
        weight = weights.get(name, 0.0)
        if score is None or weight <= 0 or math.isnan(score):
            continue
        weighted_sum += score * weight
        total_weight += weight

    if total_weight == 0:
        return None
    return weighted_sum / total_weight


def normalize_to_score(value: Optional[float], thresholds: BenchmarkThresholds) -> float:
    """Map a raw value onto 0-100 against a four-point benchmark.

    Piecewise-linear through the anchors (floor, 0), (poor, 25),
    (average, 50), (good, 75) and (excellent, 100), saturating at both ends.
    The floor sits one poor-to-average band below ``poor``. Lower-is-better
    scales (excellent < poor) are mirrored before interpolation. A scale
    collapsed to a single bound returns 100 at or above the bound and 50
    below it.

    Args:
        value: Raw metric value
        thresholds: Benchmark scale for the metric

    Returns:
        Score in [0, 100]
    """
    if value is None or math.isnan(value):
        return 0.0

    poor, average, good, excellent = thresholds.as_tuple()

    if poor == excellent:
        return 100.0 if value >= excellent else 50.0

    if excellent < poor:
        value = -value
        poor, average, good, excellent = -poor, -average, -good, -excellent

    band = average - poor
    if band <= 0:
        band = excellent - poor
    floor = poor - band

    if value <= floor:
        return 0.0
    if value >= excellent:
        return 100.0

    anchors = ((floor, 0.0), (poor, 25.0), (average, 50.0), (good, 75.0), (excellent, 100.0))
    for (x0, y0), (x1, y1) in zip(anchors, anchors[1:]):
        if value <= x1:
            if x1 == x0:
                return y1
            return clamp(y0 + (value - x0) / (x1 - x0) * (y1 - y0))

    return 100.0


def _as_date(value) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def business_age_years(established: Optional[date], reference_date: Optional[date] = None) -> Optional[float]:
    """Age in years at ``reference_date`` (today by default).

    Returns None when the establishment date is unknown. A future date gives
    a negative age.
    """
    if established is None:
        return None
    reference = _as_date(reference_date) if reference_date is not None else date.today()
    return (reference - _as_date(established)).days / DAYS_PER_YEAR


def maturity_stage(age_years: Optional[float]) -> MaturityStage:
    """Maturity bracket for an age; unknown ages count as NEW."""
    if age_years is None:
        return MaturityStage.NEW
    for stage, upper in MATURITY_THRESHOLDS:
        if age_years <= upper:
            return stage
    return MaturityStage.ESTABLISHED


def population_std(values: Iterable[float]) -> float:
    """Population standard deviation; 0 for fewer than two values."""
    data = np.asarray(list(values), dtype=float)
    if data.size < 2:
        return 0.0
    return float(np.std(data))


def population_variance(values: Iterable[float]) -> float:
    data = np.asarray(list(values), dtype=float)
    if data.size == 0:
        return 0.0
    return float(np.var(data))


def format_percent(ratio: float, digits: int = 1) -> str:
    return f"{ratio * 100:.{digits}f}%"


@dataclass
class SubScore:
    """One weighted part of a dimension score; ``score`` is None when unavailable."""
    score: Optional[float]
    components: Dict[str, float] = field(default_factory=dict)
    factors: List[str] = field(default_factory=list)


def band_descriptor(score: float, descriptors: Mapping[int, str]) -> str:
    """Pick the descriptor of the highest band whose lower bound ``score`` reaches.

    Args:
        score: Score to describe
        descriptors: Mapping of band lower bound to text, must contain 0
    """
    for lower in sorted(descriptors, reverse=True):
        if score >= lower:
            return descriptors[lower]
    return descriptors[min(descriptors)]


def assemble_breakdown(
    sub_scores: Mapping[str, SubScore],
    weights: Mapping[str, float],
    recommendations: Mapping[str, str]
) -> ScoreBreakdown:
    """Combine sub-scores into an immutable dimension breakdown.

    The dimension score is the weighted average over available sub-scores.
    Each available sub-score below 50 contributes its recommendation. The
    breakdown is marked unavailable when no sub-score could be computed.
    """
    overall = weighted_average({name: sub.score for name, sub in sub_scores.items()}, weights)

    components: Dict[str, float] = {}
    factors: List[str] = []
    advice: List[str] = []

    for name, sub in sub_scores.items():
        if sub.score is not None:
            components[name] = sub.score
            if sub.score < 50 and name in recommendations:
                advice.append(recommendations[name])
        components.update(sub.components)
        factors.extend(sub.factors)

    return ScoreBreakdown(
        score=clamp(overall) if overall is not None else 0.0,
        components=components,
        factors=factors,
        recommendations=advice,
        available=overall is not None
    )
