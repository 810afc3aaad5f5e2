"""Health trajectory classification."""

from typing import Mapping, Optional

from business_health.analyzers.normalization import population_variance
from business_health.models.data_models import DIMENSIONS, HealthTrajectory

STRONG_GROWTH_RATE = 0.10
CONTRACTION_RATE = -0.05
VOLATILITY_VARIANCE = 400
HEALTHY_MEAN = 70
HEALTHY_GROWTH_SCORE = 60
WEAK_MEAN = 40
WEAK_GROWTH_SCORE = 30


def classify_trajectory(
    yearly_growth: Optional[float],
    scores: Mapping[str, Optional[float]]
) -> HealthTrajectory:
    """Classify the direction of a business's health.

    Rules are evaluated in order and the first match wins:

    1. Reported growth above 10% is IMPROVING, below -5% is DECLINING.
    2. A variance above 400 across the available dimension scores is
       VOLATILE. Needs at least two available scores.
    3. A mean of at least 70 with a growth score of at least 60 is
       IMPROVING; a mean of at most 40 or a growth score of at most 30 is
       DECLINING.
    4. Anything else is STABLE.

    Args:
        yearly_growth: Year-over-year revenue growth as a fraction, if known
        scores: Dimension name to score; None marks a dimension that could
            not be assessed and is left out of the mean and variance

    Returns:
        HealthTrajectory
    """
    if yearly_growth is not None:
        if yearly_growth > STRONG_GROWTH_RATE:
            return HealthTrajectory.IMPROVING
        if yearly_growth < CONTRACTION_RATE:
            return HealthTrajectory.DECLINING

    values = [scores[name] for name in DIMENSIONS if scores.get(name) is not None]
    if not values:
        return HealthTrajectory.STABLE

    if len(values) >= 2 and population_variance(values) > VOLATILITY_VARIANCE:
        return HealthTrajectory.VOLATILE

    mean = sum(values) / len(values)
    growth_score = scores.get('growth')
    if mean >= HEALTHY_MEAN and growth_score is not None and growth_score >= HEALTHY_GROWTH_SCORE:
        return HealthTrajectory.IMPROVING
    if mean <= WEAK_MEAN or (growth_score is not None and growth_score <= WEAK_GROWTH_SCORE):
        return HealthTrajectory.DECLINING

    return HealthTrajectory.STABLE
