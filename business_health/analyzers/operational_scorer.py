"""Operational health scorer.

Scores business maturity, operational efficiency and market positioning.
"""

from datetime import date
from typing import Optional, Sequence

from business_health.analyzers.benchmarks import (
    BenchmarkTables, ScoringWeights, DEFAULT_BENCHMARKS, DEFAULT_WEIGHTS
)
from business_health.analyzers.normalization import (
    SubScore, assemble_breakdown, business_age_years, clamp, normalize_to_score,
    positive, weighted_average
)
from business_health.analyzers.text_rules import (
    COMPETITIVE_POSITION_RULES, DIFFERENTIATION_RULES, OPERATING_HOURS_RULES,
    SEASONALITY_RULES, apply_cumulative, first_match
)
from business_health.models.data_models import (
    BusinessFinancialData, BusinessOperationalData, ScoreBreakdown
)
from business_health.utils.logging import get_logger

logger = get_logger(__name__)

# (minimum customers, score, factor), highest tier first
MARKET_PRESENCE_TIERS = (
    (10000, 90, 'Large customer base indicates strong market presence'),
    (2000, 75, 'Substantial customer base shows good market penetration'),
    (500, 60, 'Moderate customer base with growth opportunity'),
    (100, 40, 'Developing customer base needs expansion'),
    (0, 25, 'Small customer base requires significant growth'),
)


def maturity_curve(age_years: float) -> float:
    """Maturity score for a business age: 20 under a year, rising to 95 at ten."""
    if age_years < 1:
        return 20.0
    if age_years < 3:
        return 40 + (age_years - 1) * 15
    if age_years < 10:
        return 70 + (age_years - 3) * 3
    return 95.0


def employee_stability_curve(employees: int) -> float:
    """Stability score for a headcount: 20 for a solo operation, capped at 95."""
    if employees <= 0:
        return 20.0
    if employees <= 5:
        return 40.0 + employees * 8
    if employees <= 20:
        return 80.0 + (employees - 5)
    return 95.0


def stability_description(employees: int) -> str:
    if employees <= 0:
        return 'solo operation'
    if employees <= 2:
        return 'small team stability'
    if employees <= 10:
        return 'established team'
    if employees <= 50:
        return 'substantial organization'
    return 'large stable enterprise'


class OperationalScorer:
    """Scorer for the operational health dimension."""

    MATURITY_WEIGHTS = {'years_in_operation': 0.6, 'employee_stability': 0.4}
    EFFICIENCY_WEIGHTS = {'operating_hours': 0.4, 'seasonal_management': 0.35, 'customer_efficiency': 0.25}
    POSITIONING_WEIGHTS = {'competitive_position': 0.5, 'differentiation': 0.3, 'market_presence': 0.2}

    RECOMMENDATIONS = {
        'business_maturity': 'Build operational stability and business maturity over time',
        'operational_efficiency': 'Optimize operating hours, seasonal planning, and customer efficiency',
        'market_positioning': 'Strengthen competitive position and market differentiation',
    }

    def __init__(self, benchmarks: Optional[BenchmarkTables] = None, weights: Optional[ScoringWeights] = None):
        self.benchmarks = benchmarks or DEFAULT_BENCHMARKS
        self.weights = weights or DEFAULT_WEIGHTS

    def score(
        self,
        financial: BusinessFinancialData,
        operational: BusinessOperationalData,
        reference_date: Optional[date] = None
    ) -> ScoreBreakdown:
        """Score the operational dimension.

        Args:
            financial: Financial facts (revenue is used)
            operational: Operational facts
            reference_date: Date business age is measured at. Defaults to today

        Returns:
            Operational ScoreBreakdown
        """
        age = business_age_years(operational.established, reference_date)
        sub_scores = {
            'business_maturity': self._business_maturity(operational, age),
            'operational_efficiency': self._operational_efficiency(financial, operational),
            'market_positioning': self._market_positioning(operational, age),
        }
        breakdown = assemble_breakdown(sub_scores, self.weights.operational, self.RECOMMENDATIONS)
        logger.debug(f"Operational score {breakdown.score:.2f}")
        return breakdown

    def _business_maturity(self, operational: BusinessOperationalData, age: Optional[float]) -> SubScore:
        components = {}
        factors = []

        if age is not None and age > 0:
            components['years_in_operation'] = clamp(maturity_curve(age))
            factors.append(f"{age:.1f} years in operation")

        if operational.employees is not None:
            components['employee_stability'] = clamp(employee_stability_curve(operational.employees))
            factors.append(
                f"{operational.employees} employees indicate {stability_description(operational.employees)}"
            )

        score = weighted_average(components, self.MATURITY_WEIGHTS)
        if score is None:
            factors.append('Business maturity not assessed: establishment date and headcount missing')
        return SubScore(score, components, factors)

    def _operational_efficiency(
        self,
        financial: BusinessFinancialData,
        operational: BusinessOperationalData
    ) -> SubScore:
        components = {}
        factors = []

        hours_score, hours_factors = self._operating_hours(operational.hours_of_operation, operational.days_open)
        components['operating_hours'] = hours_score
        factors.extend(hours_factors)

        if operational.seasonality:
            rule = first_match(operational.seasonality, SEASONALITY_RULES)
            if rule is not None:
                components['seasonal_management'] = float(rule.value)
                factors.append(rule.factor)
            else:
                components['seasonal_management'] = 50.0
                factors.append('Seasonal impact unclear from description')
        else:
            components['seasonal_management'] = 50.0
            factors.append('Seasonality impact not specified')

        if positive(financial.revenue) and positive(operational.customer_base):
            revenue_per_customer = financial.revenue / operational.customer_base
            components['customer_efficiency'] = normalize_to_score(
                revenue_per_customer,
                self.benchmarks.thresholds_for('customer_efficiency', operational.business_category)
            )
            factors.append(f"Revenue per customer: ${round(revenue_per_customer):,}")

        return SubScore(weighted_average(components, self.EFFICIENCY_WEIGHTS), components, factors)

    def _operating_hours(self, hours: Optional[str], days_open: Optional[Sequence[str]]):
        if not hours:
            return 40.0, ['Operating hours not specified']

        factors = []
        score = 50.0
        rule = first_match(hours, OPERATING_HOURS_RULES)
        if rule is not None:
            score = float(rule.value)
            factors.append(rule.factor)

        if days_open:
            days = len(days_open)
            if days == 7:
                score += 10
                factors.append('Seven-day operations maximize availability')
            elif days >= 5:
                score += 5
                factors.append('Good weekly availability')
            elif days <= 3:
                score -= 10
                factors.append('Limited weekly availability')

        return clamp(score), factors

    def _market_positioning(self, operational: BusinessOperationalData, age: Optional[float]) -> SubScore:
        components = {}
        factors = []

        if operational.competition:
            score, matched = apply_cumulative(operational.competition, COMPETITIVE_POSITION_RULES, base=50)
            components['competitive_position'] = score
            factors.extend(matched)
        else:
            components['competitive_position'] = 50.0
            factors.append('Competition analysis not available')

        if operational.description:
            score, matched = apply_cumulative(operational.description, DIFFERENTIATION_RULES, base=40)
            components['differentiation'] = score
            factors.extend(matched)
        else:
            components['differentiation'] = 40.0
            factors.append('Business description not available for differentiation analysis')

        presence, presence_factors = self._market_presence(operational.customer_base, age)
        components['market_presence'] = presence
        factors.extend(presence_factors)

        return SubScore(weighted_average(components, self.POSITIONING_WEIGHTS), components, factors)

    def _market_presence(self, customer_base: Optional[int], age: Optional[float]):
        score = 50.0
        factors = []

        if customer_base is not None:
            for minimum, tier_score, factor in MARKET_PRESENCE_TIERS:
                if customer_base >= minimum:
                    score = float(tier_score)
                    factors.append(factor)
                    break
            else:
                score = 25.0
                factors.append(MARKET_PRESENCE_TIERS[-1][2])

        if age is not None:
            if age > 5:
                score += 10
                factors.append('Established business tenure enhances market credibility')
            elif age < 1:
                score -= 15
                factors.append('New business still building market presence')

        return clamp(score), factors
