"""Growth health scorer.

Scores revenue growth, market expansion potential and scalability.
"""

from datetime import date
from typing import Optional

from business_health.analyzers.benchmarks import (
    BenchmarkTables, ScoringWeights, DEFAULT_BENCHMARKS, DEFAULT_WEIGHTS
)
from business_health.analyzers.normalization import (
    SubScore, assemble_breakdown, business_age_years, clamp, format_percent,
    maturity_stage, normalize_to_score, positive, weighted_average
)
from business_health.analyzers.text_rules import (
    COMPETITION_INTENSITY_RULES, FLEXIBILITY_HOURS_RULES, FLEXIBILITY_SEASONALITY_RULES, first_match
)
from business_health.models.data_models import (
    BusinessFinancialData, BusinessOperationalData, ScoreBreakdown
)
from business_health.utils.logging import get_logger

logger = get_logger(__name__)

# Customer-base score for reaching each expected tier
CUSTOMER_TIER_SCORES = (('excellent', 90), ('good', 75), ('average', 60), ('poor', 35))
CUSTOMER_BELOW_POOR_SCORE = 15


class GrowthScorer:
    """Scorer for the growth health dimension."""

    REVENUE_GROWTH_WEIGHTS = {'yearly_growth': 0.7, 'revenue_consistency': 0.3}
    MARKET_EXPANSION_WEIGHTS = {'category_potential': 0.4, 'customer_base': 0.35, 'competition_level': 0.25}
    SCALABILITY_WEIGHTS = {'employee_scalability': 0.4, 'operational_flexibility': 0.35, 'asset_efficiency': 0.25}

    RECOMMENDATIONS = {
        'revenue_growth': 'Focus on accelerating revenue growth through market expansion or product development',
        'market_expansion': 'Explore new market opportunities and reduce competitive pressures',
        'scalability': 'Improve operational scalability and asset efficiency for growth',
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
        """Score the growth dimension.

        Args:
            financial: Financial facts
            operational: Operational facts
            reference_date: Date business age is measured at. Defaults to today

        Returns:
            Growth ScoreBreakdown
        """
        age = business_age_years(operational.established, reference_date)
        sub_scores = {
            'revenue_growth': self._revenue_growth(financial, age),
            'market_expansion': self._market_expansion(operational, age),
            'scalability': self._scalability(financial, operational),
        }
        breakdown = assemble_breakdown(sub_scores, self.weights.growth, self.RECOMMENDATIONS)
        logger.debug(f"Growth score {breakdown.score:.2f}")
        return breakdown

    def _revenue_growth(self, financial: BusinessFinancialData, age: Optional[float]) -> SubScore:
        components = {}
        factors = []

        if financial.yearly_growth is not None:
            growth = financial.yearly_growth
            bands = self.benchmarks.growth_for_stage(maturity_stage(age))
            components['yearly_growth'] = normalize_to_score(growth, bands)
            factors.append(f"Annual growth rate: {format_percent(growth)}")

            if growth > bands.excellent:
                factors.append('Exceptional growth performance')
            elif growth > bands.good:
                factors.append('Strong growth trajectory')
            elif growth > bands.average:
                factors.append('Moderate growth performance')
            elif growth > bands.poor:
                factors.append('Modest growth achieved')
            else:
                factors.append('Growth challenges present')

        if financial.monthly_revenue is not None and positive(financial.revenue):
            consistency = 1 - abs(financial.monthly_revenue * 12 - financial.revenue) / financial.revenue
            components['revenue_consistency'] = normalize_to_score(consistency, self.benchmarks.revenue_consistency)
            factors.append(f"Revenue consistency: {format_percent(consistency)}")

        return SubScore(weighted_average(components, self.REVENUE_GROWTH_WEIGHTS), components, factors)

    def _market_expansion(self, operational: BusinessOperationalData, age: Optional[float]) -> SubScore:
        category = operational.business_category
        components = {}
        factors = []

        outlook = self.benchmarks.growth_potential_for(category)
        components['category_potential'] = outlook.score
        factors.append(outlook.note)

        if operational.customer_base is not None:
            expected = self.benchmarks.thresholds_for('customer_base', category)
            if age is not None:
                # Expectations grow with age, capped at twice the five-year table
                multiplier = max(min(age / 5, 2), 0)
                expected = expected.scaled(multiplier)
            expected_tiers = {name: round(getattr(expected, name)) for name, _ in CUSTOMER_TIER_SCORES}

            customer_score = CUSTOMER_BELOW_POOR_SCORE
            for tier, tier_score in CUSTOMER_TIER_SCORES:
                if operational.customer_base >= expected_tiers[tier]:
                    customer_score = tier_score
                    break
            components['customer_base'] = float(customer_score)
            factors.append(f"Customer base: {operational.customer_base:,}")

        if operational.competition:
            rule = first_match(operational.competition, COMPETITION_INTENSITY_RULES)
            if rule is not None:
                components['competition_level'] = float(rule.value)
                factors.append(rule.factor)
            else:
                components['competition_level'] = 50.0
                factors.append('Competition level assessed as moderate')
        else:
            components['competition_level'] = 50.0
            factors.append('Competition level not specified')

        return SubScore(weighted_average(components, self.MARKET_EXPANSION_WEIGHTS), components, factors)

    def _scalability(self, financial: BusinessFinancialData, operational: BusinessOperationalData) -> SubScore:
        components = {}
        factors = []

        if positive(financial.revenue) and positive(operational.employees):
            revenue_per_employee_k = financial.revenue / operational.employees / 1000
            components['employee_scalability'] = normalize_to_score(
                revenue_per_employee_k,
                self.benchmarks.thresholds_for('scalability', operational.business_category)
            )
            factors.append(f"Employee scalability: ${round(revenue_per_employee_k)}K per employee")

        flexibility, flexibility_factors = self._operational_flexibility(operational)
        components['operational_flexibility'] = flexibility
        factors.extend(flexibility_factors)

        if positive(financial.revenue) and positive(financial.total_assets):
            asset_efficiency = financial.revenue / financial.total_assets
            components['asset_efficiency'] = normalize_to_score(asset_efficiency, self.benchmarks.asset_efficiency)
            factors.append(f"Asset efficiency: {asset_efficiency:.2f}x")

        return SubScore(weighted_average(components, self.SCALABILITY_WEIGHTS), components, factors)

    def _operational_flexibility(self, operational: BusinessOperationalData):
        score = 50.0
        factors = []

        rule = first_match(operational.hours_of_operation, FLEXIBILITY_HOURS_RULES)
        if rule is not None:
            score += rule.value
            factors.append(rule.factor)

        if operational.days_open:
            days = len(operational.days_open)
            if days >= 6:
                score += 10
                factors.append('Operates most days of the week')
            elif days <= 4:
                score -= 5
                factors.append('Limited operating days may affect scalability')

        rule = first_match(operational.seasonality, FLEXIBILITY_SEASONALITY_RULES)
        if rule is not None:
            score += rule.value
            factors.append(rule.factor)

        return clamp(score), factors
