"""Sale-readiness scorer.

Scores valuation reasonableness, market attractiveness and documentation
quality. All three parts always produce a score, so the dimension weights
are applied as-is.
"""

from datetime import date
from typing import List, Optional, Tuple

from business_health.analyzers.benchmarks import (
    BenchmarkTables, ScoringWeights, DEFAULT_BENCHMARKS, DEFAULT_WEIGHTS
)
from business_health.analyzers.normalization import (
    SubScore, assemble_breakdown, band_descriptor, clamp, format_percent,
    positive, weighted_average
)
from business_health.analyzers.text_rules import (
    DESCRIPTION_LANGUAGE_RULES, PRESENTATION_RULES, apply_cumulative, count_sentences
)
from business_health.models.data_models import (
    BusinessFinancialData, BusinessOperationalData, ScoreBreakdown
)
from business_health.utils.data_quality import DISCLOSURE_FIELDS, field_completeness
from business_health.utils.logging import get_logger

logger = get_logger(__name__)

VALUATION_DEFAULT_SCORE = 30.0

# (maximum multiple / benchmark ratio, score), cheapest first
MULTIPLE_BANDS = ((0.8, 95), (1.0, 85), (1.2, 70), (1.5, 50), (2.0, 30))
MULTIPLE_ABOVE_BANDS_SCORE = 10


def multiple_score(actual: float, benchmark: float) -> float:
    """Score an asking-price multiple relative to the category benchmark."""
    ratio = actual / benchmark
    for upper, score in MULTIPLE_BANDS:
        if ratio <= upper:
            return float(score)
    return float(MULTIPLE_ABOVE_BANDS_SCORE)


class SaleReadinessScorer:
    """Scorer for the sale-readiness dimension."""

    VALUATION_WEIGHTS = {'revenue_multiple': 0.5, 'ebitda_multiple': 0.3, 'sde_multiple': 0.2}
    ATTRACTIVENESS_WEIGHTS = {
        'category_attractiveness': 0.4, 'presentation_quality': 0.35, 'financial_transparency': 0.25
    }
    DOCUMENTATION_WEIGHTS = {
        'financial_completeness': 0.5, 'operational_completeness': 0.3, 'description_quality': 0.2
    }

    RECOMMENDATIONS = {
        'valuation_reasonableness': 'Consider adjusting asking price to align with market valuations',
        'market_attractiveness': 'Enhance business presentation and competitive positioning',
        'documentation_quality': 'Improve business documentation and financial disclosure',
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
        """Score the sale-readiness dimension.

        Args:
            financial: Financial facts
            operational: Operational facts
            reference_date: Unused; accepted for a uniform scorer interface

        Returns:
            Sale-readiness ScoreBreakdown
        """
        sub_scores = {
            'valuation_reasonableness': self._valuation(financial, operational),
            'market_attractiveness': self._market_attractiveness(financial, operational),
            'documentation_quality': self._documentation(financial, operational),
        }
        breakdown = assemble_breakdown(sub_scores, self.weights.sale_readiness, self.RECOMMENDATIONS)
        logger.debug(f"Sale readiness score {breakdown.score:.2f}")
        return breakdown

    def _valuation(self, financial: BusinessFinancialData, operational: BusinessOperationalData) -> SubScore:
        if not positive(financial.asking_price) or not positive(financial.revenue):
            return SubScore(
                VALUATION_DEFAULT_SCORE,
                {},
                ['Valuation analysis limited due to missing asking price or revenue data']
            )

        multiples = self.benchmarks.valuation_for(operational.business_category)
        components = {}
        factors = []

        for name, label, denominator, benchmark in (
            ('revenue_multiple', 'Revenue', financial.revenue, multiples.revenue),
            ('ebitda_multiple', 'EBITDA', financial.ebitda, multiples.ebitda),
            ('sde_multiple', 'SDE/Profit', financial.profit, multiples.sde),
        ):
            if not positive(denominator) or benchmark <= 0:
                continue
            actual = financial.asking_price / denominator
            components[name] = multiple_score(actual, benchmark)
            factors.append(f"{label} multiple: {actual:.1f}x (market benchmark: {benchmark:.1f}x)")

        score = weighted_average(components, self.VALUATION_WEIGHTS)
        if score is None:
            score = VALUATION_DEFAULT_SCORE

        factors.append(band_descriptor(score, {
            80: 'Asking price appears reasonable for market conditions',
            60: 'Asking price is moderately aligned with market valuations',
            40: 'Asking price may be above typical market multiples',
            0: 'Asking price appears significantly above market valuations',
        }))
        return SubScore(clamp(score), components, factors)

    def _market_attractiveness(
        self,
        financial: BusinessFinancialData,
        operational: BusinessOperationalData
    ) -> SubScore:
        components = {}
        factors = []

        outlook = self.benchmarks.attractiveness_for(operational.business_category)
        components['category_attractiveness'] = outlook.score
        factors.append(outlook.note)

        presentation, presentation_factors = self._presentation(operational.description)
        components['presentation_quality'] = presentation
        factors.extend(presentation_factors)

        transparency, transparency_factors = self._financial_transparency(financial)
        components['financial_transparency'] = transparency
        factors.extend(transparency_factors)

        return SubScore(weighted_average(components, self.ATTRACTIVENESS_WEIGHTS), components, factors)

    def _presentation(self, description: Optional[str]) -> Tuple[float, List[str]]:
        if not description:
            return 20.0, ['Business description missing - reduces buyer appeal']

        factors = []
        score = 40.0
        if len(description) >= 500:
            score += 20
            factors.append('Comprehensive business description')
        elif len(description) >= 200:
            score += 10
            factors.append('Adequate business description')
        else:
            score -= 10
            factors.append('Brief description may need expansion')

        score, matched = apply_cumulative(description, PRESENTATION_RULES, base=score)
        factors.extend(matched)
        return score, factors

    def _financial_transparency(self, financial: BusinessFinancialData) -> Tuple[float, List[str]]:
        factors = []
        present = sum(1 for name in DISCLOSURE_FIELDS if getattr(financial, name) is not None)
        completeness = present / len(DISCLOSURE_FIELDS)
        score = 30 + completeness * 60

        factors.append(band_descriptor(completeness * 100, {
            80: 'Excellent financial transparency builds buyer confidence',
            60: 'Good financial disclosure supports due diligence',
            40: 'Moderate financial disclosure, additional details would help',
            0: 'Limited financial disclosure may concern potential buyers',
        }))

        if all(getattr(financial, name) is not None for name in ('revenue', 'profit', 'cash_flow')):
            score += 10
            factors.append('Core financial metrics (revenue, profit, cash flow) all disclosed')

        return clamp(score), factors

    def _documentation(self, financial: BusinessFinancialData, operational: BusinessOperationalData) -> SubScore:
        factors = []
        financial_completeness = field_completeness(financial, operational, 'financial')
        operational_completeness = field_completeness(financial, operational, 'operational')
        description_quality, description_factors = self._description_quality(operational.description)

        components = {
            'financial_completeness': financial_completeness * 100,
            'operational_completeness': operational_completeness * 100,
            'description_quality': description_quality,
        }
        factors.append(f"Financial data completeness: {format_percent(financial_completeness)}")
        factors.append(f"Operational data completeness: {format_percent(operational_completeness)}")
        factors.extend(description_factors)

        score = clamp(weighted_average(components, self.DOCUMENTATION_WEIGHTS))
        factors.append(band_descriptor(score, {
            80: 'Comprehensive documentation enhances buyer confidence',
            60: 'Good documentation with room for improvement',
            40: 'Documentation needs enhancement for buyer appeal',
            0: 'Significant documentation gaps may deter buyers',
        }))
        return SubScore(score, components, factors)

    def _description_quality(self, description: Optional[str]) -> Tuple[float, List[str]]:
        if not description:
            return 20.0, ['Business description missing']

        factors = []
        score = 40.0
        length = len(description)
        if length >= 800:
            score += 25
            factors.append('Detailed business description')
        elif length >= 400:
            score += 15
            factors.append('Good business description length')
        elif length >= 150:
            score += 5
            factors.append('Basic business description provided')
        else:
            score -= 10
            factors.append('Description too brief for buyer evaluation')

        if count_sentences(description) >= 5:
            score += 15
            factors.append('Well-structured description with multiple key points')

        score, matched = apply_cumulative(description, DESCRIPTION_LANGUAGE_RULES, base=score)
        factors.extend(matched)
        return score, factors
