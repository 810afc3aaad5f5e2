"""Confidence assessment for health scores.

Confidence expresses how far the dimension scores can be trusted given the
completeness and quality of the inputs and how consistent the scores are
with each other. It is separate from the health scores themselves.
"""

from datetime import date
from typing import List, Mapping, Optional

from business_health.analyzers.benchmarks import (
    BenchmarkTables, ScoringWeights, DEFAULT_BENCHMARKS, DEFAULT_WEIGHTS
)
from business_health.analyzers.normalization import (
    band_descriptor, business_age_years, clamp, format_percent, population_std,
    positive, safe_divide, weighted_average
)
from business_health.models.data_models import (
    BusinessFinancialData, BusinessOperationalData, ConfidenceAssessment
)
from business_health.utils.data_quality import (
    COMPLETENESS_FIELDS, CRITICAL_FIELDS, DataQualityValidator,
    field_completeness, missing_critical_fields
)
from business_health.utils.logging import get_logger

logger = get_logger(__name__)

THIN_MARGIN_THRESHOLD = 0.10
SHORT_DESCRIPTION_LENGTH = 100
LOW_CONFIDENCE_THRESHOLD = 50

# (maximum standard deviation, score, factor), tightest spread first
CONSISTENCY_BANDS = (
    (10, 95, 'Health scores show high consistency across dimensions'),
    (20, 85, 'Health scores show good consistency across dimensions'),
    (30, 70, 'Health scores show moderate variation across dimensions'),
)
CONSISTENCY_WIDE_SCORE = 50

DIMENSION_LABELS = {
    'financial': 'financial',
    'growth': 'growth',
    'operational': 'operational',
    'sale_readiness': 'sale readiness',
}


class ConfidenceAssessor:
    """Assessor of how trustworthy a set of health scores is."""

    def __init__(
        self,
        benchmarks: Optional[BenchmarkTables] = None,
        weights: Optional[ScoringWeights] = None,
        validator: Optional[DataQualityValidator] = None
    ):
        """Initialize the confidence assessor.

        Args:
            benchmarks: Benchmark tables used for outlier detection
            weights: Scoring weights (the ``confidence`` mapping is used)
            validator: Data quality validator. Defaults to a non-strict validator
        """
        self.benchmarks = benchmarks or DEFAULT_BENCHMARKS
        self.weights = weights or DEFAULT_WEIGHTS
        self.validator = validator or DataQualityValidator(benchmarks=self.benchmarks)

    def assess(
        self,
        financial: BusinessFinancialData,
        operational: BusinessOperationalData,
        dimension_scores: Mapping[str, Optional[float]],
        reference_date: Optional[date] = None
    ) -> ConfidenceAssessment:
        """Assess confidence in a set of dimension scores.

        Args:
            financial: Financial facts
            operational: Operational facts
            dimension_scores: Dimension name to score, None for dimensions that
                could not be computed
            reference_date: Date business age is measured at. Defaults to today

        Returns:
            ConfidenceAssessment with factors and data-quality recommendations
        """
        factors: List[str] = []

        completeness = self._completeness(financial, operational, factors)
        quality = self._quality(financial, operational, reference_date, factors)
        consistency = self._consistency(dimension_scores, factors)

        overall = clamp(weighted_average(
            {'completeness': completeness, 'quality': quality, 'consistency': consistency},
            self.weights.confidence
        ))

        factors.append(band_descriptor(overall, {
            90: 'Very high confidence - comprehensive and reliable data',
            75: 'High confidence - good data quality with minor gaps',
            50: 'Medium confidence - adequate data with some limitations',
            0: 'Low confidence - significant data gaps affect reliability',
        }))

        thin_margin = self._thin_margin_factor(financial)
        if thin_margin:
            factors.append(thin_margin)

        assessment = ConfidenceAssessment(
            overall=overall,
            data_completeness=completeness,
            data_quality=quality,
            score_consistency=consistency,
            factors=factors,
            recommendations=self.recommendations(financial, operational, overall)
        )
        logger.debug(
            f"Confidence {overall:.2f} (completeness {completeness:.2f}, "
            f"quality {quality:.2f}, consistency {consistency:.2f})"
        )
        return assessment

    def _completeness(
        self,
        financial: BusinessFinancialData,
        operational: BusinessOperationalData,
        factors: List[str]
    ) -> float:
        ratios = [field_completeness(financial, operational, dimension) for dimension in COMPLETENESS_FIELDS]
        average = sum(ratios) / len(ratios)

        critical_ratios = []
        for dimension, names in CRITICAL_FIELDS.items():
            missing = missing_critical_fields(financial, operational, dimension)
            ratio = (len(names) - len(missing)) / len(names)
            critical_ratios.append(ratio)
            if ratio < 0.5:
                factors.append(f"Critical {DIMENSION_LABELS[dimension]} data gaps may affect accuracy")
        critical = sum(critical_ratios) / len(critical_ratios)

        factors.append(f"Data completeness: {format_percent(average)}")
        factors.append(band_descriptor(average * 100, {
            80: 'Comprehensive data supports reliable scoring',
            60: 'Good data coverage with some optional fields missing',
            40: 'Moderate data coverage affects scoring precision',
            0: 'Limited data availability impacts score reliability',
        }))

        return clamp((average * 0.7 + critical * 0.3) * 100)

    def _quality(
        self,
        financial: BusinessFinancialData,
        operational: BusinessOperationalData,
        reference_date: Optional[date],
        factors: List[str]
    ) -> float:
        score = 85.0

        issues = self.validator.check_consistency(financial, operational)
        if issues:
            score -= min(len(issues) * 40, 80)
            factors.append(f"Data consistency issues detected: {len(issues)}")
            for issue in issues[:2]:
                factors.append(f"• {issue.replace('_', ' ')}")

            if any('profit' in issue or 'margin' in issue for issue in issues):
                score -= 30
                factors.append('• Critical financial inconsistencies detected')

            if len(issues) >= 3:
                score -= 15
                factors.append('• Multiple severe data inconsistencies found')
        else:
            factors.append('Data consistency validated successfully')

        outliers = self.validator.detect_outliers(financial, operational)
        if outliers:
            score -= min(len(outliers) * 10, 25)
            factors.append(f"Statistical outliers detected: {len(outliers)}")

        age_score = self._age_plausibility(operational, reference_date, factors)
        return clamp((score + age_score) / 2)

    @staticmethod
    def _age_plausibility(
        operational: BusinessOperationalData,
        reference_date: Optional[date],
        factors: List[str]
    ) -> float:
        age = business_age_years(operational.established, reference_date)
        if age is None:
            factors.append('Business establishment date missing')
            return 50.0
        if age < 0:
            factors.append('Business establishment date appears to be in the future')
            return 20.0
        if age > 100:
            factors.append('Business establishment date appears unusually old')
            return 30.0
        if age < 0.25:
            factors.append('Very new business - limited historical data expected')
            return 75.0
        factors.append('Business age aligns with expected data availability')
        return 90.0

    @staticmethod
    def _consistency(dimension_scores: Mapping[str, Optional[float]], factors: List[str]) -> float:
        available = [score for score in dimension_scores.values() if score is not None]

        if not available:
            factors.append('No health scores available for consistency check')
            return 50.0
        if len(available) == 1:
            factors.append('Limited scores available for consistency assessment')
            return 70.0

        spread = population_std(available)
        for upper, score, factor in CONSISTENCY_BANDS:
            if spread <= upper:
                factors.append(factor)
                return float(score)

        factors.append('Health scores show significant variation - review individual dimensions')
        return float(CONSISTENCY_WIDE_SCORE)

    @staticmethod
    def _thin_margin_factor(financial: BusinessFinancialData) -> Optional[str]:
        net_margin = financial.net_margin
        if net_margin is None and positive(financial.revenue):
            net_margin = safe_divide(financial.profit, financial.revenue)
        if net_margin is None or net_margin >= THIN_MARGIN_THRESHOLD:
            return None
        if net_margin < 0:
            return (
                f"Net loss of {format_percent(-net_margin)} of revenue leaves no buffer "
                "against cost increases or revenue dips"
            )
        return (
            f"Thin net margin of {format_percent(net_margin)} leaves little buffer "
            "against cost increases or revenue dips"
        )

    def recommendations(
        self,
        financial: BusinessFinancialData,
        operational: BusinessOperationalData,
        confidence: float
    ) -> List[str]:
        """Data-quality recommendations for improving score reliability.

        Args:
            financial: Financial facts
            operational: Operational facts
            confidence: Overall confidence score

        Returns:
            List of recommendation strings
        """
        advice = []

        if confidence < LOW_CONFIDENCE_THRESHOLD:
            advice.append('Consider providing additional financial and operational data to improve score reliability')

        missing_financial = missing_critical_fields(financial, operational, 'financial')
        if missing_financial:
            advice.append(f"Provide missing critical financial data: {', '.join(missing_financial)}")

        missing_operational = missing_critical_fields(financial, operational, 'operational')
        if missing_operational:
            advice.append(f"Provide missing operational information: {', '.join(missing_operational)}")

        if self.validator.check_consistency(financial, operational):
            advice.append('Review and correct financial data inconsistencies to improve accuracy')

        if not operational.description or len(operational.description) < SHORT_DESCRIPTION_LENGTH:
            advice.append('Provide a detailed business description to enhance sale readiness scoring')

        return advice
