"""Health scoring orchestrator.

This module ties the scorers, the confidence assessor and the trajectory
classifier together into one synchronous calculation, and provides the
insight generator and the persistence-shaping helper used by callers.
"""

import math
from datetime import date, datetime, timezone
from typing import Any, Dict, List, Optional

from business_health.analyzers.benchmarks import (
    BenchmarkTables, ScoringWeights, DEFAULT_BENCHMARKS, DEFAULT_WEIGHTS, load_configured_benchmarks
)
from business_health.analyzers.confidence_assessor import ConfidenceAssessor
from business_health.analyzers.financial_scorer import FinancialScorer
from business_health.analyzers.growth_scorer import GrowthScorer
from business_health.analyzers.normalization import clamp, weighted_average
from business_health.analyzers.operational_scorer import OperationalScorer
from business_health.analyzers.sale_readiness_scorer import SaleReadinessScorer
from business_health.analyzers.trajectory import classify_trajectory
from business_health.models.data_models import (
    DIMENSIONS, BusinessFinancialData, BusinessOperationalData, CalculationMetadata,
    HealthCalculationResult, HealthInsights, HealthScores, ScoreBreakdown, dedupe
)
from business_health.utils.config import config
from business_health.utils.data_quality import DataQualityValidator
from business_health.utils.exceptions import CalculationError
from business_health.utils.logging import get_logger, get_operation_logger
from business_health.utils.snapshot import business_identifier, snapshot_to_inputs

logger = get_logger(__name__)

MAX_RECOMMENDATIONS = 8
STRENGTH_THRESHOLD = 70
WEAKNESS_THRESHOLD = 50

SUMMARY_BANDS = (
    (80, 'Excellent business health with a score of {score}/100. '
         'This business demonstrates strong performance across multiple dimensions.'),
    (60, 'Good business health with a score of {score}/100. '
         'The business shows solid fundamentals with opportunities for improvement.'),
    (40, 'Moderate business health with a score of {score}/100. '
         'Several areas need attention to strengthen overall performance.'),
    (0, 'Business health concerns with a score of {score}/100. '
        'Significant improvements needed across multiple areas.'),
)

STRENGTH_TEXT = {
    'financial': 'Strong financial performance ({score}/100)',
    'growth': 'Excellent growth potential ({score}/100)',
    'operational': 'Solid operational foundation ({score}/100)',
    'sale_readiness': 'Well-prepared for sale ({score}/100)',
}

WEAKNESS_TEXT = {
    'financial': 'Financial health needs improvement ({score}/100)',
    'growth': 'Growth potential limited ({score}/100)',
    'operational': 'Operational efficiency concerns ({score}/100)',
    'sale_readiness': 'Sale readiness requires attention ({score}/100)',
}

DIMENSION_NAMES = {
    'financial': 'Financial health',
    'growth': 'Growth potential',
    'operational': 'Operational health',
    'sale_readiness': 'Sale readiness',
}


def round_score(value: float) -> int:
    """Round half up to an integer score."""
    return int(math.floor(value + 0.5))


class HealthScoringEngine:
    """Engine that computes health scores for one business at a time.

    The engine holds only immutable configuration (benchmarks and weights),
    so one instance can be shared between threads.
    """

    def __init__(
        self,
        benchmarks: Optional[BenchmarkTables] = None,
        weights: Optional[ScoringWeights] = None,
        data_version: Optional[str] = None
    ):
        """Initialize the scoring engine.

        Args:
            benchmarks: Benchmark tables. Defaults to the built-in tables
            weights: Scoring weights. Defaults to the built-in weights
            data_version: Data version recorded in result metadata. Defaults to
                ``business_health.scoring.data_version`` from configuration
        """
        self.benchmarks = benchmarks or DEFAULT_BENCHMARKS
        self.weights = weights or DEFAULT_WEIGHTS
        self.weights.validate()
        self.data_version = data_version or config.get('business_health.scoring.data_version', '1.0.0')

        self.scorers = {
            'financial': FinancialScorer(self.benchmarks, self.weights),
            'growth': GrowthScorer(self.benchmarks, self.weights),
            'operational': OperationalScorer(self.benchmarks, self.weights),
            'sale_readiness': SaleReadinessScorer(self.benchmarks, self.weights),
        }
        self.validator = DataQualityValidator(benchmarks=self.benchmarks)
        self.confidence_assessor = ConfidenceAssessor(self.benchmarks, self.weights, self.validator)

    def calculate_health_scores(self, business: Any, reference_date: Optional[date] = None) -> HealthCalculationResult:
        """Calculate health scores for a business snapshot.

        Args:
            business: Mapping or attribute object describing the business
            reference_date: Date business age is measured at. Defaults to today

        Returns:
            HealthCalculationResult

        Raises:
            CalculationError: If the calculation fails for any reason
        """
        subject = 'unknown'
        op_logger = get_operation_logger(__name__, 'calculate_health_scores')
        try:
            subject = business_identifier(business)
            op_logger.start(business=subject)
            financial, operational = snapshot_to_inputs(business)
            result = self._calculate(subject, financial, operational, reference_date)
        except Exception as e:
            op_logger.finish(success=False, error=str(e))
            logger.error(f"Health calculation failed for {subject}: {str(e)}", extra={'business': subject})
            if isinstance(e, CalculationError):
                raise
            raise CalculationError(
                'Health calculation failed due to unexpected error',
                business_id=subject,
                calculation_type='health_scores',
                original_exception=e
            )

        op_logger.finish(success=True, overall=result.scores.overall)
        return result

    def calculate_from_data(
        self,
        financial: BusinessFinancialData,
        operational: BusinessOperationalData,
        reference_date: Optional[date] = None,
        subject: str = 'unknown'
    ) -> HealthCalculationResult:
        """Calculate health scores from already-converted inputs.

        Args:
            financial: Financial facts
            operational: Operational facts
            reference_date: Date business age is measured at. Defaults to today
            subject: Identifier used in log records

        Returns:
            HealthCalculationResult

        Raises:
            CalculationError: If the calculation fails for any reason
        """
        try:
            financial.validate()
            operational.validate()
            return self._calculate(subject, financial, operational, reference_date)
        except CalculationError:
            raise
        except Exception as e:
            logger.error(f"Health calculation failed for {subject}: {str(e)}", extra={'business': subject})
            raise CalculationError(
                'Health calculation failed due to unexpected error',
                business_id=subject,
                calculation_type='health_scores',
                original_exception=e
            )

    def _calculate(
        self,
        subject: str,
        financial: BusinessFinancialData,
        operational: BusinessOperationalData,
        reference_date: Optional[date]
    ) -> HealthCalculationResult:
        reference = reference_date or date.today()

        self.validator.validate_business(subject, financial, operational)

        breakdown: Dict[str, ScoreBreakdown] = {}
        for name in DIMENSIONS:
            breakdown[name] = self.scorers[name].score(financial, operational, reference)

        available = {
            name: part.score if part.available else None
            for name, part in breakdown.items()
        }
        overall = weighted_average(available, self.weights.overall)
        if overall is None:
            overall = 0.0

        dimension_scores = {name: clamp(part.score) for name, part in breakdown.items()}
        confidence = self.confidence_assessor.assess(financial, operational, available, reference)
        trajectory = classify_trajectory(financial.yearly_growth, {
            name: dimension_scores[name] if available[name] is not None else None
            for name in DIMENSIONS
        })

        scores = HealthScores(
            overall=clamp(overall),
            financial=dimension_scores['financial'],
            growth=dimension_scores['growth'],
            operational=dimension_scores['operational'],
            sale_readiness=dimension_scores['sale_readiness'],
            confidence=clamp(confidence.overall),
            trajectory=trajectory
        )

        result = HealthCalculationResult(
            scores=scores,
            breakdown=breakdown,
            confidence=confidence,
            metadata=CalculationMetadata(
                calculated_at=datetime.now(timezone.utc),
                data_version=self.data_version,
                reference_date=reference
            )
        )
        result.validate()

        unavailable = [name for name, score in available.items() if score is None]
        logger.info(
            f"Calculated health for {subject}: overall {scores.overall:.1f}, "
            f"confidence {scores.confidence:.1f}, trajectory {trajectory.value}",
            extra={'business': subject, 'unavailable_dimensions': unavailable}
        )
        return result

    def generate_health_insights(self, result: HealthCalculationResult) -> HealthInsights:
        """Summarize a calculation result in plain language.

        Args:
            result: Calculation result

        Returns:
            HealthInsights with summary, strengths, weaknesses and up to eight
            recommendations
        """
        scores = result.scores
        overall = round_score(scores.overall)

        summary = ''
        for lower, template in SUMMARY_BANDS:
            if scores.overall >= lower:
                summary = template.format(score=overall)
                break

        strengths: List[str] = []
        weaknesses: List[str] = []
        for name, value in scores.dimension_scores().items():
            part = result.breakdown.get(name)
            if part is not None and not part.available:
                weaknesses.append(f"{DIMENSION_NAMES[name]} could not be assessed from the data provided")
                continue
            if value >= STRENGTH_THRESHOLD:
                strengths.append(STRENGTH_TEXT[name].format(score=round_score(value)))
            elif value < WEAKNESS_THRESHOLD:
                weaknesses.append(WEAKNESS_TEXT[name].format(score=round_score(value)))

        recommendations: List[str] = []
        for name in DIMENSIONS:
            if name in result.breakdown:
                recommendations.extend(result.breakdown[name].recommendations)
        recommendations.extend(result.confidence.recommendations)

        return HealthInsights(
            summary=summary,
            key_strengths=strengths,
            key_weaknesses=weaknesses,
            recommendations=dedupe(recommendations)[:MAX_RECOMMENDATIONS]
        )

    @staticmethod
    def prepare_metric_record(business_id: str, result: HealthCalculationResult) -> Dict[str, Any]:
        """Shape a result into a flat record for a metrics store.

        Args:
            business_id: Identifier of the scored business
            result: Calculation result

        Returns:
            Dictionary with integer scores, trajectory name, timestamp, data
            sources and the breakdown and confidence as plain data
        """
        scores = result.scores
        return {
            'business_id': business_id,
            'overall_score': round_score(scores.overall),
            'growth_score': round_score(scores.growth),
            'operational_score': round_score(scores.operational),
            'financial_score': round_score(scores.financial),
            'sale_readiness_score': round_score(scores.sale_readiness),
            'confidence_level': round_score(scores.confidence),
            'trajectory': scores.trajectory.value,
            'calculated_at': result.metadata.calculated_at,
            'data_sources': {
                'manual': True,
                'version': result.metadata.data_version,
            },
            'calculation_metadata': {
                'algorithm_version': result.metadata.algorithm_version,
                'breakdown': {name: part.to_dict() for name, part in result.breakdown.items()},
                'confidence': result.confidence.to_dict(),
            },
        }


_default_engine: Optional[HealthScoringEngine] = None


def get_default_engine() -> HealthScoringEngine:
    """Get the shared engine built from the configured benchmarks."""
    global _default_engine
    if _default_engine is None:
        _default_engine = HealthScoringEngine(benchmarks=load_configured_benchmarks())
    return _default_engine


def calculate_health_scores(business: Any, reference_date: Optional[date] = None) -> HealthCalculationResult:
    """Calculate health scores with the default engine."""
    return get_default_engine().calculate_health_scores(business, reference_date)


def generate_health_insights(result: HealthCalculationResult) -> HealthInsights:
    return get_default_engine().generate_health_insights(result)


def prepare_metric_record(business_id: str, result: HealthCalculationResult) -> Dict[str, Any]:
    return HealthScoringEngine.prepare_metric_record(business_id, result)
