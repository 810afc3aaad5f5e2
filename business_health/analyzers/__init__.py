"""Analyzers package for business health scoring."""

from .benchmarks import BenchmarkTables, ScoringWeights, DEFAULT_BENCHMARKS, DEFAULT_WEIGHTS
from .normalization import normalize_to_score
from .financial_scorer import FinancialScorer
from .growth_scorer import GrowthScorer
from .operational_scorer import OperationalScorer
from .sale_readiness_scorer import SaleReadinessScorer
from .confidence_assessor import ConfidenceAssessor
from .trajectory import classify_trajectory

__all__ = [
    'BenchmarkTables',
    'ScoringWeights',
    'DEFAULT_BENCHMARKS',
    'DEFAULT_WEIGHTS',
    'normalize_to_score',
    'FinancialScorer',
    'GrowthScorer',
    'OperationalScorer',
    'SaleReadinessScorer',
    'ConfidenceAssessor',
    'classify_trajectory'
]
