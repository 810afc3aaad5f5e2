"""Business health scoring engine.

Scores a business across financial, growth, operational and sale-readiness
dimensions against industry benchmarks, with a confidence assessment and a
health trajectory.
"""

from .engine import (
    HealthScoringEngine,
    calculate_health_scores,
    generate_health_insights,
    prepare_metric_record
)
from .batch import BatchScoringReport, score_businesses, metric_records_to_dataframe
from .analyzers.benchmarks import BenchmarkTables, ScoringWeights
from .models.data_models import (
    BusinessFinancialData,
    BusinessOperationalData,
    HealthCalculationResult,
    HealthInsights,
    HealthTrajectory,
    BusinessCategory
)
from .utils.exceptions import HealthScoringError, CalculationError
from .utils.logging import setup_logging

__version__ = '1.0.0'

__all__ = [
    'HealthScoringEngine',
    'calculate_health_scores',
    'generate_health_insights',
    'prepare_metric_record',
    'BatchScoringReport',
    'score_businesses',
    'metric_records_to_dataframe',
    'BenchmarkTables',
    'ScoringWeights',
    'BusinessFinancialData',
    'BusinessOperationalData',
    'HealthCalculationResult',
    'HealthInsights',
    'HealthTrajectory',
    'BusinessCategory',
    'HealthScoringError',
    'CalculationError',
    'setup_logging'
]
