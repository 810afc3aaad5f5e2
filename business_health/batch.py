"""Parallel scoring of many businesses.

Each calculation is independent and reads only its own snapshot, so a batch
is spread over a thread pool with no coordination between workers.
"""

import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

import pandas as pd

from business_health.engine import HealthScoringEngine, get_default_engine
from business_health.models.data_models import HealthCalculationResult
from business_health.utils.config import config
from business_health.utils.exceptions import CalculationError
from business_health.utils.logging import get_logger
from business_health.utils.snapshot import business_identifier

logger = get_logger(__name__)


@dataclass
class BatchScoringReport:
    """Outcome of scoring a batch of businesses.

    ``results`` is aligned with the input order and holds None for every
    business whose calculation failed; the failures are in ``errors``.
    """
    results: List[Optional[HealthCalculationResult]] = field(default_factory=list)
    errors: Dict[int, CalculationError] = field(default_factory=dict)
    execution_time: float = 0.0

    @property
    def successful(self) -> List[HealthCalculationResult]:
        return [result for result in self.results if result is not None]

    @property
    def success_rate(self) -> float:
        if not self.results:
            return 0.0
        return len(self.successful) / len(self.results)


def score_businesses(
    snapshots: Iterable[Any],
    max_workers: Optional[int] = None,
    continue_on_error: Optional[bool] = None,
    reference_date: Optional[date] = None,
    engine: Optional[HealthScoringEngine] = None
) -> BatchScoringReport:
    """Score many business snapshots concurrently.

    Args:
        snapshots: Business snapshots (mappings or attribute objects)
        max_workers: Worker threads. Defaults to ``business_health.batch.max_workers``
        continue_on_error: Collect failures instead of raising on the first one.
            Defaults to ``business_health.batch.continue_on_error``
        reference_date: Date business age is measured at. Defaults to today
        engine: Engine to score with. Defaults to the shared engine

    Returns:
        BatchScoringReport with results in input order

    Raises:
        CalculationError: On the first failure when continue_on_error is False
    """
    items = list(snapshots)
    engine = engine or get_default_engine()
    max_workers = max_workers or config.get('business_health.batch.max_workers', 4)
    if continue_on_error is None:
        continue_on_error = config.get('business_health.batch.continue_on_error', True)
    report = BatchScoringReport(results=[None] * len(items))

    if not items:
        return report

    logger.info(f"Starting batch scoring for {len(items)} businesses with {max_workers} workers")
    start_time = time.time()

    with ThreadPoolExecutor(max_workers=max_workers) as executor:
        future_to_index = {
            executor.submit(engine.calculate_health_scores, item, reference_date): i
            for i, item in enumerate(items)
        }

        for future in as_completed(future_to_index):
            index = future_to_index[future]
            try:
                report.results[index] = future.result()
            except CalculationError as e:
                logger.error(f"Failed to score {business_identifier(items[index])}: {str(e)}")
                if not continue_on_error:
                    for pending in future_to_index:
                        pending.cancel()
                    raise
                report.errors[index] = e

    report.execution_time = time.time() - start_time
    logger.info(
        f"Batch scoring completed: {len(report.successful)}/{len(items)} successful "
        f"in {report.execution_time:.2f}s"
    )
    return report


def metric_records_to_dataframe(records: Iterable[Dict[str, Any]]) -> pd.DataFrame:
    """Flatten metric records into a DataFrame with one row per business.

    Nested ``data_sources`` and ``calculation_metadata`` are dropped except
    for the data and algorithm versions.

    Args:
        records: Records produced by ``prepare_metric_record``

    Returns:
        DataFrame indexed by business_id
    """
    rows = []
    for record in records:
        row = {
            key: value for key, value in record.items()
            if key not in ('data_sources', 'calculation_metadata')
        }
        row['data_version'] = record.get('data_sources', {}).get('version')
        row['algorithm_version'] = record.get('calculation_metadata', {}).get('algorithm_version')
        rows.append(row)

    columns = [
        'business_id', 'overall_score', 'financial_score', 'growth_score', 'operational_score',
        'sale_readiness_score', 'confidence_level', 'trajectory', 'calculated_at',
        'data_version', 'algorithm_version'
    ]
    df = pd.DataFrame(rows, columns=columns)
    return df.set_index('business_id')
