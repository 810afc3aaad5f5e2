"""Financial health scorer.

Scores profitability, liquidity and efficiency against category benchmarks.
Each ratio is computed only when its inputs are present and its denominator
is positive; missing ratios drop out of the weighting.
"""

from datetime import date
from typing import Optional

from business_health.analyzers.benchmarks import (
    BenchmarkTables, ScoringWeights, DEFAULT_BENCHMARKS, DEFAULT_WEIGHTS
)
from business_health.analyzers.normalization import (
    SubScore, assemble_breakdown, band_descriptor, format_percent,
    normalize_to_score, positive, safe_divide, weighted_average
)
from business_health.models.data_models import (
    BusinessFinancialData, BusinessOperationalData, ScoreBreakdown
)
from business_health.utils.logging import get_logger

logger = get_logger(__name__)


class FinancialScorer:
    """Scorer for the financial health dimension."""

    PROFITABILITY_WEIGHTS = {'gross_margin': 0.4, 'net_margin': 0.3, 'ebitda_margin': 0.3}
    LIQUIDITY_WEIGHTS = {'cash_flow_ratio': 0.6, 'working_capital': 0.4}
    EFFICIENCY_WEIGHTS = {'revenue_per_employee': 0.5, 'asset_turnover': 0.5}

    RECOMMENDATIONS = {
        'profitability': 'Focus on improving profit margins through cost management or pricing optimization',
        'liquidity': 'Improve cash flow management and working capital efficiency',
        'efficiency': 'Optimize operational efficiency and asset utilization',
    }

    def __init__(self, benchmarks: Optional[BenchmarkTables] = None, weights: Optional[ScoringWeights] = None):
        """Initialize the financial scorer.

        Args:
            benchmarks: Benchmark tables. Defaults to the built-in tables
            weights: Scoring weights. Defaults to the built-in weights
        """
        self.benchmarks = benchmarks or DEFAULT_BENCHMARKS
        self.weights = weights or DEFAULT_WEIGHTS

    def score(
        self,
        financial: BusinessFinancialData,
        operational: BusinessOperationalData,
        reference_date: Optional[date] = None
    ) -> ScoreBreakdown:
        """Score the financial dimension.

        Args:
            financial: Financial facts
            operational: Operational facts (category and employees are used)
            reference_date: Unused; accepted for a uniform scorer interface

        Returns:
            Financial ScoreBreakdown, unavailable when no ratio could be computed
        """
        category = operational.business_category
        sub_scores = {
            'profitability': self._profitability(financial, category),
            'liquidity': self._liquidity(financial),
            'efficiency': self._efficiency(financial, operational, category),
        }
        breakdown = assemble_breakdown(sub_scores, self.weights.financial, self.RECOMMENDATIONS)
        logger.debug(f"Financial score {breakdown.score:.2f} (available={breakdown.available})")
        return breakdown

    def _profitability(self, financial: BusinessFinancialData, category) -> SubScore:
        components = {}
        factors = []

        if financial.gross_margin is not None:
            components['gross_margin'] = normalize_to_score(
                financial.gross_margin, self.benchmarks.thresholds_for('gross_margin', category)
            )
            factors.append(f"Gross margin: {format_percent(financial.gross_margin)}")

        net_margin = financial.net_margin
        if net_margin is None and positive(financial.revenue):
            net_margin = safe_divide(financial.profit, financial.revenue)
        if net_margin is not None:
            components['net_margin'] = normalize_to_score(
                net_margin, self.benchmarks.thresholds_for('net_margin', category)
            )
            factors.append(f"Net margin: {format_percent(net_margin)}")

        ebitda_margin = safe_divide(financial.ebitda, financial.revenue) if positive(financial.revenue) else None
        if ebitda_margin is not None:
            components['ebitda_margin'] = normalize_to_score(
                ebitda_margin, self.benchmarks.thresholds_for('ebitda_margin', category)
            )
            factors.append(f"EBITDA margin: {format_percent(ebitda_margin)}")

        score = weighted_average(components, self.PROFITABILITY_WEIGHTS)
        if score is None:
            factors.append('Profitability not assessed: no margin data')
        else:
            factors.append(band_descriptor(score, {
                75: 'Strong profitability across metrics',
                50: 'Moderate profitability performance',
                25: 'Below-average profitability concerns',
                0: 'Significant profitability challenges',
            }))
        return SubScore(score, components, factors)

    def _liquidity(self, financial: BusinessFinancialData) -> SubScore:
        components = {}
        factors = []
        revenue = financial.revenue if positive(financial.revenue) else None

        cash_flow_ratio = safe_divide(financial.cash_flow, revenue)
        if cash_flow_ratio is not None:
            components['cash_flow_ratio'] = normalize_to_score(cash_flow_ratio, self.benchmarks.cash_flow_ratio)
            factors.append(f"Cash flow ratio: {format_percent(cash_flow_ratio)}")

        if financial.total_assets is not None and financial.liabilities is not None:
            working_capital_ratio = safe_divide(financial.total_assets - financial.liabilities, revenue)
            if working_capital_ratio is not None:
                components['working_capital'] = normalize_to_score(
                    working_capital_ratio, self.benchmarks.working_capital_ratio
                )
                factors.append(f"Working capital ratio: {format_percent(working_capital_ratio)}")

        score = weighted_average(components, self.LIQUIDITY_WEIGHTS)
        if score is None:
            factors.append('Liquidity not assessed: cash flow or balance sheet data missing')
        else:
            factors.append(band_descriptor(score, {
                75: 'Strong liquidity position',
                50: 'Adequate liquidity management',
                25: 'Liquidity concerns present',
                0: 'Significant liquidity challenges',
            }))
        return SubScore(score, components, factors)

    def _efficiency(self, financial: BusinessFinancialData, operational: BusinessOperationalData, category) -> SubScore:
        components = {}
        factors = []

        if positive(financial.revenue) and positive(operational.employees):
            revenue_per_employee_k = financial.revenue / operational.employees / 1000
            components['revenue_per_employee'] = normalize_to_score(
                revenue_per_employee_k, self.benchmarks.thresholds_for('employee_efficiency', category)
            )
            factors.append(f"Revenue per employee: ${round(revenue_per_employee_k)}K")

        if positive(financial.revenue) and positive(financial.total_assets):
            asset_turnover = financial.revenue / financial.total_assets
            components['asset_turnover'] = normalize_to_score(asset_turnover, self.benchmarks.asset_turnover)
            factors.append(f"Asset turnover: {asset_turnover:.2f}x")

        score = weighted_average(components, self.EFFICIENCY_WEIGHTS)
        if score is None:
            factors.append('Efficiency not assessed: revenue, staffing or asset data missing')
        else:
            factors.append(band_descriptor(score, {
                75: 'Highly efficient operations',
                50: 'Moderate operational efficiency',
                25: 'Efficiency improvements needed',
                0: 'Significant efficiency challenges',
            }))
        return SubScore(score, components, factors)
