"""Tests for the financial scorer."""

import math

import pytest

from business_health.analyzers.benchmarks import BenchmarkTables
from business_health.analyzers.financial_scorer import FinancialScorer
from business_health.models.data_models import BusinessFinancialData, BusinessOperationalData
from business_health.utils.snapshot import snapshot_to_inputs


class TestFinancialScorer:
    """Test cases for FinancialScorer."""

    def setup_method(self):
        self.scorer = FinancialScorer()
        self.tech = BusinessOperationalData(category='TECHNOLOGY')

    def test_gross_margin_only(self):
        breakdown = self.scorer.score(BusinessFinancialData(gross_margin=0.68), self.tech)

        assert breakdown.available is True
        assert breakdown.score == pytest.approx(63.333, abs=0.01)
        assert breakdown.components['gross_margin'] == pytest.approx(63.333, abs=0.01)
        assert 'liquidity' not in breakdown.components
        assert 'Liquidity not assessed: cash flow or balance sheet data missing' in breakdown.factors

    def test_no_financial_data_is_unavailable(self):
        breakdown = self.scorer.score(BusinessFinancialData(), self.tech)

        assert breakdown.available is False
        assert breakdown.score == 0.0
        assert 'Profitability not assessed: no margin data' in breakdown.factors

    def test_zero_profit_is_not_missing(self):
        breakdown = self.scorer.score(BusinessFinancialData(revenue=100000, profit=0), self.tech)

        assert breakdown.available is True
        assert breakdown.components['net_margin'] == 0.0
        assert breakdown.score == 0.0
        assert FinancialScorer.RECOMMENDATIONS['profitability'] in breakdown.recommendations

    def test_explicit_net_margin_wins_over_profit(self):
        explicit = self.scorer.score(BusinessFinancialData(revenue=100000, profit=0, net_margin=0.18), self.tech)
        assert explicit.components['net_margin'] == pytest.approx(75.0)

    def test_zero_employees_skips_revenue_per_employee(self):
        operational = BusinessOperationalData(category='TECHNOLOGY', employees=0)
        breakdown = self.scorer.score(BusinessFinancialData(revenue=100000, total_assets=0), operational)

        assert 'revenue_per_employee' not in breakdown.components
        assert 'asset_turnover' not in breakdown.components
        assert breakdown.available is False

    def test_non_positive_revenue_skips_ratios(self):
        breakdown = self.scorer.score(
            BusinessFinancialData(revenue=-1000, cash_flow=10, ebitda=5, total_assets=10, liabilities=5),
            self.tech
        )
        assert 'cash_flow_ratio' not in breakdown.components
        assert 'working_capital' not in breakdown.components
        assert 'ebitda_margin' not in breakdown.components

    def test_greentech_scores_strongly(self, greentech):
        financial, operational = snapshot_to_inputs(greentech)
        breakdown = self.scorer.score(financial, operational)

        assert breakdown.score >= 65
        assert breakdown.components['profitability'] == pytest.approx(73.13, abs=0.1)
        assert breakdown.components['liquidity'] == pytest.approx(90.54, abs=0.1)
        assert all(math.isfinite(v) for v in breakdown.components.values())

    def test_bakery_scores_weakly(self, bakery):
        financial, operational = snapshot_to_inputs(bakery)
        breakdown = self.scorer.score(financial, operational)

        assert breakdown.score < 50
        assert 'Net margin: 6.5%' in breakdown.factors

    def test_injected_benchmarks_change_score(self):
        lenient = BenchmarkTables.from_dict({'gross_margin': {'TECHNOLOGY': [0.1, 0.2, 0.3, 0.4]}})
        financial = BusinessFinancialData(gross_margin=0.68)

        default_score = self.scorer.score(financial, self.tech).score
        lenient_score = FinancialScorer(benchmarks=lenient).score(financial, self.tech).score

        assert lenient_score == 100.0
        assert lenient_score > default_score
