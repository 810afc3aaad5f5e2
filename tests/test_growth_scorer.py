"""Tests for the growth scorer."""

from datetime import date

import pytest

from business_health.analyzers.growth_scorer import GrowthScorer
from business_health.models.data_models import BusinessFinancialData, BusinessOperationalData
from business_health.utils.snapshot import snapshot_to_inputs

AS_OF = date(2026, 10, 18)


class TestGrowthScorer:
    """Test cases for GrowthScorer."""

    def setup_method(self):
        self.scorer = GrowthScorer()

    def test_greentech_revenue_growth(self, greentech):
        financial, operational = snapshot_to_inputs(greentech)
        breakdown = self.scorer.score(financial, operational, AS_OF)

        # Seven years old, so measured against mature-stage growth bands
        assert breakdown.components['yearly_growth'] == pytest.approx(75.0)
        assert breakdown.components['revenue_consistency'] == pytest.approx(100.0)
        assert breakdown.components['revenue_growth'] == pytest.approx(82.5)
        assert breakdown.components['market_expansion'] == pytest.approx(66.25)
        assert breakdown.score >= 60
        assert 'Annual growth rate: 15.0%' in breakdown.factors

    def test_unknown_age_uses_new_business_bands(self):
        breakdown = self.scorer.score(
            BusinessFinancialData(yearly_growth=0.25), BusinessOperationalData(category='TECHNOLOGY'), AS_OF
        )
        assert breakdown.components['yearly_growth'] == pytest.approx(50.0)

    def test_customer_expectations_scale_with_age(self):
        young = BusinessOperationalData(category='TECHNOLOGY', customer_base=85)
        old = BusinessOperationalData(category='TECHNOLOGY', customer_base=85, established=date(2010, 1, 1))

        assert self.scorer.score(BusinessFinancialData(), young, AS_OF).components['customer_base'] == 35.0
        assert self.scorer.score(BusinessFinancialData(), old, AS_OF).components['customer_base'] == 15.0

    def test_competition_defaults(self):
        breakdown = self.scorer.score(BusinessFinancialData(), BusinessOperationalData(), AS_OF)

        assert breakdown.components['competition_level'] == 50.0
        assert breakdown.components['category_potential'] == 50.0
        assert 'Competition level not specified' in breakdown.factors

    def test_operational_flexibility(self):
        operational = BusinessOperationalData(
            hours_of_operation='24/7',
            days_open=('Mon', 'Tue', 'Wed', 'Thu', 'Fri', 'Sat', 'Sun'),
            seasonality='Steady year-round demand'
        )
        breakdown = self.scorer.score(BusinessFinancialData(), operational, AS_OF)
        assert breakdown.components['operational_flexibility'] == 85.0

    def test_limited_days_reduce_flexibility(self):
        operational = BusinessOperationalData(
            hours_of_operation='Limited hours', days_open=('Sat', 'Sun'), seasonality='Seasonal tourism'
        )
        breakdown = self.scorer.score(BusinessFinancialData(), operational, AS_OF)
        assert breakdown.components['operational_flexibility'] == 20.0

    def test_zero_employees_skips_employee_scalability(self):
        breakdown = self.scorer.score(
            BusinessFinancialData(revenue=100000), BusinessOperationalData(employees=0), AS_OF
        )
        assert 'employee_scalability' not in breakdown.components

    def test_bakery_growth_is_weak(self, bakery):
        financial, operational = snapshot_to_inputs(bakery)
        breakdown = self.scorer.score(financial, operational, AS_OF)

        assert breakdown.components['yearly_growth'] < 25
        assert 'Growth challenges present' in breakdown.factors
