"""Tests for benchmark tables and scoring weights."""

import os
import tempfile
from dataclasses import FrozenInstanceError
from unittest.mock import patch

import pytest
import yaml

from business_health.analyzers.benchmarks import (
    BenchmarkTables, BenchmarkThresholds, ScoringWeights, DEFAULT_BENCHMARKS,
    load_configured_benchmarks
)
from business_health.analyzers.normalization import normalize_to_score
from business_health.models.data_models import BusinessCategory, MaturityStage
from business_health.utils.exceptions import ConfigurationError, ValidationError


class TestBenchmarkTables:
    """Test cases for BenchmarkTables."""

    def test_category_lookup(self):
        gross = DEFAULT_BENCHMARKS.thresholds_for('gross_margin', BusinessCategory.TECHNOLOGY)
        assert gross == BenchmarkThresholds(0.40, 0.60, 0.75, 0.85)
        assert DEFAULT_BENCHMARKS.thresholds_for('gross_margin', 'technology') == gross

    def test_restaurant_gross_margin_row(self):
        gross = DEFAULT_BENCHMARKS.thresholds_for('gross_margin', BusinessCategory.RESTAURANT)

        assert gross == BenchmarkThresholds(0.45, 0.55, 0.65, 0.72)
        assert normalize_to_score(0.45, gross) == pytest.approx(25.0)
        assert normalize_to_score(0.65, gross) == pytest.approx(75.0)
        assert normalize_to_score(0.35, gross) == 0.0

    def test_missing_category_row_falls_back_to_other(self):
        other = DEFAULT_BENCHMARKS.thresholds_for('scalability', BusinessCategory.OTHER)
        assert DEFAULT_BENCHMARKS.thresholds_for('scalability', BusinessCategory.RESTAURANT) == other
        assert DEFAULT_BENCHMARKS.thresholds_for('gross_margin', 'SPACE_MINING') == \
            DEFAULT_BENCHMARKS.thresholds_for('gross_margin', None)

    def test_growth_bands_by_stage(self):
        assert DEFAULT_BENCHMARKS.growth_for_stage(MaturityStage.MATURE).good == pytest.approx(0.15)
        assert DEFAULT_BENCHMARKS.growth_for_stage(MaturityStage.NEW).excellent == pytest.approx(1.0)

    def test_valuation_and_outlooks(self):
        assert DEFAULT_BENCHMARKS.valuation_for('TECHNOLOGY').revenue == pytest.approx(2.0)
        assert DEFAULT_BENCHMARKS.growth_potential_for('TECHNOLOGY').score == 85
        assert DEFAULT_BENCHMARKS.attractiveness_for('RESTAURANT').score == 40

    def test_all_default_scales_are_monotone(self):
        for name in ('gross_margin', 'net_margin', 'ebitda_margin', 'employee_efficiency',
                     'scalability', 'customer_base', 'customer_efficiency', 'revenue_growth'):
            for thresholds in getattr(DEFAULT_BENCHMARKS, name).values():
                thresholds.validate()

    def test_tables_are_immutable(self):
        with pytest.raises(FrozenInstanceError):
            DEFAULT_BENCHMARKS.cash_flow_ratio = BenchmarkThresholds(0, 1, 2, 3)
        with pytest.raises(TypeError):
            DEFAULT_BENCHMARKS.gross_margin['TECHNOLOGY'] = BenchmarkThresholds(0, 1, 2, 3)

    def test_from_dict_merges_over_defaults(self):
        tables = BenchmarkTables.from_dict({
            'gross_margin': {'technology': {'poor': 0.1, 'average': 0.2, 'good': 0.3, 'excellent': 0.4}},
            'asset_turnover': [1, 2, 3, 4],
        })
        assert tables.thresholds_for('gross_margin', 'TECHNOLOGY') == BenchmarkThresholds(0.1, 0.2, 0.3, 0.4)
        assert tables.thresholds_for('gross_margin', 'RETAIL') == \
            DEFAULT_BENCHMARKS.thresholds_for('gross_margin', 'RETAIL')
        assert tables.asset_turnover == BenchmarkThresholds(1, 2, 3, 4)
        # Defaults are untouched
        assert DEFAULT_BENCHMARKS.asset_turnover == BenchmarkThresholds(0.5, 1.0, 1.8, 3.0)

    def test_from_dict_rejects_unknown_table(self):
        with pytest.raises(ConfigurationError):
            BenchmarkTables.from_dict({'made_up_table': {}})

    def test_from_dict_rejects_non_monotone_scale(self):
        with pytest.raises(ConfigurationError):
            BenchmarkTables.from_dict({'asset_turnover': [1, 3, 2, 4]})

    def test_from_dict_rejects_malformed_row(self):
        with pytest.raises(ConfigurationError):
            BenchmarkTables.from_dict({'valuation_multiples': {'TECHNOLOGY': {'revenue': 'lots'}}})

    def test_from_yaml(self):
        with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
            yaml.dump({'net_margin': {'RESTAURANT': [0.01, 0.02, 0.03, 0.04]}}, f)
            path = f.name

        try:
            tables = BenchmarkTables.from_yaml(path)
            assert tables.thresholds_for('net_margin', 'RESTAURANT').excellent == pytest.approx(0.04)
        finally:
            os.unlink(path)

    def test_from_yaml_missing_file(self):
        with pytest.raises(ConfigurationError):
            BenchmarkTables.from_yaml('/nonexistent/benchmarks.yaml')

    def test_configured_benchmarks_default(self):
        with patch('business_health.analyzers.benchmarks.config') as mock_config:
            mock_config.get.return_value = None
            assert load_configured_benchmarks() is DEFAULT_BENCHMARKS

    def test_configured_benchmarks_missing_file(self):
        with patch('business_health.analyzers.benchmarks.config') as mock_config:
            mock_config.get.return_value = '/nonexistent/benchmarks.yaml'
            with pytest.raises(ConfigurationError):
                load_configured_benchmarks()


class TestBenchmarkThresholds:
    """Test cases for BenchmarkThresholds."""

    def test_from_value(self):
        assert BenchmarkThresholds.from_value((1, 2, 3, 4)) == BenchmarkThresholds(1, 2, 3, 4)
        with pytest.raises(ValidationError):
            BenchmarkThresholds.from_value((1, 2, 3))

    def test_scaled(self):
        scaled = BenchmarkThresholds(50, 200, 800, 3000).scaled(1.5)
        assert scaled.as_tuple() == (75, 300, 1200, 4500)

    def test_direction(self):
        assert BenchmarkThresholds(1, 2, 3, 4).ascending
        assert not BenchmarkThresholds(4, 3, 2, 1).ascending


class TestScoringWeights:
    """Test cases for ScoringWeights."""

    def test_default_weights_are_valid(self):
        weights = ScoringWeights()
        weights.validate()
        assert weights.overall['financial'] == pytest.approx(0.4)
        assert weights.confidence['quality'] == pytest.approx(0.35)

    def test_weights_must_sum_to_one(self):
        weights = ScoringWeights(overall={'financial': 0.5, 'growth': 0.5, 'operational': 0.5, 'sale_readiness': 0.0})
        with pytest.raises(ValidationError):
            weights.validate()

    def test_weights_are_immutable(self):
        weights = ScoringWeights()
        with pytest.raises(TypeError):
            weights.financial['profitability'] = 1.0
