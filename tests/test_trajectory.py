"""Tests for trajectory classification."""

import pytest

from business_health.analyzers.trajectory import classify_trajectory
from business_health.models.data_models import HealthTrajectory


def _scores(financial, growth, operational, sale_readiness):
    return {'financial': financial, 'growth': growth, 'operational': operational, 'sale_readiness': sale_readiness}


class TestClassifyTrajectory:
    """Test cases for classify_trajectory."""

    def test_strong_growth_wins(self):
        assert classify_trajectory(0.15, _scores(10, 10, 10, 10)) == HealthTrajectory.IMPROVING

    def test_contraction_wins(self):
        assert classify_trajectory(-0.08, _scores(90, 90, 90, 90)) == HealthTrajectory.DECLINING

    def test_growth_boundaries_fall_through(self):
        assert classify_trajectory(0.10, _scores(50, 50, 50, 50)) == HealthTrajectory.STABLE
        assert classify_trajectory(-0.05, _scores(50, 50, 50, 50)) == HealthTrajectory.STABLE

    def test_high_variance_is_volatile(self):
        assert classify_trajectory(None, _scores(90, 10, 90, 10)) == HealthTrajectory.VOLATILE

    def test_healthy_scores_improving(self):
        assert classify_trajectory(0.05, _scores(80, 75, 70, 65)) == HealthTrajectory.IMPROVING

    def test_weak_growth_score_declining(self):
        assert classify_trajectory(None, _scores(45, 30, 45, 45)) == HealthTrajectory.DECLINING

    def test_low_mean_declining(self):
        assert classify_trajectory(None, _scores(40, 40, 40, 40)) == HealthTrajectory.DECLINING

    @pytest.mark.parametrize('growth', [None, 0.0, 0.05])
    def test_default_stable(self, growth):
        assert classify_trajectory(growth, _scores(60, 55, 60, 50)) == HealthTrajectory.STABLE

    def test_unavailable_dimension_left_out(self):
        missing_financial = _scores(None, 52, 46, 26)
        zero_financial = _scores(0, 52, 46, 26)

        assert classify_trajectory(None, missing_financial) == HealthTrajectory.STABLE
        assert classify_trajectory(None, zero_financial) == HealthTrajectory.VOLATILE

    def test_single_available_score_skips_variance(self):
        assert classify_trajectory(None, _scores(None, 90, None, None)) == HealthTrajectory.IMPROVING

    def test_missing_growth_score_uses_mean_only(self):
        assert classify_trajectory(None, _scores(20, None, 25, 30)) == HealthTrajectory.DECLINING
        assert classify_trajectory(None, _scores(80, None, 75, 85)) == HealthTrajectory.STABLE

    def test_nothing_available_is_stable(self):
        assert classify_trajectory(None, _scores(None, None, None, None)) == HealthTrajectory.STABLE
