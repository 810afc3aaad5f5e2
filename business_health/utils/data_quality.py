"""Data quality validation for business scoring inputs.

This module provides field completeness ratios, consistency checks and
outlier detection against category benchmarks, and reports the issues it
finds through the data-quality log channel.
"""

from typing import Any, Dict, List, Optional, Tuple

from business_health.analyzers.benchmarks import BenchmarkTables, DEFAULT_BENCHMARKS
from business_health.models.data_models import BusinessFinancialData, BusinessOperationalData
from business_health.utils.exceptions import ValidationError
from business_health.utils.logging import get_logger, log_data_quality_issue

# Fields each dimension draws on, used for completeness ratios
COMPLETENESS_FIELDS: Dict[str, Tuple[str, ...]] = {
    'financial': (
        'revenue', 'profit', 'cash_flow', 'ebitda', 'gross_margin', 'net_margin', 'total_assets', 'liabilities'
    ),
    'growth': ('revenue', 'yearly_growth', 'monthly_revenue', 'customer_base', 'category'),
    'operational': (
        'established', 'employees', 'hours_of_operation', 'days_open', 'seasonality', 'competition'
    ),
    'sale_readiness': ('asking_price', 'revenue', 'profit', 'description', 'category'),
}

CRITICAL_FIELDS: Dict[str, Tuple[str, ...]] = {
    'financial': ('revenue', 'profit'),
    'growth': ('revenue', 'yearly_growth'),
    'operational': ('established', 'employees'),
    'sale_readiness': ('asking_price', 'revenue'),
}

# Key financial fields counted for sale disclosure
DISCLOSURE_FIELDS = COMPLETENESS_FIELDS['financial']

NON_NEGATIVE_FIELDS = (
    'revenue', 'asking_price', 'total_assets', 'liabilities', 'inventory', 'equipment', 'real_estate'
)
NON_NEGATIVE_OPERATIONAL_FIELDS = ('employees', 'customer_base')

REVENUE_OUTLIER_MULTIPLIER = 10
PROFIT_MARGIN_MAX = 0.95
PROFIT_MARGIN_MIN = -0.5
GROWTH_RATE_MAX = 5.0
MONTHLY_REVENUE_TOLERANCE = 0.25
CASH_FLOW_PROFIT_TOLERANCE = 2.0


def field_value(financial: BusinessFinancialData, operational: BusinessOperationalData, name: str) -> Any:
    """Look a field up on the financial data, then the operational data."""
    if hasattr(financial, name):
        return getattr(financial, name)
    return getattr(operational, name, None)


def is_present(value: Any) -> bool:
    """A field counts as present when it is not None, not blank and not an empty collection."""
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, tuple, set, dict)):
        return len(value) > 0
    return True


def field_completeness(
    financial: BusinessFinancialData,
    operational: BusinessOperationalData,
    dimension: str
) -> float:
    """Share (0-1) of a dimension's fields that are present.

    Args:
        financial: Financial facts
        operational: Operational facts
        dimension: One of 'financial', 'growth', 'operational', 'sale_readiness'

    Returns:
        Completeness ratio
    """
    names = COMPLETENESS_FIELDS[dimension]
    present = sum(1 for name in names if is_present(field_value(financial, operational, name)))
    return present / len(names)


def missing_critical_fields(
    financial: BusinessFinancialData,
    operational: BusinessOperationalData,
    dimension: str
) -> List[str]:
    return [
        name for name in CRITICAL_FIELDS[dimension]
        if not is_present(field_value(financial, operational, name))
    ]


class DataQualityValidator:
    """Validator for business scoring input quality."""

    def __init__(self, benchmarks: Optional[BenchmarkTables] = None, strict_mode: bool = False):
        """Initialize data quality validator.

        Args:
            benchmarks: Benchmarks used for outlier detection. Defaults to the built-in tables
            strict_mode: If True, validation failures raise exceptions; otherwise, they log warnings
        """
        self.benchmarks = benchmarks or DEFAULT_BENCHMARKS
        self.strict_mode = strict_mode
        self.logger = get_logger(f"{__name__}.DataQualityValidator")

    def check_consistency(
        self,
        financial: BusinessFinancialData,
        operational: Optional[BusinessOperationalData] = None
    ) -> List[str]:
        """Find facts that contradict each other or cannot be true.

        Args:
            financial: Financial facts
            operational: Operational facts, checked for negative counts

        Returns:
            List of issue codes, e.g. 'profit_exceeds_revenue'
        """
        issues = []
        revenue = financial.revenue
        profit = financial.profit

        if revenue is not None and profit is not None and profit > revenue:
            issues.append('profit_exceeds_revenue')

        if financial.ebitda is not None and profit is not None and financial.ebitda < profit:
            issues.append('ebitda_less_than_profit')

        for name in ('gross_margin', 'net_margin'):
            value = getattr(financial, name)
            if value is not None and value > 1:
                issues.append(f'{name}_above_100_percent')

        if (financial.net_margin is not None and financial.gross_margin is not None
                and financial.net_margin > financial.gross_margin):
            issues.append('net_margin_exceeds_gross_margin')

        if financial.monthly_revenue is not None and revenue is not None and revenue > 0:
            variance = abs(financial.monthly_revenue * 12 - revenue) / revenue
            if variance > MONTHLY_REVENUE_TOLERANCE:
                issues.append('monthly_annual_revenue_mismatch')

        if financial.cash_flow is not None and profit is not None and profit != 0:
            variance = abs(financial.cash_flow - profit) / abs(profit)
            if variance > CASH_FLOW_PROFIT_TOLERANCE:
                issues.append('cash_flow_profit_significant_variance')

        for name in NON_NEGATIVE_FIELDS:
            value = getattr(financial, name)
            if value is not None and value < 0:
                issues.append(f'negative_{name}')

        if operational is not None:
            for name in NON_NEGATIVE_OPERATIONAL_FIELDS:
                value = getattr(operational, name)
                if value is not None and value < 0:
                    issues.append(f'negative_{name}')

        return issues

    def detect_outliers(self, financial: BusinessFinancialData, operational: BusinessOperationalData) -> List[str]:
        """Find values far outside what the category benchmarks make plausible.

        Args:
            financial: Financial facts
            operational: Operational facts (category and employees are used)

        Returns:
            List of outlier codes, e.g. 'revenue_unusually_high'
        """
        outliers = []
        revenue = financial.revenue

        if revenue is not None and revenue > 0:
            efficiency = self.benchmarks.thresholds_for('employee_efficiency', operational.business_category)
            headcount = operational.employees if operational.employees and operational.employees > 0 else 1
            expected_revenue = efficiency.average * 1000 * headcount
            if revenue > expected_revenue * REVENUE_OUTLIER_MULTIPLIER:
                outliers.append('revenue_unusually_high')

            if financial.profit is not None:
                margin = financial.profit / revenue
                if margin > PROFIT_MARGIN_MAX:
                    outliers.append('profit_margin_unusually_high')
                elif margin < PROFIT_MARGIN_MIN:
                    outliers.append('profit_margin_unusually_low')

        if financial.yearly_growth is not None and abs(financial.yearly_growth) > GROWTH_RATE_MAX:
            outliers.append('growth_rate_extreme')

        return outliers

    def validate_business(
        self,
        subject: str,
        financial: BusinessFinancialData,
        operational: BusinessOperationalData
    ) -> Tuple[bool, List[str], Dict[str, Any]]:
        """Validate a business's scoring inputs and log what is wrong.

        Args:
            subject: Identifier of the business, used in log records
            financial: Financial facts
            operational: Operational facts

        Returns:
            Tuple of (is_valid, missing_critical_fields, invalid_values)

        Raises:
            ValidationError: If validation fails and strict_mode is True
        """
        missing = []
        for dimension in CRITICAL_FIELDS:
            for name in missing_critical_fields(financial, operational, dimension):
                if name not in missing:
                    missing.append(name)

        invalid_values: Dict[str, Any] = {}
        for issue in self.check_consistency(financial, operational):
            invalid_values[issue] = 'inconsistent'
        for outlier in self.detect_outliers(financial, operational):
            invalid_values[outlier] = 'outlier'

        is_valid = not invalid_values

        if missing:
            log_data_quality_issue(
                self.logger,
                subject,
                'business_snapshot',
                f"Missing {len(missing)} critical fields",
                severity='info',
                missing_fields=missing
            )

        if invalid_values:
            log_data_quality_issue(
                self.logger,
                subject,
                'business_snapshot',
                f"Found {len(invalid_values)} inconsistent or outlying values",
                severity='warning',
                invalid_values=invalid_values
            )

            if self.strict_mode:
                raise ValidationError(
                    f"Data quality validation failed for {subject}",
                    context={'invalid_values': invalid_values, 'missing_fields': missing}
                )

        return is_valid, missing, invalid_values


def get_data_quality_validator(
    benchmarks: Optional[BenchmarkTables] = None,
    strict_mode: bool = False
) -> DataQualityValidator:
    """Create a data quality validator.

    Args:
        benchmarks: Benchmarks used for outlier detection
        strict_mode: If True, validation failures raise exceptions

    Returns:
        DataQualityValidator instance
    """
    return DataQualityValidator(benchmarks=benchmarks, strict_mode=strict_mode)
