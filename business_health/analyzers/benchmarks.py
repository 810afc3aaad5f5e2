"""Industry benchmark tables and scoring weights.

Benchmarks are immutable values handed to the scorers at construction time.
A scorer never reads a module-level table directly, so tests and callers can
substitute an alternate benchmark set with ``BenchmarkTables.from_yaml`` or
``BenchmarkTables.from_dict``.
"""

import os
from dataclasses import dataclass, field, fields, replace
from types import MappingProxyType
from typing import Any, Dict, Mapping, Optional, Union

import yaml

from business_health.models.data_models import BusinessCategory, MaturityStage
from business_health.utils.config import config
from business_health.utils.exceptions import ConfigurationError, ValidationError
from business_health.utils.logging import get_logger

logger = get_logger(__name__)

OTHER = BusinessCategory.OTHER.value


@dataclass(frozen=True)
class BenchmarkThresholds:
    """Four-point benchmark scale.

    Ascending scales treat higher values as better. A scale whose
    ``excellent`` is below ``poor`` is read as lower-is-better.
    """
    poor: float
    average: float
    good: float
    excellent: float

    @classmethod
    def from_value(cls, value: Union['BenchmarkThresholds', Mapping[str, float], tuple, list]) -> 'BenchmarkThresholds':
        """Build thresholds from a mapping or a 4-item sequence.

        Raises:
            ValidationError: If the value cannot be read as a scale.
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, Mapping):
            try:
                return cls(*(float(value[k]) for k in ('poor', 'average', 'good', 'excellent')))
            except (KeyError, TypeError, ValueError) as e:
                raise ValidationError(f"Invalid benchmark mapping: {value}", original_exception=e)
        if isinstance(value, (tuple, list)) and len(value) == 4:
            try:
                return cls(*(float(v) for v in value))
            except (TypeError, ValueError) as e:
                raise ValidationError(f"Invalid benchmark sequence: {value}", original_exception=e)
        raise ValidationError(f"Cannot read benchmark thresholds from {value!r}")

    @property
    def ascending(self) -> bool:
        return self.excellent >= self.poor

    def scaled(self, factor: float) -> 'BenchmarkThresholds':
        return BenchmarkThresholds(
            self.poor * factor, self.average * factor, self.good * factor, self.excellent * factor
        )

    def as_tuple(self):
        return (self.poor, self.average, self.good, self.excellent)

    def validate(self) -> None:
        """Validate that the scale is monotone in one direction.

        Raises:
            ValidationError: If the scale changes direction.
        """
        values = self.as_tuple()
        pairs = list(zip(values, values[1:]))
        if not (all(a <= b for a, b in pairs) or all(a >= b for a, b in pairs)):
            raise ValidationError(f"Benchmark thresholds must be monotone: {values}")

    def to_dict(self) -> Dict[str, float]:
        return {'poor': self.poor, 'average': self.average, 'good': self.good, 'excellent': self.excellent}


@dataclass(frozen=True)
class ValuationMultiples:
    """Typical sale multiples for a category."""
    revenue: float
    ebitda: float
    sde: float

    @classmethod
    def from_value(cls, value: Union['ValuationMultiples', Mapping[str, float]]) -> 'ValuationMultiples':
        if isinstance(value, cls):
            return value
        try:
            return cls(revenue=float(value['revenue']), ebitda=float(value['ebitda']), sde=float(value['sde']))
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"Invalid valuation multiples: {value!r}", original_exception=e)

    def to_dict(self) -> Dict[str, float]:
        return {'revenue': self.revenue, 'ebitda': self.ebitda, 'sde': self.sde}


@dataclass(frozen=True)
class CategoryOutlook:
    """Fixed category score with the sentence explaining it."""
    score: float
    note: str

    @classmethod
    def from_value(cls, value: Union['CategoryOutlook', Mapping[str, Any]]) -> 'CategoryOutlook':
        if isinstance(value, cls):
            return value
        try:
            return cls(score=float(value['score']), note=str(value['note']))
        except (KeyError, TypeError, ValueError) as e:
            raise ValidationError(f"Invalid category outlook: {value!r}", original_exception=e)

    def to_dict(self) -> Dict[str, Any]:
        return {'score': self.score, 'note': self.note}


def _t(poor, average, good, excellent) -> BenchmarkThresholds:
    return BenchmarkThresholds(poor, average, good, excellent)


_DEFAULT_TABLES: Dict[str, Any] = {
    'gross_margin': {
        'RESTAURANT': _t(0.45, 0.55, 0.65, 0.72),
        'RETAIL': _t(0.20, 0.30, 0.40, 0.50),
        'ECOMMERCE': _t(0.25, 0.35, 0.45, 0.60),
        'TECHNOLOGY': _t(0.40, 0.60, 0.75, 0.85),
        'MANUFACTURING': _t(0.15, 0.25, 0.35, 0.45),
        'SERVICES': _t(0.30, 0.45, 0.60, 0.75),
        'HEALTHCARE': _t(0.25, 0.35, 0.45, 0.60),
        'REAL_ESTATE': _t(0.20, 0.30, 0.45, 0.60),
        'AUTOMOTIVE': _t(0.15, 0.20, 0.30, 0.40),
        'ENTERTAINMENT': _t(0.20, 0.35, 0.50, 0.65),
        'EDUCATION': _t(0.25, 0.40, 0.55, 0.70),
        'OTHER': _t(0.20, 0.30, 0.40, 0.55),
    },
    'net_margin': {
        'RESTAURANT': _t(0.04, 0.08, 0.12, 0.16),
        'RETAIL': _t(0.02, 0.05, 0.08, 0.12),
        'ECOMMERCE': _t(0.03, 0.08, 0.15, 0.22),
        'TECHNOLOGY': _t(0.05, 0.10, 0.18, 0.25),
        'MANUFACTURING': _t(0.03, 0.07, 0.12, 0.18),
        'SERVICES': _t(0.05, 0.10, 0.15, 0.22),
        'HEALTHCARE': _t(0.05, 0.10, 0.15, 0.22),
        'REAL_ESTATE': _t(0.05, 0.12, 0.20, 0.30),
        'AUTOMOTIVE': _t(0.02, 0.05, 0.08, 0.12),
        'ENTERTAINMENT': _t(0.03, 0.08, 0.14, 0.20),
        'EDUCATION': _t(0.04, 0.09, 0.15, 0.22),
        'OTHER': _t(0.03, 0.08, 0.13, 0.20),
    },
    'ebitda_margin': {
        'RESTAURANT': _t(0.08, 0.12, 0.16, 0.22),
        'RETAIL': _t(0.04, 0.08, 0.12, 0.18),
        'ECOMMERCE': _t(0.05, 0.12, 0.20, 0.28),
        'TECHNOLOGY': _t(0.10, 0.18, 0.25, 0.35),
        'MANUFACTURING': _t(0.06, 0.11, 0.16, 0.22),
        'SERVICES': _t(0.08, 0.14, 0.20, 0.28),
        'HEALTHCARE': _t(0.08, 0.14, 0.20, 0.28),
        'REAL_ESTATE': _t(0.10, 0.20, 0.30, 0.40),
        'AUTOMOTIVE': _t(0.04, 0.08, 0.12, 0.16),
        'ENTERTAINMENT': _t(0.06, 0.12, 0.18, 0.25),
        'EDUCATION': _t(0.07, 0.13, 0.19, 0.26),
        'OTHER': _t(0.06, 0.12, 0.18, 0.25),
    },
    # Revenue per employee, thousands
    'employee_efficiency': {
        'RESTAURANT': _t(30, 50, 70, 100),
        'RETAIL': _t(80, 120, 160, 220),
        'ECOMMERCE': _t(150, 250, 400, 600),
        'TECHNOLOGY': _t(100, 200, 350, 500),
        'MANUFACTURING': _t(80, 150, 250, 400),
        'SERVICES': _t(60, 100, 150, 250),
        'HEALTHCARE': _t(100, 150, 200, 300),
        'REAL_ESTATE': _t(200, 350, 500, 750),
        'AUTOMOTIVE': _t(100, 180, 280, 400),
        'ENTERTAINMENT': _t(50, 100, 200, 350),
        'EDUCATION': _t(40, 70, 120, 200),
        'OTHER': _t(60, 120, 200, 300),
    },
    # Revenue per employee, thousands
    'scalability': {
        'TECHNOLOGY': _t(100, 200, 350, 500),
        'ECOMMERCE': _t(150, 250, 400, 600),
        'SERVICES': _t(60, 100, 150, 250),
        'RETAIL': _t(80, 120, 160, 220),
        'OTHER': _t(60, 120, 200, 300),
    },
    # Customers expected of a five-year-old business
    'customer_base': {
        'RESTAURANT': _t(100, 300, 800, 2000),
        'RETAIL': _t(200, 500, 1200, 3000),
        'ECOMMERCE': _t(500, 2000, 8000, 25000),
        'TECHNOLOGY': _t(50, 200, 800, 3000),
        'SERVICES': _t(75, 200, 500, 1500),
        'OTHER': _t(100, 300, 750, 2000),
    },
    # Annual revenue per customer
    'customer_efficiency': {
        'RESTAURANT': _t(20, 50, 100, 200),
        'RETAIL': _t(50, 150, 400, 800),
        'ECOMMERCE': _t(30, 100, 300, 600),
        'TECHNOLOGY': _t(1000, 5000, 15000, 50000),
        'SERVICES': _t(200, 800, 2500, 8000),
        'HEALTHCARE': _t(500, 1500, 4000, 10000),
        'OTHER': _t(100, 400, 1200, 3500),
    },
    'revenue_growth': {
        'NEW': _t(0.10, 0.25, 0.50, 1.00),
        'GROWING': _t(0.05, 0.15, 0.30, 0.50),
        'MATURE': _t(0.02, 0.05, 0.15, 0.25),
        'ESTABLISHED': _t(0.0, 0.03, 0.08, 0.15),
    },
    'valuation_multiples': {
        'RESTAURANT': ValuationMultiples(0.5, 2.5, 2.0),
        'RETAIL': ValuationMultiples(0.7, 3.0, 2.5),
        'ECOMMERCE': ValuationMultiples(1.0, 4.0, 3.0),
        'TECHNOLOGY': ValuationMultiples(2.0, 6.0, 4.0),
        'MANUFACTURING': ValuationMultiples(0.8, 3.5, 2.8),
        'SERVICES': ValuationMultiples(1.2, 4.0, 3.2),
        'HEALTHCARE': ValuationMultiples(1.5, 5.0, 3.8),
        'REAL_ESTATE': ValuationMultiples(1.8, 6.0, 4.5),
        'AUTOMOTIVE': ValuationMultiples(0.6, 2.8, 2.2),
        'ENTERTAINMENT': ValuationMultiples(1.0, 3.5, 2.8),
        'EDUCATION': ValuationMultiples(1.3, 4.2, 3.5),
        'OTHER': ValuationMultiples(0.8, 3.0, 2.5),
    },
    'growth_potential': {
        'TECHNOLOGY': CategoryOutlook(85, 'High growth potential in tech sector'),
        'ECOMMERCE': CategoryOutlook(80, 'Strong digital commerce growth'),
        'HEALTHCARE': CategoryOutlook(75, 'Growing healthcare demand'),
        'SERVICES': CategoryOutlook(70, 'Stable services market growth'),
        'EDUCATION': CategoryOutlook(65, 'Moderate education sector expansion'),
        'ENTERTAINMENT': CategoryOutlook(60, 'Entertainment market opportunities'),
        'RETAIL': CategoryOutlook(55, 'Retail sector transformation ongoing'),
        'REAL_ESTATE': CategoryOutlook(50, 'Variable real estate market conditions'),
        'MANUFACTURING': CategoryOutlook(45, 'Manufacturing sector challenges'),
        'RESTAURANT': CategoryOutlook(40, 'Competitive restaurant market'),
        'AUTOMOTIVE': CategoryOutlook(35, 'Automotive industry disruption'),
        'OTHER': CategoryOutlook(50, 'Market conditions vary by specific industry'),
    },
    'market_attractiveness': {
        'TECHNOLOGY': CategoryOutlook(85, 'Technology businesses are highly sought after by buyers'),
        'HEALTHCARE': CategoryOutlook(80, 'Healthcare sector shows strong buyer interest'),
        'ECOMMERCE': CategoryOutlook(75, 'E-commerce businesses attract digital-savvy buyers'),
        'SERVICES': CategoryOutlook(70, 'Service businesses offer scalability appeal'),
        'EDUCATION': CategoryOutlook(65, 'Education sector has stable market demand'),
        'REAL_ESTATE': CategoryOutlook(60, 'Real estate businesses have tangible asset appeal'),
        'MANUFACTURING': CategoryOutlook(55, 'Manufacturing requires specialized buyers'),
        'RETAIL': CategoryOutlook(50, 'Retail market faces digital transformation challenges'),
        'ENTERTAINMENT': CategoryOutlook(45, 'Entertainment businesses have variable market appeal'),
        'RESTAURANT': CategoryOutlook(40, 'Restaurant businesses face high competition and complexity'),
        'AUTOMOTIVE': CategoryOutlook(35, 'Automotive sector faces industry disruption'),
        'OTHER': CategoryOutlook(50, 'Market attractiveness varies by specific business type'),
    },
    'cash_flow_ratio': _t(-0.10, 0.05, 0.15, 0.25),
    'working_capital_ratio': _t(-0.20, 0.10, 0.25, 0.40),
    'asset_turnover': _t(0.5, 1.0, 1.8, 3.0),
    'revenue_consistency': _t(0.5, 0.7, 0.85, 0.95),
    'asset_efficiency': _t(0.3, 0.8, 1.5, 2.5),
}

_THRESHOLD_TABLES = (
    'gross_margin', 'net_margin', 'ebitda_margin', 'employee_efficiency', 'scalability',
    'customer_base', 'customer_efficiency', 'revenue_growth'
)
_SCALAR_THRESHOLDS = (
    'cash_flow_ratio', 'working_capital_ratio', 'asset_turnover', 'revenue_consistency', 'asset_efficiency'
)


def _freeze(table: Mapping[str, Any]) -> Mapping[str, Any]:
    return MappingProxyType({str(k).upper(): v for k, v in table.items()})


@dataclass(frozen=True)
class BenchmarkTables:
    """Immutable set of industry benchmarks.

    Category-keyed tables fall back to their OTHER row when a category has
    no row of its own.
    """
    gross_margin: Mapping[str, BenchmarkThresholds]
    net_margin: Mapping[str, BenchmarkThresholds]
    ebitda_margin: Mapping[str, BenchmarkThresholds]
    employee_efficiency: Mapping[str, BenchmarkThresholds]
    scalability: Mapping[str, BenchmarkThresholds]
    customer_base: Mapping[str, BenchmarkThresholds]
    customer_efficiency: Mapping[str, BenchmarkThresholds]
    revenue_growth: Mapping[str, BenchmarkThresholds]
    valuation_multiples: Mapping[str, ValuationMultiples]
    growth_potential: Mapping[str, CategoryOutlook]
    market_attractiveness: Mapping[str, CategoryOutlook]
    cash_flow_ratio: BenchmarkThresholds
    working_capital_ratio: BenchmarkThresholds
    asset_turnover: BenchmarkThresholds
    revenue_consistency: BenchmarkThresholds
    asset_efficiency: BenchmarkThresholds

    def __post_init__(self):
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Mapping):
                object.__setattr__(self, f.name, _freeze(value))

    @classmethod
    def default(cls) -> 'BenchmarkTables':
        """Benchmarks calibrated for small and medium businesses."""
        return cls(**_DEFAULT_TABLES)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any], base: Optional['BenchmarkTables'] = None) -> 'BenchmarkTables':
        """Build tables from plain data merged over a base set.

        Args:
            data: Mapping of table name to overrides. Category tables take a
                mapping of category to thresholds; fixed bands take thresholds.
            base: Tables to merge over. Defaults to the built-in tables

        Returns:
            New BenchmarkTables instance

        Raises:
            ConfigurationError: If a table name is unknown or a value is malformed
        """
        base = base or cls.default()
        known = {f.name for f in fields(cls)}
        overrides: Dict[str, Any] = {}

        for name, value in (data or {}).items():
            if name not in known:
                raise ConfigurationError(f"Unknown benchmark table: {name}", config_key=name)
            try:
                if name in _SCALAR_THRESHOLDS:
                    overrides[name] = BenchmarkThresholds.from_value(value)
                    overrides[name].validate()
                    continue

                if not isinstance(value, Mapping):
                    raise ValidationError(f"Benchmark table {name} must be a mapping")
                if name == 'valuation_multiples':
                    reader = ValuationMultiples.from_value
                elif name in ('growth_potential', 'market_attractiveness'):
                    reader = CategoryOutlook.from_value
                else:
                    reader = BenchmarkThresholds.from_value

                merged = dict(getattr(base, name))
                for key, row in value.items():
                    parsed = reader(row)
                    if isinstance(parsed, BenchmarkThresholds):
                        parsed.validate()
                    merged[str(key).upper()] = parsed
                overrides[name] = merged
            except ValidationError as e:
                raise ConfigurationError(
                    f"Invalid benchmark table {name}: {e.message}",
                    config_key=name,
                    original_exception=e
                )

        return replace(base, **overrides)

    @classmethod
    def from_yaml(cls, path: str, base: Optional['BenchmarkTables'] = None) -> 'BenchmarkTables':
        """Load benchmark overrides from a YAML file.

        Args:
            path: Path to a YAML mapping of table overrides
            base: Tables to merge over. Defaults to the built-in tables

        Returns:
            New BenchmarkTables instance

        Raises:
            ConfigurationError: If the file cannot be read or is malformed
        """
        try:
            with open(path, 'r') as file:
                data = yaml.safe_load(file) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(
                f"Failed to load benchmarks from {path}: {str(e)}",
                config_file=path,
                original_exception=e
            )

        if not isinstance(data, Mapping):
            raise ConfigurationError(f"Benchmark file {path} must contain a mapping", config_file=path)

        logger.info(f"Loaded benchmark overrides for {len(data)} tables from {path}")
        return cls.from_dict(data, base=base)

    def _category_row(self, table: Mapping[str, Any], category: Union[str, BusinessCategory, None]):
        key = BusinessCategory.from_value(category).value
        return table.get(key, table[OTHER])

    def thresholds_for(self, table_name: str, category: Union[str, BusinessCategory, None]) -> BenchmarkThresholds:
        """Category row of a threshold table, falling back to OTHER."""
        return self._category_row(getattr(self, table_name), category)

    def growth_for_stage(self, stage: MaturityStage) -> BenchmarkThresholds:
        return self.revenue_growth[stage.value]

    def valuation_for(self, category: Union[str, BusinessCategory, None]) -> ValuationMultiples:
        return self._category_row(self.valuation_multiples, category)

    def growth_potential_for(self, category: Union[str, BusinessCategory, None]) -> CategoryOutlook:
        return self._category_row(self.growth_potential, category)

    def attractiveness_for(self, category: Union[str, BusinessCategory, None]) -> CategoryOutlook:
        return self._category_row(self.market_attractiveness, category)

    def to_dict(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if isinstance(value, Mapping):
                result[f.name] = {k: v.to_dict() for k, v in value.items()}
            else:
                result[f.name] = value.to_dict()
        return result


def _frozen_weights(**weights: float) -> Mapping[str, float]:
    return MappingProxyType(dict(weights))


@dataclass(frozen=True)
class ScoringWeights:
    """Immutable weights for dimension sub-scores, the overall score and confidence."""
    financial: Mapping[str, float] = field(
        default_factory=lambda: _frozen_weights(profitability=0.4, liquidity=0.3, efficiency=0.3))
    growth: Mapping[str, float] = field(
        default_factory=lambda: _frozen_weights(revenue_growth=0.5, market_expansion=0.3, scalability=0.2))
    operational: Mapping[str, float] = field(
        default_factory=lambda: _frozen_weights(
            business_maturity=0.4, operational_efficiency=0.35, market_positioning=0.25))
    sale_readiness: Mapping[str, float] = field(
        default_factory=lambda: _frozen_weights(
            valuation_reasonableness=0.5, market_attractiveness=0.3, documentation_quality=0.2))
    overall: Mapping[str, float] = field(
        default_factory=lambda: _frozen_weights(
            financial=0.4, growth=0.25, operational=0.2, sale_readiness=0.15))
    confidence: Mapping[str, float] = field(
        default_factory=lambda: _frozen_weights(completeness=0.4, quality=0.35, consistency=0.25))

    def __post_init__(self):
        for f in fields(self):
            object.__setattr__(self, f.name, MappingProxyType(dict(getattr(self, f.name))))

    def validate(self) -> None:
        """Validate that every weight group is non-negative and sums to 1.

        Raises:
            ValidationError: If a weight group is malformed.
        """
        for f in fields(self):
            group = getattr(self, f.name)
            if any(w < 0 for w in group.values()):
                raise ValidationError(f"Weights for {f.name} cannot be negative", field_name=f.name)
            total = sum(group.values())
            if abs(total - 1.0) > 1e-6:
                raise ValidationError(f"Weights for {f.name} must sum to 1: {total}", field_name=f.name)


DEFAULT_BENCHMARKS = BenchmarkTables.default()
DEFAULT_WEIGHTS = ScoringWeights()


def load_configured_benchmarks() -> BenchmarkTables:
    """Benchmarks named by ``business_health.scoring.benchmarks_file``, or the defaults."""
    path = config.get('business_health.scoring.benchmarks_file')
    if not path:
        return DEFAULT_BENCHMARKS
    if not os.path.exists(path):
        raise ConfigurationError(
            f"Benchmarks file not found: {path}",
            config_key='business_health.scoring.benchmarks_file',
            config_file=path
        )
    return BenchmarkTables.from_yaml(path)
