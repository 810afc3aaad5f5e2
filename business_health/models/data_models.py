"""Data models for the business health scoring engine.

This module contains the input and result models used throughout the engine,
including validation methods and plain-data conversion for audit trails.
"""

from dataclasses import dataclass, field, fields
from datetime import date, datetime
from enum import Enum
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple
import math

from business_health.utils.exceptions import ValidationError

ALGORITHM_VERSION = '1.0.0'

DIMENSIONS = ('financial', 'growth', 'operational', 'sale_readiness')


class HealthTrajectory(Enum):
    """Coarse direction of a business's health."""
    IMPROVING = 'IMPROVING'
    STABLE = 'STABLE'
    DECLINING = 'DECLINING'
    VOLATILE = 'VOLATILE'


class BusinessCategory(Enum):
    """Industry tag used to select benchmark rows."""
    RESTAURANT = 'RESTAURANT'
    RETAIL = 'RETAIL'
    ECOMMERCE = 'ECOMMERCE'
    TECHNOLOGY = 'TECHNOLOGY'
    MANUFACTURING = 'MANUFACTURING'
    SERVICES = 'SERVICES'
    HEALTHCARE = 'HEALTHCARE'
    REAL_ESTATE = 'REAL_ESTATE'
    AUTOMOTIVE = 'AUTOMOTIVE'
    ENTERTAINMENT = 'ENTERTAINMENT'
    EDUCATION = 'EDUCATION'
    OTHER = 'OTHER'

    @classmethod
    def from_value(cls, value: Any) -> 'BusinessCategory':
        """Resolve a category tag, falling back to OTHER for unknown tags.

        Args:
            value: Category enum, name or free-form tag (e.g. 'real estate')

        Returns:
            Matching BusinessCategory
        """
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.OTHER
        key = str(value).strip().upper().replace('-', '_').replace(' ', '_')
        if key == 'E_COMMERCE':
            key = 'ECOMMERCE'
        try:
            return cls(key)
        except ValueError:
            return cls.OTHER


class MaturityStage(Enum):
    """Business-age bracket used for growth benchmarks."""
    NEW = 'NEW'
    GROWING = 'GROWING'
    MATURE = 'MATURE'
    ESTABLISHED = 'ESTABLISHED'


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


@dataclass
class BusinessFinancialData:
    """Financial facts about a business.

    All fields are optional; ``None`` means the fact was not supplied and is
    never treated as zero. Monetary values share one currency unit, margins
    and growth are fractions (0.12 == 12%).
    """
    revenue: Optional[float] = None
    profit: Optional[float] = None
    cash_flow: Optional[float] = None
    ebitda: Optional[float] = None
    gross_margin: Optional[float] = None
    net_margin: Optional[float] = None
    monthly_revenue: Optional[float] = None
    yearly_growth: Optional[float] = None
    asking_price: Optional[float] = None
    total_assets: Optional[float] = None
    liabilities: Optional[float] = None
    inventory: Optional[float] = None
    equipment: Optional[float] = None
    real_estate: Optional[float] = None

    def validate(self) -> None:
        """Validate the financial data.

        Negative or inconsistent values are legal inputs (they lower the
        confidence assessment); only non-numeric and non-finite values are
        rejected.

        Raises:
            ValidationError: If any validation checks fail.
        """
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if not _is_number(value):
                raise ValidationError(
                    f"{f.name} must be numeric: {value!r}",
                    field_name=f.name,
                    field_value=value,
                    validation_rule='numeric'
                )
            if not math.isfinite(value):
                raise ValidationError(
                    f"{f.name} must be finite: {value}",
                    field_name=f.name,
                    field_value=value,
                    validation_rule='finite'
                )

    def present_fields(self) -> List[str]:
        """Names of the fields that carry a value."""
        return [f.name for f in fields(self) if getattr(self, f.name) is not None]


@dataclass
class BusinessOperationalData:
    """Operational facts about a business.

    ``days_open`` keeps the caller's order with duplicates removed and
    ``category`` is normalized to a BusinessCategory value.
    """
    established: Optional[date] = None
    employees: Optional[int] = None
    customer_base: Optional[int] = None
    hours_of_operation: Optional[str] = None
    days_open: Optional[Tuple[str, ...]] = None
    seasonality: Optional[str] = None
    competition: Optional[str] = None
    category: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self):
        """Normalize days open and category."""
        if self.days_open is not None:
            if isinstance(self.days_open, str):
                self.days_open = [self.days_open]
            seen = []
            for day in self.days_open:
                day = str(day).strip()
                if day and day not in seen:
                    seen.append(day)
            self.days_open = tuple(seen)

        if self.category is not None:
            self.category = BusinessCategory.from_value(self.category).value

    @property
    def business_category(self) -> BusinessCategory:
        return BusinessCategory.from_value(self.category)

    def validate(self) -> None:
        """Validate the operational data.

        Raises:
            ValidationError: If any validation checks fail.
        """
        if self.established is not None and not isinstance(self.established, date):
            raise ValidationError(
                f"Established must be a date: {self.established!r}",
                field_name='established',
                field_value=self.established
            )

        for name in ('employees', 'customer_base'):
            value = getattr(self, name)
            if value is not None and (not isinstance(value, int) or isinstance(value, bool)):
                raise ValidationError(
                    f"{name} must be an integer: {value!r}",
                    field_name=name,
                    field_value=value,
                    validation_rule='integer'
                )

        for name in ('hours_of_operation', 'seasonality', 'competition', 'description'):
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                raise ValidationError(
                    f"{name} must be text: {value!r}",
                    field_name=name,
                    field_value=value,
                    validation_rule='text'
                )


@dataclass(frozen=True)
class ScoreBreakdown:
    """Explained score for one health dimension.

    Immutable once built. ``available`` is False when none of the
    dimension's sub-scores could be computed from the inputs.
    """
    score: float
    components: Mapping[str, float] = field(default_factory=dict)
    factors: Tuple[str, ...] = ()
    recommendations: Tuple[str, ...] = ()
    available: bool = True

    def __post_init__(self):
        object.__setattr__(self, 'components', MappingProxyType(dict(self.components)))
        object.__setattr__(self, 'factors', tuple(self.factors))
        object.__setattr__(self, 'recommendations', tuple(self.recommendations))

    def validate(self) -> None:
        """Validate the breakdown.

        Raises:
            ValidationError: If any validation checks fail.
        """
        if not 0 <= self.score <= 100:
            raise ValidationError(f"Score must be between 0 and 100: {self.score}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'score': self.score,
            'components': dict(self.components),
            'factors': list(self.factors),
            'recommendations': list(self.recommendations),
            'available': self.available
        }


@dataclass
class HealthScores:
    """Headline scores of a calculation."""
    overall: float
    financial: float
    growth: float
    operational: float
    sale_readiness: float
    confidence: float
    trajectory: HealthTrajectory

    def validate(self) -> None:
        """Validate health scores.

        Raises:
            ValidationError: If any validation checks fail.
        """
        for score_name, score in [
            ("overall", self.overall),
            ("financial", self.financial),
            ("growth", self.growth),
            ("operational", self.operational),
            ("sale_readiness", self.sale_readiness),
            ("confidence", self.confidence)
        ]:
            if not 0 <= score <= 100:
                raise ValidationError(f"{score_name} must be between 0 and 100: {score}")

        if not isinstance(self.trajectory, HealthTrajectory):
            raise ValidationError(f"Invalid trajectory: {self.trajectory}")

    def dimension_scores(self) -> Dict[str, float]:
        return {
            'financial': self.financial,
            'growth': self.growth,
            'operational': self.operational,
            'sale_readiness': self.sale_readiness
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            'overall': self.overall,
            'financial': self.financial,
            'growth': self.growth,
            'operational': self.operational,
            'sale_readiness': self.sale_readiness,
            'confidence': self.confidence,
            'trajectory': self.trajectory.value
        }


@dataclass
class ConfidenceAssessment:
    """How far the health scores can be trusted given the input data."""
    overall: float
    data_completeness: float
    data_quality: float
    score_consistency: float
    factors: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    def validate(self) -> None:
        """Validate the assessment.

        Raises:
            ValidationError: If any validation checks fail.
        """
        for name in ('overall', 'data_completeness', 'data_quality', 'score_consistency'):
            value = getattr(self, name)
            if not 0 <= value <= 100:
                raise ValidationError(f"{name} must be between 0 and 100: {value}")

    def to_dict(self) -> Dict[str, Any]:
        return {
            'overall': self.overall,
            'data_completeness': self.data_completeness,
            'data_quality': self.data_quality,
            'score_consistency': self.score_consistency,
            'factors': list(self.factors),
            'recommendations': list(self.recommendations)
        }


@dataclass
class CalculationMetadata:
    """Provenance of a calculation."""
    calculated_at: datetime
    data_version: str
    algorithm_version: str = ALGORITHM_VERSION
    reference_date: Optional[date] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'calculated_at': self.calculated_at.isoformat(),
            'data_version': self.data_version,
            'algorithm_version': self.algorithm_version,
            'reference_date': self.reference_date.isoformat() if self.reference_date else None
        }


@dataclass
class HealthCalculationResult:
    """Complete, self-contained output of one health calculation."""
    scores: HealthScores
    breakdown: Dict[str, ScoreBreakdown]
    confidence: ConfidenceAssessment
    metadata: CalculationMetadata

    def validate(self) -> None:
        """Validate the result.

        Raises:
            ValidationError: If any validation checks fail.
        """
        self.scores.validate()
        self.confidence.validate()

        missing = [name for name in DIMENSIONS if name not in self.breakdown]
        if missing:
            raise ValidationError(f"Breakdown is missing dimensions: {', '.join(missing)}")
        for breakdown in self.breakdown.values():
            breakdown.validate()

        if not self.metadata.algorithm_version:
            raise ValidationError("Result must carry an algorithm version")

    def to_dict(self) -> Dict[str, Any]:
        """Convert the result to plain, JSON-serializable data."""
        return {
            'scores': self.scores.to_dict(),
            'breakdown': {name: self.breakdown[name].to_dict() for name in DIMENSIONS if name in self.breakdown},
            'confidence': self.confidence.to_dict(),
            'metadata': self.metadata.to_dict()
        }


@dataclass
class HealthInsights:
    """Human-readable digest of a calculation result."""
    summary: str
    key_strengths: List[str] = field(default_factory=list)
    key_weaknesses: List[str] = field(default_factory=list)
    recommendations: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'summary': self.summary,
            'key_strengths': list(self.key_strengths),
            'key_weaknesses': list(self.key_weaknesses),
            'recommendations': list(self.recommendations)
        }


def dedupe(items: Sequence[str]) -> List[str]:
    """Drop repeated strings while keeping first-seen order."""
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result
