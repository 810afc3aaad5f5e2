"""Conversion of caller business snapshots into engine inputs.

A snapshot may be a mapping or any object with attributes, using either
snake_case or camelCase field names. Fixed-point monetary values are turned
into floats and establishment dates into ``datetime.date``.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Any, Mapping, Optional, Tuple

from business_health.models.data_models import BusinessFinancialData, BusinessOperationalData
from business_health.utils.exceptions import ValidationError

FINANCIAL_FIELDS = {
    'revenue': 'revenue',
    'profit': 'profit',
    'cash_flow': 'cashFlow',
    'ebitda': 'ebitda',
    'gross_margin': 'grossMargin',
    'net_margin': 'netMargin',
    'monthly_revenue': 'monthlyRevenue',
    'yearly_growth': 'yearlyGrowth',
    'asking_price': 'askingPrice',
    'total_assets': 'totalAssets',
    'liabilities': 'liabilities',
    'inventory': 'inventory',
    'equipment': 'equipment',
    'real_estate': 'realEstate',
}

OPERATIONAL_FIELDS = {
    'established': 'established',
    'employees': 'employees',
    'customer_base': 'customerBase',
    'hours_of_operation': 'hoursOfOperation',
    'days_open': 'daysOpen',
    'seasonality': 'seasonality',
    'competition': 'competition',
    'category': 'category',
    'description': 'description',
}


def _lookup(snapshot: Any, snake_name: str, camel_name: str) -> Any:
    if isinstance(snapshot, Mapping):
        if snake_name in snapshot:
            return snapshot[snake_name]
        return snapshot.get(camel_name)
    value = getattr(snapshot, snake_name, None)
    if value is None:
        value = getattr(snapshot, camel_name, None)
    return value


def to_number(value: Any, field_name: str) -> Optional[float]:
    """Convert a monetary or ratio value to float; None stays None.

    Raises:
        ValidationError: If the value is not numeric
    """
    if value is None:
        return None
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be numeric: {value!r}", field_name=field_name, field_value=value)
    if isinstance(value, (int, float, Decimal)):
        return float(value)
    if isinstance(value, str) and value.strip():
        try:
            return float(Decimal(value.strip()))
        except ArithmeticError as e:
            raise ValidationError(
                f"{field_name} must be numeric: {value!r}",
                field_name=field_name,
                field_value=value,
                original_exception=e
            )
    if isinstance(value, str):
        return None
    raise ValidationError(f"{field_name} must be numeric: {value!r}", field_name=field_name, field_value=value)


def to_count(value: Any, field_name: str) -> Optional[int]:
    number = to_number(value, field_name)
    if number is None:
        return None
    return int(number)


def to_date(value: Any) -> Optional[date]:
    """Convert an establishment date to ``date``.

    Accepts dates, datetimes and ISO-8601 strings (with or without a time
    part or a trailing ``Z``).

    Raises:
        ValidationError: If a string is not a valid ISO date
    """
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            if len(text) == 10:
                return date.fromisoformat(text)
            return datetime.fromisoformat(text.replace('Z', '+00:00')).date()
        except ValueError as e:
            raise ValidationError(
                f"Invalid establishment date: {value!r}",
                field_name='established',
                field_value=value,
                validation_rule='iso_date',
                original_exception=e
            )
    raise ValidationError(
        f"Invalid establishment date: {value!r}",
        field_name='established',
        field_value=value
    )


def _to_text(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value)
    return text if text.strip() else None


def business_identifier(snapshot: Any) -> str:
    """Identifier used for logging: the snapshot's id, else its title."""
    for name in ('id', 'business_id', 'businessId', 'title'):
        value = _lookup(snapshot, name, name)
        if value:
            return str(value)
    return 'unknown'


def snapshot_to_inputs(snapshot: Any) -> Tuple[BusinessFinancialData, BusinessOperationalData]:
    """Map a business snapshot onto the engine's input dataclasses.

    Args:
        snapshot: Mapping or attribute object describing one business

    Returns:
        Tuple of (BusinessFinancialData, BusinessOperationalData)

    Raises:
        ValidationError: If a field holds a value of the wrong kind
    """
    if isinstance(snapshot, (BusinessFinancialData, BusinessOperationalData)):
        raise ValidationError("Snapshot must describe a whole business, not one input part")

    financial = BusinessFinancialData(**{
        name: to_number(_lookup(snapshot, name, camel), name)
        for name, camel in FINANCIAL_FIELDS.items()
    })

    values = {name: _lookup(snapshot, name, camel) for name, camel in OPERATIONAL_FIELDS.items()}
    days_open = values['days_open']
    if isinstance(days_open, str):
        days_open = days_open.split(',')
    operational = BusinessOperationalData(
        established=to_date(values['established']),
        employees=to_count(values['employees'], 'employees'),
        customer_base=to_count(values['customer_base'], 'customer_base'),
        hours_of_operation=_to_text(values['hours_of_operation']),
        days_open=tuple(days_open) if days_open else None,
        seasonality=_to_text(values['seasonality']),
        competition=_to_text(values['competition']),
        category=_to_text(values['category']),
        description=_to_text(values['description'])
    )

    financial.validate()
    operational.validate()
    return financial, operational
