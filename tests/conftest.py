"""Shared fixtures for business health tests."""

from datetime import date
from decimal import Decimal

import pytest

AS_OF = date(2026, 10, 18)


def greentech_snapshot():
    return {
        'id': 'greentech',
        'title': 'GreenTech Solutions LLC',
        'category': 'TECHNOLOGY',
        'established': '2019-03-15',
        'employees': 12,
        'askingPrice': Decimal('850000'),
        'revenue': Decimal('425000'),
        'profit': Decimal('85000'),
        'monthlyRevenue': Decimal('35416.67'),
        'cashFlow': Decimal('95000'),
        'ebitda': Decimal('110000'),
        'grossMargin': Decimal('0.68'),
        'netMargin': Decimal('0.20'),
        'yearlyGrowth': Decimal('0.15'),
        'totalAssets': Decimal('180000'),
        'liabilities': Decimal('45000'),
        'equipment': Decimal('25000'),
        'inventory': Decimal('5000'),
        'customerBase': 85,
        'hoursOfOperation': 'Monday-Friday 8am-6pm',
        'daysOpen': ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday'],
        'seasonality': 'Not seasonal - consistent year-round demand',
        'competition': 'Moderate competition from larger firms, but strong niche positioning',
        'description': (
            'Sustainable technology consulting firm specializing in renewable energy solutions '
            'for small to medium businesses. Established client base with recurring revenue model.'
        ),
    }


def bakery_snapshot():
    return {
        'id': 'bakery',
        'title': 'Main Street Bakery & Cafe',
        'category': 'RESTAURANT',
        'established': '2015-08-01',
        'employees': 8,
        'askingPrice': Decimal('275000'),
        'revenue': Decimal('185000'),
        'profit': Decimal('12000'),
        'monthlyRevenue': Decimal('15416.67'),
        'cashFlow': Decimal('8000'),
        'ebitda': Decimal('25000'),
        'grossMargin': Decimal('0.45'),
        'netMargin': Decimal('0.065'),
        'yearlyGrowth': Decimal('-0.08'),
        'totalAssets': Decimal('95000'),
        'liabilities': Decimal('68000'),
        'equipment': Decimal('45000'),
        'inventory': Decimal('8000'),
        'realEstate': Decimal('0'),
        'customerBase': 450,
        'hoursOfOperation': 'Tuesday-Sunday 6am-4pm',
        'daysOpen': ['Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday'],
        'seasonality': 'Peak summer months, slower in winter',
        'competition': 'High competition from chain stores and new cafes',
        'description': (
            'Family-owned bakery and cafe serving fresh baked goods, specialty coffee, and light '
            'lunch items. Prime downtown location with strong local following.'
        ),
    }


def logistics_snapshot():
    return {
        'id': 'logistics',
        'title': 'Regional Logistics Services',
        'category': 'SERVICES',
        'established': '2012-01-10',
        'employees': 45,
        'askingPrice': Decimal('1800000'),
        'revenue': Decimal('920000'),
        'profit': Decimal('184000'),
        'monthlyRevenue': Decimal('76666.67'),
        'cashFlow': Decimal('195000'),
        'ebitda': Decimal('225000'),
        'grossMargin': Decimal('0.42'),
        'netMargin': Decimal('0.20'),
        'yearlyGrowth': Decimal('0.12'),
        'totalAssets': Decimal('580000'),
        'liabilities': Decimal('185000'),
        'equipment': Decimal('125000'),
        'inventory': Decimal('15000'),
        'realEstate': Decimal('340000'),
        'customerBase': 120,
        'hoursOfOperation': '24/7 operations with shift coverage',
        'daysOpen': ['Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday', 'Sunday'],
        'seasonality': 'Peak during holiday seasons (Q4), steady year-round',
        'competition': 'Limited local competition, mostly compete with large national players',
        'description': (
            'Mid-size logistics and warehousing company serving regional e-commerce businesses. '
            'Strong relationships with major shipping carriers and modern warehouse facilities.'
        ),
    }


@pytest.fixture
def greentech():
    return greentech_snapshot()


@pytest.fixture
def bakery():
    return bakery_snapshot()


@pytest.fixture
def logistics():
    return logistics_snapshot()
