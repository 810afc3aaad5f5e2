"""Tests for the keyword rule lists behind the free-text heuristics."""

import pytest

from business_health.analyzers.text_rules import (
    COMPETITION_INTENSITY_RULES, COMPETITIVE_POSITION_RULES, DIFFERENTIATION_RULES,
    OPERATING_HOURS_RULES, SEASONALITY_RULES, KeywordRule, apply_cumulative,
    count_sentences, first_match
)


class TestKeywordRules:
    """Test cases for rule evaluation."""

    def test_matching_is_case_insensitive(self):
        rule = KeywordRule(r'\bniche\b', 10, 'niche')
        assert rule.matches('Strong NICHE positioning')
        assert not rule.matches('niches')
        assert not rule.matches(None)
        assert not rule.matches('')

    def test_first_match_respects_order(self):
        rule = first_match('Saturated market but a unique offer', COMPETITION_INTENSITY_RULES)
        assert rule.value == 25

    def test_first_match_without_match(self):
        assert first_match('no keywords here', OPERATING_HOURS_RULES) is None
        assert first_match(None, OPERATING_HOURS_RULES) is None

    def test_cumulative_rules_add_once_each(self):
        score, factors = apply_cumulative(
            'Unique, niche and proprietary offering', COMPETITIVE_POSITION_RULES, base=50
        )
        assert score == 95
        assert len(factors) == 2

    def test_cumulative_rules_clamp(self):
        rules = (KeywordRule('a', 80, 'a'), KeywordRule('b', 80, 'b'))
        score, _ = apply_cumulative('a b', rules, base=50)
        assert score == 100.0
        score, _ = apply_cumulative('saturated price competition', COMPETITIVE_POSITION_RULES, base=20)
        assert score == 0.0

    def test_limited_competition_phrase(self):
        score, factors = apply_cumulative(
            'Limited local competition, mostly compete with large national players',
            COMPETITIVE_POSITION_RULES,
            base=50
        )
        assert score == 65
        assert factors == ['Limited direct competition eases pressure on market share']

    def test_ai_keyword_needs_word_boundary(self):
        _, factors = apply_cumulative('Family-owned bakery with fresh bread', DIFFERENTIATION_RULES, base=40)
        assert 'Technology integration provides operational advantages' not in factors
        _, factors = apply_cumulative('We use AI to route deliveries', DIFFERENTIATION_RULES, base=40)
        assert 'Technology integration provides operational advantages' in factors


class TestSeasonalityAndHours:
    """Test cases for seasonality and operating-hours rules."""

    @pytest.mark.parametrize('text, expected', [
        ('Not seasonal - consistent year-round demand', 85),
        ('Minimal variation', 70),
        ('Moderate summer uplift', 55),
        ('Peak summer months, slower in winter', 30),
        ('Highly seasonal business', 30),
    ])
    def test_seasonality(self, text, expected):
        assert first_match(text, SEASONALITY_RULES).value == expected

    @pytest.mark.parametrize('text, expected', [
        ('24/7 operations with shift coverage', 90),
        ('Flexible by appointment', 75),
        ('Extended evening hours', 70),
        ('Limited weekend hours', 30),
    ])
    def test_operating_hours(self, text, expected):
        assert first_match(text, OPERATING_HOURS_RULES).value == expected


class TestCountSentences:
    """Test cases for count_sentences."""

    def test_counts_non_empty_fragments(self):
        assert count_sentences('One. Two! Three? ') == 3
        assert count_sentences('Trailing dots...') == 1
        assert count_sentences('') == 0
        assert count_sentences(None) == 0
