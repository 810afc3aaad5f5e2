"""Ordered keyword rules for the free-text heuristics.

Each heuristic is an explicit list of ``KeywordRule`` entries evaluated in
order. First-match lists return the value of the first rule that matches;
cumulative lists add the value of every matching rule to a base score.
"""

import re
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from business_health.analyzers.normalization import clamp


@dataclass(frozen=True)
class KeywordRule:
    """Regex pattern paired with a score (first-match) or delta (cumulative)."""
    pattern: str
    value: float
    factor: str

    def matches(self, text: Optional[str]) -> bool:
        if not text:
            return False
        return re.search(self.pattern, text, re.IGNORECASE) is not None


def first_match(text: Optional[str], rules: Sequence[KeywordRule]) -> Optional[KeywordRule]:
    """Return the first rule matching ``text``, or None."""
    for rule in rules:
        if rule.matches(text):
            return rule
    return None


def apply_cumulative(
    text: Optional[str],
    rules: Sequence[KeywordRule],
    base: float
) -> Tuple[float, List[str]]:
    """Add the value of every matching rule to ``base``.

    Args:
        text: Free text to evaluate
        rules: Rules applied in order; each contributes at most once
        base: Starting score

    Returns:
        Tuple of (score clamped to [0, 100], factors of matching rules)
    """
    score = base
    factors: List[str] = []
    for rule in rules:
        if rule.matches(text):
            score += rule.value
            factors.append(rule.factor)
    return clamp(score), factors


def _any_of(*keywords: str) -> str:
    return r'\b(?:' + '|'.join(re.escape(k) for k in keywords) + r')\b'


# Market-expansion view of the competition field. First match wins.
COMPETITION_INTENSITY_RULES = (
    KeywordRule(_any_of('saturated', 'intense', 'fierce', 'many competitors', 'crowded', 'difficult'),
                25, 'Competition level assessed as high'),
    KeywordRule(_any_of('limited', 'little', 'minimal', 'niche', 'unique', 'first'),
                80, 'Competition level assessed as low'),
    KeywordRule(_any_of('moderate', 'some', 'few competitors', 'competitive'),
                55, 'Competition level assessed as moderate'),
)

# Positioning view of the competition field. Cumulative over a base of 50.
COMPETITIVE_POSITION_RULES = (
    KeywordRule(_any_of('unique', 'niche'),
                25, 'Unique positioning provides competitive advantage'),
    KeywordRule(_any_of('established relationships', 'loyal customers'),
                15, 'Strong customer relationships create competitive moat'),
    KeywordRule(_any_of('proprietary', 'exclusive'),
                20, 'Proprietary advantages strengthen market position'),
    KeywordRule(r'\b(?:limited|little|minimal)\b(?:\s+[\w-]+){0,2}\s+competition\b',
                15, 'Limited direct competition eases pressure on market share'),
    KeywordRule(_any_of('saturated', 'crowded'),
                -20, 'Saturated market increases competitive pressure'),
    KeywordRule(_any_of('price competition', 'race to bottom', 'race to the bottom'),
                -15, 'Price competition pressures margins'),
)

# Description differentiation. Cumulative over a base of 40.
DIFFERENTIATION_RULES = (
    KeywordRule(_any_of('innovative', 'cutting-edge', 'advanced', 'pioneering', 'revolutionary'),
                20, 'Innovation focus enhances market differentiation'),
    KeywordRule(_any_of('premium', 'high-quality', 'artisanal', 'custom', 'bespoke', 'luxury'),
                15, 'Quality positioning supports premium pricing'),
    KeywordRule(_any_of('exceptional service', 'customer-focused', 'personalized', 'dedicated'),
                12, 'Service excellence creates customer loyalty'),
    KeywordRule(_any_of('technology', 'digital', 'automated', 'software', 'ai', 'data-driven'),
                10, 'Technology integration provides operational advantages'),
    KeywordRule(_any_of('prime location', 'strategic location', 'high-traffic', 'downtown'),
                8, 'Strategic location enhances market position'),
)

# Operating hours. First match wins, otherwise 50.
OPERATING_HOURS_RULES = (
    KeywordRule(r'24', 90, '24/7 operations maximize accessibility'),
    KeywordRule(_any_of('flexible', 'variable'), 75, 'Flexible hours adapt to customer needs'),
    KeywordRule(_any_of('extended', 'long'), 70, 'Extended hours improve customer access'),
    KeywordRule(_any_of('limited', 'short'), 30, 'Limited hours may constrain customer access'),
)

# Seasonality management. First match wins, otherwise 50.
SEASONALITY_RULES = (
    KeywordRule(_any_of('year-round', 'year round', 'not seasonal'),
                85, 'Year-round revenue provides operational stability'),
    KeywordRule(_any_of('minimal', 'slight'),
                70, 'Minimal seasonal variation supports steady operations'),
    KeywordRule(_any_of('moderate'),
                55, 'Moderate seasonality requires operational adaptation'),
    KeywordRule(r'\bseasonal|\bpeak\b',
                30, 'High seasonality creates operational management challenges'),
)

# Scaling flexibility adjustments. One rule per list applies, by first match.
FLEXIBILITY_HOURS_RULES = (
    KeywordRule(r'24|\bflexible\b', 15, 'Flexible operating hours advantage'),
    KeywordRule(_any_of('limited', 'restricted'), -10, 'Limited hours may constrain growth'),
)

FLEXIBILITY_SEASONALITY_RULES = (
    KeywordRule(_any_of('year-round', 'year round', 'not seasonal'),
                10, 'Year-round operations support consistent growth'),
    KeywordRule(r'\bseasonal', -15, 'Seasonal nature may limit steady growth'),
)

# Sale presentation keyword bonuses. Cumulative.
PRESENTATION_RULES = (
    KeywordRule(_any_of('award-winning', 'recognized', 'certified', 'licensed', 'accredited'),
                15, 'Quality credentials enhance presentation'),
    KeywordRule(_any_of('established', 'proven', 'successful', 'profitable', 'growing'),
                10, 'Professional presentation appeals to buyers'),
)

# Documentation language bonus. Cumulative.
DESCRIPTION_LANGUAGE_RULES = (
    KeywordRule(_any_of('established', 'proven track record', 'strong customer base', 'competitive advantage'),
                10, 'Professional language enhances presentation'),
)


def count_sentences(text: Optional[str]) -> int:
    """Number of non-empty sentence fragments split on . ! and ?"""
    if not text:
        return 0
    return len([part for part in re.split(r'[.!?]+', text) if part.strip()])
