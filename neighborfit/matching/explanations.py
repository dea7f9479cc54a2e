from __future__ import annotations

from .config import DEFAULT_MATCHING_CONFIG, MatchingConfig
from .models import AttributeSet, PreferenceProfile

TIER_EXCELLENT = "Excellent overall match for your lifestyle"
TIER_GOOD = "Good match with some great features"
TIER_DECENT = "Decent match with room for compromise"
TIER_LIMITED = "Limited match - consider adjusting preferences"

WALKABLE = "High walkability score - easy to get around on foot"
GOOD_SCHOOLS = "Excellent schools in the area"
LOW_CRIME = "Very safe neighborhood with low crime rates"
GOOD_TRANSIT = "Great public transportation access"
DINING = "Lots of dining options nearby"
GREEN_SPACE = "Plenty of parks and green spaces"


class ExplanationGenerator:
    """Human-readable reasons for a match score.

    The first reason is always the tier statement. Highlights are checked
    against raw attributes regardless of which priorities the user chose; an
    attribute that is missing never produces a highlight.
    """

    def __init__(self, config: MatchingConfig = DEFAULT_MATCHING_CONFIG):
        self.config = config

    def tier(self, score: float) -> str:
        tiers = self.config.tiers
        if score >= tiers.excellent:
            return TIER_EXCELLENT
        if score >= tiers.good:
            return TIER_GOOD
        if score >= tiers.decent:
            return TIER_DECENT
        return TIER_LIMITED

    def explain(self, profile: PreferenceProfile, attrs: AttributeSet, score: float) -> list[str]:
        h = self.config.highlights
        reasons = [self.tier(score)]

        checks = [
            (attrs.walkability is not None and attrs.walkability >= h.min_walkability, WALKABLE),
            (attrs.school_rating is not None and attrs.school_rating >= h.min_school_rating, GOOD_SCHOOLS),
            (attrs.crime_rate is not None and attrs.crime_rate <= h.max_crime_rate, LOW_CRIME),
            (attrs.transit is not None and attrs.transit >= h.min_transit, GOOD_TRANSIT),
            (attrs.restaurants is not None and attrs.restaurants >= h.min_restaurants, DINING),
            (attrs.parks is not None and attrs.parks >= h.min_parks, GREEN_SPACE),
        ]
        reasons.extend(sentence for passed, sentence in checks if passed)
        return reasons
