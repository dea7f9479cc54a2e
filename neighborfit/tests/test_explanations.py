from __future__ import annotations

import pytest

from neighborfit.matching.config import HighlightThresholds, MatchingConfig
from neighborfit.matching.explanations import (
    DINING,
    GOOD_SCHOOLS,
    GOOD_TRANSIT,
    GREEN_SPACE,
    LOW_CRIME,
    TIER_DECENT,
    TIER_EXCELLENT,
    TIER_GOOD,
    TIER_LIMITED,
    WALKABLE,
    ExplanationGenerator,
)
from neighborfit.matching.models import AttributeSet, PreferenceProfile

explainer = ExplanationGenerator()
PROFILE = PreferenceProfile(priorities=["nightlife"])


@pytest.mark.parametrize(
    "score, tier",
    [
        (100, TIER_EXCELLENT),
        (80, TIER_EXCELLENT),
        (79.99, TIER_GOOD),
        (60, TIER_GOOD),
        (59.9, TIER_DECENT),
        (40, TIER_DECENT),
        (39.9, TIER_LIMITED),
        (0, TIER_LIMITED),
    ],
)
def test_tier_statement_thresholds(score, tier):
    assert explainer.explain(PROFILE, AttributeSet(), score) == [tier]


def test_all_highlights_in_fixed_order():
    attrs = AttributeSet(
        walkability=98, school_rating=8, crime_rate=15, transit=95, restaurants=150, parks=8,
    )
    assert explainer.explain(PROFILE, attrs, 85) == [
        TIER_EXCELLENT, WALKABLE, GOOD_SCHOOLS, LOW_CRIME, GOOD_TRANSIT, DINING, GREEN_SPACE,
    ]


def test_highlights_ignore_chosen_priorities():
    attrs = AttributeSet(school_rating=9)
    reasons = explainer.explain(PreferenceProfile(priorities=["nightlife"]), attrs, 10)
    assert reasons == [TIER_LIMITED, GOOD_SCHOOLS]


def test_thresholds_are_inclusive():
    attrs = AttributeSet(walkability=70, crime_rate=20, transit=70, restaurants=20, parks=5)
    assert explainer.explain(PROFILE, attrs, 50)[1:] == [WALKABLE, LOW_CRIME, GOOD_TRANSIT, DINING, GREEN_SPACE]


def test_values_just_outside_thresholds_produce_no_highlight():
    attrs = AttributeSet(
        walkability=69.9, school_rating=7.9, crime_rate=20.1, transit=69, restaurants=19, parks=4,
    )
    assert explainer.explain(PROFILE, attrs, 50) == [TIER_DECENT]


def test_zero_crime_rate_is_a_highlight():
    assert LOW_CRIME in explainer.explain(PROFILE, AttributeSet(crime_rate=0), 50)


def test_missing_attributes_never_fail_and_never_highlight():
    reasons = explainer.explain(PROFILE, AttributeSet(), 0)
    assert reasons == [TIER_LIMITED]


def test_custom_thresholds():
    custom = ExplanationGenerator(MatchingConfig(highlights=HighlightThresholds(min_parks=50)))
    assert custom.explain(PROFILE, AttributeSet(parks=8), 50) == [TIER_DECENT]
