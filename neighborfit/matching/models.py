from __future__ import annotations

import logging
import math
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

logger = logging.getLogger(__name__)


class Priority(str, Enum):
    walkability = "walkability"
    schools = "schools"
    safety = "safety"
    nightlife = "nightlife"
    parks = "parks"
    transit = "transit"
    shopping = "shopping"
    restaurants = "restaurants"


class Lifestyle(str, Enum):
    urban = "urban"
    suburban = "suburban"
    rural = "rural"


def _clamp(value: float, low: float, high: float | None, name: str) -> float:
    clamped = max(low, value) if high is None else max(low, min(high, value))
    if clamped != value:
        logger.debug("Clamped %s from %s to %s", name, value, clamped)
    return clamped


class AttributeSet(BaseModel):
    """Scorable facts about one neighborhood.

    Every field is optional. Values outside their documented range are
    clamped on construction, so downstream math only ever sees in-range data.
    """

    model_config = ConfigDict(frozen=True)

    walkability: float | None = None
    transit: float | None = None
    bike: float | None = None
    crime_rate: float | None = None
    school_rating: float | None = None
    restaurants: int | None = None
    parks: int | None = None
    gyms: int | None = None
    shopping: int | None = None
    nightlife: int | None = None
    healthcare: int | None = None
    median_rent: float | None = None

    @field_validator("walkability", "transit", "bike")
    @classmethod
    def _clamp_percent(cls, v: float | None, info: ValidationInfo) -> float | None:
        return None if v is None else _clamp(v, 0.0, 100.0, info.field_name)

    @field_validator("school_rating")
    @classmethod
    def _clamp_school_rating(cls, v: float | None, info: ValidationInfo) -> float | None:
        return None if v is None else _clamp(v, 0.0, 10.0, info.field_name)

    @field_validator("crime_rate", "median_rent")
    @classmethod
    def _clamp_non_negative(cls, v: float | None, info: ValidationInfo) -> float | None:
        return None if v is None else _clamp(v, 0.0, None, info.field_name)

    @field_validator("restaurants", "parks", "gyms", "shopping", "nightlife", "healthcare")
    @classmethod
    def _clamp_count(cls, v: int | None, info: ValidationInfo) -> int | None:
        return None if v is None else int(_clamp(v, 0, None, info.field_name))


class Neighborhood(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    city: str
    state: str
    lat: float | None = None
    lng: float | None = None
    median_home_price: float | None = None
    description: str | None = None
    tags: list[str] = Field(default_factory=list)
    attributes: AttributeSet = Field(default_factory=AttributeSet)


class Budget(BaseModel):
    min: float = Field(default=0.0, ge=0.0)
    max: float = Field(default=1_000_000.0, ge=0.0)


class WorkLocation(BaseModel):
    lat: float | None = None
    lng: float | None = None
    address: str | None = None


class PreferenceProfile(BaseModel):
    """A user's priorities, budget and pass-through household details.

    Priorities outside :class:`Priority` are kept; the scoring engine gives
    them a fallback weight. ``lifestyle``, ``family_size``, ``has_children``
    and ``work_location`` are carried along but not scored.
    """

    model_config = ConfigDict(frozen=True)

    priorities: list[str] = Field(default_factory=list)
    budget: Budget | None = None
    lifestyle: Lifestyle = Lifestyle.suburban
    family_size: int = Field(default=1, ge=1)
    has_children: bool = False
    work_location: WorkLocation | None = None

    @field_validator("priorities")
    @classmethod
    def _dedupe_priorities(cls, v: list[str]) -> list[str]:
        seen: list[str] = []
        for key in v:
            key = key.strip()
            if key and key not in seen:
                seen.append(key)
        return seen


def to_display_score(score: float) -> int:
    """Round half up, so 89.5 displays as 90."""
    return int(math.floor(score + 0.5))


class ScoredCandidate(BaseModel):
    candidate_id: str
    name: str
    score: float = Field(ge=0.0, le=100.0)
    display_score: int = Field(ge=0, le=100)
    reasons: list[str] = Field(min_length=1)


class FactorScore(BaseModel):
    factor: str
    weight: float
    factor_score: float = Field(ge=0.0, le=100.0)


class MatchAnalysis(BaseModel):
    candidate_id: str
    score: float = Field(ge=0.0, le=100.0)
    display_score: int = Field(ge=0, le=100)
    reasons: list[str] = Field(min_length=1)
    breakdown: list[FactorScore]


class HistoryEntry(BaseModel):
    model_config = ConfigDict(frozen=True)

    candidate_id: str
    score: int
    timestamp: datetime


class HistoryPage(BaseModel):
    """Most recent history entries first; ``total_matches`` counts everything stored."""

    match_history: list[HistoryEntry]
    count: int
    total_matches: int
