from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from project root
load_dotenv(Path(__file__).resolve().parent.parent.parent / ".env")

DEFAULT_WEIGHTS: dict[str, float] = {
    "walkability": 0.20,
    "schools": 0.15,
    "safety": 0.20,
    "nightlife": 0.10,
    "parks": 0.10,
    "transit": 0.15,
    "shopping": 0.05,
    "restaurants": 0.05,
}


@dataclass(frozen=True)
class TierThresholds:
    excellent: float = 80.0
    good: float = 60.0
    decent: float = 40.0


@dataclass(frozen=True)
class HighlightThresholds:
    min_walkability: float = 70.0
    min_school_rating: float = 8.0
    max_crime_rate: float = 20.0
    min_transit: float = 70.0
    min_restaurants: int = 20
    min_parks: int = 5


@dataclass(frozen=True)
class MatchingConfig:
    """Tunable constants for scoring, explanation and ranking.

    ``weights`` maps each known priority to its share of the weighted sum.
    Priorities missing from the table are scored with ``fallback_weight``.
    """

    weights: dict[str, float] = field(default_factory=lambda: dict(DEFAULT_WEIGHTS))
    fallback_weight: float = 0.1
    neutral_crime_rate: float = 50.0
    budget_bonus: float = 20.0
    budget_penalty_cap: float = 30.0
    tiers: TierThresholds = field(default_factory=TierThresholds)
    highlights: HighlightThresholds = field(default_factory=HighlightThresholds)
    default_limit: int = 10
    history_cap: int = 5
    max_workers: int = int(os.getenv("NEIGHBORFIT_MAX_WORKERS", "4"))
    parallel_threshold: int = int(os.getenv("NEIGHBORFIT_PARALLEL_THRESHOLD", "200"))


DEFAULT_MATCHING_CONFIG = MatchingConfig()
