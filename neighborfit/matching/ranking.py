from __future__ import annotations

import logging
import math
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import Sequence

from .config import DEFAULT_MATCHING_CONFIG, MatchingConfig
from .errors import InvalidProfileError, RankingCancelledError
from .explanations import ExplanationGenerator
from .history import HistoryRecorder
from .models import (
    MatchAnalysis,
    Neighborhood,
    PreferenceProfile,
    ScoredCandidate,
    to_display_score,
)
from .scoring import ScoringEngine

logger = logging.getLogger(__name__)


def validate_profile(profile: PreferenceProfile) -> None:
    """Raise :class:`InvalidProfileError` if the profile cannot be scored."""
    if not profile.priorities:
        raise InvalidProfileError("Please set your preferences first to get matches")
    if profile.budget is not None and profile.budget.min > profile.budget.max:
        raise InvalidProfileError(
            f"Budget minimum {profile.budget.min} exceeds maximum {profile.budget.max}"
        )


def _check_cancelled(cancel_event: threading.Event | None) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise RankingCancelledError("Ranking request was cancelled")


class RankingService:
    """
    Scores, explains and orders a candidate set for one user.

    Large candidate sets are scored in chunks on a thread pool; every chunk
    is collected before sorting. Ties on score are broken by candidate id,
    ascending, so equal scores always come back in the same order.
    """

    def __init__(
        self,
        engine: ScoringEngine | None = None,
        explainer: ExplanationGenerator | None = None,
        history: HistoryRecorder | None = None,
        config: MatchingConfig = DEFAULT_MATCHING_CONFIG,
    ):
        self.config = config
        self.engine = engine or ScoringEngine(config)
        self.explainer = explainer or ExplanationGenerator(config)
        self.history = history

    def _warn_unknown_priorities(self, profile: PreferenceProfile) -> None:
        unknown = self.engine.unknown_priorities(profile)
        if unknown:
            logger.warning(
                "Unknown priorities %s, using fallback weight %s",
                ", ".join(unknown),
                self.config.fallback_weight,
            )

    def _evaluate(self, profile: PreferenceProfile, candidate: Neighborhood) -> ScoredCandidate:
        score = self.engine.score(profile, candidate.attributes)
        return ScoredCandidate(
            candidate_id=candidate.id,
            name=candidate.name,
            score=score,
            display_score=to_display_score(score),
            reasons=self.explainer.explain(profile, candidate.attributes, score),
        )

    def _evaluate_chunk(
        self,
        profile: PreferenceProfile,
        chunk: Sequence[Neighborhood],
        cancel_event: threading.Event | None,
    ) -> list[ScoredCandidate]:
        scored: list[ScoredCandidate] = []
        for candidate in chunk:
            _check_cancelled(cancel_event)
            scored.append(self._evaluate(profile, candidate))
        return scored

    def _evaluate_parallel(
        self,
        profile: PreferenceProfile,
        candidates: Sequence[Neighborhood],
        cancel_event: threading.Event | None,
    ) -> list[ScoredCandidate]:
        workers = max(1, self.config.max_workers)
        size = math.ceil(len(candidates) / workers)
        chunks = [candidates[i:i + size] for i in range(0, len(candidates), size)]

        pool = ThreadPoolExecutor(max_workers=workers)
        try:
            futures = [
                pool.submit(self._evaluate_chunk, profile, chunk, cancel_event)
                for chunk in chunks
            ]
            scored: list[ScoredCandidate] = []
            for fut in futures:
                scored.extend(fut.result())
            return scored
        finally:
            pool.shutdown(wait=True, cancel_futures=True)

    def rank(
        self,
        requester_id: str,
        profile: PreferenceProfile,
        candidates: Sequence[Neighborhood],
        limit: int | None = None,
        cancel_event: threading.Event | None = None,
    ) -> list[ScoredCandidate]:
        validate_profile(profile)
        if limit is None:
            limit = self.config.default_limit
        if limit <= 0:
            raise ValueError(f"limit must be positive, got {limit}")
        self._warn_unknown_priorities(profile)

        _check_cancelled(cancel_event)
        if len(candidates) >= self.config.parallel_threshold and self.config.max_workers > 1:
            scored = self._evaluate_parallel(profile, candidates, cancel_event)
        else:
            scored = self._evaluate_chunk(profile, candidates, cancel_event)
        _check_cancelled(cancel_event)

        scored.sort(key=lambda s: (-s.score, s.candidate_id))
        top = scored[:limit]

        if self.history is not None:
            self.history.record_top_results(requester_id, top[: self.config.history_cap])

        logger.info(
            "Ranked %d candidates for %s, returning %d",
            len(candidates), requester_id, len(top),
        )
        return top

    def analyze(self, profile: PreferenceProfile, candidate: Neighborhood) -> MatchAnalysis:
        """Score one neighborhood with a per-priority breakdown. No history side effect."""
        validate_profile(profile)
        self._warn_unknown_priorities(profile)
        score = self.engine.score(profile, candidate.attributes)
        return MatchAnalysis(
            candidate_id=candidate.id,
            score=score,
            display_score=to_display_score(score),
            reasons=self.explainer.explain(profile, candidate.attributes, score),
            breakdown=self.engine.breakdown(profile, candidate.attributes),
        )
