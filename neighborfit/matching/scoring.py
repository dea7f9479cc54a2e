from __future__ import annotations

from .config import DEFAULT_MATCHING_CONFIG, MatchingConfig
from .models import AttributeSet, Budget, FactorScore, PreferenceProfile, Priority


class ScoringEngine:
    """
    Weighted-priority scoring of one neighborhood for one user.
    Scores are 0-100, higher is better. Pure: no state survives a call.
    """

    def __init__(self, config: MatchingConfig = DEFAULT_MATCHING_CONFIG):
        self.config = config

    def weight_for(self, priority: str) -> float:
        return self.config.weights.get(priority, self.config.fallback_weight)

    def unknown_priorities(self, profile: PreferenceProfile) -> list[str]:
        """Priority keys with no entry in the weight table."""
        return [p for p in profile.priorities if p not in self.config.weights]

    def factor_score(self, priority: str, attrs: AttributeSet) -> float:
        """Raw 0-100 contribution of a single priority, before weighting."""
        if priority == Priority.walkability:
            return attrs.walkability or 0.0
        if priority == Priority.schools:
            return (attrs.school_rating or 0.0) * 10
        if priority == Priority.safety:
            crime = attrs.crime_rate if attrs.crime_rate is not None else self.config.neutral_crime_rate
            return max(0.0, 100 - crime)
        if priority == Priority.nightlife:
            return min(100.0, (attrs.nightlife or 0) * 10)
        if priority == Priority.parks:
            return min(100.0, (attrs.parks or 0) * 5)
        if priority == Priority.transit:
            return attrs.transit or 0.0
        if priority == Priority.shopping:
            return min(100.0, (attrs.shopping or 0) * 5)
        if priority == Priority.restaurants:
            return min(100.0, (attrs.restaurants or 0) * 2)
        return 0.0

    def _budget_adjustment(self, budget: Budget, rent: float) -> float:
        """Bonus when affordable, capped penalty proportional to the overage."""
        if rent <= budget.max:
            return self.config.budget_bonus
        cap = self.config.budget_penalty_cap
        if budget.max <= 0:
            return -cap
        return -min(cap, (rent - budget.max) / budget.max * 100)

    def score(self, profile: PreferenceProfile, attrs: AttributeSet) -> float:
        weighted_sum = 0.0
        ceiling = 0.0

        for priority in profile.priorities:
            weight = self.weight_for(priority)
            weighted_sum += weight * self.factor_score(priority, attrs)
            ceiling += weight * 100

        # The penalty only lowers the numerator; the ceiling always grows by
        # the bonus amount, so the ratio can go negative before clamping.
        if profile.budget is not None and attrs.median_rent is not None:
            weighted_sum += self._budget_adjustment(profile.budget, attrs.median_rent)
            ceiling += self.config.budget_bonus

        if ceiling <= 0:
            return 0.0
        return min(100.0, max(0.0, weighted_sum / ceiling * 100))

    def breakdown(self, profile: PreferenceProfile, attrs: AttributeSet) -> list[FactorScore]:
        return [
            FactorScore(
                factor=priority,
                weight=self.weight_for(priority),
                factor_score=self.factor_score(priority, attrs),
            )
            for priority in profile.priorities
        ]
