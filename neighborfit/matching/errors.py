from __future__ import annotations


class MatchingError(Exception):
    """Base class for errors raised by the matching engine."""


class InvalidProfileError(MatchingError):
    """The preference profile cannot be scored (no priorities, bad budget)."""


class CollaboratorUnavailableError(MatchingError):
    """A data or persistence collaborator failed; the request is aborted."""


class RankingCancelledError(MatchingError):
    """The caller cancelled the ranking request while it was in flight."""
