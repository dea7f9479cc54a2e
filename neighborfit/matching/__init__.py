"""
Neighborhood matching engine.

Responsibilities:
- Score a neighborhood against a user's weighted priorities and budget.
- Explain a score with a tier statement and attribute highlights.
- Rank a candidate set and emit the top results into the user's match history.
"""
