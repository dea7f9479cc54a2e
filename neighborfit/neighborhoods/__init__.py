"""
Neighborhood data access.

Responsibilities:
- Load the bundled neighborhood dataset into memory.
- Filter candidates by city and state for the matching engine.
- Convert raw rows into Neighborhood records with clamped attributes.
"""
