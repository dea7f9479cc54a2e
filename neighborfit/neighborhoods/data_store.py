from __future__ import annotations

import logging
import math
from typing import Any

import pandas as pd

from ..matching.errors import CollaboratorUnavailableError
from ..matching.models import AttributeSet, Neighborhood
from .config import DEFAULT_DATA_STORE_CONFIG, DataStoreConfig
from .models import NeighborhoodPage

logger = logging.getLogger(__name__)

_ATTRIBUTE_COLUMNS: dict[str, str] = {
    "walkability_score": "walkability",
    "transit_score": "transit",
    "bike_score": "bike",
    "crime_rate": "crime_rate",
    "school_rating": "school_rating",
    "restaurants": "restaurants",
    "parks": "parks",
    "gyms": "gyms",
    "shopping": "shopping",
    "nightlife": "nightlife",
    "healthcare": "healthcare",
    "median_rent": "median_rent",
}

_COUNT_FIELDS = {"restaurants", "parks", "gyms", "shopping", "nightlife", "healthcare"}

_REQUIRED_COLUMNS = ("id", "name", "city", "state")
_SEARCH_COLUMNS = ("name", "city", "tags", "description")

_df: pd.DataFrame | None = None


def _load(config: DataStoreConfig) -> pd.DataFrame:
    try:
        df = pd.read_csv(config.csv_path, dtype={"id": str})
    except (OSError, pd.errors.ParserError, pd.errors.EmptyDataError) as exc:
        raise CollaboratorUnavailableError(
            f"neighborhood data unavailable at {config.csv_path}: {exc}"
        ) from exc

    missing = [c for c in _REQUIRED_COLUMNS if c not in df.columns]
    if missing:
        raise CollaboratorUnavailableError(
            f"neighborhood data at {config.csv_path} is missing columns: {', '.join(missing)}"
        )

    # Lowercase searchable columns for case-insensitive lookup
    df["state_lower"] = df["state"].fillna("").astype(str).str.lower()
    for column in _SEARCH_COLUMNS:
        source = df[column] if column in df.columns else pd.Series("", index=df.index)
        df[f"{column}_lower"] = source.fillna("").astype(str).str.lower()
    return df


def get_dataframe(config: DataStoreConfig = DEFAULT_DATA_STORE_CONFIG) -> pd.DataFrame:
    """Return the in-memory neighborhood DataFrame, loading it on first call."""
    global _df
    if _df is None:
        _df = _load(config)
        logger.info("Loaded %d neighborhoods from %s", len(_df), config.csv_path)
    return _df


def reset_data_store() -> None:
    global _df
    _df = None


def _optional(row: pd.Series, column: str) -> Any | None:
    value = row.get(column)
    return value if pd.notna(value) else None


def _optional_float(row: pd.Series, column: str) -> float | None:
    value = _optional(row, column)
    return float(value) if value is not None else None


def _row_to_neighborhood(row: pd.Series) -> Neighborhood:
    attrs: dict[str, Any] = {}
    for column, field_name in _ATTRIBUTE_COLUMNS.items():
        value = _optional(row, column)
        if value is not None:
            attrs[field_name] = int(value) if field_name in _COUNT_FIELDS else float(value)

    tags = _optional(row, "tags")
    return Neighborhood(
        id=str(row["id"]),
        name=str(row["name"]),
        city=str(row["city"]),
        state=str(row["state"]),
        lat=_optional_float(row, "lat"),
        lng=_optional_float(row, "lng"),
        median_home_price=_optional_float(row, "median_home_price"),
        description=_optional(row, "description"),
        tags=[t.strip() for t in str(tags).split(",") if t.strip()] if tags else [],
        attributes=AttributeSet(**attrs),
    )


def _contains(column: pd.Series, text: str) -> pd.Series:
    return column.str.contains(text.strip().lower(), regex=False, na=False)


def _filter(
    df: pd.DataFrame,
    city: str | None = None,
    state: str | None = None,
    query: str | None = None,
) -> pd.DataFrame:
    mask = pd.Series(True, index=df.index)
    if city:
        mask = mask & _contains(df["city_lower"], city)
    if state:
        mask = mask & _contains(df["state_lower"], state)
    if query and query.strip():
        text_mask = pd.Series(False, index=df.index)
        for column in _SEARCH_COLUMNS:
            text_mask = text_mask | _contains(df[f"{column}_lower"], query)
        mask = mask & text_mask
    return df.loc[mask]


def find_neighborhoods(
    city: str | None = None,
    state: str | None = None,
    query: str | None = None,
) -> list[Neighborhood]:
    """Return neighborhoods whose city/state contain the given text, ignoring case.

    ``query`` additionally matches against name, city, tags or description.
    """
    df = _filter(get_dataframe(), city=city, state=state, query=query)
    return [_row_to_neighborhood(row) for _, row in df.iterrows()]


def list_neighborhoods(
    city: str | None = None,
    state: str | None = None,
    limit: int = 20,
    page: int = 1,
) -> NeighborhoodPage:
    """One page of neighborhoods sorted by name."""
    df = _filter(get_dataframe(), city=city, state=state).sort_values("name", kind="stable")
    total = len(df)
    start = (page - 1) * limit
    return NeighborhoodPage(
        neighborhoods=[_row_to_neighborhood(row) for _, row in df.iloc[start:start + limit].iterrows()],
        total=total,
        total_pages=math.ceil(total / limit),
        current_page=page,
    )


def search_neighborhoods(query: str, limit: int = 20) -> list[Neighborhood]:
    """Case-insensitive text search over name, city, tags and description."""
    df = _filter(get_dataframe(), query=query)
    return [_row_to_neighborhood(row) for _, row in df.head(limit).iterrows()]


def get_neighborhood(neighborhood_id: str) -> Neighborhood | None:
    df = get_dataframe()
    match = df.loc[df["id"] == neighborhood_id]
    if match.empty:
        return None
    return _row_to_neighborhood(match.iloc[0])
