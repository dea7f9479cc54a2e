from __future__ import annotations

from pathlib import Path

import pytest

from neighborfit.matching.errors import CollaboratorUnavailableError
from neighborfit.neighborhoods.config import DataStoreConfig
from neighborfit.neighborhoods.data_store import (
    find_neighborhoods,
    get_dataframe,
    get_neighborhood,
    list_neighborhoods,
    reset_data_store,
    search_neighborhoods,
)


@pytest.fixture(autouse=True)
def _fresh_store():
    reset_data_store()
    yield
    reset_data_store()


def test_bundled_dataset_loads():
    assert len(find_neighborhoods()) >= 2


def test_filter_by_city_is_case_insensitive_substring():
    hoods = find_neighborhoods(city="new york")
    assert hoods
    assert all(h.city == "New York" for h in hoods)
    assert {h.id for h in find_neighborhoods(city="YORK")} == {h.id for h in hoods}


def test_filter_by_state():
    hoods = find_neighborhoods(state="ca")
    assert hoods
    assert all(h.state == "CA" for h in hoods)


def test_filter_with_no_match_is_empty():
    assert find_neighborhoods(city="Atlantis") == []


def test_row_is_converted_to_neighborhood():
    hood = get_neighborhood("nyc-greenwich-village")
    assert hood is not None
    assert hood.name == "Greenwich Village"
    assert hood.attributes.walkability == 98
    assert hood.attributes.crime_rate == 15
    assert hood.attributes.restaurants == 150
    assert hood.attributes.median_rent == 3500
    assert "historic" in hood.tags


def test_unknown_id_returns_none():
    assert get_neighborhood("does-not-exist") is None


def test_missing_values_become_none_and_out_of_range_values_are_clamped(tmp_path: Path):
    csv = tmp_path / "hoods.csv"
    csv.write_text(
        "id,name,city,state,walkability_score,crime_rate,parks,median_rent,tags\n"
        "x1,Sparse,Town,ST,,,-4,,\n"
        "x2,Wild,Town,ST,180,12,3,1200,quiet\n"
    )
    get_dataframe(DataStoreConfig(csv_path=csv))
    sparse = get_neighborhood("x1")
    wild = get_neighborhood("x2")

    assert sparse.attributes.walkability is None
    assert sparse.attributes.crime_rate is None
    assert sparse.attributes.parks == 0
    assert sparse.tags == []
    assert wild.attributes.walkability == 100
    assert wild.tags == ["quiet"]


def test_missing_file_is_collaborator_unavailable(tmp_path: Path):
    with pytest.raises(CollaboratorUnavailableError):
        get_dataframe(DataStoreConfig(csv_path=tmp_path / "missing.csv"))


def test_empty_file_is_collaborator_unavailable(tmp_path: Path):
    csv = tmp_path / "empty.csv"
    csv.write_text("")
    with pytest.raises(CollaboratorUnavailableError):
        get_dataframe(DataStoreConfig(csv_path=csv))


@pytest.mark.parametrize("header", ["id,name,state", "name,city,state", "id,name,city"])
def test_missing_required_column_is_collaborator_unavailable(tmp_path: Path, header):
    csv = tmp_path / "hoods.csv"
    csv.write_text(f"{header}\nx1,Sparse,Town\n")
    with pytest.raises(CollaboratorUnavailableError):
        get_dataframe(DataStoreConfig(csv_path=csv))


# ── Listing and search ───────────────────────────────────────────────────


def test_listing_is_sorted_by_name_and_paginated():
    first = list_neighborhoods(limit=4)
    assert first.total == 9
    assert first.total_pages == 3
    assert first.current_page == 1
    assert [h.name for h in first.neighborhoods] == [
        "Circle C Ranch", "Greenwich Village", "Lincoln Park", "Logan Square",
    ]

    last = list_neighborhoods(limit=4, page=3)
    assert [h.name for h in last.neighborhoods] == ["South Congress"]
    assert list_neighborhoods(limit=4, page=4).neighborhoods == []


def test_listing_applies_filters_before_paging():
    page = list_neighborhoods(state="ny", limit=2)
    assert page.total == 3
    assert page.total_pages == 2
    assert all(h.state == "NY" for h in page.neighborhoods)


def test_search_is_case_insensitive_over_text_columns():
    by_tag = {h.id for h in search_neighborhoods("historic")}
    assert "nyc-greenwich-village" in by_tag
    assert {h.id for h in search_neighborhoods("HISTORIC")} == by_tag
    assert {h.id for h in search_neighborhoods("noe")} == {"sf-noe-valley"}
    assert {h.id for h in search_neighborhoods("chicago")} == {"chi-lincoln-park", "chi-logan-square"}


def test_search_respects_limit_and_reports_no_match():
    assert len(search_neighborhoods("a", limit=2)) == 2
    assert search_neighborhoods("zzz-nothing") == []


def test_find_combines_query_with_location_filters():
    hoods = find_neighborhoods(state="NY", query="historic")
    assert hoods
    assert all(h.state == "NY" for h in hoods)
    assert find_neighborhoods(state="TX", query="greenwich") == []
