"""
Tests for the local country dataset.
"""
import pytest

from domain.errors import NearestLookupEmpty
from domain.models import Location
from services.country_dataset import CountryDataset, collation_key


def test_search_united_ranks_prefix_matches_alphabetically():
    names = [c.name for c in CountryDataset().search_countries("United")]
    assert names == ["United Arab Emirates", "United Kingdom", "United States"]


def test_search_prefix_before_substring():
    dataset = CountryDataset(
        [
            Location("Tanzania, United Republic of", "TZ", -6.37, 34.89),
            Location("United States", "US", 37.09, -95.71),
            Location("United Kingdom", "GB", 55.38, -3.44),
        ]
    )
    names = [c.name for c in dataset.search_countries("united")]
    assert names == ["United Kingdom", "United States", "Tanzania, United Republic of"]


def test_search_matches_codes_case_insensitively():
    results = CountryDataset().search_countries("jp")
    assert [c.code for c in results] == ["JP"]


def test_search_jap_finds_japan():
    results = CountryDataset().search_countries("  Jap ")
    assert len(results) == 1
    assert results[0].name == "Japan"
    assert results[0].latitude == 36.2048
    assert results[0].longitude == 138.2529
    assert results[0].capital == "Tokyo"


def test_search_caps_results_at_ten():
    assert len(CountryDataset().search_countries("a")) == 10


def test_search_blank_query_returns_nothing():
    dataset = CountryDataset()
    assert dataset.search_countries("") == []
    assert dataset.search_countries("   ") == []


def test_collation_ignores_accents_and_case():
    assert collation_key("Åland") == collation_key("aland")


def test_get_country_by_code():
    dataset = CountryDataset()
    assert dataset.get_country_by_code("gb").name == "United Kingdom"
    assert dataset.get_country_by_code("ZZ") is None


def test_nearest_at_known_entry_has_zero_distance():
    match = CountryDataset().nearest_match(36.2048, 138.2529)
    assert match.location.code == "JP"
    assert match.distance_km == 0.0


def test_nearest_for_nearby_point():
    # Eiffel Tower
    assert CountryDataset().get_nearest_country(48.8584, 2.2945).code == "FR"


def test_nearest_on_empty_dataset():
    dataset = CountryDataset([])
    with pytest.raises(NearestLookupEmpty):
        dataset.nearest_match(0.0, 0.0)
    assert dataset.get_nearest_country(0.0, 0.0) is None


def test_all_countries_returns_copy():
    dataset = CountryDataset()
    countries = dataset.all_countries()
    countries.clear()
    assert len(dataset) == len(dataset.all_countries()) > 0
