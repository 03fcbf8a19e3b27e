"""Tests for extracting the EIA State Electricity Profiles."""

import pytest

from transit_emissions.extract.eia_sep import EiaSepExtractor, extract_profiles
from transit_emissions.extract.extractor import ParseError
from transit_emissions.workspace.datastore import Datastore, FetchError
from transit_emissions.workspace.resource_cache import ResourceKey


def test_resource_key_and_url(datastore, source_urls):
    extractor = EiaSepExtractor(datastore, source_urls["profile"])
    assert extractor.resource_key("profile", state="New York") == ResourceKey(
        "eia_sep", "https://example.com/electricity/newyork/", "newyork.html"
    )
    assert (
        extractor.source_url("profile", state="New York")
        == "https://example.com/electricity/newyork/"
    )


def test_extract_profiles(datastore, source_urls):
    df = extract_profiles(
        datastore, ["New York", "West Virginia"], url_template=source_urls["profile"]
    )
    assert df["state_name"].tolist() == ["New York", "West Virginia"]
    assert df["primary_energy_source"].tolist() == ["Natural gas", "Coal"]
    row = df.iloc[1]
    for col, expected in [
        ("co2_lbs_per_mwh", 2000.0),
        ("retail_price_cents_per_kwh", 12.0),
        ("net_generation_mwh", 100_000.0),
    ]:
        assert float(str(row[col]).replace(",", "")) == expected


def test_extract_no_states(datastore, fake_fetcher, source_urls):
    df = extract_profiles(datastore, [], url_template=source_urls["profile"])
    assert df.empty
    assert "co2_lbs_per_mwh" in df.columns
    assert fake_fetcher.requests == []


def test_pages_are_cached(datastore, fake_fetcher, source_urls):
    extract_profiles(datastore, ["Washington"], url_template=source_urls["profile"])
    extract_profiles(datastore, ["Washington"], url_template=source_urls["profile"])
    assert fake_fetcher.requests == ["https://example.com/electricity/washington/"]


def test_changed_url_template_is_not_served_from_cache(
    datastore, fake_fetcher, source_urls, profile_page_factory
):
    mirror = "https://mirror.example.com/electricity/{state}/"
    fake_fetcher.responses[mirror.format(state="washington")] = profile_page_factory(
        co2="300"
    )
    first = extract_profiles(
        datastore, ["Washington"], url_template=source_urls["profile"]
    )
    second = extract_profiles(datastore, ["Washington"], url_template=mirror)
    assert fake_fetcher.requests == [
        "https://example.com/electricity/washington/",
        "https://mirror.example.com/electricity/washington/",
    ]
    assert first.loc[0, "co2_lbs_per_mwh"] != second.loc[0, "co2_lbs_per_mwh"]


def test_missing_page(datastore, source_urls):
    with pytest.raises(FetchError):
        extract_profiles(datastore, ["Ohio"], url_template=source_urls["profile"])


@pytest.fixture
def ohio_profile(fetcher_factory, source_urls):
    """Extract Ohio's profile from the given page content."""

    def _extract(page: bytes):
        url = source_urls["profile"]
        ds = Datastore(fetcher=fetcher_factory({url.format(state="ohio"): page}))
        return extract_profiles(ds, ["Ohio"], url_template=url)

    return _extract


def test_page_without_table(ohio_profile):
    with pytest.raises(ParseError):
        ohio_profile(b"<html><body>Not found</body></html>")


def test_empty_page(ohio_profile):
    with pytest.raises(ParseError):
        ohio_profile(b"")


def test_page_missing_item(ohio_profile, profile_page_factory):
    page = profile_page_factory().replace(b"Carbon dioxide", b"Sulfur dioxide")
    with pytest.raises(ParseError, match="carbon dioxide"):
        ohio_profile(page)


def test_page_missing_column(ohio_profile):
    page = (
        b"<table><tr><th>Statistic</th><th>Amount</th></tr>"
        b"<tr><td>Carbon dioxide (lbs/MWh)</td><td>1,000</td></tr></table>"
    )
    with pytest.raises(ParseError, match="missing expected columns"):
        ohio_profile(page)
