"""PyTest configuration module for the unit tests.

Defines small normalized tables shared by the analysis tests, and a fake fetcher which
serves canned responses so that no test touches the network.
"""

import logging
from io import BytesIO, StringIO

import pandas as pd
import pytest

from transit_emissions.analysis.emissions import calculate_emissions, join_sources
from transit_emissions.metadata.constants import ALL_FUELS
from transit_emissions.metadata.fields import enforce_schema
from transit_emissions.workspace.datastore import Datastore, FetchError

logger = logging.getLogger(__name__)

PROFILE_URL = "https://example.com/electricity/{state}/"
ENERGY_URL = "https://example.com/ntd/energy.xlsx"
SERVICE_URL = "https://example.com/ntd/service.csv"


class FakeFetcher:
    """Serves the content registered for each URL, and counts the requests."""

    def __init__(self, responses: dict[str, bytes]):
        """Register the content of each URL."""
        self.responses = responses
        self.requests: list[str] = []

    def fetch(self, url: str) -> bytes:
        """Return the registered content, or fail like an unreachable server."""
        self.requests.append(url)
        if url not in self.responses:
            raise FetchError(f"Could not download {url}: HTTP status 404")
        return self.responses[url]


def make_profile_page(
    co2: str = "1,000",
    source: str = "Natural gas",
    price: str = "10.5",
    generation: str = "100,000",
) -> bytes:
    """HTML of a state electricity profile page, with its key statistics table."""
    return f"""
    <html><body>
    <h1>State Electricity Profile</h1>
    <table>
      <thead><tr><th>Item</th><th>Value</th><th>U.S. Rank</th></tr></thead>
      <tbody>
        <tr><td>Primary energy source</td><td></td><td>{source}</td></tr>
        <tr><td>Net summer capacity (megawatts)</td><td>40,000</td><td>4</td></tr>
        <tr><td>Net generation (megawatthours)</td><td>{generation}</td><td>9</td></tr>
        <tr><td>Carbon dioxide (lbs/MWh)</td><td>{co2}</td><td>40</td></tr>
        <tr><td>Average retail price (cents/kWh)</td><td>{price}</td><td>7</td></tr>
      </tbody>
    </table>
    </body></html>
    """.encode()


def make_energy_workbook(rows: list[dict]) -> bytes:
    """An NTD energy consumption workbook, labelled the way the FTA publishes it."""
    df = pd.DataFrame(rows)
    out = BytesIO()
    df.to_excel(out, index=False)
    return out.getvalue()


def make_service_csv(rows: list[dict]) -> bytes:
    """An NTD service by agency table, as CSV."""
    out = StringIO()
    pd.DataFrame(rows).to_csv(out, index=False)
    return out.getvalue().encode()


ENERGY_ROWS = [
    {
        "NTD ID": "00001",
        "Agency Name": "Big City Transit",
        "Mode": "MB",
        "Reporter Type": "Full Reporter",
        "Diesel Fuel": 900_000,
        "Gasoline": None,
        "C Natural Gas": None,
        "Liquified Petroleum Gas": None,
        "Bunker Fuel": None,
        "Ethanol": None,
        "Electric Propulsion": None,
        "Hydrogen": None,
    },
    {
        "NTD ID": "00001",
        "Agency Name": "Big City Transit",
        "Mode": "HR",
        "Reporter Type": "Full Reporter",
        "Diesel Fuel": None,
        "Gasoline": None,
        "C Natural Gas": None,
        "Liquified Petroleum Gas": None,
        "Bunker Fuel": None,
        "Ethanol": None,
        "Electric Propulsion": 500_000,
        "Hydrogen": None,
    },
    {
        "NTD ID": "00002",
        "Agency Name": "Sound Transit",
        "Mode": "LR",
        "Reporter Type": "Full Reporter",
        "Diesel Fuel": None,
        "Gasoline": None,
        "C Natural Gas": None,
        "Liquified Petroleum Gas": None,
        "Bunker Fuel": None,
        "Ethanol": None,
        "Electric Propulsion": 100_000,
        "Hydrogen": None,
    },
    {
        "NTD ID": "00002",
        "Agency Name": "Sound Transit",
        "Mode": "MB",
        "Reporter Type": "Full Reporter",
        "Diesel Fuel": 50_000,
        "Gasoline": None,
        "C Natural Gas": None,
        "Liquified Petroleum Gas": None,
        "Bunker Fuel": None,
        "Ethanol": None,
        "Electric Propulsion": None,
        "Hydrogen": None,
    },
    {
        "NTD ID": "00003",
        "Agency Name": "Mountain Bus",
        "Mode": "MB",
        "Reporter Type": "Reduced Reporter",
        "Diesel Fuel": 1_000,
        "Gasoline": None,
        "C Natural Gas": None,
        "Liquified Petroleum Gas": None,
        "Bunker Fuel": None,
        "Ethanol": None,
        "Electric Propulsion": None,
        "Hydrogen": None,
    },
]

SERVICE_ROWS = [
    {
        "5 Digit NTD ID": "00001",
        "Agency": "Big City Transit",
        "Max City": "New York",
        "Max State": "NY",
        "Sum Unlinked Passenger Trips (UPT)": "200,000,000",
        "Sum Passenger Miles": "1,000,000,000",
    },
    {
        "5 Digit NTD ID": "00002",
        "Agency": "Sound Transit",
        "Max City": "Seattle",
        "Max State": "WA",
        "Sum Unlinked Passenger Trips (UPT)": "5,000,000",
        "Sum Passenger Miles": "40,000,000",
    },
    {
        "5 Digit NTD ID": "00003",
        "Agency": "Mountain Bus",
        "Max City": "Charleston",
        "Max State": "WV",
        "Sum Unlinked Passenger Trips (UPT)": "500,000",
        "Sum Passenger Miles": "1,000,000",
    },
]

PROFILE_PAGES = {
    "newyork": make_profile_page(co2="500", source="Natural gas", price="20"),
    "washington": make_profile_page(co2="200", source="Hydroelectric", price="10"),
    "westvirginia": make_profile_page(co2="2,000", source="Coal", price="12"),
}


@pytest.fixture
def source_responses() -> dict[str, bytes]:
    """Content of every URL the ETL requests, for New York, Washington and WV."""
    return {
        **{
            PROFILE_URL.format(state=slug): page
            for slug, page in PROFILE_PAGES.items()
        },
        ENERGY_URL: make_energy_workbook(ENERGY_ROWS),
        SERVICE_URL: make_service_csv(SERVICE_ROWS),
    }


@pytest.fixture
def fake_fetcher(source_responses) -> FakeFetcher:
    """A fetcher serving all of the sources."""
    return FakeFetcher(source_responses)


@pytest.fixture
def datastore(fake_fetcher, tmp_path) -> Datastore:
    """A datastore caching to a temporary directory, and never using the network."""
    return Datastore(local_cache_path=tmp_path / "cache", fetcher=fake_fetcher)


@pytest.fixture
def profiles() -> pd.DataFrame:
    """Normalized electricity profiles of three states."""
    return enforce_schema(
        pd.DataFrame(
            {
                "state": ["NY", "WA", "WV"],
                "state_name": ["New York", "Washington", "West Virginia"],
                "co2_lbs_per_mwh": [500.0, 200.0, 2000.0],
                "primary_energy_source": ["Natural gas", "Hydroelectric", "Coal"],
                "retail_price_usd_per_mwh": [200.0, 100.0, 120.0],
                "net_generation_mwh": [1e8, 1e8, 5e7],
            }
        ),
        "electricity_profiles",
    )


@pytest.fixture
def service() -> pd.DataFrame:
    """Normalized service of a Large, a Medium and a Small agency."""
    return enforce_schema(
        pd.DataFrame(
            {
                "ntd_id": [1, 2, 3],
                "agency_name": ["Big City Transit", "Sound Transit", "Mountain Bus"],
                "city": ["New York", "Seattle", "Charleston"],
                "state": ["NY", "WA", "WV"],
                "upt": [200_000_000, 5_000_000, 500_000],
                "passenger_miles": [1e9, 4e7, 1e6],
            }
        ),
        "service",
    )


def _make_energy(
    rows: list[tuple[int, str, str, str, dict[str, float]]],
) -> pd.DataFrame:
    """Normalized energy records from (ntd_id, agency, mode code, mode, fuel use)."""
    return enforce_schema(
        pd.DataFrame(
            [
                {
                    "ntd_id": ntd_id,
                    "agency_name": agency_name,
                    "mode_code": mode_code,
                    "mode": mode,
                    **dict.fromkeys(ALL_FUELS, 0.0),
                    **fuel_use,
                }
                for ntd_id, agency_name, mode_code, mode, fuel_use in rows
            ]
        ),
        "energy",
    )


@pytest.fixture
def energy() -> pd.DataFrame:
    """Normalized energy use of the three agencies, by mode."""
    return _make_energy(
        [
            (1, "Big City Transit", "MB", "Motor Bus", {"diesel_fuel": 900_000}),
            (1, "Big City Transit", "HR", "Heavy Rail", {"electric_propulsion": 5e5}),
            (2, "Sound Transit", "LR", "Light Rail", {"electric_propulsion": 1e5}),
            (2, "Sound Transit", "MB", "Motor Bus", {"diesel_fuel": 50_000}),
            (3, "Mountain Bus", "MB", "Motor Bus", {"diesel_fuel": 1_000}),
        ]
    )


@pytest.fixture
def emissions(service, energy, profiles) -> pd.DataFrame:
    """Emissions of the three agencies, by mode."""
    return calculate_emissions(join_sources(service, energy, profiles))


@pytest.fixture
def energy_factory():
    """Build normalized energy records from (ntd_id, agency, mode code, mode, fuels)."""
    return _make_energy


@pytest.fixture
def source_urls() -> dict[str, str]:
    """URLs of the profile pages (a template), energy workbook and service table."""
    return {"profile": PROFILE_URL, "energy": ENERGY_URL, "service": SERVICE_URL}


@pytest.fixture
def fetcher_factory():
    """Build a fake fetcher serving the given content by URL."""
    return FakeFetcher


@pytest.fixture
def profile_page_factory():
    """Build the HTML of a profile page with the given statistics."""
    return make_profile_page


@pytest.fixture
def energy_workbook_factory():
    """Build an energy workbook from rows of labelled values."""
    return make_energy_workbook


@pytest.fixture
def service_csv_factory():
    """Build a service CSV from rows of labelled values."""
    return make_service_csv


@pytest.fixture
def energy_rows() -> list[dict]:
    """Raw energy workbook rows of the three agencies."""
    return [dict(row) for row in ENERGY_ROWS]


@pytest.fixture
def service_rows() -> list[dict]:
    """Raw service table rows of the three agencies."""
    return [dict(row) for row in SERVICE_ROWS]
