"""Extract the National Transit Database energy and service tables.

The annual energy consumption data is published as an Excel workbook with one row per
agency, mode and type of service, and one column per fuel. The service data comes from
the "Service by Agency" table, which summarizes trips and passenger miles per agency.
"""

import zipfile
from io import BytesIO

import pandas as pd

import transit_emissions.logging_helpers
from transit_emissions.extract.extractor import GenericExtractor, ParseError
from transit_emissions.metadata.constants import Fuel
from transit_emissions.workspace.datastore import Datastore
from transit_emissions.workspace.resource_cache import ResourceKey

logger = transit_emissions.logging_helpers.get_logger(__name__)

ENERGY_COLUMN_MAP: dict[str, str] = {
    "ntd_id": "ntd_id",
    "mode": "mode_code",
    "agency_name": "agency_name",
    "diesel_fuel": "diesel_fuel",
    "gasoline": "gasoline",
    "c_natural_gas": "compressed_natural_gas",
    "compressed_natural_gas": "compressed_natural_gas",
    "liquified_petroleum_gas": "liquefied_petroleum_gas",
    "liquefied_petroleum_gas": "liquefied_petroleum_gas",
    "bunker_fuel": "bunker_fuel",
    "ethanol": "ethanol",
    "electric_propulsion": "electric_propulsion",
    "bio_diesel": "bio_diesel",
    "biodiesel": "bio_diesel",
    "electric_battery": "electric_battery",
    "hydrogen": "hydrogen",
    "kerosene": "kerosene",
    "liquified_nat_gas": "liquefied_natural_gas",
    "liquefied_natural_gas": "liquefied_natural_gas",
    "methonal": "methanol",
    "methanol": "methanol",
}
"""Simplified workbook column labels (including historical spellings) to our names.

``Reporter Type``, ``Reporting Module``, ``Other Fuel`` and ``Other Fuel Description``
are intentionally absent, so they are dropped on extraction.
"""

SERVICE_COLUMN_MAP: dict[str, str] = {
    "5_digit_ntd_id": "ntd_id",
    "ntd_id": "ntd_id",
    "agency": "agency_name",
    "agency_name": "agency_name",
    "max_city": "city",
    "city": "city",
    "max_state": "state",
    "state": "state",
    "sum_unlinked_passenger_trips_upt": "upt",
    "unlinked_passenger_trips": "upt",
    "sum_passenger_miles": "passenger_miles",
    "passenger_miles": "passenger_miles",
}
"""Simplified service table column labels to our names."""


class NtdExtractor(GenericExtractor):
    """Extractor for the NTD energy workbook and service table."""

    DATASET = "ntd"
    COLUMN_MAP = {"energy": ENERGY_COLUMN_MAP, "service": SERVICE_COLUMN_MAP}
    REQUIRED_COLUMNS = {
        "energy": [
            "ntd_id",
            "mode_code",
            "agency_name",
            *[fuel.value for fuel in Fuel],
        ],
        "service": ["ntd_id", "agency_name", "city", "state", "upt", "passenger_miles"],
    }
    SOURCE_FILENAMES = {
        "energy": "energy_consumption.xlsx",
        "service": "service_by_agency.csv",
    }

    def __init__(self, ds: Datastore, urls: dict[str, str]):
        """Create a new extractor.

        Args:
            ds: Datastore used to fetch (and cache) the tables.
            urls: URL of each page, keyed by "energy" and "service".
        """
        super().__init__(ds)
        self.urls = urls

    def resource_key(self, page: str) -> ResourceKey:
        """Each page is cached under a fixed file name, per configured URL."""
        return ResourceKey(
            self.DATASET, self.source_url(page), self.SOURCE_FILENAMES[page]
        )

    def source_url(self, page: str) -> str:
        """URL of the page, as configured."""
        return self.urls[page]

    def load_source(self, content: bytes, page: str) -> pd.DataFrame:
        """Read the workbook or CSV, leaving all values as they were published."""
        try:
            if page == "energy":
                return pd.read_excel(BytesIO(content), sheet_name=0, dtype=object)
            return pd.read_csv(BytesIO(content), dtype=str)
        except (ValueError, zipfile.BadZipFile) as err:
            raise ParseError(f"Could not read the NTD {page} table: {err}") from err


def extract_energy(ds: Datastore, url: str) -> pd.DataFrame:
    """Extract the raw NTD energy consumption table."""
    return NtdExtractor(ds, urls={"energy": url}).extract("energy")


def extract_service(ds: Datastore, url: str) -> pd.DataFrame:
    """Extract the raw NTD service by agency table."""
    return NtdExtractor(ds, urls={"service": url}).extract("service")
