"""Extract the EIA State Electricity Profiles from their per-state web pages.

Each state has a summary page (e.g. https://www.eia.gov/electricity/state/newyork/)
whose first table lists key statistics as ``Item`` / ``Value`` / ``U.S. rank`` rows.
We pull four of those rows out of each page, and stack the states into one table.
"""

from io import StringIO

import pandas as pd
from lxml import etree

import transit_emissions.logging_helpers
from transit_emissions.extract.extractor import GenericExtractor, ParseError
from transit_emissions.helpers import simplify_strings, state_slug
from transit_emissions.workspace.datastore import Datastore
from transit_emissions.workspace.resource_cache import ResourceKey

logger = transit_emissions.logging_helpers.get_logger(__name__)

PROFILE_ITEMS: dict[str, str] = {
    "carbon dioxide (lbs/mwh)": "co2_lbs_per_mwh",
    "primary energy source": "primary_energy_source",
    "average retail price (cents/kwh)": "retail_price_cents_per_kwh",
    "net generation (megawatthours)": "net_generation_mwh",
}
"""Lower-cased item labels on the profile page, and the columns they become."""


class EiaSepExtractor(GenericExtractor):
    """Extractor for the per-state EIA electricity profile pages."""

    DATASET = "eia_sep"
    COLUMN_MAP = {
        "profile": {
            "item": "item",
            "value": "value",
            "u_s_rank": "rank",
            "rank": "rank",
        }
    }
    REQUIRED_COLUMNS = {"profile": ["item", "value"]}

    def __init__(
        self,
        ds: Datastore,
        url_template: str = "https://www.eia.gov/electricity/state/{state}/",
    ):
        """Create a new extractor reading pages from ``url_template``."""
        super().__init__(ds)
        self.url_template = url_template

    def resource_key(self, page: str, state: str) -> ResourceKey:
        """Profile pages are cached under the state slug and their URL."""
        return ResourceKey(
            self.DATASET, self.source_url(page, state), f"{state_slug(state)}.html"
        )

    def source_url(self, page: str, state: str) -> str:
        """URL of the profile page of the named state."""
        return self.url_template.format(state=state_slug(state))

    def load_source(self, content: bytes, page: str, state: str) -> pd.DataFrame:
        """Read the first HTML table on the page."""
        try:
            tables = pd.read_html(
                StringIO(content.decode("utf-8", errors="replace")), flavor="lxml"
            )
        except (ValueError, etree.LxmlError) as err:
            raise ParseError(f"No table found in the profile page of {state}") from err
        return tables[0]

    def extract_profile(self, state: str) -> pd.DataFrame:
        """Extract the four statistics we use from a state's profile page.

        Args:
            state: Full name of the state, e.g. "New York".

        Returns:
            A single row dataframe holding the raw, unparsed values.

        Raises:
            ParseError: if any of the expected items is absent from the table.
        """
        table = self.extract("profile", state=state)
        table = table.assign(item=simplify_strings(table["item"]))
        row = {"state_name": state}
        for item, col in PROFILE_ITEMS.items():
            matches = table.loc[table["item"] == item]
            if matches.empty:
                raise ParseError(f"Profile page of {state} has no '{item}' row.")
            value = matches["value"].iloc[0]
            # The primary energy source is given in the rank column.
            if (pd.isna(value) or not str(value).strip()) and "rank" in matches:
                value = matches["rank"].iloc[0]
            row[col] = value
        return pd.DataFrame([row])


def extract_profiles(
    ds: Datastore,
    states: list[str],
    url_template: str = "https://www.eia.gov/electricity/state/{state}/",
) -> pd.DataFrame:
    """Extract the raw electricity profile of each state.

    Args:
        ds: Datastore used to fetch (and cache) the profile pages.
        states: Full names of the states to extract.
        url_template: URL of a profile page, with a ``{state}`` placeholder.

    Returns:
        One row per state with columns ``state_name`` and the values of
        :data:`PROFILE_ITEMS`, still as raw strings.
    """
    extractor = EiaSepExtractor(ds, url_template=url_template)
    logger.info(f"Extracting EIA electricity profiles for {len(states)} states.")
    if not states:
        return pd.DataFrame(columns=["state_name", *PROFILE_ITEMS.values()])
    return pd.concat(
        [extractor.extract_profile(state) for state in states], ignore_index=True
    )
