"""Descriptive summaries of the electricity grid and transit service tables.

These answer the questions a report asks before getting to emissions: which state has
the most expensive or the dirtiest electricity, which agency carries the most riders,
and so on.
"""

from typing import NamedTuple

import pandas as pd

import transit_emissions.logging_helpers
from transit_emissions.helpers import finite_ratio

logger = transit_emissions.logging_helpers.get_logger(__name__)


class ElectricitySummary(NamedTuple):
    """Highlights of the state electricity profiles."""

    most_expensive_state: str
    most_expensive_price_usd_per_mwh: float
    dirtiest_state: str
    dirtiest_co2_lbs_per_mwh: float
    weighted_co2_lbs_per_mwh: float
    rarest_primary_source: str
    rarest_primary_source_states: pd.DataFrame


class ServiceSummary(NamedTuple):
    """Highlights of the transit service table."""

    most_upt_agency: str
    most_upt: int
    longest_trip_agency: str | None
    longest_trip_miles: float
    agencies_per_state: pd.Series


def _first_max(col: pd.Series) -> int:
    """Position of the first occurrence of the maximum of a series, ignoring NA."""
    return int(col.astype("float64").reset_index(drop=True).idxmax())


def summarize_electricity(profiles: pd.DataFrame) -> ElectricitySummary:
    """Summarize the electricity profiles of all states.

    The weighted CO2 rate is the average of the state rates, weighted by each state's
    net generation. It's the CO2 intensity of a MWh drawn from the combined grid.

    Args:
        profiles: The ``electricity_profiles`` table.
    """
    if profiles.empty:
        raise ValueError("Can't summarize an empty electricity profiles table.")
    expensive = profiles.iloc[_first_max(profiles["retail_price_usd_per_mwh"])]
    dirtiest = profiles.iloc[_first_max(profiles["co2_lbs_per_mwh"])]
    weighted = (
        profiles["co2_lbs_per_mwh"] * profiles["net_generation_mwh"]
    ).sum() / profiles["net_generation_mwh"].sum()
    # value_counts sorts by count; a stable sort keeps the first seen among ties.
    source_counts = (
        profiles["primary_energy_source"]
        .value_counts(sort=False)
        .sort_values(kind="stable")
    )
    rarest = source_counts.index[0]
    return ElectricitySummary(
        most_expensive_state=expensive["state_name"],
        most_expensive_price_usd_per_mwh=float(expensive["retail_price_usd_per_mwh"]),
        dirtiest_state=dirtiest["state_name"],
        dirtiest_co2_lbs_per_mwh=float(dirtiest["co2_lbs_per_mwh"]),
        weighted_co2_lbs_per_mwh=float(weighted),
        rarest_primary_source=rarest,
        rarest_primary_source_states=profiles.loc[
            profiles["primary_energy_source"] == rarest,
            ["state_name", "retail_price_usd_per_mwh"],
        ].reset_index(drop=True),
    )


def cleanliness_ratio(profiles: pd.DataFrame, dirtier: str, cleaner: str) -> float:
    """How many times cleaner one state's grid is than another's.

    Args:
        profiles: The ``electricity_profiles`` table.
        dirtier: Abbreviation of the state whose CO2 rate is the numerator.
        cleaner: Abbreviation of the state whose CO2 rate is the denominator.

    Raises:
        KeyError: if either state has no profile.
    """
    rates = profiles.set_index("state")["co2_lbs_per_mwh"]
    missing = [state for state in (dirtier, cleaner) if state not in rates.index]
    if missing:
        raise KeyError(f"No electricity profile for {missing}")
    return float(rates[dirtier] / rates[cleaner])


def summarize_service(service: pd.DataFrame) -> ServiceSummary:
    """Summarize the transit service of all agencies.

    Trip length is undefined for agencies reporting no trips. If that's every agency,
    the longest trip agency is None and its length NaN.

    Args:
        service: The ``service`` table.
    """
    if service.empty:
        raise ValueError("Can't summarize an empty service table.")
    busiest = service.iloc[_first_max(service["upt"])]
    trip_length = finite_ratio(service["passenger_miles"], service["upt"])
    longest_agency = None
    longest_miles = float("nan")
    if trip_length.notna().any():
        longest = _first_max(trip_length)
        longest_agency = service["agency_name"].iloc[longest]
        longest_miles = float(trip_length.iloc[longest])
    else:
        logger.warning("No agency reports any trips, so no trip length is defined.")
    return ServiceSummary(
        most_upt_agency=busiest["agency_name"],
        most_upt=int(busiest["upt"]),
        longest_trip_agency=longest_agency,
        longest_trip_miles=longest_miles,
        agencies_per_state=service.groupby("state")["ntd_id"].nunique(),
    )
