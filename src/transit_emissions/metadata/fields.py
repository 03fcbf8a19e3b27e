"""Field and table schemas for the normalized and derived tables."""

from typing import Any

import pandas as pd

from transit_emissions.metadata.constants import (
    ALL_FUELS,
    FIELD_DTYPES_PANDAS,
    Fuel,
)

FIELD_METADATA: dict[str, dict[str, Any]] = {
    "state": {
        "type": "string",
        "description": "Two letter US state abbreviation.",
    },
    "state_name": {
        "type": "string",
        "description": "Full name of the US state.",
    },
    "co2_lbs_per_mwh": {
        "type": "number",
        "description": "CO2 emitted per MWh of electricity generated in the state.",
        "unit": "lb/MWh",
    },
    "primary_energy_source": {
        "type": "string",
        "description": "Fuel providing the largest share of the state's generation.",
    },
    "retail_price_usd_per_mwh": {
        "type": "number",
        "description": "Average retail price of electricity in the state.",
        "unit": "USD/MWh",
    },
    "net_generation_mwh": {
        "type": "number",
        "description": "Net electricity generated in the state over the year.",
        "unit": "MWh",
    },
    "ntd_id": {
        "type": "integer",
        "description": "Five digit National Transit Database reporter ID.",
    },
    "agency_name": {
        "type": "string",
        "description": "Name of the transit agency.",
    },
    "city": {
        "type": "string",
        "description": "City in which the agency provides the most service.",
    },
    "mode_code": {
        "type": "string",
        "description": "Two letter NTD transit mode code.",
    },
    "mode": {
        "type": "string",
        "description": "Descriptive label of the transit mode.",
    },
    "upt": {
        "type": "integer",
        "description": "Unlinked passenger trips (boardings) over the year.",
    },
    "passenger_miles": {
        "type": "number",
        "description": "Total passenger miles travelled over the year.",
        "unit": "mi",
    },
    "total_emissions_lbs": {
        "type": "number",
        "description": "CO2 emitted by all fuels and electric propulsion.",
        "unit": "lb",
    },
    "emissions_lbs_per_upt": {
        "type": "number",
        "description": "Total CO2 emissions per unlinked passenger trip.",
        "unit": "lb",
    },
    "emissions_lbs_per_mile": {
        "type": "number",
        "description": "Total CO2 emissions per passenger mile.",
        "unit": "lb/mi",
    },
    "agency_size": {
        "type": "string",
        "description": "Small, Medium or Large, based on unlinked passenger trips.",
    },
    "car_emissions_lbs": {
        "type": "number",
        "description": (
            "CO2 that would have been emitted had every passenger mile been driven "
            "in a private car."
        ),
        "unit": "lb",
    },
    "emissions_avoided_lbs": {
        "type": "number",
        "description": "Car emissions minus transit emissions. Negative if transit is dirtier.",
        "unit": "lb",
    },
    "electric_fraction": {
        "type": "number",
        "description": (
            "Electric propulsion as a fraction of all modelled fuel consumption."
        ),
    },
}

for _fuel in ALL_FUELS:
    FIELD_METADATA[_fuel] = {
        "type": "number",
        "description": f"Quantity of {_fuel.replace('_', ' ')} consumed.",
    }
for _fuel in Fuel:
    FIELD_METADATA[_fuel.emissions_col] = {
        "type": "number",
        "description": f"CO2 emitted by {_fuel.value.replace('_', ' ')} consumption.",
        "unit": "lb",
    }

_PROFILE_COLUMNS = [
    "state",
    "state_name",
    "co2_lbs_per_mwh",
    "primary_energy_source",
    "retail_price_usd_per_mwh",
    "net_generation_mwh",
]
_DERIVED_COLUMNS = [
    *[fuel.emissions_col for fuel in Fuel],
    "total_emissions_lbs",
    "emissions_lbs_per_upt",
    "emissions_lbs_per_mile",
    "agency_size",
    "car_emissions_lbs",
    "emissions_avoided_lbs",
    "electric_fraction",
]

RESOURCE_COLUMNS: dict[str, list[str]] = {
    "electricity_profiles": _PROFILE_COLUMNS,
    "energy": ["ntd_id", "agency_name", "mode_code", "mode", *ALL_FUELS],
    "service": [
        "ntd_id",
        "agency_name",
        "city",
        "state",
        "upt",
        "passenger_miles",
    ],
    "emissions": [
        "ntd_id",
        "agency_name",
        "city",
        "state",
        "mode_code",
        "mode",
        "upt",
        "passenger_miles",
        *_PROFILE_COLUMNS[1:],
        *ALL_FUELS,
        *_DERIVED_COLUMNS,
    ],
    "emissions_by_agency": [
        "ntd_id",
        "agency_name",
        "city",
        "state",
        "upt",
        "passenger_miles",
        *_PROFILE_COLUMNS[1:],
        *ALL_FUELS,
        *_DERIVED_COLUMNS,
    ],
}
"""Ordered columns of each table produced by the pipeline."""

RESOURCE_PRIMARY_KEYS: dict[str, list[str]] = {
    "electricity_profiles": ["state"],
    "energy": ["ntd_id", "mode_code"],
    "service": ["ntd_id"],
    "emissions": ["ntd_id", "mode_code"],
    "emissions_by_agency": ["ntd_id"],
}


def get_dtypes(field_meta: dict[str, Any] | None = None) -> dict[str, str]:
    """Compile a dictionary of pandas dtypes keyed by field name."""
    if field_meta is None:
        field_meta = FIELD_METADATA
    return {
        name: FIELD_DTYPES_PANDAS[meta["type"]] for name, meta in field_meta.items()
    }


def apply_dtypes(df: pd.DataFrame) -> pd.DataFrame:
    """Apply dtypes to those columns in a dataframe that have a field defined.

    Args:
        df: The dataframe to apply types to.

    Returns:
        The input dataframe with the standard types applied.
    """
    dtypes = get_dtypes()
    return df.astype({col: dtypes[col] for col in df.columns if col in dtypes})


def enforce_schema(df: pd.DataFrame, resource: str) -> pd.DataFrame:
    """Drop columns not in the table schema, order the rest and enforce their types.

    Raises:
        KeyError: if any of the schema's columns are missing from ``df``.
    """
    cols = RESOURCE_COLUMNS[resource]
    missing_cols = [col for col in cols if col not in df.columns]
    if missing_cols:
        raise KeyError(f"{resource} is missing expected columns: {missing_cols}")
    return apply_dtypes(df.loc[:, cols]).reset_index(drop=True)
