"""Normalize the EIA State Electricity Profiles."""

import pandas as pd

import transit_emissions.logging_helpers
from transit_emissions.helpers import fix_na, strip_to_numeric, unparseable
from transit_emissions.metadata.dfs import STATE_ABBREVIATIONS
from transit_emissions.metadata.fields import RESOURCE_PRIMARY_KEYS, enforce_schema
from transit_emissions.validate import (
    ValidationError,
    no_negative_values,
    no_null_values,
    unique_primary_key,
)

logger = transit_emissions.logging_helpers.get_logger(__name__)

NUMERIC_COLS: list[str] = [
    "co2_lbs_per_mwh",
    "retail_price_cents_per_kwh",
    "net_generation_mwh",
]


def _add_state_abbreviations(df: pd.DataFrame) -> pd.DataFrame:
    """Look up the postal abbreviation of each state name.

    Raises:
        ValidationError: if any state name isn't one of the 50 states.
    """
    state_name = df["state_name"].astype("string").str.strip()
    unknown = ~state_name.isin(STATE_ABBREVIATIONS.keys())
    if unknown.any():
        raise ValidationError(
            f"Unrecognized state names: {sorted(df.loc[unknown, 'state_name'])}",
            invalid_rows=df[unknown],
        )
    return df.assign(state_name=state_name, state=state_name.map(STATE_ABBREVIATIONS))


def _parse_numeric_cols(df: pd.DataFrame) -> pd.DataFrame:
    """Parse the comma-grouped numbers on the profile pages.

    Missing or unparseable values are never filled.

    Raises:
        ValidationError: if any value is missing or can't be parsed.
    """
    out_df = df.copy()
    for col in NUMERIC_COLS:
        parsed = strip_to_numeric(out_df[col])
        bad = parsed.isna()
        if bad.any():
            kind = (
                "unparseable" if unparseable(out_df[col], parsed).any() else "missing"
            )
            raise ValidationError(
                f"Found {kind} {col} values for states "
                f"{sorted(out_df.loc[bad, 'state_name'])}: "
                f"{out_df.loc[bad, col].tolist()}",
                invalid_rows=out_df[bad],
            )
        out_df[col] = parsed
    return out_df


def transform_profiles(raw_profiles: pd.DataFrame) -> pd.DataFrame:
    """Transform the raw electricity profiles into one clean row per state.

    Args:
        raw_profiles: Output of
            :func:`transit_emissions.extract.eia_sep.extract_profiles`.

    Returns:
        The ``electricity_profiles`` table: CO2 rate in lb/MWh, retail price
        converted from cents/kWh to USD/MWh, and net generation in MWh.

    Raises:
        ValidationError: if a state is unknown or duplicated, or if any value is
            missing, unparseable or negative.
    """
    df = (
        raw_profiles.pipe(fix_na)
        .pipe(_add_state_abbreviations)
        .pipe(_parse_numeric_cols)
        .assign(
            retail_price_usd_per_mwh=lambda x: x.retail_price_cents_per_kwh * 10,
            primary_energy_source=lambda x: x.primary_energy_source.astype(
                "string"
            ).str.strip(),
        )
        .pipe(
            no_null_values,
            cols=["primary_energy_source"],
            df_name="electricity profiles",
        )
        .pipe(
            no_negative_values,
            cols=["co2_lbs_per_mwh", "retail_price_usd_per_mwh", "net_generation_mwh"],
            df_name="electricity profiles",
        )
        .pipe(
            unique_primary_key,
            primary_key=RESOURCE_PRIMARY_KEYS["electricity_profiles"],
            df_name="electricity profiles",
        )
    )
    logger.info(f"Normalized electricity profiles for {len(df)} states.")
    return enforce_schema(df, "electricity_profiles")
