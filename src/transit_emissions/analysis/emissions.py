"""Join the normalized tables and estimate the CO2 emissions of each transit service.

Combustion fuels are converted into emissions using fixed per-gallon emission factors.
Electric propulsion is converted using the CO2 intensity of the electricity grid in the
agency's state, so that the footprint of electrified transit reflects how clean the
local grid is. The emissions are then normalized by trips and passenger miles, and
compared against the emissions of driving the same passenger miles in a private car.
"""

import numpy as np
import pandas as pd

import transit_emissions.logging_helpers
from transit_emissions.analysis.awards import classify_agency_size
from transit_emissions.helpers import finite_ratio
from transit_emissions.metadata.constants import (
    ALL_FUELS,
    CAR_LBS_CO2_PER_GALLON,
    CAR_MILES_PER_GALLON,
    COMBUSTION_EMISSION_FACTORS,
    Fuel,
)
from transit_emissions.metadata.fields import enforce_schema
from transit_emissions.validate import PipelineDiagnostics

logger = transit_emissions.logging_helpers.get_logger(__name__)

EMISSIONS_COLS: list[str] = [fuel.emissions_col for fuel in Fuel]
PROFILE_COLS: list[str] = [
    "state_name",
    "co2_lbs_per_mwh",
    "primary_energy_source",
    "retail_price_usd_per_mwh",
    "net_generation_mwh",
]


def join_sources(
    service: pd.DataFrame,
    energy: pd.DataFrame,
    profiles: pd.DataFrame,
    diagnostics: PipelineDiagnostics | None = None,
) -> pd.DataFrame:
    """Combine service, energy and grid data into one row per agency and mode.

    The agency is joined first, since it anchors the identity of each row: every
    service record fans out into one row per mode the agency reported energy use for.
    The state's electricity profile is then attached to each row.

    * Agencies without any energy records are dropped.
    * Energy records of agencies without service data are dropped.
    * Rows whose state has no electricity profile are kept with null profile fields.

    Args:
        service: The normalized ``service`` table.
        energy: The normalized ``energy`` table.
        profiles: The normalized ``electricity_profiles`` table.
        diagnostics: Where to record the dropped and incomplete rows.

    Returns:
        One row per (``ntd_id``, ``mode_code``) present in both service and energy.
    """
    if diagnostics is None:
        diagnostics = PipelineDiagnostics()
    by_agency = service.merge(
        energy.drop(columns="agency_name"),
        on="ntd_id",
        how="left",
        validate="one_to_many",
    )
    no_energy = by_agency["mode_code"].isna()
    diagnostics.record(
        "agencies_without_energy",
        no_energy.sum(),
        "agencies without energy records dropped.",
    )
    diagnostics.record(
        "energy_rows_without_service",
        (~energy["ntd_id"].isin(service["ntd_id"])).sum(),
        "energy records of agencies without service data dropped.",
    )
    joined = by_agency.loc[~no_energy].merge(
        profiles.loc[:, ["state", *PROFILE_COLS]],
        on="state",
        how="left",
        validate="many_to_one",
    )
    missing_profile = joined["co2_lbs_per_mwh"].isna()
    if missing_profile.any():
        states = sorted(joined.loc[missing_profile, "state"].dropna().unique())
        diagnostics.record(
            "rows_missing_profile",
            missing_profile.sum(),
            f"agency and mode records in states without an electricity profile: "
            f"{states}",
        )
    logger.info(f"Joined {len(joined)} agency and mode records.")
    return joined.reset_index(drop=True)


def add_fuel_emissions(df: pd.DataFrame) -> pd.DataFrame:
    """Estimate the CO2 emitted by each fuel, and their total.

    Missing consumption counts as zero. Electric propulsion is multiplied by the
    state's grid CO2 rate, so if that rate is unknown the electric emissions (and the
    total) are only defined when no electricity was used.
    """
    out_df = df.copy()
    for fuel, factor in COMBUSTION_EMISSION_FACTORS.items():
        out_df[fuel.emissions_col] = out_df[fuel.value].fillna(0.0) * factor
    electric = out_df[Fuel.ELECTRIC_PROPULSION.value].fillna(0.0)
    out_df[Fuel.ELECTRIC_PROPULSION.emissions_col] = np.where(
        electric == 0, 0.0, electric * out_df["co2_lbs_per_mwh"].astype("float64")
    )
    out_df["total_emissions_lbs"] = out_df[EMISSIONS_COLS].sum(
        axis="columns", skipna=False
    )
    return out_df


def add_normalized_metrics(df: pd.DataFrame) -> pd.DataFrame:
    """Add per-trip and per-mile emissions, size tier and the car comparison.

    Ratios with a zero denominator are reported as null, never as infinity.
    """
    modelled_fuel = df[[fuel.value for fuel in Fuel]].fillna(0.0).sum(axis="columns")
    car_emissions = (
        df["passenger_miles"].astype("float64")
        / CAR_MILES_PER_GALLON
        * CAR_LBS_CO2_PER_GALLON
    )
    return df.assign(
        emissions_lbs_per_upt=finite_ratio(df["total_emissions_lbs"], df["upt"]),
        emissions_lbs_per_mile=finite_ratio(
            df["total_emissions_lbs"], df["passenger_miles"]
        ),
        agency_size=classify_agency_size(df["upt"]),
        car_emissions_lbs=car_emissions,
        emissions_avoided_lbs=car_emissions - df["total_emissions_lbs"],
        electric_fraction=finite_ratio(
            df[Fuel.ELECTRIC_PROPULSION.value].fillna(0.0), modelled_fuel
        ),
    )


def drop_undefined_metrics(
    df: pd.DataFrame, diagnostics: PipelineDiagnostics | None = None
) -> pd.DataFrame:
    """Exclude rows whose total, per-trip or per-mile emissions are undefined."""
    if diagnostics is None:
        diagnostics = PipelineDiagnostics()
    undefined = (
        df[["total_emissions_lbs", "emissions_lbs_per_upt", "emissions_lbs_per_mile"]]
        .isna()
        .any(axis="columns")
    )
    diagnostics.record(
        "rows_undefined_metrics",
        undefined.sum(),
        "records excluded because their emissions per trip or mile are undefined.",
    )
    return df.loc[~undefined]


def calculate_emissions(
    joined: pd.DataFrame, diagnostics: PipelineDiagnostics | None = None
) -> pd.DataFrame:
    """Estimate the emissions of each agency and mode.

    Args:
        joined: Output of :func:`join_sources`.
        diagnostics: Where to record rows excluded for undefined metrics.

    Returns:
        The ``emissions`` table. Every row has finite total, per-trip and per-mile
        emissions. ``electric_fraction`` is null where no modelled fuel was used.
    """
    df = (
        joined.pipe(add_fuel_emissions)
        .pipe(add_normalized_metrics)
        .pipe(drop_undefined_metrics, diagnostics=diagnostics)
    )
    logger.info(f"Estimated emissions for {len(df)} agency and mode records.")
    return enforce_schema(df, "emissions")


def aggregate_by_agency(
    emissions: pd.DataFrame, diagnostics: PipelineDiagnostics | None = None
) -> pd.DataFrame:
    """Roll the emissions of each agency up across all of its modes.

    Trips and passenger miles are reported per agency, so they are taken once rather
    than summed over modes. Fuel use and emissions are summed, and the normalized
    metrics are recomputed from the sums.

    Args:
        emissions: The ``emissions`` table.
        diagnostics: Where to record rows excluded for undefined metrics.

    Returns:
        The ``emissions_by_agency`` table, one row per agency.
    """
    first_cols = [
        "agency_name",
        "city",
        "state",
        "upt",
        "passenger_miles",
        *PROFILE_COLS,
    ]
    summed_cols = [*ALL_FUELS, *EMISSIONS_COLS]
    df = (
        emissions.groupby("ntd_id", as_index=False, sort=False)
        .agg(
            {
                **dict.fromkeys(first_cols, "first"),
                **dict.fromkeys(summed_cols, "sum"),
            }
        )
        .assign(total_emissions_lbs=lambda x: x[EMISSIONS_COLS].sum(axis="columns"))
        .pipe(add_normalized_metrics)
        .pipe(drop_undefined_metrics, diagnostics=diagnostics)
    )
    logger.info(f"Aggregated emissions for {len(df)} agencies.")
    return enforce_schema(df, "emissions_by_agency")
