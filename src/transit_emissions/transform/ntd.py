"""Normalize the National Transit Database energy and service tables."""

import numpy as np
import pandas as pd

import transit_emissions.logging_helpers
from transit_emissions.helpers import fix_na, strip_to_numeric, unparseable
from transit_emissions.metadata.codes import MODE_LABELS, UNKNOWN_MODE
from transit_emissions.metadata.constants import ALL_FUELS
from transit_emissions.metadata.fields import RESOURCE_PRIMARY_KEYS, enforce_schema
from transit_emissions.validate import (
    PipelineDiagnostics,
    ValidationError,
    no_negative_values,
    unique_primary_key,
)

logger = transit_emissions.logging_helpers.get_logger(__name__)

ENERGY_DEDUPE_KEY: list[str] = ["ntd_id", "mode_code", "agency_name"]
"""Raw energy records sharing these values are reports of the same service."""


def _parse_ntd_ids(df: pd.DataFrame) -> pd.Series:
    """Parse NTD IDs, which may be zero padded strings, into integers (or NA)."""
    ids = strip_to_numeric(df["ntd_id"])
    return ids.where(ids == ids.round()).astype("Int64")


def _clean_strings(df: pd.DataFrame, cols: list[str]) -> pd.DataFrame:
    """Strip leading and trailing whitespace from string columns."""
    return df.assign(**{col: df[col].astype("string").str.strip() for col in cols})


def _fill_consumption(
    df: pd.DataFrame, diagnostics: PipelineDiagnostics
) -> pd.DataFrame:
    """Parse the fuel consumption columns, treating absent values as zero.

    An absent quantity means the fuel wasn't used, so unlike the other tables this one
    doesn't fail on missing values. The number of filled values is recorded instead.

    Raises:
        ValidationError: if any consumption quantity is negative.
    """
    out_df = df.copy()
    n_filled = 0
    n_unparseable = 0
    for fuel in ALL_FUELS:
        if fuel not in out_df.columns:
            out_df[fuel] = 0.0
            continue
        parsed = strip_to_numeric(out_df[fuel])
        n_unparseable += unparseable(out_df[fuel], parsed).sum()
        n_filled += parsed.isna().sum()
        out_df[fuel] = parsed.fillna(0.0)
    diagnostics.record(
        "consumption_values_zero_filled",
        n_filled,
        "missing fuel consumption values treated as zero.",
    )
    diagnostics.record(
        "consumption_values_unparseable",
        n_unparseable,
        "of which were present but not numbers.",
    )
    return no_negative_values(out_df, cols=ALL_FUELS, df_name="energy consumption")


def _sum_duplicate_reports(
    df: pd.DataFrame, diagnostics: PipelineDiagnostics
) -> pd.DataFrame:
    """Combine the records of the same agency and mode into one.

    The workbook reports each agency and mode separately for each type of service
    (directly operated, purchased transportation...). Summing is idempotent: applying
    it to an already summed table leaves it unchanged.

    The same agency and mode occasionally appear under more than one agency name. Those
    records are combined as well, keeping the first name, so that each agency and mode
    has exactly one row.
    """
    summed = df.groupby(ENERGY_DEDUPE_KEY, as_index=False, sort=False, dropna=False)[
        ALL_FUELS
    ].sum()
    diagnostics.record(
        "energy_rows_combined",
        len(df) - len(summed),
        "duplicate energy records summed into another record.",
    )
    pk = RESOURCE_PRIMARY_KEYS["energy"]
    conflicting = summed.duplicated(subset=pk, keep=False)
    if conflicting.any():
        logger.warning(
            "Found agencies reporting the same mode under different names:\n"
            f"{summed.loc[conflicting, ENERGY_DEDUPE_KEY]}"
        )
        diagnostics.record(
            "energy_rows_conflicting_names",
            summed.duplicated(subset=pk).sum(),
            "energy records combined despite differing agency names.",
        )
        summed = summed.groupby(pk, as_index=False, sort=False, dropna=False).agg(
            {"agency_name": "first", **dict.fromkeys(ALL_FUELS, "sum")}
        )
    return summed


def _recode_modes(
    df: pd.DataFrame, diagnostics: PipelineDiagnostics
) -> pd.DataFrame:
    """Map NTD mode codes to descriptive labels, and unknown codes to Unknown."""
    mode = df["mode_code"].map(MODE_LABELS)
    unknown = mode.isna()
    if unknown.any():
        codes = sorted(df.loc[unknown, "mode_code"].dropna().unique())
        diagnostics.record(
            "unknown_mode_codes",
            unknown.sum(),
            f"energy records with unrecognized mode codes {codes}.",
        )
    return df.assign(mode=mode.fillna(UNKNOWN_MODE))


def _drop_zero_energy(
    df: pd.DataFrame, diagnostics: PipelineDiagnostics
) -> pd.DataFrame:
    """Drop records whose consumption of every fuel is zero."""
    zero_total = df[ALL_FUELS].sum(axis="columns") == 0
    diagnostics.record(
        "energy_rows_zero_total",
        zero_total.sum(),
        f"({zero_total.mean():.1%}) energy records with no fuel consumption dropped.",
    )
    return df.loc[~zero_total]


def transform_energy(
    raw_energy: pd.DataFrame, diagnostics: PipelineDiagnostics | None = None
) -> pd.DataFrame:
    """Transform the raw NTD energy table into one row per agency and mode.

    Args:
        raw_energy: Output of :func:`transit_emissions.extract.ntd.extract_energy`.
        diagnostics: Where to record the recoverable conditions encountered.

    Returns:
        The ``energy`` table.

    Raises:
        ValidationError: if any consumption quantity is negative.
    """
    if diagnostics is None:
        diagnostics = PipelineDiagnostics()
    df = raw_energy.pipe(fix_na).assign(ntd_id=_parse_ntd_ids)
    missing_id = df["ntd_id"].isna()
    diagnostics.record(
        "energy_rows_missing_id",
        missing_id.sum(),
        "energy records without a valid NTD ID dropped.",
    )
    df = (
        df.loc[~missing_id]
        .pipe(_clean_strings, cols=["mode_code", "agency_name"])
        .assign(mode_code=lambda x: x.mode_code.str.upper())
        .pipe(_fill_consumption, diagnostics=diagnostics)
        .pipe(_sum_duplicate_reports, diagnostics=diagnostics)
        .pipe(_recode_modes, diagnostics=diagnostics)
        .pipe(_drop_zero_energy, diagnostics=diagnostics)
    )
    logger.info(f"Normalized {len(df)} agency and mode energy records.")
    return enforce_schema(df, "energy")


def _parse_service_quantities(df: pd.DataFrame) -> pd.DataFrame:
    """Parse trips and miles, which must be present, numeric and non-negative.

    Raises:
        ValidationError: if a value is missing, unparseable, negative, or if a
            trip count isn't a whole number.
    """
    out_df = df.copy()
    for col in ["upt", "passenger_miles"]:
        parsed = strip_to_numeric(out_df[col])
        bad = parsed.isna()
        if bad.any():
            raise ValidationError(
                f"Found {bad.sum()} missing or unparseable {col} values in the "
                f"service table: {out_df.loc[bad, col].tolist()[:10]}",
                invalid_rows=out_df[bad],
            )
        out_df[col] = parsed
    fractional = out_df["upt"] != np.floor(out_df["upt"])
    if fractional.any():
        raise ValidationError(
            f"Found {fractional.sum()} fractional trip counts in the service table.",
            invalid_rows=out_df[fractional],
        )
    return no_negative_values(
        out_df, cols=["upt", "passenger_miles"], df_name="service"
    ).astype({"upt": "Int64"})


def transform_service(
    raw_service: pd.DataFrame, diagnostics: PipelineDiagnostics | None = None
) -> pd.DataFrame:
    """Transform the raw NTD service table into one row per agency.

    Agencies with no passenger miles are dropped, since every per-mile metric would
    be undefined for them.

    Args:
        raw_service: Output of :func:`transit_emissions.extract.ntd.extract_service`.
        diagnostics: Where to record the recoverable conditions encountered.

    Returns:
        The ``service`` table.

    Raises:
        ValidationError: if trips or miles are missing, unparseable or negative, or if
            an agency appears more than once.
    """
    if diagnostics is None:
        diagnostics = PipelineDiagnostics()
    df = raw_service.pipe(fix_na).assign(ntd_id=_parse_ntd_ids)
    missing_id = df["ntd_id"].isna()
    diagnostics.record(
        "service_rows_missing_id",
        missing_id.sum(),
        "service records without a valid NTD ID dropped.",
    )
    df = (
        df.loc[~missing_id]
        .pipe(_clean_strings, cols=["agency_name", "city", "state"])
        .assign(state=lambda x: x.state.str.upper())
        .pipe(_parse_service_quantities)
    )
    zero_miles = df["passenger_miles"] == 0
    diagnostics.record(
        "service_rows_zero_miles",
        zero_miles.sum(),
        "service records with no passenger miles dropped.",
    )
    df = df.loc[~zero_miles].pipe(
        unique_primary_key,
        primary_key=RESOURCE_PRIMARY_KEYS["service"],
        df_name="service",
    )
    logger.info(f"Normalized service records for {len(df)} agencies.")
    return enforce_schema(df, "service")
