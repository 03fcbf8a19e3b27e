"""General utility functions that are used in a variety of contexts.

The functions in this module are used in the extract, transform and analysis steps.
They tend to operate on whole dataframes or series, and return new objects, so they
are suitable for use with :meth:`pandas.DataFrame.pipe` in a chain.
"""

import re

import numpy as np
import pandas as pd

import transit_emissions.logging_helpers

logger = transit_emissions.logging_helpers.get_logger(__name__)


def simplify_columns(df: pd.DataFrame) -> pd.DataFrame:
    """Simplify column labels for use as snake_case fields.

    All column labels will be simplified by:

    * Replacing all non-alphanumeric characters with spaces.
    * Forcing all letters to be lower case.
    * Compacting internal whitespace to a single " ".
    * Stripping leading and trailing whitespace.
    * Replacing all remaining whitespace with underscores.

    Args:
        df: The DataFrame whose column labels to simplify.

    Returns:
        A copy of the dataframe with simplified column names.
    """
    out_df = df.copy()
    out_df.columns = (
        out_df.columns.astype(str)
        .str.replace(r"[^0-9a-zA-Z]+", " ", regex=True)
        .str.strip()
        .str.lower()
        .str.replace(r"\s+", " ", regex=True)
        .str.replace(" ", "_")
    )
    return out_df


def simplify_strings(col: pd.Series) -> pd.Series:
    """Strip, lowercase and compact the whitespace of the strings in a series.

    Null values are left unaltered.
    """
    return (
        col.astype("string")
        .str.replace(r"[\x00-\x1f\x7f-\x9f]", "", regex=True)
        .str.strip()
        .str.lower()
        .str.replace(r"\s+", " ", regex=True)
    )


def fix_na(df: pd.DataFrame) -> pd.DataFrame:
    """Replace common ill-posed spreadsheet NA values with NA.

    Replaces empty strings, lone dashes, single decimal points with no numbers, and
    whitespace-only strings.
    """
    return df.replace(regex=r"(^\s*-?\s*$|^\.$)", value=np.nan)


def strip_to_numeric(col: pd.Series) -> pd.Series:
    """Convert a series of possibly comma-grouped numeric strings to floats.

    Values that can't be parsed become NaN. It's up to the caller to decide whether
    that's an error or a value to fill.
    """
    if pd.api.types.is_numeric_dtype(col):
        return col.astype("float64")
    cleaned = col.astype(str).str.replace(",", "", regex=False).str.strip()
    return pd.to_numeric(cleaned, errors="coerce").astype("float64")


def unparseable(raw: pd.Series, parsed: pd.Series) -> pd.Series:
    """Boolean mask of values which were present in ``raw`` but didn't parse."""
    return raw.notna() & parsed.isna()


def finite_ratio(numerator: pd.Series, denominator: pd.Series) -> pd.Series:
    """Divide two series, reporting any non-finite result as NaN.

    Division by zero produces ``inf`` or ``NaN`` in pandas. Neither is a meaningful
    metric, so both are reported uniformly as missing.
    """
    ratio = numerator.astype("float64") / denominator.astype("float64")
    return ratio.where(np.isfinite(ratio))


def state_slug(state_name: str) -> str:
    """Lowercase a state name and remove its whitespace, e.g. New York -> newyork."""
    return re.sub(r"\s+", "", state_name).lower()
