"""Data validation functions and the diagnostics recorded while running the ETL."""

from collections import Counter

import pandas as pd

import transit_emissions.logging_helpers

logger = transit_emissions.logging_helpers.get_logger(__name__)


class ValidationError(ValueError):
    """Exception raised when normalized data violates one of its invariants."""

    def __init__(self, message: str, invalid_rows: pd.DataFrame | None = None):
        """Initialize the ValidationError with a message and the offending rows."""
        super().__init__(message)
        self.invalid_rows = invalid_rows


class PipelineDiagnostics:
    """Counts of the rows and values the pipeline recovered from rather than failed on.

    Each recoverable condition (a consumption value filled with zero, a row dropped for
    having no energy use, a row excluded because a metric is undefined...) is tallied
    under a name, so that regressions in the input data show up as changed counts.
    """

    def __init__(self):
        """Start with no recorded conditions."""
        self.counts: Counter[str] = Counter()

    def record(self, condition: str, n: int, message: str = "") -> None:
        """Add ``n`` occurrences of a named condition and log them."""
        self.counts[condition] += int(n)
        if n:
            logger.info(f"{condition}: {n} {message}".rstrip())

    def __getitem__(self, condition: str) -> int:
        """Number of times a condition has been recorded, 0 if never."""
        return self.counts[condition]

    def summary(self) -> dict[str, int]:
        """All recorded condition counts, sorted by name."""
        return dict(sorted(self.counts.items()))


def no_negative_values(
    df: pd.DataFrame, cols: list[str], df_name: str = ""
) -> pd.DataFrame:
    """Check that none of the given columns contain negative values.

    Returns:
        The input DataFrame, for use with DataFrame.pipe().

    Raises:
        ValidationError: If any value in ``cols`` is negative.
    """
    negative = (df[cols] < 0).any(axis="columns")
    if negative.any():
        raise ValidationError(
            f"Found {negative.sum()} rows with negative values in {df_name} "
            f"columns {cols}.\n{df[negative]}",
            invalid_rows=df[negative],
        )
    return df


def no_null_values(
    df: pd.DataFrame, cols: list[str], df_name: str = ""
) -> pd.DataFrame:
    """Check that none of the given columns contain null values.

    Raises:
        ValidationError: If any value in ``cols`` is null.
    """
    null_rows = df[cols].isna().any(axis="columns")
    if null_rows.any():
        raise ValidationError(
            f"Found {null_rows.sum()} rows with null values in {df_name} "
            f"columns {cols}.\n{df[null_rows]}",
            invalid_rows=df[null_rows],
        )
    return df


def unique_primary_key(
    df: pd.DataFrame, primary_key: list[str], df_name: str = ""
) -> pd.DataFrame:
    """Check that no two rows share the same primary key.

    Raises:
        ValidationError: If the primary key is duplicated.
    """
    dupes = df.duplicated(subset=primary_key, keep=False)
    if dupes.any():
        raise ValidationError(
            f"Found {dupes.sum()} rows with duplicate {primary_key} in {df_name}.\n"
            f"{df[dupes]}",
            invalid_rows=df[dupes],
        )
    return df
