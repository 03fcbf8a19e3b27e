"""Persist the finished tables for use by report tooling."""

from pathlib import Path

import pandas as pd
import pyarrow as pa
from pyarrow import parquet as pq

import transit_emissions.logging_helpers
from transit_emissions.metadata.fields import (
    FIELD_METADATA,
    RESOURCE_COLUMNS,
    apply_dtypes,
    enforce_schema,
)

logger = transit_emissions.logging_helpers.get_logger(__name__)

FIELD_DTYPES_PYARROW: dict[str, pa.DataType] = {
    "string": pa.string(),
    "number": pa.float64(),
    "integer": pa.int64(),
}
"""PyArrow data type by field type. Floats stay 64 bit so values round trip exactly."""


def to_pyarrow_schema(resource: str) -> pa.Schema:
    """Construct the PyArrow schema of one of the tables."""
    return pa.schema(
        [
            pa.field(col, FIELD_DTYPES_PYARROW[FIELD_METADATA[col]["type"]])
            for col in RESOURCE_COLUMNS[resource]
        ]
    )


def to_parquet(df: pd.DataFrame, path: str | Path, resource: str) -> Path:
    """Write a table to a Parquet file.

    Args:
        df: The table to write.
        path: Where to write the file.
        resource: Name of the table, used to look up its schema.

    Returns:
        The path written to.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    table = pa.Table.from_pandas(
        enforce_schema(df, resource),
        schema=to_pyarrow_schema(resource),
        preserve_index=False,
    )
    pq.write_table(table, path, compression="snappy")
    logger.info(f"Wrote {len(df)} {resource} records to {path}")
    return path


def read_parquet(path: str | Path, resource: str) -> pd.DataFrame:
    """Read a table written by :func:`to_parquet`, restoring its column types."""
    df = pq.read_table(path, schema=to_pyarrow_schema(resource)).to_pandas()
    return apply_dtypes(df)


def to_csv(df: pd.DataFrame, path: str | Path, resource: str | None = None) -> Path:
    """Write a table to a CSV file.

    If the name of the table is given, its columns are checked and put in schema order.
    """
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if resource is not None:
        df = enforce_schema(df, resource)
    df.to_csv(path, index=False)
    logger.info(f"Wrote {len(df)} records to {path}")
    return path
