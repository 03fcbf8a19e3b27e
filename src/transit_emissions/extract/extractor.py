"""Generic functionality for extractors."""

from abc import ABC, abstractmethod
from typing import Any

import pandas as pd

import transit_emissions.logging_helpers
from transit_emissions.helpers import simplify_columns
from transit_emissions.workspace.datastore import Datastore
from transit_emissions.workspace.resource_cache import ResourceKey

logger = transit_emissions.logging_helpers.get_logger(__name__)


class ParseError(ValueError):
    """A fetched resource doesn't contain the table, column or row we expected."""


class GenericExtractor(ABC):
    """Generic extractor base class.

    Subclasses say where each page of their dataset lives (:meth:`resource_key` and
    :meth:`source_url`) and how to parse its content (:meth:`load_source`). Column
    labels are then simplified to snake_case and translated into standardized names
    using :attr:`COLUMN_MAP`. Columns that aren't in the map are dropped, and missing
    required columns raise a :class:`ParseError`.
    """

    DATASET: str = ""
    """Name of the dataset, used as the first part of the cache key."""

    COLUMN_MAP: dict[str, dict[str, str]] = {}
    """For each page, a map of simplified raw column labels to standardized names."""

    REQUIRED_COLUMNS: dict[str, list[str]] = {}
    """For each page, the standardized columns which must be present."""

    def __init__(self, ds: Datastore):
        """Create new extractor object.

        Args:
            ds: An initialized datastore, or subclass
        """
        if not self.DATASET:
            raise NotImplementedError("self.DATASET must be set.")
        self.ds = ds

    @abstractmethod
    def resource_key(self, page: str, **partition: Any) -> ResourceKey:
        """Key under which the raw page is cached, including its source URL."""
        ...

    @abstractmethod
    def source_url(self, page: str, **partition: Any) -> str:
        """URL from which the raw page is downloaded."""
        ...

    @abstractmethod
    def load_source(self, content: bytes, page: str, **partition: Any) -> pd.DataFrame:
        """Parse the raw content of a page into a dataframe.

        Raises:
            ParseError: if the content doesn't hold the expected table.
        """
        ...

    def process_raw(
        self, df: pd.DataFrame, page: str, **partition: Any
    ) -> pd.DataFrame:
        """Simplify the column labels and rename them to standardized names."""
        df = simplify_columns(df)
        column_map = self.COLUMN_MAP.get(page, {})
        df = df.rename(columns=column_map)
        # Aliases of the same column: keep the first one found.
        df = df.loc[:, ~df.columns.duplicated()]
        keep = [col for col in df.columns if col in set(column_map.values())]
        dropped = sorted(set(df.columns) - set(keep))
        if dropped:
            logger.debug(f"{self.DATASET}/{page}: ignoring columns {dropped}")
        return df.loc[:, keep]

    def validate(self, df: pd.DataFrame, page: str, **partition: Any) -> pd.DataFrame:
        """Check that all of the required columns are present.

        Raises:
            ParseError: if any required column is missing.
        """
        missing = [
            col for col in self.REQUIRED_COLUMNS.get(page, []) if col not in df.columns
        ]
        if missing:
            raise ParseError(
                f"{self.DATASET}/{page} {partition or ''} is missing expected columns: "
                f"{missing}. Found: {sorted(df.columns)}"
            )
        return df

    def extract(self, page: str, **partition: Any) -> pd.DataFrame:
        """Download (or read from cache) and parse a page of the dataset."""
        content = self.ds.get_resource(self.resource_key(page, **partition))
        df = self.load_source(content, page, **partition)
        df = self.process_raw(df, page, **partition)
        return self.validate(df, page, **partition)
