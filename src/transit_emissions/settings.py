"""Module for validating transit emissions ETL settings."""

from typing import Self

import fsspec
import yaml
from pydantic import (
    BaseModel,
    ConfigDict,
    NonNegativeInt,
    PositiveFloat,
    field_validator,
)

import transit_emissions.logging_helpers
from transit_emissions.metadata.dfs import STATE_ABBREVIATIONS

logger = transit_emissions.logging_helpers.get_logger(__name__)


class FrozenBaseModel(BaseModel):
    """BaseModel with global configuration."""

    model_config: ConfigDict = ConfigDict(frozen=True, extra="forbid")


class EiaSepSettings(FrozenBaseModel):
    """Where to find the EIA State Electricity Profiles, and which states to fetch."""

    url_template: str = "https://www.eia.gov/electricity/state/{state}/"
    """URL of a state's profile page. ``{state}`` is replaced with the state slug."""

    states: list[str] = sorted(STATE_ABBREVIATIONS)
    """Names of the states whose profiles are fetched. Defaults to all 50."""

    @field_validator("url_template")
    @classmethod
    def url_template_has_state(cls, url_template: str) -> str:
        """Ensure the URL template has a place for the state slug."""
        if "{state}" not in url_template:
            raise ValueError(f"URL template {url_template} is missing {{state}}.")
        return url_template

    @field_validator("states")
    @classmethod
    def states_are_known(cls, states: list[str]) -> list[str]:
        """Ensure every requested state is one of the 50 states, with no repeats."""
        unknown = sorted(set(states) - set(STATE_ABBREVIATIONS))
        if unknown:
            raise ValueError(f"Unrecognized state names: {unknown}")
        if len(set(states)) != len(states):
            raise ValueError(f"Duplicate state names in {states}")
        return states


class NtdSettings(FrozenBaseModel):
    """Where to find the National Transit Database tables."""

    energy_url: str = (
        "https://www.transit.dot.gov/sites/fta.dot.gov/files/2024-10/"
        "2023%20Energy%20Consumption.xlsx"
    )
    """The NTD annual energy consumption workbook."""

    service_url: str = (
        "https://data.transportation.gov/resource/6y83-7vuw.csv?$limit=999999999"
    )
    """The NTD annual service by agency table, as CSV."""


class EtlSettings(FrozenBaseModel):
    """Main settings validation class."""

    eia_sep: EiaSepSettings = EiaSepSettings()
    ntd: NtdSettings = NtdSettings()

    timeout: PositiveFloat = 30.0
    """Connection timeout in seconds for each download."""

    max_retries: NonNegativeInt = 3
    """How many times a failed download is retried before giving up."""

    @classmethod
    def from_yaml(cls, path: str) -> Self:
        """Create an EtlSettings instance from a yaml_file path.

        Args:
            path: path to a yaml file; this could be remote.

        Returns:
            An ETL settings object.
        """
        with fsspec.open(path) as f:
            yaml_file = yaml.safe_load(f)
        return cls.model_validate(yaml_file or {})
