"""Tools for setting up and managing transit emissions workspaces."""

import os
from pathlib import Path
from typing import Self

from pydantic import DirectoryPath, NewPath, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

import transit_emissions.logging_helpers

logger = transit_emissions.logging_helpers.get_logger(__name__)

PotentialDirectoryPath = DirectoryPath | NewPath


class TransitPaths(BaseSettings):
    """These settings provide access to the workspace directories.

    It is configured via TRANSIT_INPUT and TRANSIT_OUTPUT environment variables.
    Raw downloads are cached under the input directory, and the finished tables are
    written to the output directory.
    """

    transit_input: PotentialDirectoryPath
    transit_output: PotentialDirectoryPath
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @model_validator(mode="after")
    def create_directories(self: Self):
        """Create input and output directories if they don't already exist."""
        self.input_dir.mkdir(parents=True, exist_ok=True)
        self.output_dir.mkdir(parents=True, exist_ok=True)
        return self

    @property
    def input_dir(self) -> Path:
        """Path to the raw input cache directory."""
        return Path(self.transit_input).absolute()

    @property
    def output_dir(self) -> Path:
        """Path to the output directory."""
        return Path(self.transit_output).absolute()

    def output_file(self, filename: str) -> Path:
        """Path to file in the output directory."""
        return self.output_dir / filename

    @staticmethod
    def set_path_overrides(
        input_dir: str | None = None,
        output_dir: str | None = None,
    ) -> None:
        """Set TRANSIT_INPUT and/or TRANSIT_OUTPUT env variables.

        Args:
            input_dir: if set, overrides TRANSIT_INPUT env variable.
            output_dir: if set, overrides TRANSIT_OUTPUT env variable.
        """
        if input_dir:
            os.environ["TRANSIT_INPUT"] = input_dir
        if output_dir:
            os.environ["TRANSIT_OUTPUT"] = output_dir
