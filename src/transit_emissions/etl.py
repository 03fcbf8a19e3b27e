"""Run the transit emissions ETL, from the raw sources to the award winners.

Each step is a plain function of dataframes, so any of them can be run (and tested) on
its own. :func:`run_etl` chains them together in dependency order:

* Extract the state electricity profiles and the NTD energy and service tables.
* Normalize each of them into a validated table.
* Join service to energy to electricity profiles.
* Estimate emissions per agency and mode, and roll them up per agency.
* Select the award winners, overall and within each agency size tier.
"""

from typing import NamedTuple

import pandas as pd

import transit_emissions.logging_helpers
from transit_emissions.analysis.awards import select_awards
from transit_emissions.analysis.emissions import (
    aggregate_by_agency,
    calculate_emissions,
    join_sources,
)
from transit_emissions.extract.eia_sep import extract_profiles
from transit_emissions.extract.ntd import extract_energy, extract_service
from transit_emissions.settings import EtlSettings
from transit_emissions.transform.eia_sep import transform_profiles
from transit_emissions.transform.ntd import transform_energy, transform_service
from transit_emissions.validate import PipelineDiagnostics
from transit_emissions.workspace.datastore import Datastore

logger = transit_emissions.logging_helpers.get_logger(__name__)


class EtlResult(NamedTuple):
    """The tables produced by a run of the ETL, and what it had to recover from."""

    electricity_profiles: pd.DataFrame
    energy: pd.DataFrame
    service: pd.DataFrame
    emissions: pd.DataFrame
    emissions_by_agency: pd.DataFrame
    awards: pd.DataFrame
    diagnostics: PipelineDiagnostics


def run_etl(settings: EtlSettings, ds: Datastore) -> EtlResult:
    """Run the whole ETL.

    Args:
        settings: Where to find the sources, and which states to fetch.
        ds: Datastore used to fetch and cache the raw sources.

    Returns:
        All of the normalized and derived tables.

    Raises:
        FetchError: if a source can't be downloaded.
        ParseError: if a source doesn't have the expected structure.
        ValidationError: if a normalized table violates one of its invariants.
    """
    diagnostics = PipelineDiagnostics()

    logger.info("Extracting and normalizing the EIA electricity profiles.")
    profiles = transform_profiles(
        extract_profiles(
            ds, settings.eia_sep.states, url_template=settings.eia_sep.url_template
        )
    )

    logger.info("Extracting and normalizing the NTD energy consumption table.")
    energy = transform_energy(
        extract_energy(ds, settings.ntd.energy_url), diagnostics=diagnostics
    )

    logger.info("Extracting and normalizing the NTD service table.")
    service = transform_service(
        extract_service(ds, settings.ntd.service_url), diagnostics=diagnostics
    )

    joined = join_sources(service, energy, profiles, diagnostics=diagnostics)
    emissions = calculate_emissions(joined, diagnostics=diagnostics)
    emissions_by_agency = aggregate_by_agency(emissions, diagnostics=diagnostics)
    awards = select_awards(emissions, by_tier=True, diagnostics=diagnostics)

    for condition, n in diagnostics.summary().items():
        logger.info(f"Diagnostic {condition}: {n}")
    return EtlResult(
        electricity_profiles=profiles,
        energy=energy,
        service=service,
        emissions=emissions,
        emissions_by_agency=emissions_by_agency,
        awards=awards,
        diagnostics=diagnostics,
    )
