"""A command line interface (CLI) to the transit emissions ETL.

This script downloads the EIA State Electricity Profiles and the National Transit
Database energy and service tables, estimates the CO2 emissions of every transit agency
and mode, and selects the greenest (and dirtiest) agencies, based on parameters provided
via an optional YAML settings file.

Raw downloads are cached in ``TRANSIT_INPUT`` and the output tables are written to
``TRANSIT_OUTPUT``. Both can be set in the environment or in a ``.env`` file.
"""

import argparse
import sys

import transit_emissions
from transit_emissions.analysis.exploration import (
    cleanliness_ratio,
    summarize_electricity,
    summarize_service,
)
from transit_emissions.etl import EtlResult
from transit_emissions.extract.extractor import ParseError
from transit_emissions.load import to_csv, to_parquet
from transit_emissions.settings import EtlSettings
from transit_emissions.validate import ValidationError
from transit_emissions.workspace.datastore import Datastore, FetchError
from transit_emissions.workspace.setup import TransitPaths

logger = transit_emissions.logging_helpers.get_logger(__name__)


def parse_command_line(argv):
    """Parse script command line arguments. See the -h option.

    Args:
        argv (list): command line arguments including caller file name.

    Returns:
        dict: A dictionary mapping command line arguments to their values.
    """
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        dest="settings_file",
        type=str,
        nargs="?",
        default=None,
        help="path to ETL settings file. Defaults are used if omitted.",
    )
    parser.add_argument(
        "--logfile",
        default=None,
        help="If specified, write logs to this file.",
    )
    parser.add_argument(
        "--loglevel",
        help="Set logging level (DEBUG, INFO, WARNING, ERROR, or CRITICAL).",
        default="INFO",
    )
    parser.add_argument(
        "--input-dir",
        default=None,
        help="Cache raw downloads here. Overrides TRANSIT_INPUT.",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Write the output tables here. Overrides TRANSIT_OUTPUT.",
    )
    arguments = parser.parse_args(argv[1:])
    return arguments


def log_summaries(result: EtlResult) -> None:
    """Log the highlights of the electricity and service tables."""
    profiles = result.electricity_profiles
    if not profiles.empty:
        grid = summarize_electricity(profiles)
        cleanest = profiles.loc[profiles["co2_lbs_per_mwh"].idxmin()]
        dirtiest = profiles.loc[profiles["state_name"] == grid.dirtiest_state].iloc[0]
        logger.info(
            f"Most expensive electricity: {grid.most_expensive_state} "
            f"(${grid.most_expensive_price_usd_per_mwh:.2f}/MWh)"
        )
        logger.info(
            f"Dirtiest electricity: {grid.dirtiest_state} "
            f"({grid.dirtiest_co2_lbs_per_mwh:,.0f} lbs CO2/MWh), "
            f"{cleanliness_ratio(profiles, dirtiest['state'], cleanest['state']):.1f} "
            f"times the rate of {cleanest['state_name']}"
        )
        logger.info(
            f"Generation weighted CO2 rate: {grid.weighted_co2_lbs_per_mwh:,.0f} "
            f"lbs/MWh. Rarest primary source: {grid.rarest_primary_source}"
        )
    if not result.service.empty:
        service = summarize_service(result.service)
        logger.info(
            f"Busiest agency: {service.most_upt_agency} ({service.most_upt:,} trips)"
        )
        if service.longest_trip_agency is not None:
            logger.info(
                f"Longest average trip: {service.longest_trip_agency} "
                f"({service.longest_trip_miles:.1f} miles)"
            )


def main(argv=None):
    """Parse command line, run the ETL and write its outputs."""
    args = parse_command_line(sys.argv if argv is None else argv)

    transit_emissions.logging_helpers.configure_root_logger(
        logfile=args.logfile, loglevel=args.loglevel
    )

    etl_settings = (
        EtlSettings.from_yaml(args.settings_file)
        if args.settings_file
        else EtlSettings()
    )
    TransitPaths.set_path_overrides(
        input_dir=args.input_dir, output_dir=args.output_dir
    )
    paths = TransitPaths()
    ds = Datastore(
        local_cache_path=paths.input_dir,
        timeout=etl_settings.timeout,
        max_retries=etl_settings.max_retries,
    )

    try:
        result = transit_emissions.etl.run_etl(etl_settings, ds)
    except (FetchError, ParseError, ValidationError) as err:
        logger.error(f"ETL failed: {err}")
        return 1

    to_parquet(
        result.emissions, paths.output_file("transit_emissions.parquet"), "emissions"
    )
    to_csv(result.emissions, paths.output_file("transit_emissions.csv"), "emissions")
    to_parquet(
        result.emissions_by_agency,
        paths.output_file("transit_emissions_by_agency.parquet"),
        "emissions_by_agency",
    )
    to_csv(result.awards, paths.output_file("transit_emissions_awards.csv"))

    log_summaries(result)

    for _, award in result.awards.iterrows():
        logger.info(
            f"{award['agency_size']} {award['award']}: {award['agency_name']} "
            f"({award['mode']}) {award['metric']}={award['value']:.4g} "
            f"(median {award['median']:.4g})"
        )
    return 0


if __name__ == "__main__":
    sys.exit(main())
