"""Estimate and compare the CO2 emissions of US public transit agencies."""

from importlib.metadata import PackageNotFoundError, version

from . import (  # noqa: F401
    analysis,
    etl,
    extract,
    helpers,
    load,
    logging_helpers,
    metadata,
    settings,
    transform,
    validate,
    workspace,
)

logging_helpers.configure_root_logger()

try:
    __version__ = version("transit-emissions")
except PackageNotFoundError:
    __version__ = "unknown"
__docformat__ = "restructuredtext en"
__description__ = (
    "Estimate the CO2 emissions of US public transit from the National Transit "
    "Database and EIA State Electricity Profiles."
)
