"""Configure logging for the transit_emissions package."""

import logging

import coloredlogs

ROOT_LOGGER = "transit_emissions"


def get_logger(name: str) -> logging.Logger:
    """Helper function to return a logger that lives under the package root logger."""
    if name != ROOT_LOGGER and not name.startswith(f"{ROOT_LOGGER}."):
        name = f"{ROOT_LOGGER}.{name}"
    return logging.getLogger(name)


def configure_root_logger(
    logfile: str | None = None,
    loglevel: str = "INFO",
    dependency_loglevels: dict[str, int] | None = None,
    propagate: bool = False,
) -> None:
    """Configure the root transit_emissions logger.

    Args:
        logfile: Path to logfile or None.
        loglevel: Level of detail at which to log, by default INFO.
        dependency_loglevels: Dictionary mapping dependency name to desired loglevel.
            This allows us to filter excessive logs from dependencies.
        propagate: Whether to propagate logs to ancestor loggers. Useful for ensuring
            that pytest has access to the package logs during testing.
    """
    if dependency_loglevels is None:
        dependency_loglevels = {"urllib3": logging.WARNING}
    for dependency_name, dependency_loglevel in dependency_loglevels.items():
        logging.getLogger(dependency_name).setLevel(dependency_loglevel)

    logger = logging.getLogger(ROOT_LOGGER)
    log_format = "%(asctime)s [%(levelname)8s] %(name)s:%(lineno)s %(message)s"
    coloredlogs.install(fmt=log_format, level=loglevel, logger=logger)

    logger.addHandler(logging.NullHandler())

    if logfile is not None:
        file_logger = logging.FileHandler(logfile)
        file_logger.setFormatter(logging.Formatter(log_format))
        logger.addHandler(file_logger)

    logger.propagate = propagate
