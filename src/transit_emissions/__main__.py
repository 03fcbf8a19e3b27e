"""Entrypoint module for the transit emissions ETL script."""

import sys

from transit_emissions.cli import main

if __name__ == "__main__":
    sys.exit(main())
