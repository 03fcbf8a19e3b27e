"""Modules implementing the "Transform" step of the transit emissions ETL pipeline.

Each module in this subpackage takes the raw dataframes produced by the
corresponding :mod:`transit_emissions.extract` module and normalizes them: values are
parsed into numbers, codes are recoded into labels, duplicate records are combined and
rows which carry no information are dropped. The outputs conform to the table schemas
in :mod:`transit_emissions.metadata.fields`.
"""

from . import eia_sep, ntd  # noqa: F401
