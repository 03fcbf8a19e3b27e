"""Modules implementing the "Extract" step of the transit emissions ETL pipeline.

Each module in this subpackage downloads (through the cached
:class:`~transit_emissions.workspace.datastore.Datastore`) one of the raw data
sources and parses it into a :class:`pandas.DataFrame` with standardized column names,
but without any cleaning or type coercion. That happens in
:mod:`transit_emissions.transform`.
"""

from . import eia_sep, extractor, ntd  # noqa: F401
