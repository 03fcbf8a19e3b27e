"""Metadata describing the transit emissions tables, codes and constants."""

from . import codes, constants, dfs, fields  # noqa: F401
