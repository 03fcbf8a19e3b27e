"""Derived tables and summaries built from the normalized transit and grid data."""

from . import awards, emissions, exploration  # noqa: F401
