"""Tools for managing the local cache of raw inputs and the output directory."""

from . import datastore, resource_cache, setup  # noqa: F401
