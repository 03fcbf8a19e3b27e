"""Implementations of datastore resource caches."""

import hashlib
import os
import tempfile
from abc import ABC, abstractmethod
from pathlib import Path
from typing import NamedTuple

import transit_emissions.logging_helpers

logger = transit_emissions.logging_helpers.get_logger(__name__)


class ResourceKey(NamedTuple):
    """Uniquely identifies a specific raw resource, and where it comes from."""

    dataset: str
    url: str
    name: str

    def __repr__(self) -> str:
        """Returns string representation of ResourceKey."""
        return f"Resource({self.dataset}/{self.name} from {self.url})"

    def get_local_path(self) -> Path:
        """Returns (relative) path that should be used when caching this resource.

        Resources downloaded from different URLs are cached in different directories,
        named after a short digest of the URL.
        """
        url_dirname = hashlib.sha256(self.url.encode("utf-8")).hexdigest()[:12]
        return Path(self.dataset) / url_dirname / self.name


class AbstractCache(ABC):
    """Defines interface for the generic resource caching layer."""

    @abstractmethod
    def get(self, resource: ResourceKey) -> bytes:
        """Retrieves content of given resource or throws KeyError."""

    @abstractmethod
    def add(self, resource: ResourceKey, content: bytes) -> None:
        """Adds resource to the cache and sets the content."""

    @abstractmethod
    def contains(self, resource: ResourceKey) -> bool:
        """Returns True if the resource is present in the cache."""


class LocalFileCache(AbstractCache):
    """Simple key-value store mapping ResourceKeys to files on the local filesystem.

    Content is first written to a temporary file next to its final location and then
    moved into place.
    """

    def __init__(self, cache_root_dir: Path):
        """Constructs LocalFileCache that stores resources under cache_root_dir."""
        self.cache_root_dir = Path(cache_root_dir)

    def _resource_path(self, resource: ResourceKey) -> Path:
        return self.cache_root_dir / resource.get_local_path()

    def get(self, resource: ResourceKey) -> bytes:
        """Retrieves value associated with a given resource."""
        path = self._resource_path(resource)
        logger.debug(f"Getting {resource} from local file cache at {path}")
        try:
            return path.read_bytes()
        except FileNotFoundError as e:
            raise KeyError(f"{resource} not found at {path}") from e

    def add(self, resource: ResourceKey, content: bytes) -> None:
        """Adds (or updates) resource to the cache with given value."""
        path = self._resource_path(resource)
        logger.debug(f"Adding {resource} to local file cache at {path}")
        path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=path.parent, prefix=f".{path.name}.")
        try:
            with os.fdopen(fd, "wb") as f:
                f.write(content)
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def contains(self, resource: ResourceKey) -> bool:
        """Returns True if resource is present in the cache."""
        return self._resource_path(resource).exists()
