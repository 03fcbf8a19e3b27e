"""Datastore manages retrieval and caching of the raw transit and electricity data."""

from pathlib import Path
from typing import Self

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

import transit_emissions.logging_helpers
from transit_emissions.workspace import resource_cache
from transit_emissions.workspace.resource_cache import ResourceKey

logger = transit_emissions.logging_helpers.get_logger(__name__)


class FetchError(RuntimeError):
    """A source could not be reached, or responded with an error status."""


class UrlFetcher:
    """Download raw resources over HTTP(S), retrying transient failures."""

    def __init__(self: Self, timeout: float = 30.0, max_retries: int = 3):
        """Constructs UrlFetcher instance.

        Args:
            timeout: connection timeout (in seconds) for each request.
            max_retries: how many times to retry idempotent GET requests that fail
                with a connection error or a transient server error status.
        """
        self.timeout = timeout
        retries = Retry(
            backoff_factor=2,
            total=max_retries,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET"],
        )
        adapter = HTTPAdapter(max_retries=retries)
        self.http = requests.Session()
        self.http.mount("http://", adapter)
        self.http.mount("https://", adapter)

    def fetch(self: Self, url: str) -> bytes:
        """Return the body of the response to a GET request for ``url``.

        Raises:
            FetchError: if the request fails or the response status is not OK.
        """
        logger.info(f"Retrieving {url}")
        try:
            response = self.http.get(url, timeout=self.timeout)
        except requests.RequestException as err:
            raise FetchError(f"Could not download {url}: {err}") from err
        if response.status_code != requests.codes.ok:
            raise FetchError(
                f"Could not download {url}: HTTP status {response.status_code}"
            )
        logger.debug(f"Successfully downloaded {url}")
        return response.content


class Datastore:
    """Fetch raw resources, reading them from the local cache whenever possible.

    Each resource is identified by a :class:`ResourceKey`. The first request for a key
    downloads its URL and stores the content in the cache; later requests for the same
    key are served from the cache without touching the network.
    """

    def __init__(
        self,
        local_cache_path: Path | None = None,
        timeout: float = 30.0,
        max_retries: int = 3,
        fetcher: UrlFetcher | None = None,
    ):
        """Datastore manages file retrieval for the raw datasets.

        Args:
            local_cache_path: if provided, a LocalFileCache rooted at this path will
                be used with this Datastore. Otherwise nothing is cached.
            timeout: connection timeout (in seconds) used when downloading.
            max_retries: number of retries of failed downloads.
            fetcher: used instead of a new :class:`UrlFetcher` if given.
        """
        self._cache: resource_cache.AbstractCache | None = None
        if local_cache_path:
            logger.info(f"Using local cache at {local_cache_path}")
            self._cache = resource_cache.LocalFileCache(local_cache_path)
        self._fetcher = fetcher or UrlFetcher(timeout=timeout, max_retries=max_retries)

    def get_resource(self, res: ResourceKey) -> bytes:
        """Return the content of a resource, downloading it from its URL if needed.

        Raises:
            FetchError: if the resource isn't cached and can't be downloaded.
        """
        if self._cache is not None and self._cache.contains(res):
            logger.debug(f"{res} found in cache")
            return self._cache.get(res)
        content = self._fetcher.fetch(res.url)
        if self._cache is not None:
            self._cache.add(res, content)
        return content
