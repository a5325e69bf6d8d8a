"""HTTP byte-fetcher adapter implementing FetcherPort."""

from __future__ import annotations

import logging
import threading
from typing import TYPE_CHECKING

import httpx

from pixcache.core.exceptions import FetchFailedError


if TYPE_CHECKING:
    from types import TracebackType

    from pixcache.core.ports import ProgressCallback


logger = logging.getLogger(__name__)

REQUEST_TIMEOUT = httpx.Timeout(connect=10.0, read=30.0, write=10.0, pool=10.0)


class HttpFetcher:
    """Fetches network locators with httpx.

    Streams the response body and reports progress as
    (bytes_read, content_length); content_length is 0 when the server
    does not send one. Any transport error, timeout or non-2xx status
    becomes a FetchFailedError.

    Example:
        with HttpFetcher() as fetcher:
            data = fetcher.fetch("https://example.com/logo.png")
    """

    def __init__(
        self,
        client: httpx.Client | None = None,
        timeout: httpx.Timeout = REQUEST_TIMEOUT,
    ) -> None:
        """Initialize the fetcher.

        Args:
            client: Optional ``httpx.Client`` (useful for tests). When omitted,
                a client that follows redirects is created on first use and
                owned by this fetcher.
            timeout: Timeout used for the owned client.
        """
        self._client = client
        self._owns_client = client is None
        self._timeout = timeout
        self._client_lock = threading.Lock()

    @property
    def client(self) -> httpx.Client:
        """The underlying httpx client."""
        with self._client_lock:
            if self._client is None:
                self._client = httpx.Client(
                    timeout=self._timeout, follow_redirects=True
                )
            return self._client

    def fetch(self, locator: str, progress: ProgressCallback | None = None) -> bytes:
        """Download the body behind a URL.

        Args:
            locator: URL to fetch.
            progress: Optional callback function(bytes_read, total_bytes).

        Returns:
            The response body.

        Raises:
            FetchFailedError: On transport errors, timeouts or non-2xx status.
        """
        try:
            with self.client.stream("GET", locator) as response:
                if not response.is_success:
                    raise FetchFailedError(
                        f"GET {locator} returned {response.status_code}",
                        locator=locator,
                        status_code=response.status_code,
                    )
                total = int(response.headers.get("content-length", 0) or 0)
                chunks: list[bytes] = []
                read = 0
                for chunk in response.iter_bytes():
                    chunks.append(chunk)
                    read += len(chunk)
                    if progress is not None:
                        progress(read, total)
        except httpx.HTTPError as e:
            logger.debug("Fetch failed for %s: %s", locator, e)
            raise FetchFailedError(
                f"GET {locator} failed: {e}",
                locator=locator,
                cause=e,
            ) from e
        except (httpx.InvalidURL, ValueError) as e:
            raise FetchFailedError(
                f"GET {locator} failed: {e}",
                locator=locator,
                cause=e,
            ) from e
        return b"".join(chunks)

    def close(self) -> None:
        """Close the client if this fetcher created it."""
        with self._client_lock:
            if self._owns_client and self._client is not None:
                self._client.close()
                self._client = None

    def __enter__(self) -> HttpFetcher:
        """Enter context manager."""
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        """Close the owned client."""
        self.close()
