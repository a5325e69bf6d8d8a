"""Domain exceptions for pixcache.

All library errors inherit from PixcacheError, allowing users to catch
any library exception with a single except clause. Each exception provides
a recovery_hint property with guidance on resolving the error.

Only FetchFailedError and BackupBackendOpenError escape a CacheStore;
the other backend errors are absorbed by its recovery path.
"""

from __future__ import annotations

from typing import TYPE_CHECKING


if TYPE_CHECKING:
    from pathlib import Path


class PixcacheError(Exception):
    """Base class for all pixcache exceptions.

    Catch this to handle any error from the library.
    """

    @property
    def recovery_hint(self) -> str | None:
        """Optional guidance on how to resolve this error."""
        return None


class FetchFailedError(PixcacheError):
    """Raised when the byte-fetcher could not retrieve a resource.

    Attributes:
        locator: The URL that failed.
        status_code: HTTP status of the response, if one was received.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        locator: str,
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        self.locator = locator
        self.status_code = status_code
        self.cause = cause
        super().__init__(message)

    @property
    def recovery_hint(self) -> str:
        """Suggest checking the URL or the connection."""
        if self.status_code is not None:
            return f"Server answered {self.status_code}; verify the URL: {self.locator}"
        return "Check network connectivity and retry"


class BackendError(PixcacheError):
    """Base class for persistence backend errors.

    Attributes:
        namespace: The cache namespace the operation targeted.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        namespace: str,
        cause: Exception | None = None,
    ) -> None:
        self.namespace = namespace
        self.cause = cause
        super().__init__(message)


class BackendOpenError(BackendError):
    """Raised when a backend cannot be opened (corrupt index, I/O error)."""

    @property
    def recovery_hint(self) -> str:
        """Suggest clearing the namespace."""
        return f"Clear the '{self.namespace}' cache namespace"


class BackendClearError(BackendError):
    """Raised when entries of a namespace could not be removed."""

    @property
    def recovery_hint(self) -> str:
        """Suggest checking permissions."""
        return "Check permissions on the cache directory"


class BackupBackendOpenError(BackendError):
    """Raised when the fallback backend cannot be opened either.

    This is fatal: the store cannot be used.
    """

    @property
    def recovery_hint(self) -> str:
        """Suggest fixing the cache location."""
        return "Check that the cache directory exists and is writable"


class CacheCorruptError(PixcacheError):
    """Raised when cache index data is corrupt or unreadable.

    Attributes:
        key: The cache key (or index name) that was corrupt.
        path: The path to the corrupt file.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        key: str,
        path: Path,
        cause: Exception | None = None,
    ) -> None:
        self.key = key
        self.path = path
        self.cause = cause
        super().__init__(message)

    @property
    def recovery_hint(self) -> str:
        """Suggest deleting the corrupt file."""
        return f"Delete {self.path} and re-fetch"


class ResourceNotFoundError(PixcacheError):
    """Raised when a local file or bundled asset does not exist.

    Attributes:
        locator: The locator that was resolved.
        cause: The underlying exception, if any.
    """

    def __init__(
        self,
        message: str,
        locator: str,
        cause: Exception | None = None,
    ) -> None:
        self.locator = locator
        self.cause = cause
        super().__init__(message)

    @property
    def recovery_hint(self) -> str:
        """Suggest verifying the path."""
        return f"Verify the path exists: {self.locator}"


class ConfigurationError(PixcacheError):
    """Raised for configuration problems (invalid environment values)."""

    pass
