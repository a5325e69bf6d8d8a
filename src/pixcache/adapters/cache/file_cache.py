"""File-based cache backend implementing BackendPort and BackendFactoryPort."""

from __future__ import annotations

import hashlib
import json
import logging
import os
import shutil
import tempfile
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import TYPE_CHECKING, Any

from filelock import FileLock, Timeout

from pixcache.core.exceptions import (
    BackendClearError,
    BackendError,
    BackendOpenError,
    CacheCorruptError,
    ConfigurationError,
)
from pixcache.core.models import EntryInfo


if TYPE_CHECKING:
    from collections.abc import Iterator
    from datetime import timedelta


logger = logging.getLogger(__name__)

INDEX_VERSION = 1
INDEX_NAME = "index.json"
OBJECTS_DIR = "objects"
LOCK_NAME = ".lock"
LOCK_TIMEOUT = 30


@dataclass(frozen=True, slots=True)
class _IndexRecord:
    file: str
    fetched_at: datetime
    size: int


def _object_name(key: str) -> str:
    """Payload filename for a key (keys are URLs, not safe as paths)."""
    return hashlib.sha256(key.encode("utf-8")).hexdigest()


def _atomic_write(path: Path, data: bytes) -> None:
    """Write bytes to a temp file in the same directory, then rename."""
    fd, tmp = tempfile.mkstemp(dir=path.parent, prefix=".tmp-")
    try:
        with os.fdopen(fd, "wb") as f:
            f.write(data)
        os.replace(tmp, path)
    except BaseException:
        Path(tmp).unlink(missing_ok=True)
        raise


class FileCacheBackend:
    """One namespace on disk: a JSON index plus one file per payload.

    Layout::

        <namespace_dir>/index.json
        <namespace_dir>/objects/<sha256(key)>
        <namespace_dir>/.lock

    Every write re-reads the index under a file lock, applies its change and
    writes the index back atomically. Backends in other processes that share
    the directory therefore never lose each other's entries.

    Attributes:
        namespace: Namespace this backend was opened for.
        directory: Directory holding the namespace's files.
        stale_period: Stale period recorded in the index.
        max_entries: Capacity recorded in the index.
    """

    def __init__(
        self,
        namespace: str,
        directory: Path,
        stale_period: timedelta,
        max_entries: int,
        records: dict[str, _IndexRecord] | None = None,
    ) -> None:
        self.namespace = namespace
        self.directory = directory
        self.stale_period = stale_period
        self.max_entries = max_entries
        self._records: dict[str, _IndexRecord] = dict(records or {})
        self._lock = threading.Lock()
        self._file_lock = FileLock(str(directory / LOCK_NAME), timeout=LOCK_TIMEOUT)

    @property
    def index_path(self) -> Path:
        """Path to the JSON index."""
        return self.directory / INDEX_NAME

    @property
    def objects_dir(self) -> Path:
        """Directory holding payload files."""
        return self.directory / OBJECTS_DIR

    def _read_index(self) -> dict[str, _IndexRecord]:
        """Load the records currently on disk. Caller holds the file lock."""
        try:
            raw = json.loads(self.index_path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return dict(self._records)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise CacheCorruptError(
                f"Cache index for '{self.namespace}' is not valid JSON",
                key=INDEX_NAME,
                path=self.index_path,
                cause=e,
            ) from e
        return _parse_index(self.namespace, self.index_path, raw)

    def _write_index(self, records: dict[str, _IndexRecord]) -> None:
        """Replace the index on disk. Caller holds the file lock."""
        data = {
            "version": INDEX_VERSION,
            "stale_period_seconds": self.stale_period.total_seconds(),
            "max_entries": self.max_entries,
            "entries": {
                key: {
                    "file": rec.file,
                    "fetched_at": rec.fetched_at.isoformat(),
                    "size": rec.size,
                }
                for key, rec in records.items()
            },
        }
        _atomic_write(self.index_path, json.dumps(data).encode("utf-8"))

    @contextmanager
    def _transaction(
        self, action: str, error: type[BackendError] = BackendError
    ) -> Iterator[dict[str, _IndexRecord]]:
        """Yield the on-disk records for editing, then write them back.

        The in-memory view is replaced only once the index is written, so a
        failed write leaves it unchanged.

        Raises:
            BackendError: (or ``error``) if the lock times out, the index is
                corrupt, or the filesystem refuses the write.
        """
        with self._lock:
            try:
                with self._file_lock:
                    records = self._read_index()
                    yield records
                    self._write_index(records)
            except Timeout as e:
                raise error(
                    f"Timed out waiting for cache lock on '{self.namespace}'",
                    namespace=self.namespace,
                    cause=e,
                ) from e
            except (OSError, CacheCorruptError) as e:
                raise error(
                    f"Could not {action} cache namespace '{self.namespace}': {e}",
                    namespace=self.namespace,
                    cause=e,
                ) from e
            self._records = records

    def _create_index(self) -> None:
        """Write an empty index unless another process already has."""
        with self._transaction("create"):
            pass

    def get(self, key: str) -> tuple[bytes, datetime] | None:
        """Return (payload, fetched_at), or None if absent.

        An index entry whose payload file has vanished reads as a miss.
        """
        rec = self._records.get(key)
        if rec is None:
            return None
        try:
            payload = (self.objects_dir / rec.file).read_bytes()
        except FileNotFoundError:
            logger.debug("Payload missing for %s in '%s'", key, self.namespace)
            return None
        return payload, rec.fetched_at

    def put(self, key: str, payload: bytes, fetched_at: datetime) -> None:
        """Store a payload and record it in the index.

        Raises:
            BackendError: If the payload or the index could not be written.
        """
        name = _object_name(key)
        with self._transaction("write to") as records:
            self.objects_dir.mkdir(parents=True, exist_ok=True)
            _atomic_write(self.objects_dir / name, payload)
            records[key] = _IndexRecord(
                file=name, fetched_at=fetched_at, size=len(payload)
            )

    def delete(self, key: str) -> bool:
        """Remove a key and its payload. Returns True if it was present."""
        with self._transaction("delete from") as records:
            rec = records.pop(key, None)
            if rec is not None:
                (self.objects_dir / rec.file).unlink(missing_ok=True)
        return rec is not None

    def entries(self) -> list[EntryInfo]:
        """List metadata for every stored key."""
        with self._lock:
            records = list(self._records.items())
        return [
            EntryInfo(key=key, fetched_at=rec.fetched_at, size=rec.size)
            for key, rec in records
        ]

    def clear(self) -> None:
        """Remove every payload and empty the index."""
        with self._transaction("clear", BackendClearError) as records:
            if self.objects_dir.exists():
                shutil.rmtree(self.objects_dir)
            records.clear()



def _parse_index(namespace: str, path: Path, raw: Any) -> dict[str, _IndexRecord]:
    """Validate a decoded index document and return its records.

    Raises:
        CacheCorruptError: If the document does not match the schema.
    """
    if not isinstance(raw, dict) or raw.get("version") != INDEX_VERSION:
        raise CacheCorruptError(
            f"Unsupported cache index schema in '{namespace}'",
            key=INDEX_NAME,
            path=path,
        )
    entries = raw.get("entries")
    if not isinstance(entries, dict):
        raise CacheCorruptError(
            f"Cache index for '{namespace}' has no entries table",
            key=INDEX_NAME,
            path=path,
        )
    records: dict[str, _IndexRecord] = {}
    for key, item in entries.items():
        try:
            fetched_at = datetime.fromisoformat(item["fetched_at"])
            if fetched_at.tzinfo is None:
                raise ValueError(f"fetched_at has no UTC offset: {fetched_at}")
            records[key] = _IndexRecord(
                file=str(item["file"]),
                fetched_at=fetched_at,
                size=int(item.get("size", 0)),
            )
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise CacheCorruptError(
                f"Malformed cache index entry for '{key}'",
                key=key,
                path=path,
                cause=e,
            ) from e
    return records


class FileCacheFactory:
    """Opens FileCacheBackend instances under a root directory.

    Each namespace gets its own subdirectory of ``cache_root``.

    Attributes:
        cache_root: Directory containing one subdirectory per namespace.
    """

    def __init__(self, cache_root: Path) -> None:
        self.cache_root = cache_root

    def namespace_dir(self, namespace: str) -> Path:
        """Directory for a namespace.

        Raises:
            ConfigurationError: If the namespace is not a plain directory name.
        """
        invalid = namespace in ("", ".", "..") or "/" in namespace or "\\" in namespace
        if invalid:
            raise ConfigurationError(f"Invalid cache namespace: {namespace!r}")
        return self.cache_root / namespace

    def open(
        self, namespace: str, stale_period: timedelta, max_entries: int
    ) -> FileCacheBackend:
        """Open (or create) the backend for a namespace.

        Raises:
            BackendOpenError: If the index is corrupt, has an unknown schema,
                or cannot be read or created.
        """
        directory = self.namespace_dir(namespace)
        index_path = directory / INDEX_NAME
        try:
            directory.mkdir(parents=True, exist_ok=True)
            if not index_path.exists():
                backend = FileCacheBackend(
                    namespace, directory, stale_period, max_entries
                )
                backend._create_index()
                logger.debug(
                    "Created cache namespace '%s' at %s", namespace, directory
                )
                return backend
            raw = json.loads(index_path.read_text(encoding="utf-8"))
            records = _parse_index(namespace, index_path, raw)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            corrupt = CacheCorruptError(
                f"Cache index for '{namespace}' is not valid JSON",
                key=INDEX_NAME,
                path=index_path,
                cause=e,
            )
            raise BackendOpenError(
                str(corrupt), namespace=namespace, cause=corrupt
            ) from e
        except CacheCorruptError as e:
            raise BackendOpenError(str(e), namespace=namespace, cause=e) from e
        except (OSError, BackendError) as e:
            raise BackendOpenError(
                f"Could not open cache namespace '{namespace}': {e}",
                namespace=namespace,
                cause=e,
            ) from e

        return FileCacheBackend(
            namespace, directory, stale_period, max_entries, records
        )

    def delete_all(self, namespace: str) -> None:
        """Remove a namespace directory and everything in it.

        Raises:
            BackendClearError: If the directory could not be removed.
        """
        directory = self.namespace_dir(namespace)
        try:
            if not directory.exists():
                return
            shutil.rmtree(directory)
        except OSError as e:
            raise BackendClearError(
                f"Could not delete cache namespace '{namespace}'",
                namespace=namespace,
                cause=e,
            ) from e
        logger.info("Deleted cache namespace '%s'", namespace)
