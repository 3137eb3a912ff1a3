"""Object storage — key/value byte store for uploaded files.

Keys are relative, slash-separated paths inside a bucket
(e.g. ``uploads/<id>/report.pdf``).
"""

import logging
from abc import ABC, abstractmethod
from pathlib import Path

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when the storage backend cannot complete an operation."""


class ObjectNotFoundError(StorageError):
    pass


class ObjectStorage(ABC):
    """Interface for a single storage bucket."""

    @abstractmethod
    def put(self, key: str, data: bytes) -> None:
        """Store ``data`` under ``key``, overwriting any existing object."""

    @abstractmethod
    def get(self, key: str) -> bytes:
        """Return the bytes stored under ``key``.

        Raises:
            ObjectNotFoundError: if nothing is stored under ``key``.
        """

    @abstractmethod
    def remove(self, keys: list[str]) -> list[str]:
        """Best-effort batch delete.

        Every key is attempted. Missing keys count as removed. Returns the
        removed keys, or raises ``StorageError`` after the batch if any key
        could not be removed.
        """


class LocalObjectStorage(ObjectStorage):
    """Bucket backed by a directory on the local filesystem."""

    def __init__(self, root: Path, bucket: str = "files"):
        self.root = Path(root) / bucket
        self.bucket = bucket
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(f"Cannot create bucket directory {self.root}: {e}") from e

    def _resolve(self, key: str) -> Path:
        if not key or not key.strip():
            raise StorageError("Object key cannot be empty")
        root = self.root.resolve()
        path = (root / key).resolve()
        if path == root or root not in path.parents:
            raise StorageError(f"Object key escapes bucket: {key!r}")
        return path

    def put(self, key: str, data: bytes) -> None:
        path = self._resolve(key)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
        except OSError as e:
            raise StorageError(f"Failed to store {key}: {e}") from e

    def get(self, key: str) -> bytes:
        path = self._resolve(key)
        if not path.is_file():
            raise ObjectNotFoundError(f"Object not found: {key}")
        try:
            return path.read_bytes()
        except OSError as e:
            raise StorageError(f"Failed to read {key}: {e}") from e

    def remove(self, keys: list[str]) -> list[str]:
        removed = []
        failed = []
        for key in keys:
            try:
                path = self._resolve(key)
                path.unlink(missing_ok=True)
                self._prune_empty_dirs(path.parent)
                removed.append(key)
            except (OSError, StorageError) as e:
                logger.warning("Could not remove %s: %s", key, e)
                failed.append(key)

        if failed:
            raise StorageError(f"Failed to remove {len(failed)} of {len(keys)} objects: {failed}")
        return removed

    def _prune_empty_dirs(self, directory: Path) -> None:
        # Only emptied per-upload dirs go; top-level prefixes such as uploads/ stay.
        # rmdir refuses a non-empty dir, so a concurrent put is never wiped.
        root = self.root.resolve()
        while directory.parent != root and root in directory.parents:
            try:
                directory.rmdir()
            except FileNotFoundError:
                pass
            except OSError:
                return
            directory = directory.parent
