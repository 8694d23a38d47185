"""Object storage for submitted documents."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from urllib.parse import quote

from ..exceptions import PrintDeskError

logger = logging.getLogger(__name__)

PRINT_JOBS_PREFIX = "print-jobs"


class StorageError(PrintDeskError):
    """Raised when a blob cannot be written, resolved or removed."""


class ObjectExistsError(StorageError):
    """Raised when a put targets a path that is already taken."""


def build_storage_path(file_name: str, *, timestamp_ms: int | None = None) -> str:
    """Return ``print-jobs/<epoch ms>_<file name>`` for an uploaded document."""
    stamp = timestamp_ms if timestamp_ms is not None else time.time_ns() // 1_000_000
    safe_name = PurePosixPath(file_name.replace("\\", "/")).name or "upload.bin"
    return f"{PRINT_JOBS_PREFIX}/{stamp}_{safe_name}"


class ObjectStore:
    """Blob storage keyed by relative path."""

    def put(self, path: str, data: bytes, *, content_type: str | None = None) -> str:
        """Persist ``data`` under a new ``path`` and return its public URL.

        Existing objects are never overwritten: a taken path raises
        :class:`ObjectExistsError`.
        """

        raise NotImplementedError

    def url_for(self, path: str) -> str:
        """Return the public URL of a stored object."""

        raise NotImplementedError

    def delete(self, path: str) -> None:
        """Remove the object; raise :class:`StorageError` if it cannot be removed."""

        raise NotImplementedError


@dataclass(slots=True)
class LocalObjectStore(ObjectStore):
    """Filesystem-backed store; files are served under ``public_url``."""

    root: Path
    public_url: str = "/files"
    log: logging.Logger = field(default_factory=lambda: logger)

    def put(self, path: str, data: bytes, *, content_type: str | None = None) -> str:
        target = self._resolve(path)
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            with target.open("xb") as handle:
                handle.write(data)
        except FileExistsError as exc:
            raise ObjectExistsError(f"object '{path}' already exists") from exc
        except OSError as exc:
            self.log.error("storage.put.failed", extra={"path": path, "error": str(exc)})
            raise StorageError(f"could not store '{path}'") from exc
        self.log.info(
            "storage.put.done",
            extra={"path": path, "size_bytes": len(data), "content_type": content_type},
        )
        return self.url_for(path)

    def url_for(self, path: str) -> str:
        self._resolve(path)
        return f"{self.public_url.rstrip('/')}/{quote(path)}"

    def delete(self, path: str) -> None:
        target = self._resolve(path)
        if not target.exists():
            raise StorageError(f"object '{path}' does not exist")
        try:
            target.unlink()
        except OSError as exc:
            raise StorageError(f"could not delete '{path}'") from exc
        self.log.info("storage.delete.done", extra={"path": path})

    def exists(self, path: str) -> bool:
        return self._resolve(path).is_file()

    def _resolve(self, path: str) -> Path:
        root = self.root.resolve()
        target = (root / path).resolve()
        if not target.is_relative_to(root) or target == root:
            raise StorageError(f"path '{path}' escapes the storage root")
        return target
