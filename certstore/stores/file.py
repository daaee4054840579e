"""File-based object store implementation."""

import os
import uuid
from datetime import datetime, timezone
from pathlib import Path

from ..exceptions import NotFoundError, ObjectExistsError
from .base import ObjectInfo, ObjectStore

_TEMP_PREFIX = ".certstore-"


class FileObjectStore(ObjectStore):
    """File-based object store.

    Each object is one file; slashes in keys become directories. Writes go
    through a temp file so readers never see a partial object, and
    create-if-absent relies on hard links failing when the target exists.
    Safe for multi-process scenarios on one host or a shared filesystem.

    Args:
        directory: Path to directory for storing objects
    """

    def __init__(self, directory: str | Path) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _object_path(self, key: str) -> Path:
        """Get file path for an object key."""
        parts = key.split("/")
        if any(part in ("", ".", "..") or part.startswith(_TEMP_PREFIX) for part in parts):
            raise ValueError(f"invalid object key: {key!r}")
        return self.directory.joinpath(*parts)

    def _write_temp(self, path: Path, data: bytes) -> Path:
        path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = path.with_name(f"{_TEMP_PREFIX}{uuid.uuid4().hex}.tmp")
        with open(temp_path, "wb") as f:
            f.write(data)
            f.flush()
            os.fsync(f.fileno())
        return temp_path

    def get(self, key: str) -> bytes:
        path = self._object_path(key)
        try:
            return path.read_bytes()
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as e:
            raise NotFoundError(key) from e

    def put(self, key: str, data: bytes, *, if_absent: bool = False) -> None:
        path = self._object_path(key)
        temp_path = self._write_temp(path, data)
        try:
            if if_absent:
                try:
                    os.link(temp_path, path)
                except FileExistsError as e:
                    raise ObjectExistsError(key) from e
            else:
                # Atomic rename
                temp_path.replace(path)
        finally:
            temp_path.unlink(missing_ok=True)

    def delete(self, key: str) -> None:
        path = self._object_path(key)
        try:
            path.unlink()
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as e:
            raise NotFoundError(key) from e

    def list(self, prefix: str = "") -> list[str]:
        keys = []
        for path in self.directory.rglob("*"):
            if not path.is_file() or path.name.startswith(_TEMP_PREFIX):
                continue
            key = path.relative_to(self.directory).as_posix()
            if key.startswith(prefix):
                keys.append(key)
        return sorted(keys)

    def stat(self, key: str) -> ObjectInfo:
        path = self._object_path(key)
        try:
            st = path.stat()
        except (FileNotFoundError, NotADirectoryError) as e:
            raise NotFoundError(key) from e
        if not path.is_file():
            raise NotFoundError(key)
        modified = datetime.fromtimestamp(st.st_mtime, tz=timezone.utc)
        return ObjectInfo(key=key, size=st.st_size, modified=modified)

    def clear(self) -> None:
        """Remove all objects (useful for testing)."""
        for path in sorted(self.directory.rglob("*"), reverse=True):
            if path.is_dir():
                path.rmdir()
            else:
                path.unlink(missing_ok=True)
