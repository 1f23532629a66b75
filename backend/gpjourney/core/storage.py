"""Local key-value persistence substrate.

String keys, UTF-8 text values, synchronous get/set. ``FileStorage`` keeps one
file per key under a directory; ``InMemoryStorage`` is a plain dict and serves
as the fake substrate in tests.

Single-process assumption: two processes sharing a storage directory can race
on the same key (last write wins). No locking is attempted.
"""
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import Protocol

from gpjourney.core.config import settings

logger = logging.getLogger(__name__)

_SAFE_KEY = re.compile(r"^[A-Za-z0-9_.-]+$")


class StorageError(Exception):
    """Raised when the substrate cannot read or write a value."""


class StorageQuotaExceededError(StorageError):
    """Raised when a write would push total stored bytes past the quota."""


class KeyValueStorage(Protocol):
    def get_item(self, key: str) -> str | None: ...

    def set_item(self, key: str, value: str) -> None: ...


class InMemoryStorage:
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> str | None:
        return self.items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self.items[key] = value


class FileStorage:
    """One ``<key>.json`` file per key, written atomically.

    Writes go to a temp file in the same directory and are moved into place
    with ``os.replace`` so a crash never leaves a half-written value behind.
    When ``quota_bytes`` is set, a write that would push the combined size of
    all keys past it raises :class:`StorageQuotaExceededError` and leaves the
    previous value untouched.
    """

    def __init__(self, directory: str | Path, quota_bytes: int | None = None) -> None:
        self.directory = Path(directory)
        self.quota_bytes = quota_bytes

    def _path(self, key: str) -> Path:
        if not _SAFE_KEY.match(key):
            raise StorageError(f"Invalid storage key: {key!r}")
        return self.directory / f"{key}.json"

    def _used_bytes(self, excluding: Path) -> int:
        if not self.directory.exists():
            return 0
        return sum(
            p.stat().st_size
            for p in self.directory.glob("*.json")
            if p != excluding
        )

    def get_item(self, key: str) -> str | None:
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise StorageError(f"Failed to read {key}: {exc}") from exc

    def set_item(self, key: str, value: str) -> None:
        path = self._path(key)
        data = value.encode("utf-8")

        try:
            if self.quota_bytes is not None:
                used = self._used_bytes(excluding=path)
                if used + len(data) > self.quota_bytes:
                    raise StorageQuotaExceededError(
                        f"Writing {key} needs {len(data)} bytes; "
                        f"{self.quota_bytes - used} of {self.quota_bytes} available"
                    )
            self.directory.mkdir(parents=True, exist_ok=True)
            fd, tmp = tempfile.mkstemp(prefix=".tmp_", dir=str(self.directory))
            try:
                with os.fdopen(fd, "wb") as f:
                    f.write(data)
                os.replace(tmp, path)
            except OSError:
                Path(tmp).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise StorageError(f"Failed to write {key}: {exc}") from exc
        logger.debug("Wrote %s (%d bytes)", key, len(data))


_storage: FileStorage | None = None


def get_storage() -> FileStorage:
    global _storage
    if _storage is None:
        _storage = FileStorage(settings.STORAGE_DIR, settings.STORAGE_QUOTA_BYTES)
    return _storage
