"""
Key-value stores holding JSON documents under string keys.

Every stored value carries a version stamp (a digest of its text) so
callers can write with compare-and-set and detect a concurrent writer.
"""

import hashlib
import logging
import os
import tempfile
from pathlib import Path
from typing import Optional, Protocol, Union

from stylash.errors import StaleWriteError

logger = logging.getLogger(__name__)

# Sentinel meaning "write unconditionally"
UNCHECKED = object()


def content_version(text: Optional[str]) -> Optional[str]:
    """Version stamp for a stored document; None when the key is absent."""
    if text is None:
        return None
    return hashlib.sha256(text.encode("utf-8")).hexdigest()[:16]


class KeyValueStore(Protocol):
    """Minimal storage contract used by the repositories."""

    def get(self, key: str) -> Optional[str]: ...

    def version(self, key: str) -> Optional[str]: ...

    def set(self, key: str, value: str, expected_version: object = UNCHECKED) -> str: ...

    def delete(self, key: str) -> None: ...


def _check_version(key: str, current: Optional[str], expected: object) -> None:
    if expected is not UNCHECKED and expected != current:
        raise StaleWriteError(
            f"'{key}' changed since it was loaded "
            f"(expected version {expected!r}, found {current!r})"
        )


class InMemoryKeyValueStore:
    """Process-local store for tests and single-session use."""

    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    def version(self, key: str) -> Optional[str]:
        return content_version(self._data.get(key))

    def set(self, key: str, value: str, expected_version: object = UNCHECKED) -> str:
        _check_version(key, self.version(key), expected_version)
        self._data[key] = value
        return content_version(value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)


class JsonFileKeyValueStore:
    """One ``<key>.json`` file per key inside a directory.

    Writes go to a temporary file first and are moved into place with
    ``os.replace`` so readers never see a half-written document.
    """

    def __init__(self, directory: Union[str, Path]) -> None:
        self.directory = Path(directory)
        self.directory.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        path = self._path(key)
        if not path.exists():
            return None
        return path.read_text(encoding="utf-8")

    def version(self, key: str) -> Optional[str]:
        return content_version(self.get(key))

    def set(self, key: str, value: str, expected_version: object = UNCHECKED) -> str:
        _check_version(key, self.version(key), expected_version)
        fd, tmp_name = tempfile.mkstemp(dir=self.directory, prefix=f".{key}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(value)
            os.replace(tmp_name, self._path(key))
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise
        logger.debug("Wrote %s (%d bytes)", self._path(key), len(value))
        return content_version(value)

    def delete(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)
