import os
import re
from pathlib import Path
from tempfile import mkstemp
from typing import ClassVar, Protocol

import msgspec

from snapstack.exceptions import PersistenceError
from snapstack.models import PersistedState
from snapstack.serialization import from_json, to_json


class KeyValueStorage(Protocol):
    """External key-value medium that persisted states are written to."""

    def read(self, key: str) -> bytes | None: ...

    def write(self, key: str, data: bytes) -> None: ...

    def delete(self, key: str) -> bool: ...

    def keys(self) -> list[str]: ...


class MemoryStorage:
    """Dict-backed storage; handy for tests and for embedding without a filesystem."""

    _items: dict[str, bytes]

    def __init__(self) -> None:
        self._items = {}

    def read(self, key: str) -> bytes | None:
        return self._items.get(key)

    def write(self, key: str, data: bytes) -> None:
        self._items[key] = bytes(data)

    def delete(self, key: str) -> bool:
        return self._items.pop(key, None) is not None

    def keys(self) -> list[str]:
        return sorted(self._items)


def atomic_write_bytes(path: Path, data: bytes) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = mkstemp(suffix=path.suffix, prefix=path.name + ".tmp", dir=path.parent)
    tmp_path = Path(tmp)
    try:
        with os.fdopen(fd, "wb") as f:
            _ = f.write(data)
        os.replace(tmp_path, path)
    finally:
        tmp_path.unlink(missing_ok=True)


class FileStorage:
    """
    One JSON file per key under ``root``.

    - Files are named ``<key>.json`` and written atomically.
    - Keys are restricted to a safe character set so they can never escape ``root``.
    """

    _KEY_RE: ClassVar[re.Pattern[str]] = re.compile(r"[A-Za-z0-9_-][A-Za-z0-9_.-]*")
    _SUFFIX: ClassVar[str] = ".json"

    root: Path

    def __init__(self, root: Path) -> None:
        self.root = root

    def read(self, key: str) -> bytes | None:
        path = self._path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise PersistenceError(f"Unable to read state '{key}' from {path}: {e}") from e

    def write(self, key: str, data: bytes) -> None:
        path = self._path_for(key)
        try:
            atomic_write_bytes(path, data)
        except OSError as e:
            raise PersistenceError(f"Unable to write state '{key}' to {path}: {e}") from e

    def delete(self, key: str) -> bool:
        path = self._path_for(key)
        if not path.is_file():
            return False
        try:
            path.unlink()
        except OSError as e:
            raise PersistenceError(f"Unable to delete state '{key}' at {path}: {e}") from e
        return True

    def keys(self) -> list[str]:
        if not self.root.is_dir():
            return []
        found = [
            entry.name[: -len(self._SUFFIX)]
            for entry in self.root.iterdir()
            if entry.is_file() and entry.name.endswith(self._SUFFIX)
        ]
        return sorted(k for k in found if self._KEY_RE.fullmatch(k))

    def _path_for(self, key: str) -> Path:
        if not self._KEY_RE.fullmatch(key):
            raise PersistenceError(f"Invalid state key {key!r}: use letters, digits, '_', '-' and '.'.")
        return self.root / f"{key}{self._SUFFIX}"


def dumps_state(state: PersistedState) -> bytes:
    return to_json(state)


def loads_state(data: bytes | str) -> PersistedState:
    """
    Parses a persisted payload.

    Raises:
        PersistenceError: if the payload is not valid JSON or not a snapstack state.
    """
    try:
        return from_json(PersistedState, data)
    except (msgspec.DecodeError, msgspec.ValidationError) as e:
        raise PersistenceError(f"Corrupt persisted state: {e}") from e


def save_state(storage: KeyValueStorage, key: str, state: PersistedState) -> None:
    storage.write(key, dumps_state(state))


def load_state(storage: KeyValueStorage, key: str) -> PersistedState:
    """
    Raises:
        PersistenceError: if nothing is stored under ``key`` or the payload is corrupt.
    """
    data = storage.read(key)
    if data is None:
        raise PersistenceError(f"No persisted state found for key '{key}'.")
    return loads_state(data)
