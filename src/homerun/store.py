"""Persistent address storage over a string key-value store."""

from __future__ import annotations

import json
import logging
import os
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError

from homerun._constants import HOME_ADDRESS_KEY, WORK_ADDRESS_KEY, WORK_COORDS_KEY
from homerun.exceptions import HomeRunStorageError
from homerun.models.address import AddressPair
from homerun.models.location import Coordinate

_logger = logging.getLogger(__name__)


class KeyValueStore(Protocol):
    """Synchronous string-keyed storage."""

    def get(self, key: str) -> str | None:
        ...

    def set(self, key: str, value: str) -> None:
        ...


class MemoryKeyValueStore:
    """Process-local storage; nothing survives a restart."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileKeyValueStore:
    """All keys in a single JSON object file.

    Every ``set`` rewrites the file through a temporary file and
    ``os.replace`` so a crash never leaves a half-written document.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def _read_all(self) -> dict[str, str]:
        try:
            text = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except OSError as exc:
            raise HomeRunStorageError(f"Cannot read {self._path}: {exc}") from exc
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise HomeRunStorageError(f"{self._path} is not valid JSON") from exc
        if not isinstance(data, dict):
            raise HomeRunStorageError(f"{self._path} does not hold a JSON object")
        return {str(k): str(v) for k, v in data.items()}

    def get(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set(self, key: str, value: str) -> None:
        try:
            data = self._read_all()
        except HomeRunStorageError as exc:
            _logger.warning("Replacing unreadable storage file: %s", exc)
            data = {}
        data[key] = value
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(prefix=f".{self._path.name}.", dir=self._path.parent)
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as handle:
                    json.dump(data, handle, indent=2, sort_keys=True)
                os.replace(tmp_name, self._path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise HomeRunStorageError(f"Cannot write {self._path}: {exc}") from exc


@dataclass(frozen=True, slots=True)
class StoreWriteResult:
    """Outcome of a single persistence write."""

    key: str
    ok: bool
    error: str | None = None


class AddressStore:
    """Persists the address pair and the last resolved work coordinate.

    Storage failures are never raised to the caller: they are logged and
    reported through :class:`StoreWriteResult`, and the in-memory state
    simply stays unsaved.
    """

    def __init__(self, kv: KeyValueStore) -> None:
        self._kv = kv

    def _read(self, key: str) -> str | None:
        try:
            return self._kv.get(key)
        except HomeRunStorageError:
            _logger.warning("Could not read %s from storage", key, exc_info=True)
            return None

    def _write(self, key: str, value: str) -> StoreWriteResult:
        try:
            self._kv.set(key, value)
        except HomeRunStorageError as exc:
            _logger.warning("Could not persist %s: %s", key, exc)
            return StoreWriteResult(key=key, ok=False, error=str(exc))
        return StoreWriteResult(key=key, ok=True)

    def load(self) -> tuple[AddressPair, Coordinate | None]:
        """Load the saved addresses and work coordinate (if any)."""
        addresses = AddressPair(
            home=self._read(HOME_ADDRESS_KEY) or "",
            work=self._read(WORK_ADDRESS_KEY) or "",
        )
        return addresses, self.load_coordinate()

    def load_coordinate(self) -> Coordinate | None:
        raw = self._read(WORK_COORDS_KEY)
        if not raw or raw == "null":
            return None
        try:
            return Coordinate.model_validate_json(raw)
        except ValidationError:
            _logger.warning("Ignoring unreadable stored work coordinate: %r", raw[:64])
            return None

    def save(self, addresses: AddressPair) -> list[StoreWriteResult]:
        """Persist both addresses immediately."""
        return [
            self._write(HOME_ADDRESS_KEY, addresses.home),
            self._write(WORK_ADDRESS_KEY, addresses.work),
        ]

    def save_coordinate(self, coordinate: Coordinate) -> StoreWriteResult:
        return self._write(WORK_COORDS_KEY, coordinate.model_dump_json(by_alias=True))
