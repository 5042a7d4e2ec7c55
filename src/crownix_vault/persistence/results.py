"""Result shapes returned across the persistence boundary.

Every collaborator-facing operation resolves to a flat dataclass with a
``success`` flag plus optional fields; failures carry a human-readable
message and an :class:`ErrorKind`. ``to_dict()`` omits unset fields so the
JSON sent to the frontend matches the desktop command contract.
"""

import base64
from dataclasses import dataclass, fields
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional


class ErrorKind(str, Enum):
    """Failure taxonomy surfaced to callers."""

    USER_CANCELLED = "user_cancelled"
    IO_FAILURE = "io_failure"
    VALIDATION_FAILURE = "validation_failure"
    CONFIGURATION_MISSING = "configuration_missing"


class LoadStatus(str, Enum):
    LOADED = "loaded"
    NOT_CONFIGURED = "not_configured"
    DEGRADED = "degraded"


def _serialize(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, (bytes, bytearray)):
        return base64.b64encode(bytes(value)).decode("ascii")
    return value


class _FlatResult:
    def to_dict(self) -> Dict[str, Any]:
        data = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            data[f.name] = _serialize(value)
        return data


@dataclass
class SimpleResult(_FlatResult):
    success: bool
    message: Optional[str] = None
    error: Optional[ErrorKind] = None

    @classmethod
    def ok(cls) -> "SimpleResult":
        return cls(success=True)

    @classmethod
    def fail(cls, message: str, error: ErrorKind = ErrorKind.IO_FAILURE) -> "SimpleResult":
        return cls(success=False, message=message, error=error)


@dataclass
class BackupResult(_FlatResult):
    """Outcome of a backup-before-overwrite; ``taken`` is False when there was no primary."""

    success: bool
    taken: bool = False
    message: Optional[str] = None
    error: Optional[ErrorKind] = None


@dataclass
class PickVaultFolderResult(_FlatResult):
    """Outcome of choosing a folder for a new or existing vault."""

    success: bool
    file_path: Optional[Path] = None
    found: Optional[bool] = None
    multiple: Optional[bool] = None
    message: Optional[str] = None
    error: Optional[ErrorKind] = None


@dataclass
class VaultFileResult(_FlatResult):
    """Bytes of a vault file the user picked, plus where they came from."""

    success: bool
    buffer: Optional[bytes] = None
    path: Optional[Path] = None
    message: Optional[str] = None
    error: Optional[ErrorKind] = None


@dataclass
class ExportResult(_FlatResult):
    success: bool
    path: Optional[Path] = None
    message: Optional[str] = None
    error: Optional[ErrorKind] = None


@dataclass
class SettingsResult(_FlatResult):
    success: bool
    settings: Optional[Any] = None
    message: Optional[str] = None
    error: Optional[ErrorKind] = None


@dataclass
class LoadOutcome(_FlatResult):
    """
    Tagged result of the startup load.

    - LOADED: ``buffer`` and ``path`` are set
    - NOT_CONFIGURED: no pointer recorded
    - DEGRADED: pointer resolved but the file could not be trusted;
      ``backup_available`` reports whether the backup slot holds a copy
    """

    status: LoadStatus
    success: bool
    buffer: Optional[bytes] = None
    path: Optional[Path] = None
    backup_available: Optional[bool] = None
    message: Optional[str] = None
    error: Optional[ErrorKind] = None

    @classmethod
    def loaded(cls, buffer: bytes, path: Path) -> "LoadOutcome":
        return cls(status=LoadStatus.LOADED, success=True, buffer=buffer, path=path)

    @classmethod
    def not_configured(cls) -> "LoadOutcome":
        return cls(
            status=LoadStatus.NOT_CONFIGURED,
            success=False,
            message="No vault configured",
            error=ErrorKind.CONFIGURATION_MISSING,
        )

    @classmethod
    def degraded(
        cls,
        path: Path,
        backup_available: bool,
        message: str,
        error: ErrorKind,
    ) -> "LoadOutcome":
        return cls(
            status=LoadStatus.DEGRADED,
            success=False,
            path=path,
            backup_available=backup_available,
            message=message,
            error=error,
        )
