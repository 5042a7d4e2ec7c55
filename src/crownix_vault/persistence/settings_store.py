# Crownix Vault - Settings Store
#
# Schema-free JSON document for user preferences, kept apart from the
# vault and its pointer. A missing file reads as {}; a corrupt one is
# reported as a failure so the UI never silently resets preferences.

import json
import logging
from pathlib import Path
from typing import Any

from ..core.config import PersistencePaths
from .fileio import PersistenceError, write_atomic
from .results import ErrorKind, SettingsResult, SimpleResult

logger = logging.getLogger(__name__)


class SettingsStore:
    """JSON pass-through store at <config root>/settings.json."""

    def __init__(self, paths: PersistencePaths):
        self._file = paths.settings_file

    @property
    def file_path(self) -> Path:
        return self._file

    def load(self) -> SettingsResult:
        try:
            raw = self._file.read_text(encoding="utf-8")
        except FileNotFoundError:
            return SettingsResult(success=True, settings={})
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Settings unreadable at %s: %s", self._file, e)
            return SettingsResult(
                success=False,
                message=f"Failed to read settings: {e}",
                error=ErrorKind.IO_FAILURE,
            )

        try:
            document = json.loads(raw)
        except ValueError as e:
            logger.warning("Settings at %s are not valid JSON: %s", self._file, e)
            return SettingsResult(
                success=False,
                message="Settings file is not valid JSON",
                error=ErrorKind.VALIDATION_FAILURE,
            )
        return SettingsResult(success=True, settings=document)

    def save(self, document: Any) -> SimpleResult:
        try:
            encoded = json.dumps(document, indent=2).encode("utf-8")
        except (TypeError, ValueError) as e:
            return SimpleResult.fail(
                f"Settings are not JSON serializable: {e}",
                ErrorKind.VALIDATION_FAILURE,
            )

        try:
            self._file.parent.mkdir(parents=True, exist_ok=True)
            write_atomic(self._file, encoded)
        except (OSError, PersistenceError) as e:
            logger.warning("Could not save settings to %s: %s", self._file, e)
            return SimpleResult.fail(f"Failed to save settings: {e}")
        return SimpleResult.ok()
