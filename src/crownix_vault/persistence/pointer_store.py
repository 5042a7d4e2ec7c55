# Crownix Vault - Pointer Store
#
# Remembers which file is "the current vault" across restarts as
# {"vault_path": "<absolute path>"} in <config root>/config.json.
# The pointer is a hint: it may name a file that no longer exists.

import json
import logging
from pathlib import Path
from typing import Optional

from ..core.config import PersistencePaths
from .fileio import PersistenceError, write_atomic
from .results import SimpleResult

logger = logging.getLogger(__name__)


class PointerStore:
    """
    Best-effort persistence of the current vault path.

    Args:
        paths: Configuration root locations.
    """

    def __init__(self, paths: PersistencePaths):
        self._file = paths.pointer_file

    @property
    def file_path(self) -> Path:
        return self._file

    def save(self, vault_path: Path) -> SimpleResult:
        """
        Record ``vault_path`` as the current vault.

        Failures are returned, not raised; callers treat them as advisory.
        """
        document = {"vault_path": str(Path(vault_path).absolute())}
        try:
            self._file.parent.mkdir(parents=True, exist_ok=True)
            write_atomic(self._file, json.dumps(document, indent=2).encode("utf-8"))
        except (OSError, PersistenceError) as e:
            logger.warning("Could not persist vault pointer %s: %s", self._file, e)
            return SimpleResult.fail(f"Failed to save vault configuration: {e}")
        return SimpleResult.ok()

    def load(self) -> Optional[Path]:
        """Return the last saved vault path, or None if absent or corrupt."""
        try:
            raw = self._file.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Vault pointer unreadable at %s: %s", self._file, e)
            return None

        try:
            document = json.loads(raw)
        except ValueError:
            logger.warning("Vault pointer at %s is not valid JSON", self._file)
            return None

        if not isinstance(document, dict):
            return None
        vault_path = document.get("vault_path")
        if not isinstance(vault_path, str) or not vault_path:
            return None
        return Path(vault_path)

    def clear(self) -> SimpleResult:
        """Delete the pointer file. Missing file counts as success."""
        try:
            self._file.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Could not remove vault pointer %s: %s", self._file, e)
            return SimpleResult.fail(f"Failed to clear vault configuration: {e}")
        return SimpleResult.ok()
