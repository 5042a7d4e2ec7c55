# Crownix Vault - Backup Slot
#
# Exactly one backup: <config root>/backup/vault.bak holds the vault bytes
# as they were before the most recent successful overwrite. Each save
# replaces it; each export consumes it. Its absence only means no backup
# was taken or it was already exported.

import logging
from pathlib import Path

from ..core.config import PersistencePaths
from .fileio import PersistenceError, temp_path_for, write_atomic
from .results import BackupResult, ErrorKind, ExportResult

logger = logging.getLogger(__name__)


class BackupSlot:
    """
    Single rotating backup of the primary vault file.

    Args:
        paths: Configuration root locations.
    """

    def __init__(self, paths: PersistencePaths):
        self._file = paths.backup_file

    def path(self) -> Path:
        """Backup location; its parent directory is created on first access."""
        self._file.parent.mkdir(parents=True, exist_ok=True)
        return self._file

    def exists(self) -> bool:
        return self._file.is_file()

    def backup_if_exists(self, primary_path: Path) -> BackupResult:
        """
        Copy the current bytes of ``primary_path`` into the slot.

        No-op (``taken=False``) when the primary does not exist yet. The slot
        itself is replaced atomically so an interrupted copy never leaves a
        torn backup.
        """
        primary_path = Path(primary_path)
        if not primary_path.is_file():
            return BackupResult(success=True, taken=False)

        try:
            data = primary_path.read_bytes()
            write_atomic(self.path(), data)
        except (OSError, PersistenceError) as e:
            logger.warning("Backup of %s failed: %s", primary_path, e)
            return BackupResult(
                success=False,
                message=f"Failed to back up vault file: {e}",
                error=ErrorKind.IO_FAILURE,
            )

        logger.debug("Backed up %s (%d bytes)", primary_path, len(data))
        return BackupResult(success=True, taken=True)

    def export_and_clear(self, destination_path: Path) -> ExportResult:
        """
        Copy the backup to ``destination_path``, then delete the slot.

        The copy goes through a temp file and rename, so a failed export
        leaves neither a partial file at the destination nor a stray temp.
        On failure the slot is left intact.
        """
        destination_path = Path(destination_path)
        if not self.exists():
            return ExportResult(
                success=False,
                message="No backup available",
                error=ErrorKind.IO_FAILURE,
            )

        try:
            write_atomic(destination_path, self._file.read_bytes())
        except (OSError, PersistenceError) as e:
            logger.warning("Backup export to %s failed: %s", destination_path, e)
            self._discard_partial(destination_path)
            return ExportResult(
                success=False,
                message=f"Failed to export backup: {e}",
                error=ErrorKind.IO_FAILURE,
            )

        try:
            self._file.unlink()
        except OSError as e:
            # Export succeeded; the slot simply stays exportable.
            logger.warning("Exported backup but could not remove %s: %s", self._file, e)

        return ExportResult(success=True, path=destination_path)

    @staticmethod
    def _discard_partial(destination_path: Path) -> None:
        tmp_path = temp_path_for(destination_path)
        try:
            tmp_path.unlink()
        except FileNotFoundError:
            pass
        except OSError as e:
            logger.warning("Could not remove partial export %s: %s", tmp_path, e)
