# Crownix Vault - Vault Writer
#
# Commit protocol for the primary vault file:
#   1. copy the current primary into the backup slot (advisory)
#   2. write the new buffer to <primary>.tmp in the same directory
#   3. on temp failure, stop; the primary is untouched
#   4. rename <primary>.tmp over the primary (the atomicity boundary)
#   5. record the primary as the current vault (advisory)
# Writers never modify the primary in place.

import logging
from pathlib import Path
from typing import Optional

from ..core import AuditLogger, EventSeverity, EventType, get_audit_logger
from .backup_slot import BackupSlot
from .fileio import ReplaceError, TempWriteError, write_atomic
from .pointer_store import PointerStore
from .results import SimpleResult

logger = logging.getLogger(__name__)


class VaultWriter:
    """
    Creates and atomically replaces the primary vault file.

    Not safe for concurrent saves to the same path: both would share
    ``<primary>.tmp``. Callers serialize saves per vault.
    """

    def __init__(
        self,
        backup_slot: BackupSlot,
        pointer_store: PointerStore,
        audit: Optional[AuditLogger] = None,
    ):
        self.backup_slot = backup_slot
        self.pointer_store = pointer_store
        self._audit = audit

    @property
    def audit(self) -> AuditLogger:
        return self._audit or get_audit_logger()

    def create(self, file_path: Path, buffer: bytes) -> SimpleResult:
        """
        Write a brand-new vault file directly (no backup, no temp file).

        Used for first-time creation only; the pointer is recorded on success.
        """
        path = Path(file_path)

        try:
            fh = open(path, "wb")
        except OSError as e:
            logger.error("Cannot create vault file %s: %s", path, e)
            return self._fail(path, "Failed to create vault file", e)

        try:
            with fh:
                fh.write(buffer)
        except OSError as e:
            logger.error("Cannot write vault file %s: %s", path, e)
            return self._fail(path, "Failed to write vault file", e)

        self.audit.log_event(
            event_type=EventType.VAULT_CREATED,
            severity=EventSeverity.INFO,
            message="Vault file created",
            details={"path": str(path), "size_bytes": len(buffer)},
        )
        self.record_current_vault(path)
        return SimpleResult.ok()

    def save(self, primary_path: Path, buffer: bytes) -> SimpleResult:
        """
        Atomically replace ``primary_path`` with ``buffer``.

        Returns:
            SimpleResult; failure messages distinguish the temp-write stage
            ("Failed to create/write temp file") from the replace stage
            ("Failed to replace vault file"). A failed backup never fails
            the save.
        """
        path = Path(primary_path)
        if not path.name:
            return SimpleResult.fail("Invalid vault file path")

        backup = self.backup_slot.backup_if_exists(path)
        if backup.taken:
            self.audit.log_event(
                event_type=EventType.BACKUP_TAKEN,
                severity=EventSeverity.INFO,
                message="Previous vault content copied to backup slot",
                details={"path": str(path)},
            )
        elif not backup.success:
            # Advisory; the save proceeds without a fresh backup.
            self.audit.log_event(
                event_type=EventType.BACKUP_FAILED,
                severity=EventSeverity.WARNING,
                message="Backup before overwrite failed; continuing save",
                details={"path": str(path), "reason": backup.message},
            )

        try:
            write_atomic(path, buffer)
        except TempWriteError as e:
            logger.error("Temp write for %s failed: %s", path, e.__cause__)
            return self._fail(path, str(e), e.__cause__)
        except ReplaceError as e:
            logger.error("Replace of %s failed: %s", path, e.__cause__)
            return self._fail(path, "Failed to replace vault file", e.__cause__)

        self.audit.log_event(
            event_type=EventType.VAULT_SAVED,
            severity=EventSeverity.INFO,
            message="Vault file saved",
            details={"path": str(path), "size_bytes": len(buffer)},
        )
        self.record_current_vault(path)
        return SimpleResult.ok()

    def record_current_vault(self, path: Path) -> None:
        result = self.pointer_store.save(path)
        if not result.success:
            # Advisory; the vault itself is already committed.
            self.audit.log_event(
                event_type=EventType.POINTER_SAVE_FAILED,
                severity=EventSeverity.WARNING,
                message="Vault committed but current-vault pointer was not saved",
                details={"path": str(path), "reason": result.message},
            )

    def _fail(self, path: Path, message: str, cause: Optional[BaseException]) -> SimpleResult:
        self.audit.log_event(
            event_type=EventType.VAULT_SAVE_FAILED,
            severity=EventSeverity.ERROR,
            message=message,
            details={"path": str(path), "reason": str(cause) if cause else None},
        )
        return SimpleResult.fail(message)
