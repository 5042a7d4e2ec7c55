"""Vault persistence facade - the operations the desktop frontend calls.

Wires PointerStore, BackupSlot, VaultWriter, VaultLoader and SettingsStore
over one configuration root and adds the dialog-driven flows:

  - pick_vault_folder / pick_existing_vault_file (DialogProvider)
  - create / save (VaultWriter)
  - auto_load (VaultLoader)
  - export_backup (BackupSlot + FolderOpener)
  - clear_configuration, load_settings / save_settings

All operations are synchronous, blocking filesystem calls. Every outcome is
a result dataclass; nothing here raises for an ordinary I/O failure.
"""

import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from ..core import AuditLogger, EventSeverity, EventType, get_audit_logger
from ..core.config import (
    PersistencePaths,
    VAULT_EXTENSION,
    VAULT_FILE_NAME,
    VAULT_FILTER_NAME,
)
from ..desktop.dialogs import DialogProvider, FolderOpener, HeadlessDialogProvider
from .backup_slot import BackupSlot
from .pointer_store import PointerStore
from .results import (
    ErrorKind,
    ExportResult,
    LoadOutcome,
    PickVaultFolderResult,
    SettingsResult,
    SimpleResult,
    VaultFileResult,
)
from .settings_store import SettingsStore
from .vault_loader import VaultLoader, read_vault_file
from .vault_writer import VaultWriter

logger = logging.getLogger(__name__)

EXPORT_NAME_PREFIX = "CrownixVault-backup"


class VaultPersistence:
    """
    Collaborator-facing persistence operations for one configuration root.

    Args:
        config_dir: Configuration root (default: per-user directory).
        dialogs: Folder/file chooser. Defaults to a headless provider that
            always reports Cancel.
        folder_opener: Reveals exported backups in the OS file browser.
        audit: Audit logger (default: process singleton).
    """

    def __init__(
        self,
        config_dir: Optional[Path] = None,
        dialogs: Optional[DialogProvider] = None,
        folder_opener: Optional[FolderOpener] = None,
        audit: Optional[AuditLogger] = None,
    ):
        self.paths = PersistencePaths.from_root(config_dir)
        self.dialogs = dialogs or HeadlessDialogProvider()
        self.folder_opener = folder_opener or FolderOpener()
        self._audit = audit

        self.pointer_store = PointerStore(self.paths)
        self.backup_slot = BackupSlot(self.paths)
        self.settings_store = SettingsStore(self.paths)
        self.writer = VaultWriter(self.backup_slot, self.pointer_store, audit=audit)
        self.loader = VaultLoader(self.pointer_store, self.backup_slot, audit=audit)

    @property
    def audit(self) -> AuditLogger:
        return self._audit or get_audit_logger()

    # ── Vault file selection ────────────────────────────────────────

    def pick_vault_folder(self) -> PickVaultFolderResult:
        """
        Ask for a folder and scan it for existing vault files.

        The returned ``file_path`` is always ``<folder>/CrownixVault.cxv``;
        ``found`` / ``multiple`` tell the UI whether to offer create or open.
        """
        folder = self.dialogs.pick_folder()
        if folder is None:
            return PickVaultFolderResult(
                success=False,
                message="Folder selection cancelled",
                error=ErrorKind.USER_CANCELLED,
            )

        folder = Path(folder)
        try:
            matches = [
                entry for entry in folder.iterdir()
                if entry.is_file() and entry.suffix == f".{VAULT_EXTENSION}"
            ]
        except OSError as e:
            logger.warning("Cannot scan folder %s: %s", folder, e)
            return PickVaultFolderResult(
                success=False,
                message="Cannot read selected folder",
                error=ErrorKind.IO_FAILURE,
            )

        return PickVaultFolderResult(
            success=True,
            file_path=folder / VAULT_FILE_NAME,
            found=len(matches) >= 1,
            multiple=len(matches) >= 2,
        )

    def pick_existing_vault_file(self) -> VaultFileResult:
        """Ask for a .cxv file, read and validate it, and make it current."""
        chosen = self.dialogs.pick_file(VAULT_FILTER_NAME, [VAULT_EXTENSION])
        if chosen is None:
            return VaultFileResult(
                success=False,
                message="File selection cancelled",
                error=ErrorKind.USER_CANCELLED,
            )

        result = read_vault_file(Path(chosen))
        if not result.success:
            return result

        self.audit.log_event(
            event_type=EventType.VAULT_OPENED,
            severity=EventSeverity.INFO,
            message="Existing vault file opened",
            details={"path": str(result.path), "size_bytes": len(result.buffer)},
        )
        self.writer.record_current_vault(result.path)
        return result

    # ── Commit / load ───────────────────────────────────────────────

    def create(self, file_path: Path, buffer: bytes) -> SimpleResult:
        return self.writer.create(Path(file_path), buffer)

    def save(self, file_path: Path, buffer: bytes) -> SimpleResult:
        return self.writer.save(Path(file_path), buffer)

    def auto_load(self) -> LoadOutcome:
        return self.loader.auto_load()

    # ── Backup slot ─────────────────────────────────────────────────

    def backup_available(self) -> bool:
        return self.backup_slot.exists()

    def export_backup(self, destination_folder: Optional[Path] = None) -> ExportResult:
        """
        Move the backup slot's content into ``destination_folder``.

        Asks the DialogProvider when no folder is given. On success the
        folder is revealed in the OS file browser (best-effort) and the
        internal backup is deleted.
        """
        if destination_folder is None:
            destination_folder = self.dialogs.pick_folder()
            if destination_folder is None:
                return ExportResult(
                    success=False,
                    message="Folder selection cancelled",
                    error=ErrorKind.USER_CANCELLED,
                )

        folder = Path(destination_folder)
        if not folder.is_dir():
            return self._export_failed(folder, ExportResult(
                success=False,
                message="Export folder does not exist",
                error=ErrorKind.IO_FAILURE,
            ))

        result = self.backup_slot.export_and_clear(self._export_target(folder))
        if not result.success:
            return self._export_failed(folder, result)

        self.audit.log_event(
            event_type=EventType.BACKUP_EXPORTED,
            severity=EventSeverity.INFO,
            message="Backup exported and removed from backup slot",
            details={"path": str(result.path)},
        )

        if not self.folder_opener.open(folder):
            logger.info("Export finished; file browser could not be opened for %s", folder)
        return result

    def _export_target(self, folder: Path) -> Path:
        stamp = datetime.now().strftime("%Y%m%d-%H%M%S")
        target = folder / f"{EXPORT_NAME_PREFIX}-{stamp}.{VAULT_EXTENSION}"
        counter = 1
        while target.exists():
            target = folder / f"{EXPORT_NAME_PREFIX}-{stamp}-{counter}.{VAULT_EXTENSION}"
            counter += 1
        return target

    def _export_failed(self, folder: Path, result: ExportResult) -> ExportResult:
        self.audit.log_event(
            event_type=EventType.BACKUP_EXPORT_FAILED,
            severity=EventSeverity.ERROR,
            message=result.message,
            details={"folder": str(folder)},
        )
        return result

    # ── Configuration / settings ────────────────────────────────────

    def clear_configuration(self) -> SimpleResult:
        result = self.pointer_store.clear()
        if result.success:
            self.audit.log_event(
                event_type=EventType.CONFIG_CLEARED,
                severity=EventSeverity.INFO,
                message="Current vault configuration cleared",
            )
        return result

    def load_settings(self) -> SettingsResult:
        result = self.settings_store.load()
        if not result.success:
            self.audit.log_event(
                event_type=EventType.SETTINGS_LOAD_FAILED,
                severity=EventSeverity.WARNING,
                message=result.message,
            )
        return result

    def save_settings(self, document: Any) -> SimpleResult:
        result = self.settings_store.save(document)
        if result.success:
            self.audit.log_event(
                event_type=EventType.SETTINGS_SAVED,
                severity=EventSeverity.INFO,
                message="Settings saved",
            )
        return result


# ── Singleton ────────────────────────────────────────────────────────

_instance: Optional[VaultPersistence] = None


def get_vault_persistence() -> VaultPersistence:
    """Get or create the process-wide VaultPersistence."""
    global _instance
    if _instance is None:
        _instance = VaultPersistence()
    return _instance


def set_vault_persistence(instance: Optional[VaultPersistence]) -> None:
    """Replace the singleton (CLI --config-dir and tests)."""
    global _instance
    _instance = instance
