# Crownix Vault - Vault Loader
#
# Startup state machine:
#   Start -> NotConfigured                 (no pointer)
#   Start -> read -> Loaded                (read + header valid)
#   Start -> read -> Degraded{backup?}     (unreadable or untrusted)
# Degraded only reports whether the backup slot holds a copy. Restoring
# from it is left to the caller; nothing here touches the backup.

import logging
from pathlib import Path
from typing import Optional

from ..core import AuditLogger, EventSeverity, EventType, get_audit_logger
from .backup_slot import BackupSlot
from .header import HeaderCodec
from .pointer_store import PointerStore
from .results import ErrorKind, LoadOutcome, VaultFileResult

logger = logging.getLogger(__name__)


def read_vault_file(path: Path) -> VaultFileResult:
    """Read a vault file fully and check its header before trusting it."""
    path = Path(path)
    try:
        fh = open(path, "rb")
    except OSError as e:
        logger.warning("Cannot open vault file %s: %s", path, e)
        return VaultFileResult(
            success=False,
            path=path,
            message="Failed to open vault file",
            error=ErrorKind.IO_FAILURE,
        )

    try:
        with fh:
            buffer = fh.read()
    except OSError as e:
        logger.warning("Cannot read vault file %s: %s", path, e)
        return VaultFileResult(
            success=False,
            path=path,
            message="Failed to read vault file",
            error=ErrorKind.IO_FAILURE,
        )

    if not HeaderCodec.validate(buffer):
        return VaultFileResult(
            success=False,
            path=path,
            message="Vault file header is invalid",
            error=ErrorKind.VALIDATION_FAILURE,
        )

    return VaultFileResult(success=True, buffer=buffer, path=path)


class VaultLoader:
    """Resolves the current vault at startup without retries or repair."""

    def __init__(
        self,
        pointer_store: PointerStore,
        backup_slot: BackupSlot,
        audit: Optional[AuditLogger] = None,
    ):
        self.pointer_store = pointer_store
        self.backup_slot = backup_slot
        self._audit = audit

    @property
    def audit(self) -> AuditLogger:
        return self._audit or get_audit_logger()

    def auto_load(self) -> LoadOutcome:
        vault_path = self.pointer_store.load()
        if vault_path is None:
            self.audit.log_event(
                event_type=EventType.VAULT_NOT_CONFIGURED,
                severity=EventSeverity.INFO,
                message="No current vault recorded",
            )
            return LoadOutcome.not_configured()

        result = read_vault_file(vault_path)
        if result.success:
            self.audit.log_event(
                event_type=EventType.VAULT_LOADED,
                severity=EventSeverity.INFO,
                message="Vault loaded",
                details={"path": str(vault_path), "size_bytes": len(result.buffer)},
            )
            return LoadOutcome.loaded(result.buffer, vault_path)

        backup_available = self.backup_slot.exists()
        self.audit.log_event(
            event_type=EventType.VAULT_DEGRADED,
            severity=EventSeverity.CRITICAL,
            message=f"Current vault cannot be trusted: {result.message}",
            details={
                "path": str(vault_path),
                "error": result.error.value,
                "backup_available": backup_available,
            },
        )
        return LoadOutcome.degraded(
            path=vault_path,
            backup_available=backup_available,
            message=result.message,
            error=result.error,
        )
