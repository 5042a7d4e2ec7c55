# Crownix Vault - Audit Logging
#
# Append-only structured log of vault persistence events.
# Every commit, load, backup rotation and export is recorded with a
# timestamp and event ID so a degraded vault can be traced after the fact.
# Vault bytes are never passed to the logger.

import logging
import os
import socket
import sys
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Optional
from uuid import uuid4

import structlog

from .config import default_config_dir, LOG_DIR_NAME


class EventType(str, Enum):
    """Types of persistence events that can be logged."""

    # Vault file events
    VAULT_CREATED = "vault.created"
    VAULT_SAVED = "vault.saved"
    VAULT_SAVE_FAILED = "vault.save.failed"
    VAULT_OPENED = "vault.opened"
    VAULT_LOADED = "vault.loaded"
    VAULT_DEGRADED = "vault.degraded"
    VAULT_NOT_CONFIGURED = "vault.not_configured"

    # Backup slot events
    BACKUP_TAKEN = "backup.taken"
    BACKUP_FAILED = "backup.failed"
    BACKUP_EXPORTED = "backup.exported"
    BACKUP_EXPORT_FAILED = "backup.export.failed"

    # Bookkeeping
    POINTER_SAVE_FAILED = "pointer.save.failed"
    CONFIG_CLEARED = "config.cleared"
    SETTINGS_SAVED = "settings.saved"
    SETTINGS_LOAD_FAILED = "settings.load.failed"

    # System Events
    SYSTEM_START = "system.start"
    SYSTEM_STOP = "system.stop"


class EventSeverity(str, Enum):
    """
    Severity levels for persistence events.

    - INFO: normal activity
    - WARNING: advisory step failed, parent operation unaffected
    - ERROR: a user-visible operation failed
    - CRITICAL: the current vault cannot be trusted
    """
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditLogger:
    """
    Append-only audit logger for vault persistence events.

    Features:
    - Structured JSON lines via structlog
    - Automatic timestamp and event ID
    - One file per day: audit_YYYY-MM-DD.log
    """

    def __init__(self, log_dir: Optional[Path] = None):
        """
        Initialize audit logger.

        Args:
            log_dir: Directory for audit logs (default: <config root>/logs)
        """
        self.log_dir = Path(log_dir) if log_dir else default_config_dir() / LOG_DIR_NAME
        self.log_dir.mkdir(parents=True, exist_ok=True)

        structlog.configure(
            processors=[
                structlog.stdlib.add_log_level,
                structlog.stdlib.add_logger_name,
                structlog.processors.TimeStamper(fmt="iso"),
                structlog.processors.StackInfoRenderer(),
                structlog.processors.format_exc_info,
                structlog.processors.JSONRenderer()
            ],
            wrapper_class=structlog.stdlib.BoundLogger,
            context_class=dict,
            logger_factory=structlog.stdlib.LoggerFactory(),
            cache_logger_on_first_use=True,
        )

        self._file_handler = self._setup_file_handler()
        self.logger = structlog.get_logger("crownix_vault.audit")

    def _setup_file_handler(self) -> logging.FileHandler:
        """Attach today's audit file to the audit logger."""
        today = datetime.now().strftime("%Y-%m-%d")
        log_file = self.log_dir / f"audit_{today}.log"

        file_handler = logging.FileHandler(log_file, mode='a', encoding='utf-8')
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(logging.Formatter('%(message)s'))  # structlog renders JSON

        audit_logger = logging.getLogger("crownix_vault.audit")
        audit_logger.addHandler(file_handler)
        audit_logger.setLevel(logging.INFO)
        return file_handler

    def close(self) -> None:
        """Detach and close the file handler (used when swapping loggers)."""
        logging.getLogger("crownix_vault.audit").removeHandler(self._file_handler)
        self._file_handler.close()

    def log_event(
        self,
        event_type: EventType,
        severity: EventSeverity,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Log a persistence event (append-only).

        Args:
            event_type: Type of event (from EventType enum)
            severity: Severity level (from EventSeverity enum)
            message: Human-readable event description
            details: Additional event details (paths, sizes; never vault bytes)

        Returns:
            str: Event ID (UUID) for reference
        """
        event_id = str(uuid4())

        self.logger.info(
            "vault_event",
            event_id=event_id,
            event_type=event_type.value,
            severity=severity.value,
            message=message,
            timestamp=datetime.now(timezone.utc).isoformat(),
            details=details or {},
            user_context=self._get_default_user_context(),
        )

        return event_id

    def _get_default_user_context(self) -> Dict[str, Any]:
        return {
            "os_user": os.getenv("USERNAME") or os.getenv("USER"),
            "hostname": socket.gethostname(),
            "platform": sys.platform,
        }


# Global logger instance
_audit_logger: Optional[AuditLogger] = None


def get_audit_logger() -> AuditLogger:
    """Get global audit logger (singleton pattern)."""
    global _audit_logger
    if _audit_logger is None:
        _audit_logger = AuditLogger()
    return _audit_logger


def set_audit_logger(instance: Optional[AuditLogger]) -> None:
    """Replace the singleton (CLI --config-dir and tests)."""
    global _audit_logger
    if _audit_logger is not None and _audit_logger is not instance:
        _audit_logger.close()
    _audit_logger = instance
