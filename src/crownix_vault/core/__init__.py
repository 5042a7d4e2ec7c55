# Crownix Vault - Core Module
#
# Shared functionality for the persistence layer:
# - Configuration root and file name constants
# - Audit logging

from .audit_log import (
    AuditLogger,
    EventSeverity,
    EventType,
    get_audit_logger,
    set_audit_logger,
)
from .config import (
    PersistencePaths,
    default_config_dir,
    VAULT_EXTENSION,
    VAULT_FILE_NAME,
    VAULT_FILTER_NAME,
)

__all__ = [
    # Configuration
    "PersistencePaths",
    "default_config_dir",
    "VAULT_EXTENSION",
    "VAULT_FILE_NAME",
    "VAULT_FILTER_NAME",
    # Audit Logging
    "AuditLogger",
    "EventType",
    "EventSeverity",
    "get_audit_logger",
    "set_audit_logger",
]
