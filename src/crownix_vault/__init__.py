# Crownix Vault - Main Package
#
# Local persistence and recovery layer for the Crownix Vault desktop app:
# one encrypted vault file, committed atomically, with a single rotating
# backup and a remembered "current vault" pointer.

__version__ = "1.0.0"
__author__ = "Crownix Team"
__description__ = "Vault persistence and recovery layer for the Crownix desktop app"

from .core import (
    EventSeverity,
    EventType,
    get_audit_logger,
)
from .persistence import (
    HeaderCodec,
    LoadOutcome,
    LoadStatus,
    VaultPersistence,
)

__all__ = [
    "__version__",
    "EventType",
    "EventSeverity",
    "get_audit_logger",
    "HeaderCodec",
    "LoadOutcome",
    "LoadStatus",
    "VaultPersistence",
]
