# Crownix Vault - Persistence & Recovery
#
# Durable storage of the single encrypted vault file:
# - atomic temp-file-then-rename commits
# - one rotating backup of the previous content
# - header validation before any buffer is trusted
# - pointer to the current vault across restarts
# - degraded-load reporting (no automatic restore)

from .backup_slot import BackupSlot
from .header import HeaderCodec, VAULT_MAGIC, VAULT_VERSION
from .manager import VaultPersistence, get_vault_persistence, set_vault_persistence
from .pointer_store import PointerStore
from .results import (
    BackupResult,
    ErrorKind,
    ExportResult,
    LoadOutcome,
    LoadStatus,
    PickVaultFolderResult,
    SettingsResult,
    SimpleResult,
    VaultFileResult,
)
from .settings_store import SettingsStore
from .vault_loader import VaultLoader
from .vault_writer import VaultWriter

__all__ = [
    "BackupResult",
    "BackupSlot",
    "ErrorKind",
    "ExportResult",
    "HeaderCodec",
    "LoadOutcome",
    "LoadStatus",
    "PickVaultFolderResult",
    "PointerStore",
    "SettingsResult",
    "SettingsStore",
    "SimpleResult",
    "VAULT_MAGIC",
    "VAULT_VERSION",
    "VaultFileResult",
    "VaultLoader",
    "VaultPersistence",
    "VaultWriter",
    "get_vault_persistence",
    "set_vault_persistence",
]
