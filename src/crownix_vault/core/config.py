# Crownix Vault - Configuration Root
#
# Every persisted artifact (pointer, settings, backup slot, audit logs)
# lives under one per-user directory. Stores receive a PersistencePaths
# value at construction; nothing below this module resolves paths globally.

import os
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import find_dotenv, load_dotenv

APP_NAME = "CrownixVault"
CONFIG_DIR_ENV = "CROWNIX_CONFIG_DIR"

# Vault file conventions shared with the desktop frontend
VAULT_FILE_NAME = "CrownixVault.cxv"
VAULT_EXTENSION = "cxv"
VAULT_FILTER_NAME = "Crownix Vault"

POINTER_FILE_NAME = "config.json"
SETTINGS_FILE_NAME = "settings.json"
BACKUP_DIR_NAME = "backup"
BACKUP_FILE_NAME = "vault.bak"
LOG_DIR_NAME = "logs"


def default_config_dir() -> Path:
    """
    Resolve the per-user configuration root.

    Order:
    1. CROWNIX_CONFIG_DIR (environment or a .env file in the working dir)
    2. %APPDATA%\\CrownixVault on Windows
    3. ~/Library/Application Support/CrownixVault on macOS
    4. $XDG_CONFIG_HOME/crownix-vault, falling back to ~/.config
    """
    load_dotenv(find_dotenv(usecwd=True))

    override = os.getenv(CONFIG_DIR_ENV)
    if override:
        return Path(override).expanduser()

    if sys.platform == "win32":
        appdata = os.getenv("APPDATA")
        base = Path(appdata) if appdata else Path.home() / "AppData" / "Roaming"
        return base / APP_NAME

    if sys.platform == "darwin":
        return Path.home() / "Library" / "Application Support" / APP_NAME

    xdg = os.getenv("XDG_CONFIG_HOME")
    base = Path(xdg) if xdg else Path.home() / ".config"
    return base / "crownix-vault"


@dataclass(frozen=True)
class PersistencePaths:
    """Fixed file locations under a single configuration root."""

    root: Path

    @classmethod
    def from_root(cls, root: Optional[Path] = None) -> "PersistencePaths":
        return cls(Path(root) if root is not None else default_config_dir())

    @property
    def pointer_file(self) -> Path:
        return self.root / POINTER_FILE_NAME

    @property
    def settings_file(self) -> Path:
        return self.root / SETTINGS_FILE_NAME

    @property
    def backup_file(self) -> Path:
        return self.root / BACKUP_DIR_NAME / BACKUP_FILE_NAME

    @property
    def log_dir(self) -> Path:
        return self.root / LOG_DIR_NAME
