# Crownix Vault - Desktop collaborator interfaces

from .dialogs import DialogProvider, FolderOpener, HeadlessDialogProvider, NullFolderOpener

__all__ = ["DialogProvider", "FolderOpener", "HeadlessDialogProvider", "NullFolderOpener"]
