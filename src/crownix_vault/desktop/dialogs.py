# Crownix Vault - Desktop Collaborators
#
# The persistence layer never draws UI. It calls into a DialogProvider for
# folder/file selection (blocking; None means the user cancelled) and a
# FolderOpener to reveal an exported file in the OS file browser.

import logging
import os
import subprocess
import sys
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)


class DialogProvider(ABC):
    """Blocking native choosers supplied by the host application."""

    @abstractmethod
    def pick_folder(self) -> Optional[Path]:
        """Return the chosen folder, or None if cancelled."""

    @abstractmethod
    def pick_file(self, filter_name: str, extensions: Iterable[str]) -> Optional[Path]:
        """Return the chosen file, or None if cancelled."""


class HeadlessDialogProvider(DialogProvider):
    """
    Non-interactive provider for the CLI, the HTTP backend and tests.

    Answers come from preset paths; an unset path behaves like the user
    pressing Cancel.
    """

    def __init__(self, folder: Optional[Path] = None, file: Optional[Path] = None):
        self.folder = Path(folder) if folder else None
        self.file = Path(file) if file else None
        self.requests: List[str] = []

    def pick_folder(self) -> Optional[Path]:
        self.requests.append("folder")
        return self.folder

    def pick_file(self, filter_name: str, extensions: Iterable[str]) -> Optional[Path]:
        self.requests.append("file")
        return self.file


class FolderOpener:
    """Reveal a folder in Explorer / Finder / the XDG file manager."""

    def open(self, folder: Path) -> bool:
        """Best-effort; returns False instead of raising on any failure."""
        folder = str(folder)
        try:
            if sys.platform == "win32":
                os.startfile(folder)  # type: ignore[attr-defined]
            elif sys.platform == "darwin":
                subprocess.Popen(["open", folder])
            else:
                subprocess.Popen(["xdg-open", folder])
        except (OSError, ValueError) as e:
            logger.info("Could not open %s in file browser: %s", folder, e)
            return False
        return True


class NullFolderOpener(FolderOpener):
    """Records requests without launching anything (headless runs, tests)."""

    def __init__(self):
        self.opened: List[Path] = []

    def open(self, folder: Path) -> bool:
        self.opened.append(Path(folder))
        return True
