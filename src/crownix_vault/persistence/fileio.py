"""Whole-file replacement primitive.

``write_atomic`` writes to ``<name>.tmp`` beside the target, flushes and
fsyncs it, then renames it over the target. Readers see either the old file
or the new one, never a partial write. The temp name is fixed: a single
writer per target path is assumed.
"""

import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)

TEMP_SUFFIX = ".tmp"


class PersistenceError(Exception):
    """Base class for filesystem failures inside the persistence layer."""


class TempWriteError(PersistenceError):
    """Creating or writing the temp file failed; the target is untouched."""


class ReplaceError(PersistenceError):
    """Renaming the temp file over the target failed; the target is untouched."""


def temp_path_for(path: Path) -> Path:
    """Deterministic sibling temp path, e.g. ``Vault.cxv`` -> ``Vault.cxv.tmp``."""
    return path.with_name(path.name + TEMP_SUFFIX)


def _fsync_dir(directory: Path) -> None:
    # Persists the rename itself on POSIX; directories cannot be opened on Windows.
    if not hasattr(os, "O_DIRECTORY"):
        return
    try:
        fd = os.open(str(directory), os.O_RDONLY | os.O_DIRECTORY)
    except OSError as e:
        logger.debug("Directory fsync skipped for %s: %s", directory, e)
        return
    try:
        os.fsync(fd)
    except OSError as e:
        logger.debug("Directory fsync failed for %s: %s", directory, e)
    finally:
        os.close(fd)


def write_atomic(path: Path, data: bytes, fsync: bool = True) -> None:
    """
    Replace ``path`` with ``data`` via temp file + rename.

    Raises:
        TempWriteError: temp file could not be created or written
        ReplaceError: rename failed (temp file is left behind)
    """
    path = Path(path)
    tmp_path = temp_path_for(path)

    try:
        fh = open(tmp_path, "wb")
    except OSError as e:
        raise TempWriteError("Failed to create temp file") from e

    try:
        with fh:
            fh.write(data)
            fh.flush()
            if fsync:
                os.fsync(fh.fileno())
    except OSError as e:
        raise TempWriteError("Failed to write temp file") from e

    try:
        os.replace(tmp_path, path)
    except OSError as e:
        raise ReplaceError(f"Failed to replace {path.name}") from e

    if fsync:
        _fsync_dir(path.parent)
