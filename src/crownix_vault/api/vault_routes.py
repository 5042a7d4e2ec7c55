"""Vault persistence API routes - the desktop frontend's command surface.

Each route wraps one VaultPersistence operation and returns its flat
result dict (``success`` plus optional fields). Domain failures are
HTTP 200 with ``success: false``; only authentication and malformed
requests use error statuses. Vault buffers travel as base64 strings.
Routes are plain ``def`` so FastAPI runs the blocking file I/O in its
threadpool.
"""

import base64
import binascii
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from ..persistence.manager import VaultPersistence, get_vault_persistence
from .security import verify_session_token

router = APIRouter(prefix="/api/vault", tags=["vault"])


# ── Pydantic Models ──────────────────────────────────────────────────


class VaultWriteRequest(BaseModel):
    file_path: str = Field(..., min_length=1)
    buffer: str = Field(..., description="Base64-encoded vault bytes")


class ExportBackupRequest(BaseModel):
    destination_folder: Optional[str] = None


class SettingsDocument(BaseModel):
    settings: Any = Field(...)


def _decode_buffer(encoded: str) -> bytes:
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError):
        raise HTTPException(
            status_code=422,
            detail="buffer must be base64-encoded",
        )


def _persistence() -> VaultPersistence:
    return get_vault_persistence()


# ── Routes ───────────────────────────────────────────────────────────


@router.get("/auto-load")
def auto_load(
    _token: str = Depends(verify_session_token),
    persistence: VaultPersistence = Depends(_persistence),
):
    """Resolve the current vault: loaded, not_configured or degraded."""
    return persistence.auto_load().to_dict()


@router.post("/pick-folder")
def pick_vault_folder(
    _token: str = Depends(verify_session_token),
    persistence: VaultPersistence = Depends(_persistence),
):
    return persistence.pick_vault_folder().to_dict()


@router.post("/pick-file")
def pick_existing_vault_file(
    _token: str = Depends(verify_session_token),
    persistence: VaultPersistence = Depends(_persistence),
):
    return persistence.pick_existing_vault_file().to_dict()


@router.post("/create")
def create_vault_file(
    body: VaultWriteRequest,
    _token: str = Depends(verify_session_token),
    persistence: VaultPersistence = Depends(_persistence),
):
    """First-time creation of a brand-new vault file."""
    return persistence.create(body.file_path, _decode_buffer(body.buffer)).to_dict()


@router.post("/save")
def save_vault_file(
    body: VaultWriteRequest,
    _token: str = Depends(verify_session_token),
    persistence: VaultPersistence = Depends(_persistence),
):
    """Atomic save with backup of the previous content."""
    return persistence.save(body.file_path, _decode_buffer(body.buffer)).to_dict()


@router.get("/backup")
def backup_status(
    _token: str = Depends(verify_session_token),
    persistence: VaultPersistence = Depends(_persistence),
):
    return {"backup_available": persistence.backup_available()}


@router.post("/backup/export")
def export_backup(
    body: ExportBackupRequest,
    _token: str = Depends(verify_session_token),
    persistence: VaultPersistence = Depends(_persistence),
):
    """Move the backup into a folder (asks for one when none is given)."""
    return persistence.export_backup(body.destination_folder).to_dict()


@router.delete("/config")
def clear_configuration(
    _token: str = Depends(verify_session_token),
    persistence: VaultPersistence = Depends(_persistence),
):
    return persistence.clear_configuration().to_dict()


@router.get("/settings")
def load_settings(
    _token: str = Depends(verify_session_token),
    persistence: VaultPersistence = Depends(_persistence),
):
    return persistence.load_settings().to_dict()


@router.put("/settings")
def save_settings(
    body: SettingsDocument,
    _token: str = Depends(verify_session_token),
    persistence: VaultPersistence = Depends(_persistence),
):
    return persistence.save_settings(body.settings).to_dict()
