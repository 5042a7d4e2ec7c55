"""Tests for the vault API routes and session-token guard."""

import base64
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from crownix_vault.api import security
from crownix_vault.api.main import app
from crownix_vault.desktop.dialogs import HeadlessDialogProvider, NullFolderOpener
from crownix_vault.persistence.manager import VaultPersistence, set_vault_persistence

TOKEN = "test-session-token"
AUTH = {"X-Session-Token": TOKEN}


def _b64(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


@pytest.fixture
def dialogs():
    return HeadlessDialogProvider()


@pytest.fixture
def persistence(config_root, dialogs):
    instance = VaultPersistence(
        config_dir=config_root,
        dialogs=dialogs,
        folder_opener=NullFolderOpener(),
    )
    set_vault_persistence(instance)
    return instance


@pytest.fixture
def client(monkeypatch, persistence):
    monkeypatch.setattr(security, "_SESSION_TOKEN", TOKEN)
    return TestClient(app)


# ── Authentication ──────────────────────────────────────────────────


class TestSessionToken:

    def test_health_is_public(self, client):
        resp = client.get("/api/health")
        assert resp.status_code == 200
        assert resp.json()["status"] == "ok"

    def test_missing_token(self, client):
        resp = client.get("/api/vault/auto-load")
        assert resp.status_code == 401

    def test_wrong_token(self, client):
        resp = client.get("/api/vault/auto-load", headers={"X-Session-Token": "nope"})
        assert resp.status_code == 401

    def test_uninitialized_token(self, monkeypatch, persistence):
        monkeypatch.setattr(security, "_SESSION_TOKEN", None)
        resp = TestClient(app).get("/api/vault/auto-load", headers=AUTH)
        assert resp.status_code == 503

    def test_initialize_mints_new_token(self, monkeypatch):
        monkeypatch.setattr(security, "_SESSION_TOKEN", None)
        first = security.initialize_session_token()
        second = security.initialize_session_token()
        assert first != second
        assert security.get_session_token() == second

    def test_get_before_initialize_raises(self, monkeypatch):
        monkeypatch.setattr(security, "_SESSION_TOKEN", None)
        with pytest.raises(RuntimeError):
            security.get_session_token()


# ── Vault commands ──────────────────────────────────────────────────


class TestVaultRoutes:

    def test_auto_load_not_configured(self, client):
        resp = client.get("/api/vault/auto-load", headers=AUTH)
        assert resp.status_code == 200
        assert resp.json() == {
            "status": "not_configured",
            "success": False,
            "message": "No vault configured",
            "error": "configuration_missing",
        }

    def test_create_save_load(self, client, vault_path, make_vault):
        v1, v2 = make_vault(b"one"), make_vault(b"two")

        resp = client.post(
            "/api/vault/create",
            json={"file_path": str(vault_path), "buffer": _b64(v1)},
            headers=AUTH,
        )
        assert resp.json() == {"success": True}

        resp = client.post(
            "/api/vault/save",
            json={"file_path": str(vault_path), "buffer": _b64(v2)},
            headers=AUTH,
        )
        assert resp.json() == {"success": True}

        data = client.get("/api/vault/auto-load", headers=AUTH).json()
        assert data["status"] == "loaded"
        assert base64.b64decode(data["buffer"]) == v2
        assert data["path"] == str(vault_path)

        assert client.get("/api/vault/backup", headers=AUTH).json() == {"backup_available": True}

    def test_save_failure_is_200_with_message(self, client, tmp_path):
        resp = client.post(
            "/api/vault/save",
            json={"file_path": str(tmp_path / "missing" / "v.cxv"), "buffer": _b64(b"x")},
            headers=AUTH,
        )
        assert resp.status_code == 200
        assert resp.json()["success"] is False
        assert resp.json()["message"] == "Failed to create temp file"

    def test_bad_base64(self, client, vault_path):
        resp = client.post(
            "/api/vault/save",
            json={"file_path": str(vault_path), "buffer": "%%%not-base64%%%"},
            headers=AUTH,
        )
        assert resp.status_code == 422
        assert not vault_path.exists()

    def test_missing_body_fields(self, client):
        resp = client.post("/api/vault/save", json={"buffer": _b64(b"x")}, headers=AUTH)
        assert resp.status_code == 422

    def test_pick_folder(self, client, dialogs, vault_dir):
        dialogs.folder = vault_dir
        (vault_dir / "CrownixVault.cxv").write_bytes(b"x")
        data = client.post("/api/vault/pick-folder", headers=AUTH).json()
        assert data == {
            "success": True,
            "file_path": str(vault_dir / "CrownixVault.cxv"),
            "found": True,
            "multiple": False,
        }

    def test_pick_file_cancelled(self, client):
        data = client.post("/api/vault/pick-file", headers=AUTH).json()
        assert data["success"] is False
        assert data["error"] == "user_cancelled"

    def test_export_backup(self, client, persistence, vault_path, tmp_path):
        persistence.create(vault_path, b"v1")
        persistence.save(vault_path, b"v2")

        resp = client.post(
            "/api/vault/backup/export",
            json={"destination_folder": str(tmp_path)},
            headers=AUTH,
        )
        data = resp.json()
        assert data["success"] is True
        assert Path(data["path"]).read_bytes() == b"v1"
        assert Path(data["path"]).parent == tmp_path
        assert client.get("/api/vault/backup", headers=AUTH).json() == {"backup_available": False}

    def test_export_without_folder_uses_dialog(self, client):
        data = client.post("/api/vault/backup/export", json={}, headers=AUTH).json()
        assert data["error"] == "user_cancelled"

    def test_clear_config(self, client, persistence, vault_path):
        persistence.create(vault_path, b"x")
        assert client.delete("/api/vault/config", headers=AUTH).json() == {"success": True}
        data = client.get("/api/vault/auto-load", headers=AUTH).json()
        assert data["status"] == "not_configured"

    def test_settings_round_trip(self, client):
        assert client.get("/api/vault/settings", headers=AUTH).json() == {
            "success": True,
            "settings": {},
        }
        resp = client.put(
            "/api/vault/settings",
            json={"settings": {"theme": "dark"}},
            headers=AUTH,
        )
        assert resp.json() == {"success": True}
        assert client.get("/api/vault/settings", headers=AUTH).json()["settings"] == {"theme": "dark"}
