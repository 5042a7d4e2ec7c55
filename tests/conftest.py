"""
Shared pytest fixtures for the Crownix Vault test suite.

Autouse fixtures below isolate tests from the real per-user config root:
  - Config root     -> $CROWNIX_CONFIG_DIR points into tmp_path
  - Audit logger    -> temp directory  (no test events in the real audit log)
  - Persistence     -> singleton reset after every test
"""

import json
import struct
from pathlib import Path

import pytest


@pytest.fixture(autouse=True)
def _isolate_config_root(tmp_path, monkeypatch):
    """Any code path that falls back to default_config_dir() lands in tmp_path."""
    monkeypatch.setenv("CROWNIX_CONFIG_DIR", str(tmp_path / "default_config"))


@pytest.fixture(autouse=True)
def _isolate_audit_logs(tmp_path):
    """Point the global AuditLogger at a per-test directory.

    Without this, every save/load in the suite would append events to the
    developer's real ``logs/audit_*.log``.
    """
    import crownix_vault.core.audit_log as audit_mod

    old_logger = audit_mod._audit_logger
    audit_mod._audit_logger = audit_mod.AuditLogger(log_dir=tmp_path / "audit_logs")

    yield

    audit_mod.set_audit_logger(old_logger)


@pytest.fixture(autouse=True)
def _reset_persistence_singleton():
    import crownix_vault.persistence.manager as manager_mod

    old = manager_mod._instance
    yield
    manager_mod._instance = old


@pytest.fixture
def config_root(tmp_path) -> Path:
    return tmp_path / "config"


@pytest.fixture
def paths(config_root):
    from crownix_vault.core.config import PersistencePaths

    return PersistencePaths(config_root)


@pytest.fixture
def vault_dir(tmp_path) -> Path:
    d = tmp_path / "v"
    d.mkdir()
    return d


@pytest.fixture
def vault_path(vault_dir) -> Path:
    return vault_dir / "CrownixVault.cxv"


def _make_vault(payload: bytes = b"", **fields) -> bytes:
    """Build a vault buffer by hand (independent of HeaderCodec.encode)."""
    header = {"magic": "CROWNIX_VAULT", "version": 1}
    header.update(fields)
    header_bytes = json.dumps(header).encode("utf-8")
    return struct.pack("<I", len(header_bytes)) + header_bytes + payload


def _make_raw(header_bytes: bytes, payload: bytes = b"", length=None) -> bytes:
    """Build a buffer with an arbitrary header region and length prefix."""
    prefix = len(header_bytes) if length is None else length
    return struct.pack("<I", prefix) + header_bytes + payload


@pytest.fixture
def make_vault():
    return _make_vault


@pytest.fixture
def make_raw():
    return _make_raw
