"""Tests for BackupSlot: single rotating backup, export-and-clear."""

from crownix_vault.persistence.backup_slot import BackupSlot
from crownix_vault.persistence.results import ErrorKind


class TestBackupIfExists:

    def test_no_primary_is_noop(self, paths, vault_path):
        slot = BackupSlot(paths)
        result = slot.backup_if_exists(vault_path)
        assert result.success is True
        assert result.taken is False
        assert slot.exists() is False

    def test_copies_primary_bytes(self, paths, vault_path, make_vault):
        vault_path.write_bytes(make_vault(b"v1"))
        slot = BackupSlot(paths)

        result = slot.backup_if_exists(vault_path)
        assert result.success is True
        assert result.taken is True
        assert slot.exists() is True
        assert paths.backup_file.read_bytes() == make_vault(b"v1")

    def test_slot_location(self, paths):
        assert BackupSlot(paths).path() == paths.root / "backup" / "vault.bak"
        assert (paths.root / "backup").is_dir()

    def test_rotation_keeps_only_latest(self, paths, vault_path):
        slot = BackupSlot(paths)
        vault_path.write_bytes(b"first")
        slot.backup_if_exists(vault_path)
        vault_path.write_bytes(b"second")
        slot.backup_if_exists(vault_path)

        assert paths.backup_file.read_bytes() == b"second"
        assert [p.name for p in (paths.root / "backup").iterdir()] == ["vault.bak"]

    def test_primary_not_modified(self, paths, vault_path):
        vault_path.write_bytes(b"original")
        BackupSlot(paths).backup_if_exists(vault_path)
        assert vault_path.read_bytes() == b"original"

    def test_directory_as_primary_is_noop(self, paths, vault_dir):
        slot = BackupSlot(paths)
        assert slot.backup_if_exists(vault_dir).success is True
        assert slot.exists() is False

    def test_write_failure_returned(self, paths, vault_path, monkeypatch):
        from crownix_vault.persistence import backup_slot as slot_mod
        from crownix_vault.persistence.fileio import TempWriteError

        def boom(path, data, fsync=True):
            raise TempWriteError("Failed to create temp file")

        monkeypatch.setattr(slot_mod, "write_atomic", boom)
        vault_path.write_bytes(b"x")
        result = BackupSlot(paths).backup_if_exists(vault_path)

        assert result.success is False
        assert result.error == ErrorKind.IO_FAILURE
        assert "Failed to back up vault file" in result.message
        assert result.taken is False


class TestExportAndClear:

    def test_no_backup(self, paths, tmp_path):
        result = BackupSlot(paths).export_and_clear(tmp_path / "out.cxv")
        assert result.success is False
        assert result.message == "No backup available"
        assert not (tmp_path / "out.cxv").exists()

    def test_export_moves_content(self, paths, vault_path, tmp_path):
        vault_path.write_bytes(b"backed up")
        slot = BackupSlot(paths)
        slot.backup_if_exists(vault_path)

        dest = tmp_path / "out.cxv"
        result = slot.export_and_clear(dest)

        assert result.success is True
        assert result.path == dest
        assert dest.read_bytes() == b"backed up"
        assert slot.exists() is False

    def test_second_export_fails(self, paths, vault_path, tmp_path):
        vault_path.write_bytes(b"once")
        slot = BackupSlot(paths)
        slot.backup_if_exists(vault_path)

        assert slot.export_and_clear(tmp_path / "a.cxv").success is True
        assert slot.export_and_clear(tmp_path / "b.cxv").success is False

    def test_copy_failure_keeps_slot(self, paths, vault_path, tmp_path):
        vault_path.write_bytes(b"keep me")
        slot = BackupSlot(paths)
        slot.backup_if_exists(vault_path)

        result = slot.export_and_clear(tmp_path / "missing_dir" / "out.cxv")

        assert result.success is False
        assert result.error == ErrorKind.IO_FAILURE
        assert result.message.startswith("Failed to export backup")
        assert paths.backup_file.read_bytes() == b"keep me"

    def test_unlink_failure_still_succeeds(self, paths, vault_path, tmp_path, monkeypatch):
        vault_path.write_bytes(b"data")
        slot = BackupSlot(paths)
        slot.backup_if_exists(vault_path)

        original_unlink = type(paths.backup_file).unlink

        def failing_unlink(self, *args, **kwargs):
            if self.name == "vault.bak":
                raise PermissionError("locked")
            return original_unlink(self, *args, **kwargs)

        monkeypatch.setattr(type(paths.backup_file), "unlink", failing_unlink)
        result = slot.export_and_clear(tmp_path / "out.cxv")

        assert result.success is True
        assert (tmp_path / "out.cxv").read_bytes() == b"data"
        assert slot.exists() is True

    def test_failure_mid_copy_leaves_no_partial_file(self, paths, vault_path, tmp_path, monkeypatch):
        from crownix_vault.persistence import fileio

        vault_path.write_bytes(b"x" * 4096)
        slot = BackupSlot(paths)
        slot.backup_if_exists(vault_path)

        def disk_full(fd):
            raise OSError(28, "No space left on device")

        monkeypatch.setattr(fileio.os, "fsync", disk_full)
        dest = tmp_path / "out.cxv"
        result = slot.export_and_clear(dest)

        assert result.success is False
        assert not dest.exists()
        assert not fileio.temp_path_for(dest).exists()
        assert paths.backup_file.read_bytes() == b"x" * 4096

    def test_rename_failure_leaves_no_partial_file(self, paths, vault_path, tmp_path, monkeypatch):
        from crownix_vault.persistence import fileio

        vault_path.write_bytes(b"data")
        slot = BackupSlot(paths)
        slot.backup_if_exists(vault_path)

        def failing_replace(src, dst):
            raise OSError("rename refused")

        monkeypatch.setattr(fileio.os, "replace", failing_replace)
        dest = tmp_path / "out.cxv"
        result = slot.export_and_clear(dest)

        assert result.success is False
        assert list(tmp_path.glob("out.cxv*")) == []
        assert slot.exists() is True
