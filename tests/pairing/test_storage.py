import errno
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from core.errors.exceptions import StorageError
from core.types import ErrorCategory
from pairing.storage import DOCUMENTS_DIR_ENV, PAIRING_FILENAME, PairingFileStore, default_documents_dir

PLIST = '<?xml version="1.0"?>\n<plist version="1.0"><dict><key>HostID</key></dict></plist>\n'


class TestDefaultDocumentsDir:
    def test_env_override(self, monkeypatch, tmp_path):
        monkeypatch.setenv(DOCUMENTS_DIR_ENV, str(tmp_path / "docs"))
        assert default_documents_dir() == tmp_path / "docs"

    def test_home_documents(self, monkeypatch, tmp_path):
        monkeypatch.setenv("HOME", str(tmp_path))
        assert default_documents_dir() == tmp_path / "Documents"


class TestPairingFileStore:
    def test_path(self, tmp_path):
        store = PairingFileStore(tmp_path)
        assert store.documents_dir == tmp_path
        assert store.path == tmp_path / PAIRING_FILENAME
        assert store.path.name == "pairingFile.plist"

    def test_uses_default_dir(self, monkeypatch, tmp_path):
        monkeypatch.setenv(DOCUMENTS_DIR_ENV, str(tmp_path))
        assert PairingFileStore().path == tmp_path / "pairingFile.plist"

    def test_save_creates_file(self, tmp_path):
        store = PairingFileStore(tmp_path)

        path = store.save(PLIST)

        assert path == tmp_path / "pairingFile.plist"
        assert path.read_text(encoding="utf-8") == PLIST
        assert store.exists()
        assert store.read() == PLIST

    def test_save_creates_missing_directory(self, tmp_path):
        store = PairingFileStore(tmp_path / "a" / "b")
        store.save(PLIST)
        assert (tmp_path / "a" / "b" / "pairingFile.plist").is_file()

    def test_save_replaces_existing_file(self, tmp_path):
        (tmp_path / "pairingFile.plist").write_text("old contents that are longer than new")
        store = PairingFileStore(tmp_path)

        store.save("new")

        assert store.read() == "new"

    def test_save_leaves_no_temp_files(self, tmp_path):
        store = PairingFileStore(tmp_path)
        store.save(PLIST)
        store.save(PLIST)
        assert sorted(p.name for p in tmp_path.iterdir()) == ["pairingFile.plist"]

    def test_save_empty_contents(self, tmp_path):
        store = PairingFileStore(tmp_path)
        store.save("")
        assert store.read() == ""

    def test_save_failure_keeps_existing_file(self, tmp_path):
        (tmp_path / "pairingFile.plist").write_text("old")
        store = PairingFileStore(tmp_path)

        with patch("pairing.storage.os.replace", side_effect=OSError(errno.EIO, "I/O error")):
            with pytest.raises(StorageError) as exc_info:
                store.save("new")

        assert exc_info.value.message == "Failed to save pairing file: I/O error"
        assert exc_info.value.category == ErrorCategory.TRANSIENT
        assert store.read() == "old"
        assert sorted(p.name for p in tmp_path.iterdir()) == ["pairingFile.plist"]

    def test_save_into_file_path_fails(self, tmp_path):
        blocker = tmp_path / "not-a-dir"
        blocker.write_text("")
        store = PairingFileStore(blocker)

        with pytest.raises(StorageError) as exc_info:
            store.save(PLIST)

        assert exc_info.value.message.startswith("Failed to save pairing file: ")
        assert isinstance(exc_info.value.cause, OSError)

    def test_permission_denied_is_permanent(self, tmp_path):
        store = PairingFileStore(tmp_path)
        denied = PermissionError(errno.EACCES, "Permission denied")

        with patch("pairing.storage.tempfile.mkstemp", side_effect=denied):
            with pytest.raises(StorageError) as exc_info:
                store.save(PLIST)

        assert exc_info.value.category == ErrorCategory.PERMANENT
        assert exc_info.value.message == "Failed to save pairing file: Permission denied"

    def test_read_missing(self, tmp_path):
        store = PairingFileStore(tmp_path)
        assert store.exists() is False
        assert store.read() is None

    def test_remove(self, tmp_path):
        store = PairingFileStore(tmp_path)
        store.save(PLIST)

        assert store.remove() is True
        assert not store.exists()
        assert store.remove() is False

    def test_custom_filename(self, tmp_path):
        store = PairingFileStore(tmp_path, filename="other.plist")
        store.save(PLIST)
        assert Path(tmp_path, "other.plist").read_text() == PLIST
        assert not os.path.exists(tmp_path / PAIRING_FILENAME)
