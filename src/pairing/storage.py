"""
Local pairing file storage.

The pairing file lives at ``<documents>/pairingFile.plist``. Writes go to a
temp file in the same directory and are moved into place with
``os.replace`` so readers never see a partial file.
"""

import logging
import os
import tempfile
from pathlib import Path

from core.errors.exceptions import StorageError, classify_os_error

logger = logging.getLogger(__name__)

PAIRING_FILENAME = "pairingFile.plist"
DOCUMENTS_DIR_ENV = "PAIRING_DOCUMENTS_DIR"


def default_documents_dir() -> Path:
    """PAIRING_DOCUMENTS_DIR if set, otherwise ~/Documents."""
    override = os.getenv(DOCUMENTS_DIR_ENV)
    if override:
        return Path(override).expanduser()
    return Path.home() / "Documents"


class PairingFileStore:
    """Reads and atomically replaces the pairing file."""

    def __init__(self, documents_dir: str | Path | None = None, filename: str = PAIRING_FILENAME):
        self._documents_dir = (
            Path(documents_dir).expanduser() if documents_dir else default_documents_dir()
        )
        self._filename = filename

    @property
    def documents_dir(self) -> Path:
        return self._documents_dir

    @property
    def path(self) -> Path:
        return self._documents_dir / self._filename

    def exists(self) -> bool:
        return self.path.is_file()

    def read(self) -> str | None:
        if not self.exists():
            return None
        return self.path.read_text(encoding="utf-8")

    def remove(self) -> bool:
        """Delete the pairing file. Returns False if there was none."""
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        logger.info("Removed pairing file", extra={"path": str(self.path)})
        return True

    def save(self, contents: str) -> Path:
        """
        Replace the pairing file with ``contents``.

        Returns:
            Path of the written file

        Raises:
            StorageError: If the directory or file cannot be written
        """
        path = self.path
        replaced_existing = path.exists()
        temp_path: Path | None = None

        try:
            path.parent.mkdir(parents=True, exist_ok=True)

            fd, temp_name = tempfile.mkstemp(
                prefix=f".{self._filename}.", suffix=".tmp", dir=path.parent
            )
            temp_path = Path(temp_name)
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(contents)
                f.flush()
                os.fsync(f.fileno())

            # Atomic replace
            os.replace(temp_path, path)
            temp_path = None

        except OSError as e:
            logger.error(
                "Failed to save pairing file",
                extra={
                    "path": str(path),
                    "error_type": type(e).__name__,
                    "error_message": str(e),
                },
            )
            raise StorageError(
                f"Failed to save pairing file: {e.strerror or e}",
                category=classify_os_error(e),
                cause=e,
                context={"path": str(path)},
            ) from e

        finally:
            if temp_path is not None:
                temp_path.unlink(missing_ok=True)

        logger.info(
            "Saved pairing file",
            extra={
                "path": str(path),
                "bytes_written": len(contents.encode("utf-8")),
                "replaced_existing": replaced_existing,
            },
        )
        return path


__all__ = [
    "PairingFileStore",
    "default_documents_dir",
    "PAIRING_FILENAME",
    "DOCUMENTS_DIR_ENV",
]
