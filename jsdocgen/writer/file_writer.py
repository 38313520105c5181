"""Atomic writer for source files.

Content is written to a temporary file next to the target, read back to
validate it, and moved over the target with ``os.replace`` only after a
backup of the original exists. A batch of files is committed all or
nothing: if any file fails, every file already replaced is restored from
its backup.
"""

import logging
import os
import shutil
import tempfile
from datetime import UTC, datetime
from pathlib import Path
from typing import Dict, List, Tuple

logger = logging.getLogger(__name__)

# Free space required on top of the content size
DISK_SPACE_MARGIN = 1.1


class FileWriter:
    """Writes source files atomically.

    Only files under ``base_path`` (the current directory by default) may be
    read or written. Each write checks free disk space, validates the staged
    content by reading it back, and keeps a backup of the original until the
    replacement is committed.
    """

    def __init__(self, base_path: str | None = None):
        self.base_path = Path(base_path or Path.cwd()).resolve()

    def _validate_path(self, filepath: str) -> Path:
        """Resolve ``filepath``, which must exist below the base directory.

        Raises
        ------
        FileNotFoundError
            If the file does not exist
        ValueError
            If the file lies outside the base directory
        """
        resolved = Path(filepath).resolve()
        if not resolved.exists():
            raise FileNotFoundError(f"File not found: {filepath}")
        if not resolved.is_relative_to(self.base_path):
            raise ValueError(
                f"Refusing to write '{filepath}': path is outside allowed directory '{self.base_path}'"
            )
        return resolved

    def _check_disk_space(self, file_path: Path, required_bytes: int) -> None:
        free = shutil.disk_usage(file_path.parent).free
        needed = int(required_bytes * DISK_SPACE_MARGIN)
        if free < needed:
            raise OSError(f"Insufficient disk space for '{file_path}': {needed} bytes needed, {free} free")

    def _validate_write(self, file_path: Path, expected_content: str) -> None:
        """Read ``file_path`` back and compare it with what was written.

        Raises
        ------
        OSError
            If the file cannot be read back or differs from ``expected_content``
        """
        with file_path.open(encoding="utf-8", newline="") as f:
            written = f.read()
        if written != expected_content:
            raise OSError(
                f"Write validation failed for '{file_path}': "
                f"wrote {len(expected_content)} characters, read back {len(written)}"
            )

    def _safe_restore(self, backup_path: Path, target_path: Path) -> None:
        try:
            shutil.copy2(backup_path, target_path)
        except OSError as e:
            raise OSError(
                f"CRITICAL: could not restore '{target_path}' from '{backup_path}': {e}. "
                f"The backup is kept for manual recovery."
            ) from e

    def _backup_path(self, file_path: Path) -> Path:
        timestamp = datetime.now(UTC).strftime("%Y%m%d_%H%M%S_%f")
        backup_path = file_path.with_name(f"{file_path.name}.{timestamp}.bak")
        if backup_path.exists():
            raise OSError(f"Backup '{backup_path}' already exists")
        return backup_path

    def _stage(self, file_path: Path, content: str) -> Path:
        """Write ``content`` to a validated temporary file beside ``file_path``."""
        self._check_disk_space(file_path, len(content.encode("utf-8")))
        # Temp file must be in same directory for atomic rename to work
        temp_fd, temp_path_str = tempfile.mkstemp(
            dir=file_path.parent, prefix=f".{file_path.name}.", suffix=".tmp"
        )
        temp_path = Path(temp_path_str)
        try:
            with os.fdopen(temp_fd, "w", encoding="utf-8", newline="") as f:
                f.write(content)
            self._validate_write(temp_path, content)
        except Exception:
            temp_path.unlink(missing_ok=True)
            raise
        return temp_path

    def read(self, filepath: str) -> str:
        """Read a file within the base directory, keeping its line endings."""
        file_path = self._validate_path(filepath)
        with file_path.open(encoding="utf-8", newline="") as f:
            return f.read()

    def write(self, filepath: str, content: str) -> None:
        """Atomically replace the content of one file.

        Raises
        ------
        ValueError
            If the filepath is outside the allowed base directory
        FileNotFoundError
            If the file does not exist
        OSError
            If disk space is short, validation fails or restore fails
        """
        self.write_all({filepath: content})

    def write_all(self, contents: Dict[str, str]) -> None:
        """Replace the content of several files, all or nothing.

        Every new content is first staged and validated in a temporary file.
        Files are then backed up and replaced one by one; if any step fails,
        the files already replaced are restored from their backups. Backups
        are removed once every file is committed.

        Parameters
        ----------
        contents : dict
            New content keyed by file path.

        Raises
        ------
        ValueError
            If a filepath is outside the allowed base directory
        FileNotFoundError
            If a file does not exist
        OSError
            If staging, replacing or restoring fails
        """
        targets = [(self._validate_path(filepath), content) for filepath, content in contents.items()]

        staged: List[Tuple[Path, Path]] = []
        committed: List[Tuple[Path, Path]] = []
        try:
            for file_path, content in targets:
                staged.append((file_path, self._stage(file_path, content)))

            for file_path, temp_path in staged:
                backup_path = self._backup_path(file_path)
                shutil.copy2(file_path, backup_path)
                committed.append((file_path, backup_path))
                temp_path.replace(file_path)

        except Exception:
            for file_path, backup_path in reversed(committed):
                self._safe_restore(backup_path, file_path)
                backup_path.unlink(missing_ok=True)
            logger.warning("Rolled back %d file(s) after a failed write", len(committed))
            raise
        finally:
            for _, temp_path in staged:
                if temp_path.exists():
                    temp_path.unlink()

        for _, backup_path in committed:
            backup_path.unlink(missing_ok=True)
