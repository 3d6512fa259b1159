# catalogsync/core/backup_manager.py

"""
Manages catalog backups with automatic rotation.

Creates timestamped copies of a catalog file before it is overwritten and
removes the oldest copies once the configured maximum is exceeded.
"""

from __future__ import annotations

import logging
import os
import shutil
from datetime import datetime
from pathlib import Path

__all__ = ["BackupManager"]

logger = logging.getLogger("catalogsync.backup_manager")


class BackupManager:
    """
    Manages creation and rotation of file backups.

    Backups are named ``<stem>_<unix-timestamp>[_<n>]<suffix>``.
    """

    def __init__(self, backup_dir: Path | None = None, max_backups: int = 5):
        """
        Initializes the BackupManager.

        Args:
            backup_dir: Directory for storing backups. If None, backups are
                created next to the original file.
            max_backups: Number of backups kept per file.
        """
        self.backup_dir = backup_dir
        self.max_backups = max_backups

    def _target_dir(self, file_path: Path) -> Path:
        return self.backup_dir if self.backup_dir else file_path.parent

    def create_backup(self, file_path: Path) -> Path | None:
        """
        Creates a timestamped backup of a file and rotates old ones.

        Args:
            file_path: Path to the file to back up.

        Returns:
            Path to the created backup file, or None if the source file doesn't
            exist or the copy failed.
        """
        if not file_path.exists():
            return None

        target_dir = self._target_dir(file_path)
        timestamp = str(int(datetime.now().timestamp()))
        backup_path = target_dir / f"{file_path.stem}_{timestamp}{file_path.suffix}"
        counter = 1
        while backup_path.exists():
            backup_path = target_dir / f"{file_path.stem}_{timestamp}_{counter}{file_path.suffix}"
            counter += 1

        try:
            target_dir.mkdir(parents=True, exist_ok=True)
            shutil.copy2(file_path, backup_path)
            logger.info("Backup created: %s", backup_path.name)
            self._rotate_backups(file_path)
            return backup_path
        except OSError as backup_error:
            logger.error("Backup of %s failed: %s", file_path.name, backup_error)
            return None

    def list_backups(self, file_path: Path) -> list[Path]:
        """
        Lists existing backups of a file, newest first.

        Args:
            file_path: The original file path.

        Returns:
            Backup paths sorted by modification time, newest first.
        """
        target_dir = self._target_dir(file_path)
        if not target_dir.is_dir():
            return []
        backups = [
            candidate
            for candidate in target_dir.glob(f"{file_path.stem}_*{file_path.suffix}")
            if candidate != file_path and candidate.name[len(file_path.stem) + 1 :][:1].isdigit()
        ]
        return sorted(backups, key=lambda p: (p.stat().st_mtime, p.name), reverse=True)

    def _rotate_backups(self, file_path: Path) -> None:
        """Removes backups exceeding max_backups for the given file."""
        for old in self.list_backups(file_path)[self.max_backups :]:
            try:
                os.remove(old)
                logger.info("Backup rotated: %s", old.name)
            except OSError as delete_error:
                logger.error("Could not delete backup %s: %s", old.name, delete_error)
