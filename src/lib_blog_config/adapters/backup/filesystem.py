"""Filesystem backup store.

Purpose
    Snapshot ``params.yml`` into a colocated ``backups/`` directory before the
    orchestrator overwrites it.

Contents
    - ``backup_filename``: ``<name>.backup.<YYYY-MM-DD_HH-MM-SS>`` for a clock reading.
    - ``FilesystemBackupStore``: implements
      :class:`lib_blog_config.application.ports.BackupStore`.

Behaviour
    * The source must exist; otherwise :class:`NotFound` aborts the write.
    * The backup directory is created recursively on demand.
    * Bytes are copied verbatim; the source is left in place.
    * A name that already exists gets a ``-001``, ``-002`` ... suffix so rapid
      repeated updates never overwrite an earlier backup.
    * No manifest is kept; enumeration is a directory listing.
"""

from __future__ import annotations

import shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from ...domain.errors import ConfigIOError, NotFound
from ...observability import log_error, log_info, make_event

Clock = Callable[[], datetime]

_TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def backup_filename(original_name: str, now: datetime) -> str:
    """Return the backup file name for *original_name* taken at *now*.

    Examples
    --------
    >>> backup_filename("params.yml", datetime(2024, 3, 9, 7, 5, 1))
    'params.yml.backup.2024-03-09_07-05-01'
    """

    return f"{original_name}.backup.{now.strftime(_TIMESTAMP_FORMAT)}"


class FilesystemBackupStore:
    """Copy configuration files into a sibling backup directory."""

    def __init__(self, *, directory_name: str = "backups", clock: Clock | None = None) -> None:
        """Initialise the store.

        Parameters
        ----------
        directory_name:
            Name of the backup directory created next to the source file.
        clock:
            Callable returning the current time; defaults to UTC now. Tests
            inject a fixed clock to exercise name collisions.
        """

        self._directory_name = directory_name
        self._clock = clock or _utc_now

    def backup_dir(self, source: Path) -> Path:
        return source.parent / self._directory_name

    def create_backup(self, source: Path) -> Path:
        """Copy *source* into the backup directory and return the new path.

        Raises
        ------
        NotFound
            When *source* does not exist.
        ConfigIOError
            When the directory cannot be created or the copy fails.
        """

        if not source.is_file():
            log_error("backup_failed", **make_event("backup", str(source), {"error": "source missing"}))
            raise NotFound(f"{source.name} not found: {source.resolve()}")
        directory = self.backup_dir(source)
        try:
            directory.mkdir(parents=True, exist_ok=True)
            target = self._unique_target(directory, backup_filename(source.name, self._clock()))
            shutil.copyfile(source, target)
        except OSError as exc:
            log_error("backup_failed", **make_event("backup", str(source), {"error": str(exc)}))
            raise ConfigIOError(f"Failed to create backup: {exc}") from exc
        log_info("backup_created", **make_event("backup", str(source), {"backup": str(target)}))
        return target

    def list_backups(self, source: Path) -> list[Path]:
        """Return backups of *source*, newest first; empty when none exist."""

        directory = self.backup_dir(source)
        if not directory.is_dir():
            return []
        prefix = f"{source.name}.backup."
        found = [path for path in directory.iterdir() if path.is_file() and path.name.startswith(prefix)]
        return sorted(found, key=lambda path: path.name, reverse=True)

    @staticmethod
    def _unique_target(directory: Path, name: str) -> Path:
        """Return ``directory / name``, adding a counter suffix when it is taken."""

        target = directory / name
        counter = 0
        while target.exists():
            counter += 1
            target = directory / f"{name}-{counter:03d}"
        return target
