"""Composition root for ``lib_blog_config``.

Purpose
-------
Provide the two operations exposed to the route layer, :meth:`ConfigService.read_config`
and :meth:`ConfigService.update_config`, by orchestrating the settings
collaborator, the YAML document model, the default resolver, the update merger,
and the backup store against a single ``params.yml``.

Contents
--------
* :data:`PARAMS_RELATIVE_PATH` / :data:`BACKUP_DIRNAME` – fixed file layout.
* :class:`ReadConfigResult` / :class:`SaveConfigResult` / :class:`BackupResult`
  – typed outcomes; no exception crosses the service boundary.
* :class:`StaticBlogPath` – fixed-path provider for scripts and tests.
* :class:`ConfigService` – the orchestrator.

System Role
-----------
Read: resolve root -> read text -> parse -> apply defaults -> return.
Write: resolve root -> back up -> read (retaining the document) -> merge ->
serialise against the retained document -> atomically replace the file.
Any failure short-circuits the remaining steps; an already-created backup is
left on disk and the original file stays untouched.
"""

from __future__ import annotations

import os
import threading
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable
from uuid import uuid4

from .adapters.backup.filesystem import FilesystemBackupStore
from .adapters.document.yaml_document import DocumentSession
from .application.defaults import apply_defaults, resolve_origins
from .application.merge import merge_update
from .application.ports import BackupStore, BlogPathProvider, DocumentCodec
from .domain.config import ConfigValue
from .domain.errors import ConfigError, ConfigIOError, InvalidUpdate, NotConfigured, NotFound
from .observability import bind_trace_id, log_debug, log_error, log_info, make_event

PARAMS_RELATIVE_PATH = Path("config") / "_default" / "params.yml"
BACKUP_DIRNAME = "backups"

_LOCKS_GUARD = threading.Lock()
_PATH_LOCKS: dict[str, threading.Lock] = {}


def _lock_for(path: Path) -> threading.Lock:
    """Return the process-wide lock serialising writes to *path*."""

    key = os.path.normcase(str(path))
    with _LOCKS_GUARD:
        lock = _PATH_LOCKS.get(key)
        if lock is None:
            lock = _PATH_LOCKS[key] = threading.Lock()
        return lock


@dataclass(frozen=True)
class _Outcome:
    success: bool
    error: str | None = None
    kind: str | None = None
    status_code: int = 200

    @classmethod
    def failure(cls, exc: ConfigError) -> Any:
        return cls(success=False, error=str(exc), kind=exc.kind, status_code=exc.status_code)


@dataclass(frozen=True)
class ReadConfigResult(_Outcome):
    """Outcome of :meth:`ConfigService.read_config`."""

    config: ConfigValue | None = None

    def to_payload(self) -> dict[str, Any]:
        if self.success and self.config is not None:
            return {"success": True, "config": self.config.as_dict()}
        return {"success": False, "error": self.error}


@dataclass(frozen=True)
class SaveConfigResult(_Outcome):
    """Outcome of :meth:`ConfigService.update_config`."""

    backup_path: str | None = None

    def to_payload(self) -> dict[str, Any]:
        if self.success:
            return {"success": True, "backupPath": self.backup_path}
        return {"success": False, "error": self.error}


@dataclass(frozen=True)
class BackupResult(_Outcome):
    """Outcome of :meth:`ConfigService.create_backup`."""

    backup_path: str | None = None


@dataclass(frozen=True)
class StaticBlogPath:
    """:class:`BlogPathProvider` returning a fixed path (``None`` means unset)."""

    blog_path: str | None

    def get_blog_path(self) -> str | None:
        return self.blog_path


class ConfigService:
    """Read and update a blog's ``params.yml`` with backup-before-write.

    Why
    ----
    The route layer needs two calls that never raise and always leave either
    a fully written file plus a backup, or the original file untouched.

    Parameters
    ----------
    provider:
        Source of the configured blog root.
    backups:
        Backup store; defaults to :class:`FilesystemBackupStore`.
    session_factory:
        Builds the document codec for each request. A fresh session per
        request keeps unrelated requests from sharing a retained document.
    """

    def __init__(
        self,
        provider: BlogPathProvider,
        *,
        backups: BackupStore | None = None,
        session_factory: Callable[[], DocumentCodec] = DocumentSession,
    ) -> None:
        self._provider = provider
        self._backups = backups or FilesystemBackupStore(directory_name=BACKUP_DIRNAME)
        self._session_factory = session_factory

    def params_path(self) -> Path | None:
        """Return ``<root>/config/_default/params.yml`` or ``None`` when unset."""

        blog_path = self._provider.get_blog_path()
        if not blog_path:
            return None
        return Path(blog_path) / PARAMS_RELATIVE_PATH

    def backup_dir(self) -> Path | None:
        """Return the ``backups`` directory beside ``params.yml``.

        Why
        ----
        Callers listing or pruning backups need the location without creating
        a backup first.

        Returns
        -------
        Path | None
            ``<blog>/config/_default/backups``, or ``None`` when no blog path is
            configured. The directory may not exist yet.

        Examples
        --------
        >>> ConfigService(StaticBlogPath("/srv/blog")).backup_dir().as_posix()
        '/srv/blog/config/_default/backups'
        >>> ConfigService(StaticBlogPath(None)).backup_dir() is None
        True
        """

        params = self.params_path()
        return params.parent / BACKUP_DIRNAME if params is not None else None

    def config_exists(self) -> bool:
        params = self.params_path()
        return params is not None and params.is_file()

    def list_backups(self) -> list[Path]:
        """Return existing backups, newest first; empty when no root is set."""

        params = self.params_path()
        if params is None:
            return []
        return self._backups.list_backups(params)

    def read_config(self) -> ReadConfigResult:
        """Read, parse, and complete the configuration. Never mutates storage."""

        bind_trace_id(uuid4().hex)
        try:
            config = self._read(self._session_factory())
        except ConfigError as exc:
            return ReadConfigResult.failure(exc)
        except Exception as exc:  # noqa: BLE001 - nothing may cross the service boundary
            log_error("config_read_failed", operation="read", path=None, error=repr(exc))
            return ReadConfigResult.failure(ConfigError(f"Failed to read config: {exc}"))
        return ReadConfigResult(success=True, config=config)

    def create_backup(self) -> BackupResult:
        """Snapshot the current file without modifying it."""

        bind_trace_id(uuid4().hex)
        try:
            params = self._require_params_path()
            backup = self._backups.create_backup(params)
        except ConfigError as exc:
            return BackupResult.failure(exc)
        return BackupResult(success=True, backup_path=str(backup))

    def update_config(self, updates: Mapping[str, Any]) -> SaveConfigResult:
        """Back up, merge *updates*, and rewrite ``params.yml`` preserving comments.

        Returns
        -------
        SaveConfigResult
            ``success`` with ``backup_path`` only when the file was fully
            written and the backup exists.
        """

        bind_trace_id(uuid4().hex)
        try:
            backup = self._update(updates)
        except ConfigError as exc:
            log_error("config_update_failed", operation="update", path=None, kind=exc.kind, error=str(exc))
            return SaveConfigResult.failure(exc)
        except Exception as exc:  # noqa: BLE001 - nothing may cross the service boundary
            log_error("config_update_failed", operation="update", path=None, kind="unexpected", error=repr(exc))
            return SaveConfigResult.failure(ConfigError(f"Failed to update config: {exc}"))
        return SaveConfigResult(success=True, backup_path=str(backup))

    def _update(self, updates: Mapping[str, Any]) -> Path:
        if not isinstance(updates, Mapping):
            raise InvalidUpdate("Configuration object is required")
        params = self._require_params_path()
        with _lock_for(params):
            backup = self._backups.create_backup(params)
            session = self._session_factory()
            current = self._read(session)
            merged = merge_update(current.as_dict(), updates)
            self._write_text(params, session.serialize(merged))
        return backup

    def _read(self, session: DocumentCodec) -> ConfigValue:
        params = self._require_params_path()
        if not params.is_file():
            raise NotFound(f"{params.name} not found: {params.resolve()}")
        try:
            text = params.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            raise ConfigIOError(f"Failed to read config: {exc}") from exc
        log_debug("config_file_read", **make_event("read", str(params), {"size": len(text)}))
        parsed = session.parse(text, source=str(params))
        completed = apply_defaults(parsed)
        return ConfigValue(completed, resolve_origins(parsed, completed))

    def _require_params_path(self) -> Path:
        params = self.params_path()
        if params is None:
            raise NotConfigured("Blog path not configured")
        return params

    @staticmethod
    def _write_text(params: Path, text: str) -> None:
        """Replace *params* atomically via a sibling temporary file."""

        temp = params.with_name(f"{params.name}.tmp")
        try:
            with open(temp, "w", encoding="utf-8", newline="") as handle:
                handle.write(text)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(temp, params)
        except OSError as exc:
            temp.unlink(missing_ok=True)
            raise ConfigIOError(f"Failed to write config: {exc}") from exc
        log_info("config_written", **make_event("write", str(params), {"size": len(text)}))


__all__ = [
    "BACKUP_DIRNAME",
    "PARAMS_RELATIVE_PATH",
    "BackupResult",
    "ConfigService",
    "ReadConfigResult",
    "SaveConfigResult",
    "StaticBlogPath",
]
