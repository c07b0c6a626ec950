"""JSON-backed tool settings.

Purpose
-------
Persist the one piece of state the tool owns: which blog directory is being
edited. Implements :class:`lib_blog_config.application.ports.BlogPathProvider`
for the orchestrator.

Contents
--------
* :class:`SettingsData` – ``{"blogPath", "lastUpdated"}`` record.
* :class:`JsonSettingsStore` – load/save plus blog-path accessors.

Behaviour
---------
* A missing or unreadable settings file loads as defaults.
* ``<PREFIX>_BLOG_PATH`` in the environment wins over the stored path.
* ``set_blog_path`` validates first and persists only valid, resolved paths.
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path

from ...domain.errors import ConfigIOError
from ...observability import log_debug, log_error, log_info, make_event
from .locations import DefaultSettingsLocator
from .validator import ValidationResult, validate_blog_path


@dataclass
class SettingsData:
    blogPath: str | None = None
    lastUpdated: str | None = None


class JsonSettingsStore:
    """Remember the configured blog path in a ``settings.json`` file."""

    def __init__(
        self,
        settings_file: Path | None = None,
        *,
        locator: DefaultSettingsLocator | None = None,
        environ: dict[str, str] | None = None,
    ) -> None:
        """Initialise the store and load whatever is on disk.

        Parameters
        ----------
        settings_file:
            Explicit settings file; defaults to the locator's per-user file.
        locator:
            Location resolver; a default one is built when omitted.
        environ:
            Mapping consulted for the blog path override. Defaults to
            :data:`os.environ`.
        """

        self._locator = locator or DefaultSettingsLocator()
        self._path = settings_file or self._locator.settings_file()
        self._environ = environ if environ is not None else os.environ
        self._settings = SettingsData()
        self.load()

    @property
    def settings_path(self) -> Path:
        return self._path

    def load(self) -> SettingsData:
        """Reload settings from disk, falling back to defaults on any problem."""

        self._settings = SettingsData()
        if not self._path.is_file():
            return self._settings
        try:
            parsed = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
            log_error("settings_load_failed", **make_event("settings", str(self._path), {"error": str(exc)}))
            return self._settings
        if isinstance(parsed, dict):
            self._settings = SettingsData(
                blogPath=parsed.get("blogPath") or None,
                lastUpdated=parsed.get("lastUpdated") or None,
            )
        log_debug("settings_loaded", **make_event("settings", str(self._path)))
        return self._settings

    def save(self) -> None:
        """Write the in-memory settings to ``settings.json``.

        Why
        ----
        ``set_blog_path`` and ``clear_blog_path`` must survive a restart.

        What
        ----
        Creates the settings directory when missing and writes the two fields
        as indented JSON.

        Raises
        ------
        ConfigIOError
            When the directory or the file cannot be written.
        """

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(json.dumps(asdict(self._settings), indent=2), encoding="utf-8")
        except OSError as exc:
            raise ConfigIOError(f"Failed to save settings: {exc}") from exc
        log_info("settings_saved", **make_event("settings", str(self._path)))

    def get_blog_path(self) -> str | None:
        """Return the environment override or the stored blog path."""

        override = self._environ.get(f"{self._locator.env_prefix}_BLOG_PATH")
        if override:
            return str(Path(override).expanduser().resolve())
        return self._settings.blogPath

    def has_blog_path(self) -> bool:
        return self.get_blog_path() is not None

    def last_updated(self) -> str | None:
        return self._settings.lastUpdated

    def set_blog_path(self, blog_path: str | Path) -> ValidationResult:
        """Validate *blog_path* and persist it when valid."""

        validation = validate_blog_path(blog_path)
        if validation.valid:
            self._settings.blogPath = str(Path(blog_path).expanduser().resolve())
            self._settings.lastUpdated = _now_iso()
            self.save()
        return validation

    def clear_blog_path(self) -> None:
        self._settings.blogPath = None
        self._settings.lastUpdated = _now_iso()
        self.save()


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()
