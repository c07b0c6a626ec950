"""Per-user settings location resolution.

Purpose
-------
Decide where the tool keeps its own ``settings.json`` (the remembered blog
path) using per-platform conventions: XDG on Linux, Application Support on
macOS, AppData on Windows.

Contents
--------
* :func:`default_env_prefix` – environment prefix for a slug.
* :class:`DefaultSettingsLocator` – resolves the settings directory and file.

System Role
-----------
Feeds :class:`lib_blog_config.adapters.settings.json_store.JsonSettingsStore`.
Respects environment overrides so tests and portable installs can redirect the
settings directory.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

from ...observability import log_debug

SETTINGS_FILENAME = "settings.json"


def default_env_prefix(slug: str) -> str:
    """Return the canonical environment prefix for *slug*.

    Examples
    --------
    >>> default_env_prefix('lib-blog-config')
    'LIB_BLOG_CONFIG'
    """

    return slug.replace("-", "_").upper()


class DefaultSettingsLocator:
    """Resolve the per-user directory that stores ``settings.json``."""

    def __init__(
        self,
        *,
        vendor: str = "bitranox",
        app: str = "Blog Config",
        slug: str = "lib-blog-config",
        env: dict[str, str] | None = None,
        platform: str | None = None,
    ) -> None:
        """Store context required to resolve filesystem locations.

        Parameters
        ----------
        vendor / app / slug:
            Naming context injected into platform-specific directory structures.
        env:
            Optional environment mapping that overrides ``os.environ`` values
            (useful for deterministic tests).
        platform:
            Platform identifier (``sys.platform`` clone). Defaults to the
            current interpreter platform.
        """

        self.vendor = vendor
        self.application = app
        self.slug = slug
        self.env = {**os.environ, **(env or {})}
        self.platform = platform or sys.platform

    @property
    def env_prefix(self) -> str:
        return default_env_prefix(self.slug)

    def settings_dir(self) -> Path:
        """Return the directory holding ``settings.json``.

        ``<PREFIX>_SETTINGS_DIR`` wins over every platform default.

        Examples
        --------
        >>> locator = DefaultSettingsLocator(env={"XDG_CONFIG_HOME": "/tmp/xdg"}, platform="linux")
        >>> locator.settings_dir().as_posix()
        '/tmp/xdg/lib-blog-config'
        """

        override = self.env.get(f"{self.env_prefix}_SETTINGS_DIR")
        if override:
            directory = Path(override)
        elif self.platform.startswith("linux"):
            directory = self._linux()
        elif self.platform == "darwin":
            directory = self._macos()
        elif self.platform.startswith("win"):
            directory = self._windows()
        else:
            directory = Path.home() / f".{self.slug}"
        log_debug("settings_location", operation="settings", path=str(directory))
        return directory

    def settings_file(self) -> Path:
        return self.settings_dir() / SETTINGS_FILENAME

    def _linux(self) -> Path:
        xdg = self.env.get("XDG_CONFIG_HOME")
        base = Path(xdg) if xdg else Path.home() / ".config"
        return base / self.slug

    def _macos(self) -> Path:
        return Path.home() / "Library" / "Application Support" / self.vendor / self.application

    def _windows(self) -> Path:
        appdata = Path(self.env.get("APPDATA", Path.home() / "AppData" / "Roaming"))
        return appdata / self.vendor / self.application
