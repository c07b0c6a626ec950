"""Public package surface for ``lib_blog_config``.

Read and update a Hugo blog's ``config/_default/params.yml`` while keeping its
comments, key order, and quoting intact. Import :class:`ConfigService` with a
blog path provider (:class:`JsonSettingsStore` or :class:`StaticBlogPath`) and
call :meth:`ConfigService.read_config` / :meth:`ConfigService.update_config`.
"""

from __future__ import annotations

from .adapters.settings.json_store import JsonSettingsStore
from .core import (
    BackupResult,
    ConfigService,
    ReadConfigResult,
    SaveConfigResult,
    StaticBlogPath,
)
from .domain.config import DEFAULT_CONFIG, ConfigValue
from .domain.errors import ConfigError, ConfigIOError, InvalidUpdate, NotConfigured, NotFound, ParseError
from .observability import bind_trace_id, get_logger

__all__ = [
    "DEFAULT_CONFIG",
    "BackupResult",
    "ConfigError",
    "ConfigIOError",
    "ConfigService",
    "ConfigValue",
    "InvalidUpdate",
    "JsonSettingsStore",
    "NotConfigured",
    "NotFound",
    "ParseError",
    "ReadConfigResult",
    "SaveConfigResult",
    "StaticBlogPath",
    "bind_trace_id",
    "get_logger",
]
