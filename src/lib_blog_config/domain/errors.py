"""Domain-level exception hierarchy.

Purpose
-------
Expose the stable error taxonomy shared by adapters, the composition root, and
the CLI. The hierarchy lives in the domain layer so outer layers may depend on
it without the domain depending on them.

Contents
--------
* :class:`ConfigError` – umbrella base class for every engine failure.
* :class:`NotConfigured` – no blog root path has been configured.
* :class:`NotFound` – the configuration file or a required path is missing.
* :class:`ParseError` – the configuration text is not valid YAML or does not
  describe a mapping.
* :class:`ConfigIOError` – filesystem failure while reading, copying or writing.
* :class:`InvalidUpdate` – an update request that is not a mapping.

System Role
-----------
Adapters raise these exceptions; :class:`lib_blog_config.core.ConfigService`
catches them at its boundary and converts them into result values carrying
``kind`` and ``status_code`` so callers never see a raised exception.
"""

from __future__ import annotations

from typing import ClassVar


class ConfigError(Exception):
    """Base type for all exceptions emitted by ``lib_blog_config``.

    Why
    ----
    Provide a single catch-all type for the orchestrator boundary.

    What
    ----
    ``kind`` names the taxonomy entry reported to callers and ``status_code``
    is the HTTP-style class a route layer should answer with.
    """

    kind: ClassVar[str] = "ConfigError"
    status_code: ClassVar[int] = 500


class NotConfigured(ConfigError):
    """Raised when no blog root path is available from the settings layer.

    Surfaced verbatim and never retried; the operator has to pick a blog first.
    """

    kind = "NotConfigured"
    status_code = 400


class NotFound(ConfigError):
    """Raised when the configuration file (or another required path) is absent.

    The message always includes the resolved absolute path for diagnosis.
    """

    kind = "NotFound"
    status_code = 400


class ParseError(ConfigError):
    """Raised when configuration text cannot be parsed into a mapping.

    Typical Sources
    ---------------
    :mod:`ruamel.yaml` scanner/parser errors and documents whose root is a list
    or scalar. No partial recovery is attempted.
    """

    kind = "ParseError"
    status_code = 400


class ConfigIOError(ConfigError):
    """Wraps :class:`OSError` raised during read, copy, mkdir, or write steps."""

    kind = "IOError"
    status_code = 500


class InvalidUpdate(ConfigError):
    """Raised when an update request is not a mapping of fields."""

    kind = "InvalidUpdate"
    status_code = 400
