"""Application-layer ports describing collaborator responsibilities.

Purpose
-------
Define the structural contracts the composition root depends on so concrete
adapters (settings store, YAML document model, filesystem backups) can be
swapped in tests without monkeypatching.

Contents
--------
* :class:`BlogPathProvider` – yields the configured blog root path.
* :class:`DocumentCodec` – parses text into a value and re-serialises it while
  keeping the last parsed document structure.
* :class:`BackupStore` – snapshots a file before it is overwritten.

System Role
-----------
These protocols enforce Dependency Inversion: :class:`lib_blog_config.core.ConfigService`
only talks to them, never to ``ruamel.yaml`` or ``shutil`` directly.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, Protocol, runtime_checkable


@runtime_checkable
class BlogPathProvider(Protocol):
    """Expose the currently configured blog root directory.

    Why
    ----
    Path persistence lives outside the engine; the engine only needs the
    current value and treats ``None`` as a hard ``NotConfigured`` error.
    """

    def get_blog_path(self) -> str | None:
        """Return the absolute blog root or ``None`` when nothing is configured."""


@runtime_checkable
class DocumentCodec(Protocol):
    """Parse and re-serialise configuration text with structure retention."""

    def parse(self, text: str, *, source: str | None = None) -> dict[str, Any]:
        """Parse *text*, remember its structure, and return the plain value."""

    def serialize(self, value: Mapping[str, Any]) -> str:
        """Render *value*, reusing the remembered structure when available."""

    def reset(self) -> None:
        """Forget the remembered structure."""


@runtime_checkable
class BackupStore(Protocol):
    """Copy a file aside before it is overwritten."""

    def create_backup(self, source: Path) -> Path:
        """Copy *source* into the backup directory and return the copy's path."""

    def list_backups(self, source: Path) -> list[Path]:
        """Return existing backups of *source*, newest first."""
