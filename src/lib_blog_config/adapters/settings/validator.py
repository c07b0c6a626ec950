"""Blog root validation.

Purpose
    Decide whether a directory looks like a Hugo site this tool can edit
    before the path is remembered.

Contents
    - ``ValidationResult``: outcome with errors and missing relative paths.
    - ``validate_blog_path``: checks existence, directory-ness, a Hugo site
      configuration file, and ``config/_default/params.yml``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

PARAMS_FILE = "config/_default/params.yml"
SITE_CONFIG_CANDIDATES = ("hugo.toml", "hugo.yaml", "hugo.yml", "hugo.json")


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    errors: list[str] = field(default_factory=list)
    missing_files: list[str] = field(default_factory=list)

    def message(self, blog_path: str) -> str:
        """Return a human-readable summary; empty when valid."""

        if self.valid:
            return ""
        if self.missing_files:
            return f'The path "{blog_path}" is not a valid Hugo blog. Missing files: {", ".join(self.missing_files)}'
        return ". ".join(self.errors)


def validate_blog_path(blog_path: str | Path | None) -> ValidationResult:
    """Validate that *blog_path* contains the files this tool edits.

    Examples
    --------
    >>> validate_blog_path("").errors
    ['Blog path is empty']
    """

    if blog_path is None or not str(blog_path).strip():
        return ValidationResult(False, ["Blog path is empty"])
    root = Path(blog_path).expanduser().resolve()
    if not root.exists():
        return ValidationResult(False, [f"Path does not exist: {root}"])
    if not root.is_dir():
        return ValidationResult(False, [f"Path is not a directory: {root}"])

    errors: list[str] = []
    missing: list[str] = []
    if not any((root / name).is_file() for name in SITE_CONFIG_CANDIDATES):
        missing.append(SITE_CONFIG_CANDIDATES[0])
        errors.append(f"Missing required file: {SITE_CONFIG_CANDIDATES[0]}")
    if not (root / PARAMS_FILE).is_file():
        missing.append(PARAMS_FILE)
        errors.append(f"Missing required file: {PARAMS_FILE}")
    return ValidationResult(not missing, errors, missing)
