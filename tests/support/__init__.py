"""Shared test helpers: a throw-away Hugo blog on disk.

``create_blog_sandbox`` lays out ``hugo.toml`` plus
``config/_default/params.yml`` under ``tmp_path`` and isolates the tool's own
settings directory so tests never touch the real per-user settings file.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

import pytest

SETTINGS_DIR_ENV = "LIB_BLOG_CONFIG_SETTINGS_DIR"
BLOG_PATH_ENV = "LIB_BLOG_CONFIG_BLOG_PATH"

SAMPLE_PARAMS = """\
# 站点参数
author: A  # 作者
email: a@x.com
description: "A quiet blog"
menu:
  - name: Home
    url: /
  - name: Posts
    url: /posts/
# 作者信息
social:
  github: https://github.com/a
footer:
  since: 2020
  icon:
    url: heart.svg
animation:
  enable: true  # 动画
"""


@dataclass
class BlogSandbox:
    root: Path
    settings_dir: Path
    env: dict[str, str | None] = field(default_factory=dict)

    @property
    def params_path(self) -> Path:
        return self.root / "config" / "_default" / "params.yml"

    @property
    def backup_dir(self) -> Path:
        return self.params_path.parent / "backups"

    def write_params(self, content: str) -> Path:
        self.params_path.parent.mkdir(parents=True, exist_ok=True)
        self.params_path.write_text(content, encoding="utf-8")
        return self.params_path

    def read_params(self) -> str:
        return self.params_path.read_text(encoding="utf-8")

    def apply_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for key, value in self.env.items():
            if value is None:
                monkeypatch.delenv(key, raising=False)
            else:
                monkeypatch.setenv(key, value)


def create_blog_sandbox(
    tmp_path: Path,
    *,
    params: str | None = SAMPLE_PARAMS,
    site_config: str | None = "hugo.toml",
) -> BlogSandbox:
    """Create a blog under ``tmp_path / "blog"``; ``params=None`` skips params.yml."""

    root = tmp_path / "blog"
    root.mkdir()
    if site_config is not None:
        (root / site_config).write_text('title = "Sandbox"\n', encoding="utf-8")
    settings_dir = tmp_path / "settings"
    sandbox = BlogSandbox(
        root=root,
        settings_dir=settings_dir,
        env={SETTINGS_DIR_ENV: str(settings_dir), BLOG_PATH_ENV: None},
    )
    if params is not None:
        sandbox.write_params(params)
    return sandbox


__all__ = ["BLOG_PATH_ENV", "SAMPLE_PARAMS", "SETTINGS_DIR_ENV", "BlogSandbox", "create_blog_sandbox"]
