from __future__ import annotations

import json
from pathlib import Path

from lib_blog_config.adapters.settings.json_store import JsonSettingsStore
from lib_blog_config.adapters.settings.locations import DefaultSettingsLocator
from tests.support import create_blog_sandbox


def _store(tmp_path: Path, environ: dict[str, str] | None = None) -> JsonSettingsStore:
    return JsonSettingsStore(tmp_path / "settings" / "settings.json", environ=environ or {})


def test_missing_file_loads_defaults(tmp_path: Path) -> None:
    store = _store(tmp_path)
    assert store.get_blog_path() is None
    assert store.has_blog_path() is False
    assert store.last_updated() is None


def test_set_valid_path_persists_resolved_path(tmp_path: Path) -> None:
    sandbox = create_blog_sandbox(tmp_path)
    store = _store(tmp_path)
    validation = store.set_blog_path(sandbox.root)
    assert validation.valid
    assert store.get_blog_path() == str(sandbox.root.resolve())
    saved = json.loads(store.settings_path.read_text(encoding="utf-8"))
    assert saved["blogPath"] == str(sandbox.root.resolve())
    assert saved["lastUpdated"]
    assert _store(tmp_path).get_blog_path() == str(sandbox.root.resolve())


def test_set_invalid_path_is_not_persisted(tmp_path: Path) -> None:
    store = _store(tmp_path)
    validation = store.set_blog_path(tmp_path / "nowhere")
    assert not validation.valid
    assert store.get_blog_path() is None
    assert not store.settings_path.exists()


def test_clear_blog_path(tmp_path: Path) -> None:
    sandbox = create_blog_sandbox(tmp_path)
    store = _store(tmp_path)
    store.set_blog_path(sandbox.root)
    store.clear_blog_path()
    assert store.get_blog_path() is None
    assert json.loads(store.settings_path.read_text(encoding="utf-8"))["blogPath"] is None


def test_corrupt_file_falls_back_to_defaults(tmp_path: Path) -> None:
    path = tmp_path / "settings" / "settings.json"
    path.parent.mkdir()
    path.write_text("{not json", encoding="utf-8")
    store = JsonSettingsStore(path, environ={})
    assert store.get_blog_path() is None


def test_environment_override_wins(tmp_path: Path) -> None:
    sandbox = create_blog_sandbox(tmp_path)
    store = _store(tmp_path, {"LIB_BLOG_CONFIG_BLOG_PATH": str(sandbox.root)})
    assert store.get_blog_path() == str(sandbox.root.resolve())


def test_default_location_follows_locator(tmp_path: Path) -> None:
    locator = DefaultSettingsLocator(env={"LIB_BLOG_CONFIG_SETTINGS_DIR": str(tmp_path / "cfg")})
    store = JsonSettingsStore(locator=locator, environ={})
    assert store.settings_path == tmp_path / "cfg" / "settings.json"
