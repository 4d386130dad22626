"""Tests for settings loading, app paths and the token file."""

from __future__ import annotations

import os
import stat
from pathlib import Path

import pytest
from _pytest.monkeypatch import MonkeyPatch
from receiptscope.runtime.config import DEFAULT_API_BASE_URL, ClientSettings, load_settings
from receiptscope.runtime.paths import get_paths
from receiptscope.runtime.token_store import FileTokenStore


def test_defaults_without_config_file(tmp_path: Path) -> None:
    assert load_settings(tmp_path / "missing.toml") == ClientSettings()
    assert ClientSettings().api_base_url == DEFAULT_API_BASE_URL


def test_settings_from_toml(tmp_path: Path) -> None:
    config = tmp_path / "config.toml"
    config.write_text(
        '[service]\napi_base_url = "https://receipts.example.com/"\ntimeout = 5\n\n[display]\nbar_ceiling = 80\n',
        encoding="utf-8",
    )

    settings = load_settings(config)

    assert settings.api_base_url == "https://receipts.example.com"
    assert settings.timeout == 5.0
    assert settings.bar_ceiling == 80


def test_environment_overrides_file(tmp_path: Path, monkeypatch: MonkeyPatch) -> None:
    config = tmp_path / "config.toml"
    config.write_text('[service]\napi_base_url = "https://file.example.com"\n', encoding="utf-8")
    monkeypatch.setenv("RECEIPTSCOPE_API_URL", "http://env.example.com")
    monkeypatch.setenv("RECEIPTSCOPE_TIMEOUT", "2.5")

    settings = load_settings(config)

    assert settings.api_base_url == "http://env.example.com"
    assert settings.timeout == 2.5


def test_non_positive_bar_ceiling_is_rejected(tmp_path: Path) -> None:
    config = tmp_path / "config.toml"
    config.write_text("[display]\nbar_ceiling = 0\n", encoding="utf-8")

    with pytest.raises(ValueError, match="bar_ceiling"):
        load_settings(config)


def test_default_config_path_follows_app_home(isolated_home: Path) -> None:
    paths = get_paths()

    assert paths.root == isolated_home.resolve()
    assert paths.config_file == isolated_home.resolve() / "config.toml"

    isolated_home.mkdir(parents=True)
    paths.config_file.write_text("[display]\nbar_ceiling = 60\n", encoding="utf-8")
    assert load_settings().bar_ceiling == 60


def test_file_token_store_round_trip(isolated_home: Path) -> None:
    store = FileTokenStore()
    assert store.load() is None

    store.save("tok-1")

    assert store.path.parent == isolated_home.resolve()
    assert store.load() == "tok-1"
    assert stat.S_IMODE(store.path.stat().st_mode) == 0o600

    store.clear()
    assert store.load() is None
    store.clear()


def test_blank_token_file_counts_as_absent(tmp_path: Path) -> None:
    path = tmp_path / "token"
    path.write_text("  \n", encoding="utf-8")

    assert FileTokenStore(path).load() is None


def test_token_file_is_created_private(tmp_path: Path, monkeypatch: MonkeyPatch) -> None:
    def no_chmod(*args: object, **kwargs: object) -> None:
        raise AssertionError("token file must be private from creation")

    monkeypatch.setattr(os, "chmod", no_chmod)
    old_umask = os.umask(0)
    try:
        store = FileTokenStore(tmp_path / "token")
        store.save("tok-1")
    finally:
        os.umask(old_umask)

    assert stat.S_IMODE(store.path.stat().st_mode) == 0o600


def test_token_file_with_wide_mode_is_tightened(tmp_path: Path) -> None:
    path = tmp_path / "token"
    path.write_text("old", encoding="utf-8")
    path.chmod(0o644)

    FileTokenStore(path).save("tok-2")

    assert stat.S_IMODE(path.stat().st_mode) == 0o600
    assert FileTokenStore(path).load() == "tok-2"
