from __future__ import annotations

import os

import settings


def test_explicit_config_path_wins(tmp_path) -> None:
    (tmp_path / "config.json").write_text("{}", encoding="utf-8")
    assert settings.resolve_config_path("/etc/factscope.json", cwd=str(tmp_path)) == "/etc/factscope.json"


def test_working_directory_config_is_used(tmp_path) -> None:
    (tmp_path / "config.json").write_text("{}", encoding="utf-8")
    assert settings.resolve_config_path(None, cwd=str(tmp_path)) == str(tmp_path / "config.json")


def test_falls_back_to_checkout_config(tmp_path) -> None:
    expected = os.path.join(settings.PROJECT_ROOT, "config.json")
    assert settings.resolve_config_path(None, cwd=str(tmp_path)) == expected
