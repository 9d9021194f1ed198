from __future__ import annotations

import os
from pathlib import Path

import pytest

from formrules.config import Settings, load_settings
from formrules.errors import FormrulesError


def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


def test_defaults_without_config_file(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)

    assert load_settings(env={}) == Settings()


def test_reads_formrules_toml_in_working_directory(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _write(tmp_path / "formrules.toml", 'locale = "cy"\n')
    monkeypatch.chdir(tmp_path)

    assert load_settings(env={}).locale == "cy"


def test_relative_paths_resolve_against_config_file(tmp_path: Path) -> None:
    config = tmp_path / "conf" / "formrules.toml"
    _write(
        config,
        """
[formrules]
locale = "en"
locale_dir = "locales"
cluster_dirs = ["clusters", "/srv/shared"]
""",
    )

    settings = load_settings(config, env={})

    assert settings.locale_dir == (tmp_path / "conf" / "locales").resolve()
    assert settings.cluster_dirs == ((tmp_path / "conf" / "clusters").resolve(), Path("/srv/shared"))


def test_environment_overrides_file(tmp_path: Path) -> None:
    config = tmp_path / "formrules.toml"
    _write(config, 'locale = "en"\ncluster_dirs = ["a"]\n')
    env = {
        "FORMRULES_LOCALE": "cy",
        "FORMRULES_LOCALE_DIR": "/opt/locales",
        "FORMRULES_CLUSTER_DIRS": os.pathsep.join(["/x", "/y"]),
    }

    settings = load_settings(config, env=env)

    assert settings.locale == "cy"
    assert settings.locale_dir == Path("/opt/locales")
    assert settings.cluster_dirs == (Path("/x"), Path("/y"))


def test_blank_environment_values_are_ignored(tmp_path: Path) -> None:
    config = tmp_path / "formrules.toml"
    _write(config, 'locale = "cy"\n')

    assert load_settings(config, env={"FORMRULES_LOCALE": "  "}).locale == "cy"


def test_explicit_missing_config_raises(tmp_path: Path) -> None:
    with pytest.raises(FormrulesError, match="not found"):
        load_settings(tmp_path / "missing.toml", env={})


def test_invalid_config_raises(tmp_path: Path) -> None:
    config = tmp_path / "formrules.toml"
    _write(config, "locale = \n")

    with pytest.raises(FormrulesError):
        load_settings(config, env={})
