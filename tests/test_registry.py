from __future__ import annotations

import logging
from pathlib import Path

import pytest

from formrules.errors import ClusterDefinitionError, UnknownClusterError
from formrules.rules.registry import ClusterRegistry


def _write(path: Path, text: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text, encoding="utf-8")


OVERRIDE = """
cluster_id = "name"
version = 2

[[fields]]
name = "fullName"

[[rules]]
id = "missing"
kind = "FieldMissing"
field = "fullName"
predicate = "field_missing"
summary = "custom.missing"
"""

BROKEN = """
cluster_id = "broken"
version = 1

[[fields]]
name = "a"

[[rules]]
id = "r"
kind = "FieldMissing"
field = "b"
predicate = "field_missing"
summary = "k"
"""


def test_builtin_registry(registry: ClusterRegistry) -> None:
    assert len(registry) == 6
    assert "date_of_birth" in registry
    assert "nope" not in registry
    assert [d.cluster_id for d in registry] == sorted(d.cluster_id for d in registry)
    assert registry.issues == []


def test_get_unknown_cluster(registry: ClusterRegistry) -> None:
    with pytest.raises(UnknownClusterError):
        registry.get("nope")
    with pytest.raises(KeyError):
        registry.get("nope")


def test_extra_directory_overrides_builtin(tmp_path: Path) -> None:
    _write(tmp_path / "name.toml", OVERRIDE)

    registry = ClusterRegistry.load([tmp_path])

    assert len(registry) == 6
    assert registry.get("name").version == 2


def test_without_builtins(tmp_path: Path) -> None:
    _write(tmp_path / "name.toml", OVERRIDE)

    registry = ClusterRegistry.load([tmp_path], include_builtin=False)

    assert [d.cluster_id for d in registry] == ["name"]


def test_missing_directory(tmp_path: Path) -> None:
    with pytest.raises(ClusterDefinitionError, match="not found"):
        ClusterRegistry.load([tmp_path / "missing"])


def test_strict_registry_rejects_errors(tmp_path: Path) -> None:
    _write(tmp_path / "broken.toml", BROKEN)

    with pytest.raises(ClusterDefinitionError, match=r"broken:r"):
        ClusterRegistry.load([tmp_path])


def test_non_strict_registry_keeps_issues(tmp_path: Path) -> None:
    _write(tmp_path / "broken.toml", BROKEN)

    registry = ClusterRegistry.load([tmp_path], strict=False)

    assert "broken" in registry
    assert [i.level for i in registry.issues] == ["error"]


def test_warnings_are_logged(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    _write(tmp_path / "quiet.toml", OVERRIDE.replace('summary = "custom.missing"\n', ""))

    with caplog.at_level(logging.WARNING, logger="formrules.rules.registry"):
        registry = ClusterRegistry.load([tmp_path], include_builtin=False)

    assert [i.level for i in registry.issues] == ["warning"]
    assert "no summary message key" in caplog.text
