"""
Settings.

Read from a formrules.toml file when one is given (or found in the working
directory), then overridden by environment variables:

    FORMRULES_LOCALE         locale code, e.g. "en"
    FORMRULES_LOCALE_DIR     directory holding <locale>.json
    FORMRULES_CLUSTER_DIRS   extra cluster definition directories (os.pathsep separated)
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Mapping

from .errors import FormrulesError
from .locale import DEFAULT_LOCALE

CONFIG_FILENAME = "formrules.toml"


@dataclass(frozen=True)
class Settings:
    locale: str = DEFAULT_LOCALE
    locale_dir: Path | None = None
    cluster_dirs: tuple[Path, ...] = field(default_factory=tuple)


def _resolve(base: Path, value: str) -> Path:
    path = Path(value).expanduser()
    return path if path.is_absolute() else (base / path).resolve()


def load_settings(path: Path | None = None, env: Mapping[str, str] | None = None) -> Settings:
    """Load settings; a missing default config file means defaults."""
    import tomllib

    env = os.environ if env is None else env
    data: dict = {}
    base = Path.cwd()

    config_path = path if path is not None else Path.cwd() / CONFIG_FILENAME
    if config_path.exists():
        try:
            data = tomllib.loads(config_path.read_text(encoding="utf-8"))
        except tomllib.TOMLDecodeError as e:
            raise FormrulesError(f"{config_path}: {e}") from e
        base = config_path.parent
    elif path is not None:
        raise FormrulesError(f"Config file not found: {path}")

    section = data.get("formrules", data)
    locale = str(section.get("locale", DEFAULT_LOCALE)).strip() or DEFAULT_LOCALE
    locale_dir = section.get("locale_dir")
    cluster_dirs = section.get("cluster_dirs", [])

    settings_locale_dir = _resolve(base, locale_dir) if isinstance(locale_dir, str) and locale_dir.strip() else None
    settings_cluster_dirs = tuple(
        _resolve(base, d) for d in (cluster_dirs if isinstance(cluster_dirs, list) else []) if str(d).strip()
    )

    if env.get("FORMRULES_LOCALE", "").strip():
        locale = env["FORMRULES_LOCALE"].strip()
    if env.get("FORMRULES_LOCALE_DIR", "").strip():
        settings_locale_dir = Path(env["FORMRULES_LOCALE_DIR"].strip())
    if env.get("FORMRULES_CLUSTER_DIRS", "").strip():
        settings_cluster_dirs = tuple(
            Path(p) for p in env["FORMRULES_CLUSTER_DIRS"].split(os.pathsep) if p.strip()
        )

    return Settings(locale=locale, locale_dir=settings_locale_dir, cluster_dirs=settings_cluster_dirs)
