"""
Message lookup.

The engine only needs `lookup(key, params) -> str`. LocaleCatalog is the
default implementation, reading nested JSON from locales/<locale>.json and
interpolating {name} placeholders. An unknown key comes back unchanged, so
a missing translation shows up as its key instead of a blank error.
"""

from __future__ import annotations

import json
import logging
import re
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Protocol

logger = logging.getLogger(__name__)

DEFAULT_LOCALE = "en"
BUILTIN_LOCALE_DIR = Path(__file__).parent / "locales"

_PLACEHOLDER_RE = re.compile(r"\{(\w+)\}")


class MessageLookup(Protocol):
    """Anything that can turn a message key into display text."""

    def lookup(self, key: str, params: Mapping[str, Any] | None = None) -> str:
        ...


def interpolate(template: str, params: Mapping[str, Any] | None) -> str:
    if not params:
        return template

    def _sub(match: re.Match[str]) -> str:
        name = match.group(1)
        return str(params[name]) if name in params else match.group(0)

    return _PLACEHOLDER_RE.sub(_sub, template)


def join_labels(labels: list[str], conjunction: str = "and") -> str:
    """["day"] -> "day"; ["day", "month"] -> "day and month"; three -> "day, month and year"."""
    if not labels:
        return ""
    if len(labels) == 1:
        return labels[0]
    return f"{', '.join(labels[:-1])} {conjunction} {labels[-1]}"


class LocaleCatalog:
    """Translated strings for one locale."""

    def __init__(self, data: Mapping[str, Any], locale: str = DEFAULT_LOCALE):
        self.locale = locale
        self._data = data

    @classmethod
    def load(cls, locale: str = DEFAULT_LOCALE, directory: Path | None = None) -> "LocaleCatalog":
        path = (directory or BUILTIN_LOCALE_DIR) / f"{locale}.json"
        if not path.exists():
            logger.warning("Locale file not found: %s", path)
            return cls({}, locale)
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as e:
            logger.warning("Failed to parse locale file %s: %s", path, e)
            return cls({}, locale)
        if not isinstance(data, dict):
            logger.warning("Locale file %s does not hold an object", path)
            return cls({}, locale)
        return cls(data, locale)

    def _resolve(self, key: str) -> str | None:
        node: Any = self._data
        for part in key.split("."):
            if not isinstance(node, Mapping) or part not in node:
                return None
            node = node[part]
        return node if isinstance(node, str) else None

    def exists(self, key: str) -> bool:
        return self._resolve(key) is not None

    def lookup(self, key: str, params: Mapping[str, Any] | None = None) -> str:
        template = self._resolve(key)
        if template is None:
            logger.debug("Missing message key %s (%s)", key, self.locale)
            return key
        return interpolate(template, params)


_default_catalog: LocaleCatalog | None = None


def default_messages() -> LocaleCatalog:
    """The builtin English catalog, loaded on first use."""
    global _default_catalog
    if _default_catalog is None:
        _default_catalog = LocaleCatalog.load(DEFAULT_LOCALE)
    return _default_catalog
