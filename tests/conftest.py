"""Pytest configuration and fixtures."""

from datetime import date

import pytest

from formrules.locale import LocaleCatalog
from formrules.rules.registry import ClusterRegistry
from formrules.rules.schema import ClusterDef


@pytest.fixture
def today() -> date:
    """Fixed clock so "future" checks do not drift."""
    return date(2026, 1, 15)


@pytest.fixture
def messages() -> LocaleCatalog:
    """The builtin English catalog."""
    return LocaleCatalog.load("en")


@pytest.fixture
def registry() -> ClusterRegistry:
    """Every builtin cluster definition."""
    return ClusterRegistry.load()


@pytest.fixture
def date_of_birth(registry: ClusterRegistry) -> ClusterDef:
    return registry.get("date_of_birth")
