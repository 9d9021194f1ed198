from __future__ import annotations

import logging

import pytest

from formrules.priority import (
    FALLBACK_ENTRY,
    PRIORITY_TABLE,
    ErrorKind,
    PriorityEntry,
    Scope,
    check_priority_table,
    kinds_in_priority_order,
    lookup,
)


def test_every_kind_resolves() -> None:
    for kind in ErrorKind:
        assert lookup(kind) == PRIORITY_TABLE[kind]


def test_tiers_and_scopes() -> None:
    assert lookup(ErrorKind.ALL_FIELDS_MISSING) == PriorityEntry(5, Scope.GLOBAL)
    assert lookup(ErrorKind.FIELD_MISSING) == PriorityEntry(10, Scope.FIELD_SPECIFIC)
    assert lookup(ErrorKind.FORMAT_INVALID) == PriorityEntry(15, Scope.FIELD_SPECIFIC)
    assert lookup(ErrorKind.BUSINESS_RULE_VIOLATED) == PriorityEntry(20, Scope.GLOBAL)
    assert lookup(ErrorKind.FUTURE_VALUE_NOT_ALLOWED) == PriorityEntry(25, Scope.GLOBAL)
    assert lookup(ErrorKind.UNCHANGED) == PriorityEntry(30, Scope.GLOBAL)


def test_lookup_accepts_string_values() -> None:
    assert lookup("Unchanged") == PRIORITY_TABLE[ErrorKind.UNCHANGED]


def test_unknown_kind_falls_back_to_format_invalid(caplog: pytest.LogCaptureFixture) -> None:
    with caplog.at_level(logging.WARNING, logger="formrules.priority"):
        entry = lookup("SomethingNew")

    assert entry == FALLBACK_ENTRY
    assert entry.tier == PRIORITY_TABLE[ErrorKind.FORMAT_INVALID].tier
    assert entry.scope == Scope.FIELD_SPECIFIC
    assert "SomethingNew" in caplog.text


def test_builtin_table_is_sound() -> None:
    assert check_priority_table() == []


def test_no_two_kinds_share_tier_and_scope() -> None:
    pairs = [(e.tier, e.scope) for e in PRIORITY_TABLE.values()]
    assert len(pairs) == len(set(pairs))


def test_check_reports_missing_kind() -> None:
    table = dict(PRIORITY_TABLE)
    del table[ErrorKind.UNCHANGED]

    problems = check_priority_table(table)

    assert problems == ["missing priority entry for Unchanged"]


def test_check_reports_ambiguous_entries() -> None:
    table = dict(PRIORITY_TABLE)
    table[ErrorKind.UNCHANGED] = PriorityEntry(25, Scope.GLOBAL)

    problems = check_priority_table(table)

    assert len(problems) == 1
    assert "Unchanged" in problems[0]
    assert "FutureValueNotAllowed" in problems[0]


def test_kinds_in_priority_order() -> None:
    assert kinds_in_priority_order() == [
        ErrorKind.ALL_FIELDS_MISSING,
        ErrorKind.FIELD_MISSING,
        ErrorKind.FORMAT_INVALID,
        ErrorKind.BUSINESS_RULE_VIOLATED,
        ErrorKind.FUTURE_VALUE_NOT_ALLOWED,
        ErrorKind.UNCHANGED,
    ]
