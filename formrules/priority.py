"""
Priority table for validation errors.

Every ErrorKind maps to exactly one (tier, scope) pair. Lower tiers are shown
first. The table is checked once at import time: a kind without a row, or two
kinds that the aggregator could not tell apart, is a configuration bug.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum

from .errors import PriorityTableError

logger = logging.getLogger(__name__)


class ErrorKind(str, Enum):
    """Closed set of validation error kinds."""

    ALL_FIELDS_MISSING = "AllFieldsMissing"
    FIELD_MISSING = "FieldMissing"
    FORMAT_INVALID = "FormatInvalid"
    BUSINESS_RULE_VIOLATED = "BusinessRuleViolated"  # e.g. not a real calendar date
    FUTURE_VALUE_NOT_ALLOWED = "FutureValueNotAllowed"
    UNCHANGED = "Unchanged"


class Scope(str, Enum):
    """Whether a violation belongs to the whole cluster or to one field."""

    GLOBAL = "global"
    FIELD_SPECIFIC = "field"


@dataclass(frozen=True)
class PriorityEntry:
    tier: int
    scope: Scope


PRIORITY_TABLE: dict[ErrorKind, PriorityEntry] = {
    ErrorKind.ALL_FIELDS_MISSING: PriorityEntry(tier=5, scope=Scope.GLOBAL),
    ErrorKind.FIELD_MISSING: PriorityEntry(tier=10, scope=Scope.FIELD_SPECIFIC),
    ErrorKind.FORMAT_INVALID: PriorityEntry(tier=15, scope=Scope.FIELD_SPECIFIC),
    ErrorKind.BUSINESS_RULE_VIOLATED: PriorityEntry(tier=20, scope=Scope.GLOBAL),
    ErrorKind.FUTURE_VALUE_NOT_ALLOWED: PriorityEntry(tier=25, scope=Scope.GLOBAL),
    ErrorKind.UNCHANGED: PriorityEntry(tier=30, scope=Scope.GLOBAL),
}

# Unrecognised kinds are surfaced as a format problem on a single field.
FALLBACK_ENTRY = PriorityEntry(
    tier=PRIORITY_TABLE[ErrorKind.FORMAT_INVALID].tier,
    scope=Scope.FIELD_SPECIFIC,
)


def coerce_kind(kind: ErrorKind | str) -> ErrorKind | None:
    """Resolve a kind given as an enum member or its string value."""
    if isinstance(kind, ErrorKind):
        return kind
    try:
        return ErrorKind(str(kind).strip())
    except ValueError:
        return None


def lookup(kind: ErrorKind | str) -> PriorityEntry:
    """
    Return the tier and scope for an error kind.

    Unknown kinds fall back to FALLBACK_ENTRY instead of being dropped.
    """
    resolved = coerce_kind(kind)
    if resolved is None or resolved not in PRIORITY_TABLE:
        logger.warning("Unknown error kind %r; treating as %s", kind, ErrorKind.FORMAT_INVALID.value)
        return FALLBACK_ENTRY
    return PRIORITY_TABLE[resolved]


def check_priority_table(table: dict[ErrorKind, PriorityEntry] | None = None) -> list[str]:
    """Return a list of problems with a priority table (empty when sound)."""
    table = PRIORITY_TABLE if table is None else table
    problems: list[str] = []

    for kind in ErrorKind:
        if kind not in table:
            problems.append(f"missing priority entry for {kind.value}")

    seen: dict[tuple[int, Scope], ErrorKind] = {}
    for kind, entry in table.items():
        key = (entry.tier, entry.scope)
        if key in seen:
            problems.append(
                f"{kind.value} shares tier {entry.tier} / {entry.scope.value} with {seen[key].value}"
            )
        else:
            seen[key] = kind

    return problems


def kinds_in_priority_order() -> list[ErrorKind]:
    """All kinds, lowest tier first."""
    return sorted(PRIORITY_TABLE, key=lambda k: PRIORITY_TABLE[k].tier)


_problems = check_priority_table()
if _problems:
    raise PriorityTableError("; ".join(_problems))
