"""Definition checks: configuration bugs caught at load/test time, never per request."""

from __future__ import annotations

from collections import Counter

from ..priority import ErrorKind, Scope, coerce_kind, lookup
from .predicates import PREDICATES, referenced_fields
from .schema import ClusterDef, DefinitionIssue


def check_cluster(definition: ClusterDef) -> list[DefinitionIssue]:
    """Return every problem found in a cluster definition."""
    issues: list[DefinitionIssue] = []
    cid = definition.cluster_id
    names = set(definition.field_names)

    def error(rule: str | None, message: str) -> None:
        issues.append(DefinitionIssue(level="error", cluster_id=cid, rule=rule, message=message))

    def warning(rule: str | None, message: str) -> None:
        issues.append(DefinitionIssue(level="warning", cluster_id=cid, rule=rule, message=message))

    for rule_id, count in Counter(r.id for r in definition.rules).items():
        if count > 1:
            error(rule_id, f"rule id declared {count} times")

    for rule in definition.rules:
        if rule.predicate not in PREDICATES:
            error(rule.id, f"unknown predicate {rule.predicate!r}")

        if rule.field is not None and rule.field not in names:
            error(rule.id, f"field {rule.field!r} is not declared in the cluster")

        for name in referenced_fields(rule):
            if str(name) not in names:
                error(rule.id, f"predicate {rule.predicate!r} reads unknown field {name!r}")

        for name in rule.requires:
            if name not in names:
                error(rule.id, f"requires unknown field {name!r}")

        kind = coerce_kind(rule.kind)
        if kind is None:
            warning(rule.id, f"unknown kind {rule.kind!r}; it will be reported as {ErrorKind.FORMAT_INVALID.value}")
        else:
            expected = lookup(kind).scope
            if expected != rule.scope:
                where = "without a field" if rule.scope == Scope.GLOBAL else f"on field {rule.field!r}"
                error(rule.id, f"{kind.value} is {expected.value}-scoped but is declared {where}")

        if rule.summary is None:
            warning(rule.id, "no summary message key")

    for order, count in Counter(r.evaluation_order for r in definition.rules).items():
        if count > 1:
            warning(None, f"evaluation_order {order} is shared by {count} rules")

    if definition.declares(ErrorKind.FIELD_MISSING):
        missing_fields = [r for r in definition.rules if coerce_kind(r.kind) == ErrorKind.FIELD_MISSING]
        if len(missing_fields) > 1 and "consolidated_missing" not in definition.messages:
            warning(None, "several FieldMissing rules but no messages.consolidated_missing key")

    return issues


def has_errors(issues: list[DefinitionIssue]) -> bool:
    return any(i.level == "error" for i in issues)
