"""
Aggregator: reduce raw violations to what the page shows for one cluster.

At most one error summary entry per cluster per request:

1. No violations: the submission is valid.
2. Two or more fields missing: one consolidated message naming them in
   declaration order. When every field is missing the AllFieldsMissing
   message is preferred over "day, month and year".
3. Otherwise the violation with the lowest tier wins, ties going to the
   lowest evaluation_order (the first declared field).
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import replace

from ..locale import MessageLookup, default_messages, join_labels
from ..models import ValidationResult, Violation
from ..priority import ErrorKind, Scope, lookup
from ..rules.schema import ClusterDef
from .highlighter import highlight

logger = logging.getLogger(__name__)

CONSOLIDATED_RULE_ID = "consolidated-missing"
DEFAULT_CONSOLIDATED_KEY = "errors.consolidatedMissing"


def _missing_fields(violations: Sequence[Violation], definition: ClusterDef) -> list[str]:
    names = {v.field for v in violations if v.kind == ErrorKind.FIELD_MISSING and v.field}
    return sorted(names, key=definition.field_position)


def consolidate_missing(
    violations: Sequence[Violation],
    definition: ClusterDef,
    messages: MessageLookup,
) -> Violation:
    """Merge several FieldMissing violations into one message."""
    missing = _missing_fields(violations, definition)
    labels = []
    for name in missing:
        fdef = definition.get_field(name)
        labels.append(messages.lookup(fdef.label) if fdef else name)

    params = {"fields": join_labels(labels)}
    summary = messages.lookup(definition.messages.get("consolidated_missing", DEFAULT_CONSOLIDATED_KEY), params)
    inline_key = definition.messages.get("consolidated_missing_inline")
    inline = messages.lookup(inline_key, params) if inline_key else summary

    merged = [v for v in violations if v.kind == ErrorKind.FIELD_MISSING]
    return Violation(
        kind=ErrorKind.FIELD_MISSING,
        scope=Scope.FIELD_SPECIFIC,
        rule_id=CONSOLIDATED_RULE_ID,
        field=missing[0],
        affected_fields=tuple(missing),
        summary_text=summary,
        inline_text=inline,
        tier=lookup(ErrorKind.FIELD_MISSING).tier,
        evaluation_order=min(v.evaluation_order for v in merged),
    )


def select_violation(violations: Sequence[Violation]) -> Violation:
    """Lowest tier first; evaluation_order breaks ties."""
    return min(violations, key=lambda v: v.sort_key)


def aggregate(
    violations: Sequence[Violation],
    *,
    definition: ClusterDef,
    messages: MessageLookup | None = None,
) -> ValidationResult:
    ordered = tuple(sorted(violations, key=lambda v: v.sort_key))
    if not ordered:
        return ValidationResult(cluster_id=definition.cluster_id)

    messages = default_messages() if messages is None else messages
    missing = _missing_fields(ordered, definition)
    all_missing = [v for v in ordered if v.kind == ErrorKind.ALL_FIELDS_MISSING]

    if len(missing) >= 2:
        if all_missing and set(missing) == set(definition.field_names):
            selected = all_missing[0]
        else:
            selected = consolidate_missing(ordered, definition, messages)
    else:
        selected = select_violation(ordered)

    logger.debug(
        "%s: selected %s (%s, tier %d) from %d violation(s)",
        definition.cluster_id,
        selected.rule_id,
        selected.kind.value,
        selected.tier,
        len(ordered),
    )

    result = ValidationResult(
        cluster_id=definition.cluster_id,
        is_invalid=True,
        selected_violations=(selected,),
        all_violations=ordered,
    )
    return replace(result, highlighted_fields=highlight(result))
