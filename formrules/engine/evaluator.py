"""
Evaluator: run a cluster's rules against one submission.

Field rules run for every field independently. Cluster-wide (global) rules
run once, only when the fields they require are filled in, lowest tier
first, and stop at the first one that fires: a value that is not a real date
is never also reported as in the future or unchanged.
"""

from __future__ import annotations

import logging

from ..errors import ClusterDefinitionError
from ..locale import MessageLookup, default_messages
from ..models import Cluster, Field, Violation
from ..priority import ErrorKind, Scope, coerce_kind, lookup
from ..rules.predicates import PREDICATES, EvaluationContext
from ..rules.schema import RuleDef

logger = logging.getLogger(__name__)


def _fires(rule: RuleDef, cluster: Cluster, context: EvaluationContext) -> bool:
    fn = PREDICATES.get(rule.predicate)
    if fn is None:
        raise ClusterDefinitionError(
            f"{cluster.definition.cluster_id}:{rule.id} uses unknown predicate {rule.predicate!r}"
        )
    try:
        return bool(fn(cluster, rule, context))
    except KeyError as e:
        raise ClusterDefinitionError(f"{cluster.definition.cluster_id}:{rule.id} {e.args[0]}") from e


def _field(cluster: Cluster, rule: RuleDef, name: str) -> Field:
    try:
        return cluster.get(name)
    except KeyError as e:
        raise ClusterDefinitionError(f"{cluster.definition.cluster_id}:{rule.id} {e.args[0]}") from e


def _label(cluster: Cluster, name: str | None, messages: MessageLookup) -> str:
    fdef = cluster.definition.get_field(name) if name else None
    return messages.lookup(fdef.label) if fdef else ""


def build_violation(rule: RuleDef, cluster: Cluster, messages: MessageLookup) -> Violation:
    """Turn a fired rule into a Violation with its display text resolved."""
    kind = coerce_kind(rule.kind) or ErrorKind.FORMAT_INVALID
    entry = lookup(rule.kind)

    if entry.scope == Scope.GLOBAL:
        affected = cluster.field_names
    else:
        owner = rule.field or (rule.requires[0] if rule.requires else cluster.field_names[0])
        affected = (owner,)

    params = {"field": _label(cluster, affected[0] if len(affected) == 1 else None, messages)}
    summary_key = rule.summary or f"errors.{kind.value}"
    summary = messages.lookup(summary_key, params)
    if rule.inline == "":
        inline = ""
    elif rule.inline is None:
        inline = summary
    else:
        inline = messages.lookup(rule.inline, params)

    return Violation(
        kind=kind,
        scope=entry.scope,
        rule_id=rule.id,
        field=affected[0] if entry.scope == Scope.FIELD_SPECIFIC else None,
        affected_fields=affected,
        summary_text=summary,
        inline_text=inline,
        tier=entry.tier,
        evaluation_order=rule.evaluation_order,
    )


def evaluate(
    cluster: Cluster,
    *,
    messages: MessageLookup | None = None,
    context: EvaluationContext | None = None,
) -> list[Violation]:
    """Return every violation for this submission (empty when valid)."""
    messages = default_messages() if messages is None else messages
    context = EvaluationContext() if context is None else context
    definition = cluster.definition
    violations: list[Violation] = []

    # "Everything is empty" belongs to AllFieldsMissing when the cluster has one.
    suppress_missing = cluster.all_empty and definition.declares(ErrorKind.ALL_FIELDS_MISSING)

    for rule in definition.field_rules:
        if suppress_missing and coerce_kind(rule.kind) == ErrorKind.FIELD_MISSING:
            continue
        if _fires(rule, cluster, context):
            violations.append(build_violation(rule, cluster, messages))

    for rule in definition.global_rules:
        unmet = [name for name in rule.requires if _field(cluster, rule, name).is_empty]
        if unmet:
            logger.debug("%s: skipping %s, empty: %s", definition.cluster_id, rule.id, ", ".join(unmet))
            continue
        if _fires(rule, cluster, context):
            violations.append(build_violation(rule, cluster, messages))
            break

    logger.debug(
        "%s: %d violation(s) %s",
        definition.cluster_id,
        len(violations),
        [v.rule_id for v in violations],
    )
    return violations
