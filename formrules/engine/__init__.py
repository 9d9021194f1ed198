"""Evaluate, aggregate and highlight one field cluster per request."""

from __future__ import annotations

from collections.abc import Mapping
from datetime import date
from typing import Any

from ..locale import MessageLookup, default_messages
from ..models import Cluster, ValidationResult
from ..rules.predicates import EvaluationContext
from ..rules.schema import ClusterDef
from .aggregator import aggregate
from .evaluator import evaluate
from .highlighter import highlight


def validate_submission(
    definition: ClusterDef,
    submitted: Mapping[str, Any],
    baseline: Mapping[str, Any] | None = None,
    *,
    messages: MessageLookup | None = None,
    today: date | None = None,
) -> ValidationResult:
    """
    Run a submitted form body through a cluster's rules.

    Pure: the same submission, baseline and `today` always give an equal result.
    """
    messages = default_messages() if messages is None else messages
    context = EvaluationContext(today=today) if today is not None else EvaluationContext()
    cluster = Cluster.from_form(definition, submitted, baseline)
    violations = evaluate(cluster, messages=messages, context=context)
    return aggregate(violations, definition=definition, messages=messages)


__all__ = ["aggregate", "evaluate", "highlight", "validate_submission"]
