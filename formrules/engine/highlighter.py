"""Highlighter: which inputs get the "has error" styling."""

from __future__ import annotations

from ..models import ValidationResult


def highlight(result: ValidationResult) -> tuple[str, ...]:
    """
    Field names to highlight for an aggregated result.

    Reads only the selected violations, never re-running a rule:
    - global: every field in the cluster
    - field-specific: only that field
    - consolidated missing fields: exactly the fields it names
    """
    if not result.is_invalid:
        return ()
    names: list[str] = []
    for violation in result.selected_violations:
        for name in violation.affected_fields:
            if name not in names:
                names.append(name)
    return tuple(names)
