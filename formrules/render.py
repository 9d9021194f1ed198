"""
GOV.UK error view model.

Turns a ValidationResult into the shape the error summary and inline error
components expect:

    {
        "formIsInvalid": True,
        "errorSummaryList": [{"text": "...", "href": "#dateOfBirth-day"}],
        "inputErrors": {"dateOfBirth-day": "..."},
        "highlight": {"day": True, "month": False, "year": False},
    }
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from .models import ValidationResult, Violation
from .rules.schema import ClusterDef


@dataclass(frozen=True)
class ErrorSummaryItem:
    text: str
    href: str


@dataclass(frozen=True)
class FormErrorView:
    form_is_invalid: bool
    error_summary_list: tuple[ErrorSummaryItem, ...] = ()
    input_errors: dict[str, str] = field(default_factory=dict)
    highlight: dict[str, bool] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Template context, keyed the way the njk templates read it."""
        return {
            "formIsInvalid": self.form_is_invalid,
            "errorSummaryList": [{"text": item.text, "href": item.href} for item in self.error_summary_list],
            "inputErrors": dict(self.input_errors),
            "highlight": dict(self.highlight),
        }


def _href(violation: Violation, definition: ClusterDef) -> str:
    if violation.is_global or not violation.affected_fields:
        return f"#{definition.anchor}"
    fdef = definition.get_field(violation.affected_fields[0])
    return f"#{fdef.input if fdef else violation.affected_fields[0]}"


def build_error_view(definition: ClusterDef, result: ValidationResult) -> FormErrorView:
    highlight = {name: name in result.highlighted_fields for name in definition.field_names}
    if not result.is_invalid:
        return FormErrorView(form_is_invalid=False, highlight=highlight)

    summary: list[ErrorSummaryItem] = []
    input_errors: dict[str, str] = {}
    for violation in result.selected_violations:
        summary.append(ErrorSummaryItem(text=violation.summary_text, href=_href(violation, definition)))
        for name in violation.affected_fields:
            if name not in result.highlighted_fields:
                continue
            fdef = definition.get_field(name)
            input_errors.setdefault(fdef.input if fdef else name, violation.inline_text)

    return FormErrorView(
        form_is_invalid=True,
        error_summary_list=tuple(summary),
        input_errors=input_errors,
        highlight=highlight,
    )
