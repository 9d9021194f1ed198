from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import date
from typing import TYPE_CHECKING, Any, Callable

from .change_detection import is_unchanged
from .dates import is_future_date, is_real_date
from .schema import RuleDef

if TYPE_CHECKING:
    from ..models import Cluster


@dataclass(frozen=True)
class EvaluationContext:
    # Clock used by date rules; pass a fixed date for reproducible results.
    today: date = field(default_factory=date.today)


# True means the rule is violated.
PredicateFn = Callable[["Cluster", RuleDef, EvaluationContext], bool]


def _target(cluster: "Cluster", rule: RuleDef) -> str:
    if rule.field is None:
        raise ValueError(f"Rule {rule.id!r} needs a field")
    return cluster.value(rule.field)


def _date_parts(cluster: "Cluster", rule: RuleDef) -> tuple[str, str, str]:
    params = rule.params
    return (
        cluster.value(str(params.get("day", "day"))),
        cluster.value(str(params.get("month", "month"))),
        cluster.value(str(params.get("year", "year"))),
    )


def predicate_field_missing(cluster: "Cluster", rule: RuleDef, ctx: EvaluationContext) -> bool:
    return _target(cluster, rule) == ""


def predicate_all_fields_missing(cluster: "Cluster", rule: RuleDef, ctx: EvaluationContext) -> bool:
    return cluster.all_empty


def predicate_number_in_range(cluster: "Cluster", rule: RuleDef, ctx: EvaluationContext) -> bool:
    value = _target(cluster, rule)
    if value == "":
        return False
    if not re.fullmatch(r"[0-9]+", value):
        return True
    digits = value.lstrip("0") or "0"
    low = int(rule.params.get("min", 0))
    high = rule.params.get("max")
    # Bound the digit count before int(); very long strings exceed the conversion limit.
    if high is not None:
        if len(digits) > len(str(int(high))):
            return True
    elif len(digits) > len(str(abs(low))):
        return False
    number = int(digits)
    if number < low:
        return True
    return high is not None and number > int(high)


_YEAR_RE = re.compile(r"[1-9][0-9]{3}")


def predicate_four_digit_year(cluster: "Cluster", rule: RuleDef, ctx: EvaluationContext) -> bool:
    value = _target(cluster, rule)
    if value == "":
        return False
    return _YEAR_RE.fullmatch(value) is None


def predicate_matches_pattern(cluster: "Cluster", rule: RuleDef, ctx: EvaluationContext) -> bool:
    value = _target(cluster, rule)
    pattern = rule.params.get("pattern")
    if value == "" or not isinstance(pattern, str):
        return False
    flags = re.IGNORECASE if rule.params.get("ignore_case") else 0
    return re.fullmatch(pattern, value, flags) is None


def predicate_max_length(cluster: "Cluster", rule: RuleDef, ctx: EvaluationContext) -> bool:
    limit = rule.params.get("max")
    if limit is None:
        return False
    return len(_target(cluster, rule)) > int(limit)


_PHONE_SEPARATORS_RE = re.compile(r"[\s\-().]")
_UK_NATIONAL_RE = re.compile(r"0[1-9][0-9]{8,9}")
_INTERNATIONAL_RE = re.compile(r"(?:\+|00)[1-9][0-9]{6,14}")


def is_phone_number(value: str) -> bool:
    """UK national numbers (07700 900123) or international numbers (+44 7700 900123)."""
    compact = _PHONE_SEPARATORS_RE.sub("", value)
    return bool(_UK_NATIONAL_RE.fullmatch(compact) or _INTERNATIONAL_RE.fullmatch(compact))


def predicate_phone_number(cluster: "Cluster", rule: RuleDef, ctx: EvaluationContext) -> bool:
    value = _target(cluster, rule)
    return value != "" and not is_phone_number(value)


_EMAIL_RE = re.compile(r"[^@\s]+@[^@\s]+\.[^@\s.]+")


def predicate_email_address(cluster: "Cluster", rule: RuleDef, ctx: EvaluationContext) -> bool:
    value = _target(cluster, rule)
    return value != "" and _EMAIL_RE.fullmatch(value) is None


def predicate_required_when(cluster: "Cluster", rule: RuleDef, ctx: EvaluationContext) -> bool:
    """
    Field is empty while another field holds a triggering value.

    params: when (field name), and one of equals / contains. Comparison is
    case-insensitive; `contains` looks for the value in a comma-joined list.
    """
    if _target(cluster, rule) != "":
        return False
    trigger = cluster.value(str(rule.params.get("when", ""))).lower()
    if "equals" in rule.params:
        return trigger == str(rule.params["equals"]).strip().lower()
    if "contains" in rule.params:
        wanted = str(rule.params["contains"]).strip().lower()
        return wanted in {part.strip() for part in trigger.split(",")}
    return trigger != ""


def predicate_not_real_date(cluster: "Cluster", rule: RuleDef, ctx: EvaluationContext) -> bool:
    return not is_real_date(*_date_parts(cluster, rule))


def predicate_future_date(cluster: "Cluster", rule: RuleDef, ctx: EvaluationContext) -> bool:
    return is_future_date(*_date_parts(cluster, rule), today=ctx.today)


def predicate_unchanged(cluster: "Cluster", rule: RuleDef, ctx: EvaluationContext) -> bool:
    fields = rule.params.get("fields")
    if isinstance(fields, list) and fields:
        return is_unchanged(cluster, [str(f) for f in fields])
    return is_unchanged(cluster)


PREDICATES: dict[str, PredicateFn] = {
    "field_missing": predicate_field_missing,
    "all_fields_missing": predicate_all_fields_missing,
    "number_in_range": predicate_number_in_range,
    "four_digit_year": predicate_four_digit_year,
    "matches_pattern": predicate_matches_pattern,
    "max_length": predicate_max_length,
    "phone_number": predicate_phone_number,
    "email_address": predicate_email_address,
    "required_when": predicate_required_when,
    "not_real_date": predicate_not_real_date,
    "future_date": predicate_future_date,
    "unchanged": predicate_unchanged,
}

# Predicates that read fields named in params rather than rule.field.
FIELD_PARAMS: dict[str, tuple[str, ...]] = {
    "required_when": ("when",),
    "not_real_date": ("day", "month", "year"),
    "future_date": ("day", "month", "year"),
}


def referenced_fields(rule: RuleDef) -> list[Any]:
    """Field names a rule reads through its params (for definition checks)."""
    names: list[Any] = []
    for key in FIELD_PARAMS.get(rule.predicate, ()):
        names.append(rule.params.get(key, key))
    if rule.predicate == "unchanged" and isinstance(rule.params.get("fields"), list):
        names.extend(rule.params["fields"])
    return names
