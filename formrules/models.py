"""Data models for one validation pass."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from .priority import ErrorKind, Scope
from .rules.schema import ClusterDef, FieldDef


def safe_string(value: Any) -> str:
    """Coerce a raw form value to a string without failing."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return ",".join(safe_string(v) for v in value)
    return str(value)


def _sanitise(value: str, mode: str) -> str:
    value = value.strip()
    if mode == "upper":
        return value.upper()
    return value


@dataclass(frozen=True)
class Field:
    """A user-editable input within a cluster."""

    name: str
    raw_value: str
    original_value: str
    sanitise: str = "trim"

    @property
    def value(self) -> str:
        """Submitted value, trimmed and sanitised."""
        return _sanitise(self.raw_value, self.sanitise)

    @property
    def baseline(self) -> str:
        """Baseline value, trimmed only."""
        return self.original_value.strip()

    @property
    def is_empty(self) -> bool:
        return self.value == ""


@dataclass(frozen=True)
class Cluster:
    """Fields that together form one logical value, built fresh per request."""

    definition: ClusterDef
    fields: tuple[Field, ...]

    @classmethod
    def from_form(
        cls,
        definition: ClusterDef,
        submitted: Mapping[str, Any],
        baseline: Mapping[str, Any] | None = None,
    ) -> "Cluster":
        """
        Build a cluster from a submitted form body and a baseline snapshot.

        Submitted values are read by each field's form key. Baseline values are
        read by the field's baseline key, falling back to its logical name so a
        plain {"day": ..., "month": ...} snapshot also works.
        """
        baseline = baseline or {}
        built: list[Field] = []
        for fdef in definition.fields:
            built.append(
                Field(
                    name=fdef.name,
                    raw_value=safe_string(submitted.get(fdef.input)),
                    original_value=safe_string(_baseline_value(baseline, fdef)),
                    sanitise=fdef.sanitise,
                )
            )
        return cls(definition=definition, fields=tuple(built))

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    def get(self, name: str) -> Field:
        for f in self.fields:
            if f.name == name:
                return f
        raise KeyError(f"Field {name!r} is not part of cluster {self.definition.cluster_id!r}")

    def value(self, name: str) -> str:
        return self.get(name).value

    @property
    def all_empty(self) -> bool:
        return all(f.is_empty for f in self.fields)

    @property
    def empty_fields(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields if f.is_empty)


def _baseline_value(baseline: Mapping[str, Any], fdef: FieldDef) -> Any:
    if fdef.baseline in baseline:
        return baseline[fdef.baseline]
    return baseline.get(fdef.name)


@dataclass(frozen=True)
class Violation:
    """The outcome of one rule firing. Never persisted."""

    kind: ErrorKind
    scope: Scope
    rule_id: str
    field: str | None
    affected_fields: tuple[str, ...]
    summary_text: str
    inline_text: str
    tier: int
    evaluation_order: int = 0

    @property
    def is_global(self) -> bool:
        return self.scope == Scope.GLOBAL

    @property
    def sort_key(self) -> tuple[int, int]:
        return (self.tier, self.evaluation_order)


@dataclass(frozen=True)
class ValidationResult:
    """What the aggregator hands to the render layer."""

    cluster_id: str
    is_invalid: bool = False
    selected_violations: tuple[Violation, ...] = ()
    highlighted_fields: tuple[str, ...] = ()
    all_violations: tuple[Violation, ...] = ()

    @property
    def selected(self) -> Violation | None:
        return self.selected_violations[0] if self.selected_violations else None
