from __future__ import annotations

from dataclasses import dataclass
from dataclasses import field as dataclass_field
from typing import Any, Literal

from ..priority import ErrorKind, Scope, lookup


Sanitiser = Literal["trim", "upper"]
IssueLevel = Literal["error", "warning"]


@dataclass(frozen=True)
class FieldDef:
    name: str
    input: str
    label: str
    baseline: str
    sanitise: Sanitiser = "trim"


@dataclass(frozen=True)
class RuleDef:
    id: str
    kind: ErrorKind
    predicate: str
    field: str | None = None  # None for rules that belong to the whole cluster
    params: dict[str, Any] = dataclass_field(default_factory=dict)
    summary: str | None = None
    inline: str | None = None
    requires: tuple[str, ...] = ()
    evaluation_order: int = 0

    @property
    def scope(self) -> Scope:
        return Scope.GLOBAL if self.field is None else Scope.FIELD_SPECIFIC

    @property
    def tier(self) -> int:
        return lookup(self.kind).tier


@dataclass(frozen=True)
class ClusterDef:
    cluster_id: str
    version: int
    anchor: str
    description: str | None = None
    fields: tuple[FieldDef, ...] = ()
    rules: tuple[RuleDef, ...] = ()
    messages: dict[str, str] = dataclass_field(default_factory=dict)

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(f.name for f in self.fields)

    def get_field(self, name: str) -> FieldDef | None:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def field_position(self, name: str) -> int:
        for index, f in enumerate(self.fields):
            if f.name == name:
                return index
        return len(self.fields)

    @property
    def field_rules(self) -> tuple[RuleDef, ...]:
        return tuple(sorted((r for r in self.rules if r.field is not None), key=lambda r: r.evaluation_order))

    @property
    def global_rules(self) -> tuple[RuleDef, ...]:
        return tuple(
            sorted((r for r in self.rules if r.field is None), key=lambda r: (r.tier, r.evaluation_order))
        )

    def declares(self, kind: ErrorKind) -> bool:
        return any(r.kind == kind for r in self.rules)


@dataclass(frozen=True)
class DefinitionIssue:
    """A problem found while checking a cluster definition."""

    level: IssueLevel
    cluster_id: str
    rule: str | None
    message: str

    def __str__(self) -> str:
        where = self.cluster_id if self.rule is None else f"{self.cluster_id}:{self.rule}"
        return f"{self.level.upper()}: [{where}] {self.message}"
