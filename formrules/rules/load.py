from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import Any

from ..errors import ClusterDefinitionError
from ..priority import ErrorKind, coerce_kind
from .schema import ClusterDef, FieldDef, RuleDef

logger = logging.getLogger(__name__)

BUILTIN_CLUSTER_DIR = Path(__file__).parent / "clusters"


def _coerce_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _optional_str(value: Any) -> str | None:
    if not isinstance(value, str):
        return None
    value = value.strip()
    return value or None


def _parse_fields(raw_fields: Any, defaults: dict[str, Any], source: str) -> tuple[FieldDef, ...]:
    if not isinstance(raw_fields, list) or not raw_fields:
        raise ClusterDefinitionError(f"{source}: at least one [[fields]] entry is required")

    baseline_prefix = str(defaults.get("baseline_prefix", "original"))
    fields: list[FieldDef] = []
    seen: set[str] = set()
    for raw in raw_fields:
        if not isinstance(raw, dict):
            continue
        name = str(raw.get("name", "")).strip()
        if not name:
            raise ClusterDefinitionError(f"{source}: field without a name")
        if name in seen:
            raise ClusterDefinitionError(f"{source}: duplicate field {name!r}")
        seen.add(name)

        sanitise = str(raw.get("sanitise", "trim")).strip().lower() or "trim"
        if sanitise not in ("trim", "upper"):
            raise ClusterDefinitionError(f"{source}: field {name!r} has unknown sanitise={sanitise!r}")

        fields.append(
            FieldDef(
                name=name,
                input=_optional_str(raw.get("input")) or name,
                label=_optional_str(raw.get("label")) or name,
                baseline=_optional_str(raw.get("baseline")) or f"{baseline_prefix}{name[:1].upper()}{name[1:]}",
                sanitise=sanitise,  # type: ignore[arg-type]
            )
        )
    return tuple(fields)


def _inline_key(value: Any) -> str | None:
    # An explicit empty string means "no inline message" (summary only).
    if isinstance(value, str) and not value.strip():
        return ""
    return _optional_str(value)


def _message_key(template: str | None, field_name: str | None) -> str | None:
    if not template or field_name is None:
        return template
    return template.replace("{field}", field_name)


def _parse_rules(
    raw_rules: Any,
    fields: tuple[FieldDef, ...],
    source: str,
) -> tuple[RuleDef, ...]:
    field_names = [f.name for f in fields]
    pending: list[tuple[tuple[int, int], RuleDef, bool]] = []

    for index, raw in enumerate(raw_rules if isinstance(raw_rules, list) else []):
        if not isinstance(raw, dict):
            continue

        rule_id = str(raw.get("id", "")).strip()
        if not rule_id:
            raise ClusterDefinitionError(f"{source}: rule #{index + 1} has no id")

        kind_raw = str(raw.get("kind", "")).strip()
        if not kind_raw:
            raise ClusterDefinitionError(f"{source}: rule {rule_id!r} has no kind")
        kind: ErrorKind | str = coerce_kind(kind_raw) or kind_raw

        pred_raw = raw.get("predicate")
        if isinstance(pred_raw, str):
            pred_name, pred_params = pred_raw.strip(), {}
        else:
            pred_dict = _coerce_dict(pred_raw)
            pred_name = str(pred_dict.get("name", "")).strip()
            pred_params = _coerce_dict(pred_dict.get("params"))
        if not pred_name:
            raise ClusterDefinitionError(f"{source}: rule {rule_id!r} has no predicate")

        explicit_order = raw.get("evaluation_order")
        order = int(explicit_order) if isinstance(explicit_order, int) else None

        requires_raw = raw.get("requires")
        if isinstance(requires_raw, list):
            requires = tuple(str(r).strip() for r in requires_raw if str(r).strip())
        elif kind == ErrorKind.ALL_FIELDS_MISSING:
            requires = ()
        else:
            requires = tuple(field_names)

        # One rule may target several fields; expand in field declaration order.
        targets: list[str | None]
        if isinstance(raw.get("fields"), list):
            declared = [str(f).strip() for f in raw["fields"]]
            targets = sorted(declared, key=lambda n: field_names.index(n) if n in field_names else len(field_names))
        elif isinstance(raw.get("field"), str):
            targets = [raw["field"].strip()]
        else:
            targets = [None]

        for target in targets:
            position = field_names.index(target) if target in field_names else len(field_names)
            rule = RuleDef(
                id=rule_id if len(targets) == 1 else f"{rule_id}.{target}",
                kind=kind,  # type: ignore[arg-type]
                predicate=pred_name,
                field=target,
                params=dict(pred_params),
                summary=_message_key(_optional_str(raw.get("summary")), target),
                inline=_message_key(_inline_key(raw.get("inline")), target),
                requires=requires if target is None else (),
                evaluation_order=order if order is not None else 0,
            )
            pending.append(((position, index), rule, order is not None))

    pending.sort(key=lambda item: item[0])
    rules: list[RuleDef] = []
    for rank, (_, rule, has_explicit_order) in enumerate(pending, start=1):
        if not has_explicit_order:
            rule = replace(rule, evaluation_order=rank)
        rules.append(rule)
    return tuple(rules)


def parse_cluster(data: dict[str, Any], source: str = "<cluster>") -> ClusterDef:
    """Build a ClusterDef from already-decoded TOML data."""
    cluster_id = str(data.get("cluster_id", "")).strip()
    if not cluster_id:
        raise ClusterDefinitionError(f"{source}: cluster_id is required")

    try:
        version = int(data.get("version", 0))
    except (TypeError, ValueError):
        version = 0
    if version <= 0:
        raise ClusterDefinitionError(f"{source}: version must be a positive integer")

    defaults = _coerce_dict(data.get("defaults"))
    fields = _parse_fields(data.get("fields"), defaults, source)
    rules = _parse_rules(data.get("rules", []), fields, source)

    messages = {str(k): str(v) for k, v in _coerce_dict(data.get("messages")).items() if isinstance(v, str)}

    return ClusterDef(
        cluster_id=cluster_id,
        version=version,
        anchor=_optional_str(data.get("anchor")) or fields[0].input,
        description=_optional_str(data.get("description")),
        fields=fields,
        rules=rules,
        messages=messages,
    )


def load_cluster(path: Path) -> ClusterDef:
    """
    Load a cluster definition from TOML.

    Rules are data; evaluation is code (see predicates.PREDICATES).
    """
    import tomllib

    try:
        data = tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as e:
        raise ClusterDefinitionError(f"{path}: {e}") from e
    return parse_cluster(data, source=str(path))


def load_cluster_dir(directory: Path) -> dict[str, ClusterDef]:
    """Load every *.toml definition in a directory, keyed by cluster_id."""
    clusters: dict[str, ClusterDef] = {}
    for path in sorted(directory.glob("*.toml")):
        definition = load_cluster(path)
        if definition.cluster_id in clusters:
            raise ClusterDefinitionError(f"{path}: duplicate cluster_id {definition.cluster_id!r}")
        clusters[definition.cluster_id] = definition
        logger.debug("Loaded cluster %s v%d from %s", definition.cluster_id, definition.version, path)
    return clusters


def load_builtin_clusters() -> dict[str, ClusterDef]:
    """Load the definitions shipped with the package."""
    return load_cluster_dir(BUILTIN_CLUSTER_DIR)
