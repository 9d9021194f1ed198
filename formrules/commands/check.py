"""Check command: run a JSON submission through one cluster."""

import json
from datetime import date
from pathlib import Path
from typing import Any

from rich.console import Console
from rich.table import Table

from ..engine import validate_submission
from ..locale import MessageLookup
from ..render import build_error_view
from ..rules.registry import ClusterRegistry


def _read_json_object(path: Path, console: Console) -> dict[str, Any] | None:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as e:
        console.print(f"Could not read {path}: {e}", style="bold red", markup=False)
        return None
    if not isinstance(data, dict):
        console.print(f"{path} must hold a JSON object of form fields", style="bold red")
        return None
    return data


def run_check(
    registry: ClusterRegistry,
    cluster_id: str,
    submitted_path: Path,
    baseline_path: Path | None = None,
    today: date | None = None,
    output_json: bool = False,
    messages: MessageLookup | None = None,
) -> int:
    """Validate a submission and print the error view.

    Returns:
        Exit code (0 = valid, 1 = invalid submission or unreadable input)
    """
    console = Console(stderr=True)
    definition = registry.get(cluster_id)

    submitted = _read_json_object(submitted_path, console)
    if submitted is None:
        return 1
    baseline: dict[str, Any] | None = None
    if baseline_path is not None:
        baseline = _read_json_object(baseline_path, console)
        if baseline is None:
            return 1

    result = validate_submission(definition, submitted, baseline, messages=messages, today=today)
    view = build_error_view(definition, result)

    if output_json:
        output = {
            "cluster_id": definition.cluster_id,
            **view.to_dict(),
            "violations": [
                {
                    "rule": v.rule_id,
                    "kind": v.kind.value,
                    "scope": v.scope.value,
                    "tier": v.tier,
                    "fields": list(v.affected_fields),
                    "selected": v in result.selected_violations,
                }
                for v in result.all_violations
            ],
        }
        print(json.dumps(output, indent=2))
        return 1 if view.form_is_invalid else 0

    if not view.form_is_invalid:
        console.print(f"✓ {definition.cluster_id}: no errors", style="bold green")
        return 0

    table = Table(title=f"{definition.cluster_id}: error summary")
    table.add_column("text")
    table.add_column("href", style="cyan")
    for item in view.error_summary_list:
        table.add_row(item.text, item.href)
    console.print(table)

    console.print(f"Highlighted: {', '.join(result.highlighted_fields)}", style="yellow")
    for key, text in view.input_errors.items():
        console.print(f"  {key}: {text or '(no inline message)'}", style="dim", markup=False)

    suppressed = [v for v in result.all_violations if v not in result.selected_violations]
    if suppressed:
        console.print(
            f"Not shown: {', '.join(f'{v.rule_id} ({v.kind.value})' for v in suppressed)}",
            style="dim",
            markup=False,
        )
    return 1
