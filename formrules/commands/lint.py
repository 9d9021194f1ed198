"""Lint command implementation."""

import json
from collections.abc import Iterable

from rich.console import Console
from rich.table import Table

from ..priority import check_priority_table
from ..rules.registry import ClusterRegistry
from ..rules.schema import DefinitionIssue


def run_lint(registry: ClusterRegistry, output_json: bool = False, fail_on: str = "error") -> int:
    """Check the priority table and every registered cluster definition.

    Args:
        registry: Clusters to check (built non-strict so errors can be listed)
        output_json: Output results as JSON instead of a table
        fail_on: Exit with error if this level or higher found ("error" or "warning")

    Returns:
        Exit code (0 = clean, 1 = problems found)
    """
    console = Console(stderr=True)

    table_problems = check_priority_table()
    issues = sorted(registry.issues, key=lambda i: (i.level != "error", i.cluster_id, i.rule or ""))

    counts = {"error": len(table_problems), "warning": 0}
    for issue in issues:
        counts[issue.level] = counts.get(issue.level, 0) + 1

    if output_json:
        _output_json(issues, table_problems, counts, len(registry))
    else:
        _print_human_output(console, issues, table_problems, counts, len(registry))

    if counts["error"] > 0:
        return 1
    if fail_on == "warning" and counts["warning"] > 0:
        return 1
    return 0


def _issue_to_dict(issue: DefinitionIssue) -> dict:
    return {
        "level": issue.level,
        "cluster_id": issue.cluster_id,
        "rule": issue.rule,
        "message": issue.message,
    }


def _output_json(
    issues: Iterable[DefinitionIssue],
    table_problems: list[str],
    counts: dict[str, int],
    cluster_count: int,
) -> None:
    issues = list(issues)
    output = {
        "errors": [_issue_to_dict(i) for i in issues if i.level == "error"],
        "warnings": [_issue_to_dict(i) for i in issues if i.level == "warning"],
        "priority_table": table_problems,
        "summary": {
            "clusters": cluster_count,
            "errors": counts["error"],
            "warnings": counts["warning"],
        },
    }
    print(json.dumps(output, indent=2))


def _print_human_output(
    console: Console,
    issues: list[DefinitionIssue],
    table_problems: list[str],
    counts: dict[str, int],
    cluster_count: int,
) -> None:
    for problem in table_problems:
        console.print(f"ERROR: [priority-table] {problem}", style="red", markup=False)

    if issues:
        table = Table(title="Definition issues")
        table.add_column("Level")
        table.add_column("Cluster", style="cyan", no_wrap=True)
        table.add_column("Rule", style="magenta")
        table.add_column("Message")
        for issue in issues:
            style = "red" if issue.level == "error" else "yellow"
            table.add_row(
                f"[{style}]{issue.level}[/{style}]",
                issue.cluster_id,
                issue.rule or "-",
                issue.message,
            )
        console.print(table)

    console.print()
    if counts["error"] == 0 and counts["warning"] == 0:
        console.print(f"✓ {cluster_count} cluster(s) checked, no issues", style="bold green")
    else:
        console.print(
            f"{cluster_count} cluster(s) checked: {counts['error']} error(s), {counts['warning']} warning(s)",
            style="bold red" if counts["error"] else "bold yellow",
        )
