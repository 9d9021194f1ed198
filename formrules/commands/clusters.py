"""Listing commands: registered clusters and the priority table."""

from rich.console import Console
from rich.table import Table

from ..priority import PRIORITY_TABLE, kinds_in_priority_order
from ..rules.registry import ClusterRegistry


def run_clusters(registry: ClusterRegistry, verbose_rules: bool = False) -> int:
    """Print every registered cluster, optionally with its rules in evaluation order."""
    console = Console()

    if len(registry) == 0:
        console.print("No clusters registered.", style="dim")
        return 0

    table = Table(title="Clusters")
    table.add_column("cluster_id", style="cyan", no_wrap=True)
    table.add_column("version", justify="right")
    table.add_column("anchor", style="dim")
    table.add_column("fields")
    table.add_column("rules", justify="right")

    for definition in registry:
        table.add_row(
            definition.cluster_id,
            str(definition.version),
            f"#{definition.anchor}",
            ", ".join(definition.field_names),
            str(len(definition.rules)),
        )
    console.print(table)

    if verbose_rules:
        for definition in registry:
            rules = Table(title=f"{definition.cluster_id} rules")
            rules.add_column("order", justify="right", style="dim")
            rules.add_column("id", style="cyan")
            rules.add_column("kind", style="magenta")
            rules.add_column("tier", justify="right")
            rules.add_column("field")
            rules.add_column("predicate")
            for rule in sorted(definition.rules, key=lambda r: r.evaluation_order):
                kind = getattr(rule.kind, "value", rule.kind)
                rules.add_row(
                    str(rule.evaluation_order),
                    rule.id,
                    str(kind),
                    str(rule.tier),
                    rule.field or "(cluster)",
                    rule.predicate,
                )
            console.print(rules)
    return 0


def run_priorities() -> int:
    """Print the priority table, lowest tier first."""
    console = Console()

    table = Table(title="Priority table")
    table.add_column("tier", justify="right")
    table.add_column("kind", style="cyan")
    table.add_column("scope", style="magenta")

    for kind in kinds_in_priority_order():
        entry = PRIORITY_TABLE[kind]
        table.add_row(str(entry.tier), kind.value, entry.scope.value)
    console.print(table)
    return 0
