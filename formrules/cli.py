"""CLI entrypoint for formrules."""

import logging
import sys
from datetime import date
from pathlib import Path

import click

from . import __version__
from .config import Settings, load_settings
from .errors import FormrulesError


def _configure_logging(verbose: bool) -> None:
    from rich.console import Console
    from rich.logging import RichHandler

    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=Console(stderr=True), show_path=verbose)],
        force=True,
    )


def _registry(ctx: click.Context, *, strict: bool = True):
    from .rules.registry import ClusterRegistry

    settings: Settings = ctx.obj["settings"]
    try:
        return ClusterRegistry.load(list(settings.cluster_dirs), strict=strict)
    except FormrulesError as e:
        raise click.ClickException(str(e)) from e


def _messages(ctx: click.Context):
    from .locale import LocaleCatalog

    settings: Settings = ctx.obj["settings"]
    return LocaleCatalog.load(settings.locale, settings.locale_dir)


@click.group()
@click.version_option(__version__, prog_name="formrules")
@click.option(
    "--config",
    "-c",
    "config_path",
    type=click.Path(exists=True, file_okay=True, dir_okay=False, path_type=Path),
    default=None,
    help="Path to formrules.toml (defaults to ./formrules.toml when present)",
)
@click.option("--verbose", "-v", is_flag=True, help="Log rule evaluation at debug level")
@click.pass_context
def cli(ctx: click.Context, config_path: Path | None, verbose: bool) -> None:
    """formrules - Validation and error prioritisation for multi-field form inputs.

    Inspect the registered field clusters, lint their definitions, and run
    sample submissions through the engine.
    """
    ctx.ensure_object(dict)
    _configure_logging(verbose)
    try:
        ctx.obj["settings"] = load_settings(config_path)
    except FormrulesError as e:
        raise click.ClickException(str(e)) from e


@cli.command("clusters")
@click.option("--rules", "show_rules", is_flag=True, help="Also list each cluster's rules in evaluation order")
@click.pass_context
def clusters(ctx: click.Context, show_rules: bool) -> None:
    """List registered field clusters."""
    from .commands.clusters import run_clusters

    sys.exit(run_clusters(_registry(ctx), verbose_rules=show_rules))


@cli.command()
@click.option("--json", "output_json", is_flag=True, help="Output results as JSON")
@click.option(
    "--fail-on",
    type=click.Choice(["error", "warning"]),
    default="error",
    help="Exit with error if this level or higher found",
)
@click.pass_context
def lint(ctx: click.Context, output_json: bool, fail_on: str) -> None:
    """Check the priority table and every cluster definition.

    Definitions are loaded without failing on the first error so that every
    problem is listed. Exits 1 when errors are found.
    """
    from .commands.lint import run_lint

    sys.exit(run_lint(_registry(ctx, strict=False), output_json=output_json, fail_on=fail_on))


@cli.command()
def priorities() -> None:
    """Print the priority table."""
    from .commands.clusters import run_priorities

    sys.exit(run_priorities())


@cli.command()
@click.argument("cluster_id")
@click.option(
    "--submitted",
    "submitted_path",
    required=True,
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    help="JSON object of submitted form fields",
)
@click.option(
    "--baseline",
    "baseline_path",
    type=click.Path(exists=True, dir_okay=False, path_type=Path),
    default=None,
    help="JSON object of the record's previous values",
)
@click.option(
    "--today",
    type=click.DateTime(formats=["%Y-%m-%d"]),
    default=None,
    help="Evaluate as if today were this date (YYYY-MM-DD)",
)
@click.option("--json", "output_json", is_flag=True, help="Output the view model as JSON")
@click.pass_context
def check(
    ctx: click.Context,
    cluster_id: str,
    submitted_path: Path,
    baseline_path: Path | None,
    today,
    output_json: bool,
) -> None:
    """Run a submission through CLUSTER_ID and show what the page would render."""
    from .commands.check import run_check

    registry = _registry(ctx)
    if cluster_id not in registry:
        known = ", ".join(d.cluster_id for d in registry)
        raise click.BadParameter(f"Unknown cluster '{cluster_id}'. Available: {known}", param_hint="CLUSTER_ID")

    day: date | None = today.date() if today is not None else None
    exit_code = run_check(
        registry,
        cluster_id,
        submitted_path,
        baseline_path,
        today=day,
        output_json=output_json,
        messages=_messages(ctx),
    )
    sys.exit(exit_code)


def main() -> None:
    """Main entrypoint."""
    cli(obj={})


if __name__ == "__main__":
    main()
