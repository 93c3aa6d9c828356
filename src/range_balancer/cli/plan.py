"""Plan CLI command.

This module provides the command for planning one rebalance pass:
- plan: Read a snapshot file and print the migration plans

Weights come from --weights if given, otherwise from BalancerSettings
(RANGE_BALANCER_* environment variables, falling back to defaults).
"""

import json
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from range_balancer.balancer import evaluate_rebalance
from range_balancer.config import BalancerSettings, load_settings
from range_balancer.exceptions import (
    ConfigurationError,
    RebalanceError,
    SnapshotValidationError,
)
from range_balancer.schema import dump_plans, load_snapshot, load_weights
from range_balancer.types import SplitStrategy, Weights

console = Console()


def resolve_weights(settings: BalancerSettings, weights_file: Path | None) -> Weights:
    """Weights from file if given, else from settings."""
    if weights_file is not None:
        return load_weights(weights_file)
    return settings.weights()


def report_error(error: RebalanceError) -> None:
    """Print a planning error, one line per validation problem."""
    if isinstance(error, (SnapshotValidationError, ConfigurationError)):
        kind = "settings" if isinstance(error, ConfigurationError) else "input"
        console.print(
            f"[bold red]Invalid {kind} ({len(error.errors)} error(s)):[/bold red]"
        )
        for message in error.errors:
            console.print(f"  - {message}", markup=False)
    else:
        console.print(f"[bold red]Error:[/bold red] {error}")


def plan_command(
    snapshot: Path = typer.Argument(
        ...,
        exists=True,
        dir_okay=False,
        help="Snapshot file (YAML or JSON list of server reports)",
    ),
    weights_file: Optional[Path] = typer.Option(
        None,
        "--weights",
        "-w",
        exists=True,
        dir_okay=False,
        help="Weights file (YAML or JSON)",
    ),
    threshold: Optional[float] = typer.Option(
        None,
        "--threshold",
        "-t",
        min=0.0,
        help="Relative imbalance threshold (default 0.1)",
    ),
    strategy: Optional[SplitStrategy] = typer.Option(
        None,
        "--strategy",
        help="Midpoint strategy for splits",
    ),
    json_output: bool = typer.Option(
        False,
        "--json",
        help="Output as JSON",
    ),
) -> None:
    """Plan migrations for one snapshot.

    Examples:
        range-balancer plan snapshot.json
        range-balancer plan snapshot.yaml --weights weights.yaml --json
    """
    try:
        settings = load_settings()
        weights = resolve_weights(settings, weights_file)
        servers = load_snapshot(snapshot)
        result = evaluate_rebalance(
            servers,
            weights,
            imbalance_threshold=(
                threshold if threshold is not None else settings.imbalance_threshold
            ),
            split_strategy=strategy or settings.split_strategy,
        )
    except RebalanceError as e:
        report_error(e)
        raise typer.Exit(1)

    if json_output:
        payload = {
            "most_loaded": result.most_loaded,
            "least_loaded": result.least_loaded,
            "imbalanced": result.imbalanced,
            "action": result.action.value if result.action else None,
            "plans": dump_plans(result.plans),
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    if result.most_loaded is None:
        console.print("[dim]Empty snapshot, nothing to plan[/dim]")
        return

    console.print(
        f"Most loaded: {result.most_loaded} ({result.most_loaded_score:.2f})",
        markup=False,
    )
    console.print(
        f"Least loaded: {result.least_loaded} ({result.least_loaded_score:.2f})",
        markup=False,
    )

    if not result.plans:
        console.print("[green]Fleet is balanced, no migrations planned[/green]")
        return

    table = Table(title=f"Migration plans ({result.action.value})")
    table.add_column("Start key")
    table.add_column("End key")
    table.add_column("Source")
    table.add_column("Destination")
    for plan in result.plans:
        table.add_row(
            plan.start_key, plan.end_key, plan.source_instance, plan.destination_instance
        )
    console.print(table)
