"""Simulation CLI commands.

- simulate: Run the planner against the synthetic workload and report loads
- tune: Search the weight grid for the best-scoring combination
"""

import json
from pathlib import Path
from typing import Optional

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.progress import Progress
from rich.table import Table

from range_balancer.cli.plan import report_error, resolve_weights
from range_balancer.config import load_settings
from range_balancer.exceptions import RebalanceError
from range_balancer.schema import dump_plans
from range_balancer.scoring import server_load
from range_balancer.simulation import (
    load_tuning_grid,
    run_simulation,
    tune_weights,
    TuningGrid,
)
from range_balancer.types import SplitStrategy

console = Console()


def simulate_command(
    steps: int = typer.Option(20, "--steps", "-n", min=1, help="Number of time steps"),
    weights_file: Optional[Path] = typer.Option(
        None,
        "--weights",
        "-w",
        exists=True,
        dir_okay=False,
        help="Weights file (YAML or JSON)",
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
    """Simulate the planner over a fluctuating two-server workload.

    Examples:
        range-balancer simulate
        range-balancer simulate --steps 50 --strategy lexicographic
    """
    try:
        settings = load_settings()
        weights = resolve_weights(settings, weights_file)
        result = run_simulation(
            weights,
            steps=steps,
            imbalance_threshold=settings.imbalance_threshold,
            split_strategy=strategy or settings.split_strategy,
        )
    except RebalanceError as e:
        report_error(e)
        raise typer.Exit(1)

    if json_output:
        payload = {
            "steps": [
                {
                    "time": step.time,
                    "plans": dump_plans(step.plans),
                    "loads": {
                        server.instance_id: server_load(server, weights)
                        for server in step.servers
                    },
                }
                for step in result.steps
            ],
            "score": result.score,
            "load_spread": result.load_spread,
            "balanced": result.balanced,
        }
        typer.echo(json.dumps(payload, indent=2))
        return

    for step in result.steps:
        console.print(f"[bold]Time step {step.time + 1}[/bold]")
        for plan in step.plans:
            console.print(
                f"  Move key range {plan.start_key}-{plan.end_key} "
                f"from {plan.source_instance} to {plan.destination_instance}",
                markup=False,
            )
        for server in step.servers:
            console.print(
                f"  Server {server.instance_id}: "
                f"processing={server.total_processing_load:.1f} "
                f"storage={server.total_storage_utilization:.1f} "
                f"access={server.total_access_frequency:.1f} "
                f"memory={server.total_memory_usage:.1f}",
                markup=False,
            )

    console.print()
    console.print(f"Migrations: {len(result.plans)}")
    console.print(f"Final load difference: {result.load_spread:.2f}")
    console.print(f"Score: {result.score:.4f}")
    if result.balanced:
        console.print("[green]System is balanced.[/green]")
    else:
        console.print("[yellow]Warning: Significant imbalance remains.[/yellow]")


def tune_command(
    grid_file: Optional[Path] = typer.Option(
        None,
        "--grid",
        "-g",
        exists=True,
        dir_okay=False,
        help="Tuning grid YAML (defaults to the full sweep)",
    ),
    steps: Optional[int] = typer.Option(
        None, "--steps", "-n", min=1, help="Override the grid's time steps"
    ),
) -> None:
    """Search weight combinations for the best simulation score.

    Examples:
        range-balancer tune --grid grid.yaml
        range-balancer tune --grid grid.yaml --steps 10
    """
    try:
        grid = load_tuning_grid(grid_file) if grid_file else TuningGrid()
    except (ValidationError, yaml.YAMLError) as e:
        console.print("[bold red]Invalid tuning grid:[/bold red]")
        console.print(str(e), markup=False)
        raise typer.Exit(1)
    if steps is not None:
        grid = grid.model_copy(update={"steps": steps})

    total = grid.size()
    console.print(f"Evaluating {total} weight combinations over {grid.steps} steps")

    try:
        with Progress(console=console, transient=True) as progress:
            task = progress.add_task("Simulating", total=total)
            best = tune_weights(
                grid, on_result=lambda _: progress.advance(task)
            )
    except RebalanceError as e:
        report_error(e)
        raise typer.Exit(1)

    table = Table(title=f"Best weights (score {best.score:.4f})")
    table.add_column("Weight")
    table.add_column("Value", justify="right")
    table.add_row("cpu_weight", f"{best.weights.cpu_weight:g}")
    table.add_row("memory_weight", f"{best.weights.memory_weight:g}")
    table.add_row("storage_weight", f"{best.weights.storage_weight:g}")
    table.add_row("access_frequency_weight", f"{best.weights.access_frequency_weight:g}")
    table.add_row("migration_penalty", f"{best.weights.migration_penalty:g}")
    console.print(table)
    console.print(f"Evaluated {best.evaluated} combinations")
