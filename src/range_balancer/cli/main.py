"""Range balancer CLI - plan key range migrations for a sharded keyspace."""

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from range_balancer.cli.plan import plan_command
from range_balancer.cli.simulate import simulate_command, tune_command

app = typer.Typer(
    name="range-balancer",
    help="Plan key range migrations for a sharded keyspace",
    no_args_is_help=True,
)


@app.callback()
def configure(
    verbose: bool = typer.Option(
        False, "--verbose", "-v", help="Log planning decisions at debug level"
    ),
) -> None:
    """Configure logging for every command."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


app.command("plan")(plan_command)
app.command("simulate")(simulate_command)
app.command("tune")(tune_command)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
