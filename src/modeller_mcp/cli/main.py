"""Main CLI entry point for modeller-mcp."""

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.markup import escape

from modeller_mcp.cli import discover, generate, validate

app = typer.Typer(
    name="modeller-mcp",
    help="Discover, validate and generate code from Modeller domain models.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

console = Console()

# Register subcommands
app.command(name="discover")(discover.discover_cmd)
app.command(name="validate-model")(validate.validate_model_cmd)
app.command(name="validate-structure")(validate.validate_structure_cmd)
app.command(name="validate-domain")(validate.validate_domain_cmd)
app.command(name="generate-sdk")(generate.generate_sdk_cmd)
app.command(name="generate-api")(generate.generate_api_cmd)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output"),
    config: Optional[Path] = typer.Option(
        None, "--config", "-c", help="Path to a modeller-mcp configuration file"
    ),
    structured_logs: bool = typer.Option(
        False, "--structured-logs", help="Timestamped log lines with key=value context fields"
    ),
) -> None:
    """
    modeller-mcp: tooling for Modeller domain models.

    - [bold]discover[/bold]: Find and classify model YAML files
    - [bold]validate-model[/bold]: Validate model files
    - [bold]validate-structure[/bold]: Check folder and naming conventions
    - [bold]validate-domain[/bold]: Validate a whole domain directory
    - [bold]generate-sdk[/bold]: Generate an SDK slice through the secure gateway
    - [bold]generate-api[/bold]: Generate a Minimal API project through the secure gateway
    """
    from modeller_mcp.utils.config import load_config, set_config
    from modeller_mcp.utils.errors import ModellerError
    from modeller_mcp.utils.logging import configure_logging

    # Without --config this searches the working directory and home locations
    try:
        settings = load_config(config)
    except (FileNotFoundError, ModellerError) as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}", highlight=False)
        raise typer.Exit(1)
    set_config(settings)

    if verbose:
        level = "DEBUG"
    elif quiet:
        level = "WARNING"
    else:
        level = "INFO"
    configure_logging(level=level, structured=structured_logs or settings.logging.structured)


@app.command()
def version() -> None:
    """Show the modeller-mcp version."""
    from modeller_mcp import __version__

    console.print(f"modeller-mcp version {__version__}")


if __name__ == "__main__":
    app()
