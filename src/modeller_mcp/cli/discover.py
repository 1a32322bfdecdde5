"""CLI command for model discovery."""

from pathlib import Path
from typing import Optional

import typer

from modeller_mcp.cli.utils import console, emit


def discover_cmd(
    path: Path = typer.Argument(..., help="Project or models directory to scan"),
    format: str = typer.Option(
        "text",
        "--format",
        "-f",
        help="Output format (text, json)",
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output file path",
    ),
) -> None:
    """
    Discover model YAML files under a directory.

    Looks in models/ and src/models/ first and falls back to a recursive
    scan of the whole tree.

    Example:
        modeller-mcp discover ./my-project
    """
    from modeller_mcp.core.discovery import ModelDiscoveryEngine
    from modeller_mcp.utils.config import get_config

    engine = ModelDiscoveryEngine(config=get_config().discovery)

    with console.status("Discovering models..."):
        result = engine.discover(path)

    emit(result, format, output)

    if result.errors and not result.has_models:
        raise typer.Exit(1)
