"""Shared utilities for CLI commands."""

from __future__ import annotations

from pathlib import Path
from typing import Any

import typer
from rich.console import Console

from modeller_mcp.renderers import OutputFormat, RenderContext, get_renderer

# Shared console instance
console = Console()


def parse_format(format: str) -> OutputFormat:
    """Parse a --format option and exit on an unknown value."""
    try:
        return OutputFormat(format.lower())
    except ValueError:
        console.print(f"[red]Error:[/red] Invalid format: {format}")
        raise typer.Exit(1)


def emit(data: Any, format: str, output: Path | None = None, **context: Any) -> None:
    """Render a result and print it or write it to ``output``.

    Args:
        data: Result model to render
        format: Output format name (text, json)
        output: Optional output file path
        **context: Extra RenderContext fields
    """
    render_context = RenderContext(format=parse_format(format), output_path=output, **context)
    renderer = get_renderer(render_context.format)

    if output:
        renderer.render_to_file(data, render_context)
        console.print(f"Report written to {output}")
    else:
        # Plain print keeps markdown text and JSON free of rich markup parsing
        console.print(
            renderer.render(data, render_context),
            markup=False,
            highlight=False,
            emoji=False,
            soft_wrap=True,
            end="",
        )
