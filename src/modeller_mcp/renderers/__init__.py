"""Output format renderers."""

from modeller_mcp.renderers.base import BaseRenderer, OutputFormat, RenderContext, Renderer
from modeller_mcp.renderers.json import JSONRenderer
from modeller_mcp.renderers.text import TextRenderer

__all__ = [
    "BaseRenderer",
    "OutputFormat",
    "RenderContext",
    "Renderer",
    "JSONRenderer",
    "TextRenderer",
    "get_renderer",
]


def get_renderer(format: OutputFormat | str) -> BaseRenderer:
    """Get a renderer for the specified format.

    Args:
        format: Output format (OutputFormat enum or string)

    Returns:
        Appropriate renderer instance

    Raises:
        ValueError: If format is not supported
    """
    if isinstance(format, str):
        format = OutputFormat(format)

    renderers = {
        OutputFormat.TEXT: TextRenderer,
        OutputFormat.JSON: JSONRenderer,
    }

    renderer_class = renderers.get(format)
    if renderer_class is None:
        raise ValueError(f"Unsupported format: {format}")

    return renderer_class()
