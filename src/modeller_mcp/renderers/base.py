"""Base renderer protocol and types."""

from enum import Enum
from pathlib import Path
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, Field


class OutputFormat(str, Enum):
    """Supported output formats."""

    TEXT = "text"
    JSON = "json"


class RenderContext(BaseModel):
    """Context for rendering operations."""

    model_config = {"frozen": True}

    format: OutputFormat = Field(default=OutputFormat.TEXT, description="Output format")
    output_path: Path | None = Field(default=None, description="Output file path")
    verbose: bool = Field(default=False, description="Include info findings and file lists")
    title: str | None = Field(default=None, description="Heading for generation summaries")
    details: dict[str, str] = Field(
        default_factory=dict, description="Extra labelled lines for generation summaries"
    )

    # Formatting options
    indent: int = Field(default=2, description="JSON indentation")


@runtime_checkable
class Renderer(Protocol):
    """Protocol for output renderers.

    Renderers turn discovery, validation and generation results into text
    for display by the tool surface.

    Example:
        class MyRenderer:
            @property
            def format(self) -> OutputFormat:
                return OutputFormat.JSON

            def render(self, data: Any, context: RenderContext) -> str:
                return data.model_dump_json(indent=context.indent)

            def render_to_file(self, data: Any, context: RenderContext) -> None:
                context.output_path.write_text(self.render(data, context))
    """

    @property
    def format(self) -> OutputFormat:
        """The output format this renderer produces."""
        ...

    def render(self, data: Any, context: RenderContext) -> str:
        """Render data to a string.

        Args:
            data: The data to render (typically a Pydantic model)
            context: Rendering context with options

        Returns:
            Rendered string output
        """
        ...

    def render_to_file(self, data: Any, context: RenderContext) -> None:
        """Render data directly to a file.

        Raises:
            ValueError: If context.output_path is not set
        """
        ...


class BaseRenderer:
    """Base implementation with common functionality.

    Subclasses implement the format property and render method.
    """

    def render_to_file(self, data: Any, context: RenderContext) -> None:
        """Render data directly to a file.

        Args:
            data: The data to render
            context: Rendering context (must have output_path set)

        Raises:
            ValueError: If context.output_path is not set
        """
        if context.output_path is None:
            raise ValueError("output_path must be set in context for file rendering")

        content = self.render(data, context)
        context.output_path.write_text(content, encoding="utf-8")

    def render(self, data: Any, context: RenderContext) -> str:
        """Render data to a string. Must be implemented by subclasses."""
        raise NotImplementedError
