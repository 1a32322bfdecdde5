"""JSON renderer for modeller-mcp output."""

from __future__ import annotations

import json
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel

from modeller_mcp.models.discovery import DiscoveryResult
from modeller_mcp.models.validation import ValidationReport
from modeller_mcp.renderers.base import BaseRenderer, OutputFormat, RenderContext


class JSONRenderer(BaseRenderer):
    """Renderer for JSON output format.

    Derived counts of discovery and validation results are added next to
    the dumped fields.

    Example:
        renderer = JSONRenderer()
        json_str = renderer.render(report, RenderContext(format=OutputFormat.JSON))
    """

    @property
    def format(self) -> OutputFormat:
        """The output format this renderer produces."""
        return OutputFormat.JSON

    def render(self, data: Any, context: RenderContext) -> str:
        """Render data to a JSON string."""
        if isinstance(data, BaseModel):
            dict_data = data.model_dump(mode="json")
        else:
            dict_data = data

        if isinstance(data, ValidationReport):
            dict_data.update(
                passed=data.passed,
                error_count=data.error_count,
                warning_count=data.warning_count,
                info_count=data.info_count,
            )
        elif isinstance(data, DiscoveryResult):
            dict_data.update(has_models=data.has_models, total_file_count=data.total_file_count)

        return json.dumps(
            dict_data,
            indent=context.indent if context.indent else None,
            default=self._json_serializer,
            ensure_ascii=False,
        )

    @staticmethod
    def _json_serializer(obj: Any) -> Any:
        """Custom JSON serializer for non-standard types."""
        if isinstance(obj, datetime):
            return obj.isoformat()
        if isinstance(obj, Enum):
            return obj.value
        if isinstance(obj, Path):
            return str(obj)
        if isinstance(obj, (set, frozenset)):
            return sorted(obj)
        raise TypeError(f"Object of type {type(obj).__name__} is not JSON serializable")
