"""Plain-text summaries for the tool surface."""

from __future__ import annotations

from typing import Any

from modeller_mcp.models.discovery import DiscoveryResult, ModelFileInfo
from modeller_mcp.models.generation import GenerationResult
from modeller_mcp.models.validation import ValidationReport, ValidationSeverity
from modeller_mcp.renderers.base import BaseRenderer, OutputFormat, RenderContext

SEVERITY_TAGS = {
    ValidationSeverity.ERROR: "ERROR",
    ValidationSeverity.WARNING: "WARNING",
    ValidationSeverity.INFO: "INFO",
}


class TextRenderer(BaseRenderer):
    """Renders results as markdown-flavoured plain text.

    The output is meant to be shown as-is to a user or an assistant, so it
    contains no terminal markup.

    Example:
        renderer = TextRenderer()
        print(renderer.render(discovery_result, RenderContext()))
    """

    @property
    def format(self) -> OutputFormat:
        """The output format this renderer produces."""
        return OutputFormat.TEXT

    def render(self, data: Any, context: RenderContext) -> str:
        class_name = data.__class__.__name__

        if class_name == "DiscoveryResult":
            return self._render_discovery(data, context)
        elif class_name == "ValidationReport":
            return self._render_validation(data, context)
        elif class_name == "GenerationResult":
            return self._render_generation(data, context)

        return str(data)

    def _render_discovery(self, result: DiscoveryResult, context: RenderContext) -> str:
        lines = [
            "# Model Discovery",
            "",
            f"**Root:** {result.root}",
            f"**Model Directories:** {len(result.directories)}",
            f"**Loose Files:** {len(result.loose_files)}",
            f"**Total Files:** {result.total_file_count}",
        ]

        for directory in result.directories:
            lines.extend(["", f"## {directory.path}"])
            for group in directory.groups:
                meta = " (has _meta.yaml)" if group.has_metadata else ""
                lines.append(f"### {group.name}{meta}")
                lines.extend(self._file_line(f) for f in group.files)

        if result.loose_files:
            lines.extend(["", "## Loose Files"])
            lines.extend(self._file_line(f) for f in result.loose_files)

        if not result.has_models:
            lines.extend(["", "No model files found."])

        if result.errors:
            lines.extend(["", "## Errors"])
            lines.extend(f"- {error}" for error in result.errors)

        return "\n".join(lines) + "\n"

    def _render_validation(self, report: ValidationReport, context: RenderContext) -> str:
        status = "PASSED" if report.passed else "FAILED"
        lines = [
            f"# Validation {status}",
            "",
            f"**Path:** {report.path}",
            f"**Errors:** {report.error_count}",
            f"**Warnings:** {report.warning_count}",
            f"**Info:** {report.info_count}",
        ]

        for file, findings in report.by_file().items():
            shown = [
                f
                for f in sorted(findings, key=lambda f: f.severity.rank)
                if context.verbose or f.severity != ValidationSeverity.INFO
            ]
            if not shown:
                continue
            lines.extend(["", f"## {file}"])
            lines.extend(f"- [{SEVERITY_TAGS[f.severity]}] {f.message}" for f in shown)

        if not report.findings:
            lines.extend(["", "No issues found."])

        return "\n".join(lines) + "\n"

    def _render_generation(self, result: GenerationResult, context: RenderContext) -> str:
        title = context.title or "Generation"
        if result.success:
            lines = [f"# {title} Successful", ""]
            lines.extend(f"**{label}:** {value}" for label, value in context.details.items())
            lines.extend(
                [
                    f"**Output Path:** {result.output_path}",
                    f"**Files Generated:** {len(result.generated_files)}",
                    "",
                    "**Generated Files:**",
                ]
            )
            lines.extend(f"- {path.name}" for path in result.generated_files)
        else:
            lines = [f"# {title} Failed", "", f"**Error:** {result.error_message}"]
            lines.extend(f"**{label}:** {value}" for label, value in context.details.items())
        return "\n".join(lines) + "\n"

    @staticmethod
    def _file_line(info: ModelFileInfo) -> str:
        return f"- {info.name} ({info.kind.label})"
