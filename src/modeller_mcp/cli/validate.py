"""CLI commands for structure and content validation."""

from pathlib import Path
from typing import Optional

import typer

from modeller_mcp.cli.utils import console, emit

FORMAT_OPTION = typer.Option("text", "--format", "-f", help="Output format (text, json)")
OUTPUT_OPTION = typer.Option(None, "--output", "-o", help="Output file path")
VERBOSE_OPTION = typer.Option(False, "--show-info", help="Include info findings in text output")


def _validator():
    from modeller_mcp.core.store import ValidatedModelStore
    from modeller_mcp.core.validator import ModelValidator
    from modeller_mcp.utils.config import get_config

    return ModelValidator(store=ValidatedModelStore(), config=get_config().validation)


def _finish(report, format: str, output: Optional[Path], show_info: bool) -> None:
    emit(report, format, output, verbose=show_info)
    if not report.passed:
        raise typer.Exit(1)


def validate_model_cmd(
    path: Path = typer.Argument(..., help="Model file or directory"),
    format: str = FORMAT_OPTION,
    output: Optional[Path] = OUTPUT_OPTION,
    show_info: bool = VERBOSE_OPTION,
) -> None:
    """
    Validate a model file, or every model file below a directory.

    Example:
        modeller-mcp validate-model models/Sales/Prospect.Type.yaml
    """
    with console.status("Validating models..."):
        report = _validator().validate(path)

    _finish(report, format, output, show_info)


def validate_structure_cmd(
    path: Path = typer.Argument(..., help="Models root directory"),
    format: str = FORMAT_OPTION,
    output: Optional[Path] = OUTPUT_OPTION,
    show_info: bool = VERBOSE_OPTION,
) -> None:
    """
    Check folder layout and file naming conventions only.

    Example:
        modeller-mcp validate-structure models
    """
    from modeller_mcp.core.structure import StructureValidator
    from modeller_mcp.models.validation import ValidationReport
    from modeller_mcp.utils.config import get_config

    validator = StructureValidator(get_config().validation)
    with console.status("Checking structure..."):
        findings = validator.validate(path)

    _finish(ValidationReport(path=str(path), findings=findings), format, output, show_info)


def validate_domain_cmd(
    path: Path = typer.Argument(..., help="Domain directory"),
    format: str = FORMAT_OPTION,
    output: Optional[Path] = OUTPUT_OPTION,
    show_info: bool = VERBOSE_OPTION,
) -> None:
    """
    Validate the structure and every model of a domain directory.

    Example:
        modeller-mcp validate-domain models/Business/CustomerManagement
    """
    if not path.is_dir():
        console.print(f"[red]Error:[/red] Domain path is not a directory: {path}")
        raise typer.Exit(1)

    with console.status("Validating domain..."):
        report = _validator().validate(path)

    _finish(report, format, output, show_info)
