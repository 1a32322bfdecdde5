"""CLI commands for SDK and API generation."""

import asyncio
from pathlib import Path

import typer

from modeller_mcp.cli.utils import console, emit


def _gateway(no_latency: bool):
    from modeller_mcp.llm.mock import MockLlmBackend
    from modeller_mcp.security.audit import PromptAuditLogger
    from modeller_mcp.security.gateway import SecureLlmGateway
    from modeller_mcp.utils.config import get_config

    config = get_config()
    backend = MockLlmBackend.from_config(config.llm)
    if no_latency:
        backend.simulate_latency = False
    return SecureLlmGateway(backend, audit_sink=PromptAuditLogger(config.audit))


def generate_sdk_cmd(
    domain_path: Path = typer.Option(..., "--domain-path", "-d", help="Domain models directory"),
    feature: str = typer.Option(..., "--feature", help="Feature name, e.g. Prospects"),
    namespace: str = typer.Option(..., "--namespace", "-n", help="Target namespace, e.g. Sales.Sdk"),
    output_path: Path = typer.Option(..., "--output-path", "-o", help="Directory for generated files"),
    format: str = typer.Option("text", "--format", "-f", help="Output format (text, json)"),
    prompt_only: bool = typer.Option(
        False, "--prompt-only", help="Print the assembled prompt without generating"
    ),
    no_latency: bool = typer.Option(False, "--no-latency", help="Disable simulated backend latency"),
) -> None:
    """
    Generate an SDK vertical slice for one feature of a domain.

    Example:
        modeller-mcp generate-sdk -d models/Sales --feature Prospects -n Sales.Sdk -o out/sdk
    """
    from modeller_mcp.generation.sdk import SdkGenerationService
    from modeller_mcp.models.generation import SdkGenerationRequest
    from modeller_mcp.utils.config import get_config
    from modeller_mcp.utils.errors import GenerationError

    request = SdkGenerationRequest(
        domain_path=domain_path,
        feature_name=feature,
        namespace=namespace,
        output_path=output_path,
    )
    service = SdkGenerationService(_gateway(no_latency), config=get_config().generation)

    if prompt_only:
        try:
            prompt = service.build_prompt(request)
            console.print(prompt, markup=False, highlight=False, emoji=False, soft_wrap=True)
        except GenerationError as e:
            console.print(f"[red]Error:[/red] {e.message}")
            raise typer.Exit(1)
        return

    with console.status("Generating SDK..."):
        result = asyncio.run(service.generate(request))

    emit(
        result,
        format,
        title="SDK Generation",
        details={"Feature": feature, "Namespace": namespace, "Domain Path": str(domain_path)},
    )
    if not result.success:
        raise typer.Exit(1)


def generate_api_cmd(
    sdk_path: Path = typer.Option(..., "--sdk-path", "-s", help="Generated SDK directory"),
    domain_path: Path = typer.Option(..., "--domain-path", "-d", help="Domain models directory"),
    project_name: str = typer.Option(..., "--project-name", "-p", help="API project name"),
    namespace: str = typer.Option(..., "--namespace", "-n", help="Root namespace of the API"),
    output_path: Path = typer.Option(..., "--output-path", "-o", help="Directory for generated files"),
    format: str = typer.Option("text", "--format", "-f", help="Output format (text, json)"),
    prompt_only: bool = typer.Option(
        False, "--prompt-only", help="Print the assembled prompt without generating"
    ),
    no_latency: bool = typer.Option(False, "--no-latency", help="Disable simulated backend latency"),
) -> None:
    """
    Generate a Minimal API project on top of a generated SDK.

    Example:
        modeller-mcp generate-api -s out/sdk -d models/Sales -p Sales.Api -n Sales.Api -o out/api
    """
    from modeller_mcp.generation.api import ApiGenerationService
    from modeller_mcp.models.generation import ApiGenerationRequest
    from modeller_mcp.utils.config import get_config
    from modeller_mcp.utils.errors import GenerationError

    request = ApiGenerationRequest(
        sdk_path=sdk_path,
        domain_path=domain_path,
        project_name=project_name,
        namespace=namespace,
        output_path=output_path,
    )
    service = ApiGenerationService(_gateway(no_latency), config=get_config().generation)

    if prompt_only:
        try:
            prompt = service.build_prompt(request)
            console.print(prompt, markup=False, highlight=False, emoji=False, soft_wrap=True)
        except GenerationError as e:
            console.print(f"[red]Error:[/red] {e.message}")
            raise typer.Exit(1)
        return

    with console.status("Generating API project..."):
        result = asyncio.run(service.generate(request))

    emit(
        result,
        format,
        title="API Generation",
        details={"Project": project_name, "Namespace": namespace, "SDK Path": str(sdk_path)},
    )
    if not result.success:
        raise typer.Exit(1)
