"""Code generation request and result models."""

from pathlib import Path

from pydantic import BaseModel, Field

from modeller_mcp.models.common import AuditError


class SdkGenerationRequest(BaseModel):
    """Generate an SDK vertical slice for one feature."""

    model_config = {"frozen": True}

    domain_path: Path = Field(description="Directory holding the domain models")
    feature_name: str = Field(description="Feature to generate, e.g. Prospects")
    namespace: str = Field(description="Target namespace, e.g. Business.Sdk")
    output_path: Path = Field(description="Directory receiving the generated files")


class ApiGenerationRequest(BaseModel):
    """Generate a Minimal API project on top of a generated SDK."""

    model_config = {"frozen": True}

    sdk_path: Path = Field(description="Directory holding the generated SDK")
    domain_path: Path = Field(description="Directory holding the domain models")
    project_name: str = Field(description="API project name")
    namespace: str = Field(description="Root namespace of the API project")
    output_path: Path = Field(description="Directory receiving the generated files")


class GenerationResult(BaseModel):
    """Result of a generation service run."""

    model_config = {"frozen": True}

    success: bool = Field(description="Whether generation succeeded")
    prompt: str | None = Field(default=None, description="Assembled generation prompt")
    output_path: Path | None = Field(default=None, description="Output directory")
    generated_files: list[Path] = Field(default_factory=list, description="Written files")
    error_message: str | None = Field(default=None, description="Failure reason")
    errors: list[AuditError] = Field(default_factory=list, description="Errors that occurred")

    @classmethod
    def ok(
        cls,
        prompt: str,
        output_path: Path,
        generated_files: list[Path],
    ) -> "GenerationResult":
        """Create a successful result."""
        return cls(
            success=True,
            prompt=prompt,
            output_path=output_path,
            generated_files=generated_files,
        )

    @classmethod
    def fail(cls, message: str, errors: list[AuditError] | None = None) -> "GenerationResult":
        """Create a failed result."""
        return cls(success=False, error_message=message, errors=errors or [])
