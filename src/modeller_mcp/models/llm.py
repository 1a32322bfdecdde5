"""Generation backend and gateway data models."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from modeller_mcp.models.audit import AuditTrail
from modeller_mcp.models.common import utc_now
from modeller_mcp.models.security import SecurityContext, SecurityLevel, new_id


class LlmParameters(BaseModel):
    """Sampling parameters sent to a backend."""

    model_config = {"frozen": True}

    temperature: float = Field(default=0.1, description="Sampling temperature")
    max_tokens: int = Field(default=1000, description="Output token cap")
    top_p: float = Field(default=0.9, description="Nucleus sampling mass")
    frequency_penalty: float = Field(default=0.1, description="Frequency penalty")
    presence_penalty: float = Field(default=0.1, description="Presence penalty")
    stop: list[str] = Field(default_factory=list, description="Stop sequences")
    seed: int | None = Field(default=None, description="Sampling seed, None for non-deterministic")


class LlmUsage(BaseModel):
    """Token accounting for one generation."""

    model_config = {"frozen": True}

    prompt_tokens: int = Field(default=0, description="Prompt tokens")
    completion_tokens: int = Field(default=0, description="Completion tokens")
    total_tokens: int = Field(default=0, description="Total tokens")
    estimated_cost: float = Field(default=0.0, description="Estimated cost")
    cost_currency: str = Field(default="USD", description="Cost currency")


class LlmRequest(BaseModel):
    """A single backend generation request."""

    model_config = {"frozen": True, "protected_namespaces": ()}

    prompt: str = Field(description="Prompt text")
    model_id: str = Field(description="Backend model identifier")
    parameters: LlmParameters = Field(default_factory=LlmParameters, description="Sampling parameters")
    security_context: SecurityContext | None = Field(default=None, description="Caller context")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Request metadata")


class LlmResponse(BaseModel):
    """A single backend generation response."""

    model_config = {"frozen": True, "protected_namespaces": ()}

    content: str = Field(default="", description="Generated text")
    model_id: str = Field(description="Backend model identifier")
    usage: LlmUsage = Field(default_factory=LlmUsage, description="Token usage")
    generation_time_ms: float = Field(default=0.0, description="Generation duration in milliseconds")
    is_success: bool = Field(default=True, description="Whether the backend succeeded")
    error_message: str | None = Field(default=None, description="Backend error")
    metadata: dict[str, Any] = Field(default_factory=dict, description="Response metadata")


class LlmModelInfo(BaseModel):
    """A model offered by a backend."""

    model_config = {"frozen": True}

    id: str = Field(description="Model identifier")
    name: str = Field(description="Display name")
    description: str = Field(default="", description="Model description")
    max_tokens: int = Field(description="Context size")
    supports_code_generation: bool = Field(default=True, description="Suitable for code generation")
    provider: str = Field(default="", description="Backend provider")


class LlmUsageEstimate(BaseModel):
    """Pre-flight token and cost estimate."""

    model_config = {"frozen": True}

    estimated_prompt_tokens: int = Field(description="Prompt tokens")
    estimated_completion_tokens: int = Field(description="Completion tokens")
    estimated_total_tokens: int = Field(description="Total tokens")
    estimated_cost: float = Field(description="Estimated cost")
    cost_currency: str = Field(default="USD", description="Cost currency")
    within_quota: bool = Field(description="Whether the estimate fits the quota")


class SecureLlmRequest(BaseModel):
    """Input to the secure gateway."""

    model_config = {"frozen": True, "protected_namespaces": ()}

    raw_prompt: str = Field(description="Untrusted prompt text")
    model_id: str = Field(description="Backend model identifier")
    prompt_type: str = Field(description="Secure template name")
    security_context: SecurityContext = Field(description="Caller context")
    prompt_inputs: dict[str, str] = Field(default_factory=dict, description="Named template inputs")
    allow_code_generation: bool = Field(default=True, description="Keep code blocks in inputs")


class SecurityValidationResult(BaseModel):
    """Outcome of security context validation."""

    model_config = {"frozen": True}

    is_valid: bool = Field(description="Whether the context is acceptable")
    issues: list[str] = Field(default_factory=list, description="Validation issues")
    validated_at: datetime = Field(default_factory=utc_now, description="Validation time")


class PostGenerationValidationResult(BaseModel):
    """Outcome of validating generated content."""

    model_config = {"frozen": True}

    is_valid: bool = Field(description="Whether the content is acceptable")
    issues: list[str] = Field(default_factory=list, description="Blocking issues")
    warnings: list[str] = Field(default_factory=list, description="Non-blocking warnings")
    content_length: int = Field(default=0, description="Length of the content")
    security_level: SecurityLevel = Field(default=SecurityLevel.STANDARD, description="Applied level")
    validated_at: datetime = Field(default_factory=utc_now, description="Validation time")


class ResponseSnapshot(BaseModel):
    """Immutable hash record of one generation."""

    model_config = {"frozen": True, "protected_namespaces": ()}

    id: str = Field(default_factory=new_id, description="Snapshot identifier")
    created_at: datetime = Field(default_factory=utc_now, description="Creation time")
    content_hash: str = Field(description="SHA-256 of the response content")
    prompt_hash: str = Field(description="SHA-256 of the prompt sent to the backend")
    secure_prompt_id: str = Field(description="Identifier of the secure prompt")
    model_id: str = Field(description="Backend model identifier")
    tokens_used: int = Field(default=0, description="Total tokens")
    generation_time_ms: float = Field(default=0.0, description="Generation duration")
    validation_passed: bool = Field(description="Post-generation validation outcome")
    security_level: SecurityLevel = Field(description="Applied level")
    is_immutable: bool = Field(default=True, description="Always true")


class SecureLlmResponse(BaseModel):
    """Result of a gateway run, successful or not."""

    model_config = {"frozen": True, "protected_namespaces": ()}

    operation_id: str = Field(description="Pipeline run identifier")
    content: str = Field(default="", description="Generated text, empty on failure")
    is_success: bool = Field(description="Overall outcome after post-validation")
    model_id: str = Field(description="Backend model identifier")
    usage: LlmUsage = Field(default_factory=LlmUsage, description="Token usage")
    generation_time_ms: float = Field(default=0.0, description="Generation duration")
    security_context: SecurityContext = Field(description="Caller context")
    post_validation: PostGenerationValidationResult = Field(description="Content validation")
    snapshot: ResponseSnapshot | None = Field(default=None, description="Hash record")
    audit_trail: AuditTrail = Field(description="Audit events of the run")
    error_message: str | None = Field(default=None, description="Failure reason")
