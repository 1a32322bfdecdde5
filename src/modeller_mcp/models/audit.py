"""Audit event models.

Every event is frozen and carries ``previous_event_id``, the id of the event
emitted just before it in the same pipeline run.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from modeller_mcp.models.common import utc_now
from modeller_mcp.models.security import (
    InjectionRiskAssessment,
    PromptValidationResult,
    SecurityContext,
    new_id,
)


class AuditEvent(BaseModel):
    """Base for append-only audit events."""

    model_config = {"frozen": True, "protected_namespaces": ()}

    id: str = Field(default_factory=new_id, description="Event identifier")
    timestamp: datetime = Field(default_factory=utc_now, description="Emission time")
    operation_id: str = Field(default="", description="Pipeline run identifier")
    previous_event_id: str | None = Field(
        default=None, description="Event emitted just before this one"
    )
    model_id: str = Field(default="", description="Backend model identifier")
    security_context: SecurityContext = Field(description="Caller context")

    @property
    def event_type(self) -> str:
        """Short name of the event kind."""
        return "audit"


class PromptAuditEntry(AuditEvent):
    """Validation of the raw prompt, emitted before the rejection gate."""

    original_prompt: str = Field(description="Raw prompt text")
    validation_result: PromptValidationResult = Field(description="Prompt validation")
    injection_risk: InjectionRiskAssessment = Field(description="Injection assessment")
    processing_duration_ms: float = Field(default=0.0, description="Time spent so far")

    @property
    def event_type(self) -> str:
        return "prompt_validation"


class SecurityViolationEntry(AuditEvent):
    """A prompt rejected by the risk gate."""

    violation: str = Field(description="Rejection reason")
    injection_risk: InjectionRiskAssessment = Field(description="Assessment that triggered the gate")

    @property
    def event_type(self) -> str:
        return "security_violation"


class LlmAuditEntry(AuditEvent):
    """A generation call or a failed pipeline run."""

    prompt_audit_id: str | None = Field(default=None, description="Prompt audit event id")
    response_content: str = Field(default="", description="Generated text or [FAILED]")
    response_length: int = Field(default=0, description="Length of the generated text")
    tokens_used: int = Field(default=0, description="Total tokens")
    generation_duration_ms: float = Field(default=0.0, description="Generation duration")
    post_validation_passed: bool = Field(default=False, description="Content validation outcome")
    validation_errors: list[str] = Field(default_factory=list, description="Validation issues")

    @property
    def event_type(self) -> str:
        return "llm_interaction"


class AuditTrail(BaseModel):
    """Ordered audit event ids of one pipeline run."""

    model_config = {"frozen": True}

    operation_id: str = Field(description="Pipeline run identifier")
    prompt_audit_id: str | None = Field(default=None, description="Prompt audit event id")
    llm_audit_id: str | None = Field(default=None, description="LLM audit event id")
    event_ids: list[str] = Field(default_factory=list, description="Event ids in emission order")
    security_validations: list[str] = Field(
        default_factory=list, description="Validations performed"
    )
    total_processing_time_ms: float = Field(default=0.0, description="Elapsed pipeline time")
