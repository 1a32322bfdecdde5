"""Prompt security data models."""

from datetime import datetime
from enum import Enum
from uuid import uuid4

from pydantic import BaseModel, Field

from modeller_mcp.models.common import utc_now


def new_id() -> str:
    """Generate a fresh identifier."""
    return str(uuid4())


class SecurityLevel(str, Enum):
    """Ordinal policy tier gating sanitization, limits and rejection thresholds."""

    BASIC = "basic"
    STANDARD = "standard"
    ENHANCED = "enhanced"
    MAXIMUM = "maximum"

    @property
    def rank(self) -> int:
        """Ordinal position, Basic lowest."""
        return _SECURITY_RANKS[self]

    @property
    def label(self) -> str:
        """Display name, e.g. ``Standard``."""
        return self.value.title()

    def at_least(self, other: "SecurityLevel") -> bool:
        """Check whether this level is the same as or stricter than ``other``."""
        return self.rank >= other.rank


_SECURITY_RANKS = {
    SecurityLevel.BASIC: 1,
    SecurityLevel.STANDARD: 2,
    SecurityLevel.ENHANCED: 3,
    SecurityLevel.MAXIMUM: 4,
}


class RiskLevel(str, Enum):
    """Ordinal classification of injection or leakage hazard."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"

    @property
    def rank(self) -> int:
        """Ordinal position, Low lowest."""
        return _RISK_RANKS[self]

    @property
    def label(self) -> str:
        """Display name, e.g. ``High``."""
        return self.value.title()

    def at_least(self, other: "RiskLevel") -> bool:
        """Check whether this risk meets or exceeds ``other``."""
        return self.rank >= other.rank

    @classmethod
    def highest(cls, *levels: "RiskLevel") -> "RiskLevel":
        """Return the most severe of the given levels."""
        return max(levels, key=lambda level: level.rank)


_RISK_RANKS = {
    RiskLevel.LOW: 1,
    RiskLevel.MEDIUM: 2,
    RiskLevel.HIGH: 3,
    RiskLevel.CRITICAL: 4,
}


class SecurityContext(BaseModel):
    """Caller identity and required security level for one request."""

    model_config = {"frozen": True}

    user_id: str = Field(default="", description="Requesting user")
    session_id: str = Field(default="", description="Requesting session")
    ip_address: str = Field(default="", description="Origin address")
    user_agent: str = Field(default="", description="Origin user agent")
    required_security_level: SecurityLevel = Field(
        default=SecurityLevel.STANDARD,
        description="Security level that gates downstream policy",
    )


class SanitizationContext(BaseModel):
    """How a single input field should be sanitized."""

    model_config = {"frozen": True}

    input_type: str = Field(description="Name of the input being sanitized")
    security_level: SecurityLevel = Field(default=SecurityLevel.STANDARD, description="Security level")
    allow_code_blocks: bool = Field(default=False, description="Keep fenced code blocks")
    allow_markdown: bool = Field(default=True, description="Keep markdown")


class SanitizationResult(BaseModel):
    """Outcome of sanitizing one input field."""

    model_config = {"frozen": True}

    sanitized_content: str = Field(description="Transformed text")
    risk_level: RiskLevel = Field(default=RiskLevel.LOW, description="Assessed risk")
    risk_factors: list[str] = Field(default_factory=list, description="Detected risk factors")
    modifications_applied: list[str] = Field(
        default_factory=list, description="Transformations applied to the text"
    )


class PromptValidationResult(BaseModel):
    """Structural and injection validation of a prompt."""

    model_config = {"frozen": True}

    is_valid: bool = Field(description="Whether the prompt passed validation")
    issues: list[str] = Field(default_factory=list, description="Blocking issues")
    warnings: list[str] = Field(default_factory=list, description="Non-blocking warnings")
    processed_at: datetime = Field(default_factory=utc_now, description="Validation time")


class InjectionRiskAssessment(BaseModel):
    """Injection risk of a piece of prompt text."""

    model_config = {"frozen": True}

    level: RiskLevel = Field(default=RiskLevel.LOW, description="Assessed risk level")
    risk_factors: list[str] = Field(default_factory=list, description="Detected risk factors")
    reason: str = Field(default="", description="Risk factors joined for display")
    assessed_at: datetime = Field(default_factory=utc_now, description="Assessment time")


class SecurePromptContext(BaseModel):
    """Capabilities and limits granted to one secure prompt."""

    model_config = {"frozen": True}

    id: str = Field(default_factory=new_id, description="Context identifier")
    security_level: SecurityLevel = Field(description="Security level")
    user_id: str = Field(description="Requesting user")
    session_id: str = Field(description="Requesting session")
    created_at: datetime = Field(default_factory=utc_now, description="Creation time")

    # Policy
    allowed_capabilities: frozenset[str] = Field(
        default_factory=frozenset, description="Operations the prompt may request"
    )
    security_boundaries: list[str] = Field(default_factory=list, description="Boundary tags")
    max_tokens: int = Field(description="Output token cap")
    timeout_seconds: int = Field(description="Generation timeout")


class PromptBuildRequest(BaseModel):
    """Input to the secure prompt builder."""

    model_config = {"frozen": True}

    user_id: str = Field(default="", description="Requesting user")
    session_id: str = Field(default="", description="Requesting session")
    prompt_type: str = Field(default="", description="Template name")
    security_level: SecurityLevel = Field(default=SecurityLevel.STANDARD, description="Security level")
    inputs: dict[str, str] = Field(default_factory=dict, description="Named template inputs")
    body: str = Field(default="", description="Gate-checked request text for generation templates")
    allow_code_generation: bool = Field(default=False, description="Keep code blocks in inputs")
    ip_address: str | None = Field(default=None, description="Origin address")
    user_agent: str | None = Field(default=None, description="Origin user agent")


class SecurePrompt(BaseModel):
    """A sanitized, bounded and signed prompt ready for generation."""

    model_config = {"frozen": True}

    id: str = Field(default_factory=new_id, description="Prompt identifier")
    content: str = Field(description="Final wrapped prompt text")
    validation_result: PromptValidationResult = Field(description="Validation of the final text")
    risk_assessment: InjectionRiskAssessment = Field(description="Risk of the final text")
    context: SecurePromptContext = Field(description="Granted context")
    prompt_type: str = Field(default="", description="Template name used")
    sanitized_inputs: dict[str, str] = Field(default_factory=dict, description="Sanitized inputs")
    build_time_ms: float = Field(default=0.0, description="Build duration in milliseconds")
    security_signature: str = Field(default="", description="Tamper-evidence hash")
    created_at: datetime = Field(default_factory=utc_now, description="Creation time")
