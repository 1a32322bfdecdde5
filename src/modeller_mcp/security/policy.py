"""Security level profiles.

All per-level limits live in one table so that their ordering across
levels can be read and tested in one place.
"""

from pydantic import BaseModel, Field

from modeller_mcp.models.security import RiskLevel, SecurityLevel

BASE_CAPABILITIES = ("analysis", "validation")
BASE_BOUNDARIES = (
    "NO_CODE_EXECUTION",
    "NO_EXTERNAL_ACCESS",
    "NO_SENSITIVE_DATA",
    "MODELLER_MODELS_ONLY",
)
STRICT_BOUNDARIES = ("AUDIT_ALL_OPERATIONS", "VALIDATE_ALL_INPUTS")

STOP_SEQUENCES = (
    "SECURITY_BOUNDARY_END",
    "=== SECURITY BOUNDARY END ===",
    "SYSTEM:",
    "ADMIN:",
    "ROOT:",
)
DETERMINISTIC_SEED = 42


class SecurityProfile(BaseModel):
    """Limits and thresholds that apply at one security level."""

    model_config = {"frozen": True}

    level: SecurityLevel = Field(description="Security level")

    # Prompt building
    capabilities: frozenset[str] = Field(description="Operations a prompt may request")
    boundaries: tuple[str, ...] = Field(description="Boundary tags attached to prompts")
    max_tokens: int = Field(description="Prompt context token cap")
    timeout_seconds: int = Field(description="Generation timeout")
    max_input_length: int = Field(description="Sanitized input length cap")

    # Generation
    temperature: float = Field(description="Sampling temperature")
    max_output_tokens: int = Field(description="Backend output token cap")
    seed: int | None = Field(default=None, description="Fixed seed, None for non-deterministic")

    # Gating
    max_content_length: int = Field(description="Generated content length cap")
    reject_at: RiskLevel = Field(description="Lowest input risk that is rejected")


PROFILES: dict[SecurityLevel, SecurityProfile] = {
    SecurityLevel.BASIC: SecurityProfile(
        level=SecurityLevel.BASIC,
        capabilities=frozenset(BASE_CAPABILITIES),
        boundaries=BASE_BOUNDARIES,
        max_tokens=1000,
        timeout_seconds=30,
        max_input_length=1000,
        temperature=0.1,
        max_output_tokens=1000,
        seed=DETERMINISTIC_SEED,
        max_content_length=5000,
        reject_at=RiskLevel.HIGH,
    ),
    SecurityLevel.STANDARD: SecurityProfile(
        level=SecurityLevel.STANDARD,
        capabilities=frozenset(BASE_CAPABILITIES + ("template_generation",)),
        boundaries=BASE_BOUNDARIES,
        max_tokens=2000,
        timeout_seconds=60,
        max_input_length=5000,
        temperature=0.3,
        max_output_tokens=2000,
        seed=DETERMINISTIC_SEED,
        max_content_length=10000,
        reject_at=RiskLevel.HIGH,
    ),
    SecurityLevel.ENHANCED: SecurityProfile(
        level=SecurityLevel.ENHANCED,
        capabilities=frozenset(BASE_CAPABILITIES + ("template_generation", "recommendations")),
        boundaries=BASE_BOUNDARIES + STRICT_BOUNDARIES,
        max_tokens=4000,
        timeout_seconds=120,
        max_input_length=10000,
        temperature=0.5,
        max_output_tokens=4000,
        seed=None,
        max_content_length=25000,
        reject_at=RiskLevel.MEDIUM,
    ),
    SecurityLevel.MAXIMUM: SecurityProfile(
        level=SecurityLevel.MAXIMUM,
        capabilities=frozenset(
            BASE_CAPABILITIES
            + ("template_generation", "recommendations", "migration_guidance")
        ),
        boundaries=BASE_BOUNDARIES + STRICT_BOUNDARIES,
        max_tokens=8000,
        timeout_seconds=300,
        max_input_length=50000,
        temperature=0.7,
        max_output_tokens=8000,
        seed=None,
        max_content_length=100000,
        reject_at=RiskLevel.MEDIUM,
    ),
}


def get_profile(level: SecurityLevel) -> SecurityProfile:
    """Get the profile of a security level."""
    return PROFILES[level]


def should_reject(risk: RiskLevel, level: SecurityLevel) -> bool:
    """Whether input of the given risk is rejected at a security level.

    Stricter levels reject at a lower risk: Basic and Standard reject High
    and above, Enhanced and Maximum reject Medium and above.
    """
    return risk.at_least(get_profile(level).reject_at)
