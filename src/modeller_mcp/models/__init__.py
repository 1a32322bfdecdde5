"""Data models for modeller-mcp.

Value models are Pydantic BaseModel with frozen=True for immutability.
Definition models parse domain YAML documents and are left mutable.
"""

from modeller_mcp.models.common import AuditError
from modeller_mcp.models.discovery import (
    DiscoveryResult,
    ModelDirectory,
    ModelFileGroup,
    ModelFileInfo,
    ModelFileKind,
)
from modeller_mcp.models.validation import (
    ValidationFinding,
    ValidationReport,
    ValidationSeverity,
)
from modeller_mcp.models.definition import (
    AttributeTypeDefinition,
    AttributeUsage,
    Behaviour,
    EnumDefinition,
    EnumItem,
    FolderMetadata,
    ModelDefinition,
    Scenario,
    ValidationProfile,
)
from modeller_mcp.models.security import (
    InjectionRiskAssessment,
    PromptBuildRequest,
    PromptValidationResult,
    RiskLevel,
    SanitizationContext,
    SanitizationResult,
    SecurePrompt,
    SecurePromptContext,
    SecurityContext,
    SecurityLevel,
)
from modeller_mcp.models.audit import (
    AuditEvent,
    AuditTrail,
    LlmAuditEntry,
    PromptAuditEntry,
    SecurityViolationEntry,
)
from modeller_mcp.models.llm import (
    LlmModelInfo,
    LlmParameters,
    LlmRequest,
    LlmResponse,
    LlmUsage,
    LlmUsageEstimate,
    PostGenerationValidationResult,
    ResponseSnapshot,
    SecureLlmRequest,
    SecureLlmResponse,
    SecurityValidationResult,
)
from modeller_mcp.models.generation import (
    ApiGenerationRequest,
    GenerationResult,
    SdkGenerationRequest,
)

__all__ = [
    # Common
    "AuditError",
    # Discovery
    "DiscoveryResult",
    "ModelDirectory",
    "ModelFileGroup",
    "ModelFileInfo",
    "ModelFileKind",
    # Validation
    "ValidationFinding",
    "ValidationReport",
    "ValidationSeverity",
    # Definitions
    "AttributeTypeDefinition",
    "AttributeUsage",
    "Behaviour",
    "EnumDefinition",
    "EnumItem",
    "FolderMetadata",
    "ModelDefinition",
    "Scenario",
    "ValidationProfile",
    # Security
    "InjectionRiskAssessment",
    "PromptBuildRequest",
    "PromptValidationResult",
    "RiskLevel",
    "SanitizationContext",
    "SanitizationResult",
    "SecurePrompt",
    "SecurePromptContext",
    "SecurityContext",
    "SecurityLevel",
    # Audit
    "AuditEvent",
    "AuditTrail",
    "LlmAuditEntry",
    "PromptAuditEntry",
    "SecurityViolationEntry",
    # LLM
    "LlmModelInfo",
    "LlmParameters",
    "LlmRequest",
    "LlmResponse",
    "LlmUsage",
    "LlmUsageEstimate",
    "PostGenerationValidationResult",
    "ResponseSnapshot",
    "SecureLlmRequest",
    "SecureLlmResponse",
    "SecurityValidationResult",
    # Generation
    "ApiGenerationRequest",
    "GenerationResult",
    "SdkGenerationRequest",
]
