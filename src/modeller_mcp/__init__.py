"""modeller-mcp: discovery, validation and secure code generation for Modeller models.

This package works on declarative domain models written as YAML files
(entity attributes plus BDD-style behaviours and scenarios):

- **Discovery**: Find model files and classify them by content
- **Validation**: Check folder layout, naming conventions and file content
- **Prompt Assembly**: Render SDK and Minimal API generation prompts
- **Secure Gateway**: Sanitize, gate, generate, post-validate and audit

Usage:
    # Library API
    from modeller_mcp import ModelDiscoveryEngine, ModelValidator, VsaPromptAssembler

    result = ModelDiscoveryEngine().discover("my-project")
    report = ModelValidator().validate("my-project/models")

    assembler = VsaPromptAssembler()
    prompt = assembler.build_sdk_prompt(yaml_text, "Prospects", "Sales.Sdk")

    # Secure generation
    gateway = SecureLlmGateway(MockLlmBackend())
    response = await gateway.generate(request)

CLI:
    modeller-mcp discover <path>
    modeller-mcp validate-model <path>
    modeller-mcp validate-structure <path>
    modeller-mcp validate-domain <path>
    modeller-mcp generate-sdk -d <domain> --feature <name> -n <namespace> -o <out>
    modeller-mcp generate-api -s <sdk> -d <domain> -p <project> -n <namespace> -o <out>
"""

__version__ = "0.1.0"

# Core classes
from modeller_mcp.core.classifier import FileClassifier
from modeller_mcp.core.discovery import ModelDiscoveryEngine
from modeller_mcp.core.store import ValidatedModelStore
from modeller_mcp.core.structure import StructureValidator
from modeller_mcp.core.validator import ModelValidator

# Prompts
from modeller_mcp.prompts.vsa import VsaPromptAssembler

# Security
from modeller_mcp.security.assessor import PromptSecurityAssessor
from modeller_mcp.security.audit import InMemoryAuditSink, PromptAuditLogger
from modeller_mcp.security.builder import SecurePromptBuilder
from modeller_mcp.security.gateway import SecureLlmGateway
from modeller_mcp.security.sanitizer import Sanitizer

# Backends and services
from modeller_mcp.llm.mock import MockLlmBackend
from modeller_mcp.generation.api import ApiGenerationService
from modeller_mcp.generation.sdk import SdkGenerationService

# Models (commonly used)
from modeller_mcp.models.discovery import DiscoveryResult, ModelFileKind
from modeller_mcp.models.validation import ValidationReport, ValidationSeverity
from modeller_mcp.models.security import RiskLevel, SecurityContext, SecurityLevel
from modeller_mcp.models.llm import SecureLlmRequest, SecureLlmResponse
from modeller_mcp.models.generation import ApiGenerationRequest, GenerationResult, SdkGenerationRequest

# Renderers
from modeller_mcp.renderers.base import OutputFormat, RenderContext, Renderer

__all__ = [
    # Version
    "__version__",
    # Core
    "FileClassifier",
    "ModelDiscoveryEngine",
    "ValidatedModelStore",
    "StructureValidator",
    "ModelValidator",
    # Prompts
    "VsaPromptAssembler",
    # Security
    "PromptSecurityAssessor",
    "InMemoryAuditSink",
    "PromptAuditLogger",
    "SecurePromptBuilder",
    "SecureLlmGateway",
    "Sanitizer",
    # Backends and services
    "MockLlmBackend",
    "ApiGenerationService",
    "SdkGenerationService",
    # Models
    "DiscoveryResult",
    "ModelFileKind",
    "ValidationReport",
    "ValidationSeverity",
    "RiskLevel",
    "SecurityContext",
    "SecurityLevel",
    "SecureLlmRequest",
    "SecureLlmResponse",
    "ApiGenerationRequest",
    "GenerationResult",
    "SdkGenerationRequest",
    # Renderers
    "Renderer",
    "RenderContext",
    "OutputFormat",
]
