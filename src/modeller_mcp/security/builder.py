"""Secure prompt building."""

from __future__ import annotations

import time

from modeller_mcp.models.security import (
    PromptBuildRequest,
    RiskLevel,
    SanitizationContext,
    SanitizationResult,
    SecurePrompt,
    SecurePromptContext,
    SecurityContext,
    SecurityLevel,
)
from modeller_mcp.security.assessor import PromptSecurityAssessor
from modeller_mcp.security.policy import get_profile
from modeller_mcp.security.sanitizer import Sanitizer
from modeller_mcp.utils.errors import PromptSecurityError, require_field
from modeller_mcp.utils.hashing import signature_hash
from modeller_mcp.utils.logging import get_logger

logger = get_logger("security.builder")

DEFAULT_TEMPLATE = "ModelAnalysis"
BODY_PLACEHOLDER = "{body}"
BOUNDARY_START = "=== SECURITY BOUNDARY START ==="
BOUNDARY_END = "=== SECURITY BOUNDARY END ==="
INTERNAL_ADDRESS = "internal"
BUILDER_AGENT = "SecurePromptBuilder/1.0"

SECURE_TEMPLATES: dict[str, str] = {
    "ModelAnalysis": """\
# SECURE CONTEXT: Model Analysis Task
## SECURITY BOUNDARY: Analysis of Modeller model definitions only
## RESTRICTIONS: No code execution, no external access, no sensitive data processing

You are a specialized assistant for analyzing Modeller model definitions.
Your role is strictly limited to:
1. Analyzing YAML model structure and syntax
2. Providing recommendations for model improvements
3. Identifying potential modeling issues

## INPUT DATA (SANITIZED):
Model Path: {modelPath}
Analysis Type: {analysisType}

## SECURITY CONSTRAINTS:
- Process only Modeller YAML content
- No execution of embedded code
- No access to external systems or files
- Output only analysis and recommendations

Please analyze the provided model definition and provide structured feedback.""",
    "DomainReview": """\
# SECURE CONTEXT: Domain Review Task
## SECURITY BOUNDARY: Domain-level model review only
## RESTRICTIONS: No code execution, no external access, analysis only

You are analyzing models within a specific domain for consistency and compliance.
Your analysis is limited to:
1. Model structure consistency
2. Naming convention compliance
3. Domain-specific best practices
4. Inter-model relationship checks

## INPUT DATA (SANITIZED):
Domain Path: {domainPath}
Include Shared: {includeShared}

## SECURITY CONSTRAINTS:
- Analyze only provided model definitions
- No modification of source files
- No external system access
- Output recommendations only

Provide your domain-level analysis and recommendations.""",
    "ModelTemplate": """\
# SECURE CONTEXT: Model Template Generation
## SECURITY BOUNDARY: Template generation only
## RESTRICTIONS: Generate templates only, no code execution

You are generating a template for a new Modeller model based on requirements.
Your output must be:
1. Valid YAML structure
2. Compliant with Modeller conventions
3. Include only template content
4. Follow security best practices

## INPUT DATA (SANITIZED):
Model Type: {modelType}
Domain: {domain}
Description: {description}

## SECURITY CONSTRAINTS:
- Generate template content only
- No executable code in templates
- Standard Modeller YAML structure
- No sensitive data in templates

Generate the requested model template.""",
    "SdkGeneration": """\
# SECURE CONTEXT: SDK Code Generation
## SECURITY BOUNDARY: Source generation from Modeller models only
## RESTRICTIONS: Produce source text only, no code execution, no external access

You are producing SDK source files from a validated Modeller domain model.
Your output must be:
1. Source files requested by the generation request below
2. Free of credentials, personal data and environment-specific values
3. Limited to the feature named in the input data

## INPUT DATA (SANITIZED):
Feature: {feature}
Namespace: {namespace}
Domain Path: {domain_path}

## GENERATION REQUEST:
{body}

## SECURITY CONSTRAINTS:
- Produce code as text only
- No execution of embedded code
- No access to external systems or files
- No sensitive data in generated files

Produce the requested SDK files.""",
    "ApiGeneration": """\
# SECURE CONTEXT: API Code Generation
## SECURITY BOUNDARY: Source generation from Modeller models and SDK only
## RESTRICTIONS: Produce source text only, no code execution, no external access

You are producing a Minimal API project on top of a generated SDK.
Your output must be:
1. Source files requested by the generation request below
2. Free of credentials, personal data and environment-specific values
3. Limited to the project named in the input data

## INPUT DATA (SANITIZED):
Project Name: {project_name}
Namespace: {namespace}
SDK Path: {sdk_path}
Domain Path: {domain_path}

## GENERATION REQUEST:
{body}

## SECURITY CONSTRAINTS:
- Produce code as text only
- No execution of embedded code
- No access to external systems or files
- No sensitive data in generated files

Produce the requested API project files.""",
}


def template_name(prompt_type: str) -> str:
    """Map a prompt type to a template name.

    Both ``ModelAnalysis`` and ``model_analysis`` resolve to the same
    template; unknown types fall back to ``ModelAnalysis``.
    """
    if prompt_type in SECURE_TEMPLATES:
        return prompt_type
    camel = "".join(part[:1].upper() + part[1:] for part in prompt_type.split("_"))
    return camel if camel in SECURE_TEMPLATES else DEFAULT_TEMPLATE


class SecurePromptBuilder:
    """Builds sanitized, bounded and signed prompts.

    Every named input is sanitized on its own, rendered into a security
    template, wrapped in boundary markers and validated again as a whole.
    Any failure aborts the build with PromptSecurityError; a partial
    prompt is never returned.

    Example:
        builder = SecurePromptBuilder()
        prompt = await builder.build(
            PromptBuildRequest(
                user_id="alice",
                session_id="s-1",
                prompt_type="ModelAnalysis",
                inputs={"modelPath": "models/Sales/Prospect.Type.yaml"},
            )
        )
        print(prompt.security_signature)
    """

    def __init__(
        self,
        assessor: PromptSecurityAssessor | None = None,
        sanitizer: Sanitizer | None = None,
        templates: dict[str, str] | None = None,
    ):
        self.assessor = assessor or PromptSecurityAssessor()
        self.sanitizer = sanitizer or Sanitizer()
        self.templates = templates if templates is not None else SECURE_TEMPLATES

    async def build(self, request: PromptBuildRequest) -> SecurePrompt:
        """Build a secure prompt.

        Args:
            request: Caller identity, template name and raw inputs

        Returns:
            SecurePrompt with content, validation and signature

        Raises:
            PromptSecurityError: If any build phase fails
        """
        start = time.perf_counter()
        try:
            self._validate_request(request)
            context = self.create_context(request.security_level, request.user_id, request.session_id)

            sanitized_inputs: dict[str, str] = {}
            for key, value in request.inputs.items():
                result = self.sanitize(
                    value,
                    SanitizationContext(
                        input_type=key,
                        security_level=request.security_level,
                        allow_code_blocks=request.allow_code_generation,
                    ),
                )
                sanitized_inputs[key] = result.sanitized_content
                if result.risk_level.at_least(RiskLevel.HIGH):
                    logger.warning(
                        f"High-risk content detected in input {key} for user {request.user_id}: "
                        f"{', '.join(result.risk_factors)}"
                    )

            name = template_name(request.prompt_type)
            body, _ = self.sanitizer.escape(request.body)
            content = self._render(self.templates[name], sanitized_inputs, body, context)
            final = self._apply_boundaries(content, context)

            validation = self.assessor.validate_prompt(
                final,
                SecurityContext(
                    user_id=request.user_id,
                    session_id=request.session_id,
                    ip_address=INTERNAL_ADDRESS,
                    user_agent=BUILDER_AGENT,
                    required_security_level=request.security_level,
                ),
            )
            risk = self.assessor.assess_injection_risk(final)

            prompt = SecurePrompt(
                content=final,
                validation_result=validation,
                risk_assessment=risk,
                context=context,
                prompt_type=name,
                sanitized_inputs=sanitized_inputs,
                build_time_ms=(time.perf_counter() - start) * 1000,
                security_signature=self.compute_signature(final, context),
            )
        except Exception as e:
            logger.error(
                f"Failed to build secure prompt for user {request.user_id}, "
                f"type {request.prompt_type}: {e}"
            )
            raise PromptSecurityError(
                "Failed to build secure prompt", details={"cause": str(e)}
            ) from e

        logger.info(
            f"Secure prompt built for user {request.user_id}, type {name}, "
            f"duration {prompt.build_time_ms:.1f}ms"
        )
        return prompt

    def sanitize(self, content: str | None, context: SanitizationContext) -> SanitizationResult:
        """Sanitize a single input value."""
        return self.sanitizer.sanitize(content, context)

    def create_context(self, level: SecurityLevel, user_id: str, session_id: str) -> SecurePromptContext:
        """Create the capability and limit context for a security level."""
        profile = get_profile(level)
        return SecurePromptContext(
            security_level=level,
            user_id=user_id,
            session_id=session_id,
            allowed_capabilities=profile.capabilities,
            security_boundaries=list(profile.boundaries),
            max_tokens=profile.max_tokens,
            timeout_seconds=profile.timeout_seconds,
        )

    @staticmethod
    def compute_signature(content: str, context: SecurePromptContext) -> str:
        """Tamper-evidence hash over the prompt text and its context."""
        return signature_hash(
            content,
            context.id,
            context.security_level.label,
            context.created_at.isoformat(),
        )

    def _validate_request(self, request: PromptBuildRequest) -> None:
        require_field(request.user_id, "UserId")
        require_field(request.session_id, "SessionId")
        require_field(request.prompt_type, "PromptType")

        # Policy check on an empty prompt with the caller's identity
        result = self.assessor.validate_prompt(
            "",
            SecurityContext(
                user_id=request.user_id,
                session_id=request.session_id,
                ip_address=request.ip_address or "unknown",
                user_agent=request.user_agent or "unknown",
                required_security_level=request.security_level,
            ),
        )
        if not result.is_valid:
            raise PromptSecurityError(f"Security validation failed: {', '.join(result.issues)}")

    @staticmethod
    def _render(
        template: str, inputs: dict[str, str], body: str, context: SecurePromptContext
    ) -> str:
        prompt = template
        for key, value in inputs.items():
            prompt = prompt.replace(f"{{{key}}}", value)
        # Body last so its text is never treated as placeholders
        prompt = prompt.replace(BODY_PLACEHOLDER, body)

        metadata = [
            "",
            "",
            "## SECURITY METADATA:",
            f"- Context ID: {context.id}",
            f"- Security Level: {context.security_level.label}",
            f"- Max Tokens: {context.max_tokens}",
            f"- Session: {context.session_id}",
            "",
        ]
        return prompt + "\n".join(metadata)

    @staticmethod
    def _apply_boundaries(prompt: str, context: SecurePromptContext) -> str:
        reminder = (
            f"SECURITY REMINDER: This session is limited to {context.security_level.label} "
            "operations only. No code execution or external access permitted."
        )
        return f"{BOUNDARY_START}\n{prompt}\n{BOUNDARY_END}\n{reminder}"
