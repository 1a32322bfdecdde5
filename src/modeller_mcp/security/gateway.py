"""Secure generation gateway.

The gateway runs a raw prompt through context validation, injection
assessment, a risk gate, secure prompt building, the backend call and
post-generation validation. Every run ends in a SecureLlmResponse; only
task cancellation escapes as an exception.
"""

from __future__ import annotations

import asyncio
import re
import time
from uuid import uuid4

from modeller_mcp.llm.base import LlmBackend
from modeller_mcp.models.audit import (
    AuditTrail,
    LlmAuditEntry,
    PromptAuditEntry,
    SecurityViolationEntry,
)
from modeller_mcp.models.llm import (
    LlmParameters,
    LlmRequest,
    LlmResponse,
    LlmUsage,
    PostGenerationValidationResult,
    ResponseSnapshot,
    SecureLlmRequest,
    SecureLlmResponse,
    SecurityValidationResult,
)
from modeller_mcp.models.security import (
    PromptBuildRequest,
    SecurePrompt,
    SecurityContext,
    SecurityLevel,
)
from modeller_mcp.security.assessor import PromptSecurityAssessor
from modeller_mcp.security.audit import AuditSink, InMemoryAuditSink
from modeller_mcp.security.builder import SecurePromptBuilder
from modeller_mcp.security.policy import STOP_SEQUENCES, get_profile, should_reject
from modeller_mcp.utils.hashing import compute_hash
from modeller_mcp.utils.logging import get_logger, get_logger_with_context

logger = get_logger("security.gateway")

FAILED_CONTENT = "[FAILED]"
SUCCESS_VALIDATIONS = ["context", "prompt", "injection_risk", "post_generation"]
FAILURE_VALIDATIONS = ["failed"]

SENSITIVE_PATTERNS = [
    re.compile(r"\b\d{4}[-\s]?\d{4}[-\s]?\d{4}[-\s]?\d{4}\b"),  # card numbers
    re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"),  # emails
    re.compile(r"\b\d{3}-\d{2}-\d{4}\b"),  # SSN
    re.compile(r"\bpassword\s*[:=]\s*\S+", re.IGNORECASE),
    re.compile(r"\bapi[_\s-]?key\s*[:=]\s*\S+", re.IGNORECASE),
    re.compile(r"\btoken\s*[:=]\s*\S+", re.IGNORECASE),
]

EXECUTABLE_PATTERNS = [
    re.compile(r"<script\b", re.IGNORECASE),
    re.compile(r"\beval\s*\(", re.IGNORECASE),
    re.compile(r"\bexec\s*\(", re.IGNORECASE),
    re.compile(r"^\s*\$\s", re.IGNORECASE | re.MULTILINE),
    re.compile(r"^\s*sudo\s", re.IGNORECASE | re.MULTILINE),
    re.compile(r"\bimport\s+os\b", re.IGNORECASE),
    re.compile(r"\bimport\s+subprocess\b", re.IGNORECASE),
]

# Line shapes of plain Modeller YAML
YAML_LINE_PATTERNS = [
    re.compile(r"^\s*name:\s*\w+", re.IGNORECASE),
    re.compile(r"^\s*type:\s*\w+", re.IGNORECASE),
    re.compile(r"^\s*description:\s*.+", re.IGNORECASE),
    re.compile(r"^\s*properties:", re.IGNORECASE),
    re.compile(r"^\s*-\s+\w+:", re.IGNORECASE),
]

INJECTION_INDICATORS = (
    "ignore previous",
    "forget previous",
    "new instructions",
    "system prompt",
    "admin mode",
    "developer mode",
    "debug mode",
    "override",
    "bypass",
)


def contains_sensitive_information(content: str) -> bool:
    return any(pattern.search(content) for pattern in SENSITIVE_PATTERNS)


def contains_executable_code(content: str) -> bool:
    return any(pattern.search(content) for pattern in EXECUTABLE_PATTERNS)


def is_yaml_only(content: str) -> bool:
    """Whether every non-blank line looks like Modeller YAML."""
    return all(
        not line.strip() or any(pattern.search(line) for pattern in YAML_LINE_PATTERNS)
        for line in content.split("\n")
    )


def contains_injection_indicators(content: str) -> bool:
    lowered = content.lower()
    return any(indicator in lowered for indicator in INJECTION_INDICATORS)


def create_parameters(level: SecurityLevel) -> LlmParameters:
    """Backend sampling parameters for a security level."""
    profile = get_profile(level)
    return LlmParameters(
        temperature=profile.temperature,
        max_tokens=profile.max_output_tokens,
        top_p=0.9,
        frequency_penalty=0.1,
        presence_penalty=0.1,
        stop=list(STOP_SEQUENCES),
        seed=profile.seed,
    )


def create_snapshot(
    response: LlmResponse,
    prompt: SecurePrompt,
    validation: PostGenerationValidationResult,
) -> ResponseSnapshot:
    """Hash record of a generation; hashes depend only on the text."""
    return ResponseSnapshot(
        content_hash=compute_hash(response.content).upper(),
        prompt_hash=compute_hash(prompt.content).upper(),
        secure_prompt_id=prompt.id,
        model_id=response.model_id,
        tokens_used=response.usage.total_tokens,
        generation_time_ms=response.generation_time_ms,
        validation_passed=validation.is_valid,
        security_level=prompt.context.security_level,
    )


class _Operation:
    """Bookkeeping for one pipeline run."""

    def __init__(self, request: SecureLlmRequest):
        self.id = str(uuid4())
        self.request = request
        self.started = time.perf_counter()
        self.event_ids: list[str] = []
        self.prompt_audit_id: str | None = None

    @property
    def last_event_id(self) -> str | None:
        return self.event_ids[-1] if self.event_ids else None

    @property
    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self.started) * 1000


class SecureLlmGateway:
    """Wraps a generation backend with security checks and auditing.

    Each run emits audit events in order, each pointing at the event
    emitted just before it: a prompt validation entry, a security
    violation entry when the risk gate rejects, and finally an LLM
    interaction entry for both successes and failures.

    Example:
        gateway = SecureLlmGateway(MockLlmBackend(simulate_latency=False))
        response = await gateway.generate(
            SecureLlmRequest(
                raw_prompt="Describe the Prospect model",
                model_id="gpt-4",
                prompt_type="ModelAnalysis",
                security_context=SecurityContext(user_id="alice", session_id="s-1", ip_address="10.0.0.1"),
            )
        )
        print(response.is_success, response.error_message)
    """

    def __init__(
        self,
        backend: LlmBackend,
        audit_sink: AuditSink | None = None,
        builder: SecurePromptBuilder | None = None,
        assessor: PromptSecurityAssessor | None = None,
    ):
        self.backend = backend
        self.audit_sink = audit_sink if audit_sink is not None else InMemoryAuditSink()
        self.assessor = assessor or PromptSecurityAssessor()
        self.builder = builder or SecurePromptBuilder(assessor=self.assessor)

    async def generate(self, request: SecureLlmRequest) -> SecureLlmResponse:
        """Run the full secure generation pipeline.

        Args:
            request: Raw prompt, model, template name and caller context

        Returns:
            SecureLlmResponse; ``is_success`` is the post-generation
            validation outcome, not the backend's own success flag
        """
        operation = _Operation(request)
        context = request.security_context
        log = get_logger_with_context(
            "security.gateway", operation_id=operation.id, user_id=context.user_id
        )
        log.info(f"Starting secure LLM generation for model {request.model_id}")

        try:
            context_validation = self.validate_context(context)
            if not context_validation.is_valid:
                return await self._fail(
                    operation,
                    f"Security context validation failed: {', '.join(context_validation.issues)}",
                )

            validation = self.assessor.validate_prompt(request.raw_prompt, context)
            risk = self.assessor.assess_injection_risk(request.raw_prompt)
            prompt_entry = PromptAuditEntry(
                operation_id=operation.id,
                previous_event_id=operation.last_event_id,
                model_id=request.model_id,
                security_context=context,
                original_prompt=request.raw_prompt,
                validation_result=validation,
                injection_risk=risk,
                processing_duration_ms=operation.elapsed_ms,
            )
            await self.audit_sink.log_prompt_validation(prompt_entry)
            operation.event_ids.append(prompt_entry.id)
            operation.prompt_audit_id = prompt_entry.id

            level = context.required_security_level
            if should_reject(risk.level, level):
                log.warning(
                    f"Rejecting prompt at risk {risk.level.label}: {', '.join(risk.risk_factors)}"
                )
                message = f"Prompt rejected due to security risk: {risk.level.label}"
                violation = SecurityViolationEntry(
                    operation_id=operation.id,
                    previous_event_id=operation.last_event_id,
                    model_id=request.model_id,
                    security_context=context,
                    violation=message,
                    injection_risk=risk,
                )
                await self.audit_sink.log_security_violation(violation)
                operation.event_ids.append(violation.id)
                return await self._fail(operation, message)

            secure_prompt = await self.builder.build(
                PromptBuildRequest(
                    user_id=context.user_id,
                    session_id=context.session_id,
                    prompt_type=request.prompt_type,
                    security_level=level,
                    inputs=request.prompt_inputs,
                    body=request.raw_prompt,
                    allow_code_generation=request.allow_code_generation,
                    ip_address=context.ip_address,
                    user_agent=context.user_agent,
                )
            )

            profile = get_profile(level)
            llm_request = LlmRequest(
                prompt=secure_prompt.content,
                model_id=request.model_id,
                parameters=create_parameters(level),
                security_context=context,
                metadata={
                    "OperationId": operation.id,
                    "SecurePromptId": secure_prompt.id,
                    "SecurityLevel": level.label,
                    "UserId": context.user_id,
                },
            )
            try:
                llm_response = await asyncio.wait_for(
                    self.backend.generate(llm_request), timeout=profile.timeout_seconds
                )
            except asyncio.TimeoutError:
                return await self._fail(
                    operation, f"LLM generation timed out after {profile.timeout_seconds}s"
                )

            if not llm_response.is_success:
                return await self._fail(
                    operation, f"LLM generation failed: {llm_response.error_message}"
                )

            post_validation = self.validate_generated_content(llm_response.content, context)
            snapshot = create_snapshot(llm_response, secure_prompt, post_validation)

            llm_entry = LlmAuditEntry(
                operation_id=operation.id,
                previous_event_id=operation.last_event_id,
                model_id=request.model_id,
                security_context=context,
                prompt_audit_id=operation.prompt_audit_id,
                response_content=llm_response.content,
                response_length=len(llm_response.content),
                tokens_used=llm_response.usage.total_tokens,
                generation_duration_ms=llm_response.generation_time_ms,
                post_validation_passed=post_validation.is_valid,
                validation_errors=post_validation.issues,
            )
            await self.audit_sink.log_llm_interaction(llm_entry)
            operation.event_ids.append(llm_entry.id)

            response = SecureLlmResponse(
                operation_id=operation.id,
                content=llm_response.content,
                is_success=post_validation.is_valid,
                model_id=request.model_id,
                usage=llm_response.usage,
                generation_time_ms=llm_response.generation_time_ms,
                security_context=context,
                post_validation=post_validation,
                snapshot=snapshot,
                audit_trail=AuditTrail(
                    operation_id=operation.id,
                    prompt_audit_id=operation.prompt_audit_id,
                    llm_audit_id=llm_entry.id,
                    event_ids=list(operation.event_ids),
                    security_validations=list(SUCCESS_VALIDATIONS),
                    total_processing_time_ms=operation.elapsed_ms,
                ),
                error_message=None if post_validation.is_valid else "; ".join(post_validation.issues),
            )
            log.info(f"Secure LLM generation completed in {operation.elapsed_ms:.0f}ms")
            return response
        except Exception as e:
            log.error(f"Secure LLM generation failed: {e}")
            return await self._fail(operation, f"Internal error: {e}")

    def validate_context(self, context: SecurityContext) -> SecurityValidationResult:
        """Check that the caller context carries identity and a known level."""
        issues = []
        if not context.user_id:
            issues.append("UserId is required")
        if not context.session_id:
            issues.append("SessionId is required")
        if not context.ip_address:
            issues.append("IPAddress is required")
        if not isinstance(context.required_security_level, SecurityLevel):
            issues.append("Invalid security level")
        return SecurityValidationResult(is_valid=not issues, issues=issues)

    def validate_generated_content(
        self, content: str, context: SecurityContext
    ) -> PostGenerationValidationResult:
        """Validate backend output against the caller's security level."""
        level = context.required_security_level
        issues: list[str] = []
        warnings: list[str] = []

        try:
            if contains_sensitive_information(content):
                issues.append("Generated content contains potentially sensitive information")

            if level.at_least(SecurityLevel.ENHANCED):
                if contains_executable_code(content) and not is_yaml_only(content):
                    issues.append(
                        "Generated content contains executable code not permitted at this security level"
                    )

            if contains_injection_indicators(content):
                warnings.append("Generated content may contain injection attempt indicators")

            if len(content) > get_profile(level).max_content_length:
                issues.append(
                    f"Generated content exceeds maximum length for security level {level.label}"
                )

            if not content.strip():
                issues.append("Generated content is empty or whitespace only")
        except Exception as e:
            logger.error(f"Post-generation validation failed for user {context.user_id}: {e}")
            return PostGenerationValidationResult(
                is_valid=False,
                issues=[f"Validation error: {e}"],
                content_length=len(content or ""),
                security_level=level,
            )

        return PostGenerationValidationResult(
            is_valid=not issues,
            issues=issues,
            warnings=warnings,
            content_length=len(content),
            security_level=level,
        )

    async def _fail(self, operation: _Operation, message: str) -> SecureLlmResponse:
        request = operation.request
        entry = LlmAuditEntry(
            operation_id=operation.id,
            previous_event_id=operation.last_event_id,
            model_id=request.model_id,
            security_context=request.security_context,
            prompt_audit_id=operation.prompt_audit_id,
            response_content=FAILED_CONTENT,
            generation_duration_ms=operation.elapsed_ms,
            post_validation_passed=False,
            validation_errors=[message],
        )
        try:
            await self.audit_sink.log_llm_interaction(entry)
            operation.event_ids.append(entry.id)
        except Exception as e:
            logger.error(f"Failed to record failure audit entry for operation {operation.id}: {e}")

        return SecureLlmResponse(
            operation_id=operation.id,
            is_success=False,
            model_id=request.model_id,
            usage=LlmUsage(),
            generation_time_ms=operation.elapsed_ms,
            security_context=request.security_context,
            post_validation=PostGenerationValidationResult(
                is_valid=False,
                issues=[message],
                security_level=request.security_context.required_security_level,
            ),
            audit_trail=AuditTrail(
                operation_id=operation.id,
                prompt_audit_id=operation.prompt_audit_id,
                llm_audit_id=entry.id,
                event_ids=list(operation.event_ids),
                security_validations=list(FAILURE_VALIDATIONS),
                total_processing_time_ms=operation.elapsed_ms,
            ),
            error_message=message,
        )
