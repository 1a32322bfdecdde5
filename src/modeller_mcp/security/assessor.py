"""Prompt-level validation and injection risk assessment."""

from __future__ import annotations

from modeller_mcp.models.security import (
    InjectionRiskAssessment,
    PromptValidationResult,
    RiskLevel,
    SecurityContext,
)
from modeller_mcp.utils.config import SecurityConfig
from modeller_mcp.utils.logging import get_logger

logger = get_logger("security.assessor")

OVERRIDE_VERBS = (
    "ignore",
    "forget",
    "disregard",
    "override",
    "bypass",
    "disable",
    "turn off",
    "don't follow",
    "stop following",
)
OVERRIDE_TARGETS = (
    "previous instructions",
    "system prompt",
    "rules",
    "guidelines",
    "constraints",
    "security",
    "validation",
)
ROLE_PHRASES = ("you are now", "act as", "pretend to be", "roleplay as")
ENCODING_MARKERS = ("base64", "decode", "unescape")
EVALUATION_CALLS = ("eval(", "exec(")
PROXIMITY_WORDS = 10

SANITIZE_REPLACEMENTS = (
    ("```", "\\`\\`\\`"),
    ("---", "\\-\\-\\-"),
    ("{{", "\\{\\{"),
    ("}}", "\\}\\}"),
    ("Ignore previous instructions", "[FILTERED_INSTRUCTION]"),
    ("Ignore all previous", "[FILTERED_INSTRUCTION]"),
    ("System:", "[FILTERED_ROLE]"),
    ("Assistant:", "[FILTERED_ROLE]"),
    ("Human:", "[FILTERED_ROLE]"),
    ("$(", "\\$("),
    ("`", "\\`"),
    ("</system>", "[FILTERED_TAG]"),
    ("<system>", "[FILTERED_TAG]"),
    ("</prompt>", "[FILTERED_TAG]"),
    ("<prompt>", "[FILTERED_TAG]"),
)


class PromptSecurityAssessor:
    """Checks whole prompts for structural problems and injection phrasing.

    Unlike the per-field Sanitizer, the assessor looks at the full prompt
    text: it counts delimiters, looks for instruction-override phrasing
    and role confusion, and scores the result.

    Example:
        assessor = PromptSecurityAssessor()
        risk = assessor.assess_injection_risk(prompt)
        if risk.level == RiskLevel.HIGH:
            print(risk.reason)
    """

    def __init__(self, config: SecurityConfig | None = None):
        self.config = config or SecurityConfig()

    def validate_prompt(self, prompt: str, context: SecurityContext | None = None) -> PromptValidationResult:
        """Validate structure and injection risk together.

        The prompt is invalid when it has structural issues or its risk is
        exactly High.
        """
        structural = self.validate_structure(prompt)
        risk = self.assess_injection_risk(prompt)

        issues = list(structural.issues)
        if risk.level == RiskLevel.HIGH:
            issues.append(
                f"High injection risk detected: {risk.reason or 'Multiple risk factors identified'}"
            )

        if context is not None and issues:
            logger.debug(f"Prompt validation for user {context.user_id} found {len(issues)} issues")

        return PromptValidationResult(
            is_valid=structural.is_valid and risk.level != RiskLevel.HIGH,
            issues=issues,
            warnings=structural.warnings,
        )

    def validate_structure(self, prompt: str) -> PromptValidationResult:
        """Check delimiter balance, length and evaluation calls."""
        issues: list[str] = []
        warnings: list[str] = []

        if prompt.count("```") % 2 != 0:
            issues.append("Unbalanced code block delimiters")

        if prompt.count("{{") != prompt.count("}}"):
            issues.append("Unbalanced template variable delimiters")

        max_length = self.config.max_prompt_length
        if len(prompt) > max_length:
            warnings.append(
                f"Prompt length ({len(prompt)}) exceeds recommended maximum ({max_length})"
            )

        if any(call in prompt for call in EVALUATION_CALLS):
            issues.append("Contains potentially dangerous evaluation functions")

        return PromptValidationResult(is_valid=not issues, issues=issues, warnings=warnings)

    def assess_injection_risk(self, prompt: str) -> InjectionRiskAssessment:
        """Score a prompt for instruction-override and role-confusion phrasing."""
        factors: list[str] = []
        level = RiskLevel.LOW
        lowered = prompt.lower()
        words = lowered.split()

        for verb in OVERRIDE_VERBS:
            for target in OVERRIDE_TARGETS:
                if f"{verb} {target}" in lowered:
                    factors.append(f"Potential instruction override: '{verb} {target}'")
                    level = RiskLevel.HIGH
                elif verb in lowered and target in lowered and self._near(words, verb, target):
                    factors.append(
                        f"Potential instruction override pattern: '{verb}' near '{target}'"
                    )
                    level = RiskLevel.HIGH

        for phrase in ROLE_PHRASES:
            if phrase in lowered:
                factors.append(f"Potential role confusion: '{phrase}'")
                level = RiskLevel.highest(level, RiskLevel.MEDIUM)

        # Case-sensitive on purpose
        if any(marker in prompt for marker in ENCODING_MARKERS):
            factors.append("Contains encoding/decoding references")
            level = RiskLevel.highest(level, RiskLevel.MEDIUM)

        return InjectionRiskAssessment(level=level, risk_factors=factors, reason="; ".join(factors))

    @staticmethod
    def sanitize_prompt(prompt: str) -> str:
        """Neutralize delimiters, role markers and known override phrases."""
        if not prompt:
            return prompt
        for old, new in SANITIZE_REPLACEMENTS:
            prompt = prompt.replace(old, new)
        return prompt

    @staticmethod
    def _near(words: list[str], verb: str, target: str) -> bool:
        """Whether the first words holding ``verb`` and ``target`` are close."""
        target_head = target.split(" ")[0]
        verb_index = next((i for i, w in enumerate(words) if verb in w), -1)
        target_index = next((i for i, w in enumerate(words) if target_head in w), -1)
        return (
            verb_index >= 0
            and target_index >= 0
            and abs(verb_index - target_index) <= PROXIMITY_WORDS
        )
