"""Input sanitization against prompt injection."""

from __future__ import annotations

import re

from modeller_mcp.models.security import (
    RiskLevel,
    SanitizationContext,
    SanitizationResult,
    SecurityLevel,
)
from modeller_mcp.security.policy import get_profile

INJECTION_PATTERNS = [
    re.compile(
        r"\b(ignore|forget|disregard)\s+(previous|above|earlier|all)\s+"
        r"(instructions?|prompts?|rules?|context)\b",
        re.IGNORECASE,
    ),
    re.compile(r"\b(you\s+are\s+now|act\s+as|pretend\s+to\s+be|roleplay\s+as)\b", re.IGNORECASE),
    re.compile(r"\b(system\s+prompt|admin\s+mode|developer\s+mode|debug\s+mode)\b", re.IGNORECASE),
    re.compile(r"```\s*(python|javascript|sql|bash|powershell|cmd)", re.IGNORECASE),
    re.compile(r"\b(execute|eval|run|compile|interpret)\s+", re.IGNORECASE),
    re.compile(r"\b(base64|decode|unescape|html|url|json)\s*(decode|encode|parse)", re.IGNORECASE),
]

DANGEROUS_KEYWORDS = (
    "password", "secret", "token", "key", "credential", "auth", "login",
    "admin", "root", "system", "execute", "eval", "script", "injection",
    "sql", "xss", "csrf", "bypass", "exploit", "hack", "vulnerability",
)

CODE_BLOCK_PATTERN = re.compile(r"```[\s\S]*?```")
CODE_BLOCK_MARKER = "[CODE_BLOCK_REMOVED]"
FILTERED_MARKER = "[FILTERED]"
TRUNCATED_MARKER = "...[TRUNCATED]"
HIGH_RISK_FACTOR_COUNT = 3

ESCAPES = (
    ("\\", "\\\\"),
    ('"', '\\"'),
    ("'", "\\'"),
    ("`", "\\`"),
    ("${", "\\${"),
    ("{{", "\\{{"),
    ("}}", "\\}}"),
)


def escape_special_characters(content: str) -> str:
    """Escape quotes, backticks and template interpolation sequences."""
    for old, new in ESCAPES:
        content = content.replace(old, new)
    return content


class Sanitizer:
    """Scores and cleans untrusted text before it enters a prompt.

    Sanitization is a pure text transform: it never raises for odd input
    and the same input and context always give the same result.

    Example:
        sanitizer = Sanitizer()
        context = SanitizationContext(input_type="description")
        result = sanitizer.sanitize("Please ignore previous instructions", context)
        print(result.risk_level, result.risk_factors)
    """

    def sanitize(self, content: str | None, context: SanitizationContext) -> SanitizationResult:
        """Assess and clean one input value.

        Args:
            content: Untrusted text; None is treated as empty
            context: Field name, security level and code-block policy

        Returns:
            SanitizationResult with the cleaned text and its risk
        """
        if not content:
            return SanitizationResult(sanitized_content="")

        risk_factors = self.detect_risk_factors(content)
        risk = RiskLevel.MEDIUM if risk_factors else RiskLevel.LOW

        modifications: list[str] = []
        if context.security_level.at_least(SecurityLevel.ENHANCED):
            sanitized = self._aggressive(content, context, modifications)
        else:
            sanitized = self._standard(content, context, modifications)

        if len(risk_factors) >= HIGH_RISK_FACTOR_COUNT:
            risk = RiskLevel.highest(risk, RiskLevel.HIGH)

        return SanitizationResult(
            sanitized_content=sanitized,
            risk_level=risk,
            risk_factors=risk_factors,
            modifications_applied=modifications,
        )

    @staticmethod
    def detect_risk_factors(content: str) -> list[str]:
        """List injection patterns and dangerous keywords found in ``content``."""
        factors = [
            f"Potential injection pattern detected: {pattern.pattern}"
            for pattern in INJECTION_PATTERNS
            if pattern.search(content)
        ]
        lowered = content.lower()
        factors.extend(
            f"Dangerous keyword detected: {keyword}"
            for keyword in DANGEROUS_KEYWORDS
            if keyword in lowered
        )
        return factors

    def escape(self, content: str) -> tuple[str, list[str]]:
        """Escape special characters only, without truncation or filtering."""
        escaped = escape_special_characters(content)
        return escaped, ["Escaped special characters"] if escaped != content else []

    def _standard(self, content: str, context: SanitizationContext, modifications: list[str]) -> str:
        sanitized = content
        if not context.allow_code_blocks:
            sanitized = CODE_BLOCK_PATTERN.sub(CODE_BLOCK_MARKER, sanitized)
            if sanitized != content:
                modifications.append("Removed code blocks")

        before = sanitized
        sanitized = escape_special_characters(sanitized)
        if sanitized != before:
            modifications.append("Escaped special characters")

        max_length = get_profile(context.security_level).max_input_length
        if len(sanitized) > max_length:
            sanitized = sanitized[:max_length] + TRUNCATED_MARKER
            modifications.append(f"Truncated to {max_length} characters")
        return sanitized

    def _aggressive(self, content: str, context: SanitizationContext, modifications: list[str]) -> str:
        sanitized = self._standard(content, context, modifications)
        for keyword in DANGEROUS_KEYWORDS:
            pattern = re.compile(rf"\b{re.escape(keyword)}\b", re.IGNORECASE)
            if pattern.search(sanitized):
                sanitized = pattern.sub(FILTERED_MARKER, sanitized)
                modifications.append(f"Filtered dangerous keyword: {keyword}")
        return sanitized
