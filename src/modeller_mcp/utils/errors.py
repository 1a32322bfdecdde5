"""Error handling utilities for modeller-mcp."""

from __future__ import annotations

from typing import Any

from modeller_mcp.models.common import AuditError


class ModellerError(Exception):
    """Base exception for modeller-mcp."""

    def __init__(self, message: str, code: str = "UNKNOWN_ERROR", details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_audit_error(self) -> AuditError:
        """Convert to AuditError model."""
        return AuditError(code=self.code, message=self.message, details=self.details)


class ValidationError(ModellerError):
    """Validation failed."""

    def __init__(self, message: str, field: str | None = None):
        details = {"field": field} if field else {}
        super().__init__(message, code="VALIDATION_ERROR", details=details)


class PromptSecurityError(ModellerError):
    """A prompt could not be built or accepted under the security policy."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, code="PROMPT_SECURITY_ERROR", details=details)


class ConfigurationError(ModellerError):
    """Configuration file could not be loaded."""

    def __init__(self, message: str, config_path: str | None = None):
        details = {"config_path": config_path} if config_path else {}
        super().__init__(message, code="CONFIG_ERROR", details=details)


class GenerationError(ModellerError):
    """Code generation could not proceed."""

    def __init__(
        self, message: str, details: dict[str, Any] | None = None, code: str = "GENERATION_ERROR"
    ):
        super().__init__(message, code=code, details=details)


class ModelNotFoundError(GenerationError):
    """No model definition exists for a requested feature."""

    def __init__(self, feature_name: str):
        super().__init__(
            f"Could not find Type definition for feature '{feature_name}'",
            details={"feature": feature_name},
            code="MODEL_NOT_FOUND",
        )


def require_field(value: str | None, field: str) -> None:
    """Raise ValidationError when a required text field is missing.

    Args:
        value: Field value to check
        field: Display name of the field

    Raises:
        ValidationError: If value is None, empty, or whitespace
    """
    if value is None or not value.strip():
        raise ValidationError(f"{field} is required for secure prompt building", field=field)
