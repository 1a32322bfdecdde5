"""Utility functions for modeller-mcp."""

from modeller_mcp.utils.hashing import compute_hash, signature_hash
from modeller_mcp.utils.logging import configure_logging, get_logger, get_logger_with_context
from modeller_mcp.utils.errors import (
    ModellerError,
    ValidationError,
    PromptSecurityError,
    ConfigurationError,
    GenerationError,
    ModelNotFoundError,
    require_field,
)
from modeller_mcp.utils.config import (
    ModellerConfig,
    DiscoveryConfig,
    ValidationConfig,
    SecurityConfig,
    AuditConfig,
    LlmConfig,
    GenerationConfig,
    LoggingConfig,
    load_config,
    save_config,
    get_config,
    set_config,
)

__all__ = [
    # Hashing
    "compute_hash",
    "signature_hash",
    # Logging
    "configure_logging",
    "get_logger",
    "get_logger_with_context",
    # Errors
    "ModellerError",
    "ValidationError",
    "PromptSecurityError",
    "ConfigurationError",
    "GenerationError",
    "ModelNotFoundError",
    "require_field",
    # Config
    "ModellerConfig",
    "DiscoveryConfig",
    "ValidationConfig",
    "SecurityConfig",
    "AuditConfig",
    "LlmConfig",
    "GenerationConfig",
    "LoggingConfig",
    "load_config",
    "save_config",
    "get_config",
    "set_config",
]
