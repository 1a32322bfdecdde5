"""Configuration file support for modeller-mcp."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field

from modeller_mcp.models.security import SecurityLevel
from modeller_mcp.utils.errors import ConfigurationError


class DiscoveryConfig(BaseModel):
    """Model discovery configuration."""

    canonical_subpaths: list[str] = Field(
        default_factory=lambda: ["models", "src/models"],
        description="Subpaths tried in order before falling back to a recursive scan",
    )
    excluded_segments: list[str] = Field(
        default_factory=lambda: ["bin", "obj", "node_modules"],
        description="Path segments skipped by the fallback scan",
    )


class ValidationConfig(BaseModel):
    """Structure and content validation configuration."""

    review_threshold_days: int = Field(
        default=90, description="Days after which _meta.yaml lastReviewed is stale"
    )


class SecurityConfig(BaseModel):
    """Prompt security configuration."""

    default_level: SecurityLevel = Field(
        default=SecurityLevel.STANDARD, description="Security level used when none is given"
    )
    max_prompt_length: int = Field(
        default=50000, description="Prompt length above which a warning is raised"
    )


class AuditConfig(BaseModel):
    """Audit logging configuration."""

    enable_file_logging: bool = Field(default=False, description="Write JSON-lines audit files")
    enable_structured_logging: bool = Field(default=True, description="Emit audit log records")
    directory: str = Field(default="logs/audit", description="Audit file directory")
    log_prompt_content: bool = Field(default=False, description="Include prompt text in audit files")
    log_response_content: bool = Field(default=False, description="Include response text in audit files")


class LoggingConfig(BaseModel):
    """Log output configuration."""

    structured: bool = Field(
        default=False, description="Timestamped records with key=value context fields"
    )


class LlmConfig(BaseModel):
    """Generation backend configuration."""

    simulate_latency: bool = Field(default=True, description="Mock backend sleeps before answering")
    min_latency_ms: int = Field(default=1000, description="Minimum simulated latency")
    max_latency_ms: int = Field(default=3000, description="Maximum simulated latency")


class GenerationConfig(BaseModel):
    """SDK and API generation configuration."""

    model_config = {"protected_namespaces": ()}

    model_id: str = Field(default="gpt-4", description="Model id sent to the backend")
    security_level: SecurityLevel = Field(
        default=SecurityLevel.STANDARD, description="Security level for generation requests"
    )
    user_id: str = Field(default="system", description="User id recorded in audit entries")
    ip_address: str = Field(default="127.0.0.1", description="Origin address recorded in audit entries")
    user_agent: str = Field(default="ModellerMcp/1.0", description="User agent recorded in audit entries")


class ModellerConfig(BaseModel):
    """Main configuration for modeller-mcp."""

    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    validation: ValidationConfig = Field(default_factory=ValidationConfig)
    security: SecurityConfig = Field(default_factory=SecurityConfig)
    audit: AuditConfig = Field(default_factory=AuditConfig)
    llm: LlmConfig = Field(default_factory=LlmConfig)
    generation: GenerationConfig = Field(default_factory=GenerationConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def get_config_paths() -> list[Path]:
    """Get possible configuration file paths.

    Returns:
        List of paths to check for configuration files
    """
    paths = []

    paths.append(Path.cwd() / ".modeller-mcp.yaml")
    paths.append(Path.cwd() / ".modeller-mcp.yml")
    paths.append(Path.cwd() / "modeller-mcp.yaml")

    home = Path.home()
    paths.append(home / ".modeller-mcp.yaml")
    paths.append(home / ".config" / "modeller-mcp" / "config.yaml")

    xdg_config = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config:
        paths.append(Path(xdg_config) / "modeller-mcp" / "config.yaml")

    return paths


def load_config(config_path: Path | str | None = None) -> ModellerConfig:
    """Load configuration from file.

    Args:
        config_path: Explicit path to config file. If None, searches default locations.

    Returns:
        Loaded configuration

    Raises:
        FileNotFoundError: If an explicit config_path does not exist
        ConfigurationError: If the file is not valid YAML or does not match the schema
    """
    if config_path is not None:
        path = Path(config_path)
        if path.exists():
            return _load_config_file(path)
        raise FileNotFoundError(f"Config file not found: {config_path}")

    for path in get_config_paths():
        if path.exists():
            return _load_config_file(path)

    return ModellerConfig()


def _load_config_file(path: Path) -> ModellerConfig:
    """Load configuration from a specific file."""
    try:
        data = yaml.safe_load(path.read_text())
        if data is None:
            return ModellerConfig()
        return ModellerConfig.model_validate(data)
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in config file {path}: {e}", config_path=str(path)) from e
    except Exception as e:
        raise ConfigurationError(f"Failed to load config file {path}: {e}", config_path=str(path)) from e


def save_config(config: ModellerConfig, config_path: Path | str | None = None) -> Path:
    """Save configuration to file.

    Args:
        config: Configuration to save
        config_path: Path to save to. Defaults to ~/.config/modeller-mcp/config.yaml

    Returns:
        Path where config was saved
    """
    if config_path is None:
        config_path = Path.home() / ".config" / "modeller-mcp" / "config.yaml"
    else:
        config_path = Path(config_path)

    config_path.parent.mkdir(parents=True, exist_ok=True)

    data = config.model_dump(mode="json", exclude_defaults=True)
    config_path.write_text(yaml.dump(data, default_flow_style=False, sort_keys=False))

    return config_path


# Global config instance
_config: ModellerConfig | None = None


def get_config() -> ModellerConfig:
    """Get the global configuration instance.

    Loads from file on first call.
    """
    global _config
    if _config is None:
        _config = load_config()
    return _config


def set_config(config: ModellerConfig | None) -> None:
    """Set the global configuration instance.

    Passing None forces a reload on the next get_config call.
    """
    global _config
    _config = config
