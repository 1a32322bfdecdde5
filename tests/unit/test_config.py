"""Unit tests for configuration loading."""

import pytest

from modeller_mcp.models.security import SecurityLevel
from modeller_mcp.utils.config import (
    AuditConfig,
    ModellerConfig,
    get_config,
    get_config_paths,
    load_config,
    save_config,
    set_config,
)
from modeller_mcp.utils.errors import ConfigurationError


class TestModellerConfig:
    """Tests for configuration defaults."""

    def test_defaults(self):
        """Test default values of every section."""
        config = ModellerConfig()
        assert config.discovery.canonical_subpaths == ["models", "src/models"]
        assert config.discovery.excluded_segments == ["bin", "obj", "node_modules"]
        assert config.validation.review_threshold_days == 90
        assert config.security.default_level == SecurityLevel.STANDARD
        assert config.security.max_prompt_length == 50000
        assert config.audit == AuditConfig()
        assert not config.audit.enable_file_logging
        assert not config.audit.log_prompt_content
        assert config.llm.simulate_latency
        assert config.generation.model_id == "gpt-4"
        assert config.generation.user_id == "system"
        assert not config.logging.structured

    def test_levels_parse_from_names(self):
        """Test security levels given as plain strings."""
        config = ModellerConfig.model_validate({"generation": {"security_level": "enhanced"}})
        assert config.generation.security_level == SecurityLevel.ENHANCED


class TestLoadConfig:
    """Tests for load_config and save_config."""

    def test_load_file(self, tmp_path):
        """Test loading a YAML file."""
        path = tmp_path / "config.yaml"
        path.write_text("validation:\n  review_threshold_days: 30\naudit:\n  enable_file_logging: true\n")
        config = load_config(path)
        assert config.validation.review_threshold_days == 30
        assert config.audit.enable_file_logging

    def test_empty_file(self, tmp_path):
        """Test that an empty file gives defaults."""
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert load_config(path) == ModellerConfig()

    def test_missing_file(self, tmp_path):
        """Test that an explicit missing path raises."""
        with pytest.raises(FileNotFoundError):
            load_config(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        """Test that broken YAML raises ConfigurationError."""
        path = tmp_path / "config.yaml"
        path.write_text("audit: [unclosed\n")
        with pytest.raises(ConfigurationError, match="Invalid YAML") as exc_info:
            load_config(path)
        assert exc_info.value.code == "CONFIG_ERROR"
        assert exc_info.value.details == {"config_path": str(path)}

    def test_invalid_values(self, tmp_path):
        """Test that schema violations raise ConfigurationError."""
        path = tmp_path / "config.yaml"
        path.write_text("generation:\n  security_level: extreme\n")
        with pytest.raises(ConfigurationError, match="Failed to load config file"):
            load_config(path)

    def test_save_and_load(self, tmp_path):
        """Test that saved settings load back."""
        config = ModellerConfig.model_validate(
            {"security": {"default_level": "maximum"}, "llm": {"simulate_latency": False}}
        )
        path = save_config(config, tmp_path / "nested" / "config.yaml")
        assert path.exists()
        assert load_config(path) == config

    def test_save_omits_defaults(self, tmp_path):
        """Test that only changed values are written."""
        path = save_config(ModellerConfig(), tmp_path / "config.yaml")
        assert path.read_text().strip() == "{}"

    def test_search_paths(self, monkeypatch, tmp_path):
        """Test the XDG config location."""
        monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path))
        assert tmp_path / "modeller-mcp" / "config.yaml" in get_config_paths()


class TestGlobalConfig:
    """Tests for get_config and set_config."""

    def test_set_and_get(self):
        """Test replacing the global configuration."""
        config = ModellerConfig.model_validate({"validation": {"review_threshold_days": 7}})
        set_config(config)
        assert get_config() is config

    def test_reload_after_reset(self, monkeypatch, tmp_path):
        """Test that None forces a reload from the search paths."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".modeller-mcp.yaml").write_text("validation:\n  review_threshold_days: 12\n")
        set_config(None)
        assert get_config().validation.review_threshold_days == 12

    def test_malformed_file_in_search_path(self, monkeypatch, tmp_path):
        """Test that a broken file found by the search raises ConfigurationError."""
        monkeypatch.chdir(tmp_path)
        (tmp_path / ".modeller-mcp.yaml").write_text("security: [oops\n")
        set_config(None)
        with pytest.raises(ConfigurationError, match="Invalid YAML in config file"):
            get_config()
