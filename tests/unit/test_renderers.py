"""Unit tests for output renderers."""

import json

import pytest

from modeller_mcp.core.discovery import ModelDiscoveryEngine
from modeller_mcp.models.generation import GenerationResult
from modeller_mcp.models.validation import ValidationFinding, ValidationReport, ValidationSeverity
from modeller_mcp.renderers import JSONRenderer, OutputFormat, RenderContext, TextRenderer, get_renderer


@pytest.fixture
def report():
    return ValidationReport(
        path="models",
        findings=[
            ValidationFinding(file="models/Sales/lead.yaml", message="Looks odd", severity=ValidationSeverity.INFO),
            ValidationFinding(file="models/Sales/lead.yaml", message="Type missing", severity=ValidationSeverity.ERROR),
            ValidationFinding(file="models/Sales", message="Name it better", severity=ValidationSeverity.WARNING),
        ],
    )


class TestGetRenderer:
    """Tests for get_renderer."""

    def test_by_enum_and_string(self):
        """Test lookup by enum and by name."""
        assert isinstance(get_renderer(OutputFormat.TEXT), TextRenderer)
        assert isinstance(get_renderer("json"), JSONRenderer)

    def test_unknown_format(self):
        """Test that unknown names raise ValueError."""
        with pytest.raises(ValueError):
            get_renderer("xml")


class TestTextRenderer:
    """Tests for TextRenderer."""

    @pytest.fixture
    def renderer(self):
        return TextRenderer()

    def test_discovery(self, renderer, sales_project):
        """Test the discovery summary."""
        result = ModelDiscoveryEngine().discover(sales_project)
        text = renderer.render(result, RenderContext())

        assert text.startswith("# Model Discovery\n")
        assert f"**Root:** {sales_project}" in text
        assert "**Model Directories:** 1" in text
        assert "**Loose Files:** 0" in text
        assert "**Total Files:** 5" in text
        assert f"## {sales_project / 'models'}" in text
        assert "### Sales (has _meta.yaml)" in text
        assert "### Enums\n" in text
        assert "- Prospect.Type.yaml (BddModel)" in text
        assert "- _meta.yaml (Metadata)" in text
        assert "- ProspectStatus.yaml (Enum)" in text

    def test_discovery_loose_and_errors(self, renderer, tmp_path):
        """Test loose files and the empty result."""
        (tmp_path / "Bar.Type.yaml").write_text("model: Bar\nattributeUsages:\n")
        text = renderer.render(ModelDiscoveryEngine().discover(tmp_path), RenderContext())
        assert "## Loose Files\n- Bar.Type.yaml (BddModel)" in text

        missing = renderer.render(ModelDiscoveryEngine().discover(tmp_path / "missing"), RenderContext())
        assert "No model files found." in missing
        assert "## Errors\n- Root path does not exist" in missing

    def test_validation(self, renderer, report):
        """Test the validation summary without info findings."""
        text = renderer.render(report, RenderContext())
        assert text.startswith("# Validation FAILED\n")
        assert "**Path:** models" in text
        assert "**Errors:** 1" in text
        assert "**Warnings:** 1" in text
        assert "**Info:** 1" in text
        assert "## models/Sales/lead.yaml\n- [ERROR] Type missing" in text
        assert "## models/Sales\n- [WARNING] Name it better" in text
        assert "Looks odd" not in text

    def test_validation_verbose(self, renderer, report):
        """Test that verbose output includes info findings after errors."""
        text = renderer.render(report, RenderContext(verbose=True))
        assert "- [ERROR] Type missing\n- [INFO] Looks odd" in text

    def test_validation_passed(self, renderer):
        """Test a clean report."""
        text = renderer.render(ValidationReport(path="models"), RenderContext())
        assert text.startswith("# Validation PASSED")
        assert "No issues found." in text

    def test_generation_success(self, renderer, tmp_path):
        """Test the generation success summary."""
        result = GenerationResult.ok(
            "prompt", tmp_path, [tmp_path / "GeneratedPrompt.md", tmp_path / "GeneratedCode.md"]
        )
        context = RenderContext(title="SDK Generation", details={"Feature": "Prospects"})
        text = renderer.render(result, context)
        assert text.startswith("# SDK Generation Successful\n")
        assert "**Feature:** Prospects" in text
        assert f"**Output Path:** {tmp_path}" in text
        assert "**Files Generated:** 2" in text
        assert "**Generated Files:**\n- GeneratedPrompt.md\n- GeneratedCode.md" in text

    def test_generation_failure(self, renderer):
        """Test the generation failure summary."""
        text = renderer.render(GenerationResult.fail("SDK path does not exist: sdk"), RenderContext(title="API Generation"))
        assert text.startswith("# API Generation Failed\n")
        assert "**Error:** SDK path does not exist: sdk" in text

    def test_other_objects(self, renderer):
        """Test the str fallback."""
        assert renderer.render(42, RenderContext()) == "42"

    def test_render_to_file(self, renderer, report, tmp_path):
        """Test writing to a file."""
        path = tmp_path / "report.md"
        renderer.render_to_file(report, RenderContext(output_path=path))
        assert path.read_text().startswith("# Validation FAILED")

    def test_render_to_file_requires_path(self, renderer, report):
        """Test that a missing output path raises."""
        with pytest.raises(ValueError):
            renderer.render_to_file(report, RenderContext())


class TestJSONRenderer:
    """Tests for JSONRenderer."""

    @pytest.fixture
    def renderer(self):
        return JSONRenderer()

    def test_validation_counts(self, renderer, report):
        """Test derived counts next to findings."""
        data = json.loads(renderer.render(report, RenderContext(format=OutputFormat.JSON)))
        assert data["passed"] is False
        assert (data["error_count"], data["warning_count"], data["info_count"]) == (1, 1, 1)
        assert data["findings"][1] == {
            "file": "models/Sales/lead.yaml",
            "message": "Type missing",
            "severity": "error",
        }

    def test_discovery_counts(self, renderer, foo_project):
        """Test derived discovery fields."""
        result = ModelDiscoveryEngine().discover(foo_project)
        data = json.loads(renderer.render(result, RenderContext(format=OutputFormat.JSON)))
        assert data["has_models"] is True
        assert data["total_file_count"] == 1
        assert data["directories"][0]["groups"][0]["files"][0]["kind"] == "bdd_model"

    def test_generation_result(self, renderer, tmp_path):
        """Test plain model dumps."""
        result = GenerationResult.fail("boom")
        data = json.loads(renderer.render(result, RenderContext(indent=0)))
        assert data["success"] is False
        assert data["error_message"] == "boom"

    def test_plain_dict(self, renderer):
        """Test non-model data."""
        assert json.loads(renderer.render({"a": [1, 2]}, RenderContext())) == {"a": [1, 2]}
