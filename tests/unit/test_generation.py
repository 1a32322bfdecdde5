"""Unit tests for SDK and API generation services."""

import pytest

from modeller_mcp.generation import CODE_FILE, PROMPT_FILE, ApiGenerationService, SdkGenerationService
from modeller_mcp.llm.mock import CLASS_TEMPLATE, MockLlmBackend
from modeller_mcp.models.generation import ApiGenerationRequest, GenerationResult, SdkGenerationRequest
from modeller_mcp.models.security import SecurityLevel
from modeller_mcp.security.audit import InMemoryAuditSink
from modeller_mcp.security.gateway import SecureLlmGateway
from modeller_mcp.utils.config import GenerationConfig
from modeller_mcp.utils.errors import GenerationError


class ExplodingGateway:
    async def generate(self, request):
        raise RuntimeError("boom")


@pytest.fixture
def mock_gateway():
    return SecureLlmGateway(MockLlmBackend(simulate_latency=False))


def _sdk_request(domain_path, output_path, feature="Prospects"):
    return SdkGenerationRequest(
        domain_path=domain_path,
        feature_name=feature,
        namespace="Sales.Sdk",
        output_path=output_path,
    )


def _api_request(sdk_path, domain_path, output_path):
    return ApiGenerationRequest(
        sdk_path=sdk_path,
        domain_path=domain_path,
        project_name="Sales.Api",
        namespace="Sales.Api",
        output_path=output_path,
    )


class TestGenerationResult:
    """Tests for GenerationResult constructors."""

    def test_ok(self, tmp_path):
        """Test a successful result."""
        result = GenerationResult.ok("prompt", tmp_path, [tmp_path / PROMPT_FILE])
        assert result.success
        assert result.error_message is None
        assert result.errors == []

    def test_fail(self):
        """Test a failed result."""
        error = GenerationError("nope").to_audit_error()
        result = GenerationResult.fail("nope", [error])
        assert not result.success
        assert result.prompt is None
        assert result.errors[0].code == "GENERATION_ERROR"


class TestSdkGenerationService:
    """Tests for SdkGenerationService."""

    @pytest.mark.asyncio
    async def test_generate(self, mock_gateway, sales_domain, tmp_path):
        """Test that the prompt and generated text are written."""
        output = tmp_path / "out" / "sdk"
        result = await SdkGenerationService(mock_gateway).generate(_sdk_request(sales_domain, output))

        assert result.success, result.error_message
        assert result.output_path == output
        assert result.generated_files == [output / PROMPT_FILE, output / CODE_FILE]
        assert (output / PROMPT_FILE).read_text() == result.prompt
        assert (output / CODE_FILE).read_text() == CLASS_TEMPLATE
        assert "**Target Namespace**: Sales.Sdk" in result.prompt
        assert "model: Prospect" in result.prompt

    @pytest.mark.asyncio
    async def test_request_sent_through_gateway(self, stub_backend, sales_domain, tmp_path):
        """Test the gateway request built from the service configuration."""
        sink = InMemoryAuditSink()
        service = SdkGenerationService(
            SecureLlmGateway(stub_backend, audit_sink=sink),
            config=GenerationConfig(model_id="mock-general-purpose", user_id="builder"),
        )
        await service.generate(_sdk_request(sales_domain, tmp_path / "out"))

        (request,) = stub_backend.requests
        assert request.model_id == "mock-general-purpose"
        assert request.metadata["UserId"] == "builder"
        assert "Feature: Prospects" in request.prompt
        assert "Namespace: Sales.Sdk" in request.prompt
        assert sink.events[0].original_prompt.startswith("# System Context")

    def test_build_prompt(self, mock_gateway, sales_domain, tmp_path):
        """Test prompt assembly without generation."""
        prompt = SdkGenerationService(mock_gateway).build_prompt(_sdk_request(sales_domain, tmp_path / "out"))
        assert "**Feature Name**: Prospects" in prompt
        assert not (tmp_path / "out").exists()

    @pytest.mark.asyncio
    async def test_missing_feature(self, mock_gateway, sales_domain, tmp_path):
        """Test a feature without a Type file."""
        output = tmp_path / "out"
        result = await SdkGenerationService(mock_gateway).generate(_sdk_request(sales_domain, output, "Invoices"))

        assert not result.success
        assert result.error_message == "Could not find Type definition for feature 'Invoices'"
        assert result.errors[0].code == "MODEL_NOT_FOUND"
        assert not output.exists()

    @pytest.mark.asyncio
    async def test_missing_domain(self, mock_gateway, tmp_path):
        """Test a domain path that does not exist."""
        result = await SdkGenerationService(mock_gateway).generate(
            _sdk_request(tmp_path / "missing", tmp_path / "out")
        )
        assert result.error_message.startswith("Failed to discover models: Root path does not exist")

    @pytest.mark.asyncio
    async def test_gateway_failure(self, backend_factory, sales_domain, tmp_path):
        """Test that an unsuccessful gateway response fails the run."""
        gateway = SecureLlmGateway(backend_factory(is_success=False, error="down"))
        output = tmp_path / "out"
        result = await SdkGenerationService(gateway).generate(_sdk_request(sales_domain, output))

        assert result.error_message == "Code generation failed: LLM generation failed: down"
        assert result.errors == []
        assert not output.exists()

    @pytest.mark.asyncio
    async def test_unexpected_error(self, sales_domain, tmp_path):
        """Test that unexpected errors become failed results."""
        result = await SdkGenerationService(ExplodingGateway()).generate(
            _sdk_request(sales_domain, tmp_path / "out")
        )
        assert result.error_message == "SDK generation failed: boom"

    def test_security_context(self, mock_gateway):
        """Test a fresh session per run with configured identity."""
        service = SdkGenerationService(
            mock_gateway, config=GenerationConfig(security_level=SecurityLevel.ENHANCED)
        )
        first = service.security_context()
        second = service.security_context()

        assert first.session_id != second.session_id
        assert first.user_id == "system"
        assert first.ip_address == "127.0.0.1"
        assert first.user_agent == "ModellerMcp/1.0"
        assert first.required_security_level == SecurityLevel.ENHANCED


class TestApiGenerationService:
    """Tests for ApiGenerationService."""

    @pytest.mark.asyncio
    async def test_generate(self, mock_gateway, sdk_dir, sales_domain, tmp_path):
        """Test API generation on top of an SDK."""
        output = tmp_path / "api"
        result = await ApiGenerationService(mock_gateway).generate(_api_request(sdk_dir, sales_domain, output))

        assert result.success, result.error_message
        assert (output / PROMPT_FILE).read_text() == result.prompt
        assert (output / CODE_FILE).exists()
        assert "- **Project Name:** Sales.Api" in result.prompt

    @pytest.mark.asyncio
    async def test_missing_sdk(self, mock_gateway, sales_domain, tmp_path):
        """Test an SDK path that does not exist."""
        sdk = tmp_path / "nosdk"
        result = await ApiGenerationService(mock_gateway).generate(_api_request(sdk, sales_domain, tmp_path / "api"))
        assert result.error_message == f"SDK path does not exist: {sdk}"
        assert result.errors[0].code == "GENERATION_ERROR"

    @pytest.mark.asyncio
    async def test_missing_domain(self, mock_gateway, sdk_dir, tmp_path):
        """Test discovery failure for the API prompt."""
        result = await ApiGenerationService(mock_gateway).generate(
            _api_request(sdk_dir, tmp_path / "missing", tmp_path / "api")
        )
        assert result.error_message.startswith("Failed to discover models:")

    @pytest.mark.asyncio
    async def test_unexpected_error(self, sdk_dir, sales_domain, tmp_path):
        """Test that unexpected errors become failed results."""
        result = await ApiGenerationService(ExplodingGateway()).generate(
            _api_request(sdk_dir, sales_domain, tmp_path / "api")
        )
        assert result.error_message == "API generation failed: boom"
