"""Shared test fixtures for modeller-mcp tests."""

import logging
from pathlib import Path

import pytest

from modeller_mcp.models.llm import LlmModelInfo, LlmRequest, LlmResponse, LlmUsage, LlmUsageEstimate
from modeller_mcp.models.security import SecurityContext, SecurityLevel
from modeller_mcp.utils.config import set_config
from modeller_mcp.utils.logging import ROOT_LOGGER

BAR_TYPE_YAML = """\
model: Bar
attributeUsages:
  - name: id
    type: primaryKey
    required: true
"""

PROSPECT_TYPE_YAML = """\
model: Prospect
summary: A potential customer
attributeUsages:
  - name: id
    type: primaryKey
    required: true
  - name: companyName
    type: shortText
    required: true
    summary: Registered company name
"""

PROSPECT_BEHAVIOUR_YAML = """\
model: Prospect
behaviours:
  - name: qualifyProspect
    summary: Marks the prospect as qualified
    entities:
      - Prospect
scenarios:
  - name: qualifying a new prospect
    given:
      - a new prospect
    when:
      - the prospect is qualified
    then:
      - the prospect status is qualified
"""

SALES_META_YAML = """\
name: Sales
summary: Sales domain
owners:
  - sales-team
lastReviewed: 2099-01-01
"""

ATTRIBUTE_TYPES_YAML = """\
attributeTypes:
  - name: shortText
    type: string
    constraints:
      maxLength: 100
  - name: primaryKey
    type: uuid
"""

STATUS_ENUM_YAML = """\
enum: ProspectStatus
items:
  - name: new
    display: New
    value: 1
  - name: qualified
    display: Qualified
    value: 2
"""


class StubBackend:
    """Backend returning fixed content, for gateway tests."""

    def __init__(self, content: str = "public class Generated {}", is_success: bool = True, error: str | None = None):
        self.content = content
        self.is_success = is_success
        self.error = error
        self.requests: list[LlmRequest] = []

    async def generate(self, request: LlmRequest) -> LlmResponse:
        self.requests.append(request)
        if not self.is_success:
            return LlmResponse(model_id=request.model_id, is_success=False, error_message=self.error)
        return LlmResponse(
            content=self.content,
            model_id=request.model_id,
            usage=LlmUsage(prompt_tokens=10, completion_tokens=5, total_tokens=15),
            generation_time_ms=1.0,
        )

    async def validate_service(self) -> bool:
        return True

    async def available_models(self) -> list[LlmModelInfo]:
        return []

    async def estimate_usage(self, prompt: str, model_id: str) -> LlmUsageEstimate:
        return LlmUsageEstimate(
            estimated_prompt_tokens=1,
            estimated_completion_tokens=1,
            estimated_total_tokens=2,
            estimated_cost=0.0,
            within_quota=True,
        )


@pytest.fixture(autouse=True)
def reset_global_state():
    """Reset the global config and package log handlers between tests."""
    set_config(None)
    yield
    set_config(None)
    logger = logging.getLogger(ROOT_LOGGER)
    logger.handlers = []
    logger.propagate = True
    logger.setLevel(logging.NOTSET)


def write(path: Path, content: str) -> Path:
    """Write a file, creating parent directories."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    return path


@pytest.fixture
def foo_project(tmp_path: Path) -> Path:
    """Project with models/Foo/Bar.Type.yaml."""
    write(tmp_path / "models" / "Foo" / "Bar.Type.yaml", BAR_TYPE_YAML)
    return tmp_path


@pytest.fixture
def sales_project(tmp_path: Path) -> Path:
    """Project with a Sales domain, shared attribute types and an enum."""
    models = tmp_path / "models"
    write(models / "Sales" / "_meta.yaml", SALES_META_YAML)
    write(models / "Sales" / "Prospect.Type.yaml", PROSPECT_TYPE_YAML)
    write(models / "Sales" / "Prospect.Behaviour.yaml", PROSPECT_BEHAVIOUR_YAML)
    write(models / "Shared" / "AttributeTypes" / "Common.yaml", ATTRIBUTE_TYPES_YAML)
    write(models / "Shared" / "Enums" / "ProspectStatus.yaml", STATUS_ENUM_YAML)
    return tmp_path


@pytest.fixture
def sales_domain(sales_project: Path) -> Path:
    """The Sales domain directory of ``sales_project``."""
    return sales_project / "models" / "Sales"


@pytest.fixture
def sdk_dir(tmp_path: Path) -> Path:
    """A generated SDK tree with a couple of C# files."""
    sdk = tmp_path / "sdk"
    write(sdk / "Prospects" / "ProspectRequest.cs", "public record ProspectRequest;")
    write(sdk / "Prospects" / "ProspectResponse.cs", "public record ProspectResponse;")
    write(sdk / "GlobalUsings.cs", "global using System;")
    return sdk


@pytest.fixture
def security_context() -> SecurityContext:
    """A complete caller context at Standard level."""
    return SecurityContext(
        user_id="alice",
        session_id="session-1",
        ip_address="10.0.0.1",
        user_agent="pytest",
        required_security_level=SecurityLevel.STANDARD,
    )


@pytest.fixture
def stub_backend() -> StubBackend:
    """Backend returning a small class."""
    return StubBackend()


@pytest.fixture
def backend_factory():
    """Build StubBackend instances with custom content or failures."""
    return StubBackend
