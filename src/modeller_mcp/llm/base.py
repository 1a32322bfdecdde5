"""Generation backend protocol."""

from typing import Protocol, runtime_checkable

from modeller_mcp.models.llm import LlmModelInfo, LlmRequest, LlmResponse, LlmUsageEstimate


def estimate_tokens(text: str) -> int:
    """Rough token count of roughly four characters per token."""
    return max(1, len(text) // 4)


@runtime_checkable
class LlmBackend(Protocol):
    """A text generation backend used by the secure gateway.

    ``generate`` should report backend failures through
    ``LlmResponse.is_success`` rather than raising, and must let
    ``asyncio.CancelledError`` propagate.
    """

    async def generate(self, request: LlmRequest) -> LlmResponse:
        """Generate text for a prompt."""
        ...

    async def validate_service(self) -> bool:
        """Check that the backend is reachable and configured."""
        ...

    async def available_models(self) -> list[LlmModelInfo]:
        """List the models offered by the backend."""
        ...

    async def estimate_usage(self, prompt: str, model_id: str) -> LlmUsageEstimate:
        """Estimate token usage and cost before generating."""
        ...
