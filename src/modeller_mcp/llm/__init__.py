"""Generation backends."""

from modeller_mcp.llm.base import LlmBackend, estimate_tokens
from modeller_mcp.llm.mock import MockLlmBackend

__all__ = [
    "LlmBackend",
    "MockLlmBackend",
    "estimate_tokens",
]
