"""Code generation services."""

from modeller_mcp.generation.api import ApiGenerationService
from modeller_mcp.generation.base import CODE_FILE, PROMPT_FILE, GenerationService
from modeller_mcp.generation.sdk import SdkGenerationService

__all__ = [
    "ApiGenerationService",
    "GenerationService",
    "SdkGenerationService",
    "CODE_FILE",
    "PROMPT_FILE",
]
