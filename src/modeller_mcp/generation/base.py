"""Shared plumbing for generation services."""

from __future__ import annotations

import asyncio
from pathlib import Path
from uuid import uuid4

from modeller_mcp.core.discovery import ModelDiscoveryEngine
from modeller_mcp.models.llm import SecureLlmRequest, SecureLlmResponse
from modeller_mcp.models.security import SecurityContext
from modeller_mcp.prompts.vsa import VsaPromptAssembler
from modeller_mcp.security.gateway import SecureLlmGateway
from modeller_mcp.utils.config import GenerationConfig

PROMPT_FILE = "GeneratedPrompt.md"
CODE_FILE = "GeneratedCode.md"


class GenerationService:
    """Base for services that turn an assembled prompt into output files.

    Subclasses assemble the prompt; this class sends it through the secure
    gateway and writes the prompt and the generated text to the output
    directory.
    """

    prompt_type = ""

    def __init__(
        self,
        gateway: SecureLlmGateway,
        assembler: VsaPromptAssembler | None = None,
        discovery: ModelDiscoveryEngine | None = None,
        config: GenerationConfig | None = None,
    ):
        self.gateway = gateway
        self.discovery = discovery or ModelDiscoveryEngine()
        self.assembler = assembler or VsaPromptAssembler(discovery=self.discovery)
        self.config = config or GenerationConfig()

    def security_context(self) -> SecurityContext:
        """Caller context for a service-initiated generation, one session per run."""
        return SecurityContext(
            user_id=self.config.user_id,
            session_id=str(uuid4()),
            ip_address=self.config.ip_address,
            user_agent=self.config.user_agent,
            required_security_level=self.config.security_level,
        )

    async def _generate(self, prompt: str, inputs: dict[str, str]) -> SecureLlmResponse:
        return await self.gateway.generate(
            SecureLlmRequest(
                raw_prompt=prompt,
                model_id=self.config.model_id,
                prompt_type=self.prompt_type,
                security_context=self.security_context(),
                prompt_inputs=inputs,
            )
        )

    async def _write_outputs(self, output_path: Path, prompt: str, content: str) -> list[Path]:
        return await asyncio.to_thread(_write_files, output_path, prompt, content)


def _write_files(output_path: Path, prompt: str, content: str) -> list[Path]:
    output_path.mkdir(parents=True, exist_ok=True)
    prompt_path = output_path / PROMPT_FILE
    prompt_path.write_text(prompt, encoding="utf-8")
    code_path = output_path / CODE_FILE
    code_path.write_text(content or "", encoding="utf-8")
    return [prompt_path, code_path]
