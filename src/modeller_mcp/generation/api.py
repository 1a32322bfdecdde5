"""Minimal API generation on top of a generated SDK."""

from __future__ import annotations

from modeller_mcp.generation.base import GenerationService
from modeller_mcp.models.generation import ApiGenerationRequest, GenerationResult
from modeller_mcp.utils.errors import GenerationError
from modeller_mcp.utils.logging import get_logger

logger = get_logger("generation.api")


class ApiGenerationService(GenerationService):
    """Generates a Minimal API project that references a generated SDK."""

    prompt_type = "api_generation"

    def build_prompt(self, request: ApiGenerationRequest) -> str:
        """Assemble the API prompt without calling the backend.

        Raises:
            GenerationError: If the SDK path is missing or discovery fails
        """
        if not request.sdk_path.exists():
            raise GenerationError(f"SDK path does not exist: {request.sdk_path}")

        discovery = self.discovery.discover(request.domain_path)
        if discovery.errors:
            raise GenerationError(f"Failed to discover models: {'; '.join(discovery.errors)}")

        return self.assembler.build_api_prompt(
            request.sdk_path,
            request.domain_path,
            request.project_name,
            request.namespace,
            request.output_path,
        )

    async def generate(self, request: ApiGenerationRequest) -> GenerationResult:
        """Generate the API project and write the prompt and output files.

        Never raises; every failure is returned as a failed result.
        """
        logger.info(
            f"Starting API generation for project '{request.project_name}' from SDK '{request.sdk_path}'"
        )
        try:
            try:
                prompt = self.build_prompt(request)
            except GenerationError as e:
                logger.warning(f"API prompt assembly failed: {e.message}")
                return GenerationResult.fail(e.message, [e.to_audit_error()])

            response = await self._generate(
                prompt,
                {
                    "project_name": request.project_name,
                    "namespace": request.namespace,
                    "sdk_path": str(request.sdk_path),
                    "domain_path": str(request.domain_path),
                },
            )
            if not response.is_success:
                return GenerationResult.fail(f"Code generation failed: {response.error_message}")

            files = await self._write_outputs(request.output_path, prompt, response.content)
            logger.info(f"API generation completed successfully. Generated {len(files)} files")
            return GenerationResult.ok(prompt, request.output_path, files)
        except Exception as e:
            logger.error(f"Error during API generation for project '{request.project_name}': {e}")
            return GenerationResult.fail(f"API generation failed: {e}")
