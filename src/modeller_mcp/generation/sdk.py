"""SDK generation from domain models."""

from __future__ import annotations

from modeller_mcp.generation.base import GenerationService
from modeller_mcp.models.generation import GenerationResult, SdkGenerationRequest
from modeller_mcp.utils.errors import GenerationError
from modeller_mcp.utils.logging import get_logger

logger = get_logger("generation.sdk")


class SdkGenerationService(GenerationService):
    """Generates an SDK vertical slice for one feature of a domain.

    Example:
        service = SdkGenerationService(SecureLlmGateway(MockLlmBackend()))
        result = await service.generate(
            SdkGenerationRequest(
                domain_path=Path("models/Sales"),
                feature_name="Prospects",
                namespace="Sales.Sdk",
                output_path=Path("out/sdk"),
            )
        )
    """

    prompt_type = "sdk_generation"

    def build_prompt(self, request: SdkGenerationRequest) -> str:
        """Assemble the SDK prompt without calling the backend.

        Raises:
            GenerationError: If discovery fails or the feature has no Type file
        """
        discovery = self.discovery.discover(request.domain_path)
        if discovery.errors:
            raise GenerationError(f"Failed to discover models: {'; '.join(discovery.errors)}")

        domain_yaml = self.assembler.load_feature_yaml(discovery, request.feature_name)
        return self.assembler.build_sdk_prompt(domain_yaml, request.feature_name, request.namespace)

    async def generate(self, request: SdkGenerationRequest) -> GenerationResult:
        """Generate the SDK and write the prompt and output files.

        Never raises; every failure is returned as a failed result.
        """
        logger.info(
            f"Starting SDK generation for feature '{request.feature_name}' from '{request.domain_path}'"
        )
        try:
            try:
                prompt = self.build_prompt(request)
            except GenerationError as e:
                logger.warning(f"SDK prompt assembly failed: {e.message}")
                return GenerationResult.fail(e.message, [e.to_audit_error()])

            response = await self._generate(
                prompt,
                {
                    "feature": request.feature_name,
                    "namespace": request.namespace,
                    "domain_path": str(request.domain_path),
                },
            )
            if not response.is_success:
                return GenerationResult.fail(f"Code generation failed: {response.error_message}")

            files = await self._write_outputs(request.output_path, prompt, response.content)
            logger.info(f"SDK generation completed successfully. Generated {len(files)} files")
            return GenerationResult.ok(prompt, request.output_path, files)
        except Exception as e:
            logger.error(f"Error during SDK generation for feature '{request.feature_name}': {e}")
            return GenerationResult.fail(f"SDK generation failed: {e}")
