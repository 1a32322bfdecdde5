"""Mock generation backend for development and tests."""

from __future__ import annotations

import asyncio
import random
import time

from modeller_mcp.llm.base import estimate_tokens
from modeller_mcp.models.llm import (
    LlmModelInfo,
    LlmRequest,
    LlmResponse,
    LlmUsage,
    LlmUsageEstimate,
)
from modeller_mcp.utils.config import LlmConfig
from modeller_mcp.utils.logging import get_logger

logger = get_logger("llm.mock")

COST_PER_1K_TOKENS = 0.002
COMPLETION_TOKEN_CAP = 2000
QUOTA_TOKENS = 10000

CLASS_TEMPLATE = """\
// Generated by Mock LLM Service
// Based on prompt analysis for class generation

using System;
using System.Collections.Generic;
using System.ComponentModel.DataAnnotations;

namespace Generated.Models
{
    /// <summary>
    /// Auto-generated class based on the provided requirements
    /// </summary>
    public class GeneratedEntity
    {
        public Guid Id { get; set; } = Guid.NewGuid();

        [Required]
        public string Name { get; set; } = string.Empty;

        public DateTime CreatedAt { get; set; } = DateTime.UtcNow;

        public DateTime? UpdatedAt { get; set; }

        public Dictionary<string, object> Properties { get; set; } = new();

        public void UpdateTimestamp()
        {
            UpdatedAt = DateTime.UtcNow;
        }
    }
}
"""

METHOD_TEMPLATE = """\
// Generated by Mock LLM Service
// Based on prompt analysis for method generation

/// <summary>
/// Auto-generated method based on the provided requirements
/// </summary>
/// <param name="input">Input parameter</param>
/// <returns>Processed result</returns>
public async Task<string> ProcessDataAsync(string input)
{
    if (string.IsNullOrEmpty(input))
        throw new ArgumentException("Input cannot be null or empty", nameof(input));

    await Task.Delay(100);

    var result = input.ToUpperInvariant();
    return $"Processed: {result}";
}
"""

PROPERTY_TEMPLATE = """\
// Generated by Mock LLM Service
// Based on prompt analysis for property generation

/// <summary>
/// Auto-generated property based on the provided requirements
/// </summary>
[Required]
[MaxLength(255)]
public string GeneratedProperty { get; set; } = string.Empty;

private string? _computedValue;

/// <summary>
/// Computed property with lazy evaluation
/// </summary>
public string ComputedProperty => _computedValue ??= ComputeValue();

private string ComputeValue()
{
    return $"Computed_{DateTime.UtcNow:yyyyMMddHHmmss}";
}
"""

INTERFACE_TEMPLATE = """\
// Generated by Mock LLM Service
// Based on prompt analysis for interface generation

/// <summary>
/// Auto-generated interface based on the provided requirements
/// </summary>
public interface IGeneratedService
{
    Task<string> ProcessAsync(string data, CancellationToken cancellationToken = default);

    bool ValidateData(string data);

    Dictionary<string, object> GetConfiguration();
}
"""

GENERIC_TEMPLATE = """\
// Generated by Mock LLM Service
// Generic code generation based on prompt analysis

using System;
using System.Threading.Tasks;
using Microsoft.Extensions.Logging;

/// <summary>
/// Auto-generated code for development and testing purposes
/// </summary>
public class GeneratedSolution
{
    private readonly ILogger<GeneratedSolution> _logger;

    public GeneratedSolution(ILogger<GeneratedSolution> logger)
    {
        _logger = logger ?? throw new ArgumentNullException(nameof(logger));
    }

    public async Task<bool> RunAsync()
    {
        _logger.LogInformation("Running generated solution");
        await Task.Delay(100);
        return true;
    }
}
"""

# Checked in order; the first keyword found in the prompt picks the template
KEYWORD_TEMPLATES = [
    (("class", "type"), CLASS_TEMPLATE),
    (("method", "function"), METHOD_TEMPLATE),
    (("property", "attribute"), PROPERTY_TEMPLATE),
    (("interface",), INTERFACE_TEMPLATE),
]

MOCK_MODELS = [
    LlmModelInfo(
        id="mock-csharp-code-gen",
        name="Mock C# Code Generator",
        description="Mock model for generating C# code from natural language descriptions",
        max_tokens=8192,
        supports_code_generation=True,
        provider="Mock",
    ),
    LlmModelInfo(
        id="mock-general-purpose",
        name="Mock General Purpose Model",
        description="Mock general-purpose model for various code generation tasks",
        max_tokens=4096,
        supports_code_generation=True,
        provider="Mock",
    ),
]


def select_template(prompt: str) -> str:
    """Pick placeholder code by sniffing keywords in the prompt."""
    lowered = prompt.lower()
    for keywords, template in KEYWORD_TEMPLATES:
        if any(keyword in lowered for keyword in keywords):
            return template
    return GENERIC_TEMPLATE


class MockLlmBackend:
    """Stand-in backend that returns canned C# code.

    The response is chosen by naive keyword sniffing of the prompt and is
    not derived from the model definitions. Latency is simulated with a
    cancellable sleep.

    Example:
        backend = MockLlmBackend(simulate_latency=False)
        response = await backend.generate(LlmRequest(prompt="Create a class", model_id="gpt-4"))
        print(response.content)
    """

    def __init__(
        self,
        simulate_latency: bool = True,
        min_latency_ms: int = 1000,
        max_latency_ms: int = 3000,
    ):
        self.simulate_latency = simulate_latency
        self.min_latency_ms = min_latency_ms
        self.max_latency_ms = max(min_latency_ms, max_latency_ms)

    @classmethod
    def from_config(cls, config: LlmConfig) -> "MockLlmBackend":
        """Create a backend from the llm configuration section."""
        return cls(
            simulate_latency=config.simulate_latency,
            min_latency_ms=config.min_latency_ms,
            max_latency_ms=config.max_latency_ms,
        )

    async def generate(self, request: LlmRequest) -> LlmResponse:
        start = time.perf_counter()
        logger.info(
            f"Generating code for model {request.model_id} with prompt length {len(request.prompt)}"
        )

        try:
            if self.simulate_latency:
                latency = random.randint(self.min_latency_ms, self.max_latency_ms)
                await asyncio.sleep(latency / 1000)

            content = select_template(request.prompt)
            prompt_tokens = estimate_tokens(request.prompt)
            completion_tokens = estimate_tokens(content)
            total = prompt_tokens + completion_tokens
            elapsed_ms = (time.perf_counter() - start) * 1000
        except asyncio.CancelledError:
            logger.warning(f"Code generation cancelled for model {request.model_id}")
            raise
        except Exception as e:
            logger.error(f"Code generation failed for model {request.model_id}: {e}")
            return LlmResponse(
                model_id=request.model_id,
                is_success=False,
                error_message=str(e),
                generation_time_ms=(time.perf_counter() - start) * 1000,
            )

        logger.info(f"Code generation completed for model {request.model_id} in {elapsed_ms:.0f}ms")
        return LlmResponse(
            content=content,
            model_id=request.model_id,
            usage=LlmUsage(
                prompt_tokens=prompt_tokens,
                completion_tokens=completion_tokens,
                total_tokens=total,
                estimated_cost=total * COST_PER_1K_TOKENS / 1000,
            ),
            generation_time_ms=elapsed_ms,
            is_success=True,
            metadata={
                "provider": "Mock",
                "version": "1.0",
                "temperature": request.parameters.temperature,
                "max_tokens": request.parameters.max_tokens,
            },
        )

    async def validate_service(self) -> bool:
        logger.debug("Validating Mock LLM service availability")
        return True

    async def available_models(self) -> list[LlmModelInfo]:
        return list(MOCK_MODELS)

    async def estimate_usage(self, prompt: str, model_id: str) -> LlmUsageEstimate:
        logger.debug(f"Estimating usage for model {model_id} with prompt length {len(prompt)}")
        prompt_tokens = estimate_tokens(prompt)
        completion_tokens = min(prompt_tokens * 2, COMPLETION_TOKEN_CAP)
        total = prompt_tokens + completion_tokens
        return LlmUsageEstimate(
            estimated_prompt_tokens=prompt_tokens,
            estimated_completion_tokens=completion_tokens,
            estimated_total_tokens=total,
            estimated_cost=total * COST_PER_1K_TOKENS / 1000,
            within_quota=total < QUOTA_TOKENS,
        )
