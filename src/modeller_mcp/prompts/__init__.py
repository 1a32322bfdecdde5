"""Code generation prompt assembly."""

from modeller_mcp.prompts.rules import (
    SDK_GENERATION_RULES,
    CodeGenerationRule,
    RuleScope,
    RuleSeverity,
    render_rules,
)
from modeller_mcp.prompts.vsa import VsaPromptAssembler, extract_entity_names, pluralize

__all__ = [
    "SDK_GENERATION_RULES",
    "CodeGenerationRule",
    "RuleScope",
    "RuleSeverity",
    "render_rules",
    "VsaPromptAssembler",
    "extract_entity_names",
    "pluralize",
]
