"""Prompt security, auditing and the secure generation gateway."""

from modeller_mcp.security.assessor import PromptSecurityAssessor
from modeller_mcp.security.audit import AuditSink, InMemoryAuditSink, PromptAuditLogger
from modeller_mcp.security.builder import SECURE_TEMPLATES, SecurePromptBuilder
from modeller_mcp.security.gateway import SecureLlmGateway
from modeller_mcp.security.policy import PROFILES, SecurityProfile, get_profile, should_reject
from modeller_mcp.security.sanitizer import Sanitizer

__all__ = [
    "PromptSecurityAssessor",
    "AuditSink",
    "InMemoryAuditSink",
    "PromptAuditLogger",
    "SECURE_TEMPLATES",
    "SecurePromptBuilder",
    "SecureLlmGateway",
    "PROFILES",
    "SecurityProfile",
    "get_profile",
    "should_reject",
    "Sanitizer",
]
