"""Core discovery and validation engines."""

from modeller_mcp.core.classifier import FileClassifier
from modeller_mcp.core.discovery import ModelDiscoveryEngine
from modeller_mcp.core.store import ValidatedModelStore
from modeller_mcp.core.structure import StructureValidator
from modeller_mcp.core.validator import ModelValidator

__all__ = [
    "FileClassifier",
    "ModelDiscoveryEngine",
    "ModelValidator",
    "StructureValidator",
    "ValidatedModelStore",
]
