"""Content-sniffing classification of model YAML files."""

from __future__ import annotations

from pathlib import Path
from typing import Callable

from modeller_mcp.models.discovery import ModelFileKind
from modeller_mcp.utils.logging import get_logger

logger = get_logger("core.classifier")

METADATA_FILE_NAMES = ("_meta.yaml", "_meta.yml")
BDD_SECTION_MARKERS = ("attributeUsages:", "behaviours:", "scenarios:")

Predicate = Callable[[str, str], bool]


def _is_metadata(name: str, content: str) -> bool:
    return name.lower() in METADATA_FILE_NAMES


def _is_bdd_model(name: str, content: str) -> bool:
    return "model:" in content and any(marker in content for marker in BDD_SECTION_MARKERS)


def _is_attribute_types(name: str, content: str) -> bool:
    return "attributeTypes:" in content


def _is_enum(name: str, content: str) -> bool:
    return "enum:" in content or (
        "items:" in content and "name:" in content and "display:" in content
    )


def _is_validation_profiles(name: str, content: str) -> bool:
    return "validationProfiles:" in content


class FileClassifier:
    """Classifies model files by marker substrings in their raw text.

    Rules are tried in order and the first match wins. Markers are
    matched anywhere in the text, including comments, and the YAML does
    not need to be valid.

    Example:
        classifier = FileClassifier()
        kind = classifier.classify(Path("models/Sales/Prospect.Type.yaml"))
    """

    RULES: list[tuple[ModelFileKind, Predicate]] = [
        (ModelFileKind.METADATA, _is_metadata),
        (ModelFileKind.BDD_MODEL, _is_bdd_model),
        (ModelFileKind.ATTRIBUTE_TYPES, _is_attribute_types),
        (ModelFileKind.ENUM, _is_enum),
        (ModelFileKind.VALIDATION_PROFILES, _is_validation_profiles),
    ]

    def classify(self, path: Path | str) -> ModelFileKind:
        """Classify a file on disk.

        Unreadable files classify as UNKNOWN.
        """
        path = Path(path)
        if _is_metadata(path.name, ""):
            return ModelFileKind.METADATA
        try:
            content = path.read_text(encoding="utf-8", errors="replace")
        except OSError as e:
            logger.debug(f"Could not read {path}: {e}")
            return ModelFileKind.UNKNOWN
        return self.classify_content(path.name, content)

    def classify_content(self, name: str, content: str) -> ModelFileKind:
        """Classify already-loaded text for a file called ``name``."""
        for kind, predicate in self.RULES:
            if predicate(name, content):
                return kind
        return ModelFileKind.UNKNOWN
