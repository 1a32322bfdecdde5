"""Naming and placement checks for model directory trees."""

from __future__ import annotations

import os
import re
from datetime import datetime
from pathlib import Path

from modeller_mcp.core.discovery import is_yaml_file
from modeller_mcp.models.validation import ValidationFinding, ValidationSeverity
from modeller_mcp.utils.config import ValidationConfig
from modeller_mcp.utils.logging import get_logger

logger = get_logger("core.structure")

SHARED_DIR = "shared"
SHARED_COMPONENT_DIRS = ("attributetypes", "enums")
RECOMMENDED_SUFFIXES = (".Type", ".Behaviour", ".Behavior")
LAST_REVIEWED_PATTERN = re.compile(r"lastReviewed:\s*(.+)")


def is_pascal_case(name: str) -> bool:
    """Check that every dot-separated segment is PascalCase.

    Example:
        is_pascal_case("Prospect.Type")  # True
        is_pascal_case("prospect.Type")  # False
    """
    if not name:
        return False
    return all(
        part and part[0].isupper() and part.isalnum()
        for part in name.split(".")
    )


def parse_review_date(value: str) -> datetime | None:
    """Parse a ``lastReviewed`` value, returning None when unparsable."""
    text = value.strip().strip("'\"")
    # fromisoformat only accepts a Z suffix from Python 3.11
    if text[-1:] in ("Z", "z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def days_since(moment: datetime) -> float:
    """Days elapsed between ``moment`` and now, in local time."""
    return (datetime.now() - moment).total_seconds() / 86400


class StructureValidator:
    """Checks a model tree against naming and folder conventions.

    The validator performs its own directory walk and only reports; it
    never raises for a bad tree. Findings are advisory (info or warning)
    except for a missing root and unreadable metadata.

    Example:
        validator = StructureValidator()
        for finding in validator.validate(Path("models")):
            print(finding.severity.value, finding.file, finding.message)
    """

    def __init__(self, config: ValidationConfig | None = None):
        self.config = config or ValidationConfig()

    def validate(self, root_path: Path | str) -> list[ValidationFinding]:
        """Validate the tree below ``root_path``.

        Args:
            root_path: Directory to check

        Returns:
            All findings of the pass, in walk order
        """
        root = Path(root_path)
        findings: list[ValidationFinding] = []

        if not root.is_dir():
            findings.append(self._finding(root, "Root path does not exist", ValidationSeverity.ERROR))
            return findings

        directories = self._walk_directories(root)
        model_dirs = [d for d in directories if self._yaml_files(d)]

        if not model_dirs:
            findings.append(
                self._finding(root, "No model directories found", ValidationSeverity.WARNING)
            )
            return findings

        for model_dir in model_dirs:
            findings.extend(self._validate_model_directory(model_dir))

        for directory in directories:
            if not self._yaml_files(directory) and self._has_model_subdirectories(directory):
                findings.append(
                    self._finding(
                        directory,
                        f"Namespace directory '{directory.name}' contains model subdirectories "
                        "- this is a valid organization pattern",
                        ValidationSeverity.INFO,
                    )
                )

        logger.debug(f"Structure validation of {root} produced {len(findings)} findings")
        return findings

    def _validate_model_directory(self, model_dir: Path) -> list[ValidationFinding]:
        findings: list[ValidationFinding] = []
        yaml_files = self._yaml_files(model_dir)

        meta_file = model_dir / "_meta.yaml"
        if meta_file.is_file():
            findings.extend(self._validate_metadata(meta_file))

        shared = self._is_shared_component(model_dir)
        enums = self._is_enum_directory(model_dir)

        for file in yaml_files:
            findings.extend(self._validate_file_name(file, check_suffix=not shared, enums=enums))

        findings.extend(self._validate_layout(model_dir, yaml_files, shared))
        return findings

    def _validate_metadata(self, meta_file: Path) -> list[ValidationFinding]:
        try:
            content = meta_file.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            return [
                self._finding(meta_file, f"Error reading metadata file: {e}", ValidationSeverity.ERROR)
            ]

        if not content.strip():
            return [self._finding(meta_file, "Metadata file is empty", ValidationSeverity.WARNING)]

        match = LAST_REVIEWED_PATTERN.search(content)
        if not match:
            return []

        reviewed = parse_review_date(match.group(1))
        if reviewed is None:
            return []

        elapsed = days_since(reviewed)
        threshold = self.config.review_threshold_days
        if elapsed > threshold:
            return [
                self._finding(
                    meta_file,
                    f"Metadata has not been reviewed for {int(elapsed)} days "
                    f"(threshold: {threshold} days)",
                    ValidationSeverity.WARNING,
                )
            ]
        return []

    def _validate_file_name(
        self, file: Path, check_suffix: bool, enums: bool
    ) -> list[ValidationFinding]:
        findings: list[ValidationFinding] = []
        stem = file.stem
        if stem == "_meta":
            return findings

        if not is_pascal_case(stem):
            findings.append(
                self._finding(file, f"File name '{stem}' should be in PascalCase", ValidationSeverity.WARNING)
            )

        if check_suffix and not stem.endswith(RECOMMENDED_SUFFIXES):
            findings.append(
                self._finding(
                    file,
                    f"File name '{stem}' should end with '.Type' or '.Behaviour' for clarity",
                    ValidationSeverity.INFO,
                )
            )

        if enums and any(suffix in stem for suffix in RECOMMENDED_SUFFIXES):
            findings.append(
                self._finding(
                    file,
                    f"Enum file '{stem}' should not include '.Type' or '.Behaviour' in the name.",
                    ValidationSeverity.INFO,
                )
            )
        return findings

    def _validate_layout(
        self, model_dir: Path, yaml_files: list[Path], shared: bool
    ) -> list[ValidationFinding]:
        subdirectories = self._subdirectories(model_dir)

        if shared:
            if subdirectories:
                return [
                    self._finding(
                        model_dir,
                        f"{model_dir.name} directory should not contain subdirectories.",
                        ValidationSeverity.INFO,
                    )
                ]
            return []

        # Organizational folder holding sub-domains
        if subdirectories and len(yaml_files) <= 1:
            return []

        findings: list[ValidationFinding] = []
        stems = [f.stem for f in yaml_files]
        has_type_file = any(s.endswith(".Type") for s in stems)
        has_behaviour_file = any(s.endswith((".Behaviour", ".Behavior")) for s in stems)

        if not has_type_file and yaml_files and not subdirectories:
            findings.append(
                self._finding(
                    model_dir,
                    "Directory should contain at least one .Type.yaml file",
                    ValidationSeverity.INFO,
                )
            )

        model_files = [f for f in yaml_files if not f.name.lower().startswith("_meta")]
        if len(model_files) > 1 and not has_behaviour_file and not subdirectories:
            findings.append(
                self._finding(
                    model_dir,
                    "Directory with multiple model files should separate behaviors "
                    "into .Behaviour.yaml files",
                    ValidationSeverity.INFO,
                )
            )
        return findings

    @staticmethod
    def _is_shared_component(directory: Path) -> bool:
        name = directory.name.lower()
        return name == SHARED_DIR or name in SHARED_COMPONENT_DIRS

    @staticmethod
    def _is_enum_directory(directory: Path) -> bool:
        return directory.name.lower() in (SHARED_DIR, "enums")

    @staticmethod
    def _walk_directories(root: Path) -> list[Path]:
        directories = []
        for dirpath, dirnames, _ in os.walk(root):
            dirnames.sort()
            directories.append(Path(dirpath))
        return directories

    @staticmethod
    def _yaml_files(directory: Path) -> list[Path]:
        try:
            return sorted(p for p in directory.iterdir() if p.is_file() and is_yaml_file(p.name))
        except OSError:
            return []

    @staticmethod
    def _subdirectories(directory: Path) -> list[Path]:
        try:
            return sorted(p for p in directory.iterdir() if p.is_dir())
        except OSError:
            return []

    def _has_model_subdirectories(self, directory: Path) -> bool:
        return any(self._yaml_files(sub) for sub in self._subdirectories(directory))

    @staticmethod
    def _finding(path: Path, message: str, severity: ValidationSeverity) -> ValidationFinding:
        return ValidationFinding(file=str(path), message=message, severity=severity)
