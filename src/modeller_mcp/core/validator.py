"""Content validation of model YAML files."""

from __future__ import annotations

import re
from datetime import date, datetime
from pathlib import Path
from typing import Any

import pydantic
import yaml

from modeller_mcp.core.classifier import FileClassifier
from modeller_mcp.core.discovery import walk_yaml_files
from modeller_mcp.core.store import ValidatedModelStore
from modeller_mcp.core.structure import StructureValidator, days_since, parse_review_date
from modeller_mcp.models.definition import (
    AttributeTypeDefinition,
    AttributeTypesDocument,
    EnumDefinition,
    FolderMetadata,
    ModelDefinition,
    ValidationProfile,
    ValidationProfilesDocument,
)
from modeller_mcp.models.discovery import ModelFileKind
from modeller_mcp.models.validation import ValidationFinding, ValidationReport, ValidationSeverity
from modeller_mcp.utils.config import ValidationConfig
from modeller_mcp.utils.logging import get_logger

logger = get_logger("core.validator")

ABBREVIATION_PATTERN = re.compile(r"\b[A-Z]{2,}\b")
COMMON_ABBREVIATIONS = frozenset(
    {"ID", "URL", "URI", "API", "HTTP", "HTTPS", "JSON", "XML", "HTML", "CSS", "SQL", "UTC"}
)


def is_camel_case(name: str | None) -> bool:
    """Check for a non-empty alphanumeric name starting lowercase."""
    return bool(name) and name[0].islower() and name.isalnum()


class _FileFindings:
    """Collects findings for a single file."""

    def __init__(self, path: Path):
        self.path = str(path)
        self.items: list[ValidationFinding] = []

    def error(self, message: str) -> None:
        self.items.append(ValidationFinding(file=self.path, message=message, severity=ValidationSeverity.ERROR))

    def warning(self, message: str) -> None:
        self.items.append(ValidationFinding(file=self.path, message=message, severity=ValidationSeverity.WARNING))

    def info(self, message: str) -> None:
        self.items.append(ValidationFinding(file=self.path, message=message, severity=ValidationSeverity.INFO))

    @property
    def has_errors(self) -> bool:
        return any(f.severity == ValidationSeverity.ERROR for f in self.items)


class ModelValidator:
    """Validates model files and directories.

    A directory is checked for structure first and then every YAML file
    below it is validated by kind. BDD models that validate without errors
    are registered in the supplied ValidatedModelStore.

    Example:
        store = ValidatedModelStore()
        validator = ModelValidator(store=store)
        report = validator.validate(Path("models/Sales"))
        print(report.error_count, report.warning_count)
    """

    def __init__(
        self,
        store: ValidatedModelStore | None = None,
        structure_validator: StructureValidator | None = None,
        classifier: FileClassifier | None = None,
        config: ValidationConfig | None = None,
    ):
        self.config = config or ValidationConfig()
        self.store = store
        self.structure_validator = structure_validator or StructureValidator(self.config)
        self.classifier = classifier or FileClassifier()

    def validate(self, path: Path | str) -> ValidationReport:
        """Validate a file or every YAML file below a directory.

        Args:
            path: File or directory to validate

        Returns:
            ValidationReport with all findings
        """
        path = Path(path)
        findings: list[ValidationFinding] = []

        try:
            if path.is_dir():
                findings.extend(self.structure_validator.validate(path))
                errors: list[str] = []
                for file in walk_yaml_files(path, errors):
                    findings.extend(self.validate_file(file))
                for error in errors:
                    findings.append(
                        ValidationFinding(file=str(path), message=error, severity=ValidationSeverity.ERROR)
                    )
            elif path.is_file():
                findings.extend(self.validate_file(path))
            else:
                findings.append(
                    ValidationFinding(
                        file=str(path),
                        message="File or directory does not exist",
                        severity=ValidationSeverity.ERROR,
                    )
                )
        except OSError as e:
            findings.append(
                ValidationFinding(file=str(path), message=f"Validation failed: {e}", severity=ValidationSeverity.ERROR)
            )

        return ValidationReport(path=str(path), findings=findings)

    def validate_file(self, path: Path) -> list[ValidationFinding]:
        """Validate one YAML file by its sniffed kind."""
        out = _FileFindings(path)
        try:
            content = path.read_text(encoding="utf-8")
            if not content.strip():
                out.warning("File is empty")
                return out.items

            try:
                data = yaml.safe_load(content)
            except yaml.YAMLError as e:
                out.error(f"YAML parsing error: {e}")
                return out.items

            if data is None:
                out.warning("Empty YAML document")
                return out.items

            kind = self.classifier.classify_content(path.name, content)
            definition = self._validate_by_kind(kind, path, data, out)
            self._check_abbreviations(content, out)

            if definition is not None and not out.has_errors:
                self._register(path, definition)
        except Exception as e:
            # Failures stay scoped to this file, e.g. RecursionError on deep nesting
            logger.debug(f"Validation of {path} failed: {e!r}")
            out.error(f"Validation error: {e}")

        return out.items

    def _validate_by_kind(
        self, kind: ModelFileKind, path: Path, data: Any, out: _FileFindings
    ) -> ModelDefinition | None:
        if kind == ModelFileKind.BDD_MODEL:
            return self._validate_bdd_model(path, data, out)
        if kind == ModelFileKind.ATTRIBUTE_TYPES:
            self._validate_attribute_types(data, out)
        elif kind == ModelFileKind.ENUM:
            self._validate_enum(data, out)
        elif kind == ModelFileKind.VALIDATION_PROFILES:
            self._validate_validation_profiles(data, out)
        elif kind == ModelFileKind.METADATA:
            self._validate_metadata(data, out)
        else:
            out.warning("Unable to determine file type")
        return None

    def _validate_bdd_model(self, path: Path, data: Any, out: _FileFindings) -> ModelDefinition | None:
        try:
            model = ModelDefinition.model_validate(_require_mapping(data))
        except (pydantic.ValidationError, TypeError) as e:
            out.error(f"BDD model validation error: {e}")
            return None

        if not model.model:
            out.error("Model name is required")
        else:
            expected = {f"{model.model}{suffix}".lower() for suffix in (".Type", ".Behaviour", ".Behavior")}
            if path.stem.lower() not in expected:
                out.warning(f"Model name '{model.model}' should match file name '{model.model}.Type'")

        for usage in model.attribute_usages:
            if not usage.type:
                out.error("Attribute usage type is required")
            if usage.name and not is_camel_case(usage.name):
                out.warning(f"Attribute name '{usage.name}' should be camelCase")

        for behaviour in model.behaviours:
            if not behaviour.name:
                out.error("Behaviour name is required")
            elif not is_camel_case(behaviour.name):
                out.warning(f"Behaviour name '{behaviour.name}' should be camelCase")
            if not behaviour.entities:
                out.warning(f"Behaviour '{behaviour.name}' should specify at least one entity")

        for scenario in model.scenarios:
            if not scenario.name:
                out.error("Scenario name is required")
            for step in ("given", "when", "then"):
                if not getattr(scenario, step):
                    out.warning(f"Scenario '{scenario.name}' should have at least one '{step}' condition")

        return model

    def _validate_attribute_types(self, data: Any, out: _FileFindings) -> None:
        try:
            if isinstance(data, list):
                attribute_types = [AttributeTypeDefinition.model_validate(item) for item in data]
            else:
                attribute_types = AttributeTypesDocument.model_validate(_require_mapping(data)).attribute_types
        except (pydantic.ValidationError, TypeError) as e:
            out.error(f"Attribute types validation error: {e}")
            return

        for attribute_type in attribute_types:
            if not attribute_type.name:
                out.error("Attribute type name is required")
            elif not is_camel_case(attribute_type.name):
                out.warning(f"Attribute type name '{attribute_type.name}' should be camelCase")
            if not attribute_type.type:
                out.error(f"Attribute type '{attribute_type.name}' must specify a type")

    def _validate_enum(self, data: Any, out: _FileFindings) -> None:
        try:
            enum = EnumDefinition.model_validate(_require_mapping(data))
        except (pydantic.ValidationError, TypeError) as e:
            out.error(f"Enum validation error: {e}")
            return

        if not enum.enum:
            out.error("Enum name is required")
        if not enum.items:
            out.error("Enum must have at least one item")

        # Keyed by type so that 1, 1.0 and true stay distinct values
        seen: set[tuple[type, Any]] = set()
        reported: set[tuple[type, Any]] = set()
        for item in enum.items:
            value = item.value
            if value is None or not isinstance(value, (int, str, float, bool)):
                continue
            key = (type(value), value)
            if key in seen and key not in reported:
                out.error(f"Enum has duplicate value: {value}")
                reported.add(key)
            seen.add(key)

    def _validate_validation_profiles(self, data: Any, out: _FileFindings) -> None:
        try:
            if isinstance(data, list):
                profiles = [ValidationProfile.model_validate(item) for item in data]
            else:
                profiles = ValidationProfilesDocument.model_validate(
                    _require_mapping(data)
                ).validation_profiles
        except (pydantic.ValidationError, TypeError) as e:
            out.error(f"Validation profiles error: {e}")
            return

        for profile in profiles:
            if not profile.name:
                out.error("Validation profile name is required")
            if not profile.claims:
                out.warning(f"Validation profile '{profile.name}' should have at least one claim")

    def _validate_metadata(self, data: Any, out: _FileFindings) -> None:
        try:
            metadata = FolderMetadata.model_validate(_require_mapping(data))
        except (pydantic.ValidationError, TypeError) as e:
            out.error(f"Metadata validation error: {e}")
            return

        if not metadata.name:
            out.error("Metadata name is required")

        reviewed = _as_datetime(metadata.last_reviewed)
        if reviewed is not None:
            elapsed = days_since(reviewed)
            threshold = self.config.review_threshold_days
            if elapsed > threshold:
                out.warning(
                    f"Metadata has not been reviewed for {int(elapsed)} days (threshold: {threshold} days)"
                )

    @staticmethod
    def _check_abbreviations(content: str, out: _FileFindings) -> None:
        reported: set[str] = set()
        for match in ABBREVIATION_PATTERN.finditer(content):
            token = match.group(0)
            if token in COMMON_ABBREVIATIONS or token in reported:
                continue
            reported.add(token)
            out.info(
                f"Potential abbreviation '{token}' found - consider using full words unless domain-specific"
            )

    def _register(self, path: Path, definition: ModelDefinition) -> None:
        """Merge a validated BDD model into the store under its domain."""
        if self.store is None or not definition.model:
            return
        domain = path.parent.name
        existing = self.store.get(domain, definition.model)
        if existing is not None:
            summary = definition.summary if definition.attribute_usages else existing.summary
            definition = existing.model_copy(
                update={
                    "summary": summary or definition.summary,
                    "attribute_usages": definition.attribute_usages or existing.attribute_usages,
                    "behaviours": _merge_by_name(existing.behaviours, definition.behaviours),
                    "scenarios": _merge_by_name(existing.scenarios, definition.scenarios),
                }
            )
        self.store.register(definition.model, domain, definition)
        logger.debug(f"Registered validated model {domain}:{definition.model}")


def _require_mapping(data: Any) -> dict[str, Any]:
    if not isinstance(data, dict):
        raise TypeError(f"expected a mapping, got {type(data).__name__}")
    return data


def _as_datetime(value: date | datetime | str | None) -> datetime | None:
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.replace(tzinfo=None) if value.tzinfo is None else value.astimezone().replace(tzinfo=None)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    return parse_review_date(str(value))


def _merge_by_name(existing: list[Any], incoming: list[Any]) -> list[Any]:
    """Combine named items, letting ``incoming`` replace same-named entries."""
    names = {item.name for item in incoming}
    return [item for item in existing if item.name not in names] + list(incoming)
