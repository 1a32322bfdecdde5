"""Validation finding models."""

from enum import Enum

from pydantic import BaseModel, Field


class ValidationSeverity(str, Enum):
    """Severity of a validation finding."""

    ERROR = "error"
    WARNING = "warning"
    INFO = "info"

    @property
    def rank(self) -> int:
        """Sort order, most severe first."""
        return {ValidationSeverity.ERROR: 0, ValidationSeverity.WARNING: 1, ValidationSeverity.INFO: 2}[self]


class ValidationFinding(BaseModel):
    """A single advisory or error produced by a validation pass."""

    model_config = {"frozen": True}

    file: str = Field(description="File or directory the finding refers to")
    message: str = Field(description="Finding message")
    severity: ValidationSeverity = Field(description="Finding severity")


class ValidationReport(BaseModel):
    """All findings of one validation run."""

    model_config = {"frozen": True}

    path: str = Field(description="Validated file or directory")
    findings: list[ValidationFinding] = Field(default_factory=list, description="Findings")

    @property
    def error_count(self) -> int:
        """Count error findings."""
        return sum(1 for f in self.findings if f.severity == ValidationSeverity.ERROR)

    @property
    def warning_count(self) -> int:
        """Count warning findings."""
        return sum(1 for f in self.findings if f.severity == ValidationSeverity.WARNING)

    @property
    def info_count(self) -> int:
        """Count info findings."""
        return sum(1 for f in self.findings if f.severity == ValidationSeverity.INFO)

    @property
    def passed(self) -> bool:
        """True when there are no error findings."""
        return self.error_count == 0

    def by_file(self) -> dict[str, list[ValidationFinding]]:
        """Group findings by file, preserving first-seen order."""
        grouped: dict[str, list[ValidationFinding]] = {}
        for finding in self.findings:
            grouped.setdefault(finding.file, []).append(finding)
        return grouped
