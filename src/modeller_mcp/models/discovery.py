"""Model discovery data models."""

from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field

YAML_EXTENSIONS = (".yaml", ".yml")
TYPE_SUFFIX = ".Type"
BEHAVIOUR_SUFFIXES = (".Behaviour", ".Behavior")


class ModelFileKind(str, Enum):
    """Kind of a model YAML file, decided by content markers."""

    BDD_MODEL = "bdd_model"
    ATTRIBUTE_TYPES = "attribute_types"
    ENUM = "enum"
    VALIDATION_PROFILES = "validation_profiles"
    METADATA = "metadata"
    UNKNOWN = "unknown"

    @property
    def label(self) -> str:
        """Display name used in text summaries."""
        return {
            ModelFileKind.BDD_MODEL: "BddModel",
            ModelFileKind.ATTRIBUTE_TYPES: "AttributeTypes",
            ModelFileKind.ENUM: "Enum",
            ModelFileKind.VALIDATION_PROFILES: "ValidationProfiles",
            ModelFileKind.METADATA: "Metadata",
            ModelFileKind.UNKNOWN: "Unknown",
        }[self]


class ModelFileInfo(BaseModel):
    """A single discovered YAML file."""

    model_config = {"frozen": True}

    path: Path = Field(description="Full path to the file")
    name: str = Field(description="File name including extension")
    kind: ModelFileKind = Field(default=ModelFileKind.UNKNOWN, description="Sniffed file kind")

    @property
    def extension(self) -> str:
        """Lowercase extension including the dot."""
        return self.path.suffix.lower()

    @property
    def is_yaml(self) -> bool:
        """Whether the file has a YAML extension."""
        return self.extension in YAML_EXTENSIONS

    @property
    def stem(self) -> str:
        """File name without its final extension."""
        return self.path.stem


class ModelFileGroup(BaseModel):
    """YAML files sharing one parent directory."""

    model_config = {"frozen": True}

    directory: Path = Field(description="Directory holding the files")
    files: list[ModelFileInfo] = Field(default_factory=list, description="Files in the directory")
    has_metadata: bool = Field(default=False, description="Whether _meta.yaml is present")
    metadata_path: Path | None = Field(default=None, description="Path to _meta.yaml")

    @property
    def name(self) -> str:
        """Directory base name."""
        return self.directory.name

    @property
    def has_type_file(self) -> bool:
        """Whether any file is a BDD model or named *.Type.yaml."""
        return any(
            f.kind == ModelFileKind.BDD_MODEL or f.stem.endswith(TYPE_SUFFIX)
            for f in self.files
        )

    @property
    def has_behaviour_file(self) -> bool:
        """Whether any file is named *.Behaviour.yaml or *.Behavior.yaml."""
        return any(f.stem.endswith(BEHAVIOUR_SUFFIXES) for f in self.files)


class ModelDirectory(BaseModel):
    """One scanned canonical root such as models/."""

    model_config = {"frozen": True}

    path: Path = Field(description="Scanned root directory")
    is_root: bool = Field(default=True, description="Whether this is a canonical root")
    groups: list[ModelFileGroup] = Field(default_factory=list, description="Groups under the root")

    @property
    def name(self) -> str:
        """Directory base name."""
        return self.path.name

    @property
    def file_count(self) -> int:
        """Number of files across all groups."""
        return sum(len(g.files) for g in self.groups)


class DiscoveryResult(BaseModel):
    """Result of a discovery scan.

    Rebuilt on every scan; counts are derived from the tree.
    """

    model_config = {"frozen": True}

    root: Path = Field(description="Root path that was scanned")
    directories: list[ModelDirectory] = Field(
        default_factory=list, description="Structured model directories"
    )
    loose_files: list[ModelFileInfo] = Field(
        default_factory=list, description="Files found by the fallback scan"
    )
    errors: list[str] = Field(default_factory=list, description="Scan errors")

    @property
    def has_models(self) -> bool:
        """Whether any directory or loose file was found."""
        return bool(self.directories) or bool(self.loose_files)

    @property
    def total_file_count(self) -> int:
        """Files across directories plus loose files."""
        return sum(d.file_count for d in self.directories) + len(self.loose_files)

    def all_files(self) -> list[ModelFileInfo]:
        """Loose files followed by grouped files."""
        files = list(self.loose_files)
        for directory in self.directories:
            for group in directory.groups:
                files.extend(group.files)
        return files
