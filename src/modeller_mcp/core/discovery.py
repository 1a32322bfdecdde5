"""Model discovery over a project tree."""

from __future__ import annotations

import os
from pathlib import Path

from modeller_mcp.core.classifier import METADATA_FILE_NAMES, FileClassifier
from modeller_mcp.models.discovery import (
    YAML_EXTENSIONS,
    DiscoveryResult,
    ModelDirectory,
    ModelFileGroup,
    ModelFileInfo,
)
from modeller_mcp.utils.config import DiscoveryConfig
from modeller_mcp.utils.logging import get_logger

logger = get_logger("core.discovery")


def is_yaml_file(name: str) -> bool:
    """Check whether a file name has a YAML extension."""
    return name.lower().endswith(YAML_EXTENSIONS)


def walk_yaml_files(root: Path, errors: list[str]) -> list[Path]:
    """Recursively collect YAML files below ``root`` in sorted order.

    Unreadable directories are recorded in ``errors`` and skipped.
    """

    def on_error(e: OSError) -> None:
        errors.append(f"Error scanning directory {e.filename}: {e.strerror or e}")

    found: list[Path] = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=on_error):
        dirnames.sort()
        for name in sorted(filenames):
            if is_yaml_file(name):
                found.append(Path(dirpath) / name)
    return found


class ModelDiscoveryEngine:
    """Finds model YAML files and groups them by directory.

    Canonical roots (``models/`` then ``src/models/``) are scanned first and
    produce grouped ModelDirectory entries. When none of them yields a
    directory, the whole tree is scanned flat and every YAML file becomes a
    loose file.

    Example:
        engine = ModelDiscoveryEngine()
        result = engine.discover(Path("."))

        for directory in result.directories:
            for group in directory.groups:
                print(group.name, len(group.files))
    """

    def __init__(
        self,
        classifier: FileClassifier | None = None,
        config: DiscoveryConfig | None = None,
    ):
        self.classifier = classifier or FileClassifier()
        self.config = config or DiscoveryConfig()

    def discover(self, root_path: Path | str) -> DiscoveryResult:
        """Scan ``root_path`` for model files.

        Args:
            root_path: Project or models directory to scan

        Returns:
            DiscoveryResult; scan errors are collected rather than raised
        """
        root = Path(root_path)
        if not root.is_dir():
            return DiscoveryResult(root=root, errors=[f"Root path does not exist: {root}"])

        errors: list[str] = []
        directories: list[ModelDirectory] = []
        loose_files: list[ModelFileInfo] = []

        for subpath in self.config.canonical_subpaths:
            candidate = root / subpath
            if not candidate.is_dir():
                continue
            try:
                directory = self._scan_directory(candidate, errors)
            except OSError as e:
                errors.append(f"Error scanning directory {candidate}: {e}")
                continue
            if directory is not None:
                directories.append(directory)

        if not directories:
            try:
                loose_files = self._scan_loose_files(root, errors)
            except OSError as e:
                errors.append(f"Error scanning for YAML files: {e}")

        logger.debug(
            f"Discovered {len(directories)} model directories and "
            f"{len(loose_files)} loose files under {root}"
        )
        return DiscoveryResult(
            root=root,
            directories=directories,
            loose_files=loose_files,
            errors=errors,
        )

    def _scan_directory(self, directory: Path, errors: list[str]) -> ModelDirectory | None:
        """Group YAML files under a canonical root by parent directory."""
        yaml_files = walk_yaml_files(directory, errors)
        if not yaml_files:
            return None

        by_parent: dict[Path, list[Path]] = {}
        for path in yaml_files:
            by_parent.setdefault(path.parent, []).append(path)

        groups = []
        for parent in sorted(by_parent):
            metadata_path = self._find_metadata(parent)
            groups.append(
                ModelFileGroup(
                    directory=parent,
                    files=[self._file_info(p) for p in by_parent[parent]],
                    has_metadata=metadata_path is not None,
                    metadata_path=metadata_path,
                )
            )

        return ModelDirectory(path=directory, is_root=True, groups=groups)

    def _scan_loose_files(self, root: Path, errors: list[str]) -> list[ModelFileInfo]:
        """Flat scan of the whole tree, skipping build and dependency folders."""
        excluded = set(self.config.excluded_segments)
        files = []
        for path in walk_yaml_files(root, errors):
            if excluded.intersection(path.relative_to(root).parts):
                continue
            files.append(self._file_info(path))
        return files

    def _file_info(self, path: Path) -> ModelFileInfo:
        return ModelFileInfo(path=path, name=path.name, kind=self.classifier.classify(path))

    @staticmethod
    def _find_metadata(directory: Path) -> Path | None:
        for name in METADATA_FILE_NAMES:
            candidate = directory / name
            if candidate.is_file():
                return candidate
        return None
