"""Unit tests for model discovery."""

from pathlib import Path

from modeller_mcp.core.discovery import ModelDiscoveryEngine, is_yaml_file, walk_yaml_files
from modeller_mcp.models.discovery import ModelFileKind
from modeller_mcp.utils.config import DiscoveryConfig


def _write(path: Path, content: str = "model: X\nattributeUsages:\n") -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)


class TestHelpers:
    """Tests for discovery helpers."""

    def test_is_yaml_file(self):
        """Test YAML extension detection."""
        assert is_yaml_file("Bar.Type.yaml")
        assert is_yaml_file("Bar.YML")
        assert not is_yaml_file("Bar.json")
        assert not is_yaml_file("yaml")

    def test_walk_yaml_files_sorted(self, tmp_path):
        """Test that the walk is recursive and sorted."""
        _write(tmp_path / "b" / "Two.yaml")
        _write(tmp_path / "a" / "One.yml")
        _write(tmp_path / "a" / "notes.txt")
        errors: list[str] = []
        found = walk_yaml_files(tmp_path, errors)
        assert [p.name for p in found] == ["One.yml", "Two.yaml"]
        assert errors == []


class TestModelDiscoveryEngine:
    """Tests for ModelDiscoveryEngine."""

    def test_missing_root(self, tmp_path):
        """Test that a missing root fails fast with one error."""
        result = ModelDiscoveryEngine().discover(tmp_path / "missing")
        assert len(result.errors) == 1
        assert result.errors[0].startswith("Root path does not exist")
        assert result.directories == []
        assert result.loose_files == []
        assert not result.has_models

    def test_canonical_models_directory(self, foo_project):
        """Test grouping under models/."""
        result = ModelDiscoveryEngine().discover(foo_project)
        assert result.errors == []
        assert len(result.directories) == 1
        directory = result.directories[0]
        assert directory.is_root
        assert len(directory.groups) == 1
        group = directory.groups[0]
        assert group.name == "Foo"
        assert [f.name for f in group.files] == ["Bar.Type.yaml"]
        assert group.files[0].kind == ModelFileKind.BDD_MODEL
        assert result.loose_files == []

    def test_src_models_directory(self, tmp_path):
        """Test that src/models/ is a canonical root."""
        _write(tmp_path / "src" / "models" / "Sales" / "Prospect.Type.yaml")
        result = ModelDiscoveryEngine().discover(tmp_path)
        assert len(result.directories) == 1
        assert result.directories[0].path == tmp_path / "src" / "models"

    def test_both_canonical_directories(self, tmp_path):
        """Test that both canonical roots produce directories, models/ first."""
        _write(tmp_path / "models" / "A" / "One.Type.yaml")
        _write(tmp_path / "src" / "models" / "B" / "Two.Type.yaml")
        result = ModelDiscoveryEngine().discover(tmp_path)
        assert [d.path.name for d in result.directories] == ["models", "models"]
        assert result.directories[0].path == tmp_path / "models"
        assert result.total_file_count == 2

    def test_groups_by_parent_directory(self, sales_project):
        """Test one group per parent directory with metadata detection."""
        result = ModelDiscoveryEngine().discover(sales_project)
        groups = {g.name: g for g in result.directories[0].groups}
        assert set(groups) == {"Sales", "AttributeTypes", "Enums"}
        sales = groups["Sales"]
        assert sales.has_metadata
        assert sales.metadata_path == sales_project / "models" / "Sales" / "_meta.yaml"
        assert not groups["Enums"].has_metadata
        kinds = {f.name: f.kind for f in sales.files}
        assert kinds["_meta.yaml"] == ModelFileKind.METADATA
        assert kinds["Prospect.Behaviour.yaml"] == ModelFileKind.BDD_MODEL
        assert groups["AttributeTypes"].files[0].kind == ModelFileKind.ATTRIBUTE_TYPES
        assert groups["Enums"].files[0].kind == ModelFileKind.ENUM

    def test_fallback_to_loose_files(self, tmp_path):
        """Test the flat scan when no canonical root exists."""
        _write(tmp_path / "specs" / "Bar.Type.yaml")
        _write(tmp_path / "Other.yml", "foo: bar\n")
        result = ModelDiscoveryEngine().discover(tmp_path)
        assert result.directories == []
        assert sorted(f.name for f in result.loose_files) == ["Bar.Type.yaml", "Other.yml"]
        assert result.has_models

    def test_fallback_excludes_build_folders(self, tmp_path):
        """Test that bin, obj and node_modules are skipped."""
        _write(tmp_path / "bin" / "Debug" / "A.yaml")
        _write(tmp_path / "obj" / "B.yaml")
        _write(tmp_path / "web" / "node_modules" / "pkg" / "C.yaml")
        _write(tmp_path / "binary" / "D.yaml")
        result = ModelDiscoveryEngine().discover(tmp_path)
        assert [f.name for f in result.loose_files] == ["D.yaml"]

    def test_empty_models_directory_falls_back(self, tmp_path):
        """Test that an empty models/ folder yields loose files instead."""
        (tmp_path / "models").mkdir()
        _write(tmp_path / "config" / "Bar.Type.yaml")
        result = ModelDiscoveryEngine().discover(tmp_path)
        assert result.directories == []
        assert len(result.loose_files) == 1

    def test_no_yaml_at_all(self, tmp_path):
        """Test an empty tree."""
        result = ModelDiscoveryEngine().discover(tmp_path)
        assert not result.has_models
        assert result.errors == []

    def test_custom_canonical_subpaths(self, tmp_path):
        """Test discovery with configured canonical subpaths."""
        _write(tmp_path / "domain" / "Sales" / "Prospect.Type.yaml")
        config = DiscoveryConfig(canonical_subpaths=["domain"])
        result = ModelDiscoveryEngine(config=config).discover(tmp_path)
        assert len(result.directories) == 1
        assert result.directories[0].groups[0].name == "Sales"

    def test_idempotent(self, sales_project):
        """Test that repeated discovery gives the same result."""
        engine = ModelDiscoveryEngine()
        first = engine.discover(sales_project)
        second = engine.discover(sales_project)
        assert first == second

    def test_all_files(self, sales_project):
        """Test flattening of grouped and loose files."""
        result = ModelDiscoveryEngine().discover(sales_project)
        assert len(result.all_files()) == result.total_file_count == 5
