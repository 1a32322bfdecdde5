"""Unit tests for the file classifier."""

import pytest

from modeller_mcp.core.classifier import FileClassifier
from modeller_mcp.models.discovery import ModelFileKind


class TestClassifyContent:
    """Tests for marker-based classification of raw text."""

    @pytest.fixture
    def classifier(self):
        return FileClassifier()

    @pytest.mark.parametrize(
        "name,content,expected",
        [
            ("Bar.Type.yaml", "model: Bar\nattributeUsages:\n  - name: id\n", ModelFileKind.BDD_MODEL),
            ("Bar.Behaviour.yaml", "model: Bar\nbehaviours: []\n", ModelFileKind.BDD_MODEL),
            ("Bar.Type.yaml", "model: Bar\nscenarios:\n", ModelFileKind.BDD_MODEL),
            ("Common.yaml", "attributeTypes:\n  - name: shortText\n", ModelFileKind.ATTRIBUTE_TYPES),
            ("Status.yaml", "enum: Status\n", ModelFileKind.ENUM),
            ("Status.yaml", "items:\n  - name: a\n    display: A\n", ModelFileKind.ENUM),
            ("Profiles.yaml", "validationProfiles:\n  - name: admin\n", ModelFileKind.VALIDATION_PROFILES),
            ("Empty.yaml", "", ModelFileKind.UNKNOWN),
            ("Other.yaml", "foo: bar\n", ModelFileKind.UNKNOWN),
        ],
    )
    def test_markers(self, classifier, name, content, expected):
        """Test the documented marker rules."""
        assert classifier.classify_content(name, content) == expected

    def test_metadata_name_wins(self, classifier):
        """Test that _meta files are Metadata whatever they contain."""
        content = "model: Bar\nattributeUsages:\n"
        assert classifier.classify_content("_meta.yaml", content) == ModelFileKind.METADATA
        assert classifier.classify_content("_meta.yml", "") == ModelFileKind.METADATA

    def test_model_marker_alone_is_not_bdd(self, classifier):
        """Test that model: without a section marker is not a BDD model."""
        assert classifier.classify_content("Bar.yaml", "model: Bar\n") == ModelFileKind.UNKNOWN

    def test_bdd_takes_precedence_over_enum(self, classifier):
        """Test rule order when several markers are present."""
        content = "model: Bar\nattributeUsages:\nenum: Status\n"
        assert classifier.classify_content("Bar.yaml", content) == ModelFileKind.BDD_MODEL

    def test_markers_in_comments_count(self, classifier):
        """Test that markers match anywhere, including comments."""
        assert classifier.classify_content("X.yaml", "# attributeTypes: none\n") == ModelFileKind.ATTRIBUTE_TYPES

    def test_invalid_yaml_still_classified(self, classifier):
        """Test that YAML validity does not matter."""
        content = "enum: [unclosed\n  : : :"
        assert classifier.classify_content("Broken.yaml", content) == ModelFileKind.ENUM

    def test_enum_requires_all_item_markers(self, classifier):
        """Test that items: without display: is not an enum."""
        assert classifier.classify_content("X.yaml", "items:\n  - name: a\n") == ModelFileKind.UNKNOWN


class TestClassifyFile:
    """Tests for classifying files on disk."""

    def test_classify_file(self, tmp_path):
        """Test reading and classifying a file."""
        path = tmp_path / "Bar.Type.yaml"
        path.write_text("model: Bar\nattributeUsages:\n")
        assert FileClassifier().classify(path) == ModelFileKind.BDD_MODEL

    def test_missing_file_is_unknown(self, tmp_path):
        """Test that an unreadable file classifies as Unknown."""
        assert FileClassifier().classify(tmp_path / "Missing.yaml") == ModelFileKind.UNKNOWN

    def test_empty_file_is_unknown(self, tmp_path):
        """Test that an empty file classifies as Unknown."""
        path = tmp_path / "Empty.yaml"
        path.write_text("")
        assert FileClassifier().classify(path) == ModelFileKind.UNKNOWN

    def test_metadata_file_with_arbitrary_content(self, tmp_path):
        """Test that a _meta.yaml file is Metadata regardless of content."""
        path = tmp_path / "_meta.yaml"
        path.write_text("enum: Whatever\n")
        assert FileClassifier().classify(path) == ModelFileKind.METADATA


class TestModelFileKind:
    """Tests for ModelFileKind."""

    def test_labels(self):
        """Test display labels."""
        assert ModelFileKind.BDD_MODEL.label == "BddModel"
        assert ModelFileKind.ATTRIBUTE_TYPES.label == "AttributeTypes"
        assert ModelFileKind.UNKNOWN.label == "Unknown"
