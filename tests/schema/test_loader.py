"""Tests for zodforge.schema.loader module."""

import json

import pytest

from zodforge.schema import load_document, load_document_from_file, validate_document_structure


class TestLoadDocument:
    """Test document loading."""

    def test_load_yaml(self):
        document = load_document("openapi: 3.0.3\ncomponents:\n  schemas:\n    A: {type: string}\n")
        assert document["components"]["schemas"]["A"] == {"type": "string"}

    def test_load_json(self):
        document = load_document('{"paths": {}}', format="json")
        assert document == {"paths": {}}

    def test_invalid_yaml(self):
        with pytest.raises(ValueError, match="Failed to parse YAML"):
            load_document("a: [unclosed")

    def test_unsupported_format(self):
        with pytest.raises(ValueError, match="Unsupported format: toml"):
            load_document("", format="toml")

    def test_document_must_be_mapping(self):
        with pytest.raises(ValueError, match="Document must be a mapping"):
            load_document("- a\n- b\n")

    def test_load_from_file(self, tmp_path, petstore):
        path = tmp_path / "openapi.json"
        path.write_text(json.dumps(petstore))

        assert load_document_from_file(path) == petstore

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError, match="Document not found"):
            load_document_from_file(tmp_path / "missing.yaml")

    def test_unsupported_extension(self, tmp_path):
        path = tmp_path / "openapi.txt"
        path.write_text("{}")

        with pytest.raises(ValueError, match="Unsupported file extension"):
            load_document_from_file(path)


class TestValidateDocumentStructure:
    """Test structural document validation."""

    def test_valid_document(self, petstore):
        validate_document_structure(petstore)

    def test_document_needs_paths_or_components(self):
        with pytest.raises(ValueError, match="Document validation error"):
            validate_document_structure({"openapi": "3.0.3"})

    def test_error_names_the_location(self):
        with pytest.raises(ValueError, match="Document validation error at 'components.schemas'"):
            validate_document_structure({"components": {"schemas": ["not", "a", "mapping"]}})
