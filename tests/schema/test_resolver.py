"""Tests for zodforge.schema.resolver module."""

import pytest

from zodforge.errors import (
    InvalidReferenceError,
    InvalidSchemaError,
    SchemaNotFoundError,
    UnresolvedSchemaNameError,
)
from zodforge.schema import SchemaResolver, fix_ref, schema_ref


class TestFixRef:
    """Test reference spelling correction."""

    def test_missing_slash_is_corrected(self):
        assert fix_ref("#components/schemas/Pet") == "#/components/schemas/Pet"

    def test_well_formed_ref_is_unchanged(self):
        assert fix_ref("#/components/schemas/Pet") == "#/components/schemas/Pet"

    def test_schema_ref_escapes_pointer_characters(self):
        assert schema_ref("a/b~c") == "#/components/schemas/a~1b~0c"


class TestSchemaResolver:
    """Test the SchemaResolver class."""

    def test_resolve_returns_node_and_canonical_name(self, petstore_resolver):
        node, info = petstore_resolver.resolve("#/components/schemas/Owner")

        assert node.type == "object"
        assert info.ref == "#/components/schemas/Owner"
        assert info.name == "Owner"
        assert info.normalized == "Owner"

    def test_resolve_corrects_malformed_ref(self, petstore_resolver):
        _, info = petstore_resolver.resolve("#components/schemas/Owner")
        assert info.ref == "#/components/schemas/Owner"

    def test_canonical_name_is_normalized(self):
        resolver = SchemaResolver({"components": {"schemas": {"pet-store.Item": {}}}})

        _, info = resolver.resolve("#/components/schemas/pet-store.Item")

        assert info.name == "pet-store.Item"
        assert info.normalized == "pet_store_Item"
        assert resolver.resolve_schema_name("pet_store_Item").ref == info.ref

    def test_colliding_canonical_names_get_a_suffix(self, caplog):
        resolver = SchemaResolver(
            {"components": {"schemas": {"Pet-Item": {"type": "string"}, "Pet_Item": {}}}}
        )

        first = resolver.resolve_ref("#/components/schemas/Pet-Item")
        second = resolver.resolve_ref("#/components/schemas/Pet_Item")

        assert first.normalized == "Pet_Item"
        assert second.normalized == "Pet_Item_2"
        assert resolver.resolve_schema_name("Pet_Item_2").ref == "#/components/schemas/Pet_Item"
        assert resolver.resolve_ref("#/components/schemas/Pet_Item").normalized == "Pet_Item_2"
        assert "Canonical name Pet_Item" in caplog.text

    def test_pointer_segments_are_unescaped(self):
        resolver = SchemaResolver({"components": {"schemas": {"a/b": {"type": "string"}}}})

        node, info = resolver.resolve("#/components/schemas/a~1b")

        assert node.type == "string"
        assert info.name == "a/b"

    def test_missing_schema(self, petstore_resolver):
        with pytest.raises(SchemaNotFoundError, match=r"Schema not found for \$ref") as exc_info:
            petstore_resolver.resolve("#/components/schemas/Missing")

        assert exc_info.value.ref == "#/components/schemas/Missing"
        assert exc_info.value.operation == "resolve"

    def test_missing_container(self, petstore_resolver):
        with pytest.raises(SchemaNotFoundError):
            petstore_resolver.resolve("#/components/nothing/Pet")

    def test_ref_without_leaf(self, petstore_resolver):
        with pytest.raises(InvalidReferenceError, match=r"Invalid \$ref"):
            petstore_resolver.resolve("#/components/schemas/")

    def test_external_ref_is_rejected(self, petstore_resolver):
        with pytest.raises(InvalidReferenceError, match="only local references"):
            petstore_resolver.resolve("other.yaml#/components/schemas/Pet")

    def test_non_schema_target(self, petstore_resolver):
        with pytest.raises(InvalidSchemaError):
            petstore_resolver.resolve("#/info/title")

    def test_name_lookup_requires_prior_resolution(self, petstore_resolver):
        with pytest.raises(UnresolvedSchemaNameError, match="Unable to resolve schema name: Pet"):
            petstore_resolver.resolve_schema_name("Pet")

        petstore_resolver.resolve("#/components/schemas/Pet")
        assert petstore_resolver.resolve_schema_name("Pet").ref == "#/components/schemas/Pet"

    def test_unresolved_name_is_an_invalid_reference(self, petstore_resolver):
        with pytest.raises(InvalidReferenceError):
            petstore_resolver.resolve_schema_name("Nope")

    def test_resolution_is_memoized(self, petstore_resolver):
        first, _ = petstore_resolver.resolve("#/components/schemas/Pet")
        second, _ = petstore_resolver.resolve("#components/schemas/Pet")

        assert first is second
        assert petstore_resolver.resolved_names() == ["Pet"]

    def test_component_schema_refs_in_document_order(self, petstore_resolver):
        assert petstore_resolver.component_schema_refs() == [
            "#/components/schemas/Pet",
            "#/components/schemas/NewPet",
            "#/components/schemas/Owner",
            "#/components/schemas/Error",
            "#/components/schemas/Node",
            "#/components/schemas/Unused",
        ]

    def test_raw_lookup_outside_schemas(self, petstore_resolver):
        raw = petstore_resolver.get_raw_by_ref("#/components/parameters/PetId")
        assert raw["name"] == "pet-id"

    def test_error_message_includes_context(self, petstore_resolver):
        with pytest.raises(SchemaNotFoundError) as exc_info:
            petstore_resolver.resolve("#/components/schemas/Missing")

        assert str(exc_info.value) == (
            "Schema not found for $ref (ref=#/components/schemas/Missing, operation=resolve)"
        )
