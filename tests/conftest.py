"""Shared fixtures for zodforge tests."""

import copy
from typing import Any

import pytest

from zodforge.conversion import ConversionContext, ConversionOptions
from zodforge.schema import SchemaResolver

PETSTORE: dict[str, Any] = {
    "openapi": "3.0.3",
    "info": {"title": "Petstore", "version": "1.0.0"},
    "paths": {
        "/pets": {
            "get": {
                "operationId": "listPets",
                "summary": "List all pets",
                "parameters": [
                    {
                        "name": "limit",
                        "in": "query",
                        "schema": {"type": "integer", "maximum": 100},
                    },
                    {
                        "name": "status",
                        "in": "query",
                        "schema": {"type": "string", "enum": ["available", "sold"]},
                    },
                ],
                "responses": {
                    "200": {
                        "description": "A list of pets",
                        "content": {
                            "application/json": {
                                "schema": {
                                    "type": "array",
                                    "items": {"$ref": "#/components/schemas/Pet"},
                                }
                            }
                        },
                    },
                    "default": {"$ref": "#/components/responses/Error"},
                },
            },
            "post": {
                "operationId": "createPet",
                "requestBody": {
                    "required": True,
                    "content": {
                        "application/json": {"schema": {"$ref": "#/components/schemas/NewPet"}}
                    },
                },
                "responses": {
                    "201": {
                        "description": "Created",
                        "content": {
                            "application/json": {"schema": {"$ref": "#/components/schemas/Pet"}}
                        },
                    }
                },
            },
        },
        "/pets/{pet-id}": {
            "parameters": [{"$ref": "#/components/parameters/PetId"}],
            "get": {
                "responses": {
                    "200": {
                        "description": "A pet",
                        "content": {
                            "application/json": {"schema": {"$ref": "#/components/schemas/Pet"}}
                        },
                    },
                    "404": {"description": "Not found"},
                }
            },
            "delete": {
                "deprecated": True,
                "responses": {"204": {"description": "Deleted"}},
            },
        },
    },
    "components": {
        "schemas": {
            "Pet": {
                "allOf": [
                    {"$ref": "#/components/schemas/NewPet"},
                    {
                        "type": "object",
                        "properties": {"id": {"type": "integer", "format": "int64"}},
                        "required": ["id"],
                    },
                ]
            },
            "NewPet": {
                "type": "object",
                "properties": {
                    "name": {"type": "string", "minLength": 1},
                    "tag": {"type": "string", "nullable": True},
                    "owner": {"$ref": "#/components/schemas/Owner"},
                },
                "required": ["name"],
            },
            "Owner": {
                "type": "object",
                "properties": {"name": {"type": "string"}},
                "required": ["name"],
            },
            "Error": {
                "type": "object",
                "properties": {"code": {"type": "integer"}, "message": {"type": "string"}},
                "required": ["code", "message"],
            },
            "Node": {
                "type": "object",
                "properties": {
                    "value": {"type": "string"},
                    "children": {"type": "array", "items": {"$ref": "#/components/schemas/Node"}},
                },
                "required": ["value"],
            },
            "Unused": {"type": "string"},
        },
        "parameters": {
            "PetId": {
                "name": "pet-id",
                "in": "path",
                "required": True,
                "schema": {"type": "string", "format": "uuid"},
            }
        },
        "responses": {
            "Error": {
                "description": "Unexpected error",
                "content": {
                    "application/json": {"schema": {"$ref": "#/components/schemas/Error"}}
                },
            }
        },
    },
}


def components_document(schemas: dict[str, Any]) -> dict[str, Any]:
    """A document holding only component schemas."""
    return {
        "openapi": "3.0.3",
        "info": {"title": "Test", "version": "1.0.0"},
        "components": {"schemas": schemas},
    }


@pytest.fixture
def petstore() -> dict[str, Any]:
    """A fresh copy of the petstore document."""
    return copy.deepcopy(PETSTORE)


@pytest.fixture
def petstore_resolver(petstore):
    return SchemaResolver(petstore)


@pytest.fixture
def make_context():
    """Factory for conversion contexts over a components-only document.

    Usage:
        ctx = make_context({"Pet": {...}}, strict_objects=True)
    """

    def _make(schemas: dict[str, Any] | None = None, **options: Any) -> ConversionContext:
        resolver = SchemaResolver(components_document(schemas or {}))
        return ConversionContext(resolver=resolver, options=ConversionOptions(**options))

    return _make
