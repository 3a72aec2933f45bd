"""Pydantic models for OpenAPI / JSON-Schema nodes.

Schema nodes are parsed from plain document mappings and never mutated. Unknown
keywords (vendor extensions, annotations this package does not read) are kept
as extras so that a schema refiner can still inspect them.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, model_validator

PRIMITIVE_KINDS = ("string", "number", "integer", "boolean", "null")

# Keywords that give a node a type of its own; they may not sit next to `$ref`
TYPE_DEFINING_KEYWORDS = (
    ("type", "type"),
    ("properties", "properties"),
    ("items", "items"),
    ("additional_properties", "additionalProperties"),
    ("all_of", "allOf"),
    ("one_of", "oneOf"),
    ("any_of", "anyOf"),
    ("enum", "enum"),
)


class DiscriminatorModel(BaseModel):
    """OpenAPI discriminator object.

    Attributes:
        property_name: Name of the property whose literal value selects the member.
        mapping: Optional mapping of property values to member references.
    """

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    property_name: str = Field(alias="propertyName")
    mapping: dict[str, str] | None = None


class SchemaNodeModel(BaseModel):
    """One OpenAPI / JSON-Schema fragment.

    A node is either a reference (``ref`` set) or an inline definition. Field
    names are snake_case; the document spelling is accepted through aliases.

    Attributes:
        ref: The `$ref` pointer when the node is a reference.
        type: Kind tag, or a list of kinds (OpenAPI 3.1 style), or None for "any".
        format: Format hint (email, uuid, date-time, binary, ...).
        description: Free-text description.
        default: Default value; only meaningful when ``has_default`` is true.
        has_default: Whether a default was present in the document (null defaults count).
        enum: Allowed values.
        properties: Object properties in declaration order.
        required: Required property names.
        additional_properties: Boolean or value schema for unknown keys.
        items: Array item schema, or a list of schemas for tuple-like arrays.
        all_of: Intersection members.
        one_of: Exclusive union members.
        any_of: Inclusive union members.
        not_: The `not` child.
        discriminator: Property used to pick among oneOf members.
        nullable: OpenAPI 3.0 nullable flag.

    Example:
        >>> node = SchemaNodeModel.model_validate(
        ...     {"type": "object", "properties": {"id": {"type": "integer"}}, "required": ["id"]}
        ... )
        >>> node.properties["id"].type
        'integer'
    """

    model_config = ConfigDict(extra="allow", frozen=True, populate_by_name=True)

    ref: str | None = Field(default=None, alias="$ref")
    type: str | list[str] | None = None
    format: str | None = None
    title: str | None = None
    description: str | None = None
    default: Any | None = None
    has_default: bool = False
    example: Any | None = None
    examples: list[Any] | dict[str, Any] | None = None
    enum: list[Any] | None = None
    nullable: bool | None = None
    read_only: bool | None = Field(default=None, alias="readOnly")
    write_only: bool | None = Field(default=None, alias="writeOnly")
    deprecated: bool | None = None

    # String constraints
    min_length: int | None = Field(default=None, alias="minLength")
    max_length: int | None = Field(default=None, alias="maxLength")
    pattern: str | None = None

    # Numeric constraints
    minimum: int | float | None = None
    maximum: int | float | None = None
    exclusive_minimum: bool | int | float | None = Field(default=None, alias="exclusiveMinimum")
    exclusive_maximum: bool | int | float | None = Field(default=None, alias="exclusiveMaximum")
    multiple_of: int | float | None = Field(default=None, alias="multipleOf")

    # Array constraints
    items: SchemaNodeModel | list[SchemaNodeModel] | None = None
    min_items: int | None = Field(default=None, alias="minItems")
    max_items: int | None = Field(default=None, alias="maxItems")
    unique_items: bool | None = Field(default=None, alias="uniqueItems")

    # Object constraints
    properties: dict[str, SchemaNodeModel] | None = None
    required: list[str] | None = None
    additional_properties: bool | SchemaNodeModel | None = Field(
        default=None, alias="additionalProperties"
    )

    # Composition
    all_of: list[SchemaNodeModel] | None = Field(default=None, alias="allOf")
    one_of: list[SchemaNodeModel] | None = Field(default=None, alias="oneOf")
    any_of: list[SchemaNodeModel] | None = Field(default=None, alias="anyOf")
    not_: SchemaNodeModel | None = Field(default=None, alias="not")
    discriminator: DiscriminatorModel | None = None

    @model_validator(mode="before")
    @classmethod
    def set_has_default(cls, values: Any) -> Any:
        """Record whether a default was given, so `default: null` is not lost."""
        if isinstance(values, dict) and "default" in values:
            values = {**values, "has_default": True}
        return values

    @property
    def is_nullable(self) -> bool:
        """True when the node admits null via `nullable` or a `"null"` type entry."""
        if self.nullable:
            return True
        return isinstance(self.type, list) and "null" in self.type

    @property
    def primary_kind(self) -> str | None:
        """The single non-null kind of the node, if there is exactly one."""
        if isinstance(self.type, list):
            kinds = [kind for kind in self.type if kind != "null"]
            return kinds[0] if len(kinds) == 1 else None
        return self.type

    def is_empty(self) -> bool:
        """True for the `{}` schema."""
        return not self.model_fields_set and not self.model_extra

    def is_object_like(self) -> bool:
        return (
            self.type == "object"
            or self.properties is not None
            or self.additional_properties is not None
        )

    def is_required_only(self) -> bool:
        """True for allOf members that only contribute a `required` list."""
        return (
            self.ref is None
            and self.required is not None
            and self.type is None
            and self.properties is None
            and self.all_of is None
            and self.any_of is None
            and self.one_of is None
        )

    def decomposition_conflicts(self) -> list[str]:
        """Document spellings of type-defining keywords set next to `$ref`."""
        if self.ref is None:
            return []
        return [
            alias
            for field_name, alias in TYPE_DEFINING_KEYWORDS
            if getattr(self, field_name) is not None
        ]

    def children(self) -> Iterator[SchemaNodeModel]:
        """Yield the structural children that may hold references."""
        if self.properties:
            yield from self.properties.values()
        if isinstance(self.items, list):
            yield from self.items
        elif self.items is not None:
            yield self.items
        for members in (self.all_of, self.one_of, self.any_of):
            if members:
                yield from members
        if isinstance(self.additional_properties, SchemaNodeModel):
            yield self.additional_properties


def parse_schema(raw: Any) -> SchemaNodeModel:
    """Parse a document fragment into a schema node.

    Boolean schemas (`true`/`false`) are accepted: `true` is the empty schema
    and `false` becomes `{"not": {}}`.
    """
    if isinstance(raw, SchemaNodeModel):
        return raw
    if raw is True:
        return SchemaNodeModel()
    if raw is False:
        return SchemaNodeModel.model_validate({"not": {}})
    return SchemaNodeModel.model_validate(raw)


DiscriminatorModel.model_rebuild()
SchemaNodeModel.model_rebuild()
