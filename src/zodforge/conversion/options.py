"""Options controlling how schemas are converted."""

from collections.abc import Callable

from pydantic import Field

from zodforge.models import ZodforgeBaseModel


class ConversionOptions(ZodforgeBaseModel):
    """Every conversion policy, each defaulted independently.

    Attributes:
        with_implicit_required_props: Objects without a `required` list treat
            all properties as required instead of switching to partial mode.
        with_default_values: Emit `.default(...)` for schemas with a default.
        with_description: Emit `.describe(...)` for schemas with a description.
        strict_objects: Reject unknown keys with `.strict()`; takes precedence
            over passthrough.
        additional_properties_default: Objects that do not declare
            `additionalProperties` allow unknown keys (`.passthrough()`).
        all_readonly: Make every array and object read-only.
        complexity_threshold: Schemas scoring below this are flagged for
            inlining; -1 flags everything.
        export_all_schemas: Convert every component schema, not only those
            reached from operations.
        export_all_types: Mark every converted schema as an emitted type.
        with_deprecated: Include deprecated operations in endpoint extraction.
        schema_refiner: Hook called with (node, presence) before each node is
            converted; returning a node substitutes it, returning None keeps
            the original.

    Example:
        >>> options = ConversionOptions(strict_objects=True)
        >>> options.with_default_values
        True
    """

    with_implicit_required_props: bool = False
    with_default_values: bool = True
    with_description: bool = False
    strict_objects: bool = False
    additional_properties_default: bool = True
    all_readonly: bool = False
    complexity_threshold: int = Field(default=4, ge=-1)
    export_all_schemas: bool = False
    export_all_types: bool = False
    with_deprecated: bool = False
    schema_refiner: Callable | None = Field(default=None, exclude=True)
