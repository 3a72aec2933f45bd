"""Enum handling for primitive schemas."""

import json
import logging
from typing import Any

from zodforge.conversion._types import ConversionResult
from zodforge.schema.models import SchemaNodeModel

logger = logging.getLogger(__name__)


def literal(value: Any) -> str:
    return json.dumps(value)


def is_malformed_enum(node: SchemaNodeModel) -> bool:
    """True for a declared non-string kind whose enum lists a string value."""
    if node.enum is None or node.primary_kind in (None, "string"):
        return False
    return any(isinstance(value, str) for value in node.enum)


def partition_enum(values: list[Any]) -> tuple[list[Any], bool]:
    """Split enum values into the non-null values and a has-null flag."""
    non_null = [value for value in values if value is not None]
    return non_null, len(non_null) != len(values)


def _with_null(result: ConversionResult, accepts_null: bool) -> ConversionResult:
    if not accepts_null:
        return result
    return ConversionResult(
        type_expr=f"{result.type_expr} | null",
        validator_expr=f"{result.validator_expr}.nullable()",
        is_nullable=True,
    )


def convert_enum(node: SchemaNodeModel) -> ConversionResult:
    """Convert a primitive schema with an enum list.

    Invalid enums (a non-string kind listing strings, or no values at all)
    collapse to ``never`` instead of failing the run. Null is taken out of the
    value list and expressed as a nullable suffix.

    Args:
        node: Primitive schema node whose ``enum`` is set

    Returns:
        The conversion result
    """
    values, has_null = partition_enum(node.enum or [])

    if is_malformed_enum(node) or (not values and not has_null):
        logger.warning(f"Invalid enum {node.enum!r} for type {node.type}, emitting never")
        return _with_null(ConversionResult("never", "z.never()"), node.is_nullable)

    if not values:
        return ConversionResult("null", "z.null()", is_nullable=True)

    type_expr = " | ".join(literal(value) for value in values)
    if len(values) == 1:
        validator_expr = f"z.literal({literal(values[0])})"
    elif all(isinstance(value, str) for value in values):
        validator_expr = f"z.enum([{', '.join(literal(value) for value in values)}])"
    else:
        members = ", ".join(f"z.literal({literal(value)})" for value in values)
        validator_expr = f"z.union([{members}])"

    return _with_null(ConversionResult(type_expr, validator_expr), has_null or node.is_nullable)
