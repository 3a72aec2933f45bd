"""Constraint chains appended to a base validator expression.

A chain is built from type-specific constraints, then the description, then
the default value, then the presence modifier, e.g.
``.min(1).max(20).describe("Pet name").default("rex").optional()``.
"""

import json
import logging
from typing import Any

from zodforge.conversion.options import ConversionOptions
from zodforge.schema.models import SchemaNodeModel
from zodforge.schema.naming import escape_control_characters

logger = logging.getLogger(__name__)

FORMAT_VALIDATORS = {
    "email": "email()",
    "hostname": "url()",
    "uri": "url()",
    "url": "url()",
    "uuid": "uuid()",
    "date-time": "datetime({ offset: true })",
}

# Formats that are expressed by the base expression or carry no runtime check
PASSIVE_FORMATS = {
    "binary",
    "byte",
    "password",
    "date",
    "time",
    "int32",
    "int64",
    "float",
    "double",
}


def format_number(value: int | float) -> str:
    return json.dumps(value)


def pattern_literal(pattern: str) -> str:
    """Render a schema pattern as a regex literal.

    Surrounding slashes are stripped, control characters and slashes escaped,
    and the unicode flag is added when the pattern uses ``\\u`` or ``\\p``.
    """
    if pattern.startswith("/"):
        pattern = pattern[1:]
    if pattern.endswith("/") and not pattern.endswith("\\/"):
        pattern = pattern[:-1]
    flags = "u" if "\\u" in pattern or "\\p" in pattern else ""
    return f"/{escape_control_characters(pattern)}/{flags}"


def string_constraints(node: SchemaNodeModel) -> list[str]:
    chains: list[str] = []
    if node.enum is None:
        if node.min_length is not None:
            chains.append(f"min({node.min_length})")
        if node.max_length is not None:
            chains.append(f"max({node.max_length})")
    if node.pattern:
        chains.append(f"regex({pattern_literal(node.pattern)})")
    if node.format:
        validator = FORMAT_VALIDATORS.get(node.format)
        if validator is not None:
            chains.append(validator)
        elif node.format not in PASSIVE_FORMATS:
            logger.debug(f"No validator for string format {node.format}")
    return chains


def number_constraints(node: SchemaNodeModel) -> list[str]:
    if node.enum is not None:
        return []

    chains: list[str] = []
    if node.primary_kind == "integer":
        chains.append("int()")

    if node.minimum is not None:
        keyword = "gt" if node.exclusive_minimum is True else "gte"
        chains.append(f"{keyword}({format_number(node.minimum)})")
    if not isinstance(node.exclusive_minimum, bool) and node.exclusive_minimum is not None:
        chains.append(f"gt({format_number(node.exclusive_minimum)})")

    if node.maximum is not None:
        keyword = "lt" if node.exclusive_maximum is True else "lte"
        chains.append(f"{keyword}({format_number(node.maximum)})")
    if not isinstance(node.exclusive_maximum, bool) and node.exclusive_maximum is not None:
        chains.append(f"lt({format_number(node.exclusive_maximum)})")

    if node.multiple_of:
        chains.append(f"multipleOf({format_number(node.multiple_of)})")
    return chains


def array_constraints(node: SchemaNodeModel) -> list[str]:
    chains: list[str] = []
    if node.min_items:
        chains.append(f"min({node.min_items})")
    if node.max_items:
        chains.append(f"max({node.max_items})")
    return chains


def type_constraints(node: SchemaNodeModel) -> list[str]:
    # Multi-kind nodes carry their constraints on each union member instead.
    if isinstance(node.type, list) and len(node.type) > 1:
        return []
    kind = node.primary_kind
    if kind == "string":
        return string_constraints(node)
    if kind in ("number", "integer"):
        return number_constraints(node)
    if kind == "array":
        return array_constraints(node)
    return []


def description_modifier(description: str) -> str:
    if "\n" in description:
        escaped = description.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${")
        return f"describe(`{escaped}`)"
    return f"describe({json.dumps(description)})"


def serialize_default(node: SchemaNodeModel, value: Any) -> str:
    """Serialize a default value for the node's kind.

    Numeric kinds pass numbers (and numeric strings) through as literals;
    everything else is JSON-serialized.
    """
    if node.primary_kind in ("number", "integer"):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return format_number(value)
        if isinstance(value, str):
            return value
    return json.dumps(value)


def presence_modifier(
    node: SchemaNodeModel, is_required: bool, base_nullable: bool = False
) -> str | None:
    """Presence suffix for a node in its parent context.

    Args:
        node: The (resolved) schema node
        is_required: Whether the parent requires the value
        base_nullable: Whether the base expression already accepts null

    Returns:
        ``nullish()``, ``nullable()``, ``optional()`` or None
    """
    nullable = node.is_nullable and not base_nullable
    if nullable and not is_required:
        return "nullish()"
    if nullable:
        return "nullable()"
    if not is_required:
        return "optional()"
    return None


def build_chain(
    node: SchemaNodeModel,
    is_required: bool,
    options: ConversionOptions,
    base_nullable: bool = False,
) -> str:
    """Build the full chain suffix for a node.

    Args:
        node: The resolved schema node (never a reference)
        is_required: Whether the parent requires the value
        options: Conversion options (description and default emission)
        base_nullable: Whether the base expression already accepts null

    Returns:
        The suffix, starting with ``.``, or an empty string
    """
    chains = type_constraints(node)

    if options.with_description and node.description:
        chains.append(description_modifier(node.description))

    if options.with_default_values and node.has_default:
        chains.append(f"default({serialize_default(node, node.default)})")

    presence = presence_modifier(node, is_required, base_nullable)
    if presence is not None:
        chains.append(presence)

    if not chains:
        return ""
    return "." + ".".join(chains)
