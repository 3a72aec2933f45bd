"""Complexity scores for schemas.

Writers use the score to decide whether a schema is simple enough to be
inlined at its point of use or should be hoisted into a named declaration.
Enum size does not count: an enum is one unit whatever its length.
"""

from typing import Literal

from zodforge.schema.models import PRIMITIVE_KINDS, SchemaNodeModel

CompositeKind = Literal[
    "oneOf", "anyOf", "allOf", "enum", "array", "empty-object", "object", "record"
]

COMPOSITE_COMPLEXITY: dict[str, int] = {
    "oneOf": 2,
    "anyOf": 3,
    "allOf": 2,
    "enum": 1,
    "array": 1,
    "record": 1,
    "empty-object": 1,
    "object": 2,
}


def complexity_by_composite(kind: CompositeKind | None) -> int:
    if kind is None:
        return 0
    return COMPOSITE_COMPLEXITY.get(kind, 0)


def get_schema_complexity(node: SchemaNodeModel | None, current: int = 0) -> int:
    """Score a schema node.

    Args:
        node: The schema to score, or None for "nothing below"
        current: Score accumulated by the caller

    Returns:
        The accumulated score
    """
    if node is None:
        return current
    if node.ref is not None:
        return current + 2

    if isinstance(node.type, list):
        return current + sum(
            get_schema_complexity(node.model_copy(update={"type": kind}), 0) for kind in node.type
        )

    if node.type == "null":
        return current + 1

    compositions: list[tuple[CompositeKind, list[SchemaNodeModel] | None]] = [
        ("oneOf", node.one_of),
        ("anyOf", node.any_of),
        ("allOf", node.all_of),
    ]
    for keyword, members in compositions:
        if members is not None:
            return (
                complexity_by_composite(keyword)
                + current
                + sum(get_schema_complexity(member, 0) for member in members)
            )

    if node.enum is not None and node.type is None:
        return current + complexity_by_composite("enum") + 1

    if node.type is None and node.properties is None and node.additional_properties is None:
        return current

    if node.type in PRIMITIVE_KINDS:
        score = current + 1
        if node.enum is not None:
            score += complexity_by_composite("enum")
        return score

    if node.type == "array":
        items = node.items
        if isinstance(items, list):
            return complexity_by_composite("array") + sum(
                get_schema_complexity(item, current) for item in items
            )
        return complexity_by_composite("array") + get_schema_complexity(items, current)

    if node.is_object_like():
        additional = node.additional_properties
        if isinstance(additional, SchemaNodeModel):
            return complexity_by_composite("record") + get_schema_complexity(additional, current)
        if additional is True:
            return complexity_by_composite("record") + current
        if node.properties:
            return complexity_by_composite("object") + sum(
                get_schema_complexity(prop, current) for prop in node.properties.values()
            )
        return complexity_by_composite("empty-object") + current

    return current
