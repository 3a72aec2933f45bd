"""Recursive conversion of schema nodes into type and validator expressions.

Dispatch order matters: a node may look like an object (it has ``properties``)
and be wrapped in an ``allOf`` at the same time, so references are handled
first, then type lists, the null type, compositions, primitives, arrays,
objects, and finally the unknown fallback.

Named schemas are always referenced by their canonical name. The expression
for the name lives in the context registry; the emitter decides how to
declare it.
"""

import logging
from typing import Any

from zodforge.conversion import composition
from zodforge.conversion._types import (
    UNKNOWN_RESULT,
    ConversionContext,
    ConversionResult,
    PresenceMeta,
)
from zodforge.conversion.chain import build_chain, type_constraints
from zodforge.conversion.composition import group_type, wrap_nullable_type
from zodforge.conversion.enums import convert_enum
from zodforge.errors import (
    SchemaDecompositionError,
    SchemaNestingError,
    UnsupportedSchemaKindError,
)
from zodforge.schema.models import PRIMITIVE_KINDS, SchemaNodeModel, parse_schema
from zodforge.schema.naming import quote_property_key

logger = logging.getLogger(__name__)

PRIMITIVE_VALIDATORS = {
    "string": ("string", "z.string()"),
    "number": ("number", "z.number()"),
    "integer": ("number", "z.number()"),
    "boolean": ("boolean", "z.boolean()"),
}


def convert(
    node: SchemaNodeModel | dict[str, Any],
    ctx: ConversionContext,
    meta: PresenceMeta | None = None,
) -> ConversionResult:
    """Convert one schema node.

    Args:
        node: Schema node (or raw mapping) to convert
        ctx: Conversion context of the current run
        meta: Presence context supplied by the parent

    Returns:
        The type expression and validator expression for the node. The
        validator carries no presence suffix; parents append the chain.

    Raises:
        SchemaNotFoundError: If a reference points nowhere
        InvalidReferenceError: If a reference is malformed
        SchemaDecompositionError: If a reference also defines a type
        EmptyCompositionError: If a composition list is empty
        UnsupportedSchemaKindError: If the node has an unknown kind
        SchemaNestingError: If nested references exceed the recursion limit
    """
    node = parse_schema(node)
    meta = meta or PresenceMeta()

    refiner = ctx.options.schema_refiner
    if refiner is not None:
        node = refiner(node, meta) or node

    if node.ref is not None:
        return _convert_reference(node, ctx, meta)

    if isinstance(node.type, list):
        return _convert_type_list(node, ctx, meta)

    if node.type == "null":
        return ConversionResult("null", "z.null()", is_nullable=True)

    if node.one_of is not None:
        return composition.convert_one_of(node, ctx, meta, convert)
    if node.any_of is not None:
        return composition.convert_any_of(node, ctx, meta, convert)
    if node.all_of is not None:
        return composition.convert_all_of(node, ctx, meta, convert)

    if node.type in PRIMITIVE_KINDS or (node.type is None and node.enum is not None):
        return _convert_primitive(node)

    if node.type == "array" or node.items is not None:
        return _convert_array(node, ctx)

    if node.is_object_like():
        return _convert_object(node, ctx)

    if node.type is None:
        return UNKNOWN_RESULT

    raise UnsupportedSchemaKindError(
        str(node.type), ref=ctx.guard.path[-1] if ctx.guard.path else None
    )


def convert_with_chain(
    node: SchemaNodeModel | dict[str, Any], ctx: ConversionContext, is_required: bool
) -> tuple[ConversionResult, str]:
    """Convert a node at a point of use and append its chain.

    Returns:
        Tuple of (conversion result, validator expression with chain)
    """
    node = parse_schema(node)
    result = convert(node, ctx, PresenceMeta(is_required=is_required))
    chain = build_chain(ctx.resolve_for_chain(node), is_required, ctx.options, result.is_nullable)
    return result, result.validator_expr + chain


def _convert_reference(
    node: SchemaNodeModel, ctx: ConversionContext, meta: PresenceMeta
) -> ConversionResult:
    ref = node.ref or ""
    conflicts = node.decomposition_conflicts()
    if conflicts:
        raise SchemaDecompositionError(ref, conflicts)
    siblings = sorted(node.model_fields_set - {"ref", "has_default"})
    if siblings:
        logger.debug(f"Ignoring {', '.join(siblings)} next to $ref {ref}")

    target, info = ctx.resolver.resolve(ref)
    name = info.normalized

    if ctx.guard.is_on_path(name):
        ctx.guard.mark_circular(name)
        return ConversionResult(name, name, ref=name, is_required=meta.is_required)

    if not ctx.is_registered(name):
        ctx.register_placeholder(name)
        try:
            with ctx.guard.expanding(name):
                result = convert(target, ctx, PresenceMeta())
        except RecursionError as e:
            raise SchemaNestingError(name) from e
        ctx.register(name, result)

    registered = ctx.registry.get(name)
    return ConversionResult(
        name,
        name,
        ref=name,
        is_nullable=registered.is_nullable if registered is not None else False,
        is_required=meta.is_required,
    )


def _convert_type_list(
    node: SchemaNodeModel, ctx: ConversionContext, meta: PresenceMeta
) -> ConversionResult:
    kinds = list(node.type or [])
    if not kinds:
        return UNKNOWN_RESULT
    if len(kinds) == 1:
        return convert(node.model_copy(update={"type": kinds[0]}), ctx, meta)

    type_exprs: list[str] = []
    validators: list[str] = []
    for kind in kinds:
        member = node.model_copy(update={"type": kind, "nullable": None})
        result = convert(member, ctx, meta)
        type_exprs.append(result.type_expr)
        validators.append(
            result.validator_expr + "".join(f".{c}" for c in type_constraints(member))
        )
    return ConversionResult(
        type_expr=" | ".join(type_exprs),
        validator_expr=f"z.union([{', '.join(validators)}])",
        is_nullable="null" in kinds,
        is_required=meta.is_required,
    )


def _convert_primitive(node: SchemaNodeModel) -> ConversionResult:
    if node.enum is not None:
        return convert_enum(node)

    if node.type == "string" and node.format == "binary":
        type_expr, validator_expr = "File", "z.instanceof(File)"
    else:
        type_expr, validator_expr = PRIMITIVE_VALIDATORS[str(node.type)]

    return ConversionResult(wrap_nullable_type(type_expr, node.is_nullable), validator_expr)


def _convert_array(node: SchemaNodeModel, ctx: ConversionContext) -> ConversionResult:
    readonly = ctx.options.all_readonly
    items = node.items

    if isinstance(items, list):
        converted = [convert_with_chain(item, ctx, True) for item in items]
        type_expr = f"[{', '.join(result.type_expr for result, _ in converted)}]"
        validator_expr = f"z.tuple([{', '.join(validator for _, validator in converted)}])"
        if readonly:
            type_expr = f"readonly {type_expr}"
    else:
        if items is None:
            item_type, item_validator = "any", "z.any()"
        else:
            result, item_validator = convert_with_chain(items, ctx, True)
            item_type = result.type_expr
        validator_expr = f"z.array({item_validator})"
        if readonly:
            type_expr = f"readonly {group_type(item_type)}[]"
        else:
            type_expr = f"Array<{item_type}>"

    if readonly:
        validator_expr += ".readonly()"
    return ConversionResult(wrap_nullable_type(type_expr, node.is_nullable), validator_expr)


def _convert_object(node: SchemaNodeModel, ctx: ConversionContext) -> ConversionResult:
    options = ctx.options
    additional = node.additional_properties

    if isinstance(additional, SchemaNodeModel) and not additional.is_empty():
        result, value_validator = convert_with_chain(additional, ctx, True)
        return ConversionResult(
            wrap_nullable_type(f"Record<string, {result.type_expr}>", node.is_nullable),
            f"z.record({value_validator})",
        )

    partial = not options.with_implicit_required_props and node.required is None

    validator_fields: list[str] = []
    type_fields: list[str] = []
    for name, prop in (node.properties or {}).items():
        if partial:
            is_required = True
        elif node.required is not None:
            is_required = name in node.required
        else:
            is_required = options.with_implicit_required_props

        result, prop_validator = convert_with_chain(prop, ctx, is_required)
        key = quote_property_key(name)
        validator_fields.append(f"{key}: {prop_validator}")
        type_fields.append(f"{key}{'' if is_required else '?'}: {result.type_expr}")

    if validator_fields:
        validator_expr = f"z.object({{ {', '.join(validator_fields)} }})"
        type_expr = f"{{ {'; '.join(type_fields)} }}"
    else:
        validator_expr = "z.object({})"
        type_expr = "{}"

    if partial:
        validator_expr += ".partial()"
        type_expr = f"Partial<{type_expr}>"

    allows_additional = additional is not False and (
        additional is not None or options.additional_properties_default
    )
    if options.strict_objects:
        validator_expr += ".strict()"
    elif allows_additional:
        validator_expr += ".passthrough()"

    if additional is True or isinstance(additional, SchemaNodeModel):
        type_expr = f"{type_expr} & {{ [key: string]: any }}"

    if options.all_readonly:
        validator_expr += ".readonly()"
        type_expr = f"Readonly<{type_expr}>"

    return ConversionResult(wrap_nullable_type(type_expr, node.is_nullable), validator_expr)
