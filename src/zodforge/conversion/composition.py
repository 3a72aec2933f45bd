"""allOf / oneOf / anyOf semantics.

Each resolver receives the engine's ``convert`` function so that members are
converted through the same dispatch (and the same cycle guard) as any other
node.
"""

import json
import logging
from collections.abc import Callable

from zodforge.conversion._types import ConversionContext, ConversionResult, PresenceMeta
from zodforge.conversion.chain import build_chain
from zodforge.errors import EmptyCompositionError
from zodforge.schema.models import SchemaNodeModel

logger = logging.getLogger(__name__)

Converter = Callable[[SchemaNodeModel, ConversionContext, PresenceMeta], ConversionResult]


def group_type(type_expr: str) -> str:
    """Parenthesize a type expression that contains a union or intersection."""
    if "|" in type_expr or "&" in type_expr:
        return f"({type_expr})"
    return type_expr


def wrap_nullable_type(type_expr: str, nullable: bool) -> str:
    return f"{type_expr} | null" if nullable else type_expr


def _members(
    keyword: str, members: list[SchemaNodeModel] | None, ctx: ConversionContext
) -> list[SchemaNodeModel]:
    if not members:
        raise EmptyCompositionError(keyword, ref=ctx.guard.path[-1] if ctx.guard.path else None)
    return members


def _member_validator(
    member: SchemaNodeModel, result: ConversionResult, ctx: ConversionContext
) -> str:
    resolved = ctx.resolve_for_chain(member)
    return result.validator_expr + build_chain(resolved, True, ctx.options, result.is_nullable)


def _hoisted_required(members: list[SchemaNodeModel]) -> list[str]:
    hoisted: dict[str, None] = {}
    for member in members:
        if member.ref is not None or not member.required:
            continue
        own = member.properties or {}
        for name in member.required:
            if member.is_required_only() or name not in own:
                hoisted.setdefault(name, None)
    return list(hoisted)


def convert_all_of(
    node: SchemaNodeModel, ctx: ConversionContext, meta: PresenceMeta, convert: Converter
) -> ConversionResult:
    """Intersection of every member, with required fields hoisted.

    Members that only carry a ``required`` list are not converted on their own.
    Their required names, and names that other inline members require without
    declaring, become one synthetic object whose property schemas are borrowed
    from whichever member declares them.
    """
    members = _members("allOf", node.all_of, ctx)
    if len(members) == 1:
        return convert(members[0], ctx, meta)

    hoisted = _hoisted_required(members)
    borrowed: dict[str, SchemaNodeModel] = {}
    results: list[ConversionResult] = []
    validators: list[str] = []
    for member in members:
        if member.is_required_only():
            continue
        result = convert(member, ctx, meta)
        results.append(result)
        validators.append(_member_validator(member, result, ctx))

        declared = ctx.resolve_for_chain(member).properties or {}
        for name in hoisted:
            if name not in borrowed and name in declared:
                borrowed[name] = declared[name]

    if hoisted:
        composed = SchemaNodeModel(
            type="object",
            properties={name: borrowed.get(name, SchemaNodeModel()) for name in hoisted},
            required=hoisted,
        )
        logger.debug(f"allOf composed-required fields: {', '.join(hoisted)}")
        results.append(convert(composed, ctx, meta))
        validators.append(results[-1].validator_expr)

    if not results:
        return ConversionResult("unknown", "z.unknown()")
    if len(results) == 1:
        only = results[0]
        return ConversionResult(
            wrap_nullable_type(only.type_expr, node.is_nullable), validators[0]
        )

    first, *rest = validators
    validator_expr = first + "".join(f".and({validator})" for validator in rest)
    type_expr = " & ".join(group_type(result.type_expr) for result in results)
    if node.is_nullable:
        type_expr = f"({type_expr}) | null"
    return ConversionResult(type_expr, validator_expr)


def _allows_discriminated_union(node: SchemaNodeModel, ctx: ConversionContext) -> bool:
    if node.discriminator is None or not node.one_of:
        return False
    for member in node.one_of:
        resolved = ctx.resolve_for_chain(member)
        if resolved.all_of is not None and len(resolved.all_of) > 1:
            return False
        if not (resolved.is_object_like() or resolved.all_of is not None):
            return False
    return True


def convert_one_of(
    node: SchemaNodeModel, ctx: ConversionContext, meta: PresenceMeta, convert: Converter
) -> ConversionResult:
    """Exclusive union; discriminated when the members allow it."""
    members = _members("oneOf", node.one_of, ctx)
    if len(members) == 1:
        return convert(members[0], ctx, meta)

    results = [convert(member, ctx, meta) for member in members]
    validators = ", ".join(
        _member_validator(member, result, ctx) for member, result in zip(members, results)
    )
    type_expr = wrap_nullable_type(
        " | ".join(result.type_expr for result in results), node.is_nullable
    )

    if _allows_discriminated_union(node, ctx):
        property_name = node.discriminator.property_name  # type: ignore[union-attr]
        return ConversionResult(
            type_expr, f"z.discriminatedUnion({json.dumps(property_name)}, [{validators}])"
        )
    return ConversionResult(type_expr, f"z.union([{validators}])")


def convert_any_of(
    node: SchemaNodeModel, ctx: ConversionContext, meta: PresenceMeta, convert: Converter
) -> ConversionResult:
    """One-or-many union: ``T | T[]`` where T is the union of the members."""
    members = _members("anyOf", node.any_of, ctx)
    if len(members) == 1:
        return convert(members[0], ctx, meta)

    results = [convert(member, ctx, meta) for member in members]
    item_validators = [
        _member_validator(member, result, ctx) for member, result in zip(members, results)
    ]

    union_type = " | ".join(result.type_expr for result in results)
    union_validator = f"z.union([{', '.join(item_validators)}])"

    if ctx.options.all_readonly:
        array_type = f"readonly ({union_type})[]"
        array_validator = f"z.array({union_validator}).readonly()"
    else:
        array_type = f"Array<{union_type}>"
        array_validator = f"z.array({union_validator})"

    outer = [union_validator, array_validator]
    if node.is_nullable:
        outer.append("z.null()")

    return ConversionResult(
        type_expr=wrap_nullable_type(f"{group_type(union_type)} | {array_type}", node.is_nullable),
        validator_expr=f"z.union([{', '.join(outer)}])",
        is_nullable=node.is_nullable,
    )
