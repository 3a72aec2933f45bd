"""One generation run over a document.

A run converts every schema the document's operations reach (or every
component schema), builds the static dependency graph, and assembles the
declarations in topological order with circular schemas wrapped in
``z.lazy``.
"""

import logging
from collections.abc import Mapping
from typing import Any

from zodforge.catalog import (
    EndpointDefinitionModel,
    EnumEntryModel,
    collect_enums,
    extract_endpoints,
)
from zodforge.conversion import ConversionContext, ConversionOptions, convert
from zodforge.models import ZodforgeBaseModel
from zodforge.schema.complexity import get_schema_complexity
from zodforge.schema.graph import DependencyGraph, build_dependency_graph
from zodforge.schema.loader import validate_document_structure
from zodforge.schema.ordering import topological_sort
from zodforge.schema.resolver import SchemaResolver

logger = logging.getLogger(__name__)


class SchemaArtifactModel(ZodforgeBaseModel):
    """Everything a writer needs to declare one named schema.

    Attributes:
        name: Canonical identifier
        ref: Reference the schema was resolved from
        type_expression: TypeScript type expression
        type_declaration: ``export type Name = ...;`` declaration
        validator_expression: Validator expression, ``z.lazy`` wrapped when circular
        is_circular: Whether the schema reaches itself
        emitted_type: Whether the schema gets a standalone type declaration
        complexity: Complexity score of the schema
        inline: Whether the schema is simple enough to inline at its uses
    """

    name: str
    ref: str
    type_expression: str
    type_declaration: str
    validator_expression: str
    is_circular: bool
    emitted_type: bool
    complexity: int
    inline: bool


class GenerationResultModel(ZodforgeBaseModel):
    """Output of a generation run.

    Attributes:
        schemas: Canonical name to artifact, in emission order
        order: Emission order of canonical names
        circular: Canonical names that need deferred evaluation
        emitted_types: Canonical names that get standalone type declarations
        endpoints: Extracted operations
        enums: Enum catalog
    """

    schemas: dict[str, SchemaArtifactModel]
    order: list[str]
    circular: list[str]
    emitted_types: list[str]
    endpoints: list[EndpointDefinitionModel]
    enums: dict[str, EnumEntryModel]


def wrap_lazy(validator_expression: str) -> str:
    return f"z.lazy(() => {validator_expression})"


def should_inline(complexity: int, threshold: int) -> bool:
    """Inline hint for a complexity score; a threshold of -1 inlines everything."""
    if threshold == -1:
        return True
    return complexity < threshold


def _emission_order(ctx: ConversionContext, graph: DependencyGraph) -> list[str]:
    resolver = ctx.resolver
    ordered: list[str] = []
    for ref in topological_sort(graph.transitive):
        name = resolver.resolve_ref(ref).normalized
        if name in ctx.registry and name not in ordered:
            ordered.append(name)
    ordered.extend(name for name in ctx.registry if name not in ordered)
    return ordered


def generate(
    document: Mapping[str, Any], options: ConversionOptions | None = None
) -> GenerationResultModel:
    """Convert a document into ordered type and validator declarations.

    Args:
        document: OpenAPI document, already bundled into one mapping
        options: Conversion options; defaults apply when omitted

    Returns:
        The generation result

    Raises:
        ValueError: If the document structure is invalid
        ZodforgeError: If any reached schema cannot be converted
    """
    options = options or ConversionOptions()
    validate_document_structure(dict(document))

    resolver = SchemaResolver(document)
    ctx = ConversionContext(resolver=resolver, options=options)

    endpoints = extract_endpoints(ctx)
    component_refs = resolver.component_schema_refs()

    if options.export_all_schemas or not endpoints:
        for ref in component_refs:
            convert({"$ref": ref}, ctx)

    registered_refs = [resolver.resolve_schema_name(name).ref for name in ctx.registry]
    graph = build_dependency_graph(resolver, [*component_refs, *registered_refs])
    logger.info(f"Converted {len(ctx.registry)} schemas from {len(component_refs)} components")

    schemas: dict[str, SchemaArtifactModel] = {}
    for name in _emission_order(ctx, graph):
        result = ctx.registry[name]
        if result is None:
            continue
        info = resolver.resolve_schema_name(name)
        circular = graph.is_circular(info.ref) or name in ctx.guard.circular
        complexity = get_schema_complexity(resolver.get_schema_by_ref(info.ref))
        schemas[name] = SchemaArtifactModel(
            name=name,
            ref=info.ref,
            type_expression=result.type_expr,
            type_declaration=f"export type {name} = {result.type_expr};",
            validator_expression=(
                wrap_lazy(result.validator_expr) if circular else result.validator_expr
            ),
            is_circular=circular,
            emitted_type=circular or options.export_all_types,
            complexity=complexity,
            inline=not circular and should_inline(complexity, options.complexity_threshold),
        )

    return GenerationResultModel(
        schemas=schemas,
        order=list(schemas),
        circular=[name for name, artifact in schemas.items() if artifact.is_circular],
        emitted_types=[name for name, artifact in schemas.items() if artifact.emitted_type],
        endpoints=endpoints,
        enums=collect_enums(resolver),
    )


def render_declarations(result: GenerationResultModel) -> str:
    """Render a result as TypeScript source, one declaration pair per schema."""
    lines = []
    for name, artifact in result.schemas.items():
        lines.append(artifact.type_declaration)
        if artifact.is_circular:
            declaration = f"export const {name}: z.ZodType<{name}>"
            lines.append(f"{declaration} = {artifact.validator_expression};")
        else:
            lines.append(f"export const {name} = {artifact.validator_expression};")
        lines.append("")
    return "\n".join(lines)
