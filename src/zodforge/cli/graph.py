from pathlib import Path

import click

from zodforge.cli.utils import configure_logging, output_error, output_result
from zodforge.schema.graph import build_dependency_graph
from zodforge.schema.loader import load_document_from_file, validate_document_structure
from zodforge.schema.ordering import topological_sort
from zodforge.schema.resolver import SchemaResolver


@click.command(name="graph")
@click.argument("document", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json-output", is_flag=True, help="Output in JSON format")
@click.option("--debug", is_flag=True, help="Show detailed debug information")
def graph(document: Path, json_output: bool, debug: bool) -> None:
    """Show the dependency graph of a document's component schemas.

    \b
    Examples:
        zodforge graph openapi.yaml                # Emission order and cycles
        zodforge graph openapi.yaml --json-output  # Output in JSON format
    """
    configure_logging(debug)
    try:
        raw = load_document_from_file(document)
        validate_document_structure(raw)
        resolver = SchemaResolver(raw)
        dependency_graph = build_dependency_graph(resolver, resolver.component_schema_refs())
        order = topological_sort(dependency_graph.transitive)

        if json_output:
            nodes = {
                ref: {
                    "depth": node.depth,
                    "circular": node.circular,
                    "direct": sorted(node.direct),
                    "dependents": sorted(node.dependents),
                }
                for ref, node in dependency_graph.nodes.items()
            }
            output_result({"order": order, "nodes": nodes}, json_output)
            return

        lines = []
        for ref in order:
            node = dependency_graph.nodes[ref]
            marker = click.style(" (circular)", fg="yellow") if node.circular else ""
            name = resolver.resolve_ref(ref).normalized
            lines.append(f"{name} depth={node.depth}{marker}")
            for dep in sorted(node.direct):
                lines.append(f"  -> {resolver.resolve_ref(dep).normalized}")
        output_result(lines)
    except click.ClickException:
        raise
    except Exception as e:
        output_error(e, json_output, debug)
