"""Schema documents: node models, reference resolution and dependency analysis."""

from .complexity import get_schema_complexity
from .graph import DependencyGraph, DependencyGraphNode, build_dependency_graph
from .loader import load_document, load_document_from_file, validate_document_structure
from .models import DiscriminatorModel, SchemaNodeModel, parse_schema
from .ordering import topological_sort
from .resolver import RefInfo, SchemaResolver, fix_ref, schema_ref

__all__ = [
    "DependencyGraph",
    "DependencyGraphNode",
    "DiscriminatorModel",
    "RefInfo",
    "SchemaNodeModel",
    "SchemaResolver",
    "build_dependency_graph",
    "fix_ref",
    "get_schema_complexity",
    "load_document",
    "load_document_from_file",
    "parse_schema",
    "schema_ref",
    "topological_sort",
    "validate_document_structure",
]
