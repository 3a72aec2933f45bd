"""Static dependency graph between named schemas.

The graph is built once per document and never patched: if the document
changes, build a new one. It answers two questions for the emitter, which
schemas must be declared before which, and which schemas reach themselves and
therefore need deferred evaluation.
"""

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from zodforge.schema.models import SchemaNodeModel
from zodforge.schema.resolver import SchemaResolver, fix_ref

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DependencyGraphNode:
    """Dependency facts about one reference.

    Attributes:
        ref: The reference this entry describes
        direct: References found directly inside the schema
        transitive: Every reference reachable from the schema
        dependents: References whose schema directly uses this one
        depth: 0 for schemas without dependencies, else one more than the
            deepest dependency outside the schema's own cycle
        circular: True iff the reference is reachable from itself
    """

    ref: str
    direct: frozenset[str]
    transitive: frozenset[str]
    dependents: frozenset[str]
    depth: int
    circular: bool


@dataclass(frozen=True)
class DependencyGraph:
    """Direct and transitive reference maps plus per-reference node records."""

    direct: dict[str, frozenset[str]]
    transitive: dict[str, frozenset[str]]
    nodes: dict[str, DependencyGraphNode] = field(default_factory=dict)

    def is_circular(self, ref: str) -> bool:
        node = self.nodes.get(fix_ref(ref))
        return node is not None and node.circular

    @property
    def circular_refs(self) -> list[str]:
        return [ref for ref, node in self.nodes.items() if node.circular]


def collect_refs(node: SchemaNodeModel, found: dict[str, None]) -> None:
    """Collect every `$ref` below a node, stopping at references."""
    if node.ref is not None:
        found.setdefault(fix_ref(node.ref), None)
        return
    for child in node.children():
        collect_refs(child, found)


def compute_transitive(direct: dict[str, frozenset[str]]) -> dict[str, frozenset[str]]:
    """Close the direct map by fixed-point iteration.

    Each set keeps absorbing the direct sets of its members until no set grows,
    which terminates on any finite graph whether or not it has cycles.
    """
    reach = {ref: set(deps) for ref, deps in direct.items()}
    changed = True
    while changed:
        changed = False
        for ref, members in reach.items():
            extra: set[str] = set()
            for member in members:
                extra |= direct.get(member, frozenset())
            extra -= members
            if extra:
                members |= extra
                changed = True
    return {ref: frozenset(members) for ref, members in reach.items()}


def _compute_depths(
    direct: dict[str, frozenset[str]], transitive: dict[str, frozenset[str]]
) -> dict[str, int]:
    # Edges inside a cycle (the dependency reaches back) do not add depth
    acyclic = {
        ref: [dep for dep in deps if ref not in transitive.get(dep, frozenset())]
        for ref, deps in direct.items()
    }
    depths = dict.fromkeys(direct, 0)
    changed = True
    while changed:
        changed = False
        for ref, deps in acyclic.items():
            depth = max((depths.get(dep, 0) + 1 for dep in deps), default=0)
            if depth != depths[ref]:
                depths[ref] = depth
                changed = True
    return depths


def build_dependency_graph(resolver: SchemaResolver, root_refs: Iterable[str]) -> DependencyGraph:
    """Build the dependency graph reachable from the given roots.

    Every reference reachable from a root gets an entry, including leaves with
    no dependencies. Entries appear in discovery order, roots first.

    Args:
        resolver: Resolver for the document the roots belong to
        root_refs: References to start from

    Returns:
        The dependency graph

    Raises:
        SchemaNotFoundError: If a reachable reference points nowhere
        InvalidReferenceError: If a reachable reference is malformed
    """
    pending = [fix_ref(ref) for ref in root_refs]
    direct: dict[str, frozenset[str]] = {}
    order: dict[str, None] = dict.fromkeys(pending)

    while pending:
        ref = pending.pop(0)
        if ref in direct:
            continue
        node = resolver.get_schema_by_ref(ref)
        found: dict[str, None] = {}
        collect_refs(node, found)
        direct[ref] = frozenset(found)
        for dep in found:
            if dep not in direct:
                order.setdefault(dep, None)
                pending.append(dep)

    direct = {ref: direct[ref] for ref in order}
    transitive = compute_transitive(direct)

    dependents: dict[str, set[str]] = {ref: set() for ref in direct}
    for ref, deps in direct.items():
        for dep in deps:
            dependents.setdefault(dep, set()).add(ref)

    depths = _compute_depths(direct, transitive)
    nodes = {
        ref: DependencyGraphNode(
            ref=ref,
            direct=direct[ref],
            transitive=transitive[ref],
            dependents=frozenset(dependents[ref]),
            depth=depths[ref],
            circular=ref in transitive[ref],
        )
        for ref in direct
    }

    circular = [ref for ref, node in nodes.items() if node.circular]
    logger.debug(f"Dependency graph built: {len(nodes)} schemas, {len(circular)} circular")
    return DependencyGraph(direct=direct, transitive=transitive, nodes=nodes)
