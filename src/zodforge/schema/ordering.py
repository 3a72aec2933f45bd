"""Dependency-respecting emission order."""

from collections.abc import Iterable, Iterator, Mapping


def topological_sort(graph: Mapping[str, Iterable[str]]) -> list[str]:
    """Order identifiers so that dependencies come before their dependents.

    Depth-first post-order over the graph, visiting roots and dependencies in
    input order so repeated runs produce the same sequence. Members of a cycle
    are placed where the first of them is reached; each identifier appears
    once, and dependencies without an entry of their own are included.

    Args:
        graph: Mapping of identifier to the identifiers it depends on

    Returns:
        Identifiers, leaves first

    Example:
        >>> topological_sort({"A": {"B"}, "B": {"C"}, "C": set()})
        ['C', 'B', 'A']
    """
    position = {ref: index for index, ref in enumerate(graph)}
    unknown = len(position)
    visited: set[str] = set()
    ordered: list[str] = []

    def deps_of(ref: str) -> Iterator[str]:
        return iter(sorted(graph.get(ref, ()), key=lambda dep: (position.get(dep, unknown), dep)))

    # Iterative post-order walk; stack entries are (ref, deps not yet visited)
    for root in graph:
        if root in visited:
            continue
        visited.add(root)
        stack = [(root, deps_of(root))]
        while stack:
            ref, pending = stack[-1]
            for dep in pending:
                if dep not in visited:
                    visited.add(dep)
                    stack.append((dep, deps_of(dep)))
                    break
            else:
                stack.pop()
                ordered.append(ref)
    return ordered
