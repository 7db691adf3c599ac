"""
Dependency ordering.

Depth-first topological sort using an explicit stack and three marks
(unvisited, in progress, done). A dependency on a node that is still in
progress closes a cycle: the cycle is recorded, that edge is dropped, and the
traversal continues. Every node is emitted exactly once, after all of its
remaining dependencies.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Mapping, Sequence


class Mark(Enum):
    """Visitation state of a node."""

    UNVISITED = "unvisited"
    IN_PROGRESS = "in_progress"
    DONE = "done"


@dataclass
class SortResult:
    """Output of a topological sort."""

    order: list[str] = field(default_factory=list)
    cycles: list[list[str]] = field(default_factory=list)  # e.g. [["a", "b", "a"]]
    dropped_edges: list[tuple[str, str]] = field(default_factory=list)  # (node, dependency)

    @property
    def has_cycles(self) -> bool:
        return bool(self.cycles)


def topological_sort(
    nodes: Sequence[str],
    dependencies: Mapping[str, Sequence[str]],
) -> SortResult:
    """
    Order nodes so that each node follows its dependencies.

    Args:
        nodes: Node ids; roots are visited in this order
        dependencies: Map of node id -> ids it depends on. Ids that are not
            in ``nodes`` are ignored.

    Returns:
        SortResult with the linear order, detected cycles and dropped edges
    """
    marks: dict[str, Mark] = {node: Mark.UNVISITED for node in nodes}
    result = SortResult()

    for root in nodes:
        if marks[root] is not Mark.UNVISITED:
            continue

        marks[root] = Mark.IN_PROGRESS
        stack: list[tuple[str, Iterator[str]]] = [(root, iter(dependencies.get(root, ())))]

        while stack:
            node, pending = stack[-1]
            descended = False

            for dep in pending:
                mark = marks.get(dep)
                if mark is None or mark is Mark.DONE:
                    continue
                if mark is Mark.IN_PROGRESS:
                    path = [n for n, _ in stack]
                    result.cycles.append(path[path.index(dep) :] + [dep])
                    result.dropped_edges.append((node, dep))
                    continue
                marks[dep] = Mark.IN_PROGRESS
                stack.append((dep, iter(dependencies.get(dep, ()))))
                descended = True
                break

            if not descended:
                stack.pop()
                marks[node] = Mark.DONE
                result.order.append(node)

    return result
