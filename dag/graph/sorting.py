"""Topological sorting with Kahn's algorithm.

The sort is pure: it reads the adjacency records of a graph and returns
the order it found together with the vertices it could not place. It never
raises on a cyclic graph; callers decide whether an incomplete order is an
error (Graph iteration) or just a fact to report (Graph.is_valid, the
validator).

Ordering rule:
    The work queue is seeded with every in-degree-zero vertex in insertion
    order. When a dequeued vertex releases successors (their in-degree
    drops to zero), those successors go to the front of the queue in the
    vertex's successor order. A dependency chain is therefore followed
    through before the next independent root is visited, and the result is
    fully determined by insertion order.
"""

from collections import deque
from collections.abc import Hashable, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Generic, TypeVar

import structlog

if TYPE_CHECKING:
    from dag.graph.graph import Adjacency

logger = structlog.get_logger(__name__)

V = TypeVar("V", bound=Hashable)


@dataclass
class SortResult(Generic[V]):
    """Outcome of a topological sort.

    Attributes:
        sorted: Vertices in topological order
        unsorted: Vertices left over because of a cycle, in insertion order
    """

    sorted: list[V] = field(default_factory=list)
    unsorted: list[V] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        """True if every vertex was placed, i.e. the graph is acyclic."""
        return not self.unsorted


def topological_sort(vertices: "Mapping[V, Adjacency[V]]") -> SortResult[V]:
    """Sort vertices topologically (predecessors before successors).

    Args:
        vertices: Mapping from vertex to its adjacency record, in insertion order

    Returns:
        SortResult with the sorted order and the unsorted cycle witness

    Example:
        >>> graph = Graph()
        >>> graph.add_edges((1, 2), (2, 3))
        >>> topological_sort(graph.adjacency).sorted
        [1, 2, 3]
    """
    in_degree: dict[V, int] = {
        vertex: len(adjacency.predecessors) for vertex, adjacency in vertices.items()
    }

    queue: deque[V] = deque(vertex for vertex, degree in in_degree.items() if degree == 0)
    order: list[V] = []

    while queue:
        vertex = queue.popleft()
        order.append(vertex)

        released = []
        for successor in vertices[vertex].successors:
            in_degree[successor] -= 1
            if in_degree[successor] == 0:
                released.append(successor)

        # extendleft reverses its input, so feed it backwards
        queue.extendleft(reversed(released))

    result = SortResult(sorted=order)
    if len(order) < len(in_degree):
        result.unsorted = [vertex for vertex, degree in in_degree.items() if degree > 0]

    logger.debug(
        "topological_sort_completed",
        vertex_count=len(in_degree),
        sorted_count=len(order),
        unsorted_count=len(result.unsorted),
    )

    return result
