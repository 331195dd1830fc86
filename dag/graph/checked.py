"""Result-returning facade over Graph.

CheckedGraph exposes the fallible Graph operations as functions returning
Ok(value) or Err(error) instead of raising. It shares state with the graph
it wraps, so both styles can be mixed on the same data.

Example:
    >>> checked = CheckedGraph()
    >>> checked.add(1)
    Ok(value=None)
    >>> checked.add(1).kind
    <ErrorKind.VERTEX_ALREADY_EXISTS: 'vertex_already_exists'>
"""

from collections.abc import Callable, Hashable
from typing import Generic, TypeVar

import structlog

from dag.graph.errors import GraphError
from dag.graph.graph import Graph
from dag.graph.result import Err, Ok, Result

logger = structlog.get_logger(__name__)

V = TypeVar("V", bound=Hashable)
T = TypeVar("T")


def _capture(operation: Callable[[], T]) -> Result[T]:
    try:
        return Ok(operation())
    except GraphError as e:
        logger.debug("graph_operation_failed", kind=e.kind.value, error=e.message)
        return Err(e)


class CheckedGraph(Generic[V]):
    """Graph wrapper whose fallible operations return a Result.

    Attributes:
        graph: The wrapped Graph; a new empty one when none is given
    """

    def __init__(self, graph: Graph[V] | None = None):
        self.graph: Graph[V] = graph if graph is not None else Graph()

    def add(self, *vertices: V) -> Result[None]:
        return _capture(lambda: self.graph.add(*vertices))

    def add_edge(self, source: V, target: V) -> Result[None]:
        return _capture(lambda: self.graph.add_edge(source, target))

    def add_edges(self, *edges: tuple[V, V]) -> Result[None]:
        return _capture(lambda: self.graph.add_edges(*edges))

    def delete(self, vertex: V) -> Result[None]:
        return _capture(lambda: self.graph.delete(vertex))

    def delete_edge(self, source: V, target: V) -> Result[None]:
        return _capture(lambda: self.graph.delete_edge(source, target))

    def has_edge(self, source: V, target: V) -> Result[bool]:
        return _capture(lambda: self.graph.has_edge(source, target))

    def successors(self, vertex: V) -> Result[list[V]]:
        return _capture(lambda: self.graph.successors(vertex))

    def predecessors(self, vertex: V) -> Result[list[V]]:
        return _capture(lambda: self.graph.predecessors(vertex))

    def is_descendant(self, vertex: V, other: V) -> Result[bool]:
        return _capture(lambda: self.graph.is_descendant(vertex, other))

    def topological_order(self) -> Result[list[V]]:
        """Vertices in topological order, or Err(CycleDetectedError)."""
        return _capture(self.graph.topological_order)

    # Infallible queries pass straight through.

    def has(self, vertex: V) -> bool:
        return self.graph.has(vertex)

    def roots(self) -> list[V]:
        return self.graph.roots()

    def is_valid(self) -> bool:
        return self.graph.is_valid()

    @property
    def size(self) -> int:
        return self.graph.size
