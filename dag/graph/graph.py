"""Directed acyclic graph container with topologically ordered iteration.

This module provides the Graph class which stores vertices and directed
edges as adjacency lists and enumerates vertices in topological order
(computed with Kahn's algorithm, see dag.graph.sorting).
"""

from collections.abc import Callable, Hashable, Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Generic, TypeVar

import structlog

from dag.graph.errors import CycleDetectedError, VertexAlreadyExistsError, VertexNotFoundError
from dag.graph.sorting import topological_sort
from dag.log_config import GRAPH_CONTEXT_KEY

logger = structlog.get_logger(__name__)

V = TypeVar("V", bound=Hashable)


@dataclass
class Adjacency(Generic[V]):
    """Successor and predecessor lists of a single vertex.

    Both lists keep insertion order and never hold duplicates.
    """

    successors: list[V] = field(default_factory=list)
    predecessors: list[V] = field(default_factory=list)

    def has_successor(self, vertex: V) -> bool:
        return vertex in self.successors

    def has_predecessor(self, vertex: V) -> bool:
        return vertex in self.predecessors

    def is_root(self) -> bool:
        return not self.predecessors


class Graph(Generic[V]):
    """Directed graph of hashable vertex keys, enumerated in topological order.

    The graph is not forced to stay acyclic: an edge insertion may close a
    cycle. Acyclicity is checked by is_valid() and enforced when the graph
    is enumerated, which raises CycleDetectedError on a cyclic graph.

    Thread-safety:
        This class is NOT thread-safe. If a graph is shared between threads,
        protect all method calls with external synchronization
        (e.g., threading.Lock).

    Example:
        >>> graph = Graph()
        >>> graph.add(*range(1, 10))
        >>> graph.add_edges((1, 3), (5, 9), (8, 7), (8, 6), (6, 4), (4, 3), (4, 7))
        >>> graph.successors(4)
        [3, 7]
        >>> list(graph)
        [1, 2, 5, 9, 8, 6, 4, 3, 7]
    """

    def __init__(self, name: str | None = None):
        """Initialize an empty graph.

        Args:
            name: Optional name attached to every log entry of this graph
        """
        self.name = name
        self._vertices: dict[V, Adjacency[V]] = {}
        self._log = logger.bind(**{GRAPH_CONTEXT_KEY: name}) if name is not None else logger

        self._log.debug("graph_initialized")

    # ---- mutation -------------------------------------------------------

    def add(self, *vertices: V) -> None:
        """Add one or more vertices to the graph.

        Vertices are added in order. Adding stops at the first duplicate;
        the vertices added before it stay in the graph.

        Args:
            *vertices: Vertex keys to add

        Raises:
            VertexAlreadyExistsError: If a vertex is already in the graph

        Example:
            >>> graph = Graph()
            >>> graph.add(1, 2)
            >>> list(graph)
            [1, 2]
        """
        for vertex in vertices:
            if vertex in self._vertices:
                self._log.warning("vertex_already_exists", vertex=vertex)
                raise VertexAlreadyExistsError(vertex)

            self._vertices[vertex] = Adjacency()
            self._log.debug("vertex_added", vertex=vertex)

    def add_edge(self, source: V, target: V) -> None:
        """Add a directed edge from source to target.

        Missing endpoints are added to the graph first. Adding an edge that
        already exists does nothing.

        Args:
            source: Vertex the edge starts from
            target: Vertex the edge points to

        Example:
            >>> graph = Graph()
            >>> graph.add_edge(1, 2)
            >>> graph.has_edge(1, 2)
            True
        """
        if source not in self._vertices:
            self.add(source)
        if target not in self._vertices:
            self.add(target)

        if self.has_edge(source, target):
            return

        self._vertices[source].successors.append(target)
        self._vertices[target].predecessors.append(source)

        self._log.debug("edge_added", source=source, target=target)

    def add_edges(self, *edges: tuple[V, V]) -> None:
        """Add several edges, each given as a (source, target) pair.

        Example:
            >>> graph = Graph()
            >>> graph.add_edges((1, 2), (2, 3))
            >>> graph.successors(2)
            [3]
        """
        for source, target in edges:
            self.add_edge(source, target)

    def delete(self, vertex: V) -> None:
        """Delete a vertex together with every edge touching it.

        Args:
            vertex: Vertex to delete

        Raises:
            VertexNotFoundError: If the vertex is not in the graph
        """
        adjacency = self._get(vertex)

        for successor in adjacency.successors:
            self._vertices[successor].predecessors.remove(vertex)
        for predecessor in adjacency.predecessors:
            self._vertices[predecessor].successors.remove(vertex)
        del self._vertices[vertex]

        self._log.debug("vertex_deleted", vertex=vertex)

    def delete_edge(self, source: V, target: V) -> None:
        """Delete the edge from source to target, if it exists.

        Raises:
            VertexNotFoundError: If either endpoint is not in the graph
        """
        if not self.has_edge(source, target):
            return

        self._vertices[source].successors.remove(target)
        self._vertices[target].predecessors.remove(source)

        self._log.debug("edge_deleted", source=source, target=target)

    # ---- queries --------------------------------------------------------

    def has(self, vertex: V) -> bool:
        """Check whether a vertex is in the graph."""
        return vertex in self._vertices

    def has_edge(self, source: V, target: V) -> bool:
        """Check whether the edge from source to target exists.

        The edge only counts as present when both adjacency records agree.

        Raises:
            VertexNotFoundError: If either endpoint is not in the graph
        """
        source_adjacency = self._get(source)
        target_adjacency = self._get(target)
        return source_adjacency.has_successor(target) and target_adjacency.has_predecessor(
            source,
        )

    def successors(self, vertex: V) -> list[V]:
        """Get the direct successors of a vertex, in insertion order.

        Raises:
            VertexNotFoundError: If the vertex is not in the graph
        """
        return list(self._get(vertex).successors)

    def predecessors(self, vertex: V) -> list[V]:
        """Get the direct predecessors of a vertex, in insertion order.

        Raises:
            VertexNotFoundError: If the vertex is not in the graph
        """
        return list(self._get(vertex).predecessors)

    def roots(self) -> list[V]:
        """Get all vertices without predecessors, in insertion order.

        Example:
            >>> graph = Graph()
            >>> graph.add(1, 2, 3)
            >>> graph.add_edge(1, 2)
            >>> graph.roots()
            [1, 3]
        """
        return [vertex for vertex, adjacency in self._vertices.items() if adjacency.is_root()]

    def is_descendant(self, vertex: V, other: V) -> bool:
        """Check whether other can be reached from vertex along successor edges.

        At least one edge has to be followed, so a vertex is its own
        descendant only when it lies on a cycle. The traversal keeps a
        visited set and terminates on cyclic graphs.

        Args:
            vertex: Vertex to start from
            other: Vertex to look for

        Returns:
            True if other is a descendant of vertex

        Raises:
            VertexNotFoundError: If either vertex is not in the graph

        Example:
            >>> graph = Graph()
            >>> graph.add_edges((1, 2), (2, 3), (3, 4), (5, 4))
            >>> graph.is_descendant(1, 4)
            True
            >>> graph.is_descendant(1, 5)
            False
        """
        start = self._get(vertex)
        self._get(other)
        stack = list(reversed(start.successors))
        visited: set[V] = set()

        while stack:
            current = stack.pop()
            if current == other:
                return True
            if current in visited:
                continue
            visited.add(current)
            stack.extend(reversed(self._vertices[current].successors))

        return False

    def is_valid(self) -> bool:
        """Check whether the graph is acyclic.

        Example:
            >>> graph = Graph()
            >>> graph.add_edges((1, 2), (2, 3), (3, 4))
            >>> graph.is_valid()
            True
            >>> graph.add_edge(4, 2)
            >>> graph.is_valid()
            False
        """
        return topological_sort(self._vertices).is_complete

    def vertices(self) -> list[V]:
        """Get all vertices in insertion order."""
        return list(self._vertices)

    def edges(self) -> list[tuple[V, V]]:
        """Get all edges as (source, target) pairs, grouped by source."""
        return [
            (source, target)
            for source, adjacency in self._vertices.items()
            for target in adjacency.successors
        ]

    @property
    def adjacency(self) -> Mapping[V, Adjacency[V]]:
        """Read-only view of the vertex to adjacency record mapping."""
        return MappingProxyType(self._vertices)

    @property
    def size(self) -> int:
        """Number of vertices in the graph."""
        return len(self._vertices)

    @property
    def edge_count(self) -> int:
        """Number of edges in the graph."""
        return sum(len(adjacency.successors) for adjacency in self._vertices.values())

    # ---- topological enumeration ---------------------------------------

    def topological_order(self) -> list[V]:
        """Return all vertices in topological order.

        Raises:
            CycleDetectedError: If the graph contains a cycle
        """
        result = topological_sort(self._vertices)
        if not result.is_complete:
            self._log.warning(
                "cycle_detected_in_graph",
                unsorted=result.unsorted,
                vertex_count=len(self._vertices),
            )
            raise CycleDetectedError(result.unsorted)

        return result.sorted

    def each(self, callback: Callable[[V], Any]) -> None:
        """Call callback on every vertex in topological order.

        The order is checked before the first call, so a cyclic graph
        raises without invoking callback at all.

        Raises:
            CycleDetectedError: If the graph contains a cycle
        """
        for vertex in self.topological_order():
            callback(vertex)

    def __iter__(self) -> Iterator[V]:
        """Iterate over vertices in topological order.

        The sort runs when the first vertex is requested, so creating the
        iterator never raises; CycleDetectedError surfaces on the first next().
        """
        yield from self.topological_order()

    # ---- copying and comparison ----------------------------------------

    def copy(self) -> "Graph[V]":
        """Create an independent copy with the same vertices, edges and order."""
        new_graph: Graph[V] = Graph(name=self.name)
        for vertex, adjacency in self._vertices.items():
            new_graph._vertices[vertex] = Adjacency(
                successors=list(adjacency.successors),
                predecessors=list(adjacency.predecessors),
            )

        self._log.debug("graph_copied", vertex_count=len(self._vertices))

        return new_graph

    def __eq__(self, other: object) -> bool:
        """Compare vertex sets and, per vertex, successor and predecessor sets.

        Order of insertion does not matter. A graph never equals a value of
        another type.
        """
        if not isinstance(other, Graph):
            return False
        if self._vertices.keys() != other._vertices.keys():
            return False

        for vertex, adjacency in self._vertices.items():
            other_adjacency = other._vertices[vertex]
            if set(adjacency.successors) != set(other_adjacency.successors):
                return False
            if set(adjacency.predecessors) != set(other_adjacency.predecessors):
                return False

        return True

    # ---- dunder helpers ---------------------------------------------------

    def __contains__(self, vertex: object) -> bool:
        return vertex in self._vertices

    def __len__(self) -> int:
        return len(self._vertices)

    def __repr__(self) -> str:
        return f"Graph(name={self.name!r}, vertices={self.size}, edges={self.edge_count})"

    def _get(self, vertex: V) -> Adjacency[V]:
        """Look up the adjacency record of a vertex or raise VertexNotFoundError."""
        try:
            return self._vertices[vertex]
        except KeyError:
            self._log.warning("vertex_not_found", vertex=vertex)
            raise VertexNotFoundError(vertex) from None
