"""Exceptions raised by graph operations.

Every error carries an ErrorKind tag so that callers working with the
result-returning API (see dag.graph.checked) can branch on the kind of
failure without isinstance checks.
"""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Tag identifying the kind of a GraphError."""

    VERTEX_ALREADY_EXISTS = "vertex_already_exists"
    VERTEX_NOT_FOUND = "vertex_not_found"
    CYCLE_DETECTED = "cycle_detected"


class GraphError(Exception):
    """Base class for all graph errors.

    Attributes:
        message: Human-readable description of the error
        kind: ErrorKind tag of the concrete error
    """

    kind: ErrorKind

    def __init__(self, message: str):
        """Initialize the exception with a descriptive message.

        Args:
            message: Description of the error
        """
        super().__init__(message)
        self.message = message


class VertexAlreadyExistsError(GraphError):
    """Raised when adding a vertex that is already present in the graph."""

    kind = ErrorKind.VERTEX_ALREADY_EXISTS

    def __init__(self, vertex: Any):
        super().__init__(f"Vertex already exists: {vertex!r}")
        self.vertex = vertex


class VertexNotFoundError(GraphError):
    """Raised when an operation addresses a vertex that is not in the graph."""

    kind = ErrorKind.VERTEX_NOT_FOUND

    def __init__(self, vertex: Any):
        super().__init__(f"Vertex not found: {vertex!r}")
        self.vertex = vertex


class CycleDetectedError(GraphError):
    """Raised when enumerating a graph that contains a cycle.

    The vertices left unsorted by the topological sort are attached as the
    cycle witness. They include every vertex on a cycle and every vertex
    depending on one, so the witness is not necessarily a minimal cycle.
    """

    kind = ErrorKind.CYCLE_DETECTED

    def __init__(self, vertices: list[Any]):
        """Initialize the exception with the unsorted vertices.

        Args:
            vertices: Vertices the topological sort could not place
        """
        super().__init__(
            f"Cycle detected: {len(vertices)} vertex(es) could not be sorted: "
            f"{', '.join(repr(v) for v in vertices)}",
        )
        self.vertices = list(vertices)
