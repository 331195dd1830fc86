"""Directed acyclic graph container with topological enumeration."""

from dag.graph import (
    CheckedGraph,
    CycleDetectedError,
    Err,
    ErrorKind,
    Graph,
    GraphError,
    GraphValidator,
    Ok,
    Result,
    ValidationReport,
    VertexAlreadyExistsError,
    VertexNotFoundError,
)

VERSION = "0.1.0"

__all__ = [
    "VERSION",
    "CheckedGraph",
    "CycleDetectedError",
    "Err",
    "ErrorKind",
    "Graph",
    "GraphError",
    "GraphValidator",
    "Ok",
    "Result",
    "ValidationReport",
    "VertexAlreadyExistsError",
    "VertexNotFoundError",
]
