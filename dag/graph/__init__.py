"""Graph module providing the DAG container and its algorithms.

This module contains:
- Graph[V]: mutable directed graph enumerated in topological order
- topological_sort: Kahn's algorithm over adjacency records
- CheckedGraph[V]: Result-returning facade over Graph
- GraphValidator: detailed cycle reporting
"""

from dag.graph.checked import CheckedGraph
from dag.graph.errors import (
    CycleDetectedError,
    ErrorKind,
    GraphError,
    VertexAlreadyExistsError,
    VertexNotFoundError,
)
from dag.graph.graph import Adjacency, Graph
from dag.graph.result import Err, Ok, Result
from dag.graph.sorting import SortResult, topological_sort
from dag.graph.validator import GraphValidator, ValidationReport

__all__ = [
    "Adjacency",
    "CheckedGraph",
    "CycleDetectedError",
    "Err",
    "ErrorKind",
    "Graph",
    "GraphError",
    "GraphValidator",
    "Ok",
    "Result",
    "SortResult",
    "ValidationReport",
    "VertexAlreadyExistsError",
    "VertexNotFoundError",
    "topological_sort",
]
