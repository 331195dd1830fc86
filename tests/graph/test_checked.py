"""Unit tests for the Result-returning CheckedGraph facade."""

import pytest

from dag.graph.checked import CheckedGraph
from dag.graph.errors import (
    CycleDetectedError,
    ErrorKind,
    VertexAlreadyExistsError,
    VertexNotFoundError,
)
from dag.graph.graph import Graph
from dag.graph.result import Err, Ok


class TestResult:
    """Test the Ok and Err variants."""

    def test_ok(self):
        """Test Ok exposes its value."""
        result = Ok([1, 2])

        assert result.is_ok()
        assert not result.is_err()
        assert result.unwrap() == [1, 2]
        with pytest.raises(ValueError, match="unwrap_err"):
            result.unwrap_err()

    def test_err(self):
        """Test Err exposes its error and re-raises on unwrap."""
        error = VertexNotFoundError(7)
        result = Err(error)

        assert result.is_err()
        assert not result.is_ok()
        assert result.kind is ErrorKind.VERTEX_NOT_FOUND
        assert result.unwrap_err() is error
        with pytest.raises(VertexNotFoundError):
            result.unwrap()


class TestCheckedGraph:
    """Test CheckedGraph operations."""

    def test_wraps_new_graph_by_default(self):
        """Test a CheckedGraph without arguments starts empty."""
        checked = CheckedGraph()

        assert checked.size == 0
        assert isinstance(checked.graph, Graph)

    def test_shares_state_with_wrapped_graph(self):
        """Test mutations through the facade are visible on the graph."""
        graph = Graph()
        checked = CheckedGraph(graph)

        assert checked.add_edge(1, 2) == Ok(None)
        assert graph.has_edge(1, 2)

    def test_add_duplicate_returns_err(self):
        """Test a duplicate add returns Err instead of raising."""
        checked = CheckedGraph()
        checked.add(1)

        result = checked.add(1)

        assert result.is_err()
        assert result.kind is ErrorKind.VERTEX_ALREADY_EXISTS
        assert isinstance(result.unwrap_err(), VertexAlreadyExistsError)

    def test_missing_vertex_lookups_return_err(self):
        """Test every lookup of an absent vertex returns a VERTEX_NOT_FOUND Err."""
        checked = CheckedGraph()
        checked.add(1)

        results = [
            checked.delete(2),
            checked.delete_edge(1, 2),
            checked.has_edge(2, 1),
            checked.successors(2),
            checked.predecessors(2),
            checked.is_descendant(1, 2),
        ]

        assert all(result.kind is ErrorKind.VERTEX_NOT_FOUND for result in results)

    def test_queries_return_ok(self):
        """Test successful queries wrap their value in Ok."""
        checked = CheckedGraph()
        checked.add_edges((1, 2), (2, 3))

        assert checked.successors(1) == Ok([2])
        assert checked.predecessors(3) == Ok([2])
        assert checked.has_edge(1, 2) == Ok(True)
        assert checked.is_descendant(1, 3) == Ok(True)
        assert checked.topological_order() == Ok([1, 2, 3])

    def test_topological_order_of_cycle_returns_err(self):
        """Test a cycle surfaces as an Err carrying the witness."""
        checked = CheckedGraph()
        checked.add_edges((1, 2), (2, 3), (3, 1))

        result = checked.topological_order()

        assert result.kind is ErrorKind.CYCLE_DETECTED
        error = result.unwrap_err()
        assert isinstance(error, CycleDetectedError)
        assert set(error.vertices) == {1, 2, 3}

    def test_delete_operations(self):
        """Test delete and delete_edge through the facade."""
        checked = CheckedGraph()
        checked.add_edges((1, 2), (2, 3))

        assert checked.delete_edge(1, 2).is_ok()
        assert checked.delete(3).is_ok()
        assert not checked.has(3)
        assert checked.roots() == [1, 2]

    def test_pass_through_queries(self):
        """Test infallible queries return plain values."""
        checked = CheckedGraph()
        checked.add_edge(1, 2)

        assert checked.has(1)
        assert checked.roots() == [1]
        assert checked.is_valid()
        assert checked.size == 2
