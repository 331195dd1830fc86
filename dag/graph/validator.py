"""Graph validation with detailed cycle reporting.

This module complements Graph.is_valid() with a full report: concrete
cycle paths found by depth-first search, the vertices the topological sort
could not place, and structural warnings such as isolated vertices.
"""

from collections.abc import Hashable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

import structlog

from dag.graph.sorting import topological_sort

if TYPE_CHECKING:
    from dag.graph.graph import Graph

logger = structlog.get_logger(__name__)

WHITE, GRAY, BLACK = 0, 1, 2

_EXHAUSTED = object()


@dataclass
class ValidationReport:
    """Report containing validation results for a graph.

    Attributes:
        is_valid: Whether the graph passed all validation checks
        errors: List of error messages (critical issues)
        warnings: List of warning messages (potential issues)
        cycles: Detected cycles, each a closed path [v0, ..., vk, v0]
        unsorted: Vertices the topological sort could not place
        roots: Vertices without predecessors
        isolated: Vertices without any edge
    """

    is_valid: bool = True
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    cycles: list[list[Any]] = field(default_factory=list)
    unsorted: list[Any] = field(default_factory=list)
    roots: list[Any] = field(default_factory=list)
    isolated: list[Any] = field(default_factory=list)

    def add_error(self, message: str) -> None:
        """Add an error message and mark validation as failed."""
        self.errors.append(message)
        self.is_valid = False
        logger.warning("validation_error", message=message)

    def add_warning(self, message: str) -> None:
        """Add a warning message without failing validation."""
        self.warnings.append(message)
        logger.info("validation_warning", message=message)

    def summary(self) -> str:
        """Generate a human-readable summary of the validation report."""
        lines = []
        lines.append(f"Validation Status: {'PASS' if self.is_valid else 'FAIL'}")
        lines.append(f"Errors: {len(self.errors)}")
        lines.append(f"Warnings: {len(self.warnings)}")
        lines.append(f"Cycles: {len(self.cycles)}")
        lines.append(f"Unsorted Vertices: {len(self.unsorted)}")
        lines.append(f"Roots: {len(self.roots)}")

        if self.errors:
            lines.append("\nErrors:")
            lines.extend(f"  - {error}" for error in self.errors)

        if self.warnings:
            lines.append("\nWarnings:")
            lines.extend(f"  - {warning}" for warning in self.warnings)

        if self.cycles:
            lines.append("\nCycles Detected:")
            for i, cycle in enumerate(self.cycles, 1):
                lines.append(f"  {i}. {_format_path(cycle)}")

        if self.unsorted:
            lines.append(f"\nCycle Witness: {', '.join(map(str, self.unsorted))}")

        return "\n".join(lines)


def _format_path(path: list[Any]) -> str:
    return " -> ".join(str(vertex) for vertex in path)


class GraphValidator:
    """Validator for graphs with detailed error reporting.

    Provides:
    - Cycle detection with complete path information
    - The cycle witness left over by the topological sort
    - Isolated vertex detection
    """

    def validate(self, graph: "Graph[Any]") -> ValidationReport:
        """Validate a graph and generate a detailed report.

        Validation never raises on a cyclic graph; cycles are reported as
        errors instead.

        Args:
            graph: The Graph to validate

        Returns:
            ValidationReport containing all validation results
        """
        logger.info("starting_graph_validation", vertex_count=graph.size)

        report = ValidationReport()
        report.roots = graph.roots()

        cycles = self._detect_cycles(graph)
        if cycles:
            report.cycles = cycles
            for cycle in cycles:
                report.add_error(f"Cycle detected: {_format_path(cycle)}")

        result = topological_sort(graph.adjacency)
        if not result.is_complete:
            report.unsorted = result.unsorted
            if not cycles:
                # only possible when successor and predecessor lists disagree
                report.add_error("Topological sort incomplete without a detectable cycle")

        isolated = [
            vertex
            for vertex, adjacency in graph.adjacency.items()
            if not adjacency.successors and not adjacency.predecessors
        ]
        if isolated and graph.size > 1:
            report.isolated = isolated
            report.add_warning(
                f"Vertices without any edge: {', '.join(map(str, isolated))}",
            )

        logger.info(
            "graph_validation_complete",
            is_valid=report.is_valid,
            error_count=len(report.errors),
            warning_count=len(report.warnings),
        )

        return report

    def _detect_cycles(self, graph: "Graph[Any]") -> list[list[Any]]:
        """Detect cycles with an iterative three-colour depth-first search.

        Each search started from an unvisited vertex reports at most one
        cycle: the first back edge it meets.

        Args:
            graph: Graph to search

        Returns:
            List of cycles, each a closed path [v0, ..., vk, v0]
        """
        color: dict[Hashable, int] = dict.fromkeys(graph.adjacency, WHITE)
        cycles: list[list[Any]] = []

        for start in graph.adjacency:
            if color[start] != WHITE:
                continue
            cycle = self._dfs_cycle_detect(start, graph, color)
            if cycle:
                cycles.append(cycle)

        if cycles:
            logger.debug("cycles_found", count=len(cycles))

        return cycles

    def _dfs_cycle_detect(
        self,
        start: Hashable,
        graph: "Graph[Any]",
        color: dict[Hashable, int],
    ) -> list[Any] | None:
        """Run one DFS from start and return the first cycle path found.

        Vertices left GRAY when a cycle is found are turned BLACK, so later
        searches do not rediscover the same cycle.
        """
        adjacency = graph.adjacency
        path: list[Hashable] = [start]
        iterators = [iter(adjacency[start].successors)]
        color[start] = GRAY

        while iterators:
            successor = next(iterators[-1], _EXHAUSTED)
            if successor is _EXHAUSTED:
                color[path.pop()] = BLACK
                iterators.pop()
                continue

            if color[successor] == GRAY:
                cycle = [*path[path.index(successor) :], successor]
                for vertex in path:
                    color[vertex] = BLACK
                return cycle
            if color[successor] == WHITE:
                color[successor] = GRAY
                path.append(successor)
                iterators.append(iter(adjacency[successor].successors))

        return None
