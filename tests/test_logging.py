"""Unit tests for the logging configuration module.

This test module validates the structured logging configuration, context
binding, and the log entries emitted by graph operations.
"""

import json
import logging

import pytest
import structlog

from dag.graph.errors import CycleDetectedError, VertexNotFoundError
from dag.graph.graph import Graph
from dag.log_config import (
    GRAPH_CONTEXT_KEY,
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    graph_context,
    unbind_context,
)


class TestLoggingConfiguration:
    """Test cases for logging configuration."""

    def test_configure_logging_info_level(self):
        """Test logging configuration with INFO level."""
        configure_logging(level="INFO", json_logs=True)
        logger = get_logger("test")
        assert logger is not None

    def test_configure_logging_lowercase_level(self):
        """Test that level names are case-insensitive."""
        configure_logging(level="debug", json_logs=True)
        assert logging.getLogger().level == logging.DEBUG

    def test_configure_logging_invalid_level(self):
        """Test logging configuration with invalid level."""
        with pytest.raises(ValueError, match="Invalid log level"):
            configure_logging(level="INVALID", json_logs=True)

    def test_configure_logging_console_renderer(self):
        """Test logging configuration with console renderer."""
        configure_logging(level="INFO", json_logs=False)
        logger = get_logger("test")
        assert logger is not None

    def test_configure_logging_uses_stdlib_bound_logger(self):
        """Test structlog is wired to the standard library backend."""
        configure_logging(level="INFO", json_logs=True)
        assert structlog.get_config()["wrapper_class"] is structlog.stdlib.BoundLogger


class TestContextBinding:
    """Test cases for context binding functionality."""

    def setup_method(self):
        """Set up test environment before each test."""
        configure_logging(level="INFO", json_logs=True)
        clear_context()

    def teardown_method(self):
        """Clean up after each test."""
        clear_context()

    def test_bind_context(self, caplog):
        """Test bound context variables appear in log entries."""
        caplog.set_level(logging.INFO)
        logger = get_logger("test")

        bind_context(pipeline="nightly", stage=3)
        logger.info("stage_started")

        payload = json.loads(caplog.records[-1].getMessage())
        assert payload["pipeline"] == "nightly"
        assert payload["stage"] == 3

    def test_unbind_context(self, caplog):
        """Test unbinding specific context variables."""
        caplog.set_level(logging.INFO)
        logger = get_logger("test")

        bind_context(pipeline="nightly", stage=3)
        unbind_context("stage")
        logger.info("stage_started")

        payload = json.loads(caplog.records[-1].getMessage())
        assert payload["pipeline"] == "nightly"
        assert "stage" not in payload

    def test_clear_context(self, caplog):
        """Test clearing all context variables."""
        caplog.set_level(logging.INFO)
        logger = get_logger("test")

        bind_context(pipeline="nightly")
        clear_context()
        logger.info("without_context")

        payload = json.loads(caplog.records[-1].getMessage())
        assert "pipeline" not in payload


class TestGraphLogging:
    """Test log entries emitted by graph operations."""

    def setup_method(self):
        """Set up test environment before each test."""
        configure_logging(level="DEBUG", json_logs=True)
        clear_context()

    def teardown_method(self):
        """Clean up after each test."""
        clear_context()

    def test_mutations_logged_at_debug(self, caplog):
        """Test edge insertion is logged with its endpoints."""
        caplog.set_level(logging.DEBUG)
        graph = Graph()
        graph.add_edge("compile", "link")

        assert "edge_added" in caplog.text
        assert "compile" in caplog.text

    def test_graph_name_is_bound(self, caplog):
        """Test a named graph tags its entries with the name."""
        caplog.set_level(logging.DEBUG)
        graph = Graph(name="release-pipeline")
        graph.add("compile")

        assert "release-pipeline" in caplog.text

    def test_missing_vertex_logged_as_warning(self, caplog):
        """Test failed lookups are logged at warning level."""
        caplog.set_level(logging.DEBUG)
        graph = Graph()

        with pytest.raises(VertexNotFoundError):
            graph.successors("ghost")

        warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
        assert any("vertex_not_found" in r.getMessage() for r in warnings)

    def test_cycle_logged_as_warning(self, caplog):
        """Test a detected cycle is logged with the witness."""
        caplog.set_level(logging.DEBUG)
        graph = Graph()
        graph.add_edges((1, 2), (2, 1))

        with pytest.raises(CycleDetectedError):
            graph.topological_order()

        assert "cycle_detected_in_graph" in caplog.text

    def test_graph_name_uses_context_key(self, caplog):
        """Test a named graph puts its name under the graph context key."""
        caplog.set_level(logging.DEBUG)
        graph = Graph(name="release-pipeline")
        graph.add_edge("compile", "link")

        payload = json.loads(caplog.records[-1].getMessage())
        assert payload["event"] == "edge_added"
        assert payload[GRAPH_CONTEXT_KEY] == "release-pipeline"


class TestGraphContext:
    """Test the graph_context block helper."""

    def setup_method(self):
        """Set up test environment before each test."""
        configure_logging(level="DEBUG", json_logs=True)
        clear_context()

    def teardown_method(self):
        """Clean up after each test."""
        clear_context()

    def test_tags_unnamed_graph_entries(self, caplog):
        """Test entries of an unnamed graph carry the name given to the block."""
        caplog.set_level(logging.DEBUG)
        graph = Graph()

        with graph_context("nightly"):
            graph.add("compile")

        payload = json.loads(caplog.records[-1].getMessage())
        assert payload["event"] == "vertex_added"
        assert payload[GRAPH_CONTEXT_KEY] == "nightly"

    def test_name_removed_after_block(self, caplog):
        """Test entries logged after the block are no longer tagged."""
        caplog.set_level(logging.DEBUG)
        graph = Graph()

        with graph_context("nightly"):
            graph.add("compile")
        graph.add("link")

        payload = json.loads(caplog.records[-1].getMessage())
        assert payload["vertex"] == "link"
        assert GRAPH_CONTEXT_KEY not in payload

    def test_nested_blocks_restore_outer_name(self, caplog):
        """Test leaving an inner block restores the outer graph name."""
        caplog.set_level(logging.DEBUG)
        graph = Graph()

        with graph_context("outer"):
            with graph_context("inner"):
                graph.add("compile")
            inner_payload = json.loads(caplog.records[-1].getMessage())
            graph.add("link")

        outer_payload = json.loads(caplog.records[-1].getMessage())
        assert inner_payload[GRAPH_CONTEXT_KEY] == "inner"
        assert outer_payload[GRAPH_CONTEXT_KEY] == "outer"

    def test_tags_sort_entries(self, caplog):
        """Test entries from the topological sort carry the block's name."""
        caplog.set_level(logging.DEBUG)
        graph = Graph()
        graph.add_edge(1, 2)

        with graph_context("nightly"):
            assert list(graph) == [1, 2]

        payload = json.loads(caplog.records[-1].getMessage())
        assert payload["event"] == "topological_sort_completed"
        assert payload[GRAPH_CONTEXT_KEY] == "nightly"
