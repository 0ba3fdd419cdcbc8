"""Pytest fixtures for test suite."""

import pytest

from ontoview.core.config import Settings
from ontoview.core.ontology import OntologyGraph, build_graph
from ontoview.navigator import HierarchyNavigator


# =============================================================================
# Core Fixtures
# =============================================================================


@pytest.fixture
def settings() -> Settings:
    """Default settings with a short root id used by the sample graphs."""
    return Settings(root_id="A")


@pytest.fixture
def sample_edges() -> list[tuple[str, str]]:
    """Small hierarchy: A -> {B, C}, B -> D."""
    return [("B", "A"), ("C", "A"), ("D", "B")]


@pytest.fixture
def sample_labels() -> dict[str, str]:
    return {"A": "Animal", "B": "Bird", "C": "Cat", "D": "Duck"}


@pytest.fixture
def sample_graph(sample_edges, sample_labels) -> OntologyGraph:
    """Graph built from the small hierarchy, rooted at A."""
    return build_graph(sample_edges, sample_labels, root_id="A")


@pytest.fixture
def chain_graph() -> OntologyGraph:
    """R -> A -> B -> C -> D."""
    return build_graph([("A", "R"), ("B", "A"), ("C", "B"), ("D", "C")], root_id="R")


@pytest.fixture
def wide_graph() -> OntologyGraph:
    """Root with five children, each with three children (21 nodes)."""
    edges = []
    for i in range(5):
        edges.append((f"c{i}", "R"))
        for j in range(3):
            edges.append((f"c{i}_{j}", f"c{i}"))
    return build_graph(edges, root_id="R")


@pytest.fixture
def navigator(sample_edges, sample_labels, settings) -> HierarchyNavigator:
    """Navigator over the small hierarchy."""
    return HierarchyNavigator.from_edges(sample_edges, sample_labels, settings=settings)
