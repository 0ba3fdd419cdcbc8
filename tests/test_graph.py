"""Tests for graph construction."""

import networkx as nx

from ontoview.core.ontology import (
    build_graph,
    edges_from_hierarchy,
    get_node_label,
    prepare_labels,
)


# =============================================================================
# Construction
# =============================================================================


class TestBuildGraph:
    """Tests for build_graph."""

    def test_links_both_directions(self, sample_graph):
        a = sample_graph.get("A")
        b = sample_graph.get("B")
        assert list(a.children) == ["B", "C"]
        assert list(b.parents) == ["A"]
        assert list(b.children) == ["D"]

    def test_labels_with_fallback(self):
        graph = build_graph([("x", "R")], {"R": "Root"}, root_id="R")
        assert graph.get("R").label == "Root"
        assert graph.get("x").label == "x"

    def test_duplicate_edges_ignored(self):
        graph = build_graph([("B", "A"), ("B", "A"), ("C", "A")], root_id="A")
        assert list(graph.get("A").children) == ["B", "C"]
        assert list(graph.get("B").parents) == ["A"]
        assert len(list(graph.edges())) == 2

    def test_root_comes_first(self, sample_graph):
        assert next(iter(sample_graph)).id == "A"
        assert sample_graph.root.id == "A"

    def test_orphans_attached_to_root(self):
        graph = build_graph([("B", "A"), ("D", "C")], root_id="A")
        assert "C" in graph.get("A").children
        assert "A" in graph.get("C").parents

    def test_missing_root_is_synthesized(self):
        graph = build_graph([("B", "A"), ("D", "C")], {"ROOT": "Everything"}, root_id="ROOT")
        root = graph.root
        assert root.label == "Everything"
        assert list(root.children) == ["A", "C"]
        assert not root.parents

    def test_single_parentless_node_besides_root(self):
        graph = build_graph([("B", "A"), ("D", "C"), ("F", "E")], root_id="ROOT")
        parentless = [node.id for node in graph if not node.parents]
        assert parentless == ["ROOT"]

    def test_default_root_from_settings(self):
        graph = build_graph([("B", "A")])
        assert graph.root_id == "Q35120"
        assert "A" in graph.root.children

    def test_empty_edges_give_empty_graph(self):
        graph = build_graph([])
        assert graph.is_empty
        assert len(graph) == 0
        assert graph.root is None

    def test_cycle_only_component_attached(self):
        graph = build_graph([("B", "R"), ("X", "Y"), ("Y", "X")], root_id="R")
        assert list(graph.root.children) == ["B", "X"]
        # Y stays reachable through X
        assert "Y" in graph.get("X").children

    def test_root_with_parents_is_kept(self):
        graph = build_graph([("B", "A"), ("C", "B"), ("A", "C")], root_id="A")
        assert graph.root_id == "A"
        assert list(graph.root.parents) == ["C"]

    def test_ids_are_strings(self):
        graph = build_graph([(2, 1)], root_id="1")
        assert "2" in graph
        assert "2" in graph.get("1").children


# =============================================================================
# Queries
# =============================================================================


class TestGraphQueries:
    """Tests for graph lookups."""

    def test_label_of_unknown_id(self, sample_graph):
        assert sample_graph.label_of("D") == "Duck"
        assert sample_graph.label_of("nope") == "nope"

    def test_ancestors_nearest_first(self, chain_graph):
        assert chain_graph.ancestors("D") == ["C", "B", "A", "R"]
        assert chain_graph.ancestors("R") == []
        assert chain_graph.ancestors("missing") == []

    def test_ancestors_with_cycle(self):
        graph = build_graph([("B", "A"), ("C", "B"), ("A", "C")], root_id="A")
        assert graph.ancestors("C") == ["B", "A"]

    def test_edges_are_child_parent(self, sample_graph):
        assert set(sample_graph.edges()) == {("B", "A"), ("C", "A"), ("D", "B")}

    def test_to_networkx(self, sample_graph):
        G = sample_graph.to_networkx()
        assert isinstance(G, nx.DiGraph)
        assert set(G.edges()) == {("A", "B"), ("A", "C"), ("B", "D")}
        assert G.nodes["D"]["label"] == "Duck"
        assert G.graph["root_id"] == "A"
        assert nx.is_directed_acyclic_graph(G)

    def test_every_node_reachable_from_root(self, wide_graph):
        G = wide_graph.to_networkx()
        assert nx.descendants(G, "R") == set(G.nodes) - {"R"}


# =============================================================================
# Input Helpers
# =============================================================================


class TestInputHelpers:
    """Tests for label and hierarchy record conversion."""

    def test_prepare_labels(self):
        records = [{"id": "Q1", "label": "one"}, {"id": "Q2", "label": "two"}, {"id": "Q3"}]
        assert prepare_labels(records) == {"Q1": "one", "Q2": "two"}

    def test_edges_from_hierarchy(self):
        triples = [("Q2", "subclass of", "Q1"), ("Q3", "part of", "Q1")]
        assert edges_from_hierarchy(triples) == [("Q2", "Q1"), ("Q3", "Q1")]

    def test_edges_from_missing_hierarchy(self):
        assert edges_from_hierarchy(None) == []

    def test_get_node_label(self):
        assert get_node_label({"a": "Alpha"}, "a") == "Alpha"
        assert get_node_label({"a": "Alpha"}, "b") == "b"
        assert get_node_label(None, "b") == "b"
