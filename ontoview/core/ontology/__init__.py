"""Ontology graph model for the hierarchy explorer."""

from .graph import (
    GraphNode,
    OntologyGraph,
    build_graph,
    prepare_labels,
    edges_from_hierarchy,
    get_node_label,
)

__all__ = [
    "GraphNode",
    "OntologyGraph",
    "build_graph",
    "prepare_labels",
    "edges_from_hierarchy",
    "get_node_label",
]
