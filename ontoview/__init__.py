"""Ontology hierarchy explorer: graph-to-tree engine and layouts."""

__version__ = "0.1.0"
