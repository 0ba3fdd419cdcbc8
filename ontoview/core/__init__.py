"""Core graph, tree and layout modules."""
