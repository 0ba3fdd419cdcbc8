"""View context - the caller-owned state that drives every navigator command."""

from __future__ import annotations

from dataclasses import dataclass, field

from ontoview.core.config import Settings, get_settings
from ontoview.core.ontology.graph import OntologyGraph
from ontoview.core.visualization.paths import Path


@dataclass
class VisitedNode:
    """One breadcrumb entry."""

    id: str
    label: str


@dataclass
class ViewContext:
    """Current selections of one view.

    The navigator reads and updates this object but never keeps its own copy,
    so several views can share one navigator.
    """

    root_id: str
    depth: int = 1
    # Deepest level reachable below root_id, as found by the last build
    max_depth: int = 1
    # Depth of the horizontal tree view
    tree_height: int = 1
    active_path: Path | None = None
    visited: list[VisitedNode] = field(default_factory=list)
    left_mapping: list[str] = field(default_factory=list)
    right_mapping: list[str] = field(default_factory=list)

    @classmethod
    def initial(cls, graph: OntologyGraph, settings: Settings | None = None) -> ViewContext:
        """Context rooted at the well-known root with the default depth."""
        settings = settings or get_settings()
        visited = [] if graph.is_empty else [VisitedNode(graph.root_id, graph.label_of(graph.root_id))]
        return cls(
            root_id=graph.root_id,
            depth=settings.max_depth,
            tree_height=settings.max_depth,
            visited=visited,
        )

    @property
    def breadcrumb(self) -> list[str]:
        return [entry.label for entry in self.visited]
