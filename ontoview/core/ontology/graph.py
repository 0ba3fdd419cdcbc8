"""Graph Model - builds the canonical is-a/part-of graph from raw edges.

The graph is a multi-parent DAG of ontology entities. Every node is reachable
from a single well-known root: nodes without parents, and components that are
only reachable through a cycle, are attached beneath it.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from ontoview.core.config import get_settings

if TYPE_CHECKING:
    import networkx as nx

logger = logging.getLogger(__name__)


# =============================================================================
# Data Classes
# =============================================================================


@dataclass(eq=False)
class GraphNode:
    """One ontology entity.

    ``parents`` and ``children`` map id -> node. Dicts give set semantics with
    a stable insertion order, which fixes the tree-construction tie-break.
    """

    id: str
    label: str
    parents: dict[str, GraphNode] = field(default_factory=dict, repr=False)
    children: dict[str, GraphNode] = field(default_factory=dict, repr=False)

    @property
    def has_children(self) -> bool:
        return bool(self.children)

    def link_child(self, child: GraphNode) -> None:
        """Add a parent -> child edge in both directions, ignoring duplicates."""
        self.children.setdefault(child.id, child)
        child.parents.setdefault(self.id, self)


@dataclass
class OntologyGraph:
    """Registry of graph nodes keyed by id."""

    root_id: str
    nodes: dict[str, GraphNode] = field(default_factory=dict)

    def __contains__(self, node_id: object) -> bool:
        return node_id in self.nodes

    def __len__(self) -> int:
        return len(self.nodes)

    def __iter__(self) -> Iterator[GraphNode]:
        return iter(self.nodes.values())

    @property
    def is_empty(self) -> bool:
        return not self.nodes

    @property
    def root(self) -> GraphNode | None:
        return self.nodes.get(self.root_id)

    def get(self, node_id: str) -> GraphNode | None:
        """Get a node by ID."""
        return self.nodes.get(node_id)

    def label_of(self, node_id: str) -> str:
        node = self.nodes.get(node_id)
        return node.label if node else node_id

    def ancestors(self, node_id: str) -> list[str]:
        """Ids of every node reachable upward from ``node_id``, nearest first.

        Revisited ids are skipped, so erroneous back-edges cannot loop.
        """
        start = self.nodes.get(node_id)
        if start is None:
            return []

        seen = {node_id}
        order: list[str] = []
        queue: deque[GraphNode] = deque([start])
        while queue:
            current = queue.popleft()
            for parent_id, parent in current.parents.items():
                if parent_id in seen:
                    continue
                seen.add(parent_id)
                order.append(parent_id)
                queue.append(parent)
        return order

    def edges(self) -> Iterator[tuple[str, str]]:
        """Iterate ``(child, parent)`` pairs in insertion order."""
        for node in self.nodes.values():
            for child_id in node.children:
                yield child_id, node.id

    def to_networkx(self) -> "nx.DiGraph":
        """Export as a NetworkX DiGraph with parent -> child edges."""
        import networkx as nx

        G = nx.DiGraph()
        for node in self.nodes.values():
            G.add_node(node.id, label=node.label)
        for child_id, parent_id in self.edges():
            G.add_edge(parent_id, child_id)
        G.graph["root_id"] = self.root_id
        return G


# =============================================================================
# Input Helpers
# =============================================================================


def prepare_labels(records: Iterable[Mapping[str, Any]]) -> dict[str, str]:
    """Turn ``[{"id": ..., "label": ...}, ...]`` records into a label mapping."""
    return {str(item["id"]): str(item["label"]) for item in records if "id" in item and "label" in item}


def edges_from_hierarchy(triples: Iterable[tuple[str, str, str]] | None) -> list[tuple[str, str]]:
    """Convert ``(child, relation, parent)`` triples to ``(child, parent)`` edges.

    The relation (is-a, part-of, ...) does not change the hierarchy shape.
    """
    if triples is None:
        return []
    return [(str(item[0]), str(item[2])) for item in triples]


def get_node_label(labels: Mapping[str, str] | None, node_id: str) -> str:
    """Resolve a display label, falling back to the id itself."""
    if labels and labels.get(node_id) is not None:
        return labels[node_id]
    return node_id


# =============================================================================
# Graph Construction
# =============================================================================


def build_graph(
    edges: Iterable[tuple[str, str]],
    labels: Mapping[str, str] | None = None,
    root_id: str | None = None,
) -> OntologyGraph:
    """Build the node registry from ``(child, parent)`` edges.

    Args:
        edges: Edge pairs; duplicates are ignored.
        labels: Optional id -> label mapping. Missing ids use the id as label.
        root_id: Well-known root id (defaults to the configured root).

    Returns:
        OntologyGraph with exactly one parentless node, the root. Empty input
        gives an empty graph.
    """
    root_id = root_id or get_settings().root_id
    graph = OntologyGraph(root_id=root_id)
    edge_list = [(str(child), str(parent)) for child, parent in edges]

    if not edge_list:
        logger.debug("No edges supplied, graph is empty")
        return graph

    # Collect unique nodes in first-seen order
    for child_id, parent_id in edge_list:
        for node_id in (child_id, parent_id):
            if node_id not in graph.nodes:
                graph.nodes[node_id] = GraphNode(id=node_id, label=get_node_label(labels, node_id))

    for child_id, parent_id in edge_list:
        graph.nodes[parent_id].link_child(graph.nodes[child_id])

    orphans = [node for node in graph.nodes.values() if not node.parents and node.id != root_id]

    root = graph.nodes.get(root_id)
    if root is None:
        root = GraphNode(id=root_id, label=get_node_label(labels, root_id))
        logger.debug("Synthesized root node %s", root_id)
    # Root goes first so iteration starts at it
    graph.nodes = {root_id: root, **{k: v for k, v in graph.nodes.items() if k != root_id}}

    for node in orphans:
        root.link_child(node)

    if root.parents:
        logger.warning("Root %s has parents %s in the input edges", root_id, list(root.parents))

    _attach_unreachable(graph)

    logger.debug(
        "Built graph with %d nodes and %d edges (%d attached to root)",
        len(graph.nodes),
        len(edge_list),
        len(orphans),
    )
    return graph


def _attach_unreachable(graph: OntologyGraph) -> None:
    """Hang components only reachable through a cycle beneath the root."""
    root = graph.nodes[graph.root_id]
    reached = _reachable_from(root, set())

    for node in list(graph.nodes.values()):
        if node.id in reached:
            continue
        logger.warning("Node %s is only reachable through a cycle, attaching it to root", node.id)
        root.link_child(node)
        _reachable_from(node, reached)


def _reachable_from(start: GraphNode, reached: set[str]) -> set[str]:
    reached.add(start.id)
    queue: deque[GraphNode] = deque([start])
    while queue:
        current = queue.popleft()
        for child_id, child in current.children.items():
            if child_id not in reached:
                reached.add(child_id)
                queue.append(child)
    return reached
