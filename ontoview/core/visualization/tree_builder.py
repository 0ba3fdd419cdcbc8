"""
Tree Builder - Converts the ontology graph into depth-bounded trees.

The graph allows several parents per node; a rendered hierarchy does not.
Trees are built as breadth-first spanning trees: every reachable node is
placed exactly once, under the first parent that reaches it.

Trees are stored as an arena: each TreeNode carries an integer ``key`` and the
key of its parent, and the HierarchyTree indexes all nodes by key. Keys stay
stable while a tree is expanded or collapsed.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

from ontoview.core.config import clamp_depth
from ontoview.core.errors import UnknownNodeError, UnknownRootError
from ontoview.core.ontology.graph import GraphNode, OntologyGraph

logger = logging.getLogger(__name__)


# =============================================================================
# Data Classes for Tree Representation
# =============================================================================


@dataclass
class TreeNode:
    """One appearance of a graph node in a bounded tree."""

    key: int
    id: str
    label: str
    depth: int = 0
    value: int = 1
    is_leaf: bool = True
    # Graph node has children that are not shown below this node
    expandable: bool = False
    color: str | None = None
    parent_key: int | None = None
    children: list[TreeNode] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Nested plain-dict form of this subtree."""
        return {
            "key": self.key,
            "id": self.id,
            "label": self.label,
            "depth": self.depth,
            "value": self.value,
            "isLeaf": self.is_leaf,
            "expandable": self.expandable,
            "color": self.color,
            "parent": self.parent_key,
            "children": [child.to_dict() for child in self.children],
        }


@dataclass
class HierarchyTree:
    """Arena of tree nodes indexed by key."""

    root: TreeNode
    nodes: dict[int, TreeNode] = field(default_factory=dict)
    max_depth_reached: int = 0
    next_key: int = 0

    def __len__(self) -> int:
        return len(self.nodes)

    def __contains__(self, key: object) -> bool:
        return key in self.nodes

    def __getitem__(self, key: int) -> TreeNode:
        try:
            return self.nodes[key]
        except KeyError:
            raise UnknownNodeError(key) from None

    def get(self, key: int) -> TreeNode | None:
        """Get a node by key."""
        return self.nodes.get(key)

    def find(self, node_id: str) -> TreeNode | None:
        """Get the first node (breadth-first) showing graph node ``node_id``."""
        for node in self.iter_breadth_first():
            if node.id == node_id:
                return node
        return None

    def parent_of(self, node: TreeNode) -> TreeNode | None:
        if node.parent_key is None:
            return None
        return self.nodes.get(node.parent_key)

    def ancestors(self, node: TreeNode) -> Iterator[TreeNode]:
        """Yield the parent chain of ``node`` up to the root."""
        parent = self.parent_of(node)
        while parent is not None:
            yield parent
            parent = self.parent_of(parent)

    def iter_breadth_first(self) -> Iterator[TreeNode]:
        queue = [self.root]
        index = 0
        while index < len(queue):
            node = queue[index]
            index += 1
            yield node
            queue.extend(node.children)

    def iter_post_order(self) -> Iterator[TreeNode]:
        """Yield nodes children-first."""
        stack: list[tuple[TreeNode, bool]] = [(self.root, False)]
        while stack:
            node, visited = stack.pop()
            if visited:
                yield node
                continue
            stack.append((node, True))
            for child in reversed(node.children):
                stack.append((child, False))

    def ids(self) -> set[str]:
        return {node.id for node in self.nodes.values()}

    def allocate_key(self) -> int:
        key = self.next_key
        self.next_key += 1
        return key

    def register(self, node: TreeNode) -> None:
        """Add ``node`` and its descendants to the arena."""
        stack = [node]
        while stack:
            current = stack.pop()
            self.nodes[current.key] = current
            stack.extend(current.children)

    def unregister_descendants(self, node: TreeNode) -> int:
        """Drop every descendant of ``node`` from the arena; return how many."""
        removed = 0
        stack = list(node.children)
        while stack:
            current = stack.pop()
            if self.nodes.pop(current.key, None) is not None:
                removed += 1
            stack.extend(current.children)
        return removed

    def propagate_value(self, node: TreeNode) -> None:
        """Re-sum values from ``node`` up to the root."""
        current: TreeNode | None = node
        while current is not None:
            current.value = _sum_children(current)
            current = self.parent_of(current)

    def recompute_values(self) -> None:
        """Recompute every value bottom-up."""
        for node in self.iter_post_order():
            node.value = _sum_children(node)

    def to_dict(self) -> dict[str, Any]:
        return {
            "maxDepthReached": self.max_depth_reached,
            "root": self.root.to_dict(),
        }


def _sum_children(node: TreeNode) -> int:
    if not node.children:
        return 1
    return sum(child.value for child in node.children)


# =============================================================================
# Tree Construction
# =============================================================================


def build_tree(
    root_id: str,
    graph: OntologyGraph,
    max_depth: int,
    key_start: int = 0,
    exclude: Iterable[str] = (),
    depth_cap: int | None = None,
) -> HierarchyTree | None:
    """Build a breadth-first spanning tree of ``graph`` rooted at ``root_id``.

    Args:
        root_id: Graph node to root the tree at
        graph: Node registry
        max_depth: Deepest level to include (0 = root only); capped by config
        key_start: First key to assign, so subtrees can be spliced into an
            existing arena without key clashes
        exclude: Ids already shown elsewhere; they are neither placed nor
            counted as hidden children
        depth_cap: Overrides the configured cap for this build

    Returns:
        HierarchyTree, or None when the graph is empty

    Raises:
        UnknownRootError: If ``root_id`` is not in a non-empty graph
    """
    if graph.is_empty:
        logger.debug("Cannot build tree for %s: graph is empty", root_id)
        return None

    graph_root = graph.get(root_id)
    if graph_root is None:
        raise UnknownRootError(root_id)

    if depth_cap is None:
        max_depth = clamp_depth(max_depth)
    else:
        max_depth = max(0, min(max_depth, depth_cap))
    key = key_start

    root = TreeNode(key=key, id=graph_root.id, label=graph_root.label, depth=0)
    tree = HierarchyTree(root=root, nodes={key: root})
    key += 1

    visited = {graph_root.id, *exclude}
    frontier: list[tuple[GraphNode, TreeNode]] = [(graph_root, root)]
    depth = 0

    while frontier:
        next_frontier: list[tuple[GraphNode, TreeNode]] = []

        for graph_node, tree_node in frontier:
            if depth < max_depth:
                for child_id, graph_child in graph_node.children.items():
                    if child_id in visited:
                        continue
                    visited.add(child_id)

                    child = TreeNode(
                        key=key,
                        id=graph_child.id,
                        label=graph_child.label,
                        depth=depth + 1,
                        parent_key=tree_node.key,
                    )
                    key += 1
                    tree_node.children.append(child)
                    tree.nodes[child.key] = child
                    next_frontier.append((graph_child, child))

            tree_node.is_leaf = not tree_node.children
            tree_node.expandable = tree_node.is_leaf and any(
                child_id not in visited for child_id in graph_node.children
            )

        if next_frontier:
            depth += 1
        frontier = next_frontier

    tree.max_depth_reached = depth
    tree.next_key = key
    tree.recompute_values()

    logger.debug(
        "Built tree at %s: %d nodes, depth %d of %d",
        root_id,
        len(tree.nodes),
        depth,
        max_depth,
    )
    return tree


def reachable_depth(root_id: str, graph: OntologyGraph, max_depth: int) -> int:
    """Deepest level a tree rooted at ``root_id`` would reach, up to ``max_depth``."""
    tree = build_tree(root_id, graph, max_depth)
    return tree.max_depth_reached if tree else 0
