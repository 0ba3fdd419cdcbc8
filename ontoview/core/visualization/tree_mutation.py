"""Local edits of a built tree: expand one level, collapse a subtree, prune to a path."""

from __future__ import annotations

import logging
from collections.abc import Collection

from ontoview.core.ontology.graph import OntologyGraph
from .tree_builder import HierarchyTree, TreeNode, build_tree

logger = logging.getLogger(__name__)


def expand_node(
    tree: HierarchyTree,
    key: int,
    graph: OntologyGraph,
    current_depth: int,
) -> int:
    """Splice the graph children of a leaf beneath it.

    Runs tree construction one level deep at the leaf's graph node and hangs
    the resulting children under the leaf, then re-sums values up to the root.
    Children already shown elsewhere in the tree are skipped. Internal nodes
    and leaves with nothing left to show are left unchanged.

    Args:
        tree: Tree to edit in place
        key: Key of the node to expand
        graph: Node registry the tree was built from
        current_depth: Overall depth of the displayed tree

    Returns:
        New overall tree depth

    Raises:
        UnknownNodeError: If ``key`` is not in the tree
    """
    node = tree[key]

    if not node.is_leaf:
        logger.debug("Node %s (%s) already has children, nothing to expand", key, node.id)
        return current_depth

    graph_node = graph.get(node.id)
    if graph_node is None or not graph_node.has_children:
        node.expandable = False
        return current_depth

    subtree = build_tree(node.id, graph, 1, key_start=tree.next_key, exclude=tree.ids())
    if subtree is None or not subtree.root.children:
        node.expandable = False
        return current_depth

    for child in subtree.root.children:
        child.parent_key = node.key
        child.depth = node.depth + 1
        tree.register(child)

    node.children = list(subtree.root.children)
    node.is_leaf = False
    node.expandable = False
    tree.next_key = subtree.next_key
    tree.propagate_value(node)

    new_depth = max(current_depth, node.depth + 1)
    tree.max_depth_reached = max(tree.max_depth_reached, new_depth)

    logger.debug("Expanded %s (%s) with %d children", key, node.id, len(node.children))
    return new_depth


def collapse_node(tree: HierarchyTree, key: int) -> TreeNode:
    """Discard every descendant of a node, turning it into a leaf.

    Collapsing a leaf is a no-op.

    Raises:
        UnknownNodeError: If ``key`` is not in the tree
    """
    node = tree[key]
    if not node.children:
        return node

    removed = tree.unregister_descendants(node)
    node.children = []
    node.is_leaf = True
    node.expandable = True
    tree.propagate_value(node)

    logger.debug("Collapsed %s (%s), dropped %d nodes", key, node.id, removed)
    return node


def collapse_irrelevant_subtrees(tree: HierarchyTree, vertices: Collection[str]) -> HierarchyTree:
    """Prune every subtree that shows none of ``vertices``.

    Used to focus a tree on a selected path: what remains are the branches
    leading to path vertices.
    """
    wanted = set(vertices)
    relevant: dict[int, bool] = {}

    for node in tree.iter_post_order():
        relevant[node.key] = node.id in wanted or any(relevant[child.key] for child in node.children)

    for node in tree.iter_breadth_first():
        kept = [child for child in node.children if relevant[child.key]]
        if len(kept) == len(node.children):
            continue
        for child in node.children:
            if not relevant[child.key]:
                tree.nodes.pop(child.key, None)
                tree.unregister_descendants(child)
        node.children = kept
        if not kept:
            node.is_leaf = True
            node.expandable = True

    tree.recompute_values()
    return tree
