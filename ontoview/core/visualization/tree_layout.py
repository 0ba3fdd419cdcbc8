"""Horizontal tree layout.

Levels run left to right (x grows with depth). Along the vertical axis each
leaf gets its own slot and parents are centered over their children, so
neighbouring leaves sit one node spacing apart.
"""

from __future__ import annotations

import logging

from ontoview.core.config import Settings, get_settings
from .colors import ColorScale, depth_color_scale, normalized_depth
from .schemas import Arrow, Bounds, Circle, TreeLayout
from .tree_builder import HierarchyTree, TreeNode

logger = logging.getLogger(__name__)


def level_widths(root: TreeNode) -> list[int]:
    """Number of nodes on every level, top-down."""
    widths = [1]
    stack: list[tuple[int, TreeNode]] = [(0, root)]
    while stack:
        level, node = stack.pop()
        if not node.children:
            continue
        if len(widths) <= level + 1:
            widths.append(0)
        widths[level + 1] += len(node.children)
        stack.extend((level + 1, child) for child in node.children)
    return widths


def max_tree_width(root: TreeNode) -> int:
    """Node count of the widest level."""
    return max(level_widths(root))


def _leaf_slots(root: TreeNode) -> tuple[dict[int, float], int]:
    """Vertical slot for every node: leaves in order, parents centered."""
    slots: dict[int, float] = {}
    next_slot = 0

    stack: list[tuple[TreeNode, bool]] = [(root, False)]
    while stack:
        node, visited = stack.pop()
        if not node.children:
            slots[node.key] = float(next_slot)
            next_slot += 1
        elif visited:
            first = slots[node.children[0].key]
            last = slots[node.children[-1].key]
            slots[node.key] = (first + last) / 2
        else:
            stack.append((node, True))
            stack.extend((child, False) for child in reversed(node.children))

    return slots, next_slot


def layout_tree(
    tree: HierarchyTree,
    bounds: Bounds | None = None,
    tree_height: int | None = None,
    color_scale: ColorScale | None = None,
    settings: Settings | None = None,
) -> TreeLayout:
    """Position every node of ``tree`` for the horizontal tree view.

    Args:
        tree: Tree to lay out
        bounds: Optional canvas; a layout shorter than the canvas is centered
            vertically in it
        tree_height: Depth used to normalize fill colors (defaults to the
            deepest level reached)
        color_scale: Maps normalized depth to a fill
        settings: Radius and spacing configuration

    Returns:
        TreeLayout with one fixed-radius Circle per node and one Arrow per
        parent -> child edge
    """
    settings = settings or get_settings()
    color_scale = color_scale or depth_color_scale(settings)
    root = tree.root

    if tree_height is None:
        tree_height = tree.max_depth_reached

    slots, leaf_count = _leaf_slots(root)
    # Leaves at mixed depths can outnumber the widest level
    extent = max(max_tree_width(root), leaf_count) * settings.tree_node_spacing
    offset = 0.0
    if bounds is not None and bounds.height > extent:
        offset = (bounds.height - extent) / 2

    def position(node: TreeNode) -> tuple[float, float]:
        x = (node.depth - root.depth) * settings.tree_level_spacing
        y = offset + (slots[node.key] + 0.5) / leaf_count * extent
        return x, y

    circles: list[Circle] = []
    arrows: list[Arrow] = []
    points: dict[int, tuple[float, float]] = {}

    for node in tree.iter_breadth_first():
        x, y = position(node)
        points[node.key] = (x, y)
        circles.append(
            Circle(
                key=node.key,
                id=node.id,
                label=node.label,
                x=x,
                y=y,
                r=settings.tree_circle_radius,
                depth=node.depth,
                is_leaf=node.is_leaf,
                expandable=node.expandable,
                parent=node.parent_key if node is not root else None,
                fill=node.color or color_scale(normalized_depth(node.depth - root.depth, tree_height)),
            )
        )
        if node is not root and node.parent_key in points:
            source_x, source_y = points[node.parent_key]
            arrows.append(
                Arrow(
                    id=len(arrows),
                    source_key=node.parent_key,
                    target_key=node.key,
                    source_x=source_x,
                    source_y=source_y,
                    target_x=x,
                    target_y=y,
                )
            )

    width = max(circle.x for circle in circles) + settings.tree_circle_radius
    logger.debug("Laid out %d nodes over %d leaf slots", len(circles), leaf_count)
    return TreeLayout(circles=circles, arrows=arrows, width=width, height=extent + 2 * offset)
