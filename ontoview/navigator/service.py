"""Navigator service - the synchronous commands behind both hierarchy views.

Each command takes the caller's ViewContext, does one piece of work and
returns its result. The caller decides ordering and batching; the navigator
keeps nothing between calls except the graph and the two trees it was asked
to build (circle view and tree view).
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping

from ontoview.core.config import Settings, clamp_depth, get_settings
from ontoview.core.errors import UnknownNodeError, UnknownRootError
from ontoview.core.ontology.graph import OntologyGraph, build_graph
from ontoview.core.visualization.circle_pack import pack_tree
from ontoview.core.visualization.colors import ColorScale, depth_color_scale, path_color_scales
from ontoview.core.visualization.mapping import highlight_tree_mapping, pack_mapping_arrows
from ontoview.core.visualization.paths import Path, find_path, highlight_paths, layout_path_strip
from ontoview.core.visualization.schemas import Bounds, CirclePacking, PathStrip, Side, TreeLayout
from ontoview.core.visualization.tree_builder import HierarchyTree, TreeNode, build_tree
from ontoview.core.visualization.tree_layout import layout_tree
from ontoview.core.visualization.tree_mutation import (
    collapse_irrelevant_subtrees,
    collapse_node,
    expand_node,
)

from .context import ViewContext, VisitedNode

logger = logging.getLogger(__name__)


class HierarchyNavigator:
    """Builds, edits and lays out hierarchy views over one ontology graph."""

    def __init__(
        self,
        graph: OntologyGraph,
        settings: Settings | None = None,
        color_scale: ColorScale | None = None,
        path_scales: tuple[ColorScale, ColorScale] | None = None,
    ):
        """Initialize the navigator.

        Args:
            graph: Node registry built from the input edges
            settings: Engine settings (defaults to the cached settings)
            color_scale: Depth -> fill scale supplied by the renderer
            path_scales: (up, down) scales for path highlighting
        """
        self.graph = graph
        self.settings = settings or get_settings()
        self.color_scale = color_scale or depth_color_scale(self.settings)
        self.up_scale, self.down_scale = path_scales or path_color_scales(self.settings)

        self.circle_tree: HierarchyTree | None = None
        self.tree_view: HierarchyTree | None = None

    @classmethod
    def from_edges(
        cls,
        edges: Iterable[tuple[str, str]],
        labels: Mapping[str, str] | None = None,
        settings: Settings | None = None,
        **kwargs,
    ) -> HierarchyNavigator:
        """Build the graph from ``(child, parent)`` edges and wrap it."""
        settings = settings or get_settings()
        graph = build_graph(edges, labels, root_id=settings.root_id)
        return cls(graph, settings=settings, **kwargs)

    def new_context(self) -> ViewContext:
        return ViewContext.initial(self.graph, self.settings)

    # =========================================================================
    # Tree Construction
    # =========================================================================

    def build_tree(
        self,
        context: ViewContext,
        root_id: str | None = None,
        depth: int | None = None,
    ) -> HierarchyTree | None:
        """(Re)build the circle-view tree.

        The requested depth is limited to what the graph actually reaches
        below the root; ``context.depth`` and ``context.max_depth`` are
        updated to the values used.

        Returns:
            The new tree, or None for an empty graph or unknown root. An
            unknown root leaves the context and the previous tree unchanged.
        """
        if self.graph.is_empty:
            self.circle_tree = None
            return None

        target = root_id if root_id is not None else context.root_id
        try:
            probe = build_tree(target, self.graph, self.settings.depth_cap)
        except UnknownRootError as e:
            logger.warning("%s, keeping the current view", e)
            return None

        reachable = probe.max_depth_reached
        wanted = clamp_depth(max(depth if depth is not None else context.depth, 1), self.settings)
        used = min(wanted, reachable)

        tree = probe if used == reachable else build_tree(target, self.graph, used)

        context.root_id = target
        context.max_depth = reachable or 1
        context.depth = max(used, 1)
        self.circle_tree = tree
        return tree

    def build_tree_view(self, context: ViewContext, depth: int | None = None) -> HierarchyTree | None:
        """(Re)build the horizontal-tree view.

        With an active path the tree is rooted at the path's pivot, deep
        enough to reach both endpoints even past the configured depth cap,
        and pruned to the branches holding path vertices.
        """
        if self.graph.is_empty:
            self.tree_view = None
            return None

        path = context.active_path
        try:
            if path is not None:
                reach = max(path.up, path.down)
                tree = build_tree(path.pivot, self.graph, reach, depth_cap=reach)
                collapse_irrelevant_subtrees(tree, path.vertices)
            else:
                tree = build_tree(context.root_id, self.graph, depth if depth is not None else context.depth)
        except UnknownRootError as e:
            logger.warning("%s, keeping the current tree view", e)
            return None

        context.tree_height = max(tree.max_depth_reached, 1)
        self.tree_view = tree
        return tree

    # =========================================================================
    # Tree Mutation
    # =========================================================================

    def expand(self, context: ViewContext, node_key: int) -> int | None:
        """Show one more level below a tree-view leaf.

        Returns:
            New tree height, or None if there is no tree view or no such node
        """
        if self.tree_view is None:
            return None
        try:
            height = expand_node(self.tree_view, node_key, self.graph, context.tree_height)
        except UnknownNodeError as e:
            logger.warning("Cannot expand: %s", e)
            return None
        context.tree_height = height
        return height

    def collapse(self, context: ViewContext, node_key: int) -> TreeNode | None:
        """Hide everything below a tree-view node."""
        if self.tree_view is None:
            return None
        try:
            return collapse_node(self.tree_view, node_key)
        except UnknownNodeError as e:
            logger.warning("Cannot collapse: %s", e)
            return None

    # =========================================================================
    # Navigation
    # =========================================================================

    def focus(self, context: ViewContext, node_key: int) -> HierarchyTree | None:
        """Re-root the circle view at a clicked node and extend the breadcrumb.

        Nodes without graph children cannot become a root; clicking them (or
        the current root) changes nothing.
        """
        tree = self.circle_tree
        if tree is None:
            return None

        node = tree.get(node_key)
        if node is None:
            logger.warning("Cannot focus: tree node %s does not exist", node_key)
            return None
        if node is tree.root:
            return tree

        graph_node = self.graph.get(node.id)
        if graph_node is None or not graph_node.has_children:
            return None

        trail = [node] + [
            ancestor
            for ancestor in tree.ancestors(node)
            if ancestor is not tree.root and ancestor.id != self.settings.root_id
        ]
        for entry in reversed(trail):
            context.visited.append(VisitedNode(entry.id, entry.label))

        return self.build_tree(context, root_id=node.id)

    def rewind(self, context: ViewContext, index: int) -> HierarchyTree | None:
        """Go back to a breadcrumb entry, dropping the entries after it."""
        if not 0 <= index < len(context.visited):
            logger.warning("Breadcrumb index %s out of range", index)
            return None
        entry = context.visited[index]
        context.visited = context.visited[: index + 1]
        return self.build_tree(context, root_id=entry.id)

    # =========================================================================
    # Paths
    # =========================================================================

    def find_path(self, start_id: str, end_id: str) -> Path | None:
        """Path between two graph nodes, or None."""
        return find_path(self.graph, start_id, end_id)

    def select_path(self, context: ViewContext, path: Path) -> None:
        """Make ``path`` the active path and center the views on its pivot."""
        pivot = path.pivot
        context.active_path = path
        context.root_id = pivot
        context.depth = max(1, clamp_depth(path.height, self.settings))
        context.left_mapping = [path.start_id]
        context.right_mapping = [path.end_id]
        context.visited = [VisitedNode(pivot, self.graph.label_of(pivot))]

    def clear_path(self, context: ViewContext) -> None:
        context.active_path = None
        context.left_mapping = []
        context.right_mapping = []

    def path_strip(self, context: ViewContext, width: float) -> PathStrip | None:
        """The active path laid out on a single line."""
        if context.active_path is None:
            return None
        return layout_path_strip(
            context.active_path,
            width,
            labels=self.graph,
            settings=self.settings,
            up_scale=self.up_scale,
            down_scale=self.down_scale,
        )

    # =========================================================================
    # Layouts
    # =========================================================================

    def recompute_circle_packing(self, context: ViewContext, bounds: Bounds) -> CirclePacking | None:
        """Circles, mapping arrows and path highlight for the circle view."""
        if self.circle_tree is None:
            return None

        circles = pack_tree(
            self.circle_tree,
            bounds,
            max_depth=context.max_depth,
            color_scale=self.color_scale,
            settings=self.settings,
        )
        left = pack_mapping_arrows(circles, context.left_mapping, self.graph, bounds, Side.LEFT, context.depth)
        right = pack_mapping_arrows(circles, context.right_mapping, self.graph, bounds, Side.RIGHT, context.depth)

        if context.active_path is not None:
            circles = highlight_paths(circles, context.active_path, self.up_scale, self.down_scale)

        return CirclePacking(circles=circles, left_arrows=left, right_arrows=right)

    def recompute_tree_layout(self, context: ViewContext, bounds: Bounds) -> TreeLayout | None:
        """Circles and connectors for the horizontal tree view."""
        if self.tree_view is None:
            return None

        layout = layout_tree(
            self.tree_view,
            bounds,
            tree_height=context.tree_height,
            color_scale=self.color_scale,
            settings=self.settings,
        )
        circles = highlight_tree_mapping(
            layout.circles,
            context.left_mapping,
            context.right_mapping,
            self.graph,
            self.settings.left_mapping_color,
            self.settings.right_mapping_color,
        )
        if context.active_path is not None:
            circles = highlight_paths(circles, context.active_path, self.up_scale, self.down_scale)

        return layout.model_copy(update={"circles": circles})
