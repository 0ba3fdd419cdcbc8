"""Tests for the navigator command surface."""

import pytest

from ontoview.core.config import Settings
from ontoview.core.ontology import build_graph
from ontoview.core.visualization import Bounds
from ontoview.navigator import HierarchyNavigator, ViewContext, VisitedNode


@pytest.fixture
def bounds() -> Bounds:
    return Bounds(width=800, height=600)


@pytest.fixture
def chain_navigator(chain_graph) -> HierarchyNavigator:
    return HierarchyNavigator(chain_graph, settings=Settings(root_id="R"))


@pytest.fixture
def empty_navigator(settings) -> HierarchyNavigator:
    return HierarchyNavigator(build_graph([]), settings=settings)


# =============================================================================
# Context
# =============================================================================


class TestViewContext:
    """Tests for the initial context."""

    def test_initial_context(self, navigator):
        ctx = navigator.new_context()
        assert isinstance(ctx, ViewContext)
        assert ctx.root_id == "A"
        assert ctx.depth == 3
        assert ctx.tree_height == 3
        assert ctx.visited == [VisitedNode("A", "Animal")]
        assert ctx.breadcrumb == ["Animal"]
        assert ctx.active_path is None

    def test_empty_graph_context(self, empty_navigator):
        assert empty_navigator.new_context().visited == []


# =============================================================================
# Tree Construction
# =============================================================================


class TestBuildTree:
    """Tests for building the circle-view tree."""

    def test_depth_limited_to_reachable(self, navigator):
        ctx = navigator.new_context()
        tree = navigator.build_tree(ctx)
        assert len(tree) == 4
        assert ctx.depth == 2
        assert ctx.max_depth == 2
        assert navigator.circle_tree is tree

    def test_explicit_depth(self, navigator):
        ctx = navigator.new_context()
        tree = navigator.build_tree(ctx, depth=1)
        assert tree.ids() == {"A", "B", "C"}
        assert ctx.depth == 1
        assert ctx.max_depth == 2

    def test_unknown_root_keeps_view(self, navigator):
        ctx = navigator.new_context()
        previous = navigator.build_tree(ctx)
        assert navigator.build_tree(ctx, root_id="Z") is None
        assert ctx.root_id == "A"
        assert navigator.circle_tree is previous

    def test_empty_graph(self, empty_navigator, bounds):
        ctx = empty_navigator.new_context()
        assert empty_navigator.build_tree(ctx) is None
        assert empty_navigator.build_tree_view(ctx) is None
        assert empty_navigator.recompute_circle_packing(ctx, bounds) is None
        assert empty_navigator.recompute_tree_layout(ctx, bounds) is None
        assert empty_navigator.find_path("A", "B") is None

    def test_from_edges_uses_settings_root(self, sample_edges):
        navigator = HierarchyNavigator.from_edges(sample_edges, settings=Settings(root_id="TOP"))
        assert navigator.graph.root_id == "TOP"
        assert "A" in navigator.graph.root.children


# =============================================================================
# Expand / Collapse
# =============================================================================


class TestTreeView:
    """Tests for the horizontal tree view commands."""

    def test_expand_and_collapse(self, navigator):
        ctx = navigator.new_context()
        tree = navigator.build_tree_view(ctx, depth=1)
        assert ctx.tree_height == 1

        b = tree.find("B")
        assert navigator.expand(ctx, b.key) == 2
        assert ctx.tree_height == 2
        assert [child.id for child in b.children] == ["D"]

        node = navigator.collapse(ctx, b.key)
        assert node is b
        assert b.is_leaf

    def test_unknown_keys(self, navigator):
        ctx = navigator.new_context()
        navigator.build_tree_view(ctx, depth=1)
        assert navigator.expand(ctx, 999) is None
        assert navigator.collapse(ctx, 999) is None

    def test_without_tree_view(self, navigator):
        ctx = navigator.new_context()
        assert navigator.expand(ctx, 0) is None
        assert navigator.collapse(ctx, 0) is None

    def test_mapping_tint(self, navigator, bounds):
        ctx = navigator.new_context()
        ctx.left_mapping = ["D"]
        navigator.build_tree_view(ctx, depth=1)
        layout = navigator.recompute_tree_layout(ctx, bounds)
        fills = {circle.id: circle.fill for circle in layout.circles}
        assert fills["B"] == navigator.settings.left_mapping_color
        assert fills["C"] != navigator.settings.left_mapping_color


# =============================================================================
# Navigation
# =============================================================================


class TestNavigation:
    """Tests for focus and breadcrumb rewind."""

    def test_focus_extends_breadcrumb(self, chain_navigator):
        ctx = chain_navigator.new_context()
        tree = chain_navigator.build_tree(ctx)
        c = tree.find("C")

        new_tree = chain_navigator.focus(ctx, c.key)

        assert new_tree.root.id == "C"
        assert ctx.root_id == "C"
        assert [entry.id for entry in ctx.visited] == ["R", "A", "B", "C"]
        assert ctx.max_depth == 1

    def test_rewind(self, chain_navigator):
        ctx = chain_navigator.new_context()
        tree = chain_navigator.build_tree(ctx)
        chain_navigator.focus(ctx, tree.find("C").key)

        rewound = chain_navigator.rewind(ctx, 1)

        assert rewound.root.id == "A"
        assert [entry.id for entry in ctx.visited] == ["R", "A"]
        assert ctx.max_depth == 3

    def test_rewind_out_of_range(self, chain_navigator):
        ctx = chain_navigator.new_context()
        chain_navigator.build_tree(ctx)
        assert chain_navigator.rewind(ctx, 5) is None
        assert [entry.id for entry in ctx.visited] == ["R"]

    def test_focus_leaf_without_children(self, navigator):
        ctx = navigator.new_context()
        tree = navigator.build_tree(ctx, depth=1)
        assert navigator.focus(ctx, tree.find("C").key) is None
        assert ctx.root_id == "A"

    def test_focus_root_is_noop(self, navigator):
        ctx = navigator.new_context()
        tree = navigator.build_tree(ctx)
        assert navigator.focus(ctx, tree.root.key) is tree
        assert len(ctx.visited) == 1

    def test_focus_child_of_root(self, navigator):
        ctx = navigator.new_context()
        tree = navigator.build_tree(ctx, depth=1)
        navigator.focus(ctx, tree.find("B").key)
        assert ctx.breadcrumb == ["Animal", "Bird"]
        assert navigator.circle_tree.root.id == "B"


# =============================================================================
# Paths
# =============================================================================


class TestPathSelection:
    """Tests for path selection and the path views."""

    def test_select_path(self, navigator):
        ctx = navigator.new_context()
        path = navigator.find_path("D", "C")
        navigator.select_path(ctx, path)

        assert ctx.active_path is path
        assert ctx.root_id == "A"
        assert ctx.depth == 3
        assert ctx.left_mapping == ["D"]
        assert ctx.right_mapping == ["C"]
        assert ctx.breadcrumb == ["Animal"]

    def test_path_tree_view_is_pruned(self, settings):
        navigator = HierarchyNavigator.from_edges(
            [("B", "A"), ("C", "A"), ("D", "B"), ("E", "B")],
            settings=settings,
        )
        ctx = navigator.new_context()
        navigator.select_path(ctx, navigator.find_path("D", "C"))
        tree = navigator.build_tree_view(ctx)
        assert tree.ids() == {"A", "B", "C", "D"}
        assert ctx.tree_height == 2

    def test_path_tree_view_reaches_past_depth_cap(self):
        edges = [(f"n{i + 1}", f"n{i}") for i in range(8)] + [("X", "n0")]
        navigator = HierarchyNavigator.from_edges(edges, settings=Settings(root_id="n0"))
        ctx = navigator.new_context()
        path = navigator.find_path("n8", "X")
        assert (path.up, path.down) == (8, 1)

        navigator.select_path(ctx, path)
        tree = navigator.build_tree_view(ctx)

        assert tree.ids() == set(path.vertices)
        assert tree.find("n8").depth == 8
        assert ctx.tree_height == 8

    def test_path_highlight_in_tree_layout(self, navigator, bounds):
        ctx = navigator.new_context()
        navigator.select_path(ctx, navigator.find_path("D", "C"))
        navigator.build_tree_view(ctx)
        layout = navigator.recompute_tree_layout(ctx, bounds)
        fills = {circle.id: circle.fill for circle in layout.circles}
        assert fills["D"] == "rgb(255, 141, 146)"
        assert fills["A"] == "rgb(255, 0, 0)"

    def test_circle_packing_with_path(self, navigator, bounds):
        ctx = navigator.new_context()
        navigator.select_path(ctx, navigator.find_path("D", "C"))
        navigator.build_tree(ctx)
        packing = navigator.recompute_circle_packing(ctx, bounds)

        assert len(packing.circles) == 4
        assert [arrow.node_id for arrow in packing.left_arrows] == ["D"]
        fills = {circle.id: circle.fill for circle in packing.circles}
        assert fills["A"] == "rgb(255, 0, 0)"

    def test_path_strip(self, navigator):
        ctx = navigator.new_context()
        assert navigator.path_strip(ctx, 700) is None
        navigator.select_path(ctx, navigator.find_path("D", "C"))
        strip = navigator.path_strip(ctx, 700)
        assert [node.label for node in strip.nodes] == ["Duck", "Bird", "Animal", "Cat"]

    def test_clear_path(self, navigator):
        ctx = navigator.new_context()
        navigator.select_path(ctx, navigator.find_path("D", "C"))
        navigator.clear_path(ctx)
        assert ctx.active_path is None
        assert ctx.left_mapping == []
        assert navigator.path_strip(ctx, 700) is None
