"""Tree construction, mutation, path finding and layouts for the hierarchy views."""

from .tree_builder import (
    TreeNode,
    HierarchyTree,
    build_tree,
    reachable_depth,
)

from .tree_mutation import (
    expand_node,
    collapse_node,
    collapse_irrelevant_subtrees,
)

from .paths import (
    Direction,
    Path,
    find_path,
    gradient_positions,
    path_colors,
    highlight_paths,
    layout_path_strip,
)

from .circle_pack import (
    choose_padding,
    pack_tree,
)

from .tree_layout import (
    level_widths,
    max_tree_width,
    layout_tree,
)

from .mapping import (
    map_to_active_view,
    pack_mapping_arrows,
    highlight_tree_mapping,
)

from .colors import (
    ColorScale,
    named_color_scale,
    linear_color_scale,
    depth_color_scale,
    path_color_scales,
)

from .schemas import (
    Side,
    Bounds,
    Circle,
    Arrow,
    TreeLayout,
    MappingArrow,
    CirclePacking,
    PathStrip,
)

__all__ = [
    # Tree construction
    "TreeNode",
    "HierarchyTree",
    "build_tree",
    "reachable_depth",
    # Tree mutation
    "expand_node",
    "collapse_node",
    "collapse_irrelevant_subtrees",
    # Paths
    "Direction",
    "Path",
    "find_path",
    "gradient_positions",
    "path_colors",
    "highlight_paths",
    "layout_path_strip",
    # Layouts
    "choose_padding",
    "pack_tree",
    "level_widths",
    "max_tree_width",
    "layout_tree",
    # Mapping
    "map_to_active_view",
    "pack_mapping_arrows",
    "highlight_tree_mapping",
    # Colors
    "ColorScale",
    "named_color_scale",
    "linear_color_scale",
    "depth_color_scale",
    "path_color_scales",
    # Renderer models
    "Side",
    "Bounds",
    "Circle",
    "Arrow",
    "TreeLayout",
    "MappingArrow",
    "CirclePacking",
    "PathStrip",
]
