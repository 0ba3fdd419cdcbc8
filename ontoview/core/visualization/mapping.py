"""Mapping arrows - point entities of another ontology at the current view.

Entities mapped onto this ontology (for instance from a left-hand and a
right-hand source) are usually not visible themselves. Each one is traced up
the graph to the nearest visible ancestor and an arrow is drawn from the
corresponding canvas edge to that circle.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable

from ontoview.core.ontology.graph import OntologyGraph
from .schemas import Bounds, Circle, MappingArrow, Side

logger = logging.getLogger(__name__)


def map_to_active_view(
    node_ids: Iterable[str],
    graph: OntologyGraph,
    visible_ids: set[str],
) -> list[str]:
    """Nearest visible node (or nodes) for every mapped id.

    Walks parents breadth-first from each id, stopping a branch as soon as it
    reaches a visible node. Revisited ids end their branch.

    Returns:
        Visible ids in first-reached order, without duplicates
    """
    result: list[str] = []
    for node_id in node_ids:
        if node_id not in graph:
            logger.debug("Mapped id %s is not in the graph", node_id)
            continue

        seen = {node_id}
        queue: deque[str] = deque([node_id])
        while queue:
            current = queue.popleft()
            if current in visible_ids:
                if current not in result:
                    result.append(current)
                continue
            for parent_id in graph.nodes[current].parents:
                if parent_id not in seen:
                    seen.add(parent_id)
                    queue.append(parent_id)
    return result


def pack_mapping_arrows(
    circles: list[Circle],
    node_ids: Iterable[str],
    graph: OntologyGraph,
    bounds: Bounds,
    side: Side,
    depth: int | None = None,
) -> list[MappingArrow]:
    """Arrows from a canvas edge to the circles mapped ids fall under.

    Args:
        circles: Current circle layout
        node_ids: Mapped entity ids
        graph: Node registry
        bounds: Canvas size; arrows start at mid-height of the chosen edge
        side: Edge the arrows start from
        depth: Only circles on this level are targets (all circles if None)
    """
    targets = [circle for circle in circles if depth is None or circle.depth == depth]
    by_id: dict[str, Circle] = {}
    for circle in targets:
        by_id.setdefault(circle.id, circle)

    source_x = 0.0 if side is Side.LEFT else bounds.width
    source_y = bounds.height / 2

    arrows = []
    for node_id in map_to_active_view(node_ids, graph, set(by_id)):
        circle = by_id[node_id]
        arrows.append(
            MappingArrow(
                side=side,
                node_id=node_id,
                target_key=circle.key,
                source_x=source_x,
                source_y=source_y,
                target_x=circle.x,
                target_y=circle.y,
                target_r=circle.r,
            )
        )
    return arrows


def highlight_tree_mapping(
    circles: list[Circle],
    left_ids: Iterable[str],
    right_ids: Iterable[str],
    graph: OntologyGraph,
    left_color: str,
    right_color: str,
) -> list[Circle]:
    """Tint the circles mapped ids fall under; right-hand mappings win ties."""
    visible = {circle.id for circle in circles}
    fills = {node_id: left_color for node_id in map_to_active_view(left_ids, graph, visible)}
    fills.update({node_id: right_color for node_id in map_to_active_view(right_ids, graph, visible)})
    return [
        circle.model_copy(update={"fill": fills[circle.id]}) if circle.id in fills else circle
        for circle in circles
    ]
