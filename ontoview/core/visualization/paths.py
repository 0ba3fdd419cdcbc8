"""
Path Finder - directed paths between two ontology entities.

A path climbs from the start entity to a common ancestor (the pivot) and
descends to the end entity. It is computed on the graph, not on a displayed
tree, so both endpoints may lie outside the current view and either may have
several ancestor chains.
"""

from __future__ import annotations

import logging
from collections import deque
from collections.abc import Iterable
from enum import Enum

from pydantic import BaseModel, Field, model_validator

from ontoview.core.config import Settings, get_settings
from ontoview.core.ontology.graph import OntologyGraph
from .colors import ColorScale, path_color_scales
from .schemas import Circle, PathStrip, PathStripArrow, PathStripNode

logger = logging.getLogger(__name__)


class Direction(str, Enum):
    """Direction of one path edge relative to the root."""

    UP = "up"
    DOWN = "down"

    @property
    def glyph(self) -> str:
        return "↑" if self is Direction.UP else "↓"

    def flipped(self) -> Direction:
        return Direction.DOWN if self is Direction.UP else Direction.UP


class Path(BaseModel):
    """An up-then-down walk between two graph nodes."""

    vertices: tuple[str, ...] = Field(..., min_length=1)
    directions: tuple[Direction, ...] = ()
    up: int = Field(0, ge=0, description="Edges climbed before the pivot")
    down: int = Field(0, ge=0, description="Edges descended after the pivot")
    height: int = Field(0, ge=0, description="Total edge count")

    model_config = {"frozen": True}

    @model_validator(mode="after")
    def _check_shape(self) -> Path:
        if self.height != self.up + self.down:
            raise ValueError("height must equal up + down")
        if len(self.vertices) != self.height + 1:
            raise ValueError("a path of height h has h + 1 vertices")
        if len(self.directions) != self.height:
            raise ValueError("a path of height h has h directions")
        return self

    @classmethod
    def from_segments(cls, climb: list[str], descent: list[str]) -> Path:
        """Join ``start..pivot`` and ``pivot..end`` (both include the pivot)."""
        up = len(climb) - 1
        down = len(descent) - 1
        return cls(
            vertices=tuple(climb + descent[1:]),
            directions=(Direction.UP,) * up + (Direction.DOWN,) * down,
            up=up,
            down=down,
            height=up + down,
        )

    @property
    def start_id(self) -> str:
        return self.vertices[0]

    @property
    def end_id(self) -> str:
        return self.vertices[-1]

    @property
    def pivot(self) -> str:
        """The common ancestor where the path turns."""
        return self.vertices[self.up]

    def reversed(self) -> Path:
        """The same path walked from the end back to the start."""
        return Path(
            vertices=tuple(reversed(self.vertices)),
            directions=tuple(d.flipped() for d in reversed(self.directions)),
            up=self.down,
            down=self.up,
            height=self.height,
        )


# =============================================================================
# Path Computation
# =============================================================================


def _climb(graph: OntologyGraph, start_id: str) -> tuple[dict[str, int], dict[str, str]]:
    """Breadth-first walk over parents.

    Returns distances to every ancestor (and 0 for the start) plus, for each
    ancestor, the node one step closer to the start. A revisited id ends that
    branch, so back-edges in the raw data cannot make the walk loop.
    """
    distance = {start_id: 0}
    toward_start: dict[str, str] = {}
    queue: deque[str] = deque([start_id])

    while queue:
        node_id = queue.popleft()
        node = graph.nodes[node_id]
        for parent_id in node.parents:
            if parent_id in distance:
                if parent_id == start_id or parent_id in _chain(toward_start, node_id):
                    logger.warning("Cycle through %s above %s, truncating branch", parent_id, start_id)
                continue
            distance[parent_id] = distance[node_id] + 1
            toward_start[parent_id] = node_id
            queue.append(parent_id)

    return distance, toward_start


def _chain(toward_start: dict[str, str], node_id: str) -> list[str]:
    """``node_id`` and its predecessors back to the walk's start."""
    chain = [node_id]
    while chain[-1] in toward_start:
        chain.append(toward_start[chain[-1]])
    return chain


def find_path(graph: OntologyGraph, start_id: str, end_id: str) -> Path | None:
    """Find the shortest up-then-down path between two graph nodes.

    The pivot is the common ancestor minimizing total path length; ties go to
    the smaller pivot id, which keeps ``find_path(a, b)`` and
    ``find_path(b, a)`` mirror images of each other.

    Returns:
        Path, or None if either id is unknown or the nodes share no ancestor
    """
    if graph.is_empty:
        return None
    if start_id not in graph or end_id not in graph:
        logger.debug("No path: %s or %s is not in the graph", start_id, end_id)
        return None

    start_distance, start_links = _climb(graph, start_id)
    end_distance, end_links = _climb(graph, end_id)

    common = start_distance.keys() & end_distance.keys()
    if not common:
        logger.debug("No common ancestor for %s and %s", start_id, end_id)
        return None

    pivot = min(common, key=lambda node_id: (start_distance[node_id] + end_distance[node_id], node_id))

    climb = list(reversed(_chain(start_links, pivot)))
    descent = _chain(end_links, pivot)
    return Path.from_segments(climb, descent)


# =============================================================================
# Highlighting
# =============================================================================


def gradient_positions(path: Path) -> list[tuple[Direction, float]]:
    """Segment and position within that segment for every path vertex.

    Vertices ``0..up`` spread over ``[0, 1]`` of the up segment; the remaining
    vertices spread over ``(0, 1]`` of the down segment, so the pivot sits at
    the end of the first range.
    """
    positions: list[tuple[Direction, float]] = []
    for index in range(len(path.vertices)):
        if index <= path.up:
            positions.append((Direction.UP, index / path.up if path.up else 1.0))
        else:
            positions.append((Direction.DOWN, (index - path.up) / path.down))
    return positions


def path_colors(
    path: Path,
    up_scale: ColorScale | None = None,
    down_scale: ColorScale | None = None,
) -> list[str]:
    """Color for every path vertex along the two-segment gradient."""
    default_up, default_down = path_color_scales()
    up_scale = up_scale or default_up
    down_scale = down_scale or default_down
    return [
        up_scale(position) if segment is Direction.UP else down_scale(position)
        for segment, position in gradient_positions(path)
    ]


def highlight_paths(
    circles: Iterable[Circle],
    path: Path,
    up_scale: ColorScale | None = None,
    down_scale: ColorScale | None = None,
) -> list[Circle]:
    """Recolor the circles of path vertices; others keep their fill."""
    colors = dict(zip(path.vertices, path_colors(path, up_scale, down_scale)))
    return [
        circle.model_copy(update={"fill": colors[circle.id]}) if circle.id in colors else circle
        for circle in circles
    ]


def layout_path_strip(
    path: Path,
    width: float,
    labels: OntologyGraph | None = None,
    settings: Settings | None = None,
    up_scale: ColorScale | None = None,
    down_scale: ColorScale | None = None,
) -> PathStrip:
    """Lay the path out on one line: vertex, arrow, vertex, ...

    Args:
        path: Path to show
        width: Strip width
        labels: Graph used to resolve vertex labels (ids are used otherwise)
        settings: Strip height and vertex radius
    """
    settings = settings or get_settings()
    colors = path_colors(path, up_scale, down_scale)

    count = 2 * len(path.vertices) + len(path.directions)
    step = 2 * width / count
    space = step / 2
    y = settings.path_strip_height / 2

    nodes = [
        PathStripNode(
            id=vertex,
            label=labels.label_of(vertex) if labels else vertex,
            x=i * step + i * space + step / 2,
            y=y,
            r=settings.path_strip_radius,
            fill=colors[i],
        )
        for i, vertex in enumerate(path.vertices)
    ]
    arrows = [
        PathStripArrow(
            x=(i + 1) * step + i * space + space / 2,
            y=y,
            direction=direction.value,
            glyph=direction.glyph,
        )
        for i, direction in enumerate(path.directions)
    ]
    return PathStrip(nodes=nodes, arrows=arrows, height=settings.path_strip_height)
