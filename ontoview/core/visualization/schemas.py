"""Renderer-facing layout models.

Every model carries primitives only: renderers get positions, ids and colors,
never references into the engine's graph or trees.
"""

from __future__ import annotations

from enum import Enum
from pydantic import BaseModel, Field


class Side(str, Enum):
    """Canvas edge a mapping arrow starts from."""

    LEFT = "left"
    RIGHT = "right"


class Bounds(BaseModel):
    """Canvas size available to a layout."""

    width: float = Field(..., gt=0, description="Canvas width")
    height: float = Field(..., gt=0, description="Canvas height")


class Circle(BaseModel):
    """One laid-out tree node."""

    key: int = Field(..., description="Tree node key")
    id: str = Field(..., description="Graph node id")
    label: str
    x: float
    y: float
    r: float = Field(..., ge=0)
    depth: int = Field(..., ge=0)
    is_leaf: bool
    expandable: bool = False
    parent: int | None = Field(None, description="Key of the enclosing/parent circle")
    fill: str | None = None


class Arrow(BaseModel):
    """A parent -> child connector in the tree layout."""

    id: int
    source_key: int
    target_key: int
    source_x: float
    source_y: float
    target_x: float
    target_y: float


class TreeLayout(BaseModel):
    """Output of the horizontal tree layout."""

    circles: list[Circle] = Field(default_factory=list)
    arrows: list[Arrow] = Field(default_factory=list)
    width: float = 0.0
    height: float = 0.0


class MappingArrow(BaseModel):
    """Arrow from a canvas edge to a circle that a mapped entity falls under."""

    side: Side
    node_id: str
    target_key: int
    source_x: float
    source_y: float
    target_x: float
    target_y: float
    target_r: float


class CirclePacking(BaseModel):
    """Output of the circle-packing view."""

    circles: list[Circle] = Field(default_factory=list)
    left_arrows: list[MappingArrow] = Field(default_factory=list)
    right_arrows: list[MappingArrow] = Field(default_factory=list)


class PathStripNode(BaseModel):
    """A path vertex in the path strip."""

    id: str
    label: str
    x: float
    y: float
    r: float
    fill: str


class PathStripArrow(BaseModel):
    """Direction glyph between two path strip vertices."""

    x: float
    y: float
    direction: str
    glyph: str


class PathStrip(BaseModel):
    """The selected path laid out on a single line."""

    nodes: list[PathStripNode] = Field(default_factory=list)
    arrows: list[PathStripArrow] = Field(default_factory=list)
    height: float = 0.0
