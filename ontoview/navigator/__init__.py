"""Command surface consumed by the state-management layer."""

from .context import ViewContext, VisitedNode
from .service import HierarchyNavigator

__all__ = [
    "ViewContext",
    "VisitedNode",
    "HierarchyNavigator",
]
