"""Geometry snapshots and the render bridge contract."""

from forcegraph.render.bridge import LinkVisual, NodeVisual, RenderBridge, SceneBinder
from forcegraph.render.geometry import GeometrySnapshot, LinkGeometry, NodeGeometry, capture_geometry

__all__ = [
    "GeometrySnapshot",
    "LinkGeometry",
    "LinkVisual",
    "NodeGeometry",
    "NodeVisual",
    "RenderBridge",
    "SceneBinder",
    "capture_geometry",
]
