"""Viewport zoom and pan state."""

from forcegraph.viewport.transform import IDENTITY, Transform, ViewportTransform

__all__ = ["IDENTITY", "Transform", "ViewportTransform"]
