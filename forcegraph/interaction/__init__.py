"""Pointer input payloads and hover highlight state.

The controller lives in :mod:`forcegraph.interaction.controller` and is
imported from there, since it depends on the simulation and render layers.
"""

from forcegraph.interaction.events import DragEvent, HoverEvent, PanEvent, ResizeEvent, WheelEvent, ZoomEvent
from forcegraph.interaction.highlight import HighlightState, focus_highlight, neutral_highlight

__all__ = [
    "DragEvent",
    "HighlightState",
    "HoverEvent",
    "PanEvent",
    "ResizeEvent",
    "WheelEvent",
    "ZoomEvent",
    "focus_highlight",
    "neutral_highlight",
]
