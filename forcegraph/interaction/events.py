"""Input event payloads dispatched by the host container."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable, Optional

RESIZE = "resize"
MOUSEOVER = "mouseover"
MOUSEOUT = "mouseout"
DRAG_START = "dragstart"
DRAG = "drag"
DRAG_END = "dragend"
ZOOM = "zoom"
PAN = "pan"
WHEEL = "wheel"

EVENT_TYPES = (RESIZE, MOUSEOVER, MOUSEOUT, DRAG_START, DRAG, DRAG_END, ZOOM, PAN, WHEEL)


@dataclass(frozen=True)
class HoverEvent:
    """Pointer entered or left a node."""

    node_id: Optional[Hashable] = None


@dataclass(frozen=True)
class DragEvent:
    """Drag gesture on a node; coordinates are in simulation space."""

    node_id: Hashable
    x: float = 0.0
    y: float = 0.0


@dataclass(frozen=True)
class ZoomEvent:
    """Absolute zoom request around a screen-space focal point."""

    scale: float
    x: Optional[float] = None
    y: Optional[float] = None


@dataclass(frozen=True)
class PanEvent:
    """Screen-space translation of the view."""

    dx: float
    dy: float


@dataclass(frozen=True)
class WheelEvent:
    """Mouse wheel movement at a screen position."""

    delta_y: float
    x: Optional[float] = None
    y: Optional[float] = None
    delta_mode: int = 0


@dataclass(frozen=True)
class ResizeEvent:
    """New size of the host container."""

    width: float
    height: float


__all__ = [
    "DRAG",
    "DRAG_END",
    "DRAG_START",
    "DragEvent",
    "EVENT_TYPES",
    "HoverEvent",
    "MOUSEOUT",
    "MOUSEOVER",
    "PAN",
    "PanEvent",
    "RESIZE",
    "ResizeEvent",
    "WHEEL",
    "WheelEvent",
    "ZOOM",
    "ZoomEvent",
]
