"""Contract for the external renderer and the glue that feeds it."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Dict, Hashable, Optional, Sequence

from typing_extensions import Protocol

from forcegraph.config import ViewerConfig
from forcegraph.graph.model import Link, Node
from forcegraph.interaction.highlight import HighlightState
from forcegraph.render.geometry import GeometrySnapshot
from forcegraph.viewport.transform import Transform

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class NodeVisual:
    """Static drawing attributes for a node; absent fields are empty strings."""

    node_id: Hashable
    radius: float
    category: Optional[Any]
    text: str
    image: str


@dataclass(frozen=True)
class LinkVisual:
    """Static drawing attributes for a link."""

    index: int
    source_id: Hashable
    target_id: Hashable
    width: float
    opacity: float


class RenderBridge(Protocol):
    """Drawing service consumed by the viewer; it is never read back."""

    def create_node(self, visual: NodeVisual) -> Any:
        """Create the visual for a node and return an opaque handle."""

    def create_link(self, visual: LinkVisual) -> Any:
        """Create the visual for a link and return an opaque handle."""

    def update_node_position(self, handle: Any, x: float, y: float) -> None:
        """Move a node visual to simulation coordinates."""

    def update_link_endpoints(self, handle: Any, x1: float, y1: float, x2: float, y2: float) -> None:
        """Move both ends of a link visual."""

    def set_opacity(self, handle: Any, value: float, *, duration_ms: int = 0) -> None:
        """Fade a node or link visual."""

    def set_link_marker(self, handle: Any, visible: bool, *, duration_ms: int = 0) -> None:
        """Show or hide the arrow marker at the end of a link."""

    def set_label(self, handle: Any, size: float, opacity: float, *, duration_ms: int = 0) -> None:
        """Resize and fade the label attached to a node."""

    def apply_viewport_transform(self, transform: Transform) -> None:
        """Apply zoom and pan to all rendered geometry."""


def node_visual(node: Node, config: ViewerConfig) -> NodeVisual:
    return NodeVisual(
        node_id=node.id,
        radius=node.radius(config.nodes.radius_min, config.nodes.radius_max),
        category=node.categories,
        text=node.display_text,
        image=node.image or "",
    )


def link_visual(link: Link, config: ViewerConfig) -> LinkVisual:
    return LinkVisual(
        index=link.index,
        source_id=link.source.id,
        target_id=link.target.id,
        width=link.width,
        opacity=config.highlight.link_opacity,
    )


class SceneBinder:
    """Create render handles once and push geometry, highlight and viewport updates."""

    def __init__(self, bridge: RenderBridge, config: ViewerConfig) -> None:
        self._bridge = bridge
        self._config = config
        self._node_handles: Dict[Hashable, Any] = {}
        self._link_handles: Dict[int, Any] = {}
        self._geometry: Optional[GeometrySnapshot] = None

    @property
    def geometry(self) -> Optional[GeometrySnapshot]:
        return self._geometry

    def mount(self, nodes: Sequence[Node], links: Sequence[Link]) -> None:
        """Create a visual for every link and node, links first so nodes draw on top."""

        for link in links:
            self._link_handles[link.index] = self._bridge.create_link(link_visual(link, self._config))
        for node in nodes:
            self._node_handles[node.id] = self._bridge.create_node(node_visual(node, self._config))
        LOGGER.debug("Mounted %d node and %d link visuals", len(self._node_handles), len(self._link_handles))

    def apply_geometry(self, snapshot: GeometrySnapshot) -> None:
        self._geometry = snapshot
        for link in snapshot.links:
            handle = self._link_handles.get(link.index)
            if handle is not None:
                self._bridge.update_link_endpoints(handle, link.x1, link.y1, link.x2, link.y2)
        for node in snapshot.nodes:
            handle = self._node_handles.get(node.node_id)
            if handle is not None:
                self._bridge.update_node_position(handle, node.x, node.y)

    def apply_viewport(self, transform: Transform) -> None:
        """Apply the transform, then re-apply the latest geometry."""

        self._bridge.apply_viewport_transform(transform)
        if self._geometry is not None:
            self.apply_geometry(self._geometry)

    def apply_highlight(self, state: HighlightState) -> None:
        duration = state.transition_ms
        for entry in state.nodes:
            self._bridge.set_opacity(self._node_handles[entry.node_id], entry.opacity, duration_ms=duration)
        for entry in state.links:
            handle = self._link_handles[entry.index]
            self._bridge.set_opacity(handle, entry.opacity, duration_ms=duration)
            self._bridge.set_link_marker(handle, entry.marker, duration_ms=duration)
        for entry in state.labels:
            self._bridge.set_label(
                self._node_handles[entry.node_id],
                entry.size,
                entry.opacity,
                duration_ms=duration,
            )


__all__ = ["LinkVisual", "NodeVisual", "RenderBridge", "SceneBinder", "link_visual", "node_visual"]
