"""Plain geometry snapshots handed from the simulation to the renderer."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable, Iterable, Optional, Tuple

from forcegraph.graph.model import Link, Node


@dataclass(frozen=True)
class NodeGeometry:
    """Position of a single node in simulation space."""

    node_id: Hashable
    index: int
    x: float
    y: float


@dataclass(frozen=True)
class LinkGeometry:
    """Endpoints of a single link in simulation space."""

    index: int
    source_id: Hashable
    target_id: Hashable
    x1: float
    y1: float
    x2: float
    y2: float


@dataclass(frozen=True)
class GeometrySnapshot:
    """Node positions and link endpoints captured after a tick."""

    nodes: Tuple[NodeGeometry, ...]
    links: Tuple[LinkGeometry, ...]
    alpha: float

    def node(self, node_id: Hashable) -> Optional[NodeGeometry]:
        for entry in self.nodes:
            if entry.node_id == node_id:
                return entry
        return None

    def bounds(self) -> Tuple[float, float, float, float]:
        """Return ``(min_x, min_y, max_x, max_y)`` over all node positions."""

        if not self.nodes:
            return 0.0, 0.0, 0.0, 0.0
        xs = [entry.x for entry in self.nodes]
        ys = [entry.y for entry in self.nodes]
        return min(xs), min(ys), max(xs), max(ys)


def capture_geometry(nodes: Iterable[Node], links: Iterable[Link], alpha: float) -> GeometrySnapshot:
    """Copy the current simulation state into an immutable snapshot."""

    node_entries = tuple(NodeGeometry(node_id=node.id, index=node.index, x=node.x, y=node.y) for node in nodes)
    link_entries = tuple(
        LinkGeometry(
            index=link.index,
            source_id=link.source.id,
            target_id=link.target.id,
            x1=link.source.x,
            y1=link.source.y,
            x2=link.target.x,
            y2=link.target.y,
        )
        for link in links
    )
    return GeometrySnapshot(nodes=node_entries, links=link_entries, alpha=alpha)


__all__ = ["GeometrySnapshot", "LinkGeometry", "NodeGeometry", "capture_geometry"]
