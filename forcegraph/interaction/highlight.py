"""Hover highlight computation driven by graph adjacency."""
from __future__ import annotations

from dataclasses import dataclass
from typing import FrozenSet, Hashable, Optional, Sequence, Tuple

from forcegraph.config import HighlightConfig
from forcegraph.graph.adjacency import AdjacencyIndex
from forcegraph.graph.model import Link, Node


@dataclass(frozen=True)
class NodeHighlight:
    node_id: Hashable
    connected: bool
    opacity: float


@dataclass(frozen=True)
class LinkHighlight:
    index: int
    incident: bool
    opacity: float
    marker: bool


@dataclass(frozen=True)
class LabelHighlight:
    node_id: Hashable
    visible: bool
    size: float
    opacity: float


@dataclass(frozen=True)
class HighlightState:
    """Per-node, per-link and per-label emphasis for one hover session."""

    focus: Optional[Hashable]
    nodes: Tuple[NodeHighlight, ...]
    links: Tuple[LinkHighlight, ...]
    labels: Tuple[LabelHighlight, ...]
    transition_ms: int = 0

    @property
    def highlighted_ids(self) -> FrozenSet[Hashable]:
        return frozenset(entry.node_id for entry in self.nodes if entry.connected)

    @property
    def incident_links(self) -> FrozenSet[int]:
        return frozenset(entry.index for entry in self.links if entry.incident)

    def node(self, node_id: Hashable) -> NodeHighlight:
        for entry in self.nodes:
            if entry.node_id == node_id:
                return entry
        raise KeyError(f"Unknown node id: {node_id!r}")

    def link(self, index: int) -> LinkHighlight:
        for entry in self.links:
            if entry.index == index:
                return entry
        raise KeyError(f"Unknown link index: {index}")


def focus_highlight(
    focus: Node,
    nodes: Sequence[Node],
    links: Sequence[Link],
    index: AdjacencyIndex,
    config: HighlightConfig,
) -> HighlightState:
    """Compute emphasis for hovering ``focus``.

    Nodes are highlighted through the adjacency index (which treats a node as
    connected to itself); links are emphasised only when they touch the
    focused node directly.

    Args:
        focus: Node under the pointer.
        nodes: Every node in the diagram.
        links: Every resolved link.
        index: Adjacency lookup built from the raw link list.
        config: Opacity and label settings.

    Returns:
        HighlightState: Fresh state independent of any earlier hover.
    """

    node_entries = []
    label_entries = []
    for node in nodes:
        connected = index.is_connected(node.id, focus.id)
        node_entries.append(
            NodeHighlight(
                node_id=node.id,
                connected=connected,
                opacity=1.0 if connected else config.fade_opacity,
            )
        )
        label_entries.append(
            LabelHighlight(
                node_id=node.id,
                visible=connected,
                size=config.label_size_focused if connected else 0.0,
                opacity=1.0 if connected else 0.0,
            )
        )
    link_entries = []
    for link in links:
        incident = link.touches(focus)
        link_entries.append(
            LinkHighlight(
                index=link.index,
                incident=incident,
                opacity=config.incident_link_opacity if incident else config.faded_link_opacity,
                marker=incident,
            )
        )
    return HighlightState(
        focus=focus.id,
        nodes=tuple(node_entries),
        links=tuple(link_entries),
        labels=tuple(label_entries),
        transition_ms=config.transition_ms,
    )


def neutral_highlight(nodes: Sequence[Node], links: Sequence[Link], config: HighlightConfig) -> HighlightState:
    """Return the all-visible state shown when nothing is hovered."""

    return HighlightState(
        focus=None,
        nodes=tuple(NodeHighlight(node_id=node.id, connected=False, opacity=1.0) for node in nodes),
        links=tuple(
            LinkHighlight(index=link.index, incident=False, opacity=config.link_opacity, marker=False)
            for link in links
        ),
        labels=tuple(
            LabelHighlight(
                node_id=node.id,
                visible=True,
                size=config.label_size_default,
                opacity=config.label_opacity,
            )
            for node in nodes
        ),
        transition_ms=config.transition_ms,
    )


__all__ = [
    "HighlightState",
    "LabelHighlight",
    "LinkHighlight",
    "NodeHighlight",
    "focus_highlight",
    "neutral_highlight",
]
