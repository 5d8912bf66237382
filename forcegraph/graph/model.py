"""Mutable simulation graph built from validated payloads."""
from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Union

from pydantic import ValidationError

from forcegraph.contracts import GraphPayload, LinkRecord, NodeId, NodeRecord

LOGGER = logging.getLogger(__name__)


class GraphLoadError(RuntimeError):
    """Raised when graph data cannot be turned into a simulation graph."""


@dataclass(eq=False)
class Node:
    """Graph node carrying display data and mutable simulation state."""

    id: NodeId
    value: float
    categories: Optional[Union[int, str]] = None
    label: Optional[str] = None
    title: Optional[str] = None
    image: Optional[str] = None
    index: int = 0
    x: float = math.nan
    y: float = math.nan
    vx: float = 0.0
    vy: float = 0.0
    fx: Optional[float] = None
    fy: Optional[float] = None

    @property
    def pinned(self) -> bool:
        return self.fx is not None and self.fy is not None

    @property
    def display_text(self) -> str:
        """Return the title when present, otherwise the label."""

        return self.title or self.label or ""

    def radius(self, radius_min: float = 14.0, radius_max: float = 60.0) -> float:
        """Return the drawn radius derived from the node value."""

        return min(max(self.value / 2.0, radius_min), radius_max)


@dataclass(eq=False)
class Link:
    """Link between two resolved nodes."""

    source: Node
    target: Node
    value: float = 1.0
    index: int = 0

    @property
    def width(self) -> float:
        return math.sqrt(max(self.value, 0.0))

    @property
    def is_self_loop(self) -> bool:
        return self.source is self.target

    def touches(self, node: Node) -> bool:
        """Return whether the node is one of the link endpoints."""

        return self.source is node or self.target is node


@dataclass
class Graph:
    """Static node set and resolved links for one viewer session."""

    nodes: List[Node]
    links: List[Link]
    payload: GraphPayload
    _by_id: Dict[NodeId, Node] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        if not self._by_id:
            self._by_id = {node.id: node for node in self.nodes}

    def node(self, node_id: NodeId) -> Node:
        """Return the node with the given identifier.

        Raises:
            KeyError: If the identifier is unknown.
        """
        try:
            return self._by_id[node_id]
        except KeyError:
            raise KeyError(f"Unknown node id: {node_id!r}") from None

    def __contains__(self, node_id: object) -> bool:
        return node_id in self._by_id


def _coerce_payload(data: Union[GraphPayload, Mapping[str, Any]]) -> GraphPayload:
    if isinstance(data, GraphPayload):
        return data
    if not isinstance(data, Mapping):
        LOGGER.error("Graph data must be a mapping, received %s", type(data).__name__)
        raise GraphLoadError("Graph data must be a mapping with nodes and links")
    try:
        return GraphPayload(**dict(data))
    except ValidationError as exc:
        LOGGER.error("Graph payload failed validation: %s", exc)
        raise GraphLoadError("Graph payload failed validation") from exc


def _build_node(record: NodeRecord) -> Node:
    return Node(
        id=record.id,
        value=record.value,
        categories=record.categories,
        label=record.label,
        title=record.title,
        image=record.image,
    )


def _resolve_link(record: LinkRecord, nodes_by_id: Mapping[NodeId, Node], index: int) -> Link:
    missing = [endpoint for endpoint in (record.source, record.target) if endpoint not in nodes_by_id]
    if missing:
        LOGGER.error(
            "Link %d references unknown node ids %s (source=%r, target=%r)",
            index,
            missing,
            record.source,
            record.target,
        )
        raise GraphLoadError(f"Link {index} references unknown node id {missing[0]!r}")
    return Link(
        source=nodes_by_id[record.source],
        target=nodes_by_id[record.target],
        value=record.value,
        index=index,
    )


def load_graph(data: Union[GraphPayload, Mapping[str, Any]]) -> Graph:
    """Validate graph data and resolve link endpoints to node references.

    Nodes are ordered by ascending value so heavier nodes are drawn last.

    Args:
        data: Raw mapping with ``nodes`` and ``links`` or a validated payload.

    Returns:
        Graph: Nodes with simulation indices and links pointing at them.

    Raises:
        GraphLoadError: If the payload is malformed, a node id is duplicated or a
            link references a node id that is not present.
    """

    payload = _coerce_payload(data)
    nodes_by_id: Dict[NodeId, Node] = {}
    for record in payload.nodes:
        if record.id in nodes_by_id:
            LOGGER.error("Duplicate node id in graph payload: %r", record.id)
            raise GraphLoadError(f"Duplicate node id {record.id!r}")
        nodes_by_id[record.id] = _build_node(record)

    links = [_resolve_link(record, nodes_by_id, index) for index, record in enumerate(payload.links)]

    nodes = sorted(nodes_by_id.values(), key=lambda node: node.value)
    for index, node in enumerate(nodes):
        node.index = index

    LOGGER.info("Loaded graph with %d nodes and %d links", len(nodes), len(links))
    return Graph(nodes=nodes, links=links, payload=payload, _by_id=nodes_by_id)


__all__ = ["Graph", "GraphLoadError", "Link", "Node", "load_graph"]
