"""Translate pointer gestures into simulation, viewport and highlight changes."""
from __future__ import annotations

import logging
import math
from typing import FrozenSet, Hashable, Optional, Set

from forcegraph.config import ViewerConfig
from forcegraph.graph.adjacency import AdjacencyIndex
from forcegraph.graph.model import Node
from forcegraph.interaction.highlight import HighlightState, focus_highlight, neutral_highlight
from forcegraph.layout.simulation import ForceSimulation, SimulationState
from forcegraph.render.bridge import SceneBinder
from forcegraph.viewport.transform import Point, Transform, ViewportTransform

LOGGER = logging.getLogger(__name__)


class InteractionController:
    """Own the hover, drag and zoom behaviour for one diagram.

    Handlers run synchronously: a pin made in ``drag_start`` is visible to the
    very next integration step, and a highlight is pushed to the binder
    before the handler returns.
    """

    def __init__(
        self,
        simulation: ForceSimulation,
        index: AdjacencyIndex,
        viewport: ViewportTransform,
        config: Optional[ViewerConfig] = None,
        binder: Optional[SceneBinder] = None,
    ) -> None:
        self._simulation = simulation
        self._index = index
        self._viewport = viewport
        self._config = config or ViewerConfig()
        self._binder = binder
        self._active_drags: Set[Hashable] = set()
        self._highlight = neutral_highlight(simulation.nodes, simulation.links, self._config.highlight)

    @property
    def highlight(self) -> HighlightState:
        return self._highlight

    @property
    def active_drags(self) -> FrozenSet[Hashable]:
        return frozenset(self._active_drags)

    def hover_enter(self, node_id: Hashable) -> HighlightState:
        """Emphasise the hovered node, its neighbours and its incident links.

        Raises:
            KeyError: If the node id is unknown.
        """

        focus = self._simulation.node(node_id)
        state = focus_highlight(
            focus,
            self._simulation.nodes,
            self._simulation.links,
            self._index,
            self._config.highlight,
        )
        LOGGER.debug("Hover on %r highlights %d nodes", node_id, len(state.highlighted_ids))
        return self._show(state)

    def hover_exit(self) -> HighlightState:
        """Return every node, link and label to its resting appearance."""

        state = neutral_highlight(self._simulation.nodes, self._simulation.links, self._config.highlight)
        return self._show(state)

    def drag_start(self, node_id: Hashable, x: float, y: float) -> Node:
        """Reheat the simulation and pin the node under the pointer."""

        node = self._simulation.node(node_id)
        if not self._active_drags:
            self._simulation.alpha_target = self._config.simulation.drag_alpha_target
        if self._simulation.state is SimulationState.IDLE:
            self._simulation.restart()
        self._active_drags.add(node_id)
        LOGGER.debug("Drag started on %r at (%.2f, %.2f)", node_id, x, y)
        return self._simulation.pin(node_id, x, y)

    def drag_move(self, node_id: Hashable, x: float, y: float) -> Node:
        """Follow the pointer with a node that is being dragged.

        A move for a node with no active drag is ignored and leaves it unpinned.
        """

        node = self._simulation.node(node_id)
        if node_id not in self._active_drags:
            LOGGER.warning("Ignoring drag move for %r without a drag start", node_id)
            return node
        return self._simulation.pin(node_id, x, y)

    def drag_end(self, node_id: Hashable) -> Node:
        """Release the node and let the simulation cool once no drag remains."""

        node = self._simulation.node(node_id)
        self._active_drags.discard(node_id)
        if not self._active_drags:
            self._simulation.alpha_target = 0.0
        LOGGER.debug("Drag ended on %r", node_id)
        return self._simulation.unpin(node.id)

    def zoom(self, scale: float, focal_point: Optional[Point] = None) -> Transform:
        return self._viewport.zoom_to(scale, focal_point)

    def pan(self, dx: float, dy: float) -> Transform:
        return self._viewport.pan_by(dx, dy)

    def wheel(self, delta_y: float, point: Optional[Point] = None, delta_mode: int = 0) -> Transform:
        return self._viewport.wheel(delta_y, point, delta_mode)

    def node_at(self, screen_x: float, screen_y: float) -> Optional[Node]:
        """Return the topmost node whose circle contains the screen point, if any.

        Nodes are drawn in ascending value order, so the last match wins.
        """

        x, y = self._viewport.screen_to_simulation((screen_x, screen_y))
        style = self._config.nodes
        for node in reversed(self._simulation.nodes):
            if math.hypot(node.x - x, node.y - y) <= node.radius(style.radius_min, style.radius_max):
                return node
        return None

    def _show(self, state: HighlightState) -> HighlightState:
        self._highlight = state
        if self._binder is not None:
            self._binder.apply_highlight(state)
        return state


__all__ = ["InteractionController"]
