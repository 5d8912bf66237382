"""Mount a graph into a host container and tear it down again."""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Callable, List, Mapping, Optional, Tuple, Union

from typing_extensions import Protocol

from forcegraph.config import ViewerConfig, load_config
from forcegraph.contracts import GraphPayload
from forcegraph.graph.adjacency import AdjacencyIndex
from forcegraph.graph.model import Graph, load_graph
from forcegraph.host.scheduler import AsyncioFrameScheduler, FrameScheduler
from forcegraph.interaction import events
from forcegraph.interaction.controller import InteractionController
from forcegraph.layout.simulation import TICK_EVENT, ForceSimulation
from forcegraph.render.bridge import RenderBridge, SceneBinder
from forcegraph.viewport.transform import ViewportTransform

LOGGER = logging.getLogger(__name__)

EventHandler = Callable[[Any], None]


class Container(Protocol):
    """Event source and size provider the diagram is mounted into."""

    def add_listener(self, event_type: str, handler: EventHandler) -> None:
        """Register ``handler`` for ``event_type``."""

    def remove_listener(self, event_type: str, handler: EventHandler) -> None:
        """Remove a handler registered with :meth:`add_listener`."""

    def size(self) -> Tuple[float, float]:
        """Return the current ``(width, height)`` of the container."""


class GraphSession:
    """Live diagram bound to a container; ``destroy()`` is the single teardown path."""

    def __init__(
        self,
        container: Container,
        graph: Graph,
        index: AdjacencyIndex,
        simulation: ForceSimulation,
        viewport: ViewportTransform,
        controller: InteractionController,
        binder: SceneBinder,
        config: ViewerConfig,
    ) -> None:
        self.container = container
        self.graph = graph
        self.index = index
        self.simulation = simulation
        self.viewport = viewport
        self.controller = controller
        self.binder = binder
        self.config = config
        self._listeners: List[Tuple[str, EventHandler]] = []
        self._unsubscribers: List[Callable[[], None]] = []
        self._destroyed = False

    @property
    def destroyed(self) -> bool:
        return self._destroyed

    def listen(self, event_type: str, handler: EventHandler) -> None:
        self.container.add_listener(event_type, handler)
        self._listeners.append((event_type, handler))

    def track(self, unsubscribe: Callable[[], None]) -> None:
        self._unsubscribers.append(unsubscribe)

    def resize(self, width: float, height: float) -> None:
        """Adopt a new container size for the canvas, viewport and centering force."""

        self.config = self.config.with_canvas(width, height)
        self.viewport.set_extent(width, height)
        self.simulation.set_center(*self.config.canvas.center)
        LOGGER.debug("Canvas resized to %.0fx%.0f", width, height)

    def destroy(self) -> None:
        """Remove every listener and cancel the frame callback; safe to call twice."""

        if self._destroyed:
            return
        self._destroyed = True
        for event_type, handler in self._listeners:
            self.container.remove_listener(event_type, handler)
        self._listeners.clear()
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers.clear()
        self.simulation.stop()
        LOGGER.info("Graph session destroyed after %d ticks", self.simulation.ticks)


def _resolve_config(
    config: Optional[Union[ViewerConfig, Mapping[str, Any]]],
    container: Container,
) -> ViewerConfig:
    if config is None:
        resolved = load_config()
    elif isinstance(config, ViewerConfig):
        resolved = config
    else:
        resolved = ViewerConfig.from_mapping(config)
    width, height = container.size()
    if width > 0 and height > 0:
        resolved = resolved.with_canvas(width, height)
    else:
        LOGGER.warning("Container reported size %sx%s; keeping configured canvas", width, height)
    return resolved


def _register_listeners(session: GraphSession) -> None:
    controller = session.controller

    def on_resize(event: events.ResizeEvent) -> None:
        session.resize(event.width, event.height)

    def on_mouseover(event: events.HoverEvent) -> None:
        if event.node_id is None:
            LOGGER.warning("Ignoring mouseover without a node id")
            return
        controller.hover_enter(event.node_id)

    def on_mouseout(event: events.HoverEvent) -> None:
        controller.hover_exit()

    def on_drag_start(event: events.DragEvent) -> None:
        controller.drag_start(event.node_id, event.x, event.y)

    def on_drag(event: events.DragEvent) -> None:
        controller.drag_move(event.node_id, event.x, event.y)

    def on_drag_end(event: events.DragEvent) -> None:
        controller.drag_end(event.node_id)

    def on_zoom(event: events.ZoomEvent) -> None:
        point = None if event.x is None or event.y is None else (event.x, event.y)
        controller.zoom(event.scale, point)

    def on_pan(event: events.PanEvent) -> None:
        controller.pan(event.dx, event.dy)

    def on_wheel(event: events.WheelEvent) -> None:
        point = None if event.x is None or event.y is None else (event.x, event.y)
        controller.wheel(event.delta_y, point, event.delta_mode)

    session.listen(events.RESIZE, on_resize)
    session.listen(events.MOUSEOVER, on_mouseover)
    session.listen(events.MOUSEOUT, on_mouseout)
    session.listen(events.DRAG_START, on_drag_start)
    session.listen(events.DRAG, on_drag)
    session.listen(events.DRAG_END, on_drag_end)
    session.listen(events.ZOOM, on_zoom)
    session.listen(events.PAN, on_pan)
    session.listen(events.WHEEL, on_wheel)


def create(
    container: Container,
    data: Union[GraphPayload, Mapping[str, Any]],
    config: Optional[Union[ViewerConfig, Mapping[str, Any]]] = None,
    *,
    bridge: RenderBridge,
    scheduler: Optional[FrameScheduler] = None,
) -> GraphSession:
    """Validate the graph, mount its visuals and start the simulation.

    Args:
        container: Event source the diagram listens to.
        data: Graph mapping with ``nodes`` and ``links``.
        config: Viewer configuration, a partial mapping over the defaults, or
            ``None`` to load ``config.yaml``.
        bridge: Renderer receiving geometry, highlight and viewport updates.
        scheduler: Frame scheduler; defaults to the running asyncio loop.

    Returns:
        GraphSession: Handle exposing the simulation, controller and viewport.

    Raises:
        GraphLoadError: If the graph data is invalid. Nothing is mounted and no
            simulation is created in that case.
        ConfigError: If the configuration cannot be loaded or validated.
        RuntimeError: If no scheduler is given and no asyncio loop is running.
            Nothing is mounted in that case.
    """

    resolved = _resolve_config(config, container)
    graph = load_graph(data)
    index = AdjacencyIndex.build(graph.payload.links)
    if scheduler is None:
        scheduler = AsyncioFrameScheduler(asyncio.get_running_loop())

    binder = SceneBinder(bridge, resolved)
    binder.mount(graph.nodes, graph.links)

    viewport = ViewportTransform.from_config(resolved.zoom, resolved.canvas)
    simulation = ForceSimulation(
        graph.nodes,
        graph.links,
        config=resolved.simulation,
        center=resolved.canvas.center,
        scheduler=scheduler,
        autostart=False,
    )
    controller = InteractionController(simulation, index, viewport, resolved, binder)
    session = GraphSession(container, graph, index, simulation, viewport, controller, binder, resolved)

    try:
        session.track(simulation.on(TICK_EVENT, binder.apply_geometry))
        session.track(viewport.subscribe(binder.apply_viewport))
        binder.apply_geometry(simulation.snapshot)
        binder.apply_highlight(controller.highlight)
        _register_listeners(session)
        simulation.restart()
    except Exception:
        LOGGER.exception("Failed to start graph session; tearing down")
        session.destroy()
        raise
    LOGGER.info("Mounted graph with %d nodes and %d links", len(graph.nodes), len(graph.links))
    return session


__all__ = ["Container", "GraphSession", "create"]
