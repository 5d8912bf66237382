"""Iterative force-directed layout engine with alpha cooling."""
from __future__ import annotations

import enum
import logging
import math
from typing import Callable, Dict, Hashable, List, Optional, Sequence, Tuple

from forcegraph.config import SimulationConfig
from forcegraph.graph.model import Link, Node
from forcegraph.host.scheduler import FrameScheduler, TimerHandle
from forcegraph.layout.forces import CenterForce, Force, Jiggle, LinkForce, ManyBodyForce, StrengthAccessor
from forcegraph.render.geometry import GeometrySnapshot, capture_geometry

LOGGER = logging.getLogger(__name__)

TICK_EVENT = "tick"
END_EVENT = "end"

INITIAL_RADIUS = 10.0
INITIAL_ANGLE = math.pi * (3.0 - math.sqrt(5.0))

SnapshotListener = Callable[[GeometrySnapshot], None]


class SimulationState(str, enum.Enum):
    """Lifecycle states of the simulation."""

    INITIALIZED = "initialized"
    RUNNING = "running"
    IDLE = "idle"


def _charge_strength(config: SimulationConfig) -> StrengthAccessor:
    if not config.charge_value_scale:
        return config.charge_strength
    base = config.charge_strength
    scale = config.charge_value_scale
    return lambda node: base * (1.0 + scale * max(node.value, 0.0))


class ForceSimulation:
    """Integrate node positions under link, many-body and centering forces.

    Each tick applies the forces in order, integrates velocities into
    positions (pinned nodes are held at ``fx``/``fy``), decays ``alpha``
    toward ``alpha_target`` and emits a ``tick`` event with a geometry
    snapshot. When ``alpha`` drops below ``alpha_min`` the simulation goes
    idle, cancels its frame callback and emits ``end`` once.
    """

    def __init__(
        self,
        nodes: Sequence[Node],
        links: Sequence[Link],
        *,
        config: Optional[SimulationConfig] = None,
        center: Tuple[float, float] = (0.0, 0.0),
        scheduler: Optional[FrameScheduler] = None,
        autostart: bool = True,
    ) -> None:
        self._config = config or SimulationConfig()
        self._nodes: List[Node] = list(nodes)
        self._links: List[Link] = list(links)
        self._by_id: Dict[Hashable, Node] = {node.id: node for node in self._nodes}
        self.alpha = self._config.alpha
        self.alpha_min = self._config.alpha_min
        self.alpha_decay = self._config.alpha_decay
        self.velocity_decay = self._config.velocity_decay
        self._alpha_target = 0.0
        self._jiggle = Jiggle(self._config.seed)
        self.link_force = LinkForce(
            self._links,
            strength=self._config.link_strength,
            distance=self._config.link_distance,
        )
        self.charge_force = ManyBodyForce(
            strength=_charge_strength(self._config),
            theta=self._config.theta,
            distance_min=self._config.distance_min,
            distance_max=self._config.distance_max,
            barnes_hut_threshold=self._config.barnes_hut_threshold,
        )
        self.center_force = CenterForce(center[0], center[1], strength=self._config.center_strength)
        self._forces: List[Force] = [self.link_force, self.charge_force, self.center_force]
        self._listeners: Dict[str, List[SnapshotListener]] = {TICK_EVENT: [], END_EVENT: []}
        self._scheduler = scheduler
        self._interval = self._config.frame_interval_ms / 1000.0
        self._timer: Optional[TimerHandle] = None
        self._state = SimulationState.INITIALIZED
        self.ticks = 0

        self._initialize_nodes()
        for force in self._forces:
            force.initialize(self._nodes, self._jiggle)
        self._snapshot = capture_geometry(self._nodes, self._links, self.alpha)
        if autostart:
            self.restart()

    @property
    def state(self) -> SimulationState:
        return self._state

    @property
    def nodes(self) -> Sequence[Node]:
        return tuple(self._nodes)

    @property
    def links(self) -> Sequence[Link]:
        return tuple(self._links)

    @property
    def alpha_target(self) -> float:
        return self._alpha_target

    @alpha_target.setter
    def alpha_target(self, value: float) -> None:
        self._alpha_target = min(max(float(value), 0.0), 1.0)

    @property
    def snapshot(self) -> GeometrySnapshot:
        """Return the geometry captured after the most recent tick."""

        return self._snapshot

    def node(self, node_id: Hashable) -> Node:
        try:
            return self._by_id[node_id]
        except KeyError:
            raise KeyError(f"Unknown node id: {node_id!r}") from None

    def on(self, event: str, listener: SnapshotListener) -> Callable[[], None]:
        """Register a listener for ``tick`` or ``end`` events.

        Args:
            event: Event name, either ``"tick"`` or ``"end"``.
            listener: Callable receiving the geometry snapshot.

        Returns:
            Callable[[], None]: Function removing the listener again.

        Raises:
            ValueError: If the event name is unknown.
        """

        if event not in self._listeners:
            raise ValueError(f"Unknown simulation event: {event}")
        listeners = self._listeners[event]
        listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in listeners:
                listeners.remove(listener)

        return _unsubscribe

    def restart(self) -> "ForceSimulation":
        """Resume ticking, re-registering the frame callback when needed."""

        if self._state is not SimulationState.RUNNING:
            LOGGER.debug("Simulation restarting from %s (alpha=%.4f)", self._state.value, self.alpha)
        self._state = SimulationState.RUNNING
        if self._scheduler is not None and (self._timer is None or self._timer.cancelled):
            self._timer = self._scheduler.call_repeatedly(self._interval, self._on_frame)
        return self

    def stop(self) -> "ForceSimulation":
        """Cancel the frame callback and go idle without further ticks."""

        self._cancel_timer()
        if self._state is not SimulationState.IDLE:
            LOGGER.debug("Simulation stopped at alpha=%.4f", self.alpha)
        self._state = SimulationState.IDLE
        return self

    def set_center(self, x: float, y: float) -> None:
        self.center_force.set_center(x, y)

    def pin(self, node_id: Hashable, x: float, y: float) -> Node:
        """Fix a node at ``(x, y)`` so integration no longer moves it."""

        node = self.node(node_id)
        node.fx = node.x = float(x)
        node.fy = node.y = float(y)
        node.vx = 0.0
        node.vy = 0.0
        return node

    def unpin(self, node_id: Hashable) -> Node:
        """Release a pinned node back to free simulation."""

        node = self.node(node_id)
        node.fx = None
        node.fy = None
        return node

    def find(self, x: float, y: float, radius: Optional[float] = None) -> Optional[Node]:
        """Return the node closest to ``(x, y)``, optionally within ``radius``."""

        best: Optional[Node] = None
        best_distance = math.inf if radius is None else radius * radius
        for node in self._nodes:
            dx = x - node.x
            dy = y - node.y
            distance = dx * dx + dy * dy
            if distance < best_distance:
                best = node
                best_distance = distance
        return best

    def tick(self, iterations: int = 1) -> Optional[GeometrySnapshot]:
        """Advance the simulation manually.

        Args:
            iterations: Number of integration steps to run.

        Returns:
            Optional[GeometrySnapshot]: Geometry after the last step, or ``None``
            when the simulation is idle and nothing was computed.
        """

        snapshot: Optional[GeometrySnapshot] = None
        for _ in range(iterations):
            if self._state is SimulationState.IDLE:
                break
            snapshot = self._step()
        return snapshot

    def _on_frame(self) -> None:
        self.tick()

    def _step(self) -> GeometrySnapshot:
        self._state = SimulationState.RUNNING
        alpha = self.alpha
        for force in self._forces:
            force.apply(alpha)
        self._integrate()
        self.alpha += (self._alpha_target - self.alpha) * self.alpha_decay
        self.ticks += 1

        snapshot = capture_geometry(self._nodes, self._links, self.alpha)
        self._snapshot = snapshot
        self._emit(TICK_EVENT, snapshot)
        if self.alpha < self.alpha_min:
            self._cancel_timer()
            self._state = SimulationState.IDLE
            LOGGER.info("Simulation cooled to idle after %d ticks (alpha=%.5f)", self.ticks, self.alpha)
            self._emit(END_EVENT, snapshot)
        return snapshot

    def _integrate(self) -> None:
        retain = 1.0 - self.velocity_decay
        for node in self._nodes:
            if node.fx is None:
                node.vx *= retain
                node.x += node.vx
            else:
                node.x = node.fx
                node.vx = 0.0
            if node.fy is None:
                node.vy *= retain
                node.y += node.vy
            else:
                node.y = node.fy
                node.vy = 0.0

    def _initialize_nodes(self) -> None:
        for index, node in enumerate(self._nodes):
            node.index = index
            if node.fx is not None:
                node.x = node.fx
            if node.fy is not None:
                node.y = node.fy
            if not math.isfinite(node.x) or not math.isfinite(node.y):
                radius = INITIAL_RADIUS * math.sqrt(0.5 + index)
                angle = index * INITIAL_ANGLE
                node.x = radius * math.cos(angle)
                node.y = radius * math.sin(angle)
            if not math.isfinite(node.vx) or not math.isfinite(node.vy):
                node.vx = 0.0
                node.vy = 0.0

    def _emit(self, event: str, snapshot: GeometrySnapshot) -> None:
        for listener in list(self._listeners[event]):
            listener(snapshot)

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None


__all__ = ["END_EVENT", "ForceSimulation", "SimulationState", "TICK_EVENT"]
