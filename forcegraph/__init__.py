"""Interactive force-directed network diagrams."""

from forcegraph.config import ConfigError, ViewerConfig, load_config
from forcegraph.graph import AdjacencyIndex, GraphLoadError, load_graph
from forcegraph.host.lifecycle import GraphSession, create
from forcegraph.interaction.controller import InteractionController
from forcegraph.layout.simulation import ForceSimulation, SimulationState
from forcegraph.viewport import Transform, ViewportTransform

__all__ = [
    "AdjacencyIndex",
    "ConfigError",
    "ForceSimulation",
    "GraphLoadError",
    "GraphSession",
    "InteractionController",
    "SimulationState",
    "Transform",
    "ViewerConfig",
    "create",
    "load_config",
    "load_graph",
]
