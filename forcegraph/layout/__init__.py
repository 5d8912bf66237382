"""Force-directed layout engine."""

from forcegraph.layout.forces import CenterForce, Force, Jiggle, LinkForce, ManyBodyForce
from forcegraph.layout.simulation import END_EVENT, TICK_EVENT, ForceSimulation, SimulationState

__all__ = [
    "CenterForce",
    "END_EVENT",
    "Force",
    "ForceSimulation",
    "Jiggle",
    "LinkForce",
    "ManyBodyForce",
    "SimulationState",
    "TICK_EVENT",
]
