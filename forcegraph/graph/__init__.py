"""Graph model, loading and adjacency lookups."""

from forcegraph.graph.adjacency import AdjacencyIndex
from forcegraph.graph.model import Graph, GraphLoadError, Link, Node, load_graph

__all__ = [
    "AdjacencyIndex",
    "Graph",
    "GraphLoadError",
    "Link",
    "Node",
    "load_graph",
]
