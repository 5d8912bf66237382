"""Force terms applied to node velocities on each simulation tick."""
from __future__ import annotations

import logging
import math
from typing import Callable, List, Optional, Sequence, Tuple, Union

import numpy as np
from typing_extensions import Protocol

from forcegraph.graph.model import Link, Node
from forcegraph.layout.quadtree import QuadCell, build_tree

LOGGER = logging.getLogger(__name__)

JIGGLE_MAGNITUDE = 1e-6

StrengthAccessor = Union[float, Callable[[Node], float]]


class Jiggle:
    """Seeded source of tiny offsets used to separate coincident points."""

    def __init__(self, seed: int = 0) -> None:
        self._rng = np.random.default_rng(seed)

    def __call__(self) -> float:
        return (float(self._rng.random()) - 0.5) * JIGGLE_MAGNITUDE

    def sample(self, size: int) -> np.ndarray:
        return (self._rng.random(size) - 0.5) * JIGGLE_MAGNITUDE


class Force(Protocol):
    """Protocol implemented by every force term."""

    def initialize(self, nodes: Sequence[Node], jiggle: Jiggle) -> None:
        """Bind the force to the simulation node list."""

    def apply(self, alpha: float) -> None:
        """Accumulate the force into node velocities (or positions)."""


class LinkForce:
    """Spring pulling linked nodes toward a rest distance."""

    def __init__(
        self,
        links: Sequence[Link],
        *,
        strength: float = 0.125,
        distance: float = 30.0,
        iterations: int = 1,
    ) -> None:
        self._links = [link for link in links if not link.is_self_loop]
        self.strength = strength
        self.distance = distance
        self.iterations = max(1, iterations)
        self._bias: List[float] = []
        self._jiggle: Optional[Jiggle] = None

    def initialize(self, nodes: Sequence[Node], jiggle: Jiggle) -> None:
        self._jiggle = jiggle
        degree = [0] * len(nodes)
        for link in self._links:
            degree[link.source.index] += 1
            degree[link.target.index] += 1
        # Lower-degree endpoints move more than hubs.
        self._bias = [
            degree[link.source.index] / (degree[link.source.index] + degree[link.target.index])
            for link in self._links
        ]

    def apply(self, alpha: float) -> None:
        jiggle = self._jiggle or Jiggle()
        for _ in range(self.iterations):
            for link, bias in zip(self._links, self._bias):
                source = link.source
                target = link.target
                x = target.x + target.vx - source.x - source.vx
                y = target.y + target.vy - source.y - source.vy
                if x == 0:
                    x = jiggle()
                if y == 0:
                    y = jiggle()
                length = math.sqrt(x * x + y * y)
                scale = (length - self.distance) / length * alpha * self.strength
                x *= scale
                y *= scale
                target.vx -= x * bias
                target.vy -= y * bias
                source.vx += x * (1.0 - bias)
                source.vy += y * (1.0 - bias)


class ManyBodyForce:
    """Mutual repulsion between every pair of nodes.

    Exact pairwise interaction is computed with numpy for small graphs; above
    ``barnes_hut_threshold`` nodes a quadtree approximation is used instead.
    """

    def __init__(
        self,
        *,
        strength: StrengthAccessor = -30.0,
        theta: float = 0.9,
        distance_min: float = 1.0,
        distance_max: Optional[float] = None,
        barnes_hut_threshold: int = 200,
    ) -> None:
        self._strength = strength
        self.theta = theta
        self.distance_min = distance_min
        self.distance_max = distance_max
        self.barnes_hut_threshold = barnes_hut_threshold
        self._nodes: Sequence[Node] = ()
        self._strengths = np.zeros(0)
        self._jiggle: Optional[Jiggle] = None

    def initialize(self, nodes: Sequence[Node], jiggle: Jiggle) -> None:
        self._nodes = nodes
        self._jiggle = jiggle
        accessor = self._strength
        if callable(accessor):
            values = [float(accessor(node)) for node in nodes]
        else:
            values = [float(accessor)] * len(nodes)
        self._strengths = np.asarray(values, dtype=float)

    @property
    def uses_approximation(self) -> bool:
        return len(self._nodes) > self.barnes_hut_threshold

    def apply(self, alpha: float) -> None:
        if len(self._nodes) < 2:
            return
        if self.uses_approximation:
            self._apply_barnes_hut(alpha)
        else:
            self._apply_exact(alpha)

    def _apply_exact(self, alpha: float) -> None:
        nodes = self._nodes
        count = len(nodes)
        jiggle = self._jiggle or Jiggle()
        xs = np.fromiter((node.x for node in nodes), dtype=float, count=count)
        ys = np.fromiter((node.y for node in nodes), dtype=float, count=count)
        # dx[i, j] points from node i toward node j.
        dx = xs[np.newaxis, :] - xs[:, np.newaxis]
        dy = ys[np.newaxis, :] - ys[:, np.newaxis]
        off_diagonal = ~np.eye(count, dtype=bool)

        coincident_x = (dx == 0) & off_diagonal
        if coincident_x.any():
            LOGGER.debug("Separating %d coincident x offsets", int(coincident_x.sum()))
            dx[coincident_x] = jiggle.sample(int(coincident_x.sum()))
        coincident_y = (dy == 0) & off_diagonal
        if coincident_y.any():
            dy[coincident_y] = jiggle.sample(int(coincident_y.sum()))

        squared = dx * dx + dy * dy
        active = off_diagonal
        if self.distance_max is not None:
            active = active & (squared < self.distance_max * self.distance_max)
        min_squared = self.distance_min * self.distance_min
        squared = np.where(squared < min_squared, np.sqrt(min_squared * squared), squared)
        squared[~off_diagonal] = 1.0

        weights = np.where(active, self._strengths[np.newaxis, :] * alpha / squared, 0.0)
        delta_vx = (dx * weights).sum(axis=1)
        delta_vy = (dy * weights).sum(axis=1)
        for node, dvx, dvy in zip(nodes, delta_vx, delta_vy):
            node.vx += float(dvx)
            node.vy += float(dvy)

    def _apply_barnes_hut(self, alpha: float) -> None:
        nodes = self._nodes
        xs = [node.x for node in nodes]
        ys = [node.y for node in nodes]
        strengths = self._strengths.tolist()
        root = build_tree(xs, ys, strengths)
        theta_squared = self.theta * self.theta
        for index, node in enumerate(nodes):
            dvx, dvy = self._visit(root, index, xs, ys, strengths, alpha, theta_squared)
            node.vx += dvx
            node.vy += dvy

    def _visit(
        self,
        root: QuadCell,
        index: int,
        xs: Sequence[float],
        ys: Sequence[float],
        strengths: Sequence[float],
        alpha: float,
        theta_squared: float,
    ) -> Tuple[float, float]:
        x = xs[index]
        y = ys[index]
        dvx = 0.0
        dvy = 0.0
        stack = [root]
        while stack:
            cell = stack.pop()
            if cell.count == 0:
                continue
            if not cell.is_leaf:
                dx = cell.cx - x
                dy = cell.cy - y
                if cell.width * cell.width / theta_squared < dx * dx + dy * dy:
                    fx, fy = self._pair(dx, dy, cell.strength, alpha)
                    dvx += fx
                    dvy += fy
                    continue
                stack.extend(cell.children or ())
            for other in cell.items:
                if other == index:
                    continue
                fx, fy = self._pair(xs[other] - x, ys[other] - y, strengths[other], alpha)
                dvx += fx
                dvy += fy
        return dvx, dvy

    def _pair(self, dx: float, dy: float, strength: float, alpha: float) -> Tuple[float, float]:
        jiggle = self._jiggle or Jiggle()
        squared = dx * dx + dy * dy
        if self.distance_max is not None and squared >= self.distance_max * self.distance_max:
            return 0.0, 0.0
        if dx == 0:
            dx = jiggle()
            squared += dx * dx
        if dy == 0:
            dy = jiggle()
            squared += dy * dy
        min_squared = self.distance_min * self.distance_min
        if squared < min_squared:
            squared = math.sqrt(min_squared * squared)
        weight = strength * alpha / squared
        return dx * weight, dy * weight


class CenterForce:
    """Translate all nodes so their centroid sits on the target point."""

    def __init__(self, x: float = 0.0, y: float = 0.0, *, strength: float = 1.0) -> None:
        self.x = x
        self.y = y
        self.strength = strength
        self._nodes: Sequence[Node] = ()

    def initialize(self, nodes: Sequence[Node], jiggle: Jiggle) -> None:
        self._nodes = nodes

    def set_center(self, x: float, y: float) -> None:
        self.x = x
        self.y = y

    def apply(self, alpha: float) -> None:
        nodes = self._nodes
        if not nodes:
            return
        count = len(nodes)
        shift_x = (sum(node.x for node in nodes) / count - self.x) * self.strength
        shift_y = (sum(node.y for node in nodes) / count - self.y) * self.strength
        for node in nodes:
            node.x -= shift_x
            node.y -= shift_y


__all__ = ["CenterForce", "Force", "Jiggle", "LinkForce", "ManyBodyForce"]
