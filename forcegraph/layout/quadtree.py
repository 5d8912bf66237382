"""Quadtree used for Barnes-Hut approximation of many-body forces."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

Bounds = Tuple[float, float, float, float]


@dataclass
class QuadCell:
    """Square cell holding node indices at the leaves and aggregates everywhere."""

    bounds: Bounds
    items: List[int]
    children: Optional[List["QuadCell"]] = None
    strength: float = 0.0
    cx: float = 0.0
    cy: float = 0.0
    count: int = field(default=0)

    @property
    def width(self) -> float:
        return self.bounds[2] - self.bounds[0]

    @property
    def is_leaf(self) -> bool:
        return not self.children


def square_bounds(xs: Sequence[float], ys: Sequence[float]) -> Bounds:
    """Return a square covering every point, padded so max edges are inside."""

    if not xs:
        return 0.0, 0.0, 1.0, 1.0
    x0, x1 = min(xs), max(xs)
    y0, y1 = min(ys), max(ys)
    side = max(x1 - x0, y1 - y0, 1e-9)
    side = side * (1.0 + 1e-9) + 1e-9
    return x0, y0, x0 + side, y0 + side


def quadtree_build(
    xs: Sequence[float],
    ys: Sequence[float],
    items: Sequence[int],
    *,
    bounds: Bounds,
    depth: int = 0,
    max_depth: int = 24,
) -> QuadCell:
    """Recursively split points into quadrants until each leaf holds one point.

    Coincident points, or points still sharing a cell at ``max_depth``, stay
    together in a single leaf.
    """

    cell = QuadCell(bounds=bounds, items=list(items))
    if len(items) <= 1 or depth >= max_depth:
        return cell
    first = items[0]
    if all(xs[i] == xs[first] and ys[i] == ys[first] for i in items):
        return cell

    x0, y0, x1, y1 = bounds
    mx = (x0 + x1) * 0.5
    my = (y0 + y1) * 0.5
    quadrants = [
        (x0, y0, mx, my),
        (mx, y0, x1, my),
        (x0, my, mx, y1),
        (mx, my, x1, y1),
    ]
    buckets: List[List[int]] = [[], [], [], []]
    spill: List[int] = []
    for item in items:
        ix = xs[item]
        iy = ys[item]
        for index, (qx0, qy0, qx1, qy1) in enumerate(quadrants):
            if qx0 <= ix < qx1 and qy0 <= iy < qy1:
                buckets[index].append(item)
                break
        else:
            spill.append(item)

    children = [
        quadtree_build(xs, ys, bucket, bounds=qbounds, depth=depth + 1, max_depth=max_depth)
        for bucket, qbounds in zip(buckets, quadrants)
        if bucket
    ]
    cell.items = spill
    cell.children = children
    return cell


def quadtree_accumulate(
    cell: QuadCell,
    xs: Sequence[float],
    ys: Sequence[float],
    strengths: Sequence[float],
) -> None:
    """Compute total strength and the strength-weighted centre of every cell."""

    total = 0.0
    weight = 0.0
    weighted_x = 0.0
    weighted_y = 0.0
    count = 0
    plain_x = 0.0
    plain_y = 0.0

    for item in cell.items:
        magnitude = abs(strengths[item])
        total += strengths[item]
        weight += magnitude
        weighted_x += magnitude * xs[item]
        weighted_y += magnitude * ys[item]
        plain_x += xs[item]
        plain_y += ys[item]
        count += 1

    for child in cell.children or ():
        quadtree_accumulate(child, xs, ys, strengths)
        magnitude = abs(child.strength)
        total += child.strength
        weight += magnitude
        weighted_x += magnitude * child.cx
        weighted_y += magnitude * child.cy
        plain_x += child.cx * child.count
        plain_y += child.cy * child.count
        count += child.count

    cell.strength = total
    cell.count = count
    if weight > 0.0:
        cell.cx = weighted_x / weight
        cell.cy = weighted_y / weight
    elif count:
        cell.cx = plain_x / count
        cell.cy = plain_y / count


def build_tree(xs: Sequence[float], ys: Sequence[float], strengths: Sequence[float]) -> QuadCell:
    """Build and aggregate a quadtree over all points."""

    root = quadtree_build(xs, ys, range(len(xs)), bounds=square_bounds(xs, ys))
    quadtree_accumulate(root, xs, ys, strengths)
    return root


__all__ = ["QuadCell", "build_tree", "quadtree_accumulate", "quadtree_build", "square_bounds"]
