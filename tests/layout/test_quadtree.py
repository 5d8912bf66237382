from __future__ import annotations

import pytest

from forcegraph.layout.quadtree import QuadCell, build_tree, square_bounds


def _leaves(cell: QuadCell) -> list:
    if cell.is_leaf:
        return [cell]
    found = []
    for child in cell.children or ():
        found.extend(_leaves(child))
    return found


def _all_items(cell: QuadCell) -> list:
    items = list(cell.items)
    for child in cell.children or ():
        items.extend(_all_items(child))
    return items


def test_square_bounds_cover_points() -> None:
    x0, y0, x1, y1 = square_bounds([0.0, 10.0, 4.0], [0.0, 2.0, 6.0])

    assert x1 - x0 == pytest.approx(y1 - y0)
    assert x0 <= 0.0 and x1 > 10.0
    assert y0 <= 0.0 and y1 > 6.0


def test_every_point_lands_in_exactly_one_cell() -> None:
    xs = [0.0, 1.0, 5.0, 9.0, 9.5, 3.0]
    ys = [0.0, 8.0, 5.0, 1.0, 9.5, 3.0]

    root = build_tree(xs, ys, [-30.0] * len(xs))

    assert sorted(_all_items(root)) == list(range(len(xs)))
    assert all(len(leaf.items) == 1 for leaf in _leaves(root))


def test_root_aggregates_strength_and_centroid() -> None:
    xs = [0.0, 10.0, 10.0, 0.0]
    ys = [0.0, 0.0, 10.0, 10.0]

    root = build_tree(xs, ys, [-30.0] * 4)

    assert root.count == 4
    assert root.strength == pytest.approx(-120.0)
    assert root.cx == pytest.approx(5.0)
    assert root.cy == pytest.approx(5.0)


def test_centroid_weighted_by_strength_magnitude() -> None:
    root = build_tree([0.0, 12.0], [0.0, 0.0], [-10.0, -30.0])

    assert root.cx == pytest.approx(9.0)


def test_coincident_points_share_a_leaf() -> None:
    xs = [2.0, 2.0, 2.0, 7.0]
    ys = [3.0, 3.0, 3.0, 1.0]

    root = build_tree(xs, ys, [-30.0] * 4)

    shared = [leaf for leaf in _leaves(root) if len(leaf.items) == 3]
    assert len(shared) == 1
    assert sorted(shared[0].items) == [0, 1, 2]
