from __future__ import annotations

from typing import List

import pytest

from forcegraph.config import CanvasConfig, ZoomConfig
from forcegraph.viewport.transform import IDENTITY, Transform, ViewportTransform


@pytest.fixture(name="viewport")
def viewport_fixture() -> ViewportTransform:
    return ViewportTransform(scale_range=(0.1, 8.0), extent=(1000.0, 800.0))


def test_transform_maps_and_inverts_points() -> None:
    transform = Transform(scale=2.0, tx=10.0, ty=-5.0)

    assert transform.apply((3.0, 4.0)) == (16.0, 3.0)
    assert transform.invert((16.0, 3.0)) == (3.0, 4.0)
    assert transform.to_svg() == "translate(10.0,-5.0) scale(2.0)"


@pytest.mark.parametrize("requested, expected", [(100.0, 8.0), (0.001, 0.1), (2.5, 2.5)])
def test_zoom_scale_is_clamped(viewport: ViewportTransform, requested: float, expected: float) -> None:
    transform = viewport.zoom_to(requested)

    assert transform.scale == expected
    assert viewport.current_transform().scale == expected


def test_focal_point_stays_fixed(viewport: ViewportTransform) -> None:
    viewport.pan_by(40.0, -25.0)
    focal = (320.0, 210.0)
    before = viewport.screen_to_simulation(focal)

    viewport.zoom_to(3.0, focal)

    after = viewport.screen_to_simulation(focal)
    assert after[0] == pytest.approx(before[0])
    assert after[1] == pytest.approx(before[1])


def test_zoom_defaults_to_viewport_centre(viewport: ViewportTransform) -> None:
    transform = viewport.zoom_to(2.0)

    assert transform.apply((500.0, 400.0)) == pytest.approx((500.0, 400.0))


def test_pan_translates_in_screen_units(viewport: ViewportTransform) -> None:
    viewport.zoom_to(2.0, (0.0, 0.0))
    transform = viewport.pan_by(15.0, -30.0)

    assert (transform.scale, transform.tx, transform.ty) == (2.0, 15.0, -30.0)


@pytest.mark.parametrize(
    "delta_y, delta_mode, expected",
    [(-100.0, 0, 2.0 ** 0.2), (100.0, 0, 2.0 ** -0.2), (-2.0, 1, 2.0 ** 0.1), (-1.0, 2, 2.0)],
)
def test_wheel_uses_delta_mode_factors(
    viewport: ViewportTransform, delta_y: float, delta_mode: int, expected: float
) -> None:
    transform = viewport.wheel(delta_y, (0.0, 0.0), delta_mode)

    assert transform.scale == pytest.approx(expected)


def test_every_change_notifies_subscribers(viewport: ViewportTransform) -> None:
    seen: List[Transform] = []
    unsubscribe = viewport.subscribe(seen.append)

    viewport.zoom_to(2.0)
    viewport.pan_by(1.0, 1.0)
    viewport.reset()
    unsubscribe()
    viewport.zoom_to(4.0)

    assert len(seen) == 3
    assert seen[-1] == IDENTITY


def test_set_extent_moves_default_focal_point(viewport: ViewportTransform) -> None:
    seen: List[Transform] = []
    viewport.subscribe(seen.append)

    viewport.set_extent(200.0, 100.0)
    transform = viewport.zoom_to(2.0)

    assert viewport.extent == (200.0, 100.0)
    assert len(seen) == 1
    assert transform.apply((100.0, 50.0)) == pytest.approx((100.0, 50.0))


def test_constrained_pan_stays_within_extent() -> None:
    viewport = ViewportTransform(extent=(1000.0, 800.0), constrain_to_extent=True)

    transform = viewport.pan_by(500.0, 0.0)

    assert transform.tx == pytest.approx(0.0)
    assert transform.ty == pytest.approx(0.0)


def test_unconstrained_pan_is_free(viewport: ViewportTransform) -> None:
    transform = viewport.pan_by(500.0, 0.0)

    assert transform.tx == 500.0


def test_from_config_uses_zoom_and_canvas_sections() -> None:
    viewport = ViewportTransform.from_config(
        ZoomConfig(scale_range=(0.5, 4.0), constrain_to_canvas=True),
        CanvasConfig(width=640.0, height=480.0),
    )

    assert viewport.scale_range == (0.5, 4.0)
    assert viewport.extent == (640.0, 480.0)
    assert viewport.constrain_to_extent
    assert viewport.zoom_to(10.0).scale == 4.0


def test_invalid_scale_range_rejected() -> None:
    with pytest.raises(ValueError):
        ViewportTransform(scale_range=(0.0, 8.0))
