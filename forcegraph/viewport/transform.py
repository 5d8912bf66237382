"""Zoom and pan state mapping simulation space onto the screen."""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import Callable, List, Optional, Tuple

from forcegraph.config import CanvasConfig, ZoomConfig

LOGGER = logging.getLogger(__name__)

Point = Tuple[float, float]
TransformListener = Callable[["Transform"], None]

WHEEL_LINE_FACTOR = 0.05
WHEEL_PIXEL_FACTOR = 0.002


@dataclass(frozen=True)
class Transform:
    """Uniform scale followed by translation: ``screen = sim * scale + t``."""

    scale: float = 1.0
    tx: float = 0.0
    ty: float = 0.0

    def apply(self, point: Point) -> Point:
        return point[0] * self.scale + self.tx, point[1] * self.scale + self.ty

    def invert(self, point: Point) -> Point:
        return (point[0] - self.tx) / self.scale, (point[1] - self.ty) / self.scale

    def translate(self, dx: float, dy: float) -> "Transform":
        """Translate by an offset expressed in simulation units."""

        return replace(self, tx=self.tx + self.scale * dx, ty=self.ty + self.scale * dy)

    def to_svg(self) -> str:
        return f"translate({self.tx},{self.ty}) scale({self.scale})"


IDENTITY = Transform()


class ViewportTransform:
    """Track zoom scale and pan offset for the rendered diagram.

    The transform never touches simulation coordinates; subscribers are told
    about every change so they can re-apply the current geometry even while
    the simulation is idle.
    """

    def __init__(
        self,
        *,
        scale_range: Tuple[float, float] = (0.1, 8.0),
        extent: Tuple[float, float] = (1000.0, 800.0),
        constrain_to_extent: bool = False,
    ) -> None:
        low, high = scale_range
        if low <= 0 or high < low:
            raise ValueError(f"Invalid scale range: {scale_range!r}")
        self.scale_range = (float(low), float(high))
        self._extent = (float(extent[0]), float(extent[1]))
        self.constrain_to_extent = constrain_to_extent
        self._transform = IDENTITY
        self._listeners: List[TransformListener] = []

    @classmethod
    def from_config(cls, zoom: ZoomConfig, canvas: CanvasConfig) -> "ViewportTransform":
        return cls(
            scale_range=zoom.scale_range,
            extent=(canvas.width, canvas.height),
            constrain_to_extent=zoom.constrain_to_canvas,
        )

    @property
    def extent(self) -> Tuple[float, float]:
        return self._extent

    def current_transform(self) -> Transform:
        return self._transform

    def subscribe(self, listener: TransformListener) -> Callable[[], None]:
        """Register a change listener and return a function removing it."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def clamp_scale(self, scale: float) -> float:
        low, high = self.scale_range
        return min(max(scale, low), high)

    def zoom_to(self, scale: float, focal_point: Optional[Point] = None) -> Transform:
        """Zoom to an absolute scale keeping the focal point fixed on screen.

        Args:
            scale: Requested scale factor; clamped to the configured range.
            focal_point: Screen point that stays put; defaults to the viewport centre.

        Returns:
            Transform: The transform now in effect.
        """

        point = focal_point if focal_point is not None else self._centre()
        anchor = self._transform.invert(point)
        new_scale = self.clamp_scale(float(scale))
        candidate = Transform(
            scale=new_scale,
            tx=point[0] - anchor[0] * new_scale,
            ty=point[1] - anchor[1] * new_scale,
        )
        return self._commit(candidate)

    def zoom_by(self, factor: float, focal_point: Optional[Point] = None) -> Transform:
        return self.zoom_to(self._transform.scale * factor, focal_point)

    def wheel(self, delta_y: float, point: Optional[Point] = None, delta_mode: int = 0) -> Transform:
        """Apply a wheel gesture using the browser delta conventions.

        ``delta_mode`` 0 is pixels, 1 is lines and 2 is pages.
        """

        if delta_mode == 1:
            factor = WHEEL_LINE_FACTOR
        elif delta_mode:
            factor = 1.0
        else:
            factor = WHEEL_PIXEL_FACTOR
        return self.zoom_by(2.0 ** (-delta_y * factor), point)

    def pan_by(self, dx: float, dy: float) -> Transform:
        """Translate the view by a screen-space offset."""

        current = self._transform
        return self._commit(replace(current, tx=current.tx + dx, ty=current.ty + dy))

    def reset(self) -> Transform:
        return self._commit(IDENTITY)

    def set_extent(self, width: float, height: float) -> None:
        """Update the viewport size after a resize without notifying listeners."""

        self._extent = (float(width), float(height))

    def screen_to_simulation(self, point: Point) -> Point:
        return self._transform.invert(point)

    def _centre(self) -> Point:
        return self._extent[0] / 2.0, self._extent[1] / 2.0

    def _constrain(self, transform: Transform) -> Transform:
        if not self.constrain_to_extent:
            return transform
        width, height = self._extent
        # The translate extent equals the canvas, as in d3-zoom's default constrain.
        left, top = transform.invert((0.0, 0.0))
        right, bottom = transform.invert((width, height))
        dx0, dx1 = left, right - width
        dy0, dy1 = top, bottom - height
        shift_x = (dx0 + dx1) / 2.0 if dx1 > dx0 else (min(0.0, dx0) or max(0.0, dx1))
        shift_y = (dy0 + dy1) / 2.0 if dy1 > dy0 else (min(0.0, dy0) or max(0.0, dy1))
        return transform.translate(shift_x, shift_y)

    def _commit(self, candidate: Transform) -> Transform:
        self._transform = self._constrain(candidate)
        LOGGER.debug(
            "Viewport transform now scale=%.4f tx=%.2f ty=%.2f",
            self._transform.scale,
            self._transform.tx,
            self._transform.ty,
        )
        for listener in list(self._listeners):
            listener(self._transform)
        return self._transform


__all__ = ["IDENTITY", "Transform", "ViewportTransform"]
