"""Configuration loader for the forcegraph viewer."""
from __future__ import annotations

import logging
import math
import os
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

LOGGER = logging.getLogger(__name__)

REPO_ROOT = Path(__file__).resolve().parents[1]

CONFIG_PATH_ENV_VAR = "FORCEGRAPH_CONFIG"
CANVAS_ENV_VARS = {
    "width": "FORCEGRAPH_CANVAS_WIDTH",
    "height": "FORCEGRAPH_CANVAS_HEIGHT",
}


class ConfigError(RuntimeError):
    """Raised when configuration cannot be loaded."""


class _FrozenModel(BaseModel):
    """Base model enforcing immutability for config sections."""

    model_config = ConfigDict(frozen=True)


class CanvasConfig(_FrozenModel):
    """Size of the drawing surface in screen units."""

    width: float = Field(1000.0, gt=0)
    height: float = Field(800.0, gt=0)

    @property
    def center(self) -> Tuple[float, float]:
        """Return the canvas midpoint used as the centering target."""

        return self.width / 2.0, self.height / 2.0


class SimulationConfig(_FrozenModel):
    """Physics parameters for the force-directed layout."""

    link_strength: float = Field(0.125, ge=0.0)
    link_distance: float = Field(30.0, ge=0.0)
    charge_strength: float = -30.0
    charge_value_scale: float = Field(0.0, ge=0.0)
    theta: float = Field(0.9, gt=0.0)
    distance_min: float = Field(1.0, gt=0.0)
    distance_max: Optional[float] = Field(default=None, gt=0.0)
    center_strength: float = Field(1.0, ge=0.0, le=1.0)
    alpha: float = Field(1.0, ge=0.0, le=1.0)
    alpha_min: float = Field(0.001, ge=0.0, le=1.0)
    alpha_decay: float = Field(1.0 - math.pow(0.001, 1.0 / 300.0), ge=0.0, le=1.0)
    velocity_decay: float = Field(0.4, ge=0.0, le=1.0)
    drag_alpha_target: float = Field(0.3, gt=0.0, le=1.0)
    barnes_hut_threshold: int = Field(200, ge=0)
    frame_interval_ms: float = Field(16.0, gt=0)
    seed: int = 0

    @model_validator(mode="after")
    def _validate_distances(self) -> "SimulationConfig":
        if self.distance_max is not None and self.distance_max <= self.distance_min:
            msg = "simulation.distance_max must exceed simulation.distance_min"
            raise ValueError(msg)
        return self


class ZoomConfig(_FrozenModel):
    """Zoom and pan limits applied by the viewport."""

    scale_range: Tuple[float, float] = (0.1, 8.0)
    constrain_to_canvas: bool = False

    @field_validator("scale_range")
    @classmethod
    def _validate_scale_range(cls, value: Tuple[float, float]) -> Tuple[float, float]:
        low, high = value
        if low <= 0:
            raise ValueError("zoom.scale_range lower bound must be positive")
        if high < low:
            raise ValueError("zoom.scale_range upper bound must not be below the lower bound")
        return float(low), float(high)


class HighlightConfig(_FrozenModel):
    """Opacity and label settings used by hover highlighting."""

    fade_opacity: float = Field(0.1, ge=0.0, le=1.0)
    link_opacity: float = Field(0.35, ge=0.0, le=1.0)
    faded_link_opacity: float = Field(0.1, ge=0.0, le=1.0)
    incident_link_opacity: float = Field(1.0, ge=0.0, le=1.0)
    label_opacity: float = Field(1.0, ge=0.0, le=1.0)
    label_size_default: float = Field(10.0, ge=0.0)
    label_size_focused: float = Field(12.0, ge=0.0)
    transition_ms: int = Field(500, ge=0)


class NodeStyleConfig(_FrozenModel):
    """Bounds for the value-driven node radius."""

    radius_min: float = Field(14.0, gt=0)
    radius_max: float = Field(60.0, gt=0)

    @model_validator(mode="after")
    def _validate_radius(self) -> "NodeStyleConfig":
        if self.radius_max < self.radius_min:
            msg = "nodes.radius_max cannot be smaller than nodes.radius_min"
            raise ValueError(msg)
        return self


class ViewerConfig(_FrozenModel):
    """Top-level viewer configuration composed from config.yaml."""

    canvas: CanvasConfig = Field(default_factory=CanvasConfig)
    simulation: SimulationConfig = Field(default_factory=SimulationConfig)
    zoom: ZoomConfig = Field(default_factory=ZoomConfig)
    highlight: HighlightConfig = Field(default_factory=HighlightConfig)
    nodes: NodeStyleConfig = Field(default_factory=NodeStyleConfig)

    @staticmethod
    def default_path() -> Path:
        """Return the default location of the configuration file.

        Returns:
            Path: Absolute path to config.yaml at the repository root.
        """
        return REPO_ROOT / "config.yaml"

    @classmethod
    def from_mapping(cls, overrides: Optional[Mapping[str, Any]] = None) -> "ViewerConfig":
        """Build a configuration from a partial mapping layered over defaults.

        Args:
            overrides: Section mappings such as ``{"canvas": {"width": 640}}``.

        Returns:
            ViewerConfig: Validated configuration.

        Raises:
            ConfigError: If the merged values fail validation.
        """
        try:
            return cls(**dict(overrides or {}))
        except ValidationError as exc:
            LOGGER.error("Invalid viewer configuration overrides: %s", exc)
            raise ConfigError("Configuration validation failed") from exc

    def with_canvas(self, width: float, height: float) -> "ViewerConfig":
        """Return a copy of the configuration with a new canvas size."""

        return self.model_copy(update={"canvas": CanvasConfig(width=width, height=height)})


def _resolve_config_path(path: Optional[Path]) -> Path:
    if path is not None:
        return path
    override = os.getenv(CONFIG_PATH_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return ViewerConfig.default_path()


def _apply_environment_overrides(raw_content: Dict[str, Any]) -> Dict[str, Any]:
    """Merge canvas size overrides from the environment.

    Args:
        raw_content: Parsed YAML configuration prior to Pydantic validation.

    Returns:
        Dict[str, Any]: Configuration mapping with environment overrides applied.

    Raises:
        ConfigError: If an override is not a number.
    """

    for field, env_var in CANVAS_ENV_VARS.items():
        raw = os.getenv(env_var)
        if raw is None or not raw.strip():
            continue
        try:
            value = float(raw)
        except ValueError as exc:
            LOGGER.error("Environment override %s is not numeric: %r", env_var, raw)
            raise ConfigError(f"{env_var} must be numeric") from exc
        canvas_section = raw_content.setdefault("canvas", {})
        canvas_section[field] = value
        LOGGER.info("Canvas %s overridden from environment (%s)", field, value)
    return raw_content


def _read_yaml(path: Path) -> Dict[str, Any]:
    """Read YAML content from disk.

    Args:
        path: Location of the YAML file.

    Returns:
        Dict[str, Any]: Parsed YAML content.

    Raises:
        ConfigError: If the file cannot be read or parsed.
    """
    try:
        with path.open("r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except FileNotFoundError as exc:
        LOGGER.error("Configuration file missing at %s", path)
        raise ConfigError("Configuration file not found") from exc
    except yaml.YAMLError as exc:
        LOGGER.error("Invalid YAML syntax in %s", path)
        raise ConfigError("Invalid YAML syntax") from exc
    if data is None:
        return {}
    if not isinstance(data, dict):
        LOGGER.error("Configuration root must be a mapping: %s", path)
        raise ConfigError("Configuration root must be a mapping")
    return data


@lru_cache(maxsize=4)
def load_config(path: Optional[Path] = None) -> ViewerConfig:
    """Load viewer configuration from YAML.

    Args:
        path: Optional override path to the YAML file.

    Returns:
        ViewerConfig: Parsed configuration object.

    Raises:
        ConfigError: If the configuration cannot be loaded or validated.
    """
    config_path = _resolve_config_path(path)
    raw_content = _read_yaml(config_path)
    raw_content = _apply_environment_overrides(raw_content)
    try:
        return ViewerConfig(**raw_content)
    except ValidationError as exc:
        LOGGER.error("Invalid configuration values: %s", exc)
        raise ConfigError("Configuration validation failed") from exc


__all__ = [
    "CanvasConfig",
    "ConfigError",
    "HighlightConfig",
    "NodeStyleConfig",
    "SimulationConfig",
    "ViewerConfig",
    "ZoomConfig",
    "load_config",
]
