from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest
import yaml

from forcegraph.config import ConfigError, SimulationConfig, ViewerConfig, load_config


@pytest.fixture(autouse=True)
def _clear_config_cache() -> Iterator[None]:
    load_config.cache_clear()
    yield
    load_config.cache_clear()


@pytest.fixture(autouse=True)
def _isolate_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("FORCEGRAPH_CONFIG", "FORCEGRAPH_CANVAS_WIDTH", "FORCEGRAPH_CANVAS_HEIGHT"):
        monkeypatch.delenv(name, raising=False)


def test_config_loads_expected_structure() -> None:
    config = load_config()
    assert isinstance(config, ViewerConfig)
    assert config.canvas.width == 1000
    assert config.canvas.height == 800
    assert config.canvas.center == (500.0, 400.0)
    assert config.simulation.link_strength == 0.125
    assert config.simulation.link_distance == 30
    assert config.simulation.charge_strength == -30
    assert config.simulation.charge_value_scale == 0.0
    assert config.simulation.theta == 0.9
    assert config.simulation.distance_max is None
    assert config.simulation.alpha_min == 0.001
    assert config.simulation.alpha_decay == 0.0228
    assert config.simulation.velocity_decay == 0.4
    assert config.simulation.drag_alpha_target == 0.3
    assert config.simulation.barnes_hut_threshold == 200
    assert config.zoom.scale_range == (0.1, 8.0)
    assert config.zoom.constrain_to_canvas is False
    assert config.highlight.fade_opacity == 0.1
    assert config.highlight.link_opacity == 0.35
    assert config.highlight.label_size_default == 10
    assert config.highlight.label_size_focused == 12
    assert config.highlight.transition_ms == 500
    assert config.nodes.radius_min == 14
    assert config.nodes.radius_max == 60


def test_default_alpha_decay_reaches_alpha_min_in_300_ticks() -> None:
    config = SimulationConfig()
    assert (1.0 - config.alpha_decay) ** 300 == pytest.approx(config.alpha_min)


def test_canvas_overrides_from_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FORCEGRAPH_CANVAS_WIDTH", "640")
    monkeypatch.setenv("FORCEGRAPH_CANVAS_HEIGHT", "480")

    config = load_config()

    assert config.canvas.width == 640.0
    assert config.canvas.height == 480.0


def test_non_numeric_override_raises(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("FORCEGRAPH_CANVAS_WIDTH", "wide")

    with pytest.raises(ConfigError):
        load_config()


def test_config_path_from_environment(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    path = tmp_path / "viewer.yaml"
    path.write_text(yaml.safe_dump({"simulation": {"link_distance": 80}}), encoding="utf-8")
    monkeypatch.setenv("FORCEGRAPH_CONFIG", str(path))

    config = load_config()

    assert config.simulation.link_distance == 80
    assert config.simulation.link_strength == 0.125


def test_empty_file_yields_defaults(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")

    assert load_config(path) == ViewerConfig()


@pytest.mark.parametrize(
    "content",
    [
        "simulation: [unclosed",
        "- just\n- a list\n",
        "simulation:\n  velocity_decay: 2\n",
        "simulation:\n  distance_min: 5\n  distance_max: 2\n",
        "zoom:\n  scale_range: [0, 8]\n",
        "nodes:\n  radius_min: 40\n  radius_max: 20\n",
    ],
)
def test_invalid_files_raise_config_error(tmp_path: Path, content: str) -> None:
    path = tmp_path / "bad.yaml"
    path.write_text(content, encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(path)


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(tmp_path / "absent.yaml")


def test_from_mapping_layers_over_defaults() -> None:
    config = ViewerConfig.from_mapping({"highlight": {"transition_ms": 0}})

    assert config.highlight.transition_ms == 0
    assert config.highlight.fade_opacity == 0.1
    assert ViewerConfig.from_mapping(None) == ViewerConfig()

    with pytest.raises(ConfigError):
        ViewerConfig.from_mapping({"canvas": {"width": -1}})


def test_with_canvas_returns_updated_copy() -> None:
    config = ViewerConfig()

    resized = config.with_canvas(300, 200)

    assert resized.canvas.center == (150.0, 100.0)
    assert config.canvas.width == 1000.0
