"""Tests for the headless convergence report."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from forcegraph.config import ViewerConfig
from forcegraph.graph.model import GraphLoadError
from scripts.check_convergence import main, run_layout

FIXTURE_PATH = Path(__file__).resolve().parents[1] / "fixtures" / "graphs" / "chain.json"


@pytest.fixture()
def chain_graph() -> dict:
    with FIXTURE_PATH.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def test_run_layout_converges_and_reports_bounds(chain_graph: dict) -> None:
    report = run_layout(chain_graph, ViewerConfig())

    assert report.converged
    assert report.nodes == 5
    assert report.links == 5
    assert report.alpha < 0.001
    assert report.ticks < 1000
    min_x, min_y, max_x, max_y = report.bounds
    assert min_x < 500.0 < max_x
    assert min_y < 400.0 < max_y
    assert "converged after" in report.format_report()


def test_tick_budget_limits_run(chain_graph: dict) -> None:
    report = run_layout(chain_graph, ViewerConfig(), max_ticks=10)

    assert not report.converged
    assert report.ticks == 10
    assert "did not converge" in report.format_report()


def test_invalid_graph_raises(chain_graph: dict) -> None:
    chain_graph["links"].append({"source": "alpha", "target": "omega"})

    with pytest.raises(GraphLoadError):
        run_layout(chain_graph, ViewerConfig())


def test_main_prints_report(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = main([str(FIXTURE_PATH)])

    assert exit_code == 0
    output = capsys.readouterr().out
    assert "Graph: 5 nodes, 5 links" in output
    assert "Bounding box" in output


def test_main_reports_unreadable_graph(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    path = tmp_path / "broken.json"
    path.write_text("{not json", encoding="utf-8")

    assert main([str(path)]) == 1
    assert "Unable to read graph file" in capsys.readouterr().err


def test_main_exit_code_when_budget_exhausted() -> None:
    assert main([str(FIXTURE_PATH), "--max-ticks", "5"]) == 2
