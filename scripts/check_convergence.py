"""Run the force layout headlessly and report how it converges."""

from __future__ import annotations

import argparse
import dataclasses
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict, Optional, Tuple

from forcegraph.config import ConfigError, ViewerConfig, load_config
from forcegraph.graph.model import GraphLoadError, load_graph
from forcegraph.host.scheduler import ManualFrameScheduler
from forcegraph.layout.simulation import ForceSimulation, SimulationState

LOGGER = logging.getLogger(__name__)

DEFAULT_MAX_TICKS = 1000


@dataclasses.dataclass
class ConvergenceReport:
    """Outcome of a headless layout run."""

    nodes: int
    links: int
    ticks: int
    alpha: float
    converged: bool
    bounds: Tuple[float, float, float, float]

    @property
    def extent(self) -> Tuple[float, float]:
        """Return the width and height of the laid-out diagram."""

        min_x, min_y, max_x, max_y = self.bounds
        return max_x - min_x, max_y - min_y

    def format_report(self) -> str:
        """Generate a human-readable summary of the run."""

        min_x, min_y, max_x, max_y = self.bounds
        width, height = self.extent
        status = "converged" if self.converged else "did not converge"
        lines = [
            f"Graph: {self.nodes} nodes, {self.links} links",
            f"Layout {status} after {self.ticks} ticks (alpha={self.alpha:.5f})",
            f"Bounding box: ({min_x:.1f}, {min_y:.1f}) to ({max_x:.1f}, {max_y:.1f})",
            f"Extent: {width:.1f} x {height:.1f}",
        ]
        return "\n".join(lines)


def _read_graph(path: Path) -> Dict[str, Any]:
    with path.open("r", encoding="utf-8") as handle:
        return json.load(handle)


def run_layout(data: Dict[str, Any], config: ViewerConfig, max_ticks: int = DEFAULT_MAX_TICKS) -> ConvergenceReport:
    """Step the simulation frame by frame until it idles or the budget runs out.

    Args:
        data: Graph mapping with ``nodes`` and ``links``.
        config: Viewer configuration supplying physics and canvas settings.
        max_ticks: Upper bound on the number of frames to run.

    Returns:
        ConvergenceReport: Tick count, final alpha and bounding box.

    Raises:
        GraphLoadError: If the graph data is invalid.
    """

    graph = load_graph(data)
    scheduler = ManualFrameScheduler()
    simulation = ForceSimulation(
        graph.nodes,
        graph.links,
        config=config.simulation,
        center=config.canvas.center,
        scheduler=scheduler,
    )
    scheduler.advance(max_ticks)
    converged = simulation.state is SimulationState.IDLE
    if not converged:
        LOGGER.warning("Layout still running after %d ticks (alpha=%.5f)", simulation.ticks, simulation.alpha)
        simulation.stop()
    return ConvergenceReport(
        nodes=len(graph.nodes),
        links=len(graph.links),
        ticks=simulation.ticks,
        alpha=simulation.alpha,
        converged=converged,
        bounds=simulation.snapshot.bounds(),
    )


def _build_cli() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Run the force-directed layout headlessly and report convergence."
    )
    parser.add_argument("graph", type=Path, help="Path to a JSON file with nodes and links")
    parser.add_argument(
        "--config",
        type=Path,
        help="Viewer configuration YAML (defaults to FORCEGRAPH_CONFIG or config.yaml).",
    )
    parser.add_argument(
        "--max-ticks",
        type=int,
        default=DEFAULT_MAX_TICKS,
        help=f"Maximum number of ticks to simulate (default: {DEFAULT_MAX_TICKS}).",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    """Entry point for command-line execution."""

    parser = _build_cli()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(name)s - %(message)s",
    )

    try:
        config = load_config(args.config)
        data = _read_graph(args.graph)
        report = run_layout(data, config, max_ticks=args.max_ticks)
    except (ConfigError, GraphLoadError) as exc:
        print(f"Unable to lay out graph: {exc}", file=sys.stderr)
        return 1
    except (OSError, json.JSONDecodeError) as exc:
        print(f"Unable to read graph file {args.graph}: {exc}", file=sys.stderr)
        return 1

    print(report.format_report())
    return 0 if report.converged else 2


if __name__ == "__main__":
    sys.exit(main())
