"""Tests for plotting and renderer math (no display needed)."""

import matplotlib
matplotlib.use("Agg")

import matplotlib.pyplot as plt
import pytest

from offroadsim.camera.base import look_at_matrix
from offroadsim.core.vector import Vector3
from offroadsim.simulation.scenario import build_scenario, get_drive_script, run_script
from offroadsim.simulation.telemetry import TelemetryRecorder
from offroadsim.visualization.plotter import TelemetryPlotter


@pytest.fixture(scope="module")
def recorded_loop():
    loop = build_scenario(terrain="flat", with_visuals=False, record=True)
    run_script(loop, get_drive_script("slalom"))
    return loop


class TestTelemetryPlotter:
    """Tests for TelemetryPlotter."""

    def test_plot_telemetry(self, recorded_loop) -> None:
        fig = TelemetryPlotter.plot_telemetry(recorded_loop.telemetry)
        assert len(fig.axes) == 4
        plt.close(fig)

    def test_plot_trajectory_with_zones(self, recorded_loop) -> None:
        fig = TelemetryPlotter.plot_trajectory(recorded_loop.telemetry,
                                               recorded_loop.friction_zones)
        ax = fig.axes[0]
        assert len(ax.patches) == 1
        assert len(ax.lines) == 3
        plt.close(fig)

    def test_plot_trajectory_empty(self) -> None:
        fig = TelemetryPlotter.plot_trajectory(TelemetryRecorder())
        assert len(fig.axes[0].lines) == 0
        plt.close(fig)

    def test_save(self, recorded_loop, tmp_path) -> None:
        path = tmp_path / "telemetry.png"
        fig = TelemetryPlotter.plot_telemetry(recorded_loop.telemetry)
        fig.savefig(path)
        plt.close(fig)
        assert path.stat().st_size > 0


class TestRendererProjection:
    """Tests for the renderer's perspective projection."""

    @pytest.fixture
    def renderer(self):
        renderer_module = pytest.importorskip("offroadsim.visualization.renderer")
        if not renderer_module.PYGAME_AVAILABLE:
            pytest.skip("pygame not installed")
        return renderer_module.PygameRenderer(renderer_module.RenderConfig(width=800, height=600))

    def test_box_has_twelve_edges(self) -> None:
        renderer_module = pytest.importorskip("offroadsim.visualization.renderer")
        assert len(renderer_module._BOX_EDGES) == 12

    def test_point_ahead_projects_to_center(self, renderer) -> None:
        view = look_at_matrix(Vector3(0, 0, 0), Vector3(0, 0, -1))
        assert renderer._project(view, Vector3(0, 0, -10)) == (400, 300)

    def test_point_left_of_view_projects_left(self, renderer) -> None:
        view = look_at_matrix(Vector3(0, 0, 0), Vector3(0, 0, -1))
        sx, sy = renderer._project(view, Vector3(-2, 1, -10))
        assert sx < 400
        assert sy < 300

    def test_point_behind_is_culled(self, renderer) -> None:
        view = look_at_matrix(Vector3(0, 0, 0), Vector3(0, 0, -1))
        assert renderer._project(view, Vector3(0, 0, 5)) is None
