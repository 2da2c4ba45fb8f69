"""Matplotlib-based plotting for recorded drive telemetry.

Provides static plots for:
- Ground track with friction zones
- Speed, steering and force channels over time
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Optional, Tuple

import numpy as np

try:
    import matplotlib.pyplot as plt
    from matplotlib.patches import Rectangle
    MATPLOTLIB_AVAILABLE = True
except ImportError:
    MATPLOTLIB_AVAILABLE = False

if TYPE_CHECKING:
    from offroadsim.simulation.telemetry import TelemetryRecorder
    from offroadsim.terrain.friction_zones import TerrainFrictionZones


def _check_matplotlib():
    """Check if matplotlib is available."""
    if not MATPLOTLIB_AVAILABLE:
        raise ImportError(
            "Matplotlib is required for plotting. "
            "Install it with: pip install matplotlib"
        )


class TelemetryPlotter:
    """Plot vehicle trajectory and telemetry."""

    @staticmethod
    def plot_trajectory(
        recorder: TelemetryRecorder,
        zones: Optional[TerrainFrictionZones] = None,
        ax: Optional[plt.Axes] = None,
    ) -> plt.Figure:
        """Plot the ground track (X/Z plane).

        Args:
            recorder: Recorded samples
            zones: Optional friction zones drawn under the track
            ax: Optional axes to plot on

        Returns:
            Matplotlib figure
        """
        _check_matplotlib()

        if ax is None:
            fig, ax = plt.subplots(figsize=(8, 8))
        else:
            fig = ax.figure

        if zones is not None:
            for zone in zones.zones:
                ax.add_patch(Rectangle(
                    (zone.min_x, zone.min_z), zone.max_x - zone.min_x, zone.max_z - zone.min_z,
                    color='saddlebrown', alpha=0.25, label=f'{zone.name} (μ={zone.friction:g})',
                ))

        if len(recorder):
            data = recorder.as_arrays()
            x, z = data["x"], data["z"]
            ax.plot(x, z, 'b-', linewidth=1.5, alpha=0.7)
            ax.plot(x[0], z[0], 'go', markersize=10, label='Start')
            ax.plot(x[-1], z[-1], 'rs', markersize=10, label='End')

        ax.set_xlabel('X (meters)')
        ax.set_ylabel('Z (meters)')
        ax.set_title('Vehicle Trajectory')
        ax.legend()
        ax.grid(True, alpha=0.3)
        ax.set_aspect('equal')

        return fig

    @staticmethod
    def plot_telemetry(
        recorder: TelemetryRecorder,
        figsize: Tuple[float, float] = (12, 9),
    ) -> plt.Figure:
        """Plot telemetry channels over time.

        Args:
            recorder: Recorded samples
            figsize: Figure size

        Returns:
            Matplotlib figure
        """
        _check_matplotlib()

        fig, axes = plt.subplots(4, 1, figsize=figsize, sharex=True)
        data = recorder.as_arrays()
        time = data["time"]

        axes[0].plot(time, data["forward_speed"] * 3.6, 'b-')
        axes[0].set_ylabel('Speed (km/h)')
        axes[0].axhline(y=0, color='k', linewidth=0.5)
        axes[0].grid(True, alpha=0.3)

        axes[1].plot(time, np.degrees(data["steering"]), 'm-')
        axes[1].set_ylabel('Steering (°)')
        axes[1].axhline(y=0, color='k', linewidth=0.5)
        axes[1].grid(True, alpha=0.3)

        axes[2].plot(time, data["engine_force"], 'g-', label='Engine')
        axes[2].plot(time, data["brake_force"], 'r-', label='Brake')
        axes[2].set_ylabel('Force (N)')
        axes[2].legend()
        axes[2].grid(True, alpha=0.3)

        axes[3].plot(time, data["friction"], 'k-')
        axes[3].set_ylabel('Friction slip')
        axes[3].set_ylim(bottom=0)
        axes[3].grid(True, alpha=0.3)

        axes[3].set_xlabel('Time (seconds)')
        fig.suptitle('Telemetry')
        fig.tight_layout()

        return fig
