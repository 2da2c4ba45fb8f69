#!/usr/bin/env python3
"""Headless comparison of traction on ground and in mud.

Runs the same full-throttle script twice on flat terrain: once from the
normal spawn and once with the vehicle spawned inside the mud patch, then
prints distance and top speed for each and optionally plots both tracks.

Run with: python examples/mud_run.py [--plot]
"""

import sys
import os
import dataclasses

# Add parent directory to path for development
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from offroadsim.config.tuning import VehicleTuningConfig
from offroadsim.core.vector import Vector3
from offroadsim.simulation.scenario import build_scenario, get_drive_script, run_script


def drive(config):
    loop = build_scenario(config, terrain="flat", with_visuals=False, record=True)
    run_script(loop, get_drive_script("accelerate"))
    return loop


def main():
    """Compare ground and mud runs."""
    base = VehicleTuningConfig.offroad()
    in_mud = dataclasses.replace(base, initial_position=Vector3(15.0, 1.0, 8.0))

    print("OffroadSim Mud Run")
    print("=" * 40)

    results = {}
    for label, config in (("ground", base), ("mud", in_mud)):
        loop = drive(config)
        data = loop.telemetry.as_arrays()
        results[label] = loop
        print(f"  {label:8} distance {loop.telemetry.distance_travelled():6.2f} m, "
              f"top speed {data['forward_speed'].max() * 3.6:5.1f} km/h, "
              f"friction {data['friction'][-1]:.2f}")

    if "--plot" in sys.argv:
        try:
            import matplotlib.pyplot as plt
        except ImportError:
            print("Plotting requires matplotlib. Install with: pip install matplotlib")
            return 1

        from offroadsim.visualization.plotter import TelemetryPlotter

        fig, axes = plt.subplots(1, 2, figsize=(14, 7))
        for ax, (label, loop) in zip(axes, results.items()):
            TelemetryPlotter.plot_trajectory(loop.telemetry, loop.friction_zones, ax=ax)
            ax.set_title(f"Track ({label})")
        plt.show()

    return 0


if __name__ == "__main__":
    sys.exit(main())
