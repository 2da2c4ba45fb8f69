#!/usr/bin/env python3
"""Interactive offroad driving demo.

This example demonstrates:
- Building the base scenario (hills, mud patch, follow and orbit cameras)
- Routing keyboard and mouse input through the simulation loop
- Using the Pygame renderer for visualization

Run with: python examples/drive_demo.py
"""

import sys
import os
import logging

# Add parent directory to path for development
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from offroadsim.simulation.scenario import build_scenario
from offroadsim.vehicle.controls import KeyboardInput


def main():
    """Run interactive driving demo."""
    try:
        from offroadsim.visualization import PygameRenderer
        renderer = PygameRenderer()
    except ImportError:
        print("This demo requires pygame. Install with: pip install pygame")
        return 1

    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    print("OffroadSim Drive Demo")
    print("=" * 40)
    print()
    print("Controls:")
    print("  W/↑     - Accelerate")
    print("  S/↓     - Reverse (brakes while rolling forward)")
    print("  A/D     - Steer left/right")
    print("  Space   - Parking brake")
    print("  R       - Reset vehicle")
    print("  C       - Follow / orbit camera")
    print("  H       - Toggle HUD")
    print("  Esc     - Quit")
    print()
    print("Tips:")
    print("  1. The brown square ahead and to the left is mud")
    print("  2. Drive into it and feel the wheels lose grip")
    print("  3. Switch to the orbit camera and drag to look around")
    print()

    loop = build_scenario()
    keyboard = KeyboardInput(loop.controls)
    renderer.init()

    print("Starting simulation...")

    try:
        while loop.running:
            renderer.handle_input(loop, keyboard)
            if not loop.running:
                break
            dt = renderer.frame_time(60)
            loop.tick(dt, render=renderer.render)
    except KeyboardInterrupt:
        pass
    finally:
        renderer.quit()

    print("\nSimulation ended.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
