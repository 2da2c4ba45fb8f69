"""
OffroadSim - Drivable offroad vehicle on procedural terrain with chase cameras.

A small vehicle sandbox featuring:
- Raycast-wheel vehicle on a rigid-body chassis
- Keyboard driving with smoothed steering, braking and a parking brake
- Terrain friction zones (mud) with edge-triggered wheel updates
- Follow and constrained orbit chase cameras
"""

__version__ = "0.1.0"

from offroadsim.core.vector import Quaternion, Vector3
from offroadsim.core.world import World
from offroadsim.config.tuning import VehicleTuningConfig
from offroadsim.vehicle.model import VehicleModel
from offroadsim.vehicle.controller import VehicleController
from offroadsim.simulation.loop import SimulationLoop
from offroadsim.simulation.scenario import build_scenario

__all__ = [
    "Quaternion",
    "Vector3",
    "World",
    "VehicleTuningConfig",
    "VehicleModel",
    "VehicleController",
    "SimulationLoop",
    "build_scenario",
    "__version__",
]
