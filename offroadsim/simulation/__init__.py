"""Frame loop, visual sync, scenarios and telemetry."""

from offroadsim.simulation.loop import DriveMode, SimulationLoop
from offroadsim.simulation.scenario import (
    DRIVE_SCRIPTS, DriveScript, ScriptStep, build_scenario, build_terrain,
    get_drive_script, run_script,
)
from offroadsim.simulation.sync import (
    SceneNode, VehicleVisual, VisualRig, build_vehicle_visual,
)
from offroadsim.simulation.telemetry import TelemetryRecorder, TelemetrySample

__all__ = [
    "DriveMode", "SimulationLoop",
    "DRIVE_SCRIPTS", "DriveScript", "ScriptStep", "build_scenario", "build_terrain",
    "get_drive_script", "run_script",
    "SceneNode", "VehicleVisual", "VisualRig", "build_vehicle_visual",
    "TelemetryRecorder", "TelemetrySample",
]
