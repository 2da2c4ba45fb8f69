"""Scenario assembly and scripted driving for headless runs."""

from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from offroadsim.camera.follow import FollowCamera
from offroadsim.camera.orbit import (
    CameraConstraint, FixedHeightDistanceConstraint, FixedRadiusConstraint, OrbitCamera,
)
from offroadsim.config.tuning import VehicleTuningConfig
from offroadsim.core.world import World
from offroadsim.errors import AssetLoadError, MissingNodeError
from offroadsim.simulation.loop import DriveMode, SimulationLoop
from offroadsim.simulation.sync import VisualRig, build_vehicle_visual
from offroadsim.simulation.telemetry import TelemetryRecorder
from offroadsim.terrain.friction_zones import TerrainFrictionZones
from offroadsim.terrain.heightfield import FlatTerrain, HeightfieldTerrain, Terrain
from offroadsim.vehicle.controller import VehicleController
from offroadsim.vehicle.controls import ControlState
from offroadsim.vehicle.model import VehicleModel

logger = logging.getLogger(__name__)


TERRAIN_KINDS = ("hills", "flat")
CONSTRAINT_KINDS = ("radius", "height")


def build_terrain(kind: str = "hills", seed: int = 0, size: float = 100.0) -> Terrain:
    """Create the ground.

    Raises:
        AssetLoadError: If the terrain cannot be produced
    """
    if kind == "flat":
        return FlatTerrain()
    if kind == "hills":
        try:
            return HeightfieldTerrain.generate(size=size, seed=seed)
        except ValueError as exc:
            raise AssetLoadError(f"Heightfield generation failed: {exc}") from exc
    raise AssetLoadError(f"Unknown terrain '{kind}'. Available: {', '.join(TERRAIN_KINDS)}")


def build_constraint(kind: str = "radius") -> CameraConstraint:
    if kind == "radius":
        return FixedRadiusConstraint()
    if kind == "height":
        return FixedHeightDistanceConstraint()
    raise ValueError(f"Unknown camera constraint '{kind}'. Available: {', '.join(CONSTRAINT_KINDS)}")


def build_scenario(config: Optional[VehicleTuningConfig] = None, terrain: str = "hills",
                   seed: int = 0, constraint: str = "radius", with_visuals: bool = True,
                   record: bool = False) -> SimulationLoop:
    """Assemble world, vehicle, controller, cameras and rig into a loop.

    Args:
        config: Vehicle tuning; offroad preset if None
        terrain: "hills" (generated heightfield) or "flat"
        seed: Heightfield seed
        constraint: Orbit camera constraint, "radius" or "height"
        with_visuals: Build the scene nodes and rig
        record: Attach a TelemetryRecorder

    Returns:
        Ready-to-tick SimulationLoop

    Raises:
        AssetLoadError: If the terrain or the vehicle visual cannot be built
    """
    config = config or VehicleTuningConfig.offroad()

    ground = build_terrain(terrain, seed)
    zones = TerrainFrictionZones.with_mud(config)
    world = World(terrain=ground)

    vehicle = VehicleModel(config).build(world)
    controller = VehicleController(config, ControlState(), vehicle)

    start = vehicle.chassis_transform()
    cameras = {
        DriveMode.FOLLOW: FollowCamera(start),
        DriveMode.ORBIT: OrbitCamera(start, build_constraint(constraint)),
    }

    rig = None
    if with_visuals:
        try:
            rig = VisualRig.bind(build_vehicle_visual(config))
        except (MissingNodeError, ValueError) as exc:
            raise AssetLoadError(f"Vehicle visual could not be bound: {exc}") from exc

    telemetry = TelemetryRecorder() if record else None

    logger.info("Scenario ready: terrain=%s seed=%d constraint=%s", terrain, seed, constraint)
    return SimulationLoop(world, vehicle, controller, zones, cameras, rig=rig, telemetry=telemetry)


@dataclass
class ScriptStep:
    """Hold the named inputs during [start, end) seconds."""
    start: float
    end: float
    inputs: Tuple[str, ...] = ()


@dataclass
class DriveScript:
    """Timed input sequence applied to a loop's ControlState."""
    name: str
    description: str
    duration: float
    steps: List[ScriptStep] = field(default_factory=list)
    parking_brake_at: Optional[float] = None

    def apply(self, loop: SimulationLoop) -> None:
        """Set ControlState for the loop's current time."""
        t = loop.world.time
        controls = loop.controls
        active = set()
        for step in self.steps:
            if step.start <= t < step.end:
                active.update(step.inputs)

        controls.accelerate = "accelerate" in active
        controls.reverse = "reverse" in active
        controls.steer_left = "steer_left" in active
        controls.steer_right = "steer_right" in active

        if (self.parking_brake_at is not None and t >= self.parking_brake_at
                and not controls.parking_brake_engaged):
            loop.toggle_parking_brake()


DRIVE_SCRIPTS: Dict[str, DriveScript] = {
    "accelerate": DriveScript(
        "accelerate", "Full throttle straight ahead", 4.0,
        [ScriptStep(0.5, 4.0, ("accelerate",))],
    ),
    "reverse": DriveScript(
        "reverse", "Reverse straight back", 4.0,
        [ScriptStep(0.5, 4.0, ("reverse",))],
    ),
    "brake": DriveScript(
        "brake", "Accelerate, then hold reverse to brake to a stop", 7.0,
        [ScriptStep(0.5, 3.5, ("accelerate",)), ScriptStep(3.5, 7.0, ("reverse",))],
    ),
    "slalom": DriveScript(
        "slalom", "Throttle with alternating steering", 8.0,
        [
            ScriptStep(0.5, 8.0, ("accelerate",)),
            ScriptStep(2.0, 3.5, ("steer_left",)),
            ScriptStep(3.5, 5.0, ("steer_right",)),
            ScriptStep(5.0, 6.5, ("steer_left",)),
        ],
    ),
    "mud": DriveScript(
        "mud", "Drive diagonally into the mud patch", 10.0,
        [ScriptStep(0.5, 1.6, ("accelerate", "steer_left")),
         ScriptStep(1.6, 10.0, ("accelerate",))],
    ),
    "parking": DriveScript(
        "parking", "Accelerate, then engage the parking brake with throttle held", 6.0,
        [ScriptStep(0.5, 6.0, ("accelerate",))],
        parking_brake_at=3.0,
    ),
}


def get_drive_script(name: str) -> DriveScript:
    """Get drive script by name.

    Raises:
        ValueError: If script name not found
    """
    if name not in DRIVE_SCRIPTS:
        available = ", ".join(DRIVE_SCRIPTS.keys())
        raise ValueError(f"Unknown script '{name}'. Available: {available}")
    return DRIVE_SCRIPTS[name]


def run_script(loop: SimulationLoop, script: DriveScript, frame_dt: float = 1.0 / 60.0) -> int:
    """Drive a loop through a script; returns completed ticks."""
    logger.info("Running script '%s' for %.1fs", script.name, script.duration)
    return loop.run_for(script.duration, frame_dt, on_frame=script.apply)
