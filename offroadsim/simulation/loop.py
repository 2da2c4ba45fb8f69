"""Per-frame orchestration of input, physics, terrain, sync and camera.

Frame order:
    1. controller tick (input -> steering, drive, brake)
    2. world step
    3. friction zone re-evaluation at the new chassis position
    4. wheel transform refresh and scene node sync
    5. camera update
    6. render callback

The frame time is clamped to max_frame_dt so a stalled frame never
becomes one huge physics step.
"""

from __future__ import annotations
import logging
from enum import Enum
from typing import Callable, Dict, Optional

from offroadsim.camera.base import ChaseCamera
from offroadsim.core.world import World
from offroadsim.errors import VehicleNotReadyError
from offroadsim.simulation.sync import VisualRig
from offroadsim.simulation.telemetry import TelemetryRecorder, TelemetrySample
from offroadsim.terrain.friction_zones import TerrainFrictionZones
from offroadsim.vehicle.controller import VehicleController
from offroadsim.vehicle.controls import ControlAction
from offroadsim.vehicle.model import VehicleModel

logger = logging.getLogger(__name__)


class DriveMode(Enum):
    """Which camera the loop drives."""
    FOLLOW = "follow"
    ORBIT = "orbit"


class SimulationLoop:
    """Single-threaded frame loop owning the world and the vehicle."""

    def __init__(self, world: World, vehicle: VehicleModel, controller: VehicleController,
                 friction_zones: TerrainFrictionZones, cameras: Dict[DriveMode, ChaseCamera],
                 rig: Optional[VisualRig] = None, telemetry: Optional[TelemetryRecorder] = None,
                 max_frame_dt: float = 1.0 / 30.0, mode: DriveMode = DriveMode.FOLLOW):
        """Initialize loop.

        Args:
            world: Physics world the vehicle is registered with
            vehicle: Vehicle model driven by the controller
            controller: Controller reading the ControlState
            friction_zones: Terrain traction zones
            cameras: Camera per drive mode; must contain `mode`
            rig: Scene nodes to keep in sync (None for headless runs)
            telemetry: Optional per-tick recorder
            max_frame_dt: Upper bound on the physics step per frame (s)
            mode: Initial drive mode
        """
        if mode not in cameras:
            raise ValueError(f"No camera for initial mode {mode.value}")
        if max_frame_dt <= 0:
            raise ValueError(f"max_frame_dt must be positive, got {max_frame_dt}")

        self.world = world
        self.vehicle = vehicle
        self.controller = controller
        self.friction_zones = friction_zones
        self.cameras = cameras
        self.rig = rig
        self.telemetry = telemetry
        self.max_frame_dt = max_frame_dt
        self.mode = mode

        self.frame = 0
        self.aborted_ticks = 0
        self.running = True

    @property
    def controls(self):
        return self.controller.controls

    @property
    def camera(self) -> ChaseCamera:
        return self.cameras[self.mode]

    def tick(self, frame_dt: float, render: Optional[Callable[[SimulationLoop], None]] = None) -> bool:
        """Run one frame.

        Args:
            frame_dt: Real time since the previous frame (s)
            render: Optional callback drawing the frame

        Returns:
            False if the frame was skipped or aborted, True otherwise
        """
        if frame_dt <= 0:
            return False
        dt = min(frame_dt, self.max_frame_dt)

        try:
            self.controller.tick(dt)
        except VehicleNotReadyError as exc:
            self.aborted_ticks += 1
            logger.error("Tick %d aborted: %s", self.frame, exc)
            return False

        self.world.step(dt)
        self.friction_zones.apply(self.vehicle)

        self.vehicle.update_wheel_transforms()
        if self.rig is not None:
            self.rig.sync(self.vehicle, self.controller.brake_lights)

        self.camera.update(dt, self.vehicle.chassis_transform())

        if self.telemetry is not None:
            self._record()

        if render is not None:
            render(self)

        self.frame += 1
        return True

    def _record(self) -> None:
        position = self.vehicle.chassis.position
        self.telemetry.record(TelemetrySample(
            time=self.world.time,
            x=position.x,
            y=position.y,
            z=position.z,
            forward_speed=self.vehicle.forward_speed,
            steering=self.controller.steering,
            engine_force=self.controller.engine_force,
            brake_force=self.controller.brake_force,
            friction=self.vehicle.friction_slip,
            state=self.controller.state.value,
        ))

    def run_for(self, duration: float, frame_dt: float = 1.0 / 60.0,
                on_frame: Optional[Callable[[SimulationLoop], None]] = None) -> int:
        """Headless run of fixed frames.

        Args:
            duration: Simulated seconds
            frame_dt: Frame length (s)
            on_frame: Called before every tick, e.g. to script input

        Returns:
            Number of completed ticks
        """
        completed = 0
        frames = int(round(duration / frame_dt))
        for _ in range(frames):
            if on_frame is not None:
                on_frame(self)
            if self.tick(frame_dt):
                completed += 1
        return completed

    # -- UI operations ------------------------------------------------

    def reset(self) -> None:
        """Put the vehicle back at its spawn pose. Held keys stay held."""
        self.vehicle.reset()
        self.controller.reset()
        logger.info("Simulation reset at frame %d", self.frame)

    def toggle_parking_brake(self) -> bool:
        engaged = self.controls.toggle_parking_brake()
        logger.info("Parking brake %s", "engaged" if engaged else "released")
        return engaged

    def toggle_drive_mode(self) -> DriveMode:
        """Switch between follow and orbit cameras when both exist."""
        modes = [m for m in DriveMode if m in self.cameras]
        index = modes.index(self.mode)
        self.mode = modes[(index + 1) % len(modes)]
        logger.info("Drive mode: %s", self.mode.value)
        return self.mode

    def handle_action(self, action: Optional[ControlAction]) -> None:
        """Perform a host action returned by KeyboardInput."""
        if action is ControlAction.RESET:
            self.reset()
        elif action is ControlAction.DRIVE_MODE:
            self.toggle_drive_mode()
        elif action is ControlAction.QUIT:
            self.running = False
