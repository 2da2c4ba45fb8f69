"""Turns discrete driver input into steering, drive and brake commands.

Per tick, unless the parking brake is engaged:

1. Target steering is +max_steer (left), -max_steer (right) or 0, with
   simultaneous left+right resolved by the tuning's SteerConflict policy.
2. The applied steering approaches the target exponentially:
       current += (target - current) * smoothing * (dt * reference_frame_rate)
   with the step fraction capped at 1 so it never overshoots.
3. Accelerate drives with +max_engine_force on the rear wheels; reverse
   drives with -max_engine_force * reverse_force_ratio. Reverse pressed
   while still rolling forward faster than braking_speed_threshold brakes
   instead of reversing.
4. Brake force is max_brake_force on all wheels while braking, else 0.
5. Brake lights are on while braking or while the parking brake is engaged.

With the parking brake engaged, ControlState is ignored: drive force is
zeroed and the parking lock force is applied to every wheel each tick.
"""

from __future__ import annotations
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from offroadsim.config.tuning import SteerConflict, VehicleTuningConfig
from offroadsim.errors import VehicleNotReadyError
from offroadsim.vehicle.controls import ControlState
from offroadsim.vehicle.model import VehicleModel
from offroadsim.vehicle.wheel import ALL_WHEELS, FRONT_WHEELS, REAR_WHEELS

logger = logging.getLogger(__name__)


class DriveState(Enum):
    """Controller state derived from ControlState each tick."""
    IDLE = "idle"
    DRIVING = "driving"
    REVERSING = "reversing"
    BRAKING = "braking"
    PARKING_BRAKED = "parking_braked"


@dataclass
class BrakeLightState:
    """Left/right brake light intensities observed by the renderer."""
    left: float = 0.0
    right: float = 0.0
    on_intensity: float = 1.0

    def set(self, on: bool) -> None:
        level = self.on_intensity if on else 0.0
        self.left = level
        self.right = level

    @property
    def is_on(self) -> bool:
        return self.left > 0.0 or self.right > 0.0


class VehicleController:
    """Owns control state evaluation and drives a VehicleModel."""

    def __init__(self, config: VehicleTuningConfig, controls: Optional[ControlState] = None,
                 vehicle: Optional[VehicleModel] = None):
        """Initialize controller.

        Args:
            config: Vehicle tuning (shared with the model and friction zones)
            controls: Input state to read. A fresh one is created if None.
            vehicle: Vehicle to drive; may be connected later
        """
        self.config = config
        self.controls = controls or ControlState()
        self.vehicle = vehicle
        self.brake_lights = BrakeLightState()

        self._steering: float = 0.0
        self._engine_force: float = 0.0
        self._brake_force: float = 0.0
        self._state = DriveState.IDLE

    def connect(self, vehicle: VehicleModel) -> None:
        self.vehicle = vehicle

    @property
    def state(self) -> DriveState:
        return self._state

    @property
    def steering(self) -> float:
        """Current smoothed steering angle (radians)."""
        return self._steering

    @property
    def engine_force(self) -> float:
        return self._engine_force

    @property
    def brake_force(self) -> float:
        return self._brake_force

    def target_steering(self) -> float:
        """Steering target for the current input, after conflict resolution."""
        left, right = self.controls.steer_left, self.controls.steer_right
        max_steer = self.config.max_steer

        if left and right:
            policy = self.config.steer_conflict
            if policy is SteerConflict.RIGHT_WINS:
                return -max_steer
            if policy is SteerConflict.LEFT_WINS:
                return max_steer
            return 0.0
        if left:
            return max_steer
        if right:
            return -max_steer
        return 0.0

    def tick(self, dt: float) -> DriveState:
        """Evaluate input and write commands to the vehicle.

        Args:
            dt: Frame time (seconds)

        Returns:
            The drive state for this tick

        Raises:
            VehicleNotReadyError: If no constructed vehicle is connected
        """
        vehicle = self.vehicle
        if vehicle is None or not vehicle.is_ready:
            raise VehicleNotReadyError("Controller tick without a constructed vehicle")

        if self.controls.parking_brake_engaged:
            new_state = self._hold_parking_brake(vehicle)
        else:
            new_state = self._drive(vehicle, dt)

        if new_state is not self._state:
            logger.debug("Drive state %s -> %s", self._state.value, new_state.value)
            self._state = new_state
        return new_state

    def _hold_parking_brake(self, vehicle: VehicleModel) -> DriveState:
        cfg = self.config
        self._engine_force = 0.0
        self._brake_force = cfg.parking_brake_force
        for i in REAR_WHEELS:
            vehicle.apply_engine_force(0.0, i)
        for i in ALL_WHEELS:
            vehicle.set_brake(cfg.parking_brake_force, i)

        self.controls.is_braking = False
        self.brake_lights.set(True)
        return DriveState.PARKING_BRAKED

    def _drive(self, vehicle: VehicleModel, dt: float) -> DriveState:
        cfg = self.config
        controls = self.controls

        # Steering
        target = self.target_steering()
        alpha = min(1.0, cfg.steer_smoothing * dt * cfg.reference_frame_rate)
        self._steering += (target - self._steering) * alpha
        for i in FRONT_WHEELS:
            vehicle.set_steering(self._steering, i)

        # Reverse while rolling forward means brake
        braking = controls.reverse and vehicle.forward_speed > cfg.braking_speed_threshold

        if controls.accelerate:
            engine = cfg.max_engine_force
        elif controls.reverse and not braking:
            engine = -cfg.reverse_force
        else:
            engine = 0.0
        brake = cfg.max_brake_force if braking else 0.0

        self._engine_force = engine
        self._brake_force = brake
        for i in REAR_WHEELS:
            vehicle.apply_engine_force(engine, i)
        for i in ALL_WHEELS:
            vehicle.set_brake(brake, i)

        controls.is_braking = brake > 0.0
        self.brake_lights.set(controls.is_braking)

        if braking:
            return DriveState.BRAKING
        if controls.accelerate:
            return DriveState.DRIVING
        if controls.reverse:
            return DriveState.REVERSING
        return DriveState.IDLE

    def reset(self) -> None:
        """Forget smoothed steering and commands. ControlState is kept."""
        self._steering = 0.0
        self._engine_force = 0.0
        self._brake_force = 0.0
        self._state = DriveState.IDLE
        self.brake_lights.set(self.controls.parking_brake_engaged)
