"""Vehicle model: chassis rigid body plus four raycast wheels.

Sign convention: a positive engine force always drives the chassis toward
its local +Z (forward). Steering is positive toward the driver's left.

Wheel indices follow WheelPosition: 0 front-left, 1 front-right,
2 rear-left, 3 rear-right. Steering is accepted on the front wheels only,
engine force on the rear (driven) wheels only; brakes on any wheel.
"""

from __future__ import annotations
import logging
from typing import Optional

from offroadsim.config.tuning import VehicleTuningConfig
from offroadsim.core.rigid_body import RigidBody, box_inertia
from offroadsim.core.vector import Quaternion, Transform
from offroadsim.core.world import World
from offroadsim.errors import VehicleNotReadyError
from offroadsim.vehicle.raycast_vehicle import RaycastVehicle
from offroadsim.vehicle.wheel import ALL_WHEELS, FRONT_WHEELS, REAR_WHEELS, build_wheel_specs

logger = logging.getLogger(__name__)


class VehicleModel:
    """Wheeled vehicle owned by the simulation loop.

    Construction is two-phase: the model is created from a tuning, then
    build() creates the chassis and registers it with a World. Every
    operation that touches the chassis before build() raises
    VehicleNotReadyError.
    """

    def __init__(self, config: Optional[VehicleTuningConfig] = None):
        """Initialize vehicle model.

        Args:
            config: Vehicle tuning. Defaults to the offroad preset.
        """
        self.config = config or VehicleTuningConfig.offroad()
        self._vehicle: Optional[RaycastVehicle] = None
        self._world: Optional[World] = None

    def build(self, world: World) -> VehicleModel:
        """Create the chassis and wheels and register them with the world."""
        if self._vehicle is not None:
            raise RuntimeError("VehicleModel.build() called twice")

        cfg = self.config
        chassis = RigidBody(
            mass=cfg.chassis_mass,
            inertia=box_inertia(cfg.chassis_mass, cfg.chassis_half_extents),
            linear_damping=cfg.linear_damping,
            angular_damping=cfg.angular_damping,
        )
        chassis.reset_to(cfg.initial_position, Quaternion.from_yaw(cfg.initial_yaw))

        self._vehicle = RaycastVehicle(chassis, build_wheel_specs(cfg))
        self._world = world
        world.add_vehicle(self._vehicle)

        logger.info("Vehicle built: mass=%.0f kg at %s", cfg.chassis_mass, cfg.initial_position)
        return self

    @property
    def is_ready(self) -> bool:
        """Whether build() has completed."""
        return self._vehicle is not None

    def _require(self) -> RaycastVehicle:
        if self._vehicle is None:
            raise VehicleNotReadyError("Vehicle chassis does not exist yet; call build() first")
        return self._vehicle

    @property
    def chassis(self) -> RigidBody:
        return self._require().chassis

    @property
    def raycast_vehicle(self) -> RaycastVehicle:
        return self._require()

    # -- commands -----------------------------------------------------

    def set_steering(self, angle: float, wheel_index: int) -> None:
        """Set steering angle (radians) on a front wheel."""
        vehicle = self._require()
        self._check_index(wheel_index)
        if wheel_index not in FRONT_WHEELS:
            raise ValueError(f"Steering applies to front wheels {FRONT_WHEELS}, got {wheel_index}")
        vehicle.set_steering_value(angle, wheel_index)

    def apply_engine_force(self, force: float, wheel_index: int) -> None:
        """Apply drive force on a rear wheel. Positive drives forward."""
        vehicle = self._require()
        self._check_index(wheel_index)
        if wheel_index not in REAR_WHEELS:
            raise ValueError(f"Engine force applies to rear wheels {REAR_WHEELS}, got {wheel_index}")
        vehicle.apply_engine_force(force, wheel_index)

    def set_brake(self, force: float, wheel_index: int) -> None:
        """Set non-negative brake force on any wheel."""
        vehicle = self._require()
        self._check_index(wheel_index)
        if force < 0:
            raise ValueError(f"Brake force must be non-negative, got {force}")
        vehicle.set_brake(force, wheel_index)

    def set_friction_slip(self, friction: float) -> None:
        """Write the same friction-slip coefficient to all four wheels."""
        vehicle = self._require()
        for spec in vehicle.wheels:
            spec.friction_slip = friction

    @staticmethod
    def _check_index(wheel_index: int) -> None:
        if wheel_index not in ALL_WHEELS:
            raise IndexError(f"Wheel index {wheel_index} out of range 0..{len(ALL_WHEELS) - 1}")

    # -- queries ------------------------------------------------------

    @property
    def friction_slip(self) -> float:
        """Currently applied friction (uniform across wheels)."""
        return self._require().wheels[0].friction_slip

    @property
    def forward_speed(self) -> float:
        """Chassis velocity projected on its forward axis (m/s)."""
        return self.chassis.get_forward_speed()

    def steering_angle(self, wheel_index: int) -> float:
        self._check_index(wheel_index)
        return self._require().states[wheel_index].steering

    def engine_force(self, wheel_index: int) -> float:
        self._check_index(wheel_index)
        return self._require().states[wheel_index].engine_force

    def brake_force(self, wheel_index: int) -> float:
        self._check_index(wheel_index)
        return self._require().states[wheel_index].brake

    def chassis_transform(self) -> Transform:
        body = self.chassis
        return Transform(body.position.copy(), body.orientation.copy())

    def update_wheel_transforms(self) -> None:
        """Refresh wheel world transforms; call once after every world step."""
        self._require().update_wheel_transforms()

    def wheel_transform(self, wheel_index: int) -> Transform:
        return self._require().get_wheel_transform(wheel_index)

    # -- reset --------------------------------------------------------

    def reset(self) -> None:
        """Restore the initial pose and zero every velocity and wheel command."""
        vehicle = self._require()
        cfg = self.config
        vehicle.chassis.reset_to(cfg.initial_position, Quaternion.from_yaw(cfg.initial_yaw))

        for spec, state in zip(vehicle.wheels, vehicle.states):
            state.steering = 0.0
            state.engine_force = 0.0
            state.brake = 0.0
            state.in_contact = False
            state.suspension_force = 0.0
            state.suspension_length = spec.suspension_rest_length
            state.delta_rotation = 0.0

        vehicle.invalidate_transforms()
        logger.info("Vehicle reset to %s", cfg.initial_position)
