"""Wheel definitions for the raycast vehicle.

A WheelSpec is fixed at vehicle construction except for friction_slip,
which the terrain friction zones rewrite. WheelState is the transient
per-step data owned by the physics update.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import List

from offroadsim.config.tuning import VehicleTuningConfig
from offroadsim.core.vector import Quaternion, Transform, Vector3


class WheelPosition(Enum):
    """Wheel slots; the value is the wheel index."""
    FRONT_LEFT = 0
    FRONT_RIGHT = 1
    REAR_LEFT = 2
    REAR_RIGHT = 3

    @property
    def is_front(self) -> bool:
        return self in (WheelPosition.FRONT_LEFT, WheelPosition.FRONT_RIGHT)


FRONT_WHEELS = (WheelPosition.FRONT_LEFT.value, WheelPosition.FRONT_RIGHT.value)
REAR_WHEELS = (WheelPosition.REAR_LEFT.value, WheelPosition.REAR_RIGHT.value)
ALL_WHEELS = FRONT_WHEELS + REAR_WHEELS


@dataclass
class WheelSpec:
    """Static wheel and suspension parameters."""
    radius: float
    suspension_stiffness: float
    suspension_rest_length: float
    damping_compression: float
    damping_relaxation: float
    max_suspension_travel: float
    max_suspension_force: float
    friction_slip: float
    roll_influence: float
    connection_point: Vector3       # chassis local
    direction: Vector3              # chassis local suspension direction (down)
    axle: Vector3                   # chassis local axle
    is_front: bool


@dataclass
class WheelState:
    """Per-step wheel state written by the physics update."""
    # Commands
    steering: float = 0.0
    engine_force: float = 0.0
    brake: float = 0.0

    # Suspension and contact
    in_contact: bool = False
    suspension_length: float = 0.0
    suspension_force: float = 0.0
    contact_point: Vector3 = field(default_factory=Vector3)
    contact_normal: Vector3 = field(default_factory=Vector3.up)

    # Spin
    rotation: float = 0.0
    delta_rotation: float = 0.0

    # Last computed world transform
    transform: Transform = field(
        default_factory=lambda: Transform(Vector3(), Quaternion.identity())
    )

    def compression(self, spec: WheelSpec) -> float:
        """How far the suspension is pushed in from rest."""
        if not self.in_contact:
            return 0.0
        return spec.suspension_rest_length - self.suspension_length


def build_wheel_specs(config: VehicleTuningConfig) -> List[WheelSpec]:
    """Four wheels laid out from the tuning, in WheelPosition order.

    Chassis local frame: +Z forward, +Y up, +X to the driver's left.
    """
    sus = config.suspension
    specs = []
    for wheel in WheelPosition:
        x = config.track_half_width if wheel in (
            WheelPosition.FRONT_LEFT, WheelPosition.REAR_LEFT) else -config.track_half_width
        z = config.axle_offset if wheel.is_front else -config.axle_offset
        specs.append(WheelSpec(
            radius=config.wheel_radius,
            suspension_stiffness=sus.stiffness,
            suspension_rest_length=sus.rest_length,
            damping_compression=sus.damping_compression,
            damping_relaxation=sus.damping_relaxation,
            max_suspension_travel=sus.max_travel,
            max_suspension_force=sus.max_force,
            friction_slip=config.default_friction,
            roll_influence=sus.roll_influence,
            connection_point=Vector3(x, config.connection_height, z),
            direction=Vector3(0.0, -1.0, 0.0),
            axle=Vector3(1.0, 0.0, 0.0),
            is_front=wheel.is_front,
        ))
    return specs
