"""Vehicle tuning shared by the controller, the vehicle model and the terrain.

Every constant two components need to agree on lives here, so the
controller and friction zones are handed the same values at construction.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum

from offroadsim.core.vector import Vector3


class SteerConflict(Enum):
    """What happens when steer-left and steer-right are held together."""
    RIGHT_WINS = "right_wins"
    LEFT_WINS = "left_wins"
    CANCEL = "cancel"


@dataclass(frozen=True)
class SuspensionTuning:
    """Raycast suspension parameters shared by all four wheels."""
    stiffness: float = 30.0          # per unit chassis mass
    rest_length: float = 0.3         # m
    damping_compression: float = 4.4
    damping_relaxation: float = 2.3
    max_travel: float = 0.3          # m
    max_force: float = 100000.0      # N
    roll_influence: float = 0.01


@dataclass(frozen=True)
class VehicleTuningConfig:
    """Complete vehicle tuning."""
    # Steering
    max_steer: float = 0.5               # rad
    steer_smoothing: float = 0.2         # fraction closed per reference frame
    reference_frame_rate: float = 60.0   # Hz
    steer_conflict: SteerConflict = SteerConflict.RIGHT_WINS

    # Drive and brakes
    max_engine_force: float = 250.0      # N per driven wheel
    reverse_force_ratio: float = 0.5
    max_brake_force: float = 100.0
    parking_brake_force: float = 1000.0
    braking_speed_threshold: float = 0.1  # m/s

    # Terrain friction (friction-slip coefficient)
    default_friction: float = 0.7
    mud_friction: float = 0.05

    # Chassis
    chassis_mass: float = 150.0          # kg
    chassis_half_extents: Vector3 = field(default_factory=lambda: Vector3(1.0, 0.3, 2.0))
    linear_damping: float = 0.01
    angular_damping: float = 0.01

    # Wheel layout (chassis local frame, +Z forward)
    wheel_radius: float = 0.4
    track_half_width: float = 1.1
    axle_offset: float = 1.3
    connection_height: float = 0.0
    suspension: SuspensionTuning = field(default_factory=SuspensionTuning)

    # Spawn / reset pose
    initial_position: Vector3 = field(default_factory=lambda: Vector3(0.0, 1.0, 0.0))
    initial_yaw: float = 0.0

    def __post_init__(self):
        if self.max_steer <= 0:
            raise ValueError(f"max_steer must be positive, got {self.max_steer}")
        if not 0.0 < self.steer_smoothing <= 1.0:
            raise ValueError(f"steer_smoothing must be in (0, 1], got {self.steer_smoothing}")
        if self.reference_frame_rate <= 0:
            raise ValueError("reference_frame_rate must be positive")
        if self.max_engine_force < 0 or self.max_brake_force < 0:
            raise ValueError("engine and brake forces must be non-negative")
        if not 0.0 <= self.reverse_force_ratio <= 1.0:
            raise ValueError("reverse_force_ratio must be in [0, 1]")
        if self.parking_brake_force < 10.0 * self.max_brake_force:
            raise ValueError(
                "parking_brake_force must be at least 10x max_brake_force "
                f"({self.parking_brake_force} < {10.0 * self.max_brake_force})"
            )
        if self.default_friction <= 0 or self.mud_friction <= 0:
            raise ValueError("friction coefficients must be positive")
        if self.chassis_mass <= 0 or self.wheel_radius <= 0:
            raise ValueError("chassis_mass and wheel_radius must be positive")

    @property
    def reverse_force(self) -> float:
        """Magnitude of the reverse drive force."""
        return self.max_engine_force * self.reverse_force_ratio

    @classmethod
    def offroad(cls) -> VehicleTuningConfig:
        """Default buggy on dirt."""
        return cls()

    @classmethod
    def rally(cls) -> VehicleTuningConfig:
        """Lighter, more responsive setup with quicker steering."""
        return cls(
            max_steer=0.55,
            steer_smoothing=0.3,
            max_engine_force=320.0,
            max_brake_force=120.0,
            parking_brake_force=1200.0,
            default_friction=0.9,
            mud_friction=0.08,
            chassis_mass=130.0,
            suspension=SuspensionTuning(stiffness=40.0, damping_compression=5.0,
                                        damping_relaxation=2.8),
        )

    @classmethod
    def heavy(cls) -> VehicleTuningConfig:
        """Slow truck with soft suspension."""
        return cls(
            max_steer=0.4,
            steer_smoothing=0.1,
            max_engine_force=600.0,
            max_brake_force=250.0,
            parking_brake_force=3000.0,
            chassis_mass=400.0,
            chassis_half_extents=Vector3(1.1, 0.45, 2.5),
            wheel_radius=0.5,
            track_half_width=1.2,
            axle_offset=1.6,
            suspension=SuspensionTuning(stiffness=22.0, rest_length=0.4,
                                        damping_compression=3.5, damping_relaxation=2.0,
                                        max_travel=0.4),
        )
