"""Rigid body dynamics for the 3D chassis simulation."""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Optional

import numpy as np

from offroadsim.core.vector import Quaternion, Vector3


def box_inertia(mass: float, half_extents: Vector3) -> Vector3:
    """Diagonal inertia of a solid box given its half extents."""
    sx, sy, sz = (2.0 * half_extents.x), (2.0 * half_extents.y), (2.0 * half_extents.z)
    return Vector3(
        mass / 12.0 * (sy * sy + sz * sz),
        mass / 12.0 * (sx * sx + sz * sz),
        mass / 12.0 * (sx * sx + sy * sy),
    )


@dataclass
class RigidBody:
    """3D rigid body with mass, diagonal inertia, pose and velocities.

    Orientation is a unit quaternion. Inertia is expressed in the body frame
    and rotated into the world frame when torque is applied.
    """

    # Physical properties
    mass: float = 150.0  # kg
    inertia: Vector3 = field(default_factory=lambda: Vector3(1.0, 1.0, 1.0))
    linear_damping: float = 0.01
    angular_damping: float = 0.01

    # State
    position: Vector3 = field(default_factory=Vector3)
    orientation: Quaternion = field(default_factory=Quaternion.identity)
    velocity: Vector3 = field(default_factory=Vector3)
    angular_velocity: Vector3 = field(default_factory=Vector3)

    # Force/torque accumulators (reset each step)
    _force: Vector3 = field(default_factory=Vector3)
    _torque: Vector3 = field(default_factory=Vector3)

    def __post_init__(self):
        if self.mass <= 0:
            raise ValueError(f"mass must be positive, got {self.mass}")

    def apply_force(self, force: Vector3, world_point: Optional[Vector3] = None) -> None:
        """Apply force at a world point (or center of mass if None).

        Args:
            force: Force vector in world coordinates (Newtons)
            world_point: Point of application in world coordinates.
                        If None, force is applied at center of mass (no torque).
        """
        self._force += force

        if world_point is not None:
            r = world_point - self.position
            self._torque += r.cross(force)

    def apply_torque(self, torque: Vector3) -> None:
        """Apply a world-frame torque (Newton-meters)."""
        self._torque += torque

    def local_to_world(self, local_point: Vector3) -> Vector3:
        """Transform a point from local (body) to world coordinates."""
        return self.position + self.orientation.rotate(local_point)

    def world_to_local(self, world_point: Vector3) -> Vector3:
        """Transform a point from world to local (body) coordinates."""
        return self.orientation.conjugate().rotate(world_point - self.position)

    def local_to_world_direction(self, local_dir: Vector3) -> Vector3:
        """Transform a direction from local to world coordinates (no translation)."""
        return self.orientation.rotate(local_dir)

    def world_to_local_direction(self, world_dir: Vector3) -> Vector3:
        """Transform a direction from world to local coordinates."""
        return self.orientation.conjugate().rotate(world_dir)

    def get_velocity_at_point(self, world_point: Vector3) -> Vector3:
        """Velocity of a world point attached to the body: v + omega x r."""
        r = world_point - self.position
        return self.velocity + self.angular_velocity.cross(r)

    def get_forward_vector(self) -> Vector3:
        """Unit vector pointing forward (local +Z in world)."""
        return self.local_to_world_direction(Vector3(0.0, 0.0, 1.0))

    def get_up_vector(self) -> Vector3:
        """Unit vector pointing up (local +Y in world)."""
        return self.local_to_world_direction(Vector3(0.0, 1.0, 0.0))

    def get_speed(self) -> float:
        """Get speed (magnitude of velocity)."""
        return self.velocity.magnitude()

    def get_forward_speed(self) -> float:
        """Velocity projected on the forward axis (negative when reversing)."""
        return self.velocity.dot(self.get_forward_vector())

    def get_accumulated_force(self) -> Vector3:
        """Get total accumulated force."""
        return self._force.copy()

    def get_accumulated_torque(self) -> Vector3:
        """Get total accumulated torque."""
        return self._torque.copy()

    def clear_forces(self) -> None:
        """Reset force and torque accumulators."""
        self._force = Vector3(0.0, 0.0, 0.0)
        self._torque = Vector3(0.0, 0.0, 0.0)

    def inverse_inertia_world(self) -> np.ndarray:
        """World-frame inverse inertia tensor R * I^-1 * R^T."""
        rot = self.orientation.to_matrix()
        inv_local = np.diag([1.0 / self.inertia.x, 1.0 / self.inertia.y, 1.0 / self.inertia.z])
        return rot @ inv_local @ rot.T

    def integrate(self, dt: float) -> None:
        """Integrate state using semi-implicit Euler.

        Updates velocity first, then position with new velocity.
        Damping follows v *= (1 - damping) ** dt.
        """
        # Linear
        self.velocity += self._force * (dt / self.mass)
        self.velocity *= (1.0 - self.linear_damping) ** dt
        self.position += self.velocity * dt

        # Angular
        angular_accel = self.inverse_inertia_world() @ self._torque.to_array()
        self.angular_velocity += Vector3.from_array(angular_accel) * dt
        self.angular_velocity *= (1.0 - self.angular_damping) ** dt
        self.orientation = self.orientation.integrate(self.angular_velocity, dt)

        self.clear_forces()

    def reset_to(self, position: Vector3, orientation: Quaternion) -> None:
        """Teleport to a pose with zero linear and angular velocity."""
        self.position = position.copy()
        self.orientation = orientation.normalized()
        self.velocity = Vector3()
        self.angular_velocity = Vector3()
        self.clear_forces()
