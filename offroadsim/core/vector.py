"""Vector and quaternion math for the 3D vehicle simulation.

World convention is right-handed and Y-up: the ground plane is X/Z.
"""

from __future__ import annotations
import math
from dataclasses import dataclass

import numpy as np


@dataclass
class Vector3:
    """3D vector with common operations for physics simulation."""
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def from_array(cls, arr: np.ndarray) -> Vector3:
        """Create Vector3 from numpy array."""
        return cls(float(arr[0]), float(arr[1]), float(arr[2]))

    @classmethod
    def up(cls) -> Vector3:
        """World up (+Y)."""
        return cls(0.0, 1.0, 0.0)

    def to_array(self) -> np.ndarray:
        """Convert to numpy array."""
        return np.array([self.x, self.y, self.z])

    def magnitude(self) -> float:
        """Return the length of the vector."""
        return math.sqrt(self.x * self.x + self.y * self.y + self.z * self.z)

    def magnitude_squared(self) -> float:
        """Return the squared length (faster, no sqrt)."""
        return self.x * self.x + self.y * self.y + self.z * self.z

    def magnitude_xz(self) -> float:
        """Return length in the ground (XZ) plane only."""
        return math.sqrt(self.x * self.x + self.z * self.z)

    def normalized(self) -> Vector3:
        """Return unit vector in same direction."""
        mag = self.magnitude()
        if mag < 1e-10:
            return Vector3(0.0, 0.0, 0.0)
        return Vector3(self.x / mag, self.y / mag, self.z / mag)

    def dot(self, other: Vector3) -> float:
        """Dot product with another vector."""
        return self.x * other.x + self.y * other.y + self.z * other.z

    def cross(self, other: Vector3) -> Vector3:
        """Cross product with another vector."""
        return Vector3(
            self.y * other.z - self.z * other.y,
            self.z * other.x - self.x * other.z,
            self.x * other.y - self.y * other.x
        )

    def project_onto(self, other: Vector3) -> Vector3:
        """Project this vector onto another vector."""
        other_mag_sq = other.magnitude_squared()
        if other_mag_sq < 1e-10:
            return Vector3(0.0, 0.0, 0.0)
        scalar = self.dot(other) / other_mag_sq
        return other * scalar

    def lerp(self, other: Vector3, t: float) -> Vector3:
        """Linear interpolation between this and other vector."""
        return Vector3(
            self.x + (other.x - self.x) * t,
            self.y + (other.y - self.y) * t,
            self.z + (other.z - self.z) * t
        )

    def distance_to(self, other: Vector3) -> float:
        return (self - other).magnitude()

    def copy(self) -> Vector3:
        """Return a copy of this vector."""
        return Vector3(self.x, self.y, self.z)

    # Operator overloads
    def __add__(self, other: Vector3) -> Vector3:
        return Vector3(self.x + other.x, self.y + other.y, self.z + other.z)

    def __sub__(self, other: Vector3) -> Vector3:
        return Vector3(self.x - other.x, self.y - other.y, self.z - other.z)

    def __mul__(self, scalar: float) -> Vector3:
        return Vector3(self.x * scalar, self.y * scalar, self.z * scalar)

    def __rmul__(self, scalar: float) -> Vector3:
        return self.__mul__(scalar)

    def __truediv__(self, scalar: float) -> Vector3:
        return Vector3(self.x / scalar, self.y / scalar, self.z / scalar)

    def __neg__(self) -> Vector3:
        return Vector3(-self.x, -self.y, -self.z)

    def __iadd__(self, other: Vector3) -> Vector3:
        self.x += other.x
        self.y += other.y
        self.z += other.z
        return self

    def __isub__(self, other: Vector3) -> Vector3:
        self.x -= other.x
        self.y -= other.y
        self.z -= other.z
        return self

    def __imul__(self, scalar: float) -> Vector3:
        self.x *= scalar
        self.y *= scalar
        self.z *= scalar
        return self

    def __repr__(self) -> str:
        return f"Vector3({self.x:.4f}, {self.y:.4f}, {self.z:.4f})"


@dataclass
class Quaternion:
    """Unit quaternion (w, x, y, z) for 3D orientation."""
    w: float = 1.0
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def identity(cls) -> Quaternion:
        return cls(1.0, 0.0, 0.0, 0.0)

    @classmethod
    def from_axis_angle(cls, axis: Vector3, angle: float) -> Quaternion:
        """Create rotation of `angle` radians around `axis`."""
        a = axis.normalized()
        half = angle * 0.5
        s = math.sin(half)
        return cls(math.cos(half), a.x * s, a.y * s, a.z * s)

    @classmethod
    def from_yaw(cls, yaw: float) -> Quaternion:
        """Rotation around world up. Yaw 0 faces +Z."""
        return cls.from_axis_angle(Vector3.up(), yaw)

    def __mul__(self, other: Quaternion) -> Quaternion:
        """Hamilton product (self applied after other)."""
        return Quaternion(
            self.w * other.w - self.x * other.x - self.y * other.y - self.z * other.z,
            self.w * other.x + self.x * other.w + self.y * other.z - self.z * other.y,
            self.w * other.y - self.x * other.z + self.y * other.w + self.z * other.x,
            self.w * other.z + self.x * other.y - self.y * other.x + self.z * other.w,
        )

    def conjugate(self) -> Quaternion:
        return Quaternion(self.w, -self.x, -self.y, -self.z)

    def normalized(self) -> Quaternion:
        mag = math.sqrt(self.w * self.w + self.x * self.x + self.y * self.y + self.z * self.z)
        if mag < 1e-12:
            return Quaternion.identity()
        return Quaternion(self.w / mag, self.x / mag, self.y / mag, self.z / mag)

    def rotate(self, v: Vector3) -> Vector3:
        """Rotate a vector by this quaternion."""
        # v' = v + 2w(q x v) + 2 q x (q x v)
        q = Vector3(self.x, self.y, self.z)
        t = q.cross(v) * 2.0
        return v + t * self.w + q.cross(t)

    def to_matrix(self) -> np.ndarray:
        """Return the 3x3 rotation matrix."""
        w, x, y, z = self.w, self.x, self.y, self.z
        return np.array([
            [1 - 2 * (y * y + z * z), 2 * (x * y - z * w), 2 * (x * z + y * w)],
            [2 * (x * y + z * w), 1 - 2 * (x * x + z * z), 2 * (y * z - x * w)],
            [2 * (x * z - y * w), 2 * (y * z + x * w), 1 - 2 * (x * x + y * y)],
        ])

    def integrate(self, angular_velocity: Vector3, dt: float) -> Quaternion:
        """Advance orientation by a world-frame angular velocity over dt."""
        omega = Quaternion(0.0, angular_velocity.x, angular_velocity.y, angular_velocity.z)
        dq = omega * self
        return Quaternion(
            self.w + 0.5 * dt * dq.w,
            self.x + 0.5 * dt * dq.x,
            self.y + 0.5 * dt * dq.y,
            self.z + 0.5 * dt * dq.z,
        ).normalized()

    def yaw(self) -> float:
        """Heading angle around world up (0 = facing +Z)."""
        forward = self.rotate(Vector3(0.0, 0.0, 1.0))
        return math.atan2(forward.x, forward.z)

    def copy(self) -> Quaternion:
        return Quaternion(self.w, self.x, self.y, self.z)

    def __repr__(self) -> str:
        return f"Quaternion({self.w:.4f}, {self.x:.4f}, {self.y:.4f}, {self.z:.4f})"


def normalize_angle(angle: float) -> float:
    """Normalize angle to [-pi, pi] range."""
    while angle > math.pi:
        angle -= 2 * math.pi
    while angle < -math.pi:
        angle += 2 * math.pi
    return angle


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp value to range [min_val, max_val]."""
    return max(min_val, min(max_val, value))


def lerp(a: float, b: float, t: float) -> float:
    """Linear interpolation between a and b."""
    return a + (b - a) * t


@dataclass
class Transform:
    """World pose: position plus orientation."""
    position: Vector3
    orientation: Quaternion

    def forward(self) -> Vector3:
        """Local +Z in world coordinates."""
        return self.orientation.rotate(Vector3(0.0, 0.0, 1.0))

    def copy(self) -> Transform:
        return Transform(self.position.copy(), self.orientation.copy())
