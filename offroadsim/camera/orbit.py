"""Orbit camera whose eye is re-projected onto a distance constraint.

The orbit target follows the vehicle every tick. User orbit input (yaw,
pitch, zoom) moves the eye freely, then the configured CameraConstraint
pulls it back onto either a fixed radius around the target or a fixed
height plus fixed horizontal distance. The constraint is chosen at
construction; the two policies are never mixed.
"""

from __future__ import annotations
import math
from abc import ABC, abstractmethod
from typing import Optional

from offroadsim.camera.base import ChaseCamera, smoothing_factor
from offroadsim.core.vector import Transform, Vector3, clamp


class CameraConstraint(ABC):
    """Re-projects a free eye position relative to the orbit target."""

    @property
    @abstractmethod
    def nominal_distance(self) -> float:
        """Eye-to-target distance at zoom 1.0."""

    @abstractmethod
    def apply(self, eye: Vector3, target: Vector3, zoom: float = 1.0) -> Vector3:
        """Return the constrained eye position."""

    @staticmethod
    def _horizontal_direction(eye: Vector3, target: Vector3) -> Vector3:
        offset = Vector3(eye.x - target.x, 0.0, eye.z - target.z)
        if offset.magnitude_squared() < 1e-12:
            return Vector3(0.0, 0.0, -1.0)
        return offset.normalized()


class FixedRadiusConstraint(CameraConstraint):
    """Eye stays at a fixed total distance from the target."""

    def __init__(self, radius: float = 12.0):
        if radius <= 0:
            raise ValueError(f"radius must be positive, got {radius}")
        self.radius = radius

    @property
    def nominal_distance(self) -> float:
        return self.radius

    def apply(self, eye: Vector3, target: Vector3, zoom: float = 1.0) -> Vector3:
        offset = eye - target
        if offset.magnitude_squared() < 1e-12:
            offset = self._horizontal_direction(eye, target)
        return target + offset.normalized() * (self.radius * zoom)


class FixedHeightDistanceConstraint(CameraConstraint):
    """Eye stays a fixed height above and horizontal distance from the target."""

    def __init__(self, height: float = 5.0, horizontal_distance: float = 10.0):
        if horizontal_distance <= 0:
            raise ValueError(f"horizontal_distance must be positive, got {horizontal_distance}")
        self.height = height
        self.horizontal_distance = horizontal_distance

    @property
    def nominal_distance(self) -> float:
        return math.hypot(self.height, self.horizontal_distance)

    def apply(self, eye: Vector3, target: Vector3, zoom: float = 1.0) -> Vector3:
        direction = self._horizontal_direction(eye, target)
        constrained = target + direction * (self.horizontal_distance * zoom)
        constrained.y = target.y + self.height * zoom
        return constrained


class OrbitCamera(ChaseCamera):
    """User-orbitable camera locked to the vehicle by a constraint."""

    def __init__(self, initial: Transform, constraint: CameraConstraint,
                 look_at_offset: Optional[Vector3] = None, damping_factor: float = 0.05,
                 target_smoothness: float = 0.2, min_distance: float = 5.0,
                 max_distance: float = 80.0):
        """Initialize orbit camera behind the vehicle's initial transform.

        Args:
            initial: Vehicle transform at construction
            constraint: Distance policy applied after every orbit update
            look_at_offset: Orbit target offset from the vehicle origin
            damping_factor: Fraction of orbit velocity lost per reference frame
            target_smoothness: Smoothing of the orbit target toward the vehicle
            min_distance: Closest allowed zoom distance (m)
            max_distance: Farthest allowed zoom distance (m)
        """
        if not 0.0 < damping_factor <= 1.0:
            raise ValueError(f"damping_factor must be in (0, 1], got {damping_factor}")
        if not 0.0 < min_distance <= max_distance:
            raise ValueError("require 0 < min_distance <= max_distance")

        self.constraint = constraint
        self.look_at_offset = look_at_offset or Vector3(0.0, 1.0, 0.0)
        self.damping_factor = damping_factor
        self.target_smoothness = target_smoothness
        self.min_distance = min_distance
        self.max_distance = max_distance

        self._yaw_velocity = 0.0
        self._pitch_velocity = 0.0
        self._zoom = self._clamp_zoom(1.0)

        target = initial.position + self.look_at_offset
        behind = target - initial.forward() * constraint.nominal_distance
        super().__init__(constraint.apply(behind, target, self._zoom), target)

    def _clamp_zoom(self, zoom: float) -> float:
        nominal = self.constraint.nominal_distance
        return clamp(zoom, self.min_distance / nominal, self.max_distance / nominal)

    @property
    def zoom(self) -> float:
        return self._zoom

    def rotate(self, delta_yaw: float, delta_pitch: float) -> None:
        """Queue orbit motion (radians), e.g. from a mouse drag."""
        self._yaw_velocity += delta_yaw
        self._pitch_velocity += delta_pitch

    def zoom_by(self, factor: float) -> None:
        """Scale the constrained distance, clamped to [min, max] distance."""
        if factor <= 0:
            raise ValueError(f"zoom factor must be positive, got {factor}")
        self._zoom = self._clamp_zoom(self._zoom * factor)

    def update(self, dt: float, target: Transform) -> None:
        alpha = smoothing_factor(self.target_smoothness, dt)
        desired_target = target.position + self.look_at_offset
        self._look_at = self._look_at.lerp(desired_target, alpha)

        # Free orbit around the (smoothed) target
        offset = self._position - self._look_at
        radius = max(offset.magnitude(), 1e-6)
        theta = math.atan2(offset.x, offset.z) + self._yaw_velocity
        phi = math.acos(clamp(offset.y / radius, -1.0, 1.0)) + self._pitch_velocity
        phi = clamp(phi, 0.05, math.pi - 0.05)
        free_offset = Vector3(
            radius * math.sin(phi) * math.sin(theta),
            radius * math.cos(phi),
            radius * math.sin(phi) * math.cos(theta),
        )

        decay = (1.0 - self.damping_factor) ** (dt * 60.0)
        self._yaw_velocity *= decay
        self._pitch_velocity *= decay

        self._position = self.constraint.apply(self._look_at + free_offset, self._look_at, self._zoom)
