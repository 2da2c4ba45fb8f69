"""Common camera interface and view math."""

from __future__ import annotations
import math
from abc import ABC, abstractmethod

import numpy as np

from offroadsim.core.vector import Transform, Vector3


def smoothing_factor(smoothness: float, dt: float, reference_rate: float = 60.0) -> float:
    """Frame-rate independent lerp factor: 1 - exp(-smoothness * rate * dt)."""
    return 1.0 - math.exp(-smoothness * reference_rate * dt)


def look_at_matrix(eye: Vector3, target: Vector3, up: Vector3 = None) -> np.ndarray:
    """Right-handed 4x4 view matrix looking from eye toward target."""
    up = up or Vector3.up()
    f = (target - eye).normalized()
    if f.magnitude_squared() < 1e-12:
        f = Vector3(0.0, 0.0, -1.0)
    s = f.cross(up).normalized()
    if s.magnitude_squared() < 1e-12:
        # Looking straight up or down
        s = f.cross(Vector3(0.0, 0.0, 1.0)).normalized()
    u = s.cross(f)

    view = np.identity(4)
    view[0, :3] = s.to_array()
    view[1, :3] = u.to_array()
    view[2, :3] = -f.to_array()
    view[0, 3] = -s.dot(eye)
    view[1, 3] = -u.dot(eye)
    view[2, 3] = f.dot(eye)
    return view


class ChaseCamera(ABC):
    """Camera re-derived every tick from the tracked vehicle transform.

    Implementations keep a smoothed eye position and look-at point; the
    view always points at the smoothed look-at, never at the raw vehicle
    position.
    """

    def __init__(self, position: Vector3, look_at: Vector3):
        self._position = position.copy()
        self._look_at = look_at.copy()

    @abstractmethod
    def update(self, dt: float, target: Transform) -> None:
        """Advance the camera toward the vehicle's current transform."""

    @property
    def position(self) -> Vector3:
        return self._position.copy()

    @property
    def look_at(self) -> Vector3:
        return self._look_at.copy()

    def view_matrix(self) -> np.ndarray:
        return look_at_matrix(self._position, self._look_at)

    def forward(self) -> Vector3:
        """Unit viewing direction."""
        return (self._look_at - self._position).normalized()
